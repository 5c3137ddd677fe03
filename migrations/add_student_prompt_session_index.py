#!/usr/bin/env python3
"""
Migration: add the session lookup index on student_prompts.

History for a turn is read by (student_id, homework_item_id, session_id)
ordered by created_at; this index serves that query.
"""

import os
import sqlite3
from typing import Optional

INDEX_NAME = "ix_student_prompts_session"


def migrate(db_path: Optional[str] = None) -> bool:
    """Create the index if missing. Returns True when it was created."""
    path = db_path or os.getenv("DATABASE_URL", "sqlite:///./homework-hero.db").replace("sqlite:///", "")
    conn = sqlite3.connect(path)
    try:
        cursor = conn.cursor()
        cursor.execute("SELECT name FROM sqlite_master WHERE type='table' AND name='student_prompts'")
        if not cursor.fetchone():
            print("student_prompts table not found. Run the app once to create the schema.")
            return False

        cursor.execute("SELECT name FROM sqlite_master WHERE type='index' AND name=?", (INDEX_NAME,))
        if cursor.fetchone():
            print(f"Index '{INDEX_NAME}' already exists. Migration not needed.")
            return False

        print(f"Creating {INDEX_NAME}...")
        cursor.execute(
            f"CREATE INDEX {INDEX_NAME} "
            "ON student_prompts(student_id, homework_item_id, session_id, created_at)"
        )
        conn.commit()
        print("✓ Migration completed successfully!")
        return True
    except sqlite3.Error as e:
        conn.rollback()
        print(f"✗ Migration failed: {e}")
        raise
    finally:
        conn.close()


if __name__ == "__main__":
    migrate()
