"""
Migration script to add the parameters table (named configuration values such
as the StudentBasePrompt template).
"""

import os
import sqlite3
from typing import Optional

BASE_PROMPT_NAME = "StudentBasePrompt"


def _default_db_path() -> str:
    return os.getenv("DATABASE_URL", "sqlite:///./homework-hero.db").replace("sqlite:///", "")


def run_migration(db_path: Optional[str] = None, seed_prompt: Optional[str] = None) -> bool:
    """
    Create the parameters table and its unique name index.
    If seed_prompt is given and no base prompt exists yet, insert it.
    Returns True when the table was created by this run.
    """
    conn = sqlite3.connect(db_path or _default_db_path())
    created = False
    try:
        cursor = conn.cursor()
        cursor.execute("SELECT name FROM sqlite_master WHERE type='table' AND name='parameters'")
        if cursor.fetchone():
            print("parameters table already exists. Skipping create.")
        else:
            print("Creating parameters table...")
            cursor.execute("""
                CREATE TABLE parameters (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name VARCHAR(100) NOT NULL,
                    value TEXT NOT NULL DEFAULT ''
                )
            """)
            cursor.execute("CREATE UNIQUE INDEX ix_parameters_name ON parameters(name)")
            created = True

        if seed_prompt:
            cursor.execute(
                "INSERT OR IGNORE INTO parameters (name, value) VALUES (?, ?)",
                (BASE_PROMPT_NAME, seed_prompt),
            )

        conn.commit()
        print("✓ Migration completed successfully!")
        return created
    except sqlite3.Error as e:
        print(f"✗ Migration failed: {e}")
        conn.rollback()
        raise
    finally:
        conn.close()


if __name__ == "__main__":
    run_migration(seed_prompt=os.getenv("STUDENT_BASE_PROMPT"))
