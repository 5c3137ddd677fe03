"""Unit tests for rebuilding session history from persisted turns (in-memory DB)."""
from datetime import datetime, timedelta

import pytest

from hero_api.services.session_history import load_session_history, load_session_turns


T0 = datetime(2025, 3, 10, 15, 30, 0)


@pytest.fixture
def seeded(student, homework):
    return student, homework


@pytest.mark.unit
class TestLoadSessionTurns:
    def test_orders_by_created_at_then_id(self, db_session, seeded, add_turn):
        # t1 < t2 == t3 < t4, inserted out of order; the tie breaks on id.
        add_turn(turn_id=40, prompt="t4", created_at=T0 + timedelta(seconds=3))
        add_turn(turn_id=12, prompt="t3", created_at=T0 + timedelta(seconds=1))
        add_turn(turn_id=7, prompt="t2", created_at=T0 + timedelta(seconds=1))
        add_turn(turn_id=30, prompt="t1", created_at=T0)

        turns = load_session_turns(db_session, 1, 10, "s-1")

        assert [t.prompt_text for t in turns] == ["t1", "t2", "t3", "t4"]
        assert [t.id for t in turns] == [30, 7, 12, 40]

    def test_filters_on_student_homework_and_session(self, db_session, seeded, add_turn):
        from hero_api.models.models import HomeworkItem, Student

        db_session.add(Student(id=2, first_name="Alan", last_name="Turing", email="alan@example.com"))
        db_session.add(HomeworkItem(id=11, title="Other", subject="Maths"))
        db_session.commit()

        add_turn(prompt="mine")
        add_turn(prompt="other session", session_id="s-2")
        add_turn(prompt="other student", student_id=2)
        add_turn(prompt="other homework", homework_item_id=11)

        turns = load_session_turns(db_session, 1, 10, "s-1")
        assert [t.prompt_text for t in turns] == ["mine"]

    def test_excludes_given_turn(self, db_session, seeded, add_turn):
        first = add_turn(prompt="first", created_at=T0)
        current = add_turn(prompt="current", created_at=T0 + timedelta(seconds=5))

        turns = load_session_turns(db_session, 1, 10, "s-1", exclude_turn_id=current.id)
        assert [t.id for t in turns] == [first.id]

    def test_unknown_session_is_empty(self, db_session, seeded):
        assert load_session_turns(db_session, 1, 10, "never-used") == []


@pytest.mark.unit
class TestLoadSessionHistory:
    def test_answered_turn_gives_user_and_assistant(self, db_session, seeded, add_turn):
        add_turn(prompt="What is 1/2 + 1/3?", response="Find a common denominator.", created_at=T0)

        history = load_session_history(db_session, 1, 10, "s-1")

        assert [(m.role, m.content) for m in history] == [
            ("user", "What is 1/2 + 1/3?"),
            ("assistant", "Find a common denominator."),
        ]

    def test_unanswered_turn_gives_user_only(self, db_session, seeded, add_turn):
        add_turn(prompt="pending", response=None, created_at=T0)
        add_turn(prompt="blank", response="   ", created_at=T0 + timedelta(seconds=1))
        add_turn(prompt="answered", response="ok", created_at=T0 + timedelta(seconds=2))

        history = load_session_history(db_session, 1, 10, "s-1")

        assert [m.role for m in history] == ["user", "user", "user", "assistant"]
        assert [m.content for m in history] == ["pending", "blank", "answered", "ok"]

    def test_no_system_message_is_added(self, db_session, seeded, add_turn):
        add_turn(prompt="hello", response="hi", created_at=T0)
        history = load_session_history(db_session, 1, 10, "s-1")
        assert all(m.role != "system" for m in history)
