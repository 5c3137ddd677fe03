"""
Session history: rebuild the chat message sequence of a tutoring session from persisted turns.

There is no in-memory session; every call re-reads the student_prompts table.
"""

from typing import Iterable, Optional

from sqlalchemy.orm import Session

from hero_api.models.models import StudentPrompt
from hero_api.schemas.llm_schemas import ChatMessage
from hero_api.utils.common import is_blank


def load_session_turns(
    db: Session,
    student_id: int,
    homework_item_id: int,
    session_id: str,
    exclude_turn_id: Optional[int] = None,
) -> list[StudentPrompt]:
    """Turns of one (student, homework item, session), oldest first; id breaks created_at ties."""
    query = db.query(StudentPrompt).filter(
        StudentPrompt.student_id == student_id,
        StudentPrompt.homework_item_id == homework_item_id,
        StudentPrompt.session_id == session_id,
    )
    if exclude_turn_id is not None:
        query = query.filter(StudentPrompt.id != exclude_turn_id)
    return query.order_by(StudentPrompt.created_at.asc(), StudentPrompt.id.asc()).all()


def turns_to_messages(turns: Iterable[StudentPrompt]) -> list[ChatMessage]:
    """
    Each turn yields its user prompt, followed by the assistant reply when one was recorded.
    Turns that failed before any response contribute only the user half.
    """
    messages: list[ChatMessage] = []
    for turn in turns:
        messages.append(ChatMessage(role="user", content=turn.prompt_text))
        if not is_blank(turn.response_text):
            messages.append(ChatMessage(role="assistant", content=turn.response_text))
    return messages


def load_session_history(
    db: Session,
    student_id: int,
    homework_item_id: int,
    session_id: str,
    exclude_turn_id: Optional[int] = None,
) -> list[ChatMessage]:
    return turns_to_messages(
        load_session_turns(db, student_id, homework_item_id, session_id, exclude_turn_id=exclude_turn_id)
    )
