"""
Read-only student profile view used to ground each tutoring turn.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from hero_api.models.models import Student


@dataclass(frozen=True)
class ConditionNote:
    name: str
    comment: Optional[str] = None


@dataclass(frozen=True)
class StudentProfile:
    """Snapshot of a student: display name, free-text details and conditions in stored order."""
    student_id: int
    display_name: str
    details: str = ""
    conditions: Tuple[ConditionNote, ...] = field(default_factory=tuple)


def profile_for(student: Student) -> StudentProfile:
    """Build a profile snapshot from a loaded Student (conditions eagerly or lazily loaded)."""
    notes = tuple(
        ConditionNote(
            name=(sc.condition.name if sc.condition is not None else "") or "",
            comment=sc.comments,
        )
        for sc in student.conditions
    )
    return StudentProfile(
        student_id=int(student.id),
        display_name=student.display_name,
        details=student.details or "",
        conditions=notes,
    )
