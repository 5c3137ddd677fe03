"""
API data models. Single import surface for DB entities.

DB entities (hero_api.models.models):
- Student, Condition, StudentCondition, HomeworkItem, StudentPrompt, Parameter

Read-only views (hero_api.models.profile):
- StudentProfile, ConditionNote
"""

from hero_api.models.models import (
    Student,
    Condition,
    StudentCondition,
    HomeworkItem,
    StudentPrompt,
    Parameter,
)
from hero_api.models.profile import StudentProfile, ConditionNote, profile_for

__all__ = [
    "Student",
    "Condition",
    "StudentCondition",
    "HomeworkItem",
    "StudentPrompt",
    "Parameter",
    "StudentProfile",
    "ConditionNote",
    "profile_for",
]
