"""Student tutoring system prompt: profile digest plus the configured base prompt template."""

from __future__ import annotations

import re

from hero_api.models.profile import StudentProfile
from hero_api.utils.common import is_blank
from hero_api.utils.config_store import ConfigStore

STUDENT_NAME_TOKEN = "{{StudentName}}"
STUDENT_CONDITIONS_TOKEN = "{{StudentConditions}}"
STUDENT_BASE_PROMPT_NAME = "StudentBasePrompt"


class ConfigurationMissingError(Exception):
    """A named configuration value is absent or blank."""

    def __init__(self, message: str, name: str | None = None):
        super().__init__(message)
        self.message = message
        self.name = name


def build_student_conditions(profile: StudentProfile) -> str:
    """
    Digest of a student's profile: trimmed details first, then each condition
    as "Name" or "Name: comment", joined with "; ". Conditions without a name are skipped.
    """
    parts: list[str] = []
    if not is_blank(profile.details):
        parts.append(profile.details.strip())

    for condition in profile.conditions:
        if is_blank(condition.name):
            continue
        if is_blank(condition.comment):
            parts.append(condition.name)
        else:
            parts.append(f"{condition.name}: {condition.comment.strip()}")

    return "; ".join(parts)


def _replace_ignore_case(text: str, token: str, value: str) -> str:
    # Callable replacement keeps backslashes in value literal.
    return re.sub(re.escape(token), lambda _: value, text, flags=re.IGNORECASE)


class StudentPromptBuilder:
    """Resolves the named base prompt template and fills in the student tokens."""

    def __init__(self, config_store: ConfigStore, template_name: str = STUDENT_BASE_PROMPT_NAME):
        self.config_store = config_store
        self.template_name = template_name

    def build_student_prompt(self, student_name: str | None, student_conditions: str | None) -> str:
        base_prompt = self.config_store.get(self.template_name)
        if is_blank(base_prompt):
            raise ConfigurationMissingError("Student base prompt is not configured.", name=self.template_name)

        prompt = _replace_ignore_case(base_prompt, STUDENT_NAME_TOKEN, student_name or "")
        return _replace_ignore_case(prompt, STUDENT_CONDITIONS_TOKEN, student_conditions or "")
