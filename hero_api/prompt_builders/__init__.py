"""
App prompt builders: build the tutoring system prompt from the student profile
and the externally configured base prompt template.
"""

from hero_api.prompt_builders.student import (
    ConfigurationMissingError,
    StudentPromptBuilder,
    build_student_conditions,
)

__all__ = [
    "ConfigurationMissingError",
    "StudentPromptBuilder",
    "build_student_conditions",
]
