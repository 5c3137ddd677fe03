"""
Named configuration lookup (prompt templates and similar runtime-editable values).
"""

from __future__ import annotations

from typing import Mapping, Optional, Protocol

from sqlalchemy.orm import Session

from hero_api.models.models import Parameter


class ConfigStore(Protocol):
    def get(self, name: str) -> Optional[str]:
        ...


class ParameterStore:
    """ConfigStore backed by the parameters table. Values are read at call time, never cached."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, name: str) -> Optional[str]:
        row = self.db.query(Parameter.value).filter(Parameter.name == name).first()
        return row[0] if row is not None else None


class StaticConfigStore:
    """In-memory ConfigStore."""

    def __init__(self, values: Optional[Mapping[str, str]] = None):
        self._values = dict(values or {})

    def get(self, name: str) -> Optional[str]:
        return self._values.get(name)
