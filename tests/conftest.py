"""
Pytest configuration and shared fixtures for the test suite.
Ensures proper Python path and provides common fixtures for unit and integration tests.
"""
import os
import sys
import tempfile
from pathlib import Path

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Must be set before hero_api.config is imported: it builds the engine at import time.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="homework-hero-logs-"))
os.environ.setdefault("NO_COLOR", "1")

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

LLM_URL = "http://llm-gateway.test/api/chat"
LLM_KEY = "server-secret"
BASE_PROMPT = "You are tutoring {{StudentName}}. Keep in mind: {{StudentConditions}}."


# ----- In-memory DB -----
@pytest.fixture
def in_memory_engine():
    """In-memory SQLite engine shared across threads (TestClient runs sync routes in a threadpool)."""
    return create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def session_factory(in_memory_engine):
    import hero_api.models  # noqa: F401
    from hero_api.config import Base

    Base.metadata.create_all(in_memory_engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=in_memory_engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


# ----- Settings -----
@pytest.fixture
def settings():
    from hero_api.config import Settings
    return Settings(_env_file=None, llm_api_url=LLM_URL, llm_api_key=LLM_KEY)


# ----- Seed data -----
@pytest.fixture
def student(db_session):
    from hero_api.models.models import Student
    s = Student(id=1, first_name="Ada", last_name="Lovelace", email="ada@example.com", details="")
    db_session.add(s)
    db_session.commit()
    db_session.refresh(s)
    return s


@pytest.fixture
def homework(db_session):
    from hero_api.models.models import HomeworkItem
    h = HomeworkItem(id=10, title="Fractions worksheet", subject="Maths", text_content="Add 1/2 and 1/3.")
    db_session.add(h)
    db_session.commit()
    db_session.refresh(h)
    return h


@pytest.fixture
def base_prompt(db_session):
    from hero_api.models.models import Parameter
    p = Parameter(name="StudentBasePrompt", value=BASE_PROMPT)
    db_session.add(p)
    db_session.commit()
    return p


@pytest.fixture
def add_condition(db_session):
    """Attach a named condition (with optional comment) to a student."""
    from hero_api.models.models import Condition, StudentCondition

    def _add(student, name, comment=""):
        condition = Condition(name=name, description="")
        db_session.add(condition)
        db_session.flush()
        db_session.add(StudentCondition(student_id=student.id, condition_id=condition.id, comments=comment))
        db_session.commit()
        return condition

    return _add


@pytest.fixture
def add_turn(db_session):
    """Insert a persisted turn directly, bypassing the service."""
    from hero_api.models.models import StudentPrompt
    from hero_api.utils.common import utcnow

    def _add(*, student_id=1, homework_item_id=10, session_id="s-1",
             prompt="hi", response=None, created_at=None, turn_id=None):
        turn = StudentPrompt(
            id=turn_id,
            student_id=student_id,
            homework_item_id=homework_item_id,
            session_id=session_id,
            prompt_text=prompt,
            response_text=response,
            created_at=created_at or utcnow(),
        )
        db_session.add(turn)
        db_session.commit()
        return turn

    return _add


# ----- Fake LLM gateway -----
class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler):
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def make_gateway():
    """Build an LLMGatewayClient whose HTTP traffic goes to a handler function."""
    from infra.llm.gateway import LLMGatewayClient

    def _make(handler):
        transport = RecordingTransport(handler)
        client = LLMGatewayClient(http_client=httpx.Client(transport=transport))
        return client, transport

    return _make


@pytest.fixture
def llm_reply():
    """Handler factory: gateway answers 200 with the given assistant text."""

    def _reply(text="Let's look at the denominators first."):
        return lambda request: httpx.Response(200, json={"success": True, "assistantResponse": text})

    return _reply
