"""
Tutoring conversation service: turns one student chat message into an LLM gateway call.

Flow per turn: validate student/homework -> persist the turn -> guard configuration ->
build system prompt -> rebuild session history -> call gateway -> record the outcome
on the same turn. Every path after persistence writes response_text exactly once and
returns a TurnResult; nothing past that point is raised to the caller.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import httpx
from sqlalchemy.orm import Session as DBSession, selectinload

from hero_api.config import Settings
from hero_api.models.models import HomeworkItem, Student, StudentCondition, StudentPrompt
from hero_api.models.profile import profile_for
from hero_api.prompt_builders.student import (
    ConfigurationMissingError,
    StudentPromptBuilder,
    build_student_conditions,
)
from hero_api.schemas.llm_schemas import ChatMessage, LlmApiResponse, LlmChatRequest
from hero_api.services.session_history import load_session_history, load_session_turns
from hero_api.utils.common import is_blank, trim_to_length
from hero_api.utils.config_store import ConfigStore, ParameterStore
from hero_api.utils.logger import configure_logging, log_request
from infra.llm.gateway import LLMCallFailed, LLMGatewayClient, LLMResponseInvalid

logger = configure_logging()

NOT_FOUND_MESSAGE = "Student or homework item not found."
URL_NOT_CONFIGURED_MESSAGE = "LLM API URL is not configured."
KEY_NOT_CONFIGURED_MESSAGE = "LLM API key is not configured."
PAYLOAD_MISSING_MESSAGE = "LLM request payload is missing."
CALL_FAILED_MESSAGE = "LLM API call failed."
INVALID_RESPONSE_MESSAGE = "Invalid response from LLM API."
INTERNAL_ERROR_MESSAGE = "Unexpected error while processing the turn."
FAILED_BODY_LOG_CHARS = 500


class TurnOutcome(str, Enum):
    COMPLETED = "completed"
    NOT_FOUND = "not_found"
    CONFIGURATION_MISSING = "configuration_missing"
    BAD_REQUEST = "bad_request"
    UPSTREAM_CALL_FAILED = "upstream_call_failed"
    UPSTREAM_RESPONSE_INVALID = "upstream_response_invalid"
    INTERNAL_ERROR = "internal_error"


@dataclass
class TurnResult:
    status_code: int
    outcome: TurnOutcome
    message: Optional[str] = None
    response: Optional[LlmApiResponse] = None
    turn_id: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.outcome == TurnOutcome.COMPLETED


class ResponseAlreadyRecordedError(RuntimeError):
    """A turn's response_text is written once; a second write is a bug."""


class ConversationService:
    """Orchestrates one tutoring turn against the LLM gateway."""

    def __init__(
        self,
        db: DBSession,
        settings: Settings,
        gateway: LLMGatewayClient,
        config_store: Optional[ConfigStore] = None,
    ):
        self.db = db
        self.settings = settings
        self.gateway = gateway
        self.prompt_builder = StudentPromptBuilder(
            config_store or ParameterStore(db),
            template_name=settings.student_base_prompt_name,
        )

    # ---- lookups ----

    def _load_student(self, student_id: int) -> Optional[Student]:
        return (
            self.db.query(Student)
            .options(selectinload(Student.conditions).selectinload(StudentCondition.condition))
            .filter(Student.id == student_id)
            .first()
        )

    def _homework_exists(self, homework_item_id: int) -> bool:
        return self.db.query(HomeworkItem.id).filter(HomeworkItem.id == homework_item_id).first() is not None

    def _session_key(self, session_id: Optional[str]) -> str:
        return trim_to_length(session_id, self.settings.session_id_max_length)

    # ---- persistence ----

    def _create_turn(self, req: LlmChatRequest) -> StudentPrompt:
        turn = StudentPrompt(
            student_id=req.student_id,
            homework_item_id=req.homework_item_id,
            session_id=self._session_key(req.session_id),
            prompt_text=trim_to_length(req.prompt_text, self.settings.prompt_max_length),
            response_text=None,
        )
        self.db.add(turn)
        self.db.commit()
        self.db.refresh(turn)
        return turn

    def _record_response(self, turn: StudentPrompt, text: str) -> None:
        if turn.response_text is not None:
            raise ResponseAlreadyRecordedError(f"turn {turn.id} already has a response")
        turn.response_text = trim_to_length(text, self.settings.response_max_length)
        self.db.commit()

    def _fail(self, turn: StudentPrompt, status_code: int, outcome: TurnOutcome, message: str) -> TurnResult:
        self._record_response(turn, message)
        logger.warning(
            "turn failed turn_id=%s outcome=%s status=%s message=%s",
            turn.id, outcome.value, status_code, message,
        )
        return TurnResult(status_code=status_code, outcome=outcome, message=message, turn_id=turn.id)

    # ---- orchestration ----

    def submit_turn(self, req: LlmChatRequest) -> TurnResult:
        student = self._load_student(req.student_id)
        if student is None or not self._homework_exists(req.homework_item_id):
            logger.info(
                "turn rejected student_id=%s homework_item_id=%s: not found",
                req.student_id, req.homework_item_id,
            )
            return TurnResult(status_code=404, outcome=TurnOutcome.NOT_FOUND, message=NOT_FOUND_MESSAGE)

        turn = self._create_turn(req)
        logger.info(
            "turn persisted turn_id=%s student_id=%s homework_item_id=%s session_id=%s",
            turn.id, turn.student_id, turn.homework_item_id, turn.session_id,
        )

        turn_id = turn.id
        try:
            return self._dispatch(turn, student, req)
        except Exception:
            logger.exception("turn crashed turn_id=%s", turn_id)
            return self._recover(turn)

    def _recover(self, turn: StudentPrompt) -> TurnResult:
        self.db.rollback()
        if turn.response_text is not None:
            return TurnResult(
                status_code=500, outcome=TurnOutcome.INTERNAL_ERROR,
                message=INTERNAL_ERROR_MESSAGE, turn_id=turn.id,
            )
        return self._fail(turn, 500, TurnOutcome.INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE)

    def _dispatch(self, turn: StudentPrompt, student: Student, req: LlmChatRequest) -> TurnResult:
        endpoint = self.settings.llm_api_url
        credential = self.settings.llm_api_key
        if is_blank(endpoint):
            return self._fail(turn, 500, TurnOutcome.CONFIGURATION_MISSING, URL_NOT_CONFIGURED_MESSAGE)
        if is_blank(credential):
            return self._fail(turn, 500, TurnOutcome.CONFIGURATION_MISSING, KEY_NOT_CONFIGURED_MESSAGE)
        if req.request is None:
            return self._fail(turn, 400, TurnOutcome.BAD_REQUEST, PAYLOAD_MISSING_MESSAGE)

        try:
            system_prompt = self.prompt_builder.build_student_prompt(
                student.display_name,
                build_student_conditions(profile_for(student)),
            )
        except ConfigurationMissingError as e:
            return self._fail(turn, 500, TurnOutcome.CONFIGURATION_MISSING, e.message)

        history = [ChatMessage(role="system", content=system_prompt)]
        history.extend(
            load_session_history(
                self.db,
                turn.student_id,
                turn.homework_item_id,
                turn.session_id,
                exclude_turn_id=turn.id,
            )
        )

        try:
            with log_request(logger, f"llm call turn_id={turn.id} messages={len(history) + 1}"):
                result = self.gateway.send(endpoint, credential, req.request, history, prompt=turn.prompt_text)
        except LLMCallFailed as e:
            logger.warning(
                "llm gateway error turn_id=%s status=%s body=%s",
                turn.id, e.status_code, e.body[:FAILED_BODY_LOG_CHARS],
            )
            return self._fail(turn, e.status_code, TurnOutcome.UPSTREAM_CALL_FAILED, CALL_FAILED_MESSAGE)
        except LLMResponseInvalid:
            return self._fail(turn, 502, TurnOutcome.UPSTREAM_RESPONSE_INVALID, INVALID_RESPONSE_MESSAGE)
        except httpx.TimeoutException:
            return self._fail(turn, 504, TurnOutcome.UPSTREAM_CALL_FAILED, CALL_FAILED_MESSAGE)
        except (httpx.HTTPError, httpx.InvalidURL):
            # InvalidURL is not an HTTPError; a malformed LLM_API_URL lands here
            return self._fail(turn, 502, TurnOutcome.UPSTREAM_CALL_FAILED, CALL_FAILED_MESSAGE)

        self._record_response(turn, result.assistant_response or "")
        logger.info("turn completed turn_id=%s response_chars=%s", turn.id, len(turn.response_text))
        return TurnResult(status_code=200, outcome=TurnOutcome.COMPLETED, response=result, turn_id=turn.id)

    # ---- transcript ----

    def list_session_turns(
        self, student_id: int, homework_item_id: int, session_id: Optional[str]
    ) -> Optional[list[StudentPrompt]]:
        """Chronological turns of a session, or None when the student or homework item is unknown."""
        student_exists = self.db.query(Student.id).filter(Student.id == student_id).first() is not None
        if not student_exists or not self._homework_exists(homework_item_id):
            return None
        return load_session_turns(self.db, student_id, homework_item_id, self._session_key(session_id))
