"""
LLM communication routes: submit a tutoring turn and read a session transcript.
"""

from typing import Iterator

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session as DBSession

from hero_api.config import Settings, get_db, get_settings
from hero_api.schemas.llm_schemas import LlmApiResponse, LlmChatRequest, TurnListResponse, TurnResponse
from hero_api.services.conversation_service import ConversationService
from hero_api.utils.common import iso_format
from infra.llm.gateway import LLMGatewayClient

llm_routes = APIRouter()


def get_llm_gateway(settings: Settings = Depends(get_settings)) -> Iterator[LLMGatewayClient]:
    with LLMGatewayClient(timeout=settings.llm_api_timeout_seconds) as gateway:
        yield gateway


# Sync handlers: FastAPI runs them in its threadpool, so the blocking gateway
# call never stalls the event loop.
@llm_routes.post("/chat", response_model=LlmApiResponse, response_model_by_alias=True)
def send_ai_request(
    req: LlmChatRequest,
    db: DBSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    gateway: LLMGatewayClient = Depends(get_llm_gateway),
) -> LlmApiResponse:
    """
    Persist the student's turn, call the LLM gateway with the rebuilt session
    history, and record the reply (or the failure reason) on the turn.
    """
    result = ConversationService(db, settings, gateway).submit_turn(req)
    if not result.ok:
        raise HTTPException(status_code=result.status_code, detail=result.message)
    return result.response


@llm_routes.get("/sessions/{session_id}/turns", response_model=TurnListResponse, response_model_by_alias=True)
def list_session_turns(
    session_id: str,
    student_id: int = Query(...),
    homework_item_id: int = Query(...),
    db: DBSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> TurnListResponse:
    """Session transcript, oldest turn first."""
    service = ConversationService(db, settings, gateway=None)
    turns = service.list_session_turns(student_id, homework_item_id, session_id)
    if turns is None:
        raise HTTPException(status_code=404, detail="Student or homework item not found.")
    return TurnListResponse(
        turns=[
            TurnResponse(
                id=t.id,
                session_id=t.session_id,
                prompt_text=t.prompt_text,
                response_text=t.response_text,
                created_at=iso_format(t.created_at),
            )
            for t in turns
        ]
    )
