"""
Pydantic schemas for request/response. Single import surface.

- llm_schemas: ChatMessage, LlmApiRequest, LlmApiResponse, LlmChatRequest,
  TurnResponse, TurnListResponse
"""

from hero_api.schemas.llm_schemas import (
    ChatMessage,
    LlmApiRequest,
    LlmApiResponse,
    LlmChatRequest,
    TurnResponse,
    TurnListResponse,
)

__all__ = [
    "ChatMessage",
    "LlmApiRequest",
    "LlmApiResponse",
    "LlmChatRequest",
    "TurnResponse",
    "TurnListResponse",
]
