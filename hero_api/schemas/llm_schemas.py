"""
LLM gateway wire schemas and tutoring turn request/response schemas.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, Literal


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatMessage(CamelModel):
    role: Literal["system", "user", "assistant"]
    content: str


class LlmApiRequest(CamelModel):
    """Payload forwarded to the LLM gateway. api_key and chat_history are always set by the server."""
    api_key: str = ""
    provider: str = "openai"
    model: str = "gpt-4o-mini"
    is_chat: bool = True
    chat_history: list[ChatMessage] = Field(default_factory=list)


class LlmApiResponse(CamelModel):
    # The gateway has been seen answering in both camelCase and PascalCase.
    success: bool = Field(
        default=False,
        validation_alias=AliasChoices("success", "Success"),
        serialization_alias="success",
    )
    assistant_response: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("assistantResponse", "AssistantResponse", "assistant_response"),
        serialization_alias="assistantResponse",
    )


class LlmChatRequest(CamelModel):
    """Body for POST /api/llm/chat."""
    student_id: int
    homework_item_id: int
    session_id: Optional[str] = ""
    prompt_text: str = Field(min_length=1)
    request: Optional[LlmApiRequest] = None

    @field_validator("prompt_text", mode="before")
    @classmethod
    def strip_prompt_text(cls, value):
        # whitespace-only prompts fail min_length instead of being stored as ""
        return value.strip() if isinstance(value, str) else value


class TurnResponse(CamelModel):
    id: int
    session_id: str
    prompt_text: str
    response_text: Optional[str] = None
    created_at: str


class TurnListResponse(CamelModel):
    turns: list[TurnResponse]
