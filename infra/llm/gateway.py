"""
HTTP client for the LLM gateway: one synchronous POST per call, no retries.
"""

from __future__ import annotations

from typing import Optional, Sequence

import httpx
from pydantic import ValidationError

from hero_api.schemas.llm_schemas import ChatMessage, LlmApiRequest, LlmApiResponse

DEFAULT_TIMEOUT = 60.0


class LLMGatewayError(Exception):
    pass


class LLMCallFailed(LLMGatewayError):
    """The gateway answered with a non-success status."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"LLM gateway returned status {status_code}")
        self.status_code = status_code
        self.body = body


class LLMResponseInvalid(LLMGatewayError):
    """The gateway answered 2xx but the body is not an LLM response."""


class LLMGatewayClient:
    """
    Sends the assembled chat to the gateway and parses the typed reply.

    Transport errors from httpx (connect, read, timeout) are not caught here.
    """

    def __init__(self, http_client: Optional[httpx.Client] = None, timeout: float = DEFAULT_TIMEOUT):
        self._http = http_client or httpx.Client(timeout=timeout)
        self._owns_client = http_client is None

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "LLMGatewayClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @staticmethod
    def build_payload(
        credential: str,
        request: LlmApiRequest,
        history: Sequence[ChatMessage],
        prompt: Optional[str] = None,
    ) -> dict:
        """Outbound body: caller's provider/model/isChat, server key, history then the live prompt."""
        chat_history = list(history)
        if prompt is not None:
            chat_history.append(ChatMessage(role="user", content=prompt))
        outbound = request.model_copy(update={"api_key": credential, "chat_history": chat_history})
        return outbound.model_dump(by_alias=True)

    def send(
        self,
        endpoint: str,
        credential: str,
        request: LlmApiRequest,
        history: Sequence[ChatMessage],
        prompt: Optional[str] = None,
    ) -> LlmApiResponse:
        payload = self.build_payload(credential, request, history, prompt)
        response = self._http.post(endpoint, json=payload)

        if not response.is_success:
            raise LLMCallFailed(response.status_code, response.text)

        if not response.content.strip():
            raise LLMResponseInvalid("empty response body")
        try:
            return LlmApiResponse.model_validate_json(response.content)
        except ValidationError as e:
            # covers malformed JSON, JSON null and non-object bodies
            raise LLMResponseInvalid(str(e)) from e
