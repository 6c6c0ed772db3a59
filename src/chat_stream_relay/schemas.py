from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import InvalidConversationError


class ChatStreamRequest(BaseModel):
    """Inbound request body.

    Turns are kept as the caller sent them; only the latest turn's content is
    inspected. Earlier turns and role values are forwarded upstream untouched.
    """

    model_config = ConfigDict(extra="ignore")

    messages: list[Any] = Field(default_factory=list)


class Conversation(BaseModel):
    """An ordered, non-empty sequence of caller-supplied turns."""

    model_config = ConfigDict(frozen=True)

    messages: list[Any]

    @property
    def latest_message(self) -> Any:
        latest = self.messages[-1]
        if isinstance(latest, dict):
            return latest.get("content")
        return None

    @classmethod
    def from_payload(cls, payload: Any) -> "Conversation":
        """Validate a decoded JSON body, raising ``InvalidConversationError``."""
        try:
            request = ChatStreamRequest.model_validate(payload)
        except ValidationError as exc:
            raise InvalidConversationError() from exc

        if not request.messages:
            raise InvalidConversationError()

        conversation = cls(messages=request.messages)
        if not conversation.latest_message:
            raise InvalidConversationError()
        return conversation


class HealthResponse(BaseModel):
    status: str = "ok"
