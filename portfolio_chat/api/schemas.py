"""Pydantic models for the API layer.

Wire fields are camelCase (sessionId, rateLimit, ...) to match the chat
widget; Python attributes stay snake_case via aliases.
"""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

MAX_TURN_CONTENT_LENGTH = 2000


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HistoryTurn(BaseModel):
    """One conversation turn as sent by the widget."""
    type: Literal["user", "assistant"]
    content: str = Field(..., max_length=MAX_TURN_CONTENT_LENGTH)


class ChatMessage(BaseModel):
    """A conversation message inside the service."""
    role: Literal["user", "assistant"]
    content: str = Field(..., max_length=MAX_TURN_CONTENT_LENGTH)
    timestamp: datetime = Field(default_factory=_utcnow)

    @classmethod
    def from_turn(cls, turn: HistoryTurn) -> "ChatMessage":
        return cls(role=turn.type, content=turn.content)


class ChatResponse(BaseModel):
    """Successful reply to POST /chat."""
    model_config = ConfigDict(populate_by_name=True)

    message: str
    intent: str
    timestamp: datetime = Field(default_factory=_utcnow)
    session_id: str = Field("anonymous", alias="sessionId")
    fallback: bool = False


class ErrorResponse(BaseModel):
    """Rejected chat turn."""
    model_config = ConfigDict(populate_by_name=True)

    error: str
    reset_time: datetime | None = Field(None, alias="resetTime")


class RateLimitInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    max_requests: int = Field(..., alias="maxRequests")
    window_ms: int = Field(..., alias="windowMs")


class ChatStatus(BaseModel):
    """Capability document returned by GET /chat."""
    model_config = ConfigDict(populate_by_name=True)

    status: Literal["active"] = "active"
    message: str
    version: str
    capabilities: list[str]
    rate_limit: RateLimitInfo = Field(..., alias="rateLimit")
    last_updated: datetime = Field(default_factory=_utcnow, alias="lastUpdated")
