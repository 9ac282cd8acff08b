"""Chat turn pipeline: config check -> rate limit -> sanitize -> validate -> respond.

ChatTurnProcessor.process() never raises for a well-formed call. Rejections
(503/400/429) come back as Rejected; everything past validation comes back
as Responded, with generation failures already degraded to a local reply.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union

import structlog
from pydantic import ValidationError as SchemaValidationError

from portfolio_chat.api.schemas import ChatMessage, ChatResponse, HistoryTurn
from portfolio_chat.core.errors import (
    ChatError,
    ConfigurationError,
    RateLimitError,
    ValidationError,
)
from portfolio_chat.core.guardrails import contains_suspicious_content, sanitize_input
from portfolio_chat.core.intents import classify_intent
from portfolio_chat.core.rate_limiter import FixedWindowRateLimiter, mask_client_key
from portfolio_chat.core.responder import (
    EXTERNAL_FAILURE_REASONS,
    Fallback,
    Generated,
    Reply,
    ResponseSelector,
)
from portfolio_chat.core.security_events import log_security_event
from portfolio_chat.core.settings import Settings
from portfolio_chat.core.validator import validate_conversation_history

logger = structlog.get_logger(__name__)

ANONYMOUS_SESSION = "anonymous"


class TurnState(str, Enum):
    RECEIVED = "received"
    RATE_CHECKED = "rate_checked"
    SANITIZED = "sanitized"
    VALIDATED = "validated"
    EXTERNAL_ATTEMPT = "external_attempt"
    EXTERNAL_SUCCESS = "external_success"
    EXTERNAL_FALLBACK = "external_fallback"
    LOCAL_SELECTED = "local_selected"
    RESPONDED = "responded"


@dataclass(frozen=True)
class Responded:
    """The turn produced a reply (generated or fallback)."""
    response: ChatResponse
    reply: Reply


@dataclass(frozen=True)
class Rejected:
    """The turn was refused before generation."""
    status_code: int
    error: str
    retry_after: int | None = None
    reset_at: float | None = None


TurnOutcome = Union[Responded, Rejected]


@dataclass
class TurnRequest:
    """Transport-independent view of an inbound POST /chat."""
    body: bytes
    client_ip: str
    session_id: str | None = None
    user_agent: str | None = None


class ChatTurnProcessor:
    """Runs one chat turn through the pipeline."""

    def __init__(
        self,
        settings: Settings,
        rate_limiter: FixedWindowRateLimiter,
        responder: ResponseSelector,
    ):
        self.settings = settings
        self.rate_limiter = rate_limiter
        self.responder = responder

    async def process(self, request: TurnRequest) -> TurnOutcome:
        """Process one turn and return its outcome."""
        session_id = request.session_id or ANONYMOUS_SESSION
        masked = mask_client_key(request.client_ip)
        log = logger.bind(session_id=session_id, client=masked)
        state = TurnState.RECEIVED
        log.info("chat.request", state=state.value, body_bytes=len(request.body))

        try:
            self._require_credential()
            self._consume_rate_limit(masked)
            state = TurnState.RATE_CHECKED

            payload = _parse_body(request.body)
            message = self._sanitize_message(payload.get("message"))
            state = TurnState.SANITIZED

            history = self._validate_history(payload.get("conversationHistory"))
            state = TurnState.VALIDATED
        except ChatError as e:
            return self._reject(e, request, state, log)

        log.info("chat.validated", state=state.value, msg_len=len(message), turns=len(history))

        if contains_suspicious_content(message):
            log_security_event("suspicious_content", request.client_ip, request.user_agent,
                               {"stage": "post_sanitize", "msg_len": len(message)})

        if self.responder.use_external():
            state = TurnState.EXTERNAL_ATTEMPT
            log.info("chat.external_attempt", state=state.value)
            try:
                reply = await self.responder.external_reply(message, history)
            except Exception as e:
                log.error("chat.unexpected_error", error=str(e), error_type=type(e).__name__)
                reply = Fallback(self.responder.local_reply(message), reason="unexpected_error")
        else:
            reply = Fallback(self.responder.local_reply(message), reason="sampled_local")

        if isinstance(reply, Generated):
            state = TurnState.EXTERNAL_SUCCESS
        elif reply.reason == "sampled_local":
            state = TurnState.LOCAL_SELECTED
        else:
            state = TurnState.EXTERNAL_FALLBACK
            if reply.reason in EXTERNAL_FAILURE_REASONS:
                log_security_event("api_error", request.client_ip, request.user_agent,
                                   {"reason": reply.reason})
        log.info("chat.reply_selected", state=state.value, fallback=reply.fallback,
                 reason=getattr(reply, "reason", None))

        response = ChatResponse(
            message=reply.text,
            intent=classify_intent(message),
            timestamp=datetime.now(timezone.utc),
            session_id=session_id,
            fallback=reply.fallback,
        )
        log.info("chat.response", state=TurnState.RESPONDED.value, intent=response.intent,
                 fallback=response.fallback)
        return Responded(response=response, reply=reply)

    def _require_credential(self) -> None:
        if not self.settings.has_llm_credential:
            raise ConfigurationError(
                "Chatbot is currently not configured. Please reach out by email instead."
            )

    def _consume_rate_limit(self, masked_key: str) -> None:
        decision = self.rate_limiter.check(masked_key)
        if not decision.allowed:
            raise RateLimitError(
                "Rate limit exceeded. Please try again later.",
                reset_at=decision.reset_at,
                retry_after=decision.retry_after,
            )

    def _sanitize_message(self, message: Any) -> str:
        if not message or not isinstance(message, str):
            raise ValidationError("Message is required and must be a string")
        sanitized = sanitize_input(message, self.settings.max_message_length)
        if not sanitized:
            raise ValidationError("Message content is invalid")
        return sanitized

    def _validate_history(self, raw_history: Any) -> list[ChatMessage]:
        if raw_history is None:
            return []
        if isinstance(raw_history, list) and len(raw_history) > self.settings.max_conversation_turns:
            raise ValidationError("Conversation too long. Please start a new conversation.")
        if not validate_conversation_history(raw_history):
            raise ValidationError("Conversation history is invalid")
        try:
            return [ChatMessage.from_turn(HistoryTurn.model_validate(turn)) for turn in raw_history]
        except SchemaValidationError as e:
            raise ValidationError("Conversation history is invalid") from e

    def _reject(self, error: ChatError, request: TurnRequest, state: TurnState, log) -> Rejected:
        if isinstance(error, ConfigurationError):
            log.warning("chat.unconfigured", state=state.value)
            return Rejected(status_code=error.status_code, error=error.message)

        if isinstance(error, RateLimitError):
            log_security_event("rate_limit", request.client_ip, request.user_agent,
                               {"retry_after": error.retry_after})
            return Rejected(
                status_code=error.status_code,
                error=error.message,
                retry_after=error.retry_after,
                reset_at=error.reset_at,
            )

        log_security_event("invalid_input", request.client_ip, request.user_agent,
                           {"reason": error.message, "state": state.value})
        return Rejected(status_code=error.status_code, error=error.message)


def _parse_body(body: bytes) -> dict:
    """Decode a JSON object body, mapping anything else to a 400."""
    try:
        payload = json.loads(body or b"null")
    except (ValueError, RecursionError) as e:
        raise ValidationError("Request body must be valid JSON") from e
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload
