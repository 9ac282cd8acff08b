"""Response selection: external model first (sometimes), canned text otherwise.

A share of requests (external_ratio) tries the generative model with a hard
timeout; everything else, and every failed or too-short model answer, gets a
keyword-matched local paragraph. The outcome is typed so callers can tell a
generated answer from a degraded one without catching anything.
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Literal, Union

import structlog

from portfolio_chat.agent.prompts import build_chat_messages, build_system_prompt
from portfolio_chat.api.schemas import ChatMessage
from portfolio_chat.core.errors import ExternalServiceError
from portfolio_chat.core.intents import select_local_reply
from portfolio_chat.core.llm_adapter import LLMAdapter

logger = structlog.get_logger(__name__)

FallbackReason = Literal[
    "sampled_local", "timeout", "external_error", "brief_response", "unexpected_error"
]

# Reasons that mean the external service misbehaved
EXTERNAL_FAILURE_REASONS = frozenset({"timeout", "external_error"})


@dataclass(frozen=True)
class Generated:
    """Reply produced by the external model."""
    text: str
    fallback: bool = False


@dataclass(frozen=True)
class Fallback:
    """Reply produced locally, with why the model answer was not used."""
    text: str
    reason: FallbackReason
    fallback: bool = True


Reply = Union[Generated, Fallback]


class ResponseSelector:
    """Chooses between the external model and the local keyword dispatcher.

    Args:
        llm_adapter: Adapter used for the external call.
        rng: Random source for the external/local split and canned choices.
        external_ratio: Probability of attempting the external call.
        timeout: Seconds before the external call is abandoned.
        min_external_length: Model replies of this length or shorter are discarded.
        context_turns: Number of trailing history turns sent to the model.
        system_prompt: Persona prompt; built from the knowledge base by default.
    """

    def __init__(
        self,
        llm_adapter: LLMAdapter,
        rng: random.Random | None = None,
        external_ratio: float = 0.7,
        timeout: float = 5.0,
        min_external_length: int = 50,
        context_turns: int = 10,
        system_prompt: str | None = None,
    ):
        self.llm_adapter = llm_adapter
        self.rng = rng or random.Random()
        self.external_ratio = external_ratio
        self.timeout = timeout
        self.min_external_length = min_external_length
        self.context_turns = context_turns
        self.system_prompt = system_prompt or build_system_prompt()

    def local_reply(self, message: str) -> str:
        return select_local_reply(message, self.rng)

    def use_external(self) -> bool:
        """Draw once: True when this turn should try the external model."""
        return self.rng.random() < self.external_ratio

    async def respond(self, message: str, history: list[ChatMessage]) -> Reply:
        """Produce a reply for a sanitized message.

        ExternalServiceError and timeouts are recovered here. Any other
        exception propagates to the caller.
        """
        if not self.use_external():
            logger.debug("responder.local_selected")
            return Fallback(self.local_reply(message), reason="sampled_local")
        return await self.external_reply(message, history)

    async def external_reply(self, message: str, history: list[ChatMessage]) -> Reply:
        """Ask the external model, degrading to a local reply on failure."""
        recent = history[-self.context_turns:] if self.context_turns > 0 else []
        messages = build_chat_messages(self.system_prompt, recent, message)

        try:
            text = await asyncio.wait_for(self.llm_adapter.agenerate(messages), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("responder.external_timeout", timeout=self.timeout)
            return Fallback(self.local_reply(message), reason="timeout")
        except ExternalServiceError as e:
            logger.warning("responder.external_failed", error=str(e))
            return Fallback(self.local_reply(message), reason="external_error")

        if not text or len(text) <= self.min_external_length:
            logger.info("responder.external_too_brief", length=len(text or ""))
            return Fallback(self.local_reply(message), reason="brief_response")

        return Generated(text)
