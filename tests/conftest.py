"""Shared fixtures for all tests."""

import asyncio
import random

import pytest

from portfolio_chat.core.settings import Settings


class FakeClock:
    """Manually advanced epoch clock."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FixedRandom(random.Random):
    """random() always returns `value`; choice() always picks the first item."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value

    def choice(self, seq):
        return seq[0]


class FakeLLMAdapter:
    """Stands in for LLMAdapter: canned reply, optional delay or error."""

    provider = "fake"

    def __init__(self, reply: str = "", error: Exception | None = None, delay: float = 0.0):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls = []

    def is_healthy(self) -> bool:
        return True

    async def agenerate(self, messages):
        self.calls.append(messages)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.reply


LONG_REPLY = (
    "I built a hotel management system with React, Node.js and MongoDB, "
    "including Stripe payments and real-time availability."
)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def external_rng() -> FixedRandom:
    """Always takes the external-model branch."""
    return FixedRandom(0.0)


@pytest.fixture
def local_rng() -> FixedRandom:
    """Always takes the local-reply branch."""
    return FixedRandom(0.99)


@pytest.fixture
def configured_settings() -> Settings:
    return Settings(groq_api_key="test-groq-key", llm_timeout=0.05)


@pytest.fixture
def unconfigured_settings() -> Settings:
    return Settings()
