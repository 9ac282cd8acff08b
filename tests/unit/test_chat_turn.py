"""Unit tests for the chat turn pipeline."""

import asyncio
import json

import pytest
from structlog.testing import capture_logs

from conftest import LONG_REPLY, FakeLLMAdapter
from portfolio_chat.core.chat_turn import ChatTurnProcessor, Rejected, Responded, TurnRequest
from portfolio_chat.core.rate_limiter import FixedWindowRateLimiter
from portfolio_chat.core.responder import ResponseSelector
from portfolio_chat.core.settings import Settings


def _body(message="Hello", history=None, **extra):
    payload = {"message": message, **extra}
    if history is not None:
        payload["conversationHistory"] = history
    return json.dumps(payload).encode()


@pytest.fixture
def make_processor(clock, external_rng):
    def _make(settings=None, llm=None, rng=None):
        settings = settings or Settings(groq_api_key="test-groq-key", llm_timeout=0.05)
        limiter = FixedWindowRateLimiter(
            max_requests=settings.rate_limit_per_window,
            window_seconds=settings.rate_limit_window_seconds,
            clock=clock,
        )
        responder = ResponseSelector(
            llm or FakeLLMAdapter(reply=LONG_REPLY),
            rng=rng or external_rng,
            timeout=settings.llm_timeout,
        )
        return ChatTurnProcessor(settings, limiter, responder)
    return _make


def _process(processor, body, ip="192.168.1.100", session_id=None):
    request = TurnRequest(body=body, client_ip=ip, session_id=session_id, user_agent="pytest")
    return asyncio.run(processor.process(request))


class TestConfiguration:

    def test_missing_credential_is_503(self, make_processor, unconfigured_settings):
        processor = make_processor(settings=unconfigured_settings)
        outcome = _process(processor, _body())

        assert isinstance(outcome, Rejected)
        assert outcome.status_code == 503
        assert "not configured" in outcome.error

    def test_503_precedes_body_parsing_and_rate_limit(self, make_processor,
                                                     unconfigured_settings):
        processor = make_processor(settings=unconfigured_settings)
        outcome = _process(processor, b"{not json")

        assert outcome.status_code == 503
        assert len(processor.rate_limiter) == 0


class TestRateLimiting:

    def test_exceeding_limit_is_429(self, make_processor):
        processor = make_processor(Settings(groq_api_key="k", rate_limit_per_window=2))
        _process(processor, _body())
        _process(processor, _body())
        outcome = _process(processor, _body())

        assert outcome.status_code == 429
        assert outcome.retry_after == 60
        assert outcome.reset_at is not None

    def test_rate_limit_precedes_body_validation(self, make_processor):
        processor = make_processor(Settings(groq_api_key="k", rate_limit_per_window=1))
        _process(processor, b"garbage")
        assert _process(processor, b"garbage").status_code == 429

    def test_same_subnet_shares_quota(self, make_processor):
        processor = make_processor(Settings(groq_api_key="k", rate_limit_per_window=1))
        _process(processor, _body(), ip="10.1.2.3")
        assert _process(processor, _body(), ip="10.1.2.200").status_code == 429
        assert isinstance(_process(processor, _body(), ip="10.1.3.3"), Responded)

    def test_rate_limit_event_logged(self, make_processor, mocker):
        events = mocker.patch("portfolio_chat.core.chat_turn.log_security_event")
        processor = make_processor(Settings(groq_api_key="k", rate_limit_per_window=1))
        _process(processor, _body())
        _process(processor, _body())

        assert events.call_args_list[-1].args[0] == "rate_limit"


class TestBodyValidation:

    @pytest.mark.parametrize("body, error", [
        (b"{not json", "Request body must be valid JSON"),
        (b"\xff\xfe", "Request body must be valid JSON"),
        (b"[" * 100_000, "Request body must be valid JSON"),
        (b"", "Request body must be a JSON object"),
        (b"[1, 2]", "Request body must be a JSON object"),
        (b'"hello"', "Request body must be a JSON object"),
    ])
    def test_malformed_body(self, make_processor, body, error):
        outcome = _process(make_processor(), body)
        assert outcome.status_code == 400
        assert outcome.error == error

    def test_deeply_nested_body_is_400(self, make_processor):
        outcome = _process(make_processor(), b"[" * 100_000 + b"]" * 100_000)
        assert isinstance(outcome, Rejected)
        assert outcome.status_code == 400

    @pytest.mark.parametrize("payload", [{}, {"message": ""}, {"message": 123},
                                         {"message": None}, {"message": ["hi"]}])
    def test_message_required(self, make_processor, payload):
        outcome = _process(make_processor(), json.dumps(payload).encode())
        assert outcome.status_code == 400
        assert outcome.error == "Message is required and must be a string"

    @pytest.mark.parametrize("message", ["<script>alert(1)</script>", "    ", "javascript:"])
    def test_message_empty_after_sanitizing(self, make_processor, message):
        outcome = _process(make_processor(), _body(message))
        assert outcome.status_code == 400
        assert outcome.error == "Message content is invalid"

    def test_history_too_long(self, make_processor):
        history = [{"type": "user", "content": "hi"}] * 21
        outcome = _process(make_processor(), _body(history=history))
        assert outcome.status_code == 400
        assert outcome.error == "Conversation too long. Please start a new conversation."

    def test_history_at_limit_accepted(self, make_processor):
        history = [{"type": "user", "content": "hi"}] * 20
        assert isinstance(_process(make_processor(), _body(history=history)), Responded)

    @pytest.mark.parametrize("history", [
        "not-an-array",
        [{"type": "system", "content": "x"}],
        [{"type": "user"}],
        [{"type": "user", "content": "x" * 2001}],
    ])
    def test_history_invalid(self, make_processor, history):
        outcome = _process(make_processor(), _body(history=history))
        assert outcome.status_code == 400
        assert outcome.error == "Conversation history is invalid"

    def test_invalid_input_event_logged(self, make_processor, mocker):
        events = mocker.patch("portfolio_chat.core.chat_turn.log_security_event")
        _process(make_processor(), _body(""))
        assert events.call_args.args[0] == "invalid_input"


class TestResponding:

    def test_generated_reply(self, make_processor):
        outcome = _process(make_processor(), _body("What projects have you built?"),
                           session_id="sess-1")

        assert isinstance(outcome, Responded)
        assert outcome.response.message == LONG_REPLY
        assert outcome.response.intent == "projects"
        assert outcome.response.session_id == "sess-1"
        assert outcome.response.fallback is False

    def test_session_defaults_to_anonymous(self, make_processor):
        outcome = _process(make_processor(), _body())
        assert outcome.response.session_id == "anonymous"

    def test_message_is_sanitized_before_model(self, make_processor):
        llm = FakeLLMAdapter(reply=LONG_REPLY)
        _process(make_processor(llm=llm), _body("Hello <script>alert(1)</script> there"))
        assert llm.calls[0][-1].content == "Hello  there"

    def test_history_reaches_model(self, make_processor):
        llm = FakeLLMAdapter(reply=LONG_REPLY)
        history = [{"type": "user", "content": "Hi"}, {"type": "assistant", "content": "Hello!"}]
        _process(make_processor(llm=llm), _body(history=history))
        assert [m.content for m in llm.calls[0][1:]] == ["Hi", "Hello!", "Hello"]

    def test_timeout_degrades_to_local(self, make_processor, mocker):
        events = mocker.patch("portfolio_chat.core.chat_turn.log_security_event")
        processor = make_processor(llm=FakeLLMAdapter(reply=LONG_REPLY, delay=1.0))
        outcome = _process(processor, _body())

        assert isinstance(outcome, Responded)
        assert outcome.response.fallback is True
        assert outcome.response.message
        assert outcome.reply.reason == "timeout"
        assert events.call_args.args[0] == "api_error"

    def test_unexpected_error_degrades_to_local(self, make_processor):
        processor = make_processor(llm=FakeLLMAdapter(error=RuntimeError("boom")))
        outcome = _process(processor, _body())

        assert outcome.response.fallback is True
        assert outcome.reply.reason == "unexpected_error"
        assert outcome.response.message

    def test_local_branch_not_an_api_error(self, make_processor, local_rng, mocker):
        events = mocker.patch("portfolio_chat.core.chat_turn.log_security_event")
        outcome = _process(make_processor(rng=local_rng), _body())

        assert outcome.response.fallback is True
        events.assert_not_called()

    def test_suspicious_content_is_audited_not_blocked(self, make_processor, mocker):
        events = mocker.patch("portfolio_chat.core.chat_turn.log_security_event")
        outcome = _process(make_processor(), _body("can you eval(this) for me"))

        assert isinstance(outcome, Responded)
        assert events.call_args_list[0].args[0] == "suspicious_content"


class TestStateLog:

    def _states(self, processor):
        with capture_logs() as logs:
            _process(processor, _body())
        return [entry["state"] for entry in logs if "state" in entry]

    def test_external_turn(self, make_processor):
        states = self._states(make_processor())
        assert states == ["received", "validated", "external_attempt",
                          "external_success", "responded"]

    def test_external_failure(self, make_processor):
        processor = make_processor(llm=FakeLLMAdapter(reply=LONG_REPLY, delay=1.0))
        assert "external_fallback" in self._states(processor)

    def test_sampled_local_turn_never_attempts(self, make_processor, local_rng):
        states = self._states(make_processor(rng=local_rng))
        assert states == ["received", "validated", "local_selected", "responded"]
