"""LLM adapter over a LangChain chat model (Cerebras or Groq).

Cerebras is used when CEREBRAS_API_KEY is set, otherwise Groq. There is no
cross-provider failover: a failed call surfaces as an ExternalServiceError and
the response selector answers locally instead.
"""

import structlog
from httpx import HTTPStatusError, TimeoutException
from langchain_cerebras import ChatCerebras
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_groq import ChatGroq

from portfolio_chat.core.errors import ConfigurationError, ExternalServiceError
from portfolio_chat.core.settings import Settings, load_settings

logger = structlog.get_logger(__name__)


class LLMError(ExternalServiceError):
    """Provider rejected the request (4xx)."""
    pass


class LLMUnavailableError(ExternalServiceError):
    """Provider timed out, returned 5xx, or could not be reached."""
    pass


class LLMAdapter:
    """Builds the configured chat model lazily and runs single completions."""

    def __init__(self, settings: Settings | None = None):
        settings = settings or load_settings()
        self.cerebras_key = settings.cerebras_api_key
        self.groq_key = settings.groq_api_key

        self.cerebras_model_name = settings.cerebras_model
        self.groq_model_name = settings.groq_model

        self.temperature = settings.llm_temperature
        self.max_tokens = settings.llm_max_tokens
        self.timeout = settings.llm_timeout

        self._model: BaseChatModel | None = None

    @property
    def provider(self) -> str | None:
        """Name of the provider that will serve requests, or None if unconfigured."""
        if self.cerebras_key:
            return "cerebras"
        if self.groq_key:
            return "groq"
        return None

    def is_healthy(self) -> bool:
        """Check if a provider key is configured.

        Returns:
            True if either the Cerebras or the Groq API key is set.
        """
        return self.provider is not None

    def get_chat_model(self) -> BaseChatModel:
        """Return the chat model for the configured provider, building it once.

        Raises:
            ConfigurationError: If no provider key is configured.
        """
        if self._model is not None:
            return self._model

        if self.provider == "cerebras":
            self._model = ChatCerebras(
                api_key=self.cerebras_key,
                model=self.cerebras_model_name,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
            )
        elif self.provider == "groq":
            self._model = ChatGroq(
                api_key=self.groq_key,
                model=self.groq_model_name,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
            )
        else:
            raise ConfigurationError("No LLM provider key configured")

        logger.info("llm.model_created", provider=self.provider)
        return self._model

    async def agenerate(self, messages: list[BaseMessage]) -> str:
        """Run one completion and return its text.

        Args:
            messages: System prompt, history, and user turn as LangChain messages.

        Returns:
            The model's reply text (may be empty).

        Raises:
            LLMError: If the provider returns a 4xx.
            LLMUnavailableError: On timeout, 5xx, or any other provider failure.
        """
        model = self.get_chat_model()
        logger.debug("llm.invoke", provider=self.provider, messages=len(messages))

        try:
            response = await model.ainvoke(messages)

        except HTTPStatusError as e:
            status = e.response.status_code
            if 400 <= status < 500:
                logger.error("llm.4xx", status=status)
                raise LLMError(f"{self.provider} rejected request ({status}): {e}") from e
            logger.warning("llm.5xx", status=status)
            raise LLMUnavailableError(f"{self.provider} returned {status}") from e

        except TimeoutException as e:
            logger.warning("llm.timeout", threshold=self.timeout)
            raise LLMUnavailableError(f"{self.provider} timed out") from e

        except Exception as e:
            logger.warning("llm.unknown_error", error=str(e))
            raise LLMUnavailableError(f"{self.provider} call failed: {e}") from e

        return _message_text(response)


def _message_text(message: BaseMessage) -> str:
    """Flatten message content, which may be a list of content blocks."""
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)
