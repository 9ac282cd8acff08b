"""Environment-driven configuration for the chat service.

All knobs are read once into a Settings dataclass. Call load_settings()
after load_dotenv() so values from a local .env file are picked up.
"""

import os
from dataclasses import dataclass, field

APP_VERSION = "2.0.0"


def _split_origins(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Runtime configuration.

    Attributes:
        cerebras_api_key: Credential for the Cerebras provider (preferred when set).
        groq_api_key: Credential for the Groq provider.
        rate_limit_per_window: Requests allowed per masked client key per window.
        max_conversation_turns: Largest conversation history accepted on POST /chat.
        external_ratio: Share of requests that try the external model first.
    """
    cerebras_api_key: str = ""
    groq_api_key: str = ""
    cerebras_model: str = "gpt-oss-120b"
    groq_model: str = "openai/gpt-oss-120b"
    llm_temperature: float = 0.9
    llm_max_tokens: int = 1200
    llm_timeout: float = 5.0

    rate_limit_per_window: int = 10
    rate_limit_window_seconds: float = 60.0
    rate_limit_max_keys: int = 10_000

    max_message_length: int = 500
    max_conversation_turns: int = 20
    context_turns: int = 10
    external_ratio: float = 0.7
    min_external_length: int = 50

    allowed_origins: list[str] = field(default_factory=list)
    max_request_bytes: int = 10 * 1024
    require_https: bool = False

    log_level: str = "INFO"
    log_json: bool = False
    version: str = APP_VERSION

    @property
    def has_llm_credential(self) -> bool:
        """True when at least one external-model provider has a key."""
        return bool(self.cerebras_api_key) or bool(self.groq_api_key)


def load_settings() -> Settings:
    """Build Settings from the current process environment."""
    return Settings(
        cerebras_api_key=os.environ.get("CEREBRAS_API_KEY", "").strip(),
        groq_api_key=os.environ.get("GROQ_API_KEY", "").strip(),
        cerebras_model=os.environ.get("CEREBRAS_MODEL", "gpt-oss-120b"),
        groq_model=os.environ.get("GROQ_MODEL", "openai/gpt-oss-120b"),
        llm_temperature=float(os.environ.get("LLM_TEMPERATURE", "0.9")),
        llm_max_tokens=int(os.environ.get("LLM_MAX_TOKENS", "1200")),
        llm_timeout=float(os.environ.get("LLM_TIMEOUT", "5")),
        rate_limit_per_window=int(os.environ.get("CHATBOT_RATE_LIMIT", "10")),
        rate_limit_window_seconds=float(os.environ.get("CHATBOT_RATE_WINDOW", "60")),
        rate_limit_max_keys=int(os.environ.get("CHATBOT_RATE_MAX_KEYS", "10000")),
        max_conversation_turns=int(os.environ.get("CHATBOT_MAX_MESSAGES", "20")),
        context_turns=int(os.environ.get("CHATBOT_CONTEXT_TURNS", "10")),
        external_ratio=float(os.environ.get("CHATBOT_EXTERNAL_RATIO", "0.7")),
        allowed_origins=_split_origins(os.environ.get("ALLOWED_ORIGINS", "")),
        max_request_bytes=int(os.environ.get("MAX_REQUEST_BYTES", str(10 * 1024))),
        require_https=_env_flag("REQUIRE_HTTPS"),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        log_json=_env_flag("LOG_JSON"),
    )
