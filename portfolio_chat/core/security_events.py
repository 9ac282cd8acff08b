"""Write-only security audit events.

Events go to the structured log sink with the client address already masked
and the user agent truncated. There is no read path and no retention here.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

import structlog

from portfolio_chat.core.rate_limiter import mask_client_key

logger = structlog.get_logger(__name__)

MAX_USER_AGENT_LENGTH = 200

SecurityEventType = Literal["rate_limit", "invalid_input", "suspicious_content", "api_error"]


@dataclass(frozen=True)
class SecurityEvent:
    type: SecurityEventType
    masked_ip: str
    user_agent: str | None = None
    details: dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


def log_security_event(
    event_type: SecurityEventType,
    ip: str | None,
    user_agent: str | None = None,
    details: dict[str, Any] | None = None,
) -> SecurityEvent:
    """Emit a security event and return the record that was logged.

    Args:
        event_type: Category of the event.
        ip: Raw client address; only its masked form is logged.
        user_agent: Raw User-Agent header, truncated to 200 characters.
        details: Extra context (never the raw message body).
    """
    event = SecurityEvent(
        type=event_type,
        masked_ip=mask_client_key(ip),
        user_agent=user_agent[:MAX_USER_AGENT_LENGTH] if user_agent else None,
        details=details or {},
    )

    if event_type in ("rate_limit", "api_error"):
        logger.warning("security.event", **asdict(event))
    else:
        logger.info("security.event", **asdict(event))
    return event
