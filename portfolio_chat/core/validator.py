"""Format validators for emails, request origins, and conversation history.

All validators fail closed: anything they cannot parse is rejected.
"""

import re
from collections.abc import Mapping
from urllib.parse import urlsplit

MAX_EMAIL_LENGTH = 254
MAX_HISTORY_CONTENT_LENGTH = 2000
HISTORY_ROLES = frozenset({"user", "assistant"})

_EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

_DEFAULT_PORTS = {"http": 80, "https": 443}


def is_valid_email(email: str) -> bool:
    """Check a plain user@domain.tld shape and the RFC 5321 length cap."""
    if not isinstance(email, str):
        return False
    return bool(_EMAIL_PATTERN.fullmatch(email)) and len(email) <= MAX_EMAIL_LENGTH


def _normalize_origin(origin: str) -> tuple[str, str] | None:
    """Parse an origin into (scheme://host[:port], hostname), or None if malformed."""
    try:
        parts = urlsplit(origin.strip())
        port = parts.port
    except ValueError:
        return None

    scheme = parts.scheme.lower()
    hostname = parts.hostname
    if not scheme or not hostname:
        return None

    host = f"[{hostname}]" if ":" in hostname else hostname
    normalized = f"{scheme}://{host}"
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        normalized += f":{port}"
    return normalized, hostname


def is_valid_origin(origin: str, allowed_origins: list[str]) -> bool:
    """Check a request Origin against an allow-list.

    Entries are matched as follows:
      - "*" allows any parseable origin.
      - "*.example.com" allows https origins on any subdomain of example.com.
        Plain http is refused so a wildcard rule cannot be downgraded.
      - anything else is normalized the same way (scheme://host[:port], default
        port dropped, IPv6 hosts bracketed) and must equal the origin.

    Args:
        origin: Value of the Origin header.
        allowed_origins: Configured allow-list entries.

    Returns:
        True if any entry matches.
    """
    if not origin or not isinstance(origin, str):
        return False

    parsed = _normalize_origin(origin)
    if parsed is None:
        return False
    normalized, hostname = parsed
    scheme = normalized.split("://", 1)[0]

    for allowed in allowed_origins:
        if allowed == "*":
            return True
        if allowed.startswith("*."):
            domain = allowed[2:].lower()
            if scheme == "https" and hostname.endswith("." + domain):
                return True
            continue
        entry = _normalize_origin(allowed)
        if entry is not None and entry[0] == normalized:
            return True
    return False


def validate_conversation_history(history) -> bool:
    """Check that history is a sequence of {type, content} turns.

    Args:
        history: Decoded JSON value from the request body.

    Returns:
        True for a list/tuple (possibly empty) whose every element is a mapping
        with type "user" or "assistant" and string content of at most 2000 chars.
    """
    if not isinstance(history, (list, tuple)):
        return False

    for turn in history:
        if not isinstance(turn, Mapping):
            return False
        content = turn.get("content")
        if not isinstance(content, str) or len(content) > MAX_HISTORY_CONTENT_LENGTH:
            return False
        role = turn.get("type")
        if not isinstance(role, str) or role not in HISTORY_ROLES:
            return False
    return True
