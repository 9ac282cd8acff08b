"""Input guardrails for visitor chat messages.

sanitize_input() strips markup and script schemes that could be echoed back
into the chat widget. contains_suspicious_content() is an audit check run on
the sanitized text; it reports, it does not block. Both are regex blocklists,
not an HTML parser.
"""

import re

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_MAX_LENGTH = 500

# Input beyond max_length * SCAN_LENGTH_FACTOR characters is dropped unscanned
SCAN_LENGTH_FACTOR = 4

_BLOCKED_ELEMENTS = ("script", "iframe", "object", "embed")

# Whole elements including their content, possibly spanning lines
_ELEMENT_PATTERNS = [
    re.compile(rf"<{tag}\b[^>]*>.*?</{tag}\s*>", re.IGNORECASE | re.DOTALL)
    for tag in _BLOCKED_ELEMENTS
]

# Unpaired opening/closing tags left over after element removal
_STRAY_TAG_PATTERN = re.compile(
    r"</?(?:script|iframe|object|embed)\b(?:[^<>]*>)?", re.IGNORECASE
)

_SCHEME_PATTERNS = [
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"vbscript:", re.IGNORECASE),
    re.compile(r"data:text/html", re.IGNORECASE),
]

_EVENT_HANDLER_PATTERN = re.compile(r"on\w+\s*=", re.IGNORECASE)

_SUSPICIOUS_PATTERNS = [
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"vbscript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"<iframe", re.IGNORECASE),
    re.compile(r"<object", re.IGNORECASE),
    re.compile(r"<embed", re.IGNORECASE),
    re.compile(r"data:text/html", re.IGNORECASE),
    re.compile(r"\beval\s*\(", re.IGNORECASE),
    re.compile(r"\bFunction\s*\(", re.IGNORECASE),
    re.compile(r"\bsetTimeout\s*\(", re.IGNORECASE),
    re.compile(r"\bsetInterval\s*\(", re.IGNORECASE),
]

_REMOVAL_PATTERNS = (
    _ELEMENT_PATTERNS
    + [_STRAY_TAG_PATTERN]
    + _SCHEME_PATTERNS
    + [_EVENT_HANDLER_PATTERN]
)


def _strip_once(text: str) -> str:
    text = text.strip()
    for pattern in _REMOVAL_PATTERNS:
        text = pattern.sub("", text)
    return text.strip()


def sanitize_input(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Remove dangerous markup and schemes from free text, then truncate.

    Removal repeats until the text stops changing, so a payload such as
    ``<scr<script></script>ipt>`` cannot reassemble a tag.

    Args:
        text: Raw visitor input.
        max_length: Maximum length of the returned string.

    Returns:
        Sanitized, trimmed text of at most max_length characters.

    Raises:
        TypeError: If text is not a string.
    """
    if not isinstance(text, str):
        raise TypeError("Input must be a string")

    # Only a bounded prefix is scanned; the element patterns are quadratic
    # on repeated unclosed openers
    cleaned = text[:max_length * SCAN_LENGTH_FACTOR]
    # Truncation can expose a tag fragment, so it runs inside the loop too
    while True:
        stripped = _strip_once(cleaned)[:max_length].strip()
        if stripped == cleaned:
            return cleaned
        cleaned = stripped


def contains_suspicious_content(text: str) -> bool:
    """Check whether text still carries script-like patterns."""
    for pattern in _SUSPICIOUS_PATTERNS:
        if pattern.search(text):
            logger.debug("guardrail.suspicious_pattern", pattern=pattern.pattern[:40])
            return True
    return False
