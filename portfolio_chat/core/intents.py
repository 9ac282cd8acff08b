"""Keyword groups shared by the local reply dispatcher and intent labelling.

Groups are checked in order and the first match wins. Keywords match at the
start of a word in the lowercased message, so "projects" hits "project" but
"this" does not hit "hi".
"""

import random
import re
from dataclasses import dataclass

from portfolio_chat.data.knowledge import (
    ABOUT_RESPONSES,
    CONTACT_RESPONSES,
    DEFAULT_RESPONSES,
    EDUCATION_RESPONSES,
    EXPERIENCE_RESPONSES,
    GREETING_RESPONSES,
    PROJECT_RESPONSES,
    SKILL_RESPONSES,
)

DEFAULT_INTENT = "general"


@dataclass(frozen=True)
class KeywordGroup:
    """An intent label, the keyword patterns that select it, and its canned replies."""
    intent: str
    patterns: tuple[re.Pattern, ...]
    responses: tuple[str, ...]

    def matches(self, lowered: str) -> bool:
        return any(pattern.search(lowered) for pattern in self.patterns)


def _group(intent: str, keywords: tuple[str, ...], responses: tuple[str, ...]) -> KeywordGroup:
    return KeywordGroup(
        intent=intent,
        patterns=tuple(re.compile(rf"\b{kw}") for kw in keywords),
        responses=responses,
    )


KEYWORD_GROUPS = (
    _group("greeting", (r"hello", r"hi\b", r"hey\b", r"howdy", r"greetings",
                        r"good (?:morning|afternoon|evening|day)\b"), GREETING_RESPONSES),
    _group("projects", (r"project", r"work", r"built", r"created", r"portfolio"),
           PROJECT_RESPONSES),
    _group("skills", (r"skill", r"tech", r"language", r"framework", r"stack"), SKILL_RESPONSES),
    _group("experience", (r"experience", r"background", r"career", r"intern", r"job"),
           EXPERIENCE_RESPONSES),
    _group("contact", (r"contact", r"e-?mail", r"reach", r"hire", r"hiring", r"availab"),
           CONTACT_RESPONSES),
    _group("education", (r"education", r"degree", r"stud", r"universit", r"college"),
           EDUCATION_RESPONSES),
    _group("about", (r"about", r"who\b", r"tell me", r"yourself", r"shivam"), ABOUT_RESPONSES),
)


def match_keyword_group(message: str) -> KeywordGroup | None:
    """Return the first keyword group matching message, or None."""
    lowered = message.lower()
    for group in KEYWORD_GROUPS:
        if group.matches(lowered):
            return group
    return None


def classify_intent(message: str) -> str:
    """Coarse analytics label for a message; "general" when nothing matches."""
    group = match_keyword_group(message)
    return group.intent if group else DEFAULT_INTENT


def select_local_reply(message: str, rng: random.Random | None = None) -> str:
    """Pick a canned paragraph for message.

    Args:
        message: Sanitized visitor message.
        rng: Random source; injectable so tests can pin the choice.

    Returns:
        A random paragraph from the first matching group, or a generic prompt.
    """
    rng = rng or random.Random()
    group = match_keyword_group(message)
    responses = group.responses if group else DEFAULT_RESPONSES
    return rng.choice(responses)
