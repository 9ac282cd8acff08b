"""Fixed-window rate limiting keyed by masked client address.

Each key gets a counter that resets `window_seconds` after the first request
of its window. The table lives in process memory only, is guarded by a single
lock, and is bounded: expired windows are swept lazily and, at capacity, the
oldest window is evicted.
"""

import math
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass

import structlog
from starlette.requests import Request

logger = structlog.get_logger(__name__)

DEFAULT_WINDOW_SECONDS = 60.0
DEFAULT_MAX_REQUESTS = 10
DEFAULT_MAX_KEYS = 10_000

ANONYMOUS_KEY = "anonymous"


@dataclass
class RateLimitEntry:
    """Counter for one masked client key within its current window."""
    key: str
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitDecision:
    """Result of a single rate-limit check.

    Attributes:
        allowed: Whether the request may proceed.
        reset_at: Epoch seconds when the current window ends (denied only).
        retry_after: Whole seconds until reset_at (denied only).
    """
    allowed: bool
    reset_at: float | None = None
    retry_after: int | None = None


def mask_client_key(ip: str | None) -> str:
    """Derive a privacy-preserving key by zeroing the most specific segment.

    192.168.1.100 -> 192.168.1.xxx, 2001:db8::1 -> 2001:db8::xxxx,
    empty or "unknown" -> "anonymous".
    """
    if not ip or ip == "unknown":
        return ANONYMOUS_KEY

    if "." in ip:
        parts = ip.split(".")
        if len(parts) == 4:
            return f"{parts[0]}.{parts[1]}.{parts[2]}.xxx"

    if ":" in ip:
        parts = ip.split(":")
        if len(parts) > 1:
            return ":".join(parts[:-1]) + ":xxxx"

    return "masked"


def get_client_ip(request: Request) -> str:
    """Get the client address, preferring proxy headers."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


class FixedWindowRateLimiter:
    """Thread-safe fixed-window counter table."""

    def __init__(
        self,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        max_keys: int = DEFAULT_MAX_KEYS,
        clock: Callable[[], float] = time.time,
    ):
        self.max_requests = max(1, max_requests)
        self.window_seconds = window_seconds
        self.max_keys = max(1, max_keys)
        self._clock = clock
        self._lock = threading.Lock()
        # Insertion order == window start order, so the front expires first
        self._entries: OrderedDict[str, RateLimitEntry] = OrderedDict()
        self._next_sweep = clock() + window_seconds

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def check(self, key: str) -> RateLimitDecision:
        """Consume one request for key if its window has capacity.

        Args:
            key: Masked client key (see mask_client_key).

        Returns:
            RateLimitDecision; when denied it carries reset_at and retry_after.
        """
        with self._lock:
            now = self._clock()
            if now >= self._next_sweep:
                self._sweep(now)

            entry = self._entries.get(key)
            if entry is None or now > entry.reset_at:
                self._start_window(key, now)
                return RateLimitDecision(allowed=True)

            if entry.count >= self.max_requests:
                retry_after = max(0, math.ceil(entry.reset_at - now))
                logger.warning("rate_limit.exceeded", key=key, count=entry.count,
                               retry_after=retry_after)
                return RateLimitDecision(
                    allowed=False, reset_at=entry.reset_at, retry_after=retry_after
                )

            entry.count += 1
            return RateLimitDecision(allowed=True)

    def reset(self, key: str | None = None) -> None:
        """Forget one key, or every key when none is given."""
        with self._lock:
            if key is None:
                self._entries.clear()
            else:
                self._entries.pop(key, None)

    def _start_window(self, key: str, now: float) -> None:
        """Create or replace the entry for key. Caller holds the lock."""
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self.max_keys:
            self._sweep(now)
            while len(self._entries) >= self.max_keys:
                evicted, _ = self._entries.popitem(last=False)
                logger.info("rate_limit.evicted", key=evicted)
        self._entries[key] = RateLimitEntry(key=key, count=1, reset_at=now + self.window_seconds)

    def _sweep(self, now: float) -> None:
        """Drop expired entries from the front of the table. Caller holds the lock."""
        removed = 0
        while self._entries:
            oldest = next(iter(self._entries.values()))
            if now <= oldest.reset_at:
                break
            self._entries.popitem(last=False)
            removed += 1
        self._next_sweep = now + self.window_seconds
        if removed:
            logger.debug("rate_limit.swept", removed=removed, remaining=len(self._entries))
