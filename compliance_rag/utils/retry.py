"""
Bounded exponential back-off for embedding / chat provider calls.

Only transient failures are retried: rate limits (429), server errors
(5xx), timeouts and dropped connections.  Anything else is re-raised
immediately.  With ``max_retries=0`` the wrapped call runs exactly once.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

BACKOFF_FACTOR: float = 2.0

# HTTP status codes worth retrying on
_RETRYABLE_STATUS_CODES: set[int] = {429, 500, 502, 503, 504}
_RETRYABLE_TYPE_NAMES: set[str] = {
    "RateLimitError",
    "APITimeoutError",
    "APIConnectionError",
    "TimeoutError",
    "ConnectionError",
}


def is_retryable(exc: BaseException) -> bool:
    """Return True if the exception looks like a transient provider error."""
    if type(exc).__name__ in _RETRYABLE_TYPE_NAMES:
        return True
    status = getattr(exc, "status_code", None)
    if isinstance(status, int):
        return status in _RETRYABLE_STATUS_CODES
    return False


def _next_delay(delay: float, max_delay: float) -> float:
    return min(delay * BACKOFF_FACTOR, max_delay)


def call_with_retry(
    fn: Callable[[], T],
    *,
    max_retries: int = 0,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    label: str = "provider call",
    sleep: Callable[[float], Any] = time.sleep,
) -> T:
    """Run ``fn()``; retry transient failures up to ``max_retries`` times."""
    delay = base_delay
    for attempt in range(max_retries + 1):
        try:
            return fn()
        except Exception as exc:
            if not is_retryable(exc) or attempt >= max_retries:
                raise
            logger.warning(
                "%s failed (attempt %d/%d): %s — retrying in %.1fs",
                label, attempt + 1, max_retries + 1, exc, delay,
            )
            sleep(delay)
            delay = _next_delay(delay, max_delay)
    raise AssertionError("unreachable")


async def acall_with_retry(
    fn: Callable[[], Awaitable[T]],
    *,
    max_retries: int = 0,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    label: str = "provider call",
) -> T:
    """Async twin of :func:`call_with_retry`; ``fn`` returns a fresh awaitable."""
    delay = base_delay
    for attempt in range(max_retries + 1):
        try:
            return await fn()
        except Exception as exc:
            if not is_retryable(exc) or attempt >= max_retries:
                raise
            logger.warning(
                "%s failed (attempt %d/%d): %s — retrying in %.1fs",
                label, attempt + 1, max_retries + 1, exc, delay,
            )
            await asyncio.sleep(delay)
            delay = _next_delay(delay, max_delay)
    raise AssertionError("unreachable")
