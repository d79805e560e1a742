"""Sequential poll-until-ready loop with server-paced backoff."""
from __future__ import annotations

import asyncio
import logging
import math
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PollTimeout(Exception):
    """Raised when the retry budget or the cumulative wait ceiling is spent."""

    def __init__(self, attempts: int, waited: float, reason: str) -> None:
        super().__init__(f"gave up after {attempts} attempts ({waited:.1f}s waited): {reason}")
        self.attempts = attempts
        self.waited = waited
        self.reason = reason


def _usable_wait(hint: object) -> bool:
    return (
        isinstance(hint, (int, float))
        and not isinstance(hint, bool)
        and math.isfinite(hint)
        and hint > 0
    )


async def poll_until_ready(
    send: Callable[[], Awaitable[T]],
    *,
    should_retry: Callable[[T], bool],
    wait_hint: Callable[[T], Optional[float]] | None = None,
    max_retries: int,
    default_wait: float,
    max_wait: float | None = None,
    max_total_wait: float | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Call *send* until *should_retry* says the result is final.

    Parameters
    ----------
    send : callable
        Coroutine factory issuing one attempt.
    should_retry : callable
        Returns True when the result means "not ready, try again".
    wait_hint : callable, optional
        Extracts a server-suggested wait in seconds from a retryable result.
        Missing, non-numeric or non-positive hints fall back to *default_wait*.
    max_retries : int
        Retries allowed after the first attempt. ``max_retries + 1`` attempts
        are made at most.
    max_wait : float, optional
        Ceiling for any single wait.
    max_total_wait : float, optional
        Ceiling for the sum of all waits. The loop gives up instead of
        sleeping past it.

    The loop runs in the calling task; cancelling that task interrupts a
    pending ``send`` or ``sleep``.
    """

    retries = 0
    waited = 0.0
    while True:
        result = await send()
        if not should_retry(result):
            return result

        if retries >= max_retries:
            raise PollTimeout(retries + 1, waited, "retry budget exhausted")

        hint = wait_hint(result) if wait_hint is not None else None
        wait = float(hint) if _usable_wait(hint) else default_wait
        if max_wait is not None:
            wait = min(wait, max_wait)
        if max_total_wait is not None and waited + wait > max_total_wait:
            raise PollTimeout(retries + 1, waited, "cumulative wait ceiling reached")

        retries += 1
        logger.info("Not ready, retry %d/%d in %.1fs", retries, max_retries, wait)
        await sleep(wait)
        waited += wait
