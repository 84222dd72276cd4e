"""Bounded exponential-backoff retry for rate-limited model calls."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from resume_analyzer.exceptions import RateLimitedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy:
    """Retries an async operation only while it fails with RateLimitedError.

    ``max_retries`` counts the retries after the first call, so the default
    of 3 allows up to four calls with sleeps of 1s, 2s and 4s in between.
    Any other failure, or the last rate-limit failure, is re-raised as is.
    """

    def __init__(
        self,
        max_retries: int = 3,
        initial_delay_ms: int = 1000,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.max_retries = max_retries
        self.initial_delay = initial_delay_ms / 1000
        self._sleep = sleep
        self._backoff = wait_exponential(multiplier=self.initial_delay, exp_base=2)

    def _wait(self, retry_state: RetryCallState) -> float:
        delay = self._backoff(retry_state)
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        hint = getattr(exc, "retry_after", None)
        if hint is not None and hint > delay:
            return hint
        return delay

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(RateLimitedError),
            stop=stop_after_attempt(self.max_retries + 1),
            wait=self._wait,
            sleep=self._sleep,
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

        # tenacity only awaits coroutine functions; a lambda returning a
        # coroutine would be called synchronously.
        async def _attempt() -> T:
            return await operation()

        return await retrying(_attempt)
