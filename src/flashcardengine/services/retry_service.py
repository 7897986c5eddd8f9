"""Retry service with jittered exponential backoff for provider calls."""

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
)
from tenacity.wait import wait_base

from flashcardengine.models.errors import (
    ErrorCode,
    OpenRouterError,
    OpenRouterNetworkError,
    OpenRouterRateLimitError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

BASE_DELAY_SECONDS = 1.0
MAX_DELAY_SECONDS = 30.0
JITTER_RANGE = (0.8, 1.2)


def calculate_backoff(attempt: int, jitter: bool = True) -> float:
    """
    Delay in seconds to wait after the given (1-based) failed attempt.

    ``min(1 * 2^(attempt-1), 30)`` scaled by a uniform multiplier in [0.8, 1.2].
    """
    delay = min(BASE_DELAY_SECONDS * (2 ** (attempt - 1)), MAX_DELAY_SECONDS)
    if jitter:
        delay *= random.uniform(*JITTER_RANGE)
    return delay


class JitteredExponentialBackoff(wait_base):
    """Tenacity wait strategy backed by calculate_backoff."""

    def __init__(self, jitter: bool = True):
        self.jitter = jitter

    def __call__(self, retry_state: RetryCallState) -> float:
        return calculate_backoff(retry_state.attempt_number, jitter=self.jitter)


def should_retry(exception: BaseException) -> bool:
    """Only typed, retryable client errors are retried; anything else surfaces at once."""
    return isinstance(exception, OpenRouterError) and exception.retryable


async def _sleep(seconds: float) -> None:
    await asyncio.sleep(seconds)


def _log_before_sleep(retry_state: RetryCallState) -> None:
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
    code = exception.code.value if isinstance(exception, OpenRouterError) else "UNKNOWN"
    extra = ""
    if isinstance(exception, OpenRouterRateLimitError):
        # retry_after is reported but the sleep still follows the backoff formula
        extra = f" (provider asked for {exception.retry_after}s)"
    logger.warning(
        f"🔁 [RetryService] Attempt {retry_state.attempt_number} failed with {code}, "
        f"retrying in {delay:.2f}s{extra}"
    )


async def retry_with_backoff(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    max_attempts: int = 3,
    timeout_seconds: float | None = None,
    wait: wait_base | None = None,
    **kwargs: Any,
) -> T:
    """
    Execute an async function with retry logic and exponential backoff.

    Args:
        func: Async function to execute (one attempt per call)
        *args: Positional arguments for func
        max_attempts: Total attempts including the first call
        timeout_seconds: Optional deadline per attempt. Exceeding it counts as a TIMEOUT attempt.
        wait: Optional wait strategy. Defaults to JitteredExponentialBackoff.
        **kwargs: Keyword arguments for func

    Returns:
        Result from func

    Raises:
        OpenRouterError: The last classified error once it is terminal or attempts are exhausted
        Exception: Untyped exceptions are re-raised immediately
    """

    async def _execute_with_timeout() -> T:
        """Execute func with optional timeout."""
        if timeout_seconds is None:
            return await func(*args, **kwargs)
        try:
            return await asyncio.wait_for(func(*args, **kwargs), timeout=timeout_seconds)
        except asyncio.TimeoutError as e:
            raise OpenRouterNetworkError(
                f"Request timed out after {timeout_seconds}s",
                ErrorCode.TIMEOUT,
                cause=e,
            ) from e

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait or JitteredExponentialBackoff(),
        retry=retry_if_exception(should_retry),
        before_sleep=_log_before_sleep,
        sleep=_sleep,
        reraise=True,
    )

    async for attempt in retrying:
        with attempt:
            return await _execute_with_timeout()

    # AsyncRetrying either returns or re-raises; kept for type checkers
    raise OpenRouterError("Max retries exceeded", ErrorCode.UNKNOWN_ERROR)
