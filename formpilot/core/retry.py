"""Bounded retry with exponential backoff around fallible async actions.

Every interaction primitive (click, type, select, upload, smart-select,
check, toggle) is exactly one ``RetryExecutor.execute`` call. Screenshots
and logging never go through here.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from formpilot.core.errors import NoMatchFound, ProfileValidationError, RetryExhausted
from formpilot.core.schemas import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]

# Retrying an unchanged DOM against an unchanged target cannot succeed.
NON_RETRYABLE: tuple[type[BaseException], ...] = (NoMatchFound, ProfileValidationError)


async def _asyncio_sleep(seconds: float) -> None:
    await asyncio.sleep(seconds)


class RetryExecutor:
    """Runs zero-argument coroutine functions under a RetryPolicy.

    Args:
        policy: Default policy (3 attempts, 1000ms base → 1s, 2s, 4s).
        sleep: Async sleep primitive taking seconds. Defaults to asyncio.sleep.
    """

    def __init__(self, policy: RetryPolicy | None = None, *, sleep: Sleep | None = None) -> None:
        self._policy = policy or RetryPolicy()
        self._sleep = sleep or _asyncio_sleep

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def execute(
        self,
        action: Callable[[], Awaitable[T]],
        label: str,
        policy: RetryPolicy | None = None,
    ) -> T:
        """Run ``action`` until it succeeds or the policy is exhausted.

        Raises:
            RetryExhausted: after ``max_attempts`` failures, chained from the
                last underlying error.
            NoMatchFound, ProfileValidationError: immediately, unwrapped.
        """
        policy = policy or self._policy
        retrying = AsyncRetrying(
            sleep=self._sleep,
            stop=stop_after_attempt(policy.max_attempts),
            wait=wait_exponential(multiplier=policy.base_delay_ms / 1000, exp_base=2),
            # BaseException (cancellation, KeyboardInterrupt) propagates on the first attempt.
            retry=retry_if_exception_type(Exception) & retry_if_not_exception_type(NON_RETRYABLE),
            before_sleep=self._log_retry(label, policy.max_attempts),
            reraise=False,
        )
        try:
            return await retrying(action)
        except RetryError as e:
            last_error = e.last_attempt.exception()
            logger.error("Giving up on %s after %d attempts: %s", label, policy.max_attempts, last_error)
            raise RetryExhausted(label, policy.max_attempts, last_error) from last_error

    @staticmethod
    def _log_retry(label: str, max_attempts: int) -> Callable[[RetryCallState], None]:
        def before_sleep(state: RetryCallState) -> None:
            delay_ms = int(state.next_action.sleep * 1000) if state.next_action else 0
            error = state.outcome.exception() if state.outcome else None
            logger.warning(
                "Retry %d/%d for %s after %dms: %s",
                state.attempt_number, max_attempts, label, delay_ms, error,
            )

        return before_sleep
