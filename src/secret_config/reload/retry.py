"""Reload – FetchRetryPolicy backed by tenacity.

Retries a single ``get_secret`` call inside one reload attempt. It does not
add backoff between reloads; a reload that still fails after the last
attempt is reported and retried on the next tick.
"""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import tenacity

from secret_config.errors import RETRYABLE_STORE_ERRORS, error_log_fields
from secret_config.observability import get_logger

T = TypeVar("T")
logger = get_logger(__name__)


class FetchRetryPolicy:
    """Retry policy for throttled or transient store errors.

    Parameters
    ----------
    max_attempts:
        Maximum number of call attempts (including the first call).
    max_wait:
        Cap, in seconds, on the exponential wait between attempts.
    retryable:
        Exception types worth retrying. Defaults to
        :data:`~secret_config.errors.RETRYABLE_STORE_ERRORS`.
    kwargs:
        Additional keyword arguments forwarded to
        :class:`tenacity.AsyncRetrying` (e.g. ``sleep`` in tests).
    """

    def __init__(
        self,
        max_attempts: int = 1,
        max_wait: float = 2.0,
        retryable: tuple[type[BaseException], ...] = RETRYABLE_STORE_ERRORS,
        **kwargs: Any,
    ) -> None:
        self._max_attempts = max_attempts
        self._wait = tenacity.wait_exponential(multiplier=0.1, max=max_wait)
        self._retry = tenacity.retry_if_exception_type(retryable)
        self._extra_kwargs = kwargs

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def _before_sleep(self, retry_state: tenacity.RetryCallState) -> None:
        outcome = retry_state.outcome
        logger.debug(
            "secret_config.fetch_retry",
            attempt=retry_state.attempt_number,
            exc=repr(outcome.exception()) if outcome is not None else None,
            **error_log_fields(outcome.exception() if outcome is not None else None),
        )

    def _build_async_retrying(self) -> tenacity.AsyncRetrying:
        return tenacity.AsyncRetrying(
            stop=tenacity.stop_after_attempt(self._max_attempts),
            wait=self._wait,
            retry=self._retry,
            reraise=True,
            before_sleep=self._before_sleep,
            **self._extra_kwargs,
        )

    async def execute_async(self, func: Callable[[], Awaitable[T]]) -> T:
        """Execute *func* with retry; the last error propagates unchanged."""
        if self._max_attempts <= 1:
            return await func()
        async for attempt in self._build_async_retrying():
            with attempt:
                result = await func()
        return result  # type: ignore[return-value]


__all__ = ["FetchRetryPolicy"]
