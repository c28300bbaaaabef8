"""Resilient Invoker - bounded exponential backoff on rate limits."""

import threading
import time
from collections.abc import Callable
from typing import TypeVar

from uiforge.core import get_logger, OperationCancelled, RateLimitedError, UpstreamExhausted
from uiforge.monitoring import metrics_collector


logger = get_logger(__name__)

T = TypeVar("T")


class ResilientInvoker:
    """
    Wraps a zero-argument provider call with retry on rate limiting.

    Only ``RateLimitedError`` is retried, after sleeping
    ``2 ** (attempt + 1) * backoff_base`` seconds (10s, 20s, 40s with the
    default base of 5). Every other exception propagates on first sight.
    This is the only place in the pipeline that sleeps.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        backoff_base: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be positive")
        self.max_attempts = max_attempts
        self.backoff_base = backoff_base
        self._sleep = sleep

    def backoff_delay(self, attempt: int) -> float:
        """Delay before retrying after the 0-indexed ``attempt`` failed."""
        return (2 ** (attempt + 1)) * self.backoff_base

    def invoke(
        self,
        operation: Callable[[], T],
        max_attempts: int | None = None,
        cancel: threading.Event | None = None,
    ) -> T:
        """
        Run ``operation`` until it succeeds or the attempt budget is spent.

        Args:
            operation: Zero-argument call to a completion provider
            max_attempts: Override for the configured attempt budget
            cancel: Optional cooperative cancellation signal; checked before
                each attempt and interrupts backoff sleeps

        Returns:
            The operation's result

        Raises:
            UpstreamExhausted: Rate limited on every attempt
            OperationCancelled: ``cancel`` was set
        """
        attempts = max_attempts or self.max_attempts
        last_error: RateLimitedError | None = None

        for attempt in range(attempts):
            if cancel is not None and cancel.is_set():
                raise OperationCancelled("Invocation cancelled")

            try:
                return operation()
            except RateLimitedError as e:
                last_error = e
                if attempt == attempts - 1:
                    break
                delay = self.backoff_delay(attempt)
                logger.warning(
                    "rate_limited",
                    attempt=attempt + 1,
                    max_attempts=attempts,
                    retry_in_s=delay,
                    provider=e.provider,
                )
                metrics_collector.record_retry()
                if cancel is not None:
                    if cancel.wait(delay):
                        raise OperationCancelled("Invocation cancelled during backoff") from e
                else:
                    self._sleep(delay)

        logger.error("retries_exhausted", attempts=attempts)
        raise UpstreamExhausted(
            f"Provider still rate limited after {attempts} attempt(s)", attempts=attempts
        ) from last_error
