"""
Retry/backoff policy for remote hosting calls.

Wraps an operation that raises ``ClassifiedError`` and retries it with bounded
exponential backoff, but only while the error says it is retryable. The caller
only ever sees the last failure.
"""

import random
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from scaffolder.exceptions import ClassifiedError
from scaffolder.logging import get_logger

T = TypeVar("T")

logger = get_logger("retry")


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 2
    backoff_factor: float = 2.0
    initial_backoff: float = 0.5  # Wait before the first retry, in seconds
    max_backoff: float = 30.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)
    respect_retry_after: bool = True


class RetryPolicy:
    """
    Bounded exponential backoff on retryable classified errors.

    Example:
        ```python
        policy = RetryPolicy(RetryConfig(max_retries=2))
        url = policy.run(lambda: client.create_once(spec), "create repository")
        ```
    """

    def __init__(
        self,
        config: RetryConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize the policy.

        Args:
            config: Retry configuration (default: 2 retries, factor 2.0)
            sleep: Function used to wait between attempts
        """
        self.config = config or RetryConfig()
        self._sleep = sleep

    def run(self, operation: Callable[[], T], description: str | None = None) -> T:
        """
        Run an operation, retrying retryable failures.

        Args:
            operation: Zero-argument callable performing one attempt
            description: Short label used in log messages

        Returns:
            The operation's result

        Raises:
            ClassifiedError: The terminal failure, after retries are exhausted
                or as soon as a non-retryable error occurs
        """
        label = description or getattr(operation, "__name__", "operation")
        attempt = 0

        while True:
            try:
                return operation()
            except ClassifiedError as error:
                if not self._should_retry(error, attempt):
                    raise

                wait_time = self._get_backoff_time(attempt, error.retry_after)
                logger.warning(
                    f"{label} failed with {error.kind.name} "
                    f"(attempt {attempt + 1}/{self.config.max_retries + 1}), "
                    f"retrying in {wait_time:.2f}s"
                )
                self._sleep(wait_time)
                attempt += 1

    def _should_retry(self, error: ClassifiedError, attempt: int) -> bool:
        """
        Determine if a failed attempt should be retried.

        Args:
            error: The classified failure
            attempt: Current attempt number (0-indexed)

        Returns:
            True if the operation should be retried
        """
        if attempt >= self.config.max_retries:
            return False

        return error.retryable

    def _get_backoff_time(self, attempt: int, retry_after: float | None) -> float:
        """
        Calculate backoff time for a retry.

        Uses exponential backoff with jitter, respecting a server supplied
        retry hint if present.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Delay hint carried by the error (if any)

        Returns:
            Time to wait in seconds
        """
        if retry_after is not None and self.config.respect_retry_after:
            return min(max(float(retry_after), 0.0), self.config.max_backoff)

        base_wait = self.config.initial_backoff * self.config.backoff_factor ** attempt

        jitter_range = base_wait * self.config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        return min(wait_time, self.config.max_backoff)
