"""Bounded retry with exponential backoff.

Requests to GitHub are never retried on their own: a failed write is reported
to the caller straight away. The one place that polls is the version token
refetch after an image commit, where a read may briefly miss a commit that has
not propagated yet. RetryManager drives that poll.
"""

import logging
import time
from typing import Callable, TypeVar, Optional, List, Tuple, Type

from ..exceptions import MaxRetriesExceededError

T = TypeVar("T")

logger = logging.getLogger(__name__)


class RetryManager:
    """Manages retry logic with exponential backoff."""

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 10.0,
        backoff_factor: float = 2.0,
        retry_on: Tuple[Type[Exception], ...] = (),
    ) -> None:
        """Initialize retry manager.

        Args:
            max_retries: Maximum number of retry attempts after the first call
            base_delay: Base delay in seconds
            max_delay: Maximum delay in seconds
            backoff_factor: Multiplier for exponential backoff
            retry_on: Exception types that trigger a retry
        """
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.backoff_factor = backoff_factor

        self._retry_conditions: List[Callable[[Exception], bool]] = []
        if retry_on:
            self.add_retry_condition(lambda exc: isinstance(exc, retry_on))

    def add_retry_condition(self, condition: Callable[[Exception], bool]) -> None:
        """Add a condition for when to retry.

        Args:
            condition: Function that takes an exception and returns True if should retry
        """
        self._retry_conditions.append(condition)

    def should_retry(self, exception: Exception) -> bool:
        """Check if an exception should trigger a retry."""
        return any(condition(exception) for condition in self._retry_conditions)

    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay for a retry attempt.

        Args:
            attempt: Attempt number (0-based)

        Returns:
            Delay in seconds
        """
        return min(self.base_delay * (self.backoff_factor ** attempt), self.max_delay)

    def execute_with_retry(self, operation: Callable[[], T]) -> T:
        """Execute an operation with retry logic.

        Exceptions that match no retry condition propagate unchanged.

        Args:
            operation: Function to execute

        Returns:
            Result of the operation

        Raises:
            MaxRetriesExceededError: If every attempt failed with a retryable error
        """
        last_exception: Optional[Exception] = None

        for attempt in range(self.max_retries + 1):
            try:
                return operation()

            except Exception as e:
                if not self.should_retry(e):
                    raise

                last_exception = e
                if attempt == self.max_retries:
                    break

                delay = self.calculate_delay(attempt)
                logger.debug("Attempt %d failed (%s), retrying in %.1fs", attempt + 1, e, delay)

                time.sleep(delay)

        raise MaxRetriesExceededError(
            f"Maximum retries ({self.max_retries}) exceeded",
            attempts=self.max_retries + 1,
            last_exception=last_exception,
        )
