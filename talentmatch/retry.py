"""
Retry and circuit-breaking for calls to the AI parsing service.

A RetryPolicy describes how often and how patiently a call is retried;
``with_retries`` applies it to a function. A CircuitBreaker sits in front
of the whole retried call so a dead service is skipped instead of being
retried for every résumé.
"""

import functools
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterator, Optional, Tuple, Type

from .logger import get_logger

logger = get_logger()

RETRYABLE_STATUS_CODES = frozenset({
    408,  # Request Timeout
    429,  # Too Many Requests
    500,  # Internal Server Error
    502,  # Bad Gateway
    503,  # Service Unavailable
    504,  # Gateway Timeout
})


class RetryError(Exception):
    """Raised when all retry attempts are exhausted."""

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts


class CircuitOpenError(Exception):
    """Raised when a call is blocked by an open circuit breaker."""
    pass


@dataclass(frozen=True)
class RetryPolicy:
    """
    Exponential backoff settings.

    Attributes:
        max_retries: Retries after the first attempt (0 = single attempt)
        base_delay: Delay before the first retry, in seconds
        max_delay: Upper bound for any single delay
        exponential_base: Growth factor between consecutive delays
    """

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 60.0
    exponential_base: float = 2.0

    def delays(self) -> Iterator[float]:
        """Delays to sleep before each retry, in order."""
        delay = self.base_delay
        for _ in range(self.max_retries):
            yield min(delay, self.max_delay)
            delay *= self.exponential_base

    @property
    def attempts(self) -> int:
        return self.max_retries + 1


def with_retries(
    policy: RetryPolicy,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    on_retry: Optional[Callable] = None,
    sleep: Callable[[float], None] = time.sleep,
):
    """
    Decorator retrying a function under a RetryPolicy.

    Only ``exceptions`` trigger a retry; anything else propagates at once.
    After the last attempt a RetryError is raised from the final error.

    Args:
        policy: Backoff settings
        exceptions: Exception types that are retried
        on_retry: Optional callback(attempt, exception, delay)
        sleep: Sleep function (replaced in tests)

    Example:
        @with_retries(RetryPolicy(max_retries=2), exceptions=(ConnectionError,))
        def fetch_resume(username):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            delays = policy.delays()
            attempt = 0
            while True:
                attempt += 1
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    delay = next(delays, None)
                    if delay is None:
                        raise RetryError(
                            f"Failed after {attempt} attempts: {e}", attempts=attempt
                        ) from e
                    if on_retry:
                        on_retry(attempt, e, delay)
                    sleep(delay)

        return wrapper
    return decorator


class CircuitBreaker:
    """
    Stops calling a failing service until it has had time to recover.

    States:
    - CLOSED: Normal operation, calls pass through
    - OPEN: Too many consecutive failures, calls are blocked
    - HALF_OPEN: One trial call is let through; a failure reopens the circuit
    """

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

    def __init__(
        self,
        name: str = "service",
        failure_threshold: int = 5,
        recovery_timeout: float = 60,
        expected_exception: Type[Exception] = Exception,
    ):
        """
        Args:
            name: Label used in log messages
            failure_threshold: Consecutive failures before opening
            recovery_timeout: Seconds to wait before a trial call
            expected_exception: Exception type that counts as a failure
        """
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.expected_exception = expected_exception

        self.failure_count = 0
        self.last_failure_time: Optional[datetime] = None
        self.state = self.CLOSED

    def call(self, func: Callable, *args, **kwargs):
        """
        Execute function with circuit breaker protection.

        Raises:
            CircuitOpenError: If the circuit is OPEN
            Original exception: If the function fails
        """
        if self.state == self.OPEN:
            if self.seconds_until_trial() > 0:
                raise CircuitOpenError(
                    f"Circuit breaker is OPEN for {self.name}. "
                    f"Retry after {self.seconds_until_trial():.0f}s"
                )
            self._transition(self.HALF_OPEN)

        try:
            result = func(*args, **kwargs)
        except self.expected_exception:
            self._on_failure()
            raise

        self.failure_count = 0
        if self.state != self.CLOSED:
            self._transition(self.CLOSED)
        return result

    def seconds_until_trial(self) -> float:
        """Seconds left before an OPEN circuit lets a trial call through."""
        if self.last_failure_time is None:
            return 0.0
        elapsed = (datetime.now() - self.last_failure_time).total_seconds()
        return max(0.0, self.recovery_timeout - elapsed)

    def _on_failure(self):
        self.failure_count += 1
        self.last_failure_time = datetime.now()

        if self.state == self.HALF_OPEN or self.failure_count >= self.failure_threshold:
            self._transition(self.OPEN)

    def _transition(self, state: str):
        logger.info(
            "Circuit breaker state change",
            breaker=self.name,
            old=self.state,
            new=state,
            failures=self.failure_count,
        )
        self.state = state

    def reset(self):
        """Manually close the circuit."""
        self.failure_count = 0
        self.last_failure_time = None
        self.state = self.CLOSED


def is_retryable_status(status_code: int) -> bool:
    """True for HTTP statuses worth retrying (timeouts, throttling, 5xx gateways)."""
    return status_code in RETRYABLE_STATUS_CODES
