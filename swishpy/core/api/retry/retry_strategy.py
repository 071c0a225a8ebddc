"""Retry strategies using Strategy Pattern."""
import asyncio
from abc import ABC, abstractmethod

from ..config import RetryConfig


class RetryStrategy(ABC):
    """Abstract retry strategy."""

    @abstractmethod
    def should_retry(self, status_code: int, retry_count: int) -> bool:
        """Determines if request should be retried."""
        pass

    @abstractmethod
    def delay(self, retry_count: int) -> float:
        """Seconds to wait before retry number retry_count + 1."""
        pass

    @property
    def max_total_delay(self) -> float:
        """Upper bound on the time spent waiting across all retries."""
        return float('inf')

    async def wait_async(self, retry_count: int):
        """Waits before retry (async)."""
        backoff_time = self.delay(retry_count)
        if backoff_time > 0:
            await asyncio.sleep(backoff_time)


class NoRetryStrategy(RetryStrategy):
    """Never retries. Used for GET requests."""

    def should_retry(self, status_code: int, retry_count: int) -> bool:
        return False

    def delay(self, retry_count: int) -> float:
        return 0.0


class ExponentialBackoffStrategy(RetryStrategy):
    """Retries error statuses (>= 400) with exponential backoff."""

    def __init__(self, config: RetryConfig = None):
        self._config = config or RetryConfig()

    @property
    def max_retries(self) -> int:
        return self._config.max_retries

    @property
    def max_total_delay(self) -> float:
        return self._config.max_total_delay

    def should_retry(self, status_code: int, retry_count: int) -> bool:
        """Retries any error status until max_retries extra attempts were made."""
        return status_code >= 400 and retry_count < self._config.max_retries

    def delay(self, retry_count: int) -> float:
        """Waits with exponential backoff."""
        return self._config.calculate_delay(retry_count)
