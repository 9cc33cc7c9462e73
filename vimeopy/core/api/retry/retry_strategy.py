"""Retry strategies using Strategy Pattern."""
import time
import asyncio
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional


class RetryStrategy(ABC):
    """Abstract retry strategy."""

    @abstractmethod
    def start(self) -> None:
        """Marks the first attempt."""
        pass

    @abstractmethod
    def should_retry(self, error: Exception) -> bool:
        """Determines if the failed call should be attempted again."""
        pass

    @abstractmethod
    async def wait_async(self) -> None:
        """Waits before retry (async)."""
        pass


class FixedDelayRetryStrategy(RetryStrategy):
    """
    Fixed delay retry bounded by wall-clock time.

    Retries while less than `deadline` seconds have elapsed since start().
    Clock and sleep are injectable so callers can be tested without waiting.
    """

    def __init__(
        self,
        delay: float = 1.0,
        deadline: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None
    ):
        if delay < 0 or deadline < 0:
            raise ValueError("Delay and deadline must not be negative")
        self.delay = delay
        self.deadline = deadline
        self._clock = clock
        self._sleep = sleep or asyncio.sleep
        self._started_at: Optional[float] = None
        self.attempts = 0

    @property
    def elapsed(self) -> float:
        """Seconds since start()."""
        if self._started_at is None:
            return 0.0
        return self._clock() - self._started_at

    def start(self) -> None:
        self._started_at = self._clock()
        self.attempts = 0

    def should_retry(self, error: Exception) -> bool:
        """Retries any error until the deadline passes."""
        self.attempts += 1
        return self.elapsed < self.deadline

    async def wait_async(self) -> None:
        await self._sleep(self.delay)
