"""
Concurrency limiter bounding the number of in-flight downloads.
"""

import asyncio
import logging

from common.deadline import Deadline
from common.errors import DeadlineExceeded

logger = logging.getLogger(__name__)


class ConcurrencyLimiter:
    """An async semaphore whose acquisition is bounded by a Deadline."""

    def __init__(self, permits: int):
        """Initialize the limiter with the given number of permits.

        Args:
            permits: Maximum number of concurrently held slots

        Raises:
            ValueError: If permits is lower than 1
        """
        if permits < 1:
            raise ValueError(f"Limiter needs at least one permit, got {permits}")

        self._max_permits = permits
        self._semaphore = asyncio.Semaphore(permits)
        self._in_flight = 0
        self._peak_in_flight = 0

        logger.debug(f"Initialized ConcurrencyLimiter with {permits} permits")

    async def acquire(self, deadline: Deadline) -> None:
        """Acquire a slot, waiting no longer than the deadline allows.

        Args:
            deadline: Measurement window bounding the wait

        Raises:
            DeadlineExceeded: If the window closes before a slot frees up
        """
        if deadline.expired():
            raise DeadlineExceeded()
        try:
            await asyncio.wait_for(self._semaphore.acquire(), timeout=deadline.remaining())
        except asyncio.TimeoutError as e:
            raise DeadlineExceeded() from e

        self._in_flight += 1
        self._peak_in_flight = max(self._peak_in_flight, self._in_flight)

    def release(self) -> None:
        """Release a slot back to the limiter."""
        if self._in_flight == 0:
            logger.warning("Attempted to release limiter when in_flight is 0")
            return
        self._in_flight -= 1
        self._semaphore.release()

    def in_flight(self) -> int:
        return self._in_flight

    def peak_in_flight(self) -> int:
        """Highest number of slots held at the same time."""
        return self._peak_in_flight

    def available_permits(self) -> int:
        return self._max_permits - self._in_flight

    def max_permits(self) -> int:
        return self._max_permits

    def __repr__(self) -> str:
        return (
            f"ConcurrencyLimiter(permits={self.available_permits()}/{self._max_permits}, "
            f"in_flight={self._in_flight})"
        )
