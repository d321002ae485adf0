"""
Shared counters and the endpoint pool used by the measurement loop.
"""

import threading
from typing import Iterable, Tuple

from common.errors import EmptyEndpointPoolError


class AtomicCounter:
    """An integer counter safe to update from concurrent workers."""

    def __init__(self, initial: int = 0):
        self._value = initial
        self._lock = threading.Lock()

    def add(self, amount: int) -> int:
        """Add amount to the counter and return the new value."""
        with self._lock:
            self._value += amount
            return self._value

    def get_and_increment(self) -> int:
        """Increment the counter and return the value it had before."""
        with self._lock:
            previous = self._value
            self._value += 1
            return previous

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"AtomicCounter({self.value})"


class EndpointPool:
    """Immutable, ordered set of download URLs selected round-robin."""

    def __init__(self, urls: Iterable[str]):
        """Build the pool.

        Args:
            urls: Endpoint URLs in the order they should be visited

        Raises:
            EmptyEndpointPoolError: If no URLs were given
        """
        self._urls: Tuple[str, ...] = tuple(urls)
        if not self._urls:
            raise EmptyEndpointPoolError("endpoint pool is empty, nothing to measure against")

    @property
    def urls(self) -> Tuple[str, ...]:
        return self._urls

    def select(self, sequence_number: int) -> str:
        """Return the endpoint serving the given dispatch sequence number."""
        return self._urls[sequence_number % len(self._urls)]

    def __len__(self) -> int:
        return len(self._urls)

    def __repr__(self) -> str:
        return f"EndpointPool(size={len(self._urls)})"
