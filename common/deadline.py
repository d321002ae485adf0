"""
Measurement window shared by every operation of a single run.
"""

import time


class Deadline:
    """A fixed wall-clock window starting at construction time."""

    def __init__(self, duration_seconds: float):
        """Start the window.

        Args:
            duration_seconds: Length of the window in seconds
        """
        self.duration_seconds = duration_seconds
        self.start = time.monotonic()
        self.expires_at = self.start + duration_seconds

    def remaining(self) -> float:
        """Seconds left before the window closes (never negative)."""
        return max(0.0, self.expires_at - time.monotonic())

    def expired(self) -> bool:
        return time.monotonic() >= self.expires_at

    def elapsed(self) -> float:
        """Seconds since the window opened."""
        return time.monotonic() - self.start

    def __repr__(self) -> str:
        return f"Deadline(duration={self.duration_seconds}s, remaining={self.remaining():.3f}s)"
