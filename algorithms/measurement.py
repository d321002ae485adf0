"""
Throughput measurement loop.

Keeps up to ``max_concurrency`` downloads in flight against a round-robin
endpoint pool until the measurement window closes, then divides the bytes
received by the time taken.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Set

from common.counters import AtomicCounter, EndpointPool
from common.deadline import Deadline
from common.errors import is_unexpected_error
from common.limiter import ConcurrencyLimiter
from configuration import (
    BITS_PER_BYTE,
    BITS_PER_MEGABIT,
    DRAIN_GRACE_SECONDS,
    MAX_CONCURRENT_REQUESTS,
    MEASUREMENT_SECONDS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MeasurementResult:
    """Aggregate outcome of one measurement run."""

    bytes_received: int
    elapsed_seconds: float
    dispatched: int
    peak_in_flight: int

    @property
    def bytes_per_second(self) -> float:
        if self.elapsed_seconds <= 0:
            return 0.0
        return self.bytes_received / self.elapsed_seconds

    @property
    def megabits_per_second(self) -> float:
        return self.bytes_per_second * BITS_PER_BYTE / BITS_PER_MEGABIT


class ThroughputMeasurement:
    """Coordinates concurrent, deadline-bounded downloads into one throughput figure."""

    def __init__(
        self,
        url_source,
        fetcher,
        max_concurrency: int = None,
        duration_seconds: float = None,
        drain_grace_seconds: float = None,
    ):
        """Initialize the measurement.

        Args:
            url_source: Object with an async ``list_endpoints()`` returning URLs
            fetcher: Object with an async ``fetch(deadline, url)`` returning a byte count
            max_concurrency: Maximum in-flight downloads (default: from configuration)
            duration_seconds: Length of the measurement window (default: from configuration)
            drain_grace_seconds: Time in-flight downloads get to report after the window
                closes before they are cancelled (default: from configuration)
        """
        self.url_source = url_source
        self.fetcher = fetcher
        self.max_concurrency = max_concurrency if max_concurrency is not None else MAX_CONCURRENT_REQUESTS
        self.duration_seconds = duration_seconds if duration_seconds is not None else MEASUREMENT_SECONDS
        self.drain_grace_seconds = (
            drain_grace_seconds if drain_grace_seconds is not None else DRAIN_GRACE_SECONDS
        )

    async def measure(self) -> float:
        """Run one measurement and return the throughput in bytes per second."""
        result = await self.run()
        return result.bytes_per_second

    async def run(self) -> MeasurementResult:
        """Run one measurement.

        Raises:
            EmptyEndpointPoolError: If the URL source returned no endpoints
            Exception: The first unexpected error hit by any download; the run is
                abandoned and no throughput is reported
        """
        pool = EndpointPool(await self.url_source.list_endpoints())
        limiter = ConcurrencyLimiter(self.max_concurrency)
        dispatch = AtomicCounter()
        total_bytes = AtomicCounter()
        tasks: Set[asyncio.Task] = set()
        failures: List[Exception] = []

        logger.info(
            f"Starting measurement: {len(pool)} endpoints, "
            f"{self.max_concurrency} connections, {self.duration_seconds}s window"
        )

        deadline = Deadline(self.duration_seconds)

        async def download(url: str):
            try:
                received = await self.fetcher.fetch(deadline, url)
            except Exception as e:
                if is_unexpected_error(e, deadline):
                    # Recorded before the slot is released so the loop sees it on wake-up
                    failures.append(e)
                    raise
                received = getattr(e, "bytes_received", 0)
            finally:
                limiter.release()
            total_bytes.add(received)

        def finished(task: asyncio.Task):
            tasks.discard(task)
            if not task.cancelled():
                task.exception()

        try:
            while not deadline.expired() and not failures:
                try:
                    await limiter.acquire(deadline)
                except Exception as e:
                    if is_unexpected_error(e, deadline):
                        raise
                    break

                if failures:
                    limiter.release()
                    break

                url = pool.select(dispatch.get_and_increment())
                task = asyncio.create_task(download(url))
                tasks.add(task)
                task.add_done_callback(finished)

            if tasks and not failures:
                _, pending = await asyncio.wait(
                    set(tasks),
                    timeout=deadline.remaining() + self.drain_grace_seconds,
                    return_when=asyncio.FIRST_EXCEPTION,
                )
                if pending and not failures:
                    logger.debug(f"Cutting off {len(pending)} downloads still running after the window")

            if failures:
                logger.error(f"Measurement aborted: {failures[0]}")
                raise failures[0]

            elapsed = deadline.elapsed()
        finally:
            for task in list(tasks):
                if not task.done():
                    task.cancel()

        result = MeasurementResult(
            bytes_received=total_bytes.value,
            elapsed_seconds=elapsed,
            dispatched=dispatch.value,
            peak_in_flight=limiter.peak_in_flight(),
        )
        logger.info(
            f"Measurement completed: {result.bytes_received} bytes in {elapsed:.2f}s "
            f"({result.megabits_per_second:.1f} Mbps, {result.dispatched} requests)"
        )
        return result
