"""
Prometheus exporter publishing periodic fast.com throughput measurements.
"""

import asyncio
import logging
import time
from typing import Callable, Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, start_http_server

from algorithms.measurement import ThroughputMeasurement
from configuration import EXPORTER_PORT, REFRESH_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class FastExporter:
    """Runs a measurement every refresh interval and exposes the latest result."""

    def __init__(
        self,
        measurement_factory: Callable[[], ThroughputMeasurement],
        port: int = None,
        refresh_interval_seconds: float = None,
        registry: CollectorRegistry = REGISTRY,
    ):
        """Initialize the exporter.

        Args:
            measurement_factory: Returns a fresh measurement for each refresh
            port: Port to serve metrics on (default: from configuration)
            refresh_interval_seconds: Pause between measurements (default: from configuration)
            registry: Registry the metrics are registered with
        """
        self.measurement_factory = measurement_factory
        self.port = port if port is not None else EXPORTER_PORT
        self.refresh_interval_seconds = (
            refresh_interval_seconds if refresh_interval_seconds is not None else REFRESH_INTERVAL_SECONDS
        )
        self.registry = registry
        self.server_started = False

        self.download_speed = Gauge(
            'fastcom_download_bytes_per_second',
            'Download throughput measured against fast.com in bytes per second',
            registry=registry,
        )
        self.up = Gauge('fastcom_up', 'Whether the last measurement succeeded', registry=registry)
        self.last_measurement = Gauge(
            'fastcom_last_measurement_timestamp_seconds',
            'Unix time the last measurement finished',
            registry=registry,
        )
        self.measurement_duration = Gauge(
            'fastcom_measurement_duration_seconds',
            'Wall time taken by the last measurement, endpoint discovery included',
            registry=registry,
        )
        self.measurements_total = Counter(
            'fastcom_measurements_total', 'Measurements run', ['result'], registry=registry
        )

    def start_server(self):
        """Start the Prometheus HTTP server."""
        if not self.server_started:
            start_http_server(self.port, registry=self.registry)
            self.server_started = True
            logger.info(f"Prometheus server started on port {self.port}")

    async def refresh(self) -> Optional[float]:
        """Run one measurement and update the metrics.

        A failed measurement sets the speed gauge to NaN so the previous
        reading is not served as current.

        Returns:
            Throughput in bytes per second, or None if the measurement failed
        """
        started = time.time()
        try:
            throughput = await self.measurement_factory().measure()
        except Exception as e:
            logger.error(f"Measurement failed: {e}")
            self.download_speed.set(float('nan'))
            self.up.set(0)
            self.measurements_total.labels(result='failure').inc()
            return None
        finally:
            finished = time.time()
            self.measurement_duration.set(finished - started)
            self.last_measurement.set(finished)

        self.download_speed.set(throughput)
        self.up.set(1)
        self.measurements_total.labels(result='success').inc()
        logger.info(f"Download speed: {throughput:.0f} bytes/s")
        return throughput

    async def run_forever(self):
        """Serve metrics and refresh them until cancelled."""
        self.start_server()
        while True:
            await self.refresh()
            logger.debug(f"Next measurement in {self.refresh_interval_seconds:.0f}s")
            await asyncio.sleep(self.refresh_interval_seconds)
