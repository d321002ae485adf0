"""
Tests for the Prometheus exporter.
"""

import asyncio
import math
import os
import sys
import unittest
from unittest.mock import patch

from prometheus_client import CollectorRegistry

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.errors import NoURLsFoundError
from configuration import EXPORTER_PORT, REFRESH_INTERVAL_SECONDS
from observability.exporter import FastExporter


class FakeMeasurement:
    def __init__(self, throughput=None, error=None):
        self.throughput = throughput
        self.error = error

    async def measure(self):
        if self.error:
            raise self.error
        return self.throughput


class TestFastExporter(unittest.IsolatedAsyncioTestCase):
    """Test metric updates after successful and failed measurements."""

    def setUp(self):
        self.registry = CollectorRegistry()

    def sample(self, name, labels=None):
        return self.registry.get_sample_value(name, labels or {})

    async def test_successful_refresh(self):
        exporter = FastExporter(lambda: FakeMeasurement(throughput=12_345_678.0), registry=self.registry)

        throughput = await exporter.refresh()

        self.assertEqual(throughput, 12_345_678.0)
        self.assertEqual(self.sample('fastcom_download_bytes_per_second'), 12_345_678.0)
        self.assertEqual(self.sample('fastcom_up'), 1.0)
        self.assertEqual(self.sample('fastcom_measurements_total', {'result': 'success'}), 1.0)
        self.assertGreater(self.sample('fastcom_last_measurement_timestamp_seconds'), 0)
        self.assertGreaterEqual(self.sample('fastcom_measurement_duration_seconds'), 0)

    async def test_failed_refresh_clears_last_speed(self):
        results = [FakeMeasurement(throughput=500.0), FakeMeasurement(error=NoURLsFoundError("http://api"))]
        exporter = FastExporter(lambda: results.pop(0), registry=self.registry)

        await exporter.refresh()
        with self.assertLogs('observability.exporter', level='ERROR'):
            throughput = await exporter.refresh()

        self.assertIsNone(throughput)
        self.assertEqual(self.sample('fastcom_up'), 0.0)
        self.assertTrue(math.isnan(self.sample('fastcom_download_bytes_per_second')))
        self.assertEqual(self.sample('fastcom_measurements_total', {'result': 'failure'}), 1.0)
        self.assertEqual(self.sample('fastcom_measurements_total', {'result': 'success'}), 1.0)

    def test_zero_settings_are_kept(self):
        exporter = FastExporter(lambda: FakeMeasurement(throughput=1.0), port=0, refresh_interval_seconds=0,
                                registry=self.registry)

        self.assertEqual(exporter.port, 0)
        self.assertEqual(exporter.refresh_interval_seconds, 0)

    def test_defaults_from_configuration(self):
        exporter = FastExporter(lambda: FakeMeasurement(throughput=1.0), registry=self.registry)

        self.assertEqual(exporter.port, EXPORTER_PORT)
        self.assertEqual(exporter.refresh_interval_seconds, REFRESH_INTERVAL_SECONDS)

    async def test_run_forever_refreshes_periodically(self):
        exporter = FastExporter(
            lambda: FakeMeasurement(throughput=1.0),
            port=19876,
            refresh_interval_seconds=0.01,
            registry=self.registry,
        )

        with patch('observability.exporter.start_http_server') as mock_server:
            task = asyncio.create_task(exporter.run_forever())
            await asyncio.sleep(0.1)
            task.cancel()
            with self.assertRaises(asyncio.CancelledError):
                await task

        mock_server.assert_called_once_with(19876, registry=self.registry)
        self.assertGreaterEqual(self.sample('fastcom_measurements_total', {'result': 'success'}), 2.0)


if __name__ == '__main__':
    unittest.main()
