"""
Measurement algorithms for the fast.com benchmark.
"""

from .downloader import StreamingDownloader
from .measurement import MeasurementResult, ThroughputMeasurement

__all__ = ['MeasurementResult', 'StreamingDownloader', 'ThroughputMeasurement']
