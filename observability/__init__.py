"""
Metrics export for the fast.com benchmark.
"""

from .exporter import FastExporter

__all__ = ['FastExporter']
