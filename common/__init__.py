"""
Common utilities for the fast.com benchmark.
"""

from .counters import AtomicCounter, EndpointPool
from .deadline import Deadline
from .limiter import ConcurrencyLimiter

__all__ = ['AtomicCounter', 'ConcurrencyLimiter', 'Deadline', 'EndpointPool']
