"""
Endpoint discovery systems for the fast.com benchmark.
"""

from .base import HTTPSystem
from .fast import FastSystem

__all__ = ['FastSystem', 'HTTPSystem']
