"""Utility functions for the hand recorder."""

from .logging_utils import setup_logging, SessionLogger
from .validation import TableConfigValidator, ActionLogValidator
from .performance import PerformanceMonitor

__all__ = [
    'setup_logging', 'SessionLogger',
    'TableConfigValidator', 'ActionLogValidator',
    'PerformanceMonitor',
]
