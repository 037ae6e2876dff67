# ========================
# src/utils/__init__.py
# ========================

"""
Utilities Package

Common utilities and helper functions for the lexicon viewer.
"""

from .config import Config, EXCLUDED_HEADERS, SORTABLE_HEADERS, GLOSS_HEADER
from .performance_monitor import monitor_performance, PerformanceMonitor
from .logging_setup import setup_logging
from .debounce import Debouncer

__all__ = [
    'Config',
    'EXCLUDED_HEADERS',
    'SORTABLE_HEADERS',
    'GLOSS_HEADER',
    'monitor_performance',
    'PerformanceMonitor',
    'setup_logging',
    'Debouncer'
]
