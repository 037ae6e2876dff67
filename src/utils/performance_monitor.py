# ========================
# src/utils/performance_monitor.py
# ========================

"""
Performance Monitoring Utilities

Times the dataset load and records memory usage while it runs.
"""

import time
import os
import logging
from contextlib import contextmanager
from typing import Dict, Any, Optional

import psutil

logger = logging.getLogger(__name__)

class PerformanceMonitor:
    """
    Tracks elapsed time, rows handled and peak memory for one operation.
    """

    def __init__(self, name: str = "Load"):
        """
        Initialize performance monitor.

        Args:
            name (str): Name for this monitoring session
        """
        self.name = name
        self.start_time = None
        self.end_time = None
        self.peak_memory_mb = 0.0
        self.rows_processed = 0
        self.checkpoints = []

        logger.debug(f"PerformanceMonitor initialized: {name}")

    def start_monitoring(self) -> None:
        """Start performance monitoring."""
        self.start_time = time.perf_counter()
        self.peak_memory_mb = self._get_memory_usage_mb()
        logger.debug(f"{self.name} - monitoring started, memory {self.peak_memory_mb:.2f} MB")

    def update_progress(self, rows: int) -> None:
        """
        Record rows handled since the last update.

        Args:
            rows (int): Number of rows handled
        """
        self.rows_processed += rows
        self.peak_memory_mb = max(self.peak_memory_mb, self._get_memory_usage_mb())

    def add_checkpoint(self, name: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """
        Add a named checkpoint with the time elapsed so far.

        Args:
            name (str): Checkpoint name
            metadata (dict): Optional metadata to store
        """
        checkpoint = {
            'name': name,
            'elapsed_seconds': self.elapsed_seconds,
            'memory_mb': self._get_memory_usage_mb(),
            'rows_processed': self.rows_processed,
            'metadata': metadata or {}
        }
        self.checkpoints.append(checkpoint)
        logger.debug(f"Checkpoint '{name}': {checkpoint}")

    @property
    def elapsed_seconds(self) -> float:
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return end - self.start_time

    def stop_monitoring(self) -> Dict[str, Any]:
        """
        Stop monitoring and return performance summary.

        Returns:
            dict: Performance statistics
        """
        self.end_time = time.perf_counter()
        summary = {
            'name': self.name,
            'elapsed_seconds': self.elapsed_seconds,
            'rows_processed': self.rows_processed,
            'peak_memory_usage_mb': self.peak_memory_mb,
            'checkpoints': self.checkpoints
        }
        logger.info(
            f"{self.name} finished in {summary['elapsed_seconds']:.3f}s, "
            f"{self.rows_processed:,} rows, peak memory {self.peak_memory_mb:.2f} MB"
        )
        return summary

    def _get_memory_usage_mb(self) -> float:
        """Get current resident memory in MB."""
        try:
            return psutil.Process(os.getpid()).memory_info().rss / (1024 * 1024)
        except psutil.Error as e:
            logger.debug(f"Could not get memory usage: {e}")
            return self.peak_memory_mb

@contextmanager
def monitor_performance(name: str = "Load"):
    """
    Context manager for easy performance monitoring.

    Args:
        name (str): Name for this monitoring session

    Yields:
        PerformanceMonitor: Monitor instance
    """
    monitor = PerformanceMonitor(name)
    monitor.start_monitoring()
    try:
        yield monitor
    finally:
        monitor.stop_monitoring()
