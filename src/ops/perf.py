"""
Device performance counters reported next to each prediction.
"""

from __future__ import annotations

import logging
from typing import Optional

import psutil

from models.status import PerformanceSnapshot

_MB = 1024.0 * 1024.0


class PerformanceMonitor:
    """
    Samples process memory, system memory and process CPU usage.

    CPU usage is measured between consecutive snapshot() calls, so the first
    reading after construction covers the time since the monitor was created.
    """

    def __init__(self, process: Optional[psutil.Process] = None):
        self._process = process or psutil.Process()
        self._process.cpu_percent(interval=None)

    def process_memory_mb(self) -> Optional[float]:
        """PSS where the platform reports it, RSS otherwise."""
        try:
            info = self._process.memory_full_info()
            used = getattr(info, "pss", None) or info.rss
        except psutil.Error:
            try:
                used = self._process.memory_info().rss
            except psutil.Error as e:
                logging.debug(f"Process memory unavailable: {e}")
                return None
        return used / _MB

    @staticmethod
    def system_memory_pct() -> Optional[float]:
        vm = psutil.virtual_memory()
        if not vm.total:
            return None
        return (vm.total - vm.available) / vm.total * 100.0

    def cpu_pct(self) -> Optional[float]:
        try:
            return float(self._process.cpu_percent(interval=None))
        except psutil.Error as e:
            logging.debug(f"CPU usage unavailable: {e}")
            return None

    def snapshot(self, inference_ms: float) -> PerformanceSnapshot:
        return PerformanceSnapshot(
            inference_ms=inference_ms,
            process_memory_mb=self.process_memory_mb(),
            system_memory_pct=self.system_memory_pct(),
            cpu_pct=self.cpu_pct(),
        )
