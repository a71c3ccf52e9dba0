"""
Shared result state between the sampler thread, the web server and the
preview window.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Dict, Optional

from models.prediction import Prediction, RoadType
from models.status import PerformanceSnapshot, TickCounters, TickOutcome


class ResultState:
    """
    Latest classification result plus running counters.

    All access goes through a lock; readers receive copies.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._label = RoadType.UNKNOWN
        self._prediction: Optional[Prediction] = None
        self._performance: Optional[PerformanceSnapshot] = None
        self._running = False
        self._counters = TickCounters()
        self._last_update_ts: Optional[float] = None
        self._last_outcome: Optional[TickOutcome] = None
        self.start_time = time.time()

    @property
    def label(self) -> RoadType:
        with self._lock:
            return self._label

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    def set_running(self, running: bool) -> None:
        with self._lock:
            self._running = running

    def publish(self, prediction: Prediction, performance: PerformanceSnapshot) -> None:
        """Record a successful classification."""
        with self._lock:
            self._label = prediction.label
            self._prediction = prediction
            self._performance = performance
            self._last_update_ts = time.time()
            self._counters.record(TickOutcome.CLASSIFIED, prediction.label.value)
            self._last_outcome = TickOutcome.CLASSIFIED

    def publish_failure(self) -> None:
        """A tick raised: show the unknown label, keep the last counters."""
        with self._lock:
            self._label = RoadType.UNKNOWN
            self._last_update_ts = time.time()
            self._counters.record(TickOutcome.FAILED)
            self._last_outcome = TickOutcome.FAILED

    def record(self, outcome: TickOutcome) -> None:
        """Count a tick that did not change the label."""
        with self._lock:
            self._counters.record(outcome)
            if outcome != TickOutcome.SKIPPED:
                self._last_outcome = outcome

    def reset_label(self) -> None:
        with self._lock:
            self._label = RoadType.UNKNOWN

    def result_text(self) -> str:
        """Label line followed by the performance summary, if any."""
        with self._lock:
            label = self._label
            performance = self._performance
            running = self._running
            has_result = self._prediction is not None
        if running and not has_result:
            return "Processing..."
        text = f"Road type: {label.value}"
        if performance is not None and label != RoadType.UNKNOWN:
            text += "\n" + performance.format_text()
        return text

    def snapshot(self) -> Dict[str, Any]:
        """Copy of the current state for the status API."""
        now = time.time()
        with self._lock:
            return {
                "running": self._running,
                "label": self._label.value,
                "prediction": self._prediction.to_dict() if self._prediction else None,
                "performance": self._performance.to_dict() if self._performance else None,
                "last_update_age_s": (now - self._last_update_ts) if self._last_update_ts else None,
                "uptime_seconds": int(now - self.start_time),
                "counters": self._counters.to_dict(),
                "last_outcome": self._last_outcome.value if self._last_outcome else None,
            }
