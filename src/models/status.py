"""
Performance and status models for the classification loop.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class TickOutcome(str, Enum):
    """What happened on one sampler tick."""
    SKIPPED = "skipped"
    NO_FRAME = "no_frame"
    CLASSIFIED = "classified"
    FAILED = "failed"


@dataclass
class PerformanceSnapshot:
    """
    Device performance counters captured after an inference.

    Attributes:
        inference_ms: Time spent classifying the frame.
        process_memory_mb: Process memory (PSS where available, else RSS).
        system_memory_pct: System memory in use (0-100).
        cpu_pct: Process CPU usage since the previous sample (0-100 per core).
    """
    inference_ms: float = 0.0
    process_memory_mb: Optional[float] = None
    system_memory_pct: Optional[float] = None
    cpu_pct: Optional[float] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PerformanceSnapshot":
        return cls(
            inference_ms=d.get("inference_ms", 0.0),
            process_memory_mb=d.get("process_memory_mb"),
            system_memory_pct=d.get("system_memory_pct"),
            cpu_pct=d.get("cpu_pct"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inference_ms": self.inference_ms,
            "process_memory_mb": self.process_memory_mb,
            "system_memory_pct": self.system_memory_pct,
            "cpu_pct": self.cpu_pct,
        }

    def format_text(self) -> str:
        """Multiline human-readable summary, as shown under the label."""
        def fmt(value: Optional[float], suffix: str) -> str:
            return "n/a" if value is None else f"{value:.1f}{suffix}"

        return (
            f"Inference time: {self.inference_ms:.1f} ms\n"
            f"Memory: {fmt(self.process_memory_mb, ' MB')}\n"
            f"System memory: {fmt(self.system_memory_pct, '%')} used\n"
            f"CPU: {fmt(self.cpu_pct, '%')}"
        )


@dataclass
class TickCounters:
    """Running totals of sampler tick outcomes."""
    classified: int = 0
    no_frame: int = 0
    failed: int = 0
    skipped: int = 0
    by_label: Dict[str, int] = field(default_factory=dict)

    def record(self, outcome: TickOutcome, label: Optional[str] = None) -> None:
        if outcome == TickOutcome.CLASSIFIED:
            self.classified += 1
            if label is not None:
                self.by_label[label] = self.by_label.get(label, 0) + 1
        elif outcome == TickOutcome.NO_FRAME:
            self.no_frame += 1
        elif outcome == TickOutcome.FAILED:
            self.failed += 1
        else:
            self.skipped += 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "classified": self.classified,
            "no_frame": self.no_frame,
            "failed": self.failed,
            "skipped": self.skipped,
            "by_label": dict(self.by_label),
        }
