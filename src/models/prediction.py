"""
Road surface labels and the Prediction model.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class RoadType(str, Enum):
    """Road surface classes, in model output order."""
    ASPHALT = "asphalt"
    CONCRETE = "concrete"
    GRAVEL = "gravel"
    DIRT = "dirt"
    UNKNOWN = "unknown"

    @classmethod
    def ordered(cls) -> List["RoadType"]:
        """Labels indexed positionally against the score vector."""
        return list(cls)


# Positions 0-4 map 1:1 to score vector indices.
ROAD_TYPES: Sequence[RoadType] = tuple(RoadType.ordered())


@dataclass(frozen=True)
class Prediction:
    """
    Result of classifying one frame.

    Attributes:
        label: Winning road surface label.
        index: Position of the winning score.
        scores: Raw per-class scores from the model.
        inference_ms: Wall time spent in preprocess + model run + decision.
        frame_index: Sample number of the classified frame.
        position_ms: Media position of the classified frame.
        timestamp: Unix timestamp when the prediction was made.
    """
    label: RoadType
    index: int
    scores: List[float]
    inference_ms: float = 0.0
    frame_index: Optional[int] = None
    position_ms: Optional[float] = None
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "label": self.label.value,
            "index": self.index,
            "scores": list(self.scores),
            "inference_ms": self.inference_ms,
            "frame_index": self.frame_index,
            "position_ms": self.position_ms,
            "timestamp": self.timestamp,
        }
