"""
Typed models for the road surface monitor.

Use the from_dict/to_dict adapters to convert from the raw config dict and
for JSON serialization.
"""

from .frame import FrameData
from .prediction import Prediction, RoadType, ROAD_TYPES
from .status import PerformanceSnapshot, TickCounters, TickOutcome
from .config import (
    Config,
    AssetsConfig,
    VideoConfig,
    ModelConfig,
    SamplerSettings,
    WebConfig,
)

__all__ = [
    # Frame
    "FrameData",
    # Prediction
    "Prediction",
    "RoadType",
    "ROAD_TYPES",
    # Status
    "PerformanceSnapshot",
    "TickCounters",
    "TickOutcome",
    # Config
    "Config",
    "AssetsConfig",
    "VideoConfig",
    "ModelConfig",
    "SamplerSettings",
    "WebConfig",
]
