"""
Pipeline module for the road surface monitor.

The pipeline orchestrates the classification flow:
- Frame sampling at the playback position on a fixed-rate timer
- Preprocessing, model execution and decision (via RoadTypePredictor)
- Publishing results and performance counters to the shared result state
- Optional preview window with the latest result
"""

from .sampler import FrameSampler, SamplerConfig, SamplerState
from .display import PreviewWindow, draw_result, fit_to_container

__all__ = [
    "FrameSampler",
    "SamplerConfig",
    "SamplerState",
    "PreviewWindow",
    "draw_result",
    "fit_to_container",
]
