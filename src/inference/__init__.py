"""
Road surface inference: tensor preprocessing, model execution and decision.
"""

from .backend import ModelExecutor, ModelLoadError
from .decision import argmax_first, decide
from .preprocess import INPUT_SIZE, PreprocessError, preprocess_frame
from .predictor import RoadTypePredictor

__all__ = [
    "ModelExecutor",
    "ModelLoadError",
    "argmax_first",
    "decide",
    "INPUT_SIZE",
    "PreprocessError",
    "preprocess_frame",
    "RoadTypePredictor",
]
