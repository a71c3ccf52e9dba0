"""
Model executor interface.

Executors take one batched input tensor and return the flat score vector.
"""

from __future__ import annotations

from typing import List, Protocol

import numpy as np


class ModelLoadError(RuntimeError):
    """The model artifact is missing or could not be loaded."""


class ModelExecutor(Protocol):
    @property
    def providers(self) -> List[str]:
        ...

    def run(self, tensor: np.ndarray) -> np.ndarray:
        ...

    def close(self) -> None:
        ...
