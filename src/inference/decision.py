"""
Arg-max decision over the model's score vector.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from models.prediction import ROAD_TYPES, RoadType


def argmax_first(scores: Sequence[float]) -> int:
    """
    Index of the maximum score, scanning left to right with strict `>`.

    Ties keep the earliest index.
    """
    values = np.asarray(scores, dtype=np.float32).reshape(-1)
    if values.size == 0:
        raise ValueError("Score vector is empty")

    max_index = 0
    max_value = values[0]
    for i in range(1, values.size):
        if values[i] > max_value:
            max_value = values[i]
            max_index = i
    return max_index


def decide(
    scores: Sequence[float],
    labels: Sequence[RoadType] = ROAD_TYPES,
) -> Tuple[int, RoadType]:
    """Return (index, label) of the winning class for a score vector."""
    values = np.asarray(scores, dtype=np.float32).reshape(-1)
    if values.size != len(labels):
        raise ValueError(f"Expected {len(labels)} scores, got {values.size}")
    index = argmax_first(values)
    return index, labels[index]
