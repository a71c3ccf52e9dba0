"""
Road surface predictor: preprocess -> model executor -> arg-max decision.
"""

from __future__ import annotations

import logging
import time
from typing import Optional, Sequence

from models.frame import FrameData
from models.prediction import ROAD_TYPES, Prediction, RoadType
from .backend import ModelExecutor
from .decision import decide
from .preprocess import INPUT_SIZE, preprocess_frame


class RoadTypePredictor:
    """
    Classifies the road surface visible in a frame.

    Example:
        with RoadTypePredictor(OnnxRuntimeBackend(cfg)) as predictor:
            prediction = predictor.predict(frame_data)
            print(prediction.label)
    """

    def __init__(
        self,
        executor: ModelExecutor,
        input_size: int = INPUT_SIZE,
        channel_order: str = "rgb",
        labels: Sequence[RoadType] = ROAD_TYPES,
    ):
        self._executor: Optional[ModelExecutor] = executor
        self.input_size = input_size
        self.channel_order = channel_order
        self.labels = tuple(labels)

    @property
    def is_closed(self) -> bool:
        return self._executor is None

    def predict(self, frame_data: FrameData) -> Prediction:
        """
        Classify one frame.

        Raises:
            RuntimeError: If the predictor has been closed.
            PreprocessError: If the frame cannot be preprocessed.
            ValueError: If the model returns the wrong number of scores.
        """
        if self._executor is None:
            raise RuntimeError("Predictor is closed")

        logging.debug(f"Classifying frame {frame_data.frame_index}, size {frame_data.width}x{frame_data.height}")
        start = time.perf_counter()
        tensor = preprocess_frame(frame_data.frame, self.input_size, self.channel_order)
        scores = self._executor.run(tensor)
        logging.debug(f"Model returned {scores.size} scores")
        index, label = decide(scores, self.labels)
        inference_ms = (time.perf_counter() - start) * 1000.0

        return Prediction(
            label=label,
            index=index,
            scores=[float(s) for s in scores],
            inference_ms=inference_ms,
            frame_index=frame_data.frame_index,
            position_ms=frame_data.position_ms,
        )

    def close(self) -> None:
        if self._executor is not None:
            try:
                self._executor.close()
            finally:
                self._executor = None

    def __enter__(self) -> "RoadTypePredictor":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
