"""
OpenCV-based video file source.

Seeks with CAP_PROP_POS_MSEC and decodes a single frame per request.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import cv2

from models.frame import FrameData
from .base import ObservationConfig, ObservationSource


@dataclass
class VideoFileSourceConfig(ObservationConfig):
    """
    Configuration for a video file source.

    Attributes:
        path: Path to the video file.
    """
    path: str = ""

    @classmethod
    def from_video_config(cls, video_cfg: Dict[str, Any], source_id: str = "test-video") -> "VideoFileSourceConfig":
        """Adapter: Create from the `video` section of the config dict."""
        return cls(source_id=source_id, path=video_cfg.get("path", ""))


class VideoFileSource(ObservationSource):
    """
    Random-access frame reader for a local video file.

    Example:
        with VideoFileSource(VideoFileSourceConfig(path="data/test_video.mp4")) as source:
            frame_data = source.read_at(2000)
    """

    def __init__(self, config: VideoFileSourceConfig):
        super().__init__(config)
        self._video_config = config
        self._cap: Optional[cv2.VideoCapture] = None
        self._duration_ms = 0.0

    @property
    def path(self) -> str:
        return self._video_config.path

    @property
    def duration_ms(self) -> float:
        return self._duration_ms

    def open(self) -> None:
        if self._is_open:
            return
        if not os.path.isfile(self.path):
            raise RuntimeError(f"Video file not found: {self.path}")

        self._cap = cv2.VideoCapture(self.path)
        if not self._cap.isOpened():
            self._cap.release()
            self._cap = None
            raise RuntimeError(f"Failed to open video file: {self.path}")

        fps = self._cap.get(cv2.CAP_PROP_FPS) or 0.0
        frame_count = self._cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0.0
        self._duration_ms = (frame_count / fps * 1000.0) if fps > 0 else 0.0
        self._is_open = True
        self._frame_index = 0

        logging.info(
            f"VideoFileSource opened: source_id={self.source_id}, path={self.path}, "
            f"duration={self._duration_ms:.0f}ms"
        )

    def read_at(self, position_ms: float) -> Optional[FrameData]:
        if not self._is_open or self._cap is None:
            return None

        self._cap.set(cv2.CAP_PROP_POS_MSEC, float(max(position_ms, 0.0)))
        ret, frame = self._cap.read()
        if not ret or frame is None:
            logging.warning(f"No frame decoded at {position_ms:.0f}ms from {self.path}")
            return None

        self._frame_index += 1
        return FrameData.from_numpy(
            frame,
            position_ms=float(position_ms),
            frame_index=self._frame_index,
            source=self.source_id,
        )

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
        if self._is_open:
            logging.info(f"VideoFileSource closed: source_id={self.source_id}")
        self._is_open = False

    def get_video_info(self) -> Dict[str, Any]:
        """Width, height, fps, frame count and duration of the open file."""
        if self._cap is None or not self._cap.isOpened():
            return {}

        return {
            "width": int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            "height": int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
            "fps": self._cap.get(cv2.CAP_PROP_FPS),
            "frame_count": int(self._cap.get(cv2.CAP_PROP_FRAME_COUNT)),
            "duration_ms": self._duration_ms,
        }
