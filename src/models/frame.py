"""
FrameData model for decoded video frames.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


@dataclass
class FrameData:
    """
    Payload and metadata for one frame sampled from a video.

    Attributes:
        frame: Decoded image as a uint8 numpy array, (H, W, 3) in BGR order.
        width: Frame width in pixels.
        height: Frame height in pixels.
        position_ms: Media position the frame was sampled at.
        frame_index: Sequential sample number since the source was opened.
        source: Identifier for the video source.
    """
    frame: np.ndarray
    width: int
    height: int
    position_ms: float
    frame_index: int = 0
    source: Optional[str] = None

    @classmethod
    def from_numpy(
        cls,
        frame: np.ndarray,
        position_ms: float = 0.0,
        frame_index: int = 0,
        source: Optional[str] = None,
    ) -> "FrameData":
        """Create FrameData from a numpy array."""
        h, w = frame.shape[:2]
        return cls(
            frame=frame,
            width=w,
            height=h,
            position_ms=position_ms,
            frame_index=frame_index,
            source=source,
        )

    @property
    def size(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return (self.width, self.height)
