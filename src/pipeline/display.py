"""
Preview window: the playing test video with the latest result drawn on top.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from observation.base import ObservationSource
from observation.playback import PlaybackClock
from runtime.state import ResultState

WINDOW_NAME = "Road Surface Monitor"


def fit_to_container(
    video_w: int,
    video_h: int,
    container_w: int,
    container_h: int,
) -> Tuple[int, int]:
    """
    Largest (width, height) with the video's aspect ratio that fits the container.

    A video wider than the container fills the container width; otherwise it
    fills the container height.
    """
    if video_w <= 0 or video_h <= 0 or container_w <= 0 or container_h <= 0:
        raise ValueError("Video and container sizes must be positive")

    video_ratio = video_w / video_h
    container_ratio = container_w / container_h
    if video_ratio > container_ratio:
        return container_w, int(container_w / video_ratio)
    return int(container_h * video_ratio), container_h


def draw_result(frame: np.ndarray, text: str) -> np.ndarray:
    """Return a copy of frame with multiline text on a dark backing box."""
    out = frame.copy()
    font = cv2.FONT_HERSHEY_SIMPLEX
    scale, thickness, pad = 0.6, 1, 6
    lines = text.splitlines() or [""]

    sizes = [cv2.getTextSize(line, font, scale, thickness)[0] for line in lines]
    line_h = max(h for _, h in sizes) + pad
    box_w = max(w for w, _ in sizes) + 2 * pad
    box_h = line_h * len(lines) + pad

    cv2.rectangle(out, (0, 0), (box_w, box_h), (0, 0, 0), -1)
    for i, line in enumerate(lines):
        y = (i + 1) * line_h
        cv2.putText(out, line, (pad, y), font, scale, (255, 255, 255), thickness)
    return out


class PreviewWindow:
    """
    cv2 window that plays the video at the clock's position.

    Keys: space toggles inference, q quits. Must run on the main thread.
    """

    def __init__(
        self,
        source: ObservationSource,
        clock: PlaybackClock,
        result_state: ResultState,
        sampler=None,
        container_size: Tuple[int, int] = (960, 540),
        refresh_ms: int = 33,
    ):
        self.source = source
        self.clock = clock
        self.result_state = result_state
        self.sampler = sampler
        self.container_size = container_size
        self.refresh_ms = refresh_ms
        self._last_frame: Optional[np.ndarray] = None

    def render(self) -> Optional[np.ndarray]:
        """Compose the current preview image, or None before the first frame."""
        frame_data = self.source.read_at(self.clock.position_ms())
        if frame_data is not None:
            self._last_frame = frame_data.frame
        if self._last_frame is None:
            return None

        h, w = self._last_frame.shape[:2]
        size = fit_to_container(w, h, *self.container_size)
        fitted = cv2.resize(self._last_frame, size, interpolation=cv2.INTER_AREA)
        return draw_result(fitted, self.result_state.result_text())

    def run(self) -> None:
        """Show frames until the user presses q or closes the window."""
        cv2.namedWindow(WINDOW_NAME, cv2.WINDOW_AUTOSIZE)
        try:
            while True:
                image = self.render()
                if image is not None:
                    cv2.imshow(WINDOW_NAME, image)
                key = cv2.waitKey(self.refresh_ms) & 0xFF
                if key == ord("q"):
                    break
                if key == ord(" ") and self.sampler is not None:
                    self.sampler.toggle()
                if cv2.getWindowProperty(WINDOW_NAME, cv2.WND_PROP_VISIBLE) < 1:
                    break
        finally:
            cv2.destroyWindow(WINDOW_NAME)
            logging.info("Preview window closed")
