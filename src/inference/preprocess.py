"""
Frame-to-tensor preprocessing for the road surface model.

The model takes a [3, S, S] float32 tensor (S = 360), channel-major, with
every value normalized to [-1, 1]. Frames are scaled uniformly so that their
shorter side is S; no crop follows, and only the top-left S x S region is
read.
"""

from __future__ import annotations

import logging
from typing import Tuple

import cv2
import numpy as np

INPUT_SIZE = 360
CHANNEL_ORDERS = ("rgb", "bgr")


class PreprocessError(ValueError):
    """Raised when a frame cannot be turned into a model input tensor."""


def scaled_size(width: int, height: int, input_size: int = INPUT_SIZE) -> Tuple[int, int]:
    """
    Size of the frame after uniform scaling by input_size / min(width, height).

    Each side is clamped to at least input_size so rounding can never leave
    the image short of the region that is read.
    """
    if width <= 0 or height <= 0:
        raise PreprocessError(f"Invalid frame size {width}x{height}")
    scale = input_size / min(width, height)
    new_w = max(input_size, int(round(width * scale)))
    new_h = max(input_size, int(round(height * scale)))
    return new_w, new_h


def resize_min_side(frame: np.ndarray, input_size: int = INPUT_SIZE) -> np.ndarray:
    """Scale a frame uniformly so its shorter side equals input_size."""
    height, width = frame.shape[:2]
    new_w, new_h = scaled_size(width, height, input_size)
    if (new_w, new_h) == (width, height):
        return frame
    return cv2.resize(frame, (new_w, new_h), interpolation=cv2.INTER_LINEAR)


def _as_bgr(frame: np.ndarray) -> np.ndarray:
    if frame is None or not isinstance(frame, np.ndarray) or frame.size == 0:
        raise PreprocessError("Frame is empty")
    if frame.dtype != np.uint8:
        raise PreprocessError(f"Frame must be uint8, got {frame.dtype}")
    if frame.ndim == 2:
        return cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
    if frame.ndim != 3 or frame.shape[2] != 3:
        raise PreprocessError(f"Frame must have 3 channels, got shape {frame.shape}")
    return frame


def preprocess_frame(
    frame: np.ndarray,
    input_size: int = INPUT_SIZE,
    channel_order: str = "rgb",
) -> np.ndarray:
    """
    Convert a BGR uint8 frame into a normalized [3, S, S] float32 tensor.

    Args:
        frame: Decoded image, (H, W, 3) BGR or (H, W) grayscale.
        input_size: Spatial size S of the output tensor.
        channel_order: "rgb" puts red in output channel 0, matching a
            0xAARRGGBB pixel read as (pixel >> ((2 - c) * 8)) & 0xFF.
            "bgr" keeps the decoder's native order.

    Returns:
        C-contiguous float32 array of shape (3, S, S), values in [-1, 1],
        indexed as c * S * S + i * S + j when flattened.

    Raises:
        PreprocessError: If the frame is unusable or scaling comes up short.
    """
    if channel_order not in CHANNEL_ORDERS:
        raise PreprocessError(f"channel_order must be one of {CHANNEL_ORDERS}, got {channel_order!r}")

    bgr = _as_bgr(frame)
    resized = resize_min_side(bgr, input_size)
    height, width = resized.shape[:2]
    if height < input_size or width < input_size:
        raise PreprocessError(
            f"Scaled frame {width}x{height} is smaller than {input_size}x{input_size}"
        )

    region = resized[:input_size, :input_size]
    if channel_order == "rgb":
        region = region[..., ::-1]

    planes = region.transpose(2, 0, 1).astype(np.float32)
    tensor = (planes / np.float32(255.0) - np.float32(0.5)) * np.float32(2.0)

    logging.debug(
        f"Preprocessed frame {frame.shape[1]}x{frame.shape[0]} -> {width}x{height}, "
        f"tensor {tensor.shape}"
    )
    return np.ascontiguousarray(tensor, dtype=np.float32)
