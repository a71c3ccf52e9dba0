"""
Tests for frame-to-tensor preprocessing.
"""

import numpy as np
import pytest

from inference.preprocess import (
    INPUT_SIZE,
    PreprocessError,
    preprocess_frame,
    resize_min_side,
    scaled_size,
)


class TestScaledSize:
    def test_square_frame_unchanged(self):
        assert scaled_size(360, 360) == (360, 360)

    def test_wide_frame_scale_one(self):
        assert scaled_size(720, 360) == (720, 360)

    def test_downscale_keeps_aspect(self):
        assert scaled_size(1920, 1080) == (640, 360)

    def test_upscale_small_frame(self):
        assert scaled_size(180, 120) == (540, 360)

    def test_rounding_never_short(self):
        w, h = scaled_size(1001, 999)
        assert w >= INPUT_SIZE and h >= INPUT_SIZE

    def test_invalid_size(self):
        with pytest.raises(PreprocessError):
            scaled_size(0, 100)


class TestPreprocessFrame:
    def test_shape_and_range(self):
        rng = np.random.default_rng(0)
        frame = rng.integers(0, 256, size=(360, 360, 3), dtype=np.uint8)

        tensor = preprocess_frame(frame)

        assert tensor.shape == (3, 360, 360)
        assert tensor.dtype == np.float32
        assert tensor.flags["C_CONTIGUOUS"]
        assert tensor.min() >= -1.0
        assert tensor.max() <= 1.0

    def test_white_frame_is_all_ones(self, solid_frame):
        tensor = preprocess_frame(solid_frame(bgr=(255, 255, 255)))
        np.testing.assert_allclose(tensor, 1.0, atol=1e-6)

    def test_black_frame_is_all_minus_ones(self, solid_frame):
        tensor = preprocess_frame(solid_frame(bgr=(0, 0, 0)))
        np.testing.assert_allclose(tensor, -1.0, atol=1e-6)

    def test_wide_frame_no_error(self, solid_frame):
        tensor = preprocess_frame(solid_frame(width=720, height=360, bgr=(255, 255, 255)))
        assert tensor.shape == (3, 360, 360)

    def test_wide_frame_reads_top_left_region(self):
        frame = np.zeros((360, 720, 3), dtype=np.uint8)
        frame[:, 360:] = 255  # right half white, never read

        tensor = preprocess_frame(frame)

        np.testing.assert_allclose(tensor, -1.0, atol=1e-6)

    def test_tall_frame_reads_top_rows(self):
        frame = np.zeros((1440, 720, 3), dtype=np.uint8)
        frame[720:, :] = 255  # bottom half white, scaled to rows >= 360

        tensor = preprocess_frame(frame)

        assert tensor.shape == (3, 360, 360)
        np.testing.assert_allclose(tensor[:, :300, :], -1.0, atol=1e-6)

    def test_red_goes_to_channel_zero(self, solid_frame):
        tensor = preprocess_frame(solid_frame(bgr=(0, 0, 255)))

        np.testing.assert_allclose(tensor[0], 1.0, atol=1e-6)
        np.testing.assert_allclose(tensor[1], -1.0, atol=1e-6)
        np.testing.assert_allclose(tensor[2], -1.0, atol=1e-6)

    def test_blue_goes_to_channel_two(self, solid_frame):
        tensor = preprocess_frame(solid_frame(bgr=(255, 0, 0)))

        np.testing.assert_allclose(tensor[2], 1.0, atol=1e-6)
        np.testing.assert_allclose(tensor[0], -1.0, atol=1e-6)

    def test_bgr_channel_order_option(self, solid_frame):
        tensor = preprocess_frame(solid_frame(bgr=(255, 0, 0)), channel_order="bgr")

        np.testing.assert_allclose(tensor[0], 1.0, atol=1e-6)
        np.testing.assert_allclose(tensor[2], -1.0, atol=1e-6)

    def test_normalization_of_mid_value(self, solid_frame):
        tensor = preprocess_frame(solid_frame(bgr=(51, 102, 204)))

        assert tensor[0, 0, 0] == pytest.approx((204 / 255 - 0.5) * 2, abs=1e-6)
        assert tensor[1, 0, 0] == pytest.approx((102 / 255 - 0.5) * 2, abs=1e-6)
        assert tensor[2, 0, 0] == pytest.approx((51 / 255 - 0.5) * 2, abs=1e-6)

    def test_flat_index_layout(self):
        frame = np.zeros((360, 360, 3), dtype=np.uint8)
        frame[5, 7] = (0, 0, 255)  # one red pixel at row 5, col 7

        flat = preprocess_frame(frame).reshape(-1)

        assert flat[0 * 360 * 360 + 5 * 360 + 7] == pytest.approx(1.0)
        assert flat[1 * 360 * 360 + 5 * 360 + 7] == pytest.approx(-1.0)

    def test_small_frame_upscaled(self, solid_frame):
        tensor = preprocess_frame(solid_frame(width=64, height=48, bgr=(255, 255, 255)))

        assert tensor.shape == (3, 360, 360)
        np.testing.assert_allclose(tensor, 1.0, atol=1e-6)

    def test_grayscale_frame(self):
        frame = np.full((360, 480), 255, dtype=np.uint8)
        tensor = preprocess_frame(frame)
        np.testing.assert_allclose(tensor, 1.0, atol=1e-6)

    def test_custom_input_size(self, solid_frame):
        tensor = preprocess_frame(solid_frame(width=400, height=300), input_size=224)
        assert tensor.shape == (3, 224, 224)

    def test_does_not_mutate_input(self, solid_frame):
        frame = solid_frame(bgr=(10, 20, 30))
        original = frame.copy()
        preprocess_frame(frame)
        np.testing.assert_array_equal(frame, original)

    def test_empty_frame_rejected(self):
        with pytest.raises(PreprocessError):
            preprocess_frame(np.zeros((0, 0, 3), dtype=np.uint8))

    def test_float_frame_rejected(self):
        with pytest.raises(PreprocessError):
            preprocess_frame(np.zeros((360, 360, 3), dtype=np.float32))

    def test_four_channel_frame_rejected(self):
        with pytest.raises(PreprocessError):
            preprocess_frame(np.zeros((360, 360, 4), dtype=np.uint8))

    def test_unknown_channel_order_rejected(self, solid_frame):
        with pytest.raises(PreprocessError):
            preprocess_frame(solid_frame(), channel_order="rgba")


class TestResizeMinSide:
    def test_returns_same_array_when_already_sized(self, solid_frame):
        frame = solid_frame(width=720, height=360)
        assert resize_min_side(frame) is frame

    def test_resizes_large_frame(self, solid_frame):
        resized = resize_min_side(solid_frame(width=1280, height=720))
        assert resized.shape[:2] == (360, 640)
