"""
Pytest configuration and shared fixtures.
"""

import os
import sys

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))


class FakeExecutor:
    """Model executor that returns fixed scores and records its inputs."""

    def __init__(self, scores=None, error=None):
        self.scores = np.asarray(
            scores if scores is not None else [0.1, 0.9, 0.05, 0.05, 0.0],
            dtype=np.float32,
        )
        self.error = error
        self.inputs = []
        self.closed = False

    @property
    def providers(self):
        return ["CPUExecutionProvider"]

    def run(self, tensor):
        self.inputs.append(tensor)
        if self.error is not None:
            raise self.error
        return self.scores

    def close(self):
        self.closed = True


@pytest.fixture
def fake_executor():
    return FakeExecutor()


@pytest.fixture
def solid_frame():
    """Factory for uniform BGR frames: solid_frame(w, h, (b, g, r))."""
    def _make(width=360, height=360, bgr=(0, 0, 0)):
        frame = np.zeros((height, width, 3), dtype=np.uint8)
        frame[:, :] = bgr
        return frame
    return _make


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
video:
  path: "data/test_video.mp4"
  loop: true

model:
  path: "data/model.onnx"
  input_name: "input"
  input_size: 360
  accelerator: "auto"

sampler:
  interval_ms: 500

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "video": {
            "path": "data/test_video.mp4",
            "loop": True,
        },
        "model": {
            "path": "data/model.onnx",
            "input_name": "input",
            "input_size": 360,
            "channel_order": "rgb",
            "accelerator": "auto",
            "accelerated_hardware": ["lahaina", "sm8550"],
        },
        "sampler": {
            "interval_ms": 500,
            "initial_delay_ms": 0,
        },
        "web": {
            "enabled": False,
            "port": 5000,
        },
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }
