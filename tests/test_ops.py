"""
Tests for asset staging and logging setup.
"""

import logging

from ops.assets import copy_asset, stage_assets
from ops.logging import setup_logging


def test_copy_asset(tmp_path):
    src_dir = tmp_path / "assets"
    src_dir.mkdir()
    (src_dir / "model.onnx").write_bytes(b"abc")

    dest = copy_asset(str(src_dir), str(tmp_path / "data"), "model.onnx")

    assert dest is not None
    assert dest.read_bytes() == b"abc"


def test_copy_missing_asset_returns_none(tmp_path):
    assert copy_asset(str(tmp_path), str(tmp_path / "data"), "missing.mp4") is None


def test_stage_assets(tmp_path):
    src_dir = tmp_path / "assets"
    src_dir.mkdir()
    (src_dir / "model.onnx").write_bytes(b"model")
    work_dir = tmp_path / "data"

    staged = stage_assets(str(src_dir), str(work_dir), ["model.onnx", "test_video.mp4"])

    assert staged["model.onnx"] == work_dir / "model.onnx"
    assert staged["test_video.mp4"] is None


def test_stage_assets_skips_identical(tmp_path):
    src_dir = tmp_path / "assets"
    src_dir.mkdir()
    (src_dir / "model.onnx").write_bytes(b"new!")
    work_dir = tmp_path / "data"
    work_dir.mkdir()
    (work_dir / "model.onnx").write_bytes(b"old!")

    staged = stage_assets(str(src_dir), str(work_dir), ["model.onnx"])

    assert staged["model.onnx"] == work_dir / "model.onnx"
    assert (work_dir / "model.onnx").read_bytes() == b"old!"


def test_setup_logging_creates_log_dir(tmp_path):
    log_path = tmp_path / "logs" / "road_surface.log"
    root = logging.getLogger()
    try:
        setup_logging(str(log_path), "DEBUG")
        logging.getLogger("sampler").info("Road type: gravel at 500ms")

        assert "Road type: gravel at 500ms" in log_path.read_text()
        assert root.level == logging.DEBUG
        assert logging.getLogger("uvicorn.access").level == logging.WARNING
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
