"""
Road surface monitor.

Plays the bundled test video, samples the on-screen frame every interval,
classifies its road surface type with the ONNX model and reports the label
together with device performance counters.

Usage:
    python src/main.py --config config/config.yaml --display

Arguments:
    --config: Path to configuration file
    --display: Show the video with the latest result in a window
    --start: Start inference immediately instead of waiting for a start request
"""

import os
import sys
import argparse
import logging
import threading
import time
from typing import Any, Dict, Optional, Tuple

import uvicorn
import yaml

from inference.backend import ModelLoadError
from inference.onnx_backend import ACCELERATOR_MODES, OnnxConfig, OnnxRuntimeBackend
from inference.predictor import RoadTypePredictor
from inference.preprocess import CHANNEL_ORDERS
from models.config import Config
from observation.playback import PlaybackClock
from observation.video_source import VideoFileSource, VideoFileSourceConfig
from ops.assets import stage_assets
from ops.logging import setup_logging
from ops.perf import PerformanceMonitor
from pipeline.display import PreviewWindow
from pipeline.sampler import FrameSampler, SamplerConfig
from runtime.context import RuntimeContext
from runtime.state import ResultState
from web.app import create_app

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def _read_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - plus any explicitly provided `--config` path (treated as overrides)
    """
    try:
        config_dir = os.path.dirname(config_path)
        base_path = os.path.join(config_dir, "default.yaml")
        base_cfg = _read_yaml(base_path) if os.path.exists(base_path) else {}

        local_overrides_path = os.path.join(config_dir, "config.yaml")
        local_cfg = _read_yaml(local_overrides_path) if os.path.exists(local_overrides_path) else {}

        merged = _deep_merge(base_cfg, local_cfg)

        # Finally apply explicit config_path if it's not one of the files above
        explicit = os.path.abspath(config_path)
        if os.path.exists(config_path) and explicit not in (
            os.path.abspath(base_path),
            os.path.abspath(local_overrides_path),
        ):
            merged = _deep_merge(merged, _read_yaml(config_path))

        return merged
    except Exception as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration file structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    required_sections = ['video', 'model', 'sampler', 'log_path', 'log_level']
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    # Video
    video = config.get('video', {}) or {}
    if not isinstance(video.get('path'), str) or not video.get('path'):
        return False, "video.path must be a non-empty string"

    # Model
    model = config.get('model', {}) or {}
    if not isinstance(model.get('path'), str) or not model.get('path'):
        return False, "model.path must be a non-empty string"
    input_size = model.get('input_size', 360)
    if not isinstance(input_size, int) or isinstance(input_size, bool) or input_size <= 0:
        return False, "model.input_size must be a positive integer"
    if not isinstance(model.get('input_name', 'input'), str):
        return False, "model.input_name must be a string"
    if model.get('channel_order', 'rgb') not in CHANNEL_ORDERS:
        return False, f"model.channel_order must be one of: {', '.join(CHANNEL_ORDERS)}"
    if model.get('accelerator', 'auto') not in ACCELERATOR_MODES:
        return False, f"model.accelerator must be one of: {', '.join(ACCELERATOR_MODES)}"
    hardware_ids = model.get('accelerated_hardware', [])
    if hardware_ids is not None and (
        not isinstance(hardware_ids, list) or not all(isinstance(h, str) for h in hardware_ids)
    ):
        return False, "model.accelerated_hardware must be a list of strings"

    # Sampler
    sampler = config.get('sampler', {}) or {}
    interval = sampler.get('interval_ms', 500)
    if not isinstance(interval, int) or isinstance(interval, bool) or interval <= 0:
        return False, "sampler.interval_ms must be a positive integer"
    delay = sampler.get('initial_delay_ms', 0)
    if not isinstance(delay, int) or isinstance(delay, bool) or delay < 0:
        return False, "sampler.initial_delay_ms must be a non-negative integer"

    # Web (optional)
    web = config.get('web', {}) or {}
    if 'port' in web:
        port = web['port']
        if not isinstance(port, int) or not (0 < port < 65536):
            return False, "web.port must be an integer between 1 and 65535"

    # Log settings
    if config['log_level'] not in VALID_LOG_LEVELS:
        return False, f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}"

    return True, None


def build_predictor(cfg: Config) -> Tuple[RoadTypePredictor, OnnxRuntimeBackend]:
    """Create the ONNX backend and predictor. Raises ModelLoadError."""
    backend = OnnxRuntimeBackend(
        OnnxConfig(
            model_path=cfg.model.path,
            input_name=cfg.model.input_name,
            accelerator=cfg.model.accelerator,
            accelerator_provider=cfg.model.accelerator_provider,
            accelerated_hardware=tuple(cfg.model.accelerated_hardware),
            hardware=cfg.model.hardware,
        )
    )
    predictor = RoadTypePredictor(
        backend,
        input_size=cfg.model.input_size,
        channel_order=cfg.model.channel_order,
    )
    return predictor, backend


def _wait_for_interrupt() -> None:
    while True:
        time.sleep(1.0)


def main():
    """Main application function."""
    parser = argparse.ArgumentParser(description='Road Surface Monitor')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--display', action='store_true',
                        help='Show the video with the latest result')
    parser.add_argument('--start', action='store_true',
                        help='Start inference immediately')
    parser.add_argument('--no-web', action='store_true',
                        help='Do not start the status/control API')
    args = parser.parse_args()

    config = load_config(args.config)

    is_valid, error_msg = validate_config(config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        sys.exit(1)

    setup_logging(config['log_path'], config['log_level'])
    cfg = Config.from_dict(config)
    logging.info("Starting Road Surface Monitor")

    stage_assets(cfg.assets.source_dir, cfg.assets.work_dir, cfg.assets.files)

    try:
        predictor, backend = build_predictor(cfg)
    except ModelLoadError as e:
        logging.error(f"Failed to initialize predictor: {e}")
        sys.exit(1)

    source = VideoFileSource(VideoFileSourceConfig.from_video_config(config['video']))
    try:
        source.open()
    except RuntimeError as e:
        logging.error(f"Failed to open test video: {e}")
        predictor.close()
        sys.exit(1)

    clock = PlaybackClock(source.duration_ms, loop=cfg.video.loop)
    result_state = ResultState()
    sampler = FrameSampler(
        source,
        clock,
        predictor,
        result_state,
        SamplerConfig(
            interval_ms=cfg.sampler.interval_ms,
            initial_delay_ms=cfg.sampler.initial_delay_ms,
        ),
        perf=PerformanceMonitor(),
    )
    ctx = RuntimeContext(
        config=config,
        sampler=sampler,
        result_state=result_state,
        providers=backend.providers,
    )

    if cfg.web.enabled and not args.no_web:
        def run_web_app():
            uvicorn.run(
                create_app(ctx),
                host=cfg.web.host,
                port=cfg.web.port,
                log_level="info",
            )

        web_thread = threading.Thread(target=run_web_app, daemon=True)
        web_thread.start()
        logging.info(f"Web interface started on port {cfg.web.port}")

    preview_source = None
    try:
        if args.start or cfg.sampler.autostart:
            sampler.start()

        if args.display:
            # The sampler thread owns `source`; the window decodes from its own capture.
            preview_source = VideoFileSource(
                VideoFileSourceConfig.from_video_config(config['video'], source_id="preview")
            )
            preview_source.open()
            PreviewWindow(preview_source, clock, result_state, sampler=sampler).run()
        else:
            _wait_for_interrupt()
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
    finally:
        sampler.stop()
        if preview_source is not None:
            preview_source.close()
        source.close()
        predictor.close()
        logging.info("Road Surface Monitor stopped")


if __name__ == "__main__":
    main()
