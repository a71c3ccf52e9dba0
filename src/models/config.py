"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


DEFAULT_ACCELERATED_HARDWARE = [
    "lahaina",  # Snapdragon 888
    "taro",     # Snapdragon 8 Gen 1
    "kalama",   # Snapdragon 8 Gen 2
    "sm8150",   # Snapdragon 855
    "sm8250",   # Snapdragon 865
    "sm8350",   # Snapdragon 888
    "sm8450",   # Snapdragon 8 Gen 1
    "sm8550",   # Snapdragon 8 Gen 2
]


@dataclass
class AssetsConfig:
    """Bundled files copied into the working directory at startup."""
    source_dir: str = "assets"
    work_dir: str = "data"
    files: List[str] = field(default_factory=lambda: ["model.onnx", "test_video.mp4"])

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AssetsConfig":
        return cls(
            source_dir=d.get("source_dir", "assets"),
            work_dir=d.get("work_dir", "data"),
            files=list(d.get("files", ["model.onnx", "test_video.mp4"])),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_dir": self.source_dir,
            "work_dir": self.work_dir,
            "files": list(self.files),
        }


@dataclass
class VideoConfig:
    """Test video playback configuration."""
    path: str = "data/test_video.mp4"
    loop: bool = True

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "VideoConfig":
        return cls(
            path=d.get("path", "data/test_video.mp4"),
            loop=d.get("loop", True),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "loop": self.loop}


@dataclass
class ModelConfig:
    """Road surface model and execution provider configuration."""
    path: str = "data/model.onnx"
    input_name: str = "input"
    input_size: int = 360
    channel_order: str = "rgb"
    accelerator: str = "auto"
    accelerator_provider: str = "NnapiExecutionProvider"
    accelerated_hardware: List[str] = field(default_factory=lambda: list(DEFAULT_ACCELERATED_HARDWARE))
    hardware: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ModelConfig":
        # None means defaults; an empty list disables the allow-list.
        hardware_ids = d.get("accelerated_hardware")
        if hardware_ids is None:
            hardware_ids = DEFAULT_ACCELERATED_HARDWARE
        return cls(
            path=d.get("path", "data/model.onnx"),
            input_name=d.get("input_name", "input"),
            input_size=int(d.get("input_size", 360)),
            channel_order=d.get("channel_order", "rgb"),
            accelerator=d.get("accelerator", "auto"),
            accelerator_provider=d.get("accelerator_provider", "NnapiExecutionProvider"),
            accelerated_hardware=list(hardware_ids),
            hardware=d.get("hardware"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "input_name": self.input_name,
            "input_size": self.input_size,
            "channel_order": self.channel_order,
            "accelerator": self.accelerator,
            "accelerator_provider": self.accelerator_provider,
            "accelerated_hardware": list(self.accelerated_hardware),
            "hardware": self.hardware,
        }


@dataclass
class SamplerSettings:
    """Frame sampling cadence."""
    interval_ms: int = 500
    initial_delay_ms: int = 0
    autostart: bool = False

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SamplerSettings":
        return cls(
            interval_ms=d.get("interval_ms", 500),
            initial_delay_ms=d.get("initial_delay_ms", 0),
            autostart=d.get("autostart", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "interval_ms": self.interval_ms,
            "initial_delay_ms": self.initial_delay_ms,
            "autostart": self.autostart,
        }


@dataclass
class WebConfig:
    """Status/control API server."""
    enabled: bool = True
    host: str = "0.0.0.0"
    port: int = 5000

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WebConfig":
        return cls(
            enabled=d.get("enabled", True),
            host=d.get("host", "0.0.0.0"),
            port=d.get("port", 5000),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"enabled": self.enabled, "host": self.host, "port": self.port}


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    assets: AssetsConfig = field(default_factory=AssetsConfig)
    video: VideoConfig = field(default_factory=VideoConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    sampler: SamplerSettings = field(default_factory=SamplerSettings)
    web: WebConfig = field(default_factory=WebConfig)
    log_path: str = "logs/road_surface.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            assets=AssetsConfig.from_dict(d.get("assets", {}) or {}),
            video=VideoConfig.from_dict(d.get("video", {}) or {}),
            model=ModelConfig.from_dict(d.get("model", {}) or {}),
            sampler=SamplerSettings.from_dict(d.get("sampler", {}) or {}),
            web=WebConfig.from_dict(d.get("web", {}) or {}),
            log_path=d.get("log_path", "logs/road_surface.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to dictionary (for saving or logging)."""
        return {
            "assets": self.assets.to_dict(),
            "video": self.video.to_dict(),
            "model": self.model.to_dict(),
            "sampler": self.sampler.to_dict(),
            "web": self.web.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
