from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from runtime.state import ResultState


@dataclass
class RuntimeContext:
    """Holds runtime state and service references; avoids global singletons."""

    config: dict
    sampler: Any
    result_state: ResultState = field(default_factory=ResultState)
    providers: List[str] = field(default_factory=list)

    def health_info(self) -> Dict[str, Any]:
        model_cfg = self.config.get("model", {}) or {}
        video_cfg = self.config.get("video", {}) or {}
        return {
            "model_path": model_cfg.get("path"),
            "video_path": video_cfg.get("path"),
            "providers": list(self.providers),
            "log_path": self.config.get("log_path"),
        }
