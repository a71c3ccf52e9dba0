from __future__ import annotations

import os
import platform
import time
from dataclasses import dataclass
from typing import Any, Dict

from runtime.context import RuntimeContext


@dataclass
class HealthService:
    ctx: RuntimeContext

    def get_health_summary(self) -> Dict[str, Any]:
        summary = {
            "timestamp": time.time(),
            "platform": platform.platform(),
            "python": platform.python_version(),
            "cwd": os.getcwd(),
        }
        summary.update(self.ctx.health_info())
        return summary
