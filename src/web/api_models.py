from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class PredictionModel(BaseModel):
    label: str
    index: int
    scores: List[float]
    inference_ms: float
    frame_index: Optional[int] = None
    position_ms: Optional[float] = None
    timestamp: float


class PerformanceModel(BaseModel):
    inference_ms: float
    process_memory_mb: Optional[float] = None
    system_memory_pct: Optional[float] = None
    cpu_pct: Optional[float] = None


class TickCountersModel(BaseModel):
    classified: int = 0
    no_frame: int = 0
    failed: int = 0
    skipped: int = 0
    by_label: Dict[str, int] = Field(default_factory=dict)


class StatusResponse(BaseModel):
    status: str = Field(..., description="running|degraded|stopped")
    alerts: List[str] = Field(default_factory=list)
    running: bool
    label: str = Field(..., description="asphalt|concrete|gravel|dirt|unknown")
    text: str = Field(..., description="Label and performance summary as displayed")
    prediction: Optional[PredictionModel] = None
    performance: Optional[PerformanceModel] = None
    last_update_age_s: Optional[float] = None
    uptime_seconds: int
    counters: TickCountersModel
    last_outcome: Optional[str] = Field(None, description="classified|no_frame|failed")


class ControlResponse(BaseModel):
    running: bool
    label: str


class HealthResponse(BaseModel):
    timestamp: float
    platform: str
    python: str
    cwd: str
    model_path: Optional[str] = None
    video_path: Optional[str] = None
    providers: List[str] = Field(default_factory=list)
    log_path: Optional[str] = None
