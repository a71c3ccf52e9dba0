from __future__ import annotations

from typing import List, Optional, Tuple

from fastapi import APIRouter, HTTPException, Request

from runtime.context import RuntimeContext
from ..api_models import ControlResponse, HealthResponse, StatusResponse
from ..services.health_service import HealthService

router = APIRouter()


def _ctx(request: Request) -> RuntimeContext:
    return request.app.state.ctx


def _derive_status(
    running: bool,
    last_update_age_s: Optional[float],
    interval_s: float,
    last_failed: bool,
) -> Tuple[str, List[str]]:
    """
    Lightweight status classifier used by /api/status.
    Not running => stopped; no result within 3 intervals => degraded
    (results_stale); last tick raised => degraded (inference_failed).
    """
    if not running:
        return "stopped", []

    level = "running"
    alerts: List[str] = []
    if last_update_age_s is None or last_update_age_s > 3 * interval_s:
        level = "degraded"
        alerts.append("results_stale")
    if last_failed:
        level = "degraded"
        alerts.append("inference_failed")
    return level, alerts


@router.get("/status", response_model=StatusResponse)
def status(request: Request):
    """
    Latest road surface result for the UI.
    Fields:
    - status: running|degraded|stopped
    - label / text: current label and the displayed summary
    - prediction / performance: last successful result and device counters
    - counters: tick outcomes since startup
    """
    ctx = _ctx(request)
    snap = ctx.result_state.snapshot()
    interval_s = float((ctx.config.get("sampler", {}) or {}).get("interval_ms", 500)) / 1000.0
    last_failed = snap["last_outcome"] == "failed"
    level, alerts = _derive_status(snap["running"], snap["last_update_age_s"], interval_s, last_failed)

    return {
        "status": level,
        "alerts": alerts,
        "text": ctx.result_state.result_text(),
        **snap,
    }


@router.post("/inference/start", response_model=ControlResponse)
def start_inference(request: Request):
    ctx = _ctx(request)
    if ctx.sampler is None:
        raise HTTPException(status_code=503, detail="Predictor not initialized")
    ctx.sampler.start()
    return {"running": ctx.sampler.is_running, "label": ctx.result_state.label.value}


@router.post("/inference/stop", response_model=ControlResponse)
def stop_inference(request: Request):
    ctx = _ctx(request)
    if ctx.sampler is None:
        raise HTTPException(status_code=503, detail="Predictor not initialized")
    ctx.sampler.stop()
    return {"running": ctx.sampler.is_running, "label": ctx.result_state.label.value}


@router.get("/health", response_model=HealthResponse)
def health(request: Request):
    return HealthService(ctx=_ctx(request)).get_health_summary()
