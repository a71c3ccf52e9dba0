"""
FastAPI application factory for the road surface monitor.

Routes:
- /api/status -> latest label, performance counters, tick counters
- /api/inference/start, /api/inference/stop -> sampler control
- /api/health -> platform, model/video paths, execution providers
"""

from __future__ import annotations

from fastapi import FastAPI

from runtime.context import RuntimeContext
from .routes import api


def create_app(ctx: RuntimeContext) -> FastAPI:
    """Create the FastAPI app bound to a runtime context."""
    app = FastAPI(
        title="Road Surface Monitor",
        version="0.1.0",
        description="Road surface classification over a test video",
    )
    app.state.ctx = ctx
    app.include_router(api.router, prefix="/api")
    return app
