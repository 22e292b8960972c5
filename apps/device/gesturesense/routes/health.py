"""Health check endpoint."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from fastapi import APIRouter

from ..api_models import HealthResponse

if TYPE_CHECKING:
    from ..app import RuntimeState


def create_health_routes(state: RuntimeState) -> APIRouter:
    router = APIRouter()

    @router.get("/api/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        loop = state.loop
        sinks = [asdict(sink.status()) for sink in loop.sinks]
        degraded = any(not s["enabled"] for s in sinks)
        return {
            "status": "degraded" if degraded else "ok",
            "loop_state": loop.state,
            "samples_processed": loop.samples_processed,
            "windows_emitted": loop.windows_emitted,
            "sinks": sinks,
        }

    return router
