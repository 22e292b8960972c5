"""Latest-window and timing status endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter

from ..api_models import LatestWindowResponse, TimingResponse

if TYPE_CHECKING:
    from ..app import RuntimeState


def create_window_routes(state: RuntimeState) -> APIRouter:
    router = APIRouter()

    @router.get("/api/latest", response_model=LatestWindowResponse, response_model_by_alias=True)
    async def latest() -> LatestWindowResponse:
        record = state.loop.latest
        return {"window": record.to_dict() if record is not None else None}

    @router.get("/api/timing", response_model=TimingResponse)
    async def timing() -> TimingResponse:
        return state.loop.timing_snapshot()

    return router
