"""Route package: assembles the status sub-routers into one APIRouter.

Each sub-module defines a ``create_*_routes(state)`` function returning an
``APIRouter`` scoped to a single concern.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter

from .health import create_health_routes
from .windows import create_window_routes

if TYPE_CHECKING:
    from ..app import RuntimeState


def create_router(state: RuntimeState) -> APIRouter:
    router = APIRouter()
    router.include_router(create_health_routes(state))
    router.include_router(create_window_routes(state))
    return router
