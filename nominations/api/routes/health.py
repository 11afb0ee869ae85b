"""Health and system info routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from nominations import __version__
from nominations.api.deps import get_registry
from nominations.api.registry import SessionRegistry

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health_check() -> dict:
    """Liveness check -- always returns ok if the server is running."""
    return {"status": "ok"}


@router.get("/info")
async def system_info(registry: SessionRegistry = Depends(get_registry)) -> dict:
    """System information snapshot."""
    return {"version": __version__, "active_sessions": registry.count()}
