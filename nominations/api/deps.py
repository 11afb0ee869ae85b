"""FastAPI dependency injection functions for shared state."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from nominations.api.registry import SessionRegistry
from nominations.session import NominationSession


def get_registry(request: Request) -> SessionRegistry:
    """Get the shared SessionRegistry from app state."""
    return request.app.state.registry


async def get_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> NominationSession:
    """Resolve the ``session_id`` path parameter to a live session."""
    session = await registry.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return session
