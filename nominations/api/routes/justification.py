"""Justification routes -- text edits, focus tracking, quality feedback."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from nominations.api.deps import get_session
from nominations.api.models import FeedbackResponse, TextRequest
from nominations.session import NominationSession

logger = logging.getLogger("nominations.api.justification")

router = APIRouter(prefix="/api/sessions/{session_id}/justification", tags=["justification"])


def feedback_to_response(session: NominationSession) -> FeedbackResponse:
    quality = session.quality
    return FeedbackResponse(
        state=quality.state.value,
        feedback=quality.feedback,
        show_suggestions=quality.show_suggestions,
        is_high_quality=session.justification_high_quality,
    )


@router.put("", response_model=FeedbackResponse)
async def update_justification(
    body: TextRequest,
    session: NominationSession = Depends(get_session),
) -> FeedbackResponse:
    """Store the latest justification text (re-arms the idle timer)."""
    session.set_justification(body.text)
    return feedback_to_response(session)


@router.get("/feedback", response_model=FeedbackResponse)
async def get_feedback(session: NominationSession = Depends(get_session)) -> FeedbackResponse:
    return feedback_to_response(session)


@router.post("/focus", response_model=FeedbackResponse)
async def focus(session: NominationSession = Depends(get_session)) -> FeedbackResponse:
    session.quality.focus()
    return feedback_to_response(session)


@router.post("/blur", response_model=FeedbackResponse)
async def blur(session: NominationSession = Depends(get_session)) -> FeedbackResponse:
    """Field lost focus. Analysis runs in the background."""
    session.quality.blur()
    return feedback_to_response(session)


@router.post("/check", response_model=FeedbackResponse)
async def check_quality(session: NominationSession = Depends(get_session)) -> FeedbackResponse:
    """Explicit quality check; waits for the result."""
    await session.quality.check_quality()
    return feedback_to_response(session)


@router.post("/improve", response_model=FeedbackResponse)
async def improve(session: NominationSession = Depends(get_session)) -> FeedbackResponse:
    session.quality.improve()
    return feedback_to_response(session)


@router.post("/suggestions/toggle", response_model=FeedbackResponse)
async def toggle_suggestions(session: NominationSession = Depends(get_session)) -> FeedbackResponse:
    session.quality.toggle_suggestions()
    return feedback_to_response(session)
