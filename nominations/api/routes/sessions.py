"""Session routes -- lifecycle, step data, navigation, summary, submission."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from nominations.api.deps import get_registry, get_session
from nominations.api.models import (
    CategoryRequest,
    CategoryResponse,
    DraftResponse,
    MediaItemResponse,
    NominatorRequest,
    RegionRequest,
    SessionResponse,
    StepResponse,
    SummaryResponse,
    TextRequest,
)
from nominations.api.registry import SessionRegistry
from nominations.api.routes.justification import feedback_to_response
from nominations.errors import (
    CategoryNotAllowedError,
    RemoteServiceError,
    StepNavigationError,
    SubmissionNotAllowedError,
)
from nominations.models import (
    AwardCategory,
    NominationScore,
    NominatorDetails,
    SubmissionReceipt,
)
from nominations.session import NominationSession

logger = logging.getLogger("nominations.api.sessions")

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


def _session_to_response(session: NominationSession) -> SessionResponse:
    """Convert a live session to an API response."""
    draft = session.store.view
    return SessionResponse(
        session_id=session.session_id,
        current_step=session.current_step,
        can_advance=session.can_advance(),
        can_submit=session.can_submit(),
        draft=DraftResponse(
            nominee=draft.nominee,
            nominator=draft.nominator,
            award_category=draft.award_category,
            region=draft.region,
            justification=draft.justification,
            additional_details=draft.additional_details,
            media=[
                MediaItemResponse(filename=m.filename, content_type=m.content_type, size=m.size)
                for m in draft.media
            ],
        ),
        feedback=feedback_to_response(session),
        selected_trade=session.search.selected_trade,
        profile=session.search.profile,
    )


def _step_response(session: NominationSession) -> StepResponse:
    return StepResponse(
        current_step=session.current_step,
        can_advance=session.can_advance(),
        rows=session.summary(),
    )


# ── Lifecycle ─────────────────────────────────────────────────────────────


@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(registry: SessionRegistry = Depends(get_registry)) -> SessionResponse:
    """Start a new nomination with an empty draft."""
    return _session_to_response(await registry.create())


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session_state(session: NominationSession = Depends(get_session)) -> SessionResponse:
    return _session_to_response(session)


@router.delete("/{session_id}", status_code=204)
async def close_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> None:
    """Discard the draft and cancel its timers and requests."""
    if not await registry.close(session_id):
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")


# ── Step data ─────────────────────────────────────────────────────────────


@router.put("/{session_id}/nominator", response_model=NominatorDetails)
async def update_nominator(
    body: NominatorRequest,
    session: NominationSession = Depends(get_session),
) -> NominatorDetails:
    return session.store.set_nominator(**body.model_dump(exclude_none=True))


@router.get("/{session_id}/categories", response_model=list[AwardCategory])
async def list_categories(session: NominationSession = Depends(get_session)) -> list[AwardCategory]:
    """Categories open to the nominator's relationship."""
    return session.available_categories()


@router.put("/{session_id}/category", response_model=CategoryResponse)
async def update_category(
    body: CategoryRequest,
    session: NominationSession = Depends(get_session),
) -> CategoryResponse:
    try:
        warning = session.store.set_award_category(body.category_id)
    except CategoryNotAllowedError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return CategoryResponse(award_category=session.store.award_category, warning=warning)


@router.put("/{session_id}/region", status_code=204)
async def update_region(
    body: RegionRequest,
    session: NominationSession = Depends(get_session),
) -> None:
    session.store.set_region(body.region_id)


@router.put("/{session_id}/details", status_code=204)
async def update_details(
    body: TextRequest,
    session: NominationSession = Depends(get_session),
) -> None:
    session.store.set_additional_details(body.text)


# ── Navigation & summary ──────────────────────────────────────────────────


@router.post("/{session_id}/steps/next", response_model=StepResponse)
async def next_step(session: NominationSession = Depends(get_session)) -> StepResponse:
    try:
        session.next_step()
    except StepNavigationError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _step_response(session)


@router.post("/{session_id}/steps/previous", response_model=StepResponse)
async def previous_step(session: NominationSession = Depends(get_session)) -> StepResponse:
    session.previous_step()
    return _step_response(session)


@router.post("/{session_id}/steps/{step}", response_model=StepResponse)
async def jump_to_step(
    step: int,
    session: NominationSession = Depends(get_session),
) -> StepResponse:
    """Jump to a completed step (the summary's Edit action)."""
    try:
        session.navigate_to(step)
    except StepNavigationError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _step_response(session)


@router.get("/{session_id}/summary", response_model=SummaryResponse)
async def get_summary(session: NominationSession = Depends(get_session)) -> SummaryResponse:
    return SummaryResponse(
        current_step=session.current_step,
        completion_percentage=session.completion_percentage(),
        rows=session.summary(),
        text=session.summary_text(),
    )


# ── Scoring & submission ──────────────────────────────────────────────────


@router.post("/{session_id}/score", response_model=NominationScore)
async def score_nomination(session: NominationSession = Depends(get_session)) -> NominationScore:
    try:
        return await session.score()
    except RemoteServiceError as e:
        logger.warning("Scoring failed for %s: %s", session.session_id, e)
        raise HTTPException(status_code=502, detail="Scoring service unavailable")


@router.post("/{session_id}/submit", response_model=SubmissionReceipt)
async def submit(session: NominationSession = Depends(get_session)) -> SubmissionReceipt:
    try:
        return await session.submit()
    except SubmissionNotAllowedError as e:
        raise HTTPException(status_code=409, detail=str(e))
