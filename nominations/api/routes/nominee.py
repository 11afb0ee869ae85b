"""Nominee routes -- trade search, selection, and manual entry."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from nominations.api.deps import get_session
from nominations.api.models import NomineeRequest, SelectTradeResponse
from nominations.models import NomineeDetails, TradeSearchPage, TradeSearchResult
from nominations.session import NominationSession

logger = logging.getLogger("nominations.api.nominee")

router = APIRouter(prefix="/api/sessions/{session_id}", tags=["nominee"])


@router.get("/trades", response_model=TradeSearchPage)
async def search_trades(
    term: str = Query("", max_length=100),
    more: bool = False,
    session: NominationSession = Depends(get_session),
) -> TradeSearchPage:
    """Search the trade directory. ``more=true`` appends the next page."""
    search = session.search
    if more and term == search.term:
        await search.load_more()
    else:
        await search.search_now(term)
    return TradeSearchPage(
        results=search.results,
        has_more=search.has_more,
        total=search.total,
        page=search.page,
        error=search.error,
    )


@router.post("/trades/select", response_model=SelectTradeResponse)
async def select_trade(
    body: TradeSearchResult,
    session: NominationSession = Depends(get_session),
) -> SelectTradeResponse:
    """Adopt a search result as the nominee and fetch its profile."""
    await session.search.select(body)
    return SelectTradeResponse(
        nominee=session.store.nominee,
        profile=session.search.profile,
        profile_error=session.search.profile_error,
    )


@router.delete("/trades/selection", response_model=NomineeDetails)
async def clear_selection(session: NominationSession = Depends(get_session)) -> NomineeDetails:
    session.search.clear_selection()
    return session.store.nominee


@router.put("/nominee", response_model=NomineeDetails)
async def update_nominee(
    body: NomineeRequest,
    session: NominationSession = Depends(get_session),
) -> NomineeDetails:
    """Manual entry of nominee details."""
    return session.store.set_nominee(**body.model_dump(exclude_none=True))
