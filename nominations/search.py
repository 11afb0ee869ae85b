"""Nominee search and selection for step 1."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from nominations.errors import RemoteServiceError
from nominations.models import TradeProfile, TradeSearchPage, TradeSearchResult
from nominations.store import FormDataStore

logger = logging.getLogger("nominations.search")

PROFILE_UNAVAILABLE_MESSAGE = (
    "We couldn't load this trade's profile. You can still continue with your nomination."
)


class TradeLookup(Protocol):
    async def search(self, term: str, page: int = 1, size: int | None = None) -> TradeSearchPage: ...

    async def fetch_profile(self, company_id: str) -> TradeProfile: ...


class TradeSearchController:
    """Debounced, single-flight trade search plus nominee selection.

    A new term cancels whatever search is still pending or running, and a
    response is only applied while its term is still the current one.
    """

    def __init__(
        self,
        client: TradeLookup,
        store: FormDataStore,
        *,
        debounce: float = 0.3,
        min_term_length: int = 2,
    ) -> None:
        self._client = client
        self._store = store
        self.debounce = debounce
        self.min_term_length = min_term_length

        self._term = ""
        self._pending: asyncio.Task[None] | None = None
        self.results: list[TradeSearchResult] = []
        self.has_more = False
        self.total = 0
        self.page = 1
        self.error: str | None = None
        self.loading = False

        self.selected_trade: TradeSearchResult | None = None
        self.profile: TradeProfile | None = None
        self.loading_profile = False
        self.profile_error: str | None = None

    @property
    def term(self) -> str:
        return self._term

    def _searchable(self, term: str) -> bool:
        return len(term.strip()) >= self.min_term_length

    def _cancel_pending(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    def _reset_results(self) -> None:
        self.results = []
        self.has_more = False
        self.total = 0
        self.page = 1
        self.error = None
        self.loading = False

    # -------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------

    def set_term(self, term: str) -> None:
        """Record a keystroke in the search box and schedule a debounced search."""
        self._term = term
        self._cancel_pending()
        if not self._searchable(term):
            self._reset_results()
            return
        self._pending = asyncio.create_task(self._debounced(term))

    async def _debounced(self, term: str) -> None:
        await asyncio.sleep(self.debounce)
        await self._run(term, page=1)

    async def search_now(self, term: str, page: int = 1) -> TradeSearchPage:
        """Search immediately, superseding any pending debounced search."""
        self._term = term
        self._cancel_pending()
        if not self._searchable(term):
            self._reset_results()
            return TradeSearchPage(page=page)
        return await self._run(term, page=page)

    async def load_more(self) -> TradeSearchPage | None:
        """Append the next page of results for the current term."""
        if not self.has_more or not self._searchable(self._term):
            return None
        return await self._run(self._term, page=self.page + 1)

    async def wait_pending(self) -> None:
        """Wait for a scheduled search to finish (used by callers that poll)."""
        if self._pending is not None:
            try:
                await self._pending
            except asyncio.CancelledError:
                pass

    async def _run(self, term: str, page: int) -> TradeSearchPage:
        self.loading = True
        try:
            result = await self._client.search(term, page=page)
        finally:
            if term == self._term:
                self.loading = False

        if term != self._term:
            logger.debug("Discarding search results for stale term %r", term)
            return result

        if page > 1 and result.error is None:
            self.results = [*self.results, *result.results]
        else:
            self.results = list(result.results)
        self.has_more = result.has_more
        self.total = result.total
        self.page = result.page
        self.error = result.error
        return result

    # -------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------

    async def select(self, trade: TradeSearchResult) -> TradeProfile | None:
        """Adopt a search result as the nominee and look up its profile.

        The selection stands even if the profile cannot be loaded; an
        unknown company yields an unverified profile.
        """
        self.selected_trade = trade
        self._store.set_nominee(
            company_id=trade.company_id,
            company_name=trade.name,
            trade_name=trade.name,
            location=trade.location or None,
        )
        self.profile = None
        self.profile_error = None
        if not trade.company_id:
            return None

        self.loading_profile = True
        try:
            profile = await self._client.fetch_profile(trade.company_id)
        except RemoteServiceError as e:
            logger.warning("Profile unavailable for %s: %s", trade.company_id, e)
            if self.selected_trade is trade:
                self.loading_profile = False
                self.profile_error = PROFILE_UNAVAILABLE_MESSAGE
            return None

        if self.selected_trade is not trade:
            # Another trade was picked while this lookup was in flight.
            return profile
        self.loading_profile = False
        self.profile = profile
        return profile

    def clear_selection(self) -> None:
        """Drop the selected trade and fall back to manual entry.

        Names already copied into the draft stay so the user can edit them.
        """
        self.selected_trade = None
        self.profile = None
        self.profile_error = None
        self.loading_profile = False
        self._store.set_nominee(company_id="")

    def reset(self) -> None:
        """Forget the search term, results and selection for a fresh draft."""
        self._cancel_pending()
        self._term = ""
        self._reset_results()
        self.clear_selection()

    async def close(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
            try:
                await self._pending
            except asyncio.CancelledError:
                pass
        self._pending = None
