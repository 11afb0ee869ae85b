"""Quality-Feedback Orchestrator -- live, non-blocking justification feedback.

Analysis is triggered three ways: an explicit "check quality" request, an
idle timer that fires when the user stops typing while the field keeps
focus, and the field losing focus. Text under the analysis threshold is
never sent anywhere; it gets a local ``too_short`` result straight away.

Only the result for the most recently requested text may update the
visible feedback. Older requests still complete (and are remembered in
the session context) but their results are discarded on arrival.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Protocol

from nominations.clients.feedback import error_result, too_short_result
from nominations.models import FeedbackResult, QualityTier
from nominations.validators import is_analyzable

logger = logging.getLogger("nominations.quality")

DEFAULT_IDLE_SECONDS = 15.0

QualityListener = Callable[[bool], None]


class FeedbackAnalyzer(Protocol):
    async def analyze(self, text: str) -> FeedbackResult: ...


class AnalysisState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"  # idle timer armed
    IN_FLIGHT = "in_flight"  # latest request awaiting the service


@dataclass
class SessionContext:
    """Per-session memory of analysed texts.

    Keeps recent results keyed by the exact text so re-checking unchanged
    text does not hit the service again. Error results are not kept, so
    the user can retry after a failure.
    """

    session_id: str
    max_entries: int = 32
    _results: OrderedDict[str, FeedbackResult] = field(default_factory=OrderedDict)

    def lookup(self, text: str) -> FeedbackResult | None:
        result = self._results.get(text)
        if result is not None:
            self._results.move_to_end(text)
        return result

    def remember(self, text: str, result: FeedbackResult) -> None:
        if result.quality == QualityTier.ERROR:
            return
        self._results[text] = result
        self._results.move_to_end(text)
        while len(self._results) > self.max_entries:
            self._results.popitem(last=False)

    def clear(self) -> None:
        self._results.clear()


class QualityFeedbackOrchestrator:
    """Owns the idle timer and analysis tasks for one justification field.

    Must be driven from inside a running event loop. ``close`` cancels the
    timer and every outstanding request; nothing fires afterwards.
    """

    def __init__(
        self,
        client: FeedbackAnalyzer,
        *,
        context: SessionContext,
        idle_seconds: float = DEFAULT_IDLE_SECONDS,
        on_quality_check: QualityListener | None = None,
    ) -> None:
        self._client = client
        self._context = context
        self.idle_seconds = idle_seconds
        self._on_quality_check = on_quality_check

        self._text = ""
        self._edit_seq = 0
        self._focused = False
        self._idle_handle: asyncio.TimerHandle | None = None
        self._tasks: dict[str, asyncio.Task[FeedbackResult]] = {}
        self._latest_text: str | None = None
        self._closed = False

        self.feedback: FeedbackResult | None = None
        self.show_suggestions = False
        self.is_high_quality = False

    # -------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------

    @property
    def text(self) -> str:
        return self._text

    @property
    def state(self) -> AnalysisState:
        if self._idle_handle is not None:
            return AnalysisState.PENDING
        if self._latest_text is not None:
            task = self._tasks.get(self._latest_text)
            if task is not None and not task.done():
                return AnalysisState.IN_FLIGHT
        return AnalysisState.IDLE

    @property
    def loading(self) -> bool:
        return self.state == AnalysisState.IN_FLIGHT

    @property
    def closed(self) -> bool:
        return self._closed

    # -------------------------------------------------------------------
    # Field events
    # -------------------------------------------------------------------

    def set_text(self, text: str) -> None:
        """Record an edit. Re-arms the idle timer while the field has focus."""
        if self._closed or text == self._text:
            return
        self._text = text
        self._edit_seq += 1
        self._cancel_idle()

        if not is_analyzable(text):
            self._apply(too_short_result())
            return
        if self._focused:
            self._arm_idle()

    def focus(self) -> None:
        if self._closed:
            return
        self._focused = True

    def blur(self) -> asyncio.Task[FeedbackResult] | None:
        """Field lost focus: analyse once if the text is long enough."""
        if self._closed:
            return None
        self._focused = False
        self._cancel_idle()
        return self.request_analysis()

    def request_analysis(self) -> asyncio.Task[FeedbackResult] | None:
        """Start (or join) an analysis of the current text right away.

        Returns the task carrying the request, or None when the text is too
        short and a local ``too_short`` result was applied instead.
        """
        if self._closed:
            return None
        self._cancel_idle()
        if not is_analyzable(self._text):
            self._apply(too_short_result())
            return None
        return self._start(self._text)

    async def check_quality(self) -> FeedbackResult | None:
        """Explicit "check quality" action. Waits for the outcome."""
        task = self.request_analysis()
        if task is None:
            return self.feedback
        return await asyncio.shield(task)

    def improve(self) -> asyncio.Task[FeedbackResult] | None:
        """User chose to improve the text: hide suggestions, refocus, re-check."""
        self.show_suggestions = False
        self.focus()
        return self.request_analysis()

    def toggle_suggestions(self) -> bool:
        self.show_suggestions = not self.show_suggestions
        return self.show_suggestions

    async def close(self) -> None:
        """Cancel the idle timer and every request still outstanding."""
        if self._closed:
            return
        self._closed = True
        self._cancel_idle()
        tasks = [t for t in self._tasks.values() if not t.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------

    def _arm_idle(self) -> None:
        loop = asyncio.get_running_loop()
        self._idle_handle = loop.call_later(self.idle_seconds, self._on_idle, self._edit_seq)

    def _cancel_idle(self) -> None:
        if self._idle_handle is not None:
            self._idle_handle.cancel()
            self._idle_handle = None

    def _on_idle(self, edit_seq: int) -> None:
        self._idle_handle = None
        if self._closed or edit_seq != self._edit_seq or not self._focused:
            return
        if is_analyzable(self._text):
            logger.debug("Idle for %.1fs, analysing justification", self.idle_seconds)
            self._start(self._text)

    def _start(self, text: str) -> asyncio.Task[FeedbackResult]:
        self._latest_text = text
        existing = self._tasks.get(text)
        if existing is not None and not existing.done():
            return existing

        task = asyncio.create_task(self._analyze(text))
        self._tasks[text] = task

        def _forget(done: asyncio.Task[FeedbackResult]) -> None:
            if self._tasks.get(text) is done:
                del self._tasks[text]

        task.add_done_callback(_forget)
        return task

    async def _analyze(self, text: str) -> FeedbackResult:
        cached = self._context.lookup(text)
        if cached is not None:
            result = cached
        else:
            try:
                result = await self._client.analyze(text)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning("Feedback analysis failed: %s", e)
                result = error_result()
            self._context.remember(text, result)

        if self._closed or text != self._latest_text or text != self._text:
            logger.debug("Discarding feedback for superseded text (%d chars)", len(text))
            return result
        self._apply(result)
        return result

    def _apply(self, result: FeedbackResult) -> None:
        self.feedback = result
        if result.wants_suggestions:
            self.show_suggestions = True
        self.is_high_quality = result.is_high_quality
        if self._on_quality_check is not None:
            self._on_quality_check(self.is_high_quality)
