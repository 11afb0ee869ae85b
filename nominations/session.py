"""Nomination session -- the root of one user's multi-step form flow."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Awaitable, Callable

from nominations.catalog import available_categories
from nominations.clients.feedback import FeedbackClient
from nominations.config import NominationsConfig, get_config
from nominations.errors import StepNavigationError, SubmissionNotAllowedError
from nominations.models import (
    AwardCategory,
    MediaAddResult,
    MediaAttachment,
    NominationDraft,
    NominationScore,
    NominationSubmission,
    SubmissionReceipt,
    SummaryRow,
)
from nominations.quality import QualityFeedbackOrchestrator, SessionContext
from nominations.search import TradeLookup, TradeSearchController
from nominations.steps import LAST_STEP, StepStateMachine
from nominations.store import FormDataStore
from nominations.summary import build_summary, form_summary_text
from nominations.validators import (
    can_submit,
    incomplete_required_steps,
    step_completion_percentage,
    validate_step,
)

logger = logging.getLogger("nominations.session")

Submitter = Callable[[NominationSubmission], Awaitable[SubmissionReceipt]]


async def log_submission(submission: NominationSubmission) -> SubmissionReceipt:
    """Default submitter: the backend is not wired up yet, so just record it."""
    reference = f"nom-{uuid.uuid4().hex[:8]}"
    draft = submission.draft
    logger.info(
        "Nomination %s submitted for '%s' in category '%s' (%d attachment(s))",
        reference,
        draft.nominee.company_name,
        draft.award_category,
        len(draft.media),
    )
    return SubmissionReceipt(reference=reference, submitted_at=submission.submitted_at)


class NominationSession:
    """Wires the store, step machine, nominee search and quality feedback.

    Usage::

        async with NominationSession(trades, feedback) as session:
            await session.search.search_now("smith")
            session.store.set_nominator(name="Ann", email="ann@example.com")
            session.next_step()
    """

    def __init__(
        self,
        trade_client: TradeLookup,
        feedback_client: FeedbackClient,
        *,
        config: NominationsConfig | None = None,
        session_id: str | None = None,
        submitter: Submitter | None = None,
    ) -> None:
        config = config or get_config()
        self.session_id = session_id or f"session-{uuid.uuid4().hex[:12]}"
        self._feedback_client = feedback_client
        self._submitter = submitter or log_submission

        self.store = FormDataStore(
            max_media=config.max_media, max_media_bytes=config.max_media_bytes
        )
        self.steps = StepStateMachine()
        self.context = SessionContext(session_id=self.session_id)
        self.search = TradeSearchController(
            trade_client,
            self.store,
            debounce=config.trades.search_debounce,
            min_term_length=config.trades.min_term_length,
        )
        self.quality = QualityFeedbackOrchestrator(
            feedback_client,
            context=self.context,
            idle_seconds=config.feedback.idle_seconds,
            on_quality_check=self._on_quality_check,
        )
        self.justification_high_quality = False
        self.last_receipt: SubmissionReceipt | None = None
        self._unsubscribe = self.store.subscribe(self._on_draft_changed)

    async def __aenter__(self) -> NominationSession:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # -------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------

    @property
    def current_step(self) -> int:
        return self.steps.current_step

    @property
    def draft(self) -> NominationDraft:
        return self.store.watch_all()

    def summary(self) -> list[SummaryRow]:
        return build_summary(self.steps.current_step, self.store.view)

    def summary_text(self) -> str:
        return form_summary_text(self.store.view)

    def completion_percentage(self) -> int:
        return step_completion_percentage(self.store.view)

    def available_categories(self) -> list[AwardCategory]:
        return available_categories(self.store.nominator.relationship)

    def can_advance(self) -> bool:
        step = self.steps.current_step
        return step < LAST_STEP and validate_step(step, self.store.view)

    def can_submit(self) -> bool:
        return can_submit(self.store.view)

    # -------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------

    def next_step(self) -> int:
        """Advance once the current step validates.

        Raises:
            StepNavigationError: If the current step is incomplete or last.
        """
        step = self.steps.current_step
        if step >= LAST_STEP:
            raise StepNavigationError(step + 1, "already on the last step")
        if not validate_step(step, self.store.view):
            raise StepNavigationError(step + 1, f"step {step} is incomplete")
        return self.steps.advance()

    def previous_step(self) -> int:
        return self.steps.retreat()

    def navigate_to(self, step: int) -> int:
        return self.steps.jump_to(step, self.store.view)

    # -------------------------------------------------------------------
    # Step data
    # -------------------------------------------------------------------

    def set_justification(self, text: str) -> None:
        self.store.set_justification(text)

    def add_media(self, files: list[MediaAttachment]) -> MediaAddResult:
        return self.store.add_media(files)

    # -------------------------------------------------------------------
    # Scoring & submission
    # -------------------------------------------------------------------

    async def score(self) -> NominationScore:
        """Reviewer-style score for the nomination as it stands."""
        draft = self.store.view
        return await self._feedback_client.score_nomination(
            category=draft.award_category,
            relationship=draft.nominator.relationship.value,
            justification=draft.justification,
        )

    async def submit(self, submitter: Submitter | None = None) -> SubmissionReceipt:
        """Hand the complete draft to the submitter and start afresh.

        Raises:
            SubmissionNotAllowedError: If any of steps 1-4 does not validate.
        """
        draft = self.store.watch_all()
        missing = incomplete_required_steps(draft)
        if missing:
            raise SubmissionNotAllowedError(missing)

        submission = NominationSubmission(draft=draft, feedback=self.quality.feedback)
        receipt = await (submitter or self._submitter)(submission)
        self.last_receipt = receipt

        self.store.reset()
        self.steps = StepStateMachine()
        self.search.reset()
        self.context.clear()
        self.justification_high_quality = False
        return receipt

    async def close(self) -> None:
        """Tear down timers and outstanding requests."""
        self._unsubscribe()
        await self.quality.close()
        await self.search.close()

    # -------------------------------------------------------------------
    # Callbacks
    # -------------------------------------------------------------------

    def _on_draft_changed(self, draft: NominationDraft) -> None:
        self.quality.set_text(draft.justification)

    def _on_quality_check(self, is_high_quality: bool) -> None:
        self.justification_high_quality = is_high_quality
