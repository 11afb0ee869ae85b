"""Quality-feedback client for nomination justifications.

Talks to the text-quality service when one is configured and falls back
to a deterministic length-based heuristic when it is not. Every payload
is validated against a strict schema before it is trusted.
"""
from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from nominations.clients.base import BaseClient
from nominations.config import FeedbackConfig
from nominations.errors import MalformedResponseError, RemoteServiceError
from nominations.models import (
    CriteriaAlignment,
    FeedbackResult,
    NominationScore,
    QualityTier,
    ScoreCriteria,
)
from nominations.validators import MIN_ANALYSIS_LENGTH

logger = logging.getLogger("nominations.clients.feedback")

TOO_SHORT_MESSAGE = (
    "Your nomination is too short. Please provide more details about why "
    "this trade deserves recognition."
)
ERROR_MESSAGE = (
    "We could not analyze your nomination at this time. Please continue "
    "with your submission."
)
HEURISTIC_MESSAGE = (
    "Automatic feedback is based on the length of your nomination. Adding "
    "specific examples will make it stronger."
)
HEURISTIC_SUGGESTIONS = [
    "Include specific examples of the trade's work",
    "Mention how they demonstrated trustworthiness",
    "Describe the quality of their craftsmanship",
    "Explain how they were reliable and professional",
]


def tier_for_score(score: float) -> QualityTier:
    """Map a 0-10 quality score onto a tier."""
    if score > 7:
        return QualityTier.GOOD
    if score > 4:
        return QualityTier.AVERAGE
    return QualityTier.NEEDS_IMPROVEMENT


def too_short_result() -> FeedbackResult:
    return FeedbackResult(quality=QualityTier.TOO_SHORT, feedback=TOO_SHORT_MESSAGE, score=0)


def error_result() -> FeedbackResult:
    return FeedbackResult(quality=QualityTier.ERROR, feedback=ERROR_MESSAGE)


def heuristic_feedback(text: str) -> FeedbackResult:
    """Deterministic local scoring used when no service is configured."""
    length = len(text)
    score = min(length // 20, 10)
    return FeedbackResult(
        quality=tier_for_score(score),
        feedback=HEURISTIC_MESSAGE,
        suggestions=list(HEURISTIC_SUGGESTIONS),
        criteria_alignment=CriteriaAlignment(
            trust=min(length // 25, 10),
            quality=min(length // 30, 10),
            reliability=min(length // 35, 10),
        ),
        score=score,
    )


def heuristic_score() -> NominationScore:
    return NominationScore(
        overall_score=75,
        criteria=ScoreCriteria(trust=8, quality=7, reliability=8, specificity=6, enthusiasm=9),
        strengths=[
            "Shows enthusiasm for the trade's work",
            "Emphasizes trust and reliability",
            "Mentions specific skills",
        ],
        recommend_shortlist=True,
        reasons=[
            "Strong overall nomination",
            "Good alignment with judging criteria",
            "Specific examples provided",
        ],
    )


# ── Wire payloads ─────────────────────────────────────────────────────

class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class _FeedbackPayload(_WireModel):
    quality: QualityTier | None = None
    feedback: str
    suggestions: list[str] | None = None
    criteria_alignment: CriteriaAlignment | None = Field(default=None, alias="criteriaAlignment")
    score: float | None = Field(default=None, ge=0, le=10)

    @model_validator(mode="after")
    def _needs_tier_or_score(self) -> _FeedbackPayload:
        if self.quality is None and self.score is None:
            raise ValueError("payload carries neither a quality tier nor a score")
        if self.quality == QualityTier.ERROR:
            raise ValueError("service reported an error tier")
        return self


class _ScorePayload(_WireModel):
    overall_score: float = Field(alias="overallScore", ge=0, le=100)
    criteria: ScoreCriteria
    strengths: list[str] = []
    recommend_shortlist: bool = Field(alias="recommendShortlist")
    reasons: list[str] = []


class _DuplicatesPayload(_WireModel):
    are_duplicates: bool = Field(alias="areDuplicates")
    explanation: str = ""


# ── Client ────────────────────────────────────────────────────────────

class FeedbackClient(BaseClient):
    """Client for the justification quality-feedback service."""

    service_name = "feedback service"

    def __init__(self, config: FeedbackConfig | None = None, **kwargs: Any):
        config = config or FeedbackConfig()
        headers: dict[str, str] = {}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        super().__init__(config.base_url, timeout=config.timeout, headers=headers, **kwargs)
        self.config = config

    @property
    def is_remote(self) -> bool:
        return self.config.is_configured

    async def analyze(self, text: str) -> FeedbackResult:
        """Assess a justification.

        Never raises: failures and malformed payloads come back as an
        ``error``-tier result.
        """
        if len(text) < MIN_ANALYSIS_LENGTH:
            return too_short_result()

        if not self.is_remote:
            logger.debug("Feedback service not configured, using local heuristic")
            return heuristic_feedback(text)

        try:
            raw = await self._post("/feedback", body={"text": text})
            payload = _FeedbackPayload.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Malformed feedback payload: %s", exc)
            return error_result()
        except RemoteServiceError as exc:
            logger.warning("Feedback request failed: %s", exc)
            return error_result()

        quality = payload.quality or tier_for_score(payload.score)
        return FeedbackResult(
            quality=quality,
            feedback=payload.feedback,
            suggestions=payload.suggestions,
            criteria_alignment=payload.criteria_alignment,
            score=payload.score,
        )

    async def score_nomination(
        self, category: str, relationship: str, justification: str
    ) -> NominationScore:
        """Score a complete nomination for reviewers.

        Raises:
            RemoteServiceError: If the service call fails.
            MalformedResponseError: If the payload does not match the schema.
        """
        if not self.is_remote:
            return heuristic_score()

        raw = await self._post(
            "/score",
            body={
                "category": category,
                "relationship": relationship,
                "justification": justification,
            },
        )
        try:
            payload = _ScorePayload.model_validate(raw)
        except ValidationError as exc:
            raise MalformedResponseError(self.service_name, f"invalid score payload: {exc}") from exc
        return NominationScore(
            overall_score=payload.overall_score,
            criteria=payload.criteria,
            strengths=payload.strengths,
            recommend_shortlist=payload.recommend_shortlist,
            reasons=payload.reasons,
        )

    async def check_duplicates(self, justifications: list[str]) -> bool:
        """Whether the texts look like one nomination with minor variations.

        Defaults to False whenever the check cannot be made.
        """
        if len(justifications) < 2 or not self.is_remote:
            return False
        try:
            raw = await self._post("/duplicates", body={"texts": justifications})
            payload = _DuplicatesPayload.model_validate(raw)
        except (RemoteServiceError, ValidationError) as exc:
            logger.warning("Duplicate check failed: %s", exc)
            return False
        return payload.are_duplicates
