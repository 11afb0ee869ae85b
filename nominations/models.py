"""Pydantic models for the nomination draft, trade lookups, and quality feedback."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


# ── Enumerations ──────────────────────────────────────────────────────

class Relationship(str, Enum):
    CUSTOMER = "customer"
    COLLEAGUE = "colleague"
    FRIEND = "friend"
    FAMILY = "family"
    SELF = "self"


class QualityTier(str, Enum):
    TOO_SHORT = "too_short"
    NEEDS_IMPROVEMENT = "needs_improvement"
    AVERAGE = "average"
    GOOD = "good"
    ERROR = "error"


# ── Catalog entries ───────────────────────────────────────────────────

class AwardCategory(BaseModel):
    id: str
    name: str
    description: str | None = None
    allows_self_nomination: bool = False


class Region(BaseModel):
    id: str
    name: str


# ── Nomination draft ──────────────────────────────────────────────────

class NomineeDetails(BaseModel):
    company_id: str = ""  # empty when the nominee was entered manually
    company_name: str = ""
    trade_name: str = ""
    location: str | None = None


class NominatorDetails(BaseModel):
    name: str = ""
    email: str = ""
    phone: str | None = None
    relationship: Relationship = Relationship.CUSTOMER


class MediaAttachment(BaseModel):
    """A binary image attached to the nomination."""

    filename: str
    content_type: str
    data: bytes = Field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)


class NominationDraft(BaseModel):
    """Everything the nominator has captured so far in one session."""

    nominee: NomineeDetails = Field(default_factory=NomineeDetails)
    nominator: NominatorDetails = Field(default_factory=NominatorDetails)
    award_category: str = ""
    region: str | None = None
    justification: str = ""
    media: list[MediaAttachment] = []
    additional_details: str | None = None


class MediaRejection(BaseModel):
    filename: str
    reason: str


class MediaAddResult(BaseModel):
    """Outcome of adding a batch of files; valid files are kept even if others fail."""

    accepted: list[str] = []
    rejected: list[MediaRejection] = []

    @property
    def message(self) -> str | None:
        if not self.rejected:
            return None
        names = ", ".join(f"{r.filename} ({r.reason})" for r in self.rejected)
        return f"Some files were not added: {names}"


# ── Trade directory ───────────────────────────────────────────────────

class TradeSearchResult(BaseModel):
    company_id: str
    name: str
    location: str = ""
    skills: list[str] = []
    logo_url: str | None = None


class TradeSearchPage(BaseModel):
    """One page of search results. ``error`` is set when the lookup failed."""

    results: list[TradeSearchResult] = []
    has_more: bool = False
    total: int = 0
    page: int = 1
    error: str | None = None


class TradeProfile(BaseModel):
    company_id: str = ""
    name: str = ""
    unique_name: str = ""
    location: str = ""
    is_valid_member: bool = False
    company_type: str | None = None
    owner: str | None = None
    skills: list[str] = []
    categories: list[str] = []
    description: str | None = None
    rating: float | None = None  # 0-10

    @classmethod
    def not_found(cls) -> TradeProfile:
        """Profile for a company the directory does not know about."""
        return cls(is_valid_member=False)


# ── Quality feedback ──────────────────────────────────────────────────

class CriteriaAlignment(BaseModel):
    trust: float = Field(ge=0, le=10)
    quality: float = Field(ge=0, le=10)
    reliability: float = Field(ge=0, le=10)


class FeedbackResult(BaseModel):
    quality: QualityTier
    feedback: str
    suggestions: list[str] | None = None
    criteria_alignment: CriteriaAlignment | None = None
    score: float | None = None

    @property
    def is_high_quality(self) -> bool:
        return self.quality == QualityTier.GOOD

    @property
    def wants_suggestions(self) -> bool:
        return self.quality in (QualityTier.NEEDS_IMPROVEMENT, QualityTier.AVERAGE)


class ScoreCriteria(BaseModel):
    trust: float = Field(ge=0, le=10)
    quality: float = Field(ge=0, le=10)
    reliability: float = Field(ge=0, le=10)
    specificity: float = Field(ge=0, le=10)
    enthusiasm: float = Field(ge=0, le=10)


class NominationScore(BaseModel):
    """Reviewer-facing assessment of a complete nomination."""

    overall_score: float = Field(ge=0, le=100)
    criteria: ScoreCriteria
    strengths: list[str] = []
    recommend_shortlist: bool = False
    reasons: list[str] = []


# ── Summary & submission ──────────────────────────────────────────────

class SummaryRow(BaseModel):
    step: int
    title: str
    complete: bool
    is_current: bool
    preview: list[str] = []
    can_edit: bool = False


class NominationSubmission(BaseModel):
    """The single payload handed to the submission backend."""

    draft: NominationDraft
    feedback: FeedbackResult | None = None
    submitted_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class SubmissionReceipt(BaseModel):
    reference: str
    submitted_at: str
