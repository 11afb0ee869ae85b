"""Pydantic request/response models for the nominations API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from nominations.models import (
    FeedbackResult,
    MediaRejection,
    NomineeDetails,
    NominatorDetails,
    Relationship,
    SummaryRow,
    TradeProfile,
    TradeSearchResult,
)


# ── Step data ─────────────────────────────────────────────────────────────


class NomineeRequest(BaseModel):
    """Partial update of the nominee; omitted fields are left unchanged."""

    company_name: str | None = Field(default=None, max_length=200)
    trade_name: str | None = Field(default=None, max_length=200)
    location: str | None = Field(default=None, max_length=200)


class NominatorRequest(BaseModel):
    """Partial update of the nominator; omitted fields are left unchanged."""

    name: str | None = Field(default=None, max_length=200)
    email: str | None = Field(default=None, max_length=320)
    phone: str | None = Field(default=None, max_length=40)
    relationship: Relationship | None = None


class CategoryRequest(BaseModel):
    category_id: str = Field(..., max_length=100)


class RegionRequest(BaseModel):
    region_id: str | None = Field(default=None, max_length=100)


class TextRequest(BaseModel):
    text: str = Field(..., max_length=10000)


class CategoryResponse(BaseModel):
    award_category: str
    warning: str | None = None


# ── Nominee search ────────────────────────────────────────────────────────


class SelectTradeResponse(BaseModel):
    nominee: NomineeDetails
    profile: TradeProfile | None = None
    profile_error: str | None = None


# ── Justification feedback ────────────────────────────────────────────────


class FeedbackResponse(BaseModel):
    state: str
    feedback: FeedbackResult | None = None
    show_suggestions: bool = False
    is_high_quality: bool = False


# ── Media ─────────────────────────────────────────────────────────────────


class MediaItemResponse(BaseModel):
    filename: str
    content_type: str
    size: int


class MediaUploadResponse(BaseModel):
    accepted: list[str] = []
    rejected: list[MediaRejection] = []
    message: str | None = None
    media: list[MediaItemResponse] = []


# ── Session ───────────────────────────────────────────────────────────────


class DraftResponse(BaseModel):
    """The draft without attachment bodies."""

    nominee: NomineeDetails
    nominator: NominatorDetails
    award_category: str
    region: str | None = None
    justification: str
    additional_details: str | None = None
    media: list[MediaItemResponse] = []


class SummaryResponse(BaseModel):
    current_step: int
    completion_percentage: int
    rows: list[SummaryRow]
    text: str = ""


class SessionResponse(BaseModel):
    session_id: str
    current_step: int
    can_advance: bool
    can_submit: bool
    draft: DraftResponse
    feedback: FeedbackResponse
    selected_trade: TradeSearchResult | None = None
    profile: TradeProfile | None = None


class StepResponse(BaseModel):
    current_step: int
    can_advance: bool
    rows: list[SummaryRow]
