"""Trade-directory client: name search and profile lookup."""
from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from nominations.clients.base import BaseClient
from nominations.config import TradeDirectoryConfig
from nominations.errors import MalformedResponseError, RemoteServiceError, TradeLookupError
from nominations.models import TradeProfile, TradeSearchPage, TradeSearchResult

logger = logging.getLogger("nominations.clients.trades")

SEARCH_ERROR_MESSAGE = "Failed to search trades. Please try again."


# ── Wire payloads ─────────────────────────────────────────────────────

class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class _Label(_WireModel):
    label: str


class _TradeItem(_WireModel):
    company_id: str = Field(alias="companyId")
    name: str
    location: str | None = None
    skills: list[str] | None = None
    logo_url: str | None = Field(default=None, alias="logoUrl")

    @field_validator("company_id", mode="before")
    @classmethod
    def _id_to_str(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class _SearchPayload(_WireModel):
    data: list[_TradeItem]
    page: int
    size: int
    total: int


class _Traits(_WireModel):
    company_type: str | None = Field(default=None, alias="companyType")
    owner: str | None = None


class _ReviewsSummary(_WireModel):
    recent_mean_score: float | None = Field(default=None, alias="recentMeanScore")


class _ProfilePayload(_WireModel):
    company_id: str = Field(alias="companyId")
    name: str
    unique_name: str = Field(default="", alias="uniqueName")
    location: str | None = None
    traits: _Traits | None = None
    skills: list[_Label] | None = None
    categories: list[_Label] | None = None
    description: str | None = None
    reviews_summary: _ReviewsSummary | None = Field(default=None, alias="reviewsSummary")

    @field_validator("company_id", mode="before")
    @classmethod
    def _id_to_str(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


# ── Client ────────────────────────────────────────────────────────────

class TradeDirectoryClient(BaseClient):
    """Looks up trades in the external directory.

    ``search`` never raises: failures come back as an empty page with an
    ``error`` message. ``fetch_profile`` treats not-found as an unverified
    profile and raises only for other failures.
    """

    service_name = "trade directory"

    def __init__(self, config: TradeDirectoryConfig | None = None, **kwargs: Any):
        config = config or TradeDirectoryConfig()
        super().__init__(config.base_url, timeout=config.timeout, **kwargs)
        self.page_size = config.page_size
        self.min_term_length = config.min_term_length

    async def search(self, term: str, page: int = 1, size: int | None = None) -> TradeSearchPage:
        """Search trades by name.

        Terms shorter than ``min_term_length`` (after trimming) return an
        empty page without calling the service.
        """
        term = term.strip()
        size = size or self.page_size
        if len(term) < self.min_term_length:
            return TradeSearchPage(page=page)

        try:
            raw = await self._get("/trades", name=term, page=page, size=size)
            payload = _SearchPayload.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Malformed trade search payload for %r: %s", term, exc)
            return TradeSearchPage(page=page, error=SEARCH_ERROR_MESSAGE)
        except RemoteServiceError as exc:
            logger.warning("Trade search for %r failed: %s", term, exc)
            return TradeSearchPage(page=page, error=SEARCH_ERROR_MESSAGE)

        results = [
            TradeSearchResult(
                company_id=item.company_id,
                name=item.name,
                location=item.location or "",
                skills=item.skills or [],
                logo_url=item.logo_url,
            )
            for item in payload.data
        ]
        return TradeSearchPage(
            results=results,
            has_more=payload.page * payload.size < payload.total,
            total=payload.total,
            page=payload.page,
        )

    async def fetch_profile(self, company_id: str) -> TradeProfile:
        """Fetch a trade's profile by company id.

        Returns:
            The profile, or an unverified empty profile if the directory
            has no such company.

        Raises:
            TradeLookupError: For transport or HTTP failures other than 404.
            MalformedResponseError: If the payload does not match the schema.
        """
        if not company_id:
            raise ValueError("company_id is required")

        try:
            resp = await self._send("GET", f"/trades/{company_id}")
        except RemoteServiceError as exc:
            raise TradeLookupError(self.service_name, exc.detail) from exc

        if resp.status_code == 404:
            logger.info("Trade %s not found in directory; nominee is unverified", company_id)
            return TradeProfile.not_found()

        try:
            raw = self._decode(resp)
        except MalformedResponseError:
            raise
        except RemoteServiceError as exc:
            raise TradeLookupError(self.service_name, exc.detail, status_code=exc.status_code) from exc

        try:
            payload = _ProfilePayload.model_validate(raw)
        except ValidationError as exc:
            raise MalformedResponseError(self.service_name, f"invalid profile payload: {exc}") from exc

        traits = payload.traits or _Traits()
        return TradeProfile(
            company_id=payload.company_id,
            name=payload.name,
            unique_name=payload.unique_name,
            location=payload.location or "",
            is_valid_member=True,
            company_type=traits.company_type,
            owner=traits.owner,
            skills=[s.label for s in payload.skills or []],
            categories=[c.label for c in payload.categories or []],
            description=payload.description,
            rating=payload.reviews_summary.recent_mean_score if payload.reviews_summary else None,
        )
