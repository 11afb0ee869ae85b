"""Fixed award categories and regions offered by the nomination form."""

from __future__ import annotations

import logging

from nominations.models import AwardCategory, Region, Relationship

logger = logging.getLogger("nominations.catalog")

AWARD_CATEGORIES: tuple[AwardCategory, ...] = (
    AwardCategory(id="tradesperson", name="Tradesperson of the Year"),
    AwardCategory(id="customer-service", name="Excellence in Customer Service"),
    AwardCategory(id="quality", name="Quality Craftsmanship Award"),
    AwardCategory(id="rising-star", name="Rising Star", allows_self_nomination=True),
    AwardCategory(id="community-hero", name="Community Hero", allows_self_nomination=True),
    AwardCategory(id="sustainability", name="Sustainability Champion", allows_self_nomination=True),
    AwardCategory(id="technology", name="Technology Innovation", allows_self_nomination=True),
    AwardCategory(id="women-in-trade", name="Women in Trade", allows_self_nomination=True),
)

REGIONS: tuple[Region, ...] = (
    Region(id="national", name="National"),
    Region(id="north", name="North"),
    Region(id="south", name="South"),
    Region(id="east", name="East"),
    Region(id="west", name="West"),
)

_CATEGORIES_BY_ID = {c.id: c for c in AWARD_CATEGORIES}
_REGIONS_BY_ID = {r.id: r for r in REGIONS}


def get_category(category_id: str) -> AwardCategory | None:
    return _CATEGORIES_BY_ID.get(category_id)


def is_known_category(category_id: str) -> bool:
    return category_id in _CATEGORIES_BY_ID


def get_award_category_name(category_id: str | None) -> str:
    """Display name for a category id, falling back to the id itself."""
    if not category_id:
        return "Unknown Category"
    category = get_category(category_id)
    if category is None:
        logger.warning("Unknown award category: %s", category_id)
        return category_id
    return category.name


def get_region_name(region_id: str | None) -> str:
    """Display name for a region id, falling back to the id itself."""
    if not region_id:
        return "Unknown Region"
    region = _REGIONS_BY_ID.get(region_id)
    if region is None:
        logger.warning("Unknown region: %s", region_id)
        return region_id
    return region.name


def available_categories(relationship: Relationship) -> list[AwardCategory]:
    """Categories the nominator may pick; self-nominations see a subset."""
    if relationship != Relationship.SELF:
        return list(AWARD_CATEGORIES)
    return [c for c in AWARD_CATEGORIES if c.allows_self_nomination]


def is_selectable(category_id: str, relationship: Relationship) -> bool:
    """Whether ``category_id`` may be chosen for ``relationship``.

    Ids outside the fixed set are permitted so nominations for ad-hoc
    categories still go through.
    """
    category = get_category(category_id)
    if category is None:
        return True
    return relationship != Relationship.SELF or category.allows_self_nomination
