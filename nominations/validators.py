"""Step completion predicates.

Each validator is a pure function of the draft. ``is_step_complete``
additionally treats every step behind the current one as complete: once
the user has moved past a step it stays checked in the summary until they
return to it and re-validate.
"""

from __future__ import annotations

import logging
import re

from nominations.catalog import is_known_category
from nominations.models import NominationDraft, NomineeDetails, NominatorDetails

logger = logging.getLogger("nominations.validators")

TOTAL_STEPS = 5
REQUIRED_STEPS = (1, 2, 3, 4)
MIN_JUSTIFICATION_LENGTH = 50
MIN_ANALYSIS_LENGTH = 30

_EMAIL_RE = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$", re.IGNORECASE)


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email.strip()))


def validate_nominee(nominee: NomineeDetails) -> bool:
    return bool(nominee.company_name.strip()) and bool(nominee.trade_name.strip())


def validate_nominator(nominator: NominatorDetails) -> bool:
    return bool(nominator.name.strip()) and is_valid_email(nominator.email)


def validate_award_category(category_id: str) -> bool:
    return bool(category_id.strip())


def validate_justification(text: str) -> bool:
    return len(text.strip()) >= MIN_JUSTIFICATION_LENGTH


def is_analyzable(text: str) -> bool:
    """Long enough to send for quality feedback, though maybe not to submit."""
    return len(text) >= MIN_ANALYSIS_LENGTH


def category_warning(category_id: str) -> str | None:
    """Non-blocking notice for a category outside the fixed set."""
    if category_id.strip() and not is_known_category(category_id):
        logger.warning("Award category '%s' is not in the catalog", category_id)
        return f"'{category_id}' is not one of the listed award categories"
    return None


def validate_step(step: int, draft: NominationDraft) -> bool:
    """Validate a step's captured data, ignoring navigation position."""
    if step == 1:
        return validate_nominee(draft.nominee)
    if step == 2:
        return validate_nominator(draft.nominator)
    if step == 3:
        return validate_award_category(draft.award_category)
    if step == 4:
        return validate_justification(draft.justification)
    if step == 5:
        # Supporting materials are optional.
        return True
    return False


def is_step_complete(step: int, current_step: int, draft: NominationDraft) -> bool:
    if current_step > step:
        return True
    return validate_step(step, draft)


def incomplete_required_steps(draft: NominationDraft) -> list[int]:
    return [s for s in REQUIRED_STEPS if not validate_step(s, draft)]


def can_submit(draft: NominationDraft) -> bool:
    return not incomplete_required_steps(draft)


def step_completion_percentage(draft: NominationDraft) -> int:
    """Share of the five steps with captured data, as a whole percentage.

    Unlike ``validate_step``, step 5 only counts once something is attached.
    """
    completed = sum(1 for s in REQUIRED_STEPS if validate_step(s, draft))
    if draft.media:
        completed += 1
    return round(completed / TOTAL_STEPS * 100)
