"""Summary View -- read-only projection of the draft into per-step rows."""

from __future__ import annotations

from nominations.catalog import get_award_category_name, get_region_name
from nominations.models import NominationDraft, Relationship, SummaryRow
from nominations.steps import step_title
from nominations.validators import TOTAL_STEPS, is_step_complete

PREVIEW_LENGTH = 60
SUMMARY_TEXT_LENGTH = 100


def truncate_text(text: str | None, max_length: int) -> str:
    """Shorten ``text`` to at most ``max_length`` characters on a word boundary.

    Text that already fits is returned unchanged; otherwise the cut falls
    at the last space inside the limit and an ellipsis is appended. A single
    word longer than the limit has no boundary to cut at, so it is cut at
    ``max_length`` instead.
    """
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    truncated = text[:max_length]
    # The cut already lands on a word boundary when the next char is a space.
    if text[max_length] != " ":
        last_space = truncated.rfind(" ")
        if last_space > 0:
            truncated = truncated[:last_space]
    return truncated.rstrip() + "..."


def step_preview(step: int, draft: NominationDraft) -> list[str]:
    """Short lines describing what a step has captured."""
    lines: list[str] = []
    if step == 1:
        if draft.nominee.company_name:
            lines.append(draft.nominee.company_name)
        if draft.nominee.trade_name:
            lines.append(draft.nominee.trade_name)
    elif step == 2:
        nominator = draft.nominator
        if nominator.name:
            lines.append(nominator.name)
        if nominator.email:
            lines.append(nominator.email)
        if nominator.relationship == Relationship.SELF:
            lines.append("Self-nomination")
        else:
            lines.append(f"As: {nominator.relationship.value}")
    elif step == 3:
        if draft.award_category:
            lines.append(get_award_category_name(draft.award_category))
        if draft.region:
            lines.append(f"Region: {get_region_name(draft.region)}")
    elif step == 4:
        if draft.justification:
            lines.append(truncate_text(draft.justification, PREVIEW_LENGTH))
    elif step == 5:
        count = len(draft.media)
        if count:
            lines.append(f"{count} image{'s' if count != 1 else ''} attached")
        else:
            lines.append("No images attached")
        if draft.additional_details:
            lines.append("Additional details provided")
    return lines


def build_summary(current_step: int, draft: NominationDraft) -> list[SummaryRow]:
    rows: list[SummaryRow] = []
    for step in range(1, TOTAL_STEPS + 1):
        complete = is_step_complete(step, current_step, draft)
        rows.append(
            SummaryRow(
                step=step,
                title=step_title(step),
                complete=complete,
                is_current=step == current_step,
                preview=step_preview(step, draft) if complete else [],
                can_edit=complete and step < current_step,
            )
        )
    return rows


def form_summary_text(draft: NominationDraft) -> str:
    """Plain-text digest of the nomination, one fact per line."""
    lines: list[str] = []
    nominee = draft.nominee
    if nominee.company_name:
        line = f"Nominating: {nominee.company_name}"
        if nominee.trade_name and nominee.trade_name != nominee.company_name:
            line += f" ({nominee.trade_name})"
        lines.append(line)

    nominator = draft.nominator
    if nominator.name:
        lines.append(f"Nominated by: {nominator.name} ({nominator.relationship.value})")

    if draft.award_category:
        lines.append(f"Category: {get_award_category_name(draft.award_category)}")

    if draft.justification:
        lines.append(f"Justification: {truncate_text(draft.justification, SUMMARY_TEXT_LENGTH)}")

    if draft.media:
        lines.append(f"Supporting materials: {len(draft.media)} items")

    return "\n".join(lines)
