"""Form Data Store -- single source of truth for one session's draft."""

from __future__ import annotations

import logging
from typing import Any, Callable

from nominations.catalog import is_selectable
from nominations.errors import CategoryNotAllowedError
from nominations.models import (
    MediaAddResult,
    MediaAttachment,
    MediaRejection,
    NominationDraft,
    NomineeDetails,
    NominatorDetails,
    Relationship,
)
from nominations.validators import category_warning

logger = logging.getLogger("nominations.store")

DraftListener = Callable[[NominationDraft], None]


class FormDataStore:
    """Holds the NominationDraft and notifies listeners after every change.

    All mutation is synchronous and local. Readers get copies, so a view
    can never modify the draft behind the store's back.
    """

    def __init__(self, max_media: int = 5, max_media_bytes: int = 5 * 1024 * 1024) -> None:
        self._draft = NominationDraft()
        self._listeners: list[DraftListener] = []
        self.max_media = max_media
        self.max_media_bytes = max_media_bytes

    # -------------------------------------------------------------------
    # Subscription
    # -------------------------------------------------------------------

    def subscribe(self, listener: DraftListener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        if not self._listeners:
            return
        snapshot = self.watch_all()
        for listener in list(self._listeners):
            listener(snapshot)

    def watch_all(self) -> NominationDraft:
        """Snapshot of the entire draft for derived views."""
        return self._draft.model_copy(deep=True)

    @property
    def view(self) -> NominationDraft:
        """The live draft, for read-only checks. Never mutate it."""
        return self._draft

    def reset(self) -> None:
        self._draft = NominationDraft()
        self._changed()

    # -------------------------------------------------------------------
    # Field groups
    # -------------------------------------------------------------------

    @property
    def nominee(self) -> NomineeDetails:
        return self._draft.nominee.model_copy()

    def set_nominee(self, **changes: Any) -> NomineeDetails:
        merged = {**self._draft.nominee.model_dump(), **changes}
        self._draft.nominee = NomineeDetails.model_validate(merged)
        self._changed()
        return self.nominee

    @property
    def nominator(self) -> NominatorDetails:
        return self._draft.nominator.model_copy()

    def set_nominator(self, **changes: Any) -> NominatorDetails:
        merged = {**self._draft.nominator.model_dump(), **changes}
        self._draft.nominator = NominatorDetails.model_validate(merged)
        category = self._draft.award_category
        if category and not is_selectable(category, self._draft.nominator.relationship):
            logger.info(
                "Clearing category '%s': not open to self-nominations", category
            )
            self._draft.award_category = ""
        self._changed()
        return self.nominator

    @property
    def award_category(self) -> str:
        return self._draft.award_category

    def set_award_category(self, category_id: str) -> str | None:
        """Select a category. Returns a warning for ids outside the catalog.

        Raises:
            CategoryNotAllowedError: If the nominator is nominating themselves
                and the category does not accept self-nominations.
        """
        relationship = self._draft.nominator.relationship
        if category_id and not is_selectable(category_id, relationship):
            raise CategoryNotAllowedError(category_id, relationship.value)
        self._draft.award_category = category_id
        self._changed()
        return category_warning(category_id)

    @property
    def region(self) -> str | None:
        return self._draft.region

    def set_region(self, region_id: str | None) -> None:
        self._draft.region = region_id or None
        self._changed()

    @property
    def justification(self) -> str:
        return self._draft.justification

    def set_justification(self, text: str) -> None:
        self._draft.justification = text
        self._changed()

    @property
    def additional_details(self) -> str | None:
        return self._draft.additional_details

    def set_additional_details(self, text: str | None) -> None:
        self._draft.additional_details = text or None
        self._changed()

    # -------------------------------------------------------------------
    # Media
    # -------------------------------------------------------------------

    @property
    def media(self) -> list[MediaAttachment]:
        return list(self._draft.media)

    def add_media(self, files: list[MediaAttachment]) -> MediaAddResult:
        """Append images in order, rejecting invalid ones individually.

        Files that are not images, exceed the size cap, or would take the
        total past the count limit are reported back; the rest are kept.
        """
        result = MediaAddResult()
        added: list[MediaAttachment] = []
        for item in files:
            if not item.content_type.startswith("image/"):
                reason = "not an image"
            elif item.size > self.max_media_bytes:
                reason = f"exceeds {self.max_media_bytes // (1024 * 1024)}MB"
            elif len(self._draft.media) + len(added) >= self.max_media:
                reason = f"limit of {self.max_media} images reached"
            else:
                added.append(item)
                result.accepted.append(item.filename)
                continue
            result.rejected.append(MediaRejection(filename=item.filename, reason=reason))

        if result.rejected:
            logger.info("Rejected %d attachment(s): %s", len(result.rejected), result.message)
        if added:
            self._draft.media = [*self._draft.media, *added]
            self._changed()
        return result

    def remove_media(self, index: int) -> MediaAttachment:
        """Remove the attachment at ``index``.

        Raises:
            IndexError: If no attachment exists at that position.
        """
        if not 0 <= index < len(self._draft.media):
            raise IndexError(f"No attachment at position {index}")
        media = list(self._draft.media)
        removed = media.pop(index)
        self._draft.media = media
        self._changed()
        return removed

    def is_self_nomination(self) -> bool:
        return self._draft.nominator.relationship == Relationship.SELF
