"""Unit tests for the Form Data Store and the Step State Machine."""

from __future__ import annotations

import pytest

from nominations.errors import CategoryNotAllowedError, StepNavigationError
from nominations.models import (
    MediaAttachment,
    NominationDraft,
    NominatorDetails,
    NomineeDetails,
    Relationship,
)
from nominations.steps import StepStateMachine, step_title
from nominations.store import FormDataStore


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _image(name: str = "photo.jpg", size: int = 10, content_type: str = "image/jpeg") -> MediaAttachment:
    return MediaAttachment(filename=name, content_type=content_type, data=b"x" * size)


# ---------------------------------------------------------------------------
# store.py tests
# ---------------------------------------------------------------------------


class TestFormDataStore:
    def test_starts_empty(self):
        draft = FormDataStore().watch_all()
        assert draft == NominationDraft()
        assert draft.nominator.relationship == Relationship.CUSTOMER

    def test_partial_updates_merge(self):
        store = FormDataStore()
        store.set_nominee(company_name="Acme")
        store.set_nominee(trade_name="Roofing")
        assert store.nominee.company_name == "Acme"
        assert store.nominee.trade_name == "Roofing"

    def test_relationship_accepts_string(self):
        store = FormDataStore()
        store.set_nominator(relationship="family")
        assert store.nominator.relationship == Relationship.FAMILY

    def test_view_is_live_draft(self):
        store = FormDataStore()
        view = store.view
        store.set_justification("updated")
        assert store.view.justification == "updated"
        assert store.view is view

    def test_watch_all_returns_copy(self):
        store = FormDataStore()
        snapshot = store.watch_all()
        snapshot.nominee.company_name = "Changed"
        assert store.nominee.company_name == ""

    def test_listeners_see_every_change(self):
        store = FormDataStore()
        seen: list[str] = []
        unsubscribe = store.subscribe(lambda d: seen.append(d.justification))
        store.set_justification("one")
        store.set_justification("two")
        unsubscribe()
        store.set_justification("three")
        assert seen == ["one", "two"]

    def test_reset(self):
        store = FormDataStore()
        store.set_nominee(company_name="Acme")
        store.reset()
        assert store.nominee == NomineeDetails()

    def test_region_and_details_blank_become_none(self):
        store = FormDataStore()
        store.set_region("")
        store.set_additional_details("")
        assert store.region is None
        assert store.additional_details is None


class TestCategorySelection:
    def test_unknown_category_returns_warning(self):
        store = FormDataStore()
        warning = store.set_award_category("best-apprentice")
        assert warning is not None
        assert store.award_category == "best-apprentice"

    def test_known_category_no_warning(self):
        store = FormDataStore()
        assert store.set_award_category("quality") is None

    def test_self_nomination_rejects_closed_category(self):
        store = FormDataStore()
        store.set_nominator(relationship=Relationship.SELF)
        with pytest.raises(CategoryNotAllowedError):
            store.set_award_category("tradesperson")
        assert store.award_category == ""

    def test_switching_to_self_clears_closed_category(self):
        store = FormDataStore()
        store.set_award_category("tradesperson")
        store.set_nominator(relationship=Relationship.SELF)
        assert store.award_category == ""

    def test_switching_to_self_keeps_open_category(self):
        store = FormDataStore()
        store.set_award_category("rising-star")
        store.set_nominator(relationship=Relationship.SELF)
        assert store.award_category == "rising-star"
        assert store.is_self_nomination()


class TestMedia:
    def test_accepts_images_in_order(self):
        store = FormDataStore()
        result = store.add_media([_image("a.jpg"), _image("b.png", content_type="image/png")])
        assert result.accepted == ["a.jpg", "b.png"]
        assert result.rejected == []
        assert result.message is None
        assert [m.filename for m in store.media] == ["a.jpg", "b.png"]

    def test_mixed_batch_keeps_valid_files(self):
        store = FormDataStore(max_media_bytes=2 * 1024 * 1024)
        result = store.add_media([
            _image("ok.jpg"),
            _image("doc.pdf", content_type="application/pdf"),
            _image("huge.jpg", size=2 * 1024 * 1024 + 1),
        ])
        assert result.accepted == ["ok.jpg"]
        assert [(r.filename, r.reason) for r in result.rejected] == [
            ("doc.pdf", "not an image"),
            ("huge.jpg", "exceeds 2MB"),
        ]
        assert "doc.pdf (not an image)" in result.message
        assert len(store.media) == 1

    def test_default_size_limit_is_five_megabytes(self):
        store = FormDataStore()
        limit = 5 * 1024 * 1024
        result = store.add_media([_image("edge.jpg", size=limit), _image("over.jpg", size=limit + 1)])
        assert result.accepted == ["edge.jpg"]
        assert result.rejected[0].reason == "exceeds 5MB"

    def test_count_limit_caps_addition(self):
        store = FormDataStore()
        store.add_media([_image(f"{i}.jpg") for i in range(4)])
        result = store.add_media([_image("5.jpg"), _image("6.jpg"), _image("7.jpg")])
        assert result.accepted == ["5.jpg"]
        assert [r.filename for r in result.rejected] == ["6.jpg", "7.jpg"]
        assert len(store.media) == 5

    def test_rejected_batch_does_not_notify(self):
        store = FormDataStore()
        calls: list[int] = []
        store.subscribe(lambda d: calls.append(len(d.media)))
        store.add_media([_image("doc.txt", content_type="text/plain")])
        assert calls == []

    def test_remove_media(self):
        store = FormDataStore()
        store.add_media([_image("a.jpg"), _image("b.jpg"), _image("c.jpg")])
        removed = store.remove_media(1)
        assert removed.filename == "b.jpg"
        assert [m.filename for m in store.media] == ["a.jpg", "c.jpg"]

    def test_remove_out_of_range(self):
        store = FormDataStore()
        with pytest.raises(IndexError):
            store.remove_media(0)


# ---------------------------------------------------------------------------
# steps.py tests
# ---------------------------------------------------------------------------


class TestStepStateMachine:
    def test_initial_state(self):
        machine = StepStateMachine()
        assert machine.current_step == 1
        assert not machine.is_last_step

    def test_advance_and_retreat_are_clamped(self):
        machine = StepStateMachine()
        for _ in range(10):
            machine.advance()
        assert machine.current_step == 5
        assert machine.is_last_step
        for _ in range(10):
            machine.retreat()
        assert machine.current_step == 1

    def test_initial_step_clamped(self):
        assert StepStateMachine(initial_step=9).current_step == 5
        assert StepStateMachine(initial_step=0).current_step == 1

    def test_jump_back_to_completed_step(self):
        machine = StepStateMachine(initial_step=4)
        assert machine.jump_to(2, NominationDraft()) == 2

    def test_jump_to_current_step(self):
        machine = StepStateMachine(initial_step=3)
        assert machine.jump_to(3, NominationDraft()) == 3

    def test_jump_forward_needs_valid_data(self):
        machine = StepStateMachine()
        with pytest.raises(StepNavigationError):
            machine.jump_to(4, NominationDraft())
        draft = NominationDraft(
            nominee=NomineeDetails(company_name="Acme", trade_name="Roofing"),
            nominator=NominatorDetails(name="Ann", email="ann@example.com"),
            award_category="quality",
            justification="x" * 60,
        )
        assert machine.jump_to(4, draft) == 4

    def test_jump_forward_cannot_skip_empty_steps(self):
        machine = StepStateMachine()
        draft = NominationDraft(award_category="quality")
        assert not machine.can_jump_to(3, draft)
        with pytest.raises(StepNavigationError):
            machine.jump_to(3, draft)
        assert machine.current_step == 1

    def test_jump_forward_needs_target_filled_in(self):
        machine = StepStateMachine(initial_step=2)
        draft = NominationDraft(
            nominator=NominatorDetails(name="Ann", email="ann@example.com"),
            justification="x" * 60,
        )
        assert machine.can_jump_to(3, draft) is False
        assert machine.can_jump_to(1, draft) is True

    @pytest.mark.parametrize("step", [0, 6, -1])
    def test_jump_out_of_range(self, step):
        machine = StepStateMachine()
        assert not machine.can_jump_to(step, NominationDraft())
        with pytest.raises(StepNavigationError):
            machine.jump_to(step, NominationDraft())

    def test_step_titles(self):
        assert step_title(2) == "Your Information"
        assert step_title(9) == "Step 9"
