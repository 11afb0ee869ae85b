"""Step State Machine -- linear progression through the five form steps."""

from __future__ import annotations

import logging

from nominations.errors import StepNavigationError
from nominations.models import NominationDraft
from nominations.validators import TOTAL_STEPS, is_step_complete, validate_step

logger = logging.getLogger("nominations.steps")

FIRST_STEP = 1
LAST_STEP = TOTAL_STEPS

STEP_TITLES = {
    1: "Nominee",
    2: "Your Information",
    3: "Award Category",
    4: "Justification",
    5: "Supporting Materials",
}


def step_title(step: int) -> str:
    return STEP_TITLES.get(step, f"Step {step}")


def _clamp(step: int) -> int:
    return max(FIRST_STEP, min(LAST_STEP, step))


class StepStateMachine:
    """Tracks the current step (1..5).

    ``advance`` does not consult the validators: callers gate it on the
    current step validating. Every transition is clamped to the valid range.
    """

    def __init__(self, initial_step: int = FIRST_STEP) -> None:
        self._current = _clamp(initial_step)

    @property
    def current_step(self) -> int:
        return self._current

    @property
    def is_last_step(self) -> bool:
        return self._current == LAST_STEP

    def advance(self) -> int:
        self._set(self._current + 1)
        return self._current

    def retreat(self) -> int:
        self._set(self._current - 1)
        return self._current

    def can_jump_to(self, step: int, draft: NominationDraft) -> bool:
        if not FIRST_STEP <= step <= LAST_STEP:
            return False
        if step <= self._current:
            return True
        # Forward jumps may not skip a step that has not been filled in.
        passed = range(self._current, step)
        if not all(validate_step(s, draft) for s in passed):
            return False
        return is_step_complete(step, self._current, draft)

    def jump_to(self, step: int, draft: NominationDraft) -> int:
        """Move directly to ``step``.

        Raises:
            StepNavigationError: If ``step`` is out of range or not complete.
        """
        if not FIRST_STEP <= step <= LAST_STEP:
            raise StepNavigationError(step, f"steps run from {FIRST_STEP} to {LAST_STEP}")
        if not self.can_jump_to(step, draft):
            raise StepNavigationError(step, "step is not complete yet")
        self._set(step)
        return self._current

    def _set(self, step: int) -> None:
        new_step = _clamp(step)
        if new_step != self._current:
            logger.debug("Step %d -> %d", self._current, new_step)
        self._current = new_step
