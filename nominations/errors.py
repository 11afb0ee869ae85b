"""Exception hierarchy for the nomination flow."""

from __future__ import annotations


class NominationError(Exception):
    """Base class for all nomination-flow errors."""


class RemoteServiceError(NominationError):
    """A remote call failed at the client boundary."""

    def __init__(self, service: str, detail: str, status_code: int | None = None) -> None:
        self.service = service
        self.detail = detail
        self.status_code = status_code
        prefix = f"{service} error"
        if status_code is not None:
            prefix = f"{service} HTTP {status_code}"
        super().__init__(f"{prefix}: {detail}")


class MalformedResponseError(RemoteServiceError):
    """The remote payload was not JSON or failed schema validation."""


class TradeLookupError(RemoteServiceError):
    """A trade profile could not be fetched for a reason other than not-found."""


class StepNavigationError(NominationError):
    """A step transition was requested that the current draft does not allow."""

    def __init__(self, step: int, reason: str) -> None:
        self.step = step
        self.reason = reason
        super().__init__(f"Cannot move to step {step}: {reason}")


class CategoryNotAllowedError(NominationError):
    """The award category cannot be chosen for the nominator's relationship."""

    def __init__(self, category_id: str, relationship: str) -> None:
        self.category_id = category_id
        self.relationship = relationship
        super().__init__(
            f"Category '{category_id}' does not accept nominations with relationship '{relationship}'"
        )


class SubmissionNotAllowedError(NominationError):
    """Submit was invoked before every required step validated."""

    def __init__(self, incomplete_steps: list[int]) -> None:
        self.incomplete_steps = incomplete_steps
        steps = ", ".join(str(s) for s in incomplete_steps)
        super().__init__(f"Nomination is incomplete (steps: {steps})")
