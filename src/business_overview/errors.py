"""Exception hierarchy for the business overview engine.

Nothing in the derivation layer raises for degenerate input; these errors
cover collaborator configuration, payload validation and orchestration.
"""

from __future__ import annotations


class BusinessOverviewError(Exception):
    """Base class for all business overview errors."""


class CollaboratorUnavailableError(BusinessOverviewError):
    """An upstream collaborator is disabled or cannot be reached."""

    def __init__(self, collaborator: str, reason: str) -> None:
        super().__init__(f"{collaborator} unavailable: {reason}")
        self.collaborator = collaborator
        self.reason = reason


class EventValidationError(BusinessOverviewError):
    """An execution event payload failed validation.

    Attributes:
        errors: Human-readable validation failures, one per field.
    """

    def __init__(self, errors: list[str]) -> None:
        super().__init__("Invalid execution event: " + "; ".join(errors))
        self.errors = list(errors)


class OverviewFetchError(BusinessOverviewError):
    """Assembling the business overview failed as a whole."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        detail = f"{message}: {cause}" if cause is not None else message
        super().__init__(f"Failed to fetch business overview: {detail}")
        self.cause = cause
