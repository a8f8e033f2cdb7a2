"""Error taxonomy for the notification workflow."""

from __future__ import annotations

from typing import Sequence


class WorkflowError(Exception):
    """Base class for every error raised by the workflow packages."""


class SlotValidationError(WorkflowError):
    """One or both upload slots are empty."""

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = tuple(missing)
        super().__init__(f"Missing upload slots: {', '.join(self.missing)}")


class ServiceError(WorkflowError):
    """A collaborator service answered with a non-success status."""

    def __init__(self, detail: str | None, status_code: int) -> None:
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"HTTP {status_code}: {detail or 'no detail'}")


class ServiceUnavailableError(WorkflowError):
    """The service could not be reached (connection error, timeout)."""


class InvalidTransitionError(WorkflowError):
    """An action was requested from a stage that has no such transition."""


class WorkflowBusyError(WorkflowError):
    """A service call was requested while another one is still in flight."""


class ServiceResponseError(WorkflowError):
    """A service answered 2xx but the body does not have the expected shape."""
