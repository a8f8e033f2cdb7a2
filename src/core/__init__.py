"""Shared configuration, errors and HTTP helpers."""

from .config import ServiceConfig
from .errors import (
    InvalidTransitionError,
    ServiceError,
    ServiceResponseError,
    ServiceUnavailableError,
    SlotValidationError,
    WorkflowBusyError,
    WorkflowError,
)

__all__ = [
    "ServiceConfig",
    "WorkflowError",
    "SlotValidationError",
    "ServiceError",
    "ServiceResponseError",
    "ServiceUnavailableError",
    "InvalidTransitionError",
    "WorkflowBusyError",
]
