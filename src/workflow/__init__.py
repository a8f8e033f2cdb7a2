"""Upload -> Preview -> Result workflow controller."""

from .machine import NotificationWorkflow, build_confirmation_message
from .states import PreviewState, ResultState, UploadState, WorkflowStage

__all__ = [
    "NotificationWorkflow",
    "build_confirmation_message",
    "WorkflowStage",
    "UploadState",
    "PreviewState",
    "ResultState",
]
