"""Stage variants of the notification workflow; each carries its own payload."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union

from ..dispatch.ledger import ResultLedger
from ..preview.dataset import PreviewDataset


class WorkflowStage(str, Enum):
    UPLOAD = "upload"
    PREVIEW = "preview"
    RESULT = "result"


@dataclass(slots=True)
class UploadState:
    """Choosing files. A dataset kept from an earlier preview survives a restart."""

    stage: ClassVar[WorkflowStage] = WorkflowStage.UPLOAD
    retained_preview: Optional[PreviewDataset] = None


@dataclass(slots=True)
class PreviewState:
    stage: ClassVar[WorkflowStage] = WorkflowStage.PREVIEW
    dataset: PreviewDataset


@dataclass(slots=True)
class ResultState:
    stage: ClassVar[WorkflowStage] = WorkflowStage.RESULT
    dataset: PreviewDataset
    ledger: ResultLedger


WorkflowState = Union[UploadState, PreviewState, ResultState]
