"""Three-stage controller driving Upload -> Preview -> Result."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from ..core.config import ServiceConfig
from ..core.errors import (
    InvalidTransitionError,
    ServiceError,
    ServiceResponseError,
    ServiceUnavailableError,
    SlotValidationError,
    WorkflowBusyError,
)
from ..dispatch.client import DispatchClient
from ..dispatch.config import TransportConfig
from ..dispatch.ledger import ResultLedger
from ..preview.client import AnalysisClient
from ..preview.dataset import PreviewDataset
from ..preview.models import build_subject
from ..upload.slots import FileSlotManager
from .states import PreviewState, ResultState, UploadState, WorkflowStage, WorkflowState

LOGGER = logging.getLogger(__name__)

MISSING_FILES_MESSAGE = "Please upload both the teacher email roster and the substitution notice."
ANALYSIS_FAILED_MESSAGE = "Analysis failed; please check the Excel format."
DISPATCH_FAILED_MESSAGE = "An error occurred while sending notifications."
SERVICE_UNAVAILABLE_MESSAGE = "Could not reach the notification service."

ConfirmPrompt = Callable[[str], bool]


def build_confirmation_message(count: int, mock: bool) -> str:
    message = f"About to send {count} notification email(s). Continue?"
    if mock:
        message = f"Mock mode: no real email will be sent. {message}"
    return message


class NotificationWorkflow:
    """
    Owns the stage variant, the error banner and the in-flight guard.

    File slots and transport settings live outside the stage payloads: slots
    survive a restart and transport settings survive a full reset.
    """

    def __init__(
        self,
        analysis_client: AnalysisClient | None = None,
        dispatch_client: DispatchClient | None = None,
        transport: TransportConfig | None = None,
        slots: FileSlotManager | None = None,
        config: ServiceConfig | None = None,
    ) -> None:
        self.config = config or ServiceConfig()
        self.analysis_client = analysis_client or AnalysisClient(self.config)
        self.dispatch_client = dispatch_client or DispatchClient(self.config)
        self.transport = transport or TransportConfig.from_env()
        self.slots = slots or FileSlotManager()
        self.state: WorkflowState = UploadState()
        self.error: Optional[str] = None
        self._in_flight = threading.Lock()

    # -- read side ---------------------------------------------------------

    @property
    def stage(self) -> WorkflowStage:
        return self.state.stage

    @property
    def busy(self) -> bool:
        return self._in_flight.locked()

    @property
    def preview(self) -> Optional[PreviewDataset]:
        """Current dataset, or the one retained across a restart."""
        if isinstance(self.state, UploadState):
            return self.state.retained_preview
        return self.state.dataset

    @property
    def results(self) -> Optional[ResultLedger]:
        if isinstance(self.state, ResultState):
            return self.state.ledger
        return None

    @property
    def can_request_preview(self) -> bool:
        return self.stage is WorkflowStage.UPLOAD and not self.busy and self.slots.all_slots_filled()

    @property
    def can_dispatch(self) -> bool:
        return (
            isinstance(self.state, PreviewState)
            and not self.busy
            and bool(self.state.dataset.eligible_for_dispatch())
        )

    # -- actions -----------------------------------------------------------

    def request_preview(self) -> bool:
        """Upload -> Preview. Returns True when the transition happened."""
        state = self._require(UploadState, "RequestPreview")
        try:
            self._check_slots()
        except SlotValidationError as exc:
            LOGGER.info("Preview blocked: %s", exc)
            self.error = MISSING_FILES_MESSAGE
            return False

        self.error = None
        with self._exclusive_call("RequestPreview"):
            try:
                items = self.analysis_client.preview(self.slots.get("teacher"), self.slots.get("sub"))
                dataset = PreviewDataset(items)
            except ServiceError as exc:
                LOGGER.warning("Analysis Service rejected the upload: %s", exc)
                self.error = exc.detail or ANALYSIS_FAILED_MESSAGE
                return False
            except ServiceUnavailableError as exc:
                LOGGER.warning("Analysis Service unreachable: %s", exc)
                self.error = SERVICE_UNAVAILABLE_MESSAGE
                return False
            except (ServiceResponseError, ValueError) as exc:
                LOGGER.warning("Preview response could not be used: %s", exc)
                self.error = ANALYSIS_FAILED_MESSAGE
                return False

        if state.retained_preview is not None:
            LOGGER.debug("Replacing retained preview of %s items.", len(state.retained_preview))
        self.state = PreviewState(dataset=dataset)
        stats = dataset.stats()
        LOGGER.info("Stage -> preview (%s teachers, %s missing email).", stats.total, stats.missing)
        return True

    def restart(self) -> None:
        """Preview -> Upload, keeping the file slots and the dataset."""
        state = self._require(PreviewState, "Restart")
        self._ensure_idle("Restart")
        self.state = UploadState(retained_preview=state.dataset)
        LOGGER.info("Stage -> upload (restart).")

    def request_dispatch(self, confirm: ConfirmPrompt) -> bool:
        """
        Preview -> Result after ``confirm`` accepts the prompt.

        Returns False without prompting when nothing is eligible, and without
        calling the service when the prompt is declined or the call fails.
        """
        state = self._require(PreviewState, "RequestDispatch")
        self._ensure_idle("RequestDispatch")
        dataset = state.dataset
        eligible = dataset.eligible_for_dispatch()
        if not eligible:
            LOGGER.warning("Dispatch unavailable: no teacher has an email address.")
            return False

        if not confirm(build_confirmation_message(len(eligible), self.transport.is_mock())):
            LOGGER.info("Dispatch declined by user.")
            return False

        self.error = None
        with self._exclusive_call("RequestDispatch"):
            try:
                outcomes = self.dispatch_client.send(self.transport, dataset.items)
                ledger = ResultLedger()
                ledger.load(outcomes, expected_count=len(dataset))
            except ServiceError as exc:
                LOGGER.warning("Dispatch Service failed: %s", exc)
                self.error = DISPATCH_FAILED_MESSAGE
                return False
            except ServiceUnavailableError as exc:
                LOGGER.warning("Dispatch Service unreachable: %s", exc)
                self.error = SERVICE_UNAVAILABLE_MESSAGE
                return False
            except (ServiceResponseError, ValueError) as exc:
                LOGGER.warning("Dispatch results could not be used: %s", exc)
                self.error = DISPATCH_FAILED_MESSAGE
                return False

        self.state = ResultState(dataset=dataset, ledger=ledger)
        LOGGER.info("Stage -> result %s.", ledger.summary())
        return True

    def reset(self) -> None:
        """Result -> Upload, discarding everything except transport settings."""
        state = self._require(ResultState, "Reset")
        self._ensure_idle("Reset")
        self.slots.clear_all()
        state.dataset.clear()
        state.ledger.clear()
        self.state = UploadState()
        self.error = None
        LOGGER.info("Stage -> upload (reset).")

    def dismiss_error(self) -> None:
        self.error = None

    def notice_subject(self, teacher_name: str) -> str:
        """Subject line the Dispatch Service will use for this teacher."""
        if self.preview is None:
            raise KeyError(teacher_name)
        return build_subject(self.preview.get(teacher_name), self.config.subject_template)

    # -- internals ---------------------------------------------------------

    def _check_slots(self) -> None:
        missing = self.slots.missing_slots()
        if missing:
            raise SlotValidationError(missing)

    def _require(self, state_type: type, action: str):
        if not isinstance(self.state, state_type):
            raise InvalidTransitionError(f"{action} is not available in the {self.stage.value} stage")
        return self.state

    def _ensure_idle(self, action: str) -> None:
        if self.busy:
            raise WorkflowBusyError(f"{action} requested while a service call is in flight")

    @contextmanager
    def _exclusive_call(self, action: str) -> Iterator[None]:
        """At most one service call in flight across both actions."""
        if not self._in_flight.acquire(blocking=False):
            raise WorkflowBusyError(f"{action} requested while a service call is in flight")
        try:
            yield
        finally:
            self._in_flight.release()
