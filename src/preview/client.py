"""Client for the Analysis Service (``POST /api/preview``)."""

from __future__ import annotations

import logging
from typing import List

import requests
from pydantic import ValidationError

from ..core.config import ServiceConfig
from ..core.errors import ServiceResponseError, ServiceUnavailableError
from ..core.http import json_list, raise_for_service_error
from ..upload.models import FileBlob
from .models import PreviewItem

LOGGER = logging.getLogger(__name__)

PREVIEW_PATH = "/api/preview"


class AnalysisClient:
    """Uploads both spreadsheets and returns the grouped preview items."""

    def __init__(self, config: ServiceConfig | None = None) -> None:
        self.config = config or ServiceConfig()

    def preview(self, teacher_file: FileBlob, sub_file: FileBlob) -> List[PreviewItem]:
        """
        Send both spreadsheets as one multipart request.

        Raises:
            ServiceError: non-2xx response; ``detail`` carries the service message.
            ServiceUnavailableError: network failure or timeout.
            ServiceResponseError: 2xx body that is not a list of preview items.
        """
        url = self.config.endpoint(PREVIEW_PATH)
        files = {
            "teacher_file": teacher_file.as_multipart(),
            "sub_file": sub_file.as_multipart(),
        }
        LOGGER.info(
            "Requesting preview for %s (%s bytes) and %s (%s bytes).",
            teacher_file.name,
            teacher_file.byte_size,
            sub_file.name,
            sub_file.byte_size,
        )
        try:
            response = requests.post(url, files=files, timeout=self.config.request_timeout)
        except requests.RequestException as exc:
            raise ServiceUnavailableError(f"Analysis Service unreachable: {exc}") from exc

        raise_for_service_error(response)
        payload = json_list(response)
        try:
            items = [PreviewItem.model_validate(entry) for entry in payload]
        except ValidationError as exc:
            raise ServiceResponseError(f"Invalid preview payload: {exc}") from exc
        LOGGER.info("Analysis Service returned %s teachers.", len(items))
        return items
