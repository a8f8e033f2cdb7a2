"""Client for the Dispatch Service (``POST /api/send``)."""

from __future__ import annotations

import logging
from typing import Iterable, List

import requests
from pydantic import ValidationError

from ..core.config import ServiceConfig
from ..core.errors import ServiceResponseError, ServiceUnavailableError
from ..core.http import json_list, raise_for_service_error
from ..preview.models import PreviewItem
from .config import TransportConfig
from .models import DispatchResult

LOGGER = logging.getLogger(__name__)

SEND_PATH = "/api/send"


class DispatchClient:
    """Submits the full notification list with the transport settings."""

    def __init__(self, config: ServiceConfig | None = None) -> None:
        self.config = config or ServiceConfig()

    def send(self, transport: TransportConfig, notifications: Iterable[PreviewItem]) -> List[DispatchResult]:
        notifications = list(notifications)
        payload = {
            "config": transport.to_payload(),
            "notifications": [item.to_payload() for item in notifications],
        }
        LOGGER.info(
            "Dispatching %s notifications via %s (%s).",
            len(notifications),
            transport.mode.value,
            transport.to_safe_dict()["smtp_server"],
        )
        try:
            response = requests.post(
                self.config.endpoint(SEND_PATH),
                json=payload,
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as exc:
            raise ServiceUnavailableError(f"Dispatch Service unreachable: {exc}") from exc

        # The Dispatch Service gives no structured error body.
        raise_for_service_error(response, read_detail=False)
        try:
            results = [DispatchResult.model_validate(entry) for entry in json_list(response)]
        except ValidationError as exc:
            raise ServiceResponseError(f"Invalid dispatch results: {exc}") from exc
        LOGGER.info("Dispatch Service reported %s outcomes.", len(results))
        return results
