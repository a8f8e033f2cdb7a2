"""Response helpers shared by the Analysis and Dispatch Service clients."""

from __future__ import annotations

import logging
from typing import List

import requests

from .errors import ServiceError, ServiceResponseError

LOGGER = logging.getLogger(__name__)


def is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


def extract_detail(payload: object) -> str | None:
    """
    Pull the ``detail`` out of an error body exactly as the service wrote it.

    FastAPI-style validation errors carry a list of ``{"msg": ...}`` objects;
    those are joined with ``"; "``. Empty details become ``None``.
    """
    if not isinstance(payload, dict):
        return None
    detail = payload.get("detail")
    if isinstance(detail, str):
        return detail if detail.strip() else None
    if isinstance(detail, list):
        messages = []
        for entry in detail:
            if isinstance(entry, dict) and entry.get("msg"):
                messages.append(str(entry["msg"]))
            elif isinstance(entry, str):
                messages.append(entry)
        joined = "; ".join(messages)
        return joined or None
    return None


def error_detail(response: requests.Response) -> str | None:
    """Best-effort ``detail`` from a failed response; ``None`` if there is none."""
    try:
        payload = response.json()
    except ValueError:
        LOGGER.debug("Error body from %s is not JSON.", response.url)
        return None
    return extract_detail(payload)


def raise_for_service_error(response: requests.Response, read_detail: bool = True) -> None:
    if is_success(response):
        return
    detail = error_detail(response) if read_detail else None
    raise ServiceError(detail, response.status_code)


def json_list(response: requests.Response) -> List[dict]:
    """Decode a success body that must be a JSON array of objects."""
    try:
        payload = response.json()
    except ValueError as exc:
        raise ServiceResponseError(f"Malformed JSON from {response.url}: {exc}") from exc
    if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
        raise ServiceResponseError(f"Expected a JSON array of objects from {response.url}")
    return payload
