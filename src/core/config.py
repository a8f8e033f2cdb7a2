"""Configuration helpers for the notification service clients."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_API_URL = "http://localhost:8000"
DEFAULT_SUBJECT_TEMPLATE = "【調代課通知】{teacher_name} 老師"


def _env_or_default(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_float(name: str) -> float | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError:
        return None


@dataclass(slots=True)
class ServiceConfig:
    """Runtime configuration for the Analysis and Dispatch Service calls."""

    api_base_url: str = field(default_factory=lambda: _env_or_default("NOTIFIER_API_URL", DEFAULT_API_URL))
    # None means wait for the transport to resolve or fail on its own.
    request_timeout: float | None = field(default_factory=lambda: _env_float("NOTIFIER_REQUEST_TIMEOUT"))
    subject_template: str = field(
        default_factory=lambda: _env_or_default("NOTICE_SUBJECT_TEMPLATE", DEFAULT_SUBJECT_TEMPLATE)
    )

    def __post_init__(self) -> None:
        self.api_base_url = self.api_base_url.rstrip("/")

    def endpoint(self, path: str) -> str:
        return f"{self.api_base_url}/{path.lstrip('/')}"
