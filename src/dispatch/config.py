"""Transport settings for the Dispatch Service and the provider preset table."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict

LOGGER = logging.getLogger(__name__)

DEFAULT_PORT = 587
GMAIL_HOST = "smtp.gmail.com"
MOCK_HOST = "mock"

LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")


class TransportMode(str, Enum):
    MOCK = "mock"
    GMAIL = "gmail"
    CUSTOM = "custom"


@dataclass(slots=True, frozen=True)
class TransportPreset:
    """Host/port implied by a transport mode; ``port=None`` keeps the current port."""

    host: str
    port: int | None
    host_editable: bool
    port_editable: bool


TRANSPORT_PRESETS: Dict[TransportMode, TransportPreset] = {
    TransportMode.MOCK: TransportPreset(host=MOCK_HOST, port=None, host_editable=False, port_editable=True),
    TransportMode.GMAIL: TransportPreset(host=GMAIL_HOST, port=DEFAULT_PORT, host_editable=False, port_editable=False),
    TransportMode.CUSTOM: TransportPreset(host="", port=DEFAULT_PORT, host_editable=True, port_editable=True),
}

EDITABLE_FIELDS = ("host", "port", "sender_user", "sender_password", "sender_display_name")


class TransportConfigError(ValueError):
    """Raised for unknown modes, unknown fields or edits to preset-locked fields."""


def parse_mode(mode: TransportMode | str) -> TransportMode:
    try:
        return TransportMode(mode)
    except ValueError:
        raise TransportConfigError(f"Unknown transport mode: {mode!r}") from None


def get_preset(mode: TransportMode | str) -> TransportPreset:
    return TRANSPORT_PRESETS[parse_mode(mode)]


def coerce_port(value: object) -> int:
    """Leading integer of ``value``; negative or unparseable input becomes 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        return max(int(value), 0)
    match = LEADING_INT_PATTERN.match(str(value)) if value is not None else None
    if not match:
        return 0
    return max(int(match.group(1)), 0)


def _env_or_default(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


@dataclass(slots=True)
class TransportConfig:
    """Mutable dispatch settings edited by staff before sending."""

    mode: TransportMode = TransportMode.MOCK
    host: str = MOCK_HOST
    port: int = DEFAULT_PORT
    sender_user: str = "admin@school.edu.tw"
    sender_password: str = field(default="password", repr=False)
    sender_display_name: str = "教務處"

    def __post_init__(self) -> None:
        self.mode = parse_mode(self.mode)
        self.port = coerce_port(self.port)
        preset = TRANSPORT_PRESETS[self.mode]
        if not preset.host_editable:
            self.host = preset.host
        if not preset.port_editable:
            self.port = preset.port

    @classmethod
    def from_env(cls) -> "TransportConfig":
        mode = parse_mode(_env_or_default("SMTP_MODE", TransportMode.MOCK.value).lower())
        preset = TRANSPORT_PRESETS[mode]
        return cls(
            mode=mode,
            host=_env_or_default("SMTP_HOST", preset.host),
            port=coerce_port(_env_or_default("SMTP_PORT", str(preset.port or DEFAULT_PORT))),
            sender_user=_env_or_default("SMTP_USER", "admin@school.edu.tw"),
            sender_password=os.getenv("SMTP_PASSWORD", "password"),
            sender_display_name=_env_or_default("SMTP_SENDER_NAME", "教務處"),
        )

    @property
    def preset(self) -> TransportPreset:
        return TRANSPORT_PRESETS[self.mode]

    @property
    def host_editable(self) -> bool:
        return self.preset.host_editable

    @property
    def port_editable(self) -> bool:
        return self.preset.port_editable

    def is_mock(self) -> bool:
        return self.mode is TransportMode.MOCK

    def set_mode(self, mode: TransportMode | str) -> None:
        """Switch provider and apply its host/port preset in one step."""
        new_mode = parse_mode(mode)
        preset = TRANSPORT_PRESETS[new_mode]
        self.mode, self.host = new_mode, preset.host
        if preset.port is not None:
            self.port = preset.port
        LOGGER.info("Transport mode set to %s (host=%r, port=%s).", new_mode.value, self.host, self.port)

    def set_field(self, key: str, value: object) -> None:
        if key == "mode":
            self.set_mode(value)  # type: ignore[arg-type]
            return
        if key not in EDITABLE_FIELDS:
            raise TransportConfigError(f"Unknown transport field: {key!r}")
        if key == "host" and not self.host_editable:
            raise TransportConfigError(f"host is fixed to {self.host!r} in {self.mode.value} mode")
        if key == "port":
            if not self.port_editable:
                raise TransportConfigError(f"port is fixed to {self.port} in {self.mode.value} mode")
            self.port = coerce_port(value)
            return
        setattr(self, key, "" if value is None else str(value))

    def to_payload(self) -> Dict[str, object]:
        """Wire form expected by the Dispatch Service."""
        return {
            "smtp_server": self.host,
            "smtp_port": self.port,
            "smtp_user": self.sender_user,
            "smtp_password": self.sender_password,
            "sender_name": self.sender_display_name,
        }

    def to_safe_dict(self) -> Dict[str, object]:
        payload = self.to_payload()
        payload["smtp_password"] = "***" if self.sender_password else ""
        payload["mode"] = self.mode.value
        return payload
