"""Models for per-recipient dispatch outcomes."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DispatchStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    NO_EMAIL = "no_email"


class DispatchResult(BaseModel):
    """Outcome reported by the Dispatch Service for one teacher."""

    model_config = ConfigDict(frozen=True)

    teacher_name: str = Field(min_length=1)
    status: DispatchStatus
    message: str | None = None

    @field_validator("message", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    def describe(self) -> str:
        if self.message:
            return self.message
        if self.status is DispatchStatus.NO_EMAIL:
            return "Missing email"
        if self.status is DispatchStatus.SUCCESS:
            return "Sent"
        return "Failed"
