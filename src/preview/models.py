"""
Pydantic models for the Analysis Service response.

Rows are kept exactly as the service sent them: values are not coerced or
stripped and unknown keys are retained, so ``to_payload`` hands the Dispatch
Service back what the Analysis Service produced.
"""

from __future__ import annotations

from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field

WireScalar = Union[str, int, float, None]


class NotificationRow(BaseModel):
    """One schedule change for a teacher."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    date: WireScalar = None
    period: WireScalar = None
    class_name: WireScalar = Field(default=None, alias="cls")
    course: WireScalar = None
    type: WireScalar = None
    original_teacher: WireScalar = None
    sub_teacher: WireScalar = None
    original_date: WireScalar = None
    original_period: WireScalar = None

    @property
    def original_slot(self) -> str:
        """``date(period)`` of the lesson before the change, or ``-``."""
        if self.original_date or self.original_period:
            return f"{self.original_date or ''}({self.original_period or ''})"
        return "-"

    @property
    def teacher_swap(self) -> str:
        return f"{self.original_teacher or ''} / {self.sub_teacher or ''}"

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_unset=True)


class PreviewItem(BaseModel):
    """All notification rows grouped under one teacher."""

    model_config = ConfigDict(frozen=True, extra="allow")

    teacher_name: str = Field(min_length=1)
    email: str | None = None
    data_rows: List[NotificationRow] = Field(min_length=1)

    @property
    def has_email(self) -> bool:
        # Blank or whitespace-only addresses count as missing.
        return bool(self.email and self.email.strip())

    @property
    def row_count(self) -> int:
        return len(self.data_rows)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_unset=True)


def build_subject(item: PreviewItem, template: str) -> str:
    """Subject line of the notice the Dispatch Service will send."""
    return template.format(teacher_name=item.teacher_name).strip()
