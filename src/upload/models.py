"""Dataclasses for uploaded spreadsheets and the slots that hold them."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Tuple

ACCEPT_EXTENSIONS: Tuple[str, ...] = (".xlsx", ".xls")
DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(slots=True, frozen=True)
class FileBlob:
    """Opaque file selected by the user."""

    name: str
    content: bytes = field(repr=False)
    content_type: str = DEFAULT_CONTENT_TYPE

    @property
    def byte_size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        return Path(self.name).suffix.lower()

    @classmethod
    def from_path(cls, path: Path | str) -> "FileBlob":
        path = Path(path)
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            content=path.read_bytes(),
            content_type=content_type or DEFAULT_CONTENT_TYPE,
        )

    def as_multipart(self) -> Tuple[str, bytes, str]:
        """Return the (filename, content, content_type) tuple used by requests."""
        return self.name, self.content, self.content_type


@dataclass(slots=True, frozen=True)
class SlotDefinition:
    """A named upload slot and the multipart field it is sent as."""

    name: str
    field_name: str
    title: str
    accept: Tuple[str, ...] = ACCEPT_EXTENSIONS


SLOT_DEFINITIONS: Dict[str, SlotDefinition] = {
    "teacher": SlotDefinition(name="teacher", field_name="teacher_file", title="Teacher email roster"),
    "sub": SlotDefinition(name="sub", field_name="sub_file", title="Substitution notices"),
}
