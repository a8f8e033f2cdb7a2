"""Holds at most one selected spreadsheet per named slot."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .models import SLOT_DEFINITIONS, FileBlob, SlotDefinition

LOGGER = logging.getLogger(__name__)


class FileSlotManager:
    """Tracks the files chosen for the ``teacher`` and ``sub`` slots."""

    def __init__(self) -> None:
        self._slots: Dict[str, Optional[FileBlob]] = {name: None for name in SLOT_DEFINITIONS}

    def set_slot(self, name: str, blob: Optional[FileBlob]) -> None:
        """Overwrite a slot. ``None`` empties it."""
        definition = self._definition(name)
        if blob is not None and blob.extension not in definition.accept:
            LOGGER.debug("File %s is outside the accepted types %s for slot %s.", blob.name, definition.accept, name)
        self._slots[name] = blob

    def clear_slot(self, name: str) -> None:
        self.set_slot(name, None)

    def clear_all(self) -> None:
        for name in self._slots:
            self._slots[name] = None

    def get(self, name: str) -> Optional[FileBlob]:
        self._definition(name)
        return self._slots[name]

    def missing_slots(self) -> List[str]:
        return [name for name, blob in self._slots.items() if blob is None]

    def all_slots_filled(self) -> bool:
        return not self.missing_slots()

    def multipart_files(self) -> Dict[str, tuple]:
        """Map multipart field names to file tuples; only filled slots are included."""
        return {
            SLOT_DEFINITIONS[name].field_name: blob.as_multipart()
            for name, blob in self._slots.items()
            if blob is not None
        }

    @staticmethod
    def _definition(name: str) -> SlotDefinition:
        try:
            return SLOT_DEFINITIONS[name]
        except KeyError:
            raise KeyError(f"Unknown upload slot: {name!r}") from None
