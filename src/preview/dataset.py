"""
In-memory collection of per-teacher notification groups shown for review.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Mapping, Optional, Tuple

from .models import PreviewItem

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class PreviewStats:
    """Headline counts for the review screen."""

    total: int
    missing: int

    @property
    def ready(self) -> int:
        return self.total - self.missing


class PreviewDataset:
    """Sorted preview items plus the single expanded row."""

    def __init__(self, raw_items: Iterable[PreviewItem | Mapping[str, object]] = ()) -> None:
        self._items: List[PreviewItem] = []
        self.expanded: Optional[str] = None
        self.load(raw_items)

    def load(self, raw_items: Iterable[PreviewItem | Mapping[str, object]]) -> None:
        """
        Replace the contents with a validated, stable-sorted copy.

        Items without an email come first so staff see incomplete records
        immediately; relative order is otherwise kept as received.

        Raises:
            ValueError: a ``teacher_name`` appears twice (pydantic's
                ValidationError is also a ValueError).
        """
        items = [
            item if isinstance(item, PreviewItem) else PreviewItem.model_validate(item)
            for item in raw_items
        ]
        seen = set()
        for item in items:
            if item.teacher_name in seen:
                raise ValueError(f"Duplicate teacher_name in preview data: {item.teacher_name!r}")
            seen.add(item.teacher_name)

        self._items = sorted(items, key=lambda item: item.has_email)
        self.expanded = None
        LOGGER.debug("Loaded %s preview items.", len(self._items))

    def clear(self) -> None:
        self._items = []
        self.expanded = None

    @property
    def items(self) -> Tuple[PreviewItem, ...]:
        return tuple(self._items)

    def get(self, teacher_name: str) -> PreviewItem:
        for item in self._items:
            if item.teacher_name == teacher_name:
                return item
        raise KeyError(teacher_name)

    def stats(self) -> PreviewStats:
        missing = sum(1 for item in self._items if not item.has_email)
        return PreviewStats(total=len(self._items), missing=missing)

    def eligible_for_dispatch(self) -> List[PreviewItem]:
        return [item for item in self._items if item.has_email]

    def toggle_expand(self, teacher_name: str) -> Optional[str]:
        """Expand ``teacher_name``, or collapse it if it is already expanded."""
        self.get(teacher_name)
        self.expanded = None if self.expanded == teacher_name else teacher_name
        return self.expanded

    def is_expanded(self, teacher_name: str) -> bool:
        return self.expanded == teacher_name

    def to_payload(self) -> List[dict]:
        return [item.to_payload() for item in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[PreviewItem]:
        return iter(self._items)
