"""Per-recipient dispatch outcomes and their aggregate counts."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Tuple

from .models import DispatchResult, DispatchStatus

LOGGER = logging.getLogger(__name__)


class ResultLedger:
    """Holds the latest Dispatch Service response."""

    def __init__(self) -> None:
        self._entries: List[DispatchResult] = []

    def load(
        self,
        results: Iterable[DispatchResult | Mapping[str, object]],
        expected_count: int | None = None,
    ) -> None:
        entries = [
            item if isinstance(item, DispatchResult) else DispatchResult.model_validate(item)
            for item in results
        ]
        if expected_count is not None and len(entries) != expected_count:
            LOGGER.warning(
                "Dispatch Service returned %s results for %s submitted notifications.",
                len(entries),
                expected_count,
            )
        self._entries = entries

    def clear(self) -> None:
        self._entries = []

    @property
    def entries(self) -> Tuple[DispatchResult, ...]:
        return tuple(self._entries)

    def count_by_status(self, kind: DispatchStatus | str) -> int:
        status = DispatchStatus(kind)
        return sum(1 for entry in self._entries if entry.status is status)

    def summary(self) -> Dict[str, int]:
        return {status.value: self.count_by_status(status) for status in DispatchStatus}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[DispatchResult]:
        return iter(self._entries)
