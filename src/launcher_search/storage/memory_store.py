"""In-memory history storage, for tests and throwaway sessions."""

from __future__ import annotations

import copy
from typing import Any

from launcher_search.storage.base import HistoryStorage


class InMemoryHistoryStorage(HistoryStorage):
    """Keeps the history blob in process memory.

    Blobs are deep-copied on the way in and out so callers can never
    mutate the stored state.
    """

    def __init__(self, blob: dict[str, Any] | None = None) -> None:
        self._blob: dict[str, Any] | None = copy.deepcopy(blob)
        self.save_count = 0

    async def load(self) -> dict[str, Any] | None:
        return copy.deepcopy(self._blob)

    async def save(self, blob: dict[str, Any]) -> None:
        self._blob = copy.deepcopy(blob)
        self.save_count += 1

    async def clear(self) -> None:
        self._blob = None
