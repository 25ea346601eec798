"""Abstract base class for usage history persistence backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

# Version tag of the persisted history blob
HISTORY_VERSION = 1


class HistoryFormatError(Exception):
    """Raised when a persisted history payload cannot be read."""


class HistoryStorage(ABC):
    """
    Abstract interface for usage history persistence.

    The whole history is a single JSON-compatible blob; backends only move
    it in and out of durable storage. Interpreting the blob (versioning,
    pruning) is the job of the history store.
    """

    @abstractmethod
    async def load(self) -> dict[str, Any] | None:
        """
        Read the persisted blob.

        Returns:
            The blob, or None if nothing was saved yet

        Raises:
            HistoryFormatError: If the stored payload is unreadable
        """
        ...

    @abstractmethod
    async def save(self, blob: dict[str, Any]) -> None:
        """
        Replace the persisted blob.

        Args:
            blob: JSON-compatible history blob
        """
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Delete the persisted blob."""
        ...

    async def close(self) -> None:  # noqa: B027
        """Release resources. No-op by default."""
