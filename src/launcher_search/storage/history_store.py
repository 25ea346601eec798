"""Usage history store - the in-memory view of all UsageRecords."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from launcher_search.core.usage import RECENT_USAGE_DAYS, UsageRecord, today_for
from launcher_search.engine import history_updater
from launcher_search.storage.base import HISTORY_VERSION, HistoryFormatError, HistoryStorage
from launcher_search.utils.timeutils import utcnow

logger = logging.getLogger(__name__)


def records_from_blob(
    blob: Mapping[str, Any],
    now: datetime,
    window_days: int = RECENT_USAGE_DAYS,
) -> dict[str, UsageRecord]:
    """
    Parse a persisted history blob and prune stale daily buckets.

    Args:
        blob: Persisted blob ``{"version": 1, "actions": {...}}``
        now: Reference time for pruning
        window_days: Size of the daily-bucket window

    Returns:
        Mapping of action id to record

    Raises:
        HistoryFormatError: On version mismatch or malformed records
    """
    if not isinstance(blob, Mapping):
        raise HistoryFormatError("history blob must be an object")

    version = blob.get("version")
    if version != HISTORY_VERSION:
        raise HistoryFormatError(f"unsupported history version: {version!r}")

    actions = blob.get("actions") or {}
    if not isinstance(actions, Mapping):
        raise HistoryFormatError("'actions' must be an object")

    today = today_for(now)
    records: dict[str, UsageRecord] = {}
    for action_id, data in actions.items():
        try:
            record = UsageRecord.from_dict(data)
        except (TypeError, ValueError, KeyError) as e:
            raise HistoryFormatError(f"malformed record for {action_id!r}: {e}") from e
        records[str(action_id)] = record.pruned(today, window_days)
    return records


class UsageHistoryStore:
    """
    Holds the UsageRecord of every action id ever launched.

    Records outlive their actions: unregistering an action leaves its
    history here so that re-registration resumes it. All mutations go
    through :meth:`record_usage`, which swaps in a new immutable record
    under a lock so concurrent launches never lose an increment.

    Persistence is explicit: :meth:`load` and :meth:`save` talk to the
    configured :class:`HistoryStorage`; the search engine decides when
    to save.
    """

    def __init__(
        self,
        storage: HistoryStorage | None = None,
        *,
        window_days: int = RECENT_USAGE_DAYS,
    ) -> None:
        self._storage = storage
        self._window_days = window_days
        self._records: dict[str, UsageRecord] = {}
        self._lock = threading.Lock()

    @property
    def storage(self) -> HistoryStorage | None:
        return self._storage

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, action_id: object) -> bool:
        return action_id in self._records

    def get(self, action_id: str) -> UsageRecord | None:
        """Get the record of an action, None if it was never used."""
        return self._records.get(action_id)

    def records(self) -> dict[str, UsageRecord]:
        """Point-in-time copy of all records."""
        with self._lock:
            return dict(self._records)

    def seed(self, action_id: str, record: UsageRecord) -> bool:
        """
        Initialize the record of an action that has no history yet.

        Returns:
            True if the record was stored, False if history already existed
        """
        with self._lock:
            if action_id in self._records:
                return False
            self._records[action_id] = record
            return True

    def record_usage(
        self,
        action_id: str,
        query: str = "",
        now: datetime | None = None,
    ) -> UsageRecord:
        """
        Record one launch of an action.

        Args:
            action_id: The launched action
            query: Query the launch came from ("" when browsed)
            now: Launch time (defaults to the current UTC time)

        Returns:
            The new record
        """
        now = now or utcnow()
        with self._lock:
            updated = history_updater.record_usage(self._records.get(action_id), query, now)
            self._records[action_id] = updated
        logger.debug("Recorded usage of %s (count=%d)", action_id, updated.usage_count)
        return updated

    def clear(self) -> None:
        """Forget all history in memory."""
        with self._lock:
            self._records = {}

    def to_blob(self) -> dict[str, Any]:
        """Serialize all records into the persisted blob format."""
        with self._lock:
            records = dict(self._records)
        return {
            "version": HISTORY_VERSION,
            "actions": {action_id: record.to_dict() for action_id, record in records.items()},
        }

    def replace_from_blob(self, blob: Mapping[str, Any], now: datetime | None = None) -> int:
        """
        Replace all records with the contents of a blob.

        Returns:
            Number of records loaded

        Raises:
            HistoryFormatError: If the blob is invalid; current state is kept
        """
        records = records_from_blob(blob, now or utcnow(), self._window_days)
        with self._lock:
            self._records = records
        return len(records)

    def export_json(self) -> str:
        """Export all history as a JSON document."""
        return json.dumps(self.to_blob(), indent=2, ensure_ascii=False)

    def import_json(self, text: str, now: datetime | None = None) -> bool:
        """
        Import history previously produced by :meth:`export_json`.

        Returns:
            True on success; False if the text is unparsable or of another
            version, in which case current history is untouched
        """
        try:
            blob = json.loads(text)
            count = self.replace_from_blob(blob, now)
        except (json.JSONDecodeError, HistoryFormatError) as e:
            logger.warning("Rejected history import: %s", e)
            return False
        logger.info("Imported usage history for %d actions", count)
        return True

    async def load(self, now: datetime | None = None) -> int:
        """
        Load history from storage.

        Unreadable, malformed or version-mismatched payloads are logged
        and replaced with empty history.

        Returns:
            Number of records loaded
        """
        if self._storage is None:
            return 0

        try:
            blob = await self._storage.load()
            if blob is None:
                self.clear()
                return 0
            count = self.replace_from_blob(blob, now)
        except HistoryFormatError:
            logger.warning("Discarding unreadable usage history", exc_info=True)
            self.clear()
            return 0

        logger.debug("Loaded usage history for %d actions", count)
        return count

    async def save(self) -> None:
        """Write all history to storage (no-op without storage)."""
        if self._storage is None:
            return
        await self._storage.save(self.to_blob())
