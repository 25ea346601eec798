"""SQLite history storage backed by aiosqlite."""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

import aiosqlite

from launcher_search.storage.base import HistoryFormatError, HistoryStorage

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS usage_history (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    payload TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""


class SQLiteHistoryStorage(HistoryStorage):
    """SQLite-based history storage.

    The blob lives in a single-row table so every save replaces it in one
    transaction. The connection is opened lazily on first use.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path).expanduser().resolve()
        self._conn: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        """Open the database connection and create the schema."""
        if self._conn is not None:
            return

        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(self._db_path)
        try:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA synchronous=NORMAL")
            await conn.executescript(SCHEMA)
            await conn.commit()
        except sqlite3.DatabaseError:
            await conn.close()
            raise
        self._conn = conn

    async def _ensure_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            await self.initialize()
        assert self._conn is not None
        return self._conn

    async def load(self) -> dict[str, Any] | None:
        try:
            conn = await self._ensure_conn()
            async with conn.execute("SELECT payload FROM usage_history WHERE id = 1") as cursor:
                row = await cursor.fetchone()
        except sqlite3.DatabaseError as e:
            raise HistoryFormatError(f"Unreadable history database {self._db_path}: {e}") from e

        if row is None:
            return None

        try:
            data = json.loads(row[0])
        except json.JSONDecodeError as e:
            raise HistoryFormatError(f"Corrupt history payload in {self._db_path}: {e}") from e

        if not isinstance(data, dict):
            raise HistoryFormatError(f"History payload in {self._db_path} is not an object")
        return data

    async def save(self, blob: dict[str, Any]) -> None:
        conn = await self._ensure_conn()
        payload = json.dumps(blob, ensure_ascii=False)
        await conn.execute(
            """INSERT INTO usage_history (id, payload, updated_at)
               VALUES (1, ?, datetime('now'))
               ON CONFLICT(id) DO UPDATE SET
                   payload = excluded.payload,
                   updated_at = excluded.updated_at""",
            (payload,),
        )
        await conn.commit()
        logger.debug("Saved usage history to %s", self._db_path)

    async def clear(self) -> None:
        conn = await self._ensure_conn()
        await conn.execute("DELETE FROM usage_history")
        await conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
