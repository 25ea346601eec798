"""JSON file history storage."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from launcher_search.storage.base import HistoryFormatError, HistoryStorage

logger = logging.getLogger(__name__)


class JSONFileHistoryStorage(HistoryStorage):
    """Persists the history blob to a single JSON file.

    Writes go to a temp file in the same directory which is then renamed
    over the target, so a crash mid-write never leaves a truncated file.
    Data is stored in ~/.launcher-search/history.json by default.
    """

    def __init__(self, file_path: str | Path) -> None:
        self._file_path = Path(file_path).expanduser()

    @property
    def file_path(self) -> Path:
        return self._file_path

    async def load(self) -> dict[str, Any] | None:
        return await asyncio.to_thread(self._read)

    async def save(self, blob: dict[str, Any]) -> None:
        await asyncio.to_thread(self._write, blob)

    async def clear(self) -> None:
        await asyncio.to_thread(self._file_path.unlink, True)

    def _read(self) -> dict[str, Any] | None:
        if not self._file_path.exists():
            return None

        try:
            with open(self._file_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise HistoryFormatError(f"Cannot read {self._file_path}: {e}") from e

        if not isinstance(data, dict):
            raise HistoryFormatError(f"{self._file_path} does not contain a JSON object")
        return data

    def _write(self, blob: dict[str, Any]) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(blob, indent=2, ensure_ascii=False)

        fd, tmp_path = tempfile.mkstemp(dir=str(self._file_path.parent), suffix=".json.tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            Path(tmp_path).replace(self._file_path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
        logger.debug("Saved usage history to %s", self._file_path)
