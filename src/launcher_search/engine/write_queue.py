"""Deferred history writes, kept off the launch path."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from launcher_search.storage.history_store import UsageHistoryStore

logger = logging.getLogger(__name__)


class DeferredHistoryWriter:
    """Coalesces history saves and runs them after the caller returns.

    Recording a launch only marks the history dirty. When an event loop is
    running, a background task saves it; further launches recorded while
    that save is in flight are picked up by one more save, not one each.
    Without a running loop the history stays dirty until :meth:`flush`.

    Saves are serialized by an asyncio lock, so the last state recorded is
    the last one written. Failures are logged and never reach the caller.
    """

    def __init__(self, store: UsageHistoryStore) -> None:
        self._store = store
        self._save_lock = asyncio.Lock()
        self._dirty = False
        self._task: asyncio.Task[None] | None = None
        self._last_save_ok = True
        self.failed_saves = 0

    @property
    def pending(self) -> bool:
        """Whether recorded changes are not yet saved."""
        return self._dirty

    def schedule(self) -> None:
        """Mark history dirty and start a background save if possible."""
        self._dirty = True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return

        if self._task is None or self._task.done():
            self._task = loop.create_task(self._drain())

    async def _drain(self) -> None:
        while self._dirty:
            if not await self._save_once():
                break

    async def _save_once(self) -> bool:
        async with self._save_lock:
            if not self._dirty:
                return True
            self._dirty = False
            try:
                await self._store.save()
            except Exception:
                self.failed_saves += 1
                self._last_save_ok = False
                logger.warning("Deferred history save failed", exc_info=True)
                return False
            self._last_save_ok = True
        return True

    async def flush(self) -> bool:
        """Wait for in-flight saves and write anything still pending.

        Returns:
            False if the last save attempt failed
        """
        task = self._task
        if task is not None and not task.done():
            await task
        self._task = None

        if self._dirty:
            return await self._save_once()
        return self._last_save_ok
