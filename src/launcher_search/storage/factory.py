"""Storage factory for creating history storage based on configuration."""

from __future__ import annotations

import logging
from pathlib import Path

from launcher_search.storage.base import HistoryStorage
from launcher_search.storage.json_store import JSONFileHistoryStorage
from launcher_search.storage.memory_store import InMemoryHistoryStorage
from launcher_search.storage.sqlite_store import SQLiteHistoryStorage
from launcher_search.unified_config import StorageSettings

logger = logging.getLogger(__name__)


def create_history_storage(settings: StorageSettings, data_dir: Path) -> HistoryStorage:
    """
    Create a history storage instance based on configuration.

    Args:
        settings: Storage section of the configuration
        data_dir: Directory used when no explicit path is configured

    Returns:
        Configured storage instance

    Examples:
        storage = create_history_storage(StorageSettings(backend="sqlite"), data_dir)
        storage = create_history_storage(StorageSettings(), data_dir)  # JSON file
    """
    if settings.backend == "memory":
        return InMemoryHistoryStorage()

    path = settings.resolve_path(data_dir)
    if settings.backend == "sqlite":
        logger.debug("Using SQLite history storage at %s", path)
        return SQLiteHistoryStorage(path)
    if settings.backend == "json":
        logger.debug("Using JSON history storage at %s", path)
        return JSONFileHistoryStorage(path)

    raise ValueError(f"Unknown storage backend: {settings.backend}")
