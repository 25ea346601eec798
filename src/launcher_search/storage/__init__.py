"""Usage history storage backends."""

from launcher_search.storage.base import HISTORY_VERSION, HistoryFormatError, HistoryStorage
from launcher_search.storage.factory import create_history_storage
from launcher_search.storage.history_store import UsageHistoryStore
from launcher_search.storage.json_store import JSONFileHistoryStorage
from launcher_search.storage.memory_store import InMemoryHistoryStorage
from launcher_search.storage.sqlite_store import SQLiteHistoryStorage

__all__ = [
    "HISTORY_VERSION",
    "HistoryFormatError",
    "HistoryStorage",
    "InMemoryHistoryStorage",
    "JSONFileHistoryStorage",
    "SQLiteHistoryStorage",
    "UsageHistoryStore",
    "create_history_storage",
]
