"""Pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from pathlib import Path

import pytest
import pytest_asyncio

from launcher_search import unified_config
from launcher_search.core.action import ActionSpec
from launcher_search.engine.search import ActionSearchEngine
from launcher_search.storage.history_store import UsageHistoryStore
from launcher_search.storage.memory_store import InMemoryHistoryStorage


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the data directory at a temp dir and reset the config singleton."""
    data_dir = tmp_path / ".launcher-search"
    monkeypatch.setenv("LAUNCHER_SEARCH_DIR", str(data_dir))
    monkeypatch.delenv("LAUNCHER_SEARCH_BACKEND", raising=False)
    monkeypatch.setattr(unified_config, "_config", None)
    return data_dir


@pytest.fixture
def now() -> datetime:
    """Fixed reference time."""
    return datetime(2026, 3, 2, 12, 0, tzinfo=UTC)


@pytest.fixture
def memory_storage() -> InMemoryHistoryStorage:
    return InMemoryHistoryStorage()


@pytest.fixture
def history_store(memory_storage: InMemoryHistoryStorage) -> UsageHistoryStore:
    return UsageHistoryStore(memory_storage)


@pytest.fixture
def sample_specs() -> list[ActionSpec]:
    """A small catalog with one nested menu."""
    return [
        ActionSpec.create("calc", "Calculator", "数学,math"),
        ActionSpec.create("vscode", "Visual Studio Code", ["editor", "ide"]),
        ActionSpec.create("settings", "Settings", "preferences", priority=1),
        ActionSpec.create("settings.theme", "Change Theme", parent_id="settings"),
        ActionSpec.create("settings.theme.dark", "Dark Mode", parent_id="settings.theme"),
        ActionSpec.create("settings.fonts", "Fonts", parent_id="settings"),
        ActionSpec.create("jsq", "计算器"),
    ]


@pytest_asyncio.fixture
async def engine(
    memory_storage: InMemoryHistoryStorage,
    sample_specs: list[ActionSpec],
) -> AsyncGenerator[ActionSearchEngine, None]:
    """Engine over in-memory storage with the sample catalog registered."""
    search_engine = ActionSearchEngine(memory_storage)
    await search_engine.load()
    search_engine.register_actions(sample_specs)
    yield search_engine
    await search_engine.close()
