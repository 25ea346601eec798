"""Integration tests for the search flow."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from launcher_search.core.action import Action, ActionSpec
from launcher_search.core.usage import today_for
from launcher_search.engine.search import ActionSearchEngine, rank_actions
from launcher_search.storage.json_store import JSONFileHistoryStorage
from launcher_search.storage.memory_store import InMemoryHistoryStorage
from launcher_search.storage.sqlite_store import SQLiteHistoryStorage
from launcher_search.unified_config import RankingConfig


class TestCalculatorScenario:
    """The canonical end-to-end scenario."""

    @pytest.mark.asyncio
    async def test_pinyin_query_excluded_name_query_included(
        self, engine: ActionSearchEngine, now: datetime
    ) -> None:
        ids = [a.id for a in engine.search("jisuanqi", now=now)]
        assert "calc" not in ids

        matches = engine.search_scored("calc", now=now)
        calc = next(m for m in matches if m.action.id == "calc")
        assert calc.base_score > 0
        assert matches[0].action.id == "calc"

    @pytest.mark.asyncio
    async def test_score_rises_after_usage(self, engine: ActionSearchEngine, now: datetime) -> None:
        before = engine.search_scored("calc", now=now)[0]
        engine.record_usage("calc", "calc", now)
        after = engine.search_scored("calc", now=now)[0]

        assert after.action.id == "calc"
        assert after.score > before.score
        assert after.base_score == before.base_score

    @pytest.mark.asyncio
    async def test_chinese_name_found_by_pinyin(
        self, engine: ActionSearchEngine, now: datetime
    ) -> None:
        assert engine.search("jisuanqi", now=now)[0].id == "jsq"
        assert engine.search("jsq", now=now)[0].id == "jsq"
        assert "jsq" in [a.id for a in engine.search("jisq", now=now)]


class TestRankingBehaviour:
    """Tests for ordering and filtering."""

    @pytest.mark.asyncio
    async def test_deterministic(self, engine: ActionSearchEngine, now: datetime) -> None:
        engine.record_usage("vscode", "code", now - timedelta(hours=1))
        first = engine.search_scored("e", now=now)
        second = engine.search_scored("e", now=now)
        assert first == second

    @pytest.mark.asyncio
    async def test_frequent_weak_match_stays_below_strong_match(
        self, now: datetime
    ) -> None:
        engine = ActionSearchEngine(InMemoryHistoryStorage())
        engine.register_actions(
            [
                ActionSpec.create("term", "Terminal"),
                ActionSpec.create("theme", "Theme Settings"),
            ]
        )
        for day in range(5):
            for minute in range(10):
                engine.record_usage("term", "", now - timedelta(days=day, minutes=minute))

        assert engine.search("theme", now=now)[0].id == "theme"

    @pytest.mark.asyncio
    async def test_query_affinity_reorders(self, now: datetime) -> None:
        engine = ActionSearchEngine(InMemoryHistoryStorage())
        engine.register_actions(
            [
                ActionSpec.create("notes", "Notes"),
                ActionSpec.create("notepad", "Notepad"),
            ]
        )
        assert engine.search("note", now=now)[0].id == "notes"

        engine.record_usage("notepad", "note", now - timedelta(minutes=10))
        engine.record_usage("notepad", "note", now - timedelta(minutes=5))
        assert engine.search("note", now=now)[0].id == "notepad"

    @pytest.mark.asyncio
    async def test_max_results_and_min_score(self, engine: ActionSearchEngine, now: datetime) -> None:
        engine.config = RankingConfig(max_results=2, min_score=-1000.0)
        assert len(engine.search("e", now=now)) == 2

    @pytest.mark.asyncio
    async def test_match_all_tokens(self, now: datetime) -> None:
        specs = [
            ActionSpec.create("vsc-proj", "VS Code", ["project", "editor"]),
            ActionSpec.create("notes", "Notes"),
        ]
        plain = ActionSearchEngine(InMemoryHistoryStorage())
        plain.register_actions(specs)
        assert plain.search("editor project", now=now) == []

        engine = ActionSearchEngine(
            InMemoryHistoryStorage(), RankingConfig(match_all_tokens=True)
        )
        engine.register_actions(specs)
        ids = [a.id for a in engine.search("editor project", now=now)]
        assert ids == ["vsc-proj"]

    def test_rank_actions_is_pure(self, now: datetime) -> None:
        actions = [Action(id="a", name="Alpha"), Action(id="b", name="Alphabet")]
        first = rank_actions("alpha", actions, {}, RankingConfig(), now)
        second = rank_actions("alpha", actions, {}, RankingConfig(), now)
        assert [m.action.id for m in first] == ["a", "b"]
        assert first == second
        assert rank_actions("   ", actions, {}, RankingConfig(), now) == []


class TestScopes:
    """Tests for empty queries and root scoping."""

    @pytest.mark.asyncio
    async def test_empty_query_lists_roots_by_priority(self, engine: ActionSearchEngine) -> None:
        ids = [a.id for a in engine.search("")]
        assert ids == ["settings", "calc", "vscode", "jsq"]

    @pytest.mark.asyncio
    async def test_empty_query_in_subtree(self, engine: ActionSearchEngine) -> None:
        ids = [a.id for a in engine.search("", root_id="settings")]
        assert ids == ["settings.theme", "settings.fonts"]

    @pytest.mark.asyncio
    async def test_deep_results_in_scope(self, engine: ActionSearchEngine, now: datetime) -> None:
        ids = [a.id for a in engine.search("dark", root_id="settings", now=now)]
        assert ids[0] == "settings.theme.dark"
        assert all(i.startswith("settings.") for i in ids)

        ids = [a.id for a in engine.search("calc", root_id="settings", now=now)]
        assert "calc" not in ids

    @pytest.mark.asyncio
    async def test_full_catalog_includes_nested(
        self, engine: ActionSearchEngine, now: datetime
    ) -> None:
        assert engine.search("dark mode", now=now)[0].id == "settings.theme.dark"

    @pytest.mark.asyncio
    async def test_unregistered_actions_disappear(
        self, engine: ActionSearchEngine, now: datetime
    ) -> None:
        engine.unregister_actions(["settings"])
        ids = [a.id for a in engine.search("dark mode", now=now)]
        assert not [i for i in ids if i.startswith("settings")]
        assert engine.ancestors("settings.theme.dark") == []


class TestPersistence:
    """Tests for history surviving restarts."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("backend", ["json", "sqlite"])
    async def test_history_survives_restart(
        self, tmp_path: Path, now: datetime, backend: str
    ) -> None:
        def make_storage() -> JSONFileHistoryStorage | SQLiteHistoryStorage:
            if backend == "json":
                return JSONFileHistoryStorage(tmp_path / "history.json")
            return SQLiteHistoryStorage(tmp_path / "history.db")

        async with ActionSearchEngine(make_storage()) as first:
            first.register_actions([ActionSpec.create("calc", "Calculator")])
            first.record_usage("calc", "calc", now)

        async with ActionSearchEngine(make_storage()) as second:
            record = second.history_for("calc")
            assert record is not None
            assert record.usage_count == 1
            assert record.affinity_for("calc") is not None

    @pytest.mark.asyncio
    async def test_stale_buckets_pruned_on_load(self, now: datetime) -> None:
        today = today_for(now)
        storage = InMemoryHistoryStorage(
            {
                "version": 1,
                "actions": {
                    "calc": {
                        "usage_count": 5,
                        "last_used_time": (now - timedelta(days=8)).isoformat(),
                        "recent_usage": [
                            {"date": (today - timedelta(days=8)).isoformat(), "count": 5}
                        ],
                        "query_affinity": {},
                        "stable_bias": None,
                    }
                },
            }
        )
        engine = ActionSearchEngine(storage)
        await engine.load(now)

        record = engine.history_for("calc")
        assert record is not None
        assert record.recent_usage == ()
        assert record.usage_count == 5

    @pytest.mark.asyncio
    async def test_corrupt_history_starts_empty(self, tmp_path: Path, now: datetime) -> None:
        path = tmp_path / "history.json"
        path.write_text("{oops", encoding="utf-8")

        engine = ActionSearchEngine(JSONFileHistoryStorage(path))
        assert await engine.load(now) == 0
        engine.register_actions([ActionSpec.create("calc", "Calculator")])
        assert engine.search("calc", now=now)[0].id == "calc"

    @pytest.mark.asyncio
    async def test_import_export_through_engine(
        self, engine: ActionSearchEngine, now: datetime
    ) -> None:
        engine.record_usage("calc", "calc", now)
        exported = engine.export_history()

        engine.clear_history()
        assert engine.history_for("calc") is None

        assert engine.import_history(exported, now) is True
        assert engine.history_for("calc").usage_count == 1  # type: ignore[union-attr]
        assert engine.import_history("[]", now) is False
