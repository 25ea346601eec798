"""Tests for unified_config.py."""

from __future__ import annotations

from pathlib import Path

import pytest

from launcher_search.unified_config import (
    RankingConfig,
    RankingWeights,
    ServerSettings,
    StorageSettings,
    UnifiedConfig,
    get_config,
    get_launcher_search_dir,
)


class TestRankingConfig:
    """Tests for ranking configuration parsing."""

    def test_defaults(self) -> None:
        config = RankingConfig()
        assert config.weights == RankingWeights(0.8, 1.5, 0.5, 3.0)
        assert config.suppression_threshold == 15.0
        assert config.prefix_boost == 2.0
        assert config.min_score == 10.0
        assert config.max_results is None

    def test_camel_case_keys(self) -> None:
        config = RankingConfig.from_dict(
            {
                "weights": {"history": 1.0, "recentHabit": 2.0, "queryAffinity": 4.0},
                "suppressionThreshold": 20,
                "prefixMatchBoost": 3,
                "minScoreThreshold": 5,
                "maxResults": 8,
            }
        )
        assert config.weights == RankingWeights(1.0, 2.0, 0.5, 4.0)
        assert config.suppression_threshold == 20.0
        assert config.prefix_boost == 3.0
        assert config.min_score == 5.0
        assert config.max_results == 8

    def test_round_trip(self) -> None:
        config = RankingConfig(max_results=5, match_all_tokens=True, debug=True)
        assert RankingConfig.from_dict(config.to_dict()) == config

    def test_with_updates(self) -> None:
        config = RankingConfig().with_updates(max_results=3)
        assert config.max_results == 3


class TestStorageSettings:
    """Tests for storage settings."""

    def test_unknown_backend_falls_back(self) -> None:
        assert StorageSettings.from_dict({"backend": "redis"}).backend == "json"

    def test_default_paths(self, tmp_path: Path) -> None:
        assert StorageSettings().resolve_path(tmp_path) == tmp_path / "history.json"
        assert StorageSettings("sqlite").resolve_path(tmp_path) == tmp_path / "history.db"


class TestUnifiedConfig:
    """Tests for loading and saving the config file."""

    def test_data_dir_from_env(self, isolated_data_dir: Path) -> None:
        assert get_launcher_search_dir() == isolated_data_dir

    def test_missing_file_gives_defaults(self, isolated_data_dir: Path) -> None:
        config = UnifiedConfig.load()
        assert config.data_dir == isolated_data_dir
        assert config.ranking == RankingConfig()
        assert config.storage == StorageSettings()
        assert config.server == ServerSettings()

    def test_save_and_load(self, isolated_data_dir: Path) -> None:
        config = UnifiedConfig(
            data_dir=isolated_data_dir,
            ranking=RankingConfig(
                weights=RankingWeights(history=1.2),
                min_score=0.0,
                max_results=20,
            ),
            storage=StorageSettings(backend="sqlite", path=isolated_data_dir / "h.db"),
            server=ServerSettings(port=9000),
        )
        config.save()

        loaded = UnifiedConfig.load()
        assert loaded.ranking == config.ranking
        assert loaded.storage == config.storage
        assert loaded.server.port == 9000
        assert not list(isolated_data_dir.glob("*.tmp"))

    def test_backend_env_override(
        self, isolated_data_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("LAUNCHER_SEARCH_BACKEND", "memory")
        assert UnifiedConfig.load().storage.backend == "memory"

    def test_unreadable_file_gives_defaults(self, isolated_data_dir: Path) -> None:
        isolated_data_dir.mkdir(parents=True)
        (isolated_data_dir / "config.toml").write_text("[ranking\n", encoding="utf-8")
        assert UnifiedConfig.load().ranking == RankingConfig()

    def test_singleton(self) -> None:
        first = get_config()
        assert get_config() is first
        assert get_config(reload=True) is not first
