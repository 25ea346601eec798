"""Unified configuration for launcher-search.

One configuration shared by the library, the ``lsearch`` CLI and the REST
server.

Configuration is stored in ~/.launcher-search/config.toml
Usage history is stored in ~/.launcher-search/history.json (or .db)
"""

from __future__ import annotations

import logging
import os
import tempfile
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ("json", "sqlite", "memory")


def get_launcher_search_dir() -> Path:
    """Get launcher-search data directory.

    Priority:
    1. LAUNCHER_SEARCH_DIR environment variable
    2. ~/.launcher-search/
    """
    env_dir = os.environ.get("LAUNCHER_SEARCH_DIR")
    if env_dir:
        return Path(env_dir)
    return Path.home() / ".launcher-search"


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """First present key; lets config dicts use snake_case or camelCase."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class RankingWeights:
    """Weights of the usage-derived ranking dimensions."""

    history: float = 0.8
    recent_habit: float = 1.5
    temporal: float = 0.5
    query_affinity: float = 3.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "history": self.history,
            "recent_habit": self.recent_habit,
            "temporal": self.temporal,
            "query_affinity": self.query_affinity,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RankingWeights:
        return cls(
            history=float(_pick(data, "history", default=0.8)),
            recent_habit=float(_pick(data, "recent_habit", "recentHabit", default=1.5)),
            temporal=float(_pick(data, "temporal", default=0.5)),
            query_affinity=float(_pick(data, "query_affinity", "queryAffinity", default=3.0)),
        )


@dataclass(frozen=True)
class RankingConfig:
    """
    Search and ranking behavior.

    Attributes:
        weights: Weights of history, recent habit, temporal heat and query affinity
        suppression_threshold: Base score at which usage boosts reach full strength
        prefix_boost: Multiplier of the prefix component of the standard score
        min_score: Final scores below this are dropped from results
        max_results: Cap on returned results (None for no cap)
        match_all_tokens: Require every word of a multi-word query to match
        debug: Log base and final score of every candidate
    """

    weights: RankingWeights = field(default_factory=RankingWeights)
    suppression_threshold: float = 15.0
    prefix_boost: float = 2.0
    min_score: float = 10.0
    max_results: int | None = None
    match_all_tokens: bool = False
    debug: bool = False

    def with_updates(self, **kwargs: Any) -> RankingConfig:
        """Create a new config with updated values."""
        return replace(self, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "weights": self.weights.to_dict(),
            "suppression_threshold": self.suppression_threshold,
            "prefix_boost": self.prefix_boost,
            "min_score": self.min_score,
            "max_results": self.max_results,
            "match_all_tokens": self.match_all_tokens,
            "debug": self.debug,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RankingConfig:
        max_results = _pick(data, "max_results", "maxResults")
        return cls(
            weights=RankingWeights.from_dict(data.get("weights") or {}),
            suppression_threshold=float(
                _pick(data, "suppression_threshold", "suppressionThreshold", default=15.0)
            ),
            prefix_boost=float(
                _pick(data, "prefix_boost", "prefixBoost", "prefixMatchBoost", default=2.0)
            ),
            min_score=float(_pick(data, "min_score", "minScoreThreshold", default=10.0)),
            max_results=int(max_results) if max_results is not None else None,
            match_all_tokens=bool(_pick(data, "match_all_tokens", default=False)),
            debug=bool(_pick(data, "debug", default=False)),
        )


@dataclass(frozen=True)
class StorageSettings:
    """Where usage history is persisted."""

    backend: str = "json"
    path: Path | None = None

    def resolve_path(self, data_dir: Path) -> Path:
        """History file location, defaulting inside the data directory."""
        if self.path is not None:
            return self.path
        suffix = "db" if self.backend == "sqlite" else "json"
        return data_dir / f"history.{suffix}"

    def to_dict(self) -> dict[str, Any]:
        return {"backend": self.backend, "path": str(self.path) if self.path else None}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StorageSettings:
        backend = str(data.get("backend", "json"))
        if backend not in STORAGE_BACKENDS:
            logger.warning("Unknown storage backend %r, falling back to json", backend)
            backend = "json"
        path = data.get("path")
        return cls(backend=backend, path=Path(path).expanduser() if path else None)


@dataclass(frozen=True)
class ServerSettings:
    """REST server bind address."""

    host: str = "127.0.0.1"
    port: int = 8765

    def to_dict(self) -> dict[str, Any]:
        return {"host": self.host, "port": self.port}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ServerSettings:
        return cls(host=str(data.get("host", "127.0.0.1")), port=int(data.get("port", 8765)))


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return str(value)


@dataclass
class UnifiedConfig:
    """Unified configuration for launcher-search.

    Storage location: ~/.launcher-search/config.toml
    """

    data_dir: Path = field(default_factory=get_launcher_search_dir)
    ranking: RankingConfig = field(default_factory=RankingConfig)
    storage: StorageSettings = field(default_factory=StorageSettings)
    server: ServerSettings = field(default_factory=ServerSettings)
    version: str = "1.0"

    @classmethod
    def load(cls, config_path: Path | None = None) -> UnifiedConfig:
        """Load configuration from file, or defaults if it doesn't exist."""
        if config_path is None:
            data_dir = get_launcher_search_dir()
            config_path = data_dir / "config.toml"
        else:
            data_dir = config_path.parent

        data: dict[str, Any] = {}
        if config_path.exists():
            try:
                with open(config_path, "rb") as f:
                    data = tomllib.load(f)
            except tomllib.TOMLDecodeError:
                logger.warning("Ignoring unreadable config %s", config_path, exc_info=True)
                data = {}

        storage = StorageSettings.from_dict(data.get("storage", {}))
        env_backend = os.environ.get("LAUNCHER_SEARCH_BACKEND")
        if env_backend in STORAGE_BACKENDS:
            storage = replace(storage, backend=env_backend)

        return cls(
            data_dir=data_dir,
            ranking=RankingConfig.from_dict(data.get("ranking", {})),
            storage=storage,
            server=ServerSettings.from_dict(data.get("server", {})),
            version=str(data.get("version", "1.0")),
        )

    def save(self) -> None:
        """Save configuration to TOML file (atomic write via temp+rename)."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

        ranking = self.ranking
        lines = [
            "# launcher-search configuration",
            "",
            f"version = {_toml_value(self.version)}",
            "",
            "# Search and ranking",
            "[ranking]",
            f"suppression_threshold = {ranking.suppression_threshold}",
            f"prefix_boost = {ranking.prefix_boost}",
            f"min_score = {ranking.min_score}",
            f"match_all_tokens = {_toml_value(ranking.match_all_tokens)}",
            f"debug = {_toml_value(ranking.debug)}",
        ]
        if ranking.max_results is not None:
            lines.append(f"max_results = {ranking.max_results}")

        lines += [
            "",
            "[ranking.weights]",
            f"history = {ranking.weights.history}",
            f"recent_habit = {ranking.weights.recent_habit}",
            f"temporal = {ranking.weights.temporal}",
            f"query_affinity = {ranking.weights.query_affinity}",
            "",
            "# Usage history persistence",
            "[storage]",
            f"backend = {_toml_value(self.storage.backend)}",
        ]
        if self.storage.path is not None:
            lines.append(f"path = {_toml_value(str(self.storage.path))}")

        lines += [
            "",
            "[server]",
            f"host = {_toml_value(self.server.host)}",
            f"port = {self.server.port}",
        ]

        content = "\n".join(lines) + "\n"
        fd, tmp_path = tempfile.mkstemp(dir=str(self.data_dir), suffix=".toml.tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            Path(tmp_path).replace(self.config_path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    @property
    def config_path(self) -> Path:
        """Get path to config file."""
        return self.data_dir / "config.toml"

    @property
    def history_path(self) -> Path:
        """Get path to the persisted usage history."""
        return self.storage.resolve_path(self.data_dir)

    def to_dict(self) -> dict[str, Any]:
        return {
            "data_dir": str(self.data_dir),
            "version": self.version,
            "ranking": self.ranking.to_dict(),
            "storage": self.storage.to_dict(),
            "server": self.server.to_dict(),
        }


# Singleton instance for easy access
_config: UnifiedConfig | None = None


def get_config(reload: bool = False) -> UnifiedConfig:
    """Get the unified configuration (singleton).

    Args:
        reload: Force reload from disk

    Returns:
        UnifiedConfig instance
    """
    global _config
    if _config is None or reload:
        _config = UnifiedConfig.load()
    return _config
