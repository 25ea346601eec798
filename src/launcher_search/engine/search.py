"""Search engine facade - registry, scoring, ranking and history in one place.

Query flow:

1. Take a snapshot of the actions in scope (whole catalog or one subtree)
2. Score every action's keywords against the query (standard + pinyin)
3. Personalize the score from usage history
4. Drop weak results, sort, cap

No I/O happens on this path; history is loaded once and saved in the
background after launches.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from launcher_search.core.action import Action, ActionSpec
from launcher_search.core.registry import ActionRegistry
from launcher_search.core.usage import UsageRecord
from launcher_search.engine.pinyin_match import PINYIN_KEYWORD_SCORE, pinyin_fallback_score
from launcher_search.engine.ranker import score_breakdown
from launcher_search.engine.scorer import NO_MATCH, best_score, best_token_score
from launcher_search.engine.tokenizer import QueryTokens, tokenize_query
from launcher_search.engine.write_queue import DeferredHistoryWriter
from launcher_search.storage.base import HistoryStorage
from launcher_search.storage.factory import create_history_storage
from launcher_search.storage.history_store import UsageHistoryStore
from launcher_search.unified_config import RankingConfig, UnifiedConfig
from launcher_search.utils.timeutils import utcnow

logger = logging.getLogger(__name__)


class HistoryLookup(Protocol):
    """Anything that maps an action id to its usage record."""

    def get(self, action_id: str) -> UsageRecord | None: ...


@dataclass(frozen=True)
class SearchMatch:
    """One ranked search result."""

    action: Action
    score: float
    base_score: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.action.id,
            "name": self.action.name,
            "score": self.score,
            "base_score": self.base_score,
        }


def match_score(
    action: Action,
    query: QueryTokens,
    config: RankingConfig,
) -> float:
    """
    Textual match score of one action, before personalization.

    Args:
        action: The candidate action
        query: Tokenized query
        config: Ranking configuration (prefix boost, AND mode)

    Returns:
        Best of the standard and pinyin scores, -inf when nothing matches
    """
    text = query.original.strip().lower()
    keywords = action.derived_keywords
    base = best_score(text, keywords, config.prefix_boost)

    if config.match_all_tokens and query.is_multi_word:
        token_score = best_token_score(query.tokens, keywords, config.prefix_boost)
        if token_score == NO_MATCH:
            return NO_MATCH
        base = max(base, token_score)

    if base < PINYIN_KEYWORD_SCORE:
        pinyin = pinyin_fallback_score(action.name, keywords, text)
        if pinyin is not None:
            base = max(base, pinyin)

    return base


def rank_actions(
    query: str,
    actions: Iterable[Action],
    history: HistoryLookup | Mapping[str, UsageRecord] | None = None,
    config: RankingConfig | None = None,
    now: datetime | None = None,
) -> list[SearchMatch]:
    """
    Score, filter and order a set of actions for a query.

    This is a pure function of its inputs: identical arguments always
    produce the identical ordering. Ties keep the input order.

    Args:
        query: Raw query text
        actions: Candidate actions
        history: Usage records by action id
        config: Ranking configuration (defaults when None)
        now: Reference time (defaults to the current UTC time)

    Returns:
        Matches sorted by final score, highest first
    """
    config = config or RankingConfig()
    now = now or utcnow()
    tokens = tokenize_query(query)
    if not tokens.tokens:
        return []

    matches: list[SearchMatch] = []
    for action in actions:
        base = match_score(action, tokens, config)
        if base == NO_MATCH:
            continue

        record = history.get(action.id) if history is not None else None
        breakdown = score_breakdown(
            base,
            record,
            query,
            stable_bias=action.stable_bias,
            config=config,
            now=now,
        )
        if config.debug:
            logger.debug(
                "%s (%s): base=%.3f final=%.3f %s",
                action.id,
                action.name,
                breakdown.base,
                breakdown.final,
                breakdown.to_dict(),
            )
        if breakdown.final < config.min_score:
            continue
        matches.append(SearchMatch(action=action, score=breakdown.final, base_score=breakdown.base))

    matches.sort(key=lambda m: m.score, reverse=True)
    if config.max_results is not None:
        matches = matches[: max(0, config.max_results)]
    return matches


class ActionSearchEngine:
    """
    Command-palette search over a live action catalog.

    Wires the action registry, the usage history store and the ranker
    together, and keeps history persisted through a deferred writer.

    Example:
        engine = ActionSearchEngine(JSONFileHistoryStorage("history.json"))
        await engine.load()
        engine.register_actions([ActionSpec.create("calc", "Calculator", "math")])
        results = engine.search("calc")
        engine.record_usage("calc", "calc")
        await engine.close()
    """

    def __init__(
        self,
        storage: HistoryStorage | None = None,
        config: RankingConfig | None = None,
        *,
        history_store: UsageHistoryStore | None = None,
    ) -> None:
        self._history = history_store or UsageHistoryStore(storage)
        self._registry = ActionRegistry(self._history)
        self._writer = DeferredHistoryWriter(self._history)
        self._config = config or RankingConfig()

    @classmethod
    def from_config(cls, config: UnifiedConfig) -> ActionSearchEngine:
        """Create an engine with the configured storage backend and ranking."""
        storage = create_history_storage(config.storage, config.data_dir)
        return cls(storage, config.ranking)

    @property
    def registry(self) -> ActionRegistry:
        return self._registry

    @property
    def history(self) -> UsageHistoryStore:
        return self._history

    @property
    def config(self) -> RankingConfig:
        return self._config

    @config.setter
    def config(self, value: RankingConfig) -> None:
        self._config = value

    @property
    def has_pending_writes(self) -> bool:
        return self._writer.pending

    # ========== Lifecycle ==========

    async def load(self, now: datetime | None = None) -> int:
        """Load persisted history; returns the number of records."""
        return await self._history.load(now)

    async def flush(self) -> bool:
        """Write pending history changes to storage."""
        return await self._writer.flush()

    async def close(self) -> None:
        """Flush pending writes and release the storage backend."""
        await self.flush()
        storage = self._history.storage
        if storage is not None:
            await storage.close()

    async def __aenter__(self) -> ActionSearchEngine:
        await self.load()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ========== Catalog ==========

    def register_actions(
        self,
        specs: Iterable[ActionSpec | Mapping[str, Any]],
    ) -> list[Action]:
        """
        Register actions; mappings are parsed with ``ActionSpec.from_dict``.

        Raises:
            UnknownParentError: If a parent is not registered
        """
        parsed = [s if isinstance(s, ActionSpec) else ActionSpec.from_dict(s) for s in specs]
        return self._registry.register(parsed)

    def unregister_actions(self, action_ids: Iterable[str]) -> list[str]:
        """Remove actions and their descendants; history is kept."""
        return self._registry.unregister(action_ids)

    def get_action(self, action_id: str) -> Action | None:
        return self._registry.get(action_id)

    def ancestors(self, action_id: str) -> list[Action]:
        return self._registry.ancestors(action_id)

    # ========== Search ==========

    def _scope(self, root_id: str | None) -> Sequence[Action]:
        if root_id is None:
            return self._registry.snapshot()
        return self._registry.descendants(root_id)

    def _browse(self, root_id: str | None) -> list[SearchMatch]:
        if root_id is None:
            members = self._registry.roots()
        else:
            members = self._registry.children(root_id)
        members.sort(key=lambda a: a.priority, reverse=True)

        if self._config.max_results is not None:
            members = members[: max(0, self._config.max_results)]
        return [SearchMatch(action=a, score=0.0, base_score=0.0) for a in members]

    def search_scored(
        self,
        query: str,
        root_id: str | None = None,
        now: datetime | None = None,
    ) -> list[SearchMatch]:
        """
        Search with scores attached.

        An empty query lists the direct members of the scope (roots, or the
        children of ``root_id``) by priority instead of ranking.

        Args:
            query: Raw query text
            root_id: Restrict results to descendants of this action
            now: Reference time for recency scoring

        Returns:
            Ranked matches
        """
        if not query.strip():
            return self._browse(root_id)

        return rank_actions(query, self._scope(root_id), self._history, self._config, now)

    def search(
        self,
        query: str,
        root_id: str | None = None,
        now: datetime | None = None,
    ) -> list[Action]:
        """Search and return the ranked actions."""
        return [m.action for m in self.search_scored(query, root_id, now)]

    # ========== History ==========

    def record_usage(
        self,
        action_id: str,
        query: str = "",
        now: datetime | None = None,
    ) -> UsageRecord:
        """
        Record a launch and schedule a background save.

        Args:
            action_id: The launched action
            query: Query it was launched from
            now: Launch time

        Returns:
            The updated usage record
        """
        if action_id not in self._registry:
            logger.debug("Recording usage of unregistered action %s", action_id)
        record = self._history.record_usage(action_id, query, now)
        self._writer.schedule()
        return record

    def history_for(self, action_id: str) -> UsageRecord | None:
        return self._history.get(action_id)

    def clear_history(self) -> None:
        """Forget all usage history; the empty state is saved in the background."""
        self._history.clear()
        self._writer.schedule()

    def export_history(self) -> str:
        """Export all usage history as JSON."""
        return self._history.export_json()

    def import_history(self, text: str, now: datetime | None = None) -> bool:
        """
        Replace usage history with an exported JSON document.

        Returns:
            False (current history untouched) for unparsable input or a
            version mismatch
        """
        if not self._history.import_json(text, now):
            return False
        self._writer.schedule()
        return True
