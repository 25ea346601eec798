"""Personalized ranking - turns a match score into a final score.

final = base + dynamic * suppression + affinity * W_qa

where ``dynamic`` mixes lifetime usage, the last week's launches and
recency, and ``suppression`` fades those boosts out for weak matches so
a frequently used action cannot climb above a much better textual match.
Query affinity is not suppressed: launching X from query Q is direct
evidence that Q means X.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from launcher_search.core.usage import RECENT_USAGE_DAYS, UsageRecord, today_for
from launcher_search.engine.history_updater import effective_affinity_count
from launcher_search.unified_config import RankingConfig
from launcher_search.utils.timeutils import ensure_aware

# Per-day decay base of the recent-habit sum
RECENT_HABIT_DECAY = 1.3

# Temporal heat: K / (1 + elapsed / T)
TEMPORAL_PEAK = 6.0
TEMPORAL_HALF_LIFE_SECONDS = 3 * 3600.0

AFFINITY_SCALE = 10.0


def history_score(record: UsageRecord | None) -> float:
    """Lifetime popularity: ln(1 + usage_count)."""
    if record is None:
        return 0.0
    return math.log1p(record.usage_count)


def recent_habit_score(record: UsageRecord | None, now: datetime) -> float:
    """
    Launches of the last week, each day worth 1.3x less than the next.

    Buckets outside ``[today - 6, today]`` are ignored even if they were
    not pruned yet.
    """
    if record is None or not record.recent_usage:
        return 0.0

    today = today_for(now)
    total = 0.0
    for bucket in record.recent_usage:
        if bucket.in_window(today, RECENT_USAGE_DAYS):
            total += bucket.count * RECENT_HABIT_DECAY ** (-bucket.days_ago(today))
    return total


def temporal_score(record: UsageRecord | None, now: datetime) -> float:
    """Recency heat: 6 right after a launch, 3 after three hours."""
    if record is None or record.last_used_time is None:
        return 0.0

    elapsed = (ensure_aware(now) - ensure_aware(record.last_used_time)).total_seconds()
    elapsed = max(0.0, elapsed)
    return TEMPORAL_PEAK / (1.0 + elapsed / TEMPORAL_HALF_LIFE_SECONDS)


def query_affinity_score(record: UsageRecord | None, query: str, now: datetime) -> float:
    """ln(1 + live affinity count) * 10 for the normalized query."""
    if record is None:
        return 0.0
    entry = record.affinity_for(query)
    return math.log1p(effective_affinity_count(entry, now)) * AFFINITY_SCALE


def suppression_factor(base: float, threshold: float) -> float:
    """Share of the dynamic boost a match of strength ``base`` receives, in [0, 1]."""
    if threshold <= 0:
        return 1.0 if base > 0 else 0.0
    return min(1.0, max(0.0, base / threshold))


@dataclass(frozen=True)
class ScoreBreakdown:
    """Every component of a final score, for debugging and the API."""

    base: float
    history: float
    recent_habit: float
    temporal: float
    dynamic: float
    suppression: float
    affinity: float
    final: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "base": self.base,
            "history": self.history,
            "recent_habit": self.recent_habit,
            "temporal": self.temporal,
            "dynamic": self.dynamic,
            "suppression": self.suppression,
            "affinity": self.affinity,
            "final": self.final,
        }


def score_breakdown(
    base_match_score: float,
    record: UsageRecord | None,
    query: str,
    *,
    stable_bias: float | None = None,
    config: RankingConfig | None = None,
    now: datetime,
) -> ScoreBreakdown:
    """
    Compute the final score and all of its components.

    Args:
        base_match_score: Best standard (or pinyin) score of the action
        record: Usage history of the action, None if never used
        query: The raw query
        stable_bias: Action-defined bias; falls back to the persisted one
        config: Weights and threshold (defaults when None)
        now: Reference time

    Returns:
        ScoreBreakdown with ``final`` set
    """
    config = config or RankingConfig()
    weights = config.weights

    if stable_bias is None and record is not None:
        stable_bias = record.stable_bias
    base = base_match_score + (stable_bias or 0.0)

    history = history_score(record)
    recent = recent_habit_score(record, now)
    temporal = temporal_score(record, now)
    dynamic = (
        history * weights.history + recent * weights.recent_habit + temporal * weights.temporal
    )
    suppression = suppression_factor(base, config.suppression_threshold)
    affinity = query_affinity_score(record, query, now)

    final = base + dynamic * suppression + affinity * weights.query_affinity
    return ScoreBreakdown(
        base=base,
        history=history,
        recent_habit=recent,
        temporal=temporal,
        dynamic=dynamic,
        suppression=suppression,
        affinity=affinity,
        final=final,
    )


def final_score(
    base_match_score: float,
    record: UsageRecord | None,
    query: str,
    *,
    stable_bias: float | None = None,
    config: RankingConfig | None = None,
    now: datetime,
) -> float:
    """Final ranking score; see :func:`score_breakdown`."""
    return score_breakdown(
        base_match_score,
        record,
        query,
        stable_bias=stable_bias,
        config=config,
        now=now,
    ).final
