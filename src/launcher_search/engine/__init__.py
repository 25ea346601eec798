"""Matching, scoring and ranking.

The search facade lives in :mod:`launcher_search.engine.search`; it is not
re-exported here because it depends on the storage layer.
"""

from launcher_search.engine.history_updater import (
    AFFINITY_COOLDOWN,
    AFFINITY_DECAY_TAU,
    effective_affinity_count,
    record_usage,
)
from launcher_search.engine.ranker import ScoreBreakdown, final_score, score_breakdown
from launcher_search.engine.scorer import best_score, standard_score

__all__ = [
    "AFFINITY_COOLDOWN",
    "AFFINITY_DECAY_TAU",
    "ScoreBreakdown",
    "best_score",
    "effective_affinity_count",
    "final_score",
    "record_usage",
    "score_breakdown",
    "standard_score",
]
