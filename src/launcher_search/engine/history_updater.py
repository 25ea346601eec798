"""Usage recording - the only code that produces new UsageRecords.

Each launch bumps the total count, today's daily bucket and, when the
launch came from a typed query, the decayed query affinity. Repeated
launches from the same query inside a short cooldown only count once
towards affinity, so hammering Enter does not lock in a result.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from launcher_search.core.usage import (
    AffinityEntry,
    DailyUsage,
    UsageRecord,
    normalize_query,
    today_for,
)
from launcher_search.utils.timeutils import ensure_aware

# Minimum gap between two affinity updates for the same query
AFFINITY_COOLDOWN = timedelta(seconds=60)

# Time constant of the affinity decay (count shrinks by 1/e per tau)
AFFINITY_DECAY_TAU = timedelta(days=3)


def effective_affinity_count(entry: AffinityEntry | None, now: datetime) -> float:
    """
    Live value of an affinity entry at ``now``.

    Args:
        entry: Stored entry, or None when the query was never used
        now: Reference time

    Returns:
        count * e^(-elapsed / tau), 0.0 for a missing entry
    """
    if entry is None:
        return 0.0
    return entry.decayed(now, AFFINITY_DECAY_TAU.total_seconds())


def _bump_daily(recent: tuple[DailyUsage, ...], now: datetime) -> tuple[DailyUsage, ...]:
    today = today_for(now)
    buckets = list(recent)
    for i, bucket in enumerate(buckets):
        if bucket.day == today:
            buckets[i] = DailyUsage(day=today, count=bucket.count + 1)
            return tuple(buckets)
    buckets.append(DailyUsage(day=today, count=1))
    return tuple(sorted(buckets, key=lambda b: b.day))


def _bump_affinity(
    affinity: dict[str, AffinityEntry],
    query: str,
    now: datetime,
) -> None:
    existing = affinity.get(query)
    if existing is None:
        affinity[query] = AffinityEntry(count=1.0, last_time=now)
        return

    if now - ensure_aware(existing.last_time) < AFFINITY_COOLDOWN:
        return

    affinity[query] = AffinityEntry(
        count=effective_affinity_count(existing, now) + 1.0,
        last_time=now,
    )


def record_usage(record: UsageRecord | None, query: str, now: datetime) -> UsageRecord:
    """
    Apply one launch to a usage record.

    Args:
        record: Current record (None for a never-used action)
        query: Query the action was launched from ("" when browsed)
        now: Launch time

    Returns:
        New record; the input is left untouched
    """
    current = record or UsageRecord()
    now = ensure_aware(now)

    affinity = dict(current.query_affinity)
    normalized = normalize_query(query)
    if normalized:
        _bump_affinity(affinity, normalized, now)

    return current.with_updates(
        usage_count=current.usage_count + 1,
        last_used_time=now,
        recent_usage=_bump_daily(current.recent_usage, now),
        query_affinity=affinity,
    )
