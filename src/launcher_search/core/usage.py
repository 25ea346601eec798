"""Usage history value objects - what the ranker knows about past launches."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from types import MappingProxyType
from typing import Any

from launcher_search.utils.timeutils import (
    days_between,
    ensure_aware,
    format_timestamp,
    local_day,
    parse_timestamp,
)

# Rolling window for the per-day histogram
RECENT_USAGE_DAYS = 7


@dataclass(frozen=True)
class DailyUsage:
    """Launch count for one local calendar day."""

    day: date
    count: int = 0

    def days_ago(self, today: date) -> int:
        return days_between(self.day, today)

    def in_window(self, today: date, window_days: int = RECENT_USAGE_DAYS) -> bool:
        """Check if the bucket lies in ``[today - window_days + 1, today]``."""
        return 0 <= self.days_ago(today) < window_days

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.day.isoformat(), "count": self.count}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DailyUsage:
        if not isinstance(data, Mapping):
            raise TypeError("daily usage entry must be an object")
        return cls(day=date.fromisoformat(str(data["date"])), count=int(data.get("count", 0)))


@dataclass(frozen=True)
class AffinityEntry:
    """
    Decayed count of launches of one action from one normalized query.

    ``count`` is a snapshot taken at ``last_time``; the live value decays
    exponentially from there and is recomputed on every read.

    Attributes:
        count: Decayed launch count at ``last_time``
        last_time: When the count was last updated
    """

    count: float
    last_time: datetime

    def decayed(self, now: datetime, tau_seconds: float) -> float:
        """
        Live count at ``now``.

        Uses exponential decay: count * e^(-elapsed / tau)

        Args:
            now: Reference time
            tau_seconds: Decay time constant in seconds

        Returns:
            The decayed count (never negative)
        """
        elapsed = (ensure_aware(now) - ensure_aware(self.last_time)).total_seconds()
        elapsed = max(0.0, elapsed)
        return max(0.0, self.count * math.exp(-elapsed / tau_seconds))

    def to_dict(self) -> dict[str, Any]:
        return {"count": self.count, "last_time": format_timestamp(self.last_time)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AffinityEntry:
        if not isinstance(data, Mapping):
            raise TypeError("affinity entry must be an object")
        last_time = parse_timestamp(data.get("last_time"))
        if last_time is None:
            raise ValueError("affinity entry without last_time")
        return cls(count=max(0.0, float(data.get("count", 0.0))), last_time=last_time)


def _frozen_affinity(
    entries: Mapping[str, AffinityEntry] | None = None,
) -> Mapping[str, AffinityEntry]:
    return MappingProxyType(dict(entries or {}))


@dataclass(frozen=True)
class UsageRecord:
    """
    Persisted usage history of a single action.

    Records are immutable; the history updater produces a new record for
    every launch and the store swaps it in atomically.

    Attributes:
        usage_count: Total number of launches
        last_used_time: When the action was last launched
        recent_usage: Per-day launch counts, oldest first
        query_affinity: Normalized query -> decayed launch count
        stable_bias: Persisted constant ranking offset
    """

    usage_count: int = 0
    last_used_time: datetime | None = None
    recent_usage: tuple[DailyUsage, ...] = ()
    query_affinity: Mapping[str, AffinityEntry] = field(default_factory=_frozen_affinity)
    stable_bias: float | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.query_affinity, MappingProxyType):
            object.__setattr__(self, "query_affinity", _frozen_affinity(self.query_affinity))

    @property
    def is_empty(self) -> bool:
        return self.usage_count == 0 and not self.recent_usage and not self.query_affinity

    def affinity_for(self, query: str) -> AffinityEntry | None:
        return self.query_affinity.get(normalize_query(query))

    def pruned(self, today: date, window_days: int = RECENT_USAGE_DAYS) -> UsageRecord:
        """Drop daily buckets outside the rolling window."""
        kept = tuple(d for d in self.recent_usage if d.in_window(today, window_days))
        if len(kept) == len(self.recent_usage):
            return self
        return replace(self, recent_usage=kept)

    def with_updates(self, **kwargs: Any) -> UsageRecord:
        """Create a new record with updated fields."""
        return replace(self, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "usage_count": self.usage_count,
            "last_used_time": format_timestamp(self.last_used_time),
            "recent_usage": [d.to_dict() for d in self.recent_usage],
            "query_affinity": {q: e.to_dict() for q, e in self.query_affinity.items()},
            "stable_bias": self.stable_bias,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UsageRecord:
        """
        Rebuild a record from its persisted form.

        Raises:
            ValueError, TypeError, KeyError: If the payload has the wrong shape
        """
        if not isinstance(data, Mapping):
            raise TypeError("usage record must be an object")

        usage_count = int(data.get("usage_count", 0))
        if usage_count < 0:
            raise ValueError("usage_count must be >= 0")

        recent_usage = data.get("recent_usage") or []
        if not isinstance(recent_usage, list):
            raise TypeError("recent_usage must be a list")
        query_affinity = data.get("query_affinity") or {}
        if not isinstance(query_affinity, Mapping):
            raise TypeError("query_affinity must be an object")

        stable_bias = data.get("stable_bias")
        return cls(
            usage_count=usage_count,
            last_used_time=parse_timestamp(data.get("last_used_time")),
            recent_usage=tuple(DailyUsage.from_dict(item) for item in recent_usage),
            query_affinity={str(q): AffinityEntry.from_dict(e) for q, e in query_affinity.items()},
            stable_bias=float(stable_bias) if stable_bias is not None else None,
        )


def normalize_query(query: str) -> str:
    """Key under which a query's affinity is stored."""
    return query.strip().lower()


def today_for(now: datetime) -> date:
    """Local calendar day used for daily buckets."""
    return local_day(now)
