"""Action data structures - the selectable entries of the palette."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import IntEnum
from typing import Any

from launcher_search.core.usage import AffinityEntry, DailyUsage, UsageRecord
from launcher_search.extraction.keywords import KeywordInput, derive_keywords, parse_keywords
from launcher_search.utils.timeutils import parse_timestamp


class Priority(IntEnum):
    """Ordering of actions when no query is typed (higher first)."""

    LOW = -1
    NORMAL = 0
    HIGH = 1


def _parse_time(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return parse_timestamp(str(value))


@dataclass(frozen=True)
class ActionSpec:
    """
    Declaration of an action as supplied by a caller.

    Keywords are normalized to a tuple on construction, so the legacy
    comma-separated string never travels past this boundary. The optional
    usage fields seed the action's history when none is persisted yet.

    Attributes:
        id: Unique action id
        name: Display name
        keywords: User keywords
        parent_id: Id of the parent action, None for a root
        stable_bias: Constant ranking offset; overrides the persisted bias
        section: Group label, searchable
        subtitle: Secondary label, searchable
        priority: Ordering when the query is empty
    """

    id: str
    name: str
    keywords: tuple[str, ...] = ()
    parent_id: str | None = None
    stable_bias: float | None = None
    section: str | None = None
    subtitle: str | None = None
    priority: int = Priority.NORMAL
    usage_count: int = 0
    last_used_time: datetime | None = None
    recent_usage: tuple[DailyUsage, ...] = ()
    query_affinity: Mapping[str, AffinityEntry] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("action id must not be empty")
        object.__setattr__(self, "keywords", parse_keywords(self.keywords))

    @classmethod
    def create(
        cls,
        id: str,
        name: str,
        keywords: KeywordInput = None,
        **kwargs: Any,
    ) -> ActionSpec:
        """
        Factory method accepting keywords as a comma string or a list.

        Args:
            id: Unique action id
            name: Display name
            keywords: "calc, math" or ["calc", "math"]
            **kwargs: Any other ActionSpec field

        Returns:
            A new ActionSpec
        """
        return cls(id=id, name=name, keywords=parse_keywords(keywords), **kwargs)

    @property
    def has_seed_usage(self) -> bool:
        return bool(
            self.usage_count or self.last_used_time or self.recent_usage or self.query_affinity
        )

    def seed_record(self) -> UsageRecord:
        """Initial usage record built from the seed fields."""
        return UsageRecord(
            usage_count=self.usage_count,
            last_used_time=self.last_used_time,
            recent_usage=self.recent_usage,
            query_affinity=dict(self.query_affinity),
            stable_bias=self.stable_bias,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ActionSpec:
        """
        Build a spec from a JSON catalog entry.

        Accepts ``parent`` as an alias of ``parent_id``.

        Raises:
            ValueError, KeyError: If id or name is missing or malformed
        """
        stable_bias = data.get("stable_bias")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            keywords=parse_keywords(data.get("keywords")),
            parent_id=data.get("parent_id") or data.get("parent"),
            stable_bias=float(stable_bias) if stable_bias is not None else None,
            section=data.get("section"),
            subtitle=data.get("subtitle"),
            priority=int(data.get("priority", Priority.NORMAL)),
            usage_count=int(data.get("usage_count", 0)),
            last_used_time=_parse_time(data.get("last_used_time")),
            recent_usage=tuple(DailyUsage.from_dict(d) for d in data.get("recent_usage") or []),
            query_affinity={
                str(q): AffinityEntry.from_dict(e)
                for q, e in (data.get("query_affinity") or {}).items()
            },
        )


@dataclass(frozen=True)
class Action:
    """
    A registered action, as seen by search.

    Actions are immutable; the registry replaces an action (for example
    to append a child) instead of mutating it, so a snapshot held by an
    in-flight search never changes underneath it.

    Attributes:
        id: Unique action id
        name: Display name
        keywords: User keywords as declared
        derived_keywords: Every lowercase string the action is searchable by
        parent_id: Id of the parent action, None for a root
        stable_bias: Action-defined ranking offset
        section: Group label
        subtitle: Secondary label
        priority: Ordering when the query is empty
        children: Ids of the direct children, in registration order
    """

    id: str
    name: str
    keywords: tuple[str, ...] = ()
    derived_keywords: frozenset[str] = field(init=False, default=frozenset())
    parent_id: str | None = None
    stable_bias: float | None = None
    section: str | None = None
    subtitle: str | None = None
    priority: int = Priority.NORMAL
    children: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "derived_keywords", self._derive())

    def _derive(self) -> frozenset[str]:
        return derive_keywords(
            self.name, self.keywords, section=self.section, subtitle=self.subtitle
        )

    @classmethod
    def from_spec(cls, spec: ActionSpec, children: tuple[str, ...] = ()) -> Action:
        """Create an action from its declaration."""
        return cls(
            id=spec.id,
            name=spec.name,
            keywords=spec.keywords,
            parent_id=spec.parent_id,
            stable_bias=spec.stable_bias,
            section=spec.section,
            subtitle=spec.subtitle,
            priority=spec.priority,
            children=children,
        )

    def refresh_keywords(self) -> Action:
        """Return a copy whose derived keywords are rebuilt from name and keywords."""
        return replace(self)

    def with_children(self, children: tuple[str, ...]) -> Action:
        return replace(self, children=children)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "keywords": list(self.keywords),
            "parent_id": self.parent_id,
            "stable_bias": self.stable_bias,
            "section": self.section,
            "subtitle": self.subtitle,
            "priority": self.priority,
            "children": list(self.children),
        }
