"""Core data structures: actions, the action tree and usage records."""

from launcher_search.core.action import Action, ActionSpec, Priority
from launcher_search.core.usage import AffinityEntry, DailyUsage, UsageRecord

__all__ = [
    "Action",
    "ActionSpec",
    "AffinityEntry",
    "DailyUsage",
    "Priority",
    "UsageRecord",
]
