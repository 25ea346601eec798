"""launcher-search - personalized command-palette search and ranking."""

from launcher_search.core.action import Action, ActionSpec, Priority
from launcher_search.core.registry import ActionRegistry, RegistryError, UnknownParentError
from launcher_search.core.usage import AffinityEntry, DailyUsage, UsageRecord
from launcher_search.engine.search import ActionSearchEngine, SearchMatch, rank_actions
from launcher_search.unified_config import RankingConfig, RankingWeights

__version__ = "0.1.0"

__all__ = [
    # Core models
    "Action",
    "ActionSpec",
    "Priority",
    "UsageRecord",
    "DailyUsage",
    "AffinityEntry",
    # Registry
    "ActionRegistry",
    "RegistryError",
    "UnknownParentError",
    # Engine
    "ActionSearchEngine",
    "SearchMatch",
    "rank_actions",
    # Configuration
    "RankingConfig",
    "RankingWeights",
    # Version
    "__version__",
]
