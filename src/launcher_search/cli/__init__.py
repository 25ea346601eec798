"""launcher-search CLI.

Usage:
    lsearch search QUERY --catalog FILE   Rank a catalog for a query
    lsearch record ACTION_ID              Record a launch
    lsearch history show                  Show usage history
    lsearch config show                   Show configuration
"""

from launcher_search.cli.main import app, main

__all__ = ["app", "main"]
