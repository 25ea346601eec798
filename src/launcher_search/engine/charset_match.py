"""Character multiset matching.

Rewards queries whose characters are all present in the keyword even when
typed out of order ("staem" for "steam").
"""

from __future__ import annotations

from collections import Counter


def is_charset_subset(query: str, keyword: str) -> bool:
    """
    Check if every query character occurs in keyword at least as often.

    Examples:
        is_charset_subset("staem", "steam") -> True
        is_charset_subset("steam", "team") -> False
        is_charset_subset("abc", "abcdef") -> True
    """
    if not query:
        return True
    if not keyword:
        return False

    available = Counter(keyword)
    return all(available[char] >= count for char, count in Counter(query).items())


def charset_score(query: str, keyword: str) -> int:
    """len(query) when the query is a character subset of keyword, else 0."""
    return len(query) if is_charset_subset(query, keyword) else 0
