"""Prefix and substring matching."""

from __future__ import annotations


def prefix_match(query: str, keyword: str) -> int:
    """
    Length of the shared prefix, or the full query length on a substring hit.

    Examples:
        prefix_match("vsc", "vscode") -> 3
        prefix_match("vss", "vscode") -> 2
        prefix_match("code", "vscode") -> 4
        prefix_match("xcode", "vscode") -> 0
    """
    if not query or not keyword:
        return 0

    if query in keyword:
        return len(query)

    length = 0
    for q_char, k_char in zip(query, keyword):
        if q_char != k_char:
            break
        length += 1
    return length


def prefix_score(query: str, keyword: str) -> int:
    """Prefix component of the standard score."""
    return prefix_match(query, keyword)
