"""Substring edit distance.

Measures how far a query is from the closest contiguous substring of a
keyword, so "code" against "vscode" costs nothing while "cdoe" costs two.
"""

from __future__ import annotations

import math


def edit_distance(query: str, keyword: str) -> float:
    """
    Minimum Levenshtein distance from query to any substring of keyword.

    Uses a rolling pair of rows (O(len(keyword)) space). The first row is
    all zeros so an alignment may start at any offset of the keyword for
    free, and the minimum of the last row lets it end anywhere.

    Args:
        query: The search query (lowercase)
        keyword: The keyword to match against (lowercase)

    Returns:
        The distance, or math.inf if query is longer than keyword
    """
    m = len(query)
    n = len(keyword)

    if m > n:
        return math.inf
    if m == 0:
        return 0

    prev = [0] * (n + 1)
    curr = [0] * (n + 1)

    for i in range(1, m + 1):
        q_char = query[i - 1]
        curr[0] = i
        for j in range(1, n + 1):
            cost = 0 if q_char == keyword[j - 1] else 1
            curr[j] = min(
                prev[j] + 1,  # delete from query
                curr[j - 1] + 1,  # insert into query
                prev[j - 1] + cost,  # substitute or match
            )
        prev, curr = curr, prev

    return min(prev)


def edit_distance_score(query: str, keyword: str) -> float:
    """
    Normalized edit score: 1.0 for an exact substring, towards 0 as edits grow.

    Returns:
        1 - distance / len(query), -inf when no alignment exists, 0 for an empty query
    """
    distance = edit_distance(query, keyword)
    if distance == math.inf:
        return -math.inf
    if not query:
        return 0.0
    return 1.0 - distance / len(query)
