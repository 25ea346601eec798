"""Standard match scorer.

Combines the three string matchers into one score per (query, keyword):

    score = 100 * edit_score - log2(len(keyword) + 1)
            + prefix_score * prefix_boost
            + charset_score

and reduces an action's keywords to the best of those scores.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from launcher_search.engine.charset_match import charset_score
from launcher_search.engine.edit_distance import edit_distance_score
from launcher_search.engine.prefix_match import prefix_score

DEFAULT_PREFIX_BOOST = 2.0

NO_MATCH = -math.inf


def standard_score(query: str, keyword: str, prefix_boost: float = DEFAULT_PREFIX_BOOST) -> float:
    """
    Score one lowercase keyword against a lowercase query.

    Args:
        query: The search query
        keyword: The keyword to match against
        prefix_boost: Multiplier for the prefix component

    Returns:
        Match score (higher is better), or -inf when no valid match exists
    """
    if not query or not keyword:
        return NO_MATCH
    if len(query) > len(keyword):
        return NO_MATCH

    edit = edit_distance_score(query, keyword)
    if edit == NO_MATCH:
        return NO_MATCH

    length_penalty = math.log2(len(keyword) + 1)
    return (
        100.0 * edit
        - length_penalty
        + prefix_score(query, keyword) * prefix_boost
        + charset_score(query, keyword)
    )


def best_score(
    query: str,
    keywords: Iterable[str],
    prefix_boost: float = DEFAULT_PREFIX_BOOST,
) -> float:
    """Best standard score across keywords, -inf if none matches."""
    if not query:
        return NO_MATCH

    best = NO_MATCH
    for keyword in keywords:
        score = standard_score(query, keyword, prefix_boost)
        if score > best:
            best = score
    return best


def best_token_score(
    tokens: Iterable[str],
    keywords: Iterable[str],
    prefix_boost: float = DEFAULT_PREFIX_BOOST,
) -> float:
    """
    Mean of per-token best scores, requiring every token to match.

    Returns:
        -inf as soon as one token matches no keyword
    """
    keyword_list = list(keywords)
    scores: list[float] = []
    for token in tokens:
        score = best_score(token, keyword_list, prefix_boost)
        if score == NO_MATCH:
            return NO_MATCH
        scores.append(score)

    if not scores:
        return NO_MATCH
    return sum(scores) / len(scores)
