"""Query tokenization for multi-word AND matching."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class QueryTokens:
    """A query split into lowercase whitespace-separated tokens."""

    original: str
    tokens: tuple[str, ...]

    @property
    def is_multi_word(self) -> bool:
        return len(self.tokens) > 1


def tokenize_query(query: str) -> QueryTokens:
    """
    Split a query on whitespace.

    Examples:
        tokenize_query("vsc 项目名").tokens -> ("vsc", "项目名")
        tokenize_query("  multiple   spaces  ").tokens -> ("multiple", "spaces")
    """
    return QueryTokens(original=query, tokens=tuple(query.strip().lower().split()))
