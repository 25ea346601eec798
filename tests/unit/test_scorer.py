"""Tests for the standard scorer and query tokenization."""

from __future__ import annotations

import math

import pytest

from launcher_search.engine.scorer import (
    NO_MATCH,
    best_score,
    best_token_score,
    standard_score,
)
from launcher_search.engine.tokenizer import tokenize_query


class TestStandardScore:
    """Tests for standard_score."""

    def test_prefix_substring_match(self) -> None:
        # 100 * 1.0 - log2(11) + 4 * 2 + 4
        expected = 100.0 - math.log2(11) + 8 + 4
        assert standard_score("calc", "calculator") == pytest.approx(expected)

    def test_prefix_boost_is_applied(self) -> None:
        low = standard_score("calc", "calculator", prefix_boost=1.0)
        high = standard_score("calc", "calculator", prefix_boost=3.0)
        assert high - low == pytest.approx(8.0)

    def test_shorter_keyword_wins_on_equal_match(self) -> None:
        assert standard_score("code", "code") > standard_score("code", "vscode")

    def test_empty_strings(self) -> None:
        assert standard_score("", "calculator") == NO_MATCH
        assert standard_score("calc", "") == NO_MATCH

    def test_query_longer_than_keyword(self) -> None:
        assert standard_score("calculator", "calc") == NO_MATCH

    def test_weak_match_scores_low(self) -> None:
        score = standard_score("jisuanqi", "calculator")
        assert score == pytest.approx(12.5 - math.log2(11))


class TestBestScore:
    """Tests for reducing keywords to one score."""

    def test_picks_highest(self) -> None:
        keywords = ["calculator", "math", "c"]
        assert best_score("calc", keywords) == standard_score("calc", "calculator")

    def test_no_keyword_matches(self) -> None:
        assert best_score("calculator", ["math", "c"]) == NO_MATCH

    def test_empty_keywords(self) -> None:
        assert best_score("calc", []) == NO_MATCH

    def test_token_score_requires_every_token(self) -> None:
        keywords = ["visual studio code", "vsc", "editor"]
        assert best_token_score(["editor", "zzzzzzzzzzzzzzzzzzzzzz"], keywords) == NO_MATCH

    def test_token_score_is_mean(self) -> None:
        keywords = ["visual studio code", "editor"]
        a = best_score("visual", keywords)
        b = best_score("editor", keywords)
        assert best_token_score(["visual", "editor"], keywords) == pytest.approx((a + b) / 2)


class TestTokenizer:
    """Tests for tokenize_query."""

    def test_single_word(self) -> None:
        tokens = tokenize_query("Calc")
        assert tokens.tokens == ("calc",)
        assert tokens.is_multi_word is False

    def test_collapses_whitespace(self) -> None:
        tokens = tokenize_query("  multiple   spaces  ")
        assert tokens.tokens == ("multiple", "spaces")
        assert tokens.is_multi_word is True
        assert tokens.original == "  multiple   spaces  "

    def test_blank_query(self) -> None:
        assert tokenize_query("   ").tokens == ()
