"""Tests for keyword derivation and pinyin helpers."""

from __future__ import annotations

import pytest

from launcher_search.extraction.keywords import (
    derive_keywords,
    keyword_variations,
    parse_keywords,
)
from launcher_search.extraction.pinyin import (
    contains_chinese,
    pinyin_syllables,
    remove_symbols,
    to_pinyin,
    to_pinyin_acronym,
)


class TestPinyinHelpers:
    """Tests for the pypinyin wrappers."""

    def test_contains_chinese(self) -> None:
        assert contains_chinese("计算器") is True
        assert contains_chinese("VS Code编辑器") is True
        assert contains_chinese("Calculator") is False

    def test_to_pinyin(self) -> None:
        assert to_pinyin("计算器") == "jisuanqi"
        assert to_pinyin("PowerPoint") == "powerpoint"

    def test_to_pinyin_acronym_chinese(self) -> None:
        assert to_pinyin_acronym("计算器") == "jsq"

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("PowerPoint", "pp"), ("Visual Studio Code", "vsc"), ("visual studio", "vs")],
    )
    def test_to_pinyin_acronym_latin(self, text: str, expected: str) -> None:
        assert to_pinyin_acronym(text) == expected

    def test_remove_symbols(self) -> None:
        assert remove_symbols("C++ Builder") == "cbuilder"
        assert remove_symbols("光·遇") == "光遇"

    def test_syllables(self) -> None:
        assert pinyin_syllables("计算器") == ("ji", "suan", "qi")


class TestParseKeywords:
    """Tests for boundary normalization of user keywords."""

    def test_comma_string(self) -> None:
        assert parse_keywords("Math, calc,, ") == ("math", "calc")

    def test_list(self) -> None:
        assert parse_keywords([" Editor", "IDE", "editor"]) == ("editor", "ide")

    def test_none(self) -> None:
        assert parse_keywords(None) == ()


class TestDeriveKeywords:
    """Tests for derive_keywords."""

    def test_latin_name(self) -> None:
        keywords = derive_keywords("Visual Studio Code")
        assert keywords == {"visual studio code", "vsc", "visualstudiocode"}

    def test_acronym_only_when_different(self) -> None:
        assert derive_keywords("PowerPoint") == {"powerpoint", "pp"}

    def test_chinese_name(self) -> None:
        assert derive_keywords("计算器") == {"计算器", "jisuanqi", "jsq"}

    def test_user_keywords_merged_verbatim(self) -> None:
        keywords = derive_keywords("Calculator", "数学,math")
        assert {"calculator", "数学", "math"} <= keywords
        # User keywords are not transliterated
        assert "shuxue" not in keywords

    def test_section_and_subtitle(self) -> None:
        keywords = derive_keywords("Dark Mode", section="Appearance", subtitle="主题")
        assert "appearance" in keywords
        assert "主题" in keywords
        assert "zhuti" in keywords

    def test_always_lowercase(self) -> None:
        keywords = derive_keywords("GitHub Desktop", ["GIT"])
        assert all(k == k.lower() for k in keywords)

    def test_never_empty_for_name(self) -> None:
        assert derive_keywords("x")

    def test_empty_name(self) -> None:
        assert derive_keywords("") == frozenset()


class TestKeywordVariations:
    """Tests for auxiliary text variations."""

    def test_none(self) -> None:
        assert keyword_variations(None) == set()

    def test_chinese_keeps_stripped_form(self) -> None:
        variations = keyword_variations("系统·设置")
        assert "系统设置" in variations
        assert "xitong·shezhi" in variations
