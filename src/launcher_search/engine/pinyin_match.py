"""Pinyin fallback matching for CJK names.

Accepts queries that spell a run of consecutive syllables, each by any
non-empty prefix: for 计算器 (ji suan qi) "jsq", "jisuanqi", "jisq" and
"suanq" all match.
"""

from __future__ import annotations

from functools import lru_cache

from launcher_search.extraction.pinyin import contains_chinese, pinyin_syllables

# Base scores used when only the pinyin matcher accepts the query
PINYIN_NAME_SCORE = 30.0
PINYIN_KEYWORD_SCORE = 40.0


def _consume(syllables: tuple[str, ...], query: str) -> bool:
    @lru_cache(maxsize=None)
    def walk(index: int, pos: int) -> bool:
        if pos == len(query):
            return True
        if index == len(syllables):
            return False
        syllable = syllables[index]
        # Longest prefix of this syllable that the query continues with
        limit = 0
        while (
            limit < len(syllable)
            and pos + limit < len(query)
            and syllable[limit] == query[pos + limit]
        ):
            limit += 1
        return any(walk(index + 1, pos + taken) for taken in range(limit, 0, -1))

    return any(walk(start, 0) for start in range(len(syllables)))


def pinyin_match(text: str, query: str) -> bool:
    """
    Check if a lowercase query spells consecutive pinyin syllables of text.

    Args:
        text: Text containing CJK characters
        query: Lowercase query without whitespace

    Returns:
        True on a match; always False for non-CJK text or empty query
    """
    if not query or not text or not contains_chinese(text):
        return False
    return _consume(pinyin_syllables(text), query)


def pinyin_fallback_score(name: str, keywords: frozenset[str] | set[str], query: str) -> float | None:
    """
    Fallback base score from pinyin matching, or None when nothing matches.

    A name match scores PINYIN_NAME_SCORE; a CJK keyword match scores
    PINYIN_KEYWORD_SCORE.
    """
    compact = "".join(query.split())
    if not compact:
        return None

    if pinyin_match(name, compact):
        return PINYIN_NAME_SCORE

    for keyword in sorted(keywords):
        if pinyin_match(keyword, compact):
            return PINYIN_KEYWORD_SCORE

    return None
