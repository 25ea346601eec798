"""Pinyin helpers for CJK action names.

Wraps ``pypinyin`` so that Chinese names become searchable by their
tone-less spelling ("jisuanqi") and syllable initials ("jsq").
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache

from pypinyin import Style, lazy_pinyin

logger = logging.getLogger(__name__)

_CJK_PATTERN = re.compile(r"[一-龥]")

# Keeps CJK ideographs, ASCII letters and digits; whitespace is dropped afterwards
_SYMBOL_PATTERN = re.compile(r"[^一-龥a-zA-Z0-9\s]")
_WHITESPACE_PATTERN = re.compile(r"\s+")

_CAPITALS_PATTERN = re.compile(r"[A-Z]")
_WORD_SPLIT_PATTERN = re.compile(r"[\s\-_]+")


def contains_chinese(text: str) -> bool:
    """Check if text contains at least one CJK ideograph."""
    return bool(_CJK_PATTERN.search(text))


@lru_cache(maxsize=4096)
def pinyin_syllables(text: str) -> tuple[str, ...]:
    """
    Split text into lowercase pinyin syllables.

    Non-Chinese runs are kept as single lowercase chunks with whitespace
    removed, so "VS Code编辑器" becomes ("vscode", "bian", "ji", "qi").

    Args:
        text: The text to convert

    Returns:
        Tuple of syllables (empty for empty text)
    """
    try:
        chunks = lazy_pinyin(text, style=Style.NORMAL)
    except Exception:
        logger.warning("Pinyin conversion failed for %r", text, exc_info=True)
        return (text.lower(),)

    syllables: list[str] = []
    for chunk in chunks:
        cleaned = _WHITESPACE_PATTERN.sub("", chunk).lower()
        if cleaned:
            syllables.append(cleaned)
    return tuple(syllables)


def to_pinyin(text: str) -> str:
    """
    Convert Chinese characters to tone-less pinyin.

    Examples:
        to_pinyin("光·遇") -> "guang·yu"
        to_pinyin("PowerPoint") -> "powerpoint"
    """
    if not contains_chinese(text):
        return text.lower()

    try:
        return "".join(lazy_pinyin(text, style=Style.NORMAL)).lower()
    except Exception:
        logger.warning("Pinyin conversion failed for %r", text, exc_info=True)
        return text.lower()


def to_pinyin_acronym(text: str) -> str:
    """
    First letter of each pinyin syllable, or an acronym for Latin text.

    For non-Chinese text the capital letters are used when present,
    otherwise the first letter of every word.

    Examples:
        to_pinyin_acronym("光·遇") -> "g·y"
        to_pinyin_acronym("PowerPoint") -> "pp"
        to_pinyin_acronym("visual studio") -> "vs"
    """
    if not contains_chinese(text):
        capitals = _CAPITALS_PATTERN.findall(text)
        if capitals:
            return "".join(capitals).lower()
        words = [w for w in _WORD_SPLIT_PATTERN.split(text) if w]
        return "".join(w[0] for w in words).lower()

    try:
        return "".join(lazy_pinyin(text, style=Style.FIRST_LETTER)).lower()
    except Exception:
        logger.warning("Pinyin acronym failed for %r", text, exc_info=True)
        return text[:1].lower()


def remove_symbols(text: str) -> str:
    """
    Remove everything except CJK ideographs, letters and digits.

    Examples:
        remove_symbols("光·遇") -> "光遇"
        remove_symbols("C++ Builder") -> "cbuilder"
    """
    stripped = _SYMBOL_PATTERN.sub("", text)
    return _WHITESPACE_PATTERN.sub("", stripped).lower()
