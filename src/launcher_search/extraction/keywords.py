"""Search keyword derivation for actions.

Every action is searchable through several lowercase variants of its name:

1. The name itself
2. Pinyin spelling (CJK names)
3. Pinyin initials (CJK names) or capital-letter acronym (Latin names)
4. Symbol-stripped forms of the above
5. User-provided keywords, merged verbatim
6. Variants of the section name and subtitle
"""

from __future__ import annotations

from collections.abc import Iterable

from launcher_search.extraction.pinyin import (
    contains_chinese,
    remove_symbols,
    to_pinyin,
    to_pinyin_acronym,
)

KeywordInput = str | Iterable[str] | None


def parse_keywords(keywords: KeywordInput) -> tuple[str, ...]:
    """
    Normalize user keywords into a tuple of trimmed lowercase strings.

    Accepts the legacy comma-separated string ("math, calc") as well as
    any iterable of strings. Empty tokens are dropped and order is kept.

    Args:
        keywords: Comma string, iterable of strings, or None

    Returns:
        Tuple of unique keywords in first-seen order
    """
    if keywords is None:
        return ()

    raw: Iterable[str] = keywords.split(",") if isinstance(keywords, str) else keywords

    seen: dict[str, None] = {}
    for item in raw:
        token = str(item).strip().lower()
        if token:
            seen.setdefault(token, None)
    return tuple(seen)


def name_variants(name: str) -> set[str]:
    """Variants derived from an action name."""
    if not name:
        return set()

    lowered = name.lower()
    variants = {lowered}

    if contains_chinese(name):
        pinyin_name = to_pinyin(name)
        if pinyin_name:
            variants.add(pinyin_name)

        acronym = to_pinyin_acronym(name)
        if acronym:
            variants.add(acronym)

        for source, stripped in (
            (lowered, remove_symbols(name)),
            (acronym, remove_symbols(acronym)),
            (pinyin_name, remove_symbols(pinyin_name)),
        ):
            if stripped and stripped != source:
                variants.add(stripped)
    else:
        acronym = to_pinyin_acronym(name)
        if acronym and acronym != lowered:
            variants.add(acronym)

        stripped = remove_symbols(name)
        if stripped and stripped != lowered:
            variants.add(stripped)

    return variants


def keyword_variations(text: str | None) -> set[str]:
    """
    Variants of auxiliary text such as a section name or subtitle.

    Same pipeline as :func:`name_variants`, except that for CJK text the
    symbol-stripped form is always kept.
    """
    if not text:
        return set()

    lowered = text.lower()
    variations = {lowered}

    if contains_chinese(text):
        variations.update(v for v in (to_pinyin(text), to_pinyin_acronym(text)) if v)
        stripped = remove_symbols(text)
        if stripped:
            variations.add(stripped)
    else:
        acronym = to_pinyin_acronym(text)
        if acronym and acronym != lowered:
            variations.add(acronym)
        stripped = remove_symbols(text)
        if stripped and stripped != lowered:
            variations.add(stripped)

    return {v for v in variations if v}


def derive_keywords(
    name: str,
    user_keywords: KeywordInput = None,
    *,
    section: str | None = None,
    subtitle: str | None = None,
) -> frozenset[str]:
    """
    Derive the full lowercase keyword set of an action.

    Args:
        name: Display name of the action
        user_keywords: Declared keywords (comma string or iterable)
        section: Optional section name folded into the keywords
        subtitle: Optional subtitle folded into the keywords

    Returns:
        Non-empty frozenset for a non-empty name
    """
    keywords = name_variants(name)
    keywords.update(parse_keywords(user_keywords))
    keywords.update(keyword_variations(section))
    keywords.update(keyword_variations(subtitle))
    return frozenset(k for k in keywords if k)
