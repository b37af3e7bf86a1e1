"""
Chapter lookup by number or name.

Names are compared after normalization so that diacritics, alef/hamza
spelling, case, punctuation and a leading article do not matter.

Uses SIMD-accelerated rapidfuzz for fast string matching.
"""

import re
from collections.abc import Sequence

from rapidfuzz.distance import Indel as _rapidfuzz_indel

from sahifa.core.arabic import normalize_arabic
from sahifa.exceptions import InvalidTarget
from sahifa.models import ChapterMeta

# Leading article in romanized names: "Al-", "An-", "Ash-", ...
_ROMAN_ARTICLE = re.compile(r"^(?:a[a-z]{0,2}|el)[-\s]+", re.IGNORECASE)
_ARABIC_ARTICLE = "ال"


def similarity(text1: str, text2: str) -> float:
    """
    Compute similarity ratio between two strings.

    Returns a ratio between 0.0 (no similarity) and 1.0 (identical strings).

    Examples:
        >>> similarity("baqarah", "baqara")
        0.9230769230769231
    """
    return _rapidfuzz_indel.normalized_similarity(text1, text2)


def normalize_name(name: str) -> str:
    """Normalize a chapter name for matching."""
    return normalize_arabic(name).lower().replace(" ", "")


def _name_variants(chapter: ChapterMeta) -> set[str]:
    variants = set()
    for name in (chapter.name_primary, chapter.name_secondary, chapter.name_roman):
        if not name:
            continue
        variants.add(normalize_name(name))
        stripped = _ROMAN_ARTICLE.sub("", name)
        if stripped != name:
            variants.add(normalize_name(stripped))
        normalized = normalize_arabic(name)
        if normalized.startswith(_ARABIC_ARTICLE) and len(normalized) > len(_ARABIC_ARTICLE) + 1:
            variants.add(normalize_name(normalized[len(_ARABIC_ARTICLE):]))
    variants.discard("")
    return variants


def find_chapter(
    query: int | str,
    chapters: Sequence[ChapterMeta],
    threshold: float = 0.7,
) -> ChapterMeta:
    """
    Resolve a chapter from a number or a (possibly misspelled) name.

    Args:
        query: Chapter id, digit string, or name in any listed script
        chapters: Chapters to search
        threshold: Minimum similarity for a name match

    Returns:
        The matching chapter (best score wins, ties go to the lower id)

    Raises:
        InvalidTarget: If nothing matches

    Examples:
        >>> find_chapter("baqara", chapters).id
        2
    """
    if isinstance(query, int) or str(query).strip().isdigit():
        chapter_id = int(query)
        for chapter in chapters:
            if chapter.id == chapter_id:
                return chapter
        valid = (chapters[0].id, chapters[-1].id) if chapters else None
        raise InvalidTarget("chapter", chapter_id, valid)

    needle = normalize_name(query)
    if not needle:
        raise InvalidTarget("chapter name", query)

    best: ChapterMeta | None = None
    best_score = 0.0
    for chapter in chapters:
        score = max((similarity(needle, v) for v in _name_variants(chapter)), default=0.0)
        if score > best_score:
            best, best_score = chapter, score

    if best is None or best_score < threshold:
        raise InvalidTarget("chapter name", query)
    return best
