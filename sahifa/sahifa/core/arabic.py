"""
Arabic text utilities.

This module provides the text normalization used to weigh verses by
letter count and to match chapter names regardless of diacritics or
alef/hamza spelling, plus Arabic-Indic digit formatting for verse markers.
"""

import re
from functools import lru_cache

ARABIC_INDIC_DIGITS = "٠١٢٣٤٥٦٧٨٩"

_DIGIT_TABLE = str.maketrans("0123456789", ARABIC_INDIC_DIGITS)


def normalize_arabic(text: str) -> str:
    """
    Normalize Arabic text for comparison and letter counting.

    Performs the following normalizations:
    - Replace all alef variants (أ إ آ ا ٱ) with plain alef (ا)
    - Replace alef maqsura (ى) with ya (ي)
    - Replace ta marbuta (ة) with ha (ه)
    - Remove diacritics and Quranic annotation marks
    - Remove punctuation
    - Collapse multiple spaces

    Args:
        text: Arabic text to normalize

    Returns:
        Normalized text string

    Examples:
        >>> normalize_arabic("بِسْمِ اللَّهِ الرَّحْمَٰنِ الرَّحِيمِ")
        'بسم الله الرحمن الرحيم'
    """
    if not text:
        return ""

    # Normalize alef variants (including alef wasla ٱ U+0671)
    text = re.sub(r"[أإآاٱ]", "ا", text)

    text = re.sub(r"ى", "ي", text)
    text = re.sub(r"ة", "ه", text)

    # Hamza carriers: ؤ → و, ئ → ي
    text = re.sub(r"ؤ", "و", text)
    text = re.sub(r"ئ", "ي", text)

    # Tashkeel (U+064B-U+065F, U+0670) and Quranic marks (U+06D6-U+06ED)
    text = re.sub(r"[\u064B-\u065F\u0670\u06D6-\u06ED]", "", text)

    text = re.sub(r"[^\w\s]", "", text)
    text = re.sub(r"\s+", " ", text).strip()

    return text


def letter_count(text: str) -> int:
    """
    Count letters in text, ignoring diacritics, punctuation and spaces.

    Args:
        text: Arabic text

    Returns:
        Number of letters
    """
    return len(normalize_arabic(text).replace(" ", ""))


def word_count(text: str) -> int:
    """
    Count words in text.

    Args:
        text: Arabic text

    Returns:
        Number of words
    """
    normalized = normalize_arabic(text)
    if not normalized:
        return 0
    return len(normalized.split())


@lru_cache(maxsize=1024)
def format_arabic_number(number: int) -> str:
    """
    Render a number with Arabic-Indic digits, as used in verse end markers.

    Examples:
        >>> format_arabic_number(286)
        '٢٨٦'
    """
    return str(number).translate(_DIGIT_TABLE)
