"""
Verse weight metrics used by the page builder.

The weight of a verse stands in for the vertical space it takes once
rendered. Character count of the primary text is the default; the other
metrics are available for scripts where diacritics inflate raw length.
"""

from typing import Callable

from sahifa.core.arabic import letter_count, word_count
from sahifa.models import Verse

WeightFn = Callable[[Verse], int]


def character_weight(verse: Verse) -> int:
    """Raw character length of the primary text."""
    return len(verse.text_primary)


def letter_weight(verse: Verse) -> int:
    """Letter count of the primary text, diacritics excluded."""
    return letter_count(verse.text_primary)


def word_weight(verse: Verse) -> int:
    """Word count of the primary text."""
    return word_count(verse.text_primary)


WEIGHT_METRICS: dict[str, WeightFn] = {
    "characters": character_weight,
    "letters": letter_weight,
    "words": word_weight,
}


def get_weight(name: str) -> WeightFn:
    """
    Resolve a weight metric by name.

    Args:
        name: One of "characters", "letters", "words"

    Returns:
        The weight function

    Raises:
        ValueError: If the metric is unknown
    """
    try:
        return WEIGHT_METRICS[name]
    except KeyError:
        valid = ", ".join(sorted(WEIGHT_METRICS))
        raise ValueError(f"Unknown weight metric: {name!r}. Valid options: {valid}") from None
