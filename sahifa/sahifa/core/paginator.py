"""
Greedy page layout.

This module contains the core logic for partitioning an ordered run of
verses into capacity-bounded pages. Verses are never split: a verse that
alone exceeds the capacity gets a page to itself.
"""

import logging
from bisect import bisect_right
from collections.abc import Hashable, Sequence

from sahifa.core.weights import WeightFn, character_weight
from sahifa.exceptions import CorruptVerseSequence
from sahifa.models import ChapterBoundary, Page, Verse

logger = logging.getLogger(__name__)


def validate_sequence(verses: Sequence[Verse]) -> None:
    """
    Check that verses form one contiguous run in corpus order.

    Global indices must increase by exactly one. Inside a chapter verse
    numbers must increase by exactly one; a chapter change must move
    forward and start at verse 1.

    Raises:
        CorruptVerseSequence: On the first gap, duplicate or reordering found
    """
    for prev, verse in zip(verses, verses[1:]):
        if verse.global_index != prev.global_index + 1:
            kind = "duplicate" if verse.global_index <= prev.global_index else "gap"
            raise CorruptVerseSequence(f"{kind} in global order", verse.global_index)

        if verse.chapter_number == prev.chapter_number:
            if verse.verse_number != prev.verse_number + 1:
                raise CorruptVerseSequence(
                    f"verse {verse.verse_number} follows verse {prev.verse_number} "
                    f"in chapter {verse.chapter_number}",
                    verse.global_index,
                )
        elif verse.chapter_number < prev.chapter_number or not verse.is_chapter_start:
            raise CorruptVerseSequence(
                f"chapter {verse.chapter_number} does not start at verse 1",
                verse.global_index,
            )


def make_page(page_number: int, verses: list[Verse]) -> Page:
    """Wrap verses as a page, tagging it when it opens a chapter."""
    first = verses[0]
    return Page(
        page_number=page_number,
        verses=verses,
        chapter_boundary=ChapterBoundary.from_verse(first) if first.is_chapter_start else None,
        juz_number=first.juz_number,
    )


def build_pages(
    verses: Sequence[Verse],
    capacity: int,
    weight: WeightFn | None = None,
) -> list[Page]:
    """
    Partition verses into pages by greedy packing.

    Each verse is appended to the open page unless that would push the
    page's total weight over capacity, in which case the open page is
    closed and a new one started with the verse.

    Args:
        verses: Ordered, contiguous verses
        capacity: Maximum total weight of a multi-verse page
        weight: Weight metric (defaults to character count of the primary text)

    Returns:
        Pages numbered 1..N; empty list for empty input

    Raises:
        ValueError: If capacity is below 1
        CorruptVerseSequence: If the verses are not contiguous

    Examples:
        Three verses of weight 40 with capacity 100 give pages [[v1, v2], [v3]].
    """
    if capacity < 1:
        raise ValueError(f"capacity must be >= 1, got {capacity}")

    validate_sequence(verses)
    weigh = weight or character_weight

    pages: list[Page] = []
    current: list[Verse] = []
    running = 0

    for verse in verses:
        verse_weight = weigh(verse)
        if current and running + verse_weight > capacity:
            pages.append(make_page(len(pages) + 1, current))
            current = [verse]
            running = verse_weight
        else:
            current.append(verse)
            running += verse_weight

    if current:
        pages.append(make_page(len(pages) + 1, current))

    return pages


def locate_page(pages: Sequence[Page], global_index: int) -> int | None:
    """
    Find the page holding a verse.

    Args:
        pages: Pages in page-number order
        global_index: Global index of the verse

    Returns:
        The 1-based page number, or None if no page holds the verse
    """
    anchors = [page.first_verse.global_index for page in pages]
    pos = bisect_right(anchors, global_index) - 1
    if pos < 0 or not pages[pos].contains(global_index):
        return None
    return pages[pos].page_number


class Paginator:
    """
    Memoizing front end for build_pages.

    Page sets are keyed on (key, capacity), where key identifies the verse
    set (normally the chapter id). Verse sets are assumed immutable for the
    lifetime of the memo.

    Example:
        paginator = Paginator()
        pages = paginator.paginate(1, verses, capacity=1300)
    """

    def __init__(self, weight: WeightFn | None = None):
        self.weight = weight or character_weight
        self._memo: dict[tuple[Hashable, int], list[Page]] = {}

    def paginate(self, key: Hashable, verses: Sequence[Verse], capacity: int) -> list[Page]:
        """Build (or reuse) the page set for a verse set at a capacity."""
        memo_key = (key, capacity)
        pages = self._memo.get(memo_key)
        if pages is None:
            pages = build_pages(verses, capacity, self.weight)
            self._memo[memo_key] = pages
            logger.debug(
                "Paginated %s at capacity %d: %d verses into %d pages",
                key, capacity, len(verses), len(pages),
            )
        return pages

    def clear(self) -> None:
        """Drop all memoized page sets."""
        self._memo.clear()

    def __len__(self) -> int:
        return len(self._memo)
