"""
Verse batch cache with single-flight fetching.

Batches are keyed by chapter id (VerseCache) or by inclusive global index
range (RangeCache). Entries live until clear() is called; the corpus is
small and finite so nothing is evicted.
"""

import asyncio
import logging
from collections.abc import Hashable, Sequence
from enum import Enum

from sahifa.core.paginator import validate_sequence
from sahifa.exceptions import CorruptVerseSequence, FetchFailure
from sahifa.models import Verse
from sahifa.sources.base import VerseSource

logger = logging.getLogger(__name__)


class CacheStatus(str, Enum):
    """State of a cache key."""

    CACHED = "cached"
    PENDING = "pending"
    ABSENT = "absent"


def _consume_exception(task: asyncio.Future) -> None:
    # Waiters receive the error; this keeps an unawaited failure from being logged twice.
    if not task.cancelled():
        task.exception()


class VerseCache:
    """
    Chapter-keyed verse cache.

    Concurrent get() calls for the same missing key share one fetch: the
    first caller starts it and records it as pending, later callers await
    the same task. A failed fetch leaves no entry behind, so a retry
    fetches again.

    Example:
        cache = VerseCache(source)
        verses = await cache.get(2)
        cache.status(2)  # CacheStatus.CACHED
    """

    def __init__(self, source: VerseSource):
        self.source = source
        self._entries: dict[Hashable, list[Verse]] = {}
        self._pending: dict[Hashable, asyncio.Task] = {}
        self._generation = 0

        # Statistics
        self.fetch_count = 0

    def status(self, key: Hashable) -> CacheStatus:
        """Whether a key is cached, being fetched, or absent."""
        if key in self._entries:
            return CacheStatus.CACHED
        if key in self._pending:
            return CacheStatus.PENDING
        return CacheStatus.ABSENT

    def peek(self, key: Hashable) -> list[Verse] | None:
        """Return a copy of the cached batch without fetching."""
        cached = self._entries.get(key)
        return list(cached) if cached is not None else None

    def put(self, key: Hashable, verses: Sequence[Verse]) -> None:
        """
        Store a batch.

        Raises:
            ValueError: If the batch is empty
            CorruptVerseSequence: If the batch does not fit the key
        """
        if not verses:
            raise ValueError(f"Cannot cache an empty batch for {self.describe(key)}")
        self._validate(key, verses)
        self._entries[key] = list(verses)

    async def get(self, key: Hashable) -> list[Verse]:
        """
        Return the batch for a key, fetching it if needed.

        Raises:
            FetchFailure: If the source call failed or returned nothing
            CorruptVerseSequence: If the fetched batch is malformed
        """
        cached = self._entries.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", self.describe(key))
            return list(cached)

        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch_and_store(key, self._generation))
            task.add_done_callback(_consume_exception)
            self._pending[key] = task
        else:
            logger.debug("Joining in-flight fetch for %s", self.describe(key))

        return await asyncio.shield(task)

    async def _fetch_and_store(self, key: Hashable, generation: int) -> list[Verse]:
        self.fetch_count += 1
        logger.debug("Fetching %s", self.describe(key))
        try:
            verses = await self._fetch(key)
        except Exception as e:
            raise FetchFailure(self.describe(key), str(e) or type(e).__name__) from e
        finally:
            if generation == self._generation:
                self._pending.pop(key, None)

        if not verses:
            raise FetchFailure(self.describe(key), "no verses returned")

        self._validate(key, verses)
        if generation == self._generation:
            self._entries[key] = list(verses)
        return list(verses)

    async def _fetch(self, key: Hashable) -> list[Verse]:
        return await self.source.fetch_chapter(key)

    def _validate(self, key: Hashable, verses: Sequence[Verse]) -> None:
        stray = next((v for v in verses if v.chapter_number != key), None)
        if stray is not None:
            raise CorruptVerseSequence(
                f"verse {stray} does not belong to chapter {key}", stray.global_index
            )
        if not verses[0].is_chapter_start:
            raise CorruptVerseSequence(
                f"chapter {key} starts at verse {verses[0].verse_number}",
                verses[0].global_index,
            )
        validate_sequence(verses)

    def describe(self, key: Hashable) -> str:
        return f"chapter {key}"

    def clear(self) -> None:
        """Drop all entries; in-flight fetches complete but are not stored."""
        self._entries.clear()
        self._pending.clear()
        self._generation += 1

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class RangeCache(VerseCache):
    """
    Verse cache keyed by inclusive (start, end) global index ranges.

    Example:
        cache = RangeCache(source)
        verses = await cache.get((12, 22))
    """

    async def _fetch(self, key: Hashable) -> list[Verse]:
        start, end = key
        return await self.source.fetch_range(start, end)

    def _validate(self, key: Hashable, verses: Sequence[Verse]) -> None:
        start, end = key
        validate_sequence(verses)
        if verses[0].global_index != start or verses[-1].global_index != end:
            raise CorruptVerseSequence(
                f"range {start}-{end} returned verses "
                f"{verses[0].global_index}-{verses[-1].global_index}",
                verses[0].global_index,
            )

    def describe(self, key: Hashable) -> str:
        start, end = key
        return f"verses {start}-{end}"
