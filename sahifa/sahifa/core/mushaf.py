"""
Fixed-range flat page numbering across the whole corpus.

A mushaf page here is a run of verses_per_page consecutive verses by
global index, independent of chapter boundaries. Mapping a flat page to a
chapter and verse goes through the cumulative chapter lengths, so no verse
data is needed to navigate; verses are fetched by range only to render.
"""

import asyncio
import logging
import math
from bisect import bisect_right
from collections.abc import Sequence

from sahifa.config import SahifaSettings, get_settings
from sahifa.core.cache import CacheStatus, RangeCache
from sahifa.core.paginator import make_page
from sahifa.exceptions import InvalidTarget, SahifaError
from sahifa.models import ChapterMeta, Page
from sahifa.sources.base import VerseSource

logger = logging.getLogger(__name__)


class MushafPager:
    """
    Flat page navigation over fixed verse ranges.

    With the default 6236 verses and 604 pages each page holds 11 verses,
    which leaves 567 non-empty pages; total_pages reports that figure.

    Example:
        pager = MushafPager(source, await directory.list_chapters())
        page = await pager.go_to_page(pager.page_for_chapter(2))
        page = await pager.next_page()
    """

    def __init__(
        self,
        source: VerseSource,
        chapters: Sequence[ChapterMeta],
        page_count: int | None = None,
        settings: SahifaSettings | None = None,
        cache: RangeCache | None = None,
    ):
        if not chapters:
            raise ValueError("MushafPager needs at least one chapter")

        self.settings = settings or get_settings()
        self.cache = cache or RangeCache(source)
        self.chapters = sorted(chapters, key=lambda c: c.id)

        self._starts: list[int] = []
        next_start = 1
        for chapter in self.chapters:
            self._starts.append(next_start)
            next_start += chapter.verse_count
        self.total_verses = next_start - 1

        requested = page_count if page_count is not None else self.settings.mushaf_page_count
        if requested < 1:
            raise ValueError(f"page_count must be >= 1, got {requested}")
        self.verses_per_page = math.ceil(self.total_verses / requested)
        self.total_pages = math.ceil(self.total_verses / self.verses_per_page)

        self.current_page = 1
        self._token = 0
        self._prefetch_tasks: set[asyncio.Task] = set()

    # ============ Address arithmetic ============

    def _check_page(self, page_number: int) -> None:
        if not 1 <= page_number <= self.total_pages:
            raise InvalidTarget("page", page_number, (1, self.total_pages))

    def verse_range(self, page_number: int) -> tuple[int, int]:
        """
        Inclusive global index range of a page.

        Raises:
            InvalidTarget: If the page does not exist
        """
        self._check_page(page_number)
        start = (page_number - 1) * self.verses_per_page + 1
        end = min(page_number * self.verses_per_page, self.total_verses)
        return start, end

    def page_for_verse(self, global_index: int) -> int:
        """Page holding a global verse index."""
        if not 1 <= global_index <= self.total_verses:
            raise InvalidTarget("verse", global_index, (1, self.total_verses))
        return math.ceil(global_index / self.verses_per_page)

    def global_index_of(self, chapter_id: int, verse_number: int) -> int:
        """
        Global index of a chapter's verse.

        Raises:
            InvalidTarget: If the chapter or verse does not exist
        """
        slot = next((i for i, c in enumerate(self.chapters) if c.id == chapter_id), None)
        if slot is None:
            raise InvalidTarget("chapter", chapter_id, (self.chapters[0].id, self.chapters[-1].id))
        chapter = self.chapters[slot]
        if not 1 <= verse_number <= chapter.verse_count:
            raise InvalidTarget("verse", f"{chapter_id}:{verse_number}", (1, chapter.verse_count))
        return self._starts[slot] + verse_number - 1

    def locate(self, global_index: int) -> tuple[int, int]:
        """
        Chapter id and verse number of a global verse index.

        Raises:
            InvalidTarget: If the index is outside the corpus
        """
        if not 1 <= global_index <= self.total_verses:
            raise InvalidTarget("verse", global_index, (1, self.total_verses))
        slot = bisect_right(self._starts, global_index) - 1
        return self.chapters[slot].id, global_index - self._starts[slot] + 1

    def page_for_chapter(self, chapter_id: int) -> int:
        """Page holding a chapter's first verse."""
        return self.page_for_verse(self.global_index_of(chapter_id, 1))

    def chapter_of_page(self, page_number: int) -> int:
        """Chapter id of a page's first verse."""
        start, _ = self.verse_range(page_number)
        return self.locate(start)[0]

    # ============ Fetching ============

    async def fetch_page(self, page_number: int) -> Page:
        """
        Fetch (or reuse) the verses of a page.

        Raises:
            InvalidTarget: If the page does not exist
            FetchFailure: If the range could not be fetched
        """
        verses = await self.cache.get(self.verse_range(page_number))
        return make_page(page_number, verses)

    def _prefetch(self, page_number: int) -> None:
        for neighbour in (page_number - 1, page_number + 1):
            if not 1 <= neighbour <= self.total_pages:
                continue
            if self.cache.status(self.verse_range(neighbour)) is not CacheStatus.ABSENT:
                continue
            task = asyncio.ensure_future(self._prefetch_page(neighbour))
            self._prefetch_tasks.add(task)
            task.add_done_callback(self._prefetch_tasks.discard)

    async def _prefetch_page(self, page_number: int) -> None:
        try:
            await self.cache.get(self.verse_range(page_number))
        except SahifaError as e:
            logger.warning("Prefetch of mushaf page %d failed: %s", page_number, e)

    async def wait_for_prefetch(self) -> None:
        """Wait until all outstanding prefetches have finished."""
        while self._prefetch_tasks:
            await asyncio.gather(*list(self._prefetch_tasks))

    # ============ Navigation ============

    async def go_to_page(self, page_number: int) -> Page:
        """
        Move to a page and fetch it, prefetching its neighbours.

        The position moves only once the page has arrived, and only if no
        newer request was made in the meantime.

        Raises:
            InvalidTarget: If the page does not exist
            FetchFailure: If the page could not be fetched (position unchanged)
        """
        self._check_page(page_number)
        self._token += 1
        token = self._token
        self._prefetch(page_number)
        page = await self.fetch_page(page_number)
        if token == self._token:
            self.current_page = page_number
        return page

    async def next_page(self) -> Page:
        """Next page; stays on the last page."""
        if self.current_page == self.total_pages:
            return await self.fetch_page(self.current_page)
        return await self.go_to_page(self.current_page + 1)

    async def previous_page(self) -> Page:
        """Previous page; stays on the first page."""
        if self.current_page == 1:
            return await self.fetch_page(self.current_page)
        return await self.go_to_page(self.current_page - 1)

    async def jump_to_chapter(self, chapter_id: int) -> Page:
        """Go to the page holding a chapter's first verse."""
        return await self.go_to_page(self.page_for_chapter(chapter_id))
