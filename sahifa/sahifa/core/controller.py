"""
Chapter-by-chapter page navigation.

The controller owns the reader's position and drives the
fetch → cache → build → navigate cycle. Pages are built per chapter; the
page number inside the active chapter is the canonical position, and
everything else (ReaderPosition, anchor verse) is derived from it.

Every navigation request takes a fresh token. A fetch result is applied
only when its token is still the latest, so a slow response for an older
request never overwrites a newer position.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from enum import Enum

from sahifa.config import SahifaSettings, get_settings
from sahifa.core.cache import CacheStatus, VerseCache
from sahifa.core.paginator import Paginator, locate_page
from sahifa.core.weights import get_weight
from sahifa.exceptions import FetchFailure, InvalidTarget, SahifaError
from sahifa.models import ChapterMeta, Page, ReaderPosition
from sahifa.sources.base import ChapterDirectory

logger = logging.getLogger(__name__)

PageResolver = Callable[[Sequence[Page]], int]


class ControllerState(str, Enum):
    """Observable states of the pagination controller."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


def _first_page(pages: Sequence[Page]) -> int:
    return 1


def _last_page(pages: Sequence[Page]) -> int:
    return len(pages)


class PaginationController:
    """
    Navigates a paginated corpus one chapter at a time.

    Example:
        controller = PaginationController(VerseCache(source), directory, capacity=1300)
        await controller.jump_to_chapter(2)
        await controller.next_page()
        print(controller.position)

    Attributes:
        cache: Verse cache shared with prefetching
        directory: Chapter directory
        paginator: Memoizing page builder
    """

    def __init__(
        self,
        cache: VerseCache,
        directory: ChapterDirectory,
        capacity: int | None = None,
        paginator: Paginator | None = None,
        settings: SahifaSettings | None = None,
    ):
        self.settings = settings or get_settings()
        self.cache = cache
        self.directory = directory
        self.paginator = paginator or Paginator(get_weight(self.settings.weight_metric))
        self.prefetch_enabled = self.settings.prefetch_neighbours

        self._capacity = capacity if capacity is not None else self.settings.page_capacity
        if self._capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {self._capacity}")

        self._chapters: list[ChapterMeta] = []
        self._chapter_slots: dict[int, int] = {}

        self._chapter: ChapterMeta | None = None
        self._pages: list[Page] = []
        self._page_number = 0
        self._anchor: int | None = None

        self._state = ControllerState.IDLE
        self._error: SahifaError | None = None
        self._token = 0
        self._prefetch_tasks: set[asyncio.Task] = set()

    # ============ Accessors ============

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def error(self) -> SahifaError | None:
        """The error that moved the controller into ERROR, if any."""
        return self._error

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def chapters(self) -> list[ChapterMeta]:
        return list(self._chapters)

    @property
    def chapter(self) -> ChapterMeta | None:
        """The chapter whose pages are active."""
        return self._chapter

    @property
    def pages(self) -> list[Page]:
        return list(self._pages)

    @property
    def total_pages(self) -> int:
        return len(self._pages)

    @property
    def page_number(self) -> int:
        """Current page within the active chapter (0 before the first load)."""
        return self._page_number

    @property
    def current_page(self) -> Page | None:
        if not self._pages:
            return None
        return self._pages[self._page_number - 1]

    @property
    def anchor(self) -> int | None:
        """Global index of the verse the reader navigated to."""
        return self._anchor

    @property
    def position(self) -> ReaderPosition | None:
        """The reader position derived from the active page set."""
        page = self.current_page
        if page is None or self._chapter is None:
            return None
        return ReaderPosition(
            chapter_id=self._chapter.id,
            page_number=self._page_number,
            total_pages=len(self._pages),
            global_index=page.first_verse.global_index,
        )

    # ============ Chapter directory ============

    async def open(self) -> list[ChapterMeta]:
        """
        Load the chapter directory (once).

        Raises:
            FetchFailure: If the directory call fails or returns nothing
        """
        if self._chapters:
            return self.chapters

        try:
            chapters = await self.directory.list_chapters()
        except Exception as e:
            raise self._fail(FetchFailure("chapter directory", str(e) or type(e).__name__)) from e

        if not chapters:
            raise self._fail(FetchFailure("chapter directory", "no chapters listed"))

        self._chapters = sorted(chapters, key=lambda c: c.id)
        self._chapter_slots = {c.id: i for i, c in enumerate(self._chapters)}
        logger.info("Chapter directory loaded: %d chapters", len(self._chapters))
        return self.chapters

    def get_chapter(self, chapter_id: int) -> ChapterMeta:
        """
        Look up a loaded chapter.

        Raises:
            InvalidTarget: If the chapter is not in the directory
        """
        slot = self._chapter_slots.get(chapter_id)
        if slot is None:
            valid = (self._chapters[0].id, self._chapters[-1].id) if self._chapters else None
            raise InvalidTarget("chapter", chapter_id, valid)
        return self._chapters[slot]

    def _neighbour(self, chapter: ChapterMeta, step: int) -> ChapterMeta | None:
        slot = self._chapter_slots[chapter.id] + step
        if 0 <= slot < len(self._chapters):
            return self._chapters[slot]
        return None

    # ============ Navigation ============

    async def next_page(self) -> ReaderPosition | None:
        """
        Advance one page, crossing into the next chapter at a chapter's end.

        A no-op on the last page of the last chapter.
        """
        if self._chapter is None:
            logger.debug("next_page ignored: no chapter loaded")
            return None

        if self._page_number < len(self._pages):
            return self._move_within_chapter(self._page_number + 1)

        following = self._neighbour(self._chapter, 1)
        if following is None:
            logger.debug("next_page ignored: already on the last page")
            return self.position
        return await self._open_chapter(following, _first_page)

    async def previous_page(self) -> ReaderPosition | None:
        """
        Go back one page, crossing into the previous chapter's last page.

        A no-op on the first page of the first chapter.
        """
        if self._chapter is None:
            logger.debug("previous_page ignored: no chapter loaded")
            return None

        if self._page_number > 1:
            return self._move_within_chapter(self._page_number - 1)

        preceding = self._neighbour(self._chapter, -1)
        if preceding is None:
            logger.debug("previous_page ignored: already on the first page")
            return self.position
        return await self._open_chapter(preceding, _last_page)

    def go_to_page(self, page_number: int) -> ReaderPosition:
        """
        Go to a page of the active chapter.

        Raises:
            InvalidTarget: If page_number is outside 1..total_pages
        """
        total = len(self._pages)
        if not 1 <= page_number <= total:
            raise InvalidTarget("page", page_number, (1, total) if total else None)
        return self._move_within_chapter(page_number)

    async def jump_to_chapter(self, chapter_id: int, page: int | str = 1) -> ReaderPosition | None:
        """
        Open a chapter, by default at the page holding its first verse.

        Args:
            chapter_id: Chapter to open
            page: Page within the chapter, or "last" for its last page

        Raises:
            InvalidTarget: If the chapter does not exist (before any fetch),
                or the page is outside the chapter's page range
            FetchFailure: If the chapter's verses could not be fetched
            CorruptVerseSequence: If the fetched verses are malformed
        """
        await self.open()
        chapter = self.get_chapter(chapter_id)
        if page == "last":
            return await self._open_chapter(chapter, _last_page)
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise InvalidTarget("page", page)
        # A chapter never has more pages than verses. When its verses are
        # cached the exact page count is known, so an out-of-range page is
        # rejected without taking a request token.
        if page > chapter.verse_count:
            raise InvalidTarget("page", page)
        cached = self.cache.peek(chapter.id)
        if cached is not None:
            total = len(self.paginator.paginate(chapter.id, cached, self._capacity))
            if page > total:
                raise InvalidTarget("page", page, (1, total))

        def resolve(pages: Sequence[Page]) -> int:
            if page > len(pages):
                raise InvalidTarget("page", page, (1, len(pages)))
            return page

        return await self._open_chapter(chapter, resolve)

    async def go_to_verse(self, chapter_id: int, verse_number: int) -> ReaderPosition | None:
        """
        Open a chapter at the page holding a given verse.

        Raises:
            InvalidTarget: If the chapter or verse does not exist
        """
        await self.open()
        chapter = self.get_chapter(chapter_id)
        if not 1 <= verse_number <= chapter.verse_count:
            raise InvalidTarget("verse", f"{chapter_id}:{verse_number}", (1, chapter.verse_count))

        def resolve(pages: Sequence[Page]) -> int:
            for page in pages:
                if page.first_verse.verse_number <= verse_number <= page.last_verse.verse_number:
                    return page.page_number
            return len(pages)

        return await self._open_chapter(chapter, resolve)

    def set_capacity(self, capacity: int) -> ReaderPosition | None:
        """
        Change the page capacity and rebuild the active chapter in place.

        The reader stays on the page holding the anchor verse.

        Raises:
            ValueError: If capacity is below 1
        """
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        if capacity == self._capacity:
            return self.position

        self._capacity = capacity
        if self._chapter is None:
            return None

        verses = self.cache.peek(self._chapter.id)
        if verses is None:
            return self.position

        pages = self.paginator.paginate(self._chapter.id, verses, capacity)
        self._pages = pages
        located = locate_page(pages, self._anchor) if self._anchor is not None else None
        self._page_number = located or 1
        logger.info(
            "Repaginated chapter %d at capacity %d: %d pages, now on page %d",
            self._chapter.id, capacity, len(pages), self._page_number,
        )
        return self.position

    # ============ Internals ============

    def _move_within_chapter(self, page_number: int) -> ReaderPosition | None:
        self._token += 1
        self._page_number = page_number
        self._anchor = self._pages[page_number - 1].first_verse.global_index
        self._state = ControllerState.READY
        self._error = None
        return self.position

    async def _open_chapter(
        self,
        chapter: ChapterMeta,
        resolve: PageResolver,
    ) -> ReaderPosition | None:
        self._token += 1
        token = self._token
        self._state = ControllerState.LOADING
        self._error = None

        try:
            verses = await self.cache.get(chapter.id)
            pages = self.paginator.paginate(chapter.id, verses, self._capacity)
        except SahifaError as e:
            if token != self._token:
                logger.debug("Dropping failure of superseded request for chapter %d: %s", chapter.id, e)
                return self.position
            self._state = ControllerState.ERROR
            self._error = e
            logger.error("Failed to open chapter %d: %s", chapter.id, e, exc_info=True)
            raise

        if token != self._token:
            logger.debug("Dropping superseded result for chapter %d", chapter.id)
            return self.position

        try:
            page_number = resolve(pages)
        except InvalidTarget:
            self._state = ControllerState.READY if self._pages else ControllerState.IDLE
            raise

        self._settle(chapter, pages, page_number)
        return self.position

    def _settle(self, chapter: ChapterMeta, pages: list[Page], page_number: int) -> None:
        if self._chapter is None or self._chapter.id != chapter.id:
            logger.info("Opened chapter %d (%s): %d pages", chapter.id, chapter.name_primary, len(pages))
        self._chapter = chapter
        self._pages = pages
        self._page_number = page_number
        self._anchor = pages[page_number - 1].first_verse.global_index
        self._state = ControllerState.READY
        self._error = None
        self._schedule_prefetch(chapter)

    def _fail(self, error: SahifaError) -> SahifaError:
        self._state = ControllerState.ERROR
        self._error = error
        logger.error("%s", error)
        return error

    # ============ Prefetch ============

    def _schedule_prefetch(self, chapter: ChapterMeta) -> None:
        if not self.prefetch_enabled:
            return
        for step in (-1, 1):
            neighbour = self._neighbour(chapter, step)
            if neighbour is None or self.cache.status(neighbour.id) is not CacheStatus.ABSENT:
                continue
            task = asyncio.ensure_future(self._prefetch(neighbour.id))
            self._prefetch_tasks.add(task)
            task.add_done_callback(self._prefetch_tasks.discard)

    async def _prefetch(self, chapter_id: int) -> None:
        try:
            verses = await self.cache.get(chapter_id)
            self.paginator.paginate(chapter_id, verses, self._capacity)
        except SahifaError as e:
            logger.warning("Prefetch of chapter %d failed: %s", chapter_id, e)
        else:
            logger.debug("Prefetched chapter %d", chapter_id)

    async def wait_for_prefetch(self) -> None:
        """Wait until all outstanding prefetches have finished."""
        while self._prefetch_tasks:
            await asyncio.gather(*list(self._prefetch_tasks))

    # ============ Lifecycle ============

    def reset(self) -> None:
        """Forget position, cached verses and memoized pages."""
        self._token += 1
        self.cache.clear()
        self.paginator.clear()
        self._chapter = None
        self._pages = []
        self._page_number = 0
        self._anchor = None
        self._state = ControllerState.IDLE
        self._error = None
        logger.info("Pagination controller reset")
