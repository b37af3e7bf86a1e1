"""
Reader session: display preferences and durable position.

The session wraps a PaginationController. It turns the font scale into a
page capacity, restores the last position when it starts, and writes the
position back to the store after every change.
"""

import asyncio
import logging

from sahifa.config import SahifaSettings, get_settings
from sahifa.core.cache import VerseCache
from sahifa.core.controller import PaginationController
from sahifa.core.matcher import find_chapter
from sahifa.models import ReaderPosition, Theme
from sahifa.sources.base import ChapterDirectory, PositionStore, VerseSource

logger = logging.getLogger(__name__)


def capacity_for_scale(base: int, scale: float, sensitivity: float = 0.6) -> int:
    """
    Page capacity at a font scale.

    Larger text fits less per page: each unit of scale above 1.0 removes
    `sensitivity` of the base capacity.

    Examples:
        >>> capacity_for_scale(1000, 1.5)
        700
    """
    return max(1, round(base * (1 - sensitivity * (scale - 1))))


class ReaderSession:
    """
    A reading session over a paginated corpus.

    Example:
        session = await ReaderSession.create(source, directory, store)
        await session.next_page()
        await session.set_font_scale(1.2)

    Attributes:
        controller: The underlying pagination controller
        store: Durable position store
        compact: Whether the compact (mobile) base capacity applies
        theme: Current color theme
    """

    def __init__(
        self,
        controller: PaginationController,
        store: PositionStore,
        settings: SahifaSettings | None = None,
        compact: bool = False,
    ):
        self.settings = settings or controller.settings
        self.controller = controller
        self.store = store
        self.compact = compact
        self.theme = Theme(self.settings.default_theme)
        self._font_scale = self.settings.default_font_scale
        self._persisted: tuple[int, int] | None = None
        self._persist_lock = asyncio.Lock()
        self.controller.set_capacity(self.capacity)

    @classmethod
    async def create(
        cls,
        source: VerseSource,
        directory: ChapterDirectory,
        store: PositionStore,
        settings: SahifaSettings | None = None,
        compact: bool = False,
    ) -> "ReaderSession":
        """
        Build a session and restore the last stored position.

        Raises:
            FetchFailure: If the directory or the restored chapter cannot be fetched
        """
        settings = settings or get_settings()
        controller = PaginationController(VerseCache(source), directory, settings=settings)
        session = cls(controller, store, settings=settings, compact=compact)
        await session.restore()
        return session

    # ============ Display ============

    @property
    def font_scale(self) -> float:
        return self._font_scale

    @property
    def base_capacity(self) -> int:
        if self.compact:
            return self.settings.compact_page_capacity
        return self.settings.page_capacity

    @property
    def capacity(self) -> int:
        """Page capacity for the current font scale."""
        return capacity_for_scale(self.base_capacity, self._font_scale, self.settings.scale_sensitivity)

    @property
    def position(self) -> ReaderPosition | None:
        return self.controller.position

    async def set_font_scale(self, scale: float) -> ReaderPosition | None:
        """
        Change the font scale, repaginating in place.

        Values outside [min_font_scale, max_font_scale] are clamped. The
        reader stays on the page holding the same verse.
        """
        clamped = min(max(scale, self.settings.min_font_scale), self.settings.max_font_scale)
        if clamped != scale:
            logger.debug("Font scale %.2f clamped to %.2f", scale, clamped)
        if clamped == self._font_scale:
            return self.position

        self._font_scale = clamped
        position = self.controller.set_capacity(self.capacity)
        await self._persist()
        return position

    def set_theme(self, theme: Theme | str) -> Theme:
        self.theme = Theme(theme)
        return self.theme

    def toggle_theme(self) -> Theme:
        """Switch between light and dark."""
        return self.set_theme(Theme.DARK if self.theme is Theme.LIGHT else Theme.LIGHT)

    # ============ Persistence ============

    async def _read(self, key: str) -> int | None:
        try:
            return await self.store.get(key)
        except Exception as e:
            logger.warning("Could not read %r from position store: %s", key, e)
            return None

    async def _persist(self) -> None:
        # Writes are serialised and the position is read under the lock, so
        # the last write to land always carries the newest position.
        async with self._persist_lock:
            position = self.controller.position
            if position is None:
                return
            snapshot = (position.chapter_id, position.page_number)
            if snapshot == self._persisted:
                return
            try:
                await self.store.set(self.settings.chapter_key, position.chapter_id)
                await self.store.set(self.settings.position_key, position.page_number)
            except Exception as e:
                logger.warning("Could not persist reader position %s: %s", position, e)
                return
            self._persisted = snapshot

    async def restore(self) -> ReaderPosition | None:
        """
        Reopen the stored chapter and page.

        An absent or unknown chapter falls back to the first chapter; a page
        outside [1, total_pages] falls back to page 1.
        """
        chapters = await self.controller.open()
        chapter_ids = {c.id for c in chapters}

        chapter_id = await self._read(self.settings.chapter_key)
        if chapter_id not in chapter_ids:
            if chapter_id is not None:
                logger.info("Stored chapter %s is not valid, starting at chapter %d", chapter_id, chapters[0].id)
            chapter_id = chapters[0].id

        await self.controller.jump_to_chapter(chapter_id)

        page = await self._read(self.settings.position_key)
        if page is not None and 1 <= page <= self.controller.total_pages:
            self.controller.go_to_page(page)
        elif page is not None:
            logger.info("Stored page %s is outside 1-%d, starting at page 1", page, self.controller.total_pages)

        await self._persist()
        logger.info("Session restored at %s", self.position)
        return self.position

    # ============ Navigation ============

    async def next_page(self) -> ReaderPosition | None:
        position = await self.controller.next_page()
        await self._persist()
        return position

    async def previous_page(self) -> ReaderPosition | None:
        position = await self.controller.previous_page()
        await self._persist()
        return position

    async def go_to_page(self, page_number: int) -> ReaderPosition:
        position = self.controller.go_to_page(page_number)
        await self._persist()
        return position

    async def jump_to_chapter(self, chapter_id: int, page: int | str = 1) -> ReaderPosition | None:
        position = await self.controller.jump_to_chapter(chapter_id, page)
        await self._persist()
        return position

    async def jump_to_chapter_by_name(self, query: int | str) -> ReaderPosition | None:
        """Jump to a chapter given its number or (fuzzy) name."""
        chapters = await self.controller.open()
        chapter = find_chapter(query, chapters, self.settings.match_threshold)
        return await self.jump_to_chapter(chapter.id)

    async def go_to_verse(self, chapter_id: int, verse_number: int) -> ReaderPosition | None:
        position = await self.controller.go_to_verse(chapter_id, verse_number)
        await self._persist()
        return position

    # ============ Lifecycle ============

    async def reset(self) -> None:
        """Forget everything: position, cache, preferences and stored keys."""
        await self.controller.wait_for_prefetch()
        self.controller.reset()
        self._font_scale = self.settings.default_font_scale
        self.theme = Theme(self.settings.default_theme)
        self.controller.set_capacity(self.capacity)
        async with self._persist_lock:
            self._persisted = None
            for key in (self.settings.chapter_key, self.settings.position_key):
                try:
                    await self.store.delete(key)
                except Exception as e:
                    logger.warning("Could not clear %r from position store: %s", key, e)

    async def close(self) -> None:
        """Let background prefetches finish."""
        await self.controller.wait_for_prefetch()
