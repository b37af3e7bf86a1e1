"""
Unit tests for the pagination controller.

The shared corpus paginates at capacity 100 into:
chapter 1 -> 2 pages, chapter 2 -> 3 pages, chapter 3 -> 1 page.
"""

import asyncio

import pytest
from sahifa.config import SahifaSettings
from sahifa.core import CacheStatus, ControllerState, PaginationController, VerseCache
from sahifa.exceptions import CorruptVerseSequence, FetchFailure, InvalidTarget
from sahifa.sources import StaticChapterDirectory


def _where(controller):
    position = controller.position
    return position.chapter_id, position.page_number, position.total_pages


class TestJumpToChapter:
    """Test opening chapters."""

    @pytest.mark.asyncio
    async def test_jump(self, controller):
        position = await controller.jump_to_chapter(2)

        assert (position.chapter_id, position.page_number, position.total_pages) == (2, 1, 3)
        assert position.global_index == 4
        assert controller.state is ControllerState.READY
        assert controller.current_page.starts_chapter

    @pytest.mark.asyncio
    async def test_unknown_chapter(self, controller, source):
        """An unknown chapter is rejected before anything is fetched."""
        with pytest.raises(InvalidTarget):
            await controller.jump_to_chapter(9)

        assert source.calls == []
        assert controller.position is None

    @pytest.mark.asyncio
    async def test_revisit_uses_cache(self, controller, source):
        """Returning to a chapter does not fetch it again."""
        await controller.jump_to_chapter(1)
        await controller.jump_to_chapter(2)
        await controller.jump_to_chapter(1)

        assert source.calls == [1, 2]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page,expected", [(2, 2), (3, 3), ("last", 3)])
    async def test_jump_to_page_of_chapter(self, controller, page, expected):
        position = await controller.jump_to_chapter(2, page)
        assert position.page_number == expected

    @pytest.mark.asyncio
    async def test_jump_past_last_page(self, controller):
        """A page beyond the chapter is rejected and the previous position kept."""
        await controller.jump_to_chapter(2)

        with pytest.raises(InvalidTarget) as exc_info:
            await controller.jump_to_chapter(1, 3)

        assert exc_info.value.valid_range == (1, 2)
        assert _where(controller) == (2, 1, 3)
        assert controller.state is ControllerState.READY

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page", [0, "first", 4])
    async def test_jump_invalid_page_argument(self, controller, source, page):
        with pytest.raises(InvalidTarget):
            await controller.jump_to_chapter(2, page)
        assert source.calls == []

    @pytest.mark.asyncio
    async def test_open_loads_directory_once(self, controller):
        chapters = await controller.open()
        assert [c.id for c in chapters] == [1, 2, 3]
        assert await controller.open() == chapters


class TestPageNavigation:
    """Test next/previous page movement."""

    @pytest.mark.asyncio
    async def test_next_within_chapter(self, controller):
        await controller.jump_to_chapter(2)
        await controller.next_page()
        position = await controller.next_page()

        assert (position.chapter_id, position.page_number) == (2, 3)
        assert position.global_index == 6
        assert position.is_last_page

    @pytest.mark.asyncio
    async def test_next_crosses_chapter(self, controller):
        """The last page of a chapter is followed by page 1 of the next."""
        await controller.jump_to_chapter(1)
        await controller.next_page()
        await controller.next_page()

        assert _where(controller) == (2, 1, 3)

    @pytest.mark.asyncio
    async def test_previous_crosses_to_last_page(self, controller):
        """Going back from a chapter's first page lands on the previous chapter's last page."""
        await controller.jump_to_chapter(2)
        await controller.previous_page()

        assert _where(controller) == (1, 2, 2)
        assert controller.current_page.first_verse.verse_number == 3

    @pytest.mark.asyncio
    async def test_next_on_last_page_is_noop(self, controller, source):
        await controller.jump_to_chapter(3)
        before = controller.position

        after = await controller.next_page()

        assert after == before
        assert controller.state is ControllerState.READY
        assert source.calls == [3]

    @pytest.mark.asyncio
    async def test_previous_on_first_page_is_noop(self, controller):
        await controller.jump_to_chapter(1)
        before = controller.position

        assert await controller.previous_page() == before

    @pytest.mark.asyncio
    async def test_navigation_before_load(self, controller):
        """Without a loaded chapter there is nothing to move through."""
        assert await controller.next_page() is None
        assert await controller.previous_page() is None
        assert controller.state is ControllerState.IDLE

    @pytest.mark.asyncio
    async def test_anchor_follows_navigation(self, controller):
        await controller.jump_to_chapter(1)
        assert controller.anchor == 1
        await controller.next_page()
        assert controller.anchor == 3


class TestGoToPage:
    """Test direct page addressing."""

    @pytest.mark.asyncio
    async def test_go_to_page(self, controller):
        await controller.jump_to_chapter(2)
        position = controller.go_to_page(3)

        assert position.page_number == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page_number", [0, 4, -1])
    async def test_out_of_range(self, controller, page_number):
        """Out-of-range pages are rejected and the position does not move."""
        await controller.jump_to_chapter(2)
        controller.go_to_page(2)
        before = controller.position

        with pytest.raises(InvalidTarget) as exc_info:
            controller.go_to_page(page_number)

        assert exc_info.value.valid_range == (1, 3)
        assert controller.position == before

    def test_no_pages_loaded(self, controller):
        with pytest.raises(InvalidTarget):
            controller.go_to_page(1)


class TestGoToVerse:
    """Test opening a chapter at a specific verse."""

    @pytest.mark.asyncio
    async def test_go_to_verse(self, controller):
        position = await controller.go_to_verse(2, 3)

        assert (position.chapter_id, position.page_number) == (2, 3)
        assert controller.anchor == 6

    @pytest.mark.asyncio
    async def test_verse_mid_page(self, controller):
        position = await controller.go_to_verse(1, 2)
        assert position.page_number == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("verse_number", [0, 4])
    async def test_invalid_verse(self, controller, verse_number):
        with pytest.raises(InvalidTarget):
            await controller.go_to_verse(2, verse_number)


class TestFailures:
    """Test fetch failures and recovery."""

    @pytest.mark.asyncio
    async def test_fetch_failure_sets_error(self, controller, source):
        source.fail(2)

        with pytest.raises(FetchFailure):
            await controller.jump_to_chapter(2)

        assert controller.state is ControllerState.ERROR
        assert isinstance(controller.error, FetchFailure)

    @pytest.mark.asyncio
    async def test_recovery_after_failure(self, controller, source):
        """A retry after the source recovers succeeds."""
        source.fail(2)
        with pytest.raises(FetchFailure):
            await controller.jump_to_chapter(2)

        source.recover(2)
        position = await controller.jump_to_chapter(2)

        assert position.chapter_id == 2
        assert controller.state is ControllerState.READY
        assert controller.error is None

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_position(self, controller, source):
        """Failing to cross into the next chapter leaves the reader where they were."""
        await controller.jump_to_chapter(1)
        await controller.next_page()
        source.fail(2)

        with pytest.raises(FetchFailure):
            await controller.next_page()

        assert _where(controller) == (1, 2, 2)

    @pytest.mark.asyncio
    async def test_directory_failure(self, source):
        class BrokenDirectory:
            async def list_chapters(self):
                raise TimeoutError("directory timed out")

        controller = PaginationController(VerseCache(source), BrokenDirectory(), capacity=100)

        with pytest.raises(FetchFailure):
            await controller.open()
        assert controller.state is ControllerState.ERROR

    @pytest.mark.asyncio
    async def test_empty_directory(self, source):
        controller = PaginationController(VerseCache(source), StaticChapterDirectory([]), capacity=100)
        with pytest.raises(FetchFailure):
            await controller.jump_to_chapter(1)

    @pytest.mark.asyncio
    async def test_corrupt_chapter_sets_error(self, controller, source):
        """A chapter with a verse gap is surfaced, not cached, and the reader stays put."""
        await controller.jump_to_chapter(1)
        intact = source.fetch_chapter

        async def skip_second_verse(chapter_id):
            verses = await intact(chapter_id)
            return [v for v in verses if v.verse_number != 2]

        source.fetch_chapter = skip_second_verse

        with pytest.raises(CorruptVerseSequence):
            await controller.jump_to_chapter(2)

        assert controller.state is ControllerState.ERROR
        assert isinstance(controller.error, CorruptVerseSequence)
        assert _where(controller) == (1, 1, 2)
        assert controller.cache.status(2) is CacheStatus.ABSENT


class TestStaleResults:
    """Test that superseded requests never move the reader."""

    @pytest.mark.asyncio
    async def test_late_result_is_dropped(self, controller, source):
        gate = source.hold(2)
        slow = asyncio.ensure_future(controller.jump_to_chapter(2))
        await asyncio.sleep(0)

        await controller.jump_to_chapter(3)
        gate.set()
        await slow

        assert _where(controller) == (3, 1, 1)
        assert controller.state is ControllerState.READY

    @pytest.mark.asyncio
    async def test_late_failure_is_dropped(self, controller, source):
        """An error for a superseded request does not put the controller in ERROR."""
        gate = source.hold(2)
        source.fail(2)
        slow = asyncio.ensure_future(controller.jump_to_chapter(2))
        await asyncio.sleep(0)

        await controller.jump_to_chapter(1)
        gate.set()
        result = await slow

        assert result.chapter_id == 1
        assert controller.state is ControllerState.READY

    @pytest.mark.asyncio
    async def test_page_move_supersedes_chapter_load(self, controller, source):
        """Moving inside the current chapter cancels the effect of a pending jump."""
        await controller.jump_to_chapter(2)
        gate = source.hold(3)
        slow = asyncio.ensure_future(controller.jump_to_chapter(3))
        await asyncio.sleep(0)

        controller.go_to_page(2)
        gate.set()
        await slow

        assert _where(controller) == (2, 2, 3)

    @pytest.mark.asyncio
    async def test_invalid_page_does_not_supersede_pending_jump(self, controller, source):
        """A rejected page target leaves an earlier pending jump in charge."""
        await controller.jump_to_chapter(1)
        gate = source.hold(3)
        slow = asyncio.ensure_future(controller.jump_to_chapter(3))
        await asyncio.sleep(0)

        with pytest.raises(InvalidTarget) as exc_info:
            await controller.jump_to_chapter(1, 3)
        gate.set()
        await slow

        assert exc_info.value.valid_range == (1, 2)
        assert _where(controller) == (3, 1, 1)
        assert controller.state is ControllerState.READY


class TestPrefetch:
    """Test neighbour prefetching."""

    @pytest.fixture
    def prefetching(self, source, directory):
        settings = SahifaSettings(page_capacity=100, prefetch_neighbours=True)
        return PaginationController(VerseCache(source), directory, settings=settings)

    @pytest.mark.asyncio
    async def test_neighbours_are_prefetched(self, prefetching, source):
        await prefetching.jump_to_chapter(2)
        await prefetching.wait_for_prefetch()

        assert prefetching.cache.status(1) is CacheStatus.CACHED
        assert prefetching.cache.status(3) is CacheStatus.CACHED
        assert sorted(source.calls) == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_prefetched_chapter_is_not_refetched(self, prefetching, source):
        await prefetching.jump_to_chapter(2)
        await prefetching.wait_for_prefetch()

        await prefetching.jump_to_chapter(3)
        await prefetching.wait_for_prefetch()

        assert sorted(source.calls) == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_prefetch_failure_is_silent(self, prefetching, source):
        source.fail(3)

        await prefetching.jump_to_chapter(2)
        await prefetching.wait_for_prefetch()

        assert prefetching.state is ControllerState.READY
        assert prefetching.cache.status(3) is CacheStatus.ABSENT

    @pytest.mark.asyncio
    async def test_disabled(self, controller, source):
        await controller.jump_to_chapter(2)
        await controller.wait_for_prefetch()
        assert source.calls == [2]


class TestRepagination:
    """Test capacity changes."""

    @pytest.fixture
    def long_chapter(self, make_source, texts, settings):
        source = make_source({1: texts(*[300] * 6)})
        directory = StaticChapterDirectory(source.chapters())
        return PaginationController(VerseCache(source), directory, capacity=1000, settings=settings)

    @pytest.mark.asyncio
    async def test_anchor_survives_capacity_change(self, long_chapter):
        """Verse 4 is on page 2 at capacity 1000 and still on page 2 at 700."""
        await long_chapter.jump_to_chapter(1)
        long_chapter.go_to_page(2)
        assert long_chapter.anchor == 4
        assert long_chapter.total_pages == 2

        position = long_chapter.set_capacity(700)

        assert (position.page_number, position.total_pages) == (2, 3)
        assert long_chapter.current_page.contains(4)

    @pytest.mark.asyncio
    async def test_repeated_changes_keep_anchor(self, long_chapter):
        """Going 1000 -> 700 -> 1000 returns to the same page instead of drifting back."""
        await long_chapter.jump_to_chapter(1)
        long_chapter.go_to_page(2)

        long_chapter.set_capacity(700)
        assert long_chapter.current_page.first_verse.global_index == 3
        position = long_chapter.set_capacity(1000)

        assert long_chapter.anchor == 4
        assert (position.page_number, position.total_pages) == (2, 2)

    def test_capacity_before_load(self, controller):
        assert controller.set_capacity(500) is None
        assert controller.capacity == 500

    @pytest.mark.parametrize("capacity", [0, -10])
    def test_invalid_capacity(self, controller, capacity):
        with pytest.raises(ValueError):
            controller.set_capacity(capacity)

    @pytest.mark.parametrize("capacity", [0, -10])
    def test_invalid_initial_capacity(self, source, directory, settings, capacity):
        """An explicit capacity of zero is rejected rather than replaced by the default."""
        with pytest.raises(ValueError):
            PaginationController(VerseCache(source), directory, capacity=capacity, settings=settings)


class TestReset:
    """Test controller reset."""

    @pytest.mark.asyncio
    async def test_reset(self, controller, source):
        await controller.jump_to_chapter(2)
        controller.reset()

        assert controller.position is None
        assert controller.state is ControllerState.IDLE
        assert len(controller.cache) == 0

        await controller.jump_to_chapter(2)
        assert source.calls == [2, 2]
