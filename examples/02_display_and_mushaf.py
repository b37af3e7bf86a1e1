"""
Display Settings and Mushaf Numbering Example

Shows:
- How the font scale changes page capacity
- That repagination keeps the reader on the same verse
- Flat 604-page mushaf addressing over verse ranges
"""

import asyncio
import logging

from sahifa import configure
from sahifa.core import MushafPager, ReaderSession, capacity_for_scale
from sahifa.sources import CsvVerseSource, InMemoryPositionStore

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


async def main():
    settings = configure(page_capacity=1300, prefetch_neighbours=True)
    source = CsvVerseSource("data/verses.csv")

    # Capacity at each font scale
    print("Capacity by font scale:")
    for scale in (0.8, 1.0, 1.2, 1.5):
        print(f"  {scale:.1f}x -> {capacity_for_scale(settings.page_capacity, scale)}")
    print()

    session = await ReaderSession.create(source, source, InMemoryPositionStore())
    await session.go_to_verse(2, 100)
    anchor = session.controller.anchor
    print(f"Before: {session.position} (anchor verse {anchor})")

    await session.set_font_scale(1.5)
    print(f"After:  {session.position}")
    print(f"Anchor still visible: {session.controller.current_page.contains(anchor)}")
    print(f"Theme: {session.toggle_theme().value}\n")
    await session.close()

    # Flat mushaf pages
    pager = MushafPager(source, await source.list_chapters())
    print(f"Mushaf: {pager.total_pages} pages of {pager.verses_per_page} verses")
    page = await pager.jump_to_chapter(18)
    first, last = page.first_verse, page.last_verse
    print(f"Al-Kahf starts on page {page.page_number}: "
          f"{first.chapter_number}:{first.verse_number} - {last.chapter_number}:{last.verse_number}")
    await pager.wait_for_prefetch()


if __name__ == "__main__":
    asyncio.run(main())
