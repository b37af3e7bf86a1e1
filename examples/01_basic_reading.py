"""
Basic Reading Example for Sahifa

This example demonstrates the simplest way to use Sahifa:
1. Open a CSV verse corpus
2. Start a reading session (restoring the last position)
3. Turn pages and jump between chapters
4. Inspect the current page
"""

import asyncio

from sahifa.core import ReaderSession, format_arabic_number
from sahifa.sources import CsvVerseSource, JsonPositionStore


def show_page(session):
    page = session.controller.current_page
    position = session.position
    print(f"Chapter {position.chapter_id}, page {position.page_number}/{position.total_pages}")
    if page.chapter_boundary is not None:
        print(f"  == {page.chapter_boundary.name_primary} ==")
    for verse in page.verses:
        print(f"  {verse.text_primary} ({format_arabic_number(verse.verse_number)})")
    print()


async def main():
    # Path to your verse corpus and position file
    source = CsvVerseSource("data/verses.csv")
    store = JsonPositionStore("data/position.json")

    # Step 1: Start a session; the last stored position is restored
    print("Step 1: Opening session...")
    session = await ReaderSession.create(source, source, store)
    show_page(session)

    # Step 2: Turn a few pages (chapter boundaries are crossed automatically)
    print("Step 2: Turning pages...")
    for _ in range(3):
        await session.next_page()
        show_page(session)

    # Step 3: Jump by name; spelling and diacritics do not need to be exact
    print("Step 3: Jumping to Al-Kahf...")
    await session.jump_to_chapter_by_name("kahf")
    show_page(session)

    # Step 4: Jump to a verse
    print("Step 4: Jumping to 2:255...")
    await session.go_to_verse(2, 255)
    show_page(session)

    await session.close()


if __name__ == "__main__":
    asyncio.run(main())
