"""
In-memory implementations of the collaborator interfaces.
"""

from collections.abc import Iterable, Mapping, Sequence

from sahifa.models import CHAPTER_COUNT, ChapterMeta, ChapterName, Verse
from sahifa.sources.base import ChapterDirectory, PositionStore, VerseSource


class InMemoryVerseSource(VerseSource):
    """
    Serves verses from a list held in memory.

    Example:
        source = InMemoryVerseSource.from_texts({1: ["...", "..."], 2: ["..."]})
        verses = await source.fetch_chapter(1)
    """

    def __init__(self, verses: Iterable[Verse]):
        self._verses = sorted(verses, key=lambda v: v.global_index)
        self._by_chapter: dict[int, list[Verse]] = {}
        for verse in self._verses:
            self._by_chapter.setdefault(verse.chapter_number, []).append(verse)

    @classmethod
    def from_texts(
        cls,
        texts: Mapping[int, Sequence[str]],
        with_names: bool = True,
    ) -> "InMemoryVerseSource":
        """
        Build a corpus from per-chapter verse texts.

        Global indices are assigned in chapter order starting at 1. When
        with_names is set, chapters covered by the bundled table get their
        name attached to every verse.

        Args:
            texts: Mapping of chapter id to its verse texts in order
            with_names: Attach bundled chapter names

        Returns:
            InMemoryVerseSource over the generated verses
        """
        verses = []
        global_index = 1
        for chapter_id in sorted(texts):
            name = None
            if with_names and chapter_id <= CHAPTER_COUNT:
                meta = ChapterMeta.from_id(chapter_id)
                name = ChapterName(primary=meta.name_primary, roman=meta.name_roman)
            for verse_number, text in enumerate(texts[chapter_id], start=1):
                verses.append(
                    Verse(
                        chapter_number=chapter_id,
                        verse_number=verse_number,
                        global_index=global_index,
                        text_primary=text,
                        chapter_name=name,
                    )
                )
                global_index += 1
        return cls(verses)

    @property
    def verses(self) -> list[Verse]:
        return list(self._verses)

    @property
    def chapter_ids(self) -> list[int]:
        return sorted(self._by_chapter)

    async def fetch_chapter(self, chapter_id: int) -> list[Verse]:
        if chapter_id not in self._by_chapter:
            raise LookupError(f"Chapter {chapter_id} not found")
        return list(self._by_chapter[chapter_id])

    async def fetch_range(self, start: int, end: int) -> list[Verse]:
        return [v for v in self._verses if start <= v.global_index <= end]

    def chapters(self) -> list[ChapterMeta]:
        """Chapter metadata derived from the held verses."""
        result = []
        for chapter_id, verses in sorted(self._by_chapter.items()):
            name = verses[0].chapter_name
            result.append(
                ChapterMeta(
                    id=chapter_id,
                    name_primary=name.primary if name else str(chapter_id),
                    name_secondary=name.secondary if name else None,
                    name_roman=name.roman if name else None,
                    verse_count=len(verses),
                )
            )
        return result


class StaticChapterDirectory(ChapterDirectory):
    """Serves a fixed list of chapters."""

    def __init__(self, chapters: Iterable[ChapterMeta]):
        self._chapters = sorted(chapters, key=lambda c: c.id)

    async def list_chapters(self) -> list[ChapterMeta]:
        return list(self._chapters)


class BundledChapterDirectory(StaticChapterDirectory):
    """Serves the built-in table of all 114 chapters."""

    def __init__(self):
        super().__init__(ChapterMeta.from_id(i) for i in range(1, CHAPTER_COUNT + 1))


class InMemoryPositionStore(PositionStore):
    """Position store backed by a dict; nothing survives the process."""

    def __init__(self, initial: Mapping[str, int] | None = None):
        self.values: dict[str, int] = dict(initial or {})

    async def get(self, key: str) -> int | None:
        return self.values.get(key)

    async def set(self, key: str, value: int) -> None:
        self.values[key] = value

    async def delete(self, key: str) -> None:
        self.values.pop(key, None)
