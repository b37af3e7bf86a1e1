"""
File-backed collaborators: a CSV verse corpus and a JSON position store.

The CSV layout follows the verses table the reader app queries:

    surah_no,ayah_no_surah,ayah_no_quran,ayah_ar,ayah_en,
    surah_name_ar,surah_name_en,surah_name_roman,juz_no,sajah_ayah

Only the first four columns are required.
"""

import asyncio
import csv
import json
import logging
from pathlib import Path

from sahifa.models import ChapterMeta, ChapterName, Verse
from sahifa.sources.base import ChapterDirectory, PositionStore, VerseSource
from sahifa.sources.memory import InMemoryVerseSource

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("surah_no", "ayah_no_surah", "ayah_no_quran", "ayah_ar")

_TRUE_VALUES = {"1", "true", "yes", "t"}


def _optional(row: dict[str, str], column: str) -> str | None:
    value = (row.get(column) or "").strip()
    return value or None


def _row_to_verse(row: dict[str, str]) -> Verse:
    name = None
    name_ar = _optional(row, "surah_name_ar")
    if name_ar:
        name = ChapterName(
            primary=name_ar,
            secondary=_optional(row, "surah_name_en"),
            roman=_optional(row, "surah_name_roman"),
        )
    juz = _optional(row, "juz_no")
    return Verse(
        chapter_number=int(row["surah_no"]),
        verse_number=int(row["ayah_no_surah"]),
        global_index=int(row["ayah_no_quran"]),
        text_primary=row["ayah_ar"],
        text_secondary=_optional(row, "ayah_en"),
        chapter_name=name,
        juz_number=int(juz) if juz else None,
        sajdah=(_optional(row, "sajah_ayah") or "").lower() in _TRUE_VALUES,
    )


def load_verses_csv(path: str | Path) -> list[Verse]:
    """
    Read a verse corpus from CSV.

    Args:
        path: Path to the CSV file

    Returns:
        Verses ordered by global index

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If required columns are missing
    """
    path = Path(path)
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        missing = [c for c in REQUIRED_COLUMNS if c not in (reader.fieldnames or [])]
        if missing:
            raise ValueError(f"{path} is missing columns: {', '.join(missing)}")
        verses = [_row_to_verse(row) for row in reader]

    logger.info("Loaded %d verses from %s", len(verses), path)
    return sorted(verses, key=lambda v: v.global_index)


class CsvVerseSource(VerseSource, ChapterDirectory):
    """
    Verse source and chapter directory over a CSV corpus.

    The file is read once, off the event loop, on first use.

    Example:
        source = CsvVerseSource("data/verses.csv")
        chapters = await source.list_chapters()
        verses = await source.fetch_chapter(1)
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._corpus: InMemoryVerseSource | None = None
        self._lock = asyncio.Lock()

    async def _load(self) -> InMemoryVerseSource:
        async with self._lock:
            if self._corpus is None:
                loop = asyncio.get_running_loop()
                verses = await loop.run_in_executor(None, load_verses_csv, self.path)
                self._corpus = InMemoryVerseSource(verses)
        return self._corpus

    async def fetch_chapter(self, chapter_id: int) -> list[Verse]:
        corpus = await self._load()
        return await corpus.fetch_chapter(chapter_id)

    async def fetch_range(self, start: int, end: int) -> list[Verse]:
        corpus = await self._load()
        return await corpus.fetch_range(start, end)

    async def list_chapters(self) -> list[ChapterMeta]:
        corpus = await self._load()
        return corpus.chapters()


class JsonPositionStore(PositionStore):
    """
    Position store persisted as a flat JSON object on disk.

    Every write rewrites the whole file; the store holds a handful of keys.
    Writes through one instance are serialised so concurrent updates keep
    each other's keys.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _read(self) -> dict[str, int]:
        if not self.path.exists():
            return {}
        with open(self.path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed position file %s", self.path)
            return {}
        return data

    def _write(self, data: dict[str, int]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        tmp.replace(self.path)

    async def get(self, key: str) -> int | None:
        loop = asyncio.get_running_loop()
        data = await loop.run_in_executor(None, self._read)
        value = data.get(key)
        return value if isinstance(value, int) and not isinstance(value, bool) else None

    async def set(self, key: str, value: int) -> None:
        loop = asyncio.get_running_loop()
        async with self._lock:
            data = await loop.run_in_executor(None, self._read)
            data[key] = int(value)
            await loop.run_in_executor(None, self._write, data)

    async def delete(self, key: str) -> None:
        loop = asyncio.get_running_loop()
        async with self._lock:
            data = await loop.run_in_executor(None, self._read)
            if data.pop(key, None) is not None:
                await loop.run_in_executor(None, self._write, data)
