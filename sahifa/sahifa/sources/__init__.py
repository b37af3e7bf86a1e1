"""
Verse sources, chapter directories and position stores.
"""

from sahifa.sources.base import ChapterDirectory, PositionStore, VerseSource
from sahifa.sources.memory import (
    BundledChapterDirectory,
    InMemoryPositionStore,
    InMemoryVerseSource,
    StaticChapterDirectory,
)
from sahifa.sources.files import CsvVerseSource, JsonPositionStore, load_verses_csv

__all__ = [
    "VerseSource",
    "ChapterDirectory",
    "PositionStore",
    "InMemoryVerseSource",
    "StaticChapterDirectory",
    "BundledChapterDirectory",
    "InMemoryPositionStore",
    "CsvVerseSource",
    "JsonPositionStore",
    "load_verses_csv",
]
