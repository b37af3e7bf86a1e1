"""
Pydantic data models for Sahifa library.

These models represent the core data structures used throughout the library:
- Verse: A single verse with its chapter and corpus-wide position
- ChapterMeta: Chapter metadata
- Page: A capacity-bounded run of verses
- ReaderPosition: Where the reader is within the active chapter
"""

from sahifa.models.verse import ChapterName, Verse
from sahifa.models.chapter import CHAPTER_COUNT, CHAPTER_TABLE, ChapterMeta
from sahifa.models.page import ChapterBoundary, Page, ReaderPosition, Theme

__all__ = [
    "Verse",
    "ChapterName",
    "ChapterMeta",
    "CHAPTER_COUNT",
    "CHAPTER_TABLE",
    "Page",
    "ChapterBoundary",
    "ReaderPosition",
    "Theme",
]
