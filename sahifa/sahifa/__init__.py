"""
Sahifa - book-style pagination for scripture readers.

Splits verse streams into capacity-bounded pages and navigates them
chapter by chapter, fetching and caching verses as the reader moves.
"""

from sahifa.config import SahifaSettings, configure, get_settings
from sahifa.exceptions import CorruptVerseSequence, FetchFailure, InvalidTarget, SahifaError
from sahifa.models import ChapterMeta, Page, ReaderPosition, Theme, Verse
from sahifa.core import (
    MushafPager,
    PaginationController,
    ReaderSession,
    VerseCache,
    build_pages,
)

__version__ = "0.1.0"

__all__ = [
    "SahifaSettings",
    "configure",
    "get_settings",
    "SahifaError",
    "FetchFailure",
    "InvalidTarget",
    "CorruptVerseSequence",
    "Verse",
    "ChapterMeta",
    "Page",
    "ReaderPosition",
    "Theme",
    "build_pages",
    "VerseCache",
    "PaginationController",
    "ReaderSession",
    "MushafPager",
]
