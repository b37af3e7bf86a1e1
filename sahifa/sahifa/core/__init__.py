"""
Core modules for Sahifa library.

This package contains the core logic for:
- Greedy page layout of verse runs
- Chapter-keyed verse caching with single-flight fetches
- Page navigation with request tokens and neighbour prefetch
- Reader sessions with display preferences and durable position

Primary API:
    from sahifa.core import ReaderSession, build_pages

    # Pure layout
    pages = build_pages(verses, capacity=1300)

    # Full reader
    session = await ReaderSession.create(source, directory, store)
    await session.next_page()
"""

# Text utilities
from sahifa.core.arabic import format_arabic_number, normalize_arabic

# Layout
from sahifa.core.weights import WEIGHT_METRICS, get_weight
from sahifa.core.paginator import Paginator, build_pages, locate_page, validate_sequence

# Navigation
from sahifa.core.cache import CacheStatus, RangeCache, VerseCache
from sahifa.core.controller import ControllerState, PaginationController
from sahifa.core.matcher import find_chapter
from sahifa.core.mushaf import MushafPager
from sahifa.core.session import ReaderSession, capacity_for_scale

__all__ = [
    # Layout
    "build_pages",
    "locate_page",
    "validate_sequence",
    "Paginator",
    "get_weight",
    "WEIGHT_METRICS",
    # Navigation
    "VerseCache",
    "RangeCache",
    "CacheStatus",
    "PaginationController",
    "ControllerState",
    "MushafPager",
    "ReaderSession",
    "capacity_for_scale",
    "find_chapter",
    # Text utilities
    "normalize_arabic",
    "format_arabic_number",
]
