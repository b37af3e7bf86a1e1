"""
Page and reader position models.
"""

from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, Field

from sahifa.models.verse import Verse


class Theme(str, Enum):
    """Reader color theme."""

    LIGHT = "light"
    DARK = "dark"


class ChapterBoundary(BaseModel):
    """Header data for a page that opens a chapter."""

    chapter_number: int = Field(..., ge=1)
    name_primary: Optional[str] = None
    name_secondary: Optional[str] = None
    name_roman: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def from_verse(cls, verse: Verse) -> "ChapterBoundary":
        """Build the boundary header from a chapter's first verse."""
        name = verse.chapter_name
        return cls(
            chapter_number=verse.chapter_number,
            name_primary=name.primary if name else None,
            name_secondary=name.secondary if name else None,
            name_roman=name.roman if name else None,
        )


class Page(BaseModel):
    """
    A capacity-bounded, contiguous run of verses shown together.

    Attributes:
        page_number: 1-based page number within its page set
        verses: Non-empty ordered verses on the page
        chapter_boundary: Set when the page opens a chapter
        juz_number: Juz of the first verse, if known
    """

    page_number: int = Field(
        ...,
        description="Page number (1-based)",
        ge=1,
    )
    verses: list[Verse] = Field(
        ...,
        description="Ordered verses on this page",
        min_length=1,
    )
    chapter_boundary: Optional[ChapterBoundary] = Field(
        default=None,
        description="Chapter header data when the first verse opens a chapter",
    )
    juz_number: Optional[int] = Field(
        default=None,
        description="Juz of the first verse",
    )

    model_config = {"frozen": True}

    @property
    def first_verse(self) -> Verse:
        return self.verses[0]

    @property
    def last_verse(self) -> Verse:
        return self.verses[-1]

    @property
    def starts_chapter(self) -> bool:
        """Whether this page opens a chapter."""
        return self.chapter_boundary is not None

    def weight(self, weigh: Callable[[Verse], int]) -> int:
        """Total weight of the page under the given metric."""
        return sum(weigh(verse) for verse in self.verses)

    def contains(self, global_index: int) -> bool:
        """Whether the verse with this global index is on the page."""
        return self.first_verse.global_index <= global_index <= self.last_verse.global_index

    def __str__(self) -> str:
        return f"Page({self.page_number}, {self.first_verse}-{self.last_verse})"


class ReaderPosition(BaseModel):
    """
    Where the reader currently is.

    The page number within the active chapter is the canonical address;
    global_index anchors the position across repagination.
    """

    chapter_id: int = Field(..., ge=1)
    page_number: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=1)
    global_index: int = Field(..., ge=1, description="Global index of the page's first verse")

    model_config = {"frozen": True}

    @property
    def is_first_page(self) -> bool:
        return self.page_number == 1

    @property
    def is_last_page(self) -> bool:
        return self.page_number == self.total_pages

    def __str__(self) -> str:
        return f"ReaderPosition(chapter {self.chapter_id}, page {self.page_number}/{self.total_pages})"
