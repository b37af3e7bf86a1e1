"""
Abstract collaborators the pagination engine talks to.

All I/O goes through these three interfaces; everything else in the
library is in-process computation.
"""

from abc import ABC, abstractmethod

from sahifa.models import ChapterMeta, Verse


class VerseSource(ABC):
    """
    Supplies verses by chapter or by global index range.

    Implementations may raise any exception on transport or lookup errors;
    the cache reports those as FetchFailure.
    """

    @abstractmethod
    async def fetch_chapter(self, chapter_id: int) -> list[Verse]:
        """
        Fetch all verses of a chapter.

        Returns:
            Verses ordered by verse number ascending
        """
        ...

    @abstractmethod
    async def fetch_range(self, start: int, end: int) -> list[Verse]:
        """
        Fetch verses by global index, both bounds inclusive.

        Returns:
            Verses ordered by global index ascending
        """
        ...


class ChapterDirectory(ABC):
    """Lists chapter metadata."""

    @abstractmethod
    async def list_chapters(self) -> list[ChapterMeta]:
        """
        List all chapters.

        Returns:
            Chapters ordered by id ascending
        """
        ...


class PositionStore(ABC):
    """Durable integer key-value store for reader positions."""

    @abstractmethod
    async def get(self, key: str) -> int | None:
        """Read a stored value, None when absent."""
        ...

    @abstractmethod
    async def set(self, key: str, value: int) -> None:
        """Store a value."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a value if present."""
        ...
