"""
Verse data model.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ChapterName(BaseModel):
    """Name metadata a verse carries for its chapter."""

    primary: str = Field(..., description="Chapter name in the canonical script", min_length=1)
    secondary: Optional[str] = Field(default=None, description="Translated chapter name")
    roman: Optional[str] = Field(default=None, description="Romanized chapter name")

    model_config = {"frozen": True}


class Verse(BaseModel):
    """
    Represents a single verse (ayah) of the corpus.

    Verses are ordered twice: by verse_number inside their chapter and by
    global_index across the whole corpus.

    Attributes:
        chapter_number: Chapter (surah) the verse belongs to
        verse_number: Verse number within the chapter (1-based)
        global_index: Corpus-wide verse number (1-based)
        text_primary: Text in the canonical script
        text_secondary: Optional translation
        chapter_name: Optional name metadata of the chapter
        juz_number: Optional juz (1-30) the verse falls in
        sajdah: Whether the verse carries a prostration mark
    """

    chapter_number: int = Field(
        ...,
        description="Chapter number",
        ge=1,
    )
    verse_number: int = Field(
        ...,
        description="Verse number within the chapter (1-based)",
        ge=1,
    )
    global_index: int = Field(
        ...,
        description="Corpus-wide verse index (1-based)",
        ge=1,
    )
    text_primary: str = Field(
        ...,
        description="Verse text in the canonical script",
        min_length=1,
    )
    text_secondary: Optional[str] = Field(
        default=None,
        description="Translated verse text",
    )
    chapter_name: Optional[ChapterName] = Field(
        default=None,
        description="Name metadata of the verse's chapter",
    )
    juz_number: Optional[int] = Field(
        default=None,
        description="Juz (1-30) the verse falls in",
        ge=1,
        le=30,
    )
    sajdah: bool = Field(
        default=False,
        description="Whether the verse carries a prostration mark",
    )

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "chapter_number": 1,
                    "verse_number": 1,
                    "global_index": 1,
                    "text_primary": "بِسْمِ اللَّهِ الرَّحْمَٰنِ الرَّحِيمِ",
                    "text_secondary": "In the name of Allah, the Entirely Merciful, the Especially Merciful.",
                    "chapter_name": {"primary": "الفاتحة", "roman": "Al-Fatiha"},
                    "juz_number": 1,
                }
            ]
        },
    }

    @property
    def is_chapter_start(self) -> bool:
        """Whether this is the first verse of its chapter."""
        return self.verse_number == 1

    def __str__(self) -> str:
        return f"Verse({self.chapter_number}:{self.verse_number})"

    def __repr__(self) -> str:
        return (
            f"Verse(global_index={self.global_index}, "
            f"chapter_number={self.chapter_number}, verse_number={self.verse_number})"
        )
