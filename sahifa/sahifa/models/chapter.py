"""
Chapter (surah) metadata model.
"""

from typing import Optional

from pydantic import BaseModel, Field

# (Arabic name, romanized name, verse count) per chapter, Hafs numbering
CHAPTER_TABLE: tuple[tuple[str, str, int], ...] = (
    ("الفاتحة", "Al-Fatiha", 7), ("البقرة", "Al-Baqarah", 286),
    ("آل عمران", "Ali 'Imran", 200), ("النساء", "An-Nisa", 176),
    ("المائدة", "Al-Ma'idah", 120), ("الأنعام", "Al-An'am", 165),
    ("الأعراف", "Al-A'raf", 206), ("الأنفال", "Al-Anfal", 75),
    ("التوبة", "At-Tawbah", 129), ("يونس", "Yunus", 109),
    ("هود", "Hud", 123), ("يوسف", "Yusuf", 111),
    ("الرعد", "Ar-Ra'd", 43), ("إبراهيم", "Ibrahim", 52),
    ("الحجر", "Al-Hijr", 99), ("النحل", "An-Nahl", 128),
    ("الإسراء", "Al-Isra", 111), ("الكهف", "Al-Kahf", 110),
    ("مريم", "Maryam", 98), ("طه", "Taha", 135),
    ("الأنبياء", "Al-Anbya", 112), ("الحج", "Al-Hajj", 78),
    ("المؤمنون", "Al-Mu'minun", 118), ("النور", "An-Nur", 64),
    ("الفرقان", "Al-Furqan", 77), ("الشعراء", "Ash-Shu'ara", 227),
    ("النمل", "An-Naml", 93), ("القصص", "Al-Qasas", 88),
    ("العنكبوت", "Al-'Ankabut", 69), ("الروم", "Ar-Rum", 60),
    ("لقمان", "Luqman", 34), ("السجدة", "As-Sajdah", 30),
    ("الأحزاب", "Al-Ahzab", 73), ("سبأ", "Saba", 54),
    ("فاطر", "Fatir", 45), ("يس", "Ya-Sin", 83),
    ("الصافات", "As-Saffat", 182), ("ص", "Sad", 88),
    ("الزمر", "Az-Zumar", 75), ("غافر", "Ghafir", 85),
    ("فصلت", "Fussilat", 54), ("الشورى", "Ash-Shuraa", 53),
    ("الزخرف", "Az-Zukhruf", 89), ("الدخان", "Ad-Dukhan", 59),
    ("الجاثية", "Al-Jathiyah", 37), ("الأحقاف", "Al-Ahqaf", 35),
    ("محمد", "Muhammad", 38), ("الفتح", "Al-Fath", 29),
    ("الحجرات", "Al-Hujurat", 18), ("ق", "Qaf", 45),
    ("الذاريات", "Adh-Dhariyat", 60), ("الطور", "At-Tur", 49),
    ("النجم", "An-Najm", 62), ("القمر", "Al-Qamar", 55),
    ("الرحمن", "Ar-Rahman", 78), ("الواقعة", "Al-Waqi'ah", 96),
    ("الحديد", "Al-Hadid", 29), ("المجادلة", "Al-Mujadila", 22),
    ("الحشر", "Al-Hashr", 24), ("الممتحنة", "Al-Mumtahanah", 13),
    ("الصف", "As-Saf", 14), ("الجمعة", "Al-Jumu'ah", 11),
    ("المنافقون", "Al-Munafiqun", 11), ("التغابن", "At-Taghabun", 18),
    ("الطلاق", "At-Talaq", 12), ("التحريم", "At-Tahrim", 12),
    ("الملك", "Al-Mulk", 30), ("القلم", "Al-Qalam", 52),
    ("الحاقة", "Al-Haqqah", 52), ("المعارج", "Al-Ma'arij", 44),
    ("نوح", "Nuh", 28), ("الجن", "Al-Jinn", 28),
    ("المزمل", "Al-Muzzammil", 20), ("المدثر", "Al-Muddaththir", 56),
    ("القيامة", "Al-Qiyamah", 40), ("الإنسان", "Al-Insan", 31),
    ("المرسلات", "Al-Mursalat", 50), ("النبأ", "An-Naba", 40),
    ("النازعات", "An-Nazi'at", 46), ("عبس", "'Abasa", 42),
    ("التكوير", "At-Takwir", 29), ("الانفطار", "Al-Infitar", 19),
    ("المطففين", "Al-Mutaffifin", 36), ("الانشقاق", "Al-Inshiqaq", 25),
    ("البروج", "Al-Buruj", 22), ("الطارق", "At-Tariq", 17),
    ("الأعلى", "Al-A'la", 19), ("الغاشية", "Al-Ghashiyah", 26),
    ("الفجر", "Al-Fajr", 30), ("البلد", "Al-Balad", 20),
    ("الشمس", "Ash-Shams", 15), ("الليل", "Al-Layl", 21),
    ("الضحى", "Ad-Duhaa", 11), ("الشرح", "Ash-Sharh", 8),
    ("التين", "At-Tin", 8), ("العلق", "Al-'Alaq", 19),
    ("القدر", "Al-Qadr", 5), ("البينة", "Al-Bayyinah", 8),
    ("الزلزلة", "Az-Zalzalah", 8), ("العاديات", "Al-'Adiyat", 11),
    ("القارعة", "Al-Qari'ah", 11), ("التكاثر", "At-Takathur", 8),
    ("العصر", "Al-'Asr", 3), ("الهمزة", "Al-Humazah", 9),
    ("الفيل", "Al-Fil", 5), ("قريش", "Quraysh", 4),
    ("الماعون", "Al-Ma'un", 7), ("الكوثر", "Al-Kawthar", 3),
    ("الكافرون", "Al-Kafirun", 6), ("النصر", "An-Nasr", 3),
    ("المسد", "Al-Masad", 5), ("الإخلاص", "Al-Ikhlas", 4),
    ("الفلق", "Al-Falaq", 5), ("الناس", "An-Nas", 6),
)

CHAPTER_COUNT = len(CHAPTER_TABLE)


class ChapterMeta(BaseModel):
    """
    Represents a chapter (surah) of the corpus.

    Attributes:
        id: Chapter number (1-based)
        name_primary: Name in the canonical script
        name_secondary: Translated name (optional)
        name_roman: Romanized name (optional)
        verse_count: Number of verses in this chapter
        revelation_order: Position in revelation order (optional)
        place_of_origin: Revelation place, passed through unchanged (optional)
    """

    id: int = Field(
        ...,
        description="Chapter number (1-based)",
        ge=1,
    )
    name_primary: str = Field(
        ...,
        description="Chapter name in the canonical script",
    )
    name_secondary: Optional[str] = Field(
        default=None,
        description="Translated chapter name",
    )
    name_roman: Optional[str] = Field(
        default=None,
        description="Romanized chapter name",
    )
    verse_count: int = Field(
        ...,
        description="Total number of verses in this chapter",
        ge=1,
    )
    revelation_order: Optional[int] = Field(
        default=None,
        description="Position of the chapter in revelation order",
        ge=1,
    )
    place_of_origin: Optional[str] = Field(
        default=None,
        description="Revelation place, e.g. 'makki' or 'madani'",
    )

    @classmethod
    def from_id(cls, chapter_id: int) -> "ChapterMeta":
        """
        Create a ChapterMeta instance from its ID using built-in metadata.

        Args:
            chapter_id: Chapter number (1-114)

        Returns:
            ChapterMeta instance with metadata
        """
        if chapter_id < 1 or chapter_id > CHAPTER_COUNT:
            raise ValueError(f"Invalid chapter_id: {chapter_id}. Must be 1-{CHAPTER_COUNT}.")

        name_primary, name_roman, verse_count = CHAPTER_TABLE[chapter_id - 1]
        return cls(
            id=chapter_id,
            name_primary=name_primary,
            name_roman=name_roman,
            verse_count=verse_count,
        )

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": 1,
                    "name_primary": "الفاتحة",
                    "name_secondary": "The Opening",
                    "name_roman": "Al-Fatiha",
                    "verse_count": 7,
                    "revelation_order": 5,
                    "place_of_origin": "makki",
                }
            ]
        },
    }

    def __str__(self) -> str:
        return f"Chapter {self.id}: {self.name_primary}"
