"""
Shared fixtures and test configuration for Sahifa tests.
"""

import asyncio
import csv

import pytest
from sahifa.config import SahifaSettings
from sahifa.core import PaginationController, VerseCache
from sahifa.models import Verse
from sahifa.sources import InMemoryPositionStore, InMemoryVerseSource, StaticChapterDirectory


def make_texts(*weights: int) -> list[str]:
    """Verse texts whose character count equals the given weights."""
    return ["ن" * w for w in weights]


class ScriptedSource(InMemoryVerseSource):
    """In-memory source that records calls and can hold or fail chapters."""

    def __init__(self, verses):
        super().__init__(verses)
        self.calls: list[int] = []
        self.range_calls: list[tuple[int, int]] = []
        self.gates: dict[int, asyncio.Event] = {}
        self.failures: dict[int, Exception] = {}

    def hold(self, chapter_id: int) -> asyncio.Event:
        """Block fetches of a chapter until the returned event is set."""
        gate = asyncio.Event()
        self.gates[chapter_id] = gate
        return gate

    def fail(self, chapter_id: int, error: Exception | None = None) -> None:
        self.failures[chapter_id] = error or ConnectionError("network unreachable")

    def recover(self, chapter_id: int) -> None:
        self.failures.pop(chapter_id, None)

    async def fetch_chapter(self, chapter_id: int) -> list[Verse]:
        self.calls.append(chapter_id)
        gate = self.gates.get(chapter_id)
        if gate is not None:
            await gate.wait()
        if chapter_id in self.failures:
            raise self.failures[chapter_id]
        return await super().fetch_chapter(chapter_id)

    async def fetch_range(self, start: int, end: int) -> list[Verse]:
        self.range_calls.append((start, end))
        return await super().fetch_range(start, end)


@pytest.fixture
def texts():
    """Factory for verse texts of given character weights."""
    return make_texts


@pytest.fixture
def normalization_test_cases():
    """Verse texts with diacritics paired with their normalized form."""
    return [
        ("بِسْمِ اللَّهِ الرَّحْمَٰنِ الرَّحِيمِ", "بسم الله الرحمن الرحيم"),
        ("ٱلْحَمْدُ لِلَّهِ رَبِّ ٱلْعَٰلَمِينَ", "الحمد لله رب العلمين"),
        ("مَٰلِكِ يَوْمِ ٱلدِّينِ", "ملك يوم الدين"),
        ("قُلْ أَعُوذُ بِرَبِّ ٱلنَّاسِ", "قل اعوذ برب الناس"),
    ]


@pytest.fixture
def sample_verses():
    """Chapter 1 with three verses of weight 40 each, then chapter 2 verse 1."""
    return [
        Verse(chapter_number=1, verse_number=1, global_index=1, text_primary="ا" * 40),
        Verse(chapter_number=1, verse_number=2, global_index=2, text_primary="ب" * 40),
        Verse(chapter_number=1, verse_number=3, global_index=3, text_primary="ت" * 40),
        Verse(chapter_number=2, verse_number=1, global_index=4, text_primary="ث" * 40),
    ]


@pytest.fixture
def corpus():
    """
    Three-chapter corpus; at capacity 100 chapter 1 has 2 pages,
    chapter 2 has 3 pages and chapter 3 has 1 page.
    """
    return {
        1: make_texts(40, 40, 40),
        2: make_texts(60, 60, 60),
        3: make_texts(30, 30),
    }


@pytest.fixture
def make_source():
    """Factory for scripted sources over a custom corpus."""
    return ScriptedSource.from_texts


@pytest.fixture
def source(corpus):
    return ScriptedSource.from_texts(corpus)


@pytest.fixture
def directory(source):
    return StaticChapterDirectory(source.chapters())


CSV_HEADER = (
    "surah_no,ayah_no_surah,ayah_no_quran,ayah_ar,ayah_en,"
    "surah_name_ar,surah_name_en,surah_name_roman,juz_no,sajah_ayah"
)

CSV_ROWS = [
    (1, 1, 1, "بِسْمِ اللَّهِ الرَّحْمَٰنِ الرَّحِيمِ", "In the name of Allah, the Entirely Merciful, the Especially Merciful.", "الفاتحة", "The Opening", "Al-Fatiha", 1, "False"),
    (1, 2, 2, "الْحَمْدُ لِلَّهِ رَبِّ الْعَالَمِينَ", "All praise is due to Allah, Lord of the worlds.", "الفاتحة", "The Opening", "Al-Fatiha", 1, "False"),
    (1, 3, 3, "الرَّحْمَٰنِ الرَّحِيمِ", "The Entirely Merciful, the Especially Merciful,", "الفاتحة", "The Opening", "Al-Fatiha", 1, "False"),
    (2, 1, 4, "الم", "Alif, Lam, Meem.", "البقرة", "The Cow", "Al-Baqarah", 1, "False"),
    (2, 2, 5, "ذَٰلِكَ الْكِتَابُ لَا رَيْبَ ۛ فِيهِ ۛ هُدًى لِّلْمُتَّقِينَ", "This is the Book about which there is no doubt, a guidance for those conscious of Allah", "البقرة", "The Cow", "Al-Baqarah", 1, "False"),
    (2, 3, 6, "الَّذِينَ يُؤْمِنُونَ بِالْغَيْبِ وَيُقِيمُونَ الصَّلَاةَ وَمِمَّا رَزَقْنَاهُمْ يُنفِقُونَ", "Who believe in the unseen, establish prayer, and spend out of what We have provided for them", "البقرة", "The Cow", "Al-Baqarah", 1, "False"),
    (2, 4, 7, "وَالَّذِينَ يُؤْمِنُونَ بِمَا أُنزِلَ إِلَيْكَ وَمَا أُنزِلَ مِن قَبْلِكَ وَبِالْآخِرَةِ هُمْ يُوقِنُونَ", "And who believe in what has been revealed to you and what was revealed before you, and of the Hereafter they are certain.", "البقرة", "The Cow", "Al-Baqarah", 1, "True"),
]


@pytest.fixture
def verses_csv(tmp_path):
    """A small CSV corpus: three verses of chapter 1 and four of chapter 2."""
    path = tmp_path / "verses.csv"
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER.split(","))
        writer.writerows(CSV_ROWS)
    return path


@pytest.fixture
def settings():
    """Settings with prefetch off so tests control every fetch."""
    return SahifaSettings(page_capacity=100, compact_page_capacity=80, prefetch_neighbours=False)


@pytest.fixture
def controller(source, directory, settings):
    return PaginationController(VerseCache(source), directory, capacity=100, settings=settings)


@pytest.fixture
def store():
    return InMemoryPositionStore()
