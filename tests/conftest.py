"""
Shared pytest fixtures for the QuranLife test suite.

Provides an in-memory scripture source, a manually driven clock and a seeded
random source so engine behaviour can be tested without network access.
"""

from __future__ import annotations

import asyncio
import random
from typing import Callable, Optional

import pytest

from quranlife.cache import TTLCache
from quranlife.config import ScriptureSourceConfig
from quranlife.engine import GoalMatchingEngine
from quranlife.guidance import GuidanceSynthesizer
from quranlife.models import ChapterInfo, ScriptureMatch
from quranlife.scripture import ScriptureAdapter

# ============================================================================
# Test Tier Configuration
# ============================================================================


def pytest_configure(config):
    """Register custom pytest markers for test tiers.

    Test Tiers:
    - smoke: Quick sanity tests
    - integration: Several real components wired together (still offline)
    - slow: Long-running tests
    """
    config.addinivalue_line("markers", "smoke: quick sanity tests for fast CI feedback")
    config.addinivalue_line(
        "markers", "integration: tests wiring several components together (no network)"
    )
    config.addinivalue_line("markers", "slow: long-running tests (>30 seconds)")


# ============================================================================
# Test doubles
# ============================================================================


def make_match(
    number: int,
    surah_number: int = 2,
    ayah: int = 1,
    text_en: str = "",
    text_ar: str = "",
    surah_name: str = "Al-Baqara",
) -> ScriptureMatch:
    return ScriptureMatch(
        number=number,
        number_in_surah=ayah,
        surah_number=surah_number,
        surah_name=surah_name,
        text_ar=text_ar,
        text_en=text_en,
    )


class ManualClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeScriptureSource:
    """In-memory ScriptureSource.

    Unknown references are synthesized so random-verse picks always resolve.
    Set ``verse_error`` / ``search_error`` / ``audio_error`` to an exception
    instance to make the corresponding call fail.
    """

    def __init__(self) -> None:
        self.verses: dict[tuple[int, int], ScriptureMatch] = {}
        self.search_results: dict[str, list[ScriptureMatch]] = {}
        self.verse_error: Optional[Exception] = None
        self.search_error: Optional[Exception] = None
        self.audio_error: Optional[Exception] = None
        self.calls: list[tuple] = []
        self.closed = False

    async def fetch_verse(self, chapter: int, verse: int) -> ScriptureMatch:
        self.calls.append(("verse", chapter, verse))
        if self.verse_error is not None:
            raise self.verse_error
        if (chapter, verse) in self.verses:
            return self.verses[(chapter, verse)]
        return make_match(
            number=chapter * 1000 + verse,
            surah_number=chapter,
            ayah=verse,
            text_en=f"Text of {chapter}:{verse}",
            text_ar=f"نص {chapter}:{verse}",
            surah_name=f"Surah {chapter}",
        )

    async def fetch_audio(self, chapter: int, verse: int) -> Optional[str]:
        self.calls.append(("audio", chapter, verse))
        if self.audio_error is not None:
            raise self.audio_error
        return f"https://cdn.example.org/audio/{chapter}_{verse}.mp3"

    async def fetch_chapter(self, chapter: int) -> ChapterInfo:
        self.calls.append(("chapter", chapter))
        if self.verse_error is not None:
            raise self.verse_error
        return ChapterInfo(
            number=chapter,
            name=f"سورة {chapter}",
            english_name=f"Surah {chapter}",
            english_name_translation="",
            revelation_type="Meccan",
            number_of_ayahs=7,
        )

    async def search(self, query: str, language: str = "en") -> list[ScriptureMatch]:
        self.calls.append(("search", query, language))
        # Yield like a real request so concurrent callers interleave
        await asyncio.sleep(0)
        if self.search_error is not None:
            raise self.search_error
        return list(self.search_results.get(query, []))

    async def close(self) -> None:
        self.closed = True

    def count(self, kind: str) -> int:
        return sum(1 for call in self.calls if call[0] == kind)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def manual_clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def fake_source() -> FakeScriptureSource:
    return FakeScriptureSource()


@pytest.fixture
def match_factory() -> Callable[..., ScriptureMatch]:
    return make_match


@pytest.fixture
def adapter(fake_source, manual_clock, seeded_rng) -> ScriptureAdapter:
    config = ScriptureSourceConfig()
    return ScriptureAdapter(
        source=fake_source,
        config=config,
        cache=TTLCache(maxsize=32, ttl_seconds=config.cache_ttl_seconds, clock=manual_clock),
        synthesizer=GuidanceSynthesizer(seeded_rng),
        rng=seeded_rng,
    )


@pytest.fixture
def engine(adapter) -> GoalMatchingEngine:
    return GoalMatchingEngine(adapter=adapter, synthesizer=adapter.synthesizer)
