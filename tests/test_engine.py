"""Tests for GoalMatchingEngine."""

import random

import pytest

from quranlife.bundled import FALLBACK_DAILY_VERSE
from quranlife.config import ScriptureSourceConfig
from quranlife.engine import GoalMatchingEngine, build_goal_text
from quranlife.exceptions import InputValidationError, MalformedResponseError, SourceUnavailableError
from quranlife.guidance import GuidanceSynthesizer
from quranlife.models import RetrievalStatus
from quranlife.scripture import ScriptureAdapter
from quranlife.templates import DUA_RECOMMENDATIONS


class TestBuildGoalText:
    """Test goal text assembly."""

    def test_joins_non_empty_parts(self):
        """Empty parts are skipped and whitespace collapsed."""
        assert build_goal_text("  Read   Quran ", "", "spiritual") == "Read Quran spiritual"

    def test_title_only(self):
        assert build_goal_text("Exercise") == "Exercise"


class TestMatchGoal:
    """Test the two retrieval paths."""

    @pytest.mark.asyncio
    async def test_search_path_caps_at_three(self, engine, fake_source, match_factory):
        """Direct search hits win and keep source order."""
        fake_source.search_results["Be patient"] = [match_factory(n, 2, n) for n in (9, 4, 7, 1)]

        report = await engine.match_goal("Be patient")

        assert report.theme == "patience"
        assert report.path == "search"
        assert report.status is RetrievalStatus.OK
        assert [r.verse.id for r in report.results] == [9, 4, 7]
        assert fake_source.count("search") == 1

    @pytest.mark.asyncio
    async def test_thematic_fallback_caps_at_two(self, engine, fake_source, match_factory):
        """No direct hit falls back to the theme collection."""
        fake_source.search_results["patience"] = [match_factory(n, 2, n) for n in (11, 12, 13)]

        report = await engine.match_goal("Be patient")

        assert report.path == "thematic"
        assert [r.verse.id for r in report.results] == [11, 12]
        assert ("search", "patience", "en") in fake_source.calls

    @pytest.mark.asyncio
    async def test_nothing_found(self, engine):
        """Both paths empty gives no results and NO_MATCH."""
        report = await engine.match_goal("Call my parents")
        assert report.theme == "family"
        assert report.results == ()
        assert report.status is RetrievalStatus.NO_MATCH

    @pytest.mark.asyncio
    async def test_source_failure_reported(self, engine, fake_source):
        """A failing source yields empty results with a failure status."""
        fake_source.search_error = SourceUnavailableError("search", "HTTP 503", status=503)
        report = await engine.match_goal("Call my parents")
        assert report.results == ()
        assert report.status is RetrievalStatus.SOURCE_UNAVAILABLE

    @pytest.mark.asyncio
    async def test_prayer_goal_uses_curated_fallback(self, engine, fake_source):
        """Prayer goals still get verses when search finds nothing."""
        fake_source.search_error = SourceUnavailableError("search", "down")
        fake_source.verse_error = SourceUnavailableError("ayah", "down")

        report = await engine.match_goal("Pray five times daily")

        assert report.theme == "prayer"
        assert report.status is RetrievalStatus.FALLBACK
        assert [r.verse.reference for r in report.results] == ["2:45", "2:153"]

    @pytest.mark.asyncio
    async def test_category_contributes_to_theme(self, engine):
        """Description and category are part of the classified text."""
        report = await engine.match_goal("Gym", "", "workout")
        assert report.theme == "health"

    @pytest.mark.asyncio
    async def test_result_guidance(self, engine, fake_source, match_factory):
        """Each result carries a bounded score and the theme's guidance."""
        fake_source.search_results["Be patient"] = [
            match_factory(160, 2, 153, text_en="Seek help through patience and prayer")
        ]
        (result,) = await engine.find_verses_for_goal("Be patient")

        assert 0.0 <= result.relevance_score <= 1.0
        assert len(result.practical_steps) == 5
        assert any('"Be patient"' in step for step in result.practical_steps)
        assert result.dua_recommendation == DUA_RECOMMENDATIONS["patience"]
        assert result.related_habits
        assert result.reflection
        assert result.life_application

    @pytest.mark.asyncio
    async def test_seeded_engines_agree(self, fake_source, match_factory):
        """The same seed produces the same synthesized text."""
        fake_source.search_results["Be patient"] = [match_factory(1)]
        reflections = []
        for _ in range(2):
            rng = random.Random(99)
            synthesizer = GuidanceSynthesizer(rng)
            adapter = ScriptureAdapter(
                source=fake_source, config=ScriptureSourceConfig(), synthesizer=synthesizer, rng=rng
            )
            engine = GoalMatchingEngine(adapter=adapter, synthesizer=synthesizer)
            (result,) = await engine.find_verses_for_goal("Be patient")
            reflections.append((result.reflection, result.life_application, result.verse.reflection))
        assert reflections[0] == reflections[1]


class TestDailyVerse:
    """Test the daily verse and its fallback."""

    @pytest.mark.asyncio
    async def test_live_verse(self, engine):
        """A successful pick is not a fallback."""
        daily = await engine.get_daily_verse_result()
        assert daily.is_fallback is False
        assert daily.status is RetrievalStatus.OK
        assert daily.verse.context

    @pytest.mark.asyncio
    async def test_unavailable_source_serves_ayat_al_kursi(self, engine, fake_source):
        """Any source failure falls back to 2:255."""
        fake_source.verse_error = SourceUnavailableError("ayah", "timeout")
        daily = await engine.get_daily_verse_result()
        assert daily.is_fallback is True
        assert daily.status is RetrievalStatus.SOURCE_UNAVAILABLE
        assert daily.verse is FALLBACK_DAILY_VERSE
        assert daily.verse.reference == "2:255"
        assert len(daily.verse.practical_guidance) == 3
        assert "timeout" in daily.error

    @pytest.mark.asyncio
    async def test_malformed_response_status(self, engine, fake_source):
        """Malformed payloads are reported distinctly."""
        fake_source.verse_error = MalformedResponseError("ayah", "missing field 'text'")
        daily = await engine.get_daily_verse_result()
        assert daily.status is RetrievalStatus.MALFORMED_RESPONSE

    @pytest.mark.asyncio
    async def test_get_daily_verse_returns_verse(self, engine, fake_source):
        fake_source.verse_error = SourceUnavailableError("ayah", "down")
        assert (await engine.get_daily_verse()).reference == "2:255"


class TestLoadMore:
    """Test paging through further guidance."""

    @pytest.fixture
    def pooled(self, fake_source, match_factory):
        # search gives [1, 2], the collection gives [2, 3, 4]; pool is [1, 2, 3, 4]
        fake_source.search_results["Be patient"] = [match_factory(1, 2, 1), match_factory(2, 2, 2)]
        fake_source.search_results["patience"] = [
            match_factory(2, 2, 2),
            match_factory(3, 2, 3),
            match_factory(4, 2, 4),
        ]
        return fake_source

    @pytest.mark.asyncio
    async def test_first_batch(self, engine, pooled):
        results = await engine.load_more("Be patient")
        assert [r.verse.id for r in results] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_offset(self, engine, pooled):
        """Offset skips already-shown pool entries."""
        results = await engine.load_more("Be patient", offset=3)
        assert [r.verse.id for r in results] == [4]

    @pytest.mark.asyncio
    async def test_exclusions(self, engine, pooled):
        """Excluded ids are dropped before the batch is taken."""
        results = await engine.load_more("Be patient", exclude_ids=[1, 3])
        assert [r.verse.id for r in results] == [2, 4]

    @pytest.mark.asyncio
    async def test_offset_and_exclusions(self, engine, pooled):
        results = await engine.load_more("Be patient", offset=1, exclude_ids={2}, batch_size=2)
        assert [r.verse.id for r in results] == [3, 4]

    @pytest.mark.asyncio
    async def test_past_the_end(self, engine, pooled):
        assert await engine.load_more("Be patient", offset=10) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kwargs", [{"offset": -1}, {"batch_size": 0}])
    async def test_invalid_paging(self, engine, kwargs):
        with pytest.raises(InputValidationError):
            await engine.load_more("Be patient", **kwargs)


class TestContextualGuidance:
    """Test guidance across several challenges."""

    @pytest.mark.asyncio
    async def test_deduplicates_across_challenges(self, engine, fake_source, match_factory):
        """Two challenges on the same theme do not repeat anything."""
        fake_source.search_results["fear"] = [match_factory(n, 3, n) for n in (5, 6, 7)]

        guidance = await engine.get_contextual_guidance(["I feel anxious", "anxious about exams"])

        assert [v.id for v in guidance.verses] == [5, 6]
        assert len(guidance.practical_advice) == len(set(guidance.practical_advice))
        assert len(guidance.practical_advice) == 3
        assert len(guidance.recommended_duas) == 1

    @pytest.mark.asyncio
    async def test_mixed_themes(self, engine, fake_source, match_factory):
        """Different themes contribute their own verses and duas."""
        fake_source.search_results["fear"] = [match_factory(5, 3, 5)]
        fake_source.search_results["parents"] = [match_factory(8, 17, 23), match_factory(5, 3, 5)]

        guidance = await engine.get_contextual_guidance(["anxious", "parents"])

        assert [v.id for v in guidance.verses] == [5, 8]
        assert len(guidance.recommended_duas) == 2
        assert DUA_RECOMMENDATIONS["family"] in guidance.recommended_duas

    @pytest.mark.asyncio
    async def test_no_challenges(self, engine):
        guidance = await engine.get_contextual_guidance([])
        assert guidance.to_dict() == {"verses": [], "practical_advice": [], "recommended_duas": []}


class TestLifecycle:
    """Test closing the engine."""

    @pytest.mark.asyncio
    async def test_async_context_closes_source(self, engine, fake_source):
        async with engine as entered:
            assert entered is engine
        assert fake_source.closed is True
