"""Tests for goal/verse relevance scoring."""

import pytest

from quranlife.models import Verse
from quranlife.scoring import MAX_RELEVANCE, relevance_score


def _verse(text_en: str, reflection: str = "") -> Verse:
    return Verse(
        id=160,
        surah="Al-Baqara",
        surah_number=2,
        ayah=153,
        text_ar="",
        text_en=text_en,
        theme=("patience",),
        reflection=reflection,
    )


class TestRelevanceScore:
    """Test relevance_score."""

    def test_full_overlap_is_capped(self):
        """Matching every goal keyword still scores only 0.95."""
        verse = _verse("Seek help through patience and prayer")
        assert relevance_score("patience prayer", verse) == MAX_RELEVANCE == 0.95

    def test_partial_overlap(self):
        """Score is the matched fraction of goal keywords."""
        verse = _verse("Seek help through patience")
        assert relevance_score("patience xylophone", verse) == pytest.approx(0.5)

    def test_substring_either_direction(self):
        """'pray' matches 'prayer' and 'prayers' matches 'prayer'."""
        verse = _verse("Establish prayer")
        assert relevance_score("pray", verse) == MAX_RELEVANCE
        assert relevance_score("prayers", verse) == MAX_RELEVANCE

    def test_reflection_counts(self):
        """Keywords from the reflection are part of the verse side."""
        verse = _verse("Indeed, Allah is with those", reflection="Patience is light")
        assert relevance_score("patience", verse) == MAX_RELEVANCE

    def test_empty_goal_scores_zero(self):
        """No goal keywords means no relevance."""
        assert relevance_score("", _verse("Seek help through patience")) == 0.0
        assert relevance_score("a b", _verse("Seek help through patience")) == 0.0

    def test_empty_verse_scores_zero(self):
        """A verse without usable words scores 0."""
        assert relevance_score("patience", _verse("", reflection="")) == 0.0

    def test_no_overlap_scores_zero(self):
        """Unrelated words score 0."""
        assert relevance_score("xylophone", _verse("Seek help through patience")) == 0.0

    @pytest.mark.parametrize(
        "goal",
        ["patience", "pray more", "be patient with family", "zzz qqq www", "the the the"],
    )
    def test_always_in_range(self, goal):
        """Scores stay within [0, 0.95]."""
        score = relevance_score(goal, _verse("Seek help through patience and prayer"))
        assert 0.0 <= score <= MAX_RELEVANCE
