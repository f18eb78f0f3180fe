"""Tests for theme classification."""

import pytest

from quranlife.classifier import (
    SYNONYM_WEIGHT,
    TEMPLATE_WEIGHT,
    ThemeClassifier,
    classify_theme,
)
from quranlife.templates import DEFAULT_THEME, THEME_ORDER


class TestThemeOrder:
    """Test the fixed theme table."""

    def test_guidance_is_last_and_default(self):
        """The default theme is the final entry of the order."""
        assert THEME_ORDER[-1] == DEFAULT_THEME == "guidance"

    def test_order_has_no_duplicates(self):
        """Every theme appears exactly once."""
        assert len(set(THEME_ORDER)) == len(THEME_ORDER)


class TestScores:
    """Test per-theme score totals."""

    def test_synonym_match_scores_one(self):
        """An exact synonym contributes the synonym weight."""
        scores = ThemeClassifier().scores(["perseverance"])
        assert scores["patience"] == SYNONYM_WEIGHT

    def test_template_substring_scores_half(self):
        """A keyword found inside a template contributes the template weight."""
        classifier = ThemeClassifier(
            theme_order=("alpha", "guidance"),
            synonyms={},
            templates={"alpha": ("Drink more water",)},
        )
        assert classifier.scores(["water"]) == {"alpha": TEMPLATE_WEIGHT, "guidance": 0.0}

    def test_synonym_and_template_add_up(self):
        """A keyword can score both ways for the same theme."""
        classifier = ThemeClassifier(
            theme_order=("alpha", "guidance"),
            synonyms={"alpha": ("water",)},
            templates={"alpha": ("Drink more water",)},
        )
        assert classifier.scores(["water"])["alpha"] == SYNONYM_WEIGHT + TEMPLATE_WEIGHT

    def test_template_match_is_case_insensitive(self):
        """Templates are compared lowercased."""
        classifier = ThemeClassifier(
            theme_order=("alpha", "guidance"),
            synonyms={},
            templates={"alpha": ("Say BISMILLAH first",)},
        )
        assert classifier.scores(["bismillah"])["alpha"] == TEMPLATE_WEIGHT

    def test_scores_follow_theme_order(self):
        """The result dict is keyed in theme order."""
        assert list(ThemeClassifier().scores([])) == list(THEME_ORDER)


class TestClassify:
    """Test classify / classify_text."""

    def test_no_keywords_returns_default(self):
        """An empty keyword list maps to guidance."""
        assert ThemeClassifier().classify([]) == "guidance"

    def test_unknown_words_return_default(self):
        """Words matching nothing map to guidance."""
        assert ThemeClassifier().classify(["qwertyuiop", "zxcvbnm"]) == "guidance"

    def test_prayer_goal(self):
        """A prayer goal maps to prayer."""
        assert ThemeClassifier().classify_text("Pray five times daily") == "prayer"

    def test_family_goal(self):
        """Family words map to family."""
        assert ThemeClassifier().classify_text("Call my parents and visit siblings") == "family"

    def test_anxiety_goal(self):
        """Worry words map to anxiety."""
        assert ThemeClassifier().classify_text("Stop feeling anxious and worried") == "anxiety"

    def test_gym_workout_tie_goes_to_health(self):
        """gym/workout tie between health and fitness; health comes first."""
        classifier = ThemeClassifier()
        scores = classifier.scores(["gym", "workout"])
        assert scores["health"] == scores["fitness"] == 2 * SYNONYM_WEIGHT
        assert classifier.classify(["gym", "workout"]) == "health"

    def test_tie_goes_to_earliest_theme(self):
        """Equal totals resolve to the theme listed first."""
        classifier = ThemeClassifier(
            theme_order=("beta", "alpha", "guidance"),
            synonyms={"alpha": ("word",), "beta": ("word",)},
            templates={},
        )
        assert classifier.classify(["word"]) == "beta"

    def test_result_always_in_order(self):
        """Classification never invents a theme."""
        classifier = ThemeClassifier()
        for text in ("", "gym", "money and debt", "learn arabic", "thankful heart"):
            assert classifier.classify_text(text) in THEME_ORDER

    def test_is_deterministic(self):
        """Same input, same theme."""
        classifier = ThemeClassifier()
        text = "Be patient with my children during hardship"
        assert len({classifier.classify_text(text) for _ in range(5)}) == 1

    def test_uppercase_keywords_are_normalized(self):
        """Keywords passed directly are lowercased before matching."""
        assert ThemeClassifier().classify(["SABR"]) == "patience"

    def test_default_must_be_in_order(self):
        """A default theme outside the order is rejected."""
        with pytest.raises(ValueError, match="must be in the theme order"):
            ThemeClassifier(theme_order=("patience",), default_theme="guidance")


class TestClassifyTheme:
    """Test the module-level helper."""

    def test_uses_default_table(self):
        """classify_theme matches ThemeClassifier().classify."""
        assert classify_theme(["salah"]) == "prayer"
        assert classify_theme([]) == "guidance"
