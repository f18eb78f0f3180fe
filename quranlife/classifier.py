"""
Theme classification for free-text goals.

Scoring per keyword:
- +1.0 for every theme whose synonym list contains the keyword exactly
- +0.5 for every theme where the keyword is a substring of one of that
  theme's practical-guidance templates (case-insensitive)

The strictly highest total wins. Ties go to the theme that appears first in
the theme order, and a text with no positive score maps to "guidance".
"""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from quranlife.keywords import extract_keywords
from quranlife.templates import DEFAULT_THEME, PRACTICAL_GUIDANCE, THEME_ORDER, THEME_SYNONYMS

SYNONYM_WEIGHT = 1.0
TEMPLATE_WEIGHT = 0.5


class ThemeClassifier:
    """Maps keywords to exactly one theme from a fixed, ordered theme list."""

    def __init__(
        self,
        theme_order: Sequence[str] = THEME_ORDER,
        synonyms: Mapping[str, Iterable[str]] = THEME_SYNONYMS,
        templates: Mapping[str, Iterable[str]] = PRACTICAL_GUIDANCE,
        default_theme: str = DEFAULT_THEME,
    ):
        if default_theme not in theme_order:
            raise ValueError(f"Default theme {default_theme!r} must be in the theme order")
        self.theme_order = tuple(theme_order)
        self.default_theme = default_theme
        self._synonyms = {t: frozenset(synonyms.get(t, ())) for t in self.theme_order}
        self._templates = {
            t: tuple(s.lower() for s in templates.get(t, ())) for t in self.theme_order
        }

    def scores(self, keywords: Iterable[str]) -> dict[str, float]:
        """Per-theme totals, in theme order."""
        totals = {theme: 0.0 for theme in self.theme_order}
        for keyword in keywords:
            word = keyword.lower()
            for theme in self.theme_order:
                if word in self._synonyms[theme]:
                    totals[theme] += SYNONYM_WEIGHT
                if any(word in template for template in self._templates[theme]):
                    totals[theme] += TEMPLATE_WEIGHT
        return totals

    def classify(self, keywords: Iterable[str]) -> str:
        best_theme = self.default_theme
        best_score = 0.0
        for theme, score in self.scores(keywords).items():
            # Strict comparison keeps the earliest theme on ties
            if score > best_score:
                best_theme, best_score = theme, score
        return best_theme

    def classify_text(self, text: str) -> str:
        return self.classify(extract_keywords(text))


_default_classifier: ThemeClassifier | None = None


def classify_theme(keywords: Iterable[str]) -> str:
    """Classify with the default theme table."""
    global _default_classifier
    if _default_classifier is None:
        _default_classifier = ThemeClassifier()
    return _default_classifier.classify(keywords)
