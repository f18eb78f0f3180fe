"""
Guidance synthesis: practical steps, dua, related habits, reflection and
life application for a theme and a goal.

Everything except the reflection and life-application sentences is a pure
function of (theme, goal text). Those two are drawn uniformly from per-theme
templates using the injected ``random.Random``; seed it for repeatable output.
"""

from __future__ import annotations

import random
from typing import Optional

from quranlife.models import GuidanceBundle
from quranlife.templates import (
    DEFAULT_RECOMMENDED_ACTIONS,
    DEFAULT_THEME,
    DUA_RECOMMENDATIONS,
    HABITS_FALLBACK_THEME,
    LIFE_APPLICATIONS,
    PRACTICAL_GUIDANCE,
    RECOMMENDED_ACTIONS,
    REFLECTIONS,
    RELATED_HABITS,
    THEME_DESCRIPTIONS,
)

THEME_STEPS = 2


def goal_specific_steps(goal_text: str) -> tuple[str, str, str]:
    """The three steps that quote the goal back to the user."""
    goal = " ".join(goal_text.split()) or "your goal"
    return (
        f"Set a realistic timeline for \"{goal}\" and review it weekly",
        f"Make dua specifically for \"{goal}\" after each prayer",
        f"Break \"{goal}\" down into small daily actions you can start today",
    )


class GuidanceSynthesizer:
    """Builds practical guidance from the per-theme template tables."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def practical_steps(self, theme: str, goal_text: str) -> tuple[str, ...]:
        templates = PRACTICAL_GUIDANCE.get(theme) or PRACTICAL_GUIDANCE[DEFAULT_THEME]
        return tuple(templates[:THEME_STEPS]) + goal_specific_steps(goal_text)

    def dua_recommendation(self, theme: str) -> str:
        return DUA_RECOMMENDATIONS.get(theme) or DUA_RECOMMENDATIONS[DEFAULT_THEME]

    def related_habits(self, theme: str) -> tuple[str, ...]:
        # Falls back to the prayer habits, unlike the other tables
        return RELATED_HABITS.get(theme) or RELATED_HABITS[HABITS_FALLBACK_THEME]

    def reflection(self, theme: str) -> str:
        return self.rng.choice(REFLECTIONS.get(theme) or REFLECTIONS[DEFAULT_THEME])

    def life_application(self, theme: str) -> str:
        return self.rng.choice(LIFE_APPLICATIONS.get(theme) or LIFE_APPLICATIONS[DEFAULT_THEME])

    def theme_guidance(self, theme: str) -> tuple[str, ...]:
        """All practical-guidance templates for a theme, without goal steps."""
        return PRACTICAL_GUIDANCE.get(theme) or PRACTICAL_GUIDANCE[DEFAULT_THEME]

    def describe(self, theme: str) -> str:
        return THEME_DESCRIPTIONS.get(theme, f"Islamic guidance for {theme}")

    def recommended_actions(self, theme: str) -> tuple[str, ...]:
        return RECOMMENDED_ACTIONS.get(theme, DEFAULT_RECOMMENDED_ACTIONS)

    def synthesize(self, theme: str, goal_text: str) -> GuidanceBundle:
        return GuidanceBundle(
            theme=theme,
            practical_steps=self.practical_steps(theme, goal_text),
            dua_recommendation=self.dua_recommendation(theme),
            related_habits=self.related_habits(theme),
            reflection=self.reflection(theme),
            life_application=self.life_application(theme),
        )
