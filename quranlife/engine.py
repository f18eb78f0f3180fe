"""
Goal-matching orchestrator for the QuranLife guidance engine.

One matching call runs:

1. classify ``title + description + category`` into a theme
2. search the scripture source with the raw goal text
3. if nothing came back, take the first verses of the theme's collection
4. score each candidate and attach synthesized guidance
5. return results in source order

Results from the thematic fallback are deliberately not re-sorted by score;
both paths return candidates in the order the source produced them.

The engine holds no per-user state. In particular it does not pin the daily
verse to a calendar date; callers that want "one verse per day" cache the
result keyed by date (see ``quranlife.cli``).
"""

from __future__ import annotations

import random
import uuid
from typing import Iterable, Optional

from quranlife.bundled import FALLBACK_DAILY_VERSE
from quranlife.classifier import ThemeClassifier
from quranlife.config import ScriptureSourceConfig
from quranlife.exceptions import InputValidationError, MalformedResponseError, QuranLifeError, ValidationError
from quranlife.guidance import GuidanceSynthesizer
from quranlife.logging_config import LogContext, get_logger, log_function
from quranlife.models import (
    ContextualGuidance,
    DailyVerse,
    GoalMatchReport,
    GoalMatchResult,
    RetrievalStatus,
    Verse,
)
from quranlife.scoring import relevance_score
from quranlife.scripture import ScriptureAdapter

logger = get_logger(__name__)

MAX_SEARCH_RESULTS = 3
MAX_THEMATIC_RESULTS = 2
DEFAULT_BATCH_SIZE = 3
CONTEXTUAL_VERSES_PER_CHALLENGE = 2
CONTEXTUAL_TIPS_PER_CHALLENGE = 3


def build_goal_text(title: str, description: str = "", category: str = "") -> str:
    """Join the goal fields into one whitespace-normalized string."""
    return " ".join(" ".join(part.split()) for part in (title, description, category) if part and part.strip())


def _unique(items: Iterable) -> list:
    seen = set()
    out = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


class GoalMatchingEngine:
    """Entry point tying classification, retrieval, scoring and guidance together.

    Usage:
        async with GoalMatchingEngine() as engine:
            results = await engine.find_verses_for_goal("Pray Fajr on time")
            today = await engine.get_daily_verse()
    """

    def __init__(
        self,
        adapter: ScriptureAdapter | None = None,
        classifier: ThemeClassifier | None = None,
        synthesizer: GuidanceSynthesizer | None = None,
        config: ScriptureSourceConfig | None = None,
        rng: random.Random | None = None,
    ):
        self.synthesizer = synthesizer or GuidanceSynthesizer(rng)
        self.adapter = adapter or ScriptureAdapter(
            config=config, synthesizer=self.synthesizer, rng=rng
        )
        self.classifier = classifier or ThemeClassifier()

    async def close(self) -> None:
        await self.adapter.close()

    async def __aenter__(self) -> GoalMatchingEngine:
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    def classify(self, title: str, description: str = "", category: str = "") -> str:
        return self.classifier.classify_text(build_goal_text(title, description, category))

    def build_result(self, goal_text: str, theme: str, verse: Verse) -> GoalMatchResult:
        """Score a verse against a goal and attach the theme's guidance."""
        bundle = self.synthesizer.synthesize(theme, goal_text)
        return GoalMatchResult(
            verse=verse,
            relevance_score=relevance_score(goal_text, verse),
            practical_steps=bundle.practical_steps,
            dua_recommendation=bundle.dua_recommendation,
            related_habits=bundle.related_habits,
            reflection=bundle.reflection,
            life_application=bundle.life_application,
        )

    @log_function(level="DEBUG")
    async def match_goal(
        self, title: str, description: str = "", category: str = ""
    ) -> GoalMatchReport:
        goal_text = build_goal_text(title, description, category)
        theme = self.classifier.classify_text(goal_text)

        with LogContext(request_id=uuid.uuid4().hex[:12], theme=theme):
            outcome = await self.adapter.search(goal_text)
            if outcome.matches:
                verses = [
                    self.adapter.to_verse(m, theme) for m in outcome.matches[:MAX_SEARCH_RESULTS]
                ]
                path, status = "search", RetrievalStatus.OK
            else:
                collection = await self.adapter.get_thematic_collection(theme)
                verses = list(collection.verses[:MAX_THEMATIC_RESULTS])
                path = "thematic"
                status = collection.status
                if not verses and outcome.status.is_failure:
                    status = outcome.status

            results = tuple(self.build_result(goal_text, theme, v) for v in verses)
            logger.info("Matched goal", path=path, results=len(results), status=status.value)

        return GoalMatchReport(theme=theme, results=results, path=path, status=status)

    async def find_verses_for_goal(
        self, title: str, description: str = "", category: str = ""
    ) -> list[GoalMatchResult]:
        report = await self.match_goal(title, description, category)
        return list(report.results)

    async def get_daily_verse_result(self) -> DailyVerse:
        """A random curated verse, or the bundled 2:255 fallback on any failure."""
        try:
            verse = await self.adapter.get_random_verse()
        except QuranLifeError as e:
            malformed = isinstance(e, (MalformedResponseError, ValidationError))
            status = (
                RetrievalStatus.MALFORMED_RESPONSE if malformed else RetrievalStatus.SOURCE_UNAVAILABLE
            )
            logger.warning("Serving fallback daily verse", error=str(e), status=status.value)
            return DailyVerse(
                verse=FALLBACK_DAILY_VERSE, is_fallback=True, status=status, error=str(e)
            )
        return DailyVerse(verse=verse)

    async def get_daily_verse(self) -> Verse:
        return (await self.get_daily_verse_result()).verse

    async def load_more(
        self,
        title: str,
        description: str = "",
        category: str = "",
        offset: int = 0,
        exclude_ids: Iterable[int] = (),
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> list[GoalMatchResult]:
        """The next batch of guidance entries for a goal.

        Candidates are every search match followed by the theme collection,
        de-duplicated by verse id. The first ``offset`` candidates are
        skipped, as is any verse whose id is in ``exclude_ids``; pass both to
        stay safe if the source reorders results between calls.
        """
        if offset < 0:
            raise InputValidationError("offset", "must be >= 0", offset)
        if batch_size < 1:
            raise InputValidationError("batch_size", "must be >= 1", batch_size)

        goal_text = build_goal_text(title, description, category)
        theme = self.classifier.classify_text(goal_text)
        excluded = set(exclude_ids)

        outcome = await self.adapter.search(goal_text)
        collection = await self.adapter.get_thematic_collection(theme)

        pool: list[Verse] = []
        seen: set[int] = set()
        for verse in [self.adapter.to_verse(m, theme) for m in outcome.matches] + list(collection.verses):
            if verse.id not in seen:
                seen.add(verse.id)
                pool.append(verse)

        batch = [v for v in pool[offset:] if v.id not in excluded][:batch_size]
        logger.debug(
            "Loaded more guidance",
            theme=theme,
            pool=len(pool),
            offset=offset,
            returned=len(batch),
        )
        return [self.build_result(goal_text, theme, v) for v in batch]

    async def get_contextual_guidance(self, challenges: Iterable[str]) -> ContextualGuidance:
        """Verses, tips and duas across several challenges, without duplicates."""
        verses: list[Verse] = []
        advice: list[str] = []
        duas: list[Optional[str]] = []

        for challenge in challenges:
            theme = self.classifier.classify_text(challenge)
            collection = await self.adapter.get_thematic_collection(theme)
            verses.extend(collection.verses[:CONTEXTUAL_VERSES_PER_CHALLENGE])
            advice.extend(self.synthesizer.theme_guidance(theme)[:CONTEXTUAL_TIPS_PER_CHALLENGE])
            duas.append(self.synthesizer.dua_recommendation(theme))

        unique_verses: list[Verse] = []
        seen: set[int] = set()
        for verse in verses:
            if verse.id not in seen:
                seen.add(verse.id)
                unique_verses.append(verse)
        return ContextualGuidance(
            verses=unique_verses,
            practical_advice=_unique(advice),
            recommended_duas=[d for d in _unique(duas) if d],
        )
