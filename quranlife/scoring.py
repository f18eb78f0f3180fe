"""Word-overlap relevance between a goal and a verse."""

from __future__ import annotations

from quranlife.keywords import extract_keywords
from quranlife.models import Verse

# Word overlap alone never claims a perfect match.
MAX_RELEVANCE = 0.95


def relevance_score(goal_text: str, verse: Verse) -> float:
    """Score how well a verse's translation and reflection overlap the goal text.

    A goal keyword counts as matched when it is a substring of, or contains,
    any keyword of the verse. The score is the matched fraction of goal
    keywords, capped at ``MAX_RELEVANCE``.

    Returns:
        A float in ``[0.0, 0.95]``.
    """
    goal_keywords = extract_keywords(goal_text)
    verse_keywords = set(extract_keywords(f"{verse.text_en} {verse.reflection}"))
    if not goal_keywords or not verse_keywords:
        return 0.0

    matched = sum(
        1
        for goal_word in goal_keywords
        if any(goal_word in verse_word or verse_word in goal_word for verse_word in verse_keywords)
    )
    return min(MAX_RELEVANCE, matched / max(len(goal_keywords), 1))
