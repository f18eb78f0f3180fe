"""
quranlife: Quranic guidance for personal goals

Matches free-text goals to a theme, retrieves verses for it from the
AlQuran.cloud API and attaches practical guidance to each verse.

FEATURES:
- Keyword extraction and ordered theme classification
- Verse search with a thematic fallback and a curated prayer list
- Relevance scoring by word overlap
- Practical steps, dua, related habits, reflection and life application
- Daily verse from a curated chapter pool, with a bundled offline fallback
- "Load more" pagination over the candidate pool

Usage:
    import asyncio
    from quranlife import GoalMatchingEngine

    async def main():
        async with GoalMatchingEngine() as engine:
            for result in await engine.find_verses_for_goal("Pray on time"):
                print(result.verse.reference, result.practical_steps[0])

    asyncio.run(main())
"""

from __future__ import annotations

import importlib
from typing import Any

from quranlife.__version__ import __version__

_EXPORT_MAP = {
    'AlQuranCloudClient': ('quranlife.scripture', 'AlQuranCloudClient'),
    'CircuitBreaker': ('quranlife.resilience', 'CircuitBreaker'),
    'ContextualGuidance': ('quranlife.models', 'ContextualGuidance'),
    'DailyVerse': ('quranlife.models', 'DailyVerse'),
    'GoalMatchReport': ('quranlife.models', 'GoalMatchReport'),
    'GoalMatchResult': ('quranlife.models', 'GoalMatchResult'),
    'GoalMatchingEngine': ('quranlife.engine', 'GoalMatchingEngine'),
    'GuidanceSynthesizer': ('quranlife.guidance', 'GuidanceSynthesizer'),
    'InMemoryProfileStore': ('quranlife.profile_store', 'InMemoryProfileStore'),
    'JSONFileProfileStore': ('quranlife.profile_store', 'JSONFileProfileStore'),
    'QuranLifeError': ('quranlife.exceptions', 'QuranLifeError'),
    'RateLimiter': ('quranlife.security', 'RateLimiter'),
    'RetrievalStatus': ('quranlife.models', 'RetrievalStatus'),
    'ScriptureAdapter': ('quranlife.scripture', 'ScriptureAdapter'),
    'ScriptureSourceConfig': ('quranlife.config', 'ScriptureSourceConfig'),
    'ThematicCollection': ('quranlife.models', 'ThematicCollection'),
    'ThemeClassifier': ('quranlife.classifier', 'ThemeClassifier'),
    'Verse': ('quranlife.models', 'Verse'),
    'extract_keywords': ('quranlife.keywords', 'extract_keywords'),
    'get_scripture_config': ('quranlife.config', 'get_scripture_config'),
    'relevance_score': ('quranlife.scoring', 'relevance_score'),
}


def __getattr__(name: str) -> Any:
    """Lazily import public symbols so ``import quranlife`` stays cheap."""
    try:
        module_name, attr_name = _EXPORT_MAP[name]
    except KeyError as exc:
        raise AttributeError(f"module 'quranlife' has no attribute {name!r}") from exc
    module = importlib.import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(set(globals()) | set(__all__))


__all__ = ["__version__", *_EXPORT_MAP]
