"""
Scripture lookup: the AlQuran.cloud client and the adapter the engine uses.

``AlQuranCloudClient`` speaks HTTP and raises ``SourceUnavailableError`` /
``MalformedResponseError``. ``ScriptureAdapter`` wraps any ``ScriptureSource``,
turns its records into enriched ``Verse`` objects and decides which failures
are fatal:

- ``get_verse_by_reference`` / ``get_chapter`` / ``get_random_verse`` raise,
  the caller supplies the fallback
- ``search`` / ``search_verses`` / ``get_thematic_collection`` never raise;
  failures become empty results with an explicit ``RetrievalStatus``
"""

from __future__ import annotations

import asyncio
import random
from typing import Any, Optional, Protocol, runtime_checkable
from urllib.parse import quote

import aiohttp

from quranlife.bundled import PRAYER_FALLBACK_VERSES
from quranlife.cache import CacheBackend, TTLCache, make_cache_key
from quranlife.config import ScriptureSourceConfig, get_scripture_config
from quranlife.exceptions import (
    InputValidationError,
    MalformedResponseError,
    ScriptureSourceError,
    SourceUnavailableError,
)
from quranlife.guidance import GuidanceSynthesizer
from quranlife.http_client import create_client_session, timeout_from_seconds
from quranlife.logging_config import get_logger
from quranlife.models import (
    ChapterInfo,
    Language,
    RetrievalStatus,
    ScriptureMatch,
    SearchOutcome,
    ThematicCollection,
    Verse,
)
from quranlife.resilience import CircuitBreaker, CircuitOpenError
from quranlife.templates import (
    CURATED_CHAPTERS,
    DEFAULT_THEME,
    THEME_SEARCH_TERMS,
    chapter_context,
)

logger = get_logger(__name__)

PRAYER_THEME = "prayer"


@runtime_checkable
class ScriptureSource(Protocol):
    """The remote provider of verse text, chapter metadata, search and audio."""

    async def fetch_verse(self, chapter: int, verse: int) -> ScriptureMatch: ...

    async def fetch_audio(self, chapter: int, verse: int) -> Optional[str]: ...

    async def fetch_chapter(self, chapter: int) -> ChapterInfo: ...

    async def search(self, query: str, language: Language = "en") -> list[ScriptureMatch]: ...

    async def close(self) -> None: ...


# =============================================================================
# HTTP client
# =============================================================================


def _require(payload: Any, key: str, endpoint: str) -> Any:
    if not isinstance(payload, dict) or key not in payload:
        raise MalformedResponseError(endpoint, f"missing field '{key}'")
    return payload[key]


def _positive_int(value: Any, name: str, endpoint: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(endpoint, f"field '{name}' is not an integer") from e
    if number < 1:
        raise MalformedResponseError(endpoint, f"field '{name}' must be >= 1, got {number}")
    return number


class AlQuranCloudClient:
    """Async client for the AlQuran.cloud v1 REST API.

    The client owns its aiohttp session unless one is passed in. All calls
    go through a circuit breaker; once it opens, calls fail immediately with
    ``SourceUnavailableError`` until the cooldown passes.
    """

    def __init__(
        self,
        config: ScriptureSourceConfig | None = None,
        session: aiohttp.ClientSession | None = None,
        breaker: CircuitBreaker | None = None,
    ):
        self.config = config or get_scripture_config()
        self._session = session
        self._owns_session = session is None
        self.breaker = breaker or CircuitBreaker(
            name="alquran-cloud",
            failure_threshold=self.config.failure_threshold,
            cooldown_seconds=self.config.cooldown_seconds,
        )

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = create_client_session(
                timeout=timeout_from_seconds(
                    self.config.timeout_seconds, self.config.connect_timeout_seconds
                )
            )
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def _get_data(self, endpoint: str, allow_not_found: bool = False) -> Any:
        """GET an endpoint and return the ``data`` member of the envelope.

        Returns None for a 404 when ``allow_not_found`` is set; the search
        endpoint answers "nothing found" that way.
        """
        url = f"{self.config.base_url.rstrip('/')}/{endpoint.lstrip('/')}"
        try:
            async with self.breaker.protected_call():
                async with self._get_session().get(url) as response:
                    if response.status == 404 and allow_not_found:
                        return None
                    if response.status != 200:
                        raise SourceUnavailableError(
                            endpoint, f"HTTP {response.status}", status=response.status
                        )
                    try:
                        payload = await response.json(content_type=None)
                    except (aiohttp.ContentTypeError, ValueError) as e:
                        raise MalformedResponseError(endpoint, "response is not valid JSON") from e
                    if not isinstance(payload, dict) or payload.get("code") != 200:
                        raise MalformedResponseError(endpoint, "unexpected response envelope")
                    return _require(payload, "data", endpoint)
        except CircuitOpenError as e:
            raise SourceUnavailableError(endpoint, str(e)) from e
        except asyncio.TimeoutError as e:
            raise SourceUnavailableError(endpoint, "request timed out") from e
        except aiohttp.ClientError as e:
            raise SourceUnavailableError(endpoint, str(e) or type(e).__name__) from e

    def _parse_ayah(self, item: Any, endpoint: str) -> tuple[int, int, int, str, str]:
        surah = _require(item, "surah", endpoint)
        return (
            _positive_int(_require(item, "number", endpoint), "number", endpoint),
            _positive_int(_require(item, "numberInSurah", endpoint), "numberInSurah", endpoint),
            _positive_int(_require(surah, "number", endpoint), "surah.number", endpoint),
            str(surah.get("englishName") or surah.get("name") or ""),
            str(_require(item, "text", endpoint)),
        )

    async def fetch_verse(self, chapter: int, verse: int) -> ScriptureMatch:
        editions = f"{self.config.arabic_edition},{self.config.english_edition}"
        endpoint = f"ayah/{chapter}:{verse}/editions/{editions}"
        data = await self._get_data(endpoint)
        if not isinstance(data, list):
            raise MalformedResponseError(endpoint, "expected a list of editions")

        by_edition: dict[str, Any] = {}
        for item in data:
            edition = _require(item, "edition", endpoint)
            by_edition[str(_require(edition, "identifier", endpoint))] = item
        arabic = by_edition.get(self.config.arabic_edition)
        english = by_edition.get(self.config.english_edition)
        if arabic is None or english is None:
            raise MalformedResponseError(endpoint, "missing Arabic or English text for verse")

        number, in_surah, surah_number, surah_name, text_ar = self._parse_ayah(arabic, endpoint)
        return ScriptureMatch(
            number=number,
            number_in_surah=in_surah,
            surah_number=surah_number,
            surah_name=surah_name,
            text_ar=text_ar,
            text_en=str(_require(english, "text", endpoint)),
            juz=arabic.get("juz"),
            page=arabic.get("page"),
        )

    async def fetch_audio(self, chapter: int, verse: int) -> Optional[str]:
        endpoint = f"ayah/{chapter}:{verse}/{self.config.audio_edition}"
        data = await self._get_data(endpoint)
        if not isinstance(data, dict):
            raise MalformedResponseError(endpoint, "expected an ayah object")
        return data.get("audio") or None

    async def fetch_chapter(self, chapter: int) -> ChapterInfo:
        endpoint = f"surah/{chapter}"
        return self._parse_chapter(await self._get_data(endpoint), endpoint)

    async def fetch_chapters(self) -> list[ChapterInfo]:
        endpoint = "surah"
        data = await self._get_data(endpoint)
        if not isinstance(data, list):
            raise MalformedResponseError(endpoint, "expected a list of chapters")
        return [self._parse_chapter(item, endpoint) for item in data]

    def _parse_chapter(self, data: Any, endpoint: str) -> ChapterInfo:
        return ChapterInfo(
            number=_positive_int(_require(data, "number", endpoint), "number", endpoint),
            name=str(_require(data, "name", endpoint)),
            english_name=str(_require(data, "englishName", endpoint)),
            english_name_translation=str(data.get("englishNameTranslation", "")),
            revelation_type=str(data.get("revelationType", "")),
            number_of_ayahs=_positive_int(
                _require(data, "numberOfAyahs", endpoint), "numberOfAyahs", endpoint
            ),
        )

    async def search(self, query: str, language: Language = "en") -> list[ScriptureMatch]:
        edition = self.config.arabic_edition if language == "ar" else self.config.english_edition
        endpoint = f"search/{quote(query, safe='')}/all/{edition}"
        data = await self._get_data(endpoint, allow_not_found=True)
        if data is None:
            return []
        matches = _require(data, "matches", endpoint)
        if not isinstance(matches, list):
            raise MalformedResponseError(endpoint, "'matches' is not a list")

        results = []
        for item in matches:
            number, in_surah, surah_number, surah_name, text = self._parse_ayah(item, endpoint)
            results.append(
                ScriptureMatch(
                    number=number,
                    number_in_surah=in_surah,
                    surah_number=surah_number,
                    surah_name=surah_name,
                    text_ar=text if language == "ar" else "",
                    text_en=text if language != "ar" else "",
                )
            )
        return results


# =============================================================================
# Adapter
# =============================================================================


class ScriptureAdapter:
    """Normalizes scripture source records into verses and thematic collections."""

    def __init__(
        self,
        source: ScriptureSource | None = None,
        config: ScriptureSourceConfig | None = None,
        cache: CacheBackend[ThematicCollection] | None = None,
        synthesizer: GuidanceSynthesizer | None = None,
        rng: random.Random | None = None,
    ):
        self.config = config or get_scripture_config()
        self.source: ScriptureSource = source or AlQuranCloudClient(self.config)
        self.cache: CacheBackend[ThematicCollection] = cache or TTLCache(
            maxsize=64, ttl_seconds=self.config.cache_ttl_seconds
        )
        self.synthesizer = synthesizer or GuidanceSynthesizer()
        self.rng = rng or random.Random()

    async def close(self) -> None:
        await self.source.close()

    async def __aenter__(self) -> ScriptureAdapter:
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    def to_verse(
        self,
        match: ScriptureMatch,
        theme: str = DEFAULT_THEME,
        context: Optional[str] = None,
        audio: Optional[str] = None,
    ) -> Verse:
        """Build an enriched, immutable Verse from a source record."""
        return Verse(
            id=match.number,
            surah=match.surah_name,
            surah_number=match.surah_number,
            ayah=match.number_in_surah,
            text_ar=match.text_ar,
            text_en=match.text_en,
            theme=(theme,),
            reflection=self.synthesizer.reflection(theme),
            practical_guidance=self.synthesizer.theme_guidance(theme)[:2],
            audio=audio or match.audio,
            context=context,
            life_application=self.synthesizer.life_application(theme),
        )

    async def get_audio_url(self, chapter: int, verse: int) -> Optional[str]:
        """Recitation URL for a verse, or None when it cannot be resolved."""
        try:
            return await self.source.fetch_audio(chapter, verse)
        except ScriptureSourceError as e:
            logger.debug("Audio unavailable", chapter=chapter, verse=verse, error=str(e))
            return None

    async def get_verse_by_reference(
        self,
        chapter: int,
        verse: int,
        theme: str = DEFAULT_THEME,
        context: Optional[str] = None,
        with_audio: Optional[bool] = None,
    ) -> Verse:
        """Fetch one verse in both languages.

        Raises:
            InputValidationError: chapter or verse below 1
            SourceUnavailableError: network failure, bad status or timeout
            MalformedResponseError: unexpected payload
        """
        if chapter < 1:
            raise InputValidationError("chapter", "must be >= 1", chapter)
        if verse < 1:
            raise InputValidationError("verse", "must be >= 1", verse)

        if with_audio is None:
            with_audio = self.config.fetch_audio
        if with_audio:
            match, audio = await asyncio.gather(
                self.source.fetch_verse(chapter, verse),
                self.get_audio_url(chapter, verse),
            )
        else:
            match, audio = await self.source.fetch_verse(chapter, verse), None
        return self.to_verse(match, theme=theme, context=context, audio=audio)

    async def get_chapter(self, chapter: int) -> ChapterInfo:
        if chapter < 1:
            raise InputValidationError("chapter", "must be >= 1", chapter)
        return await self.source.fetch_chapter(chapter)

    async def get_random_verse(self) -> Verse:
        """A random verse from the curated chapter pool, with its chapter label attached."""
        chapter, max_verses = self.rng.choice(CURATED_CHAPTERS)
        verse = self.rng.randint(1, max_verses)
        ctx = chapter_context(chapter)
        logger.debug("Picked random verse", chapter=chapter, verse=verse, label=ctx.label)
        return await self.get_verse_by_reference(
            chapter,
            verse,
            theme=ctx.theme,
            context=f"{ctx.label}: {ctx.description}",
        )

    async def search(self, query: str, language: Language = "en") -> SearchOutcome:
        """Free-text search that reports failures as a status instead of raising."""
        query = " ".join((query or "").split())
        if not query:
            return SearchOutcome(status=RetrievalStatus.NO_MATCH)
        try:
            matches = await self.source.search(query, language)
        except SourceUnavailableError as e:
            logger.warning("Verse search failed", query=query, error=str(e))
            return SearchOutcome(status=RetrievalStatus.SOURCE_UNAVAILABLE, error=str(e))
        except MalformedResponseError as e:
            logger.warning("Verse search returned malformed data", query=query, error=str(e))
            return SearchOutcome(status=RetrievalStatus.MALFORMED_RESPONSE, error=str(e))

        status = RetrievalStatus.OK if matches else RetrievalStatus.NO_MATCH
        logger.debug("Verse search finished", query=query, matches=len(matches))
        return SearchOutcome(matches=tuple(matches), status=status)

    async def search_verses(self, query: str, language: Language = "en") -> list[ScriptureMatch]:
        return list((await self.search(query, language)).matches)

    async def get_thematic_collection(self, theme: str) -> ThematicCollection:
        """Verses and guidance for a theme, cached for ``cache_ttl_seconds``."""
        key = make_cache_key("thematic", theme)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        outcome = await self.search(THEME_SEARCH_TERMS.get(theme, theme))
        verses = tuple(
            self.to_verse(m, theme) for m in outcome.matches[: self.config.max_thematic_verses]
        )
        status = outcome.status
        if not verses and theme == PRAYER_THEME:
            verses = await self._curated_prayer_verses()
            status = RetrievalStatus.FALLBACK

        collection = ThematicCollection(
            theme=theme,
            description=self.synthesizer.describe(theme),
            verses=verses,
            practical_guidance=self.synthesizer.theme_guidance(theme),
            recommended_actions=self.synthesizer.recommended_actions(theme),
            status=status,
        )
        self.cache.set(key, collection)
        logger.info(
            "Built thematic collection", theme=theme, verses=len(verses), status=status.value
        )
        return collection

    async def _curated_prayer_verses(self) -> tuple[Verse, ...]:
        """The five curated prayer verses, live where possible, bundled otherwise."""
        results = await asyncio.gather(
            *(
                self.get_verse_by_reference(v.surah_number, v.ayah, theme=PRAYER_THEME, with_audio=False)
                for v in PRAYER_FALLBACK_VERSES
            ),
            return_exceptions=True,
        )
        verses = []
        for bundled, result in zip(PRAYER_FALLBACK_VERSES, results):
            if isinstance(result, Verse):
                verses.append(result)
            elif isinstance(result, ScriptureSourceError):
                verses.append(bundled)
            elif isinstance(result, BaseException):
                raise result
        return tuple(verses)
