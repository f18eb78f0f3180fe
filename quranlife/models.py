"""
Core records for the QuranLife guidance engine.

Every record here is request-scoped and immutable: the scorer and the
guidance synthesizer attach derived fields to ``GoalMatchResult``, never to
the ``Verse`` it wraps.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Optional

from quranlife.exceptions import ValidationError

Language = Literal["ar", "en"]
MatchPath = Literal["search", "thematic"]


class RetrievalStatus(Enum):
    """How a retrieval ended.

    Separates "the source answered with nothing" from "the source failed"
    so callers can tell which branch produced what they are rendering.
    """

    OK = "ok"
    NO_MATCH = "no_match"
    SOURCE_UNAVAILABLE = "source_unavailable"
    MALFORMED_RESPONSE = "malformed_response"
    FALLBACK = "fallback"  # Bundled content was served instead

    @property
    def is_failure(self) -> bool:
        return self in (RetrievalStatus.SOURCE_UNAVAILABLE, RetrievalStatus.MALFORMED_RESPONSE)


@dataclass(frozen=True)
class Verse:
    """One normalized verse with bilingual text and guidance metadata."""

    id: int  # global verse number (1..6236)
    surah: str
    surah_number: int
    ayah: int
    text_ar: str
    text_en: str
    theme: tuple[str, ...]
    reflection: str
    practical_guidance: tuple[str, ...] = ()
    audio: Optional[str] = None
    context: Optional[str] = None
    life_application: Optional[str] = None

    def __post_init__(self) -> None:
        if self.surah_number < 1:
            raise ValidationError(
                f"Chapter number must be >= 1, got {self.surah_number}",
                {"surah_number": self.surah_number},
            )
        if self.ayah < 1:
            raise ValidationError(
                f"Verse number must be >= 1, got {self.ayah}", {"ayah": self.ayah}
            )
        if not self.theme:
            raise ValidationError(
                f"Verse {self.reference} needs at least one theme tag",
                {"reference": self.reference},
            )

    @property
    def reference(self) -> str:
        """Chapter:verse reference, e.g. ``2:255``."""
        return f"{self.surah_number}:{self.ayah}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "surah": self.surah,
            "surah_number": self.surah_number,
            "ayah": self.ayah,
            "reference": self.reference,
            "text_ar": self.text_ar,
            "text_en": self.text_en,
            "theme": list(self.theme),
            "reflection": self.reflection,
            "practical_guidance": list(self.practical_guidance),
            "audio": self.audio,
            "context": self.context,
            "life_application": self.life_application,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Verse:
        """Rebuild a verse from ``to_dict`` output (e.g. a cached daily verse)."""
        return cls(
            id=int(data["id"]),
            surah=data["surah"],
            surah_number=int(data["surah_number"]),
            ayah=int(data["ayah"]),
            text_ar=data.get("text_ar", ""),
            text_en=data.get("text_en", ""),
            theme=tuple(data.get("theme") or ()),
            reflection=data.get("reflection", ""),
            practical_guidance=tuple(data.get("practical_guidance") or ()),
            audio=data.get("audio"),
            context=data.get("context"),
            life_application=data.get("life_application"),
        )


@dataclass(frozen=True)
class ScriptureMatch:
    """A verse as reported by the scripture source, before enrichment.

    Search results carry only the edition that was searched, so either text
    may be empty.
    """

    number: int
    number_in_surah: int
    surah_number: int
    surah_name: str
    text_ar: str = ""
    text_en: str = ""
    audio: Optional[str] = None
    juz: Optional[int] = None
    page: Optional[int] = None


@dataclass(frozen=True)
class ChapterInfo:
    """Chapter metadata from the scripture source."""

    number: int
    name: str
    english_name: str
    english_name_translation: str
    revelation_type: str
    number_of_ayahs: int


@dataclass(frozen=True)
class ChapterContext:
    """Static label attached to verses drawn from a curated chapter."""

    label: str
    description: str
    theme: str = "guidance"


@dataclass(frozen=True)
class SearchOutcome:
    """Result of a free-text search; never an exception."""

    matches: tuple[ScriptureMatch, ...] = ()
    status: RetrievalStatus = RetrievalStatus.NO_MATCH
    error: Optional[str] = None


@dataclass(frozen=True)
class GuidanceBundle:
    """Everything the synthesizer derives for one (theme, goal) pair."""

    theme: str
    practical_steps: tuple[str, ...]
    dua_recommendation: Optional[str]
    related_habits: tuple[str, ...]
    reflection: str
    life_application: str


@dataclass(frozen=True)
class GoalMatchResult:
    """A verse matched to a goal, with its relevance score and guidance."""

    verse: Verse
    relevance_score: float
    practical_steps: tuple[str, ...]
    dua_recommendation: Optional[str]
    related_habits: tuple[str, ...]
    reflection: str = ""
    life_application: str = ""

    def __post_init__(self) -> None:
        if not 0.0 <= self.relevance_score <= 1.0:
            raise ValidationError(
                f"Relevance score out of range: {self.relevance_score}",
                {"relevance_score": self.relevance_score},
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "verse": self.verse.to_dict(),
            "relevance_score": self.relevance_score,
            "practical_steps": list(self.practical_steps),
            "dua_recommendation": self.dua_recommendation,
            "related_habits": list(self.related_habits),
            "reflection": self.reflection,
            "life_application": self.life_application,
        }


@dataclass(frozen=True)
class ThematicCollection:
    """Verses and guidance grouped under one theme."""

    theme: str
    description: str
    verses: tuple[Verse, ...] = ()
    practical_guidance: tuple[str, ...] = ()
    recommended_actions: tuple[str, ...] = ()
    status: RetrievalStatus = RetrievalStatus.OK

    def to_dict(self) -> dict[str, Any]:
        return {
            "theme": self.theme,
            "description": self.description,
            "verses": [v.to_dict() for v in self.verses],
            "practical_guidance": list(self.practical_guidance),
            "recommended_actions": list(self.recommended_actions),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class GoalMatchReport:
    """Full outcome of one goal-matching call."""

    theme: str
    results: tuple[GoalMatchResult, ...]
    path: MatchPath
    status: RetrievalStatus

    def to_dict(self) -> dict[str, Any]:
        return {
            "theme": self.theme,
            "path": self.path,
            "status": self.status.value,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass(frozen=True)
class DailyVerse:
    """The daily verse plus whether the bundled fallback was served."""

    verse: Verse
    is_fallback: bool = False
    status: RetrievalStatus = RetrievalStatus.OK
    error: Optional[str] = None


@dataclass
class ContextualGuidance:
    """Guidance gathered across several challenges at once."""

    verses: list[Verse] = field(default_factory=list)
    practical_advice: list[str] = field(default_factory=list)
    recommended_duas: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "verses": [v.to_dict() for v in self.verses],
            "practical_advice": list(self.practical_advice),
            "recommended_duas": list(self.recommended_duas),
        }
