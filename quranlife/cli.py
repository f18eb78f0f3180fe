"""
Command-line front end for the QuranLife guidance engine.

Usage:
    quranlife daily                         Today's verse (cached per date)
    quranlife guide "Pray Fajr on time"     Verses and guidance for a goal
    quranlife more "Pray Fajr" --offset 3   Next batch of guidance entries
    quranlife theme "Go to the gym daily"   Show the inferred theme and scores
    quranlife collection patience           Thematic collection for a theme
    quranlife context "stress" "family"     Combined guidance for challenges
"""

from __future__ import annotations

import argparse
import asyncio
import datetime
import json
import os
import sys
from pathlib import Path
from typing import Any, Callable, Optional

from quranlife.__version__ import __version__
from quranlife.engine import GoalMatchingEngine, build_goal_text
from quranlife.exceptions import QuranLifeError, RateLimitExceededError
from quranlife.keywords import extract_keywords
from quranlife.logging_config import configure_logging, get_logger
from quranlife.models import GoalMatchResult, Verse
from quranlife.profile_store import JSONFileProfileStore, ProfileStore
from quranlife.security import RateLimiter, sanitize_input
from quranlife.templates import THEME_ORDER

logger = get_logger(__name__)

DAILY_VERSE_KEY = "daily_verse"
DEFAULT_PROFILE_PATH = Path.home() / ".quranlife" / "profile.json"

# Commands that reach the scripture source
NETWORK_COMMANDS = frozenset({"daily", "guide", "more", "collection", "context"})


def _dump(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def format_verse(verse: Verse) -> str:
    lines = [f"{verse.surah} {verse.reference}"]
    if verse.context:
        lines.append(f"  [{verse.context}]")
    if verse.text_ar:
        lines.append(f"  {verse.text_ar}")
    if verse.text_en:
        lines.append(f"  {verse.text_en}")
    if verse.reflection:
        lines.append(f"  Reflection: {verse.reflection}")
    for tip in verse.practical_guidance:
        lines.append(f"  - {tip}")
    if verse.audio:
        lines.append(f"  Audio: {verse.audio}")
    return "\n".join(lines)


def format_result(result: GoalMatchResult) -> str:
    lines = [format_verse(result.verse), f"  Relevance: {result.relevance_score:.2f}"]
    lines.append("  Practical steps:")
    lines.extend(f"    {i}. {step}" for i, step in enumerate(result.practical_steps, 1))
    if result.dua_recommendation:
        lines.append(f"  Dua: {result.dua_recommendation}")
    lines.append(f"  Related habits: {', '.join(result.related_habits)}")
    if result.life_application:
        lines.append(f"  Apply it: {result.life_application}")
    return "\n".join(lines)


def _goal_args(args: argparse.Namespace) -> tuple[str, str, str]:
    return (
        sanitize_input(args.title),
        sanitize_input(args.description or ""),
        sanitize_input(args.category or ""),
    )


# =============================================================================
# Commands
# =============================================================================


async def cmd_daily(
    args: argparse.Namespace,
    engine: GoalMatchingEngine,
    store: ProfileStore,
    today: datetime.date,
) -> int:
    """Print today's verse, reusing the stored one when it is from today."""
    verse: Optional[Verse] = None
    cached = None if args.refresh else store.get(DAILY_VERSE_KEY)
    if isinstance(cached, dict) and cached.get("date") == today.isoformat():
        try:
            verse = Verse.from_dict(cached["verse"])
        except (KeyError, TypeError, ValueError, QuranLifeError) as e:
            logger.warning("Discarding unreadable cached daily verse", error=str(e))

    if verse is None:
        result = await engine.get_daily_verse_result()
        verse = result.verse
        # The bundled fallback is not pinned so a later run can still get a live verse
        if not result.is_fallback:
            store.set(DAILY_VERSE_KEY, {"date": today.isoformat(), "verse": verse.to_dict()})

    if args.json:
        _dump(verse.to_dict())
    else:
        print(format_verse(verse))
    return 0


async def cmd_guide(args, engine, store, today) -> int:
    title, description, category = _goal_args(args)
    if not title:
        print("error: goal title is empty after sanitizing", file=sys.stderr)
        return 2
    report = await engine.match_goal(title, description, category)
    if args.json:
        _dump(report.to_dict())
        return 0

    print(f"Theme: {report.theme} (via {report.path})")
    if not report.results:
        print(f"No verses found ({report.status.value}).")
        return 0
    for result in report.results:
        print()
        print(format_result(result))
    return 0


async def cmd_more(args, engine, store, today) -> int:
    title, description, category = _goal_args(args)
    if not title:
        print("error: goal title is empty after sanitizing", file=sys.stderr)
        return 2
    results = await engine.load_more(
        title,
        description,
        category,
        offset=args.offset,
        exclude_ids=args.exclude or (),
        batch_size=args.batch_size,
    )
    if args.json:
        _dump([r.to_dict() for r in results])
        return 0
    if not results:
        print("No more guidance for this goal.")
    for result in results:
        print(format_result(result))
        print()
    return 0


async def cmd_theme(args, engine, store, today) -> int:
    text = sanitize_input(args.text)
    goal_text = build_goal_text(text)
    theme = engine.classifier.classify_text(goal_text)
    if args.json:
        _dump({"theme": theme, "scores": engine.classifier.scores(extract_keywords(goal_text))})
        return 0
    print(theme)
    return 0


async def cmd_collection(args, engine, store, today) -> int:
    collection = await engine.adapter.get_thematic_collection(args.theme)
    if args.json:
        _dump(collection.to_dict())
        return 0

    print(f"{collection.theme.title()}: {collection.description}")
    for verse in collection.verses:
        print()
        print(format_verse(verse))
    if collection.recommended_actions:
        print()
        print("Recommended actions:")
        for action in collection.recommended_actions:
            print(f"  - {action}")
    return 0


async def cmd_context(args, engine, store, today) -> int:
    challenges = [c for c in (sanitize_input(c) for c in args.challenges) if c]
    guidance = await engine.get_contextual_guidance(challenges)
    if args.json:
        _dump(guidance.to_dict())
        return 0
    for verse in guidance.verses:
        print(format_verse(verse))
        print()
    if guidance.practical_advice:
        print("Advice:")
        for tip in guidance.practical_advice:
            print(f"  - {tip}")
    for dua in guidance.recommended_duas:
        print(f"Dua: {dua}")
    return 0


COMMANDS: dict[str, Callable[..., Any]] = {
    "daily": cmd_daily,
    "guide": cmd_guide,
    "more": cmd_more,
    "theme": cmd_theme,
    "collection": cmd_collection,
    "context": cmd_context,
}


# =============================================================================
# Entry point
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quranlife",
        description="Quranic guidance for personal goals",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Usage:", 1)[1] if __doc__ else None,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--store",
        default=os.environ.get("QURANLIFE_PROFILE_PATH", str(DEFAULT_PROFILE_PATH)),
        help="Profile store file (default: %(default)s)",
    )
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")

    subparsers = parser.add_subparsers(dest="command")

    # daily
    daily_parser = subparsers.add_parser("daily", help="Show today's verse")
    daily_parser.add_argument("--refresh", action="store_true", help="Ignore the cached verse")

    # guide / more
    guide_parser = subparsers.add_parser("guide", help="Find verses for a goal")
    more_parser = subparsers.add_parser("more", help="Load more guidance for a goal")
    for sub in (guide_parser, more_parser):
        sub.add_argument("title", help="Goal title")
        sub.add_argument("--description", "-d", default="", help="Goal description")
        sub.add_argument("--category", "-c", default="", help="Goal category")
    more_parser.add_argument("--offset", type=int, default=0, help="Entries already shown")
    more_parser.add_argument(
        "--exclude", type=int, nargs="*", default=[], help="Verse ids already shown"
    )
    more_parser.add_argument("--batch-size", type=int, default=3)

    # theme
    theme_parser = subparsers.add_parser("theme", help="Classify text into a theme")
    theme_parser.add_argument("text")

    # collection
    collection_parser = subparsers.add_parser("collection", help="Show a thematic collection")
    collection_parser.add_argument("theme", choices=list(THEME_ORDER))

    # context
    context_parser = subparsers.add_parser("context", help="Guidance across several challenges")
    context_parser.add_argument("challenges", nargs="+")

    for sub in subparsers.choices.values():
        sub.add_argument("--json", action="store_true", help="Print JSON instead of text")

    return parser


async def _run(
    args: argparse.Namespace,
    engine: GoalMatchingEngine,
    store: ProfileStore,
    today: datetime.date,
) -> int:
    async with engine:
        return await COMMANDS[args.command](args, engine, store, today)


def main(
    argv: Optional[list[str]] = None,
    *,
    engine: Optional[GoalMatchingEngine] = None,
    store: Optional[ProfileStore] = None,
    limiter: Optional[RateLimiter] = None,
    today: Optional[datetime.date] = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(level=args.log_level, json_output=True if args.json_logs else None)

    store = store or JSONFileProfileStore(args.store)
    # The window lives in the profile store so it holds across invocations
    limiter = limiter or RateLimiter(store=store)
    if args.command in NETWORK_COMMANDS:
        try:
            limiter.acquire()
        except RateLimitExceededError as e:
            print(f"error: {e}", file=sys.stderr)
            return 3

    try:
        return asyncio.run(
            _run(
                args,
                engine or GoalMatchingEngine(),
                store,
                today or datetime.date.today(),
            )
        )
    except QuranLifeError as e:
        logger.error("Command failed", command=args.command, error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
