"""
Input hygiene and rate limiting for callers of the guidance engine.

The engine itself never consults these; the CLI (or any other front end)
sanitizes user-entered goals and throttles calls to the scripture source.
"""

from __future__ import annotations

import logging
import re
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Mapping

from quranlife.exceptions import RateLimitExceededError

if TYPE_CHECKING:
    from quranlife.profile_store import ProfileStore

logger = logging.getLogger(__name__)

MAX_INPUT_LENGTH = 500
MAX_HABIT_NAME_LENGTH = 100
MAX_GOAL_TITLE_LENGTH = 200
MAX_GOAL_DESCRIPTION_LENGTH = 1000
GOAL_PRIORITIES = frozenset({"low", "medium", "high"})

DEFAULT_RATE_LIMIT = 20
DEFAULT_RATE_WINDOW_SECONDS = 60.0
RATE_LIMIT_KEY = "rate_limit"

_HTML_TAG_RE = re.compile(r"<[^>]*>")


def sanitize_input(text: str) -> str:
    """Trim, strip HTML tags and cap free text at 500 characters."""
    return _HTML_TAG_RE.sub("", (text or "").strip())[:MAX_INPUT_LENGTH]


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


def is_valid_habit(habit: Any) -> bool:
    """Check a habit record: string id, 1-100 char name, boolean ``completed``."""
    if not isinstance(habit, Mapping):
        return False
    name = habit.get("name")
    return (
        _is_str(habit.get("id"))
        and _is_str(name)
        and isinstance(habit.get("completed"), bool)
        and 0 < len(name) <= MAX_HABIT_NAME_LENGTH
    )


def is_valid_goal(goal: Any) -> bool:
    """Check a goal record.

    Requires string ``id``/``title``/``category``, boolean ``completed``, a
    priority of low/medium/high and a 1-200 char title. ``description`` is
    optional but must be a string of at most 1000 chars when present.
    """
    if not isinstance(goal, Mapping):
        return False
    title = goal.get("title")
    description = goal.get("description")
    return (
        _is_str(goal.get("id"))
        and _is_str(title)
        and isinstance(goal.get("completed"), bool)
        and _is_str(goal.get("category"))
        and goal.get("priority") in GOAL_PRIORITIES
        and 0 < len(title) <= MAX_GOAL_TITLE_LENGTH
        and (
            description is None
            or (_is_str(description) and len(description) <= MAX_GOAL_DESCRIPTION_LENGTH)
        )
    )


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of one rate-limit check."""

    allowed: bool
    remaining: int
    retry_after: float = 0.0


class RateLimiter:
    """Rolling-window limiter: at most ``limit`` calls per ``window_seconds``.

    Thread-safe. Rejected calls are not recorded.

    With a ``store``, the window's call timestamps are read from the profile
    store before each check and written back after each recorded call, so
    separate CLI processes sharing one profile share one window. Stored
    timestamps are wall-clock seconds, so the clock defaults to ``time.time``
    in that case.
    """

    def __init__(
        self,
        limit: int = DEFAULT_RATE_LIMIT,
        window_seconds: float = DEFAULT_RATE_WINDOW_SECONDS,
        clock: Callable[[], float] | None = None,
        store: ProfileStore | None = None,
        store_key: str = RATE_LIMIT_KEY,
    ):
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        if window_seconds <= 0:
            raise ValueError(f"window_seconds must be positive, got {window_seconds}")
        self.limit = limit
        self.window_seconds = window_seconds
        self.store = store
        self.store_key = store_key
        self._clock = clock or (time.time if store is not None else time.monotonic)
        self._calls: deque[float] = deque()
        self._lock = threading.Lock()

    def _load(self) -> None:
        if self.store is None:
            return
        saved = self.store.get(self.store_key, [])
        if not isinstance(saved, list):
            saved = []
        self._calls = deque(
            sorted(
                float(ts)
                for ts in saved
                if isinstance(ts, (int, float)) and not isinstance(ts, bool)
            )
        )

    def _save(self) -> None:
        if self.store is None:
            return
        if not self.store.set(self.store_key, list(self._calls)):
            logger.warning("Could not persist rate limit window under %r", self.store_key)

    def _prune(self, now: float) -> None:
        while self._calls and now - self._calls[0] >= self.window_seconds:
            self._calls.popleft()

    def check(self) -> RateLimitResult:
        """Record a call if the window has room and report the outcome."""
        with self._lock:
            self._load()
            now = self._clock()
            self._prune(now)
            if len(self._calls) >= self.limit:
                retry_after = self.window_seconds - (now - self._calls[0])
                logger.debug("Rate limit hit (%d/%.0fs)", self.limit, self.window_seconds)
                return RateLimitResult(allowed=False, remaining=0, retry_after=max(0.0, retry_after))
            self._calls.append(now)
            self._save()
            return RateLimitResult(allowed=True, remaining=self.limit - len(self._calls))

    def is_allowed(self) -> bool:
        return self.check().allowed

    def acquire(self) -> None:
        """Like ``is_allowed`` but raises when the window is full."""
        if not self.check().allowed:
            raise RateLimitExceededError(self.limit, self.window_seconds)

    def reset(self) -> None:
        with self._lock:
            self._calls.clear()
            if self.store is not None:
                self.store.remove(self.store_key)
