"""Tests for the quranlife command-line front end."""

import datetime
import json
from unittest.mock import patch

import pytest

from quranlife.cli import DAILY_VERSE_KEY, build_parser, main
from quranlife.exceptions import SourceUnavailableError
from quranlife.profile_store import InMemoryProfileStore
from quranlife.security import RATE_LIMIT_KEY, RateLimiter

TODAY = datetime.date(2026, 10, 18)


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep main() from replacing the root handlers during tests."""
    with patch("quranlife.cli.configure_logging") as mock_configure:
        yield mock_configure


@pytest.fixture
def store():
    return InMemoryProfileStore()


@pytest.fixture
def run(engine, store):
    """Invoke main() with the offline engine and a generous rate limit."""

    def _run(*argv, today=TODAY, limiter=None):
        return main(
            list(argv),
            engine=engine,
            store=store,
            limiter=limiter or RateLimiter(limit=100),
            today=today,
        )

    return _run


class TestParser:
    """Test argument parsing."""

    def test_no_command(self, capsys):
        """Without a subcommand, help is printed and 1 returned."""
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()

    def test_more_options(self):
        args = build_parser().parse_args(
            ["more", "Be patient", "--offset", "3", "--exclude", "1", "2", "--batch-size", "5"]
        )
        assert args.offset == 3
        assert args.exclude == [1, 2]
        assert args.batch_size == 5

    def test_unknown_theme_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["collection", "astrology"])

    def test_logging_configured(self, run, no_logging_setup):
        run("theme", "patience")
        no_logging_setup.assert_called_once_with(level=None, json_output=None)


class TestDailyCommand:
    """Test the per-date daily verse cache."""

    def test_caches_for_the_day(self, run, store, fake_source, capsys):
        assert run("daily") == 0
        first = capsys.readouterr().out
        assert store.get(DAILY_VERSE_KEY)["date"] == "2026-10-18"

        assert run("daily") == 0
        assert capsys.readouterr().out == first
        assert fake_source.count("verse") == 1

    def test_new_day_new_fetch(self, run, fake_source):
        run("daily")
        run("daily", today=TODAY + datetime.timedelta(days=1))
        assert fake_source.count("verse") == 2

    def test_refresh_ignores_cache(self, run, fake_source):
        run("daily")
        run("daily", "--refresh")
        assert fake_source.count("verse") == 2

    def test_fallback_not_cached(self, run, store, fake_source, capsys):
        """The bundled verse is shown but not stored for the day."""
        fake_source.verse_error = SourceUnavailableError("ayah", "down")
        assert run("daily") == 0
        assert "2:255" in capsys.readouterr().out
        assert store.get(DAILY_VERSE_KEY) is None

    def test_json_output(self, run, capsys):
        run("daily", "--json")
        payload = json.loads(capsys.readouterr().out)
        assert {"id", "reference", "text_en", "theme"} <= set(payload)

    def test_unreadable_cache_refetched(self, run, store, fake_source):
        store.set(DAILY_VERSE_KEY, {"date": "2026-10-18", "verse": {"id": 1}})
        assert run("daily") == 0
        assert fake_source.count("verse") == 1


class TestGuideCommands:
    """Test guide, more and theme."""

    def test_guide_text(self, run, fake_source, match_factory, capsys):
        fake_source.search_results["Be patient"] = [
            match_factory(160, 2, 153, text_en="Seek help through patience and prayer")
        ]
        assert run("guide", "Be patient") == 0
        out = capsys.readouterr().out
        assert "Theme: patience (via search)" in out
        assert "2:153" in out
        assert "Practical steps:" in out

    def test_guide_json(self, run, capsys):
        assert run("guide", "Call my parents", "--json") == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["theme"] == "family"
        assert payload["status"] == "no_match"
        assert payload["results"] == []

    def test_guide_sanitizes_title(self, run, capsys):
        """A title that is only markup is rejected."""
        assert run("guide", "<b></b>") == 2
        assert "empty" in capsys.readouterr().err

    def test_more_with_exclusions(self, run, fake_source, match_factory, capsys):
        fake_source.search_results["Be patient"] = [match_factory(1, 2, 1), match_factory(2, 2, 2)]
        fake_source.search_results["patience"] = [match_factory(3, 2, 3), match_factory(4, 2, 4)]
        assert run("more", "Be patient", "--exclude", "1", "3", "--json") == 0
        payload = json.loads(capsys.readouterr().out)
        assert [entry["verse"]["id"] for entry in payload] == [2, 4]

    def test_engine_error_exit_code(self, run, capsys):
        """Invalid paging surfaces as exit code 2."""
        assert run("more", "Be patient", "--offset", "-1") == 2
        assert "offset" in capsys.readouterr().err

    def test_theme(self, run, capsys):
        assert run("theme", "Gym workout") == 0
        assert capsys.readouterr().out.strip() == "health"

    def test_theme_json_scores(self, run, capsys):
        run("theme", "Be patient", "--json")
        payload = json.loads(capsys.readouterr().out)
        assert payload["theme"] == "patience"
        assert payload["scores"]["patience"] == 1.5


class TestCollectionAndContext:
    """Test collection and context."""

    def test_collection_json(self, run, fake_source, match_factory, capsys):
        fake_source.search_results["parents"] = [match_factory(2010, 17, 23)]
        assert run("collection", "family", "--json") == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["theme"] == "family"
        assert [v["reference"] for v in payload["verses"]] == ["17:23"]
        assert payload["status"] == "ok"

    def test_collection_text(self, run, capsys):
        assert run("collection", "prayer") == 0
        out = capsys.readouterr().out
        assert out.startswith("Prayer: ")
        assert "Recommended actions:" in out

    def test_context(self, run, fake_source, match_factory, capsys):
        fake_source.search_results["fear"] = [match_factory(5, 3, 5)]
        assert run("context", "anxious", "parents", "--json") == 0
        payload = json.loads(capsys.readouterr().out)
        assert [v["id"] for v in payload["verses"]] == [5]
        assert len(payload["recommended_duas"]) == 2


class TestRateLimiting:
    """Test the CLI rate limit."""

    def test_second_call_limited(self, run, manual_clock, capsys):
        limiter = RateLimiter(limit=1, window_seconds=60, clock=manual_clock)
        assert run("guide", "Be patient", limiter=limiter) == 0
        assert run("guide", "Be patient", limiter=limiter) == 3
        assert "Rate limit" in capsys.readouterr().err

    def test_offline_commands_not_limited(self, run, manual_clock):
        limiter = RateLimiter(limit=1, window_seconds=60, clock=manual_clock)
        assert run("theme", "patience", limiter=limiter) == 0
        assert run("theme", "patience", limiter=limiter) == 0
        assert limiter.is_allowed()

    def test_window_shared_through_store(self, engine, store, capsys):
        """Separate invocations against one profile share the default 20/60s window."""
        codes = [main(["daily"], engine=engine, store=store, today=TODAY) for _ in range(21)]
        assert codes[:20] == [0] * 20
        assert codes[20] == 3
        assert len(store.get(RATE_LIMIT_KEY)) == 20
        assert "Rate limit" in capsys.readouterr().err

    def test_stale_window_in_store_expires(self, engine, store):
        """Timestamps older than the window no longer count."""
        store.set(RATE_LIMIT_KEY, [0.0] * 20)
        assert main(["daily"], engine=engine, store=store, today=TODAY) == 0
        assert len(store.get(RATE_LIMIT_KEY)) == 1
