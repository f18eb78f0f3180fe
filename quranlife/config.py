"""
Scripture source configuration module.

Provides the settings used to reach the remote scripture source (AlQuran.cloud
by default), with validation and environment variable overrides.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Optional

from quranlife.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.alquran.cloud/v1"


@dataclass(frozen=True)
class ScriptureSourceConfig:
    """Configuration for the scripture source and the adapter around it.

    Attributes:
        base_url: Root of the AlQuran.cloud compatible REST API.
        arabic_edition: Edition identifier for the source-script text.
        english_edition: Edition identifier for the translation.
        audio_edition: Edition identifier for verse-by-verse recitation.
        timeout_seconds: Total time allowed for a single request.
        connect_timeout_seconds: Time allowed to establish a connection.
        cache_ttl_seconds: Lifetime of cached thematic collections.
        max_thematic_verses: Verses kept per thematic collection.
        fetch_audio: Whether verse lookups also resolve an audio URL.
        failure_threshold: Consecutive failures before the circuit opens.
        cooldown_seconds: Seconds the circuit stays open.

    Example:
        config = ScriptureSourceConfig(timeout_seconds=3.0)
        quick = config.with_overrides(fetch_audio=False)
    """

    base_url: str = DEFAULT_BASE_URL
    arabic_edition: str = "quran-uthmani"
    english_edition: str = "en.asad"
    audio_edition: str = "ar.alafasy"
    timeout_seconds: float = 5.0
    connect_timeout_seconds: float = 3.0
    cache_ttl_seconds: float = 300.0
    max_thematic_verses: int = 5
    fetch_audio: bool = True
    failure_threshold: int = 3
    cooldown_seconds: float = 30.0

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(f"base_url must be an http(s) URL: {self.base_url!r}")
        if self.timeout_seconds <= 0:
            raise ConfigurationError("timeout_seconds must be positive")
        if self.connect_timeout_seconds <= 0:
            raise ConfigurationError("connect_timeout_seconds must be positive")
        if self.cache_ttl_seconds < 0:
            raise ConfigurationError("cache_ttl_seconds must not be negative")
        if self.max_thematic_verses < 1:
            raise ConfigurationError("max_thematic_verses must be at least 1")
        if self.failure_threshold < 1:
            raise ConfigurationError("failure_threshold must be at least 1")
        if self.cooldown_seconds <= 0:
            raise ConfigurationError("cooldown_seconds must be positive")

    def with_overrides(self, **overrides: Any) -> ScriptureSourceConfig:
        """Create a new config with the non-None overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


def _get_env_str(name: str) -> Optional[str]:
    value = os.environ.get(name)
    return value.strip() if value and value.strip() else None


def _get_env_int(name: str) -> Optional[int]:
    """Get an integer from environment variable, or None if not set/invalid."""
    value = os.environ.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _get_env_float(name: str) -> Optional[float]:
    """Get a float from environment variable, or None if not set/invalid."""
    value = os.environ.get(name)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _get_env_bool(name: str) -> Optional[bool]:
    value = os.environ.get(name)
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    return None


def get_scripture_config(base: ScriptureSourceConfig | None = None) -> ScriptureSourceConfig:
    """Get the scripture source configuration with environment overrides.

    Environment variables:
        QURANLIFE_API_BASE_URL: Override base_url
        QURANLIFE_ARABIC_EDITION / QURANLIFE_ENGLISH_EDITION / QURANLIFE_AUDIO_EDITION
        QURANLIFE_TIMEOUT_SECONDS: Override timeout_seconds
        QURANLIFE_CACHE_TTL_SECONDS: Override cache_ttl_seconds
        QURANLIFE_FETCH_AUDIO: Override fetch_audio (true/false)
        QURANLIFE_CB_FAILURE_THRESHOLD: Override failure_threshold
        QURANLIFE_CB_COOLDOWN_SECONDS: Override cooldown_seconds

    Values that cannot be parsed are ignored. Values that parse but fail
    validation (``QURANLIFE_TIMEOUT_SECONDS=0``) are logged and dropped one
    by one, so the remaining overrides still apply.

    Args:
        base: Config to apply overrides on top of (defaults to built-ins)

    Returns:
        ScriptureSourceConfig with overrides applied
    """
    config = base or ScriptureSourceConfig()
    overrides = {
        "base_url": _get_env_str("QURANLIFE_API_BASE_URL"),
        "arabic_edition": _get_env_str("QURANLIFE_ARABIC_EDITION"),
        "english_edition": _get_env_str("QURANLIFE_ENGLISH_EDITION"),
        "audio_edition": _get_env_str("QURANLIFE_AUDIO_EDITION"),
        "timeout_seconds": _get_env_float("QURANLIFE_TIMEOUT_SECONDS"),
        "cache_ttl_seconds": _get_env_float("QURANLIFE_CACHE_TTL_SECONDS"),
        "fetch_audio": _get_env_bool("QURANLIFE_FETCH_AUDIO"),
        "failure_threshold": _get_env_int("QURANLIFE_CB_FAILURE_THRESHOLD"),
        "cooldown_seconds": _get_env_float("QURANLIFE_CB_COOLDOWN_SECONDS"),
    }
    for name, value in overrides.items():
        if value is None:
            continue
        try:
            config = config.with_overrides(**{name: value})
        except ConfigurationError as e:
            logger.warning("Ignoring invalid environment override for %s: %s", name, e)
    return config
