"""
Standardized HTTP client configuration with proper timeouts.

Provides consistent timeout and session management for calls to the
scripture source. Sessions should be created through these utilities
instead of constructing aiohttp.ClientSession directly.

Usage:
    from quranlife.http_client import create_client_session

    async with create_client_session() as session:
        await session.get(url)
"""

from __future__ import annotations

import aiohttp
from aiohttp import ClientTimeout

from quranlife.__version__ import __version__

__all__ = [
    "DEFAULT_TIMEOUT",
    "DEFAULT_HEADERS",
    "timeout_from_seconds",
    "create_client_session",
]

# The scripture source is treated as unreliable; fail fast and fall back.
DEFAULT_TIMEOUT = ClientTimeout(
    total=5,
    connect=3,
    sock_read=4,
)

DEFAULT_HEADERS = {
    "User-Agent": f"QuranLife/{__version__}",
    "Accept": "application/json",
}


def timeout_from_seconds(total: float, connect: float | None = None) -> ClientTimeout:
    """Build a ClientTimeout for a total budget in seconds.

    Args:
        total: Total time for the entire request.
        connect: Time to establish the connection (defaults to total).

    Returns:
        ClientTimeout with sock_read bounded by the total budget.
    """
    return ClientTimeout(
        total=total,
        connect=connect if connect is not None else total,
        sock_read=total,
    )


def create_client_session(
    timeout: ClientTimeout | None = None,
    **kwargs,
) -> aiohttp.ClientSession:
    """Create an aiohttp ClientSession with proper timeout configuration.

    Args:
        timeout: Optional custom timeout. Uses DEFAULT_TIMEOUT if not specified.
        **kwargs: Additional arguments passed to ClientSession.

    Returns:
        Configured aiohttp.ClientSession.
    """
    if timeout is None:
        timeout = DEFAULT_TIMEOUT
    headers = {**DEFAULT_HEADERS, **kwargs.pop("headers", {})}
    return aiohttp.ClientSession(timeout=timeout, headers=headers, **kwargs)
