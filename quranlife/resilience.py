"""
Resilience patterns for the scripture source.

Provides a circuit breaker so that a dead or throttling upstream is not
hammered on every request; callers fall back to bundled content instead.
"""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncGenerator, Callable

from quranlife.exceptions import QuranLifeError

logger = logging.getLogger(__name__)


class CircuitOpenError(QuranLifeError):
    """Raised when attempting to use an open circuit."""

    def __init__(self, circuit_name: str, cooldown_remaining: float):
        super().__init__(
            f"Circuit breaker '{circuit_name}' is open. Retry in {cooldown_remaining:.1f}s",
            {"circuit_name": circuit_name, "cooldown_remaining": cooldown_remaining},
        )
        self.circuit_name = circuit_name
        self.cooldown_remaining = cooldown_remaining


@dataclass
class CircuitBreaker:
    """
    Circuit breaker pattern for graceful failure handling.

    Implements three states:
    - CLOSED: Normal operation, requests allowed
    - OPEN: After failure threshold, requests blocked
    - HALF-OPEN: After cooldown, one trial request allowed at a time

    Usage:
        breaker = CircuitBreaker(name="alquran-cloud")
        async with breaker.protected_call():
            payload = await fetch()
    """

    name: str = "circuit"
    failure_threshold: int = 3  # Consecutive failures before opening circuit
    cooldown_seconds: float = 30.0  # Seconds before attempting recovery
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)

    _failures: int = field(default=0, repr=False)
    _open_at: float | None = field(default=None, repr=False)
    _trial_in_flight: bool = field(default=False, repr=False)

    @property
    def failures(self) -> int:
        """Current consecutive failure count."""
        return self._failures

    @property
    def is_open(self) -> bool:
        """Whether the circuit has tripped (open or half-open)."""
        return self._open_at is not None

    def record_failure(self) -> bool:
        """Record a failure. Returns True if the circuit just opened."""
        self._failures += 1
        if self._failures >= self.failure_threshold and self._open_at is None:
            self._open_at = self.clock()
            logger.warning(f"Circuit breaker '{self.name}' OPEN after {self._failures} failures")
            return True
        if self._open_at is not None:
            # A failed half-open trial restarts the cooldown
            self._open_at = self.clock()
        return False

    def record_success(self) -> None:
        """Record a success. Closes an open circuit."""
        if self._open_at is not None:
            logger.info(f"Circuit breaker '{self.name}' CLOSED")
        self._open_at = None
        self._failures = 0

    def cooldown_remaining(self) -> float:
        if self._open_at is None:
            return 0.0
        return max(0.0, self.cooldown_seconds - (self.clock() - self._open_at))

    def can_proceed(self) -> bool:
        """Check if a request is allowed (circuit closed or half-open)."""
        return self.cooldown_remaining() <= 0.0

    def get_status(self) -> str:
        """Get circuit status: 'closed', 'open', or 'half-open'."""
        if self._open_at is None:
            return "closed"
        return "half-open" if self.can_proceed() else "open"

    def reset(self) -> None:
        self._failures = 0
        self._open_at = None
        self._trial_in_flight = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.get_status(),
            "failures": self._failures,
            "failure_threshold": self.failure_threshold,
            "cooldown_seconds": self.cooldown_seconds,
            "cooldown_remaining": round(self.cooldown_remaining(), 2),
        }

    @asynccontextmanager
    async def protected_call(self) -> AsyncGenerator[None, None]:
        """
        Async context manager for circuit-breaker-protected calls.

        While half-open only one caller runs the trial; the others are
        rejected until it finishes.

        Raises:
            CircuitOpenError: If the circuit is open or a trial is in flight
        """
        if not self.can_proceed():
            raise CircuitOpenError(self.name, self.cooldown_remaining())

        trial = self._open_at is not None
        if trial:
            if self._trial_in_flight:
                raise CircuitOpenError(self.name, 0.0)
            self._trial_in_flight = True

        try:
            yield
        except asyncio.CancelledError:
            # Task cancellation is not a service failure - don't record
            raise
        except Exception as e:
            logger.debug(f"Circuit breaker '{self.name}' recorded failure: {type(e).__name__}: {e}")
            self.record_failure()
            raise
        else:
            self.record_success()
        finally:
            if trial:
                self._trial_in_flight = False
