"""Session profile refresh: single-flight and rate-limited.

Several parts of an interactive client tend to react to the same
authentication event at once. ``ProfileRefresher`` collapses those
overlapping requests into one fetch, and refuses to start a new fetch
within ``min_interval`` seconds of the previous attempt's start.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from mealorder.domain.model.role import Role

logger = logging.getLogger(__name__)

DEFAULT_MIN_INTERVAL = 2.0

T = TypeVar("T")


@dataclass(frozen=True)
class UserProfile:
    """The signed-in user as the engine sees them."""

    user_id: str
    role: Role
    company_id: str | None = None
    provider_id: str | None = None
    display_name: str = ""


class _Flight(Generic[T]):
    """One in-flight fetch that other callers can wait on."""

    def __init__(self) -> None:
        self._done = threading.Event()
        self._result: T | None = None
        self._error: BaseException | None = None

    def resolve(self, result: T) -> None:
        self._result = result
        self._done.set()

    def fail(self, error: BaseException) -> None:
        self._error = error
        self._done.set()

    def wait(self) -> T | None:
        self._done.wait()
        if self._error is not None:
            raise self._error
        return self._result


class ProfileRefresher(Generic[T]):

    def __init__(
        self,
        fetch: Callable[[], T],
        min_interval: float = DEFAULT_MIN_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if min_interval < 0:
            raise ValueError("min_interval cannot be negative")
        self._fetch = fetch
        self._min_interval = min_interval
        self._clock = clock
        self._lock = threading.Lock()
        self._flight: _Flight[T] | None = None
        self._last_started: float | None = None
        self._current: T | None = None

    @property
    def current(self) -> T | None:
        """The most recently fetched profile, or None before the first fetch."""
        with self._lock:
            return self._current

    @property
    def in_flight(self) -> bool:
        with self._lock:
            return self._flight is not None

    def refresh(self) -> T | None:
        """Return a fresh profile, joining or skipping fetches where possible.

        - a fetch already running: wait for it and share its outcome;
        - the last attempt started less than ``min_interval`` ago: return
          the cached profile without fetching;
        - otherwise: fetch now.

        A failed fetch re-raises in the caller that started it and in
        every caller that joined it. The cached profile is left as it was.
        """
        with self._lock:
            flight = self._flight
            if flight is not None:
                leader = False
            else:
                now = self._clock()
                if (
                    self._last_started is not None
                    and now - self._last_started < self._min_interval
                ):
                    logger.debug(
                        "Profile refresh skipped; last attempt %.2fs ago",
                        now - self._last_started,
                    )
                    return self._current
                flight = self._flight = _Flight()
                self._last_started = now
                leader = True

        if not leader:
            logger.debug("Joining in-flight profile refresh")
            return flight.wait()

        try:
            profile = self._fetch()
        except BaseException as exc:
            logger.warning("Profile refresh failed: %s", exc)
            with self._lock:
                self._flight = None
            flight.fail(exc)
            raise

        with self._lock:
            self._current = profile
            self._flight = None
        flight.resolve(profile)
        logger.debug("Profile refreshed")
        return profile
