"""Tests for the single-flight, rate-limited profile refresh."""

import logging
import threading
import time

import pytest

from mealorder.domain.model.role import Role
from mealorder.infrastructure.session import ProfileRefresher, UserProfile


def _wait_for(condition, timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while not condition():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met in time")
        time.sleep(0.01)


class FakeClock:

    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class CountingFetch:

    def __init__(self, release: threading.Event | None = None) -> None:
        self.calls = 0
        self.release = release
        self.started = threading.Event()

    def __call__(self) -> UserProfile:
        self.calls += 1
        self.started.set()
        if self.release is not None:
            self.release.wait(timeout=5)
        return UserProfile(user_id=f"user-{self.calls}", role=Role.EMPLOYEE, company_id="c1")


class TestRateLimit:

    def test_first_refresh_fetches(self):
        fetch = CountingFetch()
        refresher = ProfileRefresher(fetch, clock=FakeClock())
        assert refresher.current is None
        profile = refresher.refresh()
        assert profile.user_id == "user-1"
        assert refresher.current == profile

    def test_refresh_within_interval_returns_cached(self):
        clock = FakeClock()
        fetch = CountingFetch()
        refresher = ProfileRefresher(fetch, min_interval=2.0, clock=clock)
        refresher.refresh()
        clock.now += 1.9
        assert refresher.refresh().user_id == "user-1"
        assert fetch.calls == 1

    def test_refresh_after_interval_fetches_again(self):
        clock = FakeClock()
        fetch = CountingFetch()
        refresher = ProfileRefresher(fetch, min_interval=2.0, clock=clock)
        refresher.refresh()
        clock.now += 2.0
        assert refresher.refresh().user_id == "user-2"
        assert fetch.calls == 2

    def test_failed_attempt_still_counts_for_the_interval(self):
        clock = FakeClock()
        attempts = []

        def flaky() -> UserProfile:
            attempts.append(clock.now)
            raise RuntimeError("auth backend down")

        refresher = ProfileRefresher(flaky, clock=clock)
        with pytest.raises(RuntimeError):
            refresher.refresh()
        clock.now += 0.5
        assert refresher.refresh() is None
        assert len(attempts) == 1

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError):
            ProfileRefresher(CountingFetch(), min_interval=-1)


class TestSingleFlight:

    def test_concurrent_callers_share_one_fetch(self):
        release = threading.Event()
        fetch = CountingFetch(release)
        refresher = ProfileRefresher(fetch, clock=FakeClock())
        results = []

        def call() -> None:
            results.append(refresher.refresh())

        leader = threading.Thread(target=call)
        leader.start()
        assert fetch.started.wait(timeout=5)
        assert refresher.in_flight

        followers = [threading.Thread(target=call) for _ in range(4)]
        for t in followers:
            t.start()
        release.set()
        for t in [leader, *followers]:
            t.join(timeout=5)

        assert fetch.calls == 1
        assert len(results) == 5
        assert {r.user_id for r in results} == {"user-1"}
        assert not refresher.in_flight

    def test_joined_callers_see_the_error(self, caplog):
        caplog.set_level(logging.DEBUG, logger="mealorder.infrastructure.session")
        release = threading.Event()
        started = threading.Event()

        def failing() -> UserProfile:
            started.set()
            release.wait(timeout=5)
            raise RuntimeError("token expired")

        refresher = ProfileRefresher(failing, clock=FakeClock())
        errors = []

        def call() -> None:
            try:
                refresher.refresh()
            except RuntimeError as exc:
                errors.append(str(exc))

        leader = threading.Thread(target=call)
        leader.start()
        assert started.wait(timeout=5)
        follower = threading.Thread(target=call)
        follower.start()
        _wait_for(lambda: "Joining in-flight" in caplog.text)
        release.set()
        leader.join(timeout=5)
        follower.join(timeout=5)

        assert errors == ["token expired", "token expired"]
        assert refresher.current is None

    def test_interrupted_fetch_clears_the_flight(self):
        class Interrupted(BaseException):
            pass

        clock = FakeClock()
        fetch = CountingFetch()
        calls = []

        def interrupted_once() -> UserProfile:
            calls.append(clock.now)
            if len(calls) == 1:
                raise Interrupted()
            return fetch()

        refresher = ProfileRefresher(interrupted_once, clock=clock)
        with pytest.raises(Interrupted):
            refresher.refresh()
        assert refresher.in_flight is False

        clock.now += 2.0
        assert refresher.refresh().user_id == "user-1"
        assert len(calls) == 2
