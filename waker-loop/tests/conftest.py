"""Shared test fixtures for waker-loop."""

import threading
import time
from dataclasses import dataclass, field

import pytest

from waker_loop.config import Settings
from waker_loop.loop import Executor
from waker_loop.typedefs import PENDING, Ready


@dataclass
class TimingContext:
    """Captures elapsed time and provides tolerance-aware assertions."""

    _start: float = field(default=0, repr=False)
    _end: float = field(default=0, repr=False)

    def start(self) -> None:
        self._start = time.monotonic()

    def stop(self) -> None:
        self._end = time.monotonic()

    @property
    def elapsed(self) -> float:
        if self._end == 0.0:
            return time.monotonic() - self._start
        return self._end - self._start

    def assert_elapsed_between(
        self, lower: float, upper: float, *, msg: str = ""
    ) -> None:
        """Assert elapsed time is within [lower, upper] seconds."""
        elapsed = self.elapsed
        context = f" ({msg})" if msg else ""
        assert lower <= elapsed <= upper, (
            f"Expected elapsed time in [{lower}, {upper}]s, got {elapsed:.3f}s{context}"
        )


@dataclass
class RecordingWaker:
    """Stands in for a wake handle and counts what a source does with it."""

    wakes: int = 0
    arms: int = 0
    disarms: int = 0
    woken: threading.Event = field(default_factory=threading.Event)

    def wake(self) -> None:
        self.wakes += 1
        self.woken.set()

    def arm(self) -> None:
        self.arms += 1

    def disarm(self) -> None:
        self.disarms += 1


@dataclass
class Steps:
    """Pollable that reports PENDING a fixed number of times, then finishes.

    Keeps the waker of every resumption so tests can trigger it later.
    """

    pending: int = 0
    result: object = None
    polls: int = 0
    wakers: list = field(default_factory=list)

    def poll(self, waker):
        self.polls += 1
        self.wakers.append(waker)
        if self.polls > self.pending:
            return Ready(self.result)
        return PENDING


@pytest.fixture
def settings() -> Settings:
    """Settings independent of the environment."""
    return Settings(_env_file=None)


@pytest.fixture
def executor(settings: Settings) -> Executor:
    """A fresh executor."""
    return Executor(settings=settings)


@pytest.fixture
def recording_waker() -> RecordingWaker:
    """A fake waker."""
    return RecordingWaker()


@pytest.fixture
def timing() -> TimingContext:
    """Provide a timing context for measuring elapsed time in tests."""
    return TimingContext()


@pytest.fixture
def make_steps() -> type[Steps]:
    """Factory for step-counting pollables."""
    return Steps


@pytest.fixture
def waker_factory() -> type[RecordingWaker]:
    """Factory for additional fake wakers."""
    return RecordingWaker
