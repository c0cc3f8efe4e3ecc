from __future__ import annotations

import itertools
import threading
import types
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Self

from waker_loop.config import get_settings
from waker_loop.log import get_logger
from waker_loop.lowlevel import checkpoint
from waker_loop.typedefs import PENDING, Ready

if TYPE_CHECKING:
    from collections.abc import Generator

    from waker_loop.typedefs import Coro, Poll, Waker

logger = get_logger(__name__)

_timer_ids = itertools.count(1)


@dataclass(slots=True, kw_only=True)
class _SharedState:
    """State shared between the polling task and the waiter thread."""

    """Whether the duration has passed. Never reset once set."""
    elapsed: bool = False

    """Waker of the task that last polled the timer."""
    registered_waker: Waker | None = None


@dataclass(slots=True, kw_only=True)
class Timer:
    """Completes after a duration, woken by a dedicated background thread."""

    """Seconds until the timer elapses."""
    duration: float

    _state: _SharedState = field(default_factory=_SharedState, init=False, repr=False)

    """Guards _state. Poll and fire both take it."""
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    _waiter: threading.Timer | None = field(default=None, init=False, repr=False)

    @classmethod
    def start(cls, duration: float) -> Self:
        """Creates a timer and starts its waiter thread."""
        if duration < 0:
            msg = f"Timer duration must be non-negative, got {duration}"
            raise ValueError(msg)

        timer = cls(duration=duration)
        timer._waiter = threading.Timer(duration, timer._fire)
        timer._waiter.name = f"{get_settings().timer_thread_prefix}-{next(_timer_ids)}"
        timer._waiter.daemon = True
        timer._waiter.start()
        return timer

    def poll(self, waker: Waker) -> Poll[None]:
        """Reports completion, or registers the waker to be woken on completion.

        The waker is replaced on every pending poll, since the timer may be
        polled from a different task than last time.
        """
        with self._lock:
            if self._state.elapsed:
                return Ready(None)

            previous = self._state.registered_waker
            if previous is not waker:
                waker.arm()
                self._state.registered_waker = waker
                if previous is not None:
                    previous.disarm()
            return PENDING

    def _fire(self) -> None:
        """Runs on the waiter thread once the duration has passed."""
        with self._lock:
            self._state.elapsed = True
            waker, self._state.registered_waker = self._state.registered_waker, None
            if waker is not None:
                waker.wake()
                waker.disarm()
        logger.debug("Timer elapsed", duration=self.duration, woke=waker is not None)

    @property
    def elapsed(self) -> bool:
        """If the duration has passed."""
        with self._lock:
            return self._state.elapsed

    def join(self, timeout: float | None = None) -> None:
        """Waits for the waiter thread to finish."""
        if self._waiter is not None:
            self._waiter.join(timeout)

    def __await__(self) -> Generator[Self, None, None]:
        """Suspends the awaiting coroutine until the timer elapses."""
        return (yield self)


@types.coroutine
def sleep(duration: float) -> Coro[None]:
    """Sleep coroutine, for `yield from` and `await` alike."""
    if duration == 0:
        yield from checkpoint()
    else:
        yield Timer.start(duration)
    return None
