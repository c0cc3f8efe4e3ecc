from __future__ import annotations

from collections.abc import Coroutine, Generator
from dataclasses import dataclass
from typing import Any, Protocol, override

type TaskID = int


class Pending:
    """Sentinel for a computation that is not ready yet."""

    @override
    def __repr__(self) -> str:
        """Pretty printing."""
        return "Pending"


PENDING = Pending()


@dataclass(frozen=True, slots=True)
class Ready[T]:
    """A computation finished with a value."""

    value: T


type Poll[T] = Ready[T] | Pending


class Waker(Protocol):
    """What a suspension source needs from a wake handle."""

    def wake(self) -> None:
        """Asks for the bound task to be resumed again."""
        ...

    def arm(self) -> None:
        """Marks the handle as stored by a source that will trigger it later."""
        ...

    def disarm(self) -> None:
        """Releases an earlier arm."""
        ...


class Pollable[T](Protocol):
    """Anything that can be resumed in steps until it reports a value."""

    def poll(self, waker: Waker) -> Poll[T]:
        """Makes progress, or stores the waker and returns PENDING."""
        ...


type Coro[T] = Generator[Pollable[Any], Any, T]

type Computation[T] = Pollable[T] | Coro[T] | Coroutine[Pollable[Any], Any, T]
