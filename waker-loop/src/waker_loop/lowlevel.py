from __future__ import annotations

import types
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from waker_loop._utils import _local
from waker_loop.typedefs import PENDING, Ready

if TYPE_CHECKING:
    from waker_loop.loop import Executor
    from waker_loop.task import Task
    from waker_loop.typedefs import Computation, Coro, Poll, Waker


def get_running_executor() -> Executor:
    """Gets the executor running on this thread."""
    if _local.executor is None:
        raise RuntimeError("No executor running")

    return _local.executor


def get_current_task() -> Task:
    """Gets the task currently being resumed."""
    return get_running_executor().current_task


def spawn(computation: Computation, *, name: str | None = None) -> None:
    """Spawns a computation onto the running executor."""
    get_running_executor().spawn(computation, name=name)


@dataclass(slots=True)
class _YieldOnce:
    _yielded: bool = field(default=False, init=False)

    def poll(self, waker: Waker) -> Poll[None]:
        if self._yielded:
            return Ready(None)
        self._yielded = True
        waker.wake()
        return PENDING


@types.coroutine
def checkpoint() -> Coro[None]:
    """Nop that yields control back to the executor.

    Usable with both `yield from` and `await`.
    """
    yield _YieldOnce()
