from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Self, override

from waker_loop.log import get_logger

if TYPE_CHECKING:
    from waker_loop.queue import RunQueue
    from waker_loop.task import Task

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class WakeHandle:
    """Re-enqueues one task. Safe to trigger from any thread, any number of times.

    Holds the task and the run queue, never the executor. A source that stores
    the handle to trigger it later calls `arm` first, and `disarm` once it has
    triggered or dropped it, so the run-loop knows a wakeup is still coming.
    """

    """The task to re-enqueue."""
    task: Task = field(repr=False)

    """The queue the task is pushed onto."""
    queue: RunQueue = field(repr=False)

    def wake(self) -> None:
        """Queues the task, unless it finished or is queued already."""
        if self.task.is_completed:
            logger.debug("Ignoring wake of completed task", task=self.task.name)
            return

        if self.queue.push(self.task):
            logger.debug("Woke task", task=self.task.name)

    def arm(self) -> None:
        """Announces that this handle will be triggered later."""
        self.queue.arm()

    def disarm(self) -> None:
        """Withdraws an earlier `arm`."""
        self.queue.disarm()

    def clone(self) -> Self:
        """Returns a new handle bound to the same task."""
        return type(self)(task=self.task, queue=self.queue)

    def __copy__(self) -> Self:
        """Copies are clones."""
        return self.clone()

    def will_wake(self, other: WakeHandle) -> bool:
        """Checks if both handles re-enqueue the same task."""
        return self.task is other.task and self.queue is other.queue

    @override
    def __repr__(self) -> str:
        """Pretty printing."""
        return f"WakeHandle(task={self.task.name!r})"
