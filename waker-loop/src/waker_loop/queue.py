from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from waker_loop.log import get_logger

if TYPE_CHECKING:
    from waker_loop.task import Task
    from waker_loop.typedefs import TaskID

logger = get_logger(__name__)


@dataclass(slots=True, kw_only=True, eq=False)
class RunQueue:
    """FIFO of runnable tasks. Any thread may push, only the run-loop pops."""

    """Tasks waiting to be resumed, in wake order."""
    _tasks: deque[Task] = field(default_factory=deque, init=False)

    """IDs of the tasks currently in _tasks. A task is queued at most once."""
    _queued: set[TaskID] = field(default_factory=set, init=False)

    """Number of wake handles held by sources that promised to trigger them."""
    _armed: int = field(default=0, init=False)

    """Guards every attribute above."""
    _condition: threading.Condition = field(
        default_factory=threading.Condition, init=False, repr=False
    )

    def push(self, task: Task) -> bool:
        """Appends a task unless it is already queued.

        Returns:
            Whether the task was added.
        """
        with self._condition:
            if task.task_id in self._queued:
                logger.debug("Task already queued", task=task.name)
                return False
            self._queued.add(task.task_id)
            self._tasks.append(task)
            self._condition.notify()
            return True

    def pop(self, *, wait: bool = False) -> Task | None:
        """Pops the front task.

        Args:
            wait: keep waiting on an empty queue while armed wakeups exist

        Returns:
            The task, or None if nothing is runnable.
        """
        with self._condition:
            while wait and not self._tasks and self._armed:
                self._condition.wait()
            if not self._tasks:
                return None
            task = self._tasks.popleft()
            self._queued.discard(task.task_id)
            return task

    def arm(self) -> None:
        """Registers one pending wakeup."""
        with self._condition:
            self._armed += 1

    def disarm(self) -> None:
        """Releases one pending wakeup."""
        with self._condition:
            if self._armed == 0:
                raise RuntimeError("Disarm without matching arm")
            self._armed -= 1
            if self._armed == 0:
                self._condition.notify_all()

    @property
    def armed(self) -> int:
        """Number of pending wakeups."""
        with self._condition:
            return self._armed

    def __len__(self) -> int:
        """Number of queued tasks."""
        with self._condition:
            return len(self._tasks)
