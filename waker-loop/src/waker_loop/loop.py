from __future__ import annotations

import itertools
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from waker_loop._coro import as_pollable
from waker_loop._utils import _local
from waker_loop.config import Settings, get_settings
from waker_loop.log import get_logger
from waker_loop.queue import RunQueue
from waker_loop.task import Task
from waker_loop.waker import WakeHandle

if TYPE_CHECKING:
    from collections.abc import Generator, Iterator

    from waker_loop.typedefs import Computation

logger = get_logger(__name__)


@dataclass(slots=True, kw_only=True)
class Executor:
    """Single threaded run-loop over a queue of woken tasks."""

    """Configuration, defaults to the environment."""
    settings: Settings = field(default_factory=get_settings, repr=False)

    """Tasks ready to be resumed."""
    _queue: RunQueue = field(default_factory=RunQueue, init=False)

    """Source of task IDs."""
    _task_ids: Iterator[int] = field(
        default_factory=lambda: itertools.count(1), init=False, repr=False
    )

    """The task which is currently being resumed."""
    _current_task: Task | None = field(default=None, init=False, repr=False)

    def spawn(self, computation: Computation, *, name: str | None = None) -> None:
        """Wraps the computation in a task and queues it.

        Safe to call from any thread, before or during `run`.
        """
        task = Task.create(as_pollable(computation), next(self._task_ids), name)
        self._queue.push(task)
        logger.debug("Spawned task", task=task.name)

    def run(self, *, wait_for_wakeups: bool | None = None) -> None:
        """Resumes queued tasks until nothing is runnable.

        With `wait_for_wakeups` the loop blocks on an empty queue for as long as a
        source (such as a pending Timer) holds an armed wake handle, so a short
        sleep completes within one call. Without it the loop is a strict drain
        that never blocks, and suspended tasks need another `run` once woken.
        Tasks suspended with nothing armed are left behind in both modes.

        Args:
            wait_for_wakeups: on an empty queue, keep waiting while wakeup sources
                still hold armed wake handles. Defaults to the settings value.
        """
        if wait_for_wakeups is None:
            wait_for_wakeups = self.settings.wait_for_wakeups

        previous, _local.executor = _local.executor, self
        try:
            while (task := self._queue.pop(wait=wait_for_wakeups)) is not None:
                self._resume(task)
        finally:
            _local.executor = previous

        logger.debug("Run-loop drained", armed=self._queue.armed)

    def _resume(self, task: Task) -> None:
        waker = WakeHandle(task=task, queue=self._queue)
        with self.set_current_task(task):
            logger.debug("Resuming task", task=task.name)
            try:
                task.resume(waker)
            except Exception:
                logger.exception("Task raised", task=task.name)
                raise

        if task.is_completed:
            logger.debug("Task completed", task=task.name)
        else:
            logger.debug("Task suspended", task=task.name)

    @property
    def current_task(self) -> Task:
        """Gets currently executing task."""
        if self._current_task is None:
            raise RuntimeError("No task currently executing")

        return self._current_task

    @contextmanager
    def set_current_task(self, task: Task) -> Generator[None]:
        """Utility wrapper for setting and removing currently executing task."""
        self._current_task = task
        try:
            yield
        finally:
            self._current_task = None

    @property
    def pending(self) -> int:
        """Number of tasks queued for resumption."""
        return len(self._queue)


def run(*computations: Computation) -> None:
    """Entry point for running computations to completion.

    Creates an Executor, spawns every computation in order, and runs it.

    Args:
        computations: the entry coroutines or pollables
    """
    executor = Executor()
    for computation in computations:
        executor.spawn(computation)
    executor.run()
