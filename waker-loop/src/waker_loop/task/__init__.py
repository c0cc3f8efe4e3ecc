from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, override

from waker_loop.exceptions import ProtocolError
from waker_loop.log import get_logger
from waker_loop.task.state import Completed, Holding, Running
from waker_loop.typedefs import Pending

if TYPE_CHECKING:
    from waker_loop.task.state import TaskState
    from waker_loop.typedefs import Pollable, TaskID, Waker

logger = get_logger(__name__)


@dataclass(slots=True, kw_only=True, eq=False)
class Task[TResult]:
    """Owns one computation and resumes it on behalf of the executor."""

    """The ID of the task, unique within its executor."""
    task_id: TaskID

    """Human readable name, used in logs."""
    name: str

    """Union encompassing the current state of the task."""
    state: TaskState[TResult]

    """Guards state transitions. Never held while the computation runs."""
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    @classmethod
    def create(
        cls, computation: Pollable[TResult], task_id: TaskID, name: str | None = None
    ) -> Task[TResult]:
        """Creates a task holding the computation."""
        return cls(
            task_id=task_id,
            name=name if name is not None else f"task-{task_id}",
            state=Holding(computation),
        )

    def resume(self, waker: Waker) -> None:
        """Resumes the computation once.

        Resuming a completed task does nothing, which makes a stray duplicate
        wakeup harmless. Resuming a task that is already running is a defect.
        """
        with self._lock:
            match self.state:
                case Completed():
                    logger.debug("Skipping completed task", task=self.name)
                    return
                case Running():
                    msg = f"Task {self.name} resumed while already running"
                    raise ProtocolError(msg)
                case Holding(computation=computation):
                    self.state = Running()

        try:
            result = computation.poll(waker)
        except BaseException as e:
            self._transition(Completed(result=e))
            raise

        if isinstance(result, Pending):
            self._transition(Holding(computation))
        else:
            self._transition(Completed(result=result.value))

    def _transition(self, state: TaskState[TResult]) -> None:
        with self._lock:
            self.state = state

    @property
    def is_running(self) -> bool:
        """If a resumption is in progress."""
        return isinstance(self.state, Running)

    @property
    def is_completed(self) -> bool:
        """If the task has finished."""
        return isinstance(self.state, Completed)

    @property
    def result(self) -> TResult:
        """Gets the result of a finished task."""
        if not isinstance(self.state, Completed):
            raise RuntimeError("Task result access before task was finished")  # noqa: TRY004
        if isinstance(self.state.result, BaseException):
            raise self.state.result

        return self.state.result

    @override
    def __repr__(self) -> str:
        """Pretty printing."""
        return f"Task(name={self.name!r}, state={type(self.state).__name__})"
