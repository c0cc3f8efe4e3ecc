"""waker-loop package."""

__version__ = "0.1.0"

from waker_loop.loop import Executor, run
from waker_loop.task import Task
from waker_loop.timerio import Timer, sleep
from waker_loop.typedefs import PENDING, Pending, Ready
from waker_loop.waker import WakeHandle

__all__ = [
    "PENDING",
    "Executor",
    "Pending",
    "Ready",
    "Task",
    "Timer",
    "WakeHandle",
    "run",
    "sleep",
]
