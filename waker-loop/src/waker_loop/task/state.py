from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from waker_loop.typedefs import Pollable


@dataclass(slots=True)
class Holding[T]:
    """Task holds its computation and is not being resumed."""

    computation: Pollable[T]


@dataclass(slots=True)
class Running:
    """A resumption of the task is in progress."""


@dataclass(slots=True)
class Completed[T]:
    """Task has finished. The computation is gone for good."""

    result: T | BaseException


type TaskState[T] = Holding[T] | Running | Completed[T]
