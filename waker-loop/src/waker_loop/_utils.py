from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from waker_loop.loop import Executor


@dataclass(kw_only=True)
class _Local(threading.local):
    """Wrapper around threading.local for proper type annotations."""

    """The executor whose run-loop is on this thread, if any."""
    executor: Executor | None = None


_local = _Local()

__all__ = [
    "_local",
]
