"""This example shows the generator flavour of coroutines, and spawning from a task."""

import time
from typing import TYPE_CHECKING

from waker_loop import run, sleep
from waker_loop.log import configure_logging
from waker_loop.lowlevel import spawn

if TYPE_CHECKING:
    from waker_loop.typedefs import Coro


def child(i: int) -> Coro[None]:
    """Sleeps a little and reports."""
    yield from sleep(0.1 * i)
    print(f"child {i} done")


def entry() -> Coro[None]:
    """Spawns three children, then waits longer than all of them."""
    start_time = time.monotonic()
    for i in (3, 1, 2):
        spawn(child(i), name=f"child-{i}")
    yield from sleep(0.5)
    print(f"Slept for {time.monotonic() - start_time}")


if __name__ == "__main__":
    configure_logging()
    run(entry())
