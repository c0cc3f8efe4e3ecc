"""Four greeters that wait different amounts of time before finishing.

Run with an optional time unit in seconds (default 1.0), e.g.
    python examples/hello_world.py 0.1
"""

import sys

from waker_loop import Executor, Timer
from waker_loop.log import configure_logging


async def world(i: int, unit: float) -> None:
    """Waits i time units, then announces itself."""
    print(f"waiting {i}")
    await Timer.start(i * unit)
    print(f"World {i}!")


async def hello(i: int, unit: float) -> None:
    """Greets, then hands over to world."""
    print(f"Hello {i}!")
    await world(i, unit)


if __name__ == "__main__":
    configure_logging()
    unit = float(sys.argv[1]) if len(sys.argv) > 1 else 1.0

    executor = Executor()
    for i in (10, 5, 2, 1):
        executor.spawn(hello(i, unit), name=f"hello-{i}")
    executor.run()
