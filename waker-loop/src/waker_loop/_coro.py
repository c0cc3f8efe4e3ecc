from __future__ import annotations

from collections.abc import Coroutine, Generator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, cast

from waker_loop.typedefs import PENDING, Pending, Ready

if TYPE_CHECKING:
    from waker_loop.typedefs import Computation, Coro, Poll, Pollable, Waker


@dataclass(slots=True, kw_only=True)
class CoroComputation[T]:
    """Drives a generator or native coroutine through the poll protocol.

    The coroutine yields pollables. Each one is polled with the waker of the
    current resumption until it is ready, and its value is sent back in.
    """

    """The wrapped coroutine."""
    coro: Coro[T] | Coroutine[Pollable[Any], Any, T] = field(repr=False)

    """The pollable the coroutine is currently suspended on."""
    _awaiting: Pollable[Any] | None = field(default=None, init=False, repr=False)

    """The value to send in on the next step."""
    _send_value: Any = field(default=None, init=False, repr=False)

    def poll(self, waker: Waker) -> Poll[T]:
        """Steps the coroutine until it suspends or returns."""
        while True:
            if self._awaiting is not None:
                result = self._awaiting.poll(waker)
                if isinstance(result, Pending):
                    return PENDING
                self._awaiting = None
                self._send_value = result.value

            value, self._send_value = self._send_value, None
            try:
                self._awaiting = self.coro.send(value)
            except StopIteration as e:
                return Ready(e.value)

            if not hasattr(self._awaiting, "poll"):
                msg = f"Coroutine yielded {self._awaiting!r}, expected a pollable"
                self.coro.close()
                raise TypeError(msg)


def as_pollable[T](computation: Computation[T]) -> Pollable[T]:
    """Wraps generators and coroutines; passes pollables through."""
    if isinstance(computation, Generator | Coroutine):
        return CoroComputation(coro=computation)
    if hasattr(computation, "poll"):
        return cast("Pollable[T]", computation)

    msg = f"Cannot schedule {computation!r}: not a pollable, generator or coroutine"
    raise TypeError(msg)
