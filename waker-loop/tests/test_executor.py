from __future__ import annotations

import threading
from typing import TYPE_CHECKING

import pytest

from waker_loop import lowlevel
from waker_loop.loop import Executor, run
from waker_loop.timerio import sleep

if TYPE_CHECKING:
    from waker_loop.typedefs import Coro


class TestRun:
    def test_finishing_computation_is_resumed_once(self, executor, make_steps) -> None:
        steps = make_steps(result="done")
        executor.spawn(steps)

        executor.run()

        assert steps.polls == 1
        assert executor.pending == 0

    def test_second_run_on_empty_queue_is_noop(self, executor, make_steps) -> None:
        steps = make_steps()
        executor.spawn(steps)
        executor.run()

        executor.run()

        assert steps.polls == 1

    def test_run_without_tasks_returns(self, executor) -> None:
        executor.run()

    def test_tasks_resume_in_spawn_order(self, executor) -> None:
        order: list[str] = []

        def record(name: str) -> Coro[None]:
            order.append(name)
            yield from sleep(0)
            order.append(name)

        for name in ("a", "b", "c"):
            executor.spawn(record(name))

        executor.run()

        assert order == ["a", "b", "c", "a", "b", "c"]

    def test_never_woken_task_is_left_behind(self, executor, make_steps) -> None:
        steps = make_steps(pending=1)
        executor.spawn(steps)

        executor.run()

        assert steps.polls == 1
        assert executor.pending == 0

    def test_completed_task_is_never_resumed_again(self, executor, make_steps) -> None:
        steps = make_steps(pending=2)
        executor.spawn(steps)

        for _ in range(3):
            executor.run(wait_for_wakeups=False)
            steps.wakers[-1].wake()
        executor.run()

        assert steps.polls == 3

    def test_module_level_run(self, make_steps) -> None:
        first, second = make_steps(), make_steps()

        run(first, second)

        assert (first.polls, second.polls) == (1, 1)


class TestSpawn:
    def test_spawn_from_inside_a_task(self, executor) -> None:
        ran: list[str] = []

        def child() -> Coro[None]:
            ran.append("child")
            yield from sleep(0)

        def parent() -> Coro[None]:
            lowlevel.spawn(child(), name="child")
            ran.append("parent")
            yield from sleep(0)

        executor.spawn(parent())
        executor.run()

        assert ran == ["parent", "child"]

    def test_spawn_from_another_thread(self, executor, make_steps) -> None:
        steps = make_steps()
        thread = threading.Thread(target=executor.spawn, args=(steps,))
        thread.start()
        thread.join()

        executor.run()

        assert steps.polls == 1

    def test_spawn_accepts_native_coroutines(self, executor) -> None:
        ran = []

        async def coro() -> None:
            ran.append(True)

        executor.spawn(coro())
        executor.run()

        assert ran == [True]

    def test_spawn_rejects_non_computations(self, executor) -> None:
        with pytest.raises(TypeError):
            executor.spawn(42)


class TestWaitForWakeups:
    def test_run_waits_for_armed_timer(self, executor, timing) -> None:
        done = []

        def coro() -> Coro[None]:
            yield from sleep(0.2)
            done.append(True)

        executor.spawn(coro())

        timing.start()
        executor.run()
        timing.stop()

        assert done == [True]
        timing.assert_elapsed_between(0.2, 0.5)

    def test_pure_drain_returns_before_timer(self, executor, timing) -> None:
        done = []

        def coro() -> Coro[None]:
            yield from sleep(0.2)
            done.append(True)

        executor.spawn(coro())

        timing.start()
        executor.run(wait_for_wakeups=False)
        timing.stop()
        assert done == []
        timing.assert_elapsed_between(0, 0.15)

        executor.run()
        assert done == [True]

    def test_settings_decide_default(self, settings, make_steps) -> None:
        done = []

        def coro() -> Coro[None]:
            yield from sleep(0.1)
            done.append(True)

        drain_only = settings.model_copy(update={"wait_for_wakeups": False})
        executor = Executor(settings=drain_only)
        executor.spawn(coro())
        executor.run()

        assert done == []


class TestErrors:
    def test_exception_propagates_out_of_run(self, executor, make_steps) -> None:
        def failing() -> Coro[None]:
            raise ValueError("boom")
            yield

        survivor = make_steps()
        executor.spawn(failing())
        executor.spawn(survivor)

        with pytest.raises(ValueError, match="boom"):
            executor.run()

        assert survivor.polls == 0
        assert executor.pending == 1

        executor.run()
        assert survivor.polls == 1


class TestRunningExecutor:
    def test_running_executor_and_current_task(self, executor) -> None:
        seen = []

        def coro() -> Coro[None]:
            seen.append(lowlevel.get_running_executor())
            seen.append(lowlevel.get_current_task().name)
            yield from sleep(0)

        executor.spawn(coro(), name="observer")
        executor.run()

        assert seen == [executor, "observer"]

    def test_no_running_executor_outside_run(self) -> None:
        with pytest.raises(RuntimeError):
            lowlevel.get_running_executor()

    def test_no_current_task_between_resumptions(self, executor) -> None:
        with pytest.raises(RuntimeError):
            executor.current_task
