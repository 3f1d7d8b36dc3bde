import asyncio
import time

import pytest

from director.commands import AnimationCommand, CameraCommand, TaskStatus, WaitCommand, prepare_task_queue
from director.context import ExecutionContext
from director.core.signal import (
    SignalBridge,
    SIGNAL_RUN_COMPLETED,
    SIGNAL_TASK_COMPLETED,
    SIGNAL_TASK_STARTED,
)
from director.engine import DirectionEngine, EngineConfig
from director.errors import NoSceneError, TweenCancelled
from director.systems import Completed, Failed, Skipped


class Recorder:
    """Collects lifecycle callbacks in call order."""

    def __init__(self):
        self.events = []

    def bind(self, ctx):
        ctx.on_task_start = lambda task: self.events.append(("start", task.id))
        ctx.on_task_complete = lambda task: self.events.append(("complete", task.id))
        ctx.on_all_complete = lambda: self.events.append(("all", None))
        return ctx

    def of(self, kind):
        return [tid for k, tid in self.events if k == kind]


def waits(*durations):
    return prepare_task_queue([WaitCommand(d) for d in durations])


def make_engine(tasks, ctx=None, config=None):
    engine = DirectionEngine(config)
    rec = Recorder()
    engine.set_context(rec.bind(ctx or ExecutionContext()))
    engine.add_tasks(tasks)
    return engine, rec


def test_clean_run_fires_callbacks_in_order():
    tasks = waits(0.01, 0.01, 0.01)
    engine, rec = make_engine(tasks)
    asyncio.run(engine.execute())

    ids = [t.id for t in tasks]
    assert rec.of("start") == ids
    assert rec.of("complete") == ids
    assert rec.events[-1] == ("all", None)
    assert len(rec.of("all")) == 1
    # start/complete pairs never interleave
    assert [k for k, _ in rec.events[:-1]] == ["start", "complete"] * 3
    assert all(t.status is TaskStatus.COMPLETED for t in tasks)
    assert all(isinstance(t.outcome, Completed) for t in tasks)

    state = engine.get_state()
    assert not state.is_running
    assert state.current_index == 0
    assert state.total_tasks == 3


def test_execute_without_context_does_nothing(caplog):
    engine = DirectionEngine()
    tasks = waits(0.01)
    engine.add_tasks(tasks)
    asyncio.run(engine.execute())
    assert tasks[0].status is TaskStatus.PENDING
    assert "No execution context" in caplog.text


def test_second_execute_is_ignored_while_running(caplog):
    tasks = waits(0.1)
    engine, rec = make_engine(tasks)

    async def run():
        first = asyncio.ensure_future(engine.execute())
        await asyncio.sleep(0.02)
        assert engine.is_running
        await engine.execute()
        await first

    asyncio.run(run())
    assert "already running" in caplog.text
    assert rec.of("start") == [tasks[0].id]
    assert len(rec.of("all")) == 1


def test_failure_does_not_stop_the_sequence():
    async def flaky_wait(command, ctx, timeline):
        if command.duration == 0.02:
            raise RuntimeError("executor blew up")
        await timeline.delay(command.duration)
        return Completed()

    tasks = waits(0.01, 0.02, 0.01)
    engine, rec = make_engine(tasks)
    engine.register_executor("wait", flaky_wait)
    asyncio.run(engine.execute())

    assert [t.status for t in tasks] == [TaskStatus.COMPLETED, TaskStatus.FAILED, TaskStatus.COMPLETED]
    assert isinstance(tasks[1].outcome, Failed)
    assert "blew up" in str(tasks[1].outcome.error)
    assert len(rec.of("complete")) == 3
    assert len(rec.of("all")) == 1


def test_no_scene_fails_but_missing_controller_skips():
    tasks = prepare_task_queue([
        AnimationCommand(target="Hero", action="rotate", value=(0.0, 1.0, 0.0)),
        CameraCommand(action="dolly_in"),
    ])
    engine, _ = make_engine(tasks)
    asyncio.run(engine.execute())

    assert tasks[0].status is TaskStatus.FAILED
    assert isinstance(tasks[0].outcome.error, NoSceneError)
    assert tasks[1].status is TaskStatus.COMPLETED
    assert isinstance(tasks[1].outcome, Skipped)


def test_pause_holds_next_dispatch_only():
    tasks = waits(0.1, 0.01)
    engine, rec = make_engine(tasks)
    first_id = tasks[0].id
    rec_start = engine.context.on_task_start

    def start_and_pause(task):
        rec_start(task)
        if task.id == first_id:
            engine.pause()

    engine.context.on_task_start = start_and_pause

    async def run():
        runner = asyncio.ensure_future(engine.execute())
        await asyncio.sleep(0.3)
        # First task finished on time; second is held
        assert tasks[0].status is TaskStatus.COMPLETED
        assert tasks[1].status is TaskStatus.PENDING
        assert rec.of("start") == [first_id]
        state = engine.get_state()
        assert state.is_running and state.is_paused
        assert state.current_index == 1

        engine.resume()
        await runner

    asyncio.run(run())
    assert rec.of("start") == [t.id for t in tasks]
    assert len(rec.of("all")) == 1


def test_stop_prevents_further_dispatch():
    tasks = waits(0.01, 0.05, 0.01)
    engine, rec = make_engine(tasks)
    second_id = tasks[1].id
    rec_start = engine.context.on_task_start
    observed = {}

    def start_and_stop(task):
        rec_start(task)
        if task.id == second_id:
            engine.stop()
            observed["state"] = engine.get_state()

    engine.context.on_task_start = start_and_stop
    asyncio.run(engine.execute())

    assert not observed["state"].is_running
    assert observed["state"].current_index == 0
    assert rec.of("start") == [tasks[0].id, tasks[1].id]
    # The in-flight task still ran to completion
    assert tasks[1].status is TaskStatus.COMPLETED
    assert tasks[2].status is TaskStatus.PENDING
    assert rec.of("all") == []

    # A fresh queue starts from index 0
    engine.clear_tasks()
    fresh = waits(0.01)
    engine.context.on_task_start = rec_start
    engine.add_tasks(fresh)
    asyncio.run(engine.execute())
    assert fresh[0].status is TaskStatus.COMPLETED
    assert rec.of("start")[-1] == fresh[0].id


def test_stop_can_cancel_in_flight_work():
    tasks = waits(5.0, 0.01)
    engine, rec = make_engine(tasks, config=EngineConfig(cancel_in_flight_on_stop=True))

    async def run():
        runner = asyncio.ensure_future(engine.execute())
        await asyncio.sleep(0.05)
        engine.stop()
        started = time.monotonic()
        await runner
        return time.monotonic() - started

    elapsed = asyncio.run(run())
    assert elapsed < 1.0
    assert tasks[0].status is TaskStatus.FAILED
    assert isinstance(tasks[0].outcome.error, TweenCancelled)
    assert tasks[1].status is TaskStatus.PENDING


def test_restart_while_stopped_task_is_still_in_flight():
    old = waits(0.2, 0.01)
    engine, rec = make_engine(old)
    fresh = waits(0.4)
    seen = {}

    async def run():
        orphan = asyncio.ensure_future(engine.execute())
        await asyncio.sleep(0.05)
        engine.stop()
        engine.clear_tasks()
        engine.add_tasks(fresh)
        current = asyncio.ensure_future(engine.execute())
        await orphan
        # The stopped run settled without touching the new run's state
        seen["state"] = engine.get_state()
        await current

    asyncio.run(run())
    assert old[0].status is TaskStatus.COMPLETED
    assert old[1].status is TaskStatus.PENDING
    assert seen["state"].is_running
    assert seen["state"].current_index == 0
    assert seen["state"].total_tasks == 1
    assert fresh[0].status is TaskStatus.COMPLETED
    assert rec.of("start") == [old[0].id, fresh[0].id]
    assert rec.of("all") == [None]
    assert not engine.is_running


def test_clear_tasks_keeps_running_flag():
    tasks = waits(0.05, 0.01)
    engine, rec = make_engine(tasks)
    seen = {}

    async def run():
        runner = asyncio.ensure_future(engine.execute())
        await asyncio.sleep(0.02)
        engine.clear_tasks()
        seen["state"] = engine.get_state()
        await runner

    asyncio.run(run())
    assert seen["state"].is_running
    assert seen["state"].total_tasks == 0
    assert seen["state"].current_index == 0
    assert rec.of("start") == [tasks[0].id]


def test_terminal_tasks_are_not_rerun():
    tasks = waits(0.01, 0.01)
    engine, rec = make_engine(tasks)
    asyncio.run(engine.execute())
    asyncio.run(engine.execute())
    assert len(rec.of("start")) == 2
    assert len(rec.of("all")) == 2


def test_failing_callback_is_contained(caplog):
    tasks = waits(0.01, 0.01)
    engine, rec = make_engine(tasks)

    def explode(task):
        raise ValueError("host bug")

    engine.context.on_task_complete = explode
    asyncio.run(engine.execute())
    assert all(t.status is TaskStatus.COMPLETED for t in tasks)
    assert "host bug" in caplog.text
    assert len(rec.of("all")) == 1


def test_context_swap_between_runs():
    engine = DirectionEngine()
    first, second = Recorder(), Recorder()

    engine.set_context(first.bind(ExecutionContext()))
    engine.add_tasks(waits(0.01))
    asyncio.run(engine.execute())

    engine.clear_tasks()
    engine.set_context(second.bind(ExecutionContext()))
    engine.add_tasks(waits(0.01))
    asyncio.run(engine.execute())

    assert len(first.of("start")) == 1
    assert len(second.of("start")) == 1


def test_engine_emits_signals():
    bridge = SignalBridge()
    seen = []
    bridge.connect(SIGNAL_TASK_STARTED, lambda task: seen.append("started"))
    bridge.connect(SIGNAL_TASK_COMPLETED, lambda task: seen.append("completed"))
    bridge.connect(SIGNAL_RUN_COMPLETED, lambda: seen.append("run"))

    engine = DirectionEngine(signals=bridge)
    engine.set_context(ExecutionContext())
    engine.add_tasks(waits(0.01))
    asyncio.run(engine.execute())
    assert seen == ["started", "completed", "run"]


def test_unknown_executor_kind_rejected():
    engine = DirectionEngine()
    with pytest.raises(ValueError):
        engine.register_executor("teleport", lambda *a: None)
