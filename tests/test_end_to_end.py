import asyncio
import logging
import time

import numpy as np

from director import (
    CameraCommand,
    DirectionEngine,
    TaskStatus,
    WaitCommand,
    create_demo_direction,
    prepare_task_queue,
)


def test_focus_then_wait(ctx, scene, rig):
    events = []
    ctx.on_task_start = lambda task: events.append(("start", task.id))
    ctx.on_task_complete = lambda task: events.append(("complete", task.id))
    ctx.on_all_complete = lambda: events.append(("all", None))

    tasks = prepare_task_queue([
        CameraCommand(action="focus", target="Hero", duration=0.5),
        WaitCommand(duration=0.3),
    ])
    engine = DirectionEngine()
    engine.set_context(ctx)
    engine.add_tasks(tasks)

    hero_at_focus = scene.find_by_name("Hero").world_position()
    start = time.monotonic()
    asyncio.run(engine.execute())
    elapsed = time.monotonic() - start

    assert elapsed >= 0.8
    assert [k for k, _ in events] == ["start", "complete", "start", "complete", "all"]
    assert all(t.status is TaskStatus.COMPLETED for t in tasks)
    assert np.allclose(rig.controls.target, hero_at_focus)


def test_demo_direction_runs_headless(ctx, rig, caplog):
    caplog.set_level(logging.INFO, logger="director")
    tasks = prepare_task_queue(create_demo_direction().commands)
    engine = DirectionEngine()
    engine.set_context(ctx)
    engine.add_tasks(tasks)
    asyncio.run(engine.execute())

    assert all(t.status is TaskStatus.COMPLETED for t in tasks)
    # The demo ends with a camera reset
    assert np.allclose(rig.camera.position, [8.0, 5.0, 8.0])
    assert np.allclose(rig.controls.target, [0.0, 0.0, 0.0])
    assert not ctx.vfx_state.bloom.enabled
    assert "Direction complete" in caplog.text
