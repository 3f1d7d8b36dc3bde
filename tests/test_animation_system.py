import asyncio

import numpy as np
import pytest

from director.commands import AnimationCommand
from director.context import ExecutionContext
from director.errors import NoSceneError
from director.systems import Completed, Failed, Skipped, execute_animation, shake_object
from director.time import Timeline


def run(command, ctx):
    return asyncio.run(execute_animation(command, ctx, Timeline()))


def snapshot(root):
    return {n.node_id: (n.position.copy(), n.rotation.copy(), n.scale.copy()) for n in root.walk()}


def test_no_scene_is_a_hard_failure():
    outcome = run(AnimationCommand(target="Hero", action="rotate", value=(0.0, 1.0, 0.0)), ExecutionContext())
    assert isinstance(outcome, Failed)
    assert isinstance(outcome.error, NoSceneError)


def test_missing_target_skips_without_mutation(ctx, scene):
    before = snapshot(scene)
    outcome = run(AnimationCommand(target="Ghost", action="rotate", value=(0.0, 3.0, 0.0)), ctx)
    assert isinstance(outcome, Skipped)
    after = snapshot(scene)
    for node_id, values in before.items():
        assert all(np.array_equal(a, b) for a, b in zip(values, after[node_id]))


def test_rotate_move_scale(ctx, scene):
    hero = scene.find_by_name("Hero")
    run(AnimationCommand(target="Hero", action="rotate", value=(0.0, 1.5, 0.0), duration=0.05), ctx)
    run(AnimationCommand(target="Hero", action="move", value=(0.0, 4.0, 0.0), duration=0.05,
                         ease="bounce.out"), ctx)
    run(AnimationCommand(target="Hero", action="scale", value=2.0, duration=0.05), ctx)
    assert np.allclose(hero.rotation, [0.0, 1.5, 0.0])
    assert np.allclose(hero.position, [0.0, 4.0, 0.0])
    assert np.allclose(hero.scale, [2.0, 2.0, 2.0])


def test_move_rejects_scalar(ctx, scene):
    outcome = run(AnimationCommand(target="Hero", action="move", value=3.0, duration=0.05), ctx)
    assert isinstance(outcome, Skipped)
    assert np.allclose(scene.find_by_name("Hero").position, [1.0, 2.0, 0.0])


def test_delay_postpones_start(ctx, scene):
    hero = scene.find_by_name("Hero")

    async def go():
        task = asyncio.ensure_future(execute_animation(
            AnimationCommand(target="Hero", action="move", value=(9.0, 9.0, 9.0),
                             duration=0.05, delay=0.1),
            ctx, Timeline()))
        await asyncio.sleep(0.05)
        mid = hero.position.copy()
        await task
        return mid

    mid = asyncio.run(go())
    assert np.allclose(mid, [1.0, 2.0, 0.0])
    assert np.allclose(hero.position, [9.0, 9.0, 9.0])


def test_opacity_enables_transparency(ctx, scene):
    material = scene.find_by_name("Satellite").material
    outcome = run(AnimationCommand(target="Satellite", action="opacity", value=0.25, duration=0.05), ctx)
    assert isinstance(outcome, Completed)
    assert material.transparent
    assert material.opacity == pytest.approx(0.25)


def test_opacity_on_group_skips(ctx):
    outcome = run(AnimationCommand(target="EmptyGroup", action="opacity", value=0.5), ctx)
    assert isinstance(outcome, Skipped)


def test_color_needs_standard_material(ctx, scene):
    run(AnimationCommand(target="Hero", action="color", value="#ff0000", duration=0.05), ctx)
    assert np.allclose(scene.find_by_name("Hero").material.color, [1.0, 0.0, 0.0])

    marker = scene.find_by_name("Marker")
    outcome = run(AnimationCommand(target="Marker", action="color", value="#ff0000", duration=0.05), ctx)
    assert isinstance(outcome, Skipped)
    assert np.allclose(marker.material.color, [1.0, 1.0, 1.0])


def test_unknown_action_skips(ctx):
    outcome = run(AnimationCommand(target="Hero", action="wiggle", value=1.0), ctx)
    assert isinstance(outcome, Skipped)


def test_shake_object_restores_position(scene):
    hero = scene.find_by_name("Hero")
    start = hero.position.copy()
    asyncio.run(shake_object(hero, intensity=0.2, duration=0.1))
    assert np.array_equal(hero.position, start)
