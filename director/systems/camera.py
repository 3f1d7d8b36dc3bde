"""
Camera executor - dolly, pan, orbit, focus, shake and reset on the camera rig.

Every branch calls `controls.update()` each frame so the camera keeps
looking at the orbit target while either one moves.
"""

from __future__ import annotations
import asyncio
import logging
import math

import numpy as np

from ..commands import CameraCommand
from ..context import ExecutionContext
from ..core.math3d import DEFAULT_EASE, as_vec3, ease_linear
from ..scene.camera import DEFAULT_CAMERA_POSITION, DEFAULT_ORBIT_TARGET, CameraController
from ..scene.graph import find_object_by_name
from ..time.tween import Timeline
from .outcome import COMPLETED, Outcome, Skipped

logger = logging.getLogger(__name__)

DEFAULT_DURATION = 1.0
DEFAULT_DOLLY_DISTANCE = 5.0
DEFAULT_ORBIT_ANGLE = math.pi / 4
DEFAULT_SHAKE_INTENSITY = 0.3
SHAKE_STEPS = 20


def _skip(reason: str) -> Skipped:
    logger.warning(f"Camera skipped: {reason}")
    return Skipped(reason)


def _number(value, default: float) -> float:
    return float(value) if isinstance(value, (int, float)) else default


async def execute_camera(
    command: CameraCommand,
    ctx: ExecutionContext,
    timeline: Timeline,
) -> Outcome:
    rig = ctx.camera
    if rig is None:
        return _skip("no camera controller")

    camera, controls = rig.camera, rig.controls
    duration = DEFAULT_DURATION if command.duration is None else command.duration
    action = command.action

    def move_camera(v: np.ndarray):
        camera.position[:] = v
        controls.update()

    def move_target(v: np.ndarray):
        controls.target[:] = v
        controls.update()

    if action in ("dolly_in", "dolly_out"):
        distance = _number(command.value, DEFAULT_DOLLY_DISTANCE)
        sign = 1.0 if action == "dolly_in" else -1.0
        end = camera.position + camera.get_world_direction() * distance * sign
        await timeline.to(lambda: camera.position, end, duration,
                          ease=DEFAULT_EASE, on_update=move_camera, name=action)
        return COMPLETED

    if action == "focus":
        node = find_object_by_name(ctx.scene, command.target)
        if node is None:
            return _skip(f"focus target not found: {command.target}")
        await timeline.to(lambda: controls.target, node.world_position(), duration,
                          ease=DEFAULT_EASE, on_update=move_target, name="focus")
        return COMPLETED

    if action == "pan":
        value = command.value
        if not (isinstance(value, (tuple, list)) and len(value) == 3):
            return _skip(f"pan needs a 3-vector, got {value!r}")
        end = controls.target + as_vec3(value)
        await timeline.to(lambda: controls.target, end, duration,
                          ease=DEFAULT_EASE, on_update=move_target, name="pan")
        return COMPLETED

    if action == "orbit":
        await _orbit(rig, _number(command.value, DEFAULT_ORBIT_ANGLE), duration, timeline)
        return COMPLETED

    if action == "shake":
        await _shake(rig, _number(command.value, DEFAULT_SHAKE_INTENSITY), duration, timeline)
        return COMPLETED

    if action == "reset":
        await asyncio.gather(
            timeline.to(lambda: camera.position, DEFAULT_CAMERA_POSITION, duration,
                        ease=DEFAULT_EASE, on_update=move_camera, name="reset:position").wait(),
            timeline.to(lambda: controls.target, DEFAULT_ORBIT_TARGET, duration,
                        ease=DEFAULT_EASE, on_update=move_target, name="reset:target").wait(),
        )
        return COMPLETED

    return _skip(f"unknown camera action: {action}")


async def _orbit(rig: CameraController, angle: float, duration: float, timeline: Timeline):
    """Sweep the camera around the Y axis at its current distance from the origin."""
    camera, controls = rig.camera, rig.controls
    # Horizontal radius: y is left alone, so the full distance stays constant
    radius = math.hypot(camera.position[0], camera.position[2])
    start_angle = math.atan2(camera.position[0], camera.position[2])

    def step(progress: float):
        current = start_angle + angle * progress
        camera.position[0] = math.sin(current) * radius
        camera.position[2] = math.cos(current) * radius
        controls.update()

    # Progress itself is tweened linearly; x and z are derived from it
    await timeline.to(0.0, 1.0, duration, ease=ease_linear, on_update=step, name="orbit")


async def _shake(rig: CameraController, intensity: float, duration: float, timeline: Timeline):
    camera, controls = rig.camera, rig.controls
    original = camera.position.copy()
    step = duration / SHAKE_STEPS

    def apply(v: np.ndarray):
        camera.position[:] = v
        controls.update()

    try:
        for _ in range(SHAKE_STEPS):
            offset = (np.random.random(3) - 0.5) * intensity
            await timeline.to(lambda: camera.position, original + offset, step,
                              ease=ease_linear, on_update=apply, name="shake")
    finally:
        camera.position[:] = original
        controls.update()
