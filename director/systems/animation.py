"""
Animation executor - tweens a named scene node's transform or material.
"""

from __future__ import annotations
from typing import Optional
import logging

import numpy as np

from ..commands import AnimationCommand
from ..context import ExecutionContext
from ..core.math3d import DEFAULT_EASE, as_vec3, ease_linear
from ..errors import NoSceneError
from ..scene.graph import SceneNode, find_object_by_name, parse_color
from ..time.tween import Timeline
from .outcome import COMPLETED, Failed, Outcome, Skipped

logger = logging.getLogger(__name__)

DEFAULT_DURATION = 1.0

# action -> Transform attribute
_TRANSFORM_ATTRS = {
    "rotate": "rot_euler",
    "move": "pos",
    "scale": "scale",
}


def _skip(reason: str) -> Skipped:
    logger.warning(f"Animation skipped: {reason}")
    return Skipped(reason)


async def execute_animation(
    command: AnimationCommand,
    ctx: ExecutionContext,
    timeline: Timeline,
) -> Outcome:
    if ctx.scene is None:
        return Failed(NoSceneError("animation needs a scene root"))

    node = find_object_by_name(ctx.scene, command.target)
    if node is None:
        return _skip(f"object not found: {command.target}")

    duration = DEFAULT_DURATION if command.duration is None else command.duration
    ease = command.ease or DEFAULT_EASE
    delay = command.delay or 0.0
    value = command.value

    if command.action in _TRANSFORM_ATTRS:
        attr = _TRANSFORM_ATTRS[command.action]
        if command.action == "scale" and isinstance(value, (int, float)):
            end = as_vec3(value)
        elif isinstance(value, (tuple, list)) and len(value) == 3:
            end = as_vec3(value)
        else:
            return _skip(f"{command.action} needs a 3-vector, got {value!r}")

        def apply(v: np.ndarray):
            getattr(node.transform, attr)[:] = v

        await timeline.to(lambda: getattr(node.transform, attr), end, duration,
                          ease=ease, on_update=apply, delay=delay,
                          name=f"{command.action}:{node.name}")
        return COMPLETED

    if command.action == "opacity":
        material = node.material
        if material is None:
            return _skip(f"opacity needs a mesh: {node.name}")
        target = float(value) if isinstance(value, (int, float)) else 1.0
        material.transparent = True

        def apply_opacity(v: float):
            material.opacity = float(v)

        await timeline.to(lambda: material.opacity, target, duration,
                          ease=ease, on_update=apply_opacity, delay=delay,
                          name=f"opacity:{node.name}")
        return COMPLETED

    if command.action == "color":
        material = node.material
        if material is None or not material.is_standard:
            return _skip(f"color needs a standard material: {node.name}")
        if not isinstance(value, str):
            return _skip(f"color needs a color string, got {value!r}")
        try:
            end = parse_color(value)
        except ValueError as e:
            return _skip(str(e))

        def apply_color(v: np.ndarray):
            material.color[:] = v

        await timeline.to(lambda: material.color, end, duration,
                          ease=ease, on_update=apply_color, delay=delay,
                          name=f"color:{node.name}")
        return COMPLETED

    return _skip(f"unknown animation action: {command.action}")


async def shake_object(
    node: SceneNode,
    intensity: float = 0.1,
    duration: float = 0.5,
    timeline: Optional[Timeline] = None,
):
    """Jitter a node through 10 random offsets, then put it back exactly."""
    timeline = timeline or Timeline()
    original = node.position.copy()
    step = duration / 10

    def apply(v: np.ndarray):
        node.transform.pos[:] = v

    try:
        for _ in range(10):
            offset = (np.random.random(3) - 0.5) * intensity
            await timeline.to(lambda: node.transform.pos, original + offset, step,
                              ease=ease_linear, on_update=apply, name=f"shake:{node.name}")
    finally:
        node.transform.pos[:] = original
