"""
Physics executor - tween-driven stand-ins for forces, explosions and gravity.

No rigid-body simulation runs here. `PhysicsWorld` only remembers which
object names the host flagged as physics-enabled.
"""

from __future__ import annotations
from typing import List, Set
import asyncio
import logging
import math

import numpy as np

from ..commands import PhysicsCommand
from ..context import ExecutionContext
from ..core.math3d import as_vec3, distance, normalized
from ..scene.graph import SceneNode, find_object_by_name
from ..time.tween import Timeline
from .animation import shake_object
from .outcome import COMPLETED, Outcome, Skipped

logger = logging.getLogger(__name__)

FORCE_SCALE = 0.1
FORCE_DURATION = 0.5
IMPULSE_SCALE = 0.2
IMPULSE_DURATION = 0.2

DEFAULT_EXPLODE_RADIUS = 3.0
EXPLODE_DURATION = 0.5
EXPLODE_PUSH = 2.0
EXPLODE_LIFT = 1.0

GRAVITY_DURATION = 0.5
GRAVITY_SETTLE = 0.6


class PhysicsWorld:
    """Names of objects flagged physics-enabled. Bookkeeping only."""

    def __init__(self):
        self._enabled: Set[str] = set()

    def enable(self, name: str):
        self._enabled.add(name)
        logger.info(f"Physics enabled for: {name}")

    def disable(self, name: str):
        self._enabled.discard(name)
        logger.info(f"Physics disabled for: {name}")

    def is_enabled(self, name: str) -> bool:
        return name in self._enabled

    def reset(self):
        self._enabled.clear()

    def __len__(self) -> int:
        return len(self._enabled)


def _skip(reason: str) -> Skipped:
    logger.warning(f"Physics skipped: {reason}")
    return Skipped(reason)


def _is_vec3(value) -> bool:
    return isinstance(value, (tuple, list)) and len(value) == 3


async def execute_physics(
    command: PhysicsCommand,
    ctx: ExecutionContext,
    timeline: Timeline,
) -> Outcome:
    root = ctx.scene
    if root is None:
        return _skip("no scene")

    action = command.action

    if action in ("enable", "disable"):
        if not command.target:
            return _skip(f"{action} needs a target")
        if ctx.physics is None:
            return _skip("no physics world")
        if action == "enable":
            ctx.physics.enable(command.target)
        else:
            ctx.physics.disable(command.target)
        return COMPLETED

    if action in ("apply_force", "apply_impulse"):
        if not _is_vec3(command.value):
            return _skip(f"{action} needs a 3-vector, got {command.value!r}")
        node = find_object_by_name(root, command.target)
        if node is None:
            return _skip(f"object not found: {command.target}")
        if action == "apply_force":
            scale, duration, ease = FORCE_SCALE, FORCE_DURATION, "power2.out"
        else:
            scale, duration, ease = IMPULSE_SCALE, IMPULSE_DURATION, "power3.out"
        end = node.position + as_vec3(command.value) * scale
        await timeline.to(lambda: node.transform.pos, end, duration, ease=ease,
                          on_update=_setter(node, "pos"), name=f"{action}:{node.name}")
        return COMPLETED

    if action == "explode":
        await _explode(root, command, timeline)
        return COMPLETED

    if action == "gravity":
        for node in root.meshes():
            if node.position[1] > 0:
                timeline.to(lambda n=node: n.transform.pos[1], 0.0, GRAVITY_DURATION,
                            ease="bounce.out", on_update=_y_setter(node),
                            name=f"gravity:{node.name}")
        await timeline.delay(GRAVITY_SETTLE, name="gravity")
        return COMPLETED

    return _skip(f"unknown physics action: {action}")


def _setter(node: SceneNode, attr: str):
    def apply(v: np.ndarray):
        getattr(node.transform, attr)[:] = v
    return apply


def _y_setter(node: SceneNode):
    def apply(v: float):
        node.transform.pos[1] = v
    return apply


async def _explode(root: SceneNode, command: PhysicsCommand, timeline: Timeline):
    radius = command.radius if command.radius and command.radius > 0 else DEFAULT_EXPLODE_RADIUS

    center = np.zeros(3, dtype=np.float64)
    if command.target:
        origin = find_object_by_name(root, command.target)
        if origin is not None:
            center = origin.position.copy()

    hits: List[SceneNode] = []
    for node in root.meshes():
        d = distance(node.position, center)
        if 0 < d < radius:
            hits.append(node)

    if not hits:
        logger.debug(f"Explode: nothing within {radius} of {center}, shaking scene")
        await shake_object(root, 0.3, 0.5, timeline)
        return

    waits = []
    for node in hits:
        offset = node.position - center
        force = (radius - distance(node.position, center)) / radius
        push = normalized(offset) * force * EXPLODE_PUSH
        push[1] += EXPLODE_LIFT
        spin = (np.random.random(3) - 0.5) * 2 * math.pi

        waits.append(timeline.to(lambda n=node: n.transform.pos, node.position + push,
                                 EXPLODE_DURATION, ease="power2.out",
                                 on_update=_setter(node, "pos"),
                                 name=f"explode:{node.name}").wait())
        waits.append(timeline.to(lambda n=node: n.transform.rot_euler, node.rotation + spin,
                                 EXPLODE_DURATION, ease="power2.out",
                                 on_update=_setter(node, "rot_euler"),
                                 name=f"explode-spin:{node.name}").wait())

    logger.debug(f"Explode: pushing {len(hits)} object(s)")
    await asyncio.gather(*waits)
