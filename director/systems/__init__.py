"""
Command executors, one per command kind.

Every executor has the signature

    async def execute_x(command, ctx: ExecutionContext, timeline: Timeline) -> Outcome

and settles with Completed, Skipped(reason) or Failed(error).
"""

from typing import Awaitable, Callable, Dict

from ..commands import CommandType
from .outcome import Outcome, Completed, Skipped, Failed, COMPLETED
from .animation import execute_animation, shake_object
from .camera import execute_camera
from .vfx import execute_vfx
from .sound import execute_sound, SOUND_MAP
from .physics import execute_physics, PhysicsWorld
from .wait import execute_wait

Executor = Callable[..., Awaitable[Outcome]]

DEFAULT_EXECUTORS: Dict[CommandType, Executor] = {
    CommandType.ANIMATION: execute_animation,
    CommandType.CAMERA: execute_camera,
    CommandType.VFX: execute_vfx,
    CommandType.SOUND: execute_sound,
    CommandType.PHYSICS: execute_physics,
    CommandType.WAIT: execute_wait,
}

__all__ = [
    'Outcome', 'Completed', 'Skipped', 'Failed', 'COMPLETED',
    'Executor', 'DEFAULT_EXECUTORS',
    'execute_animation', 'execute_camera', 'execute_vfx',
    'execute_sound', 'execute_physics', 'execute_wait',
    'shake_object', 'SOUND_MAP', 'PhysicsWorld',
]
