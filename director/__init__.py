"""
Director - runs timed cinematic command sequences against a live scene.

Quick Start:
    import asyncio
    from director import (
        DirectionEngine, ExecutionContext, CameraController,
        create_demo_direction, prepare_task_queue,
    )

    engine = DirectionEngine()
    engine.set_context(ExecutionContext(scene=root, camera=CameraController.create()))
    engine.add_tasks(prepare_task_queue(create_demo_direction().commands))
    asyncio.run(engine.execute())
"""

from .errors import DirectorError, NoSceneError, TweenCancelled, CommandParseError, TaskStateError
from .commands import (
    CommandType,
    AnimationCommand,
    CameraCommand,
    VFXCommand,
    SoundCommand,
    PhysicsCommand,
    WaitCommand,
    DirectionResponse,
    Task,
    TaskStatus,
    prepare_task_queue,
    command_from_dict,
    command_to_dict,
    parse_direction,
    create_demo_direction,
)
from .context import ExecutionContext, VFXChannel, VFXState, DEFAULT_VFX_STATE
from .engine import DirectionEngine, EngineConfig, EngineState
from .scene import SceneNode, Transform, Material, MaterialKind, MeshRenderer, CameraController
from .systems import Completed, Skipped, Failed, PhysicsWorld
from .audio import AudioEngine, AudioConfig, SoundBoard
from .core.signal import SignalBridge
from .time import FrameClock, Tween, Timeline

__all__ = [
    'DirectorError', 'NoSceneError', 'TweenCancelled', 'CommandParseError', 'TaskStateError',
    'CommandType', 'AnimationCommand', 'CameraCommand', 'VFXCommand', 'SoundCommand',
    'PhysicsCommand', 'WaitCommand', 'DirectionResponse', 'Task', 'TaskStatus',
    'prepare_task_queue', 'command_from_dict', 'command_to_dict', 'parse_direction',
    'create_demo_direction',
    'ExecutionContext', 'VFXChannel', 'VFXState', 'DEFAULT_VFX_STATE',
    'DirectionEngine', 'EngineConfig', 'EngineState',
    'SceneNode', 'Transform', 'Material', 'MaterialKind', 'MeshRenderer', 'CameraController',
    'Completed', 'Skipped', 'Failed', 'PhysicsWorld',
    'AudioEngine', 'AudioConfig', 'SoundBoard',
    'SignalBridge',
    'FrameClock', 'Tween', 'Timeline',
]
