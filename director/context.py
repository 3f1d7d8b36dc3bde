"""
Execution Context - the host-supplied references executors work against.

The context is not owned by the engine: the host builds it, binds it with
`DirectionEngine.set_context()` and may swap it between runs.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Callable, Optional

from .audio import SoundBoard
from .core.signal import SignalEmitter, SIGNAL_VFX_CHANGED
from .scene import CameraController, SceneNode

if TYPE_CHECKING:
    from .commands import Task
    from .systems.physics import PhysicsWorld


# =============================================================================
# VFX State
# =============================================================================

VFX_CHANNELS = ("bloom", "chromatic_aberration", "vignette", "noise", "glitch")


@dataclass(frozen=True)
class VFXChannel:
    enabled: bool = False
    magnitude: float = 0.0


@dataclass(frozen=True)
class VFXState:
    """
    Post-processing channel values.

    Immutable: every change produces a new state so the host can compare
    old and new values when it is notified.
    """
    bloom: VFXChannel = VFXChannel()
    chromatic_aberration: VFXChannel = VFXChannel()
    vignette: VFXChannel = VFXChannel()
    noise: VFXChannel = VFXChannel()
    glitch: VFXChannel = VFXChannel()

    def channel(self, name: str) -> VFXChannel:
        if name not in VFX_CHANNELS:
            raise KeyError(f"unknown VFX channel: {name}")
        return getattr(self, name)

    def with_channel(self, name: str, channel: VFXChannel) -> "VFXState":
        if name not in VFX_CHANNELS:
            raise KeyError(f"unknown VFX channel: {name}")
        return replace(self, **{name: channel})


DEFAULT_VFX_STATE = VFXState()


# =============================================================================
# Context
# =============================================================================

TaskCallback = Callable[["Task"], None]


@dataclass
class ExecutionContext(SignalEmitter):
    """
    References for one direction run.

    `scene` and `camera` are live objects the executors mutate in place.
    `set_vfx_state` is the host's setter; executors go through
    `apply_vfx()` so the context always holds the latest state.
    """
    scene: Optional[SceneNode] = None
    camera: Optional[CameraController] = None
    vfx_state: VFXState = DEFAULT_VFX_STATE
    set_vfx_state: Optional[Callable[[VFXState], None]] = None
    sound: Optional[SoundBoard] = None
    physics: Optional["PhysicsWorld"] = None

    on_task_start: Optional[TaskCallback] = None
    on_task_complete: Optional[TaskCallback] = None
    on_all_complete: Optional[Callable[[], None]] = None

    def apply_vfx(self, state: VFXState):
        """Record a new VFX state and hand it to the host."""
        self.vfx_state = state
        if self.set_vfx_state is not None:
            self.set_vfx_state(state)
        self.emit(SIGNAL_VFX_CHANGED, state)

    def reset_vfx(self):
        self.apply_vfx(DEFAULT_VFX_STATE)
