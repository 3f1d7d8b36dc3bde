"""
Core math, timing and signal primitives shared by the director.
"""

from .math3d import (
    EaseFunc,
    as_vec3,
    normalized,
    distance,
    get_ease,
    ease_names,
    ease_linear,
    ease_out_quad,
    ease_in_quad,
    ease_out_bounce,
    clamp,
    lerp,
)
from .frame import FrameState
from .signal import (
    SignalBridge,
    SignalEmitter,
    Connection,
    SIGNAL_TASK_STARTED,
    SIGNAL_TASK_COMPLETED,
    SIGNAL_RUN_COMPLETED,
    SIGNAL_ENGINE_PAUSED,
    SIGNAL_ENGINE_RESUMED,
    SIGNAL_ENGINE_STOPPED,
    SIGNAL_VFX_CHANGED,
)

__all__ = [
    'EaseFunc', 'as_vec3', 'normalized', 'distance', 'get_ease', 'ease_names',
    'ease_linear', 'ease_out_quad', 'ease_in_quad', 'ease_out_bounce',
    'clamp', 'lerp',
    'FrameState',
    'SignalBridge', 'SignalEmitter', 'Connection',
    'SIGNAL_TASK_STARTED', 'SIGNAL_TASK_COMPLETED', 'SIGNAL_RUN_COMPLETED',
    'SIGNAL_ENGINE_PAUSED', 'SIGNAL_ENGINE_RESUMED', 'SIGNAL_ENGINE_STOPPED',
    'SIGNAL_VFX_CHANGED',
]
