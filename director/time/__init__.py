"""
Timing: frame clock, tweens and per-run timelines.
"""

from .clock import FrameClock, DEFAULT_FRAME_RATE
from .tween import Tween, Timeline

__all__ = ['FrameClock', 'DEFAULT_FRAME_RATE', 'Tween', 'Timeline']
