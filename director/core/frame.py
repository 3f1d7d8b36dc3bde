"""
Frame State

Per-tick timing record the frame clock hands to interpolations.
"""

from __future__ import annotations
from dataclasses import dataclass

from .math3d import clamp


@dataclass(frozen=True)
class FrameState:
    frame_id: int   # 1-based tick counter within one clock run
    dt: float       # seconds since the previous tick
    t: float        # seconds since the run began, clamped to its duration

    @property
    def fps(self) -> float:
        return 1.0 / max(1e-6, self.dt)

    def progress(self, duration: float) -> float:
        """Linear progress in [0, 1]; a zero-length run is complete at once."""
        if duration <= 0:
            return 1.0
        return clamp(self.t / duration, 0.0, 1.0)
