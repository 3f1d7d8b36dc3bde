# director/time/clock.py
"""
FrameClock - asyncio frame ticker driving interpolations.

Sub-second timing is cooperative: frames are produced by sleeping on the
running event loop, so precision is bounded by the loop's scheduling.
"""

from __future__ import annotations
import asyncio
from dataclasses import dataclass
from typing import AsyncIterator

from ..core.frame import FrameState

DEFAULT_FRAME_RATE = 60.0


@dataclass
class FrameClock:
    """Produces frames at a fixed nominal rate on the running event loop."""

    frame_rate: float = DEFAULT_FRAME_RATE

    def __post_init__(self):
        if self.frame_rate <= 0:
            raise ValueError(f"frame_rate must be positive, got {self.frame_rate}")

    @property
    def frame_interval(self) -> float:
        return 1.0 / self.frame_rate

    async def frames(self, duration: float) -> AsyncIterator[FrameState]:
        """
        Yield one FrameState per tick until `duration` seconds have elapsed.

        Always yields at least one frame; the last frame's `t` is clamped to
        `duration` so consumers can treat it as progress 1.0.
        """
        loop = asyncio.get_running_loop()
        start = loop.time()
        last = start
        frame_id = 0
        duration = max(0.0, duration)

        while True:
            remaining = duration - (loop.time() - start)
            await asyncio.sleep(max(0.0, min(self.frame_interval, remaining)))
            now = loop.time()
            elapsed = now - start
            frame_id += 1
            yield FrameState(frame_id=frame_id, dt=now - last, t=min(elapsed, duration))
            last = now
            if elapsed >= duration:
                break

    async def sleep(self, seconds: float):
        await asyncio.sleep(max(0.0, seconds))
