"""
Wait executor.
"""

from __future__ import annotations

from ..commands import WaitCommand
from ..context import ExecutionContext
from ..time.tween import Timeline
from .outcome import COMPLETED, Outcome


async def execute_wait(command: WaitCommand, ctx: ExecutionContext, timeline: Timeline) -> Outcome:
    await timeline.delay(command.duration, name="wait")
    return COMPLETED
