"""
Sound executor - procedural sound effects on the shared SoundBoard synths.

Each recipe reconfigures the shared synths and schedules its notes; the
executor then waits a fixed `duration` whatever the audible tail length.
"""

from __future__ import annotations
from typing import Callable, Dict
import logging

from ..audio import SoundBoard
from ..commands import SoundCommand
from ..context import ExecutionContext
from ..time.tween import Timeline
from .outcome import COMPLETED, Outcome, Skipped

logger = logging.getLogger(__name__)

DEFAULT_VOLUME = -12.0
DEFAULT_DURATION = 0.5
ALARM_INTERVAL = 0.3


# =============================================================================
# Recipes
# =============================================================================

def play_explosion(board: SoundBoard, volume: float, duration: float):
    noise = board.noise
    noise.reset_envelope()
    noise.volume_db = volume
    noise.envelope.decay = duration * 0.8
    noise.trigger_attack_release(duration)

    # Low boom under the burst
    membrane = board.membrane
    membrane.reset_envelope()
    membrane.volume_db = volume - 6
    membrane.trigger_attack_release("C1", duration * 0.5)


def play_impact(board: SoundBoard, volume: float, duration: float):
    metal = board.metal
    metal.reset_envelope()
    metal.volume_db = volume
    metal.envelope.decay = duration
    metal.trigger_attack_release("C2", duration)


def play_whoosh(board: SoundBoard, volume: float, duration: float):
    noise = board.noise
    noise.reset_envelope()
    noise.volume_db = volume - 10
    noise.envelope.attack = duration * 0.1
    noise.envelope.decay = duration * 0.9
    noise.trigger_attack_release(duration)


def play_laser(board: SoundBoard, volume: float, duration: float):
    fm = board.fm
    fm.reset_envelope()
    fm.volume_db = volume
    fm.trigger_sweep("C5", duration * 0.5, sweep_to="C2", sweep_time=duration * 0.5)


def play_charge(board: SoundBoard, volume: float, duration: float):
    fm = board.fm
    fm.reset_envelope()
    fm.volume_db = volume - 6
    fm.trigger_sweep("C2", duration, sweep_to=2000.0, sweep_time=duration)


def play_powerup(board: SoundBoard, volume: float, duration: float):
    fm = board.fm
    fm.reset_envelope()
    fm.volume_db = volume - 3
    fm.trigger_attack_release("C4", 0.1, time=0.0)
    fm.trigger_attack_release("E4", 0.1, time=0.1)
    fm.trigger_attack_release("G4", 0.1, time=0.2)
    fm.trigger_attack_release("C5", max(duration - 0.3, 0.05), time=0.3)


def play_alarm(board: SoundBoard, volume: float, duration: float):
    fm = board.fm
    fm.reset_envelope()
    fm.volume_db = volume - 6
    beeps = int(duration // ALARM_INTERVAL)
    for i in range(beeps):
        fm.trigger_attack_release("A4", 0.1, time=i * ALARM_INTERVAL)


SOUND_MAP: Dict[str, Callable[[SoundBoard, float, float], None]] = {
    "explosion": play_explosion,
    "impact": play_impact,
    "whoosh": play_whoosh,
    "laser": play_laser,
    "charge": play_charge,
    "powerup": play_powerup,
    "alarm": play_alarm,
}


# =============================================================================
# Executor
# =============================================================================

async def execute_sound(
    command: SoundCommand,
    ctx: ExecutionContext,
    timeline: Timeline,
) -> Outcome:
    board = ctx.sound
    if board is None:
        logger.warning("Sound skipped: no sound board")
        return Skipped("no sound board")

    play = SOUND_MAP.get(command.sound)
    if play is None:
        logger.warning(f"Sound skipped: unknown sound {command.sound}")
        return Skipped(f"unknown sound: {command.sound}")

    board.ensure_started()

    volume = DEFAULT_VOLUME if command.volume is None else command.volume
    duration = DEFAULT_DURATION if command.duration is None else command.duration
    play(board, volume, duration)

    await timeline.delay(duration, name=f"sound:{command.sound}")
    return COMPLETED
