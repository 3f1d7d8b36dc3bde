"""
VFX executor - drives one post-processing channel through an envelope.

Enveloped channels (bloom, chromatic aberration, vignette) ramp up from
their current magnitude over the first 30% of the duration, hold for 30%,
and ramp back to zero over the final 40%. Noise has a short linear attack
and no hold; glitch is on/off.

The channel state is never mutated in place: each frame reads the
context's latest VFXState and publishes a replacement.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict
import logging

from ..commands import VFXCommand
from ..context import ExecutionContext, VFXChannel
from ..core.math3d import ease_linear
from ..time.tween import Timeline
from .outcome import COMPLETED, Outcome, Skipped

logger = logging.getLogger(__name__)

DEFAULT_DURATION = 0.5
DEFAULT_INTENSITY = 1.0

ATTACK = 0.3
HOLD = 0.3
RELEASE = 0.4

ALIASES = {
    "blur": "vignette",
    "color_shift": "chromatic_aberration",
}


@dataclass(frozen=True)
class PulseShape:
    channel: str
    scale: float        # target magnitude = intensity * scale
    epsilon: float      # below this the channel reads as disabled


ENVELOPES: Dict[str, PulseShape] = {
    "bloom": PulseShape("bloom", 1.0, 0.01),
    "chromatic_aberration": PulseShape("chromatic_aberration", 0.01, 0.0001),
    "vignette": PulseShape("vignette", 0.8, 0.01),
}

NOISE_SCALE = 0.5
NOISE_EPSILON = 0.01


def _set_channel(ctx: ExecutionContext, name: str, enabled: bool, magnitude: float):
    state = ctx.vfx_state.with_channel(name, VFXChannel(enabled=enabled, magnitude=float(magnitude)))
    ctx.apply_vfx(state)


def _rest(ctx: ExecutionContext, name: str):
    """Publish the channel as off unless it already is."""
    if ctx.vfx_state.channel(name) != VFXChannel(enabled=False, magnitude=0.0):
        _set_channel(ctx, name, False, 0.0)


async def execute_vfx(
    command: VFXCommand,
    ctx: ExecutionContext,
    timeline: Timeline,
) -> Outcome:
    effect = ALIASES.get(command.effect, command.effect)
    duration = DEFAULT_DURATION if command.duration is None else command.duration
    intensity = DEFAULT_INTENSITY if command.intensity is None else command.intensity

    if effect in ENVELOPES:
        pulse = _envelope(ctx, ENVELOPES[effect], intensity, duration, timeline)
    elif effect == "noise":
        pulse = _noise(ctx, intensity, duration, timeline)
    elif effect == "glitch":
        pulse = _glitch(ctx, intensity, duration, timeline)
    else:
        logger.warning(f"VFX skipped: unknown effect {command.effect}")
        return Skipped(f"unknown effect: {command.effect}")

    try:
        await pulse
    finally:
        # Cancelled or failed pulses end with the channel off too
        _rest(ctx, effect)
    return COMPLETED


async def _glitch(ctx: ExecutionContext, intensity: float, duration: float, timeline: Timeline):
    _set_channel(ctx, "glitch", True, intensity)
    await timeline.delay(duration, name="glitch")


async def _envelope(
    ctx: ExecutionContext,
    shape: PulseShape,
    intensity: float,
    duration: float,
    timeline: Timeline,
):
    name = shape.channel

    def rising(v: float):
        _set_channel(ctx, name, True, v)

    def falling(v: float):
        _set_channel(ctx, name, v > shape.epsilon, v)

    await timeline.to(lambda: ctx.vfx_state.channel(name).magnitude, intensity * shape.scale,
                      duration * ATTACK, ease="power2.out", on_update=rising,
                      name=f"{name}:attack")
    await timeline.delay(duration * HOLD, name=f"{name}:hold")
    await timeline.to(lambda: ctx.vfx_state.channel(name).magnitude, 0.0,
                      duration * RELEASE, ease="power2.in", on_update=falling,
                      name=f"{name}:release")


async def _noise(ctx: ExecutionContext, intensity: float, duration: float, timeline: Timeline):
    def rising(v: float):
        _set_channel(ctx, "noise", True, v)

    def falling(v: float):
        _set_channel(ctx, "noise", v > NOISE_EPSILON, v)

    await timeline.to(0.0, intensity * NOISE_SCALE, duration * 0.2,
                      ease=ease_linear, on_update=rising, name="noise:attack")
    await timeline.to(lambda: ctx.vfx_state.noise.magnitude, 0.0, duration * 0.8,
                      ease="power2.out", on_update=falling, name="noise:release")
