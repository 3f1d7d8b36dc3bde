"""
Synthesizers - procedural one-shot sound sources rendered with NumPy.

Each synth renders a mono float32 buffer for a note and hands it to the
Mixer. Synths are long-lived: volume, envelope and pitch are reconfigured
per trigger instead of building new instances.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Optional, Union
import math
import re

import numpy as np

from .mixer import Mixer, Voice

Note = Union[str, float, int]

_NOTE_RE = re.compile(r"^([A-Ga-g])([#b]?)(-?\d+)$")
_SEMITONES = {"C": -9, "D": -7, "E": -5, "F": -4, "G": -2, "A": 0, "B": 2}


def note_to_frequency(note: Note) -> float:
    """
    Convert a scientific pitch name ("A4", "C#5", "Bb2") or a number to Hz.
    A4 = 440 Hz.
    """
    if isinstance(note, (int, float)):
        return float(note)
    m = _NOTE_RE.match(note.strip())
    if not m:
        raise ValueError(f"invalid note: '{note}'")
    letter, accidental, octave = m.groups()
    semis = _SEMITONES[letter.upper()] + (int(octave) - 4) * 12
    if accidental == "#":
        semis += 1
    elif accidental == "b":
        semis -= 1
    return 440.0 * math.pow(2.0, semis / 12.0)


def db_to_gain(db: float) -> float:
    return math.pow(10.0, db / 20.0)


# =============================================================================
# Envelope
# =============================================================================

@dataclass
class Envelope:
    """ADSR amplitude envelope. Times in seconds, sustain as a level."""
    attack: float = 0.005
    decay: float = 0.1
    sustain: float = 0.0
    release: float = 0.1

    def level(self, t: np.ndarray) -> np.ndarray:
        """Held (gate-open) level at times `t`."""
        attack = max(self.attack, 1e-6)
        decay = max(self.decay, 1e-6)
        rising = np.clip(t / attack, 0.0, 1.0)
        falling = 1.0 - (1.0 - self.sustain) * np.clip((t - attack) / decay, 0.0, 1.0)
        return np.where(t < attack, rising, falling)

    def render(self, gate: float, sample_rate: int) -> np.ndarray:
        """Envelope for a note held `gate` seconds, including the release tail."""
        gate = max(0.0, gate)
        release = max(self.release, 1e-6)
        n = max(1, int(math.ceil((gate + self.release) * sample_rate)))
        t = np.arange(n, dtype=np.float64) / sample_rate

        held = self.level(t)
        gate_level = float(self.level(np.array([gate]))[0])
        tail = gate_level * np.clip(1.0 - (t - gate) / release, 0.0, 1.0)
        return np.where(t < gate, held, tail).astype(np.float32)


# =============================================================================
# Synth Base
# =============================================================================

class Synth:
    """Base synth: envelope * oscillator, scheduled into a Mixer."""

    def __init__(self, mixer: Mixer, envelope: Optional[Envelope] = None, volume_db: float = 0.0):
        self.mixer = mixer
        self.envelope = envelope or Envelope()
        self._default_envelope = replace(self.envelope)
        self.volume_db = volume_db

    @property
    def sample_rate(self) -> int:
        return self.mixer.sample_rate

    def reset_envelope(self):
        """Restore the envelope the synth was created with."""
        self.envelope = replace(self._default_envelope)

    def _oscillate(self, frequency: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def render(self, note: Note, duration: float) -> np.ndarray:
        env = self.envelope.render(duration, self.sample_rate)
        freq = np.full(len(env), note_to_frequency(note), dtype=np.float64)
        return (self._oscillate(freq) * env).astype(np.float32)

    def trigger_attack_release(self, note: Note, duration: float, time: float = 0.0) -> Voice:
        buffer = self.render(note, duration)
        return self.mixer.schedule(buffer, delay=time, gain=db_to_gain(self.volume_db))

    def _phase(self, frequency: np.ndarray) -> np.ndarray:
        return 2.0 * np.pi * np.cumsum(frequency) / self.sample_rate


# =============================================================================
# Synths
# =============================================================================

class NoiseSynth(Synth):
    """White noise through an envelope."""

    def __init__(self, mixer: Mixer, volume_db: float = 0.0, seed: Optional[int] = None):
        super().__init__(mixer, Envelope(attack=0.005, decay=0.1, sustain=0.0, release=0.1), volume_db)
        self._rng = np.random.default_rng(seed)

    def _oscillate(self, frequency: np.ndarray) -> np.ndarray:
        return self._rng.uniform(-1.0, 1.0, len(frequency))

    def trigger_attack_release(self, duration: float, time: float = 0.0) -> Voice:  # type: ignore[override]
        buffer = self.render(0.0, duration)
        return self.mixer.schedule(buffer, delay=time, gain=db_to_gain(self.volume_db))


class MetalSynth(Synth):
    """Inharmonic FM partials through a high-pass: bells, clangs, hits."""

    PARTIALS = (1.0, 1.483, 1.932, 2.546, 2.630, 3.897)

    def __init__(self, mixer: Mixer, volume_db: float = 0.0):
        super().__init__(mixer, Envelope(attack=0.001, decay=0.4, sustain=0.0, release=0.2), volume_db)
        self.harmonicity = 5.1
        self.modulation_index = 32.0
        self.resonance = 4000.0
        self.octaves = 1.5

    def _oscillate(self, frequency: np.ndarray) -> np.ndarray:
        out = np.zeros(len(frequency), dtype=np.float64)
        for ratio in self.PARTIALS:
            carrier = frequency * ratio * (2.0 ** self.octaves)
            mod = np.sin(self._phase(carrier * self.harmonicity))
            out += np.sign(np.sin(self._phase(carrier) + self.modulation_index * mod))
        out /= len(self.PARTIALS)
        return self._highpass(out)

    def _highpass(self, x: np.ndarray) -> np.ndarray:
        # First-order pre-emphasis around the resonance frequency
        a = math.exp(-2.0 * np.pi * self.resonance / self.sample_rate)
        y = x.copy()
        y[1:] -= a * x[:-1]
        return y


class MembraneSynth(Synth):
    """Sine with a fast downward pitch drop: kicks and low booms."""

    def __init__(self, mixer: Mixer, volume_db: float = 0.0):
        super().__init__(mixer, Envelope(attack=0.001, decay=0.4, sustain=0.01, release=1.4), volume_db)
        self.pitch_decay = 0.05
        self.octaves = 4.0

    def _oscillate(self, frequency: np.ndarray) -> np.ndarray:
        t = np.arange(len(frequency), dtype=np.float64) / self.sample_rate
        drop = np.exp(-t / max(self.pitch_decay, 1e-6))
        swept = frequency * (1.0 + (self.octaves - 1.0) * drop)
        return np.sin(self._phase(swept))


class FMSynth(Synth):
    """Two-operator FM voice with an optional exponential pitch sweep."""

    def __init__(self, mixer: Mixer, volume_db: float = 0.0):
        super().__init__(mixer, Envelope(attack=0.01, decay=0.2, sustain=0.2, release=0.2), volume_db)
        self.harmonicity = 3.0
        self.modulation_index = 10.0

    def _oscillate(self, frequency: np.ndarray) -> np.ndarray:
        mod = np.sin(self._phase(frequency * self.harmonicity))
        return np.sin(self._phase(frequency) + self.modulation_index * 0.1 * mod)

    def render_sweep(self, note: Note, duration: float, sweep_to: Note, sweep_time: float) -> np.ndarray:
        env = self.envelope.render(duration, self.sample_rate)
        f0 = note_to_frequency(note)
        f1 = note_to_frequency(sweep_to)
        t = np.arange(len(env), dtype=np.float64) / self.sample_rate
        progress = np.clip(t / max(sweep_time, 1e-6), 0.0, 1.0)
        freq = f0 * np.power(f1 / f0, progress)
        return (self._oscillate(freq) * env).astype(np.float32)

    def trigger_sweep(
        self,
        note: Note,
        duration: float,
        sweep_to: Note,
        sweep_time: float,
        time: float = 0.0,
    ) -> Voice:
        """Trigger a note whose pitch ramps to `sweep_to` over `sweep_time` seconds."""
        buffer = self.render_sweep(note, duration, sweep_to, sweep_time)
        return self.mixer.schedule(buffer, delay=time, gain=db_to_gain(self.volume_db))
