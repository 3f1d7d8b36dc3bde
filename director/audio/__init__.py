"""
Director Audio System
=====================

Procedural sound effects: synths render NumPy buffers into a mixer that
feeds the output device.

Quick Start:
    from director.audio import AudioEngine, SoundBoard

    audio = AudioEngine()
    board = SoundBoard(audio)
    board.ensure_started()
    board.noise.trigger_attack_release(0.5)
"""

from .engine import AudioEngine, AudioConfig
from .mixer import Mixer, Voice
from .soundboard import SoundBoard
from .synths import (
    Envelope,
    NoiseSynth,
    MetalSynth,
    MembraneSynth,
    FMSynth,
    note_to_frequency,
    db_to_gain,
)

__all__ = [
    'AudioEngine',
    'AudioConfig',
    'Mixer',
    'Voice',
    'SoundBoard',
    'Envelope',
    'NoiseSynth',
    'MetalSynth',
    'MembraneSynth',
    'FMSynth',
    'note_to_frequency',
    'db_to_gain',
]
