"""
SoundBoard - the shared synthesizer set used by sound commands.

Synths are created lazily on first use and then kept for the lifetime of
the board; callers reconfigure volume, envelope and pitch per trigger.
"""

from __future__ import annotations
from typing import Optional
import logging

from .engine import AudioEngine
from .synths import FMSynth, MembraneSynth, MetalSynth, NoiseSynth

logger = logging.getLogger(__name__)


class SoundBoard:
    def __init__(self, audio: AudioEngine):
        self.audio = audio
        self._noise: Optional[NoiseSynth] = None
        self._metal: Optional[MetalSynth] = None
        self._membrane: Optional[MembraneSynth] = None
        self._fm: Optional[FMSynth] = None

    def ensure_started(self):
        """Activate the audio engine if it is not running yet."""
        if not self.audio.is_running:
            self.audio.start()

    @property
    def noise(self) -> NoiseSynth:
        if self._noise is None:
            self._noise = NoiseSynth(self.audio.mixer)
        return self._noise

    @property
    def metal(self) -> MetalSynth:
        if self._metal is None:
            self._metal = MetalSynth(self.audio.mixer)
        return self._metal

    @property
    def membrane(self) -> MembraneSynth:
        if self._membrane is None:
            self._membrane = MembraneSynth(self.audio.mixer)
        return self._membrane

    @property
    def fm(self) -> FMSynth:
        if self._fm is None:
            self._fm = FMSynth(self.audio.mixer)
        return self._fm

    @property
    def created(self) -> int:
        """How many of the shared synths exist."""
        return sum(s is not None for s in (self._noise, self._metal, self._membrane, self._fm))

    def dispose(self):
        """Drop every synth; the next use recreates them."""
        self._noise = None
        self._metal = None
        self._membrane = None
        self._fm = None
        self.audio.mixer.stop_all()
        logger.debug("SoundBoard disposed")
