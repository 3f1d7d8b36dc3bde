"""
AudioEngine - Main audio output coordinator.

Owns the output device stream and the voice mixer. With output disabled
(or when no audio backend is present) the engine still runs: voices are
mixed offline and can be pulled with `render()`.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional
import logging

import numpy as np

from .mixer import Mixer, Voice

logger = logging.getLogger(__name__)

try:
    import sounddevice as sd
    SOUNDDEVICE_AVAILABLE = True
except (ImportError, OSError):
    # OSError: the module imports but PortAudio itself is missing
    sd = None
    SOUNDDEVICE_AVAILABLE = False
    logger.warning("sounddevice not available. Audio will be silent.")


@dataclass
class AudioConfig:
    sample_rate: int = 44100
    buffer_size: int = 512
    channels: int = 2
    max_voices: int = 32
    output_enabled: bool = True


class AudioEngine:
    """
    Main audio engine coordinating the output stream and mixer.

    Usage:
        from director.audio import AudioEngine, AudioConfig

        audio = AudioEngine(AudioConfig(output_enabled=False))
        audio.start()
        audio.play(buffer)
        block = audio.render(512)
    """

    def __init__(self, config: Optional[AudioConfig] = None):
        self.config = config or AudioConfig()
        self.mixer = Mixer(
            sample_rate=self.config.sample_rate,
            max_voices=self.config.max_voices,
            channels=self.config.channels,
        )

        self._stream: Optional[Any] = None
        self._running = False

    @property
    def sample_rate(self) -> int:
        return self.config.sample_rate

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def output_active(self) -> bool:
        return self._stream is not None

    def start(self) -> bool:
        """
        Start audio processing.

        Returns True when a device stream is open, False when running
        offline (output disabled, backend missing or device failure).
        """
        if self._running:
            return self.output_active

        self._running = True

        if not self.config.output_enabled:
            logger.info("AudioEngine: Started offline (output disabled)")
            return False

        if not SOUNDDEVICE_AVAILABLE:
            logger.warning("AudioEngine: sounddevice not available, running offline")
            return False

        try:
            self._stream = sd.OutputStream(
                samplerate=self.config.sample_rate,
                blocksize=self.config.buffer_size,
                channels=self.config.channels,
                dtype='float32',
                callback=self._audio_callback,
            )
            self._stream.start()
            logger.info(
                f"AudioEngine: Started (sr={self.config.sample_rate}, buf={self.config.buffer_size})"
            )
            return True
        except Exception as e:
            self._stream = None
            logger.error(f"AudioEngine: Failed to open output, running offline: {e}")
            return False

    def stop(self):
        """Stop audio output and drop queued voices."""
        self._running = False
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None
        self.mixer.stop_all()
        logger.info("AudioEngine: Stopped")

    def _audio_callback(self, outdata: np.ndarray, frames: int, time_info, status):
        """Audio callback - runs on audio thread."""
        if status:
            logger.warning(f"AudioEngine: {status}")
        outdata[:] = self.mixer.process(frames)

    def play(self, buffer: np.ndarray, delay: float = 0.0, gain: float = 1.0) -> Voice:
        return self.mixer.schedule(buffer, delay=delay, gain=gain)

    def render(self, frames: int) -> np.ndarray:
        """Pull the next block from the mixer (offline use)."""
        return self.mixer.process(frames)
