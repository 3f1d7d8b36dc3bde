"""
Mixer - sums scheduled one-shot voices into stereo output blocks.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List
import threading

import numpy as np


@dataclass
class Voice:
    """A rendered buffer waiting for, or in the middle of, playback."""
    data: np.ndarray      # Mono float32, shape (samples,)
    start_offset: int = 0  # Samples of silence before the buffer starts
    position: int = 0
    gain: float = 1.0
    done: bool = False

    @property
    def remaining(self) -> int:
        return self.start_offset + len(self.data) - self.position

    @property
    def started(self) -> bool:
        """True once playback has reached the buffer."""
        return self.position > self.start_offset


class Mixer:
    """
    Voice mixer for procedurally rendered sounds.

    Usage:
        mixer = Mixer(sample_rate=44100)
        mixer.schedule(buffer, delay=0.1)

        # In audio callback:
        output = mixer.process(num_frames)
    """

    def __init__(self, sample_rate: int = 44100, max_voices: int = 32, channels: int = 2):
        self.sample_rate = sample_rate
        self.max_voices = max_voices
        self.channels = channels

        self._voices: List[Voice] = []
        self._lock = threading.Lock()

    def schedule(self, data: np.ndarray, delay: float = 0.0, gain: float = 1.0) -> Voice:
        """Queue a mono buffer to start `delay` seconds from the next block."""
        if data.dtype != np.float32:
            data = data.astype(np.float32)
        voice = Voice(
            data=data.reshape(-1),
            start_offset=max(0, int(round(delay * self.sample_rate))),
            gain=gain,
        )
        with self._lock:
            self._evict(self.max_voices - 1)
            self._voices.append(voice)
        return voice

    def stop_all(self):
        """Stop all playing voices."""
        with self._lock:
            self._voices.clear()

    @property
    def active_voices(self) -> int:
        with self._lock:
            return len(self._voices)

    def process(self, num_frames: int) -> np.ndarray:
        """
        Render the next block of audio.

        Returns:
            Float32 array of shape (num_frames, channels)
        """
        mono = np.zeros(num_frames, dtype=np.float32)

        with self._lock:
            for voice in self._voices:
                block_start = voice.position
                block_end = voice.position + num_frames

                # Portion of this block covered by the voice's buffer
                src_start = max(0, block_start - voice.start_offset)
                src_end = min(len(voice.data), block_end - voice.start_offset)
                if src_end > src_start:
                    dst_start = max(0, voice.start_offset - block_start)
                    n = src_end - src_start
                    mono[dst_start:dst_start + n] += voice.data[src_start:src_end] * voice.gain

                voice.position = block_end
                if voice.position >= voice.start_offset + len(voice.data):
                    voice.done = True

            self._evict(self.max_voices)

        np.clip(mono, -1.0, 1.0, out=mono)
        return np.repeat(mono[:, None], self.channels, axis=1)

    def _evict(self, limit: int):
        """
        Drop finished voices, then the oldest sounding ones until at most
        `limit` are sounding. Voices still waiting for their start offset
        never count against the cap. Call with the lock held.
        """
        sounding = [v for v in self._voices if v.started and not v.done]
        for voice in sounding[:max(0, len(sounding) - limit)]:
            voice.done = True
        self._voices = [v for v in self._voices if not v.done]
