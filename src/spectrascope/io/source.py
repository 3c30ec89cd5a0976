"""
Offline frame source.

Turns an audio signal into the byte frames a browser ``AnalyserNode`` would
produce while the signal plays, so the engine can be driven from files
outside a live capture loop:

* Blackman-windowed FFT of the most recent ``fft_size`` samples
* magnitudes scaled by ``1 / fft_size`` and smoothed over time
* dB values in ``[min_decibels, max_decibels]`` mapped linearly to 0..255
* waveform bytes ``floor(128 * (1 + x))`` for the first ``fft_size / 2``
  samples of the window
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Union

import librosa
import numpy as np
from scipy import signal as scipy_signal

from spectrascope.core.frame import FrameSample

logger = logging.getLogger(__name__)


@dataclass
class AnalyserSettings:
    """Analyser node parameters."""

    fft_size: int = 2048
    smoothing_time_constant: float = 0.8
    min_decibels: float = -100.0
    max_decibels: float = -30.0

    def __post_init__(self):
        self.smoothing_time_constant = float(np.clip(self.smoothing_time_constant, 0.0, 1.0))
        if self.max_decibels <= self.min_decibels:
            raise ValueError(
                f"max_decibels ({self.max_decibels}) must exceed min_decibels ({self.min_decibels})"
            )

    @property
    def bin_count(self) -> int:
        return self.fft_size // 2


class FrameSource:
    """
    Produces :class:`FrameSample` objects at a fixed frame rate.

    Args:
        y: Mono audio signal in [-1, 1].
        sample_rate: Sample rate of *y*.
        settings: Analyser parameters; ``fft_size`` should match the engine's
            ``transform_size``.
        fps: Frames per second to emit.
    """

    def __init__(
        self,
        y: np.ndarray,
        sample_rate: int,
        settings: Optional[AnalyserSettings] = None,
        fps: int = 60,
    ):
        self.y = np.asarray(y, dtype=np.float32)
        self.sample_rate = int(sample_rate)
        self.settings = settings or AnalyserSettings()
        self.fps = fps or 60
        self.hop_length = max(1, int(self.sample_rate / self.fps))
        self._window = scipy_signal.get_window("blackman", self.settings.fft_size)

    @classmethod
    def from_file(
        cls,
        audio_path: Union[str, Path],
        settings: Optional[AnalyserSettings] = None,
        fps: int = 60,
        sr: Optional[int] = None,
        max_duration: Optional[float] = None,
    ) -> "FrameSource":
        """
        Load an audio file and wrap it in a frame source.

        Args:
            audio_path: Path to audio file (wav, mp3, flac).
            settings: Analyser parameters.
            fps: Frames per second to emit.
            sr: Target sample rate. None preserves the file's rate.
            max_duration: Only load this many seconds.
        """
        y, sr_out = librosa.load(audio_path, sr=sr, mono=True, duration=max_duration)
        logger.info("loaded %s: %.2fs @ %d Hz", audio_path, len(y) / sr_out, sr_out)
        return cls(y, sr_out, settings=settings, fps=fps)

    @property
    def duration(self) -> float:
        return librosa.get_duration(y=self.y, sr=self.sample_rate)

    def __len__(self) -> int:
        return 1 + len(self.y) // self.hop_length

    def frame_time(self, index: int) -> float:
        """Playback time in seconds at which frame *index* is captured."""
        return index * self.hop_length / self.sample_rate

    def _to_bytes(self, smoothed: np.ndarray) -> np.ndarray:
        s = self.settings
        db = librosa.amplitude_to_db(smoothed, ref=1.0, amin=1e-10, top_db=None)
        scaled = np.floor(255.0 / (s.max_decibels - s.min_decibels) * (db - s.min_decibels))
        return np.clip(scaled, 0, 255).astype(np.uint8)

    def frames(self) -> Iterator[FrameSample]:
        """Yield one frame per hop, in playback order."""
        fft_size = self.settings.fft_size
        n_bins = self.settings.bin_count
        tau = self.settings.smoothing_time_constant

        # Leading silence so the first window ends at t=0
        padded = np.concatenate([np.zeros(fft_size, dtype=np.float32), self.y])
        previous = np.zeros(n_bins)

        for index in range(len(self)):
            end = fft_size + index * self.hop_length
            block = padded[end - fft_size:end]

            spectrum = np.abs(np.fft.rfft(block * self._window))[:n_bins] / fft_size
            previous = tau * previous + (1.0 - tau) * spectrum

            waveform = np.clip(np.floor(128.0 * (1.0 + block[:n_bins])), 0, 255)
            yield FrameSample(
                magnitude=self._to_bytes(previous),
                waveform=waveform.astype(np.uint8),
                sample_rate=self.sample_rate,
            )
