"""
Per-tick input frames.

A frame carries the byte-encoded magnitude spectrum and waveform produced by
the capture side, along with the sample rate they were captured at.
"""

from dataclasses import dataclass

import numpy as np


BYTE_MAX = 255.0
WAVEFORM_CENTER = 128.0


class FrameShapeError(ValueError):
    """Raised when a frame does not match the shape the engine was configured for."""


def _as_byte_array(values, label: str) -> np.ndarray:
    """Copy *values* into a read-only 1-D uint8 array, validating the range."""
    arr = np.asarray(values)
    if arr.ndim != 1:
        raise FrameShapeError(f"{label} must be 1-D, got shape {arr.shape}")
    if arr.size and not np.isfinite(arr).all():
        raise FrameShapeError(f"{label} contains non-finite values")
    if arr.size and (arr.min() < 0 or arr.max() > 255):
        raise FrameShapeError(
            f"{label} values must lie in 0..255, got [{arr.min()}, {arr.max()}]"
        )
    out = arr.astype(np.uint8)  # astype always copies
    out.flags.writeable = False
    return out


@dataclass(frozen=True)
class FrameSample:
    """One tick of analyser output."""

    magnitude: np.ndarray   # (N,) uint8, frequency bins
    waveform: np.ndarray    # (M,) uint8, time-domain samples centred on 128
    sample_rate: float

    def __post_init__(self):
        object.__setattr__(self, "magnitude", _as_byte_array(self.magnitude, "magnitude"))
        object.__setattr__(self, "waveform", _as_byte_array(self.waveform, "waveform"))
        if not self.sample_rate or self.sample_rate <= 0:
            raise FrameShapeError(f"sample_rate must be positive, got {self.sample_rate!r}")
        object.__setattr__(self, "sample_rate", float(self.sample_rate))

    @property
    def bin_count(self) -> int:
        return int(self.magnitude.shape[0])

    def normalized_magnitude(self) -> np.ndarray:
        """Spectrum mapped to [0, 1]."""
        return self.magnitude.astype(np.float64) / BYTE_MAX

    def normalized_waveform(self) -> np.ndarray:
        """Waveform mapped to [-1, 1)."""
        return (self.waveform.astype(np.float64) - WAVEFORM_CENTER) / WAVEFORM_CENTER
