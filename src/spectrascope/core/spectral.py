"""
Spectral shape statistics.

All values are recomputed from the current spectrum on every call; the
only input carried between frames is the previous stored spectrum, used
for flux.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from spectrascope.core.bands import bin_frequencies
from spectrascope.core.frame import FrameShapeError


@dataclass(frozen=True)
class SpectralSnapshot:
    """Spectral descriptors for one frame."""

    total_energy: float = 0.0       # mean normalized magnitude
    peak_frequency: float = 0.0     # Hz
    spectral_centroid: float = 0.0  # Hz
    spectral_spread: float = 0.0    # Hz
    spectral_flux: float = 0.0      # RMS change vs previous frame


class SpectralStatisticsComputer:
    """Computes centroid, spread, peak, total energy and flux."""

    def compute(
        self,
        normalized: np.ndarray,
        sample_rate: float,
        previous: Optional[np.ndarray] = None,
    ) -> SpectralSnapshot:
        """
        Compute the spectral snapshot of one frame.

        Args:
            normalized: Magnitude spectrum in [0, 1], shape (N,).
            sample_rate: Sample rate in Hz.
            previous: Most recently stored spectrum, or None on the first frame.

        Returns:
            SpectralSnapshot for this frame.
        """
        n_bins = len(normalized)
        if n_bins == 0:
            return SpectralSnapshot()

        freqs = bin_frequencies(sample_rate, n_bins)
        total_magnitude = float(normalized.sum())

        # argmax returns the first maximum; an all-zero spectrum peaks at bin 0
        peak_frequency = float(freqs[int(np.argmax(normalized))])

        if total_magnitude > 0:
            centroid = float(np.dot(normalized, freqs)) / total_magnitude
        else:
            centroid = 0.0

        spread_sum = float(np.dot(normalized, (freqs - centroid) ** 2))
        spread = float(np.sqrt(spread_sum / max(total_magnitude, 1.0)))

        return SpectralSnapshot(
            total_energy=total_magnitude / n_bins,
            peak_frequency=peak_frequency,
            spectral_centroid=centroid,
            spectral_spread=spread,
            spectral_flux=self.flux(normalized, previous),
        )

    @staticmethod
    def flux(current: np.ndarray, previous: Optional[np.ndarray]) -> float:
        """Root-mean-square difference between two spectra; 0 without a previous one."""
        if previous is None or len(current) == 0:
            return 0.0
        if len(previous) != len(current):
            raise FrameShapeError(
                f"previous spectrum has {len(previous)} bins, current has {len(current)}"
            )
        diff = current - previous
        return float(np.sqrt(np.mean(diff * diff)))
