"""
Frequency band energy aggregation.

Maps a normalized magnitude spectrum onto named frequency bands. The band
table is static configuration; each call returns a fresh energy mapping.
"""

import math
from dataclasses import dataclass
from typing import Dict, Mapping, Sequence

import numpy as np


@dataclass(frozen=True)
class FrequencyBand:
    """A named frequency range, inclusive of ``low_hz`` and exclusive of ``high_hz``."""

    name: str
    low_hz: float
    high_hz: float


DEFAULT_BANDS: tuple = (
    FrequencyBand("subBass", 20.0, 60.0),
    FrequencyBand("bass", 60.0, 250.0),
    FrequencyBand("lowMid", 250.0, 500.0),
    FrequencyBand("mid", 500.0, 2000.0),
    FrequencyBand("highMid", 2000.0, 4000.0),
    FrequencyBand("treble", 4000.0, 6000.0),
    FrequencyBand("brilliance", 6000.0, 20000.0),
)


def bin_width(sample_rate: float, n_bins: int) -> float:
    """Width in Hz of one spectrum bin."""
    return (sample_rate / 2.0) / n_bins


def bin_frequencies(sample_rate: float, n_bins: int) -> np.ndarray:
    """Frequency of each bin, ``i * bin_width``."""
    return np.arange(n_bins, dtype=np.float64) * bin_width(sample_rate, n_bins)


class BandEnergyAggregator:
    """
    Computes average normalized energy per frequency band.

    Each band's summed magnitude is divided by the number of bins the band
    would span at the current resolution, not by the number of bins that
    actually fell inside it, so values are not strictly bounded to [0, 1]
    when the band runs past Nyquist or the bin grid is coarse.
    """

    def __init__(self, bands: Sequence[FrequencyBand] = DEFAULT_BANDS):
        self.bands = tuple(bands)

    @property
    def band_names(self) -> list:
        return [band.name for band in self.bands]

    def compute(self, normalized: np.ndarray, sample_rate: float) -> Dict[str, float]:
        """
        Compute the energy of every configured band.

        Args:
            normalized: Magnitude spectrum in [0, 1], shape (N,).
            sample_rate: Sample rate the spectrum was captured at.

        Returns:
            New dict mapping band name to average energy.
        """
        n_bins = len(normalized)
        energies: Dict[str, float] = {}
        if n_bins == 0:
            return {band.name: 0.0 for band in self.bands}

        width = bin_width(sample_rate, n_bins)
        freqs = bin_frequencies(sample_rate, n_bins)

        for band in self.bands:
            mask = (freqs >= band.low_hz) & (freqs < band.high_hz)
            expected_bins = max(math.ceil((band.high_hz - band.low_hz) / width), 1)
            energies[band.name] = float(normalized[mask].sum()) / expected_bins

        return energies

    @staticmethod
    def energy(energies: Mapping[str, float], name: str) -> float:
        """Look up a band energy; unknown names read as 0."""
        return float(energies.get(name, 0.0))

    @staticmethod
    def frequency_response(
        normalized: np.ndarray,
        sample_rate: float,
        frequency: float,
    ) -> float:
        """Magnitude of the bin containing *frequency*, clamped to the spectrum."""
        n_bins = len(normalized)
        if n_bins == 0:
            return 0.0
        nyquist = sample_rate / 2.0
        index = int(math.floor((frequency / nyquist) * n_bins))
        index = max(0, min(n_bins - 1, index))
        return float(normalized[index])

    @staticmethod
    def frequency_range_energy(
        normalized: np.ndarray,
        sample_rate: float,
        min_hz: float,
        max_hz: float,
    ) -> float:
        """
        Average magnitude over an arbitrary frequency range.

        The range covers bins ``floor(min_hz / width)`` up to but excluding
        ``ceil(max_hz / width)``; bins past the end of the spectrum count as
        silent.
        """
        n_bins = len(normalized)
        if n_bins == 0:
            return 0.0
        width = bin_width(sample_rate, n_bins)
        min_bin = int(math.floor(min_hz / width))
        max_bin = int(math.ceil(max_hz / width))

        lo = max(min_bin, 0)
        hi = min(max_bin, n_bins)
        total = float(normalized[lo:hi].sum()) if hi > lo else 0.0
        return total / max(max_bin - min_bin, 1)
