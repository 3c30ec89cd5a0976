"""
Time-domain statistics and spectral entropy.
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class TimeDomainSnapshot:
    """Waveform descriptors for one frame."""

    variance: float = 0.0
    zero_crossing_rate: float = 0.0
    entropy: float = 0.0  # bits, computed over the magnitude spectrum


class TimeDomainStatisticsComputer:
    """
    Computes waveform variance, zero-crossing rate and spectral entropy.

    Entropy lives here rather than with the spectral statistics because
    downstream consumers read it as a measure of signal disorder alongside
    the other texture values.
    """

    def compute(self, waveform: np.ndarray, magnitude: np.ndarray) -> TimeDomainSnapshot:
        """
        Args:
            waveform: Normalized waveform in [-1, 1], shape (M,).
            magnitude: Normalized magnitude spectrum in [0, 1], shape (N,).
        """
        return TimeDomainSnapshot(
            variance=self.variance(waveform),
            zero_crossing_rate=self.zero_crossing_rate(waveform),
            entropy=self.entropy(magnitude),
        )

    @staticmethod
    def variance(waveform: np.ndarray) -> float:
        if len(waveform) == 0:
            return 0.0
        mean = waveform.mean()
        return float(np.mean((waveform - mean) ** 2))

    @staticmethod
    def zero_crossing_rate(waveform: np.ndarray) -> float:
        """
        Fraction of adjacent sample pairs that change sign.

        Zero counts as non-negative. The count is divided by the number of
        samples, not the number of pairs.
        """
        n = len(waveform)
        if n == 0:
            return 0.0
        non_negative = waveform >= 0
        crossings = int(np.count_nonzero(non_negative[1:] != non_negative[:-1]))
        return crossings / n

    @staticmethod
    def entropy(magnitude: np.ndarray) -> float:
        """Shannon entropy (base 2) of the magnitude distribution."""
        total = float(magnitude.sum())
        if total <= 0:
            return 0.0
        p = magnitude / total
        p = p[p > 0]
        return float(-np.sum(p * np.log2(p)))
