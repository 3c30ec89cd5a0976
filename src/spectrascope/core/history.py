"""
Rolling frame history.

Fixed-capacity ring buffer of ``(normalized_spectrum, total_energy)`` pairs.
Writes rotate a head pointer; the oldest entry is overwritten once the
buffer is full.
"""

from typing import List, Optional

import numpy as np


class HistoryBuffer:
    """
    Ring buffer feeding spectral flux and the beat baseline.

    Stored spectra are made read-only on insertion, which lets ``copy()``
    share them between buffers instead of duplicating the arrays.
    """

    def __init__(self, capacity: int = 60):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = int(capacity)
        self._spectra: List[Optional[np.ndarray]] = [None] * self.capacity
        self._energy = np.zeros(self.capacity, dtype=np.float64)
        self._head = 0    # next slot to write
        self._length = 0

    def __len__(self) -> int:
        return self._length

    def __repr__(self) -> str:
        return f"HistoryBuffer(capacity={self.capacity}, length={self._length})"

    def append(self, spectrum: np.ndarray, total_energy: float) -> None:
        """Store one frame, evicting the oldest if the buffer is full."""
        stored = np.array(spectrum, dtype=np.float64)
        stored.flags.writeable = False
        self._spectra[self._head] = stored
        self._energy[self._head] = float(total_energy)
        self._head = (self._head + 1) % self.capacity
        self._length = min(self._length + 1, self.capacity)

    def latest(self) -> Optional[np.ndarray]:
        """Most recently appended spectrum, or None when empty."""
        if self._length == 0:
            return None
        return self._spectra[(self._head - 1) % self.capacity]

    def _chronological_slots(self) -> np.ndarray:
        start = (self._head - self._length) % self.capacity
        return (start + np.arange(self._length)) % self.capacity

    def energies(self) -> np.ndarray:
        """Stored total energies, oldest first."""
        return self._energy[self._chronological_slots()]

    def spectra(self) -> list:
        """Stored spectra, oldest first."""
        return [self._spectra[i] for i in self._chronological_slots()]

    def mean_energy(self) -> float:
        if self._length == 0:
            return 0.0
        if self._length == self.capacity:
            return float(self._energy.mean())
        return float(self.energies().mean())

    def std_energy(self) -> float:
        """Population standard deviation of the stored energies."""
        if self._length == 0:
            return 0.0
        return float(self.energies().std())

    def copy(self) -> "HistoryBuffer":
        """Independent buffer sharing the (immutable) stored spectra."""
        clone = HistoryBuffer.__new__(HistoryBuffer)
        clone.capacity = self.capacity
        clone._spectra = list(self._spectra)
        clone._energy = self._energy.copy()
        clone._head = self._head
        clone._length = self._length
        return clone

    def clear(self) -> None:
        self._spectra = [None] * self.capacity
        self._energy[:] = 0.0
        self._head = 0
        self._length = 0
