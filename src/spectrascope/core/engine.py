"""
Per-frame analysis engine.

The engine state is an explicit value; :func:`advance` turns a state and a
frame into the next state plus a published snapshot without touching its
input. :class:`AnalysisEngine` wraps that function behind the mutable,
accessor-style interface consumed by renderers and UI code.

Per tick::

    FrameSample
        │
        ├─► BandEnergyAggregator          ─┐
        ├─► SpectralStatisticsComputer     ├─► AnalysisSnapshot
        ├─► TimeDomainStatisticsComputer  ─┘
        │
        ├─► BeatDetector  (energy vs. history baseline)
        └─► HistoryBuffer.append
"""

import logging
from dataclasses import asdict, dataclass, replace
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

import numpy as np

from spectrascope.core.bands import BandEnergyAggregator
from spectrascope.core.beat import (
    DEFAULT_SENSITIVITY,
    DEFAULT_THRESHOLD,
    BeatDetector,
    BeatState,
    clamp_sensitivity,
    clamp_threshold,
)
from spectrascope.core.frame import FrameSample, FrameShapeError
from spectrascope.core.history import HistoryBuffer
from spectrascope.core.smoothing import ExponentialSmoother
from spectrascope.core.spectral import SpectralSnapshot, SpectralStatisticsComputer
from spectrascope.core.temporal import TimeDomainSnapshot, TimeDomainStatisticsComputer

logger = logging.getLogger(__name__)

MIN_TRANSFORM_SIZE = 32
MAX_TRANSFORM_SIZE = 32768


def _next_power_of_two(value: int) -> int:
    size = MIN_TRANSFORM_SIZE
    while size < value and size < MAX_TRANSFORM_SIZE:
        size *= 2
    return size


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@dataclass
class EngineConfig:
    """
    Session configuration.

    Out-of-range values are adjusted into range (with a warning) rather than
    rejected.
    """

    sample_rate: float = 44100.0
    transform_size: int = 2048
    beat_threshold: float = DEFAULT_THRESHOLD
    beat_sensitivity: float = DEFAULT_SENSITIVITY
    max_history_length: int = 60

    def __post_init__(self):
        if not self.sample_rate or self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate!r}")
        self.sample_rate = float(self.sample_rate)

        size = int(self.transform_size)
        fixed = _next_power_of_two(size)
        if fixed != size:
            logger.warning("transform_size %s is not a power of two in range; using %d",
                           self.transform_size, fixed)
        self.transform_size = fixed

        threshold = clamp_threshold(self.beat_threshold)
        if threshold != self.beat_threshold:
            logger.warning("beat_threshold %s clamped to %s", self.beat_threshold, threshold)
        self.beat_threshold = threshold

        sensitivity = clamp_sensitivity(self.beat_sensitivity)
        if sensitivity != self.beat_sensitivity:
            logger.warning("beat_sensitivity %s clamped to %s", self.beat_sensitivity, sensitivity)
        self.beat_sensitivity = sensitivity

        history = max(1, int(self.max_history_length))
        if history != self.max_history_length:
            logger.warning("max_history_length %s adjusted to %d", self.max_history_length, history)
        self.max_history_length = history

    @property
    def bin_count(self) -> int:
        return self.transform_size // 2


# ---------------------------------------------------------------------------
# State and snapshots
# ---------------------------------------------------------------------------

def _read_only(arr: np.ndarray) -> np.ndarray:
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True)
class AnalysisSnapshot:
    """Everything published for one frame."""

    spectral: SpectralSnapshot
    temporal: TimeDomainSnapshot
    band_energies: Mapping[str, float]
    beat: BeatState
    frequency_data: np.ndarray   # (N,) in [0, 1]
    time_domain_data: np.ndarray  # (M,) in [-1, 1)
    sample_rate: float
    frame_index: int = 0

    def stats(self) -> Dict[str, float]:
        """Spectral and time-domain statistics merged into one dict."""
        merged = asdict(self.spectral)
        merged.update(asdict(self.temporal))
        return merged


@dataclass(frozen=True)
class EngineState:
    """Complete engine state between frames."""

    config: EngineConfig
    history: HistoryBuffer
    beat: BeatState
    snapshot: Optional[AnalysisSnapshot] = None
    frame_count: int = 0

    @classmethod
    def initial(cls, config: EngineConfig) -> "EngineState":
        return cls(
            config=config,
            history=HistoryBuffer(config.max_history_length),
            beat=BeatState.initial(config.beat_threshold, config.beat_sensitivity),
        )


_bands = BandEnergyAggregator()
_spectral = SpectralStatisticsComputer()
_temporal = TimeDomainStatisticsComputer()


def advance(state: EngineState, frame: FrameSample) -> Tuple[EngineState, AnalysisSnapshot]:
    """
    Analyze one frame.

    Args:
        state: State after the previous frame. Not modified.
        frame: Current analyser output.

    Returns:
        Tuple of (next state, snapshot for this frame).

    Raises:
        FrameShapeError: If the spectrum length differs from the configured
            bin count, or the frame was captured at a different sample rate.
    """
    expected = state.config.bin_count
    if frame.bin_count != expected:
        raise FrameShapeError(
            f"magnitude spectrum has {frame.bin_count} bins, engine expects {expected} "
            f"(transform_size={state.config.transform_size})"
        )
    if frame.sample_rate != state.config.sample_rate:
        raise FrameShapeError(
            f"frame sample_rate {frame.sample_rate} differs from the session rate "
            f"{state.config.sample_rate}"
        )

    magnitude = frame.normalized_magnitude()
    waveform = frame.normalized_waveform()
    sample_rate = state.config.sample_rate

    band_energies = _bands.compute(magnitude, sample_rate)
    spectral = _spectral.compute(magnitude, sample_rate, state.history.latest())
    temporal = _temporal.compute(waveform, magnitude)

    # Baseline excludes the current frame
    beat = BeatDetector.detect(state.beat, spectral.total_energy, state.history.mean_energy())

    history = state.history.copy()
    history.append(magnitude, spectral.total_energy)

    snapshot = AnalysisSnapshot(
        spectral=spectral,
        temporal=temporal,
        band_energies=MappingProxyType(band_energies),
        beat=beat,
        frequency_data=_read_only(magnitude),
        time_domain_data=_read_only(waveform),
        sample_rate=sample_rate,
        frame_index=state.frame_count,
    )
    next_state = replace(
        state,
        history=history,
        beat=beat,
        snapshot=snapshot,
        frame_count=state.frame_count + 1,
    )
    return next_state, snapshot


# ---------------------------------------------------------------------------
# Stateful facade
# ---------------------------------------------------------------------------

class AnalysisEngine:
    """
    Mutable wrapper around :func:`advance` for per-tick host loops.

    Not safe for concurrent use: callers must serialize ``update`` calls.
    Read accessors reflect the most recent ``update``; before the first one
    they return zeros.

    Example::

        engine = AnalysisEngine(sample_rate=48000, transform_size=1024)
        snapshot = engine.update(FrameSample(magnitude, waveform, 48000))
        if engine.is_beat_detected():
            ...
    """

    def __init__(self, config: Optional[EngineConfig] = None, **overrides):
        if config is None:
            config = EngineConfig(**overrides)
        elif overrides:
            config = replace(config, **overrides)
        self.config = config
        self._state = EngineState.initial(config)
        self._smoother = ExponentialSmoother()

    # ------------------------------------------------------------------
    # Per-tick entry point
    # ------------------------------------------------------------------

    def update(self, frame: FrameSample) -> AnalysisSnapshot:
        """Analyze one frame and publish its snapshot."""
        self._state, snapshot = advance(self._state, frame)
        return snapshot

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def snapshot(self) -> Optional[AnalysisSnapshot]:
        return self._state.snapshot

    @property
    def history_length(self) -> int:
        return len(self._state.history)

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    def get_frequency_data(self) -> np.ndarray:
        snap = self._state.snapshot
        if snap is None:
            return np.zeros(self.config.bin_count)
        return snap.frequency_data

    def get_time_domain_data(self) -> np.ndarray:
        snap = self._state.snapshot
        if snap is None:
            return np.zeros(self.config.bin_count)
        return snap.time_domain_data

    def get_band_energy(self, name: str) -> float:
        snap = self._state.snapshot
        if snap is None:
            return 0.0
        return BandEnergyAggregator.energy(snap.band_energies, name)

    def get_all_band_energies(self) -> Dict[str, float]:
        snap = self._state.snapshot
        if snap is None:
            return {name: 0.0 for name in _bands.band_names}
        return dict(snap.band_energies)

    def get_stats(self) -> Dict[str, float]:
        snap = self._state.snapshot
        if snap is None:
            merged = asdict(SpectralSnapshot())
            merged.update(asdict(TimeDomainSnapshot()))
            return merged
        return snap.stats()

    def is_beat_detected(self) -> bool:
        return self._state.beat.is_beat

    def get_beat_energy(self) -> float:
        return self._state.beat.beat_energy

    def get_average_energy(self) -> float:
        """Mean total energy over the stored history."""
        return self._state.history.mean_energy()

    def get_energy_standard_deviation(self) -> float:
        return self._state.history.std_energy()

    def get_frequency_response(self, frequency: float) -> float:
        """Normalized magnitude of the bin containing *frequency*."""
        return BandEnergyAggregator.frequency_response(
            self.get_frequency_data(), self._current_sample_rate(), frequency
        )

    def get_frequency_range_energy(self, min_hz: float, max_hz: float) -> float:
        """Average normalized magnitude between two frequencies."""
        return BandEnergyAggregator.frequency_range_energy(
            self.get_frequency_data(), self._current_sample_rate(), min_hz, max_hz
        )

    def smoothed_value(self, value: float, smoothing_factor: float = 0.7) -> float:
        """Exponential blend against the smoother's stored value; returns *value* while none is stored."""
        return self._smoother.smooth(value, smoothing_factor)

    def _current_sample_rate(self) -> float:
        return self.config.sample_rate

    # ------------------------------------------------------------------
    # Beat configuration
    # ------------------------------------------------------------------

    @property
    def beat_threshold(self) -> float:
        return self._state.beat.threshold

    @property
    def beat_sensitivity(self) -> float:
        return self._state.beat.sensitivity

    def set_beat_threshold(self, threshold: float) -> None:
        """Set the threshold multiplier, clamped into [0, 1]."""
        self._state = replace(self._state, beat=self._state.beat.with_threshold(threshold))

    def set_beat_sensitivity(self, sensitivity: float) -> None:
        """Set the beat energy multiplier, clamped into [0.5, 2]."""
        self._state = replace(self._state, beat=self._state.beat.with_sensitivity(sensitivity))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Drop history and beat memory; beat configuration is kept."""
        beat = self._state.beat.reset()
        self._state = replace(
            EngineState.initial(self.config),
            beat=beat,
        )
        self._smoother.reset()
        logger.debug("engine reset (threshold=%s, sensitivity=%s)",
                     beat.threshold, beat.sensitivity)

    def dispose(self) -> None:
        self.reset()
