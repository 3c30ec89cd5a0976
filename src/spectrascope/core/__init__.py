"""Core per-frame analysis modules."""

from spectrascope.core.bands import DEFAULT_BANDS, BandEnergyAggregator, FrequencyBand
from spectrascope.core.beat import BeatDetector, BeatState
from spectrascope.core.engine import (
    AnalysisEngine,
    AnalysisSnapshot,
    EngineConfig,
    EngineState,
    advance,
)
from spectrascope.core.frame import FrameSample, FrameShapeError
from spectrascope.core.history import HistoryBuffer
from spectrascope.core.spectral import SpectralSnapshot, SpectralStatisticsComputer
from spectrascope.core.temporal import TimeDomainSnapshot, TimeDomainStatisticsComputer

__all__ = [
    "DEFAULT_BANDS",
    "BandEnergyAggregator",
    "FrequencyBand",
    "BeatDetector",
    "BeatState",
    "AnalysisEngine",
    "AnalysisSnapshot",
    "EngineConfig",
    "EngineState",
    "advance",
    "FrameSample",
    "FrameShapeError",
    "HistoryBuffer",
    "SpectralSnapshot",
    "SpectralStatisticsComputer",
    "TimeDomainSnapshot",
    "TimeDomainStatisticsComputer",
]
