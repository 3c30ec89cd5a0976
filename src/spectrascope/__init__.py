"""Real-time spectral analysis engine for audio-reactive visuals."""

from spectrascope.core.engine import AnalysisEngine, EngineConfig, advance
from spectrascope.core.frame import FrameSample, FrameShapeError
from spectrascope.io.exporter import ManifestExporter
from spectrascope.io.source import FrameSource
from spectrascope.pipeline import AnalysisPipeline

__version__ = "0.1.0"
__all__ = [
    "AnalysisEngine",
    "EngineConfig",
    "advance",
    "FrameSample",
    "FrameShapeError",
    "ManifestExporter",
    "FrameSource",
    "AnalysisPipeline",
]
