"""
Offline analysis pipeline.

Plays an audio file through the frame source and the analysis engine and
collects the per-frame snapshots into a manifest.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

from spectrascope.core.engine import AnalysisEngine, EngineConfig
from spectrascope.io.exporter import ManifestExporter, ManifestMetadata
from spectrascope.io.source import AnalyserSettings, FrameSource

logger = logging.getLogger(__name__)


class AnalysisPipeline:
    """
    File → frames → engine → manifest.

    Args:
        target_fps: Frames per second to analyze.
        transform_size: FFT size of the emulated analyser; sets the bin count.
        beat_threshold: Beat threshold multiplier, clamped to [0, 1].
        beat_sensitivity: Beat energy multiplier, clamped to [0.5, 2].
        max_history_length: Rolling history capacity in frames.
        sample_rate: Resample input to this rate; None keeps the file's rate.
        precision: Decimal places in the exported manifest.
    """

    def __init__(
        self,
        target_fps: int = 60,
        transform_size: int = 2048,
        beat_threshold: float = 0.6,
        beat_sensitivity: float = 1.2,
        max_history_length: int = 60,
        sample_rate: Optional[int] = None,
        precision: int = 4,
    ):
        self.target_fps = target_fps or 60
        self.transform_size = transform_size
        self.beat_threshold = beat_threshold
        self.beat_sensitivity = beat_sensitivity
        self.max_history_length = max_history_length
        self.sample_rate = sample_rate
        self.exporter = ManifestExporter(precision=precision)

    def _engine_for(self, source: FrameSource) -> AnalysisEngine:
        config = EngineConfig(
            sample_rate=source.sample_rate,
            transform_size=self.transform_size,
            beat_threshold=self.beat_threshold,
            beat_sensitivity=self.beat_sensitivity,
            max_history_length=self.max_history_length,
        )
        return AnalysisEngine(config)

    def process_source(self, source: FrameSource) -> dict[str, Any]:
        """Run every frame of *source* through a fresh engine."""
        engine = self._engine_for(source)
        snapshots = [engine.update(frame) for frame in source.frames()]

        metadata = ManifestMetadata(
            fps=self.target_fps,
            sample_rate=source.sample_rate,
            transform_size=engine.config.transform_size,
            duration=source.duration,
        )
        # Frames are hop_length samples apart, which is not exactly 1 / fps
        times = [source.frame_time(s.frame_index) for s in snapshots]
        manifest = self.exporter.build_manifest(snapshots, metadata, times)
        logger.info(
            "analyzed %d frames, %d beats", metadata.n_frames, metadata.beat_count
        )
        return {
            "manifest": manifest,
            "snapshots": snapshots,
            "n_frames": metadata.n_frames,
            "beat_count": metadata.beat_count,
            "duration": source.duration,
            "sample_rate": source.sample_rate,
        }

    def process(
        self,
        audio_path: Union[str, Path],
        max_duration: Optional[float] = None,
    ) -> dict[str, Any]:
        """
        Analyze an audio file.

        Args:
            audio_path: Path to audio file.
            max_duration: Only analyze this many seconds.

        Returns:
            Dict with ``manifest``, ``snapshots``, ``n_frames``,
            ``beat_count``, ``duration`` and ``sample_rate``.
        """
        # Engine clamps transform_size; analyse with the clamped value so shapes agree
        size = EngineConfig(transform_size=self.transform_size).transform_size
        source = FrameSource.from_file(
            audio_path,
            settings=AnalyserSettings(fft_size=size),
            fps=self.target_fps,
            sr=self.sample_rate,
            max_duration=max_duration,
        )
        return self.process_source(source)

    def process_to_file(
        self,
        audio_path: Union[str, Path],
        output_path: Union[str, Path],
        max_duration: Optional[float] = None,
    ) -> dict[str, Any]:
        """Analyze *audio_path* and write the manifest JSON to *output_path*."""
        result = self.process(audio_path, max_duration=max_duration)
        self.exporter.write(result["manifest"], output_path)
        return result
