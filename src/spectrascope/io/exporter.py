"""
Manifest serialization module.

Exports per-frame analysis snapshots to a JSON manifest aligned to the
capture frame rate, for renderers that replay an analysis offline.
"""

import json
import logging
import math
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from spectrascope.core.engine import AnalysisSnapshot

logger = logging.getLogger(__name__)


@dataclass
class ManifestMetadata:
    """Metadata header for the analysis manifest."""

    fps: int
    sample_rate: float
    transform_size: int
    duration: float
    n_frames: int = 0
    beat_count: int = 0
    schema_version: str = "1.0"


class ManifestExporter:
    """
    Exports analysis snapshots to JSON manifest format.

    Each frame carries every spectral and time-domain statistic, every band
    energy and the beat flag for that frame.
    """

    def __init__(self, precision: int = 4):
        """
        Initialize the exporter.

        Args:
            precision: Decimal places for floating point values.
        """
        self.precision = precision

    def _round(self, value: float) -> Optional[float]:
        """Round to configured precision; non-finite values become None."""
        f = float(value)
        if math.isnan(f) or math.isinf(f):
            return None
        return round(f, self.precision)

    def _build_frame(self, snapshot: AnalysisSnapshot, time: float) -> dict[str, Any]:
        """
        Build a single frame's data dictionary.

        Args:
            snapshot: Analysis snapshot for the frame.
            time: Capture time of the frame in seconds.

        Returns:
            Dictionary with all frame data.
        """
        frame: dict[str, Any] = {
            "frame_index": snapshot.frame_index,
            "time": self._round(time),
            "is_beat": bool(snapshot.beat.is_beat),
            "beat_energy": self._round(snapshot.beat.beat_energy),
        }
        for name, value in snapshot.stats().items():
            frame[name] = self._round(value)
        frame["bands"] = {
            name: self._round(value) for name, value in snapshot.band_energies.items()
        }
        return frame

    def build_manifest(
        self,
        snapshots: Sequence[AnalysisSnapshot],
        metadata: ManifestMetadata,
        times: Optional[Sequence[float]] = None,
    ) -> dict[str, Any]:
        """
        Build the complete manifest dictionary.

        ``n_frames`` and ``beat_count`` in *metadata* are filled in from
        *snapshots*.

        Args:
            snapshots: Per-frame snapshots in capture order.
            metadata: Manifest header.
            times: Capture time of each snapshot in seconds. Defaults to
                ``frame_index / fps``, which only holds when frames are
                exactly ``1 / fps`` apart.

        Raises:
            ValueError: If *times* and *snapshots* differ in length.
        """
        if times is None:
            times = [s.frame_index / metadata.fps for s in snapshots]
        elif len(times) != len(snapshots):
            raise ValueError(
                f"got {len(times)} frame times for {len(snapshots)} snapshots"
            )

        metadata.n_frames = len(snapshots)
        metadata.beat_count = sum(1 for s in snapshots if s.beat.is_beat)

        header = asdict(metadata)
        header["duration"] = self._round(metadata.duration)

        return {
            "metadata": header,
            "frames": [self._build_frame(s, t) for s, t in zip(snapshots, times)],
        }

    def to_json(
        self,
        snapshots: Sequence[AnalysisSnapshot],
        metadata: ManifestMetadata,
        indent: Optional[int] = None,
        times: Optional[Sequence[float]] = None,
    ) -> str:
        return json.dumps(self.build_manifest(snapshots, metadata, times), indent=indent)

    def export(
        self,
        snapshots: Sequence[AnalysisSnapshot],
        metadata: ManifestMetadata,
        output_path: Union[str, Path],
        indent: Optional[int] = 2,
        times: Optional[Sequence[float]] = None,
    ) -> Path:
        """
        Write the manifest to a JSON file.

        Returns:
            Path to the written file.
        """
        manifest = self.build_manifest(snapshots, metadata, times)
        return self.write(manifest, output_path, indent=indent)

    def write(
        self,
        manifest: dict[str, Any],
        output_path: Union[str, Path],
        indent: Optional[int] = 2,
    ) -> Path:
        """Write an already built manifest to *output_path*."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(manifest, f, indent=indent)
        logger.info("wrote %d frames to %s", len(manifest["frames"]), output_path)
        return output_path
