"""
Command-line analysis of audio files.

Plays an audio file through the analysis engine frame by frame and writes
the per-frame statistics, band energies and beat flags to a JSON manifest.
"""

import argparse
import logging
import sys
from pathlib import Path

from spectrascope.pipeline import AnalysisPipeline

LOG_FORMAT = "[%(levelname)s][%(name)s] %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spectrascope",
        description="Frame-by-frame spectral analysis and beat detection",
    )

    parser.add_argument(
        "audio",
        type=Path,
        help="Input audio file (wav, mp3, flac)",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output JSON file (default: <audio>_analysis.json)",
    )

    parser.add_argument(
        "-f", "--fps",
        type=int,
        default=60,
        help="Analysis frames per second (default: 60)",
    )

    parser.add_argument(
        "--transform-size",
        type=int,
        default=2048,
        help="FFT size, power of two (default: 2048)",
    )

    parser.add_argument(
        "--threshold",
        type=float,
        default=0.6,
        help="Beat threshold multiplier 0-1 (default: 0.6)",
    )

    parser.add_argument(
        "--sensitivity",
        type=float,
        default=1.2,
        help="Beat energy multiplier 0.5-2 (default: 1.2)",
    )

    parser.add_argument(
        "--history",
        type=int,
        default=60,
        help="Rolling history length in frames (default: 60)",
    )

    parser.add_argument(
        "--max-duration",
        type=float,
        default=None,
        help="Only analyze the first N seconds",
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )

    return parser


def main(argv=None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    if not args.audio.exists():
        print(f"Error: Audio file not found: {args.audio}", file=sys.stderr)
        return 1

    output = args.output
    if output is None:
        output = args.audio.with_name(f"{args.audio.stem}_analysis.json")

    pipeline = AnalysisPipeline(
        target_fps=args.fps,
        transform_size=args.transform_size,
        beat_threshold=args.threshold,
        beat_sensitivity=args.sensitivity,
        max_history_length=args.history,
    )
    result = pipeline.process_to_file(args.audio, output, max_duration=args.max_duration)

    print(
        f"{result['n_frames']} frames, {result['beat_count']} beats, "
        f"{result['duration']:.2f}s -> {output}",
        flush=True,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
