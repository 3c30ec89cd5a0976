"""
Spectrascope per-frame latency benchmark.

Usage:
    python scripts/benchmark.py [--quick]

Modes:
    default  : 2048-point transform, 3 warm-up + 2000 timed frames
    --quick  : 2048-point transform, 1 warm-up + 300 timed frames (CI-friendly)

Output: timing table printed to stdout. Exits with status 1 when the mean
update time exceeds the 60 fps frame budget.
"""

import argparse
import os
import sys
import time
from typing import List

import numpy as np

# Make sure the installed package is on the path when run from repo root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from spectrascope.core.engine import AnalysisEngine, EngineConfig, advance
from spectrascope.core.frame import FrameSample

_SEP = "─" * 72
FRAME_BUDGET_MS = 1000.0 / 60.0


def _hdr(title: str) -> None:
    print(f"\n{_SEP}")
    print(f"  {title}")
    print(_SEP)


def _random_frames(n: int, bins: int, sample_rate: float, seed: int = 0) -> List[FrameSample]:
    rng = np.random.RandomState(seed)
    return [
        FrameSample(
            magnitude=rng.randint(0, 256, bins),
            waveform=rng.randint(0, 256, bins),
            sample_rate=sample_rate,
        )
        for _ in range(n)
    ]


def _time_updates(engine: AnalysisEngine, frames: List[FrameSample], warmup: int) -> List[float]:
    """Feed frames through engine.update, discard warmup iterations, return per-frame times."""
    for frame in frames[:warmup]:
        engine.update(frame)
    times = []
    for frame in frames[warmup:]:
        t0 = time.perf_counter()
        engine.update(frame)
        times.append(time.perf_counter() - t0)
    return times


def _stats(times: List[float]) -> str:
    arr = np.array(times)
    return (
        f"mean={arr.mean()*1000:.3f} ms  p99={np.percentile(arr, 99)*1000:.3f} ms"
        f"  min={arr.min()*1000:.3f} ms  max={arr.max()*1000:.3f} ms"
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Spectrascope per-frame benchmark")
    parser.add_argument(
        "--quick",
        action="store_true",
        help="Time fewer frames for fast CI runs",
    )
    args = parser.parse_args()

    if args.quick:
        WARMUP, RUNS = 1, 300
        label = "quick mode"
    else:
        WARMUP, RUNS = 3, 2000
        label = "full mode"

    config = EngineConfig(sample_rate=44100, transform_size=2048)
    frames = _random_frames(WARMUP + RUNS, config.bin_count, config.sample_rate)

    print(f"\nSpectrascope Benchmark: {label}")
    print(f"Bins: {config.bin_count}  |  History: {config.max_history_length} frames")
    print(f"Warm-up frames: {WARMUP}  |  Timed frames: {RUNS}")

    results = {}

    # ------------------------------------------------------------------
    # 1. AnalysisEngine.update
    # ------------------------------------------------------------------
    _hdr("1. AnalysisEngine.update")
    t = _time_updates(AnalysisEngine(config), frames, WARMUP)
    results["engine.update"] = t
    print(f"  {_stats(t)}")

    # ------------------------------------------------------------------
    # 2. advance (pure step, state threaded by hand)
    # ------------------------------------------------------------------
    _hdr("2. advance")
    state = AnalysisEngine(config).state
    t = []
    for frame in frames:
        t0 = time.perf_counter()
        state, _ = advance(state, frame)
        t.append(time.perf_counter() - t0)
    results["advance"] = t[WARMUP:]
    print(f"  {_stats(results['advance'])}")

    # ------------------------------------------------------------------
    # Summary table
    # ------------------------------------------------------------------
    _hdr(f"Summary (frame budget {FRAME_BUDGET_MS:.1f} ms)")
    name_w = max(len(name) for name in results) + 2
    print(f"  {'Function':<{name_w}} Time (ms, mean)")
    print(f"  {'-'*name_w} ---------------")
    for name, times in results.items():
        print(f"  {name:<{name_w}} {np.mean(times)*1000:.3f}")

    worst = max(np.mean(times) * 1000 for times in results.values())
    print(f"\n{_SEP}\n")
    if worst > FRAME_BUDGET_MS:
        print(f"  !! mean update {worst:.3f} ms exceeds the {FRAME_BUDGET_MS:.1f} ms frame budget !!")
        sys.exit(1)


if __name__ == "__main__":
    main()
