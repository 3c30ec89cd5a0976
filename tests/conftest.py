"""Shared fixtures for spectrascope tests."""

import numpy as np
import pytest
from scipy.io import wavfile

from spectrascope.core.engine import AnalysisEngine, EngineConfig
from spectrascope.core.frame import FrameSample

TEST_SR = 44100
TEST_BINS = 1024


def make_frame(magnitude=None, waveform=None, sample_rate=TEST_SR, bins=TEST_BINS):
    """Frame helper: silent spectrum and centred waveform unless overridden."""
    if magnitude is None:
        magnitude = np.zeros(bins, dtype=np.uint8)
    if waveform is None:
        waveform = np.full(bins, 128, dtype=np.uint8)
    return FrameSample(magnitude=magnitude, waveform=waveform, sample_rate=sample_rate)


@pytest.fixture
def engine():
    """Engine with the default 2048-point configuration at 44.1 kHz."""
    return AnalysisEngine(EngineConfig(sample_rate=TEST_SR, transform_size=2048))


@pytest.fixture
def silent_frame():
    return make_frame()


@pytest.fixture
def loud_frame():
    return make_frame(magnitude=np.full(TEST_BINS, 255, dtype=np.uint8))


@pytest.fixture
def sine_signal():
    """Quiet 440 Hz sine, 1 second at 22.05 kHz."""
    sr = 22050
    t = np.linspace(0, 1.0, sr, endpoint=False)
    y = (0.05 * np.sin(2 * np.pi * 440.0 * t)).astype(np.float32)
    return y, sr


@pytest.fixture
def click_signal():
    """Silence with a short noise burst every half second, 2 seconds at 22.05 kHz."""
    sr = 22050
    rng = np.random.RandomState(7)
    y = np.zeros(2 * sr, dtype=np.float32)
    for start in range(sr // 4, len(y), sr // 2):
        y[start:start + 1000] = 0.5 * rng.uniform(-1, 1, 1000)
    return y, sr


@pytest.fixture
def wav_file(tmp_path, click_signal):
    """click_signal written as 16-bit PCM wav."""
    y, sr = click_signal
    path = tmp_path / "clicks.wav"
    wavfile.write(path, sr, (y * 32767).astype(np.int16))
    return path
