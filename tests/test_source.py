"""Tests for the offline analyser-emulating frame source."""

import numpy as np
import pytest

from spectrascope.core.frame import FrameSample
from spectrascope.io.source import AnalyserSettings, FrameSource


class TestAnalyserSettings:
    def test_defaults(self):
        settings = AnalyserSettings()
        assert settings.fft_size == 2048
        assert settings.bin_count == 1024
        assert settings.smoothing_time_constant == 0.8

    def test_smoothing_clamped(self):
        assert AnalyserSettings(smoothing_time_constant=3.0).smoothing_time_constant == 1.0

    def test_decibel_range_must_be_ordered(self):
        with pytest.raises(ValueError):
            AnalyserSettings(min_decibels=-30, max_decibels=-100)


class TestFrameSource:
    def test_frame_count_and_shape(self, sine_signal):
        y, sr = sine_signal
        source = FrameSource(y, sr, AnalyserSettings(fft_size=1024), fps=30)
        frames = list(source.frames())

        assert source.hop_length == 735
        assert len(frames) == len(source) == 1 + sr // 735
        for frame in frames:
            assert isinstance(frame, FrameSample)
            assert frame.magnitude.shape == (512,)
            assert frame.waveform.shape == (512,)
            assert frame.sample_rate == sr

    def test_sine_peaks_at_its_bin(self, sine_signal):
        y, sr = sine_signal
        source = FrameSource(y, sr, AnalyserSettings(fft_size=1024), fps=30)
        last = list(source.frames())[-1]
        expected_bin = 440.0 / ((sr / 2) / 512)
        assert abs(int(np.argmax(last.magnitude)) - expected_bin) <= 1

    def test_silence_maps_to_zero_bytes(self):
        source = FrameSource(np.zeros(4096, dtype=np.float32), 8000, AnalyserSettings(fft_size=256))
        for frame in source.frames():
            assert not frame.magnitude.any()
            assert np.all(frame.waveform == 128)

    def test_first_frame_is_leading_silence(self, sine_signal):
        y, sr = sine_signal
        first = next(FrameSource(y, sr, AnalyserSettings(fft_size=1024)).frames())
        assert not first.magnitude.any()

    def test_frame_time(self, sine_signal):
        y, sr = sine_signal
        source = FrameSource(y, sr, fps=30)
        assert source.frame_time(30) == pytest.approx(30 * 735 / sr)

    def test_duration(self, sine_signal):
        y, sr = sine_signal
        assert FrameSource(y, sr).duration == pytest.approx(1.0)

    def test_from_file(self, wav_file):
        source = FrameSource.from_file(wav_file, AnalyserSettings(fft_size=512), fps=20)
        assert source.sample_rate == 22050
        assert source.duration == pytest.approx(2.0, abs=1e-3)
        frame = next(source.frames())
        assert frame.bin_count == 256

    def test_from_file_max_duration(self, wav_file):
        source = FrameSource.from_file(wav_file, fps=20, max_duration=0.5)
        assert source.duration == pytest.approx(0.5, abs=1e-2)
