"""Tests for energy-based beat detection."""

import pytest

from spectrascope.core.beat import (
    BeatDetector,
    BeatState,
    clamp_sensitivity,
    clamp_threshold,
)


class TestClamping:
    @pytest.mark.parametrize("value, expected", [(-1, 0.0), (5, 1.0), (0.25, 0.25)])
    def test_threshold(self, value, expected):
        assert clamp_threshold(value) == expected

    @pytest.mark.parametrize("value, expected", [(0, 0.5), (10, 2.0), (1.5, 1.5)])
    def test_sensitivity(self, value, expected):
        assert clamp_sensitivity(value) == expected

    def test_initial_state_clamps(self):
        state = BeatState.initial(threshold=3.0, sensitivity=0.1)
        assert state.threshold == 1.0
        assert state.sensitivity == 0.5

    def test_with_setters_clamp(self):
        state = BeatState.initial()
        assert state.with_threshold(-1).threshold == 0.0
        assert state.with_sensitivity(10).sensitivity == 2.0


class TestBeatDetector:
    def test_first_energized_frame_is_a_beat(self):
        state = BeatDetector.detect(BeatState.initial(), 0.5, average_energy=0.0)
        assert state.is_beat
        assert state.beat_energy == pytest.approx(0.5 * 1.2)

    def test_silence_is_not_a_beat(self):
        state = BeatDetector.detect(BeatState.initial(), 0.0, average_energy=0.0)
        assert not state.is_beat
        assert state.beat_energy == 0.0

    def test_flat_energy_is_not_a_beat(self):
        state = BeatState.initial()
        state = BeatDetector.detect(state, 0.5, average_energy=0.0)
        state = BeatDetector.detect(state, 0.5, average_energy=0.5)
        assert not state.is_beat
        assert state.beat_energy == 0.5

    def test_rise_below_threshold_is_not_a_beat(self):
        state = BeatState(prev_energy=0.1, threshold=0.6)
        state = BeatDetector.detect(state, 0.2, average_energy=0.5)
        assert not state.is_beat

    def test_rise_above_threshold_is_a_beat(self):
        state = BeatState(prev_energy=0.1, threshold=0.6, sensitivity=2.0)
        state = BeatDetector.detect(state, 0.4, average_energy=0.5)
        assert state.is_beat
        assert state.beat_energy == pytest.approx(0.8)

    def test_prev_energy_always_updated(self):
        state = BeatDetector.detect(BeatState(prev_energy=0.9), 0.1, average_energy=0.5)
        assert not state.is_beat
        assert state.prev_energy == 0.1

    def test_detect_keeps_configuration(self):
        state = BeatState.initial(threshold=0.3, sensitivity=1.7)
        state = BeatDetector.detect(state, 0.4, average_energy=0.1)
        assert state.threshold == 0.3
        assert state.sensitivity == 1.7

    def test_reset_keeps_configuration(self):
        state = BeatState(is_beat=True, beat_energy=1.0, prev_energy=0.8,
                          threshold=0.2, sensitivity=1.9)
        fresh = state.reset()
        assert fresh == BeatState(threshold=0.2, sensitivity=1.9)
