"""Tests for frequency band energy aggregation."""

from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from spectrascope.core.bands import (
    DEFAULT_BANDS,
    BandEnergyAggregator,
    FrequencyBand,
    bin_width,
)


@pytest.fixture
def aggregator():
    return BandEnergyAggregator()


class TestBandTable:
    def test_seven_default_bands(self):
        assert [b.name for b in DEFAULT_BANDS] == [
            "subBass", "bass", "lowMid", "mid", "highMid", "treble", "brilliance",
        ]

    def test_band_edges(self):
        edges = {b.name: (b.low_hz, b.high_hz) for b in DEFAULT_BANDS}
        assert edges["subBass"] == (20.0, 60.0)
        assert edges["mid"] == (500.0, 2000.0)
        assert edges["brilliance"] == (6000.0, 20000.0)

    def test_descriptors_are_immutable(self):
        with pytest.raises(FrozenInstanceError):
            DEFAULT_BANDS[0].low_hz = 0.0


class TestBandEnergies:
    def test_silence_is_zero(self, aggregator):
        energies = aggregator.compute(np.zeros(1024), 44100)
        assert all(v == 0.0 for v in energies.values())

    def test_all_bands_non_negative(self, aggregator):
        rng = np.random.RandomState(3)
        for _ in range(10):
            energies = aggregator.compute(rng.rand(1024), 44100)
            assert all(v >= 0.0 for v in energies.values())

    def test_full_scale_sub_bass(self, aggregator):
        # Bins at 21.5 Hz and 43.1 Hz fall in [20, 60); the band spans ceil(40 / 21.53) = 2 bins
        energies = aggregator.compute(np.ones(1024), 44100)
        assert energies["subBass"] == pytest.approx(1.0)

    def test_divides_by_expected_bin_count(self):
        # 8 Hz sample rate, 4 bins => 1 Hz per bin
        agg = BandEnergyAggregator([FrequencyBand("low", 0.0, 2.0), FrequencyBand("wide", 2.0, 10.0)])
        energies = agg.compute(np.array([1.0, 0.5, 1.0, 1.0]), 8)
        assert energies["low"] == pytest.approx(0.75)
        # Two bins present, eight expected
        assert energies["wide"] == pytest.approx(2.0 / 8.0)

    def test_bands_above_nyquist_are_zero(self, aggregator):
        energies = aggregator.compute(np.ones(256), 8000)
        assert energies["treble"] == 0.0
        assert energies["brilliance"] == 0.0

    def test_zero_width_band_does_not_divide_by_zero(self):
        agg = BandEnergyAggregator([FrequencyBand("empty", 100.0, 100.0)])
        assert agg.compute(np.ones(64), 44100) == {"empty": 0.0}

    def test_returns_fresh_mapping(self, aggregator):
        first = aggregator.compute(np.ones(1024), 44100)
        first["bass"] = 123.0
        second = aggregator.compute(np.ones(1024), 44100)
        assert second["bass"] != 123.0

    def test_unknown_band_reads_zero(self, aggregator):
        energies = aggregator.compute(np.ones(1024), 44100)
        assert BandEnergyAggregator.energy(energies, "nonexistent") == 0.0


class TestFrequencyLookup:
    def test_bin_width(self):
        assert bin_width(44100, 1024) == pytest.approx(22050 / 1024)

    def test_frequency_response_picks_containing_bin(self):
        spectrum = np.zeros(1024)
        spectrum[5] = 1.0
        assert BandEnergyAggregator.frequency_response(spectrum, 44100, 110.0) == 1.0
        assert BandEnergyAggregator.frequency_response(spectrum, 44100, 200.0) == 0.0

    def test_frequency_response_clamps(self):
        spectrum = np.linspace(0, 1, 16)
        assert BandEnergyAggregator.frequency_response(spectrum, 32, -50.0) == 0.0
        assert BandEnergyAggregator.frequency_response(spectrum, 32, 1e6) == 1.0

    def test_frequency_range_energy(self):
        spectrum = np.zeros(1024)
        spectrum[5] = 1.0
        # floor(100 / 21.53) = 4, ceil(120 / 21.53) = 6 => bins 4 and 5
        energy = BandEnergyAggregator.frequency_range_energy(spectrum, 44100, 100.0, 120.0)
        assert energy == pytest.approx(0.5)

    def test_frequency_range_energy_empty_range(self):
        spectrum = np.ones(16)
        assert BandEnergyAggregator.frequency_range_energy(spectrum, 32, 5.0, 5.0) == 0.0
