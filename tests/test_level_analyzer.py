"""
Tests für die Pegelanalyse.
"""

import pytest
import numpy as np

from loudness_analyzer.core.audio_io import AudioBuffer
from loudness_analyzer.core.level_analyzer import (
    analyze_levels,
    compute_rms,
    compute_peak,
    count_clips,
    compute_dynamic_range,
    compute_loudness_range,
    linear_to_db,
    db_to_linear,
)


class TestLevelMeasurement:
    """Tests für Pegelmessung."""

    def test_rms_sine(self):
        """RMS eines Sinustons = Peak/√2."""
        t = np.arange(44100) / 44100
        sine = np.sin(2 * np.pi * 440 * t)

        rms = compute_rms(sine)
        expected = 1.0 / np.sqrt(2)

        assert rms == pytest.approx(expected, rel=0.01)

    def test_rms_db(self):
        """RMS in dB."""
        data = np.ones(100) * 0.1  # -20 dB
        rms_db = compute_rms(data, as_db=True)

        assert rms_db == pytest.approx(-20.0, rel=0.01)

    def test_rms_over_all_channels(self):
        """Mehrkanal-RMS über alle Samples."""
        data = np.column_stack([np.ones(100), np.zeros(100)])

        assert compute_rms(data) == pytest.approx(np.sqrt(0.5))

    def test_peak(self):
        """Peak-Wert."""
        data = np.array([0.3, -0.8, 0.5])
        peak = compute_peak(data)

        assert peak == 0.8

    def test_zero_signal_db(self):
        """Nullsignal ergibt -inf dB."""
        data = np.zeros(100)

        assert compute_peak(data, as_db=True) == -np.inf
        assert compute_rms(data, as_db=True) == -np.inf


class TestClipping:
    """Tests für Clip-Zählung."""

    def test_full_scale_square_does_not_clip(self):
        """Amplitude exakt 1.0 ist kein Clipping."""
        square = np.sign(np.sin(2 * np.pi * 100 * np.arange(48000) / 48000 + 0.1))
        buffer = AudioBuffer(data=square, sample_rate=48000)

        assert np.max(np.abs(square)) == 1.0
        assert analyze_levels(buffer).clip_count == 0

    def test_clips_counted(self):
        data = np.array([0.5, 1.0001, -1.2, 1.0, -1.0])

        assert count_clips(data) == 2

    def test_clips_over_all_channels(self):
        data = np.array([[1.5, 0.0], [0.0, -1.5], [1.0, 1.0]])

        assert count_clips(data) == 2


class TestAnalyzeLevels:
    """Tests für die kombinierte Analyse."""

    def test_sine_levels(self):
        """1 kHz Sinus: Peak = 20·log10(A), RMS = 20·log10(A/√2)."""
        amplitude = 0.5
        t = np.arange(48000) / 48000
        buffer = AudioBuffer(data=amplitude * np.sin(2 * np.pi * 1000 * t), sample_rate=48000)

        levels = analyze_levels(buffer)

        assert levels.peak_level == pytest.approx(20 * np.log10(amplitude), abs=0.01)
        assert levels.rms_level == pytest.approx(20 * np.log10(amplitude / np.sqrt(2)), abs=0.1)
        assert levels.true_peak == levels.peak_level
        assert levels.dynamic_range == pytest.approx(3.01, abs=0.05)
        assert levels.clip_count == 0

    def test_silence(self):
        buffer = AudioBuffer(data=np.zeros((48000, 2)), sample_rate=48000)

        levels = analyze_levels(buffer)

        assert levels.peak_level == -np.inf
        assert levels.rms_level == -np.inf
        assert levels.dynamic_range == 0.0
        assert levels.clip_count == 0


class TestDerivedValues:
    """Tests für abgeleitete Werte."""

    def test_dynamic_range(self):
        assert compute_dynamic_range(-1.0, -13.0) == pytest.approx(12.0)
        assert compute_dynamic_range(-np.inf, -np.inf) == 0.0

    def test_loudness_range(self):
        assert compute_loudness_range(-20.0, -23.0) == pytest.approx(3.0)
        assert compute_loudness_range(-26.0, -23.0) == pytest.approx(3.0)
        assert compute_loudness_range(-np.inf, -23.0) == 0.0

    def test_db_conversion(self):
        assert linear_to_db(1.0) == 0.0
        assert linear_to_db(0.0) == -np.inf
        assert db_to_linear(-20.0) == pytest.approx(0.1)
        assert db_to_linear(linear_to_db(0.37)) == pytest.approx(0.37)

    def test_db_to_linear_overflow(self):
        """Nicht darstellbarer Faktor ergibt inf statt OverflowError."""
        assert db_to_linear(10000.0) == np.inf
