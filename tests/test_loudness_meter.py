"""
Tests für den EBU R128 Lautheitsmesser.

Referenz: Ein 1 kHz Sinus mit Amplitude A misst 20·log10(A) - 3.01 LUFS.
"""

import pytest
import numpy as np

from loudness_analyzer.core.audio_io import AudioBuffer
from loudness_analyzer.core.errors import InvalidBufferError
from loudness_analyzer.core.loudness_meter import LoudnessMeter, power_mean_lufs


SR = 48000


def sine(amplitude, duration, freq=1000.0, sr=SR):
    t = np.arange(int(duration * sr)) / sr
    return amplitude * np.sin(2 * np.pi * freq * t)


def expected_lufs(amplitude):
    return 20 * np.log10(amplitude) - 10 * np.log10(2)


class TestBlocks:
    """Tests für die Blockaufteilung."""

    @pytest.mark.parametrize("sample_rate, block, hop", [
        (48000, 19200, 4800),
        (44100, 17640, 4410),
        (96000, 38400, 9600),
    ])
    def test_block_and_hop_size(self, sample_rate, block, hop):
        """400 ms Blöcke, 75 % Überlappung."""
        meter = LoudnessMeter(sample_rate)

        assert meter.block_size == block
        assert meter.hop_size == hop

    def test_number_of_blocks(self):
        """Nur volle Blöcke werden gezählt."""
        meter = LoudnessMeter(SR)
        buffer = AudioBuffer(data=sine(0.5, 2.0), sample_rate=SR)

        blocks = meter.block_loudness(buffer)

        # (96000 - 19200) / 4800 + 1
        assert len(blocks) == 17

    def test_shorter_than_block(self):
        meter = LoudnessMeter(SR)
        buffer = AudioBuffer(data=sine(0.5, 0.3), sample_rate=SR)

        assert len(meter.block_loudness(buffer)) == 0
        assert meter.measure_integrated(buffer) == -np.inf

    def test_silent_blocks_are_minus_inf(self):
        meter = LoudnessMeter(SR)
        buffer = AudioBuffer(data=np.zeros(SR), sample_rate=SR)

        assert np.all(meter.block_loudness(buffer) == -np.inf)


class TestIntegratedLoudness:
    """Tests für die integrierte Lautheit."""

    @pytest.mark.parametrize("amplitude", [1.0, 0.5, 0.1])
    def test_sine_reference(self, amplitude):
        """1 kHz Sinus entspricht der Referenz."""
        meter = LoudnessMeter(SR)
        buffer = AudioBuffer(data=sine(amplitude, 5.0), sample_rate=SR)

        assert meter.measure_integrated(buffer) == pytest.approx(
            expected_lufs(amplitude), abs=0.1
        )

    def test_sine_reference_44k(self):
        meter = LoudnessMeter(44100)
        buffer = AudioBuffer(data=sine(0.5, 5.0, sr=44100), sample_rate=44100)

        assert meter.measure_integrated(buffer) == pytest.approx(expected_lufs(0.5), abs=0.1)

    def test_channel_swap_invariance(self):
        """L/R-Tausch ändert die Lautheit nicht."""
        rng = np.random.default_rng(7)
        left = sine(0.5, 3.0)
        right = 0.1 * rng.standard_normal(len(left))
        meter = LoudnessMeter(SR)

        lr = meter.measure_integrated(AudioBuffer.from_channels([left, right], SR))
        rl = meter.measure_integrated(AudioBuffer.from_channels([right, left], SR))

        assert lr == pytest.approx(rl, abs=1e-9)

    def test_identical_stereo_equals_mono(self):
        """Kanäle werden gemittelt, nicht summiert."""
        x = sine(0.3, 3.0)
        meter = LoudnessMeter(SR)

        mono = meter.measure_integrated(AudioBuffer(data=x, sample_rate=SR))
        stereo = meter.measure_integrated(AudioBuffer.from_channels([x, x], SR))

        assert stereo == pytest.approx(mono, abs=1e-9)

    def test_only_two_channels_gated(self):
        """Weitere Kanäle werden ignoriert."""
        x = sine(0.3, 3.0)
        loud = sine(1.0, 3.0, freq=3000.0)
        meter = LoudnessMeter(SR)

        two = meter.measure_integrated(AudioBuffer.from_channels([x, x], SR))
        three = meter.measure_integrated(AudioBuffer.from_channels([x, x, loud], SR))

        assert three == pytest.approx(two, abs=1e-9)

    def test_silence(self):
        meter = LoudnessMeter(SR)
        buffer = AudioBuffer(data=np.zeros(3 * SR), sample_rate=SR)

        assert meter.measure_integrated(buffer) == -np.inf

    def test_absolute_gate(self):
        """Signale unter -70 LUFS ergeben -inf."""
        meter = LoudnessMeter(SR)
        buffer = AudioBuffer(data=sine(1e-4, 3.0), sample_rate=SR)

        assert meter.measure_integrated(buffer) == -np.inf

    def test_relative_gate(self):
        """Leise Passagen zählen nicht zur integrierten Lautheit."""
        loud = sine(0.5, 5.0)
        quiet = sine(0.01, 5.0)
        meter = LoudnessMeter(SR)

        loud_only = meter.measure_integrated(AudioBuffer(data=loud, sample_rate=SR))
        buffer = AudioBuffer(data=np.concatenate([loud, quiet]), sample_rate=SR)
        blocks = meter.block_loudness(buffer)
        ungated = power_mean_lufs(blocks[blocks > -70])

        integrated = meter.measure_integrated(buffer)

        assert integrated == pytest.approx(loud_only, abs=0.3)
        assert integrated > ungated + 2.0

    def test_measurement_is_repeatable(self):
        """Filterzustand wird vor jeder Messung zurückgesetzt."""
        meter = LoudnessMeter(SR)
        buffer = AudioBuffer(data=sine(0.5, 2.0), sample_rate=SR)

        assert meter.measure_integrated(buffer) == meter.measure_integrated(buffer)

    def test_sample_rate_mismatch(self):
        meter = LoudnessMeter(SR)
        buffer = AudioBuffer(data=sine(0.5, 1.0, sr=44100), sample_rate=44100)

        with pytest.raises(InvalidBufferError):
            meter.measure_integrated(buffer)


class TestShortTermMomentary:
    """Tests für Kurzzeit- und Momentan-Lautheit."""

    def test_trailing_window(self):
        """Kurzzeit und Momentan messen das Ende des Signals."""
        buffer = AudioBuffer(
            data=np.concatenate([sine(0.5, 5.0), sine(0.01, 5.0)]),
            sample_rate=SR,
        )
        meter = LoudnessMeter(SR)

        assert meter.measure_short_term(buffer) == pytest.approx(expected_lufs(0.01), abs=0.2)
        assert meter.measure_momentary(buffer) == pytest.approx(expected_lufs(0.01), abs=0.3)

    def test_short_buffer_uses_whole_signal(self):
        """Unter 3 s entspricht Kurzzeit der integrierten Lautheit."""
        buffer = AudioBuffer(data=sine(0.5, 2.0), sample_rate=SR)
        meter = LoudnessMeter(SR)

        assert meter.measure_short_term(buffer) == meter.measure_integrated(buffer)

    def test_momentary_shorter_than_block(self):
        buffer = AudioBuffer(data=sine(0.5, 0.2), sample_rate=SR)

        assert LoudnessMeter(SR).measure_momentary(buffer) == -np.inf


class TestPowerMean:
    """Tests für die Mittelung im Leistungsbereich."""

    def test_equal_values(self):
        assert power_mean_lufs(np.array([-20.0, -20.0])) == pytest.approx(-20.0)

    def test_power_domain(self):
        """Mittel von -10 und -20 liegt näher an -10."""
        expected = 10 * np.log10((0.1 + 0.01) / 2)
        assert power_mean_lufs(np.array([-10.0, -20.0])) == pytest.approx(expected)

    def test_empty(self):
        assert power_mean_lufs(np.array([])) == -np.inf
