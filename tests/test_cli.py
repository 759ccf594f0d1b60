"""
Tests für die Kommandozeile.
"""

import pytest
import numpy as np
import soundfile as sf

from loudness_analyzer.cli import build_parser, main, options_from_args
from loudness_analyzer.core import analyze, load_audio


SR = 48000


@pytest.fixture
def sine_wav(tmp_path):
    """3 s Sinus, 1 kHz, -20 dBFS Stereo."""
    t = np.arange(3 * SR) / SR
    x = 0.1 * np.sin(2 * np.pi * 1000 * t)
    path = tmp_path / "sine.wav"
    sf.write(path, np.column_stack([x, x]), SR, subtype="FLOAT")
    return path


class TestAnalyzeCommand:
    """Tests für 'analyze'."""

    def test_prints_analysis(self, sine_wav, capsys):
        assert main(["analyze", str(sine_wav)]) == 0

        out = capsys.readouterr().out
        assert "Stereo" in out
        assert "48 kHz" in out
        assert "Integrated:" in out
        assert "LUFS" in out

    def test_missing_file(self, tmp_path, capsys):
        assert main(["analyze", str(tmp_path / "missing.wav")]) == 1

        assert "Error" in capsys.readouterr().err


class TestNormalizeCommand:
    """Tests für 'normalize'."""

    def test_r128(self, sine_wav, tmp_path):
        out_path = tmp_path / "r128.wav"

        assert main(["normalize", str(sine_wav), str(out_path), "--r128"]) == 0

        assert analyze(load_audio(out_path)).lufs_integrated == pytest.approx(-23.0, abs=0.05)

    def test_platform(self, sine_wav, tmp_path, capsys):
        out_path = tmp_path / "podcast.wav"

        assert main(["normalize", str(sine_wav), str(out_path), "--platform", "Podcast"]) == 0

        assert analyze(load_audio(out_path)).lufs_integrated == pytest.approx(-16.0, abs=0.05)
        assert "Gain:" in capsys.readouterr().out

    def test_streaming_short_name(self, sine_wav, tmp_path):
        """Kurzname 'apple' wählt -16 LUFS."""
        out_path = tmp_path / "apple.wav"

        assert main(["normalize", str(sine_wav), str(out_path), "--platform", "apple"]) == 0

        assert analyze(load_audio(out_path)).lufs_integrated == pytest.approx(-16.0, abs=0.05)

    def test_streaming_options(self):
        args = build_parser().parse_args(["normalize", "a.wav", "b.wav", "--platform", "apple"])

        options = options_from_args(args)

        assert options.target_level == -16.0
        assert options.ceiling == -1.0

    def test_peak_with_target(self, sine_wav, tmp_path):
        out_path = tmp_path / "peak.wav"

        assert main([
            "normalize", str(sine_wav), str(out_path),
            "--type", "peak", "--target", "-3", "--subtype", "FLOAT",
        ]) == 0

        assert analyze(load_audio(out_path)).peak_level == pytest.approx(-3.0, abs=0.01)

    def test_invalid_type_is_usage_error(self, sine_wav, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["normalize", str(sine_wav), str(tmp_path / "x.wav"), "--type", "loud"])

        assert exc.value.code == 2

    def test_platform_and_r128_exclusive(self, sine_wav, tmp_path):
        with pytest.raises(SystemExit):
            main([
                "normalize", str(sine_wav), str(tmp_path / "x.wav"),
                "--platform", "spotify", "--r128",
            ])
