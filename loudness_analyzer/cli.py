"""
Command line interface.

Usage:
    loudness-analyzer analyze recording.wav
    loudness-analyzer normalize in.wav out.wav --platform spotify
    loudness-analyzer normalize in.wav out.wav --type peak --target -1
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from .core import (
    LoudnessError,
    NormalizationAnalysis,
    NormalizationOptions,
    analyze,
    list_platforms,
    load_audio,
    normalize,
    normalize_to_r128,
    save_audio,
)
from .core.presets import DELIVERY_CEILING_DB, STREAMING_TARGETS, get_streaming_target
from .utils import (
    format_channels,
    format_db,
    format_duration,
    format_lufs,
    format_sample_rate,
)

logger = logging.getLogger(__name__)

# Used when --target is omitted
DEFAULT_TARGETS = {"peak": 0.0, "rms": -20.0, "lufs": -14.0}


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="loudness-analyzer",
        description="Measure and normalize audio loudness (peak, RMS, EBU R128).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_analyze = sub.add_parser("analyze", help="print levels and loudness")
    p_analyze.add_argument("input", help="WAV or MP3 file")

    p_norm = sub.add_parser("normalize", help="normalize and write a WAV file")
    p_norm.add_argument("input", help="WAV or MP3 file")
    p_norm.add_argument("output", help="target WAV file")
    p_norm.add_argument("--type", choices=["peak", "rms", "lufs"], default="lufs")
    p_norm.add_argument("--target", type=float, default=None,
                        help="target level in dB / LUFS")
    p_norm.add_argument("--ceiling", type=float, default=None,
                        help="maximum output peak in dBFS")
    preset = p_norm.add_mutually_exclusive_group()
    preset.add_argument("--platform", default=None,
                        help="delivery target ("
                        + ", ".join(sorted(set(list_platforms()) | set(STREAMING_TARGETS)))
                        + ")")
    preset.add_argument("--r128", action="store_true",
                        help="EBU R128: -23 LUFS, -1 dBTP")
    p_norm.add_argument("--subtype", default="PCM_24",
                        choices=["PCM_16", "PCM_24", "PCM_32", "FLOAT"])

    return parser


def options_from_args(args: argparse.Namespace) -> NormalizationOptions:
    """Map normalize arguments onto NormalizationOptions."""
    if args.platform:
        return NormalizationOptions(
            type="lufs",
            target_level=get_streaming_target(args.platform),
            ceiling=args.ceiling if args.ceiling is not None else DELIVERY_CEILING_DB,
        )

    target = args.target
    if target is None:
        target = DEFAULT_TARGETS[args.type]

    return NormalizationOptions(
        type=args.type,
        target_level=target,
        ceiling=args.ceiling,
    )


def print_analysis(analysis: NormalizationAnalysis) -> None:
    """Print an analysis as an aligned report."""
    print(f"  Peak:             {format_db(analysis.peak_level)}")
    print(f"  True peak:        {format_db(analysis.true_peak)}TP")
    print(f"  RMS:              {format_db(analysis.rms_level)}")
    print(f"  Integrated:       {format_lufs(analysis.lufs_integrated)}")
    print(f"  Short-term:       {format_lufs(analysis.lufs_short_term)}")
    print(f"  Momentary:        {format_lufs(analysis.lufs_momentary)}")
    print(f"  Loudness range:   {analysis.loudness_range:.1f} LU")
    print(f"  Dynamic range:    {analysis.dynamic_range:.1f} dB")
    print(f"  Clipped samples:  {analysis.clip_count}")


def _run_analyze(args: argparse.Namespace) -> int:
    buffer = load_audio(args.input)
    print(
        f"{args.input}: {format_channels(buffer.channels)}, "
        f"{format_sample_rate(buffer.sample_rate)}, "
        f"{format_duration(buffer.duration_seconds)}"
    )
    print_analysis(analyze(buffer))
    return 0


def _run_normalize(args: argparse.Namespace) -> int:
    buffer = load_audio(args.input)

    if args.r128:
        output, result = normalize_to_r128(buffer)
    else:
        output, result = normalize(buffer, options_from_args(args))

    save_audio(output, args.output, subtype=args.subtype)

    print(f"{args.input} -> {args.output}")
    print_analysis(result.analysis)
    print(f"  Gain:             {format_db(result.gain_db)}")
    if result.ceiling_limited:
        print("  Gain limited by ceiling")
    if result.clamped_samples:
        print(f"  Samples clamped:  {result.clamped_samples}")
    if result.clipped:
        print("  Warning: output would exceed 0 dBFS without ceiling")
    if result.degenerate:
        print("  Warning: input level undefined (silence?), gain limited")
    print(f"  Processing time:  {result.processing_time:.1f} ms")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "analyze":
            return _run_analyze(args)
        return _run_normalize(args)
    except (LoudnessError, OSError, ValueError, RuntimeError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
