"""
Loudness Normalization

Analyzes a buffer (levels + gated loudness), computes the gain to reach a
target and applies it into a new buffer.

Every call builds its own meter and filter state; the functions are safe
to call concurrently on independent buffers.

Technical assumptions:
- Gain is applied as a single scalar to all channels
- The ceiling is enforced twice: the gain is limited so the input peak
  lands on the ceiling, and output samples are hard-clamped to it
  (amplitude clamping, not a limiter)
- result.clipped reports a potential 0 dBFS overshoot
  (input peak + gain > 0 dB), independent of the ceiling
"""

import logging
import time
import numpy as np

from .audio_io import AudioBuffer
from .errors import InvalidBufferError
from .gain import calculate_gain, compute_gain_db
from .level_analyzer import analyze_levels, compute_loudness_range, db_to_linear
from .loudness_meter import LoudnessMeter
from .models import (
    NormalizationAnalysis,
    NormalizationOptions,
    NormalizationResult,
)
from .presets import (
    DELIVERY_CEILING_DB,
    R128_TARGET_LUFS,
    get_platform_target,
    get_streaming_target,
)

logger = logging.getLogger(__name__)

__all__ = [
    "analyze",
    "calculate_gain",
    "normalize",
    "normalize_to_r128",
    "normalize_for_streaming",
    "get_platform_target",
]


def analyze(buffer: AudioBuffer) -> NormalizationAnalysis:
    """
    Measure levels and gated loudness of a buffer.

    Args:
        buffer: Audio to analyze (not modified)

    Returns:
        NormalizationAnalysis
    """
    if not isinstance(buffer, AudioBuffer):
        raise InvalidBufferError(
            f"Expected AudioBuffer, got {type(buffer).__name__}"
        )

    levels = analyze_levels(buffer)

    meter = LoudnessMeter(buffer.sample_rate)
    integrated = meter.measure_integrated(buffer)
    short_term = meter.measure_short_term(buffer)
    momentary = meter.measure_momentary(buffer)

    return NormalizationAnalysis(
        peak_level=levels.peak_level,
        rms_level=levels.rms_level,
        lufs_integrated=integrated,
        lufs_short_term=short_term,
        lufs_momentary=momentary,
        true_peak=levels.true_peak,
        loudness_range=compute_loudness_range(momentary, integrated),
        dynamic_range=levels.dynamic_range,
        clip_count=levels.clip_count,
    )


def normalize(
    buffer: AudioBuffer,
    options: NormalizationOptions,
) -> tuple[AudioBuffer, NormalizationResult]:
    """
    Normalize a buffer to options.target_level.

    Args:
        buffer: Input audio (not modified)
        options: Normalization type, target and optional ceiling

    Returns:
        Tuple of (new buffer with gain applied, NormalizationResult)
    """
    start = time.perf_counter()

    analysis = analyze(buffer)
    decision = compute_gain_db(analysis, options)

    output = buffer.data * decision.gain

    clamped_samples = 0
    if options.ceiling is not None:
        limit = db_to_linear(options.ceiling)
        over = np.abs(output) > limit
        clamped_samples = int(np.count_nonzero(over))
        if clamped_samples:
            output = np.clip(output, -limit, limit)

    processing_time = (time.perf_counter() - start) * 1000

    result = NormalizationResult(
        gain=decision.gain,
        gain_db=decision.gain_db,
        analysis=analysis,
        clipped=bool(analysis.peak_level + decision.gain_db > 0.0),
        processing_time=processing_time,
        degenerate=decision.degenerate,
        ceiling_limited=decision.ceiling_limited,
        clamped_samples=clamped_samples,
    )

    logger.debug(
        "Normalized %d ch / %d samples (%s -> %.1f): gain %.2f dB in %.1f ms",
        buffer.channels, buffer.num_samples, options.type,
        options.target_level, decision.gain_db, processing_time,
    )
    if result.clipped:
        logger.warning(
            "Peak %.2f dBFS + gain %.2f dB exceeds 0 dBFS",
            analysis.peak_level, decision.gain_db,
        )

    return buffer.with_data(output), result


def normalize_to_r128(buffer: AudioBuffer) -> tuple[AudioBuffer, NormalizationResult]:
    """EBU R128 broadcast delivery: -23 LUFS, -1 dBTP ceiling."""
    options = NormalizationOptions(
        type="lufs",
        target_level=R128_TARGET_LUFS,
        ceiling=DELIVERY_CEILING_DB,
        true_peak=True,
    )
    return normalize(buffer, options)


def normalize_for_streaming(
    buffer: AudioBuffer,
    platform: str,
) -> tuple[AudioBuffer, NormalizationResult]:
    """
    Normalize for a streaming platform with a -1 dBFS ceiling.

    Args:
        buffer: Input audio
        platform: "spotify", "youtube", "apple", "tidal" or any name
            known to get_platform_target()
    """
    options = NormalizationOptions(
        type="lufs",
        target_level=get_streaming_target(platform),
        ceiling=DELIVERY_CEILING_DB,
    )
    return normalize(buffer, options)
