"""
Normalization data model.

Options are explicit: there are no hidden defaults for the target level.
Analysis and gain decisions are immutable snapshots of one call.
"""

from dataclasses import dataclass
from typing import Literal, Optional
import numpy as np

from .errors import ConfigurationError


NormalizationType = Literal["peak", "rms", "lufs"]
NORMALIZATION_TYPES = ("peak", "rms", "lufs")

DEFAULT_MAX_GAIN_DB = 24.0


@dataclass
class NormalizationOptions:
    """
    Configuration of a normalization run.

    Attributes:
        type: Reference measurement ("peak", "rms" or "lufs")
        target_level: Target in dBFS (peak, rms) or LUFS (lufs)
        ceiling: Optional maximum output peak in dBFS
        true_peak: Use the true peak for the ceiling (currently the sample peak)
        window_size: Reserved analysis window in seconds, not used by gating
        max_gain_db: Gain applied when the input level is undefined (silence)
    """
    type: NormalizationType
    target_level: float
    ceiling: Optional[float] = None
    true_peak: bool = False
    window_size: Optional[float] = None
    max_gain_db: float = DEFAULT_MAX_GAIN_DB

    def __post_init__(self):
        """Validate and normalize option values."""
        if not isinstance(self.type, str) or self.type.lower() not in NORMALIZATION_TYPES:
            raise ConfigurationError(
                f"Unknown normalization type: {self.type!r} "
                f"(expected one of {', '.join(NORMALIZATION_TYPES)})"
            )
        self.type = self.type.lower()

        if not np.isfinite(self.target_level):
            raise ConfigurationError(f"Target level must be finite: {self.target_level}")
        if self.ceiling is not None and not np.isfinite(self.ceiling):
            raise ConfigurationError(f"Ceiling must be finite: {self.ceiling}")
        if not np.isfinite(self.max_gain_db) or self.max_gain_db <= 0:
            raise ConfigurationError(f"max_gain_db must be positive: {self.max_gain_db}")


@dataclass(frozen=True)
class NormalizationAnalysis:
    """
    Loudness and level measurements of one buffer.

    Attributes:
        peak_level: Sample peak in dBFS
        rms_level: RMS in dBFS
        lufs_integrated: Gated integrated loudness in LUFS
        lufs_short_term: Loudness of the trailing 3 s in LUFS
        lufs_momentary: Loudness of the trailing 400 ms in LUFS
        true_peak: Approximate true peak in dBTP
        loudness_range: |momentary - integrated| in LU
        dynamic_range: Peak minus RMS in dB
        clip_count: Samples with |x| > 1.0
    """
    peak_level: float
    rms_level: float
    lufs_integrated: float
    lufs_short_term: float
    lufs_momentary: float
    true_peak: float
    loudness_range: float
    dynamic_range: float
    clip_count: int

    def level_for(self, normalization_type: NormalizationType) -> float:
        """Current level used as reference for a normalization type."""
        if normalization_type == "peak":
            return self.peak_level
        if normalization_type == "rms":
            return self.rms_level
        if normalization_type == "lufs":
            return self.lufs_integrated
        raise ConfigurationError(f"Unknown normalization type: {normalization_type!r}")


@dataclass(frozen=True)
class GainDecision:
    """
    Outcome of the gain calculation.

    Attributes:
        gain_db: Gain in dB, always finite
        gain: Linear gain factor (>= 0)
        ceiling_limited: The ceiling reduced the requested gain
        degenerate: The input level was undefined, gain_db is a substitute
    """
    gain_db: float
    gain: float
    ceiling_limited: bool = False
    degenerate: bool = False


@dataclass
class NormalizationResult:
    """
    Result of a normalize() call.

    Attributes:
        gain: Applied linear gain
        gain_db: Applied gain in dB
        analysis: Analysis of the input buffer
        clipped: Input peak plus gain exceeds 0 dBFS
        processing_time: Wall time of the call in milliseconds
        degenerate: Gain is a substitute for an undefined input level
        ceiling_limited: The ceiling reduced the requested gain
        clamped_samples: Output samples hard-clamped to the ceiling
    """
    gain: float
    gain_db: float
    analysis: NormalizationAnalysis
    clipped: bool
    processing_time: float
    degenerate: bool = False
    ceiling_limited: bool = False
    clamped_samples: int = 0
