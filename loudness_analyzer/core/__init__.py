"""
Core DSP module - fully testable without any UI.

This module contains all measurement and normalization logic:
- Audio buffers and I/O (WAV, MP3)
- ITU-R BS.1770 K-weighting filter
- EBU R128 gated loudness meter
- Peak/RMS level analysis
- Gain calculation and normalization presets
"""

from .audio_io import AudioBuffer, load_audio, save_audio
from .errors import (
    LoudnessError,
    InvalidBufferError,
    ConfigurationError,
    DegenerateResultWarning,
)
from .k_weighting import KWeightingFilter
from .loudness_meter import LoudnessMeter
from .level_analyzer import (
    LevelAnalysis,
    analyze_levels,
    compute_rms,
    compute_peak,
    count_clips,
)
from .models import (
    NormalizationOptions,
    NormalizationAnalysis,
    NormalizationResult,
    GainDecision,
)
from .gain import compute_gain_db
from .normalization import (
    analyze,
    calculate_gain,
    normalize,
    normalize_to_r128,
    normalize_for_streaming,
)
from .presets import PLATFORM_TARGETS, get_platform_target, list_platforms

__all__ = [
    "AudioBuffer",
    "load_audio",
    "save_audio",
    "LoudnessError",
    "InvalidBufferError",
    "ConfigurationError",
    "DegenerateResultWarning",
    "KWeightingFilter",
    "LoudnessMeter",
    "LevelAnalysis",
    "analyze_levels",
    "compute_rms",
    "compute_peak",
    "count_clips",
    "NormalizationOptions",
    "NormalizationAnalysis",
    "NormalizationResult",
    "GainDecision",
    "compute_gain_db",
    "analyze",
    "calculate_gain",
    "normalize",
    "normalize_to_r128",
    "normalize_for_streaming",
    "PLATFORM_TARGETS",
    "get_platform_target",
    "list_platforms",
]
