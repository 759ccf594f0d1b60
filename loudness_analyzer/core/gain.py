"""
Gain Calculation

Maps an analysis and normalization options to a gain.

Undefined input levels (silence measures -inf) would request an infinite
gain. Instead the gain is bounded by options.max_gain_db and the decision
is flagged as degenerate, so no Infinity or NaN reaches the audio.
"""

import logging
import warnings
import numpy as np

from .errors import DegenerateResultWarning
from .level_analyzer import db_to_linear
from .models import GainDecision, NormalizationAnalysis, NormalizationOptions

logger = logging.getLogger(__name__)


def compute_gain_db(
    analysis: NormalizationAnalysis,
    options: NormalizationOptions,
) -> GainDecision:
    """
    Compute the gain reaching options.target_level.

    Args:
        analysis: Measurements of the input buffer
        options: Normalization type, target and optional ceiling

    Returns:
        GainDecision with finite gain_db
    """
    current_level = analysis.level_for(options.type)
    degenerate = False

    if np.isnan(current_level):
        warnings.warn(
            f"{options.type} level is undefined, applying unity gain",
            DegenerateResultWarning,
            stacklevel=2,
        )
        gain_db = 0.0
        degenerate = True
    elif current_level == -np.inf:
        warnings.warn(
            f"{options.type} level is -inf (silent input), "
            f"gain limited to {options.max_gain_db:+.1f} dB",
            DegenerateResultWarning,
            stacklevel=2,
        )
        gain_db = options.max_gain_db
        degenerate = True
    else:
        gain_db = options.target_level - current_level

    ceiling_limited = False
    if options.ceiling is not None:
        reference_peak = analysis.true_peak if options.true_peak else analysis.peak_level
        max_gain_db = options.ceiling - reference_peak
        if max_gain_db < gain_db:
            logger.info(
                "Gain limited by ceiling %.1f dB: %.2f dB -> %.2f dB",
                options.ceiling, gain_db, max_gain_db,
            )
            gain_db = max_gain_db
            ceiling_limited = True

    gain = db_to_linear(gain_db)
    if not np.isfinite(gain):
        # Finite but vanishingly small level (e.g. denormal samples)
        warnings.warn(
            f"{options.type} level {current_level:.1f} requires {gain_db:+.1f} dB, "
            f"gain limited to {options.max_gain_db:+.1f} dB",
            DegenerateResultWarning,
            stacklevel=2,
        )
        gain_db = options.max_gain_db
        gain = db_to_linear(gain_db)
        ceiling_limited = False
        degenerate = True

    logger.debug(
        "Gain for %s %.2f -> %.2f: %.2f dB",
        options.type, current_level, options.target_level, gain_db,
    )

    return GainDecision(
        gain_db=float(gain_db),
        gain=gain,
        ceiling_limited=ceiling_limited,
        degenerate=degenerate,
    )


def calculate_gain(
    analysis: NormalizationAnalysis,
    options: NormalizationOptions,
) -> float:
    """Linear gain reaching options.target_level (see compute_gain_db)."""
    return compute_gain_db(analysis, options).gain
