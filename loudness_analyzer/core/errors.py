"""
Error taxonomy for loudness analysis and normalization.

All hard errors derive from ValueError so callers that already guard
numeric input with ``except ValueError`` keep working.
"""


class LoudnessError(Exception):
    """Base class for all loudness analysis errors."""


class InvalidBufferError(LoudnessError, ValueError):
    """Audio buffer cannot be analyzed (empty, malformed, non-finite)."""


class ConfigurationError(LoudnessError, ValueError):
    """Normalization options are invalid (unknown type, bad target)."""


class DegenerateResultWarning(UserWarning):
    """
    A measurement produced no usable level (e.g. silent input).

    The computation continues with a bounded substitute value; the
    affected result carries ``degenerate=True``.
    """
