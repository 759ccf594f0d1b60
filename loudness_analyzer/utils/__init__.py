"""
Utility module for Loudness Analyzer.

Contains display helpers used by the CLI and reports.
"""

from .formatting import (
    format_lufs,
    format_db,
    format_duration,
    format_sample_rate,
    format_channels,
)

__all__ = [
    "format_lufs",
    "format_db",
    "format_duration",
    "format_sample_rate",
    "format_channels",
]
