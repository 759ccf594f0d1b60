"""
Loudness Analyzer - peak, RMS and EBU R128 loudness measurement and normalization.
"""

__version__ = "1.0.0"
