"""
Formatierungsfunktionen für Anzeige.

Konvertiert Pegel und Metadaten in lesbare Strings.
"""

import math


def format_lufs(lufs: float, precision: int = 1) -> str:
    """
    Formatiere Lautheit.

    Args:
        lufs: Lautheit in LUFS
        precision: Nachkommastellen

    Returns:
        Formatierter String (z.B. "-23.0 LUFS" oder "-∞ LUFS")
    """
    if lufs == float('-inf') or math.isnan(lufs):
        return "-∞ LUFS"
    return f"{lufs:.{precision}f} LUFS"


def format_db(db: float, precision: int = 1) -> str:
    """
    Formatiere dB-Wert mit Vorzeichen.

    Args:
        db: Pegel oder Verstärkung in dB
        precision: Nachkommastellen

    Returns:
        Formatierter String (z.B. "-12.3 dB", "+6.0 dB" oder "-∞ dB")
    """
    if db == float('-inf') or math.isnan(db):
        return "-∞ dB"
    return f"{db:+.{precision}f} dB"


def format_sample_rate(sr: int) -> str:
    """
    Formatiere Samplerate.

    Returns:
        Formatierter String (z.B. "44.1 kHz" oder "48 kHz")
    """
    if sr % 1000 == 0:
        return f"{sr // 1000} kHz"
    else:
        return f"{sr / 1000:.1f} kHz"


def format_duration(seconds: float) -> str:
    """
    Formatiere Dauer für Anzeige.

    Returns:
        Formatierter String (z.B. "3:45.20" oder "0:01.50")
    """
    minutes = int(seconds // 60)
    secs = seconds % 60
    return f"{minutes}:{secs:05.2f}"


def format_channels(num_channels: int) -> str:
    """
    Formatiere Kanalanzahl.

    Returns:
        "Mono" oder "Stereo" oder "X Kanäle"
    """
    if num_channels == 1:
        return "Mono"
    elif num_channels == 2:
        return "Stereo"
    else:
        return f"{num_channels} Kanäle"
