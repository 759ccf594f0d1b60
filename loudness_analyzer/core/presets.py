"""
Loudness targets of delivery platforms and standards.

Values in LUFS (integrated). The tables are read-only.
"""

from types import MappingProxyType


DEFAULT_PLATFORM_TARGET = -14.0

PLATFORM_TARGETS = MappingProxyType({
    # Streaming
    "spotify": -14.0,
    "youtube": -14.0,
    "apple-music": -16.0,
    "tidal": -14.0,
    "amazon": -14.0,
    "deezer": -15.0,
    "soundcloud": -14.0,
    # Standards
    "broadcast": -23.0,     # EBU R128
    "podcast": -16.0,
    "cinema": -24.0,
})

# Short names accepted by normalize_for_streaming()
STREAMING_TARGETS = MappingProxyType({
    "spotify": -14.0,
    "youtube": -14.0,
    "apple": -16.0,
    "tidal": -14.0,
})

R128_TARGET_LUFS = -23.0
DELIVERY_CEILING_DB = -1.0


def get_platform_target(name: str) -> float:
    """
    Target loudness of a platform or standard.

    Lookup is case-insensitive; unknown names return -14 LUFS.
    """
    return PLATFORM_TARGETS.get(name.strip().lower(), DEFAULT_PLATFORM_TARGET)


def get_streaming_target(platform: str) -> float:
    """Target for a streaming platform short name, falling back to the full table."""
    key = platform.strip().lower()
    if key in STREAMING_TARGETS:
        return STREAMING_TARGETS[key]
    return get_platform_target(key)


def list_platforms() -> list[str]:
    """Names known to get_platform_target()."""
    return sorted(PLATFORM_TARGETS)
