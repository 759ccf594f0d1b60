"""
Audio Buffer and I/O Module

Holds audio in memory for analysis and loads/saves audio files (WAV, MP3)
without implicit signal manipulation.

Technical assumptions:
- WAV files are loaded with soundfile (high precision, no conversion)
- MP3 files are decoded with pydub (requires ffmpeg)
- All audio data is held as float64 numpy arrays (nominal range -1.0 to 1.0)
- Channel order: (samples,) for mono, (samples, channels) otherwise
- Buffers are never modified in place; processing returns new buffers
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Literal, Optional, Sequence
import numpy as np
import soundfile as sf

from .errors import InvalidBufferError


@dataclass
class AudioBuffer:
    """
    Audio samples with sample rate and optional file metadata.

    The buffer is validated on construction. Analysis and normalization
    treat it as read-only input.

    Attributes:
        data: Audio data as numpy array, Shape: (samples,) or (samples, channels)
        sample_rate: Sample rate in Hz
        file_path: Path to source file (if loaded from disk)
        format_info: Format information (Subtype, Endianness)
        bit_depth: Bit depth of original (if known)
    """
    data: np.ndarray
    sample_rate: int
    file_path: Optional[Path] = None
    format_info: dict = field(default_factory=dict)
    bit_depth: Optional[int] = None

    def __post_init__(self):
        """Validate data integrity."""
        try:
            self.data = np.asarray(self.data, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidBufferError(f"Audio data is not numeric: {e}") from e

        if self.data.ndim not in (1, 2):
            raise InvalidBufferError("Audio array must be 1D or 2D")
        if self.data.shape[0] == 0:
            raise InvalidBufferError("Audio buffer has zero length")
        if self.data.ndim == 2 and self.data.shape[1] == 0:
            raise InvalidBufferError("Audio buffer has no channels")
        if not self.sample_rate or self.sample_rate <= 0:
            raise InvalidBufferError(f"Invalid sample rate: {self.sample_rate}")
        if not np.all(np.isfinite(self.data)):
            raise InvalidBufferError("Audio data contains NaN or infinite samples")

    @classmethod
    def from_channels(
        cls,
        channels: Sequence[Sequence[float]],
        sample_rate: int,
    ) -> "AudioBuffer":
        """
        Build a buffer from per-channel sample sequences.

        Raises:
            InvalidBufferError: No channels or channels of different length
        """
        if len(channels) == 0:
            raise InvalidBufferError("At least one channel is required")

        arrays = [np.asarray(ch, dtype=np.float64) for ch in channels]
        lengths = {len(a) for a in arrays}
        if len(lengths) != 1:
            raise InvalidBufferError(
                f"Channel length mismatch: {sorted(lengths)}"
            )

        if len(arrays) == 1:
            return cls(data=arrays[0], sample_rate=sample_rate)
        return cls(data=np.column_stack(arrays), sample_rate=sample_rate)

    @property
    def channels(self) -> int:
        """Number of channels (1=Mono, 2=Stereo)."""
        return 1 if self.data.ndim == 1 else self.data.shape[1]

    @property
    def num_samples(self) -> int:
        """Number of samples per channel."""
        return self.data.shape[0]

    @property
    def duration_seconds(self) -> float:
        """Duration in seconds."""
        return self.num_samples / self.sample_rate

    def get_channel(self, channel: int) -> np.ndarray:
        """
        Extract a single channel.

        Args:
            channel: Channel index, 0 for left/Mono

        Returns:
            1D numpy array with the channel samples (a view, do not modify)
        """
        if not 0 <= channel < self.channels:
            raise IndexError(
                f"Channel {channel} out of range for {self.channels} channel(s)"
            )
        if self.data.ndim == 1:
            return self.data
        return self.data[:, channel]

    def get_time_range(self, start_sample: int, end_sample: int) -> "AudioBuffer":
        """
        Extract a sample range (non-destructive).

        Returns:
            New buffer with a copy of the audio data in the range
        """
        start = max(0, start_sample)
        end = min(end_sample, self.num_samples)
        return self.with_data(self.data[start:end].copy())

    def tail(self, num_samples: int) -> "AudioBuffer":
        """Last ``num_samples`` samples (the whole buffer if it is shorter)."""
        num_samples = min(max(1, num_samples), self.num_samples)
        return self.get_time_range(self.num_samples - num_samples, self.num_samples)

    def with_data(self, data: np.ndarray) -> "AudioBuffer":
        """New buffer with the same sample rate and metadata but other samples."""
        return replace(self, data=data, format_info=dict(self.format_info))


def load_audio(file_path: str | Path) -> AudioBuffer:
    """
    Load an audio file without implicit conversion.

    Supported formats:
    - WAV (all common subtypes: PCM_16, PCM_24, PCM_32, FLOAT)
    - MP3 (via pydub/ffmpeg)

    Audio data is returned as float64 in range [-1.0, 1.0].
    NO automatic conversion of sample rate or channel count.

    Args:
        file_path: Path to audio file

    Returns:
        AudioBuffer with file metadata

    Raises:
        FileNotFoundError: File does not exist
        ValueError: Unsupported format
    """
    path = Path(file_path)

    if not path.exists():
        raise FileNotFoundError(f"Audio file not found: {path}")

    suffix = path.suffix.lower()

    if suffix == ".wav":
        return _load_wav(path)
    elif suffix == ".mp3":
        return _load_mp3(path)
    else:
        raise ValueError(f"Nicht unterstütztes Format: {suffix}")


def _load_wav(path: Path) -> AudioBuffer:
    """Load WAV file with soundfile."""
    data, sample_rate = sf.read(path, dtype='float64', always_2d=False)
    info = sf.info(path)

    format_info = {
        "format": info.format,
        "subtype": info.subtype,
        "endian": info.endian,
        "sections": info.sections,
    }

    return AudioBuffer(
        data=data,
        sample_rate=sample_rate,
        file_path=path,
        format_info=format_info,
        bit_depth=_extract_bit_depth(info.subtype),
    )


def _load_mp3(path: Path) -> AudioBuffer:
    """
    Load MP3 file with pydub.

    Requires ffmpeg in system PATH for decoding.
    """
    try:
        from pydub import AudioSegment
    except ImportError:
        raise ImportError("pydub is not installed. Please install with 'pip install pydub'.")

    try:
        audio = AudioSegment.from_mp3(path)
    except Exception as e:
        raise RuntimeError(
            f"MP3 could not be loaded: {e}\n"
            "Please ensure ffmpeg is installed."
        ) from e

    samples = np.array(audio.get_array_of_samples())

    # pydub returns signed integers of sample_width bytes
    if audio.sample_width == 1:
        samples = samples.astype(np.float64) / 128.0
    else:
        samples = samples.astype(np.float64) / float(2 ** (8 * audio.sample_width - 1))

    if audio.channels > 1:
        samples = samples.reshape(-1, audio.channels)

    return AudioBuffer(
        data=samples,
        sample_rate=audio.frame_rate,
        file_path=path,
        format_info={
            "format": "MP3",
            "subtype": "MPEG Layer 3",
            "note": "MP3 is lossy, original data cannot be reconstructed",
        },
        bit_depth=None,
    )


def save_audio(
    buffer: AudioBuffer,
    file_path: str | Path,
    subtype: Literal["PCM_16", "PCM_24", "PCM_32", "FLOAT"] = "PCM_24",
) -> None:
    """
    Save an audio buffer as WAV file.

    Args:
        buffer: Audio to write
        file_path: Target path
        subtype: WAV subtype for quantization
    """
    path = Path(file_path)
    data = buffer.data

    # Clipping warning
    if np.any(np.abs(data) > 1.0):
        import warnings
        warnings.warn(
            "Audio data exceeds [-1.0, 1.0]. Clipping will be applied.",
            UserWarning
        )
        data = np.clip(data, -1.0, 1.0)

    sf.write(path, data, buffer.sample_rate, subtype=subtype)


def _extract_bit_depth(subtype: str) -> Optional[int]:
    """Extract bit depth from soundfile subtype string."""
    bit_depth_map = {
        "PCM_16": 16,
        "PCM_24": 24,
        "PCM_32": 32,
        "FLOAT": 32,
        "DOUBLE": 64,
        "PCM_S8": 8,
        "PCM_U8": 8,
    }
    return bit_depth_map.get(subtype)
