"""
EBU R128 / ITU-R BS.1770 Loudness Meter

Block-based gated loudness integration on top of the K-weighting filter.

Technical specification:
- Blocks of 400 ms with 75 % overlap (hop = block / 4)
- Block loudness: -0.691 + 10 * log10(mean square), mean over all
  channels and samples of the block
- Absolute gate at -70 LUFS, relative gate at -10 LU below the
  ungated power mean
- Averaging is done in the power domain, never on LUFS values

Documented limitations:
- At most two channels are gated (further channels are ignored)
- Channels are averaged, not summed: identical L/R measures the same
  as the mono signal
- Short-term and momentary loudness are single values over the trailing
  3 s / 400 ms window, not time series
- Offline, whole-buffer analysis only
"""

import logging
import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from .audio_io import AudioBuffer
from .errors import InvalidBufferError
from .k_weighting import KWeightingFilter

logger = logging.getLogger(__name__)


LOUDNESS_OFFSET = -0.691           # dB, K-weighting gain at 1 kHz
ABSOLUTE_GATE_LUFS = -70.0
RELATIVE_GATE_LU = -10.0
BLOCK_DURATION = 0.4               # seconds
BLOCK_OVERLAP = 0.75
SHORT_TERM_DURATION = 3.0          # seconds
MOMENTARY_DURATION = 0.4           # seconds
MAX_GATED_CHANNELS = 2


def power_mean_lufs(block_loudness: np.ndarray) -> float:
    """Average block loudness values in the power domain."""
    if len(block_loudness) == 0:
        return -np.inf
    return float(10 * np.log10(np.mean(10 ** (block_loudness / 10))))


class LoudnessMeter:
    """
    Gated LUFS loudness at three time scales.

    Usage:
        meter = LoudnessMeter(sample_rate=48000)
        integrated = meter.measure_integrated(buffer)

    A meter owns one K-weighting filter whose state is reset at the start
    of every measurement. Do not share an instance between threads.
    """

    def __init__(
        self,
        sample_rate: int,
        block_duration: float = BLOCK_DURATION,
        overlap: float = BLOCK_OVERLAP,
        absolute_gate: float = ABSOLUTE_GATE_LUFS,
        relative_gate: float = RELATIVE_GATE_LU,
    ):
        """
        Initialize meter.

        Args:
            sample_rate: Sample rate in Hz
            block_duration: Gating block length in seconds
            overlap: Block overlap as fraction (0.75 = 75 %)
            absolute_gate: Absolute gate threshold in LUFS
            relative_gate: Relative gate offset in LU (negative)
        """
        if not 0.0 <= overlap < 1.0:
            raise ValueError(f"Overlap must be in [0, 1): {overlap}")

        self.sample_rate = sample_rate
        self.absolute_gate = absolute_gate
        self.relative_gate = relative_gate
        self.block_size = max(1, int(round(block_duration * sample_rate)))
        self.hop_size = max(1, int(self.block_size * (1 - overlap)))
        self.filter = KWeightingFilter(sample_rate, num_channels=MAX_GATED_CHANNELS)

    def measure_integrated(self, buffer: AudioBuffer) -> float:
        """
        Integrated (gated) loudness over the whole buffer.

        Returns:
            Loudness in LUFS, -inf if no block passes the absolute gate
        """
        blocks = self.block_loudness(buffer)
        return self._gate(blocks)

    def measure_short_term(self, buffer: AudioBuffer) -> float:
        """Gated loudness of the trailing 3 s (or the whole buffer if shorter)."""
        window = int(round(SHORT_TERM_DURATION * self.sample_rate))
        return self.measure_integrated(buffer.tail(window))

    def measure_momentary(self, buffer: AudioBuffer) -> float:
        """Gated loudness of the trailing 400 ms (or the whole buffer if shorter)."""
        window = int(round(MOMENTARY_DURATION * self.sample_rate))
        return self.measure_integrated(buffer.tail(window))

    def block_loudness(self, buffer: AudioBuffer) -> np.ndarray:
        """
        Loudness of every full gating block.

        Args:
            buffer: Audio to measure (only the first two channels are used)

        Returns:
            Block loudness in LUFS, Shape: (num_blocks,). Zero-energy
            blocks are -inf. Empty if the buffer is shorter than a block.
        """
        if buffer.sample_rate != self.sample_rate:
            raise InvalidBufferError(
                f"Sample rate mismatch: buffer {buffer.sample_rate} Hz, "
                f"meter {self.sample_rate} Hz"
            )

        if buffer.num_samples < self.block_size:
            return np.empty(0)

        num_channels = min(buffer.channels, MAX_GATED_CHANNELS)
        self.filter.reset()

        energy = np.zeros(buffer.num_samples)
        for ch in range(num_channels):
            weighted = self.filter.process_block(buffer.get_channel(ch), ch)
            energy += weighted ** 2

        windows = sliding_window_view(energy, self.block_size)[::self.hop_size]
        mean_square = windows.sum(axis=1) / (self.block_size * num_channels)

        with np.errstate(divide='ignore'):
            return LOUDNESS_OFFSET + 10 * np.log10(mean_square)

    def _gate(self, blocks: np.ndarray) -> float:
        """Two-pass absolute + relative gating."""
        above_absolute = blocks[blocks > self.absolute_gate]
        if len(above_absolute) == 0:
            logger.debug("No block above absolute gate (%d blocks)", len(blocks))
            return -np.inf

        ungated = power_mean_lufs(above_absolute)
        threshold = ungated + self.relative_gate

        gated = above_absolute[above_absolute > threshold]
        if len(gated) == 0:
            return ungated

        return power_mean_lufs(gated)
