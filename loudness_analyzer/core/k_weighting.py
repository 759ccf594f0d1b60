"""
ITU-R BS.1770 K-Weighting Filter

Two cascaded biquads approximating the perceived loudness of a signal:

1. High shelf, +4 dB above ~1.7 kHz (head acoustics)
2. High pass, ~38 Hz (RLB weighting)

Technical specification:
- Coefficients derived via bilinear transform for any sample rate,
  numerically identical to the BS.1770 table at 48 kHz
- Transposed Direct Form II, two state registers per stage and channel
- Double precision throughout

Documented limitations:
- State is per instance; call reset() before filtering a fresh buffer
- Stage 2 numerator is the unnormalized [1, -2, 1] of the standard,
  the -0.691 dB loudness offset is calibrated against it
"""

from typing import Optional
import numpy as np
from scipy import signal


# Stage 1: high shelf
SHELF_FREQUENCY = 1681.974450955533      # Hz
SHELF_GAIN_DB = 3.999843853973347        # dB
SHELF_Q = 0.7071752369554196
SHELF_VB_EXPONENT = 0.4996667741545416

# Stage 2: high pass
HIGHPASS_FREQUENCY = 38.13547087602444   # Hz
HIGHPASS_Q = 0.5003270373238773


def _shelf_coefficients(sample_rate: float) -> tuple[np.ndarray, np.ndarray]:
    """High-shelf biquad (stage 1) via bilinear transform."""
    k = np.tan(np.pi * SHELF_FREQUENCY / sample_rate)
    vh = 10 ** (SHELF_GAIN_DB / 20)
    vb = vh ** SHELF_VB_EXPONENT
    a0 = 1 + k / SHELF_Q + k * k

    b = np.array([
        (vh + vb * k / SHELF_Q + k * k) / a0,
        2 * (k * k - vh) / a0,
        (vh - vb * k / SHELF_Q + k * k) / a0,
    ])
    a = np.array([
        1.0,
        2 * (k * k - 1) / a0,
        (1 - k / SHELF_Q + k * k) / a0,
    ])
    return b, a


def _highpass_coefficients(sample_rate: float) -> tuple[np.ndarray, np.ndarray]:
    """High-pass biquad (stage 2) via bilinear transform."""
    k = np.tan(np.pi * HIGHPASS_FREQUENCY / sample_rate)
    a0 = 1 + k / HIGHPASS_Q + k * k

    b = np.array([1.0, -2.0, 1.0])
    a = np.array([
        1.0,
        2 * (k * k - 1) / a0,
        (1 - k / HIGHPASS_Q + k * k) / a0,
    ])
    return b, a


class KWeightingFilter:
    """
    Per-channel K-weighting filter.

    Usage:
        kw = KWeightingFilter(sample_rate=48000)
        kw.reset()
        weighted = kw.process_block(samples, channel=0)

    process() and process_block() share the same state registers, so a
    signal can be fed sample by sample or in blocks with identical output.
    """

    def __init__(self, sample_rate: float, num_channels: int = 2):
        """
        Initialize filter coefficients and zeroed state.

        Args:
            sample_rate: Sample rate in Hz
            num_channels: Number of independent channel states
        """
        if sample_rate <= 2 * SHELF_FREQUENCY:
            raise ValueError(
                f"Sample rate {sample_rate} Hz too low for K-weighting"
            )
        if num_channels < 1:
            raise ValueError("At least one channel is required")

        self.sample_rate = sample_rate
        self.num_channels = num_channels
        self._stages = (
            _shelf_coefficients(sample_rate),
            _highpass_coefficients(sample_rate),
        )
        # Shape: (channels, stages, registers)
        self._state = np.zeros((num_channels, len(self._stages), 2))

    @property
    def coefficients(self) -> tuple[tuple[np.ndarray, np.ndarray], ...]:
        """(b, a) pairs per stage, a[0] == 1."""
        return tuple((b.copy(), a.copy()) for b, a in self._stages)

    def reset(self) -> None:
        """Zero all per-channel state."""
        self._state.fill(0.0)

    def process(self, sample: float, channel: int) -> float:
        """
        Filter a single sample of one channel.

        Args:
            sample: Input sample
            channel: Channel index

        Returns:
            K-weighted sample
        """
        state = self._channel_state(channel)
        x = float(sample)

        for stage, (b, a) in enumerate(self._stages):
            z = state[stage]
            y = b[0] * x + z[0]
            z[0] = b[1] * x - a[1] * y + z[1]
            z[1] = b[2] * x - a[2] * y
            x = y

        return x

    def process_block(self, samples: np.ndarray, channel: int) -> np.ndarray:
        """
        Filter a block of samples of one channel.

        Continues from (and updates) the channel's state.

        Returns:
            K-weighted samples (new array)
        """
        state = self._channel_state(channel)
        y = np.asarray(samples, dtype=np.float64)

        for stage, (b, a) in enumerate(self._stages):
            y, state[stage] = signal.lfilter(b, a, y, zi=state[stage])

        return y

    def frequency_response(
        self,
        num_points: int = 1000,
        frequencies: Optional[np.ndarray] = None,
    ) -> tuple[np.ndarray, np.ndarray]:
        """
        Magnitude response of the cascaded filter.

        Args:
            num_points: Number of linearly spaced points up to Nyquist
            frequencies: Explicit frequencies in Hz (overrides num_points)

        Returns:
            Tuple of (frequencies in Hz, magnitude in dB)
        """
        worN = num_points if frequencies is None else np.asarray(frequencies, dtype=np.float64)
        h_total = None
        for b, a in self._stages:
            w, h = signal.freqz(b, a, worN=worN, fs=self.sample_rate)
            h_total = h if h_total is None else h_total * h

        return w, 20 * np.log10(np.abs(h_total) + 1e-12)

    def _channel_state(self, channel: int) -> np.ndarray:
        if not 0 <= channel < self.num_channels:
            raise IndexError(
                f"Channel {channel} out of range for {self.num_channels} channel(s)"
            )
        return self._state[channel]
