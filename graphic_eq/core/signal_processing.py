"""
General Signal Processing

Rate conversion and level measurement on AudioBuffers.

Technical assumptions:
- Resampling is plain linear interpolation between neighbouring source
  samples; there is no anti-aliasing filter
- Output length is ceil(n * target_rate / source_rate)
- All operations return new buffers, the input remains unchanged
"""

import logging
import math
import numpy as np

from .audio_buffer import AudioBuffer
from .equalizer import SAMPLE_RATE

logger = logging.getLogger(__name__)


def resample(
    src: AudioBuffer,
    src_rate: int,
    target_rate: int = SAMPLE_RATE,
) -> AudioBuffer:
    """
    Convert a buffer from src_rate to target_rate.

    Output sample i is read at source position i * src_rate / target_rate,
    clamped to the last source sample, and linearly interpolated between
    floor(pos) and ceil(pos).

    Args:
        src: Input buffer (not modified)
        src_rate: Sample rate of the input data
        target_rate: Desired sample rate (default: canonical rate)

    Returns:
        New buffer at target_rate
    """
    if src_rate <= 0 or target_rate <= 0:
        raise ValueError(f"Sample rates must be positive: {src_rate}, {target_rate}")

    if src_rate == target_rate:
        dst = src.copy()
        dst.sample_rate = target_rate
        return dst

    num_out = math.ceil(src.sample_count * target_rate / src_rate)
    logger.debug("Resampling %d samples %d Hz -> %d Hz (%d samples)",
                 src.sample_count, src_rate, target_rate, num_out)

    dst = AudioBuffer(target_rate)
    dst.allocate_silence(num_out)
    if num_out == 0:
        return dst

    positions = np.arange(num_out, dtype=np.float64) * src_rate / target_rate
    positions = np.clip(positions, 0, src.sample_count - 1)
    # np.interp on integer grid == floor/ceil weighting with fractional part
    dst.samples[:] = np.interp(positions, np.arange(src.sample_count), src.samples)
    return dst


def compute_rms(data: np.ndarray, as_db: bool = False) -> float:
    """
    Compute RMS (Root Mean Square) of the signal.

    Args:
        data: Samples
        as_db: If True, return in dB (reference: 1.0)

    Returns:
        RMS value (linear or dB); 0.0 / -inf for an empty signal
    """
    if len(data) == 0:
        return -np.inf if as_db else 0.0

    rms = float(np.sqrt(np.mean(data ** 2)))

    if as_db:
        if rms == 0:
            return -np.inf
        return 20 * np.log10(rms)

    return rms


def compute_peak(data: np.ndarray, as_db: bool = False) -> float:
    """
    Compute peak value (absolute maximum) of the signal.

    Args:
        data: Samples
        as_db: If True, return in dB (reference: 1.0)

    Returns:
        Peak value (linear or dB); 0.0 / -inf for an empty signal
    """
    peak = float(np.max(np.abs(data))) if len(data) else 0.0

    if as_db:
        if peak == 0:
            return -np.inf
        return 20 * np.log10(peak)

    return peak
