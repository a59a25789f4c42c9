"""
Peaking-EQ Filter Design

Biquad coefficients for one equalizer band according to the
Audio-EQ-Cookbook (R. Bristow-Johnson):

    w0    = 2*pi*f0 / fs
    alpha = sin(w0) / (2*Q)
    A     = 10^(gain_db / 40)

    b0 = 1 + alpha*A    b1 = -2*cos(w0)    b2 = 1 - alpha*A
    a0 = 1 + alpha/A    a1 = -2*cos(w0)    a2 = 1 - alpha/A

Coefficients are NOT normalized to a0 = 1.

design_band() takes cos(w0) and alpha from the equalizer's FilterCache,
peaking_eq() computes them directly for arbitrary parameters.
"""

from dataclasses import dataclass
from typing import Optional
import numpy as np
from scipy import signal

from .equalizer import Equalizer, FilterCache, SAMPLE_RATE


@dataclass(frozen=True)
class Biquad:
    """
    Second-order IIR filter coefficients.

    Transfer function:
        H(z) = (b0 + b1*z^-1 + b2*z^-2) / (a0 + a1*z^-1 + a2*z^-2)
    """
    a0: float
    a1: float
    a2: float
    b0: float
    b1: float
    b2: float

    @property
    def numerator(self) -> np.ndarray:
        """[b0, b1, b2] for scipy.signal."""
        return np.array([self.b0, self.b1, self.b2])

    @property
    def denominator(self) -> np.ndarray:
        """[a0, a1, a2] for scipy.signal."""
        return np.array([self.a0, self.a1, self.a2])

    def magnitude_at(
        self,
        frequencies: np.ndarray,
        sample_rate: int = SAMPLE_RATE,
    ) -> np.ndarray:
        """
        Linear magnitude |H| at the given frequencies in Hz.

        Evaluates H on the unit circle with z^-1 = exp(-j*2*pi*f/fs).
        """
        _, response = signal.freqz(
            self.numerator,
            self.denominator,
            worN=np.atleast_1d(np.asarray(frequencies, dtype=np.float64)),
            fs=sample_rate,
        )
        return np.abs(response)


def _peaking_from_terms(cos_w0: float, alpha: float, gain_db: float) -> Biquad:
    amplitude = 10.0 ** (gain_db / 40.0)
    return Biquad(
        a0=float(1 + alpha / amplitude),
        a1=float(-2 * cos_w0),
        a2=float(1 - alpha / amplitude),
        b0=float(1 + alpha * amplitude),
        b1=float(-2 * cos_w0),
        b2=float(1 - alpha * amplitude),
    )


def peaking_eq(
    center_freq: float,
    gain_db: float,
    q: float,
    sample_rate: int = SAMPLE_RATE,
) -> Biquad:
    """
    Design a peaking-EQ biquad from scratch.

    Args:
        center_freq: Center frequency in Hz (0 < f < fs/2)
        gain_db: Boost (positive) or cut (negative) at the center
        q: Resonance; higher values give a narrower band
        sample_rate: Sample rate in Hz

    Returns:
        Unnormalized Biquad coefficients
    """
    if q <= 0:
        raise ValueError(f"Q must be positive: {q}")
    if not 0 < center_freq < sample_rate / 2:
        raise ValueError(f"Center frequency {center_freq} Hz outside (0, {sample_rate / 2})")

    w0 = 2 * np.pi * center_freq / sample_rate
    return _peaking_from_terms(np.cos(w0), np.sin(w0) / (2 * q), gain_db)


def design_band(
    eq: Equalizer,
    band: int,
    cache: Optional[FilterCache] = None,
) -> Biquad:
    """
    Biquad for one band of the equalizer with its current settings.

    Uses the precomputed cos(w0) and alpha tables, so no trigonometric
    function is evaluated here.

    Args:
        eq: Equalizer state
        band: Band index
        cache: Trig cache; defaults to the one owned by eq

    Returns:
        Unnormalized Biquad coefficients
    """
    if cache is None:
        cache = eq.cache
    option = eq.resonance_index[band]
    return _peaking_from_terms(
        cache.cos_w0[band],
        cache.alpha[band, option],
        eq.gain_db[band],
    )


def design_all_bands(eq: Equalizer) -> list[Biquad]:
    """Biquads for every band, lowest band first."""
    return [design_band(eq, band) for band in range(eq.num_bands)]
