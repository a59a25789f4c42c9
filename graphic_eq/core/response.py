"""
Frequency Response Analysis

Analytic magnitude response of single equalizer bands and of the whole
filter cascade, evaluated at the band center frequencies.

Technical assumptions:
- The probe frequencies are the equalizer's own band centers
- Filters in series multiply their magnitude responses, so the overall
  response is the element-wise product of all single-band responses
- Cost of overall_response: bands x probes complex evaluations
  (75 x 75 = 5625), cheap enough for every interactive redraw
"""

import numpy as np

from .equalizer import Equalizer
from .filter_design import design_band


def gain_to_db(gain):
    """
    Convert linear gain to dB (20*log10).

    Zero gain maps to -inf without a runtime warning.
    Accepts scalars and arrays.
    """
    with np.errstate(divide="ignore"):
        db = 20 * np.log10(gain)
    return float(db) if np.ndim(db) == 0 else db


def db_to_gain(db):
    """Convert dB to linear gain (10^(dB/20)). Accepts scalars and arrays."""
    gain = np.power(10.0, np.asarray(db, dtype=np.float64) / 20.0)
    return float(gain) if np.ndim(gain) == 0 else gain


def single_band_response(eq: Equalizer, band: int) -> np.ndarray:
    """
    Linear magnitude response of one band at every band frequency.

    A band at 0 dB is an identity filter (numerator == denominator),
    so its response is 1.0 everywhere regardless of resonance.

    Args:
        eq: Equalizer state
        band: Band whose filter is evaluated

    Returns:
        Array of shape (num_bands,) with |H(f_j)|
    """
    biquad = design_band(eq, band)
    return biquad.magnitude_at(eq.frequencies, eq.sample_rate)


def overall_response(eq: Equalizer) -> np.ndarray:
    """
    Linear magnitude response of the full cascade at every band frequency.

    Returns:
        Array of shape (num_bands,), product of all single-band responses
    """
    total = np.ones(eq.num_bands)
    for band in range(eq.num_bands):
        total *= single_band_response(eq, band)
    return total


def single_band_response_db(eq: Equalizer, band: int) -> np.ndarray:
    """single_band_response in dB, as drawn by the preview."""
    return gain_to_db(single_band_response(eq, band))


def overall_response_db(eq: Equalizer) -> np.ndarray:
    """overall_response in dB, as drawn by the preview."""
    return gain_to_db(overall_response(eq))
