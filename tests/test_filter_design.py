"""
Tests für das Peaking-EQ-Filterdesign.
"""

import pytest
import numpy as np

from graphic_eq.core.equalizer import Equalizer, RESONANCE_VALUES
from graphic_eq.core.filter_design import (
    Biquad,
    design_all_bands,
    design_band,
    peaking_eq,
)


class TestDesignBand:
    """Tests für Biquads aus dem Equalizer-Zustand."""

    @pytest.mark.parametrize("option", range(10))
    def test_alpha_matches_resonance(self, option):
        """alpha = sin(w0) / (2 * Q) für jede Resonanzoption."""
        eq = Equalizer()
        band = 30
        eq.set_resonance(band, option)
        biquad = design_band(eq, band)

        w0 = 2 * np.pi * eq.frequencies[band] / 48000
        expected_alpha = np.sin(w0) / (2 * RESONANCE_VALUES[option])

        # bei 0 dB ist A = 1, also b0 = 1 + alpha
        assert biquad.b0 - 1 == pytest.approx(expected_alpha, rel=1e-9)
        assert 1 - biquad.a2 == pytest.approx(expected_alpha, rel=1e-9)

    @pytest.mark.parametrize("option", range(10))
    def test_alpha_with_gain(self, option):
        """alpha lässt sich auch bei Verstärkung aus a0 und A zurückrechnen."""
        eq = Equalizer()
        band = 55
        eq.adjust_gain(band, 6.0)
        eq.set_resonance(band, option)
        biquad = design_band(eq, band)

        amplitude = 10 ** (6.0 / 40)
        w0 = 2 * np.pi * eq.frequencies[band] / 48000
        expected_alpha = np.sin(w0) / (2 * RESONANCE_VALUES[option])

        assert (biquad.a0 - 1) * amplitude == pytest.approx(expected_alpha, rel=1e-9)
        assert (biquad.b0 - 1) / amplitude == pytest.approx(expected_alpha, rel=1e-9)

    def test_cos_terms(self):
        """b1 = a1 = -2 cos(w0)."""
        eq = Equalizer()
        biquad = design_band(eq, 10)
        w0 = 2 * np.pi * eq.frequencies[10] / 48000
        assert biquad.b1 == pytest.approx(-2 * np.cos(w0))
        assert biquad.a1 == biquad.b1

    def test_flat_band_is_identity(self):
        """Bei 0 dB sind Zähler und Nenner identisch."""
        eq = Equalizer()
        biquad = design_band(eq, 20)
        np.testing.assert_array_equal(biquad.numerator, biquad.denominator)

    def test_matches_direct_design(self):
        """Cache-Variante und direkte Berechnung stimmen überein."""
        eq = Equalizer()
        eq.adjust_gain(64, -7.5)
        eq.set_resonance(64, 8)

        cached = design_band(eq, 64)
        direct = peaking_eq(eq.frequencies[64], -7.5, 6.5)

        np.testing.assert_allclose(cached.numerator, direct.numerator, rtol=1e-12)
        np.testing.assert_allclose(cached.denominator, direct.denominator, rtol=1e-12)

    def test_explicit_cache(self):
        """Ein explizit übergebener Cache wird verwendet."""
        eq = Equalizer()
        eq.adjust_gain(3, 2.0)
        assert design_band(eq, 3, cache=eq.cache) == design_band(eq, 3)

    def test_all_bands(self):
        eq = Equalizer()
        biquads = design_all_bands(eq)
        assert len(biquads) == 75
        assert all(isinstance(b, Biquad) for b in biquads)


class TestPeakingEQ:
    """Tests für die Cookbook-Formeln."""

    @pytest.mark.parametrize("gain_db", [-20.0, -6.0, 0.0, 3.0, 12.0, 20.0])
    def test_gain_at_center(self, gain_db):
        """|H(f0)| = 10^(gain/20)."""
        biquad = peaking_eq(1000.0, gain_db, 1.8)
        magnitude = biquad.magnitude_at(np.array([1000.0]))[0]
        assert magnitude == pytest.approx(10 ** (gain_db / 20), rel=1e-9)

    def test_unity_at_dc_and_nyquist(self):
        """Peaking-EQ lässt DC und Nyquist unverändert."""
        biquad = peaking_eq(2000.0, 9.0, 1.0)
        magnitude = biquad.magnitude_at(np.array([0.0, 24000.0]))
        np.testing.assert_allclose(magnitude, [1.0, 1.0], rtol=1e-9)

    def test_boost_cut_symmetry(self):
        """+g und -g sind zueinander invers."""
        freqs = np.geomspace(20, 20000, 50)
        boost = peaking_eq(500.0, 8.0, 2.5).magnitude_at(freqs)
        cut = peaking_eq(500.0, -8.0, 2.5).magnitude_at(freqs)
        np.testing.assert_allclose(boost * cut, 1.0, rtol=1e-9)

    def test_invalid_q(self):
        with pytest.raises(ValueError):
            peaking_eq(1000.0, 3.0, 0.0)

    def test_invalid_frequency(self):
        with pytest.raises(ValueError):
            peaking_eq(24000.0, 3.0, 1.0)
        with pytest.raises(ValueError):
            peaking_eq(0.0, 3.0, 1.0)
