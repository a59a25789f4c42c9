"""
Tests für die Filterkaskade.
"""

import pytest
import numpy as np
from scipy import signal

from graphic_eq.core.audio_buffer import AudioBuffer
from graphic_eq.core.cascade import CascadeProcessor, apply_biquad, process
from graphic_eq.core.equalizer import Equalizer
from graphic_eq.core.errors import ProcessingCancelled
from graphic_eq.core.filter_design import design_all_bands, peaking_eq
from graphic_eq.core.response import overall_response
from graphic_eq.core.signal_processing import compute_rms


def direct_form_1(b, a, x):
    """Referenz: Differenzengleichung Sample für Sample."""
    y = np.zeros_like(x)
    x1 = x2 = y1 = y2 = 0.0
    for n in range(len(x)):
        y[n] = (b[0] * x[n] + b[1] * x1 + b[2] * x2 - a[1] * y1 - a[2] * y2) / a[0]
        x2, x1 = x1, x[n]
        y2, y1 = y1, y[n]
    return y


class TestApplyBiquad:
    """Tests für ein einzelnes Biquad."""

    def test_matches_difference_equation(self):
        """lfilter entspricht Direktform I mit Nullzuständen."""
        rng = np.random.default_rng(1)
        x = rng.standard_normal(500)
        f = peaking_eq(3000.0, 10.0, 4.7)
        y = np.zeros_like(x)

        apply_biquad(f, x, y)

        np.testing.assert_allclose(y, direct_form_1(f.numerator, f.denominator, x), atol=1e-12)

    def test_impulse_starts_from_silence(self):
        """Erste Ausgabe ist b0/a0 (keine Vorgeschichte)."""
        f = peaking_eq(100.0, 6.0, 1.0)
        x = np.zeros(10)
        x[0] = 1.0
        y = np.zeros(10)

        apply_biquad(f, x, y)

        assert y[0] == pytest.approx(f.b0 / f.a0)

    def test_empty(self):
        f = peaking_eq(100.0, 6.0, 1.0)
        y = np.zeros(0)
        apply_biquad(f, np.zeros(0), y)
        assert len(y) == 0


class TestProcess:
    """Tests für die komplette Kaskade."""

    @pytest.mark.parametrize("length", [0, 1, 2, 3, 1000])
    def test_preserves_length(self, length):
        """Ausgabelänge = Eingabelänge, auch für 0."""
        eq = Equalizer()
        eq.adjust_gain(10, 5.0)
        src = AudioBuffer.from_samples(np.linspace(-0.5, 0.5, length))

        out = process(eq, src)

        assert out.sample_count == length

    def test_flat_is_identity(self):
        """Flacher Equalizer lässt das Signal unverändert."""
        rng = np.random.default_rng(2)
        src = AudioBuffer.from_samples(rng.uniform(-1, 1, 2000))

        out = process(Equalizer(), src)

        np.testing.assert_allclose(out.samples, src.samples, atol=1e-12)

    def test_input_unchanged(self):
        """Eingabepuffer wird nicht verändert."""
        eq = Equalizer()
        eq.adjust_gain(40, 12.0)
        data = np.sin(np.arange(1000) * 0.1)
        src = AudioBuffer.from_samples(data)

        out = process(eq, src)

        np.testing.assert_array_equal(src.samples, data)
        assert not np.shares_memory(out.samples, src.samples)

    def test_matches_sequential_lfilter(self):
        """Entspricht 75 hintereinander ausgeführten Filtern."""
        eq = Equalizer()
        eq.adjust_gain(5, 8.0)
        eq.adjust_gain(42, -6.0)
        eq.set_resonance(42, 8)
        eq.adjust_gain(70, 3.0)

        rng = np.random.default_rng(3)
        data = rng.standard_normal(3000) * 0.1

        expected = data.copy()
        for f in design_all_bands(eq):
            expected = signal.lfilter(f.numerator, f.denominator, expected)

        out = process(eq, AudioBuffer.from_samples(data))

        np.testing.assert_allclose(out.samples, expected, rtol=1e-10, atol=1e-12)

    def test_sine_gain_matches_response(self):
        """Eingeschwungener Sinus wird um den analytischen Frequenzgang verstärkt."""
        eq = Equalizer()
        eq.adjust_gain(42, 12.0)
        freq = eq.frequencies[42]

        t = np.arange(48000) / 48000
        src = AudioBuffer.from_samples(0.1 * np.sin(2 * np.pi * freq * t))

        out = process(eq, src)

        half = slice(24000, None)
        ratio = compute_rms(out.samples[half]) / compute_rms(src.samples[half])
        assert ratio == pytest.approx(overall_response(eq)[42], rel=0.02)

    def test_result_sample_rate(self):
        src = AudioBuffer.from_samples(np.zeros(10))
        assert process(Equalizer(), src).sample_rate == 48000


class TestProgress:
    """Tests für die Fortschrittsmeldung."""

    def test_called_once_per_band(self):
        """75 Aufrufe mit i/74, von 0.0 bis 1.0."""
        values = []
        process(Equalizer(), AudioBuffer.from_samples(np.zeros(100)), values.append)

        assert len(values) == 75
        np.testing.assert_allclose(values, np.arange(75) / 74)
        assert values[0] == 0.0
        assert values[-1] == 1.0
        assert all(0.0 <= v <= 1.0 for v in values)

    def test_empty_input_still_reports(self):
        """Auch leere Signale melden jeden Schritt."""
        values = []
        out = process(Equalizer(), AudioBuffer(), values.append)
        assert out.sample_count == 0
        assert len(values) == 75

    def test_cancel(self):
        """Rückgabe False bricht ab."""
        calls = []

        def on_progress(value):
            calls.append(value)
            return len(calls) < 3

        with pytest.raises(ProcessingCancelled) as exc_info:
            process(Equalizer(), AudioBuffer.from_samples(np.zeros(100)), on_progress)

        assert exc_info.value.completed_bands == 3
        assert len(calls) == 3

    def test_true_continues(self):
        """Rückgabe True (oder None) läuft weiter."""
        out = process(Equalizer(), AudioBuffer.from_samples(np.zeros(5)), lambda v: True)
        assert out.sample_count == 5


class TestIterProcess:
    """Tests für die Generator-Variante."""

    def test_yields_progress_and_returns_result(self):
        eq = Equalizer()
        eq.adjust_gain(20, 4.0)
        data = np.random.default_rng(4).standard_normal(500)
        processor = CascadeProcessor(eq)

        stages = processor.iter_process(AudioBuffer.from_samples(data))
        values = []
        while True:
            try:
                values.append(next(stages))
            except StopIteration as done:
                result = done.value
                break

        assert len(values) == 75
        expected = processor.process(AudioBuffer.from_samples(data))
        np.testing.assert_array_equal(result.samples, expected.samples)

    def test_restartable(self):
        """Jeder Aufruf startet eine neue Berechnung."""
        processor = CascadeProcessor(Equalizer())
        src = AudioBuffer.from_samples(np.ones(10))
        assert len(list(processor.iter_process(src))) == 75
        assert len(list(processor.iter_process(src))) == 75
