"""
Equalizer State

Holds the settings of a 75-band graphic equalizer.

Technical assumptions:
- Band center frequencies are logarithmically spaced from 20 Hz to 20 kHz
  and never change after construction
- Gain per band is limited to [-20, +20] dB, clamping is silent
- Resonance (Q) is chosen from a fixed table of 10 values
- The trig/resonance cache used for filter design is built once together
  with the frequencies and owned by the state
"""

from dataclasses import dataclass
from typing import Optional
import numpy as np

# Canonical sample rate of all in-memory processing
SAMPLE_RATE = 48000

BAND_COUNT = 75
LO_FREQ = 20.0
HI_FREQ = 20000.0

MIN_GAIN_DB = -20.0
MAX_GAIN_DB = 20.0

# Selectable resonance (Q) values, indexed 0..9
RESONANCE_VALUES = np.array([0.5, 0.7, 1.0, 1.3, 1.8, 2.5, 3.4, 4.7, 6.5, 9.0])
RESONANCE_VALUES.flags.writeable = False

DEFAULT_RESONANCE_INDEX = 4


@dataclass(frozen=True)
class EqualizerConfig:
    """
    Fixed layout of an equalizer.

    The defaults describe the standard 75-band equalizer at 48 kHz.

    Attributes:
        band_count: Number of bands (at least 2)
        lo_freq: Center frequency of the lowest band in Hz
        hi_freq: Center frequency of the highest band in Hz
        sample_rate: Sample rate the filters are designed for
        min_gain_db: Lower gain limit
        max_gain_db: Upper gain limit
        default_resonance_index: Resonance option used after reset
    """
    band_count: int = BAND_COUNT
    lo_freq: float = LO_FREQ
    hi_freq: float = HI_FREQ
    sample_rate: int = SAMPLE_RATE
    min_gain_db: float = MIN_GAIN_DB
    max_gain_db: float = MAX_GAIN_DB
    default_resonance_index: int = DEFAULT_RESONANCE_INDEX

    def __post_init__(self):
        if self.band_count < 2:
            raise ValueError("Equalizer needs at least 2 bands")
        if self.lo_freq <= 0 or self.hi_freq <= self.lo_freq:
            raise ValueError(
                f"Invalid frequency range: {self.lo_freq} - {self.hi_freq} Hz"
            )
        if self.hi_freq >= self.sample_rate / 2:
            raise ValueError("Highest band must be below the Nyquist frequency")
        if self.min_gain_db > self.max_gain_db:
            raise ValueError("Gain range is inverted")
        if not 0 <= self.default_resonance_index < len(RESONANCE_VALUES):
            raise ValueError(
                f"Default resonance index out of range: {self.default_resonance_index}"
            )

    def band_frequencies(self) -> np.ndarray:
        """Logarithmically spaced center frequencies, both ends exact."""
        exponent = np.arange(self.band_count) / (self.band_count - 1)
        freqs = self.lo_freq * (self.hi_freq / self.lo_freq) ** exponent
        # Pin the end points against rounding in the power
        freqs[0] = self.lo_freq
        freqs[-1] = self.hi_freq
        return freqs


class FilterCache:
    """
    Precomputed trig terms for peaking-EQ design.

    cos(w0) only depends on the band, alpha only on the band and the
    resonance option. Both are computed once for the fixed frequencies
    so that redrawing response curves needs no sin/cos evaluation.

    Attributes:
        w0: Normalized angular frequency per band, shape (bands,)
        cos_w0: cos(w0) per band, shape (bands,)
        alpha: sin(w0) / (2 * Q), shape (bands, len(RESONANCE_VALUES))
    """

    def __init__(self, frequencies: np.ndarray, sample_rate: int = SAMPLE_RATE):
        self.sample_rate = sample_rate
        self.w0 = 2 * np.pi * np.asarray(frequencies, dtype=np.float64) / sample_rate
        self.cos_w0 = np.cos(self.w0)
        self.alpha = np.sin(self.w0)[:, np.newaxis] / (2 * RESONANCE_VALUES[np.newaxis, :])

        for table in (self.w0, self.cos_w0, self.alpha):
            table.flags.writeable = False

    @property
    def num_bands(self) -> int:
        return len(self.w0)


@dataclass(frozen=True)
class BandSettings:
    """Snapshot of one band's settings."""
    index: int
    frequency: float
    gain_db: float
    resonance_index: int

    @property
    def resonance(self) -> float:
        """Q value of the selected resonance option."""
        return float(RESONANCE_VALUES[self.resonance_index])


class Equalizer:
    """
    Mutable settings of the graphic equalizer.

    Usage:
        eq = Equalizer()
        eq.adjust_gain(0, +3.0)
        eq.set_resonance(0, 7)

    Gains and resonance indices are only changed through adjust_gain,
    set_gain, set_resonance and reset. frequencies and cache are
    read-only for the lifetime of the object.
    """

    def __init__(self, config: Optional[EqualizerConfig] = None):
        self.config = config or EqualizerConfig()

        self._frequencies = self.config.band_frequencies()
        self._frequencies.flags.writeable = False
        self.cache = FilterCache(self._frequencies, self.config.sample_rate)

        self.gain_db = np.zeros(self.config.band_count)
        self.resonance_index = np.zeros(self.config.band_count, dtype=int)
        self.reset()

    def reset(self) -> None:
        """Flat response: 0 dB everywhere, default resonance."""
        self.gain_db[:] = 0.0
        self.resonance_index[:] = self.config.default_resonance_index

    @property
    def frequencies(self) -> np.ndarray:
        """Band center frequencies in Hz (read-only)."""
        return self._frequencies

    @property
    def num_bands(self) -> int:
        return self.config.band_count

    @property
    def sample_rate(self) -> int:
        return self.config.sample_rate

    def set_resonance(self, band: int, option: int) -> None:
        """
        Select one of the resonance options for a band.

        Args:
            band: Band index, 0..num_bands-1
            option: Index into RESONANCE_VALUES, 0..9

        Raises:
            IndexError: band or option out of range
        """
        self._check_band(band)
        if not 0 <= option < len(RESONANCE_VALUES):
            raise IndexError(f"Resonance option out of range: {option}")
        self.resonance_index[band] = option

    def adjust_gain(self, band: int, delta_db: float) -> None:
        """
        Add delta_db to a band's gain and clamp to the gain limits.

        Saturation is not an error; clamping an already clamped value
        leaves it unchanged.
        """
        self._check_band(band)
        self.set_gain(band, self.gain_db[band] + delta_db)

    def set_gain(self, band: int, gain_db: float) -> None:
        """Set a band's gain in dB, clamped to the gain limits."""
        self._check_band(band)
        self.gain_db[band] = min(max(gain_db, self.config.min_gain_db), self.config.max_gain_db)

    def resonance(self, band: int) -> float:
        """Q value currently selected for a band."""
        return float(RESONANCE_VALUES[self.resonance_index[band]])

    def band_settings(self, band: int) -> BandSettings:
        self._check_band(band)
        return BandSettings(
            index=band,
            frequency=float(self._frequencies[band]),
            gain_db=float(self.gain_db[band]),
            resonance_index=int(self.resonance_index[band]),
        )

    @property
    def is_flat(self) -> bool:
        """True if every band is at 0 dB."""
        return not np.any(self.gain_db)

    def nearest_band(self, frequency: float) -> int:
        """Index of the band whose center is closest on a log scale."""
        if frequency <= 0:
            raise ValueError(f"Frequency must be positive: {frequency}")
        return int(np.argmin(np.abs(np.log(self._frequencies / frequency))))

    def _check_band(self, band: int) -> None:
        if not 0 <= band < self.num_bands:
            raise IndexError(f"Band index out of range: {band}")
