"""
Core DSP module - fully testable without any UI.

This module contains the equalizer engine:
- Equalizer state (bands, gains, resonance)
- Peaking-EQ biquad design with a precomputed trig cache
- Analytic frequency response of single bands and the full cascade
- Filter cascade applied to audio buffers
- Mono WAV reading/writing with rate conversion
"""

from .audio_buffer import AudioBuffer
from .audio_io import WavFormat, load_wav, read_wav, read_wav_info, save_wav
from .cascade import CascadeProcessor, process
from .equalizer import (
    BAND_COUNT,
    RESONANCE_VALUES,
    SAMPLE_RATE,
    Equalizer,
    EqualizerConfig,
    FilterCache,
)
from .errors import AudioError, AudioIOError, ProcessingCancelled, WavFormatError
from .filter_design import Biquad, design_band, peaking_eq
from .response import (
    db_to_gain,
    gain_to_db,
    overall_response,
    overall_response_db,
    single_band_response,
    single_band_response_db,
)
from .signal_processing import resample, compute_rms, compute_peak

__all__ = [
    "AudioBuffer",
    "WavFormat",
    "load_wav",
    "read_wav",
    "read_wav_info",
    "save_wav",
    "CascadeProcessor",
    "process",
    "BAND_COUNT",
    "RESONANCE_VALUES",
    "SAMPLE_RATE",
    "Equalizer",
    "EqualizerConfig",
    "FilterCache",
    "AudioError",
    "AudioIOError",
    "ProcessingCancelled",
    "WavFormatError",
    "Biquad",
    "design_band",
    "peaking_eq",
    "db_to_gain",
    "gain_to_db",
    "overall_response",
    "overall_response_db",
    "single_band_response",
    "single_band_response_db",
    "resample",
    "compute_rms",
    "compute_peak",
]
