"""
Utility module for the graphic equalizer.

Contains display helpers used by the command line front end.
"""

from .formatting import (
    format_frequency,
    format_db,
    format_gain,
    format_resonance,
    format_duration,
    format_sample_rate,
    samples_to_time_str,
)

__all__ = [
    "format_frequency",
    "format_db",
    "format_gain",
    "format_resonance",
    "format_duration",
    "format_sample_rate",
    "samples_to_time_str",
]
