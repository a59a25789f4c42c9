"""
Graphic Equalizer

75-band peaking-EQ engine with frequency response preview and
mono WAV processing.
"""

__version__ = "1.0.0"
