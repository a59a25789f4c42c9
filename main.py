#!/usr/bin/env python3
"""
Graphic Equalizer - entry point

Applies a 75-band peaking equalizer to a mono WAV file.

Usage:
    python main.py input.wav [output.wav] [--gain BAND=DB] [--resonance BAND=OPT] [--curve]

Example:
    python main.py recording.wav bright.wav --gain 10kHz=+6 --curve
"""

import sys


def main():
    """Start the Graphic Equalizer command line."""
    # Check Python version
    if sys.version_info < (3, 11):
        print("Error: Python 3.11 or higher is required.")
        print(f"Current version: {sys.version}")
        sys.exit(1)

    # Import numpy/scipy (late import for a clear error if not installed)
    try:
        import numpy  # noqa: F401
        import scipy  # noqa: F401
    except ImportError:
        print("Error: numpy and scipy are required.")
        print("Install with: pip install numpy scipy")
        sys.exit(1)

    from graphic_eq.cli import main as cli_main

    sys.exit(cli_main())


if __name__ == "__main__":
    main()
