"""
Command line front end.

Loads a mono WAV file, applies the equalizer settings given on the
command line and writes the result as 16-bit WAV at 48 kHz.

Usage:
    graphic-eq input.wav output.wav --gain 0=+6 --gain 1kHz=-3 --resonance 0=7

Bands are given either as index (0..74) or as frequency with a
"Hz"/"kHz" suffix, which selects the nearest band. Repeated --gain
options for the same band add up.
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from .core import (
    AudioError,
    Equalizer,
    RESONANCE_VALUES,
    compute_peak,
    load_wav,
    overall_response_db,
    process,
    save_wav,
)
from .utils.formatting import (
    format_db,
    format_frequency,
    format_gain,
    format_resonance,
    samples_to_time_str,
)

logger = logging.getLogger(__name__)


def parse_band(text: str, eq: Equalizer) -> int:
    """Band index from "12", "250Hz" or "1.5kHz"."""
    value = text.strip().lower()
    try:
        if value.endswith("khz"):
            return eq.nearest_band(float(value[:-3]) * 1000)
        if value.endswith("hz"):
            return eq.nearest_band(float(value[:-2]))
        band = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid band: {text!r}")

    if not 0 <= band < eq.num_bands:
        raise argparse.ArgumentTypeError(f"Band index out of range (0-{eq.num_bands - 1}): {band}")
    return band


def _split_assignment(text: str) -> tuple[str, str]:
    band, sep, value = text.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"Expected BAND=VALUE, got {text!r}")
    return band, value


def apply_settings(
    eq: Equalizer,
    gains: Sequence[str],
    resonances: Sequence[str],
) -> None:
    """Apply "BAND=VALUE" assignments from the command line to eq."""
    for item in gains:
        band_text, value = _split_assignment(item)
        try:
            delta = float(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"Invalid gain: {value!r}")
        eq.adjust_gain(parse_band(band_text, eq), delta)

    for item in resonances:
        band_text, value = _split_assignment(item)
        try:
            option = int(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"Invalid resonance option: {value!r}")
        if not 0 <= option < len(RESONANCE_VALUES):
            raise argparse.ArgumentTypeError(
                f"Resonance option out of range (0-{len(RESONANCE_VALUES) - 1}): {option}"
            )
        eq.set_resonance(parse_band(band_text, eq), option)


def print_curve(eq: Equalizer, file=sys.stdout) -> None:
    """Overall response table in dB, one line per band."""
    curve = overall_response_db(eq)
    for band in range(eq.num_bands):
        settings = eq.band_settings(band)
        print(
            f"{band:3d}  {format_frequency(settings.frequency):>9}  "
            f"{format_gain(settings.gain_db):>9}  {format_resonance(settings.resonance):>6}  "
            f"{format_db(curve[band]):>9}",
            file=file,
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="graphic-eq",
        description="Apply a 75-band graphic equalizer to a mono WAV file.",
    )
    parser.add_argument("input", help="mono WAV file (8/16 bit PCM or 32 bit float)")
    parser.add_argument("output", nargs="?", help="output WAV file (16 bit, 48 kHz)")
    parser.add_argument("-g", "--gain", action="append", default=[], metavar="BAND=DB",
                        help="change a band's gain by DB (clamped to +-20 dB)")
    parser.add_argument("-r", "--resonance", action="append", default=[], metavar="BAND=OPT",
                        help="resonance option 0-9 (Q " +
                             ", ".join(f"{q:g}" for q in RESONANCE_VALUES) + ")")
    parser.add_argument("-c", "--curve", action="store_true",
                        help="print the overall frequency response")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    eq = Equalizer()
    try:
        apply_settings(eq, args.gain, args.resonance)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    if args.curve:
        print_curve(eq)

    buffer, error = load_wav(args.input)
    if error:
        print(f"Error: {args.input}: {error}", file=sys.stderr)
        return 1

    print(f"Loaded {args.input}: {samples_to_time_str(buffer.sample_count, buffer.sample_rate)}, "
          f"peak {format_db(compute_peak(buffer.samples, as_db=True))}")

    if args.output is None:
        return 0

    def report(progress: float) -> None:
        print(f"\rProcessing {progress * 100:5.1f}%", end="", file=sys.stderr, flush=True)

    output = process(eq, buffer, on_progress=report)
    print(file=sys.stderr)
    buffer.release()

    peak_db = compute_peak(output.samples, as_db=True)
    try:
        save_wav(output, args.output)
    except AudioError as e:
        print(f"Error: {args.output}: {e}", file=sys.stderr)
        return 1
    finally:
        output.release()

    print(f"Saved {args.output}: peak {format_db(peak_db)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
