"""
Formatting functions for display.

Converts numeric values into readable strings.
"""


def format_frequency(hz: float) -> str:
    """
    Format frequency in readable form.

    Args:
        hz: Frequency in Hz

    Returns:
        Formatted string (e.g. "1.5 kHz" or "250 Hz")
    """
    if hz >= 1000:
        return f"{hz/1000:.1f} kHz"
    else:
        return f"{hz:.0f} Hz"


def format_db(db: float, precision: int = 1) -> str:
    """
    Format dB value.

    Args:
        db: Level in dB
        precision: Decimal places

    Returns:
        Formatted string (e.g. "-12.3 dB")
    """
    if db == float('-inf'):
        return "-∞ dB"
    return f"{db:.{precision}f} dB"


def format_gain(db: float, precision: int = 1) -> str:
    """Like format_db, but always signed ("+3.0 dB", "-2.5 dB", "+0.0 dB")."""
    if db == float('-inf'):
        return "-∞ dB"
    return f"{db:+.{precision}f} dB"


def format_resonance(q: float) -> str:
    """Format a Q value (e.g. "Q 1.8")."""
    return f"Q {q:.1f}"


def format_duration(seconds: float) -> str:
    """
    Format duration for display.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string (e.g. "3:45.20" or "0:01.50")
    """
    minutes = int(seconds // 60)
    secs = seconds % 60
    return f"{minutes}:{secs:05.2f}"


def samples_to_time_str(
    samples: int,
    sample_rate: int,
    show_samples: bool = True,
) -> str:
    """
    Convert samples to time string with optional sample count.

    Args:
        samples: Number of samples
        sample_rate: Sample rate
        show_samples: Also show sample count

    Returns:
        Formatted string (e.g. "0:01.50 (72,000 samples)")
    """
    time_str = format_duration(samples / sample_rate)

    if show_samples:
        return f"{time_str} ({samples:,} samples)"
    return time_str


def format_sample_rate(sr: int) -> str:
    """
    Format sample rate.

    Returns:
        Formatted string (e.g. "44.1 kHz" or "48 kHz")
    """
    if sr % 1000 == 0:
        return f"{sr // 1000} kHz"
    else:
        return f"{sr / 1000:.1f} kHz"
