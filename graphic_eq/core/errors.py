"""
Error types raised by the core.

Two recoverable kinds reach the caller as human-readable text:
- AudioIOError: a file could not be opened, read or written
- WavFormatError: the file is not a WAV file this engine can decode

ProcessingCancelled is raised when a progress callback asks the
filter cascade to stop early.
"""


class AudioError(Exception):
    """Base class for all recoverable audio errors."""


class AudioIOError(AudioError):
    """Opening, reading or writing a file failed."""


class WavFormatError(AudioError, ValueError):
    """Malformed, inconsistent or unsupported RIFF/WAVE data."""


class ProcessingCancelled(AudioError):
    """The cascade was aborted by its progress callback."""

    def __init__(self, completed_bands: int):
        super().__init__(f"Processing cancelled after {completed_bands} band(s)")
        self.completed_bands = completed_bands
