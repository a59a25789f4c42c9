"""
Audio I/O Module

Reads and writes mono RIFF/WAVE files.

Technical assumptions:
- Every multi-byte field is little-endian and parsed explicitly with
  struct/numpy dtypes, independent of the host byte order
- Supported encodings: 8-bit unsigned PCM, 16-bit signed PCM,
  32-bit IEEE float; mono only
- Decoded audio is float64 and converted to the canonical sample rate
  before it is returned
- Files are always written as 16-bit mono PCM at the canonical rate

Decoding:
- 8-bit:  b / 128.0 - 1.0
- 16-bit: s / 32767.0
- float:  unchanged

Encoding:
- clamp(round(x * 32767), -32767, 32767) as signed 16-bit
"""

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional
import logging
import struct
import warnings
import numpy as np

from .audio_buffer import AudioBuffer
from .equalizer import SAMPLE_RATE
from .errors import AudioError, AudioIOError, WavFormatError
from .signal_processing import resample

logger = logging.getLogger(__name__)

RIFF_ID = 0x46464952  # 'RIFF'
WAVE_ID = 0x45564157  # 'WAVE'
FMT_ID = 0x20746D66   # 'fmt '
DATA_ID = 0x61746164  # 'data'

FORMAT_PCM = 1
FORMAT_IEEE_FLOAT = 3

_RIFF_HEADER = struct.Struct("<III")        # id, size, format
_CHUNK_HEADER = struct.Struct("<II")        # id, size
_FMT_BODY = struct.Struct("<HHIIHH")        # format, channels, rate, byte rate, align, bits

# (audio format, bits per sample) -> little-endian numpy dtype
_SAMPLE_DTYPES = {
    (FORMAT_PCM, 8): np.dtype("u1"),
    (FORMAT_PCM, 16): np.dtype("<i2"),
    (FORMAT_IEEE_FLOAT, 32): np.dtype("<f4"),
}

PCM16_MAX = 32767


@dataclass(frozen=True)
class WavFormat:
    """
    Parsed 'fmt ' chunk.

    Attributes:
        audio_format: 1 = integer PCM, 3 = IEEE float
        channels: Channel count (must be 1)
        sample_rate: Frames per second
        byte_rate: sample_rate * block_align
        block_align: Bytes per frame
        bits_per_sample: Bit depth of one sample
    """
    audio_format: int
    channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int

    @property
    def dtype(self) -> np.dtype:
        return _SAMPLE_DTYPES[(self.audio_format, self.bits_per_sample)]

    def validate(self) -> None:
        """
        Check that this format can be decoded.

        Raises:
            WavFormatError: Describes the first problem found
        """
        if self.audio_format not in (FORMAT_PCM, FORMAT_IEEE_FLOAT):
            raise WavFormatError(
                f"Only PCM and float audio formats are supported (got format {self.audio_format})"
            )
        if self.channels != 1:
            raise WavFormatError(f"Only mono audio is supported (got {self.channels} channels)")
        if (self.block_align != self.bits_per_sample * self.channels // 8
                or self.byte_rate != self.sample_rate * self.block_align):
            raise WavFormatError("Format chunk is inconsistent")
        if self.sample_rate == 0:
            raise WavFormatError("Sample rate must not be zero")
        if (self.audio_format, self.bits_per_sample) not in _SAMPLE_DTYPES:
            if self.audio_format == FORMAT_PCM:
                raise WavFormatError(
                    f"Only 8 and 16 bit PCM are supported (got {self.bits_per_sample} bit)"
                )
            raise WavFormatError(
                f"Only 32 bit float is supported (got {self.bits_per_sample} bit)"
            )


def _read_exact(f: BinaryIO, num_bytes: int, what: str) -> bytes:
    data = f.read(num_bytes)
    if len(data) != num_bytes:
        raise WavFormatError(f"Unexpected end of file while reading {what}")
    return data


def _skip(f: BinaryIO, num_bytes: int, what: str) -> None:
    # seek() happily moves past EOF, so check against the real file size
    position = f.tell()
    end = f.seek(0, 2)
    if position + num_bytes > end:
        raise WavFormatError(f"Unexpected end of file while skipping {what}")
    f.seek(position + num_bytes)


def _parse_fmt(f: BinaryIO, chunk_size: int) -> WavFormat:
    if chunk_size < _FMT_BODY.size:
        raise WavFormatError(f"Format chunk too short ({chunk_size} bytes)")
    fmt = WavFormat(*_FMT_BODY.unpack(_read_exact(f, _FMT_BODY.size, "format chunk")))
    # Extended fmt chunks (cbSize, WAVE_FORMAT_EXTENSIBLE fields) are skipped
    extra = chunk_size - _FMT_BODY.size
    if extra:
        _skip(f, extra, "format chunk extension")
    fmt.validate()
    return fmt


def _decode_data(f: BinaryIO, chunk_size: int, fmt: WavFormat) -> np.ndarray:
    num_samples = chunk_size // fmt.block_align
    raw = _read_exact(f, num_samples * fmt.block_align, "sample data")
    leftover = chunk_size - num_samples * fmt.block_align
    if leftover:
        _skip(f, leftover, "partial sample frame")

    samples = np.frombuffer(raw, dtype=fmt.dtype)
    if fmt.audio_format == FORMAT_PCM and fmt.bits_per_sample == 8:
        return samples / 128.0 - 1.0
    if fmt.audio_format == FORMAT_PCM:
        return samples / float(PCM16_MAX)
    return samples.astype(np.float64)


def _scan_chunks(f: BinaryIO) -> tuple[WavFormat, np.ndarray]:
    riff_id, riff_size, wave_id = _RIFF_HEADER.unpack(_read_exact(f, _RIFF_HEADER.size, "RIFF header"))
    if riff_id != RIFF_ID or wave_id != WAVE_ID:
        raise WavFormatError("File is not a wav file")

    fmt: Optional[WavFormat] = None
    samples: Optional[np.ndarray] = None

    if riff_size < 4:
        raise WavFormatError(f"RIFF size too small ({riff_size} bytes)")
    remaining = riff_size - 4

    while remaining > 0:
        if remaining < _CHUNK_HEADER.size:
            raise WavFormatError("Chunk header exceeds the declared RIFF size")
        chunk_id, chunk_size = _CHUNK_HEADER.unpack(_read_exact(f, _CHUNK_HEADER.size, "chunk header"))
        remaining -= _CHUNK_HEADER.size

        if chunk_size > remaining:
            raise WavFormatError(
                f"Chunk size {chunk_size} exceeds the remaining RIFF payload ({remaining} bytes)"
            )

        if chunk_id == FMT_ID:
            fmt = _parse_fmt(f, chunk_size)
            logger.debug("fmt chunk: %s", fmt)
        elif chunk_id == DATA_ID:
            if fmt is None:
                raise WavFormatError("Data chunk found before format chunk")
            samples = _decode_data(f, chunk_size, fmt)
            logger.debug("data chunk: %d samples", len(samples))
        else:
            logger.debug("Skipping chunk %r (%d bytes)",
                         chunk_id.to_bytes(4, "little"), chunk_size)
            _skip(f, chunk_size, "chunk")
        remaining -= chunk_size

        # Chunks are word aligned; an odd size is followed by a pad byte
        if chunk_size % 2 and remaining > 0:
            _skip(f, 1, "pad byte")
            remaining -= 1

    if fmt is None:
        raise WavFormatError("Missing format chunk")
    if samples is None:
        raise WavFormatError("Missing data chunk")
    return fmt, samples


def read_wav_info(file_path: str | Path) -> WavFormat:
    """
    Parse and validate a WAV file's format without keeping its samples.

    Raises:
        AudioIOError: File cannot be opened or read
        WavFormatError: Not a supported WAV file
    """
    fmt, _ = _read_file(Path(file_path))
    return fmt


def _read_file(path: Path) -> tuple[WavFormat, np.ndarray]:
    try:
        with open(path, "rb") as f:
            return _scan_chunks(f)
    except OSError as e:
        raise AudioIOError(e.strerror or str(e)) from e


def read_wav(file_path: str | Path) -> AudioBuffer:
    """
    Load a mono WAV file at the canonical sample rate.

    Args:
        file_path: Path to the WAV file

    Returns:
        AudioBuffer at SAMPLE_RATE

    Raises:
        AudioIOError: File cannot be opened or read
        WavFormatError: Wrong magic, non-mono, unsupported encoding,
            inconsistent fmt fields or truncated/inconsistent chunk sizes
    """
    path = Path(file_path)
    fmt, samples = _read_file(path)

    decoded = AudioBuffer.from_samples(samples, fmt.sample_rate)
    buffer = resample(decoded, fmt.sample_rate)
    decoded.release()

    logger.info("Loaded %s: %d samples, %d Hz, %d bit -> %d samples at %d Hz",
                path, len(samples), fmt.sample_rate, fmt.bits_per_sample,
                buffer.sample_count, buffer.sample_rate)
    return buffer


def load_wav(file_path: str | Path) -> tuple[AudioBuffer, str]:
    """
    Load a WAV file, reporting failure as text.

    Returns:
        (buffer, error). error is "" on success; on failure the buffer
        is empty and error describes the I/O or format problem.
    """
    try:
        return read_wav(file_path), ""
    except AudioError as e:
        logger.info("Could not load %s: %s", file_path, e)
        return AudioBuffer(), str(e)


def encode_pcm16(samples: np.ndarray) -> np.ndarray:
    """Quantize float samples to little-endian signed 16-bit PCM."""
    scaled = np.round(np.asarray(samples, dtype=np.float64) * PCM16_MAX)
    return np.clip(scaled, -PCM16_MAX, PCM16_MAX).astype("<i2")


def wav_header(num_samples: int, sample_rate: int = SAMPLE_RATE) -> bytes:
    """Canonical 44-byte header for 16-bit mono PCM."""
    block_align = 2
    data_size = block_align * num_samples
    return struct.pack(
        "<III" "IIHHIIHH" "II",
        RIFF_ID, 36 + data_size, WAVE_ID,
        FMT_ID, 16, FORMAT_PCM, 1, sample_rate, sample_rate * block_align, block_align, 16,
        DATA_ID, data_size,
    )


def save_wav(buffer: AudioBuffer, file_path: str | Path) -> None:
    """
    Write a buffer as 16-bit mono PCM WAV at the canonical sample rate.

    Samples outside [-1.0, 1.0] are clipped with a warning.

    Raises:
        AudioIOError: File cannot be created or written
    """
    path = Path(file_path)
    samples = buffer.samples

    if samples.size and np.any(np.abs(samples) > 1.0):
        warnings.warn(
            "Audio data exceeds [-1.0, 1.0]. Clipping will be applied.",
            UserWarning,
        )

    payload = encode_pcm16(samples).tobytes()
    try:
        with open(path, "wb") as f:
            f.write(wav_header(buffer.sample_count))
            f.write(payload)
    except OSError as e:
        raise AudioIOError(e.strerror or str(e)) from e

    logger.info("Saved %s: %d samples at %d Hz", path, buffer.sample_count, SAMPLE_RATE)
