"""
Audio Buffer

Owned, variable-length mono signal.

Technical assumptions:
- Samples are float64, nominal range -1.0 to 1.0 (not enforced)
- A buffer never shares its sample storage with another buffer;
  every constructor path copies
- sample_rate documents the rate of the data; everything produced by
  the codec and the cascade is at the canonical SAMPLE_RATE
"""

from typing import Optional
import numpy as np

from .equalizer import SAMPLE_RATE


class AudioBuffer:
    """
    Mono sample container with explicit ownership.

    Usage:
        buf = AudioBuffer()
        buf.allocate_silence(48000)
        other = AudioBuffer()
        other.copy_from(buf)      # independent copy
        buf.release()             # safe to call more than once
    """

    def __init__(self, sample_rate: int = SAMPLE_RATE):
        self.sample_rate = sample_rate
        self._samples: Optional[np.ndarray] = None

    @classmethod
    def from_samples(cls, samples, sample_rate: int = SAMPLE_RATE) -> "AudioBuffer":
        """Create a buffer holding a copy of the given samples."""
        data = np.array(samples, dtype=np.float64, copy=True)
        if data.ndim != 1:
            raise ValueError("AudioBuffer only holds mono (1D) signals")
        buf = cls(sample_rate)
        buf._samples = data
        return buf

    @classmethod
    def silence(cls, num_samples: int, sample_rate: int = SAMPLE_RATE) -> "AudioBuffer":
        buf = cls(sample_rate)
        buf.allocate_silence(num_samples)
        return buf

    def allocate_silence(self, num_samples: int) -> None:
        """Replace any owned samples with num_samples zeros."""
        if num_samples < 0:
            raise ValueError(f"Sample count must be non-negative: {num_samples}")
        self.release()
        self._samples = np.zeros(num_samples, dtype=np.float64)

    def copy_from(self, other: "AudioBuffer") -> None:
        """Become an independent copy of other (samples and rate)."""
        if other is self:
            return
        self.allocate_silence(other.sample_count)
        if other.sample_count:
            self._samples[:] = other.samples
        self.sample_rate = other.sample_rate

    def copy(self) -> "AudioBuffer":
        dup = AudioBuffer(self.sample_rate)
        dup.copy_from(self)
        return dup

    def release(self) -> None:
        """Drop the owned samples. A no-op on a released buffer."""
        self._samples = None

    @property
    def is_released(self) -> bool:
        return self._samples is None

    @property
    def samples(self) -> np.ndarray:
        """
        The owned sample array.

        A released buffer reads as an empty array.
        """
        if self._samples is None:
            return np.zeros(0, dtype=np.float64)
        return self._samples

    @property
    def sample_count(self) -> int:
        return 0 if self._samples is None else len(self._samples)

    @property
    def duration_seconds(self) -> float:
        return self.sample_count / self.sample_rate

    def __len__(self) -> int:
        return self.sample_count

    def __repr__(self) -> str:
        return f"AudioBuffer(sample_count={self.sample_count}, sample_rate={self.sample_rate})"
