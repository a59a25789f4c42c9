"""
Filter Cascade

Applies every band's peaking-EQ biquad to a signal, one band after the
other (in series), lowest band first.

Technical details:
- Each band is a direct-form-I difference equation
      y[n] = (b0*x[n] + b1*x[n-1] + b2*x[n-2] - a1*y[n-1] - a2*y[n-2]) / a0
  evaluated by scipy.signal.lfilter with zero initial state. Every band
  starts from silent history against its own input.
- Output length always equals input length
- Two scratch buffers swap input/output roles between bands; the final
  stage is copied into a fresh buffer owned by the caller
- Progress is reported once per finished band as band / (num_bands - 1)

Cost is O(num_bands * num_samples); the call blocks for its full
duration. Bands must run in order since band i+1 filters band i's output.
"""

import logging
from typing import Callable, Generator, Optional
import numpy as np
from scipy import signal

from .audio_buffer import AudioBuffer
from .equalizer import Equalizer
from .errors import ProcessingCancelled
from .filter_design import Biquad, design_band

logger = logging.getLogger(__name__)

# Receives progress in [0.0, 1.0]. Returning False requests cancellation,
# None or True continues.
ProgressCallback = Callable[[float], Optional[bool]]


def apply_biquad(biquad: Biquad, src: np.ndarray, dst: np.ndarray) -> None:
    """
    Filter src through one biquad into dst (same length).

    Initial conditions x[-1] = x[-2] = y[-1] = y[-2] = 0.
    """
    if len(src) == 0:
        return
    dst[:] = signal.lfilter(biquad.numerator, biquad.denominator, src)


class CascadeProcessor:
    """
    Runs the equalizer's filter bank over a buffer.

    Usage:
        processor = CascadeProcessor(eq)
        output = processor.process(input_buffer, on_progress=print)

    The equalizer must not be modified while a cascade is running.
    """

    def __init__(self, eq: Equalizer):
        self.eq = eq

    def iter_process(self, src: AudioBuffer) -> Generator[float, None, AudioBuffer]:
        """
        Lazy variant of process().

        Yields the progress value after each band and returns the output
        buffer as the generator's return value. Closing the generator
        early discards the partial result.
        """
        num_bands = self.eq.num_bands
        front = src.copy()
        back = AudioBuffer.silence(src.sample_count, src.sample_rate)

        try:
            for band in range(num_bands):
                biquad = design_band(self.eq, band)
                apply_biquad(biquad, front.samples, back.samples)
                # back now holds this band's output and feeds the next band
                front, back = back, front
                logger.debug("Band %d/%d (%.1f Hz) done", band + 1, num_bands,
                             self.eq.frequencies[band])
                yield band / (num_bands - 1)

            result = front.copy()
        finally:
            front.release()
            back.release()

        return result

    def process(
        self,
        src: AudioBuffer,
        on_progress: Optional[ProgressCallback] = None,
    ) -> AudioBuffer:
        """
        Filter src through every band in series.

        Args:
            src: Input buffer (not modified)
            on_progress: Called synchronously after each band with a value
                in [0.0, 1.0]; returning False aborts the cascade

        Returns:
            New buffer of the same length as src

        Raises:
            ProcessingCancelled: on_progress returned False
        """
        logger.info("Processing %d samples through %d bands",
                    src.sample_count, self.eq.num_bands)

        stages = self.iter_process(src)
        completed = 0
        while True:
            try:
                progress = next(stages)
            except StopIteration as done:
                return done.value

            completed += 1
            if on_progress is not None and on_progress(progress) is False:
                stages.close()
                logger.info("Processing cancelled after %d band(s)", completed)
                raise ProcessingCancelled(completed)


def process(
    eq: Equalizer,
    src: AudioBuffer,
    on_progress: Optional[ProgressCallback] = None,
) -> AudioBuffer:
    """Shortcut for CascadeProcessor(eq).process(src, on_progress)."""
    return CascadeProcessor(eq).process(src, on_progress)

