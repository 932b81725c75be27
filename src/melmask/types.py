"""
Plain data types passed between the pipeline stages.

  - AudioSignal: one channel of float samples + sample rate (read-only)
  - MaskInterval: time interval as fractions of total duration
  - Spectrogram: flat row-major dB buffer + time / frequency axes
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)


class AudioSignal:
    def __init__(self, samples, sample_rate: int):
        samples = np.asarray(samples, dtype=np.float64)
        if samples.ndim != 1:
            raise ValueError(f"AudioSignal expects a single channel (1-D samples), got shape {samples.shape}")
        if sample_rate != int(sample_rate):
            raise ValueError(f"sample_rate must be a whole number of Hz, got {sample_rate}")
        if int(sample_rate) <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")
        # own a private copy, frozen so the pipeline can only borrow it
        self._samples = samples.copy()
        self._samples.flags.writeable = False
        self.sample_rate = int(sample_rate)

    @property
    def samples(self) -> np.ndarray:
        return self._samples

    @property
    def num_samples(self) -> int:
        return len(self._samples)

    @property
    def duration(self) -> float:
        return self.num_samples / self.sample_rate

    def __len__(self):
        return self.num_samples

    def __repr__(self):
        return f"AudioSignal(num_samples={self.num_samples}, sample_rate={self.sample_rate})"


@dataclass(frozen=True)
class MaskInterval:
    """
    start / duration are fractions (0-1) of the total signal duration.
    Values outside [0, 1] are accepted and clipped by bounds(); NaN and inf are rejected.
    """
    start: float
    duration: float
    label: Optional[str] = None

    def __post_init__(self):
        if not (math.isfinite(self.start) and math.isfinite(self.duration)):
            raise ValueError(f"MaskInterval start and duration must be finite, got {self.start}, {self.duration}")
        if self.duration < 0:
            raise ValueError(f"MaskInterval duration must be >= 0, got {self.duration}")
        lo, hi = max(0.0, self.start), min(1.0, self.end)
        if lo != self.start or hi != self.end:
            logger.warning("Mask interval [%.4f, %.4f] outside [0, 1], clipped to [%.4f, %.4f]",
                           self.start, self.end, lo, hi)

    @property
    def end(self) -> float:
        return self.start + self.duration

    def bounds(self) -> Optional[Tuple[float, float]]:
        """Interval clipped to [0, 1]; None when nothing of it is left."""
        lo = max(0.0, self.start)
        hi = min(1.0, self.end)
        if hi < lo:
            return None
        return lo, hi

    def covers(self, position: float) -> bool:
        b = self.bounds()
        if b is None:
            return False
        return b[0] <= position <= b[1]


@dataclass
class Spectrogram:
    values: np.ndarray           # flat, length num_frames * mel_bins, row-major (frame, mel)
    num_frames: int
    mel_bins: int
    times: np.ndarray            # seconds, one per frame
    frequencies: np.ndarray      # Hz, mel filter centers
    metadata: dict = field(default_factory=dict)

    def __post_init__(self):
        if self.values.ndim != 1 or len(self.values) != self.num_frames * self.mel_bins:
            raise ValueError(
                f"values must be a flat buffer of {self.num_frames} x {self.mel_bins}, got shape {self.values.shape}"
            )

    @property
    def shape(self) -> Tuple[int, int]:
        return self.num_frames, self.mel_bins

    @property
    def matrix(self) -> np.ndarray:
        # view, no copy
        return self.values.reshape(self.num_frames, self.mel_bins)

    def row(self, frame_index: int) -> np.ndarray:
        start = frame_index * self.mel_bins
        return self.values[start:start + self.mel_bins]
