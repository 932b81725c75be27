"""
Hann window, Hz <-> mel conversion and the triangular mel filterbank.
"""

from dataclasses import dataclass
from functools import lru_cache

import numpy as np


def hann_window(n: int) -> np.ndarray:
    # symmetric Hann: zero at both ends
    if n == 1:
        return np.ones(1)
    i = np.arange(n)
    return 0.5 * (1 - np.cos(2 * np.pi * i / (n - 1)))


def hz_to_mel(hz):
    return 2595.0 * np.log10(1.0 + np.asarray(hz, dtype=np.float64) / 700.0)


def mel_to_hz(mel):
    return 700.0 * (np.power(10.0, np.asarray(mel, dtype=np.float64) / 2595.0) - 1.0)


@dataclass(frozen=True)
class MelFilterbank:
    weights: np.ndarray        # [mel_bins, n/2 + 1]
    bin_points: np.ndarray     # [mel_bins + 2] FFT bin indices, non-decreasing
    hz_points: np.ndarray      # [mel_bins + 2] boundary frequencies

    @property
    def mel_bins(self) -> int:
        return self.weights.shape[0]

    @property
    def center_frequencies(self) -> np.ndarray:
        return self.hz_points[1:-1]

    def project(self, magnitudes: np.ndarray, out: np.ndarray = None) -> np.ndarray:
        """Weighted sum of the one-sided magnitudes per filter."""
        return np.dot(self.weights, magnitudes, out=out)


def build_mel_filterbank(n: int, sample_rate: int, mel_bins: int) -> MelFilterbank:
    n_bins = n // 2 + 1
    min_mel = hz_to_mel(0.0)
    max_mel = hz_to_mel(sample_rate / 2.0)
    mel_points = min_mel + np.arange(mel_bins + 2) * (max_mel - min_mel) / (mel_bins + 1)
    hz_points = mel_to_hz(mel_points)

    bin_points = np.floor((n + 1) * hz_points / sample_rate).astype(np.int64)
    # round-off at Nyquist must not push the last point past n/2
    bin_points = np.clip(bin_points, 0, n // 2)

    weights = np.zeros((mel_bins, n_bins))
    for m in range(mel_bins):
        left, center, right = bin_points[m], bin_points[m + 1], bin_points[m + 2]
        # empty ranges (coinciding points) leave the weights at 0
        if center > left:
            j = np.arange(left, center)
            weights[m, j] = (j - left) / (center - left)
        if right > center:
            j = np.arange(center, right)
            weights[m, j] = (right - j) / (right - center)

    for arr in (weights, bin_points, hz_points):
        arr.flags.writeable = False
    return MelFilterbank(weights=weights, bin_points=bin_points, hz_points=hz_points)


@lru_cache(maxsize=32)
def mel_filterbank(n: int, sample_rate: int, mel_bins: int) -> MelFilterbank:
    """Shared filterbank per (n, sample_rate, mel_bins)."""
    return build_mel_filterbank(n, sample_rate, mel_bins)


@lru_cache(maxsize=32)
def cached_hann(n: int) -> np.ndarray:
    w = hann_window(n)
    w.flags.writeable = False
    return w
