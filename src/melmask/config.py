"""
Pipeline configuration.

PipelineConfig holds the three knobs shared by the spectrogram and the
masked reconstruction paths:
  - window_size: FFT length, must be a power of two (default 2048)
  - hop_size: samples between frame starts, 0 < hop_size < window_size (default 512)
  - mel_bins: number of triangular mel filters (default 128)

A bad configuration raises ConfigurationError at construction.
"""

import numbers
from dataclasses import dataclass


class ConfigurationError(ValueError):
    pass


def is_power_of_two(n: int) -> bool:
    return n >= 1 and (n & (n - 1)) == 0


@dataclass(frozen=True)
class PipelineConfig:
    window_size: int = 2048
    hop_size: int = 512
    mel_bins: int = 128

    def __post_init__(self):
        if not isinstance(self.window_size, numbers.Integral) or self.window_size < 2 or not is_power_of_two(self.window_size):
            raise ConfigurationError(f"window_size must be a power of two >= 2, got {self.window_size!r}")
        if not isinstance(self.hop_size, numbers.Integral) or self.hop_size <= 0:
            raise ConfigurationError(f"hop_size must be a positive integer, got {self.hop_size!r}")
        if self.hop_size >= self.window_size:
            # frames must overlap
            raise ConfigurationError(
                f"hop_size ({self.hop_size}) must be smaller than window_size ({self.window_size})"
            )
        if not isinstance(self.mel_bins, numbers.Integral) or self.mel_bins <= 0:
            raise ConfigurationError(f"mel_bins must be a positive integer, got {self.mel_bins!r}")

    @property
    def n_bins(self) -> int:
        # one-sided spectrum size
        return self.window_size // 2 + 1

    @classmethod
    def from_args(cls, args):
        """Build from an argparse namespace (--window-size, --hop, --mel-bins)."""
        kwargs = {}
        for flag, name in (("window_size", "window_size"), ("hop", "hop_size"), ("mel_bins", "mel_bins")):
            value = getattr(args, flag, None)
            if value is not None:
                kwargs[name] = value
        return cls(**kwargs)
