import numpy as np
import pytest

from melmask.types import AudioSignal


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def noise_signal(rng):
    """16384 samples of low-level white noise at 16 kHz."""
    return AudioSignal(rng.uniform(-0.5, 0.5, 16384), 16000)


@pytest.fixture
def sine_signal():
    """1 kHz sine, 1.024 s at 16 kHz."""
    sr = 16000
    t = np.arange(16384) / sr
    return AudioSignal(0.5 * np.sin(2 * np.pi * 1000.0 * t), sr)
