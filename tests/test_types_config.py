"""
Tests for melmask/config.py and melmask/types.py.

Validates:
    - PipelineConfig defaults and rejection of bad configurations
    - AudioSignal is a read-only single-channel buffer
    - MaskInterval clipping, non-finite rejection, one clipping warning per interval
    - Spectrogram buffer validation
"""

import argparse
import logging

import numpy as np
import pytest

from melmask.config import ConfigurationError, PipelineConfig, is_power_of_two
from melmask.types import AudioSignal, MaskInterval, Spectrogram

# ---------------------------------------------------------------------------
# PipelineConfig
# ---------------------------------------------------------------------------


class TestPipelineConfig:
    def test_defaults(self):
        """2048 / 512 / 128."""
        cfg = PipelineConfig()
        assert (cfg.window_size, cfg.hop_size, cfg.mel_bins) == (2048, 512, 128)
        assert cfg.n_bins == 1025

    @pytest.mark.parametrize("window_size", [0, 1, 3, 1000, 2047])
    def test_window_not_power_of_two(self, window_size):
        """Window sizes other than powers of two >= 2 are rejected."""
        with pytest.raises(ConfigurationError):
            PipelineConfig(window_size=window_size, hop_size=1)

    @pytest.mark.parametrize("hop", [0, -256])
    def test_hop_not_positive(self, hop):
        """hop_size <= 0 is rejected."""
        with pytest.raises(ConfigurationError):
            PipelineConfig(hop_size=hop)

    def test_hop_must_overlap(self):
        """hop_size >= window_size is rejected."""
        with pytest.raises(ConfigurationError):
            PipelineConfig(window_size=512, hop_size=512)

    def test_mel_bins_positive(self):
        """mel_bins <= 0 is rejected."""
        with pytest.raises(ConfigurationError):
            PipelineConfig(mel_bins=0)

    def test_configuration_error_is_value_error(self):
        """Callers catching ValueError also catch config errors."""
        assert issubclass(ConfigurationError, ValueError)

    def test_numpy_integers_accepted(self):
        """numpy integer sizes are fine."""
        assert PipelineConfig(window_size=np.int64(1024), hop_size=np.int32(256)).window_size == 1024

    def test_from_args(self):
        """argparse flags map onto the config; missing flags keep defaults."""
        cfg = PipelineConfig.from_args(argparse.Namespace(window_size=1024, hop=256, mel_bins=None))
        assert cfg == PipelineConfig(1024, 256, 128)

    def test_is_power_of_two(self):
        assert [n for n in range(20) if is_power_of_two(n)] == [1, 2, 4, 8, 16]


# ---------------------------------------------------------------------------
# AudioSignal
# ---------------------------------------------------------------------------


class TestAudioSignal:
    def test_duration(self):
        """duration = num_samples / sample_rate."""
        sig = AudioSignal(np.zeros(8000), 16000)
        assert sig.duration == pytest.approx(0.5)
        assert len(sig) == 8000

    def test_read_only(self):
        """Samples cannot be written through the signal."""
        sig = AudioSignal(np.zeros(16), 8000)
        with pytest.raises(ValueError):
            sig.samples[0] = 1.0

    def test_copies_input(self):
        """Later changes to the caller's array do not leak in."""
        data = np.zeros(16)
        sig = AudioSignal(data, 8000)
        data[0] = 5.0
        assert sig.samples[0] == 0.0

    def test_rejects_multichannel(self):
        """Only one channel is accepted."""
        with pytest.raises(ValueError):
            AudioSignal(np.zeros((2, 16)), 8000)

    @pytest.mark.parametrize("sr", [0, -44100])
    def test_rejects_bad_sample_rate(self, sr):
        """Sample rate must be positive."""
        with pytest.raises(ValueError):
            AudioSignal(np.zeros(16), sr)

    @pytest.mark.parametrize("sr", [44100.7, 16000.5])
    def test_rejects_fractional_sample_rate(self, sr):
        """Non-integer rates are rejected instead of truncated."""
        with pytest.raises(ValueError):
            AudioSignal(np.zeros(16), sr)

    def test_whole_float_sample_rate(self):
        """A float with no fractional part is stored as int."""
        sig = AudioSignal(np.zeros(16), 16000.0)
        assert sig.sample_rate == 16000
        assert isinstance(sig.sample_rate, int)


# ---------------------------------------------------------------------------
# MaskInterval
# ---------------------------------------------------------------------------


class TestMaskInterval:
    def test_bounds_in_range(self):
        """In-range interval is returned as-is."""
        assert MaskInterval(0.2, 0.3).bounds() == pytest.approx((0.2, 0.5))

    def test_bounds_clipped(self):
        """Overhanging interval is clipped to [0, 1]."""
        assert MaskInterval(-0.1, 0.3).bounds() == pytest.approx((0.0, 0.2))
        assert MaskInterval(0.9, 0.3).bounds() == pytest.approx((0.9, 1.0))

    def test_bounds_empty(self):
        """Interval wholly outside [0, 1] clips to nothing."""
        assert MaskInterval(1.5, 0.2).bounds() is None
        assert not MaskInterval(1.5, 0.2).covers(1.0)

    def test_covers(self):
        assert MaskInterval(0.2, 0.3, "cough").covers(0.3)
        assert not MaskInterval(0.2, 0.3).covers(0.6)

    @pytest.mark.parametrize("start, duration", [
        (float("nan"), 0.1),
        (0.5, float("nan")),
        (float("inf"), 0.1),
        (0.2, float("inf")),
        (float("-inf"), 1.0),
    ])
    def test_rejects_non_finite(self, start, duration):
        """NaN and inf start or duration are rejected."""
        with pytest.raises(ValueError):
            MaskInterval(start, duration)

    def test_clipping_warned_once(self, caplog):
        """An out-of-range interval logs one warning, however often it is used."""
        with caplog.at_level(logging.WARNING, logger="melmask.types"):
            mask = MaskInterval(0.9, 0.3)
            mask.bounds()
            mask.bounds()
            mask.covers(0.95)
        assert sum("clipped" in r.getMessage() for r in caplog.records) == 1

    def test_in_range_not_warned(self, caplog):
        with caplog.at_level(logging.WARNING, logger="melmask.types"):
            MaskInterval(0.2, 0.3).bounds()
        assert not caplog.records


# ---------------------------------------------------------------------------
# Spectrogram
# ---------------------------------------------------------------------------


class TestSpectrogram:
    def test_rejects_wrong_buffer_size(self):
        """values must hold exactly num_frames * mel_bins entries."""
        with pytest.raises(ValueError):
            Spectrogram(values=np.zeros(10), num_frames=3, mel_bins=4, times=np.zeros(3), frequencies=np.zeros(4))

    def test_matrix_view(self):
        """matrix reshapes without copying."""
        spec = Spectrogram(values=np.arange(12.0), num_frames=3, mel_bins=4,
                           times=np.zeros(3), frequencies=np.zeros(4))
        assert spec.matrix[1, 0] == 4.0
        spec.matrix[1, 0] = -1.0
        assert spec.values[4] == -1.0
