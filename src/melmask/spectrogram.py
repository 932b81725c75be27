"""
SpectrogramBuilder
------------------
Log-magnitude mel spectrogram of a mono signal.

Per frame (hop_size apart, window_size long):
  Hann window -> forward FFT -> |X| for bins 0..n/2 -> mel filter sums -> 20*log10(max(1e-10, .))

Output rows land in one flat row-major buffer [num_frames * mel_bins].
Signals shorter than window_size give zero frames (not an error).
"""

import logging

import numpy as np

from melmask.config import PipelineConfig
from melmask.types import AudioSignal, Spectrogram
from melmask.utils.fft import get_plan
from melmask.utils.stft import FrameBuffers, frame_count, stana
from melmask.utils.window import cached_hann, mel_filterbank

logger = logging.getLogger(__name__)

DB_FLOOR = 1e-10


class SpectrogramBuilder:
    def __init__(self, config: PipelineConfig = None):
        self.config = config or PipelineConfig()
        self.plan = get_plan(self.config.window_size)
        self.window = cached_hann(self.config.window_size)

    def build(self, signal: AudioSignal) -> Spectrogram:
        cfg = self.config
        n, hop, mel_bins = cfg.window_size, cfg.hop_size, cfg.mel_bins
        sr = signal.sample_rate

        fbank = mel_filterbank(n, sr, mel_bins)
        num_frames = frame_count(signal.num_samples, n, hop)
        if num_frames == 0:
            logger.warning("Signal of %d samples is shorter than one window (%d + hop %d): empty spectrogram",
                           signal.num_samples, n, hop)

        values = np.empty(num_frames * mel_bins)
        frames = stana(signal.samples, n, hop)
        bufs = FrameBuffers(n)
        mags = np.empty(cfg.n_bins)

        for f in range(num_frames):
            bufs.load(frames[f], self.window)
            self.plan.forward(bufs.real, bufs.imag)
            bufs.magnitude(cfg.n_bins, out=mags)
            row = values[f * mel_bins:(f + 1) * mel_bins]
            fbank.project(mags, out=row)

        np.maximum(values, DB_FLOOR, out=values)
        np.log10(values, out=values)
        values *= 20.0

        times = np.arange(num_frames) * hop / sr
        logger.debug("spectrogram: %d frames x %d mel bins (n=%d, hop=%d, sr=%d)",
                     num_frames, mel_bins, n, hop, sr)
        return Spectrogram(
            values=values,
            num_frames=num_frames,
            mel_bins=mel_bins,
            times=times,
            frequencies=np.array(fbank.center_frequencies),
            metadata={"sample_rate": sr, "window_size": n, "hop_size": hop},
        )


def compute_spectrogram(signal: AudioSignal, window_size=2048, hop_size=512, mel_bins=128) -> Spectrogram:
    cfg = PipelineConfig(window_size=window_size, hop_size=hop_size, mel_bins=mel_bins)
    return SpectrogramBuilder(cfg).build(signal)
