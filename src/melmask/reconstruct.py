"""
MaskedReconstructor
-------------------
Silences whole frames that fall inside mask intervals, then resynthesizes
by windowed overlap-add.

Per frame i (start = i * hop):
  Hann window -> forward FFT -> (zero real/imag if masked) -> inverse FFT
  -> synthesis window -> add into out[start:start+n], add w^2 into norm

out /= norm wherever norm > 1e-10. Frame positions are start / num_samples,
the same hop-based time the spectrogram time axis uses, so masks drawn
against the spectrogram hit the frames shown under them.
"""

import logging
from typing import Iterable, Sequence

import numpy as np

from melmask.config import PipelineConfig
from melmask.types import AudioSignal, MaskInterval
from melmask.utils.fft import get_plan
from melmask.utils.stft import FrameBuffers, frame_count, frame_offsets, stana
from melmask.utils.window import cached_hann

logger = logging.getLogger(__name__)

NORM_EPS = 1e-10


def frame_positions(num_samples: int, window_size: int, hop_size: int) -> np.ndarray:
    """Start of every analysis frame as a fraction of the signal length."""
    offsets = frame_offsets(num_samples, window_size, hop_size)
    if num_samples == 0:
        return offsets.astype(np.float64)
    return offsets / num_samples


def masked_frames(positions: np.ndarray, masks: Iterable[MaskInterval]) -> np.ndarray:
    flags = np.zeros(len(positions), dtype=bool)
    for mask in masks:
        bounds = mask.bounds()
        if bounds is None:
            continue
        lo, hi = bounds
        flags |= (positions >= lo) & (positions <= hi)
    return flags


class MaskedReconstructor:
    def __init__(self, config: PipelineConfig = None):
        self.config = config or PipelineConfig()
        self.plan = get_plan(self.config.window_size)
        self.window = cached_hann(self.config.window_size)

    def frame_mask(self, signal: AudioSignal, masks: Sequence[MaskInterval]) -> np.ndarray:
        cfg = self.config
        positions = frame_positions(signal.num_samples, cfg.window_size, cfg.hop_size)
        return masked_frames(positions, masks)

    def reconstruct(self, signal: AudioSignal, masks: Sequence[MaskInterval] = ()) -> AudioSignal:
        cfg = self.config
        n, hop = cfg.window_size, cfg.hop_size
        length = signal.num_samples

        out = np.zeros(length)
        norm = np.zeros(length)
        num_frames = frame_count(length, n, hop)
        if num_frames == 0:
            logger.warning("Signal of %d samples is shorter than one window (%d + hop %d): nothing to resynthesize",
                           length, n, hop)
            return AudioSignal(out, signal.sample_rate)

        flags = self.frame_mask(signal, masks)
        frames = stana(signal.samples, n, hop)
        bufs = FrameBuffers(n)
        w = self.window
        w2 = w * w

        for f in range(num_frames):
            start = f * hop
            if flags[f]:
                bufs.clear()
            else:
                bufs.load(frames[f], w)
                self.plan.forward(bufs.real, bufs.imag)
            self.plan.inverse(bufs.real, bufs.imag)
            out[start:start + n] += bufs.real * w
            norm[start:start + n] += w2

        safe = norm > NORM_EPS
        out[safe] /= norm[safe]

        logger.debug("reconstruct: %d frames, %d masked (n=%d, hop=%d)",
                     num_frames, int(flags.sum()), n, hop)
        return AudioSignal(out, signal.sample_rate)


def apply_mask_and_reconstruct(signal: AudioSignal, masks: Sequence[MaskInterval] = (),
                               window_size=2048, hop_size=512) -> AudioSignal:
    cfg = PipelineConfig(window_size=window_size, hop_size=hop_size)
    return MaskedReconstructor(cfg).reconstruct(signal, masks)
