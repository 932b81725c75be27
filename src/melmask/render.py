"""
Spectrogram -> RGB image.

dB values are min/max normalized to v in [0, 1] and colored with a
high-contrast magma-like curve:
    R = v^0.8 * 255,  G = v^1.5 * 200,  B = v^3 * 150 + 40
Rows are flipped so low frequencies sit at the bottom of the image.
"""

import numpy as np
from matplotlib import image as mpimg

from melmask.types import Spectrogram


def normalize(values: np.ndarray) -> np.ndarray:
    if values.size == 0:
        return values.astype(np.float64)
    lo, hi = float(values.min()), float(values.max())
    if hi - lo <= 0:
        return np.zeros_like(values, dtype=np.float64)
    return (values - lo) / (hi - lo)


def colorize(v: np.ndarray) -> np.ndarray:
    rgb = np.empty(v.shape + (3,))
    rgb[..., 0] = np.power(v, 0.8) * 255
    rgb[..., 1] = np.power(v, 1.5) * 200
    rgb[..., 2] = np.power(v, 3) * 150 + 40
    return np.clip(np.floor(rgb), 0, 255).astype(np.uint8)


def spectrogram_to_rgb(spec: Spectrogram) -> np.ndarray:
    """uint8 [mel_bins, num_frames, 3]; time on x, frequency on y."""
    v = normalize(spec.matrix)
    return colorize(v.T[::-1])


def save_spectrogram_image(path, spec: Spectrogram):
    if spec.num_frames == 0:
        raise ValueError("Cannot render an empty spectrogram")
    mpimg.imsave(str(path), spectrogram_to_rgb(spec))
    return path
