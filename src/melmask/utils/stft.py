import numpy as np
from numpy.lib.stride_tricks import as_strided


def frame_count(ssize, fsize, hsize):
    # only frames that fit entirely inside the signal; the tail is dropped
    if ssize < fsize:
        return 0
    return (ssize - fsize) // hsize


def frame_offsets(ssize, fsize, hsize):
    return np.arange(frame_count(ssize, fsize, hsize)) * hsize


def stana(sig, fsize, hsize):
    """Read-only [nframe, fsize] view of sig, one row per analysis frame."""
    sig = np.ascontiguousarray(sig)
    nframe = frame_count(len(sig), fsize, hsize)
    if nframe == 0:
        return np.empty((0, fsize), dtype=sig.dtype)
    return as_strided(sig, shape=(nframe, fsize),
                      strides=(sig.itemsize * hsize, sig.itemsize),
                      writeable=False)


class FrameBuffers:
    """Scratch real / imag buffers reused for every frame of one run."""

    def __init__(self, fsize):
        self.real = np.zeros(fsize)
        self.imag = np.zeros(fsize)

    def load(self, frame, wind):
        # windowed frame into real, imag cleared
        np.multiply(frame, wind, out=self.real)
        self.imag.fill(0.0)

    def clear(self):
        self.real.fill(0.0)
        self.imag.fill(0.0)

    def magnitude(self, n_bins, out=None):
        return np.hypot(self.real[:n_bins], self.imag[:n_bins], out=out)
