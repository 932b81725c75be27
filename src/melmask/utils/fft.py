"""
Radix-2 decimation-in-time FFT on split real / imag float buffers.

FFTPlan precomputes, for one power-of-two size n:
  - cos / sin tables of length n/2: cos(2*pi*i/n), sin(2*pi*i/n)
  - the bit-reversal permutation
and then transforms caller buffers in place. Plans are read-only after
construction; get_plan(n) hands out one shared plan per size.

Shapes: real, imag are 1-D float64 arrays of length n.
"""

from functools import lru_cache

import numpy as np

from melmask.config import ConfigurationError, is_power_of_two


def bit_reversal_permutation(n: int) -> np.ndarray:
    """perm[i] is the bit-reversed partner of i (butterfly-increment walk)."""
    perm = np.arange(n)
    j = 0
    for i in range(n - 1):
        if i < j:
            perm[i], perm[j] = perm[j], perm[i]
        k = n >> 1
        while k <= j:
            j -= k
            k >>= 1
        j += k
    return perm


class FFTPlan:
    def __init__(self, n: int):
        n = int(n)
        if n < 1 or not is_power_of_two(n):
            raise ConfigurationError(f"FFT size must be a power of two, got {n}")
        self.n = n
        self.stages = n.bit_length() - 1
        i = np.arange(n // 2)
        self.cos = np.cos(2 * np.pi * i / n)
        self.sin = np.sin(2 * np.pi * i / n)
        self.perm = bit_reversal_permutation(n)
        for table in (self.cos, self.sin, self.perm):
            table.flags.writeable = False

    def _check(self, real, imag):
        if len(real) != self.n or len(imag) != self.n:
            raise ValueError(f"FFTPlan of size {self.n} got buffers of length {len(real)}/{len(imag)}")
        # butterflies write through reshape() views
        for buf in (real, imag):
            if not (isinstance(buf, np.ndarray) and buf.flags.c_contiguous and buf.dtype.kind == "f"):
                raise ValueError("FFT buffers must be contiguous float numpy arrays")

    def forward(self, real: np.ndarray, imag: np.ndarray):
        """In-place forward transform."""
        self._check(real, imag)
        n = self.n

        # bit-reversal reorder
        real[:] = real[self.perm]
        imag[:] = imag[self.perm]

        # butterfly stages: blocks of size m, pairs (k, k + m/2)
        for s in range(1, self.stages + 1):
            m = 1 << s
            half = m >> 1
            stride = n // m
            wr = self.cos[0:half * stride:stride]
            wi = -self.sin[0:half * stride:stride]

            re = real.reshape(-1, m)
            im = imag.reshape(-1, m)
            top_r, bot_r = re[:, :half], re[:, half:]
            top_i, bot_i = im[:, :half], im[:, half:]

            tr = wr * bot_r - wi * bot_i
            ti = wr * bot_i + wi * bot_r
            bot_r[...] = top_r - tr
            bot_i[...] = top_i - ti
            top_r += tr
            top_i += ti

    def inverse(self, real: np.ndarray, imag: np.ndarray):
        """In-place inverse: conjugate, forward, conjugate and scale by 1/n."""
        self._check(real, imag)
        np.negative(imag, out=imag)
        self.forward(real, imag)
        real /= self.n
        imag /= -self.n

    def __repr__(self):
        return f"FFTPlan(n={self.n})"


@lru_cache(maxsize=None)
def get_plan(n: int) -> FFTPlan:
    return FFTPlan(n)


def forward_transform(real, imag):
    get_plan(len(real)).forward(real, imag)


def inverse_transform(real, imag):
    get_plan(len(real)).inverse(real, imag)
