"""Goertzel single-bin power estimation.

Canonical definition shared by the runtime spectral estimator and the
offline validation tools. The recurrence runs in float64 for every
evaluated bin simultaneously; each bin still sees the exact per-sample
recurrence ``s = x + 2cos(w)*s1 - s2``.
"""

from __future__ import annotations

from math import cos, pi, sin

import numpy as np


def hann_coefficients(n: int) -> np.ndarray:
    """Symmetric Hann window ``0.5*(1 - cos(2*pi*i/(n-1)))``; ``[1.0]`` for ``n == 1``."""
    if n <= 0:
        return np.empty(0, dtype=np.float64)
    return np.hanning(n).astype(np.float64)


def goertzel_power(samples: np.ndarray | list[float], k: int, n: int | None = None) -> float:
    """Power of DFT bin *k* of *samples* via the scalar Goertzel recurrence."""
    values = [float(v) for v in samples]
    size = int(n) if n is not None else len(values)
    if size <= 0:
        return 0.0
    omega = 2.0 * pi * float(k) / float(size)
    cosw = cos(omega)
    sinw = sin(omega)
    coeff = 2.0 * cosw
    s_prev = 0.0
    s_prev2 = 0.0
    for x in values:
        s = x + coeff * s_prev - s_prev2
        s_prev2 = s_prev
        s_prev = s
    real = s_prev - s_prev2 * cosw
    imag = s_prev2 * sinw
    return real * real + imag * imag


def goertzel_bin_powers(
    samples: np.ndarray,
    bins: np.ndarray | list[int],
    n: int | None = None,
) -> np.ndarray:
    """Goertzel power for each bin index in *bins*, evaluated in one pass."""
    x = np.asarray(samples, dtype=np.float64).ravel()
    k = np.asarray(bins, dtype=np.float64).ravel()
    size = int(n) if n is not None else x.size
    if k.size == 0 or size <= 0:
        return np.zeros(k.size, dtype=np.float64)
    omega = 2.0 * np.pi * k / float(size)
    cosw = np.cos(omega)
    sinw = np.sin(omega)
    coeff = 2.0 * cosw
    s_prev = np.zeros(k.size, dtype=np.float64)
    s_prev2 = np.zeros(k.size, dtype=np.float64)
    for value in x:
        s = value + coeff * s_prev - s_prev2
        s_prev2 = s_prev
        s_prev = s
    real = s_prev - s_prev2 * cosw
    imag = s_prev2 * sinw
    return real * real + imag * imag
