from __future__ import annotations

from math import sqrt

import numpy as np


def window_stats(values: np.ndarray | list[float]) -> tuple[float, float, float, float]:
    """Return ``(mean, std, rms, energy)`` of one channel window.

    Sums run in float64. Variance is ``E[x^2] - mean^2`` clamped at zero,
    energy is the unnormalized sum of squares. A window whose samples are
    all identical has a standard deviation of exactly zero.
    """
    x = np.asarray(values, dtype=np.float64).ravel()
    n = x.size
    if n == 0:
        return 0.0, 0.0, 0.0, 0.0
    total = float(np.sum(x))
    sq_sum = float(np.dot(x, x))
    mean = total / n
    mean_sq = sq_sum / n
    variance = mean_sq - mean * mean
    if variance < 0.0 or x.max() == x.min():
        variance = 0.0
    return mean, sqrt(variance), sqrt(mean_sq), sq_sum


def sample_variance(values: np.ndarray | list[float]) -> float:
    """Unbiased variance (denominator ``n - 1``); 0 for fewer than two samples."""
    x = np.asarray(values, dtype=np.float64).ravel()
    if x.size <= 1:
        return 0.0
    return float(np.var(x, ddof=1))


def min_max(values: np.ndarray | list[float]) -> tuple[float, float]:
    x = np.asarray(values, dtype=np.float64).ravel()
    if x.size == 0:
        return 0.0, 0.0
    return float(x.min()), float(x.max())


def median(values: np.ndarray | list[float]) -> float:
    x = np.asarray(values, dtype=np.float64).ravel()
    if x.size == 0:
        return 0.0
    return float(np.median(x))
