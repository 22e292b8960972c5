"""Low-frequency spectral features via per-bin Goertzel evaluation.

Only the bins between DC and ``SPECTRAL_MAX_HZ`` are computed, so the cost
is ``O(n * K)`` for ``K`` evaluated bins instead of a full transform. The
Hann window is cached on the estimator instance and rebuilt only when the
window length changes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from gesturesense_core.goertzel import goertzel_bin_powers, hann_coefficients
from gesturesense_core.motion_bands import band_key_for_frequency

from ..constants import MAX_SPECTRAL_BINS, SPECTRAL_MAX_HZ


@dataclass(frozen=True, slots=True)
class SpectralFeatures:
    dominant_frequency: float
    bandpower_low: float
    bandpower_high: float

    @classmethod
    def zero(cls) -> SpectralFeatures:
        return cls(0.0, 0.0, 0.0)


class SpectralEstimator:
    def __init__(self, max_hz: float = SPECTRAL_MAX_HZ, max_bins: int = MAX_SPECTRAL_BINS):
        self.max_hz = float(max_hz)
        self.max_bins = max(1, int(max_bins))
        self._window_len = 0
        self._window = np.empty(0, dtype=np.float64)

    def window_coefficients(self, n: int) -> np.ndarray:
        """Hann coefficients for length *n*, recomputed only on a length change."""
        if n != self._window_len:
            self._window = hann_coefficients(n)
            self._window_len = n
        return self._window

    def bin_powers(
        self, values: np.ndarray | list[float], sample_rate_hz: float
    ) -> tuple[np.ndarray, np.ndarray]:
        """Return ``(freqs_hz, powers)`` for the evaluated bins ``1..K``.

        Both arrays are empty for degenerate input.
        """
        x = np.asarray(values, dtype=np.float64).ravel()
        n = x.size
        fs = float(sample_rate_hz)
        empty = np.empty(0, dtype=np.float64)
        if n <= 1 or not fs > 0.0:
            return empty, empty
        df = fs / n
        kmax = min(int(math.floor(self.max_hz / df)), n // 2, self.max_bins)
        if kmax < 1:
            return empty, empty
        bins = np.arange(1, kmax + 1)
        freqs = bins.astype(np.float64) * df
        if x.max() == x.min():
            # Constant input is all DC; nothing survives mean removal.
            return freqs, np.zeros(kmax, dtype=np.float64)
        windowed = (x - float(np.mean(x))) * self.window_coefficients(n)
        return freqs, goertzel_bin_powers(windowed, bins, n)

    def compute(
        self, values: np.ndarray | list[float], sample_rate_hz: float
    ) -> SpectralFeatures:
        freqs, powers = self.bin_powers(values, sample_rate_hz)
        if powers.size == 0:
            return SpectralFeatures.zero()

        # First bin wins on ties.
        best = int(np.argmax(powers))
        dominant = float(freqs[best]) if powers[best] > 0.0 else 0.0

        low = 0.0
        high = 0.0
        for freq, power in zip(freqs.tolist(), powers.tolist()):
            key = band_key_for_frequency(freq)
            if key == "low":
                low += power
            elif key == "high":
                high += power
        return SpectralFeatures(
            dominant_frequency=dominant, bandpower_low=low, bandpower_high=high
        )
