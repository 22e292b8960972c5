#!/usr/bin/env python3
"""Offline spectral cross-check: radix-2 FFT vs numpy vs Goertzel.

Not part of the runtime path. Builds a two-tone test signal, runs an
in-place iterative Cooley-Tukey transform, picks the top-K single-sided
peaks and confirms that both the radix-2 transform and the Goertzel
recurrence agree with ``numpy.fft``.

Usage::

    python tools/validation/fft_reference.py
    python tools/validation/fft_reference.py --fs 2200 --n 256 --peaks 5
"""

from __future__ import annotations

import argparse
from math import pi

import numpy as np
from gesturesense_core.goertzel import goertzel_bin_powers

HAMMING_COHERENT_GAIN = 0.54


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def fft_radix2(values: np.ndarray | list[complex], *, inverse: bool = False) -> np.ndarray:
    """Iterative radix-2 decimation-in-time transform; the inverse is scaled by ``1/n``."""
    x = np.asarray(values, dtype=np.complex128).ravel().copy()
    n = x.size
    if not is_power_of_two(n):
        raise ValueError(f"length must be a power of two, got {n}")

    j = 0
    for i in range(1, n):
        bit = n >> 1
        while j & bit:
            j ^= bit
            bit >>= 1
        j |= bit
        if i < j:
            x[i], x[j] = x[j], x[i]

    sign = 1.0 if inverse else -1.0
    size = 2
    while size <= n:
        half = size // 2
        twiddle = np.exp(sign * 2j * pi * np.arange(half) / size)
        for start in range(0, n, size):
            top = x[start : start + half].copy()
            bottom = x[start + half : start + size] * twiddle
            x[start : start + half] = top + bottom
            x[start + half : start + size] = top - bottom
        size *= 2

    if inverse:
        x /= n
    return x


def hamming_window(n: int) -> np.ndarray:
    return np.hamming(n).astype(np.float64)


def magnitude_spectrum(
    samples: np.ndarray, sample_rate_hz: float
) -> tuple[np.ndarray, np.ndarray]:
    """Single-sided amplitude spectrum of a Hamming-windowed block.

    Amplitudes are corrected for the window's coherent gain so a pure tone
    of amplitude ``A`` on a bin centre reads approximately ``A``.
    """
    x = np.asarray(samples, dtype=np.float64).ravel()
    n = x.size
    spectrum = fft_radix2(x * hamming_window(n))
    scale = (2.0 / n) / HAMMING_COHERENT_GAIN
    mag = np.abs(spectrum[: n // 2 + 1]) * scale
    freqs = np.arange(n // 2 + 1, dtype=np.float64) * (sample_rate_hz / n)
    return freqs, mag


def top_k_peaks(mag: np.ndarray, k: int, exclude_below: int = 1) -> list[tuple[int, float]]:
    """Return up to *k* ``(bin, value)`` pairs, largest first, skipping bins below *exclude_below*."""
    taken: list[tuple[int, float]] = []
    used: set[int] = set()
    for _ in range(max(0, k)):
        best_i = -1
        best_v = -1.0
        for i in range(exclude_below, len(mag)):
            if i in used:
                continue
            value = float(mag[i])
            if value > best_v:
                best_v = value
                best_i = i
        if best_i < 0:
            break
        used.add(best_i)
        taken.append((best_i, best_v))
    return taken


def max_relative_error(reference: np.ndarray, test: np.ndarray) -> float:
    ref = np.asarray(reference, dtype=np.float64)
    out = np.asarray(test, dtype=np.float64)
    denom = max(float(np.max(np.abs(ref))), 1e-300)
    return float(np.max(np.abs(ref - out))) / denom


def compare_transforms(samples: np.ndarray) -> dict[str, float]:
    """Relative deviation of radix-2 and Goertzel results from ``numpy.fft``."""
    x = np.asarray(samples, dtype=np.float64).ravel()
    n = x.size
    reference = np.fft.fft(x)
    radix2 = fft_radix2(x)
    bins = np.arange(1, n // 2)
    ref_power = np.abs(reference[bins]) ** 2
    goertzel = goertzel_bin_powers(x, bins, n)
    return {
        "radix2_vs_numpy": max_relative_error(np.abs(reference), np.abs(radix2)),
        "goertzel_vs_numpy": max_relative_error(ref_power, goertzel),
        "inverse_roundtrip": max_relative_error(x, fft_radix2(radix2, inverse=True).real),
    }


def two_tone_signal(sample_rate_hz: float, n: int) -> np.ndarray:
    t = np.arange(n, dtype=np.float64) / sample_rate_hz
    return 0.7 * np.sin(2.0 * pi * 120.0 * t) + 0.3 * np.sin(2.0 * pi * 440.0 * t)


def main() -> None:
    parser = argparse.ArgumentParser(description="Radix-2 / Goertzel spectral cross-check")
    parser.add_argument("--fs", type=float, default=2200.0, help="Sample rate in Hz")
    parser.add_argument("--n", type=int, default=256, help="Power-of-two block size")
    parser.add_argument("--peaks", type=int, default=5, help="Number of peaks to report")
    args = parser.parse_args()

    if not is_power_of_two(args.n):
        raise SystemExit(f"--n must be a power of two, got {args.n}")

    x = two_tone_signal(args.fs, args.n)
    freqs, mag = magnitude_spectrum(x, args.fs)
    df = args.fs / args.n

    print(f"fs={args.fs:.1f} Hz, N={args.n}, resolution df={df:.3f} Hz")
    print(f"Top {args.peaks} peaks (excluding DC):")
    for rank, (idx, value) in enumerate(top_k_peaks(mag, args.peaks), start=1):
        print(f"  Peak {rank}: bin={idx}  freq={freqs[idx]:.2f} Hz  amplitude~{value:.4f}")

    print("\nMax relative error vs numpy.fft:")
    for name, err in compare_transforms(x).items():
        print(f"  {name:<20} {err:.3e}")


if __name__ == "__main__":
    main()
