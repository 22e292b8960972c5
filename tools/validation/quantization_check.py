#!/usr/bin/env python3
"""Offline fixed-point quantization check (Q15 / Q7 / Q3).

Quantizes a reference block at several bit depths, dequantizes it and
compares the measured error with an ideal uniform quantizer.

Usage::

    python tools/validation/quantization_check.py
    python tools/validation/quantization_check.py --n 512 --amplitude 1.2
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from math import inf, log10, pi, sqrt

import numpy as np
from gesturesense_core.fixed_point import (
    dequantize_q,
    ideal_error_bounds,
    quantization_error,
    quantize_q,
)

DEFAULT_CASES: tuple[tuple[str, int], ...] = (("Q15", 16), ("Q7", 8), ("Q3", 4))


@dataclass(frozen=True, slots=True)
class QuantCaseResult:
    label: str
    bits: int
    clip_count: int
    snr_db: float
    expected_snr_db: float
    rms_err: float
    expected_rms_err: float
    max_abs_err: float
    expected_max_err: float

    @property
    def storage_bytes_per_sample(self) -> float:
        return self.bits / 8.0


def run_cases(
    samples: np.ndarray, cases: tuple[tuple[str, int], ...] = DEFAULT_CASES
) -> list[QuantCaseResult]:
    x = np.asarray(samples, dtype=np.float64).ravel()
    signal_rms = sqrt(float(np.dot(x, x)) / x.size) if x.size else 0.0
    results: list[QuantCaseResult] = []
    for label, bits in cases:
        codes, clips = quantize_q(x, bits)
        err = quantization_error(x, dequantize_q(codes, bits))
        rms_bound, max_bound = ideal_error_bounds(bits)
        expected_snr = 20.0 * log10(signal_rms / rms_bound) if signal_rms > 0 else -inf
        results.append(
            QuantCaseResult(
                label=label,
                bits=bits,
                clip_count=clips,
                snr_db=err.snr_db,
                expected_snr_db=expected_snr,
                rms_err=err.rms_err,
                expected_rms_err=rms_bound,
                max_abs_err=err.max_abs_err,
                expected_max_err=max_bound,
            )
        )
    return results


def reference_block(n: int, amplitude: float = 0.9) -> np.ndarray:
    t = np.arange(n, dtype=np.float64) / n
    return amplitude * (0.6 * np.sin(2.0 * pi * 5.0 * t) + 0.4 * np.sin(2.0 * pi * 17.0 * t))


def main() -> None:
    parser = argparse.ArgumentParser(description="Fixed-point quantization check")
    parser.add_argument("--n", type=int, default=256, help="Samples per block")
    parser.add_argument(
        "--amplitude", type=float, default=0.9, help="Peak scale; above 1 forces clipping"
    )
    args = parser.parse_args()

    x = reference_block(args.n, args.amplitude)
    print(f"Samples per block: {args.n}")
    print(f"Reference type: float32 ({4 * args.n} bytes/block)")
    for r in run_cases(x):
        print(f"\n[{r.label} | {r.bits}-bit]")
        print(
            f"  Storage: {r.storage_bytes_per_sample:.2f} bytes/sample"
            f"  (block: {r.storage_bytes_per_sample * args.n:.1f} bytes)"
        )
        print(f"  Clip count: {r.clip_count} (of {args.n})")
        print(f"  Actual SNR: {r.snr_db:.2f} dB (ideal {r.expected_snr_db:.2f} dB)")
        print(f"  RMS error: {r.rms_err:.7f} (expected: {r.expected_rms_err:.7f})")
        print(f"  Max |error|: {r.max_abs_err:.7f} (expected bound: {r.expected_max_err:.7f})")


if __name__ == "__main__":
    main()
