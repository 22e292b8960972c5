"""Fixed-point encodings used for compact feature logging and offline checks."""

from __future__ import annotations

from dataclasses import dataclass
from math import inf, log10, sqrt

import numpy as np

UNIT_U8_MAX = 255


def quantize_unit_u8(values: np.ndarray | list[float]) -> bytes:
    """Map each value to one byte: clamp to ``[0, 1]`` then ``round(x * 255)``.

    Rounding is half-to-even. Non-finite values encode as 0.
    """
    x = np.asarray(values, dtype=np.float64).ravel()
    x = np.where(np.isfinite(x), x, 0.0)
    x = np.clip(x, 0.0, 1.0)
    return np.rint(x * UNIT_U8_MAX).astype(np.uint8).tobytes()


def quantize_q(values: np.ndarray | list[float], bits: int) -> tuple[np.ndarray, int]:
    """Signed Q-format quantization of values in ``[-1, 1)``.

    Returns ``(codes, clip_count)``. Inputs outside the representable range
    are saturated and counted.
    """
    if bits < 2 or bits > 32:
        raise ValueError(f"bits must be within 2..32, got {bits}")
    x = np.asarray(values, dtype=np.float64).ravel()
    scale = 1 << (bits - 1)
    max_q = scale - 1
    min_q = -scale
    hi = max_q / scale
    clipped = np.clip(x, -1.0, hi)
    clip_count = int(np.count_nonzero(clipped != x))
    codes = np.clip(np.rint(clipped * scale), min_q, max_q).astype(np.int64)
    return codes, clip_count


def dequantize_q(codes: np.ndarray | list[int], bits: int) -> np.ndarray:
    scale = float(1 << (bits - 1))
    return np.asarray(codes, dtype=np.float64) / scale


@dataclass(frozen=True, slots=True)
class QuantizationError:
    snr_db: float
    max_abs_err: float
    rms_err: float


def quantization_error(
    reference: np.ndarray | list[float], test: np.ndarray | list[float]
) -> QuantizationError:
    ref = np.asarray(reference, dtype=np.float64).ravel()
    out = np.asarray(test, dtype=np.float64).ravel()
    if ref.size == 0 or ref.size != out.size:
        raise ValueError("reference and test must be non-empty and of equal length")
    err = ref - out
    sig_power = float(np.dot(ref, ref))
    err_power = float(np.dot(err, err))
    snr_db = inf if err_power == 0.0 else 10.0 * log10(sig_power / err_power)
    return QuantizationError(
        snr_db=snr_db,
        max_abs_err=float(np.max(np.abs(err))),
        rms_err=sqrt(err_power / ref.size),
    )


def ideal_error_bounds(bits: int) -> tuple[float, float]:
    """``(rms, max)`` error of an ideal uniform quantizer with *bits* bits."""
    delta = 1.0 / float(1 << (bits - 1))
    return delta / sqrt(12.0), 0.5 * delta
