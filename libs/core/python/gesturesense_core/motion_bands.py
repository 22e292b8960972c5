from __future__ import annotations

from typing import TypedDict


class MotionBand(TypedDict):
    key: str
    min_hz: float
    max_hz: float
    max_inclusive: bool


SPECTRAL_MAX_HZ = 10.0
"""Highest frequency the gesture spectral estimator evaluates."""

BANDS: tuple[MotionBand, ...] = (
    {"key": "low", "min_hz": 0.5, "max_hz": 3.0, "max_inclusive": False},
    {"key": "high", "min_hz": 3.0, "max_hz": SPECTRAL_MAX_HZ, "max_inclusive": True},
)


def band_for_frequency(hz: float) -> MotionBand | None:
    """Return the band containing *hz*, or ``None`` when it falls outside every band."""
    for band in BANDS:
        if hz < band["min_hz"]:
            continue
        if hz < band["max_hz"] or (band["max_inclusive"] and hz == band["max_hz"]):
            return band
    return None


def band_key_for_frequency(hz: float) -> str | None:
    band = band_for_frequency(hz)
    return band["key"] if band is not None else None
