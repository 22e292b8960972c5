"""Rule-based gesture classification.

Rules are checked in order and the first match wins; the ranges overlap,
so the order is the tie-break. SHAKE uses a strict ``amag_std`` bound and
an inclusive frequency bound, TILT is strict on both ends of both ranges,
and CIRCLE is strict on gyro deviation and inclusive on frequency.
"""

from __future__ import annotations

from enum import IntEnum

from .constants import (
    CIRCLE_MAX_FREQ_HZ,
    CIRCLE_MIN_FREQ_HZ,
    CIRCLE_MIN_GYRO_STD_DPS,
    SHAKE_MIN_FREQ_HZ,
    SHAKE_MIN_STD_G,
    TILT_MAX_FREQ_HZ,
    TILT_MAX_STD_G,
    TILT_MIN_FREQ_HZ,
    TILT_MIN_STD_G,
)
from .processing.features import FeatureVector


class GestureClass(IntEnum):
    NONE = 0
    SHAKE = 1
    TILT = 2
    CIRCLE = 3


def classify(fv: FeatureVector) -> GestureClass:
    amag_std = fv.amag.std
    dom = fv.amag.dominant_frequency

    if amag_std > SHAKE_MIN_STD_G and dom >= SHAKE_MIN_FREQ_HZ:
        return GestureClass.SHAKE
    if TILT_MIN_FREQ_HZ < dom < TILT_MAX_FREQ_HZ and TILT_MIN_STD_G < amag_std < TILT_MAX_STD_G:
        return GestureClass.TILT
    if fv.gyro_std_mean > CIRCLE_MIN_GYRO_STD_DPS and CIRCLE_MIN_FREQ_HZ <= dom <= CIRCLE_MAX_FREQ_HZ:
        return GestureClass.CIRCLE
    return GestureClass.NONE


def gesture_name(cls: GestureClass | int) -> str:
    """Upper-case label for *cls*; ``"UNKNOWN"`` for values outside the enum."""
    try:
        return GestureClass(int(cls)).name
    except ValueError:
        return "UNKNOWN"
