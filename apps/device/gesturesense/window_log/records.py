"""Per-window and per-sample output records.

Field order is fixed and shared by every sink. Floating fields are written
with ``FLOAT_DECIMALS`` digits; ``t_ms``, ``class`` and ``quantized_len``
are integers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

from ..classifier import GestureClass, gesture_name
from ..constants import CHANNELS, FLOAT_DECIMALS
from ..processing.features import FeatureVector
from ..sensors import ImuSample

WINDOW_CSV_FIELDS: tuple[str, ...] = (
    "t_ms",
    *CHANNELS,
    "amag_mean",
    "amag_std",
    "amag_rms",
    "energy",
    "dom_freq",
    "bandpower_low",
    "bandpower_high",
    "gx_std",
    "gy_std",
    "gz_std",
    "pitch_rate_std",
    "roll_rate_std",
    "class",
    "latency_ms",
    "quantized_len",
)
WINDOW_CSV_HEADER = ",".join(WINDOW_CSV_FIELDS)

RAW_CSV_FIELDS: tuple[str, ...] = ("t_ms", *CHANNELS)
RAW_CSV_HEADER = ",".join(RAW_CSV_FIELDS)

_INT_FIELDS = frozenset({"t_ms", "class", "quantized_len"})


def _fmt(value: float) -> str:
    return f"{value:.{FLOAT_DECIMALS}f}"


@dataclass(frozen=True, slots=True)
class RawSampleRecord:
    csv_header: ClassVar[str] = RAW_CSV_HEADER

    t_ms: int
    sample: ImuSample

    def to_csv_line(self) -> str:
        return ",".join([str(int(self.t_ms)), *(_fmt(v) for v in self.sample)])


@dataclass(frozen=True, slots=True)
class WindowRecord:
    csv_header: ClassVar[str] = WINDOW_CSV_HEADER

    t_ms: int
    ax: float
    ay: float
    az: float
    gx: float
    gy: float
    gz: float
    amag_mean: float
    amag_std: float
    amag_rms: float
    energy: float
    dom_freq: float
    bandpower_low: float
    bandpower_high: float
    gx_std: float
    gy_std: float
    gz_std: float
    pitch_rate_std: float
    roll_rate_std: float
    gesture_class: GestureClass
    latency_ms: float
    quantized: bytes = field(default=b"")

    @property
    def quantized_len(self) -> int:
        return len(self.quantized)

    @property
    def gesture(self) -> str:
        return gesture_name(self.gesture_class)

    def _value(self, name: str) -> Any:
        if name == "class":
            return int(self.gesture_class)
        return getattr(self, name)

    def values(self) -> list[Any]:
        """Field values in ``WINDOW_CSV_FIELDS`` order."""
        return [self._value(name) for name in WINDOW_CSV_FIELDS]

    def to_csv_line(self) -> str:
        parts: list[str] = []
        for name, value in zip(WINDOW_CSV_FIELDS, self.values()):
            parts.append(str(int(value)) if name in _INT_FIELDS else _fmt(float(value)))
        return ",".join(parts)

    def to_dict(self) -> dict[str, Any]:
        payload = dict(zip(WINDOW_CSV_FIELDS, self.values()))
        payload["gesture"] = self.gesture
        payload["quantized_hex"] = self.quantized.hex()
        return payload


def build_window_record(
    *,
    t_ms: int,
    sample: ImuSample,
    features: FeatureVector,
    gesture_class: GestureClass,
    latency_ms: float,
    quantized: bytes = b"",
    use_gyro: bool = True,
) -> WindowRecord:
    """Assemble the record for one emitted window.

    The raw fields carry the most recent sample. With *use_gyro* off the gyro
    sample and gyro deviation fields are written as zero; the pitch/roll
    placeholders are left as computed.
    """
    amag = features.amag
    if use_gyro:
        gx, gy, gz = sample.gx, sample.gy, sample.gz
        gx_std, gy_std, gz_std = features.gx_std, features.gy_std, features.gz_std
    else:
        gx = gy = gz = 0.0
        gx_std = gy_std = gz_std = 0.0
    return WindowRecord(
        t_ms=int(t_ms),
        ax=sample.ax,
        ay=sample.ay,
        az=sample.az,
        gx=gx,
        gy=gy,
        gz=gz,
        amag_mean=amag.mean,
        amag_std=amag.std,
        amag_rms=amag.rms,
        energy=amag.energy,
        dom_freq=amag.dominant_frequency,
        bandpower_low=amag.bandpower_low,
        bandpower_high=amag.bandpower_high,
        gx_std=gx_std,
        gy_std=gy_std,
        gz_std=gz_std,
        pitch_rate_std=features.pitch_rate_std,
        roll_rate_std=features.roll_rate_std,
        gesture_class=gesture_class,
        latency_ms=float(latency_ms),
        quantized=bytes(quantized),
    )
