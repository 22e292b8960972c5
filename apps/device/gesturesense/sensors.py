"""Sensor sample sources.

A source hands the sampling loop one scaled, bias-corrected six-axis sample
per tick (accelerometer in g, gyroscope in deg/s). Finite sources return
``None`` once exhausted, which ends the loop.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import NamedTuple, Protocol, TextIO

from .constants import CHANNELS

LOGGER = logging.getLogger(__name__)


class ImuSample(NamedTuple):
    ax: float
    ay: float
    az: float
    gx: float
    gy: float
    gz: float


class SensorSource(Protocol):
    def read(self) -> ImuSample | None: ...

    def close(self) -> None: ...


class IterableSensorSource:
    """Adapt any iterable of six-value rows into a :class:`SensorSource`."""

    def __init__(self, samples: Iterable[Iterable[float]]):
        self._it: Iterator[Iterable[float]] | None = iter(samples)

    def read(self) -> ImuSample | None:
        if self._it is None:
            return None
        row = next(self._it, None)
        if row is None:
            self._it = None
            return None
        return ImuSample(*(float(v) for v in row))

    def close(self) -> None:
        self._it = None


class ReplaySensorSource:
    """Replay a raw sample log (``t_ms,ax,ay,az,gx,gy,gz``) row by row.

    The timestamp column is ignored; pacing comes from the sampling loop.
    Rows that cannot be parsed are skipped with a warning.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._fh: TextIO | None = self.path.open("r", encoding="utf-8", newline="")
        self._reader = csv.DictReader(self._fh)
        fields = self._reader.fieldnames or []
        missing = [name for name in CHANNELS if name not in fields]
        if missing:
            self.close()
            raise ValueError(f"{self.path} is missing columns: {', '.join(missing)}")
        self.rows_read = 0
        self.rows_skipped = 0

    def read(self) -> ImuSample | None:
        if self._fh is None:
            return None
        for row in self._reader:
            try:
                sample = ImuSample(*(float(row[name]) for name in CHANNELS))
            except (TypeError, ValueError):
                self.rows_skipped += 1
                LOGGER.warning(
                    "Skipping malformed row %d in %s",
                    self._reader.line_num,
                    self.path,
                )
                continue
            self.rows_read += 1
            return sample
        LOGGER.info("Replay of %s finished after %d samples", self.path, self.rows_read)
        self.close()
        return None

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None
