from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from gesturesense_core.motion_stats import window_stats


@dataclass(frozen=True, slots=True)
class WindowStats:
    mean: float
    std: float
    rms: float
    energy: float

    @classmethod
    def zero(cls) -> WindowStats:
        return cls(0.0, 0.0, 0.0, 0.0)


class StatAggregator:
    """Time-domain statistics over one channel window."""

    def compute(self, values: np.ndarray | list[float]) -> WindowStats:
        mean, std, rms, energy = window_stats(values)
        return WindowStats(mean=mean, std=std, rms=rms, energy=energy)
