"""Ring buffer dataclasses for windowed sensor storage.

``ChannelRings`` holds the six lock-step channel rings as one
``(channels, capacity)`` array sharing a single write cursor, together with
the :class:`WindowState` counters the scheduler uses to decide when a
window is due.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


@dataclass(slots=True)
class WindowState:
    # Next write position; also the oldest sample once the ring is full.
    write_index: int = 0
    # Saturates at the ring capacity.
    filled_count: int = 0
    # Samples since the last emitted window.
    hop_count: int = 0


@dataclass(slots=True)
class ChannelRings:
    data: np.ndarray
    capacity: int
    state: WindowState = field(default_factory=WindowState)
    total_samples: int = 0
    windows_emitted: int = 0

    @classmethod
    def allocate(cls, channel_count: int, capacity: int) -> ChannelRings:
        return cls(data=np.zeros((channel_count, capacity), dtype=np.float64), capacity=capacity)

    @property
    def is_full(self) -> bool:
        return self.state.filled_count == self.capacity

    def clear(self) -> None:
        """Zero the rings and counters without reallocating."""
        self.data[:] = 0.0
        self.state = WindowState()
        self.total_samples = 0
        self.windows_emitted = 0
