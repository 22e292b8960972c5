"""Hop-scheduled sliding windows over the six sensor channels.

``WindowScheduler`` is the only owner of the ring storage. Callers push one
sample per tick, ask :meth:`WindowScheduler.poll_ready` whether a window is
due, and receive linearized copies through :meth:`extract_window` /
:meth:`extract_all`; the rings themselves never leave this module.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from ..config import ConfigError
from ..constants import CHANNELS
from .buffers import ChannelRings, WindowState

LOGGER = logging.getLogger(__name__)


class WindowScheduler:
    def __init__(
        self,
        window_samples: int,
        hop_samples: int,
        channels: Sequence[str] = CHANNELS,
    ):
        if int(window_samples) <= 0:
            raise ConfigError(f"window_samples must be positive, got {window_samples!r}")
        if int(hop_samples) <= 0:
            raise ConfigError(f"hop_samples must be positive, got {hop_samples!r}")
        self.window_samples = int(window_samples)
        self.hop_samples = int(hop_samples)
        self.channels = tuple(channels)
        self._channel_index = {name: idx for idx, name in enumerate(self.channels)}
        self._rings = ChannelRings.allocate(len(self.channels), self.window_samples)

    # -- state ----------------------------------------------------------------

    @property
    def state(self) -> WindowState:
        """Copy of the current counters."""
        s = self._rings.state
        return WindowState(
            write_index=s.write_index, filled_count=s.filled_count, hop_count=s.hop_count
        )

    @property
    def total_samples(self) -> int:
        return self._rings.total_samples

    @property
    def windows_emitted(self) -> int:
        return self._rings.windows_emitted

    def reset(self) -> None:
        self._rings.clear()
        LOGGER.info("Window scheduler reset (capacity %d)", self.window_samples)

    # -- ingest ---------------------------------------------------------------

    def push_sample(self, sample: Sequence[float]) -> None:
        """Write one value per channel at the shared cursor and advance it."""
        if len(sample) != len(self.channels):
            raise ValueError(
                f"expected {len(self.channels)} channel values, got {len(sample)}"
            )
        rings = self._rings
        state = rings.state
        rings.data[:, state.write_index] = sample
        state.write_index = (state.write_index + 1) % rings.capacity
        if state.filled_count < rings.capacity:
            state.filled_count += 1
        state.hop_count += 1
        rings.total_samples += 1

    def poll_ready(self) -> bool:
        """Return True when a full window is due; observing True restarts the hop."""
        state = self._rings.state
        if state.filled_count == self.window_samples and state.hop_count >= self.hop_samples:
            state.hop_count = 0
            self._rings.windows_emitted += 1
            return True
        return False

    # -- snapshots ------------------------------------------------------------

    def _resolve_channel(self, channel: str | int) -> int:
        if isinstance(channel, str):
            try:
                return self._channel_index[channel]
            except KeyError:
                raise ValueError(f"unknown channel {channel!r}") from None
        idx = int(channel)
        if not 0 <= idx < len(self.channels):
            raise ValueError(f"channel index {idx} out of range")
        return idx

    def extract_window(self, channel: str | int) -> np.ndarray:
        """Chronological copy (oldest first) of one channel's ring."""
        row = self._rings.data[self._resolve_channel(channel)]
        start = self._rings.state.write_index
        return np.concatenate((row[start:], row[:start]))

    def extract_all(self) -> np.ndarray:
        """Chronological ``(channels, window_samples)`` copy of every ring."""
        data = self._rings.data
        start = self._rings.state.write_index
        return np.concatenate((data[:, start:], data[:, :start]), axis=1)
