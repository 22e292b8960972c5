"""Deterministic synthetic IMU source for bench runs and tests."""

from __future__ import annotations

import numpy as np
from gesturesense.sensors import ImuSample

from .profiles import GRAVITY_G, GestureProfile


class SyntheticImuSource:
    """Generate one sample per :meth:`read` from a :class:`GestureProfile`.

    The noise generator is seeded, so two sources built with the same
    profile, rate and seed produce identical streams. With *duration_s* set
    the source ends (returns ``None``) after that many seconds of samples.
    """

    def __init__(
        self,
        profile: GestureProfile,
        sample_rate_hz: int,
        *,
        seed: int = 0,
        duration_s: float | None = None,
    ):
        if sample_rate_hz <= 0:
            raise ValueError(f"sample_rate_hz must be positive, got {sample_rate_hz}")
        self.profile = profile
        self.sample_rate_hz = int(sample_rate_hz)
        self.rng = np.random.default_rng(seed)
        self.max_samples = (
            None if duration_s is None else int(round(duration_s * self.sample_rate_hz))
        )
        self.index = 0
        self.closed = False

    def sample_at(self, index: int) -> tuple[np.ndarray, np.ndarray]:
        """Noise-free ``(accel_g, gyro_dps)`` for sample *index*."""
        t = index / self.sample_rate_hz
        accel = np.asarray(GRAVITY_G, dtype=np.float64).copy()
        gyro = np.zeros(3, dtype=np.float64)
        for tone in self.profile.tones:
            omega_t = 2.0 * np.pi * tone.freq_hz * t
            accel += np.asarray(tone.accel_g) * np.sin(omega_t)
            gyro += np.asarray(tone.gyro_dps) * np.sin(omega_t + np.asarray(tone.gyro_phase))
        return accel, gyro

    def read(self) -> ImuSample | None:
        if self.closed:
            return None
        if self.max_samples is not None and self.index >= self.max_samples:
            return None
        accel, gyro = self.sample_at(self.index)
        accel = accel + self.rng.normal(0.0, self.profile.accel_noise_g, size=3)
        gyro = gyro + self.rng.normal(0.0, self.profile.gyro_noise_dps, size=3)
        self.index += 1
        return ImuSample(*(float(v) for v in (*accel, *gyro)))

    def close(self) -> None:
        self.closed = True
