"""Per-window feature extraction across the six sensor channels.

The accelerometer is reduced to its per-sample magnitude, which feeds both
the time-domain statistics and the spectral estimator. Each gyro axis only
contributes its standard deviation. ``pitch_rate_std`` and
``roll_rate_std`` are a fixed rescaling of the gyro y/x deviation, not an
orientation estimate.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

import numpy as np

from ..constants import CHANNELS, RATE_STD_SCALE
from .spectral import SpectralEstimator, SpectralFeatures
from .stats import StatAggregator


@dataclass(frozen=True, slots=True)
class AccelMagnitudeFeatures:
    mean: float
    std: float
    rms: float
    energy: float
    dominant_frequency: float
    bandpower_low: float
    bandpower_high: float


@dataclass(frozen=True, slots=True)
class FeatureVector:
    amag: AccelMagnitudeFeatures
    gx_std: float
    gy_std: float
    gz_std: float
    pitch_rate_std: float
    roll_rate_std: float

    @property
    def gyro_std_mean(self) -> float:
        return (self.gx_std + self.gy_std + self.gz_std) / 3.0

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


class FeatureExtractor:
    def __init__(
        self,
        *,
        include_spectral: bool = True,
        stats: StatAggregator | None = None,
        spectral: SpectralEstimator | None = None,
    ):
        self.include_spectral = include_spectral
        self.stats = stats or StatAggregator()
        self.spectral = spectral or SpectralEstimator()

    def compute_features(
        self,
        ax: np.ndarray,
        ay: np.ndarray,
        az: np.ndarray,
        gx: np.ndarray,
        gy: np.ndarray,
        gz: np.ndarray,
        n: int,
        sample_rate_hz: float,
    ) -> FeatureVector:
        """Build one :class:`FeatureVector` from the first *n* samples of each channel."""
        channels = [np.asarray(c, dtype=np.float64).ravel() for c in (ax, ay, az, gx, gy, gz)]
        n = max(0, min(int(n), *(c.size for c in channels)))
        ax_w, ay_w, az_w, gx_w, gy_w, gz_w = (c[:n] for c in channels)

        amag = np.sqrt(ax_w * ax_w + ay_w * ay_w + az_w * az_w)
        amag_stats = self.stats.compute(amag)
        if self.include_spectral:
            spectral = self.spectral.compute(amag, sample_rate_hz)
        else:
            spectral = SpectralFeatures.zero()

        gx_std = self.stats.compute(gx_w).std
        gy_std = self.stats.compute(gy_w).std
        gz_std = self.stats.compute(gz_w).std

        return FeatureVector(
            amag=AccelMagnitudeFeatures(
                mean=amag_stats.mean,
                std=amag_stats.std,
                rms=amag_stats.rms,
                energy=amag_stats.energy,
                dominant_frequency=spectral.dominant_frequency,
                bandpower_low=spectral.bandpower_low,
                bandpower_high=spectral.bandpower_high,
            ),
            gx_std=gx_std,
            gy_std=gy_std,
            gz_std=gz_std,
            pitch_rate_std=gy_std * RATE_STD_SCALE,
            roll_rate_std=gx_std * RATE_STD_SCALE,
        )

    def compute_from_block(self, block: np.ndarray, sample_rate_hz: float) -> FeatureVector:
        """Convenience wrapper for a ``(6, n)`` block in ``CHANNELS`` order."""
        if block.ndim != 2 or block.shape[0] != len(CHANNELS):
            raise ValueError(f"expected a ({len(CHANNELS)}, n) block, got shape {block.shape}")
        return self.compute_features(*block, n=block.shape[1], sample_rate_hz=sample_rate_hz)
