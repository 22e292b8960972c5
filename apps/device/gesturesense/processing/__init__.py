"""Windowed feature pipeline.

- :mod:`~gesturesense.processing.buffers` — ring storage and window counters.
- :mod:`~gesturesense.processing.scheduler` — hop-scheduled :class:`WindowScheduler`.
- :mod:`~gesturesense.processing.stats` — time-domain :class:`StatAggregator`.
- :mod:`~gesturesense.processing.spectral` — Goertzel :class:`SpectralEstimator`.
- :mod:`~gesturesense.processing.features` — :class:`FeatureExtractor` and its vectors.
- :mod:`~gesturesense.processing.quantize` — five-byte :class:`Quantizer`.
"""

from .buffers import ChannelRings, WindowState
from .features import AccelMagnitudeFeatures, FeatureExtractor, FeatureVector
from .quantize import Quantizer
from .scheduler import WindowScheduler
from .spectral import SpectralEstimator, SpectralFeatures
from .stats import StatAggregator, WindowStats

__all__ = [
    "AccelMagnitudeFeatures",
    "ChannelRings",
    "FeatureExtractor",
    "FeatureVector",
    "Quantizer",
    "SpectralEstimator",
    "SpectralFeatures",
    "StatAggregator",
    "WindowScheduler",
    "WindowState",
    "WindowStats",
]
