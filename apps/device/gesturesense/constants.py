"""Shared pipeline constants — single source of truth.

Every numeric literal that appears in more than one module should live here
so that a change only needs to happen in one place.
"""

from __future__ import annotations

from typing import Final

from gesturesense_core.motion_bands import SPECTRAL_MAX_HZ as SPECTRAL_MAX_HZ

# ---------------------------------------------------------------------------
# Channels
# ---------------------------------------------------------------------------
CHANNELS: Final[tuple[str, ...]] = ("ax", "ay", "az", "gx", "gy", "gz")
"""Lock-step sensor channels: accelerometer in g, gyroscope in deg/s."""


# ---------------------------------------------------------------------------
# Spectral estimator
# ---------------------------------------------------------------------------
MAX_SPECTRAL_BINS: Final[int] = 256
"""Upper bound on Goertzel bins evaluated per window."""

# ---------------------------------------------------------------------------
# Orientation placeholder
# ---------------------------------------------------------------------------
RATE_STD_SCALE: Final[float] = 0.001
"""pitch/roll rate std are the gyro y/x std times this factor. Not an
orientation estimate."""

# ---------------------------------------------------------------------------
# Classifier thresholds (empirical)
# ---------------------------------------------------------------------------
SHAKE_MIN_STD_G: Final[float] = 0.05
SHAKE_MIN_FREQ_HZ: Final[float] = 3.0

TILT_MIN_FREQ_HZ: Final[float] = 0.2
TILT_MAX_FREQ_HZ: Final[float] = 2.0
TILT_MIN_STD_G: Final[float] = 0.01
TILT_MAX_STD_G: Final[float] = 0.3

CIRCLE_MIN_GYRO_STD_DPS: Final[float] = 10.0
CIRCLE_MIN_FREQ_HZ: Final[float] = 1.0
CIRCLE_MAX_FREQ_HZ: Final[float] = 3.0

# ---------------------------------------------------------------------------
# Quantizer full-scale divisors
# ---------------------------------------------------------------------------
QUANT_FREQ_FULL_SCALE_HZ: Final[float] = 10.0
QUANT_GYRO_FULL_SCALE_DPS: Final[float] = 300.0
QUANTIZED_LEN: Final[int] = 5

# ---------------------------------------------------------------------------
# Timing
# ---------------------------------------------------------------------------
LATENCY_BUDGET_MS: Final[float] = 20.0
"""Soft budget for feature extraction plus classification of one window."""

RATE_DRIFT_TOLERANCE: Final[float] = 0.05
"""Relative deviation of the measured sample rate that triggers a warning."""

TIMING_WARN_INTERVAL_S: Final[float] = 1.0
"""Minimum spacing between two timing warnings of the same kind."""

# ---------------------------------------------------------------------------
# Record formatting
# ---------------------------------------------------------------------------
FLOAT_DECIMALS: Final[int] = 5
DEFAULT_FLUSH_INTERVAL: Final[int] = 20
"""CSV lines written between two forced flushes to storage."""
