from .fixed_point import (
    UNIT_U8_MAX,
    QuantizationError,
    dequantize_q,
    ideal_error_bounds,
    quantization_error,
    quantize_q,
    quantize_unit_u8,
)
from .goertzel import goertzel_bin_powers, goertzel_power, hann_coefficients
from .motion_bands import (
    BANDS,
    SPECTRAL_MAX_HZ,
    MotionBand,
    band_for_frequency,
    band_key_for_frequency,
)
from .motion_stats import median, min_max, sample_variance, window_stats

__all__ = [
    "BANDS",
    "SPECTRAL_MAX_HZ",
    "UNIT_U8_MAX",
    "MotionBand",
    "QuantizationError",
    "band_for_frequency",
    "band_key_for_frequency",
    "dequantize_q",
    "goertzel_bin_powers",
    "goertzel_power",
    "hann_coefficients",
    "ideal_error_bounds",
    "median",
    "min_max",
    "quantization_error",
    "quantize_q",
    "quantize_unit_u8",
    "sample_variance",
    "window_stats",
]
