from __future__ import annotations

import math
import statistics

import numpy as np
import pytest

from gesturesense_core import (
    band_key_for_frequency,
    dequantize_q,
    goertzel_bin_powers,
    goertzel_power,
    hann_coefficients,
    ideal_error_bounds,
    median,
    min_max,
    quantization_error,
    quantize_q,
    quantize_unit_u8,
    sample_variance,
    window_stats,
)


class TestGoertzel:
    def test_vectorized_matches_scalar_recurrence(self) -> None:
        rng = np.random.default_rng(3)
        x = rng.normal(size=64)
        bins = [1, 2, 5, 17, 31]
        vector = goertzel_bin_powers(x, bins)
        scalar = [goertzel_power(x, k) for k in bins]
        np.testing.assert_allclose(vector, scalar, rtol=1e-12, atol=1e-12)

    def test_matches_dft_bin_power(self) -> None:
        rng = np.random.default_rng(11)
        x = rng.normal(size=128)
        bins = np.arange(1, 64)
        expected = np.abs(np.fft.fft(x)[bins]) ** 2
        np.testing.assert_allclose(goertzel_bin_powers(x, bins), expected, rtol=1e-9, atol=1e-9)

    def test_empty_bins_return_empty(self) -> None:
        assert goertzel_bin_powers(np.ones(8), []).size == 0

    def test_hann_coefficients(self) -> None:
        assert hann_coefficients(0).size == 0
        np.testing.assert_allclose(hann_coefficients(1), [1.0])
        w = hann_coefficients(5)
        np.testing.assert_allclose(w, [0.0, 0.5, 1.0, 0.5, 0.0], atol=1e-15)


class TestMotionStats:
    def test_window_stats_known_values(self) -> None:
        mean, std, rms, energy = window_stats([1.0, 2.0, 3.0, 4.0])
        assert mean == pytest.approx(2.5)
        assert std == pytest.approx(math.sqrt(1.25))
        assert rms == pytest.approx(math.sqrt(7.5))
        assert energy == pytest.approx(30.0)

    def test_constant_input_has_exact_zero_std(self) -> None:
        # 0.1 is not exactly representable, so E[x^2] - mean^2 can round away from zero.
        _, std, rms, _ = window_stats([0.1] * 97)
        assert std == 0.0
        assert rms == pytest.approx(0.1)

    def test_single_sample_and_empty(self) -> None:
        assert window_stats([2.0]) == (2.0, 0.0, 2.0, 4.0)
        assert window_stats([]) == (0.0, 0.0, 0.0, 0.0)

    def test_extended_statistics(self) -> None:
        values = [4.0, 1.0, 3.0, 2.0]
        assert sample_variance(values) == pytest.approx(5.0 / 3.0)
        assert sample_variance([1.0]) == 0.0
        assert min_max(values) == (1.0, 4.0)
        assert median(values) == 2.5
        assert median([5.0, 1.0, 3.0]) == 3.0
        assert median([]) == 0.0

    @pytest.mark.parametrize("n", [2, 7, 64, 101])
    def test_variance_and_median_match_reference(self, n: int) -> None:
        values = np.random.default_rng(n).normal(1.0, 0.3, size=n)
        assert sample_variance(values) == pytest.approx(statistics.variance(values.tolist()))
        assert median(values) == pytest.approx(statistics.median(values.tolist()))
        assert median(values.reshape(1, -1)) == median(values)


class TestMotionBands:
    @pytest.mark.parametrize(
        ("hz", "key"),
        [
            (0.4, None),
            (0.5, "low"),
            (2.999, "low"),
            (3.0, "high"),
            (9.9, "high"),
            (10.0, "high"),
            (10.01, None),
        ],
    )
    def test_band_edges(self, hz: float, key: str | None) -> None:
        assert band_key_for_frequency(hz) == key


class TestFixedPoint:
    def test_unit_u8_endpoints_and_clamping(self) -> None:
        assert quantize_unit_u8([0.0, 1.0, -0.5, 3.0]) == bytes([0, 255, 0, 255])

    def test_unit_u8_non_finite_encodes_zero(self) -> None:
        assert quantize_unit_u8([math.nan, math.inf, -math.inf]) == bytes([0, 0, 0])

    def test_unit_u8_rounds_half_to_even(self) -> None:
        # 0.5 * 255 = 127.5 exactly
        assert quantize_unit_u8([0.5]) == bytes([128])

    def test_q_format_clips_and_counts(self) -> None:
        codes, clips = quantize_q([0.0, 0.5, -1.0, 1.0, -2.0], 8)
        assert clips == 2
        assert codes.tolist() == [0, 64, -128, 127, -128]

    def test_q_format_rejects_bad_bit_depth(self) -> None:
        with pytest.raises(ValueError, match="bits"):
            quantize_q([0.0], 1)

    def test_q15_error_within_ideal_bounds(self) -> None:
        x = 0.8 * np.sin(np.linspace(0.0, 6.0 * np.pi, 512))
        codes, clips = quantize_q(x, 16)
        err = quantization_error(x, dequantize_q(codes, 16))
        rms_bound, max_bound = ideal_error_bounds(16)
        assert clips == 0
        assert err.max_abs_err <= max_bound + 1e-12
        assert err.rms_err <= 2.0 * rms_bound
        assert err.snr_db > 80.0

    def test_quantization_error_identical_inputs(self) -> None:
        err = quantization_error([0.5, -0.25], [0.5, -0.25])
        assert err.snr_db == math.inf
        assert err.max_abs_err == 0.0

    def test_quantization_error_rejects_mismatched_lengths(self) -> None:
        with pytest.raises(ValueError):
            quantization_error([1.0], [1.0, 2.0])
