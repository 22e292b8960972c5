from __future__ import annotations

from gesturesense_core.fixed_point import quantize_unit_u8

from ..constants import QUANT_FREQ_FULL_SCALE_HZ, QUANT_GYRO_FULL_SCALE_DPS, QUANTIZED_LEN
from .features import FeatureVector


class Quantizer:
    """Five-byte unsigned encoding of the classification-relevant features."""

    length = QUANTIZED_LEN

    @staticmethod
    def selected_values(fv: FeatureVector) -> list[float]:
        return [
            fv.amag.std,
            fv.amag.dominant_frequency / QUANT_FREQ_FULL_SCALE_HZ,
            fv.gx_std / QUANT_GYRO_FULL_SCALE_DPS,
            fv.gy_std / QUANT_GYRO_FULL_SCALE_DPS,
            fv.gz_std / QUANT_GYRO_FULL_SCALE_DPS,
        ]

    def quantize(self, fv: FeatureVector) -> bytes:
        return quantize_unit_u8(self.selected_values(fv))
