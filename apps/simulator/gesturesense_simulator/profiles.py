from __future__ import annotations

from dataclasses import dataclass

GRAVITY_G: tuple[float, float, float] = (0.0, 0.0, 1.0)


@dataclass(frozen=True, slots=True)
class Tone:
    freq_hz: float
    accel_g: tuple[float, float, float]
    gyro_dps: tuple[float, float, float]
    # Per-axis phase in radians; 90 deg between gx and gy gives a circular motion.
    gyro_phase: tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass(frozen=True, slots=True)
class GestureProfile:
    name: str
    tones: tuple[Tone, ...]
    accel_noise_g: float
    gyro_noise_dps: float
    expected_class: str


PROFILE_LIBRARY: dict[str, GestureProfile] = {
    "idle": GestureProfile(
        name="idle",
        tones=(),
        accel_noise_g=0.002,
        gyro_noise_dps=0.5,
        expected_class="NONE",
    ),
    "shake": GestureProfile(
        name="shake",
        tones=(Tone(5.0, (0.0, 0.0, 0.4), (15.0, 15.0, 5.0)),),
        accel_noise_g=0.01,
        gyro_noise_dps=1.0,
        expected_class="SHAKE",
    ),
    "tilt": GestureProfile(
        name="tilt",
        tones=(Tone(1.0, (0.0, 0.0, 0.1), (0.0, 3.0, 0.0)),),
        accel_noise_g=0.002,
        gyro_noise_dps=0.5,
        expected_class="TILT",
    ),
    "circle": GestureProfile(
        name="circle",
        tones=(
            Tone(
                2.0,
                (0.0, 0.0, 0.005),
                (40.0, 40.0, 0.0),
                gyro_phase=(0.0, 1.5707963267948966, 0.0),
            ),
        ),
        accel_noise_g=0.001,
        gyro_noise_dps=0.5,
        expected_class="CIRCLE",
    ),
}


def get_profile(name: str) -> GestureProfile:
    try:
        return PROFILE_LIBRARY[name]
    except KeyError:
        known = ", ".join(sorted(PROFILE_LIBRARY))
        raise ValueError(f"unknown profile {name!r}; expected one of: {known}") from None
