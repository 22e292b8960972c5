"""Synthetic gesture streams for driving the pipeline without hardware."""

from .profiles import PROFILE_LIBRARY, GestureProfile, Tone, get_profile
from .source import SyntheticImuSource

__all__ = ["PROFILE_LIBRARY", "GestureProfile", "SyntheticImuSource", "Tone", "get_profile"]
