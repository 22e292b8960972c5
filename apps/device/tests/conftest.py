"""Shared test helpers for the gesturesense test suite."""

from __future__ import annotations

import asyncio
import math
import time
from pathlib import Path
from typing import Any

import yaml


def wait_until(predicate, timeout_s: float = 2.0, step_s: float = 0.02) -> bool:
    """Poll *predicate* until it returns truthy, or *timeout_s* expires."""
    deadline = time.monotonic() + timeout_s
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(step_s)
    return False


def write_config(path: Path, payload: dict[str, Any]) -> Path:
    path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    return path


def make_config(tmp_path: Path, payload: dict[str, Any] | None = None):
    """Load an AppConfig from *payload* with the CSV directory under *tmp_path*."""
    from gesturesense.config import load_config

    merged: dict[str, Any] = {"logging": {"csv_dir": str(tmp_path / "logs")}}
    for section, values in (payload or {}).items():
        merged.setdefault(section, {}).update(values)
    return load_config(write_config(tmp_path / "config.yaml", merged))


def magnitude_sine_samples(
    count: int,
    *,
    sample_rate_hz: float = 100.0,
    freq_hz: float = 5.0,
    amplitude_g: float = 0.25,
) -> list[tuple[float, float, float, float, float, float]]:
    """Samples whose accelerometer magnitude is ``1 + A*sin(2*pi*f*t)`` with zero gyro."""
    return [
        (
            0.0,
            0.0,
            1.0 + amplitude_g * math.sin(2.0 * math.pi * freq_hz * i / sample_rate_hz),
            0.0,
            0.0,
            0.0,
        )
        for i in range(count)
    ]


class FakeClock:
    """Monotonic clock whose ``sleep`` advances time instead of waiting."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, dt: float) -> None:
        self.now += dt

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += max(0.0, delay)
        await asyncio.sleep(0)


class StepCounter:
    """perf_counter stand-in that advances a fixed step on every call."""

    def __init__(self, step_s: float):
        self.step_s = step_s
        self.value = 0.0

    def __call__(self) -> float:
        current = self.value
        self.value += self.step_s
        return current


class ListSink:
    def __init__(self) -> None:
        self.records: list[Any] = []
        self.closed = False

    def write(self, record: Any) -> None:
        self.records.append(record)

    def close(self) -> None:
        self.closed = True


class FailingSink:
    def __init__(self, exc: Exception | None = None, fail_after: int = 0):
        self.exc = exc or OSError(5, "Input/output error")
        self.fail_after = fail_after
        self.attempts = 0

    def write(self, record: Any) -> None:
        self.attempts += 1
        if self.attempts > self.fail_after:
            raise self.exc

    def close(self) -> None:
        raise self.exc
