"""Periodic sampling driver.

One sample is read per tick, paced against absolute deadlines so a slow
tick does not shift every later one. Each sample is pushed into the
:class:`~gesturesense.processing.WindowScheduler`; when a window is due the
features are extracted and classified, timed against the latency budget,
and the resulting record is handed to the configured sinks.

Timing anomalies never stop the loop. Rate drift and latency overruns are
counted on every occurrence and logged at most once per
``TIMING_WARN_INTERVAL_S`` when warnings are enabled.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from .classifier import classify, gesture_name
from .config import FeaturesConfig, LoggingConfig, SamplingConfig
from .constants import TIMING_WARN_INTERVAL_S
from .processing import FeatureExtractor, Quantizer, WindowScheduler
from .sensors import ImuSample, SensorSource
from .window_log import GuardedSink, RawSampleRecord, RecordSink, WindowRecord, build_window_record

LOGGER = logging.getLogger(__name__)


class RateDriftMonitor:
    """Compare the measured inter-sample rate against the nominal rate."""

    def __init__(
        self,
        nominal_hz: float,
        tolerance: float,
        *,
        warn_interval_s: float = TIMING_WARN_INTERVAL_S,
        emit_warnings: bool = True,
    ):
        self.nominal_hz = float(nominal_hz)
        self.tolerance = float(tolerance)
        self.warn_interval_s = float(warn_interval_s)
        self.emit_warnings = emit_warnings
        self.last_rate_hz: float | None = None
        self.max_drift = 0.0
        self.drift_events = 0
        self.warnings_logged = 0
        self._last_sample_s: float | None = None
        self._next_warn_s: float | None = None

    def observe(self, now_s: float) -> float | None:
        """Record a sample taken at *now_s*; return the relative drift, if measurable."""
        last = self._last_sample_s
        self._last_sample_s = now_s
        if last is None:
            return None
        dt = now_s - last
        if dt <= 0:
            return None
        actual_hz = 1.0 / dt
        drift = abs(actual_hz - self.nominal_hz) / self.nominal_hz
        self.last_rate_hz = actual_hz
        self.max_drift = max(self.max_drift, drift)
        if drift > self.tolerance:
            self.drift_events += 1
            if self.emit_warnings and (self._next_warn_s is None or now_s >= self._next_warn_s):
                self.warnings_logged += 1
                self._next_warn_s = now_s + self.warn_interval_s
                LOGGER.warning(
                    "sample rate drift=%.2f%% (%.2f Hz vs %.0f Hz)",
                    drift * 100.0,
                    actual_hz,
                    self.nominal_hz,
                )
        return drift

    def snapshot(self) -> dict[str, Any]:
        return {
            "nominal_hz": self.nominal_hz,
            "last_rate_hz": self.last_rate_hz,
            "max_drift": self.max_drift,
            "drift_events": self.drift_events,
            "warnings_logged": self.warnings_logged,
        }


class LatencyMonitor:
    """Track per-window processing latency against a soft budget."""

    def __init__(
        self,
        budget_ms: float,
        *,
        warn_interval_s: float = TIMING_WARN_INTERVAL_S,
        emit_warnings: bool = True,
    ):
        self.budget_ms = float(budget_ms)
        self.warn_interval_s = float(warn_interval_s)
        self.emit_warnings = emit_warnings
        self.windows = 0
        self.last_ms = 0.0
        self.max_ms = 0.0
        self.total_ms = 0.0
        self.overruns = 0
        self.warnings_logged = 0
        self._next_warn_s: float | None = None

    @property
    def mean_ms(self) -> float:
        return self.total_ms / self.windows if self.windows else 0.0

    def observe(self, latency_ms: float, now_s: float) -> bool:
        """Record one window latency; return True when it exceeded the budget."""
        self.windows += 1
        self.last_ms = latency_ms
        self.max_ms = max(self.max_ms, latency_ms)
        self.total_ms += latency_ms
        if latency_ms <= self.budget_ms:
            return False
        self.overruns += 1
        if self.emit_warnings and (self._next_warn_s is None or now_s >= self._next_warn_s):
            self.warnings_logged += 1
            self._next_warn_s = now_s + self.warn_interval_s
            LOGGER.warning(
                "window latency %.3f ms exceeds %.1f ms budget (%d overruns so far)",
                latency_ms,
                self.budget_ms,
                self.overruns,
            )
        return True

    def snapshot(self) -> dict[str, Any]:
        return {
            "budget_ms": self.budget_ms,
            "windows": self.windows,
            "last_ms": self.last_ms,
            "max_ms": self.max_ms,
            "mean_ms": self.mean_ms,
            "overruns": self.overruns,
            "warnings_logged": self.warnings_logged,
        }


def _guard(sinks: Iterable[RecordSink | GuardedSink]) -> list[GuardedSink]:
    return [s if isinstance(s, GuardedSink) else GuardedSink(s) for s in sinks]


class SamplingLoop:
    def __init__(
        self,
        *,
        sampling: SamplingConfig,
        features: FeaturesConfig,
        logging_config: LoggingConfig,
        source: SensorSource,
        window_sinks: Iterable[RecordSink | GuardedSink] = (),
        raw_sinks: Iterable[RecordSink | GuardedSink] = (),
        clock: Callable[[], float] = time.monotonic,
        perf_counter: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.sampling = sampling
        self.features = features
        self.logging_config = logging_config
        self.source = source
        self.window_sinks = _guard(window_sinks)
        self.raw_sinks = _guard(raw_sinks)
        self._clock = clock
        self._perf_counter = perf_counter
        self._sleep = sleep

        self.scheduler = WindowScheduler(sampling.window_samples, sampling.hop_samples)
        self.extractor = FeatureExtractor(include_spectral=features.use_spectral)
        self.quantizer = Quantizer() if features.use_quant else None
        self.drift = RateDriftMonitor(
            sampling.sample_rate_hz,
            sampling.drift_tolerance,
            emit_warnings=logging_config.print_warn,
        )
        self.latency = LatencyMonitor(
            sampling.latency_budget_ms, emit_warnings=logging_config.print_warn
        )

        self.state = "idle"
        self.latest: WindowRecord | None = None
        self._start_s: float | None = None

    @property
    def windows_emitted(self) -> int:
        return self.scheduler.windows_emitted

    @property
    def samples_processed(self) -> int:
        return self.scheduler.total_samples

    @property
    def sinks(self) -> list[GuardedSink]:
        return [*self.window_sinks, *self.raw_sinks]

    def process_sample(self, sample: ImuSample, now_s: float) -> WindowRecord | None:
        """Ingest one sample taken at *now_s*; return the window record if one was emitted."""
        if self._start_s is None:
            self._start_s = now_s
        self.drift.observe(now_s)
        t_ms = int(round((now_s - self._start_s) * 1000.0))

        if self.logging_config.log_raw:
            raw = RawSampleRecord(t_ms=t_ms, sample=sample)
            for sink in self.raw_sinks:
                sink.write(raw)

        self.scheduler.push_sample(sample)
        if not self.scheduler.poll_ready():
            return None

        block = self.scheduler.extract_all()
        t0 = self._perf_counter()
        fv = self.extractor.compute_from_block(block, float(self.sampling.sample_rate_hz))
        gesture = classify(fv)
        latency_ms = (self._perf_counter() - t0) * 1000.0
        self.latency.observe(latency_ms, now_s)

        quantized = self.quantizer.quantize(fv) if self.quantizer is not None else b""
        record = build_window_record(
            t_ms=t_ms,
            sample=sample,
            features=fv,
            gesture_class=gesture,
            latency_ms=latency_ms,
            quantized=quantized,
            use_gyro=self.features.use_gyro,
        )
        self.latest = record

        if self.logging_config.log_features:
            for sink in self.window_sinks:
                sink.write(record)
        if self.logging_config.print_debug:
            LOGGER.info(
                "GESTURE: %s (dom=%.2f Hz, amag_std=%.4f g, latency=%.3f ms)",
                gesture_name(gesture),
                fv.amag.dominant_frequency,
                fv.amag.std,
                latency_ms,
            )
        return record

    async def run(self, max_samples: int | None = None) -> None:
        """Pace the loop at the configured rate until the source ends.

        Stops after *max_samples* ticks when given.
        """
        period = 1.0 / float(self.sampling.sample_rate_hz)
        self.state = "running"
        LOGGER.info(
            "Sampling loop started at %d Hz (window=%d hop=%d)",
            self.sampling.sample_rate_hz,
            self.scheduler.window_samples,
            self.scheduler.hop_samples,
        )
        next_tick = self._clock()
        if self._start_s is None:
            self._start_s = next_tick
        ticks = 0
        try:
            while max_samples is None or ticks < max_samples:
                next_tick += period
                await self._sleep(max(0.0, next_tick - self._clock()))
                sample = self.source.read()
                if sample is None:
                    LOGGER.info("Sensor source exhausted after %d samples", ticks)
                    break
                ticks += 1
                self.process_sample(sample, self._clock())
            self.state = "finished"
        except asyncio.CancelledError:
            self.state = "stopped"
            raise
        finally:
            LOGGER.info(
                "Sampling loop %s: %d samples, %d windows, %d overruns",
                self.state,
                self.samples_processed,
                self.windows_emitted,
                self.latency.overruns,
            )

    def close(self) -> None:
        for sink in self.sinks:
            sink.close()
        try:
            self.source.close()
        except Exception:
            LOGGER.warning("Error closing sensor source", exc_info=True)

    def timing_snapshot(self) -> dict[str, Any]:
        return {"drift": self.drift.snapshot(), "latency": self.latency.snapshot()}
