"""Pydantic response models for the read-only status API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SinkStatusResponse(BaseModel):
    name: str
    enabled: bool
    records_written: int
    last_error: str | None = None


class HealthResponse(BaseModel):
    status: str
    loop_state: str
    samples_processed: int
    windows_emitted: int
    sinks: list[SinkStatusResponse] = Field(default_factory=list)


class WindowRecordResponse(BaseModel):
    t_ms: int
    ax: float
    ay: float
    az: float
    gx: float
    gy: float
    gz: float
    amag_mean: float
    amag_std: float
    amag_rms: float
    energy: float
    dom_freq: float
    bandpower_low: float
    bandpower_high: float
    gx_std: float
    gy_std: float
    gz_std: float
    pitch_rate_std: float
    roll_rate_std: float
    gesture_class: int = Field(alias="class")
    latency_ms: float
    quantized_len: int
    gesture: str
    quantized_hex: str = ""

    model_config = ConfigDict(populate_by_name=True)


class LatestWindowResponse(BaseModel):
    window: WindowRecordResponse | None = None


class DriftStats(BaseModel):
    nominal_hz: float
    last_rate_hz: float | None = None
    max_drift: float
    drift_events: int
    warnings_logged: int


class LatencyStats(BaseModel):
    budget_ms: float
    windows: int
    last_ms: float
    max_ms: float
    mean_ms: float
    overruns: int
    warnings_logged: int


class TimingResponse(BaseModel):
    drift: DriftStats
    latency: LatencyStats
