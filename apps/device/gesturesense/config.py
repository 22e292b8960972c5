from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .constants import DEFAULT_FLUSH_INTERVAL, LATENCY_BUDGET_MS, RATE_DRIFT_TOLERANCE

DEVICE_DIR = Path(__file__).resolve().parents[1]
"""Root of the ``apps/device/`` package tree."""

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "sampling": {
        "sample_rate_hz": 100,
        "window_ms": 1000,
        "hop_ms": 500,
        "latency_budget_ms": LATENCY_BUDGET_MS,
        "drift_tolerance": RATE_DRIFT_TOLERANCE,
    },
    "features": {
        "use_gyro": True,
        "use_spectral": True,
        "use_quant": False,
    },
    "logging": {
        "log_raw": False,
        "log_features": True,
        "print_debug": False,
        "print_warn": False,
        "csv_enabled": True,
        "csv_dir": "data/logs",
        "flush_interval": DEFAULT_FLUSH_INTERVAL,
    },
    "server": {"host": "0.0.0.0", "port": 8000},
}


class ConfigError(ValueError):
    """Configuration that must stop the process before sampling starts."""


def documented_default_config() -> dict[str, Any]:
    """Return runtime defaults in the shape documented by config.example.yaml."""
    return deepcopy(DEFAULT_CONFIG)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _resolve_config_path(path_text: str, config_path: Path) -> Path:
    path = Path(path_text)
    if path.is_absolute():
        return path
    return config_path.resolve().parent / path


def derive_window_sizes(sample_rate_hz: int, window_ms: int, hop_ms: int) -> tuple[int, int]:
    """Return ``(window_samples, hop_samples)`` for the given rate and durations.

    Raises :class:`ConfigError` when either resolves to zero samples.
    """
    window_samples = (int(sample_rate_hz) * int(window_ms)) // 1000
    hop_samples = (int(sample_rate_hz) * int(hop_ms)) // 1000
    if window_samples <= 0:
        raise ConfigError(
            f"sampling.window_ms={window_ms} at {sample_rate_hz} Hz yields no samples"
        )
    if hop_samples <= 0:
        raise ConfigError(f"sampling.hop_ms={hop_ms} at {sample_rate_hz} Hz yields no samples")
    return window_samples, hop_samples


@dataclass(slots=True)
class SamplingConfig:
    sample_rate_hz: int
    window_ms: int
    hop_ms: int
    latency_budget_ms: float
    drift_tolerance: float

    def __post_init__(self) -> None:
        if not isinstance(self.sample_rate_hz, int) or self.sample_rate_hz < 1:
            raise ConfigError(
                f"sampling.sample_rate_hz must be a positive integer, got {self.sample_rate_hz!r}"
            )
        derive_window_sizes(self.sample_rate_hz, self.window_ms, self.hop_ms)
        if self.latency_budget_ms <= 0:
            LOGGER.warning(
                "sampling.latency_budget_ms=%s is not positive — using %s",
                self.latency_budget_ms,
                LATENCY_BUDGET_MS,
            )
            self.latency_budget_ms = LATENCY_BUDGET_MS
        if not 0 < self.drift_tolerance < 1:
            LOGGER.warning(
                "sampling.drift_tolerance=%s outside (0, 1) — using %s",
                self.drift_tolerance,
                RATE_DRIFT_TOLERANCE,
            )
            self.drift_tolerance = RATE_DRIFT_TOLERANCE

    @property
    def window_samples(self) -> int:
        return derive_window_sizes(self.sample_rate_hz, self.window_ms, self.hop_ms)[0]

    @property
    def hop_samples(self) -> int:
        return derive_window_sizes(self.sample_rate_hz, self.window_ms, self.hop_ms)[1]


@dataclass(slots=True)
class FeaturesConfig:
    use_gyro: bool
    use_spectral: bool
    use_quant: bool


@dataclass(slots=True)
class LoggingConfig:
    log_raw: bool
    log_features: bool
    print_debug: bool
    print_warn: bool
    csv_enabled: bool
    csv_dir: Path
    flush_interval: int

    def __post_init__(self) -> None:
        if not isinstance(self.flush_interval, int) or self.flush_interval < 0:
            object.__setattr__(
                self, "flush_interval", max(0, int(self.flush_interval or 0))
            )


@dataclass(slots=True)
class ServerConfig:
    host: str
    port: int

    def __post_init__(self) -> None:
        if not isinstance(self.port, int) or not (1 <= self.port <= 65535):
            raise ConfigError(f"ServerConfig.port must be 1–65535, got {self.port!r}")


@dataclass(slots=True)
class AppConfig:
    sampling: SamplingConfig
    features: FeaturesConfig
    logging: LoggingConfig
    server: ServerConfig
    config_path: Path


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a YAML object at the top level.")
        return data


def _section(merged: dict[str, Any], name: str) -> dict[str, Any]:
    section = merged.get(name)
    if not isinstance(section, dict):
        raise ConfigError(f"{name} must be a YAML object, got {type(section).__name__}.")
    return section


def load_config(config_path: Path | None = None) -> AppConfig:
    path = config_path or (DEVICE_DIR / "config.yaml")
    path = path.resolve()
    override = _read_config_file(path)
    merged = _deep_merge(DEFAULT_CONFIG, override)
    sampling_cfg = _section(merged, "sampling")
    features_cfg = _section(merged, "features")
    logging_cfg = _section(merged, "logging")
    server_cfg = _section(merged, "server")

    try:
        sampling = SamplingConfig(
            sample_rate_hz=int(sampling_cfg["sample_rate_hz"]),
            window_ms=int(sampling_cfg["window_ms"]),
            hop_ms=int(sampling_cfg["hop_ms"]),
            latency_budget_ms=float(sampling_cfg.get("latency_budget_ms", LATENCY_BUDGET_MS)),
            drift_tolerance=float(sampling_cfg.get("drift_tolerance", RATE_DRIFT_TOLERANCE)),
        )

        csv_dir_raw = logging_cfg.get("csv_dir")
        csv_enabled = bool(logging_cfg.get("csv_enabled", True))
        if not isinstance(csv_dir_raw, str) or not csv_dir_raw.strip():
            if csv_enabled:
                raise ConfigError("logging.csv_dir must be configured when csv_enabled is true.")
            csv_dir_raw = str(DEFAULT_CONFIG["logging"]["csv_dir"])

        features = FeaturesConfig(
            use_gyro=bool(features_cfg.get("use_gyro", True)),
            use_spectral=bool(features_cfg.get("use_spectral", True)),
            use_quant=bool(features_cfg.get("use_quant", False)),
        )
        logging_config = LoggingConfig(
            log_raw=bool(logging_cfg.get("log_raw", False)),
            log_features=bool(logging_cfg.get("log_features", True)),
            print_debug=bool(logging_cfg.get("print_debug", False)),
            print_warn=bool(logging_cfg.get("print_warn", False)),
            csv_enabled=csv_enabled,
            csv_dir=_resolve_config_path(csv_dir_raw, path),
            flush_interval=int(logging_cfg.get("flush_interval", DEFAULT_FLUSH_INTERVAL)),
        )
        server = ServerConfig(
            host=str(server_cfg["host"]),
            port=int(server_cfg["port"]),
        )
    except ConfigError:
        raise
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ConfigError(f"Invalid configuration in {path}: {exc}") from None

    app_config = AppConfig(
        sampling=sampling,
        features=features,
        logging=logging_config,
        server=server,
        config_path=path,
    )
    LOGGER.info(
        "Loaded config=%s sample_rate_hz=%d window=%d hop=%d csv_dir=%s",
        app_config.config_path,
        app_config.sampling.sample_rate_hz,
        app_config.sampling.window_samples,
        app_config.sampling.hop_samples,
        app_config.logging.csv_dir,
    )
    return app_config
