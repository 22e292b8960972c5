"""Runtime orchestration: sensor source -> sampling loop -> sinks / status API.

Keep this module focused on wiring. Feature math belongs in
``processing/``, record formats in ``window_log/``, API schemas in
``api_models.py``.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

import uvicorn
from fastapi import FastAPI

from . import __version__
from .config import AppConfig, ConfigError, load_config
from .routes import create_router
from .sampling_loop import SamplingLoop
from .sensors import ReplaySensorSource, SensorSource
from .window_log import ConsoleSink, CsvFileSink, GuardedSink

LOGGER = logging.getLogger(__name__)


@dataclass
class RuntimeState:
    config: AppConfig
    loop: SamplingLoop
    tasks: list[asyncio.Task] = field(default_factory=list)


def build_runtime(
    config: AppConfig,
    source: SensorSource,
    *,
    console_stream: TextIO | None = None,
) -> RuntimeState:
    """Wire sinks and the sampling loop for *config* around *source*."""
    log_cfg = config.logging
    console = GuardedSink(ConsoleSink(console_stream), name="console")
    window_sinks: list[GuardedSink] = [console]
    if log_cfg.csv_enabled:
        window_sinks.append(
            GuardedSink(
                CsvFileSink(log_cfg.csv_dir, flush_interval=log_cfg.flush_interval),
                name="csv",
            )
        )
    raw_sinks = [GuardedSink(ConsoleSink(console_stream), name="console-raw")] if log_cfg.log_raw else []
    loop = SamplingLoop(
        sampling=config.sampling,
        features=config.features,
        logging_config=log_cfg,
        source=source,
        window_sinks=window_sinks,
        raw_sinks=raw_sinks,
    )
    LOGGER.info(
        "SAMPLE_HZ=%d WIN_MS=%d HOP_MS=%d LOG_RAW=%d LOG_FEATURES=%d USE_GYRO=%d "
        "USE_SPECTRAL=%d USE_QUANT=%d",
        config.sampling.sample_rate_hz,
        config.sampling.window_ms,
        config.sampling.hop_ms,
        log_cfg.log_raw,
        log_cfg.log_features,
        config.features.use_gyro,
        config.features.use_spectral,
        config.features.use_quant,
    )
    return RuntimeState(config=config, loop=loop)


def create_app(
    config_path: Path | None = None,
    *,
    source: SensorSource,
    config: AppConfig | None = None,
    console_stream: TextIO | None = None,
) -> FastAPI:
    if config is None:
        config = load_config(config_path)
    runtime = build_runtime(config, source, console_stream=console_stream)

    async def start_runtime() -> None:
        runtime.tasks = [asyncio.create_task(runtime.loop.run(), name="sampling-loop")]

    async def stop_runtime() -> None:
        for task in runtime.tasks:
            task.cancel()
        results = await asyncio.gather(*runtime.tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                LOGGER.error("Sampling loop ended with an error", exc_info=result)
        runtime.tasks.clear()
        runtime.loop.close()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await start_runtime()
        try:
            yield
        finally:
            await stop_runtime()

    app = FastAPI(title="GestureSense", version=__version__, lifespan=lifespan)
    app.state.runtime = runtime
    app.include_router(create_router(runtime))
    return app


async def run_headless(runtime: RuntimeState, max_samples: int | None = None) -> None:
    """Run the sampling loop without the HTTP server until the source ends."""
    try:
        await runtime.loop.run(max_samples=max_samples)
    finally:
        runtime.loop.close()


def configure_logging(config: AppConfig | None = None) -> None:
    level = logging.DEBUG if config is not None and config.logging.print_debug else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")
    logging.getLogger().setLevel(level)


def serve(
    config: AppConfig,
    source: SensorSource,
    *,
    headless: bool = False,
    max_samples: int | None = None,
) -> None:
    """Run the pipeline either headless or behind the status API."""
    if headless:
        runtime = build_runtime(config, source)
        try:
            asyncio.run(run_headless(runtime, max_samples=max_samples))
        except KeyboardInterrupt:
            pass
        return
    runtime_app = create_app(source=source, config=config)
    uvicorn.run(
        runtime_app,
        host=config.server.host,
        port=config.server.port,
        log_level="info",
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the GestureSense pipeline")
    parser.add_argument("--config", type=Path, default=None, help="Path to config YAML")
    parser.add_argument(
        "--replay", type=Path, default=None, help="Raw sample CSV (t_ms,ax,ay,az,gx,gy,gz)"
    )
    parser.add_argument(
        "--headless", action="store_true", help="Run the loop without the status API"
    )
    parser.add_argument(
        "--max-samples", type=int, default=None, help="Stop after this many samples"
    )
    args = parser.parse_args()
    if args.replay is None:
        parser.error("a sensor source is required: pass --replay or use gesturesense-sim")

    configure_logging()
    try:
        config = load_config(args.config)
    except ConfigError as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        raise SystemExit(2) from None
    configure_logging(config)
    source = ReplaySensorSource(args.replay)
    serve(config, source, headless=args.headless, max_samples=args.max_samples)


if __name__ == "__main__":
    main()
