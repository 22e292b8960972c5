from __future__ import annotations

import argparse
import logging
from pathlib import Path

from gesturesense.app import configure_logging, serve
from gesturesense.config import ConfigError, load_config
from gesturesense.window_log import RAW_CSV_HEADER, RawSampleRecord

from .profiles import PROFILE_LIBRARY, get_profile
from .source import SyntheticImuSource

LOGGER = logging.getLogger(__name__)


def record_raw_log(source: SyntheticImuSource, path: Path) -> int:
    """Write every sample of a finite *source* as a raw replay CSV; return the row count."""
    if source.max_samples is None:
        raise ValueError("recording needs a finite source; pass a duration")
    path.parent.mkdir(parents=True, exist_ok=True)
    rows = 0
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(RAW_CSV_HEADER + "\n")
        while (sample := source.read()) is not None:
            t_ms = (rows * 1000) // source.sample_rate_hz
            f.write(RawSampleRecord(t_ms=t_ms, sample=sample).to_csv_line() + "\n")
            rows += 1
    LOGGER.info("Wrote %d %s samples to %s", rows, source.profile.name, path)
    return rows


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="GestureSense synthetic IMU simulator")
    parser.add_argument("--profile", choices=sorted(PROFILE_LIBRARY), default="shake")
    parser.add_argument("--config", type=Path, default=None, help="Path to config YAML")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument(
        "--duration", type=float, default=None, help="Optional run duration in seconds"
    )
    parser.add_argument(
        "--record",
        type=Path,
        default=None,
        help="Write a raw replay CSV instead of running the pipeline",
    )
    parser.add_argument(
        "--headless", action="store_true", help="Run the loop without the status API"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging()
    try:
        config = load_config(args.config)
    except ConfigError as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        raise SystemExit(2) from None
    configure_logging(config)

    source = SyntheticImuSource(
        get_profile(args.profile),
        config.sampling.sample_rate_hz,
        seed=args.seed,
        duration_s=args.duration,
    )
    if args.record is not None:
        if args.duration is None:
            raise SystemExit("--record requires --duration")
        record_raw_log(source, args.record)
        return
    serve(config, source, headless=args.headless)


if __name__ == "__main__":
    main()
