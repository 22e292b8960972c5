#!/usr/bin/env python3
"""Offline descriptive statistics for a three-axis accelerometer block.

Usage::

    python tools/validation/stats_check.py
    python tools/validation/stats_check.py --replay data/logs/raw.csv
"""

from __future__ import annotations

import argparse
import csv
from collections import Counter
from pathlib import Path

import numpy as np
from gesturesense_core.motion_stats import median, min_max, sample_variance

AXES = ("ax", "ay", "az")


def axis_summary(values: np.ndarray | list[float]) -> dict[str, float | int | None]:
    x = np.asarray(values, dtype=np.float64).ravel()
    var = sample_variance(x)
    lo, hi = min_max(x)
    counts = Counter(x.tolist()).most_common(1)
    mode, mode_count = counts[0] if counts else (None, 0)
    if mode_count <= 1:
        mode, mode_count = None, 0
    return {
        "mean": float(np.mean(x)) if x.size else 0.0,
        "median": median(x),
        "var": var,
        "std": float(np.sqrt(var)),
        "min": lo,
        "max": hi,
        "mode": mode,
        "mode_count": mode_count,
    }


def load_axes(path: Path) -> dict[str, np.ndarray]:
    with path.open("r", encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))
    return {axis: np.asarray([float(r[axis]) for r in rows], dtype=np.float64) for axis in AXES}


def synthetic_axes(n: int = 64, sample_rate_hz: float = 2200.0, seed: int = 0) -> dict[str, np.ndarray]:
    rng = np.random.default_rng(seed)
    t = np.arange(n, dtype=np.float64) / sample_rate_hz
    return {
        "ax": 0.02 * np.sin(2.0 * np.pi * 50.0 * t) + rng.normal(0.0, 0.005, n),
        "ay": np.round(rng.normal(0.0, 0.01, n), 2),
        "az": 1.0 + rng.normal(0.0, 0.005, n),
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Per-axis descriptive statistics")
    parser.add_argument("--replay", type=Path, default=None, help="Raw sample CSV to summarize")
    parser.add_argument("--n", type=int, default=64, help="Synthetic block size")
    args = parser.parse_args()

    data = load_axes(args.replay) if args.replay is not None else synthetic_axes(args.n)
    print("Raw stats per-axis:")
    for axis in AXES:
        s = axis_summary(data[axis])
        print(
            f"  {axis}: mean={s['mean']: .5f}  median={s['median']: .5f}  var={s['var']: .5f}"
            f"  std={s['std']: .5f}  min={s['min']: .5f}  max={s['max']: .5f}"
        )
        if s["mode"] is not None:
            print(f"      mode={s['mode']: .5f} (count={s['mode_count']})")
        else:
            print("      mode: none (no repeated values)")


if __name__ == "__main__":
    main()
