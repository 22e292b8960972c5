from __future__ import annotations

import logging
from pathlib import Path

import pytest

from gesturesense.sensors import ImuSample, IterableSensorSource, ReplaySensorSource


def _write_log(path: Path, rows: list[str]) -> Path:
    path.write_text("\n".join(["t_ms,ax,ay,az,gx,gy,gz", *rows]) + "\n", encoding="utf-8")
    return path


class TestReplaySensorSource:
    def test_replays_rows_in_order_then_ends(self, tmp_path: Path) -> None:
        path = _write_log(
            tmp_path / "raw.csv",
            ["0,0.1,0.2,1.0,1.5,2.5,3.5", "10,0.0,0.0,0.9,0.0,0.0,-1.0"],
        )
        source = ReplaySensorSource(path)
        assert source.read() == ImuSample(0.1, 0.2, 1.0, 1.5, 2.5, 3.5)
        assert source.read() == ImuSample(0.0, 0.0, 0.9, 0.0, 0.0, -1.0)
        assert source.read() is None
        assert source.read() is None
        assert source.rows_read == 2

    def test_malformed_rows_skipped(self, tmp_path: Path, caplog) -> None:
        path = _write_log(
            tmp_path / "raw.csv",
            ["0,0.1,0.2,1.0,0,0,0", "10,bad,0,1,0,0,0", "20,0.3,0.2,1.0,0,0,0"],
        )
        source = ReplaySensorSource(path)
        with caplog.at_level(logging.WARNING):
            samples = [source.read(), source.read(), source.read()]
        assert samples[0] is not None and samples[0].ax == 0.1
        assert samples[1] is not None and samples[1].ax == 0.3
        assert samples[2] is None
        assert source.rows_skipped == 1
        assert any("malformed" in r.getMessage() for r in caplog.records)

    def test_missing_columns_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "raw.csv"
        path.write_text("t_ms,ax,ay\n0,1,2\n", encoding="utf-8")
        with pytest.raises(ValueError, match="az, gx, gy, gz"):
            ReplaySensorSource(path)

    def test_window_record_csv_can_be_replayed(self, tmp_path: Path) -> None:
        # Session logs carry the raw sample columns too.
        path = tmp_path / "session.csv"
        path.write_text(
            "t_ms,ax,ay,az,gx,gy,gz,amag_mean\n990,0.0,0.0,1.0,0.0,0.0,0.0,1.0\n",
            encoding="utf-8",
        )
        source = ReplaySensorSource(path)
        assert source.read() == ImuSample(0.0, 0.0, 1.0, 0.0, 0.0, 0.0)
        source.close()
        assert source.read() is None


class TestIterableSensorSource:
    def test_wraps_rows_and_ends(self) -> None:
        source = IterableSensorSource([(0, 0, 1, 0, 0, 0), [1, 2, 3, 4, 5, 6]])
        assert source.read() == ImuSample(0.0, 0.0, 1.0, 0.0, 0.0, 0.0)
        assert source.read() == ImuSample(1.0, 2.0, 3.0, 4.0, 5.0, 6.0)
        assert source.read() is None

    def test_close_ends_the_stream(self) -> None:
        source = IterableSensorSource([(0, 0, 1, 0, 0, 0)] * 3)
        source.close()
        assert source.read() is None
