from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest
from conftest import FailingSink, ListSink

from gesturesense.classifier import GestureClass
from gesturesense.processing import AccelMagnitudeFeatures, FeatureVector
from gesturesense.sensors import ImuSample
from gesturesense.window_log import (
    RAW_CSV_HEADER,
    WINDOW_CSV_HEADER,
    ConsoleSink,
    CsvFileSink,
    GuardedSink,
    RawSampleRecord,
    build_window_record,
)


def _features() -> FeatureVector:
    return FeatureVector(
        amag=AccelMagnitudeFeatures(
            mean=1.0,
            std=0.176777,
            rms=1.015,
            energy=103.125,
            dominant_frequency=5.0,
            bandpower_low=0.001,
            bandpower_high=39.0625,
        ),
        gx_std=12.5,
        gy_std=3.25,
        gz_std=0.5,
        pitch_rate_std=0.00325,
        roll_rate_std=0.0125,
    )


def _record(**overrides):
    kwargs = {
        "t_ms": 990,
        "sample": ImuSample(0.01, -0.02, 1.25, 4.0, -5.5, 0.125),
        "features": _features(),
        "gesture_class": GestureClass.SHAKE,
        "latency_ms": 0.4321,
    }
    kwargs.update(overrides)
    return build_window_record(**kwargs)


class TestRecords:
    def test_header_field_order(self) -> None:
        assert WINDOW_CSV_HEADER == (
            "t_ms,ax,ay,az,gx,gy,gz,amag_mean,amag_std,amag_rms,energy,dom_freq,"
            "bandpower_low,bandpower_high,gx_std,gy_std,gz_std,pitch_rate_std,"
            "roll_rate_std,class,latency_ms,quantized_len"
        )
        assert RAW_CSV_HEADER == "t_ms,ax,ay,az,gx,gy,gz"

    def test_csv_line_formatting(self) -> None:
        line = _record().to_csv_line()
        fields = line.split(",")
        assert len(fields) == 22
        assert fields[0] == "990"
        assert fields[1:7] == ["0.01000", "-0.02000", "1.25000", "4.00000", "-5.50000", "0.12500"]
        assert fields[8] == "0.17678"
        assert fields[11] == "5.00000"
        assert fields[19] == "1"
        assert fields[20] == "0.43210"
        assert fields[21] == "0"

    def test_quantized_length_reported(self) -> None:
        record = _record(quantized=bytes([1, 2, 3, 4, 5]))
        assert record.quantized_len == 5
        assert record.to_csv_line().endswith(",5")

    def test_gyro_fields_zeroed_when_gyro_disabled(self) -> None:
        record = _record(use_gyro=False)
        assert (record.gx, record.gy, record.gz) == (0.0, 0.0, 0.0)
        assert (record.gx_std, record.gy_std, record.gz_std) == (0.0, 0.0, 0.0)
        assert record.ax == 0.01
        assert record.roll_rate_std == 0.0125

    def test_to_dict_uses_csv_names(self) -> None:
        payload = _record(quantized=b"\x00\xff").to_dict()
        assert payload["class"] == 1
        assert payload["gesture"] == "SHAKE"
        assert payload["quantized_len"] == 2
        assert payload["quantized_hex"] == "00ff"

    def test_raw_record_line(self) -> None:
        raw = RawSampleRecord(t_ms=10, sample=ImuSample(0.0, 0.0, 1.0, 0.5, 0.0, -0.5))
        assert raw.to_csv_line() == "10,0.00000,0.00000,1.00000,0.50000,0.00000,-0.50000"


class TestCsvFileSink:
    def test_writes_header_then_lines(self, tmp_path: Path) -> None:
        sink = CsvFileSink(tmp_path / "logs", flush_interval=20)
        for _ in range(3):
            sink.write(_record())
        sink.close()
        assert sink.path is not None
        assert sink.path.parent == tmp_path / "logs"
        assert sink.path.name.startswith("session_")
        lines = sink.path.read_text(encoding="utf-8").splitlines()
        assert lines[0] == WINDOW_CSV_HEADER
        assert lines[1:] == [_record().to_csv_line()] * 3

    def test_flushes_every_interval(self, tmp_path: Path) -> None:
        sink = CsvFileSink(tmp_path, flush_interval=2)
        sink.write(_record())
        sink.write(_record())
        assert sink.path is not None
        on_disk = sink.path.read_text(encoding="utf-8").splitlines()
        assert len(on_disk) == 3
        sink.close()

    def test_sessions_do_not_overwrite_each_other(self, tmp_path: Path) -> None:
        first = CsvFileSink(tmp_path)
        second = CsvFileSink(tmp_path)
        assert first.open() != second.open()
        first.close()
        second.close()

    def test_close_without_writes_is_noop(self, tmp_path: Path) -> None:
        sink = CsvFileSink(tmp_path / "never")
        sink.close()
        assert not (tmp_path / "never").exists()


class TestConsoleSink:
    def test_header_printed_once_per_record_type(self) -> None:
        stream = io.StringIO()
        sink = ConsoleSink(stream)
        raw = RawSampleRecord(t_ms=0, sample=ImuSample(0.0, 0.0, 1.0, 0.0, 0.0, 0.0))
        sink.write(raw)
        sink.write(_record())
        sink.write(raw)
        sink.write(_record())
        lines = stream.getvalue().splitlines()
        assert lines.count(RAW_CSV_HEADER) == 1
        assert lines.count(WINDOW_CSV_HEADER) == 1
        assert len(lines) == 6


class TestGuardedSink:
    def test_failure_disables_sink_and_is_logged_once(self, caplog) -> None:
        failing = FailingSink(fail_after=1)
        guarded = GuardedSink(failing, name="csv")
        with caplog.at_level(logging.ERROR):
            assert guarded.write(_record()) is True
            assert guarded.write(_record()) is False
            assert guarded.write(_record()) is False
        assert failing.attempts == 2
        status = guarded.status()
        assert status.enabled is False
        assert status.records_written == 1
        assert "Input/output error" in (status.last_error or "")
        assert sum("disabled" in r.getMessage() for r in caplog.records) == 1

    def test_open_failure_disables_csv_sink(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        guarded = GuardedSink(CsvFileSink(blocker / "logs"), name="csv")
        assert guarded.write(_record()) is False
        assert guarded.enabled is False
        guarded.close()

    def test_failed_append_releases_csv_handle(self, tmp_path: Path) -> None:
        class BrokenHandle:
            def __init__(self, inner) -> None:
                self.inner = inner
                self.closed = False

            def write(self, text: str) -> int:
                raise OSError(28, "No space left on device")

            def close(self) -> None:
                self.closed = True
                self.inner.close()

        sink = CsvFileSink(tmp_path)
        guarded = GuardedSink(sink, name="csv")
        assert guarded.write(_record()) is True
        broken = BrokenHandle(sink._fh)
        sink._fh = broken

        assert guarded.write(_record()) is False
        assert guarded.enabled is False
        assert sink._fh is None
        assert broken.closed is True
        assert "No space left" in (guarded.last_error or "")
        guarded.close()

    def test_write_failure_closes_wrapped_sink(self) -> None:
        class FlakySink(ListSink):
            def write(self, record) -> None:
                raise OSError(5, "Input/output error")

        target = FlakySink()
        guarded = GuardedSink(target)
        assert guarded.write(_record()) is False
        assert target.closed is True

    def test_close_failure_recorded(self) -> None:
        guarded = GuardedSink(FailingSink(fail_after=10), name="flaky")
        guarded.write(_record())
        guarded.close()
        assert guarded.enabled is False
        assert guarded.last_error is not None
        assert guarded.last_error.startswith("close failed")

    def test_healthy_sink_passes_records_through(self) -> None:
        target = ListSink()
        guarded = GuardedSink(target)
        guarded.write(_record())
        guarded.close()
        assert len(target.records) == 1
        assert target.closed is True
        assert guarded.status().name == "ListSink"

    @pytest.mark.parametrize("exc", [PermissionError("read-only"), RuntimeError("boom")])
    def test_any_exception_is_isolated(self, exc: Exception) -> None:
        guarded = GuardedSink(FailingSink(exc=exc))
        assert guarded.write(_record()) is False
        assert guarded.enabled is False
