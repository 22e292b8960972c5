"""Window and raw-sample records plus the sinks that persist or print them."""

from .records import (
    RAW_CSV_HEADER,
    WINDOW_CSV_FIELDS,
    WINDOW_CSV_HEADER,
    RawSampleRecord,
    WindowRecord,
    build_window_record,
)
from .sinks import ConsoleSink, CsvFileSink, GuardedSink, RecordSink, SinkStatus

__all__ = [
    "RAW_CSV_HEADER",
    "WINDOW_CSV_FIELDS",
    "WINDOW_CSV_HEADER",
    "ConsoleSink",
    "CsvFileSink",
    "GuardedSink",
    "RawSampleRecord",
    "RecordSink",
    "SinkStatus",
    "WindowRecord",
    "build_window_record",
]
