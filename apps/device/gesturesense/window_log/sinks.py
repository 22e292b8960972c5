"""Record sinks and failure isolation.

A sink is anything with ``write(record)`` and ``close()``. Sinks are wrapped
in :class:`GuardedSink` before the sampling loop sees them: the first
exception from a sink disables it, is logged once and kept for status
reporting, and never reaches feature extraction or classification.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, TextIO

from ..constants import DEFAULT_FLUSH_INTERVAL
from .records import WINDOW_CSV_HEADER

LOGGER = logging.getLogger(__name__)


class CsvRecord(Protocol):
    csv_header: str

    def to_csv_line(self) -> str: ...


class RecordSink(Protocol):
    def write(self, record: CsvRecord) -> None: ...

    def close(self) -> None: ...


class CsvFileSink:
    """Append-only session CSV with a periodic forced flush.

    The file ``session_<epoch_ms>.csv`` is created in *directory* on the first
    write (or an explicit :meth:`open`) and starts with *header*. Every
    *flush_interval* lines the buffer is flushed and synced to storage; lines
    written since the last sync may be lost on power loss. A failed append
    releases the file handle.
    """

    def __init__(
        self,
        directory: Path,
        *,
        header: str = WINDOW_CSV_HEADER,
        flush_interval: int = DEFAULT_FLUSH_INTERVAL,
    ):
        self.directory = Path(directory)
        self.header = header
        self.flush_interval = max(0, int(flush_interval))
        self.path: Path | None = None
        self.lines_written = 0
        self._fh: TextIO | None = None
        self._since_flush = 0

    def _session_path(self) -> Path:
        stamp = int(time.time() * 1000)
        path = self.directory / f"session_{stamp}.csv"
        suffix = 1
        while path.exists():
            path = self.directory / f"session_{stamp}_{suffix}.csv"
            suffix += 1
        return path

    def open(self) -> Path:
        if self._fh is not None and self.path is not None:
            return self.path
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._session_path()
        fh = path.open("w", encoding="utf-8", newline="")
        try:
            fh.write(self.header + "\n")
            fh.flush()
        except OSError:
            fh.close()
            raise
        self._fh = fh
        self.path = path
        LOGGER.info("CSV session log opened at %s", path)
        return path

    def write(self, record: CsvRecord) -> None:
        if self._fh is None:
            self.open()
        assert self._fh is not None
        try:
            self._fh.write(record.to_csv_line() + "\n")
            self.lines_written += 1
            self._since_flush += 1
            if self.flush_interval and self._since_flush >= self.flush_interval:
                self.flush()
        except OSError:
            self._release()
            raise

    def _release(self) -> None:
        """Drop a handle that failed mid-session without trying to sync it."""
        fh = self._fh
        self._fh = None
        if fh is None:
            return
        try:
            fh.close()
        except OSError:
            LOGGER.debug("Ignoring close failure on broken CSV log %s", self.path, exc_info=True)

    def flush(self) -> None:
        if self._fh is None:
            return
        self._fh.flush()
        os.fsync(self._fh.fileno())
        self._since_flush = 0

    def close(self) -> None:
        if self._fh is None:
            return
        fh = self._fh
        self._fh = None
        try:
            fh.flush()
            os.fsync(fh.fileno())
        finally:
            fh.close()
        LOGGER.info("CSV session log closed (%d lines) at %s", self.lines_written, self.path)


class ConsoleSink:
    """Print records as CSV lines, each record type's header once."""

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream
        self._headers_seen: set[str] = set()

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def write(self, record: CsvRecord) -> None:
        header = record.csv_header
        if header not in self._headers_seen:
            self._headers_seen.add(header)
            print(header, file=self.stream)
        print(record.to_csv_line(), file=self.stream)

    def close(self) -> None:
        self.stream.flush()


@dataclass(frozen=True, slots=True)
class SinkStatus:
    name: str
    enabled: bool
    records_written: int
    last_error: str | None


class GuardedSink:
    def __init__(self, sink: RecordSink, name: str | None = None):
        self.sink = sink
        self.name = name or type(sink).__name__
        self.enabled = True
        self.records_written = 0
        self.last_error: str | None = None

    def _disable(self, action: str, exc: Exception) -> None:
        self.enabled = False
        self.last_error = f"{action} failed: {exc}"
        LOGGER.error(
            "Sink %s disabled after %s failure — later windows will not be persisted here",
            self.name,
            action,
            exc_info=True,
        )

    def write(self, record: CsvRecord) -> bool:
        """Forward *record*; returns False when the sink is (or just became) disabled."""
        if not self.enabled:
            return False
        try:
            self.sink.write(record)
        except Exception as exc:
            self._disable("write", exc)
            self._release()
            return False
        self.records_written += 1
        return True

    def _release(self) -> None:
        try:
            self.sink.close()
        except Exception:
            LOGGER.debug("Ignoring close failure on disabled sink %s", self.name, exc_info=True)

    def close(self) -> None:
        try:
            self.sink.close()
        except Exception as exc:
            if self.enabled:
                self._disable("close", exc)
            else:
                LOGGER.debug("Ignoring close failure on disabled sink %s", self.name, exc_info=True)

    def status(self) -> SinkStatus:
        return SinkStatus(
            name=self.name,
            enabled=self.enabled,
            records_written=self.records_written,
            last_error=self.last_error,
        )
