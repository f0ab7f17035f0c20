"""
Output sinks for flushed snapshots.

This module provides:
- ReportSink: abstract base class for anything that accepts serialized snapshots.
- StdoutSink: prints each snapshot to standard output.
- FileSink: appends each snapshot to a file.
"""

import logging
import sys
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, TextIO, Union

logger = logging.getLogger(__name__)


class ReportSink(ABC):
    """
    Destination of serialized snapshots.

    `write()` may raise (typically OSError); the reporting scheduler treats any
    exception as a failed flush and retries with fresh data on the next tick.
    """

    @abstractmethod
    def write(self, payload: str) -> None:
        pass

    def close(self) -> None:
        """Release any resources held by the sink."""


class StdoutSink(ReportSink):
    """Writes each snapshot to a text stream, standard output by default."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    def write(self, payload: str) -> None:
        stream = self._stream or sys.stdout
        stream.write(payload if payload.endswith("\n") else payload + "\n")
        stream.flush()


class FileSink(ReportSink):
    """Appends each snapshot to a file, opening it lazily on first write."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._file: Optional[TextIO] = None
        self._lock = threading.Lock()

    def write(self, payload: str) -> None:
        with self._lock:
            if self._file is None:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._file = open(self.path, "a", encoding="utf-8")
                logger.info(f"Writing reports to {self.path}")
            self._file.write(payload if payload.endswith("\n") else payload + "\n")
            self._file.flush()

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None


def create_sink(output_file: Optional[str]) -> ReportSink:
    """Return a FileSink for `output_file`, or a StdoutSink when it is empty."""
    if output_file:
        return FileSink(output_file)
    return StdoutSink()
