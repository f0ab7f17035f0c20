"""
Report publication: the concurrent report store, its wire encodings, output
sinks and the scheduler that ties them together.
"""

from .rwlock import ReadWriteLock
from .scheduler import END_OF_STREAM, ReportingScheduler, SchedulerState
from .serialization import (
    UNDEFINED_RATE_SENTINEL,
    report_to_dict,
    report_to_json,
    report_to_text,
    reports_to_json,
    reports_to_text,
    sanitize_report,
)
from .sinks import FileSink, ReportSink, StdoutSink, create_sink
from .store import ReportStore

__all__ = [
    "END_OF_STREAM",
    "FileSink",
    "ReadWriteLock",
    "ReportSink",
    "ReportStore",
    "ReportingScheduler",
    "SchedulerState",
    "StdoutSink",
    "UNDEFINED_RATE_SENTINEL",
    "create_sink",
    "report_to_dict",
    "report_to_json",
    "report_to_text",
    "reports_to_json",
    "reports_to_text",
    "sanitize_report",
]
