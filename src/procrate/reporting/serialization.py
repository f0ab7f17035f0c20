"""
Wire encodings of interval reports.

JSON cannot represent NaN or infinities, so every rate figure that is not a
finite number is replaced by -1 before encoding. The replacement always
happens on a copy; reports held by the store keep their real NaNs.
"""

import dataclasses
import json
import math
from typing import Any, Dict, Iterable, List, Optional

from ..models.report import IntervalReport
from ..validation import SerializationError

UNDEFINED_RATE_SENTINEL = -1.0

RATE_FIELDS = ("window_rate", "standard_dev", "lifetime_rate", "current_rate")


def _safe_rate(value: Optional[float]) -> float:
    if value is None or not math.isfinite(value):
        return UNDEFINED_RATE_SENTINEL
    return value


def sanitize_report(report: IntervalReport) -> IntervalReport:
    """Return a copy of `report` with undefined rate figures set to -1."""
    return dataclasses.replace(
        report, **{name: _safe_rate(getattr(report, name)) for name in RATE_FIELDS}
    )


def report_to_dict(report: IntervalReport) -> Dict[str, Any]:
    """
    Convert an already sanitized report to its JSON object form.

    `age` is a float number of seconds, not integer nanoseconds. Timestamps
    are ISO-8601 strings.
    """
    return {
        "pid": report.pid,
        "role": report.role,
        "first_seen": report.first_seen.isoformat(),
        "last_seen": report.last_seen.isoformat(),
        "age": report.age.total_seconds(),
        "window_rate": report.window_rate,
        "standard_dev": report.standard_dev,
        "lifetime_rate": report.lifetime_rate,
        "current_rate": report.current_rate,
        "times_restarted": report.times_restarted,
        "virtual_memory_bytes": report.virtual_memory_bytes,
        "rss_bytes": report.rss_bytes,
        "rate_histogram": dict(report.rate_histogram),
    }


def encode_json(payload: Any) -> bytes:
    """
    Encode a JSON payload, refusing non-finite floats.

    Raises:
        SerializationError: If the payload cannot be encoded.
    """
    try:
        return json.dumps(payload, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise SerializationError(f"failed to encode report payload: {e}") from e


def report_to_json(report: IntervalReport) -> bytes:
    return encode_json(report_to_dict(sanitize_report(report)))


def reports_to_json(reports: Iterable[IntervalReport]) -> bytes:
    return encode_json([report_to_dict(sanitize_report(r)) for r in reports])


def _escape_label(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\"", "\\\"").replace("\n", "\\n")


def report_to_text(report: IntervalReport, prefix: str = "procrate") -> str:
    """
    Render one report in the Prometheus text exposition format.

    Four newline-terminated lines: process id, start time in epoch seconds,
    age in seconds and virtual memory bytes.
    """
    label = f"{{role=\"{_escape_label(report.role)}\"}}"
    lines: List[str] = [
        f"{prefix}_pid{label} {report.pid}",
        f"{prefix}_process_start_seconds{label} {int(report.first_seen.timestamp())}",
        f"{prefix}_process_age_seconds{label} {int(report.age.total_seconds())}",
        f"{prefix}_virtual_memory_bytes{label} {report.virtual_memory_bytes}",
    ]
    return "\n".join(lines) + "\n"


def reports_to_text(reports: Iterable[IntervalReport], prefix: str = "procrate") -> str:
    return "".join(report_to_text(r, prefix) for r in reports)
