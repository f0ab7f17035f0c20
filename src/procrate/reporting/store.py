"""
Concurrency-safe store of the latest interval report per role.

The store keeps exactly one report per role, replacing it on every insert.
Readers may run concurrently with each other and with a single writer; all
access goes through a reader/writer lock, so a reader always sees either the
previous or the new report for a role, never a partial one.

Callers must serialize calls to `insert()`: the store supports one writer at
a time, which in the monitor is the reporting scheduler thread.
"""

import logging
from typing import Dict, List, Optional

from ..models.report import IntervalReport
from ..validation import EmptyStoreError, RoleNotFoundError
from .rwlock import ReadWriteLock
from .serialization import report_to_json, reports_to_json, reports_to_text

logger = logging.getLogger(__name__)


class ReportStore:
    """
    Mapping of role -> most recent IntervalReport.

    One instance is created by the monitor runner and handed to the
    components that publish or read reports.
    """

    def __init__(self, metric_prefix: str = "procrate"):
        self.metric_prefix = metric_prefix
        self._reports: Dict[str, IntervalReport] = {}
        self._lock = ReadWriteLock()

    def insert(self, report: IntervalReport) -> None:
        """Replace the stored report for `report.role`."""
        with self._lock.write_locked():
            self._reports[report.role] = report

    def count(self) -> int:
        with self._lock.read_locked():
            return len(self._reports)

    __len__ = count

    def is_empty(self) -> bool:
        with self._lock.read_locked():
            return not self._reports

    def roles(self) -> List[str]:
        with self._lock.read_locked():
            return list(self._reports)

    def find_by_role(self, role: str) -> Optional[IntervalReport]:
        """Return the latest report for `role`, or None if it never reported."""
        with self._lock.read_locked():
            return self._reports.get(role)

    def all(self) -> List[IntervalReport]:
        """
        Return the latest report of every role.

        In-process callers get the stored reports as they are, with undefined
        rates still NaN. Use `sanitize_report` for the -1 form the wire
        encodings publish.

        Raises:
            EmptyStoreError: If no report has been inserted yet.
        """
        with self._lock.read_locked():
            if not self._reports:
                raise EmptyStoreError()
            return list(self._reports.values())

    def serialize_role(self, role: str) -> bytes:
        """
        Encode a single role's report as JSON with undefined rates set to -1.

        Raises:
            RoleNotFoundError: If the role has no report.
            SerializationError: If encoding fails.
        """
        with self._lock.read_locked():
            report = self._reports.get(role)
            if report is None:
                raise RoleNotFoundError(role)
            return report_to_json(report)

    def serialize_all(self) -> bytes:
        """
        Encode every stored report as a JSON array with undefined rates set to -1.

        The order follows the mapping's iteration order and is not guaranteed
        to be stable across calls.

        Raises:
            SerializationError: If encoding fails.
        """
        with self._lock.read_locked():
            return reports_to_json(self._reports.values())

    to_json = serialize_all

    def to_text(self) -> str:
        """Render every stored report in the Prometheus text exposition format."""
        with self._lock.read_locked():
            return reports_to_text(self._reports.values(), self.metric_prefix)
