"""
Reporting scheduler.

The scheduler bridges the rate computer and the outside world: it moves
freshly computed reports from a queue into the report store and, on a fixed
period, flushes the whole store to an output sink.
"""

import logging
import queue
import threading
import time
from enum import Enum
from typing import Optional

from ..models.report import IntervalReport
from ..validation import ErrorSeverity, SerializationError, handle_error
from .sinks import ReportSink
from .store import ReportStore

logger = logging.getLogger(__name__)

# Placed on the report queue to end the scheduler loop.
END_OF_STREAM = None


class SchedulerState(Enum):
    """Lifecycle states of the reporting loop."""
    WAITING = "waiting-for-input"
    FLUSHING = "flushing"
    TERMINATED = "terminated"


class ReportingScheduler:
    """
    Consumes reports into a ReportStore and periodically flushes it.

    The loop waits on the report queue with a timeout bounded by the time
    left until the next flush, so it reacts to whichever of {new report,
    flush tick} comes first without spinning. It terminates when it reads
    END_OF_STREAM from the queue or when `stop_event` is set; in the latter
    case reports already queued are inserted before exiting.
    """

    def __init__(
        self,
        store: ReportStore,
        report_queue: "queue.Queue[Optional[IntervalReport]]",
        sink: ReportSink,
        report_interval: float,
        output_format: str = "json",
        stop_event: Optional[threading.Event] = None,
        idle_interval: float = 1.0,
        flush_on_exit: bool = False,
    ):
        """
        Args:
            store: Store receiving every report read from the queue.
            report_queue: Queue fed by the sampling side.
            sink: Destination of flushed snapshots.
            report_interval: Seconds between two flushes.
            output_format: "json" or "text".
            stop_event: Shared cancellation signal; a private one is created if omitted.
            idle_interval: Upper bound on a single wait for input, in seconds.
            flush_on_exit: Emit one last flush when the loop terminates.
        """
        if report_interval <= 0:
            raise ValueError(f"report_interval must be > 0, got {report_interval}")
        if output_format not in ("json", "text"):
            raise ValueError(f"Unsupported output format: {output_format}")

        self.store = store
        self.report_queue = report_queue
        self.sink = sink
        self.report_interval = report_interval
        self.output_format = output_format
        self.stop_event = stop_event or threading.Event()
        self.idle_interval = idle_interval
        self.flush_on_exit = flush_on_exit

        self.state = SchedulerState.WAITING
        self.thread: Optional[threading.Thread] = None

        self.reports_inserted = 0
        self.flushes = 0
        self.flush_failures = 0

    def start(self) -> None:
        """Run the loop in a background thread."""
        if self.thread and self.thread.is_alive():
            logger.warning("ReportingScheduler already running")
            return
        self.state = SchedulerState.WAITING
        self.thread = threading.Thread(
            target=self.run, name="ReportingScheduler", daemon=True
        )
        self.thread.start()
        logger.info(f"ReportingScheduler started (interval: {self.report_interval}s, format: {self.output_format})")

    def stop(self, timeout: float = 5.0) -> bool:
        """
        Signal cancellation and wait for the loop to finish.

        Returns:
            True if the loop has terminated, False if the timeout was reached.
        """
        self.stop_event.set()
        if self.thread and self.thread.is_alive():
            self.thread.join(timeout=timeout)
            if self.thread.is_alive():
                logger.warning("ReportingScheduler did not stop within timeout")
                return False
        logger.info("ReportingScheduler stopped")
        return True

    def run(self) -> None:
        """The reporting loop; returns once terminated."""
        logger.debug("ReportingScheduler loop started")
        next_tick = time.monotonic() + self.report_interval

        try:
            while True:
                if self.stop_event.is_set():
                    logger.info("Stop requested, draining queued reports")
                    self._drain()
                    break

                timeout = max(0.0, min(next_tick - time.monotonic(), self.idle_interval))
                try:
                    item = self.report_queue.get(timeout=timeout)
                except queue.Empty:
                    pass
                else:
                    if item is END_OF_STREAM:
                        logger.info("End of report stream received")
                        break
                    self._insert(item)

                now = time.monotonic()
                if now >= next_tick:
                    self.flush()
                    next_tick += self.report_interval
                    if next_tick <= now:
                        # Missed ticks are dropped rather than flushed back to back.
                        next_tick = now + self.report_interval
        finally:
            if self.flush_on_exit:
                self.flush()
            self.state = SchedulerState.TERMINATED
            logger.info(
                f"ReportingScheduler terminated after {self.reports_inserted} reports "
                f"and {self.flushes} flushes ({self.flush_failures} failed)"
            )

    def flush(self) -> bool:
        """
        Serialize the store and write it to the sink.

        Failures are logged and absorbed; the store is left untouched so the
        next tick retries with fresh data.

        Returns:
            True if a snapshot was written, False if the store was empty or
            the flush failed.
        """
        if self.store.is_empty():
            return False

        self.state = SchedulerState.FLUSHING
        try:
            try:
                if self.output_format == "text":
                    payload = self.store.to_text()
                else:
                    payload = self.store.serialize_all().decode("utf-8")
            except SerializationError as e:
                return self._flush_failed(e, "serializing report snapshot")

            try:
                self.sink.write(payload)
            except Exception as e:
                # Any sink error skips this tick only; the loop must keep consuming.
                return self._flush_failed(e, "writing report snapshot to sink")
        finally:
            self.state = SchedulerState.WAITING

        self.flushes += 1
        return True

    def _flush_failed(self, error: Exception, context: str) -> bool:
        self.flush_failures += 1
        handle_error(
            error=error,
            context=f"periodic report flush ({context})",
            severity=ErrorSeverity.ERROR,
            reraise=False,
            logger=logger,
        )
        return False

    def _insert(self, report: IntervalReport) -> None:
        self.store.insert(report)
        self.reports_inserted += 1

    def _drain(self) -> None:
        while True:
            try:
                item = self.report_queue.get_nowait()
            except queue.Empty:
                return
            if item is END_OF_STREAM:
                return
            self._insert(item)
