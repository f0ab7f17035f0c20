"""
Monitor runner for CLI integration.

This module assembles the pipeline (process lister -> rate computer ->
report queue -> reporting scheduler -> report store -> sink) and owns its
lifecycle. The sampling worker stops on the shutdown event; the scheduler
stops once the end-of-stream marker queued behind the last report arrives.
"""

import logging
import queue
import threading
from typing import Optional

from ..collectors.base import AbstractProcessLister
from ..collectors.psutil_lister import PsutilProcessLister
from ..collectors.sampling_worker import SamplingWorker
from ..models.config import AppConfig
from ..reporting.scheduler import END_OF_STREAM, ReportingScheduler
from ..reporting.sinks import ReportSink, create_sink
from ..reporting.store import ReportStore
from ..stats.rate_computer import RateComputer

logger = logging.getLogger(__name__)


class MonitorRunner:
    """
    Owns the single ReportStore of a monitor process and the threads around it.

    Args:
        app_config: Validated application configuration.
        lister: Process lister; a PsutilProcessLister over the configured roles by default.
        sink: Output sink; chosen from `monitor.output_file` by default.
    """

    def __init__(
        self,
        app_config: AppConfig,
        lister: Optional[AbstractProcessLister] = None,
        sink: Optional[ReportSink] = None,
    ):
        monitor = app_config.monitor
        self.app_config = app_config
        self.shutdown_requested = threading.Event()

        self.store = ReportStore(metric_prefix=monitor.metric_prefix)
        self.report_queue: "queue.Queue" = queue.Queue()
        self.computer = RateComputer(
            window_size=monitor.window_size,
            histogram_boundaries=monitor.histogram_boundaries,
        )
        self.lister = lister or PsutilProcessLister(app_config.roles)
        self.sink = sink or create_sink(monitor.output_file)

        self.worker = SamplingWorker(
            lister=self.lister,
            computer=self.computer,
            report_queue=self.report_queue,
            sampling_interval=monitor.sampling_interval_seconds,
            stop_event=self.shutdown_requested,
        )
        self.scheduler = ReportingScheduler(
            store=self.store,
            report_queue=self.report_queue,
            sink=self.sink,
            report_interval=monitor.report_interval_seconds,
            output_format=monitor.output_format,
            idle_interval=min(1.0, monitor.sampling_interval_seconds),
            flush_on_exit=monitor.flush_on_exit,
        )
        self._started = False

    def start(self) -> None:
        if self._started:
            logger.warning("MonitorRunner already started")
            return
        logger.info(
            f"Monitoring roles {[r.name for r in self.app_config.roles]} "
            f"(sampling every {self.app_config.monitor.sampling_interval_seconds}s, "
            f"reporting every {self.app_config.monitor.report_interval_seconds}s)"
        )
        self.scheduler.start()
        self.worker.start()
        self._started = True

    def request_shutdown(self) -> None:
        """Signal every component to stop; safe to call from a signal handler."""
        self.shutdown_requested.set()

    def run(self, duration: Optional[float] = None) -> None:
        """
        Start the pipeline and block until shutdown is requested.

        Args:
            duration: Optional number of seconds after which to stop on our own.
        """
        self.start()
        try:
            self.shutdown_requested.wait(timeout=duration)
        finally:
            self.shutdown()

    def shutdown(self, timeout: float = 5.0) -> None:
        """Stop the producer first, then let the scheduler drain and exit."""
        self.shutdown_requested.set()
        if not self._started:
            return
        self.worker.stop(timeout=timeout)
        self.report_queue.put(END_OF_STREAM)
        self.scheduler.stop(timeout=timeout)
        self.sink.close()
        self._started = False
        logger.info(
            f"Monitor stopped: {self.worker.reports_produced} reports produced, "
            f"{self.store.count()} roles in store"
        )
