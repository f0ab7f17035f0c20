"""
Sampling worker.

Runs the producer side of the pipeline: at every sampling interval it asks
the process lister for fresh observations, folds them into the rate computer
and places the resulting reports on the report queue.
"""

import logging
import queue
import threading
import time
from typing import Optional

from ..models.report import IntervalReport
from ..stats.rate_computer import RateComputer
from .base import AbstractProcessLister

logger = logging.getLogger(__name__)


class SamplingWorker:
    """
    Producer thread driving a RateComputer from a process lister.

    The worker shares `stop_event` with the rest of the pipeline; setting it
    ends the loop after the current iteration.
    """

    def __init__(
        self,
        lister: AbstractProcessLister,
        computer: RateComputer,
        report_queue: "queue.Queue[Optional[IntervalReport]]",
        sampling_interval: float,
        stop_event: Optional[threading.Event] = None,
    ):
        self.lister = lister
        self.computer = computer
        self.report_queue = report_queue
        self.sampling_interval = sampling_interval
        self.stop_event = stop_event or threading.Event()

        self.thread: Optional[threading.Thread] = None
        self.iterations = 0
        self.reports_produced = 0
        self.failed_iterations = 0

    def start(self) -> None:
        if self.thread and self.thread.is_alive():
            logger.warning("SamplingWorker already running")
            return
        self.thread = threading.Thread(
            target=self.sampling_loop, name="SamplingWorker", daemon=True
        )
        self.thread.start()
        logger.info(f"SamplingWorker started (interval: {self.sampling_interval}s)")

    def stop(self, timeout: float = 5.0) -> bool:
        self.stop_event.set()
        if self.thread and self.thread.is_alive():
            self.thread.join(timeout=timeout)
            if self.thread.is_alive():
                logger.warning("SamplingWorker did not stop within timeout")
                return False
        logger.info("SamplingWorker stopped")
        return True

    def sample_once(self) -> int:
        """
        Take one round of observations and enqueue the resulting reports.

        Returns:
            Number of reports placed on the queue.
        """
        produced = 0
        for observation in self.lister.list_processes():
            report = self.computer.observe(observation)
            if report is None:
                continue
            self.report_queue.put(report)
            produced += 1
        self.reports_produced += produced
        return produced

    def sampling_loop(self) -> None:
        logger.debug("SamplingWorker loop started")
        while not self.stop_event.is_set():
            interval_start = time.monotonic()
            self.iterations += 1

            try:
                produced = self.sample_once()
                logger.debug(f"Iteration {self.iterations}: produced {produced} reports")
            except Exception as e:
                # A broken iteration must not kill the producer; retry next tick.
                self.failed_iterations += 1
                logger.warning(f"Sampling iteration {self.iterations} failed: {e}", exc_info=True)

            elapsed = time.monotonic() - interval_start
            sleep_time = self.sampling_interval - elapsed
            if sleep_time > 0:
                self.stop_event.wait(sleep_time)
            elif sleep_time < 0:
                logger.warning(
                    f"Sampling took {elapsed:.2f}s, longer than interval of {self.sampling_interval}s."
                )

        logger.info(f"SamplingWorker loop finished after {self.iterations} iterations")
