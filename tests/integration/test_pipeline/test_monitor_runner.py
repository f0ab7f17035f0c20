"""
Integration tests for the assembled monitoring pipeline.

A fake process lister stands in for psutil so the tests control CPU usage
while the sampling worker, reporting scheduler and store run for real.
"""

import dataclasses
import json
import threading
from datetime import datetime, timezone

import pytest

from procrate.cli import MonitorRunner
from procrate.collectors import AbstractProcessLister
from procrate.config import load_config
from procrate.models import ProcessObservation
from procrate.reporting import ReportSink


class BusyLister(AbstractProcessLister):
    """Reports every configured role as a process burning CPU at `rate`."""

    def __init__(self, roles, rate=0.5, pid=4242):
        super().__init__(roles)
        self.rate = rate
        self.pid = pid
        self.started = datetime.now(timezone.utc)

    def list_processes(self):
        now = datetime.now(timezone.utc)
        elapsed = (now - self.started).total_seconds()
        return [
            ProcessObservation(
                role=role.name,
                pid=self.pid,
                timestamp=now,
                cpu_time=elapsed * self.rate,
                virtual_memory_bytes=1 << 20,
                rss_bytes=1 << 16,
            )
            for role in self.roles
        ]


class ListSink(ReportSink):

    def __init__(self):
        self.payloads = []
        self.closed = False
        self._lock = threading.Lock()

    def write(self, payload: str) -> None:
        with self._lock:
            self.payloads.append(payload)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def app_config(config_file):
    return load_config(config_file)


@pytest.mark.integration
class TestMonitorRunner:

    def test_run_publishes_json_snapshots(self, app_config):
        sink = ListSink()
        runner = MonitorRunner(app_config, lister=BusyLister(app_config.roles), sink=sink)

        runner.run(duration=0.6)

        assert sink.closed
        assert len(sink.payloads) >= 2
        snapshot = json.loads(sink.payloads[-1])
        assert [entry["role"] for entry in snapshot] == ["alpha"]
        entry = snapshot[0]
        assert entry["pid"] == 4242
        assert entry["current_rate"] == pytest.approx(0.5, abs=0.1)
        assert entry["lifetime_rate"] == pytest.approx(0.5, abs=0.1)
        assert entry["times_restarted"] == 0
        assert set(entry["rate_histogram"]) == {"0-25%", "25-50%", "50%+"}

        assert runner.worker.reports_produced >= 2
        assert runner.scheduler.reports_inserted == runner.worker.reports_produced
        assert runner.store.find_by_role("alpha").pid == 4242

    def test_text_output(self, app_config):
        monitor = dataclasses.replace(app_config.monitor, output_format="text")
        app_config = dataclasses.replace(app_config, monitor=monitor)
        sink = ListSink()
        runner = MonitorRunner(app_config, lister=BusyLister(app_config.roles), sink=sink)

        runner.run(duration=0.3)

        assert sink.payloads
        assert 'testrate_pid{role="alpha"} 4242' in sink.payloads[-1]

    def test_request_shutdown_stops_run(self, app_config):
        sink = ListSink()
        runner = MonitorRunner(app_config, lister=BusyLister(app_config.roles), sink=sink)
        timer = threading.Timer(0.2, runner.request_shutdown)

        timer.start()
        runner.run()
        timer.join()

        assert runner.shutdown_requested.is_set()
        assert not runner.worker.thread.is_alive()
        assert not runner.scheduler.thread.is_alive()
        assert sink.closed

    def test_shutdown_without_start(self, app_config):
        sink = ListSink()
        runner = MonitorRunner(app_config, lister=BusyLister(app_config.roles), sink=sink)

        runner.shutdown()

        assert runner.shutdown_requested.is_set()
        assert sink.payloads == []
