"""
Unit tests for the reporting scheduler loop.
"""

import io
import json
import queue
import threading
import time

import pytest

from procrate.reporting import (
    END_OF_STREAM,
    ReportingScheduler,
    ReportSink,
    ReportStore,
    StdoutSink,
    SchedulerState,
)
from procrate.validation import SerializationError


class ListSink(ReportSink):
    """Collects payloads in memory."""

    def __init__(self, fail_with=None):
        self.payloads = []
        self.fail_with = fail_with

    def write(self, payload: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.payloads.append(payload)


def _wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def pipeline():
    store = ReportStore(metric_prefix="t")
    report_queue = queue.Queue()
    sink = ListSink()
    return store, report_queue, sink


@pytest.mark.unit
class TestSchedulerInput:
    """Reports flow from the queue into the store."""

    def test_reports_are_inserted_and_end_of_stream_terminates(self, pipeline, make_report):
        store, report_queue, sink = pipeline
        scheduler = ReportingScheduler(store, report_queue, sink, report_interval=60.0, idle_interval=0.05)

        report_queue.put(make_report(role="a", pid=1))
        report_queue.put(make_report(role="a", pid=2))
        report_queue.put(make_report(role="b"))
        report_queue.put(END_OF_STREAM)
        scheduler.run()

        assert scheduler.state is SchedulerState.TERMINATED
        assert scheduler.reports_inserted == 3
        assert store.count() == 2
        assert store.find_by_role("a").pid == 2
        assert sink.payloads == []

    def test_stop_event_drains_queued_reports(self, pipeline, make_report):
        store, report_queue, sink = pipeline
        stop_event = threading.Event()
        scheduler = ReportingScheduler(
            store, report_queue, sink, report_interval=60.0, stop_event=stop_event
        )
        for role in ["a", "b", "c"]:
            report_queue.put(make_report(role=role))
        stop_event.set()

        scheduler.run()

        assert store.count() == 3
        assert report_queue.empty()
        assert scheduler.state is SchedulerState.TERMINATED

    def test_background_thread_start_stop(self, pipeline, make_report):
        store, report_queue, sink = pipeline
        scheduler = ReportingScheduler(store, report_queue, sink, report_interval=60.0, idle_interval=0.02)
        scheduler.start()
        report_queue.put(make_report())

        assert _wait_for(lambda: store.count() == 1)
        assert scheduler.stop(timeout=2.0)
        assert scheduler.state is SchedulerState.TERMINATED


@pytest.mark.unit
class TestSchedulerFlush:
    """Periodic flushing of the store to the sink."""

    def test_periodic_json_flush(self, pipeline, make_report):
        store, report_queue, sink = pipeline
        scheduler = ReportingScheduler(store, report_queue, sink, report_interval=0.05, idle_interval=0.01)
        report_queue.put(make_report(role="a"))
        scheduler.start()
        try:
            assert _wait_for(lambda: len(sink.payloads) >= 2)
        finally:
            scheduler.stop(timeout=2.0)

        data = json.loads(sink.payloads[0])
        assert data[0]["role"] == "a"
        assert data[0]["current_rate"] == -1
        assert scheduler.flushes >= 2

    def test_empty_store_is_not_flushed(self, pipeline):
        store, report_queue, sink = pipeline
        scheduler = ReportingScheduler(store, report_queue, sink, report_interval=0.02, idle_interval=0.01)
        scheduler.start()
        time.sleep(0.15)
        scheduler.stop(timeout=2.0)

        assert sink.payloads == []
        assert scheduler.flushes == 0

    def test_text_format(self, pipeline, make_report):
        store, report_queue, sink = pipeline
        store.insert(make_report(role="a", pid=9))
        scheduler = ReportingScheduler(store, report_queue, sink, report_interval=1.0, output_format="text")

        assert scheduler.flush()
        assert sink.payloads == [store.to_text()]
        assert 't_pid{role="a"} 9' in sink.payloads[0]

    def test_sink_failure_is_absorbed(self, make_report):
        store = ReportStore()
        store.insert(make_report())
        sink = ListSink(fail_with=OSError("disk full"))
        scheduler = ReportingScheduler(store, queue.Queue(), sink, report_interval=1.0)

        assert scheduler.flush() is False
        assert scheduler.flush_failures == 1
        assert store.count() == 1
        assert scheduler.state is SchedulerState.WAITING

    def test_loop_survives_unexpected_sink_error(self, make_report):
        stream = io.StringIO()
        stream.close()
        store = ReportStore()
        report_queue = queue.Queue()
        scheduler = ReportingScheduler(
            store, report_queue, StdoutSink(stream), report_interval=0.05, idle_interval=0.01
        )

        scheduler.start()
        try:
            report_queue.put(make_report(role="a"))
            assert _wait_for(lambda: scheduler.flush_failures >= 1)
            assert scheduler.thread.is_alive()

            report_queue.put(make_report(role="b"))
            assert _wait_for(lambda: store.find_by_role("b") is not None)
            assert scheduler.thread.is_alive()
        finally:
            assert scheduler.stop(timeout=2.0)

        assert scheduler.flushes == 0
        assert sorted(store.roles()) == ["a", "b"]

    def test_serialization_failure_is_absorbed(self, pipeline, make_report, monkeypatch):
        store, report_queue, sink = pipeline
        store.insert(make_report())

        def broken():
            raise SerializationError("encoder exploded")

        monkeypatch.setattr(store, "serialize_all", broken)
        scheduler = ReportingScheduler(store, report_queue, sink, report_interval=1.0)

        assert scheduler.flush() is False
        assert scheduler.flush_failures == 1
        assert sink.payloads == []

    def test_flush_on_exit(self, pipeline, make_report):
        store, report_queue, sink = pipeline
        scheduler = ReportingScheduler(
            store, report_queue, sink, report_interval=60.0, flush_on_exit=True
        )
        report_queue.put(make_report(role="final"))
        report_queue.put(END_OF_STREAM)
        scheduler.run()

        assert len(sink.payloads) == 1
        assert json.loads(sink.payloads[0])[0]["role"] == "final"


@pytest.mark.unit
class TestSchedulerValidation:

    def test_rejects_bad_interval(self, pipeline):
        store, report_queue, sink = pipeline
        with pytest.raises(ValueError):
            ReportingScheduler(store, report_queue, sink, report_interval=0)

    def test_rejects_unknown_format(self, pipeline):
        store, report_queue, sink = pipeline
        with pytest.raises(ValueError):
            ReportingScheduler(store, report_queue, sink, report_interval=1.0, output_format="xml")
