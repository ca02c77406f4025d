import threading
import time
from datetime import datetime

import pytest

from extpoly.algorithms.progress import THREAD_PREFIX, ProgressMonitor
from extpoly.algorithms.store import MemoryTermStore
from extpoly.utils.exceptions import IOFailure


class _Recorder:
    def __init__(self):
        self.reports = []
        self.lock = threading.Lock()

    def __call__(self, timestamp, size):
        with self.lock:
            self.reports.append((timestamp, size))


class _BrokenStore(MemoryTermStore):
    def size(self):
        raise IOFailure("size unavailable")


def _monitor_threads():
    return [t for t in threading.enumerate() if t.name.startswith(THREAD_PREFIX) and t.is_alive()]


def test_reports_immediately_and_stops():
    store = MemoryTermStore([("x", 1.0), ("y", 2.0)])
    sink = _Recorder()
    monitor = ProgressMonitor(store, interval=60.0, sink=sink)
    monitor.start()
    deadline = time.monotonic() + 5.0
    while not sink.reports and time.monotonic() < deadline:
        time.sleep(0.01)
    monitor.stop()

    assert not monitor.running
    assert len(sink.reports) == 1
    timestamp, size = sink.reports[0]
    assert isinstance(timestamp, datetime)
    assert size == 2
    assert monitor.last_size == 2


def test_periodic_reports_follow_the_store():
    store = MemoryTermStore()
    sink = _Recorder()
    with ProgressMonitor(store, interval=0.01, sink=sink) as monitor:
        for i in range(20):
            store.append("x", float(i))
            time.sleep(0.005)
        time.sleep(0.05)
    assert not monitor.running
    assert monitor.report_count >= 2
    sizes = [size for _, size in sink.reports]
    assert sizes == sorted(sizes)
    assert sizes[-1] <= 20


def test_stop_joins_thread():
    with ProgressMonitor(MemoryTermStore(), interval=3600.0, sink=_Recorder()):
        pass
    assert _monitor_threads() == []


def test_size_errors_do_not_escape():
    monitor = ProgressMonitor(_BrokenStore(), interval=0.01, sink=_Recorder())
    with monitor:
        time.sleep(0.05)
    assert monitor.report_count == 0
    assert monitor.last_size is None


def test_invalid_interval():
    with pytest.raises(ValueError):
        ProgressMonitor(MemoryTermStore(), interval=0)


def test_cannot_start_twice():
    monitor = ProgressMonitor(MemoryTermStore(), interval=3600.0, sink=_Recorder())
    with monitor:
        with pytest.raises(RuntimeError):
            monitor.start()
