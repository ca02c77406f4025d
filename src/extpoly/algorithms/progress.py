"""
extpoly.algorithms.progress
===========================

Background size reporting for long running products.
"""

from __future__ import annotations

import itertools
import threading
from datetime import datetime
from typing import Callable, Optional

from extpoly.algorithms.store import TermStore
from extpoly.config import PROGRESS_INTERVAL
from extpoly.utils.exceptions import ExtPolyError
from extpoly.utils.log_config import logger

ProgressSink = Callable[[datetime, int], None]

THREAD_PREFIX = "extpoly-progress"
"""Name prefix of monitor threads."""

_counter = itertools.count(1)


def log_size(timestamp: datetime, size: int) -> None:
    """Default sink: one tab separated debug line per report."""
    logger.debug("%s\t%d", timestamp.isoformat(sep=" ", timespec="seconds"), size)


class ProgressMonitor:
    """Periodically report the size of a term store from a daemon thread.

    The first report is issued as soon as the monitor starts, then one every
    *interval* seconds until :meth:`stop` is called. The monitor only reads
    :meth:`TermStore.size` and never touches the terms.

    Parameters
    ----------
    store : :class:`~extpoly.algorithms.store.TermStore`
        Store to observe, typically the result of a running multiply.
    interval : float, default=PROGRESS_INTERVAL
        Seconds between two reports.
    sink : callable, optional
        Called as ``sink(timestamp, size)``. Defaults to :func:`log_size`.

    Examples
    --------
    >>> with ProgressMonitor(store, interval=5.0):
    ...     long_running_write(store)
    """

    def __init__(self, store: TermStore, interval: float = PROGRESS_INTERVAL,
                 sink: Optional[ProgressSink] = None) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._store = store
        self._interval = float(interval)
        self._sink = sink if sink is not None else log_size
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.report_count = 0
        self.last_size: Optional[int] = None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(store={self._store!r}, interval={self._interval}, "
            f"running={self.running})"
        )

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "ProgressMonitor":
        if self._thread is not None:
            raise RuntimeError("ProgressMonitor can only be started once")
        self._thread = threading.Thread(
            target=self._run, name=f"{THREAD_PREFIX}-{next(_counter)}", daemon=True
        )
        self._thread.start()
        return self

    def stop(self) -> None:
        """Cancel the periodic task and wait for the thread to finish."""
        self._stop_event.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()

    def _run(self) -> None:
        while True:
            self._report()
            if self._stop_event.wait(self._interval):
                break

    def _report(self) -> None:
        try:
            size = self._store.size()
        except ExtPolyError as exc:
            logger.warning("Progress monitor could not read store size: %s", exc)
            return
        self.last_size = size
        self.report_count += 1
        try:
            self._sink(datetime.now(), size)
        except Exception as exc:
            logger.warning("Progress sink %r failed: %s", self._sink, exc)

    def __enter__(self) -> "ProgressMonitor":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
