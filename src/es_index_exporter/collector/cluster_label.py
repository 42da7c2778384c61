"""Keeps the most recently observed cluster identity for label values."""

from __future__ import annotations

import logging
import queue
import threading

from .models import ClusterInfo

logger = logging.getLogger(__name__)


class ClusterLabelSynchronizer:
    """Single shared cell holding the latest :class:`ClusterInfo`.

    Pollers put updates on :attr:`updates`; a background thread drains the
    queue into the cell (last write wins). Scrapes call :meth:`current`,
    which only takes the cell lock and never waits on the queue, so an update
    still sitting in the queue is not visible yet.
    """

    def __init__(self, initial: ClusterInfo | None = None, poll_timeout: float = 0.5) -> None:
        self._info = initial or ClusterInfo()
        self._lock = threading.Lock()
        self._poll_timeout = poll_timeout
        self.updates: queue.Queue[ClusterInfo | None] = queue.Queue()
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()

    def current(self) -> ClusterInfo:
        with self._lock:
            return self._info

    def update(self, info: ClusterInfo | None) -> None:
        """Overwrite the cell; ``None`` is ignored."""
        if info is None:
            return
        with self._lock:
            self._info = info
        logger.debug("received cluster info update (cluster=%s)", info.cluster_name)

    def publish(self, info: ClusterInfo | None) -> None:
        """Queue *info* for the background thread."""
        self.updates.put(info)

    def _run(self) -> None:
        """Background thread loop."""
        logger.debug("starting cluster info receive loop")
        while not self._stop_event.is_set():
            try:
                info = self.updates.get(timeout=self._poll_timeout)
            except queue.Empty:
                continue
            try:
                self.update(info)
            finally:
                self.updates.task_done()
        logger.debug("exiting cluster info receive loop")

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="cluster-label-sync", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None
