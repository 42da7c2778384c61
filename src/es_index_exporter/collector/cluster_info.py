"""Polls the cluster root endpoint and publishes its identity to subscribers."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterator
from typing import Callable

import httpx
from prometheus_client import Gauge
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.metrics_core import Metric

from ..errors import DecodeError, FetchError
from .base import BaseCollector
from .http import decode_cluster_info, fetch
from .models import ClusterInfo

logger = logging.getLogger(__name__)

VERSION_INFO_LABELS = ["cluster", "cluster_uuid", "version"]


class ClusterInfoRetriever(BaseCollector):
    """Retrieves ``GET /`` on an interval and hands the result to subscribers.

    Subscribers are callables such as
    :meth:`ClusterLabelSynchronizer.publish`. The retriever also exports
    whether the last poll succeeded, when it last did, and the version
    reported by the cluster.
    """

    def __init__(
        self,
        client: httpx.Client,
        base_url: str,
        namespace: str = "elasticsearch",
        interval_seconds: float = 300.0,
    ) -> None:
        self._client = client
        self._base_url = base_url
        self._namespace = namespace
        self._interval = interval_seconds
        self._subscribers: list[Callable[[ClusterInfo], None]] = []
        self._last_info: ClusterInfo | None = None
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()

        self._up = Gauge(
            f"{namespace}_clusterinfo_up",
            "Up metric for the cluster info collector",
            registry=None,
        )
        self._last_success = Gauge(
            f"{namespace}_clusterinfo_last_retrieval_success_ts",
            "Timestamp of the last successful cluster info retrieval",
            registry=None,
        )
        self._version_name = f"{namespace}_clusterinfo_version_info"
        self._version_help = "Constant metric with the cluster version information as labels"

    @property
    def name(self) -> str:
        return f"{self._namespace}_clusterinfo"

    @property
    def last_info(self) -> ClusterInfo | None:
        return self._last_info

    def subscribe(self, callback: Callable[[ClusterInfo], None]) -> None:
        """Register a callback to receive every retrieved cluster identity."""
        self._subscribers.append(callback)

    def retrieve_once(self) -> ClusterInfo | None:
        """Poll the cluster once and notify subscribers on success."""
        try:
            info = decode_cluster_info(fetch(self._client, self._base_url, "/"))
        except (FetchError, DecodeError) as exc:
            self._up.set(0)
            logger.warning("failed to retrieve cluster info: %s", exc)
            return None

        self._up.set(1)
        self._last_success.set(time.time())
        self._last_info = info
        for callback in self._subscribers:
            try:
                callback(info)
            except Exception:
                logger.exception("Cluster info subscriber failed")
        return info

    def describe(self) -> list[Metric]:
        return [
            *self._up.describe(),
            *self._last_success.describe(),
            GaugeMetricFamily(self._version_name, self._version_help, labels=VERSION_INFO_LABELS),
        ]

    def collect(self) -> Iterator[Metric]:
        yield from self._up.collect()
        yield from self._last_success.collect()
        info = self._last_info
        if info is not None:
            family = GaugeMetricFamily(self._version_name, self._version_help, labels=VERSION_INFO_LABELS)
            family.add_metric([info.cluster_name, info.cluster_uuid, info.version], 1)
            yield family

    def _run(self) -> None:
        """Background thread loop."""
        while not self._stop_event.is_set():
            self.retrieve_once()
            self._stop_event.wait(self._interval)

    def start(self) -> None:
        """Start polling in the background."""
        if self._thread is not None:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="cluster-info", daemon=True)
        self._thread.start()
        logger.info("ClusterInfoRetriever started (interval=%.1fs)", self._interval)

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None
        logger.info("ClusterInfoRetriever stopped")
