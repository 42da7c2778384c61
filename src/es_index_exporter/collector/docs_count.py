"""Collector for per-index document counts from ``/_cat/indices``."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

import httpx
from prometheus_client import Counter
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.metrics_core import Metric

from ..errors import DecodeError, FetchError
from .base import BaseCollector, json_parse_failures_counter
from .cluster_label import ClusterLabelSynchronizer
from .extract import docs_count, is_included
from .http import decode_docs_count, fetch
from .models import IndexDocs

logger = logging.getLogger(__name__)

CAT_INDICES_PATH = "/_cat/indices"
CAT_INDICES_PARAMS = {"format": "json", "h": "index,docs.count"}
DOCS_COUNT_LABELS = ["index", "cluster"]


class DocsCountCollector(BaseCollector):
    """Exports the number of documents per index, labeled with the cluster name.

    The cluster name comes from *cluster_labels*, which an independent
    cluster-info poller keeps up to date; it reads ``unknown_cluster`` until
    the first update arrives.
    """

    def __init__(
        self,
        client: httpx.Client,
        base_url: str,
        namespace: str = "elasticsearch",
        included_indices: Iterable[str] = (),
        json_parse_failures: Counter | None = None,
        cluster_labels: ClusterLabelSynchronizer | None = None,
    ) -> None:
        self._client = client
        self._base_url = base_url
        self._namespace = namespace
        self._included = frozenset(included_indices)
        self._cluster_labels = cluster_labels or ClusterLabelSynchronizer()
        self._metric_name = f"{namespace}_index_docs_count"
        self._metric_help = "Number of documents per index."

        # the collector that creates the counter is the one that exposes it
        self._owns_parse_failures = json_parse_failures is None
        if json_parse_failures is None:
            json_parse_failures = json_parse_failures_counter(namespace)
        self._json_parse_failures = json_parse_failures

    @property
    def name(self) -> str:
        return f"{self._namespace}_docs_count"

    @property
    def json_parse_failures(self) -> Counter:
        return self._json_parse_failures

    @property
    def cluster_labels(self) -> ClusterLabelSynchronizer:
        """Synchronizer a cluster-info poller publishes updates to."""
        return self._cluster_labels

    def describe(self) -> list[Metric]:
        families: list[Metric] = [
            GaugeMetricFamily(self._metric_name, self._metric_help, labels=DOCS_COUNT_LABELS),
        ]
        if self._owns_parse_failures:
            families.extend(self._json_parse_failures.describe())
        return families

    def fetch_and_decode(self) -> list[IndexDocs]:
        raw = fetch(self._client, self._base_url, CAT_INDICES_PATH, CAT_INDICES_PARAMS)
        return decode_docs_count(raw)

    def collect(self) -> Iterator[Metric]:
        yield from self._collect_docs()
        if self._owns_parse_failures:
            yield from self._json_parse_failures.collect()

    def _collect_docs(self) -> Iterator[Metric]:
        try:
            records = self.fetch_and_decode()
        except FetchError as exc:
            logger.warning("failed to fetch index stats: %s", exc)
            return
        except DecodeError as exc:
            self._json_parse_failures.inc()
            logger.warning("failed to parse JSON: %s", exc)
            return

        cluster_name = self._cluster_labels.current().cluster_name
        family = GaugeMetricFamily(self._metric_name, self._metric_help, labels=DOCS_COUNT_LABELS)
        for record in records:
            if not is_included(record.index, self._included):
                continue
            count = docs_count(record)
            if count is None:
                continue
            family.add_metric([record.index, cluster_name], count)
        yield family
