"""Collector for per-index settings from ``/_all/_settings``."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

import httpx
from prometheus_client import Counter, Gauge
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.metrics_core import Metric

from ..errors import DecodeError, FetchError
from .base import BaseCollector, json_parse_failures_counter
from .extract import is_included, is_read_only, settings_metrics
from .http import decode_indices_settings, fetch
from .models import IndexSettings

logger = logging.getLogger(__name__)

SETTINGS_PATH = "/_all/_settings"
INDEX_LABELS = ["index"]


class IndicesSettingsCollector(BaseCollector):
    """Exports total-fields limit, replica count and creation date per index,
    plus the number of read-only indices in the cluster.
    """

    def __init__(
        self,
        client: httpx.Client,
        base_url: str,
        namespace: str = "elasticsearch",
        included_indices: Iterable[str] = (),
        json_parse_failures: Counter | None = None,
    ) -> None:
        self._client = client
        self._base_url = base_url
        self._namespace = namespace
        self._included = frozenset(included_indices)
        self._metrics = settings_metrics(namespace)

        self._read_only_indices = Gauge(
            f"{namespace}_indices_settings_stats_read_only_indices",
            "Current number of read only indices within cluster",
            registry=None,
        )
        # the collector that creates the counter is the one that exposes it
        self._owns_parse_failures = json_parse_failures is None
        if json_parse_failures is None:
            json_parse_failures = json_parse_failures_counter(namespace)
        self._json_parse_failures = json_parse_failures

    @property
    def name(self) -> str:
        return f"{self._namespace}_indices_settings"

    @property
    def json_parse_failures(self) -> Counter:
        return self._json_parse_failures

    def describe(self) -> list[Metric]:
        families: list[Metric] = [*self._read_only_indices.describe()]
        for metric in self._metrics:
            families.append(GaugeMetricFamily(metric.name, metric.documentation, labels=INDEX_LABELS))
        if self._owns_parse_failures:
            families.extend(self._json_parse_failures.describe())
        return families

    def fetch_and_decode(self) -> dict[str, IndexSettings]:
        raw = fetch(self._client, self._base_url, SETTINGS_PATH)
        return decode_indices_settings(raw)

    def collect(self) -> Iterator[Metric]:
        yield from self._collect_settings()
        if self._owns_parse_failures:
            yield from self._json_parse_failures.collect()

    def _collect_settings(self) -> Iterator[Metric]:
        try:
            response = self.fetch_and_decode()
        except FetchError as exc:
            self._read_only_indices.set(0)
            logger.warning("failed to fetch cluster settings stats: %s", exc)
            return
        except DecodeError as exc:
            self._json_parse_failures.inc()
            self._read_only_indices.set(0)
            logger.warning("failed to decode cluster settings stats: %s", exc)
            return

        families = [
            GaugeMetricFamily(metric.name, metric.documentation, labels=INDEX_LABELS)
            for metric in self._metrics
        ]
        read_only = 0
        for index_name, settings in response.items():
            if not is_included(index_name, self._included):
                continue
            if is_read_only(settings):
                read_only += 1
            for metric, family in zip(self._metrics, families):
                family.add_metric([index_name], metric.value(settings))

        yield from families
        self._read_only_indices.set(read_only)
        yield from self._read_only_indices.collect()
