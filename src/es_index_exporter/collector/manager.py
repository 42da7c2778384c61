"""Collector manager that wires the Elasticsearch collectors together."""

from __future__ import annotations

import logging

import httpx
from prometheus_client import CollectorRegistry, Counter
from prometheus_client.metrics_core import Metric

from ..config import CollectorConfig
from .base import BaseCollector
from .cluster_info import ClusterInfoRetriever
from .cluster_label import ClusterLabelSynchronizer
from .docs_count import DocsCountCollector
from .indices_settings import IndicesSettingsCollector

logger = logging.getLogger(__name__)


class CollectorManager:
    """Builds the configured collectors and owns their background threads.

    Instantiate it with a :class:`CollectorConfig`, an ``httpx.Client`` and
    the cluster base URL, :meth:`register` it on a ``CollectorRegistry``, then
    call :meth:`start` / :meth:`stop`. Scrapes themselves run on whatever
    thread the registry is collected from.
    """

    def __init__(self, config: CollectorConfig, client: httpx.Client, base_url: str) -> None:
        self._config = config
        self._collectors: list[BaseCollector] = []
        self._synchronizers: list[ClusterLabelSynchronizer] = []

        self._retriever = ClusterInfoRetriever(
            client,
            base_url,
            namespace=config.namespace,
            interval_seconds=config.cluster_info_interval_seconds,
        )
        self._collectors.append(self._retriever)

        # the first index collector owns the shared parse-failure counter
        json_parse_failures: Counter | None = None
        if config.indices_settings:
            settings = IndicesSettingsCollector(
                client,
                base_url,
                namespace=config.namespace,
                included_indices=config.included_indices,
            )
            json_parse_failures = settings.json_parse_failures
            self._collectors.append(settings)
        if config.docs_count:
            docs = DocsCountCollector(
                client,
                base_url,
                namespace=config.namespace,
                included_indices=config.included_indices,
                json_parse_failures=json_parse_failures,
            )
            self._synchronizers.append(docs.cluster_labels)
            self._retriever.subscribe(docs.cluster_labels.publish)
            self._collectors.append(docs)

    @property
    def collectors(self) -> list[BaseCollector]:
        return list(self._collectors)

    @property
    def retriever(self) -> ClusterInfoRetriever:
        return self._retriever

    def register(self, registry: CollectorRegistry) -> None:
        """Register every collector on *registry*."""
        for collector in self._collectors:
            registry.register(collector)

    def collect_once(self) -> list[Metric]:
        """Run all collectors once and return aggregated metric families."""
        families: list[Metric] = []
        for collector in self._collectors:
            try:
                families.extend(collector.collect())
            except Exception:
                logger.exception("Collector %s failed", collector.name)
        return families

    def start(self) -> None:
        """Start the label synchronizers and the cluster info poller."""
        for sync in self._synchronizers:
            sync.start()
        self._retriever.start()
        logger.info("CollectorManager started (%d collectors)", len(self._collectors))

    def stop(self) -> None:
        self._retriever.stop()
        for sync in self._synchronizers:
            sync.stop()
        logger.info("CollectorManager stopped")
