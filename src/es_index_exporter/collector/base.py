"""Base interface for Elasticsearch metric collectors."""

from __future__ import annotations

import abc
from collections.abc import Iterable, Iterator
from typing import Any

from prometheus_client import Counter
from prometheus_client.metrics_core import Metric
from prometheus_client.registry import Collector


def json_parse_failures_counter(namespace: str) -> Counter:
    """Unregistered counter of responses that could not be decoded.

    One instance is shared by the index collectors of a cluster; only the
    collector that created it describes and emits it.
    """
    return Counter(
        f"{namespace}_index_json_parse_failures",
        "Number of JSON parse failures while collecting index metrics.",
        registry=None,
    )


class BaseCollector(Collector, abc.ABC):
    """Abstract base class for collectors registered on a ``CollectorRegistry``.

    ``describe`` must list every family ``collect`` can ever yield so the
    registry can detect name clashes at registration time.
    """

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Collector name used in logs and output."""

    @abc.abstractmethod
    def describe(self) -> list[Metric]:
        """Return empty metric families for every descriptor."""

    @abc.abstractmethod
    def collect(self) -> Iterator[Metric]:
        """Run one scrape and yield the resulting metric families."""

    def to_dict(self, families: Iterable[Metric]) -> list[dict[str, Any]]:
        """Flatten metric families into plain sample dictionaries."""
        return [
            {
                "name": sample.name,
                "value": sample.value,
                "labels": dict(sample.labels),
                "type": family.type,
                "description": family.documentation,
            }
            for family in families
            for sample in family.samples
        ]
