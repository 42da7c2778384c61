"""Pure value functions mapping decoded records to metric values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .models import IndexDocs, IndexSettings

# Elasticsearch's own default for index.mapping.total_fields.limit.
DEFAULT_TOTAL_FIELDS = 1000.0
# number_of_replicas falls back to the same value.
DEFAULT_REPLICAS = DEFAULT_TOTAL_FIELDS
DEFAULT_CREATION_DATE = 0.0


def parse_float(value: str) -> float | None:
    """Parse *value* as a float, returning None when it is not a plain number."""
    if not value or value != value.strip() or "_" in value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def total_fields(settings: IndexSettings) -> float:
    val = parse_float(settings.total_fields_limit)
    return DEFAULT_TOTAL_FIELDS if val is None else val


def replicas(settings: IndexSettings) -> float:
    val = parse_float(settings.number_of_replicas)
    return DEFAULT_REPLICAS if val is None else val


def creation_timestamp_seconds(settings: IndexSettings) -> float:
    """Creation date in epoch seconds; the cluster reports epoch milliseconds."""
    val = parse_float(settings.creation_date)
    if val is None:
        return DEFAULT_CREATION_DATE
    return val / 1000.0


def is_read_only(settings: IndexSettings) -> bool:
    return settings.read_only == "true"


def docs_count(record: IndexDocs) -> float | None:
    """Document count, or None when the record should not be reported."""
    return parse_float(record.count)


def is_included(index_name: str, included: frozenset[str]) -> bool:
    """An empty *included* set means every index is reported."""
    return not included or index_name in included


@dataclass(frozen=True)
class SettingsMetric:
    """Descriptor of one per-index settings gauge."""

    name: str
    documentation: str
    value: Callable[[IndexSettings], float]


SETTINGS_METRICS: tuple[tuple[str, str, Callable[[IndexSettings], float]], ...] = (
    ("total_fields", "index mapping setting for total_fields", total_fields),
    ("replicas", "index setting number_of_replicas", replicas),
    ("creation_timestamp_seconds", "index setting creation_date", creation_timestamp_seconds),
)


def settings_metrics(namespace: str) -> tuple[SettingsMetric, ...]:
    """Build the settings descriptor table under *namespace*."""
    return tuple(
        SettingsMetric(
            name=f"{namespace}_indices_settings_{suffix}",
            documentation=documentation,
            value=value,
        )
        for suffix, documentation, value in SETTINGS_METRICS
    )
