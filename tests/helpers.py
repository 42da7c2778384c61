"""Builders for fake cluster responses used across the tests."""

from __future__ import annotations

BASE_URL = "http://es.test:9200"


def settings_doc(
    limit: str | None = "1000",
    replicas: str | None = "1",
    creation_date: str | None = "1609459200000",
    read_only: str | None = None,
) -> dict:
    """Build one index entry of a ``/_all/_settings`` response."""
    index: dict = {}
    if limit is not None:
        index["mapping"] = {"total_fields": {"limit": limit}}
    if replicas is not None:
        index["number_of_replicas"] = replicas
    if creation_date is not None:
        index["creation_date"] = creation_date
    if read_only is not None:
        index["blocks"] = {"read_only": read_only}
    return {"settings": {"index": index}}


def root_doc(cluster_name: str = "prod-east", version: str = "8.13.0") -> dict:
    return {
        "name": "node-1",
        "cluster_name": cluster_name,
        "cluster_uuid": "abc123",
        "version": {"number": version},
    }


def samples_by_name(families) -> dict[str, list]:
    """Group samples from metric families by sample name."""
    result: dict[str, list] = {}
    for family in families:
        for sample in family.samples:
            result.setdefault(sample.name, []).append(sample)
    return result


def value_of(families, name: str, **labels: str) -> float:
    """Return the single sample value matching *name* and *labels*."""
    matches = [
        s.value
        for s in samples_by_name(families).get(name, [])
        if all(s.labels.get(k) == v for k, v in labels.items())
    ]
    assert len(matches) == 1, f"expected one {name}{labels}, got {matches}"
    return matches[0]
