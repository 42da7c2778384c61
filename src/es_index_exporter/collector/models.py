"""Records decoded from cluster API responses."""

from __future__ import annotations

from dataclasses import dataclass

UNKNOWN_CLUSTER = "unknown_cluster"


@dataclass(frozen=True)
class IndexSettings:
    """Settings of one index as returned by ``/_all/_settings``.

    Values are kept as the strings the cluster sends; a missing field is ``""``.
    """

    total_fields_limit: str = ""
    number_of_replicas: str = ""
    creation_date: str = ""
    read_only: str = ""


@dataclass(frozen=True)
class IndexDocs:
    """One row of ``/_cat/indices?h=index,docs.count``."""

    index: str
    count: str = ""


@dataclass(frozen=True)
class ClusterInfo:
    """Identity of the cluster currently observed."""

    cluster_name: str = UNKNOWN_CLUSTER
    cluster_uuid: str = ""
    version: str = ""
