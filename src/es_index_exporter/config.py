"""Configuration loading and validation for es_index_exporter."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


@dataclass
class ElasticsearchConfig:
    """Connection settings for the remote cluster."""

    url: str = "http://localhost:9200"
    timeout_seconds: float = 5.0


@dataclass
class CollectorConfig:
    """Which collectors run and what they report."""

    namespace: str = "elasticsearch"
    indices_settings: bool = True
    docs_count: bool = True
    included_indices: list[str] = field(default_factory=list)
    cluster_info_interval_seconds: float = 300.0


@dataclass
class WebConfig:
    """Exposition endpoint settings."""

    listen_address: str = "0.0.0.0"
    port: int = 9114


@dataclass
class LoggingConfig:
    level: str = "INFO"
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class ExporterConfig:
    """Top-level es_index_exporter configuration."""

    elasticsearch: ElasticsearchConfig = field(default_factory=ElasticsearchConfig)
    collector: CollectorConfig = field(default_factory=CollectorConfig)
    web: WebConfig = field(default_factory=WebConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _split_indices(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides using ES_EXPORTER_ prefix."""
    env_map = {
        "ES_EXPORTER_URL": ("elasticsearch", "url"),
        "ES_EXPORTER_TIMEOUT": ("elasticsearch", "timeout_seconds"),
        "ES_EXPORTER_NAMESPACE": ("collector", "namespace"),
        "ES_EXPORTER_INCLUDED_INDICES": ("collector", "included_indices"),
        "ES_EXPORTER_CLUSTER_INFO_INTERVAL": ("collector", "cluster_info_interval_seconds"),
        "ES_EXPORTER_LISTEN_ADDRESS": ("web", "listen_address"),
        "ES_EXPORTER_PORT": ("web", "port"),
        "ES_EXPORTER_LOG_LEVEL": ("logging", "level"),
    }
    for env_key, path in env_map.items():
        value = os.environ.get(env_key)
        if value is not None:
            obj = data
            for part in path[:-1]:
                obj = obj.setdefault(part, {})
            final_key = path[-1]
            # coerce non-string values
            if final_key in ("timeout_seconds", "cluster_info_interval_seconds"):
                obj[final_key] = float(value)
            elif final_key == "port":
                obj[final_key] = int(value)
            elif final_key == "included_indices":
                obj[final_key] = _split_indices(value)
            else:
                obj[final_key] = value
    return data


def _section(cls: type, data: dict[str, Any]) -> Any:
    """Build a section dataclass from *data*, ignoring unknown keys."""
    return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


def _dict_to_config(data: dict[str, Any]) -> ExporterConfig:
    """Convert a raw dictionary to an ExporterConfig dataclass."""
    collector = _section(CollectorConfig, data.get("collector") or {})
    if isinstance(collector.included_indices, str):
        collector.included_indices = _split_indices(collector.included_indices)
    else:
        collector.included_indices = [str(name) for name in collector.included_indices or []]

    return ExporterConfig(
        elasticsearch=_section(ElasticsearchConfig, data.get("elasticsearch") or {}),
        collector=collector,
        web=_section(WebConfig, data.get("web") or {}),
        logging=_section(LoggingConfig, data.get("logging") or {}),
    )


def load_config(path: str | Path | None = None) -> ExporterConfig:
    """Load configuration from a YAML file with environment overrides.

    Looks for ``es_exporter.yaml`` in the current directory if *path* is None.
    """
    data: dict[str, Any] = {}
    if path is None:
        path = Path("es_exporter.yaml")
    else:
        path = Path(path)

    if path.exists():
        with open(path, encoding="utf-8") as fh:
            loaded = yaml.safe_load(fh)
            if isinstance(loaded, dict):
                data = loaded

    data = _apply_env_overrides(data)
    return _dict_to_config(data)
