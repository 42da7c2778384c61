"""Prometheus exporter for Elasticsearch index settings and document counts."""

__version__ = "0.1.0"
