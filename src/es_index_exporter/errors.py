"""Exception types raised while talking to the cluster."""

from __future__ import annotations


class ExporterError(Exception):
    """Base class for es_index_exporter errors."""


class FetchError(ExporterError):
    """Transport failure or non-2xx response from the cluster."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(ExporterError):
    """Response body is not the JSON document the endpoint should return."""
