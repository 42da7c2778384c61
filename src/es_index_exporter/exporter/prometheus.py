"""Prometheus exporter – serves collected metrics over HTTP for scraping."""

from __future__ import annotations

import logging
import threading
from wsgiref.simple_server import WSGIServer

from prometheus_client import CollectorRegistry, start_http_server

from ..config import WebConfig

logger = logging.getLogger(__name__)


class PrometheusExporter:
    """Exposes a ``CollectorRegistry`` on ``/metrics``.

    Collection happens inside the request thread, so every scrape runs the
    registered collectors afresh.
    """

    def __init__(self, config: WebConfig, registry: CollectorRegistry) -> None:
        self._config = config
        self._registry = registry
        self._server: WSGIServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def port(self) -> int | None:
        """Bound port, useful when configured with port 0."""
        if self._server is None:
            return None
        return self._server.server_address[1]

    def start(self) -> None:
        if self._server is not None:
            return
        self._server, self._thread = start_http_server(
            self._config.port,
            addr=self._config.listen_address,
            registry=self._registry,
        )
        logger.info(
            "PrometheusExporter listening on %s:%d",
            self._config.listen_address,
            self.port,
        )

    def shutdown(self) -> None:
        if self._server is not None:
            self._server.shutdown()
            self._server.server_close()
            self._server = None
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None
        logger.info("PrometheusExporter shut down")
