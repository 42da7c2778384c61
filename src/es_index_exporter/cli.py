"""CLI interface for es_index_exporter."""

from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
import time

import httpx
from prometheus_client import CollectorRegistry, generate_latest

from . import __version__
from .config import ExporterConfig, load_config


def _configure_logging(cfg: ExporterConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, cfg.logging.level.upper(), logging.INFO),
        format=cfg.logging.format,
    )


def _make_client(cfg: ExporterConfig) -> httpx.Client:
    return httpx.Client(timeout=cfg.elasticsearch.timeout_seconds)


def _cmd_serve(args: argparse.Namespace) -> None:
    """Serve metrics for Prometheus until interrupted."""
    cfg = load_config(args.config)
    _configure_logging(cfg)

    from .collector.manager import CollectorManager
    from .exporter.prometheus import PrometheusExporter

    client = _make_client(cfg)
    registry = CollectorRegistry()
    manager = CollectorManager(cfg.collector, client, cfg.elasticsearch.url)
    manager.register(registry)
    exporter = PrometheusExporter(cfg.web, registry)

    stop = False

    def _handle_signal(_sig: int, _frame: object) -> None:
        nonlocal stop
        stop = True

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    manager.start()
    exporter.start()
    print(f"es_index_exporter serving {cfg.elasticsearch.url} on {cfg.web.listen_address}:{exporter.port}")
    print("Press Ctrl+C to stop.\n")
    try:
        while not stop:
            time.sleep(0.5)
    finally:
        exporter.shutdown()
        manager.stop()
        client.close()
    print("\nExporter stopped.")


def _cmd_scrape(args: argparse.Namespace) -> None:
    """Run every collector once and print the result."""
    cfg = load_config(args.config)
    _configure_logging(cfg)

    from .collector.manager import CollectorManager

    with _make_client(cfg) as client:
        manager = CollectorManager(cfg.collector, client, cfg.elasticsearch.url)
        # one synchronous poll so the docs count carries the real cluster name
        info = manager.retriever.retrieve_once()
        for collector in manager.collectors:
            labels = getattr(collector, "cluster_labels", None)
            if labels is not None:
                labels.update(info)

        if args.json:
            families = manager.collect_once()
            samples = manager.collectors[0].to_dict(families)
            print(json.dumps(samples, indent=2))
        else:
            registry = CollectorRegistry()
            manager.register(registry)
            sys.stdout.write(generate_latest(registry).decode("utf-8"))


def _cmd_version(_args: argparse.Namespace) -> None:
    print(f"es_index_exporter {__version__}")


def main(argv: list[str] | None = None) -> None:
    """Entry point for the es-index-exporter CLI."""
    parser = argparse.ArgumentParser(
        prog="es-index-exporter",
        description="Export Elasticsearch index settings and document counts to Prometheus",
    )
    parser.add_argument("--config", "-c", default=None, help="Path to es_exporter.yaml")
    sub = parser.add_subparsers(dest="command")

    # serve
    serve_p = sub.add_parser("serve", help="Serve /metrics for Prometheus")
    serve_p.set_defaults(func=_cmd_serve)

    # scrape
    scrape_p = sub.add_parser("scrape", help="Collect once and print the metrics")
    scrape_p.add_argument("--json", action="store_true", help="Print samples as JSON instead of exposition text")
    scrape_p.set_defaults(func=_cmd_scrape)

    # version
    ver_p = sub.add_parser("version", help="Print version")
    ver_p.set_defaults(func=_cmd_version)

    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
