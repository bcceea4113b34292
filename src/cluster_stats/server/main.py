#!/usr/bin/env python3
"""
Cluster Stats Monitor - Main entry point.

Runs the stats API server against a coordinator's REST API.
"""

from __future__ import annotations

import argparse
from http.server import ThreadingHTTPServer

from .config import Config
from .routes import StatsRequestHandler
from ..backends.rest import CoordinatorClient
from ..collectors.cluster import ClusterStatsCollector


def create_backend(config: Config) -> CoordinatorClient:
    """Create the coordinator client from config."""
    return CoordinatorClient(
        url=config.backend.url,
        timeout=config.backend.timeout,
        verify=config.backend.verify,
        ca_bundle=config.backend.ca_bundle,
        token=config.backend.token,
        retries=config.backend.retries,
    )


def run_server(args) -> None:
    """Run the stats API server."""
    config = Config.load(args.config)
    print(f"[config] Loaded: deployment={config.deployment_name!r}, backend={config.backend.url!r}")

    # Override config with CLI args
    if args.host:
        config.server.host = args.host
    if args.port:
        config.server.port = args.port
    if args.url_prefix:
        config.server.url_prefix = args.url_prefix
    if args.backend_url:
        config.backend.url = args.backend_url
    if args.insecure:
        config.backend.verify = False

    backend = create_backend(config)
    collector = ClusterStatsCollector.from_backend(backend, job_window_days=config.stats.job_window_days)

    if not backend.ping():
        print(f"[backend] WARNING: coordinator at {config.backend.url} not reachable, serving anyway")

    # Configure the request handler
    StatsRequestHandler.stats_collector = collector
    StatsRequestHandler.namespace = backend
    StatsRequestHandler.url_prefix = config.server.url_prefix
    StatsRequestHandler.config = config.to_dict()

    server = ThreadingHTTPServer((config.server.host, config.server.port), StatsRequestHandler)

    print(f"[server] Serving on http://{config.server.host}:{config.server.port}")
    if config.server.url_prefix:
        print(f"[server] URL prefix: {config.server.url_prefix}")

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\n[server] Shutting down...")
    finally:
        server.shutdown()
        server.server_close()
        backend.close()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Cluster Stats Monitor",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Server options
    parser.add_argument("--host", default=None, help="Bind address (overrides config)")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on (overrides config)")
    parser.add_argument("--config", type=str, help="Path to config YAML file")
    parser.add_argument(
        "--url-prefix",
        default="",
        help="Path prefix for reverse proxy setup",
    )

    # Backend options
    parser.add_argument(
        "--backend-url",
        default=None,
        help="Override the coordinator REST API URL",
    )
    parser.add_argument(
        "--insecure",
        action="store_true",
        default=False,
        help="Skip TLS verification against the coordinator",
    )

    return parser.parse_args(argv)


def main():
    """Entry point for the cluster-stats command."""
    args = parse_args()
    run_server(args)


if __name__ == "__main__":
    main()
