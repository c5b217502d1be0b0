"""
Command-line entry point and server lifecycle.

Usage:
    python -m todo_api
    python -m todo_api --port 9100 --host-address mongodb://db:27017
    python -m todo_api --backend memory --log-level debug

Every option defaults to its environment variable (see settings.Settings).
uvicorn stops accepting connections on SIGINT/SIGTERM and gives in-flight
requests up to the grace period to finish before exiting.
"""
from __future__ import annotations

import argparse
import logging
from typing import List, Optional

import uvicorn

from .logging_config import configure_logging
from .main import create_app
from .settings import Settings, get_settings, normalize_backend, normalize_log_level

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="todo_api",
        description="Serve the todo CRUD API.",
    )
    parser.add_argument("--host-address", default=None, help="MongoDB address (host:port or mongodb:// URI)")
    parser.add_argument("--database-name", default=None, help="MongoDB database name")
    parser.add_argument("--collection-name", default=None, help="MongoDB collection name")
    parser.add_argument("--listen-host", default=None, help="Interface to bind")
    parser.add_argument("--port", "-p", type=int, default=None, dest="listen_port", help="Port to listen on")
    parser.add_argument("--backend", choices=["mongo", "memory"], default=None, help="Storage backend")
    parser.add_argument("--grace-period", type=int, default=None, help="Shutdown grace period in seconds")
    parser.add_argument("--log-level", default=None, help="Logging level (debug, info, warning, ...)")
    return parser


# PUBLIC_INTERFACE
def settings_from_args(argv: Optional[List[str]] = None, base: Optional[Settings] = None) -> Settings:
    """Apply command-line overrides on top of the environment settings."""
    args = build_parser().parse_args(argv)
    base = base or get_settings()
    return base.with_overrides(
        host_address=args.host_address,
        database_name=args.database_name,
        collection_name=args.collection_name,
        listen_host=args.listen_host,
        listen_port=args.listen_port,
        persistence_backend=normalize_backend(args.backend) if args.backend else None,
        shutdown_grace_period=args.grace_period,
        log_level=normalize_log_level(args.log_level) if args.log_level else None,
    )


def build_server(settings: Settings) -> uvicorn.Server:
    config = uvicorn.Config(
        create_app(settings),
        host=settings.listen_host,
        port=settings.listen_port,
        log_level=normalize_log_level(settings.log_level).lower(),
        access_log=True,
        # Handled by configure_logging
        log_config=None,
        timeout_keep_alive=settings.idle_timeout,
        timeout_graceful_shutdown=settings.shutdown_grace_period,
    )
    return uvicorn.Server(config)


# PUBLIC_INTERFACE
def main(argv: Optional[List[str]] = None) -> int:
    """Run the server until interrupted. Returns the process exit code."""
    settings = settings_from_args(argv)
    configure_logging(settings.log_level)
    server = build_server(settings)

    logger.info("Listening on %s:%d", settings.listen_host, settings.listen_port)
    try:
        server.run()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    # A failed startup exits through SystemExit and skips this
    logger.info("Server gracefully stopped")
    return 0
