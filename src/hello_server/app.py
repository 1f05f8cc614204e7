"""Application wiring: route table, serve loop and command-line entry point.

Run:
  hello-server --port 3000
  PORT=8080 python -m hello_server

Then try:
  curl -i http://127.0.0.1:3000/hello
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import signal
import sys

import anyio

from .config import LOG_LEVELS, ServerConfig
from .errors import BindError, ConfigurationError
from .hello import hello
from .http.server import HttpServer
from .routing.router import Router

logger = logging.getLogger("hello_server.app")


def build_router() -> Router:
    router = Router()
    router.get("/hello", hello)
    return router


async def _cancel_on_signal(scope: anyio.CancelScope) -> None:
    with anyio.open_signal_receiver(signal.SIGINT, signal.SIGTERM) as signals:
        async for signum in signals:
            logger.info("received %s, shutting down", signal.Signals(signum).name)
            scope.cancel()
            return


async def serve(config: ServerConfig, router: Router) -> None:
    """Bind, then serve until SIGINT/SIGTERM. Raises BindError if the port is unavailable."""
    server = HttpServer(router, config)
    async with server.listen():
        async with anyio.create_task_group() as tg:
            tg.start_soon(_cancel_on_signal, tg.cancel_scope)
            await server.serve_forever()


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="hello-server",
        description="Minimal HTTP/1.1 server exposing GET /hello.",
    )
    parser.add_argument("--host", default=None, help="Bind host address (env: HOST)")
    parser.add_argument("--port", type=int, default=None, help="Bind port number (env: PORT)")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (env: LOG_LEVEL)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = _parse_args(argv)
    try:
        config = ServerConfig.from_env()
        overrides = {
            k: v
            for k, v in (("host", args.host), ("port", args.port), ("log_level", args.log_level))
            if v is not None
        }
        config = dataclasses.replace(config, **overrides)
    except ConfigurationError as e:
        print(f"hello-server: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        anyio.run(serve, config, build_router())
    except BindError as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        pass
    logger.info("server stopped")
    return 0
