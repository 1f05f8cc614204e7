"""HTTP/1.1 server built on AnyIO.

The server owns one listening socket and handles every accepted connection
in its own task. Each connection runs requests strictly in order:
Received -> Resolved|NotFound -> Responded, then either waits for the next
keep-alive request or closes.

Failures stay at the connection boundary:
- no matching route: 404, no handler runs
- handler raises: 500, logged, the process keeps serving
- malformed input: 400 (413 for oversized bodies), connection closed
"""

from __future__ import annotations

import contextlib
import inspect
import logging
from typing import Any, AsyncIterator

import anyio
import anyio.to_thread
from anyio.abc import SocketAttribute, SocketStream
from anyio.streams.buffered import BufferedByteReceiveStream

from ..config import ServerConfig
from ..errors import BindError, HandlerError, ParseError
from ..routing.router import RouteNotFound, Router
from .messages import Handler, HttpRequest, HttpResponse
from .wire import read_request, write_response

logger = logging.getLogger("hello_server.server")


async def invoke(handler: Handler, request: HttpRequest) -> HttpResponse:
    """Run ``handler`` and check what it returned.

    Sync handlers run in a worker thread. Any failure comes back as
    ``HandlerError`` with the original error chained.
    """
    try:
        if inspect.iscoroutinefunction(handler):
            result = await handler(request)
        else:
            # Plain functions may block; keep them off the event loop.
            result = await anyio.to_thread.run_sync(handler, request)
        if inspect.isawaitable(result):
            result = await result
    except Exception as e:
        raise HandlerError(request.method, request.path, f"handler raised {e!r}") from e

    if not isinstance(result, HttpResponse):
        raise HandlerError(
            request.method,
            request.path,
            f"handler returned {type(result).__name__}, expected HttpResponse",
        )
    return result


class HttpServer:
    """Serves a ``Router`` over plain HTTP/1.1.

    Usage::

        server = HttpServer(router, ServerConfig(port=3000))
        async with server.listen() as port:
            await server.serve_forever()
    """

    def __init__(self, router: Router, config: ServerConfig | None = None):
        self._router = router
        self._config = config or ServerConfig()
        # anyio.create_tcp_listener() returns a MultiListener; keep this loosely typed.
        self._listener: Any = None

    @property
    def router(self) -> Router:
        return self._router

    @property
    def config(self) -> ServerConfig:
        return self._config

    @contextlib.asynccontextmanager
    async def listen(self) -> AsyncIterator[int]:
        """Bind the listening socket for the duration of the block.

        Yields the bound port (useful with ``port=0``). The socket is closed on
        exit, whether the block ends normally, is cancelled or raises.
        """
        host, port = self._config.host, self._config.port
        try:
            listener = await anyio.create_tcp_listener(local_host=host, local_port=port)
        except OSError as e:
            raise BindError(host, port, e.strerror or str(e)) from e

        self._router.freeze()
        async with listener:
            self._listener = listener
            bound_port: int = listener.extra(SocketAttribute.local_port)
            logger.info("listening on http://%s:%d", host, bound_port)
            try:
                yield bound_port
            finally:
                self._listener = None
                logger.info("listener on %s:%d closed", host, bound_port)

    async def serve_forever(self) -> None:
        """Accept connections until cancelled. Must run inside ``listen()``."""
        if self._listener is None:
            raise RuntimeError("HttpServer is not listening; use 'async with server.listen()'")
        await self._listener.serve(self.handle_connection)

    async def handle_connection(self, stream: SocketStream) -> None:
        async with stream:
            try:
                await self._serve_requests(stream)
            except (anyio.BrokenResourceError, anyio.ClosedResourceError, anyio.EndOfStream):
                logger.debug("connection dropped by peer")
            except Exception:
                logger.exception("unexpected error while serving connection")
                with contextlib.suppress(anyio.BrokenResourceError, anyio.ClosedResourceError):
                    await write_response(
                        stream,
                        HttpResponse.text("Internal Server Error", status=500),
                        keep_alive=False,
                    )

    async def _serve_requests(self, stream: SocketStream) -> None:
        receiver = BufferedByteReceiveStream(stream)
        while True:
            with anyio.move_on_after(self._config.keep_alive_timeout) as idle:
                try:
                    request = await read_request(
                        receiver,
                        max_header_bytes=self._config.max_header_bytes,
                        max_body_bytes=self._config.max_body_bytes,
                    )
                except ParseError as e:
                    logger.warning("malformed request: %s", e.detail)
                    await write_response(
                        stream,
                        HttpResponse.text(e.detail, status=e.status),
                        keep_alive=False,
                    )
                    return
            if idle.cancelled_caught:
                logger.debug("closing idle connection")
                return
            if request is None:
                return

            response = await self.dispatch(request)
            keep_alive = request.keep_alive
            await write_response(
                stream,
                response,
                keep_alive=keep_alive,
                head_only=request.method == "HEAD",
            )
            if not keep_alive:
                return

    async def dispatch(self, request: HttpRequest) -> HttpResponse:
        """Resolve ``request`` against the router and run the matching handler."""
        handler = self._router.resolve(request.method, request.path)
        if isinstance(handler, RouteNotFound):
            response = HttpResponse.text("Not Found", status=404)
        else:
            try:
                response = await invoke(handler, request)
            except HandlerError:
                logger.exception("handler failed for %s %s", request.method, request.path)
                response = HttpResponse.text("Internal Server Error", status=500)

        logger.debug("%s %s -> %d", request.method, request.path, response.status)
        return response
