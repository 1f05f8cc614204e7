"""Test helpers: run a server on an ephemeral port and talk raw HTTP to it."""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

import anyio
from anyio.streams.buffered import BufferedByteReceiveStream

from hello_server import HttpServer, Router, ServerConfig


@dataclass
class RawResponse:
    status: int
    headers: dict[str, str]
    body: bytes


@asynccontextmanager
async def running_server(router: Router, **config) -> AsyncIterator[int]:
    config.setdefault("host", "127.0.0.1")
    config.setdefault("port", 0)
    server = HttpServer(router, ServerConfig(**config))
    async with server.listen() as port:
        async with anyio.create_task_group() as tg:
            tg.start_soon(server.serve_forever)
            yield port
            tg.cancel_scope.cancel()


def build_request(
    method: str,
    path: str,
    *,
    headers: dict[str, str] | None = None,
    body: bytes = b"",
    version: str = "HTTP/1.1",
) -> bytes:
    lines = [f"{method} {path} {version}", "host: 127.0.0.1"]
    for k, v in (headers or {}).items():
        lines.append(f"{k}: {v}")
    if body:
        lines.append(f"content-length: {len(body)}")
    return ("\r\n".join(lines) + "\r\n\r\n").encode("latin-1") + body


async def read_response(receiver: BufferedByteReceiveStream, *, head_only: bool = False) -> RawResponse:
    head = (await receiver.receive_until(b"\r\n\r\n", 64 * 1024)).decode("latin-1")
    status_line, *header_lines = head.split("\r\n")
    version, status, _reason = status_line.split(" ", 2)
    assert version == "HTTP/1.1"

    headers: dict[str, str] = {}
    for line in header_lines:
        k, v = line.split(":", 1)
        headers[k.strip().lower()] = v.strip()

    body = b""
    length = int(headers.get("content-length", "0"))
    if length and not head_only:
        body = await receiver.receive_exactly(length)
    return RawResponse(status=int(status), headers=headers, body=body)


async def request(
    port: int,
    method: str,
    path: str,
    *,
    headers: dict[str, str] | None = None,
    body: bytes = b"",
) -> RawResponse:
    """One request on a fresh connection."""
    async with await anyio.connect_tcp("127.0.0.1", port) as stream:
        await stream.send(build_request(method, path, headers=headers, body=body))
        return await read_response(BufferedByteReceiveStream(stream), head_only=method == "HEAD")
