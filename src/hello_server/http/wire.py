"""HTTP/1.x framing: read one request off a stream, write one response back.

Supported:
- request line + headers
- optional Content-Length body (no chunked encoding)
- any number of requests per connection, read strictly in order
"""

from __future__ import annotations

from email.utils import formatdate

import anyio
from anyio.abc import ByteSendStream
from anyio.streams.buffered import BufferedByteReceiveStream

from ..errors import ParseError, PayloadTooLarge
from .messages import HeaderMap, HttpRequest, HttpResponse

SUPPORTED_VERSIONS = ("HTTP/1.0", "HTTP/1.1")

_STATUS_TEXT: dict[int, str] = {
    200: "OK",
    201: "Created",
    204: "No Content",
    301: "Moved Permanently",
    302: "Found",
    304: "Not Modified",
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    413: "Payload Too Large",
    500: "Internal Server Error",
    501: "Not Implemented",
    503: "Service Unavailable",
}


def status_line(status: int) -> bytes:
    text = _STATUS_TEXT.get(status, "Unknown")
    return f"HTTP/1.1 {status} {text}\r\n".encode("ascii")


def parse_head(block: bytes) -> tuple[str, str, str, str, HeaderMap]:
    """Parse a request line and header block (without the trailing blank line).

    Returns ``(method, path, query, version, headers)``.
    """
    # Empty lines before the request line are tolerated (RFC 9112 2.2).
    head = block.lstrip(b"\r\n").decode("iso-8859-1")
    lines = head.split("\r\n")
    if not lines[0]:
        raise ParseError("missing request line")

    parts = lines[0].split(" ")
    if len(parts) != 3:
        raise ParseError("invalid request line")
    method, target, version = parts
    if not method.isalpha():
        raise ParseError(f"invalid method: {method!r}")
    if version not in SUPPORTED_VERSIONS:
        raise ParseError(f"unsupported protocol version: {version!r}")
    if not target.startswith("/"):
        raise ParseError(f"invalid request target: {target!r}")
    path, _, query = target.partition("?")

    headers: HeaderMap = {}
    for line in lines[1:]:
        if ":" not in line:
            raise ParseError(f"malformed header line: {line!r}")
        k, v = line.split(":", 1)
        name = k.strip().lower()
        if not name:
            raise ParseError("empty header name")
        headers[name] = v.strip()
    return method.upper(), path, query, version, headers


def content_length(headers: HeaderMap) -> int:
    if "chunked" in headers.get("transfer-encoding", "").lower():
        raise ParseError("chunked transfer encoding is not supported")
    raw = headers.get("content-length", "").strip()
    if not raw:
        return 0
    if not (raw.isascii() and raw.isdigit()):
        raise ParseError(f"invalid content-length: {raw!r}")
    return int(raw)


async def read_request(
    stream: BufferedByteReceiveStream,
    *,
    max_header_bytes: int,
    max_body_bytes: int,
) -> HttpRequest | None:
    """Read the next request from ``stream``.

    Returns None when the peer closed the connection cleanly between requests.
    """
    try:
        block = await stream.receive_until(b"\r\n\r\n", max_header_bytes)
    except anyio.IncompleteRead:
        if stream.buffer.strip():
            raise ParseError("connection closed mid-request") from None
        return None
    except anyio.DelimiterNotFound:
        raise ParseError("request header block too large") from None
    if len(block) > max_header_bytes:
        raise ParseError("request header block too large")

    method, path, query, version, headers = parse_head(block)
    length = content_length(headers)
    if length > max_body_bytes:
        raise PayloadTooLarge(f"request body of {length} bytes exceeds {max_body_bytes}")

    body = b""
    if length:
        try:
            body = await stream.receive_exactly(length)
        except anyio.IncompleteRead:
            raise ParseError("connection closed mid-body") from None

    return HttpRequest(
        method=method,
        path=path,
        query=query,
        version=version,
        headers=headers,
        body=body,
    )


def encode_response(response: HttpResponse, *, keep_alive: bool, head_only: bool = False) -> bytes:
    headers = dict(response.headers or {})
    body = response.body or b""

    headers.setdefault("content-length", str(len(body)))
    headers.setdefault("date", formatdate(usegmt=True))
    headers["connection"] = "keep-alive" if keep_alive else "close"

    head = b"".join(f"{k}: {v}\r\n".encode("latin-1") for k, v in headers.items())
    if head_only:
        body = b""
    return status_line(response.status) + head + b"\r\n" + body


async def write_response(
    stream: ByteSendStream,
    response: HttpResponse,
    *,
    keep_alive: bool,
    head_only: bool = False,
) -> None:
    await stream.send(encode_response(response, keep_alive=keep_alive, head_only=head_only))
