"""Request and response values exchanged between the server and handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Awaitable, Callable, Mapping, Union

HeaderMap = dict[str, str]
Handler = Callable[["HttpRequest"], Union["HttpResponse", Awaitable["HttpResponse"]]]


@dataclass(frozen=True, slots=True)
class HttpRequest:
    method: str
    path: str
    version: str = "HTTP/1.1"
    headers: HeaderMap = field(default_factory=dict)
    body: bytes = b""
    query: str = ""

    @property
    def keep_alive(self) -> bool:
        """Whether the client expects the connection to stay open after this request."""
        tokens = {t.strip().lower() for t in self.headers.get("connection", "").split(",")}
        if self.version == "HTTP/1.0":
            return "keep-alive" in tokens
        return "close" not in tokens


@dataclass(frozen=True, slots=True)
class HttpResponse:
    status: int = 200
    headers: Mapping[str, str] | None = None
    body: bytes = b""

    def __post_init__(self):
        # Header names are case-insensitive on the wire; store them lower-cased.
        normalized = {k.lower(): v for k, v in (self.headers or {}).items()}
        object.__setattr__(self, "headers", normalized)

    @staticmethod
    def text(
        text: str,
        *,
        status: int = 200,
        headers: Mapping[str, str] | None = None,
        encoding: str = "utf-8",
    ) -> "HttpResponse":
        merged: dict[str, str] = {"content-type": f"text/plain; charset={encoding}"}
        if headers:
            merged.update({k.lower(): v for k, v in headers.items()})
        return HttpResponse(status=status, headers=merged, body=text.encode(encoding))
