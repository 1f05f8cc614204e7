"""HTTP/1.1 request handling on top of AnyIO sockets."""

from .messages import Handler, HttpRequest, HttpResponse
from .server import HttpServer

__all__ = [
    "Handler",
    "HttpRequest",
    "HttpResponse",
    "HttpServer",
]
