"""Minimal HTTP/1.1 server with an exact-match router, built on AnyIO."""

from .config import ServerConfig
from .errors import (
    BindError,
    ConfigurationError,
    DuplicateRouteError,
    HandlerError,
    ParseError,
    PayloadTooLarge,
    ServerError,
)
from .http import Handler, HttpRequest, HttpResponse, HttpServer
from .routing import Route, RouteNotFound, Router
from .app import build_router, main, serve

__all__ = [
    # Configuration
    "ServerConfig",
    # Routing
    "Route",
    "RouteNotFound",
    "Router",
    # HTTP
    "Handler",
    "HttpRequest",
    "HttpResponse",
    "HttpServer",
    # Application
    "build_router",
    "serve",
    "main",
    # Errors
    "ServerError",
    "ConfigurationError",
    "DuplicateRouteError",
    "BindError",
    "HandlerError",
    "ParseError",
    "PayloadTooLarge",
]
