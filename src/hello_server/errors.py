"""Exception hierarchy shared by the router, the server and the CLI.

Per-request failures (``HandlerError``, ``ParseError``) never leave the
connection that produced them. ``BindError`` and ``ConfigurationError`` are
the only errors that reach process exit.
"""

from __future__ import annotations


class ServerError(Exception):
    """Base for all hello_server errors."""


class ConfigurationError(ServerError):
    """Raised when configuration values are invalid."""


class DuplicateRouteError(ServerError):
    """Raised when a (method, path) pair is registered twice."""

    def __init__(self, method: str, path: str):
        super().__init__(f"route already registered: {method} {path}")
        self.method = method
        self.path = path


class BindError(ServerError):
    """Raised when the listening socket cannot be acquired."""

    def __init__(self, host: str, port: int, reason: str = ""):
        message = f"cannot listen on {host}:{port}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.host = host
        self.port = port


class HandlerError(ServerError):
    """A registered handler failed. The original error is chained as ``__cause__``."""

    def __init__(self, method: str, path: str, detail: str = "handler raised"):
        super().__init__(f"{method} {path}: {detail}")
        self.method = method
        self.path = path


class ParseError(ServerError):
    """Malformed HTTP input. ``status`` is the code sent back to the client."""

    status: int = 400

    def __init__(self, detail: str, status: int | None = None):
        super().__init__(detail)
        self.detail = detail
        if status is not None:
            self.status = status


class PayloadTooLarge(ParseError):
    """Request body exceeds the configured limit."""

    status = 413
