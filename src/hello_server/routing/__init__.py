"""Route registration and lookup."""

from .router import Route, RouteNotFound, Router

__all__ = [
    "Route",
    "RouteNotFound",
    "Router",
]
