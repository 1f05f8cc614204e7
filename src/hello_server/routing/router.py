"""Exact-match route table.

Routes are registered during startup and the table is frozen before the
server accepts its first connection, so lookups never need a lock.

Duplicate registrations fail fast with ``DuplicateRouteError``; there is no
"last registration wins".
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..errors import DuplicateRouteError

if TYPE_CHECKING:
    from ..http.messages import Handler


@dataclass(frozen=True, slots=True)
class Route:
    method: str
    path: str
    handler: Handler


@dataclass(frozen=True, slots=True)
class RouteNotFound:
    """Returned by ``Router.resolve`` when no route matches."""

    method: str
    path: str


class Router:
    """Maps (method, path) to handlers.

    Handlers are plain or async callables taking an ``HttpRequest`` and
    returning an ``HttpResponse``::

        router = Router()
        router.get("/hello", hello)
        router.register("POST", "/echo", echo)
    """

    def __init__(self, routes: Mapping[tuple[str, str], Handler] | None = None):
        self._routes: dict[tuple[str, str], Route] = {}
        self._frozen = False
        for (method, path), handler in (routes or {}).items():
            self.register(method, path, handler)

    def register(self, method: str, path: str, handler: Handler) -> Route:
        if self._frozen:
            raise RuntimeError("router is frozen; register routes before the server starts")
        method = method.strip().upper()
        if not method:
            raise ValueError("method must not be empty")
        if not path.startswith("/"):
            raise ValueError(f"path must start with '/', got {path!r}")
        if not callable(handler):
            raise TypeError(f"handler for {method} {path} is not callable: {handler!r}")

        key = (method, path)
        if key in self._routes:
            raise DuplicateRouteError(method, path)
        route = Route(method=method, path=path, handler=handler)
        self._routes[key] = route
        return route

    def get(self, path: str, handler: Handler) -> Route:
        """Register ``handler`` for GET and HEAD on ``path``. Returns the GET route."""
        route = self.register("GET", path, handler)
        self.register("HEAD", path, handler)
        return route

    def resolve(self, method: str, path: str) -> Handler | RouteNotFound:
        route = self._routes.get((method.upper(), path))
        if route is None:
            return RouteNotFound(method=method.upper(), path=path)
        return route.handler

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def routes(self) -> tuple[Route, ...]:
        return tuple(self._routes.values())

    def __len__(self) -> int:
        return len(self._routes)
