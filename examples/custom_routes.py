"""
Custom routes example.

Serves /hello alongside a few extra routes, showing sync and async handlers
and what happens when a handler fails.

Run:
  python examples/custom_routes.py

Then try:
  curl -i http://127.0.0.1:8080/hello
  curl -i http://127.0.0.1:8080/health
  curl -i -X POST http://127.0.0.1:8080/echo -d 'hello there'
  curl -i http://127.0.0.1:8080/boom      # 500, server keeps running
  curl -i http://127.0.0.1:8080/missing   # 404
"""

from __future__ import annotations

import logging

import anyio

from hello_server import HttpRequest, HttpResponse, HttpServer, ServerConfig, build_router


def handle_health(_req: HttpRequest) -> HttpResponse:
    return HttpResponse.text("ok\n")


async def handle_echo(req: HttpRequest) -> HttpResponse:
    # Echo the raw body bytes back.
    return HttpResponse(
        status=200,
        headers={"content-type": req.headers.get("content-type", "application/octet-stream")},
        body=req.body,
    )


async def handle_boom(_req: HttpRequest) -> HttpResponse:
    raise RuntimeError("this handler always fails")


async def main() -> None:
    router = build_router()
    router.get("/health", handle_health)
    router.register("POST", "/echo", handle_echo)
    router.get("/boom", handle_boom)

    server = HttpServer(router, ServerConfig(port=8080))
    async with server.listen() as port:
        print(f"Listening on http://127.0.0.1:{port}")
        print("Press Ctrl-C to stop.")
        await server.serve_forever()


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    anyio.run(main)
