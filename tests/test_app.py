"""Tests for application wiring and the command-line entry point."""

import socket

import pytest

from hello_server import HttpRequest, RouteNotFound, build_router, main
from hello_server.hello import hello


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("HOST", "PORT", "KEEP_ALIVE_TIMEOUT", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_build_router_exposes_only_hello():
    router = build_router()
    assert sorted((r.method, r.path) for r in router.routes) == [("GET", "/hello"), ("HEAD", "/hello")]
    assert router.resolve("GET", "/hello") is hello
    assert isinstance(router.resolve("GET", "/"), RouteNotFound)


def test_build_router_returns_fresh_router():
    assert build_router() is not build_router()


@pytest.mark.anyio
async def test_hello_handler():
    response = await hello(HttpRequest(method="GET", path="/hello"))
    assert response.status == 200
    assert response.body == b"hello"


def test_main_exits_1_when_port_is_taken(clean_env):
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
        blocker.bind(("127.0.0.1", 0))
        blocker.listen(1)
        port = blocker.getsockname()[1]

        assert main(["--host", "127.0.0.1", "--port", str(port)]) == 1


def test_main_exits_2_on_bad_configuration(clean_env, monkeypatch, capsys):
    monkeypatch.setenv("PORT", "not-a-port")
    assert main([]) == 2
    assert "PORT is not a valid int" in capsys.readouterr().err


def test_cli_flag_is_validated(clean_env):
    with pytest.raises(SystemExit) as exc_info:
        main(["--log-level", "loud"])
    assert exc_info.value.code == 2
