"""Server configuration.

ServerConfig is immutable after creation. Build one directly, or from the
process environment with ``ServerConfig.from_env()``::

    config = ServerConfig(port=8080)
    config = ServerConfig.from_env()  # honors PORT, HOST, LOG_LEVEL, KEEP_ALIVE_TIMEOUT
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .errors import ConfigurationError

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


@dataclass(frozen=True, slots=True)
class ServerConfig:
    # Listener
    host: str = "0.0.0.0"
    port: int = 3000

    # Connections
    keep_alive_timeout: float = 5.0
    max_header_bytes: int = 64 * 1024
    max_body_bytes: int = 1 * 1024 * 1024

    # Logging
    log_level: str = "info"

    def __post_init__(self):
        if not 0 <= self.port <= 65535:
            raise ConfigurationError(f"port must be between 0 and 65535, got {self.port}")
        if self.keep_alive_timeout <= 0:
            raise ConfigurationError(
                f"keep_alive_timeout must be positive, got {self.keep_alive_timeout}"
            )
        if self.max_header_bytes <= 0 or self.max_body_bytes < 0:
            raise ConfigurationError("request size limits must be positive")
        if self.log_level.lower() not in LOG_LEVELS:
            raise ConfigurationError(
                f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ServerConfig":
        """Build a config from environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}

        if env.get("HOST"):
            overrides["host"] = env["HOST"]
        if env.get("PORT"):
            overrides["port"] = _parse(env["PORT"], int, "PORT")
        if env.get("KEEP_ALIVE_TIMEOUT"):
            overrides["keep_alive_timeout"] = _parse(
                env["KEEP_ALIVE_TIMEOUT"], float, "KEEP_ALIVE_TIMEOUT"
            )
        if env.get("LOG_LEVEL"):
            overrides["log_level"] = env["LOG_LEVEL"].lower()

        return cls(**overrides)  # type: ignore[arg-type]


def _parse(raw: str, convert, name: str):
    try:
        return convert(raw.strip())
    except ValueError as e:
        raise ConfigurationError(f"{name} is not a valid {convert.__name__}: {raw!r}") from e
