"""Server configuration, read from the environment.

| Variable               | Default      |
|------------------------|--------------|
| STRIPE_SECRET_KEY      | (required)   |
| STRIPE_API_VERSION     | 2023-10-16   |
| STRIPE_MCP_TIMEOUT     | 30 (seconds) |
| STRIPE_MCP_LOG_LEVEL   | INFO         |
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from stripe_mcp.client import DEFAULT_API_VERSION
from stripe_mcp.credentials import CredentialStoreAdapter
from stripe_mcp.deadline import DEFAULT_TIMEOUT_SECONDS
from stripe_mcp.errors import StartupError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(StartupError):
    """A configuration value is missing or malformed."""


def _timeout_from_env() -> float:
    raw = os.getenv("STRIPE_MCP_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigError(f"STRIPE_MCP_TIMEOUT must be a number of seconds, got {raw!r}") from None
    if timeout <= 0:
        raise ConfigError(f"STRIPE_MCP_TIMEOUT must be positive, got {raw!r}")
    return timeout


def _log_level_from_env() -> str:
    level = (os.getenv("STRIPE_MCP_LOG_LEVEL") or "INFO").upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"STRIPE_MCP_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
    return level


@dataclass(frozen=True)
class ServerConfig:
    api_key: str
    api_version: str = DEFAULT_API_VERSION
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"

    def __repr__(self) -> str:
        return (
            f"ServerConfig(api_key='***', api_version={self.api_version!r}, "
            f"timeout={self.timeout!r}, log_level={self.log_level!r})"
        )

    @classmethod
    def from_env(cls, credentials: CredentialStoreAdapter | None = None) -> ServerConfig:
        """Build the config, failing if a required credential is missing."""
        credentials = credentials or CredentialStoreAdapter.default()
        missing = credentials.missing_required()
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")
        return cls(
            api_key=credentials.get("stripe") or "",
            api_version=os.getenv("STRIPE_API_VERSION") or DEFAULT_API_VERSION,
            timeout=_timeout_from_env(),
            log_level=_log_level_from_env(),
        )
