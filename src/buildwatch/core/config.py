"""Server settings.

Settings are read from environment variables and may be overridden by CLI
options. Only the values needed to reach one project on one collection are
kept here; credentials are passed through untouched.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from buildwatch.core.errors import ConfigError

SERVER_URL_ENV = "BUILDWATCH_SERVER_URL"
PROJECT_ENV = "BUILDWATCH_PROJECT"
TOKEN_ENV = "BUILDWATCH_TOKEN"
API_VERSION_ENV = "BUILDWATCH_API_VERSION"
TIMEOUT_ENV = "BUILDWATCH_TIMEOUT"

DEFAULT_API_VERSION = "2.0"
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class ServerSettings:
    """
    Connection settings for one build server project.

    Attributes:
        server_url: Collection URL, e.g. `https://tfs.example.com/tfs/DefaultCollection`.
        project: Team project that owns the build definitions.
        token: Optional personal access token.
        api_version: REST API version sent with every request.
        timeout: Request timeout in seconds.
    """

    server_url: str
    project: str
    token: str | None = None
    api_version: str = DEFAULT_API_VERSION
    timeout: float = DEFAULT_TIMEOUT_SECONDS


def _float_env(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be > 0, got {raw!r}")
    return value


def load_settings(
    server_url: str | None = None,
    project: str | None = None,
    env: Mapping[str, str] | None = None,
) -> ServerSettings:
    """
    Build ServerSettings from explicit values and the environment.

    Explicit arguments win over environment variables.

    Raises:
        ConfigError: If the server URL or project is missing, or a numeric
                     setting cannot be parsed.
    """
    env = os.environ if env is None else env

    url = (server_url or env.get(SERVER_URL_ENV) or "").strip()
    if not url:
        raise ConfigError(
            f"No build server configured. Pass --server or set {SERVER_URL_ENV}."
        )
    proj = (project or env.get(PROJECT_ENV) or "").strip()
    if not proj:
        raise ConfigError(f"No project configured. Pass --project or set {PROJECT_ENV}.")

    return ServerSettings(
        server_url=url.split("?", 1)[0].rstrip("/"),
        project=proj,
        token=env.get(TOKEN_ENV) or None,
        api_version=env.get(API_VERSION_ENV) or DEFAULT_API_VERSION,
        timeout=_float_env(env, TIMEOUT_ENV, DEFAULT_TIMEOUT_SECONDS),
    )
