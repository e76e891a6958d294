"""Application context management for the CLI."""

from dataclasses import dataclass

import httpx

from buildwatch.cli.common.exits import die
from buildwatch.core.adapters.tfsbuilds import TfsBuildsAdapter
from buildwatch.core.client import get_client
from buildwatch.core.config import ServerSettings, load_settings
from buildwatch.core.errors import ConfigError
from buildwatch.core.server import BuildServer


@dataclass
class BuildsAppContext:
    """Application context holding the HTTP client, adapter and server handle."""

    settings: ServerSettings
    client: httpx.Client
    adapter: TfsBuildsAdapter
    server: BuildServer


def build_builds_context(
    server_url: str | None,
    project: str | None,
) -> BuildsAppContext:
    """Build and return the application context for build commands.

    Args:
        server_url: Optional collection URL overriding the environment.
        project: Optional team project overriding the environment.

    Returns:
        BuildsAppContext: Context with configured client, adapter and server.
    """
    try:
        settings = load_settings(server_url, project)
    except ConfigError as exc:
        die(str(exc), code=1)
    client = get_client(settings)
    adapter = TfsBuildsAdapter(client, settings)
    server = BuildServer(
        transport=adapter,
        history=adapter,
        urls=adapter,
        uri=settings.server_url,
    )
    return BuildsAppContext(
        settings=settings, client=client, adapter=adapter, server=server
    )
