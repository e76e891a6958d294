"""HTTP client construction for the build server.

This module centralizes creation of the httpx client used by the REST
adapter so every request shares the same base URL, timeout and
credentials.
"""

from __future__ import annotations

import httpx

from buildwatch.core.config import ServerSettings


def get_client(settings: ServerSettings) -> httpx.Client:
    """
    Create and return an httpx client for the configured collection.

    A personal access token, when configured, is sent as HTTP basic auth
    with an empty user name, which is what TFS and Azure DevOps Server expect.
    """
    auth = ("", settings.token) if settings.token else None
    return httpx.Client(
        base_url=settings.server_url + "/",
        auth=auth,
        timeout=settings.timeout,
        headers={"Accept": "application/json"},
    )
