"""Build server handle.

A BuildServer represents one configured connection to a build server and
owns the caches that must survive across polling cycles for that server.
Handles compare equal when they point at the same server URI, which lets
callers de-duplicate servers coming from several configuration sources.
"""

from __future__ import annotations

from typing import Iterable
from urllib.parse import urlsplit, urlunsplit

from buildwatch.core.aggregator import (
    BuildQueryTransport,
    BuildStatusAggregator,
    UrlTranslator,
)
from buildwatch.core.builds import BuildDefinition, BuildStatus
from buildwatch.core.comments import ChangesetHistory, CommentCache


def normalize_server_uri(uri: str | None) -> str | None:
    """
    Normalize a server URI for comparison.

    - Lower-cases scheme and host
    - Removes trailing slashes from the path
    - Returns None for empty input
    """
    if not uri or not uri.strip():
        return None
    parts = urlsplit(uri.strip())
    path = parts.path.rstrip("/")
    return urlunsplit(
        (parts.scheme.lower(), parts.netloc.lower(), path, parts.query, "")
    )


class BuildServer:
    """One build server connection with its per-server caches."""

    def __init__(
        self,
        transport: BuildQueryTransport,
        history: ChangesetHistory,
        urls: UrlTranslator,
        uri: str | None,
    ) -> None:
        self.uri = normalize_server_uri(uri)
        self.aggregator = BuildStatusAggregator(transport, urls)
        self.comments = CommentCache(history)

    def get_build_statuses(
        self, definitions: Iterable[BuildDefinition], apply_quality: bool
    ) -> list[BuildStatus]:
        """Return the current status of each watched definition."""
        return self.aggregator.get_build_statuses(definitions, apply_quality)

    def enrich_with_changeset(
        self, definition: BuildDefinition, status: BuildStatus
    ) -> BuildStatus | None:
        """Fill comment and build id from the latest changeset (cached)."""
        return self.comments.enrich_with_changeset(definition, status)

    def __eq__(self, other: object) -> bool:
        # a handle without a URI is not even equal to itself
        if self.uri is None:
            return False
        if not isinstance(other, BuildServer):
            return NotImplemented
        return self.uri == other.uri

    def __hash__(self) -> int:
        if self.uri is None:
            return 0
        return hash(self.uri)

    def __repr__(self) -> str:
        return f"BuildServer(uri={self.uri!r})"
