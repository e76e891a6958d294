"""Build status aggregation.

This module merges the two build queries issued per polling cycle (builds
currently in progress and the latest build per definition) into exactly one
BuildStatus per build definition. It is synchronous and does not retry; the
transport adapter owns connectivity, timeouts and error translation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Protocol, Sequence

from buildwatch.core.builds import (
    MULTIPLE_CHANGESETS,
    MULTIPLE_USERS,
    BuildDefinition,
    BuildStatus,
    RawBuildRecord,
)
from buildwatch.core.status import QUALITY_FAILURE_PREFIX, derive_status, quality_gate_failed

logger = logging.getLogger(__name__)

ASSOCIATED_CHANGESET = "AssociatedChangeset"


class StatusFilter(str, Enum):
    """Which builds a query should return."""

    IN_PROGRESS = "InProgress"
    ALL = "All"


class QueryOrder(str, Enum):
    """Ordering of the builds returned by a query."""

    FINISH_TIME_DESCENDING = "FinishTimeDescending"


@dataclass(frozen=True)
class BuildQuerySpec:
    """
    Describes one build query sent to the transport.

    Attributes:
        definition_uris: Definitions the query is scoped to.
        status_filter: Which builds to return.
        order: Result ordering.
        max_builds_per_definition: Optional cap of builds per definition.
        information_types: Extra information to include per build.
        eager: Hint that the transport should load full details
               (including the owning definition).
    """

    definition_uris: tuple[str, ...]
    status_filter: StatusFilter
    order: QueryOrder = QueryOrder.FINISH_TIME_DESCENDING
    max_builds_per_definition: int | None = None
    information_types: tuple[str, ...] = (ASSOCIATED_CHANGESET,)
    eager: bool = False


class BuildQueryTransport(Protocol):
    """Interface for querying builds on the server."""

    def query_builds(
        self, specs: Sequence[BuildQuerySpec]
    ) -> list[list[RawBuildRecord]]:
        """Run all specs and return one result list per spec, in order."""
        ...


class UrlTranslator(Protocol):
    """Interface for turning internal build locators into display URLs."""

    def build_url(self, build_uri: str) -> str:
        """Return a browsable URL for a build."""
        ...


class BuildSource(str, Enum):
    """Which query a merged build record came from."""

    COMPLETED = "completed"
    IN_PROGRESS = "in_progress"


@dataclass(frozen=True)
class MergedBuild:
    """The winning build record for a definition and the query it came from."""

    source: BuildSource
    record: RawBuildRecord


def merge_builds(
    latest: Iterable[RawBuildRecord],
    in_progress: Iterable[RawBuildRecord],
) -> Mapping[str, MergedBuild]:
    """
    Merge the latest and in-progress query results per definition id.

    The latest builds are folded in first, then the in-progress builds, so a
    running build always replaces the last completed one for its definition.

    Args:
        latest: Most recent build per definition, regardless of status.
        in_progress: Builds that are currently running.

    Returns:
        A read-only mapping from definition id to the winning MergedBuild.
    """
    merged: dict[str, MergedBuild] = {}
    for source, records in (
        (BuildSource.COMPLETED, latest),
        (BuildSource.IN_PROGRESS, in_progress),
    ):
        for record in records:
            merged[record.definition_id] = MergedBuild(source=source, record=record)
    return MappingProxyType(merged)


def _normalize_time(value: datetime | None) -> datetime | None:
    """Return None for the server's "unset" timestamp."""
    if value is None or value.replace(tzinfo=None) == datetime.min:
        return None
    return value


def _first_identity(*identities: str | None) -> str | None:
    """Return the first identity the server actually set, even when empty."""
    return next((i for i in identities if i is not None), None)


@dataclass
class DefinitionNameCache:
    """Maps definition locators to display names across polling cycles."""

    names: dict[str, str] = field(default_factory=dict)

    def remember(self, definition: BuildDefinition) -> None:
        self.names[definition.uri] = definition.name

    def resolve(self, definition_uri: str, fallback: str) -> str:
        """Return the known name for a locator, or `fallback` if never seen."""
        name = self.names.get(definition_uri)
        if name is None:
            logger.debug("No name known for %s, using %s", definition_uri, fallback)
            return fallback
        return name


class BuildStatusAggregator:
    """Produces one BuildStatus per build definition from two build queries."""

    def __init__(
        self,
        transport: BuildQueryTransport,
        urls: UrlTranslator,
        names: DefinitionNameCache | None = None,
    ) -> None:
        self.transport = transport
        self.urls = urls
        self.names = names if names is not None else DefinitionNameCache()
        self._first_request = True

    def _build_specs(self, uris: tuple[str, ...]) -> list[BuildQuerySpec]:
        eager = self._first_request
        self._first_request = False
        return [
            BuildQuerySpec(
                definition_uris=uris,
                status_filter=StatusFilter.IN_PROGRESS,
                eager=eager,
            ),
            BuildQuerySpec(
                definition_uris=uris,
                status_filter=StatusFilter.ALL,
                max_builds_per_definition=1,
                eager=eager,
            ),
        ]

    def get_build_statuses(
        self,
        definitions: Iterable[BuildDefinition],
        apply_quality: bool,
    ) -> list[BuildStatus]:
        """
        Query the server and return the current status of each definition.

        Definitions with no build in either query are absent from the result;
        callers should treat them as "no data". Order is not guaranteed.

        Args:
            definitions: Build definitions to watch.
            apply_quality: Whether build quality may override a WORKING status.

        Returns:
            One BuildStatus per definition that has at least one build.
        """
        definitions = list(definitions)
        for definition in definitions:
            self.names.remember(definition)

        uris = tuple(dict.fromkeys(d.uri for d in definitions))
        in_progress, latest = self.transport.query_builds(self._build_specs(uris))

        statuses: dict[str, BuildStatus] = {}
        for definition_id, merged in merge_builds(latest, in_progress).items():
            if definition_id not in statuses:
                statuses[definition_id] = self.create_build_status(
                    merged.record, apply_quality
                )
        return list(statuses.values())

    def create_build_status(
        self, record: RawBuildRecord, apply_quality: bool
    ) -> BuildStatus:
        """Build a normalized BuildStatus from a single raw build record."""
        if record.definition is not None:
            self.names.remember(record.definition)

        requested_by = _first_identity(
            record.requested_by, record.requested_for, record.last_changed_by
        )
        changesets = record.changesets
        if changesets:
            authors = {c.author for c in changesets}
            requested_by = MULTIPLE_USERS if len(authors) > 1 else next(iter(authors))
            comment = MULTIPLE_CHANGESETS if len(changesets) > 1 else changesets[0].comment
        else:
            comment = record.reason

        if quality_gate_failed(record.quality, apply_quality):
            comment = QUALITY_FAILURE_PREFIX + comment

        return BuildStatus(
            build_definition_id=record.definition_id,
            name=self.names.resolve(record.definition_uri, record.definition_id),
            build_id=record.build_id,
            status=derive_status(record.status, record.quality, apply_quality),
            requested_by=requested_by,
            comment=comment,
            started_time=_normalize_time(record.start_time),
            finished_time=_normalize_time(record.finish_time),
            url=self.urls.build_url(record.uri),
        )
