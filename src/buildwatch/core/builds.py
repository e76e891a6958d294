"""Core build domain models.

This module defines the data structures shared by the aggregation pipeline:
build definitions as configured on the server, raw build records as the
server reports them, and the normalized BuildStatus produced for display.
It is intentionally free of HTTP and CLI concerns so the same models can be
used by the REST adapter, the CLI, and tests.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

MULTIPLE_USERS = "(Multiple Users)"
MULTIPLE_CHANGESETS = "(Multiple Changesets)"


def last_segment(uri: str) -> str:
    """Return the last path segment of a locator such as `vstfs:///Build/Build/42`."""
    return uri.rstrip("/").rsplit("/", 1)[-1]


@dataclass(frozen=True)
class BuildDefinition:
    """
    Represents a build definition (pipeline) configured on the server.

    Attributes:
        uri: Locator used to query the definition, e.g.
             `vstfs:///Build/Definition/12`.
        name: Human-readable name of the definition.
        path: Optional folder the definition lives in, e.g. `\\Team\\CI`.
    """

    uri: str
    name: str
    path: str | None = None

    @property
    def id(self) -> str:
        """Stable identifier derived from the last segment of the locator."""
        return last_segment(self.uri)


@dataclass(frozen=True)
class Changeset:
    """A source control changeset associated with a build.

    The id is the changeset number for TFVC and the commit id for Git.
    """

    id: str
    author: str
    comment: str


class VendorBuildStatus(str, Enum):
    """
    Build status codes as reported by the build server.

    Values:
        FAILED: The build completed with errors.
        SUCCEEDED: The build completed successfully.
        PARTIALLY_SUCCEEDED: The build completed but some steps failed.
        IN_PROGRESS: The build is currently executing.
        NOT_STARTED: The build is queued or briefly between states.
        STOPPED: The build was canceled.
        NONE: The server reported no usable status.
    """

    FAILED = "Failed"
    SUCCEEDED = "Succeeded"
    PARTIALLY_SUCCEEDED = "PartiallySucceeded"
    IN_PROGRESS = "InProgress"
    NOT_STARTED = "NotStarted"
    STOPPED = "Stopped"
    NONE = "None"


class BuildStatusEnum(str, Enum):
    """Normalized health of a build definition as shown on a radiator."""

    WORKING = "Working"
    BROKEN = "Broken"
    IN_PROGRESS = "InProgress"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class RawBuildRecord:
    """
    A single build execution as reported by the build server.

    Attributes:
        uri: Locator of the build, e.g. `vstfs:///Build/Build/1234`.
        definition_uri: Locator of the owning build definition.
        status: Vendor status code.
        quality: Optional free-text quality label (e.g. "Released").
        start_time: Start timestamp; `datetime.min` when unset.
        finish_time: Finish timestamp; `datetime.min` when unset.
        requested_by: Identity that queued the build.
        requested_for: Identity the build was queued on behalf of.
        last_changed_by: Identity that last modified the build.
        definition: Owning definition, when the server included it.
        changesets: Changesets associated with the build.
        reason: Reason code, used as the comment when no changesets exist.
    """

    uri: str
    definition_uri: str
    status: VendorBuildStatus
    quality: str | None = None
    start_time: datetime | None = None
    finish_time: datetime | None = None
    requested_by: str | None = None
    requested_for: str | None = None
    last_changed_by: str | None = None
    definition: BuildDefinition | None = None
    changesets: tuple[Changeset, ...] = field(default_factory=tuple)
    reason: str = ""

    @property
    def definition_id(self) -> str:
        """Identifier of the owning definition."""
        return last_segment(self.definition_uri)

    @property
    def build_id(self) -> str:
        """Identifier of this build instance."""
        return last_segment(self.uri)


@dataclass(frozen=True)
class BuildStatus:
    """Normalized, display-ready status of one build definition."""

    build_definition_id: str
    name: str
    build_id: str
    status: BuildStatusEnum
    requested_by: str | None = None
    comment: str | None = None
    started_time: datetime | None = None
    finished_time: datetime | None = None
    url: str | None = None

    def fingerprint(self) -> str:
        """
        Return a hash over the salient fields of this status.

        The fingerprint is only used as a cache key to detect whether anything
        material changed between two polls. It is not an identity.
        """
        parts = [
            self.build_definition_id,
            self.name,
            self.build_id,
            self.status.value,
            self.requested_by or "",
            self.started_time.isoformat() if self.started_time else "",
            self.finished_time.isoformat() if self.finished_time else "",
            self.comment or "",
        ]
        return hashlib.sha1("\x1f".join(parts).encode("utf-8")).hexdigest()
