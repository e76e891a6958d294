"""Changeset comment cache.

Looking up changeset history is much more expensive than polling build
status, so the latest changeset for a definition is cached together with the
fingerprint of the status it was fetched for. The history service is only
contacted again once that fingerprint changes.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Protocol

from buildwatch.core.builds import BuildDefinition, BuildStatus, Changeset

logger = logging.getLogger(__name__)


class ChangesetHistory(Protocol):
    """Interface for looking up source control history of a definition."""

    def get_latest_changeset(self, definition: BuildDefinition) -> Changeset | None:
        """Return the latest changeset associated with a definition, if any."""
        ...


@dataclass(frozen=True)
class CommentCacheEntry:
    """Changeset resolved for a definition and the fingerprint it belongs to."""

    fingerprint: str
    changeset: Changeset | None


@dataclass
class CommentCache:
    """Per-definition cache of the latest changeset, keyed by definition name."""

    history: ChangesetHistory
    entries: dict[str, CommentCacheEntry] = field(default_factory=dict)

    def latest_changeset(
        self, definition: BuildDefinition, status: BuildStatus
    ) -> Changeset | None:
        """Return the cached changeset, refreshing it when the status changed."""
        fingerprint = status.fingerprint()
        cached = self.entries.get(definition.name)
        if cached is None or cached.fingerprint != fingerprint:
            logger.debug("Fetching latest changeset for %s", definition.name)
            cached = CommentCacheEntry(
                fingerprint=fingerprint,
                changeset=self.history.get_latest_changeset(definition),
            )
            self.entries[definition.name] = cached
        return cached.changeset

    def enrich_with_changeset(
        self, definition: BuildDefinition, status: BuildStatus
    ) -> BuildStatus | None:
        """
        Return `status` with its comment and build id taken from the latest changeset.

        Returns None when no changeset could be resolved for the definition.
        """
        changeset = self.latest_changeset(definition, status)
        if changeset is None:
            return None
        return dataclasses.replace(
            status, comment=changeset.comment, build_id=changeset.id
        )
