"""Polling cycle logic.

One polling cycle asks a BuildServer for the status of the watched
definitions, optionally fills in changeset comments through the server's
comment cache, and reports which definitions produced no build data. The
functions here are synchronous and frontend-agnostic; scheduling repeated
cycles is left to the caller.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Iterable, Protocol

from buildwatch.core.builds import BuildDefinition, BuildStatus, BuildStatusEnum
from buildwatch.core.definitions import definitions_by_id


class StatusSource(Protocol):
    """Interface of a build server as seen by the polling loop."""

    def get_build_statuses(
        self, definitions: Iterable[BuildDefinition], apply_quality: bool
    ) -> list[BuildStatus]:
        ...

    def enrich_with_changeset(
        self, definition: BuildDefinition, status: BuildStatus
    ) -> BuildStatus | None:
        ...


@dataclass(frozen=True)
class PollResult:
    """
    Outcome of one polling cycle.

    Attributes:
        statuses: One status per definition that has build data.
        missing: Watched definitions with no build in either query.
    """

    statuses: list[BuildStatus]
    missing: list[BuildDefinition]

    @property
    def any_broken(self) -> bool:
        """True if at least one definition is broken."""
        return any(s.status == BuildStatusEnum.BROKEN for s in self.statuses)


def poll_once(
    server: StatusSource,
    definitions: list[BuildDefinition],
    *,
    apply_quality: bool = False,
    with_comments: bool = False,
) -> PollResult:
    """
    Run a single polling cycle.

    Args:
        server: Build server to query.
        definitions: Definitions to watch.
        apply_quality: Whether build quality may override a WORKING status.
        with_comments: Replace each comment with the latest changeset of its
                       definition when one is available.

    Returns:
        A PollResult with the statuses and the definitions without data.
    """
    statuses = server.get_build_statuses(definitions, apply_quality)
    by_id = definitions_by_id(definitions)

    if with_comments:
        enriched: list[BuildStatus] = []
        for status in statuses:
            definition = by_id.get(status.build_definition_id)
            if definition is not None:
                status = server.enrich_with_changeset(definition, status) or status
            enriched.append(status)
        statuses = enriched

    seen = {s.build_definition_id for s in statuses}
    missing = [d for d in definitions if d.id not in seen]
    return PollResult(statuses=statuses, missing=missing)


def poll_forever(
    server: StatusSource,
    definitions: list[BuildDefinition],
    on_result: Callable[[PollResult], None],
    *,
    apply_quality: bool = False,
    with_comments: bool = False,
    poll_interval: int = 30,
    max_cycles: int | None = None,
) -> None:
    """
    Poll at a fixed interval and hand every result to `on_result`.

    Runs until interrupted, or for `max_cycles` cycles when given. Errors
    from the server propagate to the caller.
    """
    if poll_interval < 1:
        raise ValueError("poll_interval must be >= 1")

    cycles = 0
    while max_cycles is None or cycles < max_cycles:
        on_result(
            poll_once(
                server,
                definitions,
                apply_quality=apply_quality,
                with_comments=with_comments,
            )
        )
        cycles += 1
        if max_cycles is not None and cycles >= max_cycles:
            break
        time.sleep(poll_interval)
