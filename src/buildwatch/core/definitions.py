"""Build definition lookup and selection logic.

Domain-level operations for retrieving and filtering the build definitions
configured on a server. It is intentionally free of CLI concerns (output,
prompts) and focuses purely on logic that can be reused by different
frontends (CLI, automation, tests).
"""

from __future__ import annotations

from typing import Protocol

from buildwatch.core.builds import BuildDefinition
from buildwatch.core.selectors import DefinitionSelector


class DefinitionsAdapter(Protocol):
    """Interface for definition lookup operations used by the core domain."""

    def list_definitions(self) -> list[BuildDefinition]:
        """Return all build definitions of the configured project."""
        ...


def select_definitions(
    adapter: DefinitionsAdapter, selector: DefinitionSelector | None
) -> list[BuildDefinition]:
    """
    Select build definitions using a selector strategy.

    Args:
        adapter: Adapter used to retrieve all definitions.
        selector: Selector defining the matching strategy, or None to
                  return every definition.

    Returns:
        Matching definitions sorted by name.
    """
    definitions = adapter.list_definitions()
    if selector is not None:
        definitions = [d for d in definitions if selector.matches(d)]
    return sorted(definitions, key=lambda d: d.name.lower())


def definitions_by_id(definitions: list[BuildDefinition]) -> dict[str, BuildDefinition]:
    """Index definitions by their identifier."""
    return {d.id: d for d in definitions}
