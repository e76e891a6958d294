"""Build definition selector abstractions and implementations.

This module defines the selector system used to decide which build
definitions to watch. Selectors encapsulate matching logic and can be
composed using logical operators (AND / OR) to express complex selection
rules.

Selectors are pure, side-effect-free objects and are intended to be
reusable across different frontends such as CLI commands, automation
scripts, and tests.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from buildwatch.core.builds import BuildDefinition


class DefinitionSelector(ABC):
    """
    Abstract base class for all definition selectors.

    A DefinitionSelector encapsulates a single piece of matching logic that
    determines whether a given BuildDefinition satisfies a specific criterion.
    """

    @abstractmethod
    def matches(self, definition: BuildDefinition) -> bool:
        """
        Determine whether the given definition matches this selector.

        Args:
            definition: BuildDefinition instance to evaluate.

        Returns:
            True if the definition matches the selector criteria, False otherwise.
        """
        ...


class NameRegexSelector(DefinitionSelector):
    """
    Selector that matches definitions based on a regular expression applied
    to the definition name.
    """

    def __init__(self, pattern: str):
        """
        Create a name-based regex selector.

        Args:
            pattern: Regular expression pattern used to match definition names.
        """
        try:
            self.regex = re.compile(pattern)
        except re.error as exc:
            raise ValueError(f"Invalid regex expression: {exc}") from exc

    def matches(self, definition: BuildDefinition) -> bool:
        """
        Check whether the definition name matches the configured regex pattern.
        """
        return bool(self.regex.search(definition.name))


class PathSelector(DefinitionSelector):
    """
    Selector that matches definitions stored under a folder path.
    """

    def __init__(self, path: str):
        """
        Create a folder-based selector.

        Args:
            path: Folder prefix such as `\\Team\\CI`. Forward slashes are
                  accepted and comparison is case-insensitive.
        """
        self.prefix = _normalize_path(path)

    def matches(self, definition: BuildDefinition) -> bool:
        """
        Check whether the definition lives in the folder or one of its children.
        """
        if not definition.path:
            return False
        path = _normalize_path(definition.path)
        return path == self.prefix or path.startswith(self.prefix.rstrip("\\") + "\\")


def _normalize_path(path: str) -> str:
    normalized = "\\" + path.replace("/", "\\").strip("\\")
    return normalized.lower()


class AndSelector(DefinitionSelector):
    """
    Composite selector that matches a definition only if all child selectors match.
    """

    def __init__(self, selectors: list[DefinitionSelector]):
        """
        Create a logical AND selector.

        Args:
            selectors: List of selectors that must all match.
        """
        self.selectors = selectors

    def matches(self, definition: BuildDefinition) -> bool:
        """
        Check whether all child selectors match the definition.
        """
        return all(s.matches(definition) for s in self.selectors)


class OrSelector(DefinitionSelector):
    """
    Composite selector that matches a definition if any child selector matches.
    """

    def __init__(self, selectors: list[DefinitionSelector]):
        """
        Create a logical OR selector.

        Args:
            selectors: List of selectors where at least one must match.
        """
        self.selectors = selectors

    def matches(self, definition: BuildDefinition) -> bool:
        """
        Check whether any child selector matches the definition.
        """
        return any(s.matches(definition) for s in self.selectors)
