"""Selector construction utilities.

This module provides a small factory function that translates user intent
(such as CLI arguments) into concrete DefinitionSelector instances. It
centralizes validation and composition logic for selectors.
"""

from typing import Iterable

from buildwatch.core.selectors import (
    AndSelector,
    DefinitionSelector,
    NameRegexSelector,
    OrSelector,
    PathSelector,
)


def build_selector(
    *,
    name: str | None,
    paths: Iterable[str],
    use_or: bool,
) -> DefinitionSelector | None:
    """
    Build a composite DefinitionSelector from user-provided criteria.

    Args:
        name: Optional regular expression used to match definition names.
        paths: Iterable of definition folders.
        use_or: If True, combine multiple selectors using logical OR.
                If False, combine them using logical AND.

    Returns:
        A DefinitionSelector, or None when no criteria were given.

    Raises:
        ValueError: If the name regex is invalid or a path is empty.
    """
    selectors: list[DefinitionSelector] = []

    if name:
        selectors.append(NameRegexSelector(name))

    for path in paths:
        if not path.strip():
            raise ValueError("Invalid path selector: empty folder")
        selectors.append(PathSelector(path))

    if not selectors:
        return None

    if len(selectors) == 1:
        return selectors[0]

    return OrSelector(selectors) if use_or else AndSelector(selectors)
