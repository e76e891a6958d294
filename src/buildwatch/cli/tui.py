"""Terminal UI utilities for picking build definitions."""

from __future__ import annotations

import questionary

from buildwatch.cli.common.tui_style import QUESTIONARY_STYLE_SELECT
from buildwatch.core.builds import BuildDefinition

_MAX_DEFINITION_NAME_WIDTH = 80


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def _definition_choice_title(definition: BuildDefinition, *, name_width: int) -> str:
    """Format one choice as `<name>  <folder>` with an aligned folder column."""
    short_name = _truncate(definition.name, _MAX_DEFINITION_NAME_WIDTH)
    if not definition.path:
        return short_name
    return f"{short_name.ljust(name_width)}  {definition.path}"


def select_definitions(definitions: list[BuildDefinition]) -> list[BuildDefinition]:
    """Display a checkbox prompt to select the definitions to watch.

    Args:
        definitions: Build definitions to choose from.

    Returns:
        The selected definitions, or an empty list if none selected.
    """
    shown_names = [_truncate(d.name, _MAX_DEFINITION_NAME_WIDTH) for d in definitions]
    name_width = max((len(name) for name in shown_names), default=0)

    choices = [
        questionary.Choice(
            title=_definition_choice_title(d, name_width=name_width),
            value=d,
        )
        for d in definitions
    ]

    return (
        questionary.checkbox(
            "Select build definitions to watch:",
            choices=choices,
            style=QUESTIONARY_STYLE_SELECT,
        ).ask()
        or []
    )
