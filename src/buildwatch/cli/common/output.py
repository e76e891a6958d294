"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from buildwatch.core.builds import BuildStatus, BuildStatusEnum

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)

_STATUS_STYLE = {
    BuildStatusEnum.WORKING: "ok",
    BuildStatusEnum.BROKEN: "err",
    BuildStatusEnum.IN_PROGRESS: "warn",
    BuildStatusEnum.UNKNOWN: "meta",
}


def _fmt_time(value: datetime | None) -> str:
    """Render a timestamp in local time, or an empty string."""
    if value is None:
        return ""
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime("%Y-%m-%d %H:%M")


def _first_line(text: str | None, max_len: int = 60) -> str:
    """Return the first line of a comment, capped with an ASCII ellipsis."""
    lines = (text or "").strip().splitlines()
    line = lines[0] if lines else ""
    if len(line) <= max_len:
        return line
    return f"{line[: max_len - 3]}..."


def build_status_table(
    statuses: Iterable[BuildStatus], title: str = "Build status"
) -> Table:
    """Return a Rich table for build statuses, sorted by definition name."""
    t = Table(title=title, show_lines=False)
    t.add_column("Definition", style="title")
    t.add_column("Status", no_wrap=True)
    t.add_column("Build", style="meta", no_wrap=True)
    t.add_column("Requested by")
    t.add_column("Started", style="meta", no_wrap=True)
    t.add_column("Finished", style="meta", no_wrap=True)
    t.add_column("Comment")

    for s in sorted(statuses, key=lambda s: s.name.lower()):
        style = _STATUS_STYLE[s.status]
        t.add_row(
            escape(s.name),
            f"[{style}]{s.status.value}[/{style}]",
            s.build_id,
            escape(s.requested_by or ""),
            _fmt_time(s.started_time),
            _fmt_time(s.finished_time),
            escape(_first_line(s.comment)),
        )

    return t


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def definitions_table(
        self, definitions: Iterable[Any], title: str = "Build definitions"
    ) -> None:
        """
        Expects objects with .id .name .path (like buildwatch.core.builds.BuildDefinition)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("ID", style="ok", no_wrap=True)
        t.add_column("Name")
        t.add_column("Folder", style="meta")

        for d in definitions:
            t.add_row(str(d.id), escape(d.name), escape(getattr(d, "path", None) or ""))

        console.print(t)

    def status_table(
        self, statuses: Iterable[BuildStatus], title: str = "Build status"
    ) -> None:
        """Print the build status table."""
        console.print(build_status_table(statuses, title=title))

    def missing_table(self, names: Iterable[str], title: str = "No build data") -> None:
        """Print definitions that have no build in either query."""
        t = Table(title=title, show_lines=False)
        t.add_column("Definition", style="meta")
        for name in names:
            t.add_row(escape(name))
        console.print(t)


out = Out()
