"""Live radiator rendering for the CLI."""

from __future__ import annotations

from datetime import datetime

from rich.console import Group
from rich.live import Live
from rich.text import Text

from buildwatch.cli.common.output import build_status_table, console
from buildwatch.core.builds import BuildDefinition, BuildStatusEnum
from buildwatch.core.polling import PollResult, StatusSource, poll_forever


def _summary_line(result: PollResult, polled_at: datetime) -> Text:
    """
    Render the one-line summary under the radiator table, e.g.
    `12:00:05  working=3 broken=1 in progress=0 unknown=0 no data=2`.
    """
    counts = {status: 0 for status in BuildStatusEnum}
    for s in result.statuses:
        counts[s.status] += 1

    text = Text(polled_at.strftime("%H:%M:%S"), style="dim")
    text.append("  ")
    text.append(f"working={counts[BuildStatusEnum.WORKING]}", style="bold green")
    text.append(" ")
    text.append(f"broken={counts[BuildStatusEnum.BROKEN]}", style="bold red")
    text.append(" ")
    text.append(f"in progress={counts[BuildStatusEnum.IN_PROGRESS]}", style="yellow")
    text.append(" ")
    text.append(f"unknown={counts[BuildStatusEnum.UNKNOWN]}", style="dim")
    if result.missing:
        text.append(f" no data={len(result.missing)}", style="dim")
    return text


def render_radiator(result: PollResult, polled_at: datetime) -> Group:
    """Build the renderable shown by the live radiator."""
    return Group(
        build_status_table(result.statuses, title="Build radiator"),
        _summary_line(result, polled_at),
    )


def watch_with_radiator(
    server: StatusSource,
    definitions: list[BuildDefinition],
    *,
    apply_quality: bool = False,
    with_comments: bool = False,
    poll_interval: int = 30,
) -> None:
    """
    Re-poll the server every `poll_interval` seconds and redraw the radiator
    in place until interrupted with Ctrl+C.
    """
    with Live(
        Text("Polling build server...", style="dim"),
        console=console,
        refresh_per_second=4,
    ) as live:

        def _show(result: PollResult) -> None:
            live.update(render_radiator(result, datetime.now()))

        try:
            poll_forever(
                server,
                definitions,
                _show,
                apply_quality=apply_quality,
                with_comments=with_comments,
                poll_interval=poll_interval,
            )
        except KeyboardInterrupt:
            pass
