"""Commands for watching build definitions."""

import typer

from buildwatch.cli.common.context import BuildsAppContext, build_builds_context
from buildwatch.cli.common.exits import die, exit_from_exc, warn_exit
from buildwatch.cli.common.logs import setup_logging
from buildwatch.cli.common.options import (
    CommentsOpt,
    IntervalOpt,
    NameOpt,
    PathOpt,
    ProjectOpt,
    QualityOpt,
    SelectOpt,
    ServerOpt,
    UseOrOpt,
    VerboseOpt,
)
from buildwatch.cli.common.output import out
from buildwatch.cli.common.progress import watch_with_radiator
from buildwatch.cli.common.selector_builder import build_selector
from buildwatch.cli.tui import select_definitions as tui_select_definitions
from buildwatch.core.builds import BuildDefinition
from buildwatch.core.definitions import select_definitions as core_select_definitions
from buildwatch.core.errors import BuildServerError
from buildwatch.core.polling import poll_once

app = typer.Typer(
    help="Watch build definitions on a TFS / Azure DevOps Server collection",
    no_args_is_help=False,
    invoke_without_command=True,
)


@app.callback()
def _init(
    ctx: typer.Context,
    server: str | None = ServerOpt,
    project: str | None = ProjectOpt,
    verbose: bool = VerboseOpt,
):
    """Initialize builds context."""
    setup_logging(verbose)
    # Build shared context (client + adapter + server handle) once per invocation
    ctx.obj = build_builds_context(server, project)
    ctx.call_on_close(ctx.obj.client.close)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


def _load_definitions(
    appctx: BuildsAppContext,
    name: str | None,
    path: list[str],
    use_or: bool,
) -> list[BuildDefinition]:
    """Resolve selectors and return the matching definitions (exits on error)."""
    try:
        selector = build_selector(name=name, paths=path, use_or=use_or)
    except ValueError as e:
        die(str(e), code=1)

    try:
        with out.status("Loading build definitions..."):
            definitions = core_select_definitions(appctx.adapter, selector)
    except BuildServerError as exc:
        exit_from_exc(exc, message="Could not load build definitions")

    if not definitions:
        warn_exit("No build definitions found", code=0)
    return definitions


@app.command()
def definitions(
    ctx: typer.Context,
    name: str | None = NameOpt,
    path: list[str] = PathOpt,
    use_or: bool = UseOrOpt,
):
    """
    List build definitions using selectors.
    """
    appctx: BuildsAppContext = ctx.obj
    found = _load_definitions(appctx, name, path, use_or)
    out.definitions_table(found, title="Matched build definitions")


@app.command()
def status(
    ctx: typer.Context,
    name: str | None = NameOpt,
    path: list[str] = PathOpt,
    use_or: bool = UseOrOpt,
    quality: bool = QualityOpt,
    comments: bool = CommentsOpt,
    select: bool = SelectOpt,
):
    """
    Poll once and show the current status of each build definition.

    Exits with code 1 when any definition is broken.
    """
    appctx: BuildsAppContext = ctx.obj
    watched = _load_definitions(appctx, name, path, use_or)

    if select:
        watched = tui_select_definitions(watched)
        if not watched:
            warn_exit("No build definitions selected", code=0)

    out.kv({"server": appctx.settings.server_url, "project": appctx.settings.project})

    try:
        with out.status("Polling build server..."):
            result = poll_once(
                appctx.server,
                watched,
                apply_quality=quality,
                with_comments=comments,
            )
    except BuildServerError as exc:
        exit_from_exc(exc, message="Could not query build status")

    if result.statuses:
        out.status_table(result.statuses)
    if result.missing:
        out.missing_table([d.name for d in result.missing])

    if result.any_broken:
        raise typer.Exit(1)


@app.command()
def watch(
    ctx: typer.Context,
    name: str | None = NameOpt,
    path: list[str] = PathOpt,
    use_or: bool = UseOrOpt,
    quality: bool = QualityOpt,
    comments: bool = CommentsOpt,
    select: bool = SelectOpt,
    interval: int = IntervalOpt,
):
    """
    Show a live build radiator that re-polls until interrupted.
    """
    appctx: BuildsAppContext = ctx.obj
    watched = _load_definitions(appctx, name, path, use_or)

    if select:
        watched = tui_select_definitions(watched)
        if not watched:
            warn_exit("No build definitions selected", code=0)

    out.header(f"Watching {len(watched)} build definition(s) every {interval}s")

    try:
        watch_with_radiator(
            appctx.server,
            watched,
            apply_quality=quality,
            with_comments=comments,
            poll_interval=interval,
        )
    except BuildServerError as exc:
        exit_from_exc(exc, message="Could not query build status")
