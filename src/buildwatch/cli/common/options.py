"""Common CLI options for the CLI."""

import typer

ServerOpt = typer.Option(
    None,
    "--server",
    "-s",
    help="Collection URL (defaults to $BUILDWATCH_SERVER_URL)",
)

ProjectOpt = typer.Option(
    None,
    "--project",
    "-p",
    help="Team project (defaults to $BUILDWATCH_PROJECT)",
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Log debug diagnostics",
)

NameOpt = typer.Option(
    None,
    "--name",
    help="Regex on build definition name",
)

PathOpt = typer.Option(
    [],
    "--path",
    help="Definition folder (e.g. \\Team\\CI). This is reusable.",
    show_default=False,
)

UseOrOpt = typer.Option(
    False,
    "--or",
    help="Use OR instead of AND between selectors",
)

QualityOpt = typer.Option(
    False,
    "--quality",
    "-q",
    help="Let build quality decide the status of successful builds",
)

CommentsOpt = typer.Option(
    False,
    "--comments",
    help="Replace comments with the latest changeset of each definition",
)

SelectOpt = typer.Option(
    False,
    "--select",
    help="Pick the definitions to watch interactively",
)

IntervalOpt = typer.Option(
    30,
    "--interval",
    "-i",
    min=1,
    help="Seconds between polls",
)
