"""CLI application for build radiator tooling."""

import typer

from buildwatch.cli.commands.builds import app as builds_app

app = typer.Typer(
    help="buildwatch - build status radiator for TFS / Azure DevOps Server",
    no_args_is_help=True,
)

app.add_typer(builds_app, name="builds", help="List / poll / watch build definitions.")


if __name__ == "__main__":
    app()
