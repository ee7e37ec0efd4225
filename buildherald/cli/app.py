"""Main Typer application: registers the inspection commands.

Entry point: ``buildherald`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import logging

import typer

from buildherald.cli.commands.commits import commits_cmd
from buildherald.cli.commands.host_info import host_info_cmd
from buildherald.cli.commands.show_config import config_cmd
from buildherald.config import NotifierConfig

app = typer.Typer(
    name="buildherald",
    help="buildherald: inspect what build-status notifications would carry.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="host-info", help="Print filtered host information for a host JSON file.")(host_info_cmd)
app.command(name="commits", help="List commits since the previous tag.")(commits_cmd)
app.command(name="config", help="Show the effective notifier configuration.")(config_cmd)


@app.callback()
def _configure_logging(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    level = "DEBUG" if verbose else NotifierConfig().log_level.upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
