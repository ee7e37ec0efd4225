"""``buildherald host-info HOST_FILE``: preview the filtered host information.

Reads a host descriptor from a JSON file (a mapping with a ``kind`` key
such as ``"GitHubActions"``) and prints exactly the JSON string the
notifier would embed in ``BuildStatus.host_information``.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from buildherald.config import NotifierConfig
from buildherald.filtering import serialize_host_information
from buildherald.models.hosts import parse_host

console = Console(stderr=True)


def host_info_cmd(
    host_file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="JSON file describing the CI host.",
    ),
    authorized: bool | None = typer.Option(
        None,
        "--authorized/--no-authorized",
        help="Include the provider's sensitive fields. Defaults to the configured value.",
    ),
) -> None:
    """Print the filtered host information for a host descriptor."""
    try:
        data = json.loads(host_file.read_text(encoding="utf-8"))
        host = parse_host(data)
    except (json.JSONDecodeError, ValidationError) as exc:
        console.print(f"[bold red]Invalid host descriptor:[/bold red] {exc}")
        raise typer.Exit(code=1)

    if authorized is None:
        authorized = NotifierConfig().enable_authorized_actions

    typer.echo(serialize_host_information(host, authorized))
