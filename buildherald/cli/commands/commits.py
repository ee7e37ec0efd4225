"""``buildherald commits``: show the commits a status update would carry."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from buildherald.collector import MetadataCollector, SubprocessGit
from buildherald.snapshot import strip_git_suffix

console = Console()


def commits_cmd(
    repo: Path = typer.Option(
        Path("."),
        "--repo",
        "-C",
        file_okay=False,
        help="Repository root to inspect.",
    ),
    remote: str = typer.Option("origin", help="Remote whose URL identifies the repository."),
) -> None:
    """List commits from the previous tag up to HEAD."""
    metadata = MetadataCollector(SubprocessGit(repo, remote=remote)).collect()

    if metadata.repository is None:
        console.print(f"[bold red]Not a git repository (or no '{remote}' remote):[/bold red] {repo}")
        raise typer.Exit(code=1)

    console.print(f"[bold]Repository:[/bold] {strip_git_suffix(metadata.repository.url)}")
    console.print(f"[bold]Branch:[/bold]     {metadata.repository.branch or '[dim]detached[/dim]'}")

    if metadata.commits is None:
        console.print("[yellow]Commit history unavailable.[/yellow]")
        return

    table = Table(title="Commits")
    table.add_column("SHA", style="cyan", no_wrap=True)
    table.add_column("Author")
    table.add_column("Email", style="dim")
    table.add_column("Subject")
    for commit in metadata.commits:
        table.add_row(commit.sha[:10], commit.author, commit.email, commit.message)
    console.print(table)
