"""``roster backup`` — copy the data file to its backup location."""

from pathlib import Path
from typing import Optional

import typer

from ..storage import create_backup
from . import app
from ._common import console, resolve_config


@app.command()
def backup(
    data_file: Optional[Path] = typer.Option(None, "--data-file", help="JSON data file"),
    backup_file: Optional[Path] = typer.Option(None, "--backup-file", help="Backup destination"),
    config: Optional[Path] = typer.Option(None, "-c", "--config", help="Config file"),
) -> None:
    """Copy the data file to the backup file."""
    settings = resolve_config(config, data_file=data_file, backup_file=backup_file)

    if not settings.data_path.exists():
        console.print(f"[red]Error:[/red] data file {settings.data_file} does not exist")
        raise typer.Exit(1)

    if not create_backup(settings.data_file, settings.backup_file):
        console.print(f"[red]Error:[/red] could not copy {settings.data_file} to {settings.backup_file}")
        raise typer.Exit(1)

    console.print(f"[green]Backed up[/green] {settings.data_file} -> {settings.backup_file}")
