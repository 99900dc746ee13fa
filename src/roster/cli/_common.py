"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..config import ServiceConfig, load_config
from ..exceptions import RosterError

console = Console()


def resolve_config(config: Optional[Path] = None, **overrides) -> ServiceConfig:
    """Build the service config from CLI options, exiting with a message on error."""
    try:
        return load_config(config_file=config, **overrides)
    except RosterError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        raise typer.Exit(2)
