"""``roster serve`` — run the HTTP service."""

from pathlib import Path
from typing import Optional

import typer

from ..logging_config import setup_logging
from ..server.lifecycle import launch_server
from . import app
from ._common import console, resolve_config


@app.command()
def serve(
    port: Optional[int] = typer.Option(None, help="Port to listen on (default 3000)"),
    host: Optional[str] = typer.Option(None, help="Host to bind to (default 127.0.0.1)"),
    data_file: Optional[Path] = typer.Option(None, "--data-file", help="JSON data file"),
    backup_before_write: Optional[bool] = typer.Option(
        None, "--backup/--no-backup", help="Copy the data file before each save"
    ),
    audit_operations: Optional[bool] = typer.Option(
        None, "--audit/--no-audit", help="Append each mutation to the operation log"
    ),
    config: Optional[Path] = typer.Option(None, "-c", "--config", help="Config file"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging"),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only log errors"),
) -> None:
    """Start the user registry HTTP service."""
    settings = resolve_config(
        config,
        port=port,
        host=host,
        data_file=data_file,
        backup_before_write=backup_before_write,
        audit_operations=audit_operations,
        verbose=verbose,
        quiet=quiet,
    )
    setup_logging(
        verbose=settings.verbosity == "verbose",
        quiet=settings.verbosity == "quiet",
        log_file=settings.log_file,
    )
    launch_server(settings, console)
