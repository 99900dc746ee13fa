"""Server lifecycle: startup banner, serving, and shutdown reporting."""

from __future__ import annotations

import logging

import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import ServiceConfig
from ..store import UserStore
from .app import create_app

logger = logging.getLogger(__name__)


def _format_status_display(config: ServiceConfig) -> Panel:
    """Build the Rich panel describing where the service listens and writes."""
    table = Table(show_header=False, show_edge=False, box=None, padding=(0, 1))
    table.add_column("key", style="bold", width=14)
    table.add_column("value")

    table.add_row("Listening:", f"[link={config.url}]{config.url}[/link]")
    table.add_row("Data file:", config.data_file)
    table.add_row(
        "Backup:",
        config.backup_file if config.backup_before_write else "[dim]off[/dim]",
    )
    table.add_row(
        "Audit log:",
        config.operation_log_file if config.audit_operations else "[dim]off[/dim]",
    )

    return Panel(table, title="[bold]Roster[/bold]", border_style="cyan")


def launch_server(config: ServiceConfig, console: Console) -> UserStore:
    """Serve until interrupted, then report the store's final state.

    The store is loaded by the application lifespan before uvicorn starts
    accepting connections, and flushed there on shutdown if a save failed.
    Returns the store so callers can inspect it after shutdown.
    """
    store = UserStore.from_config(config)
    asgi_app = create_app(store)

    console.print(_format_status_display(config))
    console.print("[dim]Press Ctrl+C to stop[/dim]")

    server = uvicorn.Server(
        uvicorn.Config(
            asgi_app,
            host=config.host,
            port=config.port,
            log_level="info" if config.verbosity == "verbose" else "warning",
        )
    )

    try:
        server.run()
    except KeyboardInterrupt:
        pass
    except Exception as exc:
        logger.exception("Server error: %s", exc)
        console.print(f"[red]Server error:[/red] {exc}")
        raise

    if store.dirty:
        console.print(
            f"[yellow]Warning:[/yellow] {config.data_file} is behind memory "
            f"({store.failed_saves} failed save(s)); last changes were not persisted"
        )
    else:
        console.print(f"  [green]OK[/green] {len(store)} user(s) in {config.data_file}")
    console.print("  [green]OK[/green] Server stopped cleanly")
    return store
