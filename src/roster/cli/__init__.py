"""CLI entry point — registers all subcommands."""

from typing import Optional

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="roster",
    help="Roster - JSON-file backed user registry service",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"roster {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Roster - JSON-file backed user registry service."""


# Import subcommands to register them
from .serve import serve as _serve  # noqa: F401, E402
from .backup import backup as _backup  # noqa: F401, E402
