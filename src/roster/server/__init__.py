"""HTTP surface for Roster: the Starlette application and its process lifecycle."""

from .app import create_app

__all__ = ["create_app"]
