"""
Roster - a small JSON-file backed user registry served over HTTP.

The whole collection lives in memory inside a :class:`UserStore` and is
mirrored to a flat JSON file after every mutation.
"""

__version__ = "0.1.0"

from .models import User
from .store import UserStore

__all__ = [
    "User",
    "UserStore",
]
