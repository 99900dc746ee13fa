"""Append-only plaintext operation log.

Each line is ``<ISO-8601 UTC timestamp> - <message>``, e.g.::

    2024-05-01T12:00:00.000Z - created user 3
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from ..exceptions import ErrorCode, PersistenceError

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class OperationLog:
    """Appends timestamped lines to a log file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def append(self, message: str) -> bool:
        """Append one line. Returns False (and logs) if the write fails."""
        line = f"{_timestamp()} - {message}\n"
        try:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line)
        except OSError as exc:
            fault = PersistenceError(
                message=f"Failed to write operation log {self.path}: {exc}",
                code=ErrorCode.RS903,
                context={"path": str(self.path)},
            )
            logger.error("Operation log write failed: %s", fault.to_json())
            return False
        return True
