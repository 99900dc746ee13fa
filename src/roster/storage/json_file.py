"""Whole-collection JSON file persistence.

The data file holds a JSON array of ``{"id", "name", "age"}`` objects. It is
read once at startup and rewritten in full after every mutation; there are no
incremental updates. Neither operation raises: failures are logged as
:class:`~roster.exceptions.PersistenceError` payloads and reported through
the return value.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ..exceptions import ErrorCode, PersistenceError
from ..models import User

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """Reads and rewrites the user collection as one JSON document."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load_all(self) -> list[User]:
        """Return every stored user, or an empty list if the file is unusable."""
        if not self.path.exists():
            logger.info("No data file at %s, starting with an empty collection", self.path)
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(raw, list):
                raise ValueError(f"expected a JSON array, got {type(raw).__name__}")
            return [User.from_dict(item) for item in raw]
        except (OSError, ValueError, KeyError, TypeError) as exc:
            fault = PersistenceError(
                message=f"Failed to load {self.path}: {exc}",
                code=ErrorCode.RS900,
                context={"path": str(self.path)},
                recovery_hint="Fix or remove the data file; the service started empty",
            )
            logger.error("Data file load failed: %s", fault.to_json())
            return []

    def save_all(self, users: list[User]) -> bool:
        """Overwrite the data file with *users*. Returns False on failure."""
        try:
            body = json.dumps([user.to_dict() for user in users], indent=2, ensure_ascii=False)
            self.path.write_text(body, encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            fault = PersistenceError(
                message=f"Failed to save {self.path}: {exc}",
                code=ErrorCode.RS901,
                context={"path": str(self.path), "user_count": len(users)},
                recovery_hint="In-memory state is ahead of disk until the next successful save",
            )
            logger.error("Data file save failed: %s", fault.to_json())
            return False
        logger.debug("Saved %d user(s) to %s", len(users), self.path)
        return True
