"""The in-memory user collection and its single-writer discipline.

:class:`UserStore` owns the collection for the lifetime of the process. It is
built once at startup, loaded from the data file before traffic is accepted,
and handed to the request handlers.

Concurrency: handlers run on one asyncio event loop, and file I/O is pushed
to Starlette's threadpool and awaited. Every read-modify-write cycle holds
``self._write_lock`` from the uniqueness check through the file rewrite, so
at most one mutation is in flight and two creations can never be given the
same id. Lookups do not take the lock.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping, Optional

from starlette.concurrency import run_in_threadpool

from .exceptions import DuplicateNameError, MissingFieldsError, UserNotFoundError, UserValidationError
from .models import User
from .storage import JsonFileStorage, OperationLog, create_backup
from .validation import is_name_unique, next_user_id, validate_user_data

if TYPE_CHECKING:
    from .config import ServiceConfig

logger = logging.getLogger(__name__)


class UserStore:
    """Holds the user collection and mirrors every mutation to disk.

    A failed save never fails the caller's operation: the in-memory change
    stands, the store is marked dirty, and the next successful save (any
    later mutation, or :meth:`flush`) brings the file back in line.

    Attributes:
        storage: Adapter for the JSON data file.
        operation_log: When set, each mutation appends a line to it.
        backup_file: When set, the data file is copied here before each save.
        failed_saves: Number of saves that have failed since startup.
    """

    def __init__(
        self,
        storage: JsonFileStorage,
        operation_log: Optional[OperationLog] = None,
        backup_file: Optional[Path] = None,
    ) -> None:
        self.storage = storage
        self.operation_log = operation_log
        self.backup_file = Path(backup_file) if backup_file is not None else None
        self.failed_saves = 0

        self._users: list[User] = []
        self._write_lock = asyncio.Lock()
        self._loaded = False
        self._dirty = False

    @classmethod
    def from_config(cls, config: ServiceConfig) -> UserStore:
        """Build a store wired to the files named in *config*."""
        return cls(
            storage=JsonFileStorage(config.data_file),
            operation_log=OperationLog(config.operation_log_file) if config.audit_operations else None,
            backup_file=config.backup_file if config.backup_before_write else None,
        )

    # ── State ─────────────────────────────────────────────────────

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def dirty(self) -> bool:
        """True while the data file lags behind the in-memory collection."""
        return self._dirty

    def __len__(self) -> int:
        return len(self._users)

    def snapshot(self) -> list[User]:
        """Return a copy of the collection in insertion order."""
        return list(self._users)

    # ── Lifecycle ─────────────────────────────────────────────────

    async def load(self) -> int:
        """Replace the collection with the data file's contents.

        Returns the number of users loaded. An unreadable file yields an
        empty collection (the adapter logs why).
        """
        async with self._write_lock:
            self._users = await run_in_threadpool(self.storage.load_all)
            self._loaded = True
            self._dirty = False
        logger.info("Loaded %d user(s) from %s", len(self._users), self.storage.path)
        return len(self._users)

    async def flush(self) -> bool:
        """Save the collection again if the last save failed."""
        async with self._write_lock:
            if not self._dirty:
                return True
            return await self._persist()

    # ── Operations ────────────────────────────────────────────────

    def get(self, user_id: int) -> User:
        """Return the user with *user_id*.

        Raises:
            UserNotFoundError: No user has that id.
        """
        for user in self._users:
            if user.id == user_id:
                return user
        raise UserNotFoundError(user_id)

    async def create(self, payload: Mapping[str, Any]) -> User:
        """Validate *payload*, append a new user and persist the collection.

        Checks run in order and stop at the first failing stage: required
        fields, field formats, name uniqueness. Nothing is mutated unless all
        of them pass.

        Raises:
            MissingFieldsError: ``name`` or ``age`` is absent or empty.
            UserValidationError: One or both fields have the wrong format.
            DuplicateNameError: Another user already has this name.
        """
        name = payload.get("name")
        age = payload.get("age")
        if not name or not age:
            raise MissingFieldsError(
                missing=[key for key, value in (("name", name), ("age", age)) if not value]
            )

        errors = validate_user_data({"name": name, "age": age})
        if errors:
            raise UserValidationError(errors)

        async with self._write_lock:
            if not is_name_unique(self._users, name):
                raise DuplicateNameError(name)

            user = User(id=next_user_id(self._users), name=name, age=age)
            self._users.append(user)
            await self._persist()
            await self._record(f"created user {user.id}")

        logger.info("Created user %d (%s)", user.id, user.name)
        return user

    async def delete(self, user_id: int) -> User:
        """Remove the user with *user_id* and persist the collection.

        Raises:
            UserNotFoundError: No user has that id.
        """
        async with self._write_lock:
            for index, user in enumerate(self._users):
                if user.id == user_id:
                    break
            else:
                raise UserNotFoundError(user_id)

            removed = self._users.pop(index)
            await self._persist()
            await self._record(f"deleted user {removed.id}")

        logger.info("Deleted user %d (%s)", removed.id, removed.name)
        return removed

    # ── Internals (caller holds the write lock) ───────────────────

    async def _persist(self) -> bool:
        if self.backup_file is not None and self.storage.path.exists():
            await run_in_threadpool(create_backup, self.storage.path, self.backup_file)

        saved = await run_in_threadpool(self.storage.save_all, list(self._users))
        if saved:
            if self._dirty:
                logger.info("Data file %s is back in sync", self.storage.path)
            self._dirty = False
        else:
            self.failed_saves += 1
            self._dirty = True
            logger.warning(
                "Collection not persisted (%d failed save(s) so far); keeping in-memory state",
                self.failed_saves,
            )
        return saved

    async def _record(self, message: str) -> None:
        if self.operation_log is not None:
            await run_in_threadpool(self.operation_log.append, message)
