"""File-copy backup of the data file."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from ..exceptions import ErrorCode, PersistenceError

logger = logging.getLogger(__name__)


def create_backup(data_file: str | Path, backup_file: str | Path) -> bool:
    """Copy *data_file* over *backup_file*. Failures are logged, not raised."""
    try:
        shutil.copyfile(data_file, backup_file)
    except OSError as exc:
        fault = PersistenceError(
            message=f"Failed to back up {data_file}: {exc}",
            code=ErrorCode.RS902,
            context={"data_file": str(data_file), "backup_file": str(backup_file)},
        )
        logger.error("Backup failed: %s", fault.to_json())
        return False
    logger.debug("Backed up %s to %s", data_file, backup_file)
    return True
