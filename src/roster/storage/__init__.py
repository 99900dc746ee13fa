"""Flat-file persistence: the JSON data file, its backup copy and the operation log."""

from .backup import create_backup
from .json_file import JsonFileStorage
from .oplog import OperationLog

__all__ = [
    "JsonFileStorage",
    "OperationLog",
    "create_backup",
]
