"""Exception hierarchy for Roster."""

from .base import RosterError
from .config import ConfigurationError, InvalidConfigError
from .taxonomy import (
    DuplicateNameError,
    ErrorCode,
    MissingFieldsError,
    PersistenceError,
    RequestFault,
    RosterFault,
    UserNotFoundError,
    UserValidationError,
)

__all__ = [
    "RosterError",
    "ConfigurationError",
    "InvalidConfigError",
    "ErrorCode",
    "RosterFault",
    "RequestFault",
    "MissingFieldsError",
    "UserValidationError",
    "DuplicateNameError",
    "UserNotFoundError",
    "PersistenceError",
]
