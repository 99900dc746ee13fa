"""Configuration loading and management for Roster.

Configuration sources are merged in priority order:
    1. Defaults (defined in ServiceConfig)
    2. Global config (~/.roster.toml)
    3. Project config (./roster.toml)
    4. Explicit config file
    5. Environment variables (ROSTER_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(port=8080, verbose=True)
    >>> config.port
    8080
    >>> config.verbosity
    'verbose'
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_args, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "ROSTER_"
GLOBAL_CONFIG_NAME = ".roster.toml"
PROJECT_CONFIG_NAME = "roster.toml"


@dataclass(frozen=True)
class ServiceConfig:
    """Settings for one service process.

    Attributes:
        Files:
            data_file: JSON array holding the whole user collection
            backup_file: Destination of the data file copy
            operation_log_file: Append-only plaintext operation log

        Network:
            host: Interface to bind
            port: TCP port to listen on

        Optional hooks (off by default):
            backup_before_write: Copy the data file to backup_file before each save
            audit_operations: Append a line to operation_log_file per mutation

        Logging:
            verbosity: quiet / normal / verbose
            log_file: Also write log records to this file
    """

    # Files
    data_file: str = "users.json"
    backup_file: str = "users_backup.json"
    operation_log_file: str = "logs.txt"

    # Network
    host: str = "127.0.0.1"
    port: int = 3000

    # Optional hooks
    backup_before_write: bool = False
    audit_operations: bool = False

    # Logging
    verbosity: Verbosity = "normal"
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        for key in ("data_file", "backup_file", "operation_log_file"):
            if not getattr(self, key):
                raise InvalidConfigError(key, getattr(self, key), "must be a non-empty path")
        if self.data_file == self.backup_file:
            raise InvalidConfigError("backup_file", self.backup_file, "must differ from data_file")

        if not self.host:
            raise InvalidConfigError("host", self.host, "must not be empty")
        if not 1 <= self.port <= 65535:
            raise InvalidConfigError("port", self.port, "must be between 1 and 65535")

        if self.verbosity not in get_args(Verbosity):
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet, normal or verbose")

    @property
    def data_path(self) -> Path:
        return Path(self.data_file)

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> ServiceConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options fall through. The boolean
            shortcuts ``verbose`` and ``quiet`` map onto ``verbosity``.

    Returns:
        Validated ServiceConfig instance

    Raises:
        ConfigurationError: If a config file is missing, unreadable or names
            an unknown setting
        InvalidConfigError: If a value fails validation
    """
    merged: dict[str, Any] = {}

    # 1. Global config
    global_config = Path.home() / GLOBAL_CONFIG_NAME
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    # 2. Project config
    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    # 3. Explicit config file
    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    # 4. Environment variables
    merged.update(_load_env_vars())

    # 5. CLI overrides
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"
    for key in ("data_file", "backup_file", "operation_log_file", "log_file"):
        if isinstance(overrides.get(key), Path):
            overrides[key] = str(overrides[key])
    merged.update(overrides)

    unknown = sorted(set(merged) - set(ServiceConfig.__dataclass_fields__))
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration key(s): {', '.join(unknown)}",
            details={"keys": ", ".join(unknown)},
        )

    return ServiceConfig(**merged)


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from ROSTER_* environment variables.

    Every ServiceConfig field can be set this way, e.g. ``ROSTER_PORT=8080``
    or ``ROSTER_AUDIT_OPERATIONS=true``.
    """
    type_hints = get_type_hints(ServiceConfig)
    result: dict[str, Any] = {}

    for field_name in ServiceConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue
        try:
            result[field_name] = _parse_env_value(env_value, type_hints[field_name])
        except ValueError as e:
            raise InvalidConfigError(field_name, env_value, f"from {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type."""
    # Optional[X] is Union[X, None]
    args = get_args(type_hint)
    if type(None) in args:
        type_hint = next(t for t in args if t is not type(None))

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    # str and Literal (verbosity) are validated by ServiceConfig itself
    return value


def _load_toml_file(path: Path) -> dict:
    """Load a TOML config file, accepting either top-level keys or a [roster] table."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}", details={"path": str(path)})

    section = data.get("roster")
    if isinstance(section, dict):
        return section
    return data
