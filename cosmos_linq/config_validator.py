"""
Config Validator — validate repository options before first use.

Collects every problem with a RepositoryOptions instance instead of
stopping at the first one, so a misconfigured deployment reports all of
its mistakes at once.

Usage:
    from cosmos_linq.config_validator import validate_options, ConfigValidationError

    try:
        validate_options(options)
    except ConfigValidationError as e:
        print(e.errors)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cosmos_linq.adapters import cosmos_config

if TYPE_CHECKING:
    from cosmos_linq.config import RepositoryOptions


class ConfigValidationError(ValueError):
    """Raised when repository options fail validation."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Config validation failed: {'; '.join(errors)}")


_VALID_INDEXING_MODES = {"consistent", "lazy", "none"}

# Cosmos DB ids cannot contain these characters
_INVALID_ID_CHARS = ("/", "\\", "#", "?")


def validate_options(options: RepositoryOptions, *, backend_type: str = "cosmosdb-nosql") -> None:
    """Validate a RepositoryOptions instance.

    Checks:
    - database_id is present and a legal Cosmos id
    - partition_key_path starts with '/' and has no empty segments
    - indexing_mode is one Cosmos understands
    - the cosmosdb-nosql backend has an endpoint or a connection string

    Raises:
        ConfigValidationError: If any validation checks fail.
    """
    errors: list[str] = []

    database_id = (options.database_id or "").strip()
    if not database_id:
        errors.append("database_id: required and must not be empty")
    elif any(ch in database_id for ch in _INVALID_ID_CHARS):
        errors.append(
            f"database_id: '{database_id}' contains one of {''.join(_INVALID_ID_CHARS)!r}"
        )

    path = options.partition_key_path or ""
    if not path.startswith("/"):
        errors.append(f"partition_key_path: '{path}' must start with '/'")
    elif any(not segment for segment in path[1:].split("/")):
        errors.append(f"partition_key_path: '{path}' has an empty segment")

    if options.indexing_mode not in _VALID_INDEXING_MODES:
        errors.append(
            f"indexing_mode: unknown mode '{options.indexing_mode}' "
            f"(expected one of {sorted(_VALID_INDEXING_MODES)})"
        )

    if backend_type == "cosmosdb-nosql" and not (options.endpoint or options.connection_string):
        errors.append(
            "cosmosdb-nosql backend requires 'endpoint' or 'connection_string' "
            f"(env: {' or '.join(cosmos_config.COSMOS_REQUIRED_VARS)})"
        )

    if errors:
        raise ConfigValidationError(errors)
