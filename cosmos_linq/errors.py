"""
Repository error taxonomy.

  ArgumentError       — invalid input to a public operation, raised before any I/O
  ProvisioningError   — database/container "ensure" returned an unexpected status
  RepositoryError     — any store failure during add/update/delete, chained to its cause

Cancellation is plain asyncio.CancelledError and is never wrapped.
"""

from __future__ import annotations


class ArgumentError(ValueError):
    """Raised when a public repository operation receives an invalid argument."""

    def __init__(self, argument: str, message: str | None = None):
        self.argument = argument
        super().__init__(message or f"'{argument}' must not be None")


class ProvisioningError(RuntimeError):
    """Raised when the store refuses to create or confirm a database or container."""

    def __init__(
        self,
        resource: str,
        status_code: int,
        database_id: str,
        container_id: str | None = None,
    ):
        self.resource = resource
        self.status_code = status_code
        self.database_id = database_id
        self.container_id = container_id
        if container_id is None:
            target = f"database '{database_id}'"
        else:
            target = f"container '{container_id}' in database '{database_id}'"
        super().__init__(
            f"Failed to create or verify {target}: store returned status {status_code}"
        )


class RepositoryError(Exception):
    """Raised when a store call made on behalf of a repository fails.

    The original store exception is always available as ``__cause__``.
    """

    def __init__(
        self,
        operation: str,
        repository: str,
        model_type: str,
        model_json: str,
    ):
        self.operation = operation
        self.repository = repository
        self.model_type = model_type
        self.model_json = model_json
        super().__init__(
            f"{repository}.{operation} failed for model '{model_type}': {model_json}"
        )
