"""
Configuration — repository options and shared credentials.

Centralises option loading so repositories and stores receive a single
validated, read-only RepositoryOptions instead of reading env vars
themselves.

Usage:
    from cosmos_linq.config import RepositoryOptions

    options = RepositoryOptions(database_id="shop", endpoint="https://acct.documents.azure.com:443/")
    options = RepositoryOptions.from_env(env_file="azure_config.env")
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from cosmos_linq.adapters import cosmos_config

# ---------------------------------------------------------------------------
# Repository options
# ---------------------------------------------------------------------------


class RepositoryOptions(BaseModel):
    """Connection and provisioning settings shared by every repository.

    Either ``connection_string`` or ``endpoint`` (with an optional account
    ``key``; managed identity is used without one) identifies the account.
    """

    model_config = ConfigDict(frozen=True)

    database_id: str
    endpoint: str = ""
    key: str = ""
    connection_string: str = ""
    partition_key_path: str = "/id"

    # Container indexing policy sent on creation. Lazy + non-automatic means
    # freshly written items may not show up in queries right away.
    indexing_mode: str = "lazy"
    automatic_indexing: bool = False

    # False: a failed provisioning attempt still marks the resource as
    # checked. True: the next access tries again.
    recheck_on_failure: bool = False

    # Startup hook flags (only honoured in the Development environment)
    ensure_created: bool = False
    drop_database: bool = False
    seed_database: bool = False

    client_options: dict[str, Any] = Field(default_factory=dict)

    @field_validator("database_id")
    @classmethod
    def _database_id_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("database_id must not be empty")
        return value

    @property
    def indexing_policy(self) -> dict[str, Any]:
        """Cosmos indexing policy document for new containers."""
        return {"indexingMode": self.indexing_mode, "automatic": self.automatic_indexing}

    @classmethod
    def from_env(cls, env_file: str | Path | None = None, **overrides: Any) -> "RepositoryOptions":
        """Build options from COSMOS_* env vars, optionally loading a .env file first.

        Values already present in the process environment win over the file.
        Keyword overrides win over both.
        """
        if env_file is not None:
            load_dotenv(str(env_file), override=False)
        values: dict[str, Any] = {}
        for field_name, var_name in cosmos_config.ENV_VAR_NAMES.items():
            raw = os.getenv(var_name)
            if raw:
                values[field_name] = raw
        values.update(overrides)
        values.setdefault("database_id", "")
        return cls(**values)


# ---------------------------------------------------------------------------
# Shared credential (lazy-initialised to avoid probing at import time)
# ---------------------------------------------------------------------------

_credential = None


def get_credential():
    """Return a cached DefaultAzureCredential (lazy-initialised)."""
    global _credential
    if _credential is None:
        from azure.identity import DefaultAzureCredential
        _credential = DefaultAzureCredential()
    return _credential
