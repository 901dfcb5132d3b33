"""
Cosmos DB configuration — all Cosmos-specific env vars.

Kept apart from config.py so the options model stays backend-agnostic.
Anything that needs Cosmos connection details reads the names from here
instead of hard-coding os.getenv() calls.
"""

from __future__ import annotations

import os

# ---------------------------------------------------------------------------
# Env var names, in the order RepositoryOptions.from_env() reads them
# ---------------------------------------------------------------------------

ENV_VAR_NAMES: dict[str, str] = {
    "endpoint": "COSMOS_NOSQL_ENDPOINT",
    "key": "COSMOS_NOSQL_KEY",
    "connection_string": "COSMOS_NOSQL_CONNECTION_STRING",
    "database_id": "COSMOS_NOSQL_DATABASE",
    "partition_key_path": "COSMOS_PARTITION_KEY_PATH",
}

# One of these must be set for the cosmosdb-nosql backend
COSMOS_REQUIRED_VARS: tuple[str, ...] = (
    "COSMOS_NOSQL_ENDPOINT", "COSMOS_NOSQL_CONNECTION_STRING",
)

# ---------------------------------------------------------------------------
# Hosting environment (gates the startup drop/create/seed hook)
# ---------------------------------------------------------------------------

APP_ENVIRONMENT = os.getenv("APP_ENVIRONMENT", "Production")
DEVELOPMENT_ENVIRONMENT = "Development"
