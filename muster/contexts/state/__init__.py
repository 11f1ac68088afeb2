"""
State Context

Responsibilities:
- Owns the canonical, schema-versioned tracker state
- Migrates persisted records from any prior schema version
- Persists after every mutation and fans snapshots out to subscribers
- Imports/exports state as JSON

Owns: Store, schema history, persistence media, seed data
Never: Makes screening or pipeline decisions
"""

from muster.contexts.state.defaults import (
    CURRENT_SCHEMA_VERSION,
    EVENT_CATEGORIES,
    STAGES,
    seed_state,
)
from muster.contexts.state.exceptions import (
    ImportPayloadError,
    RecordNotFoundError,
    StorageError,
    StoreError,
)
from muster.contexts.state.exchange import ImportSummary, export_state, merge_import
from muster.contexts.state.migrations import MIGRATIONS, migrate
from muster.contexts.state.persistence import JsonFileStorage, MemoryStorage
from muster.contexts.state.store import STORAGE_KEY, Store

__all__ = [
    # Store
    "Store",
    "STORAGE_KEY",
    # Persistence media
    "MemoryStorage",
    "JsonFileStorage",
    # Schema
    "migrate",
    "MIGRATIONS",
    "CURRENT_SCHEMA_VERSION",
    "seed_state",
    "STAGES",
    "EVENT_CATEGORIES",
    # Exchange
    "export_state",
    "merge_import",
    "ImportSummary",
    # Errors
    "StoreError",
    "StorageError",
    "ImportPayloadError",
    "RecordNotFoundError",
]
