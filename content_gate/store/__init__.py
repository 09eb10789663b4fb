"""Persistent storage for gate decisions and path ids.

This module provides:
- The PersistentStore protocol and its in-memory and SQLite implementations
- Deterministic key derivation for decision and path id records
- Typed record access through DecisionCache
"""

from content_gate.store.decisions import DecisionCache
from content_gate.store.errors import (
    ConnectionError,
    MigrationError,
    StateStoreError,
)
from content_gate.store.hash import compute_url_hash
from content_gate.store.keys import DecisionKeys, path_id_key
from content_gate.store.memory import InMemoryStore
from content_gate.store.metrics import StoreMetrics
from content_gate.store.models import DecisionRecord, PathIdRecord
from content_gate.store.protocols import PersistentStore
from content_gate.store.sqlite import SqliteStore


__all__ = [
    # Errors
    "ConnectionError",
    "MigrationError",
    "StateStoreError",
    # Keys
    "DecisionKeys",
    "compute_url_hash",
    "path_id_key",
    # Metrics
    "StoreMetrics",
    # Models
    "DecisionRecord",
    "PathIdRecord",
    # Stores
    "DecisionCache",
    "InMemoryStore",
    "PersistentStore",
    "SqliteStore",
]
