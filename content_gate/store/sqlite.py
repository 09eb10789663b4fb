"""SQLite implementation of the persistent store."""

import sqlite3
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path

import structlog

from content_gate.store.errors import ConnectionError as StoreConnectionError
from content_gate.store.metrics import StoreMetrics
from content_gate.store.migrations import CURRENT_VERSION, MigrationManager


logger = structlog.get_logger()

_BOOL_TYPE = "bool"
_STRING_TYPE = "string"


class SqliteStore:
    """SQLite-backed key-value store implementing PersistentStore.

    Uses WAL mode and versioned migrations. Every write runs in its own
    timed transaction so a process torn down between steps never leaves
    a half-written decision.
    """

    def __init__(self, db_path: Path | str) -> None:
        """Initialize the store.

        Args:
            db_path: Path to SQLite database file.
        """
        self._db_path = Path(db_path) if isinstance(db_path, str) else db_path
        self._conn: sqlite3.Connection | None = None
        self._metrics = StoreMetrics.get_instance()
        self._log = logger.bind(component="store", db_path=str(self._db_path))

    @property
    def db_path(self) -> Path:
        """Get the database path."""
        return self._db_path

    @property
    def is_connected(self) -> bool:
        """Check if connected to database."""
        return self._conn is not None

    def connect(self) -> None:
        """Open connection to database and apply migrations.

        Creates the database file and parent directories if they don't exist.
        """
        if self._conn is not None:
            return

        self._db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA synchronous=NORMAL")

        migration_mgr = MigrationManager(self._conn)
        old_version = migration_mgr.get_current_version()
        applied = migration_mgr.apply_migrations()

        self._log.info(
            "database_connected",
            old_version=old_version,
            new_version=CURRENT_VERSION,
            migrations_applied=applied,
        )

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            self._log.debug("database_closed")

    def __enter__(self) -> "SqliteStore":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        self.close()

    def _ensure_connected(self) -> sqlite3.Connection:
        """Ensure database is connected.

        Returns:
            The database connection.

        Raises:
            StoreConnectionError: If not connected.
        """
        if self._conn is None:
            raise StoreConnectionError("Database not connected. Call connect() first.")
        return self._conn

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[sqlite3.Connection]:
        """Run a block in a transaction with timing and logging.

        Args:
            operation: Name of the operation for logging.

        Yields:
            The database connection.
        """
        conn = self._ensure_connected()
        tx_id = str(uuid.uuid4())[:8]
        start_ns = time.perf_counter_ns()

        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            self._log.error("transaction_failed", tx_id=tx_id, op=operation)
            raise

        duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
        self._metrics.record_tx_duration(duration_ms)
        self._log.debug(
            "transaction_complete",
            tx_id=tx_id,
            op=operation,
            duration_ms=round(duration_ms, 2),
        )

    def _read(self, key: str, value_type: str) -> str | None:
        conn = self._ensure_connected()
        self._metrics.record_read()
        row = conn.execute(
            "SELECT value, value_type FROM kv_store WHERE key = ?",
            (key,),
        ).fetchone()
        if row is None or row["value_type"] != value_type:
            return None
        return str(row["value"])

    def _write(self, key: str, value: str, value_type: str) -> None:
        with self._transaction(f"set_{value_type}") as conn:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, value_type, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    value_type = excluded.value_type,
                    updated_at = excluded.updated_at
                """,
                (key, value, value_type, datetime.now(UTC).isoformat()),
            )
        self._metrics.record_write()

    # ===== PersistentStore =====

    def get_bool(self, key: str) -> bool:
        """Read a boolean, defaulting to False when the key is absent."""
        return self._read(key, _BOOL_TYPE) == "1"

    def set_bool(self, key: str, value: bool) -> None:
        """Write a boolean."""
        self._write(key, "1" if value else "0", _BOOL_TYPE)

    def get_string(self, key: str) -> str | None:
        """Read a string, or None when the key is absent."""
        return self._read(key, _STRING_TYPE)

    def set_string(self, key: str, value: str) -> None:
        """Write a string."""
        self._write(key, value, _STRING_TYPE)

    # ===== Introspection =====

    def get_schema_version(self) -> int:
        """Get the current schema version."""
        return MigrationManager(self._ensure_connected()).get_current_version()

    def list_entries(self, prefix: str = "") -> dict[str, bool | str]:
        """List stored entries whose key starts with a prefix.

        Args:
            prefix: Key prefix filter (empty matches everything).

        Returns:
            Mapping of key to typed value, ordered by key.
        """
        conn = self._ensure_connected()
        escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        rows = conn.execute(
            """
            SELECT key, value, value_type FROM kv_store
            WHERE key LIKE ? ESCAPE '\\'
            ORDER BY key
            """,
            (f"{escaped}%",),
        ).fetchall()
        return {
            row["key"]: (
                row["value"] == "1" if row["value_type"] == _BOOL_TYPE else row["value"]
            )
            for row in rows
        }
