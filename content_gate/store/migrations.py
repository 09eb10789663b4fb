"""SQLite schema migrations for the key-value store."""

import sqlite3
from dataclasses import dataclass

import structlog

from content_gate.store.errors import MigrationError


logger = structlog.get_logger()

CURRENT_VERSION = 1


@dataclass(frozen=True)
class Migration:
    """A database migration.

    Attributes:
        version: Target version after applying this migration.
        description: Human-readable description.
        up_sql: SQL to apply the migration.
    """

    version: int
    description: str
    up_sql: str


MIGRATIONS: list[Migration] = [
    Migration(
        version=1,
        description="Key-value table for gate decisions and path ids",
        up_sql="""
-- One row per persisted key; value_type keeps booleans apart from strings
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    value_type TEXT NOT NULL CHECK (value_type IN ('bool', 'string')),
    updated_at TEXT NOT NULL
);
""",
    ),
]


def get_migrations_to_apply(current_version: int) -> list[Migration]:
    """Get migrations that need to be applied.

    Args:
        current_version: The current schema version.

    Returns:
        List of migrations to apply in order.
    """
    return [m for m in MIGRATIONS if m.version > current_version]


class MigrationManager:
    """Applies pending migrations, tracking the schema in ``user_version``.

    Each migration runs in one transaction together with its version
    bump, so a failed migration leaves the previous version intact.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        """Initialize the migration manager.

        Args:
            connection: SQLite connection to manage.
        """
        self._conn = connection
        self._log = logger.bind(component="store", operation="migration")

    def get_current_version(self) -> int:
        """Get the schema version recorded in the database header.

        Returns:
            Current version number, or 0 for a new database.
        """
        row = self._conn.execute("PRAGMA user_version").fetchone()
        return int(row[0])

    def apply_migrations(self) -> list[int]:
        """Apply all pending migrations in version order.

        Returns:
            Versions that were applied, empty when already current.

        Raises:
            MigrationError: If a migration cannot be applied.
        """
        current = self.get_current_version()
        applied: list[int] = []

        for migration in get_migrations_to_apply(current):
            script = (
                f"BEGIN;\n{migration.up_sql}\n"
                f"PRAGMA user_version = {migration.version};\nCOMMIT;"
            )
            try:
                self._conn.executescript(script)
            except sqlite3.Error as e:
                if self._conn.in_transaction:
                    self._conn.rollback()
                self._log.error(
                    "migration_failed", version=migration.version, error=str(e)
                )
                raise MigrationError(migration.version, str(e)) from e

            self._log.info(
                "migration_applied",
                version=migration.version,
                description=migration.description,
            )
            applied.append(migration.version)

        return applied
