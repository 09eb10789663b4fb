"""Unit tests for schema migrations."""

import sqlite3
from collections.abc import Iterator

import pytest

from content_gate.store.errors import MigrationError
from content_gate.store.migrations import (
    CURRENT_VERSION,
    MIGRATIONS,
    Migration,
    MigrationManager,
    get_migrations_to_apply,
)


@pytest.fixture
def connection() -> Iterator[sqlite3.Connection]:
    """Create an in-memory SQLite connection."""
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


class TestMigrationConstants:
    """Tests for migration constants."""

    def test_migrations_in_order(self) -> None:
        """Test migrations are in ascending version order."""
        versions = [m.version for m in MIGRATIONS]
        assert versions == sorted(versions)

    def test_current_version_matches_latest_migration(self) -> None:
        """Test current version matches the latest migration."""
        assert MIGRATIONS[-1].version == CURRENT_VERSION


class TestGetMigrationsToApply:
    """Tests for get_migrations_to_apply function."""

    def test_from_zero(self) -> None:
        """Test getting all migrations from version 0."""
        assert len(get_migrations_to_apply(0)) == len(MIGRATIONS)

    def test_from_current(self) -> None:
        """Test no migrations when at current version."""
        assert get_migrations_to_apply(CURRENT_VERSION) == []


class TestMigrationManager:
    """Tests for MigrationManager."""

    def test_fresh_database_version_zero(self, connection: sqlite3.Connection) -> None:
        """Test a new database reports version 0."""
        assert MigrationManager(connection).get_current_version() == 0

    def test_apply_creates_kv_table(self, connection: sqlite3.Connection) -> None:
        """Test applying migrations creates the kv_store table."""
        manager = MigrationManager(connection)

        applied = manager.apply_migrations()

        assert applied == [m.version for m in MIGRATIONS]
        assert manager.get_current_version() == CURRENT_VERSION
        tables = {
            row[0]
            for row in connection.execute(
                "SELECT name FROM sqlite_master WHERE type='table'"
            )
        }
        assert "kv_store" in tables

    def test_apply_is_idempotent(self, connection: sqlite3.Connection) -> None:
        """Test a second apply does nothing."""
        manager = MigrationManager(connection)
        manager.apply_migrations()

        assert manager.apply_migrations() == []

    def test_failed_migration_raises(
        self, connection: sqlite3.Connection, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test a broken migration raises MigrationError."""
        broken = Migration(version=1, description="broken", up_sql="CREATE TABL x;")
        monkeypatch.setattr(
            "content_gate.store.migrations.MIGRATIONS", [broken]
        )

        manager = MigrationManager(connection)

        with pytest.raises(MigrationError, match="Migration 1 failed"):
            manager.apply_migrations()

        assert manager.get_current_version() == 0
        assert not connection.in_transaction
