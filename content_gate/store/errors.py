"""Exceptions for the persistent store layer.

Infrastructure failures (database not connected, failed migrations) are
kept apart from gate outcomes, which are never raised.
"""


class StateStoreError(Exception):
    """Base exception for all persistent store errors."""


class ConnectionError(StateStoreError):
    """Raised when the database connection is not established."""

    def __init__(self, message: str = "Database not connected") -> None:
        """Initialize the connection error.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message)


class MigrationError(StateStoreError):
    """Raised when a schema migration fails."""

    def __init__(self, version: int, message: str) -> None:
        """Initialize the migration error.

        Args:
            version: The migration version that failed.
            message: Human-readable error message.
        """
        self.version = version
        super().__init__(f"Migration {version} failed: {message}")
