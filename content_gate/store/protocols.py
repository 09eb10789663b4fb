"""Protocol interface for durable key-value storage."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class PersistentStore(Protocol):
    """Durable key-to-value mapping that survives process restarts.

    Only booleans and strings are stored. Missing booleans read as
    False and missing strings read as None. No transactional guarantees
    are required across keys.
    """

    def get_bool(self, key: str) -> bool:
        """Read a boolean, defaulting to False when the key is absent."""
        ...

    def set_bool(self, key: str, value: bool) -> None:
        """Write a boolean."""
        ...

    def get_string(self, key: str) -> str | None:
        """Read a string, or None when the key is absent."""
        ...

    def set_string(self, key: str, value: str) -> None:
        """Write a string."""
        ...
