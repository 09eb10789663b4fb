"""Protocol interfaces for gate collaborators."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class DeviceClassifier(Protocol):
    """Decides whether the current device belongs to an excluded class."""

    def is_excluded_device_class(self) -> bool:
        """Return True when external content must not be shown on this device."""
        ...


@runtime_checkable
class UserIdentity(Protocol):
    """Supplies the client identifier sent as ``push_id``."""

    def get_user_id(self) -> str:
        """Return the user identifier."""
        ...
