"""Static collaborator implementations driven by configuration."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class StaticDeviceClassifier:
    """Classify a device by its reported model name.

    Matching is case-insensitive on the whole model name, so "iPad"
    excludes tablets while "iPhone" passes.
    """

    device_model: str
    excluded_models: tuple[str, ...] = field(default=("iPad",))

    def is_excluded_device_class(self) -> bool:
        model = self.device_model.strip().lower()
        return any(model == excluded.lower() for excluded in self.excluded_models)


@dataclass(frozen=True)
class StaticUserIdentity:
    """User identity fixed at construction time."""

    user_id: str

    def get_user_id(self) -> str:
        return self.user_id
