"""In-memory persistent store for tests and ephemeral runs."""

from dataclasses import dataclass, field


@dataclass
class InMemoryStore:
    """Dictionary-backed implementation of PersistentStore.

    Values do not survive the process. Every write is appended to
    ``writes`` so tests can assert on what was persisted and in which
    order.
    """

    values: dict[str, bool | str] = field(default_factory=dict)
    writes: list[tuple[str, bool | str]] = field(default_factory=list)

    def get_bool(self, key: str) -> bool:
        value = self.values.get(key)
        return value if isinstance(value, bool) else False

    def set_bool(self, key: str, value: bool) -> None:
        self.values[key] = value
        self.writes.append((key, value))

    def get_string(self, key: str) -> str | None:
        value = self.values.get(key)
        return value if isinstance(value, str) else None

    def set_string(self, key: str, value: str) -> None:
        self.values[key] = value
        self.writes.append((key, value))
