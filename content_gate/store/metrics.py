"""Metrics collection for the persistent store."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class StoreMetrics:
    """Metrics for store operations.

    Attributes:
        reads_total: Number of key reads.
        writes_total: Number of key writes.
        tx_duration_ms: Cumulative write transaction duration.
        tx_count: Number of write transactions.
    """

    reads_total: int = 0
    writes_total: int = 0
    tx_duration_ms: float = 0.0
    tx_count: int = 0

    _instance: ClassVar["StoreMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "StoreMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_read(self) -> None:
        """Record a key read."""
        self.reads_total += 1

    def record_write(self) -> None:
        """Record a key write."""
        self.writes_total += 1

    def record_tx_duration(self, duration_ms: float) -> None:
        """Record transaction duration.

        Args:
            duration_ms: Duration in milliseconds.
        """
        self.tx_duration_ms += duration_ms
        self.tx_count += 1

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary."""
        return {
            "store_reads_total": self.reads_total,
            "store_writes_total": self.writes_total,
            "store_tx_duration_ms": self.tx_duration_ms,
            "store_tx_count": self.tx_count,
        }
