"""Metrics collection for redirect resolution."""

from collections import Counter
from dataclasses import dataclass, field
from typing import ClassVar

from content_gate.fetch.models import ProbeErrorClass


@dataclass
class ResolverMetrics:
    """Metrics for redirect-resolved probes.

    Singleton tracking probe counts, terminal statuses, redirect hops
    and failures by class.
    """

    probes_total: int = 0
    probes_succeeded: int = 0
    redirects_total: int = 0
    statuses_total: Counter[int] = field(default_factory=Counter)
    failures_total: Counter[str] = field(default_factory=Counter)
    duration_ms_total: float = 0.0

    _instance: ClassVar["ResolverMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "ResolverMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_probe(
        self,
        status_code: int | None,
        redirects: int,
        duration_ms: float,
    ) -> None:
        """Record a finished probe.

        Args:
            status_code: Terminal status code, if a response arrived.
            redirects: Number of hops followed.
            duration_ms: Wall time of the probe.
        """
        self.probes_total += 1
        self.redirects_total += redirects
        self.duration_ms_total += duration_ms
        if status_code is not None:
            self.statuses_total[status_code] += 1

    def record_success(self) -> None:
        """Record an accepted probe."""
        self.probes_succeeded += 1

    def record_failure(self, error_class: ProbeErrorClass) -> None:
        """Record a failed probe.

        Args:
            error_class: Classification of the failure.
        """
        self.failures_total[error_class.value] += 1

    def to_dict(self) -> dict[str, int | float | dict[str, int] | dict[int, int]]:
        """Convert metrics to dictionary."""
        return {
            "resolver_probes_total": self.probes_total,
            "resolver_probes_succeeded": self.probes_succeeded,
            "resolver_redirects_total": self.redirects_total,
            "resolver_statuses_total": dict(self.statuses_total),
            "resolver_failures_total": dict(self.failures_total),
            "resolver_duration_ms_total": round(self.duration_ms_total, 2),
        }
