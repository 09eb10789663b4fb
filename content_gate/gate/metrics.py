"""Metrics collection for gate evaluation."""

from collections import Counter
from dataclasses import dataclass, field
from typing import ClassVar


@dataclass
class GateMetrics:
    """Counters for gate outcomes.

    Attributes:
        evaluations_total: Calls to evaluate, including memoized ones.
        memo_hits_total: Calls answered from the per-process memo.
        outcomes_total: Results by reason label, without probe detail.
        failures_total: Fresh-evaluation failures by GateFailure value.
    """

    evaluations_total: int = 0
    memo_hits_total: int = 0
    outcomes_total: Counter[str] = field(default_factory=Counter)
    failures_total: Counter[str] = field(default_factory=Counter)

    _instance: ClassVar["GateMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "GateMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_evaluation(self) -> None:
        self.evaluations_total += 1

    def record_memo_hit(self) -> None:
        self.memo_hits_total += 1

    def record_outcome(self, reason: str) -> None:
        self.outcomes_total[reason] += 1

    def record_failure(self, failure: str) -> None:
        self.failures_total[failure] += 1

    def to_dict(self) -> dict[str, int | dict[str, int]]:
        """Convert metrics to dictionary."""
        return {
            "gate_evaluations_total": self.evaluations_total,
            "gate_memo_hits_total": self.memo_hits_total,
            "gate_outcomes_total": dict(self.outcomes_total),
            "gate_failures_total": dict(self.failures_total),
        }
