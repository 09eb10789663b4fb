"""One-time content-routing gate with redirect resolution."""

from content_gate.gate import GateEvaluator, GateOptions, GateResult


__version__ = "0.1.0"

__all__ = ["GateEvaluator", "GateOptions", "GateResult", "__version__"]
