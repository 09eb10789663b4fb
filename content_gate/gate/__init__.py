"""One-time content-routing gate.

This module provides:
- GateEvaluator, the cache-consult/validate/re-acquire state machine
- GateOptions and GateResult, the evaluation inputs and outputs
- Protocols and static implementations for device and user collaborators
"""

from content_gate.gate.collaborators import StaticDeviceClassifier, StaticUserIdentity
from content_gate.gate.constants import (
    REASON_ALL_CHECKS_PASSED,
    REASON_CACHED_APP,
    REASON_DATE_NOT_REACHED,
    REASON_DEVICE_NOT_SUPPORTED,
    REASON_FAILED_NEW_URL,
    REASON_NEW_URL_WITH_PATH_ID,
    REASON_NO_INTERNET,
    REASON_SERVER_CHECK_FAILED,
    REASON_VALID_CACHED_EXTERNAL,
)
from content_gate.gate.evaluator import GateEvaluator
from content_gate.gate.factory import create_evaluator, default_options
from content_gate.gate.metrics import GateMetrics
from content_gate.gate.models import GateFailure, GateOptions, GateResult
from content_gate.gate.protocols import DeviceClassifier, UserIdentity
from content_gate.gate.state_machine import GateState, GateStateError, GateStateMachine


__all__ = [
    # Evaluator
    "GateEvaluator",
    "create_evaluator",
    "default_options",
    # Models
    "GateFailure",
    "GateOptions",
    "GateResult",
    # Collaborators
    "DeviceClassifier",
    "StaticDeviceClassifier",
    "StaticUserIdentity",
    "UserIdentity",
    # State machine
    "GateState",
    "GateStateError",
    "GateStateMachine",
    # Metrics
    "GateMetrics",
    # Reasons
    "REASON_ALL_CHECKS_PASSED",
    "REASON_CACHED_APP",
    "REASON_DATE_NOT_REACHED",
    "REASON_DEVICE_NOT_SUPPORTED",
    "REASON_FAILED_NEW_URL",
    "REASON_NEW_URL_WITH_PATH_ID",
    "REASON_NO_INTERNET",
    "REASON_SERVER_CHECK_FAILED",
    "REASON_VALID_CACHED_EXTERNAL",
]
