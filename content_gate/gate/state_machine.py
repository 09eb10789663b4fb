"""Gate evaluation state machine."""

from enum import Enum, auto
from typing import ClassVar

import structlog


logger = structlog.get_logger()


class GateState(Enum):
    """Gate evaluation states.

    State transitions:
        START -> CACHE_CHECK: Record keys derived
        CACHE_CHECK -> EXTERNAL_CACHED: External decision already persisted
        CACHE_CHECK -> APP_CACHED: App decision already persisted
        CACHE_CHECK -> FRESH_EVALUATION: No decision persisted
        EXTERNAL_CACHED -> VALIDATE_SAVED_URL: Saved path id refreshed
        VALIDATE_SAVED_URL -> EXTERNAL: Saved URL still authorized
        VALIDATE_SAVED_URL -> REACQUIRE_URL: Saved URL rejected
        REACQUIRE_URL -> EXTERNAL: New URL acquired, or degraded to an empty URL
        FRESH_EVALUATION -> APP_CACHED: A check failed
        FRESH_EVALUATION -> EXTERNAL: All checks passed
    """

    START = auto()
    CACHE_CHECK = auto()
    EXTERNAL_CACHED = auto()
    VALIDATE_SAVED_URL = auto()
    REACQUIRE_URL = auto()
    FRESH_EVALUATION = auto()
    APP_CACHED = auto()
    EXTERNAL = auto()


class GateStateError(Exception):
    """Raised when an invalid gate state transition is attempted."""

    def __init__(self, from_state: GateState, to_state: GateState) -> None:
        """Initialize the error.

        Args:
            from_state: The current state.
            to_state: The attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid gate state transition: {from_state.name} -> {to_state.name}"
        )


class GateStateMachine:
    """State machine for one gate evaluation.

    Enforces the order cache lookup, validation, re-acquisition and
    fresh checks may happen in. Logs invariant violations when invalid
    transitions are attempted.
    """

    VALID_TRANSITIONS: ClassVar[dict[GateState, set[GateState]]] = {
        GateState.START: {GateState.CACHE_CHECK},
        GateState.CACHE_CHECK: {
            GateState.EXTERNAL_CACHED,
            GateState.APP_CACHED,
            GateState.FRESH_EVALUATION,
        },
        GateState.EXTERNAL_CACHED: {GateState.VALIDATE_SAVED_URL},
        GateState.VALIDATE_SAVED_URL: {
            GateState.EXTERNAL,
            GateState.REACQUIRE_URL,
        },
        GateState.REACQUIRE_URL: {GateState.EXTERNAL},
        GateState.FRESH_EVALUATION: {
            GateState.APP_CACHED,
            GateState.EXTERNAL,
        },
        GateState.APP_CACHED: set(),  # Terminal state
        GateState.EXTERNAL: set(),  # Terminal state
    }

    def __init__(self, cache_key: str) -> None:
        """Initialize the state machine in START state.

        Args:
            cache_key: Cache key of the evaluation, for logging.
        """
        self._state = GateState.START
        self._history: list[GateState] = [GateState.START]
        self._log = logger.bind(component="gate", cache_key=cache_key)

    @property
    def state(self) -> GateState:
        """Get the current state."""
        return self._state

    @property
    def history(self) -> list[GateState]:
        """Get every state visited, in order."""
        return list(self._history)

    def can_transition(self, to_state: GateState) -> bool:
        """Check if a transition to the given state is valid.

        Args:
            to_state: The target state.

        Returns:
            True if the transition is valid, False otherwise.
        """
        return to_state in self.VALID_TRANSITIONS.get(self._state, set())

    def transition(self, to_state: GateState) -> None:
        """Transition to a new state.

        Args:
            to_state: The target state.

        Raises:
            GateStateError: If the transition is invalid.
        """
        if not self.can_transition(to_state):
            self._log.error(
                "invariant_violation",
                error_type="illegal_state_transition",
                from_state=self._state.name,
                to_state=to_state.name,
            )
            raise GateStateError(self._state, to_state)

        old_state = self._state
        self._state = to_state
        self._history.append(to_state)
        self._log.debug(
            "gate_state_transition",
            from_state=old_state.name,
            to_state=to_state.name,
        )

    def is_terminal(self) -> bool:
        """Check if the current state is terminal."""
        return self._state in (GateState.APP_CACHED, GateState.EXTERNAL)
