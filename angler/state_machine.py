"""State machine abstractions for explicit state management.

This module provides tools for creating explicit state machines where:
- All valid states are enumerated
- Valid transitions are defined explicitly
- Invalid transitions are reported as an ``Err`` instead of corrupting state
- State history can be tracked for debugging

The fishing session is the main user: a cast cycle must run
IDLE -> CASTING -> FLOATING -> BITE -> PULLING -> IDLE, and a stray UI call
(``cast()`` while the line is out, ``pull()`` while idle) must be rejected
without touching the session.

Usage:
------
    phases = create_session_state_machine()
    phases.transition(SessionPhase.CASTING)       # OK
    result = phases.try_transition(SessionPhase.PULLING)
    result.is_err()                               # True: CASTING -> PULLING is invalid
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Generic, List, TypeVar

from angler.result import Err, Ok, Result

# Type variable for state enum types
S = TypeVar("S", bound=Enum)


@dataclass
class StateTransition(Generic[S]):
    """Record of a state transition for debugging.

    Attributes:
        from_state: The state before transition
        to_state: The state after transition
        frame: The session frame when transition occurred
        reason: Optional description of why transition happened
    """

    from_state: S
    to_state: S
    frame: int
    reason: str = ""


class StateMachine(Generic[S]):
    """A generic state machine with explicit transition validation.

    Example:
        class LineState(Enum):
            SLACK = auto()
            TAUT = auto()

        transitions = {
            LineState.SLACK: [LineState.TAUT],
            LineState.TAUT: [LineState.SLACK],
        }

        line = StateMachine(LineState.SLACK, transitions)
        line.transition(LineState.TAUT)  # OK
        print(line.state)  # LineState.TAUT
    """

    def __init__(
        self,
        initial_state: S,
        valid_transitions: Dict[S, List[S]],
        track_history: bool = False,
        max_history: int = 100,
    ) -> None:
        """Initialize the state machine.

        Args:
            initial_state: The starting state
            valid_transitions: Map of state -> list of valid target states
            track_history: Whether to record transition history
            max_history: Maximum number of transitions to keep in history
        """
        self._state = initial_state
        self._transitions = valid_transitions
        self._track_history = track_history
        self._max_history = max_history
        self._history: List[StateTransition[S]] = []

        if initial_state not in valid_transitions:
            raise ValueError(
                f"Initial state {initial_state} not in valid_transitions. "
                f"Valid states: {list(valid_transitions.keys())}"
            )

    @property
    def state(self) -> S:
        """Get the current state."""
        return self._state

    @property
    def history(self) -> List[StateTransition[S]]:
        """Get transition history (empty if tracking disabled)."""
        return self._history.copy()

    def can_transition(self, target: S) -> bool:
        """Check if transition to target state is valid."""
        valid_targets = self._transitions.get(self._state, [])
        return target in valid_targets

    def try_transition(self, target: S, frame: int = 0, reason: str = "") -> Result[S, str]:
        """Attempt to transition to a new state.

        Returns Ok(new_state) if successful, Err(message) if invalid.

        Args:
            target: The desired target state
            frame: The current session frame (for history)
            reason: Why this transition is happening (for debugging)
        """
        if not self.can_transition(target):
            valid_targets = self._transitions.get(self._state, [])
            return Err(
                f"Invalid transition: {self._state.name} -> {target.name}. "
                f"Valid targets from {self._state.name}: {[t.name for t in valid_targets]}"
            )

        old_state = self._state
        self._state = target

        if self._track_history:
            self._record_transition(old_state, target, frame, reason)

        return Ok(target)

    def transition(self, target: S, frame: int = 0, reason: str = "") -> S:
        """Transition to a new state, raising on invalid transition.

        Use this when an invalid transition is a programming error that
        should never happen. Use try_transition() when the transition
        might legitimately be rejected.

        Raises:
            ValueError: If the transition is invalid
        """
        result = self.try_transition(target, frame, reason)
        if result.is_err():
            raise ValueError(result.error)
        return result.unwrap()

    def force_state(self, state: S, frame: int = 0, reason: str = "forced") -> None:
        """Force a state change without validation.

        Use sparingly! Only for resetting a session that is being torn down.
        """
        old_state = self._state
        self._state = state

        if self._track_history:
            self._record_transition(old_state, state, frame, f"[FORCED] {reason}")

    def _record_transition(self, from_state: S, to_state: S, frame: int, reason: str) -> None:
        """Record a transition in history."""
        self._history.append(
            StateTransition(
                from_state=from_state,
                to_state=to_state,
                frame=frame,
                reason=reason,
            )
        )

        if len(self._history) > self._max_history:
            self._history = self._history[-self._max_history :]

    def __repr__(self) -> str:
        return f"StateMachine(state={self._state.name})"


# ============================================================================
# Fishing Session State Machine
# ============================================================================


class SessionPhase(Enum):
    """Phases of one cast cycle.

    Values are lowercase strings because they are sent to the UI as-is.
    """

    IDLE = "idle"  # Rod ready, nothing in the water
    CASTING = "casting"  # Cast animation playing
    FLOATING = "floating"  # Bobber in the water, bite timer pending
    BITE = "bite"  # Something took the hook, waiting for pull()
    PULLING = "pulling"  # Skill-check mini-game running


SESSION_TRANSITIONS: Dict[SessionPhase, List[SessionPhase]] = {
    SessionPhase.IDLE: [SessionPhase.CASTING],
    SessionPhase.CASTING: [SessionPhase.FLOATING],
    # FLOATING -> IDLE covers both "pulled too early" and "nothing bit"
    SessionPhase.FLOATING: [SessionPhase.BITE, SessionPhase.IDLE],
    SessionPhase.BITE: [SessionPhase.PULLING],
    SessionPhase.PULLING: [SessionPhase.IDLE],
}


def create_session_state_machine(track_history: bool = False) -> StateMachine[SessionPhase]:
    """Create a state machine for the cast cycle.

    Args:
        track_history: Whether to track transition history (useful in tests)

    Returns:
        A StateMachine starting in IDLE
    """
    return StateMachine(
        initial_state=SessionPhase.IDLE,
        valid_transitions=SESSION_TRANSITIONS,
        track_history=track_history,
    )
