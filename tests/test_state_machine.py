"""Tests for the explicit state machine and the cast-cycle transitions."""

from enum import Enum, auto

import pytest

from angler.state_machine import (
    SESSION_TRANSITIONS,
    SessionPhase,
    StateMachine,
    create_session_state_machine,
)


class LineState(Enum):
    SLACK = auto()
    TAUT = auto()


class TestStateMachine:
    def test_valid_transition(self):
        line = StateMachine(LineState.SLACK, {LineState.SLACK: [LineState.TAUT], LineState.TAUT: []})
        assert line.try_transition(LineState.TAUT).is_ok()
        assert line.state is LineState.TAUT

    def test_invalid_transition_is_err_and_keeps_state(self):
        line = StateMachine(LineState.TAUT, {LineState.SLACK: [LineState.TAUT], LineState.TAUT: []})
        result = line.try_transition(LineState.SLACK)
        assert result.is_err()
        assert "TAUT -> SLACK" in result.error
        assert line.state is LineState.TAUT

    def test_transition_raises_on_invalid(self):
        line = StateMachine(LineState.TAUT, {LineState.TAUT: []})
        with pytest.raises(ValueError):
            line.transition(LineState.SLACK)

    def test_unknown_initial_state_rejected(self):
        with pytest.raises(ValueError):
            StateMachine(LineState.SLACK, {LineState.TAUT: []})

    def test_history_is_bounded(self):
        line = StateMachine(
            LineState.SLACK,
            {LineState.SLACK: [LineState.TAUT], LineState.TAUT: [LineState.SLACK]},
            track_history=True,
            max_history=3,
        )
        for frame in range(10):
            target = LineState.TAUT if line.state is LineState.SLACK else LineState.SLACK
            line.transition(target, frame=frame)
        history = line.history
        assert len(history) == 3
        assert history[-1].frame == 9

    def test_force_state_skips_validation(self):
        line = StateMachine(LineState.TAUT, {LineState.TAUT: []}, track_history=True)
        line.force_state(LineState.SLACK, reason="reset")
        assert line.state is LineState.SLACK
        assert line.history[-1].reason == "[FORCED] reset"


class TestSessionTransitions:
    def test_starts_idle(self):
        assert create_session_state_machine().state is SessionPhase.IDLE

    def test_every_phase_has_an_entry(self):
        assert set(SESSION_TRANSITIONS) == set(SessionPhase)

    def test_full_cycle(self):
        phases = create_session_state_machine()
        for target in (
            SessionPhase.CASTING,
            SessionPhase.FLOATING,
            SessionPhase.BITE,
            SessionPhase.PULLING,
            SessionPhase.IDLE,
        ):
            phases.transition(target)
        assert phases.state is SessionPhase.IDLE

    @pytest.mark.parametrize(
        "start,target",
        [
            (SessionPhase.IDLE, SessionPhase.PULLING),
            (SessionPhase.IDLE, SessionPhase.FLOATING),
            (SessionPhase.CASTING, SessionPhase.IDLE),
            (SessionPhase.BITE, SessionPhase.IDLE),
            (SessionPhase.PULLING, SessionPhase.BITE),
        ],
    )
    def test_rejected_transitions(self, start, target):
        phases = StateMachine(start, SESSION_TRANSITIONS)
        assert phases.try_transition(target).is_err()
        assert phases.state is start
