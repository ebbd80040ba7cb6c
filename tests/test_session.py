"""Tests for the fishing session cast cycle."""

import pytest

from angler.catalog import get_species
from angler.catch import CatchResolutionEngine
from angler.config.session_config import SessionConfig
from angler.events import (
    CatchResultEvent,
    GameEventEndedEvent,
    GameEventStartedEvent,
    MissionCompletedEvent,
    PhaseChangedEvent,
    ProfileChangedEvent,
    ToastEvent,
    WeatherUpdatedEvent,
)
from angler.missions import Mission
from angler.profile import PlayerProfile
from angler.session import FishingSession
from angler.state_machine import SessionPhase
from angler.systems.events import ActiveEvent, EventType
from angler.util.rng import MissingRNGError
from tests.fakes.session_fakes import (
    EventRecorder,
    RecordingRenderer,
    ScriptedRandom,
    run_for,
    run_until,
)

ALL_EVENTS = (
    CatchResultEvent,
    GameEventEndedEvent,
    GameEventStartedEvent,
    MissionCompletedEvent,
    PhaseChangedEvent,
    ProfileChangedEvent,
    ToastEvent,
    WeatherUpdatedEvent,
)


def toasts(recorder):
    return [e.message for e in recorder.of_type(ToastEvent)]


def cast_until_bite(session, attempts=60):
    """Cast repeatedly until something bites."""
    for _ in range(attempts):
        assert session.cast()
        run_until(session, lambda s: s.phase in (SessionPhase.BITE, SessionPhase.IDLE), 10.0)
        if session.phase is SessionPhase.BITE:
            return
    pytest.fail("nothing bit in %d casts" % attempts)


@pytest.fixture
def recorder(session):
    return EventRecorder(session.event_bus, *ALL_EVENTS)


class TestCommandsOutOfPhase:
    def test_pull_while_idle_is_ignored(self, session, recorder):
        assert not session.pull()
        assert session.phase is SessionPhase.IDLE
        assert recorder.events == []

    def test_cast_while_line_out_is_ignored(self, session, recorder):
        assert session.cast()
        distance = session.cast_distance
        assert not session.cast()
        assert session.phase is SessionPhase.CASTING
        assert session.cast_distance == distance
        assert len(recorder.of_type(PhaseChangedEvent)) == 1

    def test_pull_while_pulling_is_ignored(self, session, recorder):
        cast_until_bite(session)
        assert session.pull()
        minigame = session.minigame
        recorder.events.clear()

        assert not session.pull()
        assert session.phase is SessionPhase.PULLING
        assert session.minigame is minigame
        assert recorder.of_type(PhaseChangedEvent) == []

    def test_input_without_minigame_is_ignored(self, session):
        assert not session.minigame_input(True)


class TestCastCycle:
    def test_cast_picks_distance_and_animates(self, session, recorder, renderer, profile):
        assert session.cast()
        assert session.phase is SessionPhase.CASTING
        assert 40 <= session.cast_distance < 360
        assert renderer.calls[0] == ("cast", session.cast_distance)
        assert f"Casted {session.cast_distance}ft!" in toasts(recorder)
        assert profile.max_distance == session.cast_distance

    def test_bobber_lands_after_animation(self, session):
        session.cast()
        run_for(session, 0.85)
        assert session.phase is SessionPhase.CASTING
        run_for(session, 0.1)
        assert session.phase is SessionPhase.FLOATING

    def test_pulled_too_early(self, session, recorder, renderer):
        session.cast()
        assert run_until(session, lambda s: s.phase is SessionPhase.FLOATING, 2.0)
        assert session.pull()
        assert session.phase is SessionPhase.IDLE
        assert "Pulled too early!" in toasts(recorder)
        assert renderer.names() == ["cast", "reset"]

        # The cancelled bite timer never fires
        run_for(session, 6.0)
        assert session.phase is SessionPhase.IDLE
        assert session.timers.pending_count() == 0

    def test_nothing_bit_returns_to_idle_after_a_second(self, session, recorder, renderer):
        # Shortest delay, then a bite roll that always misses
        session.catch_engine = CatchResolutionEngine(rng=ScriptedRandom([0.0, 0.999]))
        missed_at = []
        session.event_bus.subscribe(
            ToastEvent,
            lambda e: missed_at.append(session.timers.now) if e.message == "Nothing bit..." else None,
        )

        session.cast()
        assert run_until(session, lambda s: s.phase is SessionPhase.IDLE, 5.0)
        assert len(missed_at) == 1
        assert session.timers.now - missed_at[0] == pytest.approx(1.0, abs=0.06)
        assert renderer.names()[-1] == "reset"
        reasons = [e.reason for e in recorder.of_type(PhaseChangedEvent)]
        assert reasons[-1] == "nothing bit"

    def test_full_cycle_lands_a_fish(self, session, recorder, renderer, profile, fake_clock):
        cast_until_bite(session)
        assert "Something's biting!" in toasts(recorder)
        hooked = session.hooked_species
        assert hooked is not None

        assert session.pull()
        assert session.phase is SessionPhase.PULLING
        assert session.minigame is not None
        assert ("reeling", True) in renderer.calls
        assert session.minigame_input(True)

        # Auto mode is re-read by the running mini-game and always lands the fish
        session.set_auto_play(True)
        assert run_until(session, lambda s: s.phase is SessionPhase.IDLE, 20.0)

        results = recorder.of_type(CatchResultEvent)
        assert len(results) == 1
        assert results[0].species_id == hooked.id
        assert results[0].value > 0
        assert profile.total_catches == 1
        assert profile.inventory[0].species_id == hooked.id
        assert profile.inventory[0].ts == fake_clock.now
        assert renderer.calls[-2:] == [("reeling", False), ("reset", None)]
        assert session.minigame is None

    def test_failed_minigame_loses_the_fish(self, session, recorder, profile):
        cast_until_bite(session)
        session.pull()
        session.minigame.state.time_remaining = 0.01
        session.update(0.05)

        assert session.phase is SessionPhase.IDLE
        assert "The fish got away..." in toasts(recorder)
        result = recorder.of_type(CatchResultEvent)[-1]
        assert result.species_id is None
        assert result.value == 0
        assert profile.inventory == []

    def test_large_frame_is_clamped(self, session):
        session.update(10.0)
        assert session.timers.now == pytest.approx(0.05)


class TestClose:
    def test_close_mid_minigame_emits_nothing(self, session, recorder):
        cast_until_bite(session)
        session.pull()
        recorder.events.clear()

        session.close()
        run_for(session, 5.0)

        assert session.closed
        assert session.phase is SessionPhase.IDLE
        assert session.minigame is None
        assert recorder.of_type(CatchResultEvent) == []
        assert not session.cast()

    def test_close_cancels_pending_bite(self, session):
        session.cast()
        run_until(session, lambda s: s.phase is SessionPhase.FLOATING, 2.0)
        session.close()
        assert session.timers.pending_count() == 0


class TestMissionsInSession:
    def test_mission_reward_paid_once(self, seeded_rng, fake_clock):
        profile = PlayerProfile(current_mission=Mission("common", "Goldfish", 1, 500))
        session = FishingSession(
            profile=profile,
            rng=seeded_rng,
            config=SessionConfig(auto_play=True),
            wall_clock=fake_clock,
        )
        session.catch_engine = CatchResolutionEngine(
            rng=seeded_rng, catalog=(get_species("common"),)
        )
        recorder = EventRecorder(session.event_bus, MissionCompletedEvent, ToastEvent)

        assert run_until(session, lambda s: s.profile.total_catches >= 1, 600.0)

        completed = recorder.of_type(MissionCompletedEvent)
        assert len(completed) == 1
        assert completed[0].reward_gold == 500
        assert profile.gold == 250 + 500
        assert profile.inventory[0].value > 0
        assert "Mission Complete! +500 Gold" in toasts(recorder)
        assert profile.current_mission is session.missions.mission
        assert profile.current_mission.current_count == 0


class TestAutoPlay:
    def test_auto_play_lands_catches(self, seeded_rng, fake_clock):
        renderer = RecordingRenderer()
        session = FishingSession(
            rng=seeded_rng,
            renderer=renderer,
            config=SessionConfig(auto_play=True),
            wall_clock=fake_clock,
        )
        recorder = EventRecorder(session.event_bus, CatchResultEvent, ToastEvent)

        run_for(session, 600.0)

        catches = recorder.of_type(CatchResultEvent)
        assert catches
        assert all(c.species_id is not None for c in catches)
        assert session.profile.total_catches == len(catches)
        messages = toasts(recorder)
        assert any(m.startswith("Caught ") for m in messages)
        # Manual-only toasts stay quiet in auto mode
        assert not any(m.startswith("Casted ") for m in messages)
        assert "Something's biting!" not in messages

    def test_disabling_auto_play_stops_casting(self, seeded_rng, fake_clock):
        session = FishingSession(
            rng=seeded_rng, config=SessionConfig(auto_play=True), wall_clock=fake_clock
        )
        session.update(0.05)
        session.set_auto_play(False)
        run_for(session, 5.0)
        assert session.phase is SessionPhase.IDLE
        assert session.cast_distance == 0


class TestWorldEvents:
    def test_lights_toggle_toasts(self, session, recorder, renderer):
        assert session.toggle_lights()
        assert not session.toggle_lights()
        assert toasts(recorder) == ["Lights ON", "Lights OFF"]
        assert renderer.names() == ["lights", "lights"]

    def test_event_start_and_end_toasts(self, session, recorder, fake_clock, profile):
        session.events.start_chance = 1.0
        run_for(session, 5.5)
        started = recorder.of_type(GameEventStartedEvent)
        assert len(started) == 1
        assert f"EVENT STARTED: {started[0].display_name}!" in toasts(recorder)
        assert profile.saved_event == session.active_event

        session.events.start_chance = 0.0
        fake_clock.advance(200)
        run_for(session, 5.5)
        assert len(recorder.of_type(GameEventEndedEvent)) == 1
        assert "Event Ended" in toasts(recorder)
        assert session.active_event is None
        assert profile.saved_event is None

    def test_weather_update_on_hour_change(self, session, recorder):
        run_for(session, 51.0)
        updates = recorder.of_type(WeatherUpdatedEvent)
        assert updates
        assert updates[0].time_of_day >= 9.0

    def test_saved_event_resumes(self, seeded_rng, fake_clock):
        event = ActiveEvent(EventType.GOLD_RUSH, "Gold Rush", fake_clock.now + 60)
        profile = PlayerProfile(saved_event=event)
        session = FishingSession(profile=profile, rng=seeded_rng, wall_clock=fake_clock)
        assert session.active_event == event
        assert session.catch_context().active_event is EventType.GOLD_RUSH

    def test_expired_saved_event_dropped(self, seeded_rng, fake_clock):
        event = ActiveEvent(EventType.GOLD_RUSH, "Gold Rush", fake_clock.now - 60)
        profile = PlayerProfile(saved_event=event)
        session = FishingSession(profile=profile, rng=seeded_rng, wall_clock=fake_clock)
        assert session.active_event is None
        assert profile.saved_event is None


class TestShopThroughSession:
    def test_upgrade_toasts_and_marks_profile(self, session, recorder, profile):
        assert session.upgrade_rod().is_ok()
        assert profile.rod_level == 2
        assert "Upgraded to Lvl 2" in toasts(recorder)
        assert recorder.of_type(ProfileChangedEvent)

    def test_failure_toasts_error(self, session, recorder, profile):
        profile.gold = 100
        assert session.roll_enchant().is_err()
        assert toasts(recorder) == ["Need 250 Gold"]
        assert recorder.of_type(ProfileChangedEvent) == []


def test_snapshot_shape(session):
    snapshot = session.snapshot()
    assert snapshot["phase"] == "idle"
    assert snapshot["minigame"] is None
    assert snapshot["clock"]["weather"] == "CLEAR"
    assert snapshot["profile"]["gold"] == 250


def test_session_requires_rng():
    with pytest.raises(MissingRNGError):
        FishingSession()
