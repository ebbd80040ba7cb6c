"""Tests for the reel-in skill-check mini-game."""

import pytest

from angler.catalog import Species, get_species
from angler.skill_check import (
    SkillCheck,
    SkillCheckConfig,
    SkillCheckOutcome,
    bar_height,
    catch_rate,
    decay_rate,
    zones_overlap,
)
from tests.fakes.session_fakes import ScriptedRandom

HARD_FISH = Species("hard", "Hard Fish", 100, 1, 10, 0)


class MutableConfig:
    """Config provider whose answer can change between steps."""

    def __init__(self, **kwargs):
        self.config = SkillCheckConfig(**kwargs)

    def __call__(self):
        return self.config


def run_to_end(game, dt=0.05, max_steps=10_000):
    for _ in range(max_steps):
        if game.step(dt) is not SkillCheckOutcome.RUNNING:
            break
    return game.outcome


class TestGeometry:
    def test_bar_height_shrinks_with_difficulty(self):
        assert bar_height(1, "none") == 63
        assert bar_height(10, "none") == 45
        assert bar_height(20, "none") == 40  # floor

    def test_steady_enchant_widens_bar(self):
        assert bar_height(1, "steady") == 83
        assert bar_height(1, "steady") > bar_height(1, "lucky")

    def test_zones_overlap(self):
        assert zones_overlap(90, 63, 100)
        assert not zones_overlap(0, 63, 100)
        # Touching within the edge tolerance does not count
        assert not zones_overlap(0, 63, 59)
        assert not zones_overlap(120, 63, 100)

    def test_rates(self):
        assert catch_rate(1) == 28
        assert decay_rate(10) == pytest.approx(23)


class TestInitialState:
    def test_starting_values(self, seeded_rng):
        game = SkillCheck(get_species("common"), MutableConfig(), rng=seeded_rng)
        assert game.state.progress == 30
        assert game.state.player_position == 0
        assert game.state.target_position == 100
        assert game.outcome is SkillCheckOutcome.RUNNING
        assert 8.0 <= game.time_limit <= 13.6

    def test_time_limit_floor_for_hardest_fish(self):
        game = SkillCheck(HARD_FISH, MutableConfig(), rng=ScriptedRandom([0.0]))
        assert game.time_limit == 8.0


class TestOutcomes:
    def test_forced_overlap_succeeds_before_time_limit(self, seeded_rng):
        game = SkillCheck(HARD_FISH, MutableConfig(auto=True), rng=seeded_rng)
        assert run_to_end(game) is SkillCheckOutcome.SUCCESS
        assert game.state.progress == 100
        assert game.state.time_remaining > 0
        assert game.succeeded

    def test_progress_clamped_at_top(self, seeded_rng):
        game = SkillCheck(HARD_FISH, MutableConfig(rod_level=50, auto=True), rng=seeded_rng)
        for _ in range(20):
            game.step(0.05)
        assert game.state.progress == 100
        assert game.finished

    def test_decay_to_zero_fails(self):
        # Every draw near 1.0 keeps the fish at the top while the idle bar rests at the bottom
        rng = ScriptedRandom([0.0] + [0.999] * 500)
        game = SkillCheck(HARD_FISH, MutableConfig(), rng=rng)
        assert run_to_end(game) is SkillCheckOutcome.FAILURE
        assert game.state.progress == 0
        assert game.state.time_remaining > 0
        assert not game.succeeded

    def test_time_limit_fails(self, seeded_rng):
        game = SkillCheck(get_species("common"), MutableConfig(), rng=seeded_rng)
        game.state.progress = 50
        game.state.time_remaining = 0.01
        assert game.step(0.05) is SkillCheckOutcome.FAILURE

    def test_finished_game_ignores_steps(self, seeded_rng):
        game = SkillCheck(HARD_FISH, MutableConfig(auto=True), rng=seeded_rng)
        run_to_end(game)
        remaining = game.state.time_remaining
        assert game.step(0.05) is SkillCheckOutcome.SUCCESS
        assert game.state.time_remaining == remaining


class TestStepping:
    def test_large_delta_is_clamped(self, seeded_rng):
        game = SkillCheck(get_species("common"), MutableConfig(), rng=seeded_rng)
        before = game.state.time_remaining
        game.step(1.0)
        assert game.state.time_remaining == pytest.approx(before - 0.05)

    def test_holding_raises_bar(self, seeded_rng):
        game = SkillCheck(get_species("common"), MutableConfig(), rng=seeded_rng)
        game.set_holding(True)
        for _ in range(5):
            game.step(0.016)
        assert game.state.player_position > 0
        assert game.state.player_velocity > 0

    def test_bar_stays_on_track(self, seeded_rng):
        game = SkillCheck(get_species("common"), MutableConfig(), rng=seeded_rng)
        game.set_holding(True)
        for _ in range(60):
            game.step(0.016)
            height = bar_height(game.difficulty, "none")
            assert 0 <= game.state.player_position <= 200 - height
            if game.finished:
                break

    def test_target_stays_on_track(self, seeded_rng):
        game = SkillCheck(HARD_FISH, MutableConfig(), rng=seeded_rng)
        for _ in range(100):
            game.step(0.016)
            assert 0 <= game.state.target_position <= 176
            if game.finished:
                break

    def test_config_is_reread_every_step(self):
        provider = MutableConfig()
        rng = ScriptedRandom([0.0] + [0.999] * 500)
        game = SkillCheck(HARD_FISH, provider, rng=rng)
        game.step(0.05)
        assert not game.snapshot().overlapping

        provider.config = SkillCheckConfig(auto=True)
        game.step(0.05)
        snapshot = game.snapshot()
        assert snapshot.auto
        assert snapshot.overlapping

    def test_snapshot_serializes(self, seeded_rng):
        game = SkillCheck(get_species("blue"), MutableConfig(enchant="steady"), rng=seeded_rng)
        game.step(0.016)
        data = game.snapshot().to_dict()
        assert data["species_id"] == "blue"
        assert data["bar_height"] == bar_height(2, "steady")
        assert data["bar_top"] - data["bar_bottom"] == pytest.approx(data["bar_height"])
