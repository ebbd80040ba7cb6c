"""Reel-in skill-check mini-game.

A vertical track of height ``TRACK_HEIGHT`` holds a fish target that drifts
toward randomly chosen goals and a player bar that rises while input is held
and sinks otherwise. Keeping the bar over the fish fills the progress meter;
letting it slip drains it. The game ends when the meter fills (success), or
empties or the time limit runs out (failure).

All movement constants are per 60 Hz frame and scaled by ``dt * 60``.
Rod level, enchant and the auto flag are re-read from the config provider on
every step, so upgrades or toggling auto-play mid-game take effect at once.
"""

import logging
import math
import random
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from angler.catalog import Species
from angler.config.skill_check import (
    AUTO_SMOOTHING,
    BAR_BASE_HEIGHT,
    BAR_BASE_HEIGHT_STEADY,
    BAR_HEIGHT_PER_DIFFICULTY,
    BAR_MIN_HEIGHT,
    BOOST,
    BOOST_PER_ROD_LEVEL,
    BOOST_STEADY,
    BOUNCE_DAMPING,
    CATCH_RATE_BASE,
    CATCH_RATE_PER_ROD_LEVEL,
    DECAY_RATE_BASE,
    DECAY_RATE_PER_DIFFICULTY,
    FRICTION,
    GRAVITY,
    GRAVITY_STEADY,
    INITIAL_PROGRESS,
    JITTER_BASE,
    JITTER_FREQUENCY,
    JITTER_PER_DIFFICULTY,
    MAX_FRAME_DELTA,
    MAX_PROGRESS,
    OVERLAP_TOLERANCE,
    REFERENCE_FPS,
    TARGET_GLIDE_FACTOR,
    TARGET_HEIGHT,
    TARGET_SPEED_BASE,
    TARGET_SPEED_PER_DIFFICULTY,
    TARGET_SPEED_SPREAD,
    TARGET_TIMER_BASE,
    TARGET_TIMER_SPREAD,
    TARGET_TIMER_SPREAD_PER_DIFFICULTY,
    TIME_LIMIT_BASE,
    TIME_LIMIT_MIN,
    TIME_LIMIT_PER_DIFFICULTY,
    TIME_LIMIT_SPREAD,
    TRACK_HEIGHT,
)
from angler.util.rng import require_rng_param

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkillCheckConfig:
    """Player-side inputs to the mini-game, re-read every step."""

    rod_level: int = 1
    enchant: str = "none"
    auto: bool = False


ConfigProvider = Callable[[], SkillCheckConfig]


class SkillCheckOutcome(Enum):
    RUNNING = "running"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class MinigameState:
    """Mutable mini-game state. Positions are bottom edges in track units."""

    player_position: float
    player_velocity: float
    target_position: float
    target_goal: float
    target_phase_timer: float  # 60 Hz frames until the next goal
    target_speed: float
    progress: float
    time_remaining: float
    holding: bool = False
    elapsed_ms: float = 0.0


@dataclass(frozen=True)
class SkillCheckSnapshot:
    """Read-only view for renderers."""

    species_id: str
    bar_bottom: float
    bar_top: float
    bar_height: float
    target_position: float
    target_height: float
    progress: float
    time_remaining: float
    time_limit: float
    overlapping: bool
    auto: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def bar_height(difficulty: int, enchant: str) -> float:
    """Height of the player's bar; harder fish get a smaller bar."""
    base = BAR_BASE_HEIGHT_STEADY if enchant == "steady" else BAR_BASE_HEIGHT
    return max(BAR_MIN_HEIGHT, base - difficulty * BAR_HEIGHT_PER_DIFFICULTY)


def sample_time_limit(difficulty: int, rng: random.Random) -> float:
    return max(
        TIME_LIMIT_MIN,
        TIME_LIMIT_BASE - difficulty * TIME_LIMIT_PER_DIFFICULTY + rng.random() * TIME_LIMIT_SPREAD,
    )


def catch_rate(rod_level: int) -> float:
    return CATCH_RATE_BASE + rod_level * CATCH_RATE_PER_ROD_LEVEL


def decay_rate(difficulty: int) -> float:
    return DECAY_RATE_BASE + difficulty * DECAY_RATE_PER_DIFFICULTY


def zones_overlap(player_position: float, player_height: float, target_position: float) -> bool:
    """Whether the bar covers the target, ignoring a thin band at either edge."""
    player_top = player_position + player_height
    target_top = target_position + TARGET_HEIGHT
    return (
        player_position < target_top - OVERLAP_TOLERANCE
        and player_top > target_position + OVERLAP_TOLERANCE
    )


class SkillCheck:
    """One run of the reel-in mini-game for a hooked species."""

    def __init__(
        self,
        species: Species,
        config_provider: ConfigProvider,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._rng = require_rng_param(rng, "SkillCheck.__init__")
        self.species = species
        self._config_provider = config_provider
        self.difficulty = species.difficulty or 1
        self.time_limit = sample_time_limit(self.difficulty, self._rng)

        middle = TRACK_HEIGHT / 2
        self.state = MinigameState(
            player_position=0.0,
            player_velocity=0.0,
            target_position=middle,
            target_goal=middle,
            target_phase_timer=0.0,
            target_speed=0.0,
            progress=INITIAL_PROGRESS,
            time_remaining=self.time_limit,
        )
        self.outcome = SkillCheckOutcome.RUNNING
        self._overlapping = False
        self._last_config = config_provider()

    @property
    def finished(self) -> bool:
        return self.outcome is not SkillCheckOutcome.RUNNING

    @property
    def succeeded(self) -> bool:
        return self.outcome is SkillCheckOutcome.SUCCESS

    def set_holding(self, held: bool) -> None:
        self.state.holding = bool(held)

    def step(self, dt: float) -> SkillCheckOutcome:
        """Advance the mini-game by ``dt`` seconds (clamped to 50 ms)."""
        if self.finished:
            return self.outcome

        dt = max(0.0, min(dt, MAX_FRAME_DELTA))
        config = self._config_provider()
        self._last_config = config
        state = self.state
        height = bar_height(self.difficulty, config.enchant)

        state.time_remaining -= dt
        state.elapsed_ms += dt * 1000.0

        self._move_target(dt)
        if config.auto:
            self._move_player_auto(height)
        else:
            self._move_player_manual(dt, height, config)

        # Auto mode bypasses physics and counts as on target
        self._overlapping = config.auto or zones_overlap(
            state.player_position, height, state.target_position
        )

        if self._overlapping:
            state.progress += catch_rate(config.rod_level) * dt
        else:
            state.progress -= decay_rate(self.difficulty) * dt
        state.progress = max(0.0, min(MAX_PROGRESS, state.progress))

        if state.progress >= MAX_PROGRESS:
            self.outcome = SkillCheckOutcome.SUCCESS
        elif state.progress <= 0 or state.time_remaining <= 0:
            self.outcome = SkillCheckOutcome.FAILURE

        if self.finished:
            logger.debug(
                "Skill check for %s ended: %s (progress %.1f, %.2fs left)",
                self.species.id,
                self.outcome.value,
                state.progress,
                state.time_remaining,
            )
        return self.outcome

    def _move_target(self, dt: float) -> None:
        state = self.state
        frames = dt * REFERENCE_FPS
        lowest, highest = 0.0, TRACK_HEIGHT - TARGET_HEIGHT

        state.target_phase_timer -= frames
        if state.target_phase_timer <= 0:
            state.target_goal = self._rng.random() * highest
            state.target_phase_timer = TARGET_TIMER_BASE + self._rng.random() * (
                TARGET_TIMER_SPREAD - self.difficulty * TARGET_TIMER_SPREAD_PER_DIFFICULTY
            )
            state.target_speed = (
                TARGET_SPEED_BASE
                + self.difficulty * TARGET_SPEED_PER_DIFFICULTY
                + self._rng.random() * TARGET_SPEED_SPREAD
            )

        distance = state.target_goal - state.target_position
        glide = state.target_speed * frames * TARGET_GLIDE_FACTOR
        if abs(distance) < glide:
            state.target_position = state.target_goal
        else:
            state.target_position += math.copysign(glide, distance)

        jitter = math.sin(state.elapsed_ms * JITTER_FREQUENCY) * (
            JITTER_BASE + self.difficulty * JITTER_PER_DIFFICULTY
        )
        state.target_position += jitter * frames
        state.target_position = max(lowest, min(highest, state.target_position))

    def _move_player_auto(self, height: float) -> None:
        state = self.state
        goal = state.target_position - height / 2 + TARGET_HEIGHT / 2
        state.player_position += (goal - state.player_position) * AUTO_SMOOTHING
        state.player_velocity = 0.0
        state.player_position = max(0.0, min(TRACK_HEIGHT - height, state.player_position))

    def _move_player_manual(self, dt: float, height: float, config: SkillCheckConfig) -> None:
        state = self.state
        frames = dt * REFERENCE_FPS
        if config.enchant == "steady":
            gravity, boost = GRAVITY_STEADY, BOOST_STEADY
        else:
            gravity, boost = GRAVITY, BOOST
        boost += config.rod_level * BOOST_PER_ROD_LEVEL

        if state.holding:
            state.player_velocity += boost * frames
        else:
            state.player_velocity -= gravity * frames
        state.player_velocity *= FRICTION
        state.player_position += state.player_velocity * frames

        ceiling = TRACK_HEIGHT - height
        if state.player_position < 0:
            state.player_position = 0.0
            state.player_velocity = abs(state.player_velocity) * BOUNCE_DAMPING
        elif state.player_position > ceiling:
            state.player_position = ceiling
            state.player_velocity = -abs(state.player_velocity) * BOUNCE_DAMPING

    def snapshot(self) -> SkillCheckSnapshot:
        height = bar_height(self.difficulty, self._last_config.enchant)
        state = self.state
        return SkillCheckSnapshot(
            species_id=self.species.id,
            bar_bottom=state.player_position,
            bar_top=state.player_position + height,
            bar_height=height,
            target_position=state.target_position,
            target_height=TARGET_HEIGHT,
            progress=state.progress,
            time_remaining=max(0.0, state.time_remaining),
            time_limit=self.time_limit,
            overlapping=self._overlapping,
            auto=self._last_config.auto,
        )
