"""Headless auto-play runs.

Runs a session with auto-play on, faster than real time, and reports what
happened. Useful for tuning and as a smoke test of the whole cast cycle.
"""

import json
import logging
import random
from dataclasses import asdict, dataclass, field
from typing import Dict, Optional

from angler.config.session import FRAME_RATE
from angler.config.session_config import SessionConfig
from angler.events import CatchResultEvent, MissionCompletedEvent
from angler.profile import PlayerProfile
from angler.session import FishingSession

logger = logging.getLogger(__name__)


@dataclass
class HeadlessSummary:
    seconds: float
    frames: int
    attempts: int = 0
    catches: int = 0
    escapes: int = 0
    missions_completed: int = 0
    gold: int = 0
    inventory_value: int = 0
    max_distance: float = 0
    weather: str = ""
    time_of_day: float = 0.0
    catches_by_species: Dict[str, int] = field(default_factory=dict)


def run_headless(
    seconds: float,
    seed: Optional[int] = None,
    profile: Optional[PlayerProfile] = None,
    frame_rate: int = FRAME_RATE,
    stats_interval: float = 60.0,
    export_stats: Optional[str] = None,
    wall_clock=None,
) -> HeadlessSummary:
    """Simulate ``seconds`` of auto-play and return a summary.

    Args:
        seconds: Session time to simulate
        seed: RNG seed (None = nondeterministic)
        profile: Starting profile (defaults to a fresh one)
        frame_rate: Ticks per simulated second
        stats_interval: Log progress every N simulated seconds (0 disables)
        export_stats: Optional path to write the summary as JSON
        wall_clock: Optional wall-clock function; defaults to simulated time
            starting at 0 so timed events expire with the run
    """
    dt = 1.0 / frame_rate
    total_frames = int(seconds * frame_rate)
    sim_time = [0.0]

    session = FishingSession(
        profile=profile,
        rng=random.Random(seed),
        config=SessionConfig(auto_play=True, seed=seed, frame_rate=frame_rate),
        wall_clock=wall_clock or (lambda: sim_time[0]),
    )
    summary = HeadlessSummary(seconds=seconds, frames=0)

    def on_catch(event: CatchResultEvent) -> None:
        summary.attempts += 1
        if event.species_id is None:
            summary.escapes += 1
            return
        summary.catches += 1
        summary.catches_by_species[event.species_id] = (
            summary.catches_by_species.get(event.species_id, 0) + 1
        )

    def on_mission(event: MissionCompletedEvent) -> None:
        summary.missions_completed += 1

    session.event_bus.subscribe(CatchResultEvent, on_catch)
    session.event_bus.subscribe(MissionCompletedEvent, on_mission)

    log_every = int(stats_interval * frame_rate) if stats_interval > 0 else 0
    for frame in range(1, total_frames + 1):
        sim_time[0] += dt
        session.update(dt)
        if log_every and frame % log_every == 0:
            logger.info(
                "t=%.0fs catches=%d gold=%d weather=%s",
                frame * dt,
                summary.catches,
                session.profile.gold,
                session.clock.weather.value,
            )

    session.close()

    summary.frames = session.frame
    summary.gold = session.profile.gold
    summary.inventory_value = sum(item.value for item in session.profile.inventory)
    summary.max_distance = session.profile.max_distance
    summary.weather = session.clock.weather.value
    summary.time_of_day = session.clock.time_of_day

    logger.info(
        "Headless run done: %d catches, %d escaped, %d missions, %d gold, %d gold in inventory",
        summary.catches,
        summary.escapes,
        summary.missions_completed,
        summary.gold,
        summary.inventory_value,
    )

    if export_stats:
        with open(export_stats, "w") as f:
            json.dump(asdict(summary), f, indent=2)
        logger.info("Stats exported to %s", export_stats)

    return summary
