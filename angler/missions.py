"""Catch-N-of-species missions.

A profile always has exactly one mission. Catching its target species
advances the count; reaching the required count pays the reward once and
replaces the mission with a freshly generated one (a new object, never the
old one reset).
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence

from angler.catalog import SPECIES_CATALOG, Species, get_species
from angler.config.missions import (
    MISSION_COUNT_RANGE,
    MISSION_DIFFICULTY_HEADROOM,
    MISSION_FALLBACK_BASE_VALUE,
    MISSION_LOW_LEVEL_MULTIPLIER,
    MISSION_LOW_LEVEL_THRESHOLD,
    MISSION_MAX_DIFFICULTY,
    MISSION_REWARD_MULTIPLIER,
    MISSION_STARTER_COUNT_RANGE,
    MISSION_STARTER_DIFFICULTY,
    STARTER_MISSION_COUNT,
    STARTER_MISSION_REWARD,
    STARTER_MISSION_SPECIES,
)
from angler.config.session import CAST_MAX_BASE, CAST_MAX_PER_ROD_LEVEL
from angler.util.rng import require_rng_param

logger = logging.getLogger(__name__)


@dataclass
class Mission:
    target_species_id: str
    target_name: str
    required_count: int
    reward_gold: int
    current_count: int = 0

    @property
    def is_complete(self) -> bool:
        return self.current_count >= self.required_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target_species_id": self.target_species_id,
            "target_name": self.target_name,
            "required_count": self.required_count,
            "current_count": self.current_count,
            "reward_gold": self.reward_gold,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Optional["Mission"]:
        """Rebuild a mission from a snapshot; returns None if it is unusable."""
        if not isinstance(data, Mapping):
            return None
        try:
            species_id = str(data["target_species_id"])
            required = int(data["required_count"])
            reward = int(data["reward_gold"])
            current = int(data.get("current_count", 0))
        except (KeyError, TypeError, ValueError, OverflowError):
            return None
        if required < 1 or get_species(species_id) is None:
            return None
        name = data.get("target_name")
        if not isinstance(name, str):
            name = get_species(species_id).display_name
        return cls(
            target_species_id=species_id,
            target_name=name,
            required_count=required,
            reward_gold=reward,
            current_count=max(0, current),
        )


@dataclass(frozen=True)
class MissionProgress:
    """What a single catch did to the mission.

    Attributes:
        mission: The mission in force after the catch (a new object on completion)
        matched: Whether the catch counted toward the mission
        completed: The finished mission, if this catch completed it
        reward_gold: Gold granted by this catch (0 unless completed)
    """

    mission: Mission
    matched: bool = False
    completed: Optional[Mission] = None
    reward_gold: int = 0


def starter_mission() -> Mission:
    species = get_species(STARTER_MISSION_SPECIES)
    return Mission(
        target_species_id=species.id,
        target_name=species.display_name,
        required_count=STARTER_MISSION_COUNT,
        reward_gold=STARTER_MISSION_REWARD,
    )


def mission_difficulty_ceiling(rod_level: int) -> int:
    if rod_level == 1:
        return MISSION_STARTER_DIFFICULTY
    return min(MISSION_MAX_DIFFICULTY, rod_level + MISSION_DIFFICULTY_HEADROOM)


def generate_mission(
    rod_level: int,
    rng: random.Random,
    catalog: Sequence[Species] = SPECIES_CATALOG,
) -> Mission:
    """Create a mission sized to the player's rod level.

    Targets are species no harder than the difficulty ceiling and reachable
    at the rod's maximum cast distance. Early rod levels pay double.
    """
    max_difficulty = mission_difficulty_ceiling(rod_level)
    max_reach = CAST_MAX_BASE + rod_level * CAST_MAX_PER_ROD_LEVEL
    pool = [
        s for s in catalog
        if s.difficulty <= max_difficulty and s.min_cast_distance <= max_reach
    ]
    if not pool:
        pool = [catalog[0]]
    species = pool[int(rng.random() * len(pool))]

    low, high = MISSION_STARTER_COUNT_RANGE if rod_level == 1 else MISSION_COUNT_RANGE
    required = math.floor(low + rng.random() * (high - low))

    if rod_level <= MISSION_LOW_LEVEL_THRESHOLD:
        multiplier = MISSION_LOW_LEVEL_MULTIPLIER
    else:
        multiplier = MISSION_REWARD_MULTIPLIER
    base_value = species.base_value or MISSION_FALLBACK_BASE_VALUE
    reward = math.floor(base_value * required * multiplier)

    return Mission(
        target_species_id=species.id,
        target_name=species.display_name,
        required_count=required,
        reward_gold=reward,
    )


class MissionTracker:
    """Holds the current mission and applies catches to it."""

    def __init__(self, mission: Optional[Mission] = None, rng: Optional[random.Random] = None) -> None:
        self._rng = require_rng_param(rng, "MissionTracker.__init__")
        self._mission = mission if mission is not None else starter_mission()

    @property
    def mission(self) -> Mission:
        return self._mission

    def record_catch(self, species_id: str, rod_level: int) -> MissionProgress:
        mission = self._mission
        if species_id != mission.target_species_id:
            return MissionProgress(mission=mission)

        mission.current_count += 1
        if not mission.is_complete:
            return MissionProgress(mission=mission, matched=True)

        replacement = generate_mission(rod_level, self._rng)
        self._mission = replacement
        logger.info(
            "Mission complete: %dx %s (+%d gold); next: %dx %s",
            mission.required_count,
            mission.target_name,
            mission.reward_gold,
            replacement.required_count,
            replacement.target_name,
        )
        return MissionProgress(
            mission=replacement,
            matched=True,
            completed=mission,
            reward_gold=mission.reward_gold,
        )
