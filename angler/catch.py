"""Bite scheduling and weighted species selection.

The engine answers two questions for a cast:

1. How long until something reacts? (``schedule_bite``)
2. When it does, what is on the hook? (``resolve``)

Resolution is deferred: the session registers the ``PendingBite`` delay on a
cancelable timer and calls ``resolve`` with the context that is current when
the timer fires, so a weather change or an event starting while the bobber
floats is taken into account.
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

from angler.catalog import DEFAULT_SPECIES, SPECIES_CATALOG, Species
from angler.config.catch import (
    BASE_BITE_CHANCE,
    BITE_DELAY_MAX_MS,
    BITE_DELAY_MAX_RAIN_MS,
    BITE_DELAY_MAX_STORM_MS,
    BITE_DELAY_MIN_MS,
    CATCH_VALUE_JITTER,
    DEEP_ENCHANT_MIN_DISTANCE,
    DEEP_ENCHANT_MULTIPLIER,
    DISTANCE_PENALTY_PER_UNIT,
    DISTANCE_PENALTY_START,
    FEEDING_FRENZY_DELAY_FACTOR,
    GOLD_RUSH_VALUE_MULTIPLIER,
    LUCKY_ENCHANT_MIN_DIFFICULTY,
    LUCKY_ENCHANT_MULTIPLIER,
    LUCKY_WATERS_MIN_DIFFICULTY,
    LUCKY_WATERS_MULTIPLIER,
    ROD_LEVEL_BITE_BONUS,
    ROD_VALUE_BONUS,
)
from angler.systems.clock import Weather, WeatherState
from angler.systems.events import EventType
from angler.util.rng import require_rng_param

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatchContext:
    """Everything bite resolution reads from the rest of the session.

    Attributes:
        weather: Clock/weather snapshot at resolution time
        rod_level: Player rod level (>= 1)
        equipped_enchant: Enchant id or "none"
        active_event: Type of the active timed event, if any
    """

    weather: WeatherState
    rod_level: int
    equipped_enchant: str
    active_event: Optional[EventType] = None


@dataclass(frozen=True)
class PendingBite:
    """A bite waiting on its timer."""

    cast_distance: float
    delay_ms: float

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000.0


@dataclass(frozen=True)
class BiteOutcome:
    """Result of a resolved bite: a species, or nothing bit."""

    species: Optional[Species]
    bite_chance: float

    @property
    def bit(self) -> bool:
        return self.species is not None


def max_bite_delay(weather: Weather, active_event: Optional[EventType] = None) -> float:
    """Upper bound (ms) of the bite delay for the current conditions."""
    if weather is Weather.STORM:
        delay = BITE_DELAY_MAX_STORM_MS
    elif weather is Weather.RAIN:
        delay = BITE_DELAY_MAX_RAIN_MS
    else:
        delay = BITE_DELAY_MAX_MS
    if active_event is EventType.FEEDING_FRENZY:
        delay *= FEEDING_FRENZY_DELAY_FACTOR
    return delay


def bite_chance(rod_level: int, distance: float) -> float:
    """Probability that anything bites, clamped to [0, 1]."""
    penalty = max(0.0, (distance - DISTANCE_PENALTY_START) * DISTANCE_PENALTY_PER_UNIT)
    chance = BASE_BITE_CHANCE + rod_level * ROD_LEVEL_BITE_BONUS - penalty
    return max(0.0, min(1.0, chance))


def is_eligible(species: Species, distance: float, context: CatchContext) -> bool:
    if distance < species.min_cast_distance:
        return False
    if species.required_weather and context.weather.weather not in species.required_weather:
        return False
    if species.required_time and species.required_time is not context.weather.period:
        return False
    if species.required_enchant and context.equipped_enchant not in species.required_enchant:
        return False
    return True


def eligible_species(
    distance: float,
    context: CatchContext,
    catalog: Sequence[Species] = SPECIES_CATALOG,
) -> List[Species]:
    """Species that can bite here, in catalog order.

    Never empty: falls back to the catalog's first entry.
    """
    candidates = [s for s in catalog if is_eligible(s, distance, context)]
    if not candidates:
        candidates = [catalog[0] if catalog else DEFAULT_SPECIES]
    return candidates


def species_weight(species: Species, context: CatchContext) -> float:
    """Rarity weight after enchant and event multipliers."""
    weight = float(species.rarity_weight)
    if context.equipped_enchant == "lucky" and species.difficulty > LUCKY_ENCHANT_MIN_DIFFICULTY:
        weight *= LUCKY_ENCHANT_MULTIPLIER
    if context.equipped_enchant == "deep" and species.min_cast_distance > DEEP_ENCHANT_MIN_DISTANCE:
        weight *= DEEP_ENCHANT_MULTIPLIER
    if (
        context.active_event is EventType.LUCKY_WATERS
        and species.difficulty >= LUCKY_WATERS_MIN_DIFFICULTY
    ):
        weight *= LUCKY_WATERS_MULTIPLIER
    return weight


def choose_weighted(candidates: Sequence[Species], weights: Sequence[float], r: float) -> Species:
    """Pick the candidate whose cumulative weight band contains ``r``.

    Walks in order; the first candidate with ``r < weight`` wins, otherwise
    ``r`` is reduced by that weight. ``r`` should lie in ``[0, sum(weights))``.

    Example:
        choose_weighted([a, b], [100, 15], 50)   # a
        choose_weighted([a, b], [100, 15], 110)  # b
    """
    if not candidates:
        raise ValueError("choose_weighted needs at least one candidate")
    if len(candidates) != len(weights):
        raise ValueError("candidates and weights differ in length")

    for candidate, weight in zip(candidates, weights):
        if r < weight:
            return candidate
        r -= weight
    # Only reachable through floating point slack at the top of the range
    return candidates[0]


class CatchResolutionEngine:
    """Decides bite timing, whether anything bites, and which species."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        catalog: Sequence[Species] = SPECIES_CATALOG,
    ) -> None:
        self._rng = require_rng_param(rng, "CatchResolutionEngine.__init__")
        self.catalog = tuple(catalog)

    def schedule_bite(self, cast_distance: float, context: CatchContext) -> PendingBite:
        """Sample the bite delay uniformly from [min, max] for current conditions."""
        upper = max_bite_delay(context.weather.weather, context.active_event)
        delay = self._rng.uniform(BITE_DELAY_MIN_MS, upper)
        return PendingBite(cast_distance=cast_distance, delay_ms=delay)

    def resolve(self, cast_distance: float, context: CatchContext) -> BiteOutcome:
        """Roll the bite chance and, on success, select a species."""
        chance = bite_chance(context.rod_level, cast_distance)
        if self._rng.random() >= chance:
            logger.debug("Nothing bit at %.0f (chance %.3f)", cast_distance, chance)
            return BiteOutcome(species=None, bite_chance=chance)

        species = self.select_species(cast_distance, context)
        logger.debug("Bite: %s at %.0f", species.id, cast_distance)
        return BiteOutcome(species=species, bite_chance=chance)

    def select_species(self, cast_distance: float, context: CatchContext) -> Species:
        candidates = eligible_species(cast_distance, context, self.catalog)
        weights = [species_weight(s, context) for s in candidates]
        r = self._rng.random() * sum(weights)
        return choose_weighted(candidates, weights, r)

    def catch_value(
        self,
        species: Species,
        rod_level: int,
        active_event: Optional[EventType] = None,
    ) -> int:
        """Gold value of a landed catch."""
        value = math.floor(
            species.base_value * (1 + rod_level * ROD_VALUE_BONUS)
            + self._rng.random() * CATCH_VALUE_JITTER
        )
        if active_event is EventType.GOLD_RUSH:
            value = math.floor(value * GOLD_RUSH_VALUE_MULTIPLIER)
        return int(value)
