"""Static species and enchant catalogs.

Declaration order matters: weighted species selection walks the catalog in
this order, and the first entry doubles as the fallback when nothing else is
eligible.
"""

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Optional, Tuple

from angler.systems.clock import TimeOfDay, Weather


@dataclass(frozen=True)
class Species:
    """One catchable creature.

    Attributes:
        id: Stable identifier ("common", "legend_mutant")
        display_name: Player-facing name
        base_value: Gold value before rod bonus and jitter
        rarity_weight: Relative selection weight (> 0)
        difficulty: 1-10, drives mini-game speed and bar size
        min_cast_distance: Minimum cast distance to be eligible
        required_weather: Weather kinds the species appears in (None = any)
        required_time: DAY or NIGHT only (None = any)
        required_enchant: Enchant ids, one of which must be equipped (None = any)
    """

    id: str
    display_name: str
    base_value: int
    rarity_weight: float
    difficulty: int
    min_cast_distance: float
    required_weather: Optional[FrozenSet[Weather]] = None
    required_time: Optional[TimeOfDay] = None
    required_enchant: Optional[FrozenSet[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "base_value": self.base_value,
            "rarity_weight": self.rarity_weight,
            "difficulty": self.difficulty,
            "min_cast_distance": self.min_cast_distance,
            "required_weather": (
                sorted(w.value for w in self.required_weather) if self.required_weather else None
            ),
            "required_time": self.required_time.value if self.required_time else None,
            "required_enchant": sorted(self.required_enchant) if self.required_enchant else None,
        }


@dataclass(frozen=True)
class Enchant:
    id: str
    display_name: str
    rarity_weight: float


def _weather(*kinds: Weather) -> FrozenSet[Weather]:
    return frozenset(kinds)


def _enchants(*ids: str) -> FrozenSet[str]:
    return frozenset(ids)


SPECIES_CATALOG: Tuple[Species, ...] = (
    Species("common", "Goldfish", 20, 100, 1, 0),
    Species(
        "common_mutant", "Toxic Goldfish", 50, 15, 3, 20,
        required_weather=_weather(Weather.RAIN, Weather.STORM),
    ),
    Species("blue", "Neon Tetra", 60, 60, 2, 50),
    Species("blue_mutant", "Plasma Tetra", 120, 10, 4, 60, required_time=TimeOfDay.NIGHT),
    Species("rare", "Arowana", 180, 25, 4, 100, required_time=TimeOfDay.DAY),
    Species(
        "rare_mutant", "Ghost Arowana", 350, 5, 6, 120,
        required_weather=_weather(Weather.CLOUDY, Weather.STORM),
    ),
    Species("legend", "Coelacanth", 500, 10, 7, 200, required_time=TimeOfDay.NIGHT),
    Species(
        "legend_mutant", "Cursed Coelacanth", 900, 3, 8, 210,
        required_enchant=_enchants("lucky", "ancient", "deep"),
    ),
    Species(
        "ancient", "Dunkleosteus", 300, 8, 5, 180,
        required_weather=_weather(Weather.RAIN, Weather.STORM),
    ),
    Species("ancient_mutant", "Magma Dunkleosteus", 700, 4, 7, 190, required_time=TimeOfDay.DAY),
    Species(
        "mythical", "Leedsichthys", 400, 5, 6, 220,
        required_weather=_weather(Weather.CLOUDY, Weather.RAIN),
    ),
    Species("cosmic", "Megalodon", 800, 3, 8, 280, required_time=TimeOfDay.NIGHT),
    Species(
        "cosmic_mutant", "Abyssal Megalodon", 1500, 1, 9, 300,
        required_enchant=_enchants("deep", "ancient"),
    ),
    Species("rainbow", "Rainbow Trout", 1000, 2, 9, 150, required_weather=_weather(Weather.CLEAR)),
    Species(
        "dragon", "Sea Dragon", 2500, 0.5, 10, 320,
        required_weather=_weather(Weather.STORM),
        required_enchant=_enchants("ancient", "lucky"),
    ),
    Species(
        "dragon_mutant", "Void Dragon", 5000, 0.1, 10, 350,
        required_weather=_weather(Weather.STORM),
        required_enchant=_enchants("ancient"),
    ),
)

DEFAULT_SPECIES: Species = SPECIES_CATALOG[0]

NO_ENCHANT = "none"

ENCHANT_POOL: Tuple[Enchant, ...] = (
    Enchant("lucky", "Lucky", 30),
    Enchant("deep", "Deep", 25),
    Enchant("steady", "Steady", 25),
    Enchant("golden", "Golden", 15),
    Enchant("ancient", "Ancient", 5),
)

_SPECIES_BY_ID: Dict[str, Species] = {s.id: s for s in SPECIES_CATALOG}
_ENCHANTS_BY_ID: Dict[str, Enchant] = {e.id: e for e in ENCHANT_POOL}


def get_species(species_id: str) -> Optional[Species]:
    return _SPECIES_BY_ID.get(species_id)


def get_enchant(enchant_id: str) -> Optional[Enchant]:
    return _ENCHANTS_BY_ID.get(enchant_id)


def is_known_enchant(enchant_id: str) -> bool:
    return enchant_id == NO_ENCHANT or enchant_id in _ENCHANTS_BY_ID
