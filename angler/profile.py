"""Player profile aggregate.

The profile is the durable part of a session: gold, gear, inventory,
statistics and the current mission. It is passed into the session
explicitly and mutated only by the session and the shop.

Snapshots are plain dicts. Loading merges a snapshot into the defaults field
by field: a missing or malformed field keeps its default and is logged, it
never makes the whole load fail.
"""

import logging
import math
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from angler.catalog import NO_ENCHANT, Species, is_known_enchant
from angler.missions import Mission, starter_mission
from angler.systems.events import ActiveEvent

logger = logging.getLogger(__name__)

DEFAULT_GOLD = 250
DEFAULT_BOAT = "wooden"
DEFAULT_ROD_SKIN = "default"


@dataclass
class InventoryItem:
    id: str
    species_id: str
    name: str
    value: int
    ts: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.species_id,
            "name": self.name,
            "value": self.value,
            "ts": self.ts,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Optional["InventoryItem"]:
        if not isinstance(data, Mapping):
            return None
        try:
            return cls(
                id=str(data["id"]),
                species_id=str(data["type"]),
                name=str(data.get("name", data["type"])),
                value=int(data["value"]),
                ts=float(data.get("ts", 0.0)),
            )
        except (KeyError, TypeError, ValueError, OverflowError):
            return None


@dataclass
class BestCatch:
    name: str
    value: int


@dataclass
class BiggestCatch:
    name: str
    value: int
    species_id: str


@dataclass
class PlayerProfile:
    """Everything that persists between sessions."""

    gold: int = DEFAULT_GOLD
    rod_level: int = 1
    max_distance: float = 0
    inventory: List[InventoryItem] = field(default_factory=list)
    equipped_enchant: str = NO_ENCHANT
    best_catch_per_species: Dict[str, BestCatch] = field(default_factory=dict)
    total_catches: int = 0
    biggest_catch: Optional[BiggestCatch] = None
    boat_type: str = DEFAULT_BOAT
    owned_boats: List[str] = field(default_factory=lambda: [DEFAULT_BOAT])
    rod_skin: str = DEFAULT_ROD_SKIN
    owned_skins: List[str] = field(default_factory=lambda: [DEFAULT_ROD_SKIN])
    current_mission: Mission = field(default_factory=starter_mission)
    saved_event: Optional[ActiveEvent] = None

    def record_catch(
        self,
        species: Species,
        value: int,
        ts: Optional[float] = None,
        item_id: Optional[str] = None,
    ) -> InventoryItem:
        """Add a landed catch to the inventory and update the catch statistics."""
        item = InventoryItem(
            id=item_id or uuid.uuid4().hex,
            species_id=species.id,
            name=species.display_name,
            value=value,
            ts=ts if ts is not None else time.time(),
        )
        self.inventory.append(item)

        best = self.best_catch_per_species.get(species.id)
        if best is None or value > best.value:
            self.best_catch_per_species[species.id] = BestCatch(species.display_name, value)

        self.total_catches += 1
        if self.biggest_catch is None or value > self.biggest_catch.value:
            self.biggest_catch = BiggestCatch(species.display_name, value, species.id)
        return item

    def find_item(self, item_id: str) -> Optional[InventoryItem]:
        for item in self.inventory:
            if item.id == item_id:
                return item
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gold": self.gold,
            "rod_level": self.rod_level,
            "max_distance": self.max_distance,
            "inventory": [item.to_dict() for item in self.inventory],
            "equipped_enchant": self.equipped_enchant,
            "best_catch_per_species": {
                species_id: {"name": best.name, "value": best.value}
                for species_id, best in self.best_catch_per_species.items()
            },
            "total_catches": self.total_catches,
            "biggest_catch": (
                {
                    "name": self.biggest_catch.name,
                    "value": self.biggest_catch.value,
                    "species_id": self.biggest_catch.species_id,
                }
                if self.biggest_catch
                else None
            ),
            "boat_type": self.boat_type,
            "owned_boats": list(self.owned_boats),
            "rod_skin": self.rod_skin,
            "owned_skins": list(self.owned_skins),
            "current_mission": self.current_mission.to_dict(),
            "saved_event": self.saved_event.to_dict() if self.saved_event else None,
        }

    @classmethod
    def from_dict(
        cls,
        data: Any,
        now: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ) -> "PlayerProfile":
        """Merge a snapshot into the default profile.

        Args:
            data: Snapshot dict (anything else yields the defaults)
            now: Wall-clock seconds used to drop an expired saved event
            clock: Used for ``now`` when it is not given
        """
        profile = cls()
        if not isinstance(data, Mapping):
            if data is not None:
                logger.warning("Profile snapshot is %s, not a mapping; using defaults", type(data).__name__)
            return profile

        profile.gold = _int_field(data, "gold", profile.gold, minimum=0)
        profile.rod_level = _int_field(data, "rod_level", profile.rod_level, minimum=1)
        profile.max_distance = _int_field(data, "max_distance", profile.max_distance, minimum=0)
        profile.total_catches = _int_field(data, "total_catches", profile.total_catches, minimum=0)

        enchant = data.get("equipped_enchant")
        if isinstance(enchant, str) and is_known_enchant(enchant):
            profile.equipped_enchant = enchant
        elif enchant is not None:
            _warn_field("equipped_enchant", enchant)

        if "inventory" in data:
            raw_items = data["inventory"]
            if isinstance(raw_items, list):
                for raw in raw_items:
                    item = InventoryItem.from_dict(raw)
                    if item is None:
                        _warn_field("inventory[]", raw)
                    else:
                        profile.inventory.append(item)
            else:
                _warn_field("inventory", raw_items)

        best = data.get("best_catch_per_species")
        if isinstance(best, Mapping):
            for species_id, raw in best.items():
                try:
                    profile.best_catch_per_species[str(species_id)] = BestCatch(
                        name=str(raw["name"]), value=int(raw["value"])
                    )
                except (KeyError, TypeError, ValueError, OverflowError):
                    _warn_field(f"best_catch_per_species[{species_id}]", raw)
        elif best is not None:
            _warn_field("best_catch_per_species", best)

        biggest = data.get("biggest_catch")
        if isinstance(biggest, Mapping):
            try:
                profile.biggest_catch = BiggestCatch(
                    name=str(biggest["name"]),
                    value=int(biggest["value"]),
                    species_id=str(biggest["species_id"]),
                )
            except (KeyError, TypeError, ValueError, OverflowError):
                _warn_field("biggest_catch", biggest)
        elif biggest is not None:
            _warn_field("biggest_catch", biggest)

        profile.owned_boats = _str_list_field(data, "owned_boats", profile.owned_boats, DEFAULT_BOAT)
        profile.owned_skins = _str_list_field(data, "owned_skins", profile.owned_skins, DEFAULT_ROD_SKIN)
        profile.boat_type = _owned_choice(data, "boat_type", profile.owned_boats, DEFAULT_BOAT)
        profile.rod_skin = _owned_choice(data, "rod_skin", profile.owned_skins, DEFAULT_ROD_SKIN)

        if "current_mission" in data:
            mission = Mission.from_dict(data["current_mission"])
            if mission is None:
                _warn_field("current_mission", data["current_mission"])
            else:
                profile.current_mission = mission

        event = ActiveEvent.from_dict(data.get("saved_event"))
        if event is not None:
            current = now if now is not None else clock()
            if not event.is_expired(current):
                profile.saved_event = event
            else:
                logger.info("Dropping expired saved event %s", event.display_name)

        return profile


def _warn_field(name: str, value: Any) -> None:
    logger.warning("Ignoring malformed profile field %s=%r", name, value)


def _int_field(data: Mapping, name: str, default: int, minimum: int) -> int:
    if name not in data:
        return default
    value = data[name]
    # bool is an int subclass; a snapshot with gold=true is malformed
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        _warn_field(name, value)
        return default
    if (isinstance(value, float) and not math.isfinite(value)) or value < minimum:
        _warn_field(name, value)
        return default
    return int(value)


def _str_list_field(data: Mapping, name: str, default: List[str], required: str) -> List[str]:
    if name not in data:
        return list(default)
    value = data[name]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        _warn_field(name, value)
        return list(default)
    result = list(dict.fromkeys(value))
    if required not in result:
        result.insert(0, required)
    return result


def _owned_choice(data: Mapping, name: str, owned: List[str], default: str) -> str:
    value = data.get(name)
    if value is None:
        return default
    if not isinstance(value, str) or value not in owned:
        _warn_field(name, value)
        return default
    return value
