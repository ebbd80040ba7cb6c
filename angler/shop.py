"""Shop actions: rod upgrades, enchant rolls, boats, rod skins, selling.

Every action mutates the profile in place and returns ``Ok(profile)``, or
``Err(message)`` with a player-facing message when it cannot be done. A
failed action never changes the profile.
"""

import logging
import random
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from angler.catalog import ENCHANT_POOL, Enchant
from angler.config.shop import (
    BOAT_SHOP,
    ENCHANT_ROLL_PRICE,
    ROD_SKINS,
    ROD_UPGRADE_BASE_PRICE,
    ROD_UPGRADE_PRICE_PER_LEVEL,
)
from angler.profile import PlayerProfile
from angler.result import Err, Ok, Result
from angler.util.rng import require_rng_param

logger = logging.getLogger(__name__)

NOT_ENOUGH_GOLD = "Not enough gold!"


@dataclass(frozen=True)
class ShopEntry:
    id: str
    display_name: str
    price: int


BOATS: Tuple[ShopEntry, ...] = tuple(ShopEntry(*row) for row in BOAT_SHOP)
SKINS: Tuple[ShopEntry, ...] = tuple(ShopEntry(*row) for row in ROD_SKINS)


def _find_entry(entries: Sequence[ShopEntry], entry_id: str) -> Optional[ShopEntry]:
    for entry in entries:
        if entry.id == entry_id:
            return entry
    return None


def rod_upgrade_price(rod_level: int) -> int:
    return ROD_UPGRADE_BASE_PRICE + (rod_level - 1) * ROD_UPGRADE_PRICE_PER_LEVEL


def upgrade_rod(profile: PlayerProfile) -> Result[PlayerProfile, str]:
    price = rod_upgrade_price(profile.rod_level)
    if profile.gold < price:
        return Err(NOT_ENOUGH_GOLD)
    profile.gold -= price
    profile.rod_level += 1
    logger.info("Rod upgraded to level %d for %d gold", profile.rod_level, price)
    return Ok(profile)


def draw_enchant(rng: random.Random, pool: Sequence[Enchant] = ENCHANT_POOL) -> Enchant:
    """Draw an enchant with probability proportional to its rarity weight."""
    r = rng.random() * sum(e.rarity_weight for e in pool)
    for enchant in pool:
        if r < enchant.rarity_weight:
            return enchant
        r -= enchant.rarity_weight
    return pool[-1]


def roll_enchant(profile: PlayerProfile, rng: Optional[random.Random] = None) -> Result[PlayerProfile, str]:
    """Pay for a random enchant; the result replaces whatever was equipped."""
    rng = require_rng_param(rng, "roll_enchant")
    if profile.gold < ENCHANT_ROLL_PRICE:
        return Err(f"Need {ENCHANT_ROLL_PRICE} Gold")
    enchant = draw_enchant(rng)
    profile.gold -= ENCHANT_ROLL_PRICE
    profile.equipped_enchant = enchant.id
    logger.info("Rolled enchant %s", enchant.id)
    return Ok(profile)


def buy_boat(profile: PlayerProfile, boat_id: str) -> Result[PlayerProfile, str]:
    """Equip an owned boat, or buy and equip a new one."""
    entry = _find_entry(BOATS, boat_id)
    if entry is None:
        return Err(f"Unknown boat: {boat_id}")
    if entry.id not in profile.owned_boats:
        if profile.gold < entry.price:
            return Err(NOT_ENOUGH_GOLD)
        profile.gold -= entry.price
        profile.owned_boats.append(entry.id)
        logger.info("Bought boat %s for %d gold", entry.id, entry.price)
    profile.boat_type = entry.id
    return Ok(profile)


def buy_skin(profile: PlayerProfile, skin_id: str) -> Result[PlayerProfile, str]:
    """Equip an owned rod skin, or buy and equip a new one."""
    entry = _find_entry(SKINS, skin_id)
    if entry is None:
        return Err(f"Unknown rod skin: {skin_id}")
    if entry.id not in profile.owned_skins:
        if profile.gold < entry.price:
            return Err(NOT_ENOUGH_GOLD)
        profile.gold -= entry.price
        profile.owned_skins.append(entry.id)
        logger.info("Bought rod skin %s for %d gold", entry.id, entry.price)
    profile.rod_skin = entry.id
    return Ok(profile)


def sell(profile: PlayerProfile, item_id: str) -> Result[PlayerProfile, str]:
    item = profile.find_item(item_id)
    if item is None:
        return Err("Item not found")
    profile.inventory.remove(item)
    profile.gold += item.value
    logger.info("Sold %s for %d gold", item.name, item.value)
    return Ok(profile)
