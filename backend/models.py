"""Request/response models for the HTTP and WebSocket API."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class CommandRequest(BaseModel):
    """A player command, e.g. ``{"command": "input", "data": {"held": true}}``."""

    command: str
    data: Optional[Dict[str, Any]] = None


class CommandResponse(BaseModel):
    success: bool
    command: str
    error: Optional[str] = None
    phase: Optional[str] = None
    state: Optional[Dict[str, Any]] = None


class HealthResponse(BaseModel):
    status: str = "ok"
    frame: int
    phase: str
    uptime_seconds: float
    connected_clients: int


class SpeciesData(BaseModel):
    id: str
    display_name: str
    base_value: int
    rarity_weight: float
    difficulty: int
    min_cast_distance: float
    required_weather: Optional[List[str]] = None
    required_time: Optional[str] = None
    required_enchant: Optional[List[str]] = None


class EnchantData(BaseModel):
    id: str
    display_name: str
    rarity_weight: float


class ShopItemData(BaseModel):
    id: str
    display_name: str
    price: int


class CatalogResponse(BaseModel):
    species: List[SpeciesData]
    enchants: List[EnchantData]
    boats: List[ShopItemData]
    rod_skins: List[ShopItemData]
    rod_upgrade_price: int
    enchant_roll_price: int


class Notification(BaseModel):
    """One session event forwarded to clients (toast, catch, weather, ...)."""

    type: str
    frame: Optional[int] = None
    payload: Dict[str, Any] = Field(default_factory=dict)


class StateMessage(BaseModel):
    type: str = "state"
    state: Dict[str, Any]
    notifications: List[Notification] = Field(default_factory=list)


class InputCommandData(BaseModel):
    held: bool = False


class AutoPlayCommandData(BaseModel):
    # None toggles the current setting
    enabled: Optional[bool] = None


class BuyBoatCommandData(BaseModel):
    boat_id: str


class BuySkinCommandData(BaseModel):
    skin_id: str


class SellCommandData(BaseModel):
    item_id: str
