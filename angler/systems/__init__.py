"""Per-tick session systems: clock/weather and the timed event scheduler."""

from angler.systems.base import BaseSystem, SystemResult
from angler.systems.clock import (
    ClockWeatherSystem,
    TimeOfDay,
    Weather,
    WeatherState,
    format_game_time,
)
from angler.systems.events import ActiveEvent, EventScheduler, EventType

__all__ = [
    "ActiveEvent",
    "BaseSystem",
    "ClockWeatherSystem",
    "EventScheduler",
    "EventType",
    "SystemResult",
    "TimeOfDay",
    "Weather",
    "WeatherState",
    "format_game_time",
]
