"""Day/night clock and weather system.

This module advances a 24-hour in-game clock and a discrete weather state.
Everything else in the session reads the immutable ``WeatherState`` snapshot;
lighting, fog and rain particles are the renderer's business.

Architecture Notes:
- Extends BaseSystem for uniform system management
- Weather transitions are rolled once per whole-hour boundary crossed
- All randomness comes from the injected RNG
"""

import logging
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from angler.config.clock import (
    HOURS_PER_DAY,
    NIGHT_ENDS_BEFORE,
    NIGHT_STARTS_AFTER,
    START_TIME_OF_DAY,
    TIME_SCALE,
    WEATHER_CHANGE_CHANCE,
    WEATHER_DISTRIBUTION,
)
from angler.systems.base import BaseSystem, SystemResult
from angler.util.rng import require_rng_param

logger = logging.getLogger(__name__)


class Weather(Enum):
    """Discrete weather kinds."""

    CLEAR = "CLEAR"
    CLOUDY = "CLOUDY"
    RAIN = "RAIN"
    STORM = "STORM"


class TimeOfDay(Enum):
    """Coarse time-of-day used by species predicates."""

    DAY = "DAY"
    NIGHT = "NIGHT"


def is_night_time(time_of_day: float) -> bool:
    """Night runs from after 18:00 until before 06:00."""
    return time_of_day < NIGHT_ENDS_BEFORE or time_of_day > NIGHT_STARTS_AFTER


@dataclass(frozen=True)
class WeatherState:
    """Read-only clock and weather snapshot.

    Attributes:
        time_of_day: Hours in [0, 24)
        weather: Current weather kind
    """

    time_of_day: float
    weather: Weather

    @property
    def is_night(self) -> bool:
        return is_night_time(self.time_of_day)

    @property
    def period(self) -> TimeOfDay:
        return TimeOfDay.NIGHT if self.is_night else TimeOfDay.DAY

    @property
    def hour(self) -> int:
        return int(math.floor(self.time_of_day))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time_of_day": self.time_of_day,
            "weather": self.weather.value,
            "is_night": self.is_night,
            "clock": format_game_time(self.time_of_day),
        }


def sample_weather(rng: random.Random) -> Weather:
    """Draw a weather kind from the fixed categorical distribution."""
    r = rng.random()
    cumulative = 0.0
    for name, probability in WEATHER_DISTRIBUTION:
        cumulative += probability
        if r < cumulative:
            return Weather(name)
    # Floating point slack at the top of the range lands on the last entry
    return Weather(WEATHER_DISTRIBUTION[-1][0])


def format_game_time(time_of_day: float) -> str:
    """Format hours as a 12-hour clock string.

    Example:
        format_game_time(8.5)   # "8:30 AM"
        format_game_time(0.0)   # "12:00 AM"
        format_game_time(13.25) # "1:15 PM"
    """
    hours = int(math.floor(time_of_day))
    minutes = int(math.floor((time_of_day - hours) * 60))
    suffix = "PM" if hours >= 12 else "AM"
    display_hours = hours % 12 or 12
    return f"{display_hours}:{minutes:02d} {suffix}"


class ClockWeatherSystem(BaseSystem):
    """Advances the in-game clock and rolls weather transitions.

    Attributes:
        time_of_day: Current hour in [0, 24)
        weather: Current weather kind
        time_scale: In-game hours per real second
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        start_time: float = START_TIME_OF_DAY,
        weather: Weather = Weather.CLEAR,
        time_scale: float = TIME_SCALE,
    ) -> None:
        """Initialize the clock.

        Args:
            rng: Session RNG used for weather rolls (required)
            start_time: Initial hour (wrapped into [0, 24))
            weather: Initial weather
            time_scale: In-game hours advanced per real second
        """
        super().__init__("ClockWeather")
        self._rng = require_rng_param(rng, "ClockWeatherSystem.__init__")
        self.time_of_day: float = start_time % HOURS_PER_DAY
        self.weather: Weather = weather
        self.time_scale = time_scale
        self._days_elapsed = 0

    def _do_update(self, dt: float, frame: int) -> SystemResult:
        return self.advance(dt)

    def advance(self, delta_seconds: float) -> SystemResult:
        """Advance the clock by ``delta_seconds`` of real time.

        Returns:
            SystemResult with ``hour_changed``, ``weather_changed`` and
            ``day_rolled`` details
        """
        if delta_seconds <= 0:
            return SystemResult.empty()

        previous = self.time_of_day
        raw = previous + delta_seconds * self.time_scale
        hours_crossed = int(math.floor(raw)) - int(math.floor(previous))
        day_rolled = raw >= HOURS_PER_DAY

        self.time_of_day = raw % HOURS_PER_DAY
        if day_rolled:
            self._days_elapsed += int(raw // HOURS_PER_DAY)

        weather_changed = False
        for _ in range(hours_crossed):
            if self._roll_weather_change():
                weather_changed = True

        return SystemResult(
            details={
                "hour_changed": hours_crossed > 0,
                "weather_changed": weather_changed,
                "day_rolled": day_rolled,
            },
        )

    def _roll_weather_change(self) -> bool:
        """Roll the hourly transition check; returns True if the weather kind changed."""
        if self._rng.random() >= WEATHER_CHANGE_CHANCE:
            return False

        old = self.weather
        self.weather = sample_weather(self._rng)
        if self.weather is not old:
            logger.info("Weather changed: %s -> %s", old.value, self.weather.value)
            return True
        return False

    def snapshot(self) -> WeatherState:
        """Get the read-only clock/weather snapshot."""
        return WeatherState(time_of_day=self.time_of_day, weather=self.weather)

    def is_night(self) -> bool:
        return is_night_time(self.time_of_day)

    def get_debug_info(self) -> Dict[str, Any]:
        return {
            **super().get_debug_info(),
            "time_of_day": self.time_of_day,
            "clock": format_game_time(self.time_of_day),
            "weather": self.weather.value,
            "is_night": self.is_night(),
            "days_elapsed": self._days_elapsed,
        }
