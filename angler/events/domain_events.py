"""Domain event definitions emitted by the fishing session.

These events are data-only (frozen dataclasses) and carry everything a
presentation layer needs: it never has to call back into the session to
render a toast, a catch card or the weather icon.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WeatherUpdatedEvent:
    """The in-game hour or the weather changed.

    Attributes:
        weather: Weather name ("CLEAR", "CLOUDY", "RAIN", "STORM")
        time_of_day: Hours in [0, 24)
        frame: Session frame when this occurred
    """

    weather: str
    time_of_day: float
    frame: int


@dataclass(frozen=True)
class ToastEvent:
    """A short player-facing message ("Something's biting!")."""

    message: str
    frame: int


@dataclass(frozen=True)
class CatchResultEvent:
    """A reel-in finished.

    Attributes:
        species_id: Species landed, or None when the fish got away
        species_name: Display name of the species that was hooked
        value: Gold value of the catch (0 on failure)
        frame: Session frame when this occurred
    """

    species_id: str | None
    species_name: str
    value: int
    frame: int


@dataclass(frozen=True)
class PhaseChangedEvent:
    """The cast cycle moved to a new phase."""

    from_phase: str
    to_phase: str
    reason: str
    frame: int


@dataclass(frozen=True)
class GameEventStartedEvent:
    """A timed global modifier started (Gold Rush, Lucky Waters, Feeding Frenzy)."""

    event_type: str
    display_name: str
    end_timestamp: float


@dataclass(frozen=True)
class GameEventEndedEvent:
    """The active timed modifier expired."""

    event_type: str
    display_name: str


@dataclass(frozen=True)
class MissionCompletedEvent:
    """A mission goal was reached and replaced.

    Attributes:
        species_id: Target species of the completed mission
        reward_gold: Gold granted
        next_species_id: Target species of the replacement mission
        frame: Session frame when this occurred
    """

    species_id: str
    reward_gold: int
    next_species_id: str
    frame: int


@dataclass(frozen=True)
class ProfileChangedEvent:
    """The player profile was mutated and should be persisted."""

    reason: str
    frame: int
