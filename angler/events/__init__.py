"""Events module for session event dispatch.

This module provides the EventBus used to publish session output (weather,
catches, toasts) plus the typed domain event definitions.
"""

from angler.events.domain_events import (
    CatchResultEvent,
    GameEventEndedEvent,
    GameEventStartedEvent,
    MissionCompletedEvent,
    PhaseChangedEvent,
    ProfileChangedEvent,
    ToastEvent,
    WeatherUpdatedEvent,
)
from angler.events.event_bus import EventBus

__all__ = [
    "CatchResultEvent",
    "EventBus",
    "GameEventEndedEvent",
    "GameEventStartedEvent",
    "MissionCompletedEvent",
    "PhaseChangedEvent",
    "ProfileChangedEvent",
    "ToastEvent",
    "WeatherUpdatedEvent",
]
