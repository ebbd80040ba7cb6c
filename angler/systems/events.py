"""Timed global event scheduler.

At most one event (Gold Rush, Lucky Waters, Feeding Frenzy) is active at a
time. The scheduler checks every few seconds of session time: an expired
event is cleared, and when nothing is active there is a small chance of
starting a new one. End times are wall-clock timestamps so an event saved
with the profile survives a reload.
"""

import logging
import math
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from angler.config.events import EVENT_CATALOG, EVENT_CHECK_INTERVAL, EVENT_START_CHANCE
from angler.systems.base import BaseSystem, SystemResult
from angler.util.rng import require_rng_param

logger = logging.getLogger(__name__)


class EventType(Enum):
    GOLD_RUSH = "GOLD_RUSH"
    LUCKY_WATERS = "LUCKY_WATERS"
    FEEDING_FRENZY = "FEEDING_FRENZY"


@dataclass(frozen=True)
class EventTemplate:
    type: EventType
    display_name: str
    duration: float  # seconds


EVENT_TEMPLATES = tuple(
    EventTemplate(EventType(type_name), display_name, duration)
    for type_name, display_name, duration in EVENT_CATALOG
)


@dataclass(frozen=True)
class ActiveEvent:
    """A running timed modifier.

    Attributes:
        type: Which modifier is active
        display_name: Player-facing name ("Gold Rush")
        end_timestamp: Wall-clock seconds at which the event ends
    """

    type: EventType
    display_name: str
    end_timestamp: float

    def is_expired(self, now: float) -> bool:
        return now > self.end_timestamp

    def seconds_remaining(self, now: float) -> float:
        return max(0.0, self.end_timestamp - now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "display_name": self.display_name,
            "end_timestamp": self.end_timestamp,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Optional["ActiveEvent"]:
        """Rebuild an event from a snapshot; returns None if the data is unusable."""
        if not isinstance(data, Mapping):
            return None
        try:
            event_type = EventType(data["type"])
            end_timestamp = float(data["end_timestamp"])
        except (KeyError, TypeError, ValueError):
            return None
        if not math.isfinite(end_timestamp):
            return None
        display_name = data.get("display_name")
        if not isinstance(display_name, str):
            display_name = _template_for(event_type).display_name
        return cls(type=event_type, display_name=display_name, end_timestamp=end_timestamp)


def _template_for(event_type: EventType) -> EventTemplate:
    for template in EVENT_TEMPLATES:
        if template.type is event_type:
            return template
    raise KeyError(event_type)


class EventScheduler(BaseSystem):
    """Starts and expires timed global events.

    ``update(dt)`` accumulates session time and runs ``check()`` once per
    check interval. The result details carry ``started`` / ``ended`` events
    so the session can toast them.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
        check_interval: float = EVENT_CHECK_INTERVAL,
        start_chance: float = EVENT_START_CHANCE,
    ) -> None:
        super().__init__("EventScheduler")
        self._rng = require_rng_param(rng, "EventScheduler.__init__")
        self._clock = clock
        self.check_interval = check_interval
        self.start_chance = start_chance
        self._active: Optional[ActiveEvent] = None
        self._since_check = 0.0

    @property
    def active_event(self) -> Optional[ActiveEvent]:
        return self._active

    def now(self) -> float:
        return self._clock()

    def is_active(self, event_type: EventType) -> bool:
        return self._active is not None and self._active.type is event_type

    def _do_update(self, dt: float, frame: int) -> SystemResult:
        self._since_check += dt
        if self._since_check < self.check_interval:
            return SystemResult.empty()
        self._since_check -= self.check_interval
        return self.check()

    def check(self) -> SystemResult:
        """Run one scheduler check immediately."""
        now = self._clock()

        if self._active is not None:
            if self._active.is_expired(now):
                ended = self._active
                self._active = None
                logger.info("Event ended: %s", ended.display_name)
                return SystemResult(events_emitted=1, details={"ended": ended})
            return SystemResult.empty()

        if self._rng.random() < self.start_chance:
            template = EVENT_TEMPLATES[int(self._rng.random() * len(EVENT_TEMPLATES))]
            started = self.start(template.type, now=now)
            return SystemResult(events_emitted=1, details={"started": started})

        return SystemResult.empty()

    def start(self, event_type: EventType, now: Optional[float] = None) -> ActiveEvent:
        """Start ``event_type`` right away, replacing any active event."""
        template = _template_for(event_type)
        if now is None:
            now = self._clock()
        self._active = ActiveEvent(
            type=template.type,
            display_name=template.display_name,
            end_timestamp=now + template.duration,
        )
        logger.info("Event started: %s (%.0fs)", template.display_name, template.duration)
        return self._active

    def restore(self, event: Optional[ActiveEvent]) -> bool:
        """Reinstate a saved event if it has not expired yet."""
        if event is None or event.is_expired(self._clock()):
            return False
        self._active = event
        return True

    def clear(self) -> None:
        self._active = None

    def get_debug_info(self) -> Dict[str, Any]:
        info = super().get_debug_info()
        info["active_event"] = self._active.to_dict() if self._active else None
        return info
