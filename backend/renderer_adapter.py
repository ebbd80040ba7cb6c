"""Renderer adapter for browser clients.

The browser draws the scene; the server only needs to tell it what the rig
is doing. ``BroadcastRenderer`` records the rig state the session asks for
and exposes it as part of the state snapshot sent to clients.
"""

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class BroadcastRenderer:
    """RigRenderer that keeps the rig state for the next broadcast."""

    def __init__(self) -> None:
        self.cast_distance: Optional[float] = None
        self.reeling = False
        self.lights_on = False
        self.cast_count = 0

    def trigger_cast_animation(self, distance: float) -> None:
        self.cast_distance = distance
        self.reeling = False
        self.cast_count += 1

    def reset_rig(self) -> None:
        self.cast_distance = None
        self.reeling = False

    def set_reeling_visual(self, reeling: bool) -> None:
        self.reeling = reeling

    def toggle_lights(self) -> bool:
        self.lights_on = not self.lights_on
        logger.debug("Lights %s", "on" if self.lights_on else "off")
        return self.lights_on

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cast_distance": self.cast_distance,
            "reeling": self.reeling,
            "lights_on": self.lights_on,
            "cast_count": self.cast_count,
        }
