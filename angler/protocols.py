"""Protocol-based abstractions for the session's collaborators.

The session never imports a renderer or a storage backend. It talks to
whatever it is given through these structural protocols, so the FastAPI
adapter, the headless runner and tests can each supply their own.

Protocols:
---------
    RigRenderer - Plays rod/bobber visuals and owns the lights state
    ProfileStore - Loads and saves player profiles (see angler.persistence)
"""

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class RigRenderer(Protocol):
    """Protocol for whatever draws the rod, line and bobber.

    All calls are fire-and-forget notifications except ``toggle_lights``,
    which reports the new lights state so the session can toast it.
    """

    def trigger_cast_animation(self, distance: float) -> None:
        """Play the cast and land the bobber ``distance`` units out."""
        ...

    def reset_rig(self) -> None:
        """Return rod, line and bobber to their resting pose."""
        ...

    def set_reeling_visual(self, reeling: bool) -> None:
        """Switch the reel-in visuals on or off."""
        ...

    def toggle_lights(self) -> bool:
        """Flip the boat lights; returns True if they are now on."""
        ...


class NullRenderer:
    """Headless renderer: tracks the lights flag and nothing else."""

    def __init__(self) -> None:
        self.lights_on = False

    def trigger_cast_animation(self, distance: float) -> None:
        logger.debug("Cast animation to %.0f", distance)

    def reset_rig(self) -> None:
        pass

    def set_reeling_visual(self, reeling: bool) -> None:
        pass

    def toggle_lights(self) -> bool:
        self.lights_on = not self.lights_on
        return self.lights_on
