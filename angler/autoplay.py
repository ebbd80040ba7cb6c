"""Auto-play driver.

Auto-play is a mode, not a phase: when enabled, the driver watches the
session phase and, through the session's own timers, calls the same public
``cast()`` / ``pull()`` a player would. Every roll and delay of the normal
cast cycle still applies. The mini-game reads the enabled flag and runs in
auto mode.
"""

import logging
from typing import TYPE_CHECKING, Optional

from angler.config.session import AUTO_CAST_DELAY, AUTO_PULL_DELAY
from angler.state_machine import SessionPhase
from angler.timers import TimerHandle

if TYPE_CHECKING:
    from angler.session import FishingSession

logger = logging.getLogger(__name__)


class AutoPlayDriver:
    """Casts after a pause while idle and pulls shortly after a bite."""

    def __init__(self, session: "FishingSession", enabled: bool = False) -> None:
        self._session = session
        self._enabled = enabled
        self._watched_phase: Optional[SessionPhase] = None
        self._handle: Optional[TimerHandle] = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        if enabled == self._enabled:
            return
        self._enabled = enabled
        self._disarm()
        self._watched_phase = None

    def update(self, dt: float) -> None:
        """Re-arm the action timer whenever the session phase changes."""
        if not self._enabled:
            return
        phase = self._session.phase
        if phase is self._watched_phase:
            return
        self._watched_phase = phase
        self._disarm()

        timers = self._session.timers
        if phase is SessionPhase.IDLE:
            self._handle = timers.schedule(AUTO_CAST_DELAY, self._session.cast, "auto-cast")
        elif phase is SessionPhase.BITE:
            self._handle = timers.schedule(AUTO_PULL_DELAY, self._session.pull, "auto-pull")

    def _disarm(self) -> None:
        if self._handle is not None:
            self._session.timers.cancel(self._handle)
            self._handle = None
