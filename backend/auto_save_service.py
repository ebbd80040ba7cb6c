"""Debounced auto-save for the player profile.

The session emits ``ProfileChangedEvent`` whenever the profile is mutated
(a catch, a purchase, an event starting). This service marks the profile
dirty and writes it once things have been quiet for the debounce period,
so a burst of changes costs a single write. A final save runs on stop.
"""

import asyncio
import copy
import logging
import time
from typing import Callable, Optional

from angler.events import EventBus, ProfileChangedEvent
from angler.persistence import ProfileStore
from angler.profile import PlayerProfile

logger = logging.getLogger(__name__)


class AutoSaveService:
    """Background service that persists the profile after it changes."""

    def __init__(
        self,
        store: ProfileStore,
        profile_id: str,
        get_profile: Callable[[], PlayerProfile],
        event_bus: EventBus,
        debounce_seconds: float = 2.0,
    ) -> None:
        """Initialize the auto-save service.

        Args:
            store: Where profiles are written
            profile_id: Id of the profile being played
            get_profile: Returns the live profile object
            event_bus: Session bus publishing ProfileChangedEvent
            debounce_seconds: Quiet period before a dirty profile is written
        """
        self._store = store
        self._profile_id = profile_id
        self._get_profile = get_profile
        self._event_bus = event_bus
        self._debounce = debounce_seconds
        self._task: Optional[asyncio.Task] = None
        self._wake: Optional[asyncio.Event] = None
        self._running = False
        self._dirty = False
        self._last_change = 0.0
        self.save_count = 0

    @property
    def dirty(self) -> bool:
        return self._dirty

    async def start(self) -> None:
        """Start listening for profile changes."""
        if self._running:
            logger.warning("Auto-save service already running")
            return

        self._running = True
        self._wake = asyncio.Event()
        self._event_bus.subscribe(ProfileChangedEvent, self._on_profile_changed)
        self._task = asyncio.create_task(self._autosave_loop(), name=f"autosave_{self._profile_id}")
        logger.info(
            "Auto-save started for profile %s (debounce: %.1fs)", self._profile_id, self._debounce
        )

    async def stop(self) -> None:
        """Stop the service, writing any unsaved changes first."""
        if not self._running:
            return

        self._running = False
        self._event_bus.unsubscribe(ProfileChangedEvent, self._on_profile_changed)
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self._dirty:
            await self.save_now()
        logger.info("Auto-save service stopped")

    def _on_profile_changed(self, event: ProfileChangedEvent) -> None:
        self._dirty = True
        self._last_change = time.monotonic()
        if self._wake is not None:
            self._wake.set()

    async def _autosave_loop(self) -> None:
        try:
            while self._running:
                await self._wake.wait()
                self._wake.clear()

                # Wait until changes stop arriving
                while True:
                    remaining = self._last_change + self._debounce - time.monotonic()
                    if remaining <= 0:
                        break
                    await asyncio.sleep(remaining)

                if self._dirty:
                    await self.save_now()
        except asyncio.CancelledError:
            logger.debug("Auto-save loop cancelled for profile %s", self._profile_id)
            raise

    async def save_now(self) -> bool:
        """Write the profile immediately (file I/O runs in the default executor)."""
        # Copy on the loop thread so the session can keep mutating the original
        profile = copy.deepcopy(self._get_profile())
        self._dirty = False
        loop = asyncio.get_running_loop()
        try:
            saved = await loop.run_in_executor(None, self._store.save, self._profile_id, profile)
        except Exception as e:
            logger.error("Auto-save failed for profile %s: %s", self._profile_id, e, exc_info=True)
            saved = False

        if saved:
            self.save_count += 1
            logger.info("Auto-saved profile %s", self._profile_id)
        else:
            self._dirty = True
        return saved
