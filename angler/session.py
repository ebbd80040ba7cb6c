"""Fishing session orchestrator.

``FishingSession`` owns one cast cycle at a time and sequences the clock,
the catch engine, the skill-check mini-game and the event/mission
schedulers. It is driven entirely by ``update(dt)`` plus the player's
commands (``cast``, ``pull``, ``minigame_input``), all on one thread.

Cast cycle:
    IDLE --cast()--> CASTING --(animation delay)--> FLOATING
    FLOATING --pull()--> IDLE                      ("Pulled too early!")
    FLOATING --bite timer, species--> BITE --pull()--> PULLING --mini-game ends--> IDLE
    FLOATING --bite timer, nothing--> IDLE after a short delay

Commands that don't fit the current phase are ignored and logged at DEBUG.
Output goes out through the event bus (toasts, catch results, weather,
phase changes) and through the injected renderer.
"""

import logging
import math
import random
import time
from typing import Any, Callable, Dict, Optional

from angler.autoplay import AutoPlayDriver
from angler.catch import BiteOutcome, CatchContext, CatchResolutionEngine, PendingBite
from angler.catalog import Species, get_enchant
from angler.config.session import (
    CAST_ANIMATION_DELAY,
    CAST_MAX_BASE,
    CAST_MAX_PER_ROD_LEVEL,
    CAST_MIN_DISTANCE,
    MAX_TICK_DELTA,
    NOTHING_BIT_RETURN_DELAY,
)
from angler.config.session_config import SessionConfig
from angler.events import (
    CatchResultEvent,
    EventBus,
    GameEventEndedEvent,
    GameEventStartedEvent,
    MissionCompletedEvent,
    PhaseChangedEvent,
    ProfileChangedEvent,
    ToastEvent,
    WeatherUpdatedEvent,
)
from angler.missions import MissionTracker
from angler.profile import PlayerProfile
from angler.protocols import NullRenderer, RigRenderer
from angler.result import Result
from angler import shop
from angler.skill_check import SkillCheck, SkillCheckConfig
from angler.state_machine import SessionPhase, create_session_state_machine
from angler.systems.clock import ClockWeatherSystem
from angler.systems.events import ActiveEvent, EventScheduler
from angler.timers import TimerHandle, TimerScheduler
from angler.util.rng import require_rng_param

logger = logging.getLogger(__name__)


class FishingSession:
    """One player's fishing session.

    Attributes:
        profile: The player profile being played (mutated in place)
        renderer: Visual collaborator notified of cast/reel/reset
        event_bus: Where toasts, catches and state changes are published
        clock: Clock and weather system
        events: Timed global event scheduler
        catch_engine: Bite timing and species selection
        missions: Current mission tracker
        timers: Cooperative timers for the cast delay and bite timer
        autoplay: Auto-play driver
        minigame: Active skill check while PULLING, else None
        frame: Number of ticks processed
    """

    def __init__(
        self,
        profile: Optional[PlayerProfile] = None,
        rng: Optional[random.Random] = None,
        renderer: Optional[RigRenderer] = None,
        config: Optional[SessionConfig] = None,
        event_bus: Optional[EventBus] = None,
        wall_clock: Callable[[], float] = time.time,
    ) -> None:
        """Create a session.

        Args:
            profile: Player profile (a fresh default profile if omitted)
            rng: Session RNG; every random draw goes through it
            renderer: Renderer collaborator (NullRenderer if omitted)
            config: Runtime toggles (auto-play, frame rate, ...)
            event_bus: Shared bus, or a private one if omitted
            wall_clock: Wall-clock seconds, used for event expiry and catch timestamps
        """
        self.rng = require_rng_param(rng, "FishingSession.__init__")
        self.config = config or SessionConfig()
        self.profile = profile if profile is not None else PlayerProfile()
        self.renderer: RigRenderer = renderer if renderer is not None else NullRenderer()
        self.event_bus = event_bus if event_bus is not None else EventBus()
        self._wall_clock = wall_clock

        self.frame = 0
        self.phases = create_session_state_machine(track_history=True)
        self.timers = TimerScheduler()
        self.clock = ClockWeatherSystem(rng=self.rng)
        self.events = EventScheduler(rng=self.rng, clock=wall_clock)
        self.catch_engine = CatchResolutionEngine(rng=self.rng)
        self.missions = MissionTracker(self.profile.current_mission, rng=self.rng)
        self.autoplay = AutoPlayDriver(self, enabled=self.config.auto_play)

        self.cast_distance = 0
        self.hooked_species: Optional[Species] = None
        self.minigame: Optional[SkillCheck] = None
        self.lights_on = False
        self.last_outcome: Optional[BiteOutcome] = None
        self._pending: Optional[TimerHandle] = None
        self._closed = False

        if self.events.restore(self.profile.saved_event):
            logger.info("Resumed event %s", self.profile.saved_event.display_name)
        else:
            self.profile.saved_event = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def phase(self) -> SessionPhase:
        return self.phases.state

    @property
    def auto_play(self) -> bool:
        return self.autoplay.enabled

    @property
    def active_event(self) -> Optional[ActiveEvent]:
        return self.events.active_event

    @property
    def closed(self) -> bool:
        return self._closed

    def catch_context(self) -> CatchContext:
        """Conditions the catch engine reads, as of right now."""
        event = self.events.active_event
        return CatchContext(
            weather=self.clock.snapshot(),
            rod_level=self.profile.rod_level,
            equipped_enchant=self.profile.equipped_enchant,
            active_event=event.type if event else None,
        )

    def skill_check_config(self) -> SkillCheckConfig:
        return SkillCheckConfig(
            rod_level=self.profile.rod_level,
            enchant=self.profile.equipped_enchant,
            auto=self.autoplay.enabled,
        )

    # ------------------------------------------------------------------
    # Player commands
    # ------------------------------------------------------------------

    def cast(self) -> bool:
        """Cast the line. Only valid while IDLE."""
        if self._closed or self.phase is not SessionPhase.IDLE:
            logger.debug("cast() ignored in %s", self.phase.value)
            return False

        upper = CAST_MAX_BASE + self.profile.rod_level * CAST_MAX_PER_ROD_LEVEL
        distance = math.floor(self.rng.uniform(CAST_MIN_DISTANCE, upper))
        self._transition(SessionPhase.CASTING, "cast")
        self.cast_distance = distance

        if distance > self.profile.max_distance:
            self.profile.max_distance = distance
            self._profile_changed("max_distance")
        if not self.autoplay.enabled:
            self._toast(f"Casted {distance}ft!")

        self.renderer.trigger_cast_animation(distance)
        self._pending = self.timers.schedule(CAST_ANIMATION_DELAY, self._on_cast_landed, "cast")
        return True

    def pull(self) -> bool:
        """Pull the line: reel in a bite, or give up early while floating."""
        if self._closed:
            return False

        if self.phase is SessionPhase.FLOATING:
            self.timers.cancel(self._pending)
            self._pending = None
            self._transition(SessionPhase.IDLE, "pulled too early")
            self._toast("Pulled too early!")
            self.renderer.reset_rig()
            return True

        if self.phase is SessionPhase.BITE and self.hooked_species is not None:
            self._transition(SessionPhase.PULLING, "pull")
            self.minigame = SkillCheck(self.hooked_species, self.skill_check_config, rng=self.rng)
            self.renderer.set_reeling_visual(True)
            return True

        logger.debug("pull() ignored in %s", self.phase.value)
        return False

    def minigame_input(self, held: bool) -> bool:
        """Forward the hold/release input to the running mini-game."""
        if self.minigame is None:
            return False
        self.minigame.set_holding(held)
        return True

    def toggle_lights(self) -> bool:
        self.lights_on = bool(self.renderer.toggle_lights())
        self._toast("Lights ON" if self.lights_on else "Lights OFF")
        return self.lights_on

    def set_auto_play(self, enabled: bool) -> None:
        self.autoplay.set_enabled(enabled)
        logger.info("Auto-play %s", "enabled" if enabled else "disabled")

    # ------------------------------------------------------------------
    # Shop
    # ------------------------------------------------------------------

    def upgrade_rod(self) -> Result[PlayerProfile, str]:
        result = shop.upgrade_rod(self.profile)
        return self._after_shop(result, "upgrade_rod", lambda: f"Upgraded to Lvl {self.profile.rod_level}")

    def roll_enchant(self) -> Result[PlayerProfile, str]:
        result = shop.roll_enchant(self.profile, rng=self.rng)

        def message() -> str:
            enchant = get_enchant(self.profile.equipped_enchant)
            return f"Got {enchant.display_name} Enchant!"

        return self._after_shop(result, "roll_enchant", message)

    def buy_boat(self, boat_id: str) -> Result[PlayerProfile, str]:
        owned = boat_id in self.profile.owned_boats
        result = shop.buy_boat(self.profile, boat_id)
        return self._after_shop(
            result, "buy_boat", lambda: f"Equipped {boat_id}" if owned else "Bought & Equipped!"
        )

    def buy_skin(self, skin_id: str) -> Result[PlayerProfile, str]:
        owned = skin_id in self.profile.owned_skins
        result = shop.buy_skin(self.profile, skin_id)
        return self._after_shop(
            result, "buy_skin", lambda: "Equipped Skin" if owned else "Purchased Skin!"
        )

    def sell(self, item_id: str) -> Result[PlayerProfile, str]:
        item = self.profile.find_item(item_id)
        result = shop.sell(self.profile, item_id)
        return self._after_shop(result, "sell", lambda: f"Sold {item.name} (+{item.value}G)")

    def _after_shop(
        self,
        result: Result[PlayerProfile, str],
        reason: str,
        message: Callable[[], str],
    ) -> Result[PlayerProfile, str]:
        if result.is_ok():
            self._toast(message())
            self._profile_changed(reason)
        else:
            self._toast(result.error)
        return result

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def update(self, dt: float) -> None:
        """Advance the session by one frame of ``dt`` seconds."""
        if self._closed:
            return
        dt = max(0.0, min(dt, MAX_TICK_DELTA))
        self.frame += 1

        clock_result = self.clock.update(dt, self.frame)
        if clock_result.details.get("hour_changed") or clock_result.details.get("weather_changed"):
            self.event_bus.emit(
                WeatherUpdatedEvent(
                    weather=self.clock.weather.value,
                    time_of_day=self.clock.time_of_day,
                    frame=self.frame,
                )
            )

        self.timers.advance(dt)

        event_result = self.events.update(dt, self.frame)
        ended = event_result.details.get("ended")
        started = event_result.details.get("started")
        if ended is not None:
            self._toast("Event Ended")
            self.event_bus.emit(GameEventEndedEvent(ended.type.value, ended.display_name))
        if started is not None:
            self._toast(f"EVENT STARTED: {started.display_name}!")
            self.event_bus.emit(
                GameEventStartedEvent(started.type.value, started.display_name, started.end_timestamp)
            )
        if ended is not None or started is not None:
            self.profile.saved_event = self.events.active_event
            self._profile_changed("event")

        if self.minigame is not None:
            self.minigame.step(dt)
            if self.minigame.finished:
                self._finish_minigame(self.minigame.succeeded)

        self.autoplay.update(dt)

    def close(self) -> None:
        """Stop the session: cancel timers and drop any mini-game silently."""
        self.timers.cancel(self._pending)
        self._pending = None
        self.timers.cancel_all()
        self.minigame = None
        self.hooked_species = None
        self.phases.force_state(SessionPhase.IDLE, self.frame, "session closed")
        self._closed = True

    # ------------------------------------------------------------------
    # Timer callbacks
    # ------------------------------------------------------------------

    def _on_cast_landed(self) -> None:
        self._pending = None
        self._transition(SessionPhase.FLOATING, "bobber landed")
        bite = self.catch_engine.schedule_bite(self.cast_distance, self.catch_context())
        self._pending = self.timers.schedule(
            bite.delay_seconds, lambda: self._on_bite_timer(bite), "bite"
        )

    def _on_bite_timer(self, bite: PendingBite) -> None:
        self._pending = None
        outcome = self.catch_engine.resolve(bite.cast_distance, self.catch_context())
        self.last_outcome = outcome

        if outcome.species is not None:
            self.hooked_species = outcome.species
            self._transition(SessionPhase.BITE, "bite")
            if not self.autoplay.enabled:
                self._toast("Something's biting!")
            return

        if not self.autoplay.enabled:
            self._toast("Nothing bit...")
        self._pending = self.timers.schedule(
            NOTHING_BIT_RETURN_DELAY, self._on_nothing_bit, "nothing-bit"
        )

    def _on_nothing_bit(self) -> None:
        self._pending = None
        self._transition(SessionPhase.IDLE, "nothing bit")
        self.renderer.reset_rig()

    # ------------------------------------------------------------------
    # Mini-game resolution
    # ------------------------------------------------------------------

    def _finish_minigame(self, success: bool) -> None:
        species = self.hooked_species
        self.minigame = None
        self.hooked_species = None
        self.renderer.set_reeling_visual(False)

        landed = success and species is not None
        value = 0
        if landed:
            value = self._land_catch(species)
        else:
            self._toast("The fish got away...")

        self._transition(SessionPhase.IDLE, "landed" if landed else "got away")
        self.renderer.reset_rig()
        self.event_bus.emit(
            CatchResultEvent(
                species_id=species.id if landed else None,
                species_name=species.display_name if species else "",
                value=value,
                frame=self.frame,
            )
        )

    def _land_catch(self, species: Species) -> int:
        event = self.events.active_event
        value = self.catch_engine.catch_value(
            species, self.profile.rod_level, event.type if event else None
        )
        self.profile.record_catch(species, value, ts=self._wall_clock())

        progress = self.missions.record_catch(species.id, self.profile.rod_level)
        self.profile.current_mission = progress.mission
        if progress.completed is not None:
            self.profile.gold += progress.reward_gold
            self._toast(f"Mission Complete! +{progress.reward_gold} Gold")
            self.event_bus.emit(
                MissionCompletedEvent(
                    species_id=progress.completed.target_species_id,
                    reward_gold=progress.reward_gold,
                    next_species_id=progress.mission.target_species_id,
                    frame=self.frame,
                )
            )

        if self.autoplay.enabled:
            self._toast(f"Caught {species.display_name} (+{value}G)")
        logger.info("Caught %s worth %d at %.0f", species.display_name, value, self.cast_distance)
        self._profile_changed("catch")
        return value

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _transition(self, target: SessionPhase, reason: str) -> bool:
        previous = self.phases.state
        result = self.phases.try_transition(target, self.frame, reason)
        if result.is_err():
            logger.debug("Rejected transition (%s): %s", reason, result.error)
            return False
        logger.debug("Phase %s -> %s (%s)", previous.value, target.value, reason)
        self.event_bus.emit(PhaseChangedEvent(previous.value, target.value, reason, self.frame))
        return True

    def _toast(self, message: str) -> None:
        self.event_bus.emit(ToastEvent(message=message, frame=self.frame))

    def _profile_changed(self, reason: str) -> None:
        self.event_bus.emit(ProfileChangedEvent(reason=reason, frame=self.frame))

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready view of the whole session."""
        event = self.events.active_event
        now = self._wall_clock()
        return {
            "frame": self.frame,
            "phase": self.phase.value,
            "auto_play": self.autoplay.enabled,
            "lights_on": self.lights_on,
            "cast_distance": self.cast_distance,
            "clock": self.clock.snapshot().to_dict(),
            "active_event": (
                {**event.to_dict(), "seconds_remaining": event.seconds_remaining(now)}
                if event
                else None
            ),
            "hooked_species": self.hooked_species.id if self.hooked_species else None,
            "minigame": self.minigame.snapshot().to_dict() if self.minigame else None,
            "profile": self.profile.to_dict(),
        }

    def get_debug_info(self) -> Dict[str, Any]:
        """Phase history and per-system counters for the debug endpoint."""
        return {
            "frame": self.frame,
            "phase": self.phase.value,
            "closed": self._closed,
            "pending_timers": self.timers.pending_count(),
            "systems": [self.clock.get_debug_info(), self.events.get_debug_info()],
            "recent_transitions": [
                {
                    "from": t.from_state.value,
                    "to": t.to_state.value,
                    "frame": t.frame,
                    "reason": t.reason,
                }
                for t in self.phases.history[-10:]
            ],
        }
