"""Drives a FishingSession on the server's event loop and fans out its state.

The runner owns the only tick loop: one asyncio task calls
``session.update(dt)`` at the configured frame rate and, every few frames,
broadcasts a state message to connected WebSocket clients. Commands from
HTTP and WebSocket handlers run on the same loop, so the session is never
touched from two places at once.
"""

import asyncio
import dataclasses
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Set

import orjson
from fastapi import WebSocket
from pydantic import ValidationError

from angler.events import (
    CatchResultEvent,
    GameEventEndedEvent,
    GameEventStartedEvent,
    MissionCompletedEvent,
    ToastEvent,
    WeatherUpdatedEvent,
)
from angler.session import FishingSession
from backend.models import (
    AutoPlayCommandData,
    BuyBoatCommandData,
    BuySkinCommandData,
    InputCommandData,
    Notification,
    SellCommandData,
    StateMessage,
)
from backend.renderer_adapter import BroadcastRenderer

logger = logging.getLogger(__name__)

CommandHandler = Callable[[Dict[str, Any]], Optional[Dict[str, Any]]]

# Session events forwarded to clients, keyed by the notification type they become
FORWARDED_EVENTS = {
    ToastEvent: "toast",
    CatchResultEvent: "catch_result",
    WeatherUpdatedEvent: "weather",
    GameEventStartedEvent: "event_started",
    GameEventEndedEvent: "event_ended",
    MissionCompletedEvent: "mission_completed",
}


def _handle_task_exception(task: asyncio.Task) -> None:
    """Log exceptions from background tasks."""
    if task.cancelled():
        logger.debug("Task %s was cancelled", task.get_name())
        return
    exc = task.exception()
    if exc is not None:
        logger.error(
            "Unhandled exception in task %s: %s",
            task.get_name(),
            exc,
            exc_info=(type(exc), exc, exc.__traceback__),
        )


class SessionRunner:
    """Ticks one session and serves its state to clients."""

    def __init__(
        self,
        session: FishingSession,
        frame_rate: int,
        broadcast_interval: int = 2,
    ) -> None:
        self.session = session
        self.frame_rate = frame_rate
        self.broadcast_interval = max(1, broadcast_interval)
        self._clients: Set[WebSocket] = set()
        self._notifications: List[Notification] = []
        self._task: Optional[asyncio.Task] = None
        self._running = False

        for event_type, name in FORWARDED_EVENTS.items():
            session.event_bus.subscribe(event_type, self._make_forwarder(name))

        self._handlers: Dict[str, CommandHandler] = {
            "cast": self._cmd_cast,
            "pull": self._cmd_pull,
            "input": self._cmd_input,
            "toggle_lights": self._cmd_toggle_lights,
            "auto_play": self._cmd_auto_play,
            "upgrade_rod": self._cmd_upgrade_rod,
            "roll_enchant": self._cmd_roll_enchant,
            "buy_boat": self._cmd_buy_boat,
            "buy_skin": self._cmd_buy_skin,
            "sell": self._cmd_sell,
        }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._running

    @property
    def connected_clients(self) -> Set[WebSocket]:
        return self._clients

    def start(self) -> None:
        if self._running:
            logger.warning("Session runner already running")
            return
        self._running = True
        self._task = asyncio.create_task(self._run_loop(), name="session_loop")
        self._task.add_done_callback(_handle_task_exception)
        logger.info("Session loop started at %d fps", self.frame_rate)

    async def stop(self) -> None:
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self.session.close()
        logger.info("Session loop stopped at frame %d", self.session.frame)

    async def _run_loop(self) -> None:
        frame_time = 1.0 / self.frame_rate
        last = time.perf_counter()
        try:
            while self._running:
                now = time.perf_counter()
                self.session.update(now - last)
                last = now

                if self._clients and self.session.frame % self.broadcast_interval == 0:
                    await self.broadcast()

                elapsed = time.perf_counter() - now
                await asyncio.sleep(max(0.0, frame_time - elapsed))
        except asyncio.CancelledError:
            logger.info("Session loop cancelled")
            raise

    # ------------------------------------------------------------------
    # Clients and state
    # ------------------------------------------------------------------

    def add_client(self, websocket: WebSocket) -> None:
        self._clients.add(websocket)
        logger.info("Client connected (%d total)", len(self._clients))

    def remove_client(self, websocket: WebSocket) -> None:
        self._clients.discard(websocket)
        logger.info("Client disconnected (%d remaining)", len(self._clients))

    def get_state(self) -> Dict[str, Any]:
        state = self.session.snapshot()
        renderer = self.session.renderer
        if isinstance(renderer, BroadcastRenderer):
            state["rig"] = renderer.to_dict()
        return state

    def build_message(self, drain: bool = True) -> StateMessage:
        notifications = self._notifications if drain else list(self._notifications)
        if drain:
            self._notifications = []
        return StateMessage(state=self.get_state(), notifications=notifications)

    def serialize_message(self, message: StateMessage) -> bytes:
        return orjson.dumps(message.model_dump())

    async def broadcast(self) -> None:
        payload = self.serialize_message(self.build_message())
        disconnected = set()
        for client in list(self._clients):
            try:
                await client.send_bytes(payload)
            except Exception as e:
                logger.warning("Error sending to client, marking for removal: %s", e)
                disconnected.add(client)
        for client in disconnected:
            self.remove_client(client)

    def _make_forwarder(self, name: str) -> Callable[[Any], None]:
        def forward(event: Any) -> None:
            payload = dataclasses.asdict(event)
            frame = payload.pop("frame", None)
            self._notifications.append(Notification(type=name, frame=frame, payload=payload))

        return forward

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def is_known_command(self, command: str) -> bool:
        return command in self._handlers

    def handle_command(self, command: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run a player command and describe the outcome.

        Args:
            command: Command name ('cast', 'pull', 'input', 'upgrade_rod', ...)
            data: Optional command arguments
        """
        handler = self._handlers.get(command)
        if handler is None:
            logger.warning("Unknown command received: %s", command)
            return self._error(command, f"Unknown command: {command}")
        try:
            return handler(data or {})
        except (ValidationError, KeyError, TypeError, ValueError) as e:
            logger.warning("Bad arguments for %s: %s", command, e)
            return self._error(command, f"Invalid data for {command}: {e}")

    def _response(self, command: str, success: bool, error: Optional[str] = None) -> Dict[str, Any]:
        return {
            "success": success,
            "command": command,
            "error": error,
            "phase": self.session.phase.value,
        }

    def _error(self, command: str, message: str) -> Dict[str, Any]:
        return self._response(command, False, message)

    def _from_flag(self, command: str, accepted: bool) -> Dict[str, Any]:
        if accepted:
            return self._response(command, True)
        return self._error(command, f"{command} not available while {self.session.phase.value}")

    def _from_result(self, command: str, result: Any) -> Dict[str, Any]:
        if result.is_ok():
            return self._response(command, True)
        return self._error(command, result.error)

    def _cmd_cast(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._from_flag("cast", self.session.cast())

    def _cmd_pull(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._from_flag("pull", self.session.pull())

    def _cmd_input(self, data: Dict[str, Any]) -> Dict[str, Any]:
        held = InputCommandData.model_validate(data).held
        return self._from_flag("input", self.session.minigame_input(held))

    def _cmd_toggle_lights(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self.session.toggle_lights()
        return self._response("toggle_lights", True)

    def _cmd_auto_play(self, data: Dict[str, Any]) -> Dict[str, Any]:
        enabled = AutoPlayCommandData.model_validate(data).enabled
        if enabled is None:
            enabled = not self.session.auto_play
        self.session.set_auto_play(enabled)
        return self._response("auto_play", True)

    def _cmd_upgrade_rod(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._from_result("upgrade_rod", self.session.upgrade_rod())

    def _cmd_roll_enchant(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._from_result("roll_enchant", self.session.roll_enchant())

    def _cmd_buy_boat(self, data: Dict[str, Any]) -> Dict[str, Any]:
        boat_id = BuyBoatCommandData.model_validate(data).boat_id
        return self._from_result("buy_boat", self.session.buy_boat(boat_id))

    def _cmd_buy_skin(self, data: Dict[str, Any]) -> Dict[str, Any]:
        skin_id = BuySkinCommandData.model_validate(data).skin_id
        return self._from_result("buy_skin", self.session.buy_skin(skin_id))

    def _cmd_sell(self, data: Dict[str, Any]) -> Dict[str, Any]:
        item_id = SellCommandData.model_validate(data).item_id
        return self._from_result("sell", self.session.sell(item_id))
