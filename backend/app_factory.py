"""Application factory and context for the fishing session API.

All runtime state lives in an ``AppContext`` instead of module-level
globals, so every app instance (and every test) gets its own session,
store and background tasks.

Usage:
------
    # For production (settings from environment)
    app = create_app()

    # For testing
    context = AppContext(data_dir=str(tmp_path), seed=42, run_loop=False)
    app = create_app(context=context)
"""

import logging
import os
import random
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from angler import __version__
from angler.config.server import (
    DEFAULT_API_PORT,
    DEFAULT_DATA_DIR,
    DEFAULT_PROFILE_ID,
    WEBSOCKET_UPDATE_INTERVAL,
)
from angler.config.session_config import SessionConfig
from angler.exceptions import ConfigurationError
from angler.session import FishingSession
from backend.auto_save_service import AutoSaveService
from backend.logging_config import configure_logging
from backend.profile_persistence import JsonProfileStore
from backend.renderer_adapter import BroadcastRenderer
from backend.session_runner import SessionRunner


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class AppContext:
    """Runtime context holding all application state."""

    # Configuration
    api_port: int = field(default_factory=lambda: _env_int("ANGLER_API_PORT") or DEFAULT_API_PORT)
    data_dir: str = field(default_factory=lambda: os.getenv("ANGLER_DATA_DIR", DEFAULT_DATA_DIR))
    profile_id: str = field(default_factory=lambda: os.getenv("ANGLER_PROFILE_ID", DEFAULT_PROFILE_ID))
    seed: Optional[int] = field(default_factory=lambda: _env_int("ANGLER_SEED"))
    auto_play: bool = field(default_factory=lambda: _env_flag("ANGLER_AUTO_PLAY"))
    allowed_origins: List[str] = field(
        default_factory=lambda: os.getenv("ALLOWED_ORIGINS", "*").split(",")
    )
    autosave_debounce_seconds: float = 2.0
    run_loop: bool = True
    wall_clock: Callable[[], float] = time.time

    # Runtime state (initialized during lifespan)
    session: Optional[FishingSession] = None
    runner: Optional[SessionRunner] = None
    store: Optional[JsonProfileStore] = None
    auto_save_service: Optional[AutoSaveService] = None

    # Timing
    server_start_time: float = field(default_factory=time.time)

    # Logging
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("angler.backend"))

    def session_config(self) -> SessionConfig:
        return SessionConfig(
            auto_play=self.auto_play,
            seed=self.seed,
            autosave_debounce_seconds=self.autosave_debounce_seconds,
            data_dir=self.data_dir,
            profile_id=self.profile_id,
        )

    def build_session(self) -> FishingSession:
        """Load the profile and create the session it will be played in."""
        config = self.session_config()
        self.store = JsonProfileStore(config.data_dir, clock=self.wall_clock)
        profile = self.store.load(config.profile_id)
        rng = random.Random(config.seed)
        self.session = FishingSession(
            profile=profile,
            rng=rng,
            renderer=BroadcastRenderer(),
            config=config,
            wall_clock=self.wall_clock,
        )
        return self.session


def create_app(*, context: Optional[AppContext] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        context: Pre-configured AppContext (for testing). If None, one is
            built from environment variables.

    Returns:
        Configured FastAPI application with context attached as app.state.context
    """
    logger = configure_logging()

    if context is None:
        context = AppContext()
    context.logger = logger

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the session on startup; stop the loop and flush saves on shutdown."""
        ctx: AppContext = app.state.context
        try:
            session = ctx.build_session()
            config = session.config
            ctx.runner = SessionRunner(
                session,
                frame_rate=config.frame_rate,
                broadcast_interval=WEBSOCKET_UPDATE_INTERVAL,
            )
            ctx.auto_save_service = AutoSaveService(
                store=ctx.store,
                profile_id=config.profile_id,
                get_profile=lambda: session.profile,
                event_bus=session.event_bus,
                debounce_seconds=config.autosave_debounce_seconds,
            )
            await ctx.auto_save_service.start()

            _setup_routers(app, ctx)

            if ctx.run_loop:
                ctx.runner.start()
            ctx.logger.info(
                "Startup complete (profile=%s, seed=%s, auto_play=%s)",
                config.profile_id,
                config.seed,
                config.auto_play,
            )
            yield
            ctx.logger.info("Received shutdown signal")
        except Exception as e:
            ctx.logger.error(f"Exception in lifespan startup: {e}", exc_info=True)
            raise
        finally:
            if ctx.runner is not None:
                await ctx.runner.stop()
            if ctx.auto_save_service is not None:
                await ctx.auto_save_service.stop()

    app = FastAPI(title="Angler Fishing Session API", version=__version__, lifespan=lifespan)
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=context.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    return app


def _setup_routers(app: FastAPI, ctx: AppContext) -> None:
    """Include all API routers bound to the running session."""
    from backend.routers import session, websocket

    app.include_router(session.setup_router(ctx.runner, ctx.server_start_time))
    app.include_router(websocket.setup_router(ctx.runner))
    ctx.logger.info("API routers configured")
