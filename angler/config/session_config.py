"""Runtime configuration for a fishing session."""

from dataclasses import dataclass
from typing import Optional

from angler.config.server import DEFAULT_DATA_DIR, DEFAULT_PROFILE_ID
from angler.config.session import FRAME_RATE


@dataclass
class SessionConfig:
    """Configuration toggles for session runtime behavior.

    Attributes:
        auto_play: Drive cast()/pull() automatically and run the mini-game in auto mode.
        seed: Optional seed for the session RNG (None = nondeterministic).
        frame_rate: Ticks per second for loops that drive the session.
        autosave_debounce_seconds: Quiet period before a dirty profile is saved.
        data_dir: Directory for persisted profiles.
        profile_id: Which profile file the backend loads and saves.
    """

    auto_play: bool = False
    seed: Optional[int] = None
    frame_rate: int = FRAME_RATE
    autosave_debounce_seconds: float = 2.0
    data_dir: str = DEFAULT_DATA_DIR
    profile_id: str = DEFAULT_PROFILE_ID
