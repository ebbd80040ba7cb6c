"""Session orchestration constants (cast cycle timing and auto-play)."""

# Cast distance is floor(uniform(CAST_MIN_DISTANCE, CAST_MAX_BASE + rod_level * CAST_MAX_PER_ROD_LEVEL))
CAST_MIN_DISTANCE = 40.0
CAST_MAX_BASE = 320.0
CAST_MAX_PER_ROD_LEVEL = 40.0

CAST_ANIMATION_DELAY = 0.9  # Seconds from cast() to FLOATING
NOTHING_BIT_RETURN_DELAY = 1.0  # Seconds from a missed bite back to IDLE

# Auto-play delays (seconds)
AUTO_CAST_DELAY = 1.5
AUTO_PULL_DELAY = 0.4

# Session frame rate used by the backend loop and the headless runner
FRAME_RATE = 30

# Longest tick the session accepts; longer frames are clamped
MAX_TICK_DELTA = 0.05
