"""Skill-check (reel-in mini-game) tuning constants.

Movement constants are expressed per 60 Hz frame and scaled by ``dt * 60``
so the mini-game behaves the same at any render rate.
"""

# Track geometry (units)
TRACK_HEIGHT = 200.0
TARGET_HEIGHT = 24.0
BAR_BASE_HEIGHT = 65.0
BAR_BASE_HEIGHT_STEADY = 85.0
BAR_MIN_HEIGHT = 40.0
BAR_HEIGHT_PER_DIFFICULTY = 2.0
OVERLAP_TOLERANCE = 4.0

# Frame step limits
MAX_FRAME_DELTA = 0.05  # Seconds; larger deltas are clamped to avoid catch-up spikes
REFERENCE_FPS = 60.0

# Player physics
GRAVITY = 0.9
BOOST = 1.5
GRAVITY_STEADY = 0.7
BOOST_STEADY = 1.2
BOOST_PER_ROD_LEVEL = 0.05
FRICTION = 0.93  # Velocity multiplier per tick
BOUNCE_DAMPING = 0.5
AUTO_SMOOTHING = 0.15  # Auto-play lerp factor per tick

# Target (fish) AI
TARGET_TIMER_BASE = 40.0  # Frames between new goals
TARGET_TIMER_SPREAD = 100.0
TARGET_TIMER_SPREAD_PER_DIFFICULTY = 7.0
TARGET_SPEED_BASE = 0.5
TARGET_SPEED_PER_DIFFICULTY = 0.25
TARGET_SPEED_SPREAD = 0.4
TARGET_GLIDE_FACTOR = 2.0
JITTER_FREQUENCY = 0.008  # Radians per elapsed millisecond
JITTER_BASE = 1.5
JITTER_PER_DIFFICULTY = 0.2

# Progress
INITIAL_PROGRESS = 30.0
MAX_PROGRESS = 100.0
CATCH_RATE_BASE = 25.0
CATCH_RATE_PER_ROD_LEVEL = 3.0
DECAY_RATE_BASE = 5.0
DECAY_RATE_PER_DIFFICULTY = 1.8

# Time limit = max(MIN, BASE - difficulty * PER_DIFFICULTY + uniform(0, SPREAD))
TIME_LIMIT_MIN = 8.0
TIME_LIMIT_BASE = 12.0
TIME_LIMIT_PER_DIFFICULTY = 0.4
TIME_LIMIT_SPREAD = 2.0
