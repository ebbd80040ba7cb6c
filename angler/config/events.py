"""Timed global event constants (Gold Rush, Lucky Waters, Feeding Frenzy)."""

EVENT_CHECK_INTERVAL = 5.0  # Seconds between scheduler checks
EVENT_START_CHANCE = 0.05  # Per check, only when no event is active

# (type, display name, duration in seconds)
EVENT_CATALOG = (
    ("GOLD_RUSH", "Gold Rush", 120.0),
    ("LUCKY_WATERS", "Lucky Waters", 180.0),
    ("FEEDING_FRENZY", "Feeding Frenzy", 120.0),
)
