"""Clock and weather configuration constants."""

# Day cycle
HOURS_PER_DAY = 24.0
TIME_SCALE = 0.02  # In-game hours per real second (24 / 0.02 = 1200 s per day)
START_TIME_OF_DAY = 8.0  # Sessions begin at 8 AM

# Night runs from 18:00 to 06:00 (exclusive bounds)
NIGHT_STARTS_AFTER = 18.0
NIGHT_ENDS_BEFORE = 6.0

# Weather transitions are rolled once per whole-hour boundary
WEATHER_CHANGE_CHANCE = 0.2

# Categorical distribution used when the weather is resampled (order matters:
# the roll walks this list accumulating probability)
WEATHER_DISTRIBUTION = (
    ("CLEAR", 0.50),
    ("CLOUDY", 0.30),
    ("RAIN", 0.15),
    ("STORM", 0.05),
)
