"""Mission generation constants.

These are tuned values carried over from playtesting; they have no derivation
beyond "early missions should pay well".
"""

# Difficulty ceiling: rod level 1 only gets difficulty-1 targets, otherwise
# min(MISSION_MAX_DIFFICULTY, rod_level + MISSION_DIFFICULTY_HEADROOM)
MISSION_STARTER_DIFFICULTY = 1
MISSION_DIFFICULTY_HEADROOM = 2
MISSION_MAX_DIFFICULTY = 10

# Required count is floor(uniform(min, max))
MISSION_STARTER_COUNT_RANGE = (2, 4)
MISSION_COUNT_RANGE = (3, 6)

# Reward = floor(base_value * required_count * multiplier)
MISSION_LOW_LEVEL_THRESHOLD = 3  # rod levels up to and including this are "low"
MISSION_LOW_LEVEL_MULTIPLIER = 2.0
MISSION_REWARD_MULTIPLIER = 1.2
MISSION_FALLBACK_BASE_VALUE = 20

# Mission every new profile starts with
STARTER_MISSION_SPECIES = "common"
STARTER_MISSION_COUNT = 3
STARTER_MISSION_REWARD = 300
