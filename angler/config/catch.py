"""Bite scheduling and species selection constants."""

# Bite delay (milliseconds). The delay is drawn uniformly from
# [BITE_DELAY_MIN_MS, max] where max depends on weather and events.
BITE_DELAY_MIN_MS = 1000.0
BITE_DELAY_MAX_MS = 4000.0
BITE_DELAY_MAX_RAIN_MS = 2500.0
BITE_DELAY_MAX_STORM_MS = 1500.0
FEEDING_FRENZY_DELAY_FACTOR = 0.5

# Bite chance = base + rod_level * bonus - distance penalty
BASE_BITE_CHANCE = 0.2
ROD_LEVEL_BITE_BONUS = 0.05
DISTANCE_PENALTY_START = 100.0  # No penalty for casts up to this distance
DISTANCE_PENALTY_PER_UNIT = 0.001

# Rarity weight multipliers
LUCKY_ENCHANT_MIN_DIFFICULTY = 3  # strictly greater than
LUCKY_ENCHANT_MULTIPLIER = 1.5
DEEP_ENCHANT_MIN_DISTANCE = 150.0  # strictly greater than
DEEP_ENCHANT_MULTIPLIER = 1.8
LUCKY_WATERS_MIN_DIFFICULTY = 5  # greater or equal
LUCKY_WATERS_MULTIPLIER = 2.5

# Catch value = floor(base * (1 + rod_level * ROD_VALUE_BONUS) + uniform(0, CATCH_VALUE_JITTER))
ROD_VALUE_BONUS = 0.2
CATCH_VALUE_JITTER = 20.0
GOLD_RUSH_VALUE_MULTIPLIER = 1.5
