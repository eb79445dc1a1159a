"""
Configuration constants.

Centralizes the tuning values used by the bot brain. Organized by subsystem
so a balance pass only has to touch this file. Runtime knobs that callers may
override per bot (DecisionOptions, BotMemory sizes) take their defaults from
here.
"""

# =============================================================================
# PERSONALITY
# =============================================================================

# Half-width of the uniform noise applied to each trait by create_variant().
TRAIT_VARIANCE = 0.1

# Bounds for the trait-derived action multiplier.
ACTION_MULTIPLIER_MIN = 0.5
ACTION_MULTIPLIER_MAX = 2.0

# =============================================================================
# GOALS
# =============================================================================

GOAL_PRIORITY_MIN = 1
GOAL_PRIORITY_MAX = 10

# Goals making good progress get bumped until they reach this priority.
PROGRESS_BOOST_THRESHOLD = 0.7
PROGRESS_BOOST_PRIORITY_CAP = 8

# Goals older than this with little progress slowly lose priority.
STALL_AGE_HOURS = 48.0
STALL_PROGRESS_THRESHOLD = 0.3

# (hours until deadline, priority boost), checked in order.
DEADLINE_PRIORITY_BOOSTS: tuple[tuple[float, int], ...] = (
    (24.0, 3),
    (48.0, 2),
    (72.0, 1),
)

# =============================================================================
# MEMORY
# =============================================================================

DEFAULT_MAX_HISTORY_SIZE = 1000
MIN_OCCURRENCES_FOR_CONFIDENCE = 5
COMBO_LENGTH = 3

# Trend detection compares two windows of this size.
TREND_WINDOW = 5
TREND_THRESHOLD = 0.1

# Strategy adaptation looks at the most recent outcomes only.
ADAPT_WINDOW = 20
ADAPT_MIN_SAMPLES = 10
ADAPT_SUCCESS_THRESHOLD = 0.4

# Overall performance trend in get_stats().
STATS_TREND_WINDOW = 10

# Pattern bucket sizes.
HEALTH_BUCKET = 20
ENERGY_BUCKET = 25
LEVEL_BUCKET = 5

# Neutral success rate reported for action types with no history.
NEUTRAL_SUCCESS_RATE = 0.5
DEFAULT_ESTIMATED_RISK = 0.5

# =============================================================================
# DECISIONS
# =============================================================================

DEFAULT_RANDOM_VARIANCE = 0.2
DEFAULT_MIN_ENERGY_THRESHOLD = 10.0

# Score history kept per action id, for inspection only.
SCORE_HISTORY_SIZE = 100

# Expected value is normalized against this reward.
MAX_EXPECTED_REWARD = 1000.0

# Combat is off the table below this health.
MIN_COMBAT_HEALTH = 30.0

# Candidates above this risk are dropped when risky actions are disallowed.
RISKY_ACTION_THRESHOLD = 0.8

PREFERRED_MULTIPLIER = 1.5
AVOIDED_MULTIPLIER = 0.3

# Hard vetoes applied by the situational bonus.
WRONG_TIME_PENALTY = -50.0
COOLDOWN_PENALTY = -100.0

# Bonus for an action whose type completes a learned high-confidence combo.
COMBO_BONUS = 10.0
