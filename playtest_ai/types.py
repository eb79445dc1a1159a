from __future__ import annotations

from enum import Enum
from typing import Literal, TypeAlias

# =============================================================================
# TIME-RELATED TYPES
# =============================================================================

# Wall-clock time in seconds, always supplied by the caller. The core never
# reads a clock of its own.
Timestamp: TypeAlias = float

# A span of time in seconds (deadlines, cooldowns, durations).
Seconds: TypeAlias = float

TimeOfDay: TypeAlias = Literal["morning", "afternoon", "evening", "night"]

TIMES_OF_DAY: tuple[TimeOfDay, ...] = ("morning", "afternoon", "evening", "night")

SECONDS_PER_MINUTE: Seconds = 60.0
SECONDS_PER_HOUR: Seconds = 60.0 * SECONDS_PER_MINUTE
SECONDS_PER_DAY: Seconds = 24.0 * SECONDS_PER_HOUR

# =============================================================================
# PERSONALITY TYPES
# =============================================================================

ArchetypeId: TypeAlias = Literal[
    "grinder",
    "social",
    "explorer",
    "combat",
    "economist",
    "criminal",
    "roleplayer",
    "chaos",
]

PlayStyle: TypeAlias = Literal["efficient", "immersive", "chaotic"]

Population: TypeAlias = Literal["low", "medium", "high"]

# =============================================================================
# RANDOMNESS
# =============================================================================

# Master seed for the rng streams. None means system entropy.
RandomSeed: TypeAlias = int | str | None

# =============================================================================
# LEARNING
# =============================================================================


class Trend(Enum):
    """Direction of a success rate over the most recent samples."""

    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"
