"""
Decision core for autonomous playtest bots.

A bot's brain is a triad owned per agent: a GoalManager for long-running
objectives, a BotMemory that learns from action outcomes, and a
DecisionEngine that scores candidate actions against both. Personality
profiles bias all three, and create_bot() wires a triad to its own seeded
random streams.
"""

from __future__ import annotations

from .bot import BotBrain, create_bot
from .context import (
    ActionRef,
    CharacterSnapshot,
    GameAction,
    GameContext,
    GangMembership,
    WorldSnapshot,
)
from .decision import (
    DecisionEngine,
    DecisionOptions,
    NoCandidatesError,
    ScoreBreakdown,
    ScoredAction,
    explain_decision,
)
from .goals import Goal, GoalManager, GoalState, GoalType
from .memory import ActionOutcome, BotMemory
from .personality import (
    ARCHETYPES,
    PersonalityProfile,
    PersonalityTraits,
    UnknownArchetypeError,
    create_profile,
    create_random_profile,
    create_variant,
)

__all__ = [
    "ARCHETYPES",
    "ActionOutcome",
    "ActionRef",
    "BotBrain",
    "BotMemory",
    "CharacterSnapshot",
    "DecisionEngine",
    "DecisionOptions",
    "GameAction",
    "GameContext",
    "GangMembership",
    "Goal",
    "GoalManager",
    "GoalState",
    "GoalType",
    "NoCandidatesError",
    "PersonalityProfile",
    "PersonalityTraits",
    "ScoreBreakdown",
    "ScoredAction",
    "UnknownArchetypeError",
    "WorldSnapshot",
    "create_bot",
    "create_profile",
    "create_random_profile",
    "create_variant",
    "explain_decision",
]
