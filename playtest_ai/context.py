"""
Read-only game state consumed by the bot brain.

The automation layer refreshes a GameContext every decision cycle and builds
the list of candidate GameActions from the game rules. Both are plain frozen
values: nothing in this package mutates them, so the same context can be
stored inside an ActionOutcome as its snapshot.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from playtest_ai import config
from playtest_ai.types import Population, Seconds, TimeOfDay, Timestamp

if TYPE_CHECKING:
    from playtest_ai.goals.core import Goal
    from playtest_ai.memory import ActionOutcome


@dataclass(frozen=True, slots=True)
class GangMembership:
    name: str
    rank: str = "member"
    influence: float = 0.0


@dataclass(frozen=True, slots=True)
class CharacterSnapshot:
    """Everything the brain knows about its own character this cycle."""

    level: int = 1
    experience: int = 0
    gold: float = 0.0
    energy: float = 100.0
    max_energy: float = 100.0
    health: float = 100.0
    skills: Mapping[str, int] = field(default_factory=dict)
    equipment: tuple[str, ...] = ()
    location: str | None = None
    gang: GangMembership | None = None
    friends: int = 0
    inventory_count: int = 0
    items_crafted: int = 0
    purchases: tuple[str, ...] = ()
    quests_completed: tuple[str, ...] = ()
    duels_won: int = 0
    duels_lost: int = 0
    bosses_defeated: tuple[str, ...] = ()
    locations_visited: tuple[str, ...] = ()
    locations_unlocked: tuple[str, ...] = ()
    reputation: Mapping[str, float] = field(default_factory=dict)

    @property
    def is_equipped(self) -> bool:
        return len(self.equipment) > 0


@dataclass(frozen=True, slots=True)
class WorldSnapshot:
    time_of_day: TimeOfDay | None = None
    faction_standings: Mapping[str, float] = field(default_factory=dict)
    active_events: tuple[str, ...] = ()
    population: Population | None = None
    available_locations: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class GameContext:
    """Snapshot of the game handed to the brain for one decision cycle.

    Attributes:
        character: The bot's own character.
        world: Shared world state (time of day, events, factions).
        goals: Active goals as seen by the caller. Used by the decision
            engine only when it has no GoalManager attached.
        history: Past outcomes. Used only when no BotMemory is attached.
        recent_actions: Tail of recently performed action ids (or types),
            oldest first.
        now: Reference time for deadlines, cooldowns and goal ages.
    """

    character: CharacterSnapshot = field(default_factory=CharacterSnapshot)
    world: WorldSnapshot = field(default_factory=WorldSnapshot)
    goals: tuple[Goal, ...] = ()
    history: tuple[ActionOutcome, ...] = ()
    recent_actions: tuple[str, ...] = ()
    now: Timestamp = 0.0


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Descriptor of an executed action, as stored in an outcome."""

    type: str
    id: str | None = None
    target: str | None = None
    estimated_risk: float = config.DEFAULT_ESTIMATED_RISK


@dataclass(frozen=True, slots=True)
class GameAction:
    """A candidate action offered by the game-rules layer.

    Costs and rewards are in gold-equivalent units. ``risk`` and
    ``success_probability`` are in [0, 1]. ``cooldown`` is in seconds and is
    only enforced when ``last_performed`` is known.
    """

    id: str
    type: str
    name: str
    energy_cost: float = 0.0
    gold_cost: float = 0.0
    expected_reward: float = 0.0
    success_probability: float = 1.0
    risk: float = 0.0
    complexity: int = 1
    requires_browser: bool = True
    min_level: int | None = None
    min_gold: float | None = None
    contributes_to_goal: tuple[str, ...] = ()
    skills_improved: tuple[str, ...] = ()
    available_time: tuple[TimeOfDay, ...] | None = None
    required_location: str | None = None
    cooldown: Seconds | None = None
    last_performed: Timestamp | None = None

    def ref(self, target: str | None = None) -> ActionRef:
        """Describe this action for an ActionOutcome."""
        return ActionRef(
            type=self.type, id=self.id, target=target, estimated_risk=self.risk
        )

    def is_on_cooldown(self, now: Timestamp) -> bool:
        if not self.cooldown or self.last_performed is None:
            return False
        return now - self.last_performed < self.cooldown
