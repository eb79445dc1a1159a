"""
Goal model shared by the templates and the GoalManager.

A Goal is a long-running objective ("reach level 5", "win 10 duels") that
biases action scoring for many decision cycles. Goals are plain mutable
records owned by exactly one GoalManager; everything else sees copies.

Targets are small frozen payloads, one class per goal type. Payloads with a
``start_*`` field measure progress relative to a baseline captured from the
character when the goal was created (see GoalTemplate.capture_baseline).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TypeAlias

from playtest_ai import config
from playtest_ai.types import Timestamp


class GoalType(Enum):
    LEVEL_UP = "level_up"
    EARN_GOLD = "earn_gold"
    JOIN_GANG = "join_gang"
    MAX_SKILL = "max_skill"
    COMPLETE_QUEST = "complete_quest"
    WIN_DUELS = "win_duels"
    UNLOCK_LOCATION = "unlock_location"
    CRAFT_ITEM = "craft_item"
    MAKE_FRIENDS = "make_friends"
    EXPLORE = "explore"
    BUY_PROPERTY = "buy_property"
    ACHIEVE_RANK = "achieve_rank"
    COLLECT_ITEMS = "collect_items"
    DEFEAT_BOSS = "defeat_boss"


class GoalState(Enum):
    """Lifecycle of a goal. There is no transition back to ACTIVE."""

    ACTIVE = auto()
    COMPLETED = auto()
    FAILED = auto()


# Sentinel used by targets that accept "whatever comes first".
ANY = "any"


# =============================================================================
# TARGET PAYLOADS
# =============================================================================


@dataclass(frozen=True, slots=True)
class LevelTarget:
    level: int


@dataclass(frozen=True, slots=True)
class GoldTarget:
    amount: float
    start_gold: float = 0.0
    purpose: str | None = None


@dataclass(frozen=True, slots=True)
class GangTarget:
    kind: str = ANY  # "any", "reputable", "outlaw"
    min_reputation: float | None = None


@dataclass(frozen=True, slots=True)
class SkillTarget:
    skill: str = ANY  # "any" tracks the character's best skill
    level: int = 100


@dataclass(frozen=True, slots=True)
class QuestTarget:
    count: int
    quest_type: str = ANY
    start_count: int = 0


@dataclass(frozen=True, slots=True)
class DuelTarget:
    wins: int
    start_wins: int = 0


@dataclass(frozen=True, slots=True)
class LocationTarget:
    location: str = ANY


@dataclass(frozen=True, slots=True)
class CraftTarget:
    count: int
    item_type: str = ANY
    start_count: int = 0


@dataclass(frozen=True, slots=True)
class FriendTarget:
    friends: int
    start_friends: int = 0


@dataclass(frozen=True, slots=True)
class ExploreTarget:
    count: int
    start_count: int = 0


@dataclass(frozen=True, slots=True)
class PurchaseTarget:
    item_type: str = ANY
    min_cost: float = 100.0
    start_count: int = 0


@dataclass(frozen=True, slots=True)
class RankTarget:
    faction: str = ANY
    rank: str = "respected"
    reputation: float = 100.0


@dataclass(frozen=True, slots=True)
class CollectTarget:
    count: int
    item_type: str = ANY
    start_count: int = 0


@dataclass(frozen=True, slots=True)
class BossTarget:
    boss: str = ANY
    difficulty: str = "medium"


GoalTarget: TypeAlias = (
    LevelTarget
    | GoldTarget
    | GangTarget
    | SkillTarget
    | QuestTarget
    | DuelTarget
    | LocationTarget
    | CraftTarget
    | FriendTarget
    | ExploreTarget
    | PurchaseTarget
    | RankTarget
    | CollectTarget
    | BossTarget
)

TARGET_TYPES: dict[GoalType, type] = {
    GoalType.LEVEL_UP: LevelTarget,
    GoalType.EARN_GOLD: GoldTarget,
    GoalType.JOIN_GANG: GangTarget,
    GoalType.MAX_SKILL: SkillTarget,
    GoalType.COMPLETE_QUEST: QuestTarget,
    GoalType.WIN_DUELS: DuelTarget,
    GoalType.UNLOCK_LOCATION: LocationTarget,
    GoalType.CRAFT_ITEM: CraftTarget,
    GoalType.MAKE_FRIENDS: FriendTarget,
    GoalType.EXPLORE: ExploreTarget,
    GoalType.BUY_PROPERTY: PurchaseTarget,
    GoalType.ACHIEVE_RANK: RankTarget,
    GoalType.COLLECT_ITEMS: CollectTarget,
    GoalType.DEFEAT_BOSS: BossTarget,
}


def check_target(goal_type: GoalType, target: GoalTarget) -> None:
    """Raise TypeError if ``target`` is not the payload class for ``goal_type``."""
    expected = TARGET_TYPES[goal_type]
    if not isinstance(target, expected):
        msg = (
            f"{goal_type.value} goals need a {expected.__name__} target, "
            f"got {type(target).__name__}"
        )
        raise TypeError(msg)


# =============================================================================
# GOAL
# =============================================================================


def clamp_priority(priority: int) -> int:
    return max(config.GOAL_PRIORITY_MIN, min(config.GOAL_PRIORITY_MAX, priority))


def clamp_progress(progress: float) -> float:
    return max(0.0, min(1.0, progress))


@dataclass(slots=True)
class Goal:
    """A single objective with progress tracking.

    Attributes:
        priority: 1 (background) to 10 (drop everything). Clamped on creation
            and on every adjustment.
        progress: 0.0 to 1.0, recomputed from the context each update. Not
            monotonic: spending gold lowers an earn_gold goal's progress.
        follow_up_goals: Goals the caller wants added when this one completes.
        prerequisites: Ids of goals that must be completed before this goal
            is pursued. Unmet prerequisites block, they never fail a goal.
        related_actions: Action names that count towards this goal in
            addition to the built-in keyword table.
    """

    id: str
    goal_type: GoalType
    name: str
    description: str
    priority: int
    target: GoalTarget
    progress: float = 0.0
    deadline: Timestamp | None = None
    created_at: Timestamp = 0.0
    completed_at: Timestamp | None = None
    state: GoalState = GoalState.ACTIVE
    follow_up_goals: list[Goal] = field(default_factory=list)
    prerequisites: tuple[str, ...] = ()
    related_actions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        check_target(self.goal_type, self.target)
        self.priority = clamp_priority(self.priority)
        self.progress = clamp_progress(self.progress)

    @property
    def is_active(self) -> bool:
        return self.state is GoalState.ACTIVE

    def adjust_priority(self, delta: int) -> None:
        self.priority = clamp_priority(self.priority + delta)


@dataclass(frozen=True, slots=True)
class FollowUp:
    """Draft of a goal produced by a template, turned into a Goal by the manager."""

    goal_type: GoalType
    target: GoalTarget
    priority: int


# =============================================================================
# NAMES & DESCRIPTIONS
# =============================================================================


def _or_any(value: str, fallback: str) -> str:
    return fallback if value == ANY else value


def goal_name(goal_type: GoalType, target: GoalTarget) -> str:
    """Short human-readable title, e.g. "Reach Level 5"."""
    match target:
        case LevelTarget(level=level):
            return f"Reach Level {level}"
        case GoldTarget(amount=amount):
            return f"Earn {amount:g} Gold"
        case GangTarget():
            return "Join a Gang"
        case SkillTarget(skill=skill):
            return f"Master {_or_any(skill, 'a skill')}"
        case QuestTarget(count=count):
            return f"Complete {count} Quest(s)"
        case DuelTarget(wins=wins):
            return f"Win {wins} Duel(s)"
        case LocationTarget(location=location):
            return f"Unlock {_or_any(location, 'a Location')}"
        case CraftTarget(count=count):
            return f"Craft {count} Item(s)"
        case FriendTarget(friends=friends):
            return f"Make {friends} Friend(s)"
        case ExploreTarget(count=count):
            return f"Visit {count} Location(s)"
        case PurchaseTarget(item_type=item_type):
            return f"Purchase {_or_any(item_type, 'Property')}"
        case RankTarget(rank=rank):
            return f"Achieve {rank}"
        case CollectTarget(count=count):
            return f"Collect {count} Item(s)"
        case BossTarget(boss=boss):
            return f"Defeat {_or_any(boss, 'a Boss')}"
    return f"Unknown Goal ({goal_type.value})"


def goal_description(goal_type: GoalType, target: GoalTarget) -> str:
    match target:
        case LevelTarget(level=level):
            return f"Progress your character to level {level}"
        case GoldTarget(amount=amount):
            return f"Accumulate {amount:g} gold through jobs, combat, or trading"
        case GangTarget():
            return "Find and join a gang that suits your playstyle"
        case SkillTarget(skill=skill):
            return f"Train {_or_any(skill, 'your skill')} to maximum level"
        case QuestTarget(count=count):
            return f"Complete {count} quest(s) to progress the story"
        case DuelTarget(wins=wins):
            return f"Defeat {wins} opponents in PvP duels"
        case LocationTarget(location=location):
            return f"Travel to and unlock {_or_any(location, 'a new location')}"
        case CraftTarget(count=count):
            return f"Craft {count} item(s) using gathered resources"
        case FriendTarget(friends=friends):
            return f"Add {friends} player(s) to your friends list"
        case ExploreTarget(count=count):
            return f"Visit {count} different location(s)"
        case PurchaseTarget(item_type=item_type):
            return f"Purchase {_or_any(item_type, 'property or equipment')}"
        case RankTarget(rank=rank):
            return f"Reach {rank} in faction reputation"
        case CollectTarget(count=count):
            return f"Gather {count} item(s) for your inventory"
        case BossTarget(boss=boss):
            return f"Defeat {_or_any(boss, 'a boss enemy')}"
    return f"Complete this {goal_type.value} goal"
