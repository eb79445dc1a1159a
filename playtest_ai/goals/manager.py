"""
GoalManager: owns one bot's goals and drives their lifecycle.

Each update recomputes progress for every active goal. A goal that reaches
1.0 completes and spawns follow-ups from three sources:

1. Goals the caller attached to it (``goal.follow_up_goals``).
2. Its template's follow-ups (what naturally comes next for this goal type).
3. Emergent follow-ups keyed on (archetype, completed goal type), which give
   each personality its recognizable long-term arc: grinders keep levelling,
   explorers keep exploring, social bots keep making friends.

A goal whose deadline passes before completion fails and is dropped. Every
other goal has its priority nudged by deadline proximity, progress and age.
"""

from __future__ import annotations

import copy
import itertools
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, TypeAlias

from playtest_ai import config
from playtest_ai.context import GameContext
from playtest_ai.types import SECONDS_PER_HOUR, Timestamp
from playtest_ai.util import rng

from .core import (
    BossTarget,
    CraftTarget,
    DuelTarget,
    ExploreTarget,
    FollowUp,
    FriendTarget,
    GangTarget,
    Goal,
    GoalState,
    GoalTarget,
    GoalType,
    GoldTarget,
    LevelTarget,
    LocationTarget,
    PurchaseTarget,
    QuestTarget,
    RankTarget,
    SkillTarget,
    check_target,
    clamp_progress,
    goal_description,
    goal_name,
)
from .templates import GOAL_TEMPLATES

if TYPE_CHECKING:
    from playtest_ai.personality import PersonalityProfile
    from playtest_ai.util.rng import RNG

logger = logging.getLogger(__name__)

_rng = rng.get("bots.goals")

# Substrings of an action label that count towards each goal type.
CONTRIBUTING_KEYWORDS: Mapping[GoalType, tuple[str, ...]] = MappingProxyType(
    {
        GoalType.LEVEL_UP: ("combat", "quest", "job", "skill_training", "any"),
        GoalType.EARN_GOLD: ("job", "crime", "sell", "trade", "combat", "quest"),
        GoalType.JOIN_GANG: ("social", "gang"),
        GoalType.MAX_SKILL: ("skill_training", "train", "practice"),
        GoalType.COMPLETE_QUEST: ("quest", "mission", "task"),
        GoalType.WIN_DUELS: ("duel", "pvp", "combat", "fight"),
        GoalType.UNLOCK_LOCATION: ("travel", "explore", "quest"),
        GoalType.CRAFT_ITEM: ("craft", "create", "make"),
        GoalType.MAKE_FRIENDS: ("social", "chat", "friend"),
        GoalType.EXPLORE: ("travel", "explore", "move"),
        GoalType.BUY_PROPERTY: ("shop", "buy", "purchase"),
        GoalType.ACHIEVE_RANK: ("quest", "faction", "reputation"),
        GoalType.COLLECT_ITEMS: ("gather", "loot", "collect", "harvest"),
        GoalType.DEFEAT_BOSS: ("combat", "fight", "boss", "raid"),
    }
)

# Action labels suggested when a goal type is on top.
RECOMMENDED_ACTIONS: Mapping[GoalType, tuple[str, ...]] = MappingProxyType(
    {
        GoalType.LEVEL_UP: ("combat", "quest", "skill_training"),
        GoalType.EARN_GOLD: ("job", "crime", "trade"),
        GoalType.JOIN_GANG: ("gang_search", "social"),
        GoalType.MAX_SKILL: ("skill_training",),
        GoalType.COMPLETE_QUEST: ("quest",),
        GoalType.WIN_DUELS: ("duel", "pvp"),
        GoalType.UNLOCK_LOCATION: ("travel", "explore"),
        GoalType.CRAFT_ITEM: ("craft",),
        GoalType.MAKE_FRIENDS: ("social", "chat"),
        GoalType.EXPLORE: ("travel",),
        GoalType.BUY_PROPERTY: ("shop",),
        GoalType.ACHIEVE_RANK: ("faction_quest",),
        GoalType.COLLECT_ITEMS: ("gather", "loot"),
        GoalType.DEFEAT_BOSS: ("combat_boss",),
    }
)

# Chaos bots get one generated goal of each of these, priorities 10 down to 6.
_CHAOS_GOAL_TYPES = (
    GoalType.LEVEL_UP,
    GoalType.EARN_GOLD,
    GoalType.EXPLORE,
    GoalType.WIN_DUELS,
    GoalType.MAKE_FRIENDS,
)

_Starter: TypeAlias = tuple[GoalType, GoalTarget, int]

_STARTER_GOALS: Mapping[str, tuple[_Starter, ...]] = MappingProxyType(
    {
        "grinder": (
            (GoalType.LEVEL_UP, LevelTarget(5), 10),
            (GoalType.EARN_GOLD, GoldTarget(100), 8),
            (GoalType.MAX_SKILL, SkillTarget(), 7),
        ),
        "social": (
            (GoalType.MAKE_FRIENDS, FriendTarget(5), 10),
            (GoalType.JOIN_GANG, GangTarget(), 9),
        ),
        "explorer": (
            (GoalType.EXPLORE, ExploreTarget(10), 10),
            (GoalType.UNLOCK_LOCATION, LocationTarget(), 9),
            (GoalType.COMPLETE_QUEST, QuestTarget(5, "exploration"), 8),
        ),
        "combat": (
            (GoalType.WIN_DUELS, DuelTarget(10), 10),
            (GoalType.MAX_SKILL, SkillTarget("gunfighting"), 9),
            (GoalType.DEFEAT_BOSS, BossTarget(), 8),
        ),
        "economist": (
            (GoalType.EARN_GOLD, GoldTarget(1000), 10),
            (GoalType.CRAFT_ITEM, CraftTarget(10), 9),
            (GoalType.BUY_PROPERTY, PurchaseTarget("property", min_cost=500), 8),
        ),
        "criminal": (
            (GoalType.EARN_GOLD, GoldTarget(500, purpose="crimes"), 10),
            (GoalType.MAX_SKILL, SkillTarget("stealth"), 8),
            (GoalType.WIN_DUELS, DuelTarget(5), 7),
        ),
        "roleplayer": (
            (GoalType.COMPLETE_QUEST, QuestTarget(5, "story"), 10),
            (GoalType.JOIN_GANG, GangTarget("reputable"), 8),
            (GoalType.ACHIEVE_RANK, RankTarget(), 7),
        ),
    }
)


@dataclass(frozen=True, slots=True)
class GoalStats:
    active_goals: int
    completed_goals: int
    failed_goals: int
    completion_rate: float
    average_priority: float
    average_progress: float


def emergent_follow_ups(
    archetype: str, completed: Goal, context: GameContext
) -> list[FollowUp]:
    """Personality-driven follow-ups that keep each archetype on its arc."""
    character = context.character
    match (archetype, completed.goal_type):
        case ("grinder", GoalType.LEVEL_UP | GoalType.EARN_GOLD):
            return [FollowUp(GoalType.LEVEL_UP, LevelTarget(character.level + 3), 9)]
        case ("explorer", GoalType.EXPLORE | GoalType.UNLOCK_LOCATION):
            return [FollowUp(GoalType.EXPLORE, ExploreTarget(10), 9)]
        case ("social", GoalType.MAKE_FRIENDS | GoalType.JOIN_GANG):
            return [
                FollowUp(GoalType.MAKE_FRIENDS, FriendTarget(character.friends + 5), 8)
            ]
        case ("combat", GoalType.WIN_DUELS | GoalType.DEFEAT_BOSS):
            # Relative target, the baseline is the current win count.
            return [FollowUp(GoalType.WIN_DUELS, DuelTarget(10), 9)]
        case ("economist", GoalType.EARN_GOLD | GoalType.CRAFT_ITEM):
            return [
                FollowUp(GoalType.EARN_GOLD, GoldTarget(character.gold * 1.5), 8)
            ]
    return []


class GoalManager:
    """Tracks the active and completed goals of one bot.

    Active goals are kept sorted by priority, highest first. The sort is
    stable, so goals of equal priority keep their insertion order.

    Args:
        profile: Personality used for targets, priorities and follow-ups.
        context: Optional starting context. Starter goals capture their
            baselines (starting gold, duel wins...) from it.
        rng: Random source. Defaults to the "bots.goals" stream.
    """

    def __init__(
        self,
        profile: PersonalityProfile,
        context: GameContext | None = None,
        *,
        rng: RNG | None = None,
    ) -> None:
        self.profile = profile
        self._rng: RNG = rng or _rng
        self._goals: list[Goal] = []
        self._completed: list[Goal] = []
        self._failed_count = 0
        self._id_counter = itertools.count(1)
        self._initialize_starter_goals(context or GameContext())

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def _initialize_starter_goals(self, context: GameContext) -> None:
        if self.profile.archetype == "chaos":
            for index, goal_type in enumerate(_CHAOS_GOAL_TYPES):
                self.add_goal(
                    self.create_goal(goal_type, priority=10 - index, context=context)
                )
            return

        for goal_type, target, priority in _STARTER_GOALS.get(
            self.profile.archetype, ()
        ):
            self.add_goal(
                self.create_goal(goal_type, target, priority, context=context)
            )

    def create_goal(
        self,
        goal_type: GoalType | str,
        target: GoalTarget | None = None,
        priority: int | None = None,
        *,
        context: GameContext | None = None,
        deadline: Timestamp | None = None,
        prerequisites: Iterable[str] = (),
        related_actions: Iterable[str] = (),
        follow_up_goals: Iterable[Goal] = (),
    ) -> Goal:
        """Build a goal with a fresh id. The goal is not added.

        When ``target`` is omitted the template picks one for this
        personality. Baselines are captured from ``context`` when given.

        Raises:
            ValueError: if ``goal_type`` is not a known goal type.
            TypeError: if ``target`` does not match ``goal_type``.
        """
        goal_type = GoalType(goal_type)
        template = GOAL_TEMPLATES[goal_type]
        context = context or GameContext()

        if target is None:
            target = template.generate_target(context, self.profile, self._rng)
        check_target(goal_type, target)
        target = template.capture_baseline(target, context)

        if priority is None:
            priority = template.get_base_priority(self.profile)

        return Goal(
            id=self._next_id(goal_type),
            goal_type=goal_type,
            name=goal_name(goal_type, target),
            description=goal_description(goal_type, target),
            priority=priority,
            target=target,
            deadline=deadline,
            created_at=context.now,
            follow_up_goals=list(follow_up_goals),
            prerequisites=tuple(prerequisites),
            related_actions=tuple(related_actions),
        )

    def _next_id(self, goal_type: GoalType) -> str:
        # Goals from other managers may already hold an id from our sequence.
        while True:
            goal_id = f"{goal_type.value}-{next(self._id_counter)}"
            if not self._is_tracked(goal_id):
                return goal_id

    def _materialize(self, draft: FollowUp, context: GameContext) -> Goal:
        return self.create_goal(
            draft.goal_type, draft.target, draft.priority, context=context
        )

    def add_goal(self, goal: Goal) -> None:
        """Add a goal to the active set and keep the set sorted.

        Raises:
            ValueError: if a goal with the same id is active or completed.
        """
        if self._is_tracked(goal.id):
            msg = f"Goal {goal.id!r} is already tracked"
            raise ValueError(msg)
        goal.state = GoalState.ACTIVE
        self._goals.append(goal)
        self._sort_goals()

    def _is_tracked(self, goal_id: str) -> bool:
        return any(
            g.id == goal_id for g in itertools.chain(self._goals, self._completed)
        )

    def _sort_goals(self) -> None:
        self._goals.sort(key=lambda g: g.priority, reverse=True)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def update_progress(self, context: GameContext) -> None:
        """Recompute progress and settle every goal that was active on entry.

        Follow-ups created while completing a goal are not evaluated until
        the next update.
        """
        for goal in list(self._goals):
            template = GOAL_TEMPLATES[goal.goal_type]
            goal.progress = clamp_progress(
                template.calculate_progress(goal.target, context)
            )

            if goal.progress >= 1.0:
                self.complete_goal(goal, context)
            elif goal.deadline is not None and context.now > goal.deadline:
                self._fail_goal(goal)
            else:
                self._adjust_priority(goal, context.now)

        self._sort_goals()

    def complete_goal(self, goal: Goal, context: GameContext) -> None:
        """Move ``goal`` to the completed set and add its follow-ups.

        Follow-ups whose id is already tracked (for example one follow-up
        attached to two goals) are skipped, so the follow-up sources merge
        as a union.

        Raises:
            ValueError: if ``goal`` is not an active goal of this manager.
        """
        active = self._find_active(goal.id)
        if active is None:
            msg = f"Goal {goal.id!r} is not active"
            raise ValueError(msg)

        active.state = GoalState.COMPLETED
        active.completed_at = context.now
        active.progress = 1.0
        self._goals.remove(active)
        self._completed.append(active)
        logger.info(f"Goal completed: {active.name} ({active.goal_type.value})")

        for follow_up in active.follow_up_goals:
            if self._is_tracked(follow_up.id):
                logger.debug(
                    f"Skipping follow-up {follow_up.id!r} of {active.name}: "
                    "already tracked"
                )
                continue
            self.add_goal(follow_up)

        template = GOAL_TEMPLATES[active.goal_type]
        drafts = template.get_follow_up_goals(active, context, self.profile, self._rng)
        drafts += emergent_follow_ups(self.profile.archetype, active, context)
        for draft in drafts:
            new_goal = self._materialize(draft, context)
            logger.debug(f"Follow-up goal: {new_goal.name} after {active.name}")
            self.add_goal(new_goal)

    def _fail_goal(self, goal: Goal) -> None:
        goal.state = GoalState.FAILED
        self._goals.remove(goal)
        self._failed_count += 1
        logger.info(f"Goal failed: {goal.name} ({goal.goal_type.value})")

    def _adjust_priority(self, goal: Goal, now: Timestamp) -> None:
        if goal.deadline is not None:
            hours_left = (goal.deadline - now) / SECONDS_PER_HOUR
            for hours, boost in config.DEADLINE_PRIORITY_BOOSTS:
                if hours_left < hours:
                    goal.adjust_priority(boost)
                    break

        if (
            goal.progress > config.PROGRESS_BOOST_THRESHOLD
            and goal.priority < config.PROGRESS_BOOST_PRIORITY_CAP
        ):
            goal.adjust_priority(1)

        age_hours = (now - goal.created_at) / SECONDS_PER_HOUR
        if (
            age_hours > config.STALL_AGE_HOURS
            and goal.progress < config.STALL_PROGRESS_THRESHOLD
        ):
            goal.adjust_priority(-1)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _find_active(self, goal_id: str) -> Goal | None:
        return next((g for g in self._goals if g.id == goal_id), None)

    def is_blocked(self, goal: Goal) -> bool:
        """True while any of the goal's prerequisites is not completed."""
        if not goal.prerequisites:
            return False
        completed_ids = {g.id for g in self._completed}
        return not all(p in completed_ids for p in goal.prerequisites)

    def _pursuable_goals(self) -> list[Goal]:
        return [g for g in self._goals if not self.is_blocked(g)]

    def get_current_goals(self) -> list[Goal]:
        """Copies of the active goals, highest priority first."""
        return copy.deepcopy(self._goals)

    def get_pursuable_goals(self) -> list[Goal]:
        """Copies of the active goals whose prerequisites are met."""
        return copy.deepcopy(self._pursuable_goals())

    def get_completed_goals(self) -> list[Goal]:
        return copy.deepcopy(self._completed)

    def get_top_goal(self) -> Goal | None:
        """The highest-priority unblocked goal, or None."""
        pursuable = self._pursuable_goals()
        return copy.deepcopy(pursuable[0]) if pursuable else None

    def get_recommended_action(self) -> str | None:
        top = self.get_top_goal()
        if top is None:
            return None
        actions = RECOMMENDED_ACTIONS.get(top.goal_type, ())
        return self._rng.choice(actions) if actions else None

    def does_action_contribute_to_goals(self, label: str) -> bool:
        return any(
            goal_accepts_label(goal, label) for goal in self._pursuable_goals()
        )

    def get_stats(self) -> GoalStats:
        active = len(self._goals)
        completed = len(self._completed)
        total = active + completed
        return GoalStats(
            active_goals=active,
            completed_goals=completed,
            failed_goals=self._failed_count,
            completion_rate=completed / total if total else 0.0,
            average_priority=(
                sum(g.priority for g in self._goals) / active if active else 0.0
            ),
            average_progress=(
                sum(g.progress for g in self._goals) / active if active else 0.0
            ),
        )


def goal_accepts_label(goal: Goal, label: str) -> bool:
    """True if an action label counts towards ``goal``.

    Matches the goal id, the goal's own related actions, or the built-in
    keyword table for its type. All comparisons ignore case.
    """
    label_lower = label.lower()
    if label_lower == goal.id.lower():
        return True
    if any(r.lower() in label_lower for r in goal.related_actions):
        return True
    keywords = CONTRIBUTING_KEYWORDS.get(goal.goal_type, ())
    return any(keyword in label_lower for keyword in keywords)
