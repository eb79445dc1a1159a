"""
One GoalTemplate per goal type.

A template knows four things about its goal type: what target a given
personality would pick, how far a character is towards a target, which goals
naturally come next once the goal is done, and how much this personality
cares about the goal type in the first place.

Templates are stateless and shared. Randomness comes in through the ``rng``
argument so the GoalManager's stream (or an injected one) drives every draw.
"""

from __future__ import annotations

import abc
from dataclasses import replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Generic, TypeVar

from .core import (
    ANY,
    BossTarget,
    CollectTarget,
    CraftTarget,
    DuelTarget,
    ExploreTarget,
    FollowUp,
    FriendTarget,
    GangTarget,
    Goal,
    GoalType,
    GoldTarget,
    LevelTarget,
    LocationTarget,
    PurchaseTarget,
    QuestTarget,
    RankTarget,
    SkillTarget,
)

if TYPE_CHECKING:
    from playtest_ai.context import CharacterSnapshot, GameContext
    from playtest_ai.personality import PersonalityProfile
    from playtest_ai.util.rng import RNG

T = TypeVar("T")

MAX_SKILL_LEVEL = 100


class GoalTemplate(abc.ABC, Generic[T]):
    """Behavior bundle for a single goal type.

    Subclasses must implement:
        generate_target: Pick a target for this personality.
        calculate_progress: Raw progress, the manager clamps it to [0, 1].
        get_base_priority: Default priority when none is given.

    Subclasses may override:
        capture_baseline: Fill ``start_*`` fields from the character.
        get_follow_up_goals: Drafts added when a goal completes.
    """

    goal_type: GoalType

    @abc.abstractmethod
    def generate_target(
        self, context: GameContext, profile: PersonalityProfile, rng: RNG
    ) -> T: ...

    @abc.abstractmethod
    def calculate_progress(self, target: T, context: GameContext) -> float: ...

    @abc.abstractmethod
    def get_base_priority(self, profile: PersonalityProfile) -> int: ...

    def capture_baseline(self, target: T, context: GameContext) -> T:
        _ = context
        return target

    def get_follow_up_goals(
        self,
        goal: Goal,
        context: GameContext,
        profile: PersonalityProfile,
        rng: RNG,
    ) -> list[FollowUp]:
        _ = goal, context, profile, rng
        return []


def _relative_progress(current: float, start: float, count: float) -> float:
    if count <= 0:
        return 1.0
    return (current - start) / count


def _span_progress(current: float, start: float, target: float) -> float:
    """Progress from ``start`` towards an absolute ``target`` value."""
    span = target - start
    if span <= 0:
        return 1.0 if current >= target else 0.0
    return (current - start) / span


def _random_skill(character: CharacterSnapshot, rng: RNG) -> str:
    skills = sorted(character.skills)
    return rng.choice(skills) if skills else ANY


# =============================================================================
# TEMPLATES
# =============================================================================


class LevelUpTemplate(GoalTemplate[LevelTarget]):
    goal_type = GoalType.LEVEL_UP

    def generate_target(
        self, context: GameContext, profile: PersonalityProfile, rng: RNG
    ) -> LevelTarget:
        level = context.character.level
        # Grinders plan bigger jumps.
        if profile.archetype == "grinder":
            return LevelTarget(level + rng.randint(3, 5))
        return LevelTarget(level + rng.randint(1, 2))

    def calculate_progress(self, target: LevelTarget, context: GameContext) -> float:
        if target.level <= 0:
            return 1.0
        return context.character.level / target.level

    def get_follow_up_goals(
        self,
        goal: Goal,
        context: GameContext,
        profile: PersonalityProfile,
        rng: RNG,
    ) -> list[FollowUp]:
        follow_ups: list[FollowUp] = []
        if profile.traits.patience > 0.6:
            skill = _random_skill(context.character, rng)
            follow_ups.append(FollowUp(GoalType.MAX_SKILL, SkillTarget(skill), 7))
        if profile.traits.greed > 0.6:
            amount = context.character.level * 100
            follow_ups.append(FollowUp(GoalType.EARN_GOLD, GoldTarget(amount), 6))
        return follow_ups

    def get_base_priority(self, profile: PersonalityProfile) -> int:
        match profile.archetype:
            case "grinder":
                return 10
            case "combat":
                return 8
            case "economist":
                return 5
        return 7


class EarnGoldTemplate(GoalTemplate[GoldTarget]):
    goal_type = GoalType.EARN_GOLD

    def generate_target(
        self, context: GameContext, profile: PersonalityProfile, rng: RNG
    ) -> GoldTarget:
        gold = context.character.gold
        match profile.archetype:
            case "economist":
                return GoldTarget(max(gold * 2, 1000))
            case "grinder":
                return GoldTarget(max(gold + 500, 500))
        return GoldTarget(max(gold + 200, 200))

    def capture_baseline(self, target: GoldTarget, context: GameContext) -> GoldTarget:
        return replace(target, start_gold=context.character.gold)

    def calculate_progress(self, target: GoldTarget, context: GameContext) -> float:
        return _span_progress(context.character.gold, target.start_gold, target.amount)

    def get_follow_up_goals(
        self,
        goal: Goal,
        context: GameContext,
        profile: PersonalityProfile,
        rng: RNG,
    ) -> list[FollowUp]:
        character = context.character
        follow_ups: list[FollowUp] = []

        # Spend the money on something that fits the personality.
        if character.gold >= 500:
            match profile.archetype:
                case "combat":
                    follow_ups.append(
                        FollowUp(
                            GoalType.BUY_PROPERTY,
                            PurchaseTarget("weapon", min_cost=200),
                            8,
                        )
                    )
                case "economist":
                    follow_ups.append(
                        FollowUp(GoalType.CRAFT_ITEM, CraftTarget(count=5), 7)
                    )
                case "social" if character.gang is not None:
                    follow_ups.append(
                        FollowUp(
                            GoalType.COMPLETE_QUEST,
                            QuestTarget(count=3, quest_type="gang"),
                            7,
                        )
                    )

        if profile.traits.greed > 0.7:
            follow_ups.append(
                FollowUp(GoalType.EARN_GOLD, GoldTarget(character.gold * 1.5), 8)
            )
        return follow_ups

    def get_base_priority(self, profile: PersonalityProfile) -> int:
        match profile.archetype:
            case "economist":
                return 10
            case "grinder" | "criminal":
                return 8
        return 6


class JoinGangTemplate(GoalTemplate[GangTarget]):
    goal_type = GoalType.JOIN_GANG

    def generate_target(
        self, context: GameContext, profile: PersonalityProfile, rng: RNG
    ) -> GangTarget:
        if profile.traits.loyalty > 0.7:
            return GangTarget("reputable", min_reputation=50)
        if profile.archetype == "criminal":
            return GangTarget("outlaw")
        return GangTarget()

    def calculate_progress(self, target: GangTarget, context: GameContext) -> float:
        return 1.0 if context.character.gang is not None else 0.0

    def get_follow_up_goals(
        self,
        goal: Goal,
        context: GameContext,
        profile: PersonalityProfile,
        rng: RNG,
    ) -> list[FollowUp]:
        follow_ups = [
            FollowUp(
                GoalType.COMPLETE_QUEST, QuestTarget(count=3, quest_type="gang"), 8
            )
        ]
        if profile.traits.sociability > 0.6:
            friends = context.character.friends + 3
            follow_ups.append(FollowUp(GoalType.MAKE_FRIENDS, FriendTarget(friends), 7))
        if profile.traits.loyalty > 0.6:
            follow_ups.append(
                FollowUp(
                    GoalType.EARN_GOLD,
                    GoldTarget(
                        context.character.gold + 500, purpose="gang_contribution"
                    ),
                    6,
                )
            )
        return follow_ups

    def get_base_priority(self, profile: PersonalityProfile) -> int:
        if profile.archetype == "social":
            return 10
        if profile.archetype == "combat":
            return 7
        if profile.traits.loyalty > 0.7:
            return 8
        return 5


class MaxSkillTemplate(GoalTemplate[SkillTarget]):
    goal_type = GoalType.MAX_SKILL

    def generate_target(
        self, context: GameContext, profile: PersonalityProfile, rng: RNG
    ) -> SkillTarget:
        match profile.archetype:
            case "combat":
                return SkillTarget("gunfighting")
            case "economist":
                return SkillTarget("crafting")
            case "criminal":
                return SkillTarget("stealth")
        return SkillTarget(_random_skill(context.character, rng))

    def calculate_progress(self, target: SkillTarget, context: GameContext) -> float:
        skills = context.character.skills
        if target.skill == ANY:
            current = max(skills.values(), default=0)
        else:
            current = skills.get(target.skill, 0)
        if target.level <= 0:
            return 1.0
        return current / target.level

    def get_follow_up_goals(
        self,
        goal: Goal,
        context: GameContext,
        profile: PersonalityProfile,
        rng: RNG,
    ) -> list[FollowUp]:
        if profile.traits.patience <= 0.7:
            return []
        skills = context.character.skills
        unmaxed = sorted(
            name for name, level in skills.items() if level < MAX_SKILL_LEVEL
        )
        if not unmaxed:
            return []
        return [FollowUp(GoalType.MAX_SKILL, SkillTarget(unmaxed[0]), 6)]

    def get_base_priority(self, profile: PersonalityProfile) -> int:
        match profile.archetype:
            case "grinder":
                return 9
            case "combat":
                return 8
        return 6


class CompleteQuestTemplate(GoalTemplate[QuestTarget]):
    goal_type = GoalType.COMPLETE_QUEST

    def generate_target(
        self, context: GameContext, profile: PersonalityProfile, rng: RNG
    ) -> QuestTarget:
        match profile.archetype:
            case "explorer":
                return QuestTarget(5, "exploration")
            case "combat":
                return QuestTarget(3, "combat")
            case "social" if context.character.gang is not None:
                return QuestTarget(3, "gang")
        return QuestTarget(2)

    def capture_baseline(
        self, target: QuestTarget, context: GameContext
    ) -> QuestTarget:
        return replace(target, start_count=len(context.character.quests_completed))

    def calculate_progress(self, target: QuestTarget, context: GameContext) -> float:
        current = len(context.character.quests_completed)
        return _relative_progress(current, target.start_count, target.count)

    def get_follow_up_goals(
        self,
        goal: Goal,
        context: GameContext,
        profile: PersonalityProfile,
        rng: RNG,
    ) -> list[FollowUp]:
        match profile.archetype:
            case "explorer":
                return [FollowUp(GoalType.COMPLETE_QUEST, QuestTarget(5), 9)]
            case "roleplayer":
                return [FollowUp(GoalType.COMPLETE_QUEST, QuestTarget(3, "story"), 8)]
        return []

    def get_base_priority(self, profile: PersonalityProfile) -> int:
        match profile.archetype:
            case "explorer":
                return 10
            case "roleplayer":
                return 9
        return 6


class WinDuelsTemplate(GoalTemplate[DuelTarget]):
    goal_type = GoalType.WIN_DUELS

    def generate_target(
        self, context: GameContext, profile: PersonalityProfile, rng: RNG
    ) -> DuelTarget:
        if profile.archetype == "combat":
            return DuelTarget(rng.randint(10, 19))
        return DuelTarget(rng.randint(3, 7))

    def capture_baseline(self, target: DuelTarget, context: GameContext) -> DuelTarget:
        return replace(target, start_wins=context.character.duels_won)

    def calculate_progress(self, target: DuelTarget, context: GameContext) -> float:
        return _relative_progress(
            context.character.duels_won, target.start_wins, target.wins
        )

    def get_follow_up_goals(
        self,
        goal: Goal,
        context: GameContext,
        profile: PersonalityProfile,
        rng: RNG,
    ) -> list[FollowUp]:
        if profile.archetype != "combat":
            return []
        assert isinstance(goal.target, DuelTarget)
        return [
            FollowUp(GoalType.WIN_DUELS, DuelTarget(goal.target.wins + 10), 9),
            FollowUp(GoalType.BUY_PROPERTY, PurchaseTarget("weapon", min_cost=200), 8),
        ]

    def get_base_priority(self, profile: PersonalityProfile) -> int:
        if profile.archetype == "combat":
            return 10
        if profile.traits.aggression > 0.7:
            return 8
        return 4


class UnlockLocationTemplate(GoalTemplate[LocationTarget]):
    goal_type = GoalType.UNLOCK_LOCATION

    def generate_target(
        self, context: GameContext, profile: PersonalityProfile, rng: RNG
    ) -> LocationTarget:
        unlocked = set(context.character.locations_unlocked)
        locked = [
            loc for loc in context.world.available_locations if loc not in unlocked
        ]
        if locked:
            return LocationTarget(rng.choice(locked))
        return LocationTarget()

    def calculate_progress(self, target: LocationTarget, context: GameContext) -> float:
        unlocked = context.character.locations_unlocked
        if target.location == ANY:
            return 1.0 if unlocked else 0.0
        return 1.0 if target.location in unlocked else 0.0

    def get_follow_up_goals(
        self,
        goal: Goal,
        context: GameContext,
        profile: PersonalityProfile,
        rng: RNG,
    ) -> list[FollowUp]:
        if profile.archetype == "explorer":
            return [FollowUp(GoalType.EXPLORE, ExploreTarget(5), 9)]
        return []

    def get_base_priority(self, profile: PersonalityProfile) -> int:
        if profile.archetype == "explorer":
            return 10
        if profile.traits.curiosity > 0.7:
            return 8
        return 5


class CraftItemTemplate(GoalTemplate[CraftTarget]):
    goal_type = GoalType.CRAFT_ITEM

    def generate_target(
        self, context: GameContext, profile: PersonalityProfile, rng: RNG
    ) -> CraftTarget:
        if profile.archetype == "economist":
            return CraftTarget(10)
        return CraftTarget(3)

    def capture_baseline(
        self, target: CraftTarget, context: GameContext
    ) -> CraftTarget:
        return replace(target, start_count=context.character.items_crafted)

    def calculate_progress(self, target: CraftTarget, context: GameContext) -> float:
        return _relative_progress(
            context.character.items_crafted, target.start_count, target.count
        )

    def get_follow_up_goals(
        self,
        goal: Goal,
        context: GameContext,
        profile: PersonalityProfile,
        rng: RNG,
    ) -> list[FollowUp]:
        if profile.archetype != "economist":
            return []
        return [
            FollowUp(GoalType.CRAFT_ITEM, CraftTarget(10), 8),
            # Sell what was crafted.
            FollowUp(GoalType.EARN_GOLD, GoldTarget(context.character.gold + 500), 7),
        ]

    def get_base_priority(self, profile: PersonalityProfile) -> int:
        return 9 if profile.archetype == "economist" else 4


class MakeFriendsTemplate(GoalTemplate[FriendTarget]):
    goal_type = GoalType.MAKE_FRIENDS

    def generate_target(
        self, context: GameContext, profile: PersonalityProfile, rng: RNG
    ) -> FriendTarget:
        friends = context.character.friends
        if profile.archetype == "social":
            return FriendTarget(friends + rng.randint(10, 19))
        return FriendTarget(friends + rng.randint(3, 7))

    def capture_baseline(
        self, target: FriendTarget, context: GameContext
    ) -> FriendTarget:
        return replace(target, start_friends=context.character.friends)

    def calculate_progress(self, target: FriendTarget, context: GameContext) -> float:
        return _span_progress(
            context.character.friends, target.start_friends, target.friends
        )

    def get_follow_up_goals(
        self,
        goal: Goal,
        context: GameContext,
        profile: PersonalityProfile,
        rng: RNG,
    ) -> list[FollowUp]:
        if profile.archetype == "social":
            friends = context.character.friends + 10
            return [FollowUp(GoalType.MAKE_FRIENDS, FriendTarget(friends), 9)]
        return []

    def get_base_priority(self, profile: PersonalityProfile) -> int:
        if profile.archetype == "social":
            return 10
        if profile.traits.sociability > 0.7:
            return 8
        return 4


class ExploreTemplate(GoalTemplate[ExploreTarget]):
    goal_type = GoalType.EXPLORE

    def generate_target(
        self, context: GameContext, profile: PersonalityProfile, rng: RNG
    ) -> ExploreTarget:
        return ExploreTarget(10 if profile.archetype == "explorer" else 5)

    def capture_baseline(
        self, target: ExploreTarget, context: GameContext
    ) -> ExploreTarget:
        return replace(target, start_count=len(context.character.locations_visited))

    def calculate_progress(self, target: ExploreTarget, context: GameContext) -> float:
        current = len(context.character.locations_visited)
        return _relative_progress(current, target.start_count, target.count)

    def get_follow_up_goals(
        self,
        goal: Goal,
        context: GameContext,
        profile: PersonalityProfile,
        rng: RNG,
    ) -> list[FollowUp]:
        if profile.archetype != "explorer":
            return []
        return [
            FollowUp(GoalType.EXPLORE, ExploreTarget(10), 10),
            FollowUp(GoalType.UNLOCK_LOCATION, LocationTarget(), 8),
        ]

    def get_base_priority(self, profile: PersonalityProfile) -> int:
        if profile.archetype == "explorer":
            return 10
        if profile.traits.curiosity > 0.7:
            return 7
        return 5


class BuyPropertyTemplate(GoalTemplate[PurchaseTarget]):
    goal_type = GoalType.BUY_PROPERTY

    def generate_target(
        self, context: GameContext, profile: PersonalityProfile, rng: RNG
    ) -> PurchaseTarget:
        match profile.archetype:
            case "combat":
                return PurchaseTarget("weapon", min_cost=200)
            case "economist":
                return PurchaseTarget("property", min_cost=1000)
        return PurchaseTarget()

    def capture_baseline(
        self, target: PurchaseTarget, context: GameContext
    ) -> PurchaseTarget:
        return replace(target, start_count=len(context.character.purchases))

    def calculate_progress(self, target: PurchaseTarget, context: GameContext) -> float:
        purchases = context.character.purchases
        if target.item_type == ANY:
            return 1.0 if len(purchases) > target.start_count else 0.0
        recent = purchases[target.start_count :]
        return 1.0 if target.item_type in recent else 0.0

    def get_follow_up_goals(
        self,
        goal: Goal,
        context: GameContext,
        profile: PersonalityProfile,
        rng: RNG,
    ) -> list[FollowUp]:
        assert isinstance(goal.target, PurchaseTarget)
        follow_ups: list[FollowUp] = []
        if goal.target.item_type == "weapon" and profile.archetype == "combat":
            follow_ups.append(FollowUp(GoalType.WIN_DUELS, DuelTarget(5), 8))
        if goal.target.item_type == "property":
            # Upkeep.
            follow_ups.append(
                FollowUp(
                    GoalType.EARN_GOLD, GoldTarget(context.character.gold + 500), 7
                )
            )
        return follow_ups

    def get_base_priority(self, profile: PersonalityProfile) -> int:
        match profile.archetype:
            case "economist":
                return 8
            case "combat":
                return 7
        return 5


class AchieveRankTemplate(GoalTemplate[RankTarget]):
    goal_type = GoalType.ACHIEVE_RANK

    def generate_target(
        self, context: GameContext, profile: PersonalityProfile, rng: RNG
    ) -> RankTarget:
        return RankTarget()

    def calculate_progress(self, target: RankTarget, context: GameContext) -> float:
        reputation = context.character.reputation
        if target.faction == ANY:
            current = max(reputation.values(), default=0.0)
        else:
            current = reputation.get(target.faction, 0.0)
        if target.reputation <= 0:
            return 1.0
        return max(0.0, current) / target.reputation

    def get_follow_up_goals(
        self,
        goal: Goal,
        context: GameContext,
        profile: PersonalityProfile,
        rng: RNG,
    ) -> list[FollowUp]:
        return [FollowUp(GoalType.COMPLETE_QUEST, QuestTarget(3, "faction"), 7)]

    def get_base_priority(self, profile: PersonalityProfile) -> int:
        if profile.archetype == "roleplayer":
            return 8
        if profile.traits.loyalty > 0.7:
            return 7
        return 5


class CollectItemsTemplate(GoalTemplate[CollectTarget]):
    goal_type = GoalType.COLLECT_ITEMS

    def generate_target(
        self, context: GameContext, profile: PersonalityProfile, rng: RNG
    ) -> CollectTarget:
        return CollectTarget(10)

    def capture_baseline(
        self, target: CollectTarget, context: GameContext
    ) -> CollectTarget:
        return replace(target, start_count=context.character.inventory_count)

    def calculate_progress(self, target: CollectTarget, context: GameContext) -> float:
        return _relative_progress(
            context.character.inventory_count, target.start_count, target.count
        )

    def get_follow_up_goals(
        self,
        goal: Goal,
        context: GameContext,
        profile: PersonalityProfile,
        rng: RNG,
    ) -> list[FollowUp]:
        if profile.archetype == "economist":
            return [FollowUp(GoalType.CRAFT_ITEM, CraftTarget(5), 7)]
        return []

    def get_base_priority(self, profile: PersonalityProfile) -> int:
        match profile.archetype:
            case "economist":
                return 7
            case "grinder":
                return 6
        return 4


class DefeatBossTemplate(GoalTemplate[BossTarget]):
    goal_type = GoalType.DEFEAT_BOSS

    def generate_target(
        self, context: GameContext, profile: PersonalityProfile, rng: RNG
    ) -> BossTarget:
        return BossTarget()

    def calculate_progress(self, target: BossTarget, context: GameContext) -> float:
        defeated = context.character.bosses_defeated
        if target.boss == ANY:
            return 1.0 if defeated else 0.0
        return 1.0 if target.boss in defeated else 0.0

    def get_follow_up_goals(
        self,
        goal: Goal,
        context: GameContext,
        profile: PersonalityProfile,
        rng: RNG,
    ) -> list[FollowUp]:
        if profile.archetype == "combat":
            return [FollowUp(GoalType.DEFEAT_BOSS, BossTarget(difficulty="hard"), 9)]
        return []

    def get_base_priority(self, profile: PersonalityProfile) -> int:
        if profile.archetype == "combat":
            return 9
        if profile.traits.aggression > 0.7:
            return 7
        return 5


GOAL_TEMPLATES: MappingProxyType[GoalType, GoalTemplate] = MappingProxyType(
    {
        template.goal_type: template
        for template in (
            LevelUpTemplate(),
            EarnGoldTemplate(),
            JoinGangTemplate(),
            MaxSkillTemplate(),
            CompleteQuestTemplate(),
            WinDuelsTemplate(),
            UnlockLocationTemplate(),
            CraftItemTemplate(),
            MakeFriendsTemplate(),
            ExploreTemplate(),
            BuyPropertyTemplate(),
            AchieveRankTemplate(),
            CollectItemsTemplate(),
            DefeatBossTemplate(),
        )
    }
)


def calculate_progress(goal: Goal, context: GameContext) -> float:
    """Raw template progress for ``goal``. Not clamped."""
    return GOAL_TEMPLATES[goal.goal_type].calculate_progress(goal.target, context)

