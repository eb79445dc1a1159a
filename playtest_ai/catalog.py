"""
Stock frontier actions and a sample context.

The automation layer normally derives candidate actions from the live game,
but a fixed catalogue is handy for offline runs, demos and tests. Labels in
``contributes_to_goal`` mix free-form goal tags with GoalType values so the
engine's goal-alignment term has something to match against either way.
"""

from __future__ import annotations

from collections.abc import Iterable

from playtest_ai.context import (
    CharacterSnapshot,
    GameAction,
    GameContext,
    WorldSnapshot,
)
from playtest_ai.goals.core import DuelTarget, Goal, GoalType, GoldTarget
from playtest_ai.memory import ActionOutcome
from playtest_ai.types import SECONDS_PER_HOUR, SECONDS_PER_MINUTE

# =============================================================================
# STOCK ACTIONS
# =============================================================================

_STOCK_ACTIONS: tuple[GameAction, ...] = (
    # Combat
    GameAction(
        id="combat_bandit",
        type="combat",
        name="Fight Bandits",
        energy_cost=15,
        expected_reward=50,
        success_probability=0.7,
        risk=0.5,
        complexity=5,
        contributes_to_goal=("combat_mastery", "earn_gold"),
        skills_improved=("combat", "marksmanship"),
    ),
    GameAction(
        id="combat_duel",
        type="combat",
        name="Challenge Player to Duel",
        energy_cost=20,
        gold_cost=10,
        expected_reward=100,
        success_probability=0.5,
        risk=0.8,
        complexity=7,
        contributes_to_goal=("pvp_champion", "reputation", "win_duels"),
        cooldown=30 * SECONDS_PER_MINUTE,
    ),
    GameAction(
        id="combat_boss",
        type="combat",
        name="Hunt Notorious Outlaw",
        energy_cost=30,
        expected_reward=200,
        success_probability=0.4,
        risk=0.9,
        complexity=9,
        min_level=5,
        contributes_to_goal=("bounty_hunter", "reputation", "defeat_boss"),
    ),
    # Jobs
    GameAction(
        id="job_sheriff",
        type="job",
        name="Work as Deputy Sheriff",
        energy_cost=10,
        expected_reward=30,
        success_probability=0.9,
        risk=0.2,
        complexity=3,
        contributes_to_goal=("earn_gold", "faction_law"),
        skills_improved=("law_enforcement",),
        available_time=("morning", "afternoon"),
    ),
    GameAction(
        id="job_bartender",
        type="job",
        name="Tend Bar at Saloon",
        energy_cost=8,
        expected_reward=25,
        success_probability=0.95,
        risk=0.1,
        complexity=2,
        contributes_to_goal=("earn_gold", "social_connections"),
        skills_improved=("charisma",),
        available_time=("evening", "night"),
    ),
    GameAction(
        id="job_mining",
        type="job",
        name="Mine for Gold",
        energy_cost=20,
        expected_reward=60,
        success_probability=0.8,
        risk=0.3,
        complexity=4,
        contributes_to_goal=("earn_gold",),
        skills_improved=("mining", "strength"),
    ),
    # Crafting
    GameAction(
        id="craft_ammo",
        type="craft",
        name="Craft Ammunition",
        energy_cost=5,
        gold_cost=10,
        expected_reward=20,
        success_probability=0.85,
        risk=0.1,
        complexity=3,
        contributes_to_goal=("self_sufficient", "craft_item"),
        skills_improved=("crafting",),
    ),
    GameAction(
        id="craft_weapon",
        type="craft",
        name="Forge Custom Weapon",
        energy_cost=15,
        gold_cost=50,
        expected_reward=120,
        success_probability=0.6,
        risk=0.4,
        complexity=7,
        min_level=3,
        contributes_to_goal=("master_craftsman", "craft_item"),
        skills_improved=("crafting", "blacksmithing"),
    ),
    # Social
    GameAction(
        id="social_chat",
        type="social",
        name="Chat in Saloon",
        energy_cost=2,
        expected_reward=5,
        success_probability=1.0,
        risk=0.0,
        complexity=1,
        contributes_to_goal=("social_connections", "gather_info", "make_friends"),
        skills_improved=("charisma",),
    ),
    GameAction(
        id="social_mail",
        type="social",
        name="Send Mail to Friends",
        energy_cost=1,
        gold_cost=1,
        success_probability=1.0,
        risk=0.0,
        complexity=2,
        contributes_to_goal=("social_connections", "make_friends"),
    ),
    GameAction(
        id="social_recruit",
        type="social",
        name="Recruit for Gang",
        energy_cost=5,
        expected_reward=10,
        success_probability=0.7,
        risk=0.2,
        complexity=4,
        contributes_to_goal=("gang_leader", "join_gang"),
        skills_improved=("charisma", "leadership"),
    ),
    # Travel
    GameAction(
        id="travel_frontier",
        type="travel",
        name="Explore Frontier Territory",
        energy_cost=12,
        gold_cost=5,
        expected_reward=40,
        success_probability=0.75,
        risk=0.6,
        complexity=5,
        contributes_to_goal=("explorer", "discover_locations", "explore"),
        skills_improved=("survival",),
    ),
    GameAction(
        id="travel_town",
        type="travel",
        name="Visit Neighboring Town",
        energy_cost=8,
        gold_cost=3,
        expected_reward=15,
        success_probability=0.9,
        risk=0.2,
        complexity=3,
        contributes_to_goal=("explorer", "social_connections", "unlock_location"),
    ),
    # Crime
    GameAction(
        id="crime_robbery",
        type="crime",
        name="Rob Stagecoach",
        energy_cost=18,
        expected_reward=150,
        success_probability=0.5,
        risk=0.9,
        complexity=8,
        contributes_to_goal=("outlaw_legend", "earn_gold"),
        skills_improved=("stealth", "intimidation"),
        available_time=("night",),
    ),
    GameAction(
        id="crime_pickpocket",
        type="crime",
        name="Pickpocket Tourists",
        energy_cost=5,
        expected_reward=20,
        success_probability=0.6,
        risk=0.5,
        complexity=4,
        contributes_to_goal=("outlaw_legend", "earn_gold"),
        skills_improved=("stealth", "sleight_of_hand"),
    ),
    GameAction(
        id="crime_smuggle",
        type="crime",
        name="Smuggle Contraband",
        energy_cost=12,
        gold_cost=20,
        expected_reward=80,
        success_probability=0.7,
        risk=0.7,
        complexity=6,
        contributes_to_goal=("outlaw_legend", "earn_gold"),
        skills_improved=("stealth", "persuasion"),
    ),
    # Training
    GameAction(
        id="train_combat",
        type="training",
        name="Combat Training",
        energy_cost=10,
        gold_cost=15,
        success_probability=1.0,
        risk=0.0,
        complexity=3,
        contributes_to_goal=("combat_mastery", "max_skill"),
        skills_improved=("combat", "marksmanship"),
    ),
    GameAction(
        id="train_stealth",
        type="training",
        name="Stealth Training",
        energy_cost=10,
        gold_cost=15,
        success_probability=1.0,
        risk=0.0,
        complexity=3,
        contributes_to_goal=("master_thief", "max_skill"),
        skills_improved=("stealth",),
    ),
    # Quests
    GameAction(
        id="quest_delivery",
        type="quest",
        name="Deliver Package to Town",
        energy_cost=15,
        expected_reward=75,
        success_probability=0.85,
        risk=0.3,
        complexity=5,
        contributes_to_goal=("quest_completion", "faction_merchant", "complete_quest"),
    ),
    GameAction(
        id="quest_rescue",
        type="quest",
        name="Rescue Kidnapped Settler",
        energy_cost=25,
        expected_reward=150,
        success_probability=0.6,
        risk=0.7,
        complexity=8,
        min_level=4,
        contributes_to_goal=("quest_completion", "hero_reputation", "complete_quest"),
    ),
    # Shopping
    GameAction(
        id="shop_weapon",
        type="shop",
        name="Buy Better Weapon",
        energy_cost=2,
        gold_cost=100,
        expected_reward=-100,
        success_probability=1.0,
        risk=0.0,
        complexity=2,
        min_gold=100,
        contributes_to_goal=("combat_mastery", "buy_property"),
    ),
    GameAction(
        id="shop_armor",
        type="shop",
        name="Buy Better Armor",
        energy_cost=2,
        gold_cost=80,
        expected_reward=-80,
        success_probability=1.0,
        risk=0.0,
        complexity=2,
        min_gold=80,
        contributes_to_goal=("combat_mastery", "buy_property"),
    ),
    GameAction(
        id="shop_horse",
        type="shop",
        name="Buy Faster Horse",
        energy_cost=2,
        gold_cost=200,
        expected_reward=-200,
        success_probability=1.0,
        risk=0.0,
        complexity=2,
        min_gold=200,
        contributes_to_goal=("explorer", "status_symbol", "buy_property"),
    ),
    # Gang
    GameAction(
        id="gang_mission",
        type="gang",
        name="Gang Territory Mission",
        energy_cost=20,
        expected_reward=100,
        success_probability=0.7,
        risk=0.6,
        complexity=6,
        contributes_to_goal=("gang_leader", "territory_control", "achieve_rank"),
        skills_improved=("leadership", "tactics"),
    ),
    GameAction(
        id="gang_war",
        type="gang",
        name="Participate in Gang War",
        energy_cost=30,
        expected_reward=200,
        success_probability=0.5,
        risk=0.9,
        complexity=9,
        min_level=5,
        contributes_to_goal=("gang_leader", "pvp_champion"),
        cooldown=SECONDS_PER_HOUR,
    ),
    # Idle
    GameAction(
        id="wait",
        type="custom",
        name="Rest and Recover Energy",
        success_probability=1.0,
        risk=0.0,
        complexity=1,
        requires_browser=False,
    ),
)


def default_actions() -> list[GameAction]:
    """Return a fresh list of the stock frontier actions."""
    return list(_STOCK_ACTIONS)


def filter_actions_by_context(
    actions: Iterable[GameAction], context: GameContext
) -> list[GameAction]:
    """Keep the actions the character can perform right now.

    Checks resources and requirements, the action's time-of-day window and its
    cooldown relative to ``context.now``. Risk tolerance and personality are
    left to the decision engine.
    """
    character = context.character
    time_of_day = context.world.time_of_day
    available: list[GameAction] = []
    for action in actions:
        if action.energy_cost > character.energy:
            continue
        if action.gold_cost > character.gold:
            continue
        if action.min_level is not None and character.level < action.min_level:
            continue
        if action.min_gold is not None and character.gold < action.min_gold:
            continue
        if (
            action.available_time is not None
            and time_of_day is not None
            and time_of_day not in action.available_time
        ):
            continue
        if (
            action.required_location is not None
            and character.location != action.required_location
        ):
            continue
        if action.is_on_cooldown(context.now):
            continue
        available.append(action)
    return available


# =============================================================================
# SAMPLE CONTEXT
# =============================================================================


def sample_context(now: float = 0.0) -> GameContext:
    """A mid-level gunslinger in a frontier town on a busy afternoon."""
    character = CharacterSnapshot(
        level=3,
        experience=450,
        gold=150,
        energy=75,
        max_energy=100,
        health=90,
        skills={"combat": 5, "marksmanship": 4, "stealth": 2, "charisma": 3},
        equipment=("basic_pistol", "leather_vest"),
        location="frontier_town",
    )
    world = WorldSnapshot(
        time_of_day="afternoon",
        faction_standings={"law": 20, "outlaws": -10, "merchants": 15},
        active_events=("gold_rush", "gang_war"),
    )
    base = GameContext(character=character, world=world, now=now)

    stock = {action.id: action for action in _STOCK_ACTIONS}
    history = (
        ActionOutcome(
            id="sample-1",
            action=stock["combat_bandit"].ref(),
            timestamp=now - 1000,
            success=True,
            reward=55,
            cost=15,
            duration=5,
            context=base,
        ),
        ActionOutcome(
            id="sample-2",
            action=stock["combat_bandit"].ref(),
            timestamp=now - 2000,
            success=True,
            reward=48,
            cost=15,
            duration=5,
            context=base,
        ),
        ActionOutcome(
            id="sample-3",
            action=stock["crime_robbery"].ref(),
            timestamp=now - 3000,
            success=False,
            reward=0,
            cost=18,
            duration=8,
            context=base,
            error="Caught by sheriff",
        ),
    )
    goals = (
        Goal(
            id="earn_gold",
            goal_type=GoalType.EARN_GOLD,
            name="Earn 1000 Gold",
            description="Accumulate wealth for better equipment",
            priority=8,
            target=GoldTarget(amount=1000, start_gold=character.gold),
            progress=0.15,
            created_at=now,
        ),
        Goal(
            id="combat_mastery",
            goal_type=GoalType.WIN_DUELS,
            name="Master Combat",
            description="Win 10 fights to prove yourself",
            priority=6,
            target=DuelTarget(wins=10),
            progress=0.3,
            created_at=now,
        ),
    )
    return GameContext(
        character=character,
        world=world,
        goals=goals,
        history=history,
        recent_actions=("combat_bandit", "job_sheriff"),
        now=now,
    )
