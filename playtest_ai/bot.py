"""
BotBrain: one bot's GoalManager, BotMemory and DecisionEngine, wired together.

The three components share a personality profile and draw from the bot's
own random streams, so a playtest run with many bots is reproducible from a
single run seed plus each bot's id.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from playtest_ai.context import GameAction, GameContext
from playtest_ai.decision import DecisionEngine, DecisionOptions
from playtest_ai.goals import GoalManager
from playtest_ai.memory import ActionOutcome, BotMemory
from playtest_ai.personality import PersonalityProfile, create_profile, create_variant
from playtest_ai.types import RandomSeed
from playtest_ai.util.rng import BotRandom


@dataclass(slots=True)
class BotBrain:
    profile: PersonalityProfile
    goals: GoalManager
    memory: BotMemory
    engine: DecisionEngine
    streams: BotRandom

    def choose(
        self, candidates: Sequence[GameAction], context: GameContext
    ) -> GameAction:
        return self.engine.select_action(candidates, context)

    def learn(self, outcome: ActionOutcome, context: GameContext) -> None:
        """Feed an outcome back, then re-evaluate goals against ``context``.

        ``context`` is the state after the action ran.
        """
        self.memory.record_outcome(outcome)
        self.goals.update_progress(context)


def create_bot(
    archetype: str,
    *,
    seed: RandomSeed = None,
    bot_id: str = "",
    context: GameContext | None = None,
    options: DecisionOptions | None = None,
    memory: BotMemory | None = None,
    variant: bool = False,
) -> BotBrain:
    """Build a bot of ``archetype`` with streams derived from ``seed``.

    With ``variant`` the traits are nudged using the bot's personality
    stream, so variants are reproducible per bot id.

    Raises:
        UnknownArchetypeError: if ``archetype`` is not registered.
    """
    streams = BotRandom.from_seed(seed, bot_id)
    if variant:
        profile = create_variant(archetype, streams.personality)
    else:
        profile = create_profile(archetype)

    goals = GoalManager(profile, context, rng=streams.goals)
    memory = memory if memory is not None else BotMemory()
    engine = DecisionEngine(
        profile, options, goal_manager=goals, memory=memory, rng=streams.decision
    )
    return BotBrain(profile, goals, memory, engine, streams)
