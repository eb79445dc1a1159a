"""
DecisionEngine: pick the next action for a bot.

Every candidate action is scored from several independent terms, then scaled
by personality and a little noise:

    score = (base + goal_alignment + efficiency + risk + history
             + situational + combo)
            x personality multiplier x preference multiplier x variance

base            Expected value of the action, normalized to roughly 0-100.
goal_alignment  Pull of the active goals the action contributes to.
efficiency      Reward per unit of cost. Grinders care a lot, explorers don't.
risk            Penalty for risk above the bot's tolerance, bonus for
                thrill-seekers.
history         Learned success rate of the action type.
situational     Time of day, cooldowns, location, events and repetition.
combo           The action completes a proven three-action sequence.

Chaos bots skip scoring entirely and pick uniformly among viable actions.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from playtest_ai import config
from playtest_ai.context import GameAction, GameContext
from playtest_ai.goals import Goal, GoalManager
from playtest_ai.memory import BotMemory
from playtest_ai.personality import (
    PersonalityProfile,
    PreferenceMatch,
    action_multiplier,
    matches_preference,
)
from playtest_ai.types import SECONDS_PER_DAY, SECONDS_PER_HOUR, Timestamp
from playtest_ai.util import rng
from playtest_ai.util.metrics import RollingWindow
from playtest_ai.util.rng import RNG

logger = logging.getLogger(__name__)

_rng = rng.get("bots.decision")

# Action types that need the character to be fit for a fight.
COMBAT_ACTION_TYPES = frozenset({"combat"})


class NoCandidatesError(ValueError):
    """Raised when select_action() is given nothing to choose from."""

    def __init__(self) -> None:
        super().__init__("No actions available to select from")


@dataclass(frozen=True, slots=True)
class DecisionOptions:
    """Tuning knobs for one DecisionEngine.

    Attributes:
        debug: Log the top candidates of every decision at DEBUG level.
        allow_risky: When False, actions with risk above 0.8 are not viable.
        min_energy_threshold: Below this energy only free actions are viable.
        goal_weight: Multiplier for the goal alignment term.
        efficiency_weight: Multiplier for the resource efficiency term.
        random_variance: Half-width of the multiplicative noise, in [0, 1].
        consider_combos: Reward actions that complete a learned combo.
        use_history: Include the learned success rate of the action type.
    """

    debug: bool = False
    allow_risky: bool = True
    min_energy_threshold: float = config.DEFAULT_MIN_ENERGY_THRESHOLD
    goal_weight: float = 1.0
    efficiency_weight: float = 1.0
    random_variance: float = config.DEFAULT_RANDOM_VARIANCE
    consider_combos: bool = True
    use_history: bool = True

    def __post_init__(self) -> None:
        if not 0.0 <= self.random_variance <= 1.0:
            msg = f"random_variance must be in [0.0, 1.0], got {self.random_variance}"
            raise ValueError(msg)
        for name in ("min_energy_threshold", "goal_weight", "efficiency_weight"):
            if getattr(self, name) < 0:
                msg = f"{name} must not be negative, got {getattr(self, name)}"
                raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class ScoreBreakdown:
    base_score: float = 0.0
    goal_alignment: float = 0.0
    resource_efficiency: float = 0.0
    risk_adjustment: float = 0.0
    historical_bonus: float = 0.0
    situational_bonus: float = 0.0
    combo_bonus: float = 0.0
    personality_multiplier: float = 1.0
    preference_multiplier: float = 1.0
    variance_factor: float = 1.0

    @property
    def additive_total(self) -> float:
        return (
            self.base_score
            + self.goal_alignment
            + self.resource_efficiency
            + self.risk_adjustment
            + self.historical_bonus
            + self.situational_bonus
            + self.combo_bonus
        )


@dataclass(frozen=True, slots=True)
class ScoredAction:
    """An action with its final score and how the score came about."""

    action: GameAction
    score: float
    breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown)
    reasoning: str = ""


def expected_value(action: GameAction) -> float:
    """Reward if it works, minus what is lost if it doesn't."""
    failure_cost = action.energy_cost + action.gold_cost
    return (
        action.expected_reward * action.success_probability
        - failure_cost * (1 - action.success_probability)
    )


def deadline_urgency(deadline: Timestamp, now: Timestamp) -> float:
    remaining = deadline - now
    if remaining <= 0:
        return 3.0
    if remaining < SECONDS_PER_HOUR:
        return 2.5
    if remaining < 6 * SECONDS_PER_HOUR:
        return 2.0
    if remaining < SECONDS_PER_DAY:
        return 1.5
    return 1.0


def action_contributes_to_goal(action: GameAction, goal: Goal) -> bool:
    """Direct link by goal id or type, matching action type, or a related name."""
    if goal.id in action.contributes_to_goal:
        return True
    if goal.goal_type.value in action.contributes_to_goal:
        return True
    if action.type == goal.goal_type.value:
        return True
    return action.name in goal.related_actions


class DecisionEngine:
    """Scores candidate actions for one bot and picks the best.

    Args:
        profile: Personality driving the multipliers and archetype rules.
        options: Tuning knobs, defaults when omitted.
        goal_manager: Source of active goals. Without one the engine reads
            ``context.goals``.
        memory: Source of learned success rates and combos. Without one the
            engine computes success rates from ``context.history``.
        rng: Random source for variance and chaos picks. Defaults to the
            "bots.decision" stream.
    """

    def __init__(
        self,
        profile: PersonalityProfile,
        options: DecisionOptions | None = None,
        *,
        goal_manager: GoalManager | None = None,
        memory: BotMemory | None = None,
        rng: RNG | None = None,
    ) -> None:
        self.profile = profile
        self.options = options or DecisionOptions()
        self.goal_manager = goal_manager
        self.memory = memory
        self._rng: RNG = rng or _rng
        self._score_history: dict[str, RollingWindow] = {}

    def update_personality(self, profile: PersonalityProfile) -> None:
        self.profile = profile

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select_action(
        self, candidates: Sequence[GameAction], context: GameContext
    ) -> GameAction:
        """Return the best candidate for this bot right now.

        Falls back to the cheapest candidate by energy when none is viable.

        Raises:
            NoCandidatesError: if ``candidates`` is empty.
        """
        if not candidates:
            raise NoCandidatesError()

        viable = [a for a in candidates if self.is_action_viable(a, context)]
        if not viable:
            fallback = min(candidates, key=lambda a: a.energy_cost)
            if self.options.debug:
                logger.debug(
                    f"No viable actions, selecting least costly: {fallback.name}"
                )
            return fallback

        if self.profile.archetype == "chaos":
            choice = self._rng.choice(viable)
            if self.options.debug:
                logger.debug(f"Chaos archetype - random selection: {choice.name}")
            return choice

        scored = self._score_all(viable, context)

        if self.options.debug:
            logger.debug("Top actions:")
            for rank, entry in enumerate(scored[:5], start=1):
                logger.debug(
                    f"  {rank}. {entry.action.name} (score: {entry.score:.2f}) "
                    f"{entry.reasoning}"
                )

        return scored[0].action

    def get_all_action_scores(
        self, candidates: Sequence[GameAction], context: GameContext
    ) -> list[ScoredAction]:
        """Score every candidate, viable or not, highest first."""
        return self._score_all(candidates, context)

    def _score_all(
        self, candidates: Sequence[GameAction], context: GameContext
    ) -> list[ScoredAction]:
        goals = self._active_goals(context)
        scored = [self._score(action, context, goals) for action in candidates]
        # list.sort is stable: equal scores keep candidate order.
        scored.sort(key=lambda s: s.score, reverse=True)
        return scored

    def is_action_viable(self, action: GameAction, context: GameContext) -> bool:
        character = context.character
        if action.energy_cost > character.energy:
            return False
        if action.gold_cost > character.gold:
            return False
        if action.min_level is not None and character.level < action.min_level:
            return False
        if action.min_gold is not None and character.gold < action.min_gold:
            return False
        if (
            action.energy_cost > 0
            and character.energy < self.options.min_energy_threshold
        ):
            return False
        if (
            not self.options.allow_risky
            and action.risk > config.RISKY_ACTION_THRESHOLD
        ):
            return False
        if (
            action.type in COMBAT_ACTION_TYPES
            and character.health < config.MIN_COMBAT_HEALTH
        ):
            return False
        return True

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def score_action(self, action: GameAction, context: GameContext) -> ScoredAction:
        return self._score(action, context, self._active_goals(context))

    def _score(
        self, action: GameAction, context: GameContext, goals: Sequence[Goal]
    ) -> ScoredAction:
        traits = self.profile.traits
        additive = ScoreBreakdown(
            base_score=self._base_score(action),
            goal_alignment=self._goal_alignment(action, goals, context.now)
            * self.options.goal_weight,
            resource_efficiency=self._resource_efficiency(action)
            * self.options.efficiency_weight,
            risk_adjustment=self._risk_adjustment(action),
            historical_bonus=(
                self._historical_bonus(action, context)
                if self.options.use_history
                else 0.0
            ),
            situational_bonus=self._situational_bonus(action, context),
            combo_bonus=self._combo_bonus(action, context),
        )

        personality = action_multiplier(action.type, traits)
        match matches_preference(action.name, self.profile.preferences):
            case PreferenceMatch.PREFERRED:
                preference = config.PREFERRED_MULTIPLIER
            case PreferenceMatch.AVOIDED:
                preference = config.AVOIDED_MULTIPLIER
            case _:
                preference = 1.0

        variance = self._variance_factor()
        score = additive.additive_total * personality * preference * variance

        breakdown = replace(
            additive,
            personality_multiplier=personality,
            preference_multiplier=preference,
            variance_factor=variance,
        )
        final = max(0.0, score)
        self.record_action(action.id, final)
        return ScoredAction(
            action=action,
            score=final,
            breakdown=breakdown,
            reasoning=self._reasoning(action, breakdown),
        )

    def _base_score(self, action: GameAction) -> float:
        return expected_value(action) / config.MAX_EXPECTED_REWARD * 100

    def _goal_alignment(
        self, action: GameAction, goals: Sequence[Goal], now: Timestamp
    ) -> float:
        alignment = 0.0
        for goal in goals:
            if not action_contributes_to_goal(action, goal):
                continue
            urgency = 1.0
            if goal.deadline is not None:
                urgency = deadline_urgency(goal.deadline, now)
            # High priority, low progress goals pull hardest.
            alignment += 50 * (goal.priority / 10) * (1 - goal.progress) * urgency
        return alignment

    def _resource_efficiency(self, action: GameAction) -> float:
        # Gold is weighted at a tenth of energy.
        total_cost = max(1.0, action.energy_cost + action.gold_cost / 10)
        efficiency = min(action.expected_reward / total_cost / 50, 1.0) * 30
        match self.profile.archetype:
            case "grinder":
                return efficiency * 1.5
            case "explorer":
                return efficiency * 0.5
        return efficiency

    def _risk_adjustment(self, action: GameAction) -> float:
        tolerance = self.profile.traits.risk_tolerance
        if action.risk > tolerance:
            return -30 * (action.risk - tolerance)
        if action.risk > 0.3 and tolerance > 0.7:
            return 15 * action.risk
        return 0.0

    def _historical_bonus(self, action: GameAction, context: GameContext) -> float:
        rate = self._known_success_rate(action.type, context)
        if rate is None:
            return 0.0
        if rate > 0.7:
            return 10.0
        if rate < 0.3:
            return -15.0
        return 0.0

    def _situational_bonus(self, action: GameAction, context: GameContext) -> float:
        world = context.world
        if (
            action.available_time is not None
            and world.time_of_day not in action.available_time
        ):
            return config.WRONG_TIME_PENALTY
        if action.is_on_cooldown(context.now):
            return config.COOLDOWN_PENALTY

        bonus = 0.0
        if (
            action.required_location is not None
            and action.required_location != context.character.location
        ):
            bonus -= 10

        name = action.name.lower()
        action_type = action.type.lower()
        for event in world.active_events:
            keyword = event.lower()
            if keyword in name or keyword in action_type:
                bonus += 15

        if action.type == "gang" and self.profile.traits.loyalty > 0.7:
            bonus += 10
        if action.type == "social" and world.population == "high":
            bonus += 10

        recent = context.recent_actions
        if action.id in recent:
            match self.profile.archetype:
                case "explorer":
                    bonus -= 25
                case "grinder":
                    bonus += 15
        return bonus

    def _combo_bonus(self, action: GameAction, context: GameContext) -> float:
        if not self.options.consider_combos or self.memory is None:
            return 0.0
        if self.memory.next_combo_step(context.recent_actions) == action.type:
            return config.COMBO_BONUS
        return 0.0

    def _variance_factor(self) -> float:
        variance = self.options.random_variance
        if variance == 0:
            return 1.0
        return self._rng.uniform(1 - variance, 1 + variance)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def _active_goals(self, context: GameContext) -> list[Goal]:
        if self.goal_manager is not None:
            return self.goal_manager.get_pursuable_goals()
        return [g for g in context.goals if g.is_active]

    def _known_success_rate(
        self, action_type: str, context: GameContext
    ) -> float | None:
        if self.memory is not None:
            return self.memory.known_success_rate(action_type)
        outcomes = [o for o in context.history if o.action.type == action_type]
        if not outcomes:
            return None
        return sum(o.success for o in outcomes) / len(outcomes)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def record_action(self, action_id: str, score: float) -> None:
        """Keep the last scores of an action for inspection."""
        window = self._score_history.get(action_id)
        if window is None:
            window = RollingWindow(config.SCORE_HISTORY_SIZE)
            self._score_history[action_id] = window
        window.record(score)

    def score_history(self, action_id: str) -> list[float]:
        window = self._score_history.get(action_id)
        return window.values().tolist() if window is not None else []

    def score_percentiles(self, action_id: str) -> str:
        window = self._score_history.get(action_id)
        if window is None:
            return "no samples"
        return window.get_percentiles_string()

    def _reasoning(self, action: GameAction, breakdown: ScoreBreakdown) -> str:
        reasons: list[str] = []

        if breakdown.goal_alignment > 20:
            reasons.append("strongly aligns with active goals")
        elif breakdown.resource_efficiency > 20:
            reasons.append("highly efficient reward-to-cost ratio")
        elif breakdown.historical_bonus > 5:
            reasons.append("proven success in past attempts")

        if breakdown.personality_multiplier > 1.3:
            reasons.append(f"matches {self.profile.name} personality")
        elif breakdown.personality_multiplier < 0.7:
            reasons.append(f"conflicts with {self.profile.name} personality")

        if action.risk > 0.7 and self.profile.traits.risk_tolerance > 0.7:
            reasons.append("high-risk opportunity matches risk-seeking nature")
        elif action.risk < 0.3:
            reasons.append("low-risk safe option")

        if breakdown.situational_bonus > 10:
            reasons.append("favorable situational factors")
        elif breakdown.situational_bonus < -10:
            reasons.append("unfavorable conditions")

        if breakdown.combo_bonus > 0:
            reasons.append("completes a proven action combo")

        return ", ".join(reasons) if reasons else "best available option"


def explain_decision(scored: Sequence[ScoredAction]) -> str:
    """Multi-line explanation of the winning action and the runners-up."""
    if not scored:
        return "No actions available"

    ranked = sorted(scored, key=lambda s: s.score, reverse=True)
    winner = ranked[0]
    b = winner.breakdown
    lines = [
        f"Selected: {winner.action.name}",
        f"Score: {winner.score:.2f}",
        f"Reasoning: {winner.reasoning}",
        "",
        "Score Breakdown:",
        f"  Base Score: {b.base_score:.2f}",
        f"  Goal Alignment: {b.goal_alignment:.2f}",
        f"  Resource Efficiency: {b.resource_efficiency:.2f}",
        f"  Risk Adjustment: {b.risk_adjustment:.2f}",
        f"  Personality Multiplier: {b.personality_multiplier:.2f}x",
        f"  Historical Bonus: {b.historical_bonus:.2f}",
        f"  Situational Bonus: {b.situational_bonus:.2f}",
        f"  Combo Bonus: {b.combo_bonus:.2f}",
    ]
    if len(ranked) > 1:
        lines += ["", "Alternatives Considered:"]
        lines.extend(
            f"  {rank}. {alt.action.name} ({alt.score:.2f}): {alt.reasoning}"
            for rank, alt in enumerate(ranked[1:4], start=2)
        )
    return "\n".join(lines) + "\n"
