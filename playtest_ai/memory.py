"""
BotMemory: learning from action outcomes.

Every executed action is fed back as an ActionOutcome. Memory keeps a bounded
window of recent outcomes (older ones are forgotten, like a player forgets
how last week's fights went) and derives statistics from it:

    success rates      per action type
    patterns           success rate of an action type under a condition
                       (low health, low energy, a location, gear, level band)
    combos             three-action sequences and how often all three succeed
    temporal patterns  success per (time of day, action type)
    risk calibration   estimated risk vs. observed failure rate
    efficiency         reward per cost, reward per minute

Each record_outcome() rescans the window only for the keys the new outcome
touches, so one update is O(window).

Recommendations are short machine-readable labels (for example
"avoid_combat_low_health") that the automation layer turns into behavior.
"""

from __future__ import annotations

import json
import logging
import numbers
from collections import deque
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import asdict, dataclass
from typing import TypeAlias

import numpy as np

from playtest_ai import config
from playtest_ai.context import ActionRef, GameContext
from playtest_ai.types import (
    SECONDS_PER_MINUTE,
    TIMES_OF_DAY,
    Seconds,
    TimeOfDay,
    Timestamp,
    Trend,
)

logger = logging.getLogger(__name__)

EXPORT_FORMAT_VERSION = 1

COMBO_SEPARATOR = "->"


@dataclass(frozen=True, slots=True)
class ActionOutcome:
    """The result of one executed action, with the context it ran in."""

    id: str
    action: ActionRef
    timestamp: Timestamp
    success: bool
    reward: float
    cost: float
    duration: Seconds
    context: GameContext
    error: str | None = None


def _check_label(owner: str, name: str, value: object) -> None:
    if not isinstance(value, str):
        msg = f"{owner}.{name} must be a string, got {value!r}"
        raise TypeError(msg)


def _check_number(
    owner: str,
    name: str,
    value: object,
    *,
    low: float | None = None,
    high: float | None = None,
    integral: bool = False,
) -> None:
    kind = numbers.Integral if integral else numbers.Real
    if isinstance(value, bool) or not isinstance(value, kind):
        msg = f"{owner}.{name} must be {kind.__name__}, got {value!r}"
        raise TypeError(msg)
    # Written as negations so that NaN is rejected too.
    if (low is not None and not value >= low) or (
        high is not None and not value <= high
    ):
        msg = f"{owner}.{name} must be in [{low}, {high}], got {value}"
        raise ValueError(msg)


def _check_fraction(owner: str, name: str, value: object) -> None:
    _check_number(owner, name, value, low=0.0, high=1.0)


def _check_count(owner: str, name: str, value: object) -> None:
    _check_number(owner, name, value, low=0, integral=True)


@dataclass(frozen=True, slots=True)
class Pattern:
    key: str
    success_rate: float
    occurrences: int
    confidence: float
    trend: Trend = Trend.STABLE
    last_seen: Timestamp | None = None

    def __post_init__(self) -> None:
        _check_label("Pattern", "key", self.key)
        _check_fraction("Pattern", "success_rate", self.success_rate)
        _check_count("Pattern", "occurrences", self.occurrences)
        _check_fraction("Pattern", "confidence", self.confidence)
        if not isinstance(self.trend, Trend):
            msg = f"Pattern.trend must be a Trend, got {self.trend!r}"
            raise TypeError(msg)
        if self.last_seen is not None:
            _check_number("Pattern", "last_seen", self.last_seen)


@dataclass(frozen=True, slots=True)
class ActionCombo:
    sequence: tuple[str, ...]
    occurrences: int
    success_rate: float
    average_reward: float
    confidence: float

    def __post_init__(self) -> None:
        if not isinstance(self.sequence, tuple) or not self.sequence:
            msg = (
                "ActionCombo.sequence must be a non-empty tuple, "
                f"got {self.sequence!r}"
            )
            raise TypeError(msg)
        for step in self.sequence:
            _check_label("ActionCombo", "sequence", step)
        _check_count("ActionCombo", "occurrences", self.occurrences)
        _check_fraction("ActionCombo", "success_rate", self.success_rate)
        _check_number("ActionCombo", "average_reward", self.average_reward)
        _check_fraction("ActionCombo", "confidence", self.confidence)

    @property
    def key(self) -> str:
        return COMBO_SEPARATOR.join(self.sequence)


@dataclass(frozen=True, slots=True)
class TemporalPattern:
    time_of_day: TimeOfDay
    action_type: str
    success_rate: float
    occurrences: int
    average_reward: float

    def __post_init__(self) -> None:
        if self.time_of_day not in TIMES_OF_DAY:
            msg = f"Unknown time of day: {self.time_of_day!r}"
            raise ValueError(msg)
        _check_label("TemporalPattern", "action_type", self.action_type)
        _check_fraction("TemporalPattern", "success_rate", self.success_rate)
        _check_count("TemporalPattern", "occurrences", self.occurrences)
        _check_number("TemporalPattern", "average_reward", self.average_reward)


@dataclass(frozen=True, slots=True)
class RiskCalibration:
    action_type: str
    estimated_risk: float
    actual_failure_rate: float
    calibration_error: float
    occurrences: int

    def __post_init__(self) -> None:
        _check_label("RiskCalibration", "action_type", self.action_type)
        _check_number("RiskCalibration", "estimated_risk", self.estimated_risk)
        _check_fraction(
            "RiskCalibration", "actual_failure_rate", self.actual_failure_rate
        )
        _check_number(
            "RiskCalibration", "calibration_error", self.calibration_error, low=0.0
        )
        _check_count("RiskCalibration", "occurrences", self.occurrences)


@dataclass(frozen=True, slots=True)
class EfficiencyMetric:
    action_type: str
    gold_per_energy: float
    gold_per_minute: float
    success_rate_weighted: float
    overall_score: float

    def __post_init__(self) -> None:
        _check_label("EfficiencyMetric", "action_type", self.action_type)
        for name in (
            "gold_per_energy",
            "gold_per_minute",
            "success_rate_weighted",
            "overall_score",
        ):
            _check_number("EfficiencyMetric", name, getattr(self, name))


@dataclass(frozen=True, slots=True)
class ActionBreakdown:
    count: int
    success_rate: float
    average_reward: float
    average_cost: float
    efficiency: float


@dataclass(frozen=True, slots=True)
class MemoryStats:
    total_actions: int
    successful_actions: int
    failed_actions: int
    total_reward: float
    total_cost: float
    average_success_rate: float
    action_breakdown: dict[str, ActionBreakdown]
    recent_trend: Trend
    best_action: str | None
    worst_action: str | None


@dataclass(frozen=True, slots=True)
class EfficiencyLeaders:
    by_gold_per_energy: str | None
    by_gold_per_minute: str | None
    by_overall_score: str | None


@dataclass(frozen=True, slots=True)
class TemporalInsights:
    best_time_for_action: dict[str, TimeOfDay]
    actions_by_time_of_day: dict[TimeOfDay, list[str]]


OutcomeFilter: TypeAlias = Callable[[ActionOutcome], bool]


def _bucket(value: float, size: int) -> int:
    return int(value // size) * size


def _success_array(outcomes: Sequence[ActionOutcome]) -> np.ndarray:
    return np.fromiter((o.success for o in outcomes), dtype=bool, count=len(outcomes))


def _rate(successes: np.ndarray) -> float:
    return float(successes.mean()) if successes.size else 0.0


def compare_windows(successes: np.ndarray, window: int) -> Trend:
    """Compare the last ``window`` samples with the ``window`` before them."""
    if successes.size < window * 2:
        return Trend.STABLE
    recent = successes[-window:].mean()
    older = successes[-window * 2 : -window].mean()
    if recent > older + config.TREND_THRESHOLD:
        return Trend.IMPROVING
    if recent < older - config.TREND_THRESHOLD:
        return Trend.DECLINING
    return Trend.STABLE


class BotMemory:
    """Bounded outcome history plus the statistics learned from it.

    Args:
        max_history_size: Outcomes kept before the oldest is evicted.
        min_occurrences_for_confidence: Samples needed for a pattern or combo
            to reach full confidence.

    Raises:
        ValueError: if either size is not positive.
    """

    def __init__(
        self,
        max_history_size: int = config.DEFAULT_MAX_HISTORY_SIZE,
        min_occurrences_for_confidence: int = config.MIN_OCCURRENCES_FOR_CONFIDENCE,
    ) -> None:
        if max_history_size <= 0:
            msg = f"max_history_size must be positive, got {max_history_size}"
            raise ValueError(msg)
        if min_occurrences_for_confidence <= 0:
            msg = (
                "min_occurrences_for_confidence must be positive, "
                f"got {min_occurrences_for_confidence}"
            )
            raise ValueError(msg)

        self.max_history_size = max_history_size
        self.min_occurrences_for_confidence = min_occurrences_for_confidence
        self.combo_length = config.COMBO_LENGTH

        self._history: deque[ActionOutcome] = deque(maxlen=max_history_size)
        self._success_rates: dict[str, float] = {}
        self._patterns: dict[str, Pattern] = {}
        self._combos: dict[str, ActionCombo] = {}
        self._temporal: dict[str, TemporalPattern] = {}
        self._risk: dict[str, RiskCalibration] = {}
        self._efficiency: dict[str, EfficiencyMetric] = {}

    @property
    def history(self) -> tuple[ActionOutcome, ...]:
        """The retained outcomes, oldest first."""
        return tuple(self._history)

    def _confidence(self, occurrences: int) -> float:
        return min(1.0, occurrences / self.min_occurrences_for_confidence)

    def _of_type(self, action_type: str) -> list[ActionOutcome]:
        return [o for o in self._history if o.action.type == action_type]

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record_outcome(self, outcome: ActionOutcome) -> None:
        """Remember an outcome and refresh every statistic it touches."""
        # deque(maxlen) evicts the oldest entry.
        self._history.append(outcome)

        same_type = self._of_type(outcome.action.type)
        self._update_success_rate(outcome.action.type, same_type)
        self._detect_patterns(outcome)
        self._detect_combo()
        self._detect_temporal_pattern(outcome)
        self._calibrate_risk(outcome, same_type)
        self._update_efficiency(outcome.action.type, same_type)

    def _update_success_rate(
        self, action_type: str, outcomes: Sequence[ActionOutcome]
    ) -> None:
        self._success_rates[action_type] = _rate(_success_array(outcomes))

    def _detect_patterns(self, outcome: ActionOutcome) -> None:
        action_type = outcome.action.type
        character = outcome.context.character

        if action_type == "combat":
            health = _bucket(character.health, config.HEALTH_BUCKET)
            self._update_pattern(
                f"combat_health_{health}",
                outcome,
                lambda h: h.action.type == "combat"
                and _bucket(h.context.character.health, config.HEALTH_BUCKET)
                == health,
            )

        energy = _bucket(character.energy, config.ENERGY_BUCKET)
        self._update_pattern(
            f"{action_type}_energy_{energy}",
            outcome,
            lambda h: h.action.type == action_type
            and _bucket(h.context.character.energy, config.ENERGY_BUCKET) == energy,
        )

        location = character.location
        if location:
            self._update_pattern(
                f"{action_type}_location_{location}",
                outcome,
                lambda h: h.action.type == action_type
                and h.context.character.location == location,
            )

        equipped = character.is_equipped
        self._update_pattern(
            f"{action_type}_{'equipped' if equipped else 'unequipped'}",
            outcome,
            lambda h: h.action.type == action_type
            and h.context.character.is_equipped == equipped,
        )

        level = _bucket(character.level, config.LEVEL_BUCKET)
        self._update_pattern(
            f"{action_type}_level_{level}",
            outcome,
            lambda h: h.action.type == action_type
            and _bucket(h.context.character.level, config.LEVEL_BUCKET) == level,
        )

    def _update_pattern(
        self, key: str, outcome: ActionOutcome, matches: OutcomeFilter
    ) -> None:
        matching = [h for h in self._history if matches(h)]
        successes = _success_array(matching)
        self._patterns[key] = Pattern(
            key=key,
            success_rate=_rate(successes),
            occurrences=len(matching),
            confidence=self._confidence(len(matching)),
            trend=compare_windows(successes, config.TREND_WINDOW),
            last_seen=outcome.timestamp,
        )

    def _detect_combo(self) -> None:
        n = self.combo_length
        if len(self._history) < n:
            return

        history = list(self._history)
        types = [o.action.type for o in history]
        sequence = tuple(types[-n:])

        windows = [
            history[i : i + n]
            for i in range(len(history) - n + 1)
            if tuple(types[i : i + n]) == sequence
        ]
        all_succeeded = np.array([all(o.success for o in w) for w in windows])
        rewards = np.array([sum(o.reward for o in w) for w in windows])

        combo = ActionCombo(
            sequence=sequence,
            occurrences=len(windows),
            success_rate=float(all_succeeded.mean()),
            average_reward=float(rewards.mean()),
            confidence=self._confidence(len(windows)),
        )
        self._combos[combo.key] = combo

    def _detect_temporal_pattern(self, outcome: ActionOutcome) -> None:
        time_of_day = outcome.context.world.time_of_day
        if time_of_day is None:
            return

        action_type = outcome.action.type
        matching = [
            h
            for h in self._history
            if h.context.world.time_of_day == time_of_day
            and h.action.type == action_type
        ]
        rewards = np.array([h.reward for h in matching], dtype=np.float64)
        self._temporal[f"{time_of_day}_{action_type}"] = TemporalPattern(
            time_of_day=time_of_day,
            action_type=action_type,
            success_rate=_rate(_success_array(matching)),
            occurrences=len(matching),
            average_reward=float(rewards.mean()),
        )

    def _calibrate_risk(
        self, outcome: ActionOutcome, outcomes: Sequence[ActionOutcome]
    ) -> None:
        action_type = outcome.action.type
        estimated = outcome.action.estimated_risk
        failure_rate = 1.0 - _rate(_success_array(outcomes)) if outcomes else 0.0
        self._risk[action_type] = RiskCalibration(
            action_type=action_type,
            estimated_risk=estimated,
            actual_failure_rate=failure_rate,
            calibration_error=abs(estimated - failure_rate),
            occurrences=len(outcomes),
        )

    def _update_efficiency(
        self, action_type: str, outcomes: Sequence[ActionOutcome]
    ) -> None:
        if not outcomes:
            return
        rewards = np.array([o.reward for o in outcomes], dtype=np.float64)
        costs = np.array([o.cost for o in outcomes], dtype=np.float64)
        durations = np.array([o.duration for o in outcomes], dtype=np.float64)
        total_reward = float(rewards.sum())
        total_cost = float(costs.sum())
        total_duration = float(durations.sum())
        success_rate = _rate(_success_array(outcomes))

        gold_per_energy = total_reward / total_cost if total_cost > 0 else 0.0
        gold_per_minute = (
            total_reward / total_duration * SECONDS_PER_MINUTE
            if total_duration > 0
            else 0.0
        )
        self._efficiency[action_type] = EfficiencyMetric(
            action_type=action_type,
            gold_per_energy=gold_per_energy,
            gold_per_minute=gold_per_minute,
            success_rate_weighted=success_rate,
            overall_score=gold_per_energy * success_rate,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_success_rate(self, action_type: str) -> float:
        """Observed success rate, or a neutral 0.5 for unseen types."""
        return self._success_rates.get(action_type, config.NEUTRAL_SUCCESS_RATE)

    def known_success_rate(self, action_type: str) -> float | None:
        """Observed success rate, or None when the type was never recorded."""
        return self._success_rates.get(action_type)

    def analyze_patterns(self) -> dict[str, Pattern]:
        return dict(self._patterns)

    def get_confident_patterns(self, min_confidence: float = 0.7) -> list[Pattern]:
        confident = [
            p for p in self._patterns.values() if p.confidence >= min_confidence
        ]
        return sorted(confident, key=lambda p: p.confidence, reverse=True)

    def should_adapt_strategy(self) -> bool:
        """True when the recent success rate is bad enough to change tactics."""
        recent = list(self._history)[-config.ADAPT_WINDOW :]
        if len(recent) < config.ADAPT_MIN_SAMPLES:
            return False
        return _rate(_success_array(recent)) < config.ADAPT_SUCCESS_THRESHOLD

    def resolve_action_types(self, labels: Iterable[str]) -> list[str]:
        """Map action ids or outcome ids to action types via the history.

        Labels that are not known ids are assumed to already be types.
        """
        known: dict[str, str] = {}
        for outcome in self._history:
            known[outcome.id] = outcome.action.type
            if outcome.action.id is not None:
                known[outcome.action.id] = outcome.action.type
        return [known.get(label, label) for label in labels]

    def _good_combos(self) -> list[ActionCombo]:
        good = [
            c
            for c in self._combos.values()
            if c.success_rate > 0.7 and c.confidence > 0.6
        ]
        return sorted(good, key=lambda c: c.average_reward, reverse=True)

    def _matching_combo(self, recent_actions: Sequence[str]) -> ActionCombo | None:
        lead = self.combo_length - 1
        if len(recent_actions) < lead:
            return None
        tail = tuple(self.resolve_action_types(recent_actions[-lead:]))
        return next((c for c in self._good_combos() if c.sequence[:lead] == tail), None)

    def next_combo_step(self, recent_actions: Sequence[str]) -> str | None:
        """Action type that would complete a proven combo, if any."""
        combo = self._matching_combo(recent_actions)
        return combo.sequence[-1] if combo else None

    def get_recommendation(self, context: GameContext) -> str | None:
        """Return the first learned recommendation that applies, or None."""
        character = context.character

        if character.health < 40:
            for bucket in range(0, 40, config.HEALTH_BUCKET):
                pattern = self._patterns.get(f"combat_health_{bucket}")
                if (
                    pattern is not None
                    and pattern.success_rate < 0.3
                    and pattern.confidence >= 0.6
                ):
                    return "avoid_combat_low_health"

        if character.energy < 25:
            if any(
                p.key.endswith("_energy_0") and p.success_rate < 0.3
                for p in self._patterns.values()
            ):
                return "rest_low_energy"

        time_of_day = context.world.time_of_day
        if time_of_day is not None:
            good_times = sorted(
                (
                    t
                    for t in self._temporal.values()
                    if t.time_of_day == time_of_day
                    and t.success_rate > 0.7
                    and t.occurrences >= config.MIN_OCCURRENCES_FOR_CONFIDENCE
                ),
                key=lambda t: t.average_reward,
                reverse=True,
            )
            if good_times:
                return f"focus_{good_times[0].action_type}_{time_of_day}"

        combo = self._matching_combo(context.recent_actions)
        if combo is not None:
            return f"complete_combo_{combo.key}"

        if not character.is_equipped:
            equipped = self._patterns.get("combat_equipped")
            unequipped = self._patterns.get("combat_unequipped")
            if (
                equipped is not None
                and unequipped is not None
                and equipped.success_rate > unequipped.success_rate + 0.2
                and equipped.confidence >= 0.6
            ):
                return "equip_gear_before_combat"

        return None

    def get_stats(self) -> MemoryStats:
        history = list(self._history)
        successes = _success_array(history)
        rewards = np.array([h.reward for h in history], dtype=np.float64)
        costs = np.array([h.cost for h in history], dtype=np.float64)

        breakdown: dict[str, ActionBreakdown] = {}
        for action_type, success_rate in self._success_rates.items():
            outcomes = self._of_type(action_type)
            count = len(outcomes)
            type_reward = sum(o.reward for o in outcomes)
            type_cost = sum(o.cost for o in outcomes)
            breakdown[action_type] = ActionBreakdown(
                count=count,
                success_rate=success_rate,
                average_reward=type_reward / count if count else 0.0,
                average_cost=type_cost / count if count else 0.0,
                efficiency=type_reward / type_cost if type_cost > 0 else 0.0,
            )

        successful = int(successes.sum())
        return MemoryStats(
            total_actions=len(history),
            successful_actions=successful,
            failed_actions=len(history) - successful,
            total_reward=float(rewards.sum()),
            total_cost=float(costs.sum()),
            average_success_rate=_rate(successes),
            action_breakdown=breakdown,
            recent_trend=compare_windows(successes, config.STATS_TREND_WINDOW),
            best_action=self.get_best_action(),
            worst_action=self.get_worst_action(),
        )

    def get_best_action(self) -> str | None:
        """Action type with the highest positive overall efficiency score."""
        best: str | None = None
        best_score = 0.0
        for action_type, metric in self._efficiency.items():
            if metric.overall_score > best_score:
                best_score = metric.overall_score
                best = action_type
        return best

    def get_worst_action(self) -> str | None:
        """Least successful action type with enough samples to judge."""
        worst: str | None = None
        worst_rate = 1.0
        for action_type, rate in self._success_rates.items():
            if (
                len(self._of_type(action_type)) >= config.MIN_OCCURRENCES_FOR_CONFIDENCE
                and rate < worst_rate
            ):
                worst_rate = rate
                worst = action_type
        return worst

    def get_most_efficient_actions(self) -> EfficiencyLeaders:
        def leader(score: Callable[[EfficiencyMetric], float]) -> str | None:
            best: str | None = None
            best_value = 0.0
            for action_type, metric in self._efficiency.items():
                if score(metric) > best_value:
                    best_value = score(metric)
                    best = action_type
            return best

        return EfficiencyLeaders(
            by_gold_per_energy=leader(lambda m: m.gold_per_energy),
            by_gold_per_minute=leader(lambda m: m.gold_per_minute),
            by_overall_score=leader(lambda m: m.overall_score),
        )

    def get_best_combos(self, min_confidence: float = 0.6) -> list[ActionCombo]:
        combos = [c for c in self._combos.values() if c.confidence >= min_confidence]
        return sorted(combos, key=lambda c: c.average_reward, reverse=True)[:10]

    def get_temporal_insights(self) -> TemporalInsights:
        best_time: dict[str, TimeOfDay] = {}
        by_time: dict[TimeOfDay, list[str]] = {time: [] for time in TIMES_OF_DAY}

        action_types = dict.fromkeys(o.action.type for o in self._history)
        for action_type in action_types:
            candidates = [
                t
                for t in self._temporal.values()
                if t.action_type == action_type
                and t.occurrences >= config.MIN_OCCURRENCES_FOR_CONFIDENCE
                and t.success_rate > 0
            ]
            if not candidates:
                continue
            top = max(candidates, key=lambda t: t.success_rate)
            best_time[action_type] = top.time_of_day
            by_time[top.time_of_day].append(action_type)

        return TemporalInsights(
            best_time_for_action=best_time, actions_by_time_of_day=by_time
        )

    def get_risk_insights(self) -> list[RiskCalibration]:
        """Calibrations with enough samples, worst-calibrated first."""
        insights = [
            r
            for r in self._risk.values()
            if r.occurrences >= config.MIN_OCCURRENCES_FOR_CONFIDENCE
        ]
        return sorted(insights, key=lambda r: r.calibration_error, reverse=True)

    def reset(self) -> None:
        self._history.clear()
        self._success_rates.clear()
        self._patterns.clear()
        self._combos.clear()
        self._temporal.clear()
        self._risk.clear()
        self._efficiency.clear()

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def export_memory(self) -> str:
        """Serialize the learned statistics (not the raw history) to JSON."""
        return json.dumps(
            {
                "version": EXPORT_FORMAT_VERSION,
                "history_size": len(self._history),
                "success_rates": self._success_rates,
                "patterns": [
                    {**asdict(p), "trend": p.trend.value}
                    for p in self._patterns.values()
                ],
                "combos": [asdict(c) for c in self._combos.values()],
                "temporal_patterns": [asdict(t) for t in self._temporal.values()],
                "risk_calibrations": [asdict(r) for r in self._risk.values()],
                "efficiency_metrics": [asdict(e) for e in self._efficiency.values()],
            },
            indent=2,
        )

    def import_memory(self, data: str) -> bool:
        """Replace the learned statistics with an exported snapshot.

        All or nothing: on any decode, shape, type or range error the current
        state is left untouched and False is returned. The outcome history
        is not part of a snapshot and is kept as is.
        """
        try:
            parsed = json.loads(data)
            version = parsed["version"]
            if version != EXPORT_FORMAT_VERSION:
                msg = f"Unsupported memory snapshot version: {version!r}"
                raise ValueError(msg)

            success_rates: dict[str, float] = {}
            for action_type, rate in _as_mapping(parsed["success_rates"]).items():
                _check_fraction("success_rates", action_type, rate)
                success_rates[action_type] = float(rate)
            patterns = {}
            for item in parsed["patterns"]:
                pattern = Pattern(**{**item, "trend": Trend(item["trend"])})
                patterns[pattern.key] = pattern
            combos = {}
            for item in parsed["combos"]:
                combo = ActionCombo(**{**item, "sequence": tuple(item["sequence"])})
                combos[combo.key] = combo
            temporal = {}
            for item in parsed["temporal_patterns"]:
                slot = TemporalPattern(**item)
                temporal[f"{slot.time_of_day}_{slot.action_type}"] = slot
            risk = {
                r.action_type: r
                for r in (
                    RiskCalibration(**item) for item in parsed["risk_calibrations"]
                )
            }
            efficiency = {
                e.action_type: e
                for e in (
                    EfficiencyMetric(**item) for item in parsed["efficiency_metrics"]
                )
            }
        except (ValueError, KeyError, TypeError):
            logger.warning("Failed to import memory snapshot", exc_info=True)
            return False

        self._success_rates = success_rates
        self._patterns = patterns
        self._combos = combos
        self._temporal = temporal
        self._risk = risk
        self._efficiency = efficiency
        return True

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def get_learning_report(self) -> str:
        """Human-readable summary of what the bot has learned so far."""
        stats = self.get_stats()
        patterns = self.get_confident_patterns(0.7)
        combos = self.get_best_combos(0.7)
        efficient = self.get_most_efficient_actions()
        temporal = self.get_temporal_insights()

        lines = [
            "=== BOT LEARNING REPORT ===",
            "",
            "OVERALL PERFORMANCE:",
            f"- Total Actions: {stats.total_actions}",
            f"- Success Rate: {stats.average_success_rate * 100:.1f}%",
            f"- Total Reward: {stats.total_reward:.0f} gold",
            f"- Total Cost: {stats.total_cost:.0f} energy",
            f"- Trend: {stats.recent_trend.value}",
            f"- Best Action: {stats.best_action or 'None'}",
            f"- Worst Action: {stats.worst_action or 'None'}",
            "",
            f"PATTERNS LEARNED ({len(patterns)} confident patterns):",
        ]
        lines.extend(
            f"- {p.key}: {p.success_rate * 100:.1f}% success "
            f"({p.occurrences} times, {p.confidence * 100:.0f}% confidence, "
            f"trend: {p.trend.value})"
            for p in patterns[:5]
        )
        lines += ["", f"BEST ACTION COMBOS ({len(combos)} learned):"]
        lines.extend(
            f"- {' -> '.join(c.sequence)}: {c.success_rate * 100:.1f}% success, "
            f"{c.average_reward:.0f} avg reward"
            for c in combos[:3]
        )
        lines += [
            "",
            "EFFICIENCY INSIGHTS:",
            f"- Best Gold/Energy: {efficient.by_gold_per_energy or 'Unknown'}",
            f"- Best Gold/Minute: {efficient.by_gold_per_minute or 'Unknown'}",
            f"- Best Overall: {efficient.by_overall_score or 'Unknown'}",
            "",
            "TEMPORAL PATTERNS:",
        ]
        lines.extend(
            f"- {time}: {', '.join(actions)}"
            for time, actions in temporal.actions_by_time_of_day.items()
            if actions
        )
        return "\n".join(lines) + "\n"


def _as_mapping(value: object) -> Mapping:
    if not isinstance(value, Mapping):
        msg = f"Expected a mapping, got {type(value).__name__}"
        raise TypeError(msg)
    return value

