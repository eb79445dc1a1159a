from __future__ import annotations

import itertools
from typing import Any

from playtest_ai.context import (
    CharacterSnapshot,
    GameAction,
    GameContext,
    WorldSnapshot,
)
from playtest_ai.goals import Goal
from playtest_ai.memory import ActionOutcome
from playtest_ai.types import Population, TimeOfDay

_outcome_ids = itertools.count(1)


def make_context(
    *,
    now: float = 0.0,
    time_of_day: TimeOfDay | None = None,
    active_events: tuple[str, ...] = (),
    population: Population | None = None,
    available_locations: tuple[str, ...] = (),
    goals: tuple[Goal, ...] = (),
    history: tuple[ActionOutcome, ...] = (),
    recent_actions: tuple[str, ...] = (),
    **character: Any,
) -> GameContext:
    """Build a context. Keyword arguments not listed go to the character."""
    character.setdefault("gold", 1000.0)
    return GameContext(
        character=CharacterSnapshot(**character),
        world=WorldSnapshot(
            time_of_day=time_of_day,
            active_events=active_events,
            population=population,
            available_locations=available_locations,
        ),
        goals=goals,
        history=history,
        recent_actions=recent_actions,
        now=now,
    )


def make_action(
    action_id: str = "test_action", action_type: str = "job", **overrides: Any
) -> GameAction:
    fields: dict[str, Any] = {
        "name": action_id.replace("_", " ").title(),
        "energy_cost": 10.0,
        "expected_reward": 50.0,
        "success_probability": 0.8,
        "risk": 0.2,
    }
    fields.update(overrides)
    return GameAction(id=action_id, type=action_type, **fields)


def make_outcome(
    action_type: str = "job",
    success: bool = True,
    *,
    action_id: str | None = None,
    reward: float = 10.0,
    cost: float = 5.0,
    duration: float = 60.0,
    timestamp: float = 0.0,
    estimated_risk: float = 0.5,
    time_of_day: TimeOfDay | None = None,
    **character: Any,
) -> ActionOutcome:
    """Build an outcome. Keyword arguments not listed go to the character."""
    action = make_action(
        action_id or f"{action_type}_action", action_type, risk=estimated_risk
    )
    return ActionOutcome(
        id=f"outcome-{next(_outcome_ids)}",
        action=action.ref(),
        timestamp=timestamp,
        success=success,
        reward=reward,
        cost=cost,
        duration=duration,
        context=make_context(now=timestamp, time_of_day=time_of_day, **character),
        error=None if success else "failed",
    )
