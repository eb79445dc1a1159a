"""Tests for the GoalManager lifecycle and queries."""

from __future__ import annotations

import logging
from random import Random

import pytest

from playtest_ai.goals import (
    RECOMMENDED_ACTIONS,
    CollectTarget,
    CraftTarget,
    DuelTarget,
    ExploreTarget,
    GoalManager,
    GoalState,
    GoalType,
    LevelTarget,
    emergent_follow_ups,
    goal_accepts_label,
)
from playtest_ai.personality import create_profile
from playtest_ai.types import SECONDS_PER_HOUR
from tests.helpers import make_context


def _manager(archetype: str = "social", **character: object) -> GoalManager:
    character.setdefault("gold", 0.0)
    return GoalManager(
        create_profile(archetype), make_context(**character), rng=Random(0)
    )


class TestStarterGoals:
    """Tests for the goals a fresh manager starts with."""

    def test_grinder_starter_goals(self) -> None:
        goals = _manager("grinder").get_current_goals()

        assert [g.goal_type for g in goals] == [
            GoalType.LEVEL_UP,
            GoalType.EARN_GOLD,
            GoalType.MAX_SKILL,
        ]
        assert [g.priority for g in goals] == [10, 8, 7]

    def test_chaos_gets_five_generated_goals(self) -> None:
        goals = _manager("chaos").get_current_goals()
        assert [g.priority for g in goals] == [10, 9, 8, 7, 6]

    def test_starter_goals_capture_baselines(self) -> None:
        manager = _manager("combat", duels_won=4)
        duel_goal = next(
            g for g in manager.get_current_goals() if g.goal_type is GoalType.WIN_DUELS
        )
        assert duel_goal.target == DuelTarget(10, start_wins=4)

    def test_no_context_defaults_to_empty_character(self) -> None:
        manager = GoalManager(create_profile("explorer"), rng=Random(0))
        assert len(manager.get_current_goals()) == 3


class TestCreateGoal:
    def test_ids_are_unique(self) -> None:
        manager = _manager()
        first = manager.create_goal(GoalType.EXPLORE, ExploreTarget(3), 5)
        second = manager.create_goal(GoalType.EXPLORE, ExploreTarget(3), 5)
        assert first.id != second.id

    def test_string_goal_type_accepted(self) -> None:
        goal = _manager().create_goal("earn_gold")
        assert goal.goal_type is GoalType.EARN_GOLD

    def test_unknown_goal_type_rejected(self) -> None:
        with pytest.raises(ValueError):
            _manager().create_goal("teleport")

    def test_mismatched_target_rejected(self) -> None:
        with pytest.raises(TypeError):
            _manager().create_goal(GoalType.LEVEL_UP, DuelTarget(3))

    def test_generated_target_and_priority(self) -> None:
        manager = _manager("grinder")
        goal = manager.create_goal(GoalType.LEVEL_UP, context=make_context(level=2))

        assert isinstance(goal.target, LevelTarget)
        assert 5 <= goal.target.level <= 7
        assert goal.priority == 10

    def test_baseline_taken_from_context(self) -> None:
        goal = _manager().create_goal(
            GoalType.WIN_DUELS, DuelTarget(5), context=make_context(duels_won=3)
        )
        assert goal.target == DuelTarget(5, start_wins=3)

    def test_create_goal_does_not_add(self) -> None:
        manager = _manager()
        before = len(manager.get_current_goals())
        manager.create_goal(GoalType.EXPLORE, ExploreTarget(3), 5)
        assert len(manager.get_current_goals()) == before


class TestLifecycle:
    """Tests for completion, failure and priority adjustment."""

    def test_level_goal_completes_when_level_reached(self) -> None:
        manager = _manager("grinder")
        level_goal = manager.get_current_goals()[0]

        manager.update_progress(make_context(level=5, gold=0, now=60))

        completed = manager.get_completed_goals()
        assert [g.id for g in completed] == [level_goal.id]
        assert completed[0].state is GoalState.COMPLETED
        assert completed[0].progress == 1.0
        assert completed[0].completed_at == 60
        assert level_goal.id not in {g.id for g in manager.get_current_goals()}

    def test_completion_spawns_emergent_and_template_follow_ups(self) -> None:
        manager = _manager("grinder")

        manager.update_progress(make_context(level=5, gold=0))

        targets = {g.goal_type: g.target for g in manager.get_current_goals()}
        assert targets[GoalType.LEVEL_UP] == LevelTarget(8)
        assert GoalType.MAX_SKILL in targets
        assert GoalType.EARN_GOLD in targets

    def test_completion_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        manager = _manager("grinder")
        with caplog.at_level(logging.INFO, logger="playtest_ai.goals.manager"):
            manager.update_progress(make_context(level=5, gold=0))
        assert "Goal completed: Reach Level 5" in caplog.text

    def test_attached_follow_ups_are_added(self) -> None:
        manager = _manager()
        child = manager.create_goal(GoalType.CRAFT_ITEM, CraftTarget(2), 4)
        parent = manager.create_goal(
            GoalType.COLLECT_ITEMS, CollectTarget(1), 5, follow_up_goals=[child]
        )
        manager.add_goal(parent)

        manager.update_progress(make_context(inventory_count=1))

        current_ids = {g.id for g in manager.get_current_goals()}
        assert child.id in current_ids
        assert parent.id not in current_ids

    def test_shared_follow_up_is_added_once(self) -> None:
        manager = _manager()
        shared = manager.create_goal(GoalType.EXPLORE, ExploreTarget(3), 4)
        first = manager.create_goal(
            GoalType.LEVEL_UP, LevelTarget(2), 6, follow_up_goals=[shared]
        )
        second = manager.create_goal(
            GoalType.LEVEL_UP, LevelTarget(2), 5, follow_up_goals=[shared]
        )
        later = manager.create_goal(GoalType.COLLECT_ITEMS, CollectTarget(10), 2)
        for goal in (first, second, later):
            manager.add_goal(goal)

        manager.update_progress(make_context(level=2, inventory_count=4))

        completed_ids = {g.id for g in manager.get_completed_goals()}
        assert {first.id, second.id} <= completed_ids
        current = manager.get_current_goals()
        assert [g.id for g in current].count(shared.id) == 1
        assert later.progress == pytest.approx(0.4)
        priorities = [g.priority for g in current]
        assert priorities == sorted(priorities, reverse=True)

    def test_foreign_goal_ids_are_not_reused(self) -> None:
        manager = _manager()
        foreign = _manager().create_goal(GoalType.EXPLORE, ExploreTarget(3), 5)
        manager.add_goal(foreign)

        own = manager.create_goal(GoalType.EXPLORE, ExploreTarget(3), 5)
        manager.add_goal(own)

        assert own.id != foreign.id

    def test_missed_deadline_fails_goal(self) -> None:
        manager = _manager()
        goal = manager.create_goal(
            GoalType.WIN_DUELS, DuelTarget(3), 5, deadline=100.0
        )
        manager.add_goal(goal)

        manager.update_progress(make_context(now=200.0))

        assert goal.state is GoalState.FAILED
        assert goal.id not in {g.id for g in manager.get_current_goals()}
        assert goal.id not in {g.id for g in manager.get_completed_goals()}
        assert manager.get_stats().failed_goals == 1

    def test_close_deadline_raises_priority(self) -> None:
        manager = _manager()
        goal = manager.create_goal(
            GoalType.COLLECT_ITEMS,
            CollectTarget(10),
            5,
            deadline=10 * SECONDS_PER_HOUR,
        )
        manager.add_goal(goal)

        manager.update_progress(make_context(now=0.0))

        assert goal.priority == 8

    def test_good_progress_raises_priority(self) -> None:
        manager = _manager()
        goal = manager.create_goal(GoalType.COLLECT_ITEMS, CollectTarget(10), 5)
        manager.add_goal(goal)

        manager.update_progress(make_context(inventory_count=8))

        assert goal.progress == pytest.approx(0.8)
        assert goal.priority == 6

    def test_stalled_goal_loses_priority(self) -> None:
        manager = _manager()
        goal = manager.create_goal(GoalType.COLLECT_ITEMS, CollectTarget(10), 5)
        manager.add_goal(goal)

        manager.update_progress(make_context(now=49 * SECONDS_PER_HOUR))

        assert goal.priority == 4

    def test_priorities_and_progress_stay_in_range(self) -> None:
        manager = _manager("chaos")
        for step in range(30):
            manager.update_progress(
                make_context(now=step * 24 * SECONDS_PER_HOUR, gold=step * 50.0)
            )
            for goal in manager.get_current_goals():
                assert 1 <= goal.priority <= 10
                assert 0.0 <= goal.progress <= 1.0

    def test_duplicate_goal_rejected(self) -> None:
        manager = _manager()
        goal = manager.create_goal(GoalType.EXPLORE, ExploreTarget(3), 5)
        manager.add_goal(goal)
        with pytest.raises(ValueError, match="already tracked"):
            manager.add_goal(goal)

    def test_completing_inactive_goal_rejected(self) -> None:
        manager = _manager()
        goal = manager.create_goal(GoalType.EXPLORE, ExploreTarget(3), 5)
        with pytest.raises(ValueError, match="not active"):
            manager.complete_goal(goal, make_context())


class TestPrerequisites:
    def test_blocked_until_prerequisite_completes(self) -> None:
        manager = _manager()
        first = manager.create_goal(GoalType.COLLECT_ITEMS, CollectTarget(1), 3)
        second = manager.create_goal(
            GoalType.EXPLORE, ExploreTarget(5), 10, prerequisites=[first.id]
        )
        manager.add_goal(first)
        manager.add_goal(second)

        assert manager.is_blocked(second)
        assert second.id not in {g.id for g in manager.get_pursuable_goals()}

        manager.update_progress(make_context(inventory_count=1))

        assert not manager.is_blocked(second)
        assert second.id in {g.id for g in manager.get_pursuable_goals()}

    def test_top_goal_skips_blocked_goals(self) -> None:
        manager = _manager()
        for goal in manager.get_current_goals():
            manager.complete_goal(goal, make_context())
        blocked = manager.create_goal(
            GoalType.EXPLORE, ExploreTarget(5), 10, prerequisites=["missing"]
        )
        manager.add_goal(blocked)

        top = manager.get_top_goal()

        assert manager.get_current_goals()[0].id == blocked.id
        assert top is not None
        assert top.id != blocked.id


class TestQueries:
    """Tests for read-only queries."""

    def test_current_goals_are_stable_copies(self) -> None:
        manager = _manager("grinder")
        first = manager.get_current_goals()
        second = manager.get_current_goals()

        assert first == second
        first[0].priority = 1
        assert manager.get_current_goals()[0].priority == 10

    def test_recommended_action_matches_top_goal(self) -> None:
        manager = _manager("grinder")
        action = manager.get_recommended_action()
        assert action in RECOMMENDED_ACTIONS[GoalType.LEVEL_UP]

    def test_action_contribution(self) -> None:
        manager = _manager("grinder")
        assert manager.does_action_contribute_to_goals("job_sheriff")
        assert not manager.does_action_contribute_to_goals("zzz")

    def test_related_actions_count(self) -> None:
        manager = _manager()
        goal = manager.create_goal(
            GoalType.CRAFT_ITEM, CraftTarget(1), 5, related_actions=["Forge"]
        )
        assert goal_accepts_label(goal, "forge_weapon")
        assert goal_accepts_label(goal, goal.id.upper())

    def test_stats(self) -> None:
        stats = _manager("grinder").get_stats()

        assert stats.active_goals == 3
        assert stats.completed_goals == 0
        assert stats.completion_rate == 0.0
        assert stats.average_priority == pytest.approx(25 / 3)
        assert stats.average_progress == 0.0


class TestEmergentFollowUps:
    def test_grinder_keeps_levelling(self) -> None:
        manager = _manager("grinder")
        level_goal = manager.get_current_goals()[0]

        drafts = emergent_follow_ups("grinder", level_goal, make_context(level=6))

        assert len(drafts) == 1
        assert drafts[0].target == LevelTarget(9)
        assert drafts[0].priority == 9

    def test_unrelated_pair_gives_nothing(self) -> None:
        manager = _manager("grinder")
        level_goal = manager.get_current_goals()[0]
        assert emergent_follow_ups("social", level_goal, make_context()) == []
