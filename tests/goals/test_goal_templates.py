"""Tests for goal records, target payloads and per-type templates."""

from __future__ import annotations

from random import Random

import pytest

from playtest_ai.context import GangMembership
from playtest_ai.goals import (
    ANY,
    GOAL_TEMPLATES,
    DuelTarget,
    FriendTarget,
    GangTarget,
    Goal,
    GoalType,
    GoldTarget,
    LevelTarget,
    PurchaseTarget,
    RankTarget,
    SkillTarget,
    calculate_progress,
    goal_name,
)
from playtest_ai.personality import create_profile
from tests.helpers import make_context


def _goal(goal_type: GoalType, target: object, **overrides: object) -> Goal:
    fields: dict = {
        "id": f"{goal_type.value}-test",
        "goal_type": goal_type,
        "name": "test goal",
        "description": "",
        "priority": 5,
        "target": target,
    }
    fields.update(overrides)
    return Goal(**fields)


def test_every_goal_type_has_a_template() -> None:
    assert set(GOAL_TEMPLATES) == set(GoalType)


class TestGoalRecord:
    """Tests for Goal validation and clamping."""

    def test_priority_is_clamped(self) -> None:
        assert _goal(GoalType.LEVEL_UP, LevelTarget(5), priority=15).priority == 10
        assert _goal(GoalType.LEVEL_UP, LevelTarget(5), priority=-3).priority == 1

    def test_progress_is_clamped(self) -> None:
        goal = _goal(GoalType.LEVEL_UP, LevelTarget(5), progress=1.7)
        assert goal.progress == 1.0

    def test_mismatched_target_rejected(self) -> None:
        with pytest.raises(TypeError):
            _goal(GoalType.LEVEL_UP, GoldTarget(100))

    def test_adjust_priority_stays_in_range(self) -> None:
        goal = _goal(GoalType.LEVEL_UP, LevelTarget(5), priority=9)
        goal.adjust_priority(5)
        assert goal.priority == 10
        goal.adjust_priority(-20)
        assert goal.priority == 1

    @pytest.mark.parametrize(
        ("goal_type", "target", "expected"),
        [
            (GoalType.LEVEL_UP, LevelTarget(5), "Reach Level 5"),
            (GoalType.EARN_GOLD, GoldTarget(250), "Earn 250 Gold"),
            (GoalType.MAX_SKILL, SkillTarget(), "Master a skill"),
            (GoalType.WIN_DUELS, DuelTarget(3), "Win 3 Duel(s)"),
        ],
    )
    def test_goal_names(
        self, goal_type: GoalType, target: object, expected: str
    ) -> None:
        assert goal_name(goal_type, target) == expected  # type: ignore[arg-type]


class TestProgress:
    """Tests for progress calculation from the character snapshot."""

    @pytest.mark.parametrize(("level", "expected"), [(2, 0.4), (5, 1.0), (7, 1.4)])
    def test_level_progress(self, level: int, expected: float) -> None:
        goal = _goal(GoalType.LEVEL_UP, LevelTarget(5))
        assert calculate_progress(goal, make_context(level=level)) == pytest.approx(
            expected
        )

    def test_gold_progress_measured_from_start(self) -> None:
        goal = _goal(GoalType.EARN_GOLD, GoldTarget(300, start_gold=100))
        assert calculate_progress(goal, make_context(gold=200)) == pytest.approx(0.5)

    def test_gold_target_already_reached(self) -> None:
        goal = _goal(GoalType.EARN_GOLD, GoldTarget(100, start_gold=500))
        assert calculate_progress(goal, make_context(gold=500)) == 1.0
        assert calculate_progress(goal, make_context(gold=50)) == 0.0

    def test_spending_gold_lowers_progress(self) -> None:
        goal = _goal(GoalType.EARN_GOLD, GoldTarget(300, start_gold=100))
        assert calculate_progress(goal, make_context(gold=50)) < 0

    def test_duel_progress_is_relative(self) -> None:
        goal = _goal(GoalType.WIN_DUELS, DuelTarget(10, start_wins=2))
        assert calculate_progress(goal, make_context(duels_won=7)) == pytest.approx(
            0.5
        )

    def test_gang_progress(self) -> None:
        goal = _goal(GoalType.JOIN_GANG, GangTarget())
        assert calculate_progress(goal, make_context()) == 0.0
        with_gang = make_context(gang=GangMembership("Dalton Gang"))
        assert calculate_progress(goal, with_gang) == 1.0

    def test_any_skill_uses_best_skill(self) -> None:
        goal = _goal(GoalType.MAX_SKILL, SkillTarget(ANY, level=50))
        context = make_context(skills={"stealth": 10, "combat": 25})
        assert calculate_progress(goal, context) == pytest.approx(0.5)

    def test_rank_for_named_faction(self) -> None:
        goal = _goal(GoalType.ACHIEVE_RANK, RankTarget("law", reputation=200))
        context = make_context(reputation={"law": 50, "outlaws": 190})
        assert calculate_progress(goal, context) == pytest.approx(0.25)

    def test_purchase_of_item_type_after_start(self) -> None:
        goal = _goal(GoalType.BUY_PROPERTY, PurchaseTarget("horse", start_count=1))
        assert calculate_progress(goal, make_context(purchases=("horse",))) == 0.0
        bought = make_context(purchases=("horse", "horse"))
        assert calculate_progress(goal, bought) == 1.0


class TestTemplates:
    """Tests for target generation, baselines and follow-ups."""

    def test_grinder_plans_big_level_jumps(self) -> None:
        template = GOAL_TEMPLATES[GoalType.LEVEL_UP]
        target = template.generate_target(
            make_context(level=4), create_profile("grinder"), Random(0)
        )
        assert isinstance(target, LevelTarget)
        assert 7 <= target.level <= 9

    def test_gold_baseline_captured(self) -> None:
        template = GOAL_TEMPLATES[GoalType.EARN_GOLD]
        target = template.capture_baseline(GoldTarget(1000), make_context(gold=320))
        assert target == GoldTarget(1000, start_gold=320)

    def test_friend_baseline_captured(self) -> None:
        template = GOAL_TEMPLATES[GoalType.MAKE_FRIENDS]
        target = template.capture_baseline(FriendTarget(8), make_context(friends=3))
        assert target.start_friends == 3

    @pytest.mark.parametrize(
        ("archetype", "expected"),
        [("grinder", 10), ("combat", 8), ("economist", 5), ("social", 7)],
    )
    def test_level_up_base_priority(self, archetype: str, expected: int) -> None:
        template = GOAL_TEMPLATES[GoalType.LEVEL_UP]
        assert template.get_base_priority(create_profile(archetype)) == expected

    def test_combat_duel_follow_ups(self) -> None:
        template = GOAL_TEMPLATES[GoalType.WIN_DUELS]
        goal = _goal(GoalType.WIN_DUELS, DuelTarget(10))

        drafts = template.get_follow_up_goals(
            goal, make_context(), create_profile("combat"), Random(0)
        )

        assert [d.goal_type for d in drafts] == [
            GoalType.WIN_DUELS,
            GoalType.BUY_PROPERTY,
        ]
        assert drafts[0].target == DuelTarget(20)

    def test_duel_follow_ups_only_for_combat(self) -> None:
        template = GOAL_TEMPLATES[GoalType.WIN_DUELS]
        goal = _goal(GoalType.WIN_DUELS, DuelTarget(10))
        drafts = template.get_follow_up_goals(
            goal, make_context(), create_profile("social"), Random(0)
        )
        assert drafts == []

    def test_patient_greedy_bots_follow_level_up_with_skill_and_gold(self) -> None:
        template = GOAL_TEMPLATES[GoalType.LEVEL_UP]
        goal = _goal(GoalType.LEVEL_UP, LevelTarget(5))

        drafts = template.get_follow_up_goals(
            goal,
            make_context(level=5, skills={"mining": 4}),
            create_profile("grinder"),
            Random(0),
        )

        assert [d.goal_type for d in drafts] == [
            GoalType.MAX_SKILL,
            GoalType.EARN_GOLD,
        ]
        assert drafts[0].target == SkillTarget("mining")
        assert drafts[1].target == GoldTarget(500)
