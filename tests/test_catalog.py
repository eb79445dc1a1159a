"""Tests for the stock action catalogue and sample context."""

from __future__ import annotations

from dataclasses import replace

import pytest

from playtest_ai.catalog import (
    default_actions,
    filter_actions_by_context,
    sample_context,
)
from playtest_ai.decision import DecisionEngine
from playtest_ai.personality import archetype_ids, create_profile
from tests.helpers import make_action, make_context


def _ids(actions: list) -> set[str]:
    return {a.id for a in actions}


class TestDefaultActions:
    def test_catalogue_contents(self) -> None:
        actions = default_actions()

        assert len(actions) == 26
        assert len(_ids(actions)) == 26
        assert {a.type for a in actions} == {
            "combat",
            "job",
            "craft",
            "social",
            "travel",
            "crime",
            "training",
            "quest",
            "shop",
            "gang",
            "custom",
        }

    def test_only_rest_runs_without_browser(self) -> None:
        offline = [a.id for a in default_actions() if not a.requires_browser]
        assert offline == ["wait"]

    def test_cooldowns_in_seconds(self) -> None:
        by_id = {a.id: a for a in default_actions()}
        assert by_id["combat_duel"].cooldown == 1800
        assert by_id["gang_war"].cooldown == 3600

    def test_fresh_list_each_call(self) -> None:
        first = default_actions()
        first.clear()
        assert default_actions()


class TestFilterActions:
    """Tests for filter_actions_by_context."""

    def test_time_of_day_window(self) -> None:
        available = _ids(
            filter_actions_by_context(default_actions(), sample_context())
        )

        assert "job_sheriff" in available
        assert "job_bartender" not in available
        assert "crime_robbery" not in available

    def test_resource_and_level_requirements(self) -> None:
        available = _ids(
            filter_actions_by_context(default_actions(), sample_context())
        )

        # Level 3 with 150 gold.
        assert "combat_boss" not in available
        assert "gang_war" not in available
        assert "shop_horse" not in available
        assert "shop_weapon" in available
        assert "craft_weapon" in available

    def test_cooldown_relative_to_now(self) -> None:
        action = make_action("duel", cooldown=1800.0, last_performed=1000.0)

        assert not filter_actions_by_context([action], make_context(now=2000.0))
        assert filter_actions_by_context([action], make_context(now=2800.0)) == [
            action
        ]

    def test_required_location(self) -> None:
        action = make_action(required_location="mine")

        assert not filter_actions_by_context([action], make_context(location="town"))
        assert filter_actions_by_context([action], make_context(location="mine"))

    def test_unknown_time_of_day_does_not_filter(self) -> None:
        action = make_action(available_time=("night",))
        assert filter_actions_by_context([action], make_context(time_of_day=None))


class TestSampleContext:
    def test_sample_character(self) -> None:
        context = sample_context(now=5000.0)

        assert context.character.level == 3
        assert context.character.gold == 150
        assert context.character.is_equipped
        assert context.world.time_of_day == "afternoon"
        assert context.recent_actions == ("combat_bandit", "job_sheriff")
        assert context.now == 5000.0

    def test_sample_history_and_goals(self) -> None:
        context = sample_context(now=5000.0)

        assert [o.success for o in context.history] == [True, True, False]
        assert [o.timestamp for o in context.history] == [4000.0, 3000.0, 2000.0]
        assert [g.id for g in context.goals] == ["earn_gold", "combat_mastery"]
        assert context.goals[0].progress == pytest.approx(0.15)

    @pytest.mark.parametrize("archetype", archetype_ids())
    def test_every_archetype_picks_an_available_action(self, archetype: str) -> None:
        context = sample_context()
        available = filter_actions_by_context(default_actions(), context)
        engine = DecisionEngine(create_profile(archetype))

        choice = engine.select_action(available, context)

        assert choice in available

    def test_busy_sample_still_has_options_when_tired(self) -> None:
        context = sample_context()
        tired = replace(context, character=replace(context.character, energy=0))

        available = filter_actions_by_context(default_actions(), tired)

        assert [a.id for a in available] == ["wait"]
