"""Tests for the personality archetype registry and trait helpers."""

from __future__ import annotations

from dataclasses import replace
from random import Random

import pytest

from playtest_ai.personality import (
    ARCHETYPES,
    PersonalityTraits,
    PreferenceMatch,
    UnknownArchetypeError,
    action_multiplier,
    activity_duration_multiplier,
    archetype_ids,
    balanced_distribution,
    chat_frequency_multiplier,
    create_profile,
    create_random_profile,
    create_variant,
    generate_action_sequence,
    matches_preference,
    select_preferred_action,
    should_take_risk,
    social_engagement_chance,
    will_help_other_player,
    will_join_gang,
)


def _traits(**overrides: float) -> PersonalityTraits:
    values = dict.fromkeys(PersonalityTraits.__dataclass_fields__, 0.5)
    values.update(overrides)
    return PersonalityTraits(**values)


class TestRegistry:
    """Tests for archetype lookup and profile creation."""

    def test_eight_archetypes_registered(self) -> None:
        assert archetype_ids() == [
            "grinder",
            "social",
            "explorer",
            "combat",
            "economist",
            "criminal",
            "roleplayer",
            "chaos",
        ]

    def test_grinder_traits(self) -> None:
        profile = create_profile("grinder")

        assert profile.traits.patience == pytest.approx(0.9)
        assert profile.traits.curiosity == pytest.approx(0.1)
        assert profile.preferences.play_style == "efficient"

    def test_create_profile_returns_copy(self) -> None:
        profile = create_profile("social")

        assert profile == ARCHETYPES["social"]
        assert profile is not ARCHETYPES["social"]

    def test_unknown_archetype_raises(self) -> None:
        with pytest.raises(UnknownArchetypeError) as excinfo:
            create_profile("bard")

        assert excinfo.value.archetype == "bard"
        assert isinstance(excinfo.value, ValueError)

    def test_random_profile_is_registered(self) -> None:
        profile = create_random_profile(Random(3))
        assert profile.archetype in ARCHETYPES

    @pytest.mark.parametrize("archetype", list(ARCHETYPES))
    def test_variant_stays_near_base(self, archetype: str) -> None:
        base = ARCHETYPES[archetype].traits
        variant = create_variant(archetype, Random(11))

        for name in PersonalityTraits.__dataclass_fields__:
            value = getattr(variant.traits, name)
            assert 0.0 <= value <= 1.0
            assert abs(value - getattr(base, name)) <= 0.1 + 1e-9

    def test_variant_keeps_preferences(self) -> None:
        variant = create_variant("explorer", Random(5))
        assert variant.preferences == ARCHETYPES["explorer"].preferences

    @pytest.mark.parametrize(
        ("total", "expected_first", "expected_last"),
        [(0, 0, 0), (8, 1, 1), (10, 2, 1), (17, 3, 2)],
    )
    def test_balanced_distribution(
        self, total: int, expected_first: int, expected_last: int
    ) -> None:
        distribution = balanced_distribution(total)

        assert sum(distribution.values()) == total
        assert distribution["grinder"] == expected_first
        assert distribution["chaos"] == expected_last


class TestTraits:
    def test_out_of_range_trait_rejected(self) -> None:
        with pytest.raises(ValueError, match="risk_tolerance"):
            _traits(risk_tolerance=1.5)

    def test_replace_revalidates(self) -> None:
        with pytest.raises(ValueError):
            replace(_traits(), greed=-0.1)


class TestActionMultiplier:
    """Tests for keyword-driven trait multipliers."""

    def test_unmatched_label_is_neutral(self) -> None:
        assert action_multiplier("wait", _traits()) == pytest.approx(1.0)

    def test_matching_group_uses_trait(self) -> None:
        assert action_multiplier("combat", _traits(aggression=0.5)) == pytest.approx(
            1.25
        )

    def test_low_trait_is_clamped_at_floor(self) -> None:
        assert action_multiplier("duel", _traits(aggression=0.0)) == pytest.approx(
            0.5
        )

    def test_several_groups_are_clamped_at_ceiling(self) -> None:
        traits = _traits(aggression=1.0, patience=1.0)
        assert action_multiplier("combat_job", traits) == pytest.approx(2.0)

    def test_label_is_case_insensitive(self) -> None:
        traits = _traits(sociability=0.8)
        assert action_multiplier("CHAT", traits) == action_multiplier("chat", traits)


class TestPreferences:
    def test_preferred_activity(self) -> None:
        preferences = ARCHETYPES["grinder"].preferences
        match = matches_preference("jobs_board", preferences)
        assert match is PreferenceMatch.PREFERRED

    def test_avoided_activity(self) -> None:
        preferences = ARCHETYPES["grinder"].preferences
        assert matches_preference("saloon_chat", preferences) is PreferenceMatch.AVOIDED

    def test_preferred_wins_over_avoided(self) -> None:
        preferences = ARCHETYPES["grinder"].preferences
        assert matches_preference("jobs_chat", preferences) is PreferenceMatch.PREFERRED

    def test_neutral_activity(self) -> None:
        preferences = ARCHETYPES["grinder"].preferences
        assert matches_preference("fishing", preferences) is PreferenceMatch.NEUTRAL


class TestBehaviorHelpers:
    """Tests for the randomized behavior helpers."""

    def test_zero_risk_always_taken(self) -> None:
        source = Random(1)
        traits = _traits(risk_tolerance=0.0)
        assert all(should_take_risk(0.0, traits, source) for _ in range(50))

    def test_extreme_risk_refused_by_cautious_bot(self) -> None:
        source = Random(1)
        traits = _traits(risk_tolerance=0.2)
        assert not any(should_take_risk(1.0, traits, source) for _ in range(50))

    def test_duration_multiplier_for_patient_bot(self) -> None:
        traits = ARCHETYPES["grinder"].traits
        assert activity_duration_multiplier("job", traits) == pytest.approx(1.24)

    def test_impatient_bots_rush(self) -> None:
        traits = _traits(patience=0.2)
        assert activity_duration_multiplier("job", traits) == pytest.approx(0.574)

    @pytest.mark.parametrize(
        ("sociability", "low", "high"),
        [(0.9, 2.0, 3.0), (0.6, 1.0, 2.0), (0.4, 0.5, 1.0), (0.1, 0.1, 0.5)],
    )
    def test_chat_frequency_bands(
        self, sociability: float, low: float, high: float
    ) -> None:
        value = chat_frequency_multiplier(_traits(sociability=sociability), Random(2))
        assert low <= value <= high

    @pytest.mark.parametrize("sociability", [0.0, 0.05, 0.5, 1.0])
    def test_social_engagement_stays_near_sociability(
        self, sociability: float
    ) -> None:
        source = Random(6)
        traits = _traits(sociability=sociability)
        for _ in range(20):
            chance = social_engagement_chance(traits, source)
            assert 0.0 <= chance <= 1.0
            assert abs(chance - sociability) <= 0.1 + 1e-9

    def test_never_helps_when_cost_is_total(self) -> None:
        source = Random(4)
        traits = _traits(greed=0.0, sociability=1.0)
        assert not any(
            will_help_other_player(traits, 1.0, source) for _ in range(50)
        )

    def test_joins_top_gang(self) -> None:
        source = Random(4)
        traits = _traits(loyalty=0.0, sociability=0.0)
        assert all(will_join_gang(traits, 1.0, source) for _ in range(50))


class TestActionSelection:
    def test_empty_labels_give_none(self) -> None:
        assert select_preferred_action([], create_profile("grinder")) is None

    def test_grinder_prefers_jobs_over_chat(self) -> None:
        profile = create_profile("grinder")
        for seed in range(10):
            assert select_preferred_action(["chat", "jobs"], profile, Random(seed)) == (
                "jobs"
            )

    def test_chaos_picks_from_input(self) -> None:
        labels = ["chat", "jobs", "duel"]
        choice = select_preferred_action(labels, create_profile("chaos"), Random(0))
        assert choice in labels

    def test_explorer_never_repeats(self) -> None:
        labels = ["explore", "quest", "travel"]
        sequence = generate_action_sequence(
            create_profile("explorer"), labels, 30, Random(9)
        )

        assert len(sequence) == 30
        assert all(a != b for a, b in zip(sequence, sequence[1:], strict=False))

    def test_grinder_sequence_repeats_often(self) -> None:
        labels = ["jobs", "grinding", "farming", "chat"]
        sequence = generate_action_sequence(
            create_profile("grinder"), labels, 40, Random(9)
        )
        repeats = sum(a == b for a, b in zip(sequence, sequence[1:], strict=False))

        assert len(sequence) == 40
        assert repeats > 15
