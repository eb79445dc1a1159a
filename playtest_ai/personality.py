"""
Personality archetypes for playtest bots.

Eight fixed archetypes cover the spread of real player behavior, from the
efficiency-obsessed grinder to the chaos agent that exists to hit edge cases.
Each archetype bundles a trait vector (seven values in [0, 1]) with activity
preferences. The registry is built once at import and never mutated;
create_profile() always hands out a fresh deep copy.

Traits feed the rest of the brain in two ways:
    action_multiplier: keyword groups in an action label scale its score by
        the trait that governs that kind of activity.
    matches_preference: substring match of a label against the preferred
        and avoided activity lists.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from enum import Enum, auto
from types import MappingProxyType

from playtest_ai import config
from playtest_ai.types import ArchetypeId, PlayStyle
from playtest_ai.util import rng
from playtest_ai.util.rng import RNG

_rng = rng.get("bots.personality")


class UnknownArchetypeError(ValueError):
    """Raised when asked for an archetype that is not in the registry."""

    def __init__(self, archetype: str) -> None:
        super().__init__(f"Unknown archetype: {archetype!r}")
        self.archetype = archetype


class PreferenceMatch(Enum):
    PREFERRED = auto()
    AVOIDED = auto()
    NEUTRAL = auto()


@dataclass(frozen=True, slots=True)
class PersonalityTraits:
    risk_tolerance: float  # 0 = extremely cautious, 1 = reckless
    sociability: float  # 0 = solo player, 1 = highly social
    patience: float  # 0 = impulsive, 1 = methodical
    greed: float  # 0 = altruistic, 1 = profit-driven
    aggression: float  # 0 = peaceful, 1 = seeks fights
    loyalty: float  # 0 = mercenary, 1 = faction-loyal
    curiosity: float  # 0 = sticks to routine, 1 = experimental

    def __post_init__(self) -> None:
        for name in self.__dataclass_fields__:
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                msg = f"trait {name} must be in [0.0, 1.0], got {value}"
                raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class PersonalityPreferences:
    preferred_activities: tuple[str, ...]
    avoided_activities: tuple[str, ...]
    play_style: PlayStyle


@dataclass(frozen=True, slots=True)
class PersonalityProfile:
    archetype: ArchetypeId
    name: str
    description: str
    traits: PersonalityTraits
    preferences: PersonalityPreferences


# =============================================================================
# ARCHETYPES
# =============================================================================

_GRINDER = PersonalityProfile(
    archetype="grinder",
    name="The Grinder",
    description=(
        "Efficiency-focused player who optimizes XP/gold per hour through "
        "repetitive, proven strategies"
    ),
    traits=PersonalityTraits(
        risk_tolerance=0.2,
        sociability=0.2,
        patience=0.9,
        greed=0.8,
        aggression=0.4,
        loyalty=0.5,
        curiosity=0.1,
    ),
    preferences=PersonalityPreferences(
        preferred_activities=(
            "jobs",
            "skill_training",
            "efficient_combat",
            "grinding",
            "leveling",
            "farming",
            "resource_gathering",
        ),
        avoided_activities=(
            "chat",
            "exploration",
            "roleplay",
            "mail",
            "social_events",
            "experimental_activities",
        ),
        play_style="efficient",
    ),
)

_SOCIAL = PersonalityProfile(
    archetype="social",
    name="The Social Butterfly",
    description=(
        "Community-focused player who prioritizes relationships, chat, and "
        "collaborative activities"
    ),
    traits=PersonalityTraits(
        risk_tolerance=0.3,
        sociability=0.95,
        patience=0.7,
        greed=0.3,
        aggression=0.1,
        loyalty=0.8,
        curiosity=0.6,
    ),
    preferences=PersonalityPreferences(
        preferred_activities=(
            "chat",
            "mail",
            "friends",
            "gang_activities",
            "gang_events",
            "helping_others",
            "group_content",
            "trading_with_friends",
        ),
        avoided_activities=(
            "solo_grinding",
            "combat",
            "duels",
            "crimes",
            "antisocial_behavior",
        ),
        play_style="immersive",
    ),
)

_EXPLORER = PersonalityProfile(
    archetype="explorer",
    name="The Explorer",
    description=(
        "Curiosity-driven adventurer who visits new locations, tries diverse "
        "activities, and values novelty"
    ),
    traits=PersonalityTraits(
        risk_tolerance=0.6,
        sociability=0.5,
        patience=0.4,
        greed=0.4,
        aggression=0.3,
        loyalty=0.2,
        curiosity=0.95,
    ),
    preferences=PersonalityPreferences(
        preferred_activities=(
            "travel",
            "exploration",
            "quests",
            "diverse_activities",
            "new_locations",
            "discovery",
            "lore",
            "npcs",
        ),
        avoided_activities=(
            "repetition",
            "grinding",
            "staying_in_one_place",
            "routine",
            "optimization",
        ),
        play_style="chaotic",
    ),
)

_COMBAT = PersonalityProfile(
    archetype="combat",
    name="The Combat Enthusiast",
    description=(
        "Battle-focused warrior who seeks duels, bounties, and combat superiority"
    ),
    traits=PersonalityTraits(
        risk_tolerance=0.85,
        sociability=0.4,
        patience=0.5,
        greed=0.6,
        aggression=0.9,
        loyalty=0.6,
        curiosity=0.3,
    ),
    preferences=PersonalityPreferences(
        preferred_activities=(
            "combat",
            "duels",
            "bounties",
            "weapon_upgrades",
            "armor_upgrades",
            "pvp",
            "tournaments",
            "combat_training",
        ),
        avoided_activities=(
            "crafting",
            "trading",
            "social_chat",
            "exploration",
            "peaceful_activities",
        ),
        play_style="efficient",
    ),
)

_ECONOMIST = PersonalityProfile(
    archetype="economist",
    name="The Economist",
    description=(
        "Market-savvy trader who maximizes wealth through crafting, trading, "
        "and investments"
    ),
    traits=PersonalityTraits(
        risk_tolerance=0.3,
        sociability=0.3,
        patience=0.95,
        greed=0.95,
        aggression=0.1,
        loyalty=0.4,
        curiosity=0.5,
    ),
    preferences=PersonalityPreferences(
        preferred_activities=(
            "trading",
            "crafting",
            "market_watching",
            "investments",
            "shop_management",
            "resource_trading",
            "economy_optimization",
        ),
        avoided_activities=(
            "combat",
            "duels",
            "social_chat",
            "exploration",
            "crimes",
        ),
        play_style="efficient",
    ),
)

_CRIMINAL = PersonalityProfile(
    archetype="criminal",
    name="The Criminal",
    description=(
        "High-risk outlaw who pursues crimes, heists, and illegal activities "
        "despite jail risk"
    ),
    traits=PersonalityTraits(
        risk_tolerance=0.9,
        sociability=0.4,
        patience=0.2,
        greed=0.8,
        aggression=0.7,
        loyalty=0.2,
        curiosity=0.6,
    ),
    preferences=PersonalityPreferences(
        preferred_activities=(
            "crimes",
            "heists",
            "outlaw_activities",
            "high_risk_actions",
            "jail_break",
            "smuggling",
            "theft",
        ),
        avoided_activities=(
            "legal_jobs",
            "reputation_building",
            "faction_quests",
            "honest_trading",
            "law_enforcement",
        ),
        play_style="chaotic",
    ),
)

_ROLEPLAYER = PersonalityProfile(
    archetype="roleplayer",
    name="The Role-Player",
    description=(
        "Immersion-focused player who prioritizes story, character development, "
        "and lore over optimization"
    ),
    traits=PersonalityTraits(
        risk_tolerance=0.5,
        sociability=0.8,
        patience=0.85,
        greed=0.3,
        aggression=0.4,
        loyalty=0.8,
        curiosity=0.7,
    ),
    preferences=PersonalityPreferences(
        preferred_activities=(
            "chat",
            "quests",
            "lore",
            "npc_interactions",
            "story_content",
            "character_development",
            "roleplay_events",
            "mail",
        ),
        avoided_activities=(
            "min_maxing",
            "exploits",
            "grinding",
            "meta_gaming",
            "breaking_character",
        ),
        play_style="immersive",
    ),
)

# All traits sit at 0.5: the chaos agent ignores scoring entirely.
_CHAOS = PersonalityProfile(
    archetype="chaos",
    name="The Chaos Agent",
    description=(
        "Unpredictable player who makes random decisions and tests unusual "
        "action combinations"
    ),
    traits=PersonalityTraits(
        risk_tolerance=0.5,
        sociability=0.5,
        patience=0.5,
        greed=0.5,
        aggression=0.5,
        loyalty=0.5,
        curiosity=0.5,
    ),
    preferences=PersonalityPreferences(
        preferred_activities=(
            "random",
            "unusual_combinations",
            "edge_cases",
            "unexpected_sequences",
            "system_testing",
        ),
        avoided_activities=(
            "predictable_patterns",
            "optimization",
            "routine",
        ),
        play_style="chaotic",
    ),
)

ARCHETYPES: Mapping[str, PersonalityProfile] = MappingProxyType(
    {
        profile.archetype: profile
        for profile in (
            _GRINDER,
            _SOCIAL,
            _EXPLORER,
            _COMBAT,
            _ECONOMIST,
            _CRIMINAL,
            _ROLEPLAYER,
            _CHAOS,
        )
    }
)

# Keyword groups checked against lower-cased action labels. Each matching group
# multiplies the score by 0.5 plus its trait-weighted term.
_ACTION_KEYWORDS: tuple[tuple[tuple[str, ...], dict[str, float]], ...] = (
    (("combat", "duel", "fight"), {"aggression": 1.5}),
    (("chat", "mail", "friend"), {"sociability": 1.5}),
    (("grind", "farm", "job"), {"patience": 1.5}),
    (("explore", "travel", "quest"), {"curiosity": 1.5}),
    (("crime", "heist", "risky"), {"risk_tolerance": 1.5}),
    (("trade", "craft", "market"), {"greed": 1.0, "patience": 0.5}),
    (("gang", "faction"), {"loyalty": 1.5}),
)


# =============================================================================
# REGISTRY API
# =============================================================================


def archetype_ids() -> list[str]:
    return list(ARCHETYPES)


def create_profile(archetype_id: str) -> PersonalityProfile:
    """Return a deep copy of a registered archetype.

    Raises:
        UnknownArchetypeError: if ``archetype_id`` is not registered.
    """
    profile = ARCHETYPES.get(archetype_id)
    if profile is None:
        raise UnknownArchetypeError(archetype_id)
    return copy.deepcopy(profile)


def create_random_profile(rng: RNG | None = None) -> PersonalityProfile:
    source = rng or _rng
    return create_profile(source.choice(archetype_ids()))


def create_variant(archetype_id: str, rng: RNG | None = None) -> PersonalityProfile:
    """Create a copy of an archetype with every trait nudged by up to ±0.1.

    Useful for running several bots of the same archetype that are similar
    but not identical. Each trait gets independent noise and is clamped to
    [0, 1].
    """
    source = rng or _rng
    base = create_profile(archetype_id)
    noisy = {
        name: _clamp(
            getattr(base.traits, name)
            + source.uniform(-config.TRAIT_VARIANCE, config.TRAIT_VARIANCE)
        )
        for name in PersonalityTraits.__dataclass_fields__
    }
    return replace(base, traits=PersonalityTraits(**noisy))


def balanced_distribution(total_bots: int) -> dict[str, int]:
    """Spread ``total_bots`` across archetypes as evenly as possible."""
    ids = archetype_ids()
    base_count, remainder = divmod(total_bots, len(ids))
    return {
        archetype: base_count + (1 if index < remainder else 0)
        for index, archetype in enumerate(ids)
    }


# =============================================================================
# TRAIT HELPERS
# =============================================================================


def action_multiplier(label: str, traits: PersonalityTraits) -> float:
    """Return how strongly this personality values an action, in [0.5, 2.0]."""
    label_lower = label.lower()
    multiplier = 1.0
    for keywords, weights in _ACTION_KEYWORDS:
        if any(keyword in label_lower for keyword in keywords):
            multiplier *= 0.5 + sum(
                getattr(traits, trait) * weight for trait, weight in weights.items()
            )
    return _clamp(
        multiplier, config.ACTION_MULTIPLIER_MIN, config.ACTION_MULTIPLIER_MAX
    )


def matches_preference(
    label: str, preferences: PersonalityPreferences
) -> PreferenceMatch:
    """Classify a label against the preference lists. Preferred wins ties."""
    label_lower = label.lower()
    if any(p.lower() in label_lower for p in preferences.preferred_activities):
        return PreferenceMatch.PREFERRED
    if any(a.lower() in label_lower for a in preferences.avoided_activities):
        return PreferenceMatch.AVOIDED
    return PreferenceMatch.NEUTRAL


def should_take_risk(
    risk: float, traits: PersonalityTraits, rng: RNG | None = None
) -> bool:
    """Accept a risk up to the bot's tolerance, give or take 0.2."""
    source = rng or _rng
    tolerance = _clamp(traits.risk_tolerance + source.uniform(-0.2, 0.2))
    return risk <= tolerance


def social_engagement_chance(
    traits: PersonalityTraits, rng: RNG | None = None
) -> float:
    source = rng or _rng
    return _clamp(traits.sociability + source.uniform(-0.1, 0.1))


def activity_duration_multiplier(activity: str, traits: PersonalityTraits) -> float:
    """How long this personality lingers on an activity, in [0.5, 2.0]."""
    activity_lower = activity.lower()
    multiplier = 0.7 + traits.patience * 0.6

    if "explore" in activity_lower or "quest" in activity_lower:
        multiplier *= 0.8 + traits.curiosity * 0.4

    if "chat" in activity_lower or "social" in activity_lower:
        multiplier *= 0.8 + traits.sociability * 0.4

    # Impatient players rush through everything.
    if traits.patience < 0.3:
        multiplier *= 0.7

    return _clamp(multiplier, 0.5, 2.0)


def will_help_other_player(
    traits: PersonalityTraits, cost_to_self: float, rng: RNG | None = None
) -> bool:
    source = rng or _rng
    helpfulness = (1 - traits.greed) * 0.6 + traits.sociability * 0.4
    return _clamp(helpfulness + source.uniform(-0.15, 0.15)) > cost_to_self


def will_join_gang(
    traits: PersonalityTraits, gang_reputation: float, rng: RNG | None = None
) -> bool:
    source = rng or _rng
    threshold = 0.5 - traits.loyalty * 0.3 - traits.sociability * 0.2
    return gang_reputation >= _clamp(threshold + source.uniform(-0.1, 0.1))


def chat_frequency_multiplier(
    traits: PersonalityTraits, rng: RNG | None = None
) -> float:
    """Scale for how often the bot chats, from 0.1x (loner) up to 3.0x."""
    source = rng or _rng
    if traits.sociability > 0.8:
        return source.uniform(2.0, 3.0)
    if traits.sociability > 0.5:
        return source.uniform(1.0, 2.0)
    if traits.sociability > 0.3:
        return source.uniform(0.5, 1.0)
    return source.uniform(0.1, 0.5)


def select_preferred_action(
    labels: Sequence[str], profile: PersonalityProfile, rng: RNG | None = None
) -> str | None:
    """Pick the label this personality likes best, with a little noise.

    A lightweight stand-in for the full DecisionEngine when only action
    labels are known.
    """
    if not labels:
        return None
    source = rng or _rng

    if profile.archetype == "chaos":
        return source.choice(labels)

    def score(label: str) -> float:
        value = 1.0
        match matches_preference(label, profile.preferences):
            case PreferenceMatch.PREFERRED:
                value *= 2.0
            case PreferenceMatch.AVOIDED:
                value *= config.AVOIDED_MULTIPLIER
            case PreferenceMatch.NEUTRAL:
                pass
        value *= action_multiplier(label, profile.traits)
        return value * source.uniform(0.9, 1.1)

    scored = [(score(label), label) for label in labels]
    return max(scored, key=lambda pair: pair[0])[1]


def generate_action_sequence(
    profile: PersonalityProfile,
    labels: Sequence[str],
    length: int,
    rng: RNG | None = None,
) -> list[str]:
    """Generate a plausible run of actions for this personality.

    Explorers never repeat the previous action; grinders repeat it 70% of
    the time.
    """
    source = rng or _rng
    sequence: list[str] = []
    for _ in range(length):
        pool = list(labels)
        if sequence and profile.archetype == "explorer":
            pool = [label for label in pool if label != sequence[-1]]

        if sequence and profile.archetype == "grinder" and source.random() < 0.7:
            sequence.append(sequence[-1])
            continue

        chosen = select_preferred_action(pool, profile, source)
        if chosen is not None:
            sequence.append(chosen)
    return sequence


def _clamp(value: float, min_value: float = 0.0, max_value: float = 1.0) -> float:
    return max(min_value, min(max_value, value))
