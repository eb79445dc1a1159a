"""Seeded random streams for bots.

Every bot draws from three independent streams, one per subsystem of its
brain: decision variance and chaos picks, goal targets, and personality
rolls. Each stream is a plain ``random.Random`` seeded from the bot's seed
and the subsystem name, so:

    - two bots built from the same seed and bot id make the same choices;
    - bots that share a run seed but not an id do not mirror each other;
    - an extra draw in one subsystem does not shift another's sequence.

Usage:
    streams = BotRandom.from_seed(run_seed, bot_id="bot-07")
    manager = GoalManager(profile, context, rng=streams.goals)
    engine = DecisionEngine(profile, rng=streams.decision)

Components built without a stream fall back to a shared module stream for
their domain:

    _rng = rng.get("bots.decision")

The shared streams are reseeded in place by ``seed_defaults()``, so module
level references stay valid.
"""

from __future__ import annotations

import zlib
from dataclasses import dataclass
from random import Random
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from playtest_ai.types import RandomSeed

# Anything with the ``random.Random`` interface (choice, randint, uniform,
# random). Tests pass a seeded ``Random`` directly.
RNG: TypeAlias = Random


def derive_seed(seed: RandomSeed, key: str) -> int | None:
    """Stable per-key seed, or None (OS entropy) when ``seed`` is None."""
    if seed is None:
        return None
    # crc32 rather than hash(): str hashing is salted per process.
    return zlib.crc32(f"{seed}:{key}".encode())


@dataclass(frozen=True, slots=True)
class BotRandom:
    """The random streams owned by one bot."""

    decision: Random
    goals: Random
    personality: Random

    @classmethod
    def from_seed(cls, seed: RandomSeed = None, bot_id: str = "") -> BotRandom:
        prefix = f"{bot_id}/" if bot_id else ""
        return cls(
            decision=Random(derive_seed(seed, f"{prefix}decision")),
            goals=Random(derive_seed(seed, f"{prefix}goals")),
            personality=Random(derive_seed(seed, f"{prefix}personality")),
        )


# =============================================================================
# Shared fallback streams
# =============================================================================

_default_seed: RandomSeed = None
_defaults: dict[str, Random] = {}


def get(domain: str) -> Random:
    """Shared stream for ``domain``, used when no stream is injected."""
    source = _defaults.get(domain)
    if source is None:
        source = Random(derive_seed(_default_seed, domain))
        _defaults[domain] = source
    return source


def seed_defaults(seed: RandomSeed) -> None:
    """Reseed every shared stream, including ones already handed out."""
    global _default_seed
    _default_seed = seed
    for domain, source in _defaults.items():
        source.seed(derive_seed(seed, domain))
