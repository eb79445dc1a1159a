"""Tests for per-bot random streams and the shared fallback streams."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from random import Random

from playtest_ai.personality import create_variant
from playtest_ai.util import rng
from playtest_ai.util.rng import BotRandom, derive_seed


def _draws(source: Random, count: int = 5) -> list[int]:
    return [source.randint(1, 10_000) for _ in range(count)]


class TestDeriveSeed:
    def test_same_inputs_same_seed(self) -> None:
        assert derive_seed("playtest", "goals") == derive_seed("playtest", "goals")

    def test_keys_get_different_seeds(self) -> None:
        assert derive_seed(42, "goals") != derive_seed(42, "decision")

    def test_no_seed_means_entropy(self) -> None:
        assert derive_seed(None, "goals") is None


class TestBotRandom:
    """Tests for the streams owned by one bot."""

    def test_same_seed_and_id_reproduce(self) -> None:
        first = BotRandom.from_seed(12345, "bot-1")
        second = BotRandom.from_seed(12345, "bot-1")

        assert _draws(first.decision) == _draws(second.decision)
        assert _draws(first.goals) == _draws(second.goals)
        assert _draws(first.personality) == _draws(second.personality)

    def test_bots_sharing_a_run_seed_differ(self) -> None:
        first = BotRandom.from_seed(12345, "bot-1")
        second = BotRandom.from_seed(12345, "bot-2")
        assert _draws(first.decision) != _draws(second.decision)

    def test_subsystem_streams_are_isolated(self) -> None:
        """Extra draws in one subsystem do not shift another."""
        baseline = _draws(BotRandom.from_seed(7).goals)

        streams = BotRandom.from_seed(7)
        for _ in range(100):
            streams.decision.random()

        assert _draws(streams.goals) == baseline

    def test_streams_are_separate_objects(self) -> None:
        streams = BotRandom.from_seed(7)
        sources = (streams.decision, streams.goals, streams.personality)
        assert len({id(s) for s in sources}) == 3


class TestSharedStreams:
    """Tests for the module-level fallback streams."""

    def test_get_returns_same_stream(self) -> None:
        assert rng.get("bots.test") is rng.get("bots.test")

    def test_seed_defaults_reseeds_cached_streams(self) -> None:
        stream = rng.get("bots.test")
        rng.seed_defaults(99)
        first = _draws(stream)
        rng.seed_defaults(99)
        assert _draws(stream) == first

    def test_module_streams_follow_seed_defaults(self) -> None:
        """Streams cached at import time are reseeded in place."""
        rng.seed_defaults(7)
        first = create_variant("grinder")
        rng.seed_defaults(7)
        second = create_variant("grinder")

        assert first == second


class TestCrossSessionDeterminism:
    """Seed derivation must not depend on per-process hash salting."""

    def test_bot_streams_are_deterministic_across_processes(self) -> None:
        script = """
import sys
sys.path.insert(0, '.')
from playtest_ai.util.rng import BotRandom
stream = BotRandom.from_seed(12345, "bot-cross-session").decision
print(",".join(str(stream.randint(1, 10000)) for _ in range(5)))
"""
        root = str(Path(__file__).resolve().parents[2])
        result1 = subprocess.run(
            [sys.executable, "-c", script], capture_output=True, text=True, cwd=root
        )
        result2 = subprocess.run(
            [sys.executable, "-c", script], capture_output=True, text=True, cwd=root
        )

        assert result1.returncode == 0, f"Process 1 failed: {result1.stderr}"
        assert result2.returncode == 0, f"Process 2 failed: {result2.stderr}"
        assert result1.stdout.strip() == result2.stdout.strip()
