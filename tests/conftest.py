from __future__ import annotations

from collections.abc import Iterator

import pytest

from playtest_ai.util import rng


@pytest.fixture(autouse=True)
def seeded_rng() -> Iterator[None]:
    """Reseed the shared rng streams so each test sees the same random sequence."""
    rng.seed_defaults(1234)
    yield
    rng.seed_defaults(1234)
