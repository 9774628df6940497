from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Iterable, List

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from accretesim.random_source import RandomSource  # noqa: E402


class ScriptedSource:
    """Uniform source replaying a fixed sequence of draws, cycling at the end."""

    def __init__(self, values: Iterable[float]) -> None:
        self.values: List[float] = list(values)
        if not self.values:
            raise ValueError("ScriptedSource needs at least one value")
        self.calls = 0

    def uniform(self) -> float:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


@pytest.fixture
def scripted_rng() -> Callable[..., RandomSource]:
    """Return a factory building a :class:`RandomSource` over scripted draws."""

    def factory(*values: float) -> RandomSource:
        return RandomSource(ScriptedSource(values or (0.5,)))

    return factory


@pytest.fixture
def seeded_rng() -> RandomSource:
    return RandomSource.from_seed(12345)
