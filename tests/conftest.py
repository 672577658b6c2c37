"""
Shared fixtures for the dice roller tests.
"""

from collections.abc import Callable, Iterable
from datetime import datetime, timezone

import pytest
from dice_roller.engine.roll_engine import RollEngine

FIXED_TIME = datetime(2024, 3, 1, 12, 30, 0, tzinfo=timezone.utc)


class ScriptedRandom:
    """Random source that makes each die land on a chosen face."""

    def __init__(self, sides: int, faces: Iterable[int] = ()) -> None:
        self.sides = sides
        self.faces: list[int] = list(faces)

    def queue(self, *faces: int) -> None:
        self.faces.extend(faces)

    def __call__(self) -> float:
        if not self.faces:
            raise AssertionError("ScriptedRandom ran out of faces")
        face = self.faces.pop(0)
        # Middle of the face's slice of [0, 1).
        return (face - 0.5) / self.sides


def fixed_clock() -> datetime:
    return FIXED_TIME


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return fixed_clock


@pytest.fixture
def make_rng() -> type[ScriptedRandom]:
    """Factory for scripted random sources with any number of sides."""
    return ScriptedRandom


@pytest.fixture
def d6_rng() -> ScriptedRandom:
    """A scripted source for six-sided dice; queue faces before rolling."""
    return ScriptedRandom(sides=6)


@pytest.fixture
def scripted_engine(d6_rng, clock) -> RollEngine:
    """An engine whose d6 rolls come from d6_rng."""
    return RollEngine(rng=d6_rng, clock=clock)


@pytest.fixture
def engine(clock) -> RollEngine:
    """An engine with a real random source and a fixed clock."""
    return RollEngine(clock=clock)
