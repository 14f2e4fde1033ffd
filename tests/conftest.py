import random

import pytest

from imperium.config import Rules
from imperium.game import Game
from imperium.types import TerrainKind
from imperium.world import WorldGrid


class FixedRandom(random.Random):
    """Random source whose random() always returns the same value."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


@pytest.fixture
def rules():
    return Rules()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def grid():
    return WorldGrid.filled(80, 50, TerrainKind.GRASSLAND)


@pytest.fixture
def fixed_rng():
    return FixedRandom


@pytest.fixture
def game():
    """Two human seats on open grassland, so no AI runs unless a test asks for it."""
    return Game.create(["Alice", "Bob"], humans=(0, 1), seed=1)


@pytest.fixture
def p0_settler(game):
    return game.state.unit("settlers-player-0")


@pytest.fixture
def p0_warrior(game):
    return game.state.unit("warrior-player-0")
