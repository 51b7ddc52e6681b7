"""Shared pytest fixtures for goldfish tests."""

import random
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parents[1] / "src"))

from goldfish.deck import Deck
from goldfish.game import Game


class StackedDeck(random.Random):
    """RNG whose shuffle leaves the deck as given: the first cards are the opening hand."""

    def shuffle(self, x):
        pass


# Sixty-card mono-green infect list used by pilot and simulator tests
INFECT_LIST = {
    "forest": 13,
    "pendelhaven": 1,
    "lotus petal": 2,
    "glistener elf": 4,
    "blight mamba": 4,
    "ichorclaw myr": 4,
    "rancor": 4,
    "vines of vastwood": 3,
    "mutagenic growth": 4,
    "invigorate": 2,
    "groundswell": 3,
    "might of old krosa": 4,
    "blossoming defense": 2,
    "seal of strength": 2,
    "scale up": 2,
    "gitaxian probe": 4,
    "apostle's blessing": 2,
}


@pytest.fixture
def forest_deck():
    """Forty forests: no win condition is ever reachable."""
    return Deck(["forest"] * 40, name="forests")


@pytest.fixture
def infect_deck():
    return Deck.from_counts(INFECT_LIST, name="infect")


@pytest.fixture
def stacked_rng():
    return StackedDeck()


@pytest.fixture
def new_game():
    """Game on the play at turn 1 with a small hand and library."""
    game = Game(
        True,
        library=["forest"] * 10,
        opening_hand=["forest", "forest", "giant growth", "glistener elf"],
    )
    game.start_next_turn()
    return game
