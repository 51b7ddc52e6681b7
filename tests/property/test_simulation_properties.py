"""
Property-based tests for the engine, the aggregation and the driver.

Covers card conservation, the hand ceiling, mulligan consistency,
order-independent aggregation and play/draw alternation.
"""

import random

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from goldfish.engine import GameEngine
from goldfish.pilots.infect import InfectDeckPilot
from goldfish.simulator import on_the_play_for
from goldfish.stats import merge_results
from goldfish.types import GameResult, Outcome, Start

pytest.importorskip("hypothesis")


# Gitaxian probe is left out: a deck full of probes chain-draws its whole library
CARD_POOL = [
    "forest", "pendelhaven", "lotus petal", "glistener elf", "blight mamba",
    "ichorclaw myr", "rancor", "vines of vastwood", "mutagenic growth",
    "invigorate", "groundswell", "might of old krosa", "blossoming defense",
    "seal of strength", "scale up", "apostle's blessing",
    "giant growth", "larger than life", "ranger's guile", "mental misstep",
]


class CheckedInfectPilot(InfectDeckPilot):
    """Infect pilot that asserts the engine invariants at every hook."""

    def _check(self):
        game = self.game
        assert game.card_count() == game.expected_card_count()

    def start(self):
        super().start()
        self.bottomed_at_start = self.game.cards_put_on_bottom

    def upkeep_phase(self):
        self._check()
        if self.game.current_turn > 1:
            assert len(self.game.hand) <= 7

    def first_main_phase(self):
        self._check()
        super().first_main_phase()

    def combat_phase(self):
        self._check()
        super().combat_phase()

    def second_main_phase(self):
        self._check()
        super().second_main_phase()

    def ending_phase(self):
        self._check()


class RejectFirst:
    def __init__(self, n):
        self.n = n
        self.seen = 0

    def __call__(self, hand):
        self.seen += 1
        return self.seen > self.n


game_results = st.builds(
    GameResult,
    on_the_play=st.booleans(),
    mulligans=st.integers(min_value=0, max_value=2),
    outcome=st.sampled_from([Outcome.WON, Outcome.TIMED_OUT]),
    end_turn=st.integers(min_value=1, max_value=6),
    count=st.integers(min_value=1, max_value=5),
)


class TestEngineProperties:
    """Invariants that hold for every trial."""

    @given(
        deck=st.lists(st.sampled_from(CARD_POOL), min_size=40, max_size=60),
        seed=st.integers(min_value=0, max_value=2**32 - 1),
        on_the_play=st.booleans(),
        rejects=st.integers(min_value=0, max_value=2),
    )
    @settings(max_examples=25, deadline=None)
    def test_invariants(self, deck, seed, on_the_play, rejects):
        """Conservation, hand ceiling and mulligan consistency on random decks."""
        engine = GameEngine(
            deck, CheckedInfectPilot, on_the_play,
            rng=random.Random(seed),
            pilot_options={"keep": RejectFirst(rejects)},
        )
        result = engine.run()
        assert result.mulligans == rejects
        assert engine.pilot.bottomed_at_start == rejects
        assert len(engine.game.hand) <= 7
        assert engine.game.card_count() == len(deck)
        if result.outcome is Outcome.TIMED_OUT:
            assert result.end_turn == 21
        else:
            assert 1 <= result.end_turn <= 20


class TestAggregationProperties:
    """merge_results() is a commutative, associative reduction."""

    @given(results=st.lists(game_results, max_size=30), seed=st.integers())
    @settings(max_examples=100, deadline=None)
    def test_order_independent(self, results, seed):
        shuffled = list(results)
        random.Random(seed).shuffle(shuffled)
        forward = merge_results(results)
        assert forward == merge_results(shuffled)
        assert [r.count for r in forward] == [r.count for r in merge_results(shuffled)]

    @given(results=st.lists(game_results, max_size=30), split=st.integers(min_value=0, max_value=30))
    @settings(max_examples=100, deadline=None)
    def test_associative(self, results, split):
        """Merging partial merges gives the same totals as one merge."""
        left, right = results[:split], results[split:]
        nested = merge_results(merge_results(left) + merge_results(right))
        flat = merge_results(results)
        assert nested == flat
        assert [r.count for r in nested] == [r.count for r in flat]
        assert sum(r.count for r in flat) == sum(r.count for r in results)


class TestAlternationProperties:
    @given(half=st.integers(min_value=1, max_value=5000))
    def test_exactly_half_on_the_play(self, half):
        """Under BOTH, exactly N/2 of N trials are on the play when N is even."""
        n = 2 * half
        assert sum(on_the_play_for(Start.BOTH, i) for i in range(n)) == half
