"""
Property-based tests for the lethal-order search.

These tests check the search against a brute-force reference over all
permutations of small candidate sets.
"""

from itertools import permutations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from goldfish.mana import Mana
from goldfish.search import Effect, Orderings, evaluate_order, find_best_order

pytest.importorskip("hypothesis")


COSTS = [Mana.of(c) for c in ("G", "GG", "1G", "U", "1", "2", "")]

budgets = st.builds(
    Mana,
    U=st.integers(min_value=0, max_value=2),
    G=st.integers(min_value=0, max_value=3),
    C=st.integers(min_value=0, max_value=1),
)
effects = st.builds(
    Effect,
    name=st.sampled_from(["a", "b", "c", "d"]),
    cost=st.sampled_from(COSTS),
    score=st.integers(min_value=0, max_value=5),
)


def total_cost(played):
    total = Mana.zero()
    for effect in played:
        total = total + effect.cost
    return total


class TestLethalSearchProperties:
    """Soundness and optimality of find_best_order()."""

    @given(budget=budgets, candidates=st.lists(effects, max_size=6))
    @settings(max_examples=200, deadline=None)
    def test_never_worse_than_canonical(self, budget, candidates):
        """The returned score is at least the canonical order's score."""
        result = find_best_order(budget, candidates)
        assert result.score >= evaluate_order(budget, candidates).score
        assert result.canonical_score == evaluate_order(budget, candidates).score

    @given(budget=budgets, candidates=st.lists(effects, max_size=6))
    @settings(max_examples=200, deadline=None)
    def test_returned_order_fits_budget(self, budget, candidates):
        """Replaying the returned order spends no more than the budget."""
        result = find_best_order(budget, candidates)
        replay = evaluate_order(budget, result.order)
        assert replay.score == result.score
        assert budget.contains(total_cost(replay.played))
        assert sorted(map(repr, result.order)) == sorted(map(repr, candidates))

    @given(budget=budgets, candidates=st.lists(effects, max_size=5))
    @settings(max_examples=150, deadline=None)
    def test_optimal(self, budget, candidates):
        """Exhaustive search matches a brute force over all permutations."""
        best = max(
            (evaluate_order(budget, order).score for order in permutations(candidates)),
            default=0,
        )
        assert find_best_order(budget, candidates).score == best

    @given(budget=budgets, candidates=st.lists(effects, max_size=6), target=st.integers(0, 12))
    @settings(max_examples=100, deadline=None)
    def test_target_fast_path(self, budget, candidates, target):
        """A canonical order reaching the target is returned as-is."""
        result = find_best_order(budget, candidates, target=target)
        if evaluate_order(budget, candidates).score >= target:
            assert result.order == tuple(candidates)
            assert result.permutations_evaluated == 1


class TestOrderingsProperties:
    """Orderings enumerates each distinct permutation exactly once."""

    @given(candidates=st.lists(effects, max_size=6))
    @settings(max_examples=100, deadline=None)
    def test_distinct_and_complete(self, candidates):
        orderings = Orderings(candidates)
        produced = list(orderings)
        assert len(produced) == len(set(produced)) == len(orderings)
        assert set(produced) == set(permutations(candidates))
