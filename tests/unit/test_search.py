#!/usr/bin/env python3
"""Unit tests for the lethal-order search."""

import logging
from itertools import islice

import pytest

from goldfish.mana import Mana
from goldfish.search import (
    Effect,
    LethalSearch,
    Orderings,
    evaluate_order,
    find_best_order,
    reaches_target,
)


G = Mana.of("G")
GG = Mana.of("GG")


def effect(name, cost, score):
    return Effect(name, Mana.of(cost), score)


class TestEvaluateOrder:
    """Test the greedy-affordability rule."""

    def test_skips_unaffordable(self):
        """An effect unaffordable at its position is skipped, later ones still play."""
        vines = effect("vines", "GG", 4)
        growth = effect("growth", "G", 3)
        result = evaluate_order(G, [vines, growth])
        assert result.score == 3
        assert result.played == (growth,)
        assert result.skipped == (vines,)
        assert result.remaining.is_empty()

    def test_empty(self):
        result = evaluate_order(GG, [])
        assert result.score == 0
        assert result.remaining == GG

    def test_negative_score_rejected(self):
        with pytest.raises(ValueError):
            effect("drain", "G", -1)


class TestOrderings:
    """Test the lazy multiset permutation iterator."""

    def test_distinct_orderings_only(self):
        a, b = effect("a", "G", 1), effect("b", "G", 2)
        orders = list(Orderings([a, a, b]))
        assert len(orders) == 3
        assert len(set(orders)) == 3

    def test_len_without_enumeration(self):
        effects = [effect(str(i), "G", i) for i in range(8)]
        assert len(Orderings(effects)) == 40320
        assert len(Orderings(effects[:2] * 2)) == 6

    def test_restartable(self):
        effects = [effect(str(i), "G", i) for i in range(4)]
        orderings = Orderings(effects)
        assert list(orderings) == list(orderings)

    def test_lazy(self):
        """Taking the first ordering of a large set does not enumerate the rest."""
        effects = [effect(str(i), "G", i) for i in range(20)]
        first = next(iter(Orderings(effects)))
        assert first == tuple(effects)

    def test_lexicographic_by_first_appearance(self):
        a, b, c = effect("a", "G", 1), effect("b", "G", 1), effect("c", "G", 1)
        orders = list(islice(Orderings([c, a, b]), 3))
        assert orders == [(c, a, b), (c, b, a), (a, c, b)]

    def test_empty(self):
        assert list(Orderings([])) == [()]
        assert len(Orderings([])) == 1


class TestFindBestOrder:
    """Test the search result and its tie-breaking rules."""

    def test_plays_higher_value_effect(self):
        """Budget G with two G effects: the one scoring 4 is played."""
        small, big = effect("small", "G", 2), effect("big", "G", 4)
        result = find_best_order(G, [small, big])
        assert result.score == 4
        assert result.canonical_score == 2
        assert result.evaluation.played == (big,)
        assert result.exhaustive

    def test_expensive_first_is_optimal(self):
        """Budget GG with GG:4, G:1, G:1: the canonical GG-first order is kept."""
        vines, guile = effect("vines", "GG", 4), effect("guile", "G", 1)
        canonical = (vines, guile, guile)
        result = find_best_order(GG, canonical)
        assert result.score == 4
        assert result.order == canonical
        assert result.permutations_evaluated == 4

    def test_fast_path(self):
        """When the canonical order reaches the target, nothing is enumerated."""
        vines, guile = effect("vines", "GG", 4), effect("guile", "G", 1)
        result = find_best_order(GG, [vines, guile, guile], target=4)
        assert result.permutations_evaluated == 1
        assert not result.exhaustive
        assert reaches_target(result, 4)

    def test_tie_keeps_canonical(self):
        a, b = effect("a", "G", 3), effect("b", "G", 3)
        result = find_best_order(G, [a, b])
        assert result.order == (a, b)

    def test_tie_prefers_earliest_enumerated(self):
        """Among better orderings with equal scores, the first enumerated wins."""
        generic = effect("generic", "1", 1)
        green = effect("green", "G", 3)
        blue = effect("blue", "U", 3)
        result = find_best_order(Mana(U=1, G=1), [generic, green, blue])
        assert result.canonical_score == 4
        assert result.score == 6
        assert result.order == (green, blue, generic)

    def test_stops_at_maximum(self):
        """Reaching the sum of all scores ends the enumeration."""
        effects = [effect("a", "G", 1), effect("b", "G", 2), effect("c", "G", 3)]
        result = find_best_order(Mana.of("GGG"), effects)
        assert result.score == 6
        assert result.permutations_evaluated == 1

    def test_ceiling_fails_closed(self, caplog):
        """Too many candidates: canonical order, degraded, warning logged."""
        effects = [effect(str(i), "G", i) for i in range(9)]
        with caplog.at_level(logging.WARNING, logger="goldfish.search"):
            result = LethalSearch(max_candidates=8).find_best_order(G, effects)
        assert result.degraded
        assert result.order == tuple(effects)
        assert result.score == result.canonical_score == 0
        assert "ceiling exceeded" in caplog.text

    def test_invalid_ceiling(self):
        with pytest.raises(ValueError):
            LethalSearch(max_candidates=-1)
