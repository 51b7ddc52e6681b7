"""
Lethal-order search.

Given a mana budget and a multiset of candidate effects (each with a cost and
a score), find the ordering that maximizes the total score when costs are
paid left to right and an effect that is unaffordable at its position is
skipped.

Algorithm:
    1. Evaluate the canonical order (the order the caller supplied). If it
       reaches ``target``, return it without enumerating anything.
    2. If there are more candidates than ``max_candidates``, fail closed: log
       a warning and return the canonical order.
    3. Otherwise enumerate the distinct orderings lazily and keep the first
       one with a strictly higher score. Stop as soon as the sum of all
       scores is reached, since nothing can beat it.

Ties therefore go to the canonical order first, then to the ordering that
comes earliest in enumeration order (lexicographic over effect ranks, where
ranks follow first appearance in the canonical order).

Usage:
    from goldfish.search import Effect, find_best_order

    effects = [Effect("vines", Mana.of("GG"), 4), Effect("growth", Mana.of("G"), 3)]
    result = find_best_order(Mana.of("GG"), effects, target=4)
    result.order, result.score
"""

import logging
from collections import Counter
from dataclasses import dataclass
from math import factorial
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from .mana import Mana

logger = logging.getLogger(__name__)

DEFAULT_MAX_CANDIDATES = 8


@dataclass(frozen=True)
class Effect:
    """A candidate effect: its name, mana cost and score if played."""
    name: str
    cost: Mana
    score: int

    def __post_init__(self):
        if self.score < 0:
            raise ValueError(f"Effect score must be >= 0, got {self.score} for {self.name}")


@dataclass(frozen=True)
class OrderEvaluation:
    """Result of playing one ordering under the greedy-affordability rule."""
    score: int
    played: Tuple[Effect, ...]
    skipped: Tuple[Effect, ...]
    remaining: Mana


@dataclass(frozen=True)
class SearchResult:
    """Best ordering found by the lethal search.

    Attributes:
        order: The chosen ordering (all candidates, played or not).
        score: Score of ``order``.
        evaluation: Greedy evaluation of ``order``.
        canonical_score: Score of the canonical order.
        permutations_evaluated: Orderings evaluated, canonical included.
        exhaustive: Whether the result is proven optimal.
        degraded: Whether the search fell back to the canonical order because
            the candidate set exceeded the ceiling.
    """
    order: Tuple[Effect, ...]
    score: int
    evaluation: OrderEvaluation
    canonical_score: int
    permutations_evaluated: int
    exhaustive: bool
    degraded: bool = False


def evaluate_order(budget: Mana, effects: Iterable[Effect]) -> OrderEvaluation:
    """Play ``effects`` left to right, skipping any that are unaffordable."""
    pool = budget
    score = 0
    played: List[Effect] = []
    skipped: List[Effect] = []
    for effect in effects:
        if pool.contains(effect.cost):
            pool = pool.pay(effect.cost)
            score += effect.score
            played.append(effect)
        else:
            skipped.append(effect)
    return OrderEvaluation(score, tuple(played), tuple(skipped), pool)


class Orderings:
    """Lazy, restartable iterator over the distinct orderings of a multiset.

    Identical effects are interchangeable, so ``[a, a, b]`` yields three
    orderings, not six. Each ``iter()`` starts a fresh enumeration.
    """

    def __init__(self, effects: Sequence[Effect]):
        self._distinct: List[Effect] = []
        ranks: List[int] = []
        for effect in effects:
            if effect not in self._distinct:
                self._distinct.append(effect)
            ranks.append(self._distinct.index(effect))
        self._ranks = tuple(sorted(ranks))

    def __len__(self) -> int:
        """Number of distinct orderings (multinomial coefficient)."""
        total = factorial(len(self._ranks))
        for count in Counter(self._ranks).values():
            total //= factorial(count)
        return total

    def __iter__(self) -> Iterator[Tuple[Effect, ...]]:
        ranks = list(self._ranks)
        while True:
            yield tuple(self._distinct[r] for r in ranks)
            if not _next_permutation(ranks):
                return


def _next_permutation(ranks: List[int]) -> bool:
    """Advance ``ranks`` in place to the next lexicographic permutation."""
    i = len(ranks) - 2
    while i >= 0 and ranks[i] >= ranks[i + 1]:
        i -= 1
    if i < 0:
        return False
    j = len(ranks) - 1
    while ranks[j] <= ranks[i]:
        j -= 1
    ranks[i], ranks[j] = ranks[j], ranks[i]
    ranks[i + 1:] = reversed(ranks[i + 1:])
    return True


class LethalSearch:
    """Exhaustive ordering search with a canonical fast path and a size ceiling.

    Args:
        max_candidates: Largest candidate set searched exhaustively.
    """

    def __init__(self, max_candidates: int = DEFAULT_MAX_CANDIDATES):
        if max_candidates < 0:
            raise ValueError(f"max_candidates must be >= 0, got {max_candidates}")
        self.max_candidates = max_candidates

    def find_best_order(
        self,
        budget: Mana,
        effects: Iterable[Effect],
        target: Optional[int] = None,
    ) -> SearchResult:
        canonical = tuple(effects)
        canonical_eval = evaluate_order(budget, canonical)

        if target is not None and canonical_eval.score >= target:
            return SearchResult(
                order=canonical,
                score=canonical_eval.score,
                evaluation=canonical_eval,
                canonical_score=canonical_eval.score,
                permutations_evaluated=1,
                exhaustive=False,
            )

        if len(canonical) > self.max_candidates:
            logger.warning(
                f"Lethal search ceiling exceeded: {len(canonical)} candidates > "
                f"{self.max_candidates}, using canonical order"
            )
            return SearchResult(
                order=canonical,
                score=canonical_eval.score,
                evaluation=canonical_eval,
                canonical_score=canonical_eval.score,
                permutations_evaluated=1,
                exhaustive=False,
                degraded=True,
            )

        ceiling = sum(effect.score for effect in canonical)
        best_order, best_eval = canonical, canonical_eval
        evaluated = 1

        if best_eval.score < ceiling:
            for order in Orderings(canonical):
                evaluation = evaluate_order(budget, order)
                evaluated += 1
                if evaluation.score > best_eval.score:
                    best_order, best_eval = order, evaluation
                    if best_eval.score >= ceiling:
                        break

        logger.debug(
            f"Lethal search: {len(canonical)} candidates, {evaluated} orderings, "
            f"score {canonical_eval.score} -> {best_eval.score}"
        )
        return SearchResult(
            order=best_order,
            score=best_eval.score,
            evaluation=best_eval,
            canonical_score=canonical_eval.score,
            permutations_evaluated=evaluated,
            exhaustive=True,
        )


def find_best_order(
    budget: Mana,
    effects: Iterable[Effect],
    target: Optional[int] = None,
    max_candidates: int = DEFAULT_MAX_CANDIDATES,
) -> SearchResult:
    """Convenience wrapper around LethalSearch.find_best_order()."""
    return LethalSearch(max_candidates).find_best_order(budget, effects, target)


def reaches_target(result: SearchResult, target: int) -> bool:
    return result.score >= target


__all__ = [
    "Effect",
    "OrderEvaluation",
    "SearchResult",
    "Orderings",
    "LethalSearch",
    "evaluate_order",
    "find_best_order",
    "reaches_target",
    "DEFAULT_MAX_CANDIDATES",
]
