"""
Aggregated statistics over outcome records.

Records are folded with merge_results(), a commutative and associative
reduction: group by outcome shape, sum counts. Every DeckStats query takes an
optional predicate over GameResult; the predicates below compose with
all_of() and any_of().

Usage:
    stats = simulator.simulate(deck)
    stats.average_win_turn(all_of(on_the_play, with_mulligans(0)))
    stats.win_turn_sd(won)
"""

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from .deck import Deck
from .types import GameResult, Outcome

Predicate = Callable[[GameResult], bool]


# =============================================================================
# PREDICATES
# =============================================================================

def everything(result: GameResult) -> bool:
    return True


def on_the_play(result: GameResult) -> bool:
    return result.on_the_play


def on_the_draw(result: GameResult) -> bool:
    return not result.on_the_play


def won(result: GameResult) -> bool:
    return result.outcome is Outcome.WON


def timed_out(result: GameResult) -> bool:
    return result.outcome is Outcome.TIMED_OUT


def with_mulligans(n: int) -> Predicate:
    """Records with exactly ``n`` mulligans."""
    def predicate(result: GameResult) -> bool:
        return result.mulligans == n
    return predicate


def all_of(*predicates: Predicate) -> Predicate:
    def predicate(result: GameResult) -> bool:
        return all(p(result) for p in predicates)
    return predicate


def any_of(*predicates: Predicate) -> Predicate:
    def predicate(result: GameResult) -> bool:
        return any(p(result) for p in predicates)
    return predicate


# =============================================================================
# AGGREGATION
# =============================================================================

def _sort_key(result: GameResult):
    return (result.on_the_play, result.mulligans, result.outcome.value, result.end_turn)


def merge_results(results: Iterable[GameResult]) -> List[GameResult]:
    """Merge equal-shaped records by summing their counts.

    The output is sorted, so any input order gives the same list.
    """
    merged: Dict[Tuple, GameResult] = {}
    for result in results:
        key = result.shape()
        if key in merged:
            merged[key] = merged[key].merged(result)
        else:
            merged[key] = result
    return sorted(merged.values(), key=_sort_key)


@dataclass
class TrialFailure:
    """A trial that raised in non-strict mode. Excluded from the statistics."""
    trial_index: int
    on_the_play: bool
    error_type: str
    message: str
    transcript: str = ""


@dataclass
class DeckStats:
    """Read-only statistics for one deck.

    Attributes:
        deck: The simulated deck.
        results: Merged outcome records of the completed trials.
        iterations: Trials requested.
        failures: Trials that failed (non-strict mode only).
        duration_seconds: Wall-clock time of the run.
    """
    deck: Deck
    results: List[GameResult]
    iterations: int
    failures: Sequence[TrialFailure] = ()
    duration_seconds: float = field(default=0.0, compare=False)

    def __post_init__(self):
        self.results = merge_results(self.results)
        self.failures = tuple(self.failures)

    def _select(self, predicate: Optional[Predicate]) -> List[GameResult]:
        predicate = predicate or everything
        return [r for r in self.results if predicate(r)]

    def win_turns(self, predicate: Optional[Predicate] = None) -> List[int]:
        """Distinct end turns of the matching records, sorted."""
        return sorted({r.end_turn for r in self._select(predicate)})

    def mulligans(self, predicate: Optional[Predicate] = None) -> List[int]:
        """Distinct mulligan counts of the matching records, sorted."""
        return sorted({r.mulligans for r in self._select(predicate)})

    def count(self, predicate: Optional[Predicate] = None) -> int:
        return sum(r.count for r in self._select(predicate))

    def completed(self) -> int:
        """Number of trials that finished (won, timed out or decked)."""
        return self.count()

    def average_win_turn(self, predicate: Optional[Predicate] = None) -> float:
        selected = self._select(predicate)
        total = sum(r.count for r in selected)
        if total == 0:
            return math.nan
        return sum(r.end_turn * r.count for r in selected) / total

    def win_turn_mad(self, predicate: Optional[Predicate] = None) -> float:
        """Mean absolute deviation of the end turn around its average."""
        selected = self._select(predicate)
        total = sum(r.count for r in selected)
        if total == 0:
            return math.nan
        avg = self.average_win_turn(predicate)
        return sum(abs(avg - r.end_turn) * r.count for r in selected) / total

    def win_turn_sd(self, predicate: Optional[Predicate] = None) -> float:
        """Population standard deviation of the end turn."""
        selected = self._select(predicate)
        total = sum(r.count for r in selected)
        if total == 0:
            return math.nan
        avg = self.average_win_turn(predicate)
        return math.sqrt(sum((r.end_turn - avg) ** 2 * r.count for r in selected) / total)

    def percentage(self, predicate: Predicate, within: Optional[Predicate] = None) -> float:
        """Share (0-100) of the ``within`` selection that also matches ``predicate``."""
        base = self.count(within)
        if base == 0:
            return math.nan
        return 100.0 * self.count(all_of(within or everything, predicate)) / base

    def to_dataframe(self) -> pd.DataFrame:
        """One row per merged record."""
        columns = ["on_the_play", "mulligans", "outcome", "end_turn", "count"]
        return pd.DataFrame([r.to_dict() for r in self.results], columns=columns)


__all__ = [
    "Predicate",
    "everything",
    "on_the_play",
    "on_the_draw",
    "won",
    "timed_out",
    "with_mulligans",
    "all_of",
    "any_of",
    "merge_results",
    "TrialFailure",
    "DeckStats",
]
