"""
Strategy contract: the hooks a deck pilot may override.

The engine instantiates one pilot per trial, with a handle to that trial's
Game, and calls the hooks in a fixed order each turn. Every hook has a default
body, so a pilot only overrides what its deck needs.

Usage:
    class BurnPilot(DeckPilot):
        def first_main_phase(self):
            if self.game.hand.contains("mountain") and not self.game.landed:
                self.game.land("mountain")

    engine = GameEngine(deck.main, BurnPilot, on_the_play=True)
"""

from typing import Callable, Optional, Sequence

from .game import Game, POISON_TO_WIN

KeepOracle = Callable[[Sequence[str]], bool]


def keep_everything(hand: Sequence[str]) -> bool:
    """Default keep oracle: keep any hand."""
    return True


class DeckPilot:
    """Base class for deck pilots.

    Args:
        game: The Game this pilot plays.
        keep: Mulligan oracle ``keep(hand) -> bool``. Must be picklable (a
            module-level function or a picklable callable object) when trials
            run in worker processes.
    """

    # When True, running out of library during a draw ends the trial as
    # Outcome.DECKED instead of failing it.
    deck_out_is_loss = False

    def __init__(self, game: Game, keep: Optional[KeepOracle] = None):
        self.game = game
        self.keep = keep if keep is not None else keep_everything

    def keep_hand(self, hand: Sequence[str]) -> bool:
        """Whether to keep ``hand``. Called once per candidate opening hand."""
        return bool(self.keep(tuple(hand)))

    def start(self) -> None:
        """Apply the mulligans taken: put that many cards on the bottom."""
        for _ in range(self.game.mulligans):
            self.game.put_on_bottom(self.game.hand.first())

    def untap_phase(self) -> None:
        self.game.untap_all()

    def upkeep_phase(self) -> None:
        pass

    def draw_phase(self) -> None:
        self.game.draw(1)

    def first_main_phase(self) -> None:
        pass

    def combat_phase(self) -> None:
        pass

    def second_main_phase(self) -> None:
        pass

    def ending_phase(self) -> None:
        pass

    def choose_discard(self) -> str:
        """Card to discard while the hand is over the size ceiling."""
        return self.game.hand.first()

    def check_win(self) -> Optional[str]:
        """Reason the game is won, or None."""
        if self.game.opponent_life <= 0:
            return "opponent is dead"
        if self.game.opponent_poison_counters >= POISON_TO_WIN:
            return "opponent is deadly poisoned"
        return None


__all__ = ["DeckPilot", "KeepOracle", "keep_everything"]
