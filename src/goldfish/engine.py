"""
Game engine: drives one trial through the mulligan protocol and the fixed
turn structure, and turns the final state into a GameResult.

Turn structure (no skipping):
    untap -> upkeep -> draw -> first main -> combat -> second main -> ending

The draw step of turn 1 is skipped on the play. The mana pool empties at every
phase boundary and card conservation is verified there. After the ending phase
the pilot's discard hook is called until the hand is back to seven cards, then
the win condition is checked once.

Any exception escaping a trial is wrapped into GameInternalError carrying the
full transcript of that trial.
"""

import logging
import random
from typing import Any, Dict, Iterable, Optional, Type

from .errors import GameInternalError, InsufficientLibrary, ProtocolViolation
from .game import Game, MAX_HAND_SIZE
from .pilot import DeckPilot
from .types import TURN_PHASES, GameResult, Outcome, Phase, normalize_card_name
from .zones import Zone

logger = logging.getLogger(__name__)

DEFAULT_DRAW = 7
DEFAULT_MAX_TURNS = 20

PHASE_HOOKS = {
    Phase.UNTAP: "untap_phase",
    Phase.UPKEEP: "upkeep_phase",
    Phase.DRAW: "draw_phase",
    Phase.FIRST_MAIN: "first_main_phase",
    Phase.COMBAT: "combat_phase",
    Phase.SECOND_MAIN: "second_main_phase",
    Phase.ENDING: "ending_phase",
}


class GameEngine:
    """Runs a single goldfish game.

    Args:
        deck_cards: Main deck card names. Never mutated; each mulligan
            shuffles a fresh copy.
        pilot_class: DeckPilot subclass, instantiated once for this trial.
        on_the_play: Whether the player starts on the play.
        draw: Opening hand size.
        max_turns: Last turn played before the game times out.
        rng: Random source for shuffling (a fresh ``random.Random()`` if None).
        pilot_options: Extra keyword arguments for the pilot constructor.
        trial_index: Index of this trial in its run, for error reports.
    """

    def __init__(
        self,
        deck_cards: Iterable[str],
        pilot_class: Type[DeckPilot],
        on_the_play: bool,
        draw: int = DEFAULT_DRAW,
        max_turns: int = DEFAULT_MAX_TURNS,
        rng: Optional[random.Random] = None,
        pilot_options: Optional[Dict[str, Any]] = None,
        trial_index: Optional[int] = None,
    ):
        if draw < 0:
            raise ValueError(f"draw must be >= 0, got {draw}")
        if max_turns < 1:
            raise ValueError(f"max_turns must be >= 1, got {max_turns}")
        self.deck_cards = tuple(normalize_card_name(c) for c in deck_cards)
        self.pilot_class = pilot_class
        self.on_the_play = on_the_play
        self.draw = draw
        self.max_turns = max_turns
        self.rng = rng if rng is not None else random.Random()
        self.pilot_options = pilot_options or {}
        self.trial_index = trial_index

        self.game = Game(on_the_play)
        self.pilot: Optional[DeckPilot] = None

    def run(self) -> GameResult:
        """Play the game to a win, a deck-out loss or the turn limit.

        Raises:
            GameInternalError: On any error during the trial, with the
                transcript attached.
        """
        try:
            return self._play()
        except GameInternalError:
            raise
        except Exception as e:
            raise GameInternalError(
                f"Trial failed on turn {self.game.current_turn} ({self.game.phase.value})",
                transcript=self.game.transcript(),
                trial_index=self.trial_index,
                cause=e,
            ) from e

    # =========================================================================
    # TRIAL PHASES
    # =========================================================================

    def _play(self) -> GameResult:
        game = self.game
        pilot = self.pilot = self.pilot_class(game, **self.pilot_options)
        game.note(
            "=== new game ===",
            "on the play" if self.on_the_play else "on the draw",
        )

        self._mulligan(pilot)

        try:
            for _ in range(self.max_turns):
                reason = self._play_turn(pilot)
                if reason:
                    game.note("win", reason)
                    return self._result(Outcome.WON, game.current_turn)
        except InsufficientLibrary:
            if not pilot.deck_out_is_loss:
                raise
            game.note("decked", "library is empty")
            return self._result(Outcome.DECKED, game.current_turn)

        game.note("timed out", f"no win after {self.max_turns} turns")
        return self._result(Outcome.TIMED_OUT, self.max_turns + 1)

    def _mulligan(self, pilot: DeckPilot) -> None:
        game = self.game
        while True:
            cards = list(self.deck_cards)
            self.rng.shuffle(cards)
            library = Zone("library", cards, ordered=True)
            hand = library.draw(self.draw)
            if pilot.keep_hand(hand):
                break
            game.reject_hand(hand)
            if game.mulligans > self.draw:
                raise ProtocolViolation(
                    f"Pilot rejected {game.mulligans} hands with an opening hand of {self.draw}"
                )

        game.keep_hand_and_start(library.cards(), hand)
        pilot.start()

        expected = self.draw - game.mulligans
        if len(game.hand) != expected:
            raise ProtocolViolation(
                f"Hand has {len(game.hand)} card(s) after {game.mulligans} mulligan(s), expected {expected}"
            )
        if game.cards_put_on_bottom != game.mulligans:
            raise ProtocolViolation(
                f"{game.cards_put_on_bottom} card(s) put on bottom for {game.mulligans} mulligan(s)"
            )
        self._check_conservation()

    def _play_turn(self, pilot: DeckPilot) -> Optional[str]:
        game = self.game
        game.start_next_turn()
        for phase in TURN_PHASES:
            if phase is not Phase.UNTAP:
                game.enter_phase(phase)
            self._check_conservation()
            if phase is Phase.DRAW and game.current_turn == 1 and self.on_the_play:
                game.note("skip draw", "first turn on the play")
                continue
            getattr(pilot, PHASE_HOOKS[phase])()

        game.empty_pool()
        while len(game.hand) > MAX_HAND_SIZE:
            game.discard(pilot.choose_discard())
        if len(game.hand) > MAX_HAND_SIZE:
            raise ProtocolViolation(f"Hand has {len(game.hand)} cards after the ending phase")
        self._check_conservation()

        return pilot.check_win()

    def _check_conservation(self) -> None:
        actual = self.game.card_count()
        expected = self.game.expected_card_count()
        if actual != expected:
            raise ProtocolViolation(
                f"Card conservation broken: {actual} card(s) in zones, expected {expected} "
                f"({self.game.zone_sizes()})"
            )

    def _result(self, outcome: Outcome, end_turn: int) -> GameResult:
        return GameResult(
            on_the_play=self.on_the_play,
            mulligans=self.game.mulligans,
            outcome=outcome,
            end_turn=end_turn,
        )


__all__ = ["GameEngine", "PHASE_HOOKS", "DEFAULT_DRAW", "DEFAULT_MAX_TURNS"]
