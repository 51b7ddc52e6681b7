"""
Game aggregate: zones, mana pool, counters and the structured game log.

A Game is created once per trial and mutated exclusively through the
primitives below. Every primitive appends a LogEntry (also emitted at DEBUG on
this module's logger) and returns the game so effects can be chained:

    game.cast_nonpermanent("giant growth", Mana.of("G")).poison_opponent(3)

The turn structure itself is driven by goldfish.engine.GameEngine; the setup
and phase methods at the bottom of the class are for the engine's use.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .errors import IllegalPlay, ManaError
from .mana import Mana
from .types import Phase, normalize_card_name
from .zones import Zone, ZoneView, Zones

logger = logging.getLogger(__name__)

STARTING_LIFE = 20
POISON_TO_WIN = 10
MAX_HAND_SIZE = 7


@dataclass(frozen=True)
class LogEntry:
    """One line of the structured game log."""
    turn: int
    phase: Phase
    event: str
    cards: Tuple[str, ...] = ()
    detail: str = ""

    def render(self) -> str:
        text = f"T{self.turn:<2} {self.phase.value:<11} | {self.event}"
        if self.cards:
            text += " " + ", ".join(self.cards)
        if self.detail:
            text += f" ({self.detail})"
        return text


class Game:
    """State of one goldfish game.

    Attributes exposed read-only: ``on_the_play``, ``current_turn``,
    ``mulligans``, ``opponent_life``, ``opponent_poison_counters``,
    ``landed``, ``tokens_created``, ``phase``, ``pool`` and the zone views
    ``library``, ``hand``, ``board``, ``graveyard``, ``exile_zone``.
    """

    def __init__(
        self,
        on_the_play: bool,
        library: Iterable[str] = (),
        opening_hand: Iterable[str] = (),
        opponent_life: int = STARTING_LIFE,
    ):
        self._on_the_play = bool(on_the_play)
        self._zones = Zones(library, opening_hand)
        self._pool = Mana.zero()
        self._current_turn = 0
        self._mulligans = 0
        self._opponent_life = opponent_life
        self._opponent_poison = 0
        self._landed = False
        self._tokens_created = 0
        self._bottomed = 0
        self._phase = Phase.SETUP
        self._deck_size = self._zones.total()
        self._log: List[LogEntry] = []

        self._views = {
            name: ZoneView(self._zones.get(name)) for name in Zones.NAMES
        }

    # =========================================================================
    # READ-ONLY STATE
    # =========================================================================

    @property
    def on_the_play(self) -> bool:
        return self._on_the_play

    @property
    def current_turn(self) -> int:
        return self._current_turn

    @property
    def mulligans(self) -> int:
        return self._mulligans

    @property
    def opponent_life(self) -> int:
        return self._opponent_life

    @property
    def opponent_poison_counters(self) -> int:
        return self._opponent_poison

    @property
    def landed(self) -> bool:
        """Whether a land was played this turn."""
        return self._landed

    @property
    def tokens_created(self) -> int:
        return self._tokens_created

    @property
    def cards_put_on_bottom(self) -> int:
        """Cards moved from hand to the bottom of the library."""
        return self._bottomed

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def pool(self) -> Mana:
        return self._pool

    @property
    def library(self) -> ZoneView:
        return self._views["library"]

    @property
    def hand(self) -> ZoneView:
        return self._views["hand"]

    @property
    def board(self) -> ZoneView:
        return self._views["board"]

    @property
    def graveyard(self) -> ZoneView:
        return self._views["graveyard"]

    @property
    def exile_zone(self) -> ZoneView:
        return self._views["exile"]

    @property
    def log(self) -> Tuple[LogEntry, ...]:
        return tuple(self._log)

    def can_pay(self, cost: Mana) -> bool:
        """Whether the current pool can pay ``cost``."""
        return self._pool.contains(cost)

    def count_untapped(self, *cards: str) -> int:
        return self._zones.board.count_untapped(*cards)

    def find_first_untapped(self, *cards: str) -> Optional[str]:
        return self._zones.board.find_first_untapped(*cards)

    def get_untapped(self, card: str) -> List[str]:
        return self._zones.board.untapped(card)

    def is_won(self) -> bool:
        return self._opponent_life <= 0 or self._opponent_poison >= POISON_TO_WIN

    def card_count(self) -> int:
        """Cards currently across all zones."""
        return self._zones.total()

    def expected_card_count(self) -> int:
        """Deck size plus tokens created: what card_count() must equal."""
        return self._deck_size + self._tokens_created

    def zone_sizes(self):
        return self._zones.snapshot()

    def transcript(self) -> str:
        """Full text transcript of the game log."""
        return "\n".join(entry.render() for entry in self._log)

    # =========================================================================
    # MUTATION PRIMITIVES
    # =========================================================================

    def draw(self, n: int = 1) -> "Game":
        """Draw ``n`` cards. Raises InsufficientLibrary on an empty library."""
        cards = self._zones.library.draw(n)
        self._zones.hand.add_all(cards)
        return self._record("draw", cards)

    def land(self, card: str) -> "Game":
        """Play a land from hand (one per turn)."""
        if self._landed:
            raise IllegalPlay(f"Already played a land this turn, cannot play {card}")
        self._move(card, self._zones.hand, self._zones.board)
        self._landed = True
        return self._record("land", [card])

    def cast_permanent(self, card: str, cost: Mana = Mana()) -> "Game":
        """Cast a permanent from hand, paying ``cost`` from the pool."""
        self._cast(card, cost, self._zones.board)
        return self._record("cast", [card], f"permanent, paid {cost}")

    def cast_nonpermanent(self, card: str, cost: Mana = Mana()) -> "Game":
        """Cast an instant or sorcery from hand, paying ``cost`` from the pool."""
        self._cast(card, cost, self._zones.graveyard)
        return self._record("cast", [card], f"paid {cost}")

    def tap(self, card: str) -> "Game":
        self._zones.board.tap(card)
        return self._record("tap", [card])

    def untap(self, card: str) -> "Game":
        self._zones.board.untap(card)
        return self._record("untap", [card])

    def untap_all(self) -> "Game":
        count = self._zones.board.untap_all()
        return self._record("untap all", detail=f"{count} permanent(s)")

    def tap_land_for_mana(self, card: str, mana: Mana) -> "Game":
        self._zones.board.tap(card)
        self._pool = self._pool.plus(mana)
        return self._record("tap for mana", [card], f"+{mana}, pool {self._pool}")

    def tap_for_attack(self, card: str) -> "Game":
        self._zones.board.tap(card)
        return self._record("attack", [card])

    def sacrifice(self, card: str) -> "Game":
        self._move(card, self._zones.board, self._zones.graveyard)
        return self._record("sacrifice", [card])

    def discard(self, card: str) -> "Game":
        self._move(card, self._zones.hand, self._zones.graveyard)
        return self._record("discard", [card])

    def discard_one_of(self, *cards: str) -> Optional[str]:
        """Discard the first of ``cards`` found in hand, if any."""
        card = self._zones.hand.find_first(*cards)
        if card is not None:
            self.discard(card)
        return card

    def exile(self, card: str, source: str = "board") -> "Game":
        self._move(card, self._zones.get(source), self._zones.exile)
        return self._record("exile", [card], f"from {source}")

    def put_on_bottom(self, card: str) -> "Game":
        """Put a card from hand on the bottom of the library."""
        self._move(card, self._zones.hand, self._zones.library)
        self._bottomed += 1
        return self._record("put on bottom", [card])

    def put_on_bottom_one_of(self, *cards: str) -> Optional[str]:
        """Put the first of ``cards`` found in hand on the bottom, if any."""
        card = self._zones.hand.find_first(*cards)
        if card is not None:
            self.put_on_bottom(card)
        return card

    def create_token(self, card: str) -> "Game":
        """Put a token onto the board.

        The only primitive that creates a card: it raises the expected card
        count so conservation checks still hold.
        """
        self._zones.board.add(card)
        self._tokens_created += 1
        return self._record("create token", [card])

    def add(self, mana: Mana) -> "Game":
        """Add mana to the pool."""
        self._pool = self._pool.plus(mana)
        return self._record("add mana", detail=f"+{mana}, pool {self._pool}")

    def pay(self, cost: Mana) -> "Game":
        """Pay mana from the pool. Raises IllegalPlay when unaffordable."""
        try:
            self._pool = self._pool.pay(cost)
        except ManaError as e:
            raise IllegalPlay(str(e)) from e
        return self._record("pay", detail=f"-{cost}, pool {self._pool}")

    def empty_pool(self) -> "Game":
        if not self._pool.is_empty():
            self._record("empty pool", detail=f"lost {self._pool}")
        self._pool = Mana.zero()
        return self

    def damage_opponent(self, amount: int) -> "Game":
        """Deal damage (a negative amount gains the opponent life)."""
        self._opponent_life -= amount
        return self._record("damage", detail=f"{amount}, opponent life {self._opponent_life}")

    def poison_opponent(self, amount: int) -> "Game":
        self._opponent_poison += amount
        return self._record("poison", detail=f"{amount}, opponent poison {self._opponent_poison}")

    def _cast(self, card: str, cost: Mana, destination: Zone) -> None:
        card = normalize_card_name(card)
        if not self._zones.hand.contains(card):
            # raises CardNotFound with the hand as context
            self._zones.hand.remove(card)
        if not self._pool.contains(cost):
            raise IllegalPlay(f"Cannot cast {card}: pool {self._pool} cannot pay {cost}")
        self._pool = self._pool.pay(cost)
        self._zones.hand.remove(card)
        destination.add(card)

    def _move(self, card: str, source: Zone, destination: Zone) -> None:
        source.remove(card)
        destination.add(card)

    # =========================================================================
    # SETUP AND TURN STRUCTURE (engine use)
    # =========================================================================

    def reject_hand(self, hand: Iterable[str]) -> "Game":
        """Record a rejected opening hand."""
        self._mulligans += 1
        return self._record("mulligan", list(hand), f"mulligans taken: {self._mulligans}")

    def keep_hand_and_start(self, library: Iterable[str], hand: Iterable[str]) -> "Game":
        """Install the kept opening hand and the remaining library."""
        self._zones = Zones(library, hand)
        self._views = {
            name: ZoneView(self._zones.get(name)) for name in Zones.NAMES
        }
        self._deck_size = self._zones.total()
        return self._record("keep", list(self._zones.hand.cards()))

    def start_next_turn(self) -> "Game":
        self._current_turn += 1
        self._landed = False
        self._record("=== turn start ===", detail=self._status())
        return self.enter_phase(Phase.UNTAP)

    def enter_phase(self, phase: Phase) -> "Game":
        """Move to ``phase``, emptying the mana pool at the boundary."""
        self.empty_pool()
        self._phase = phase
        return self._record("phase", detail=phase.value)

    def note(self, event: str, detail: str = "") -> "Game":
        """Append a free-form entry (used by the engine and by pilots)."""
        return self._record(event, detail=detail)

    def _status(self) -> str:
        return (
            f"library {len(self._zones.library)}, hand {len(self._zones.hand)}, "
            f"board {len(self._zones.board)}, life {self._opponent_life}, "
            f"poison {self._opponent_poison}"
        )

    def _record(self, event: str, cards: Iterable[str] = (), detail: str = "") -> "Game":
        entry = LogEntry(
            turn=self._current_turn,
            phase=self._phase,
            event=event,
            cards=tuple(cards),
            detail=detail,
        )
        self._log.append(entry)
        logger.debug("%s", entry.render())
        return self


__all__ = ["Game", "LogEntry", "STARTING_LIFE", "POISON_TO_WIN", "MAX_HAND_SIZE"]
