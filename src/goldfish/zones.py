"""
Zone model: multisets of card names plus per-occurrence tap state.

Zones hold CardNames only (two cards with the same name are interchangeable).
The library is ordered (draw removes from the front, bottoming appends to the
back); the other zones keep insertion order for deterministic "first card"
choices but are semantically unordered. The board tracks a tap flag per
occurrence so duplicate permanents can be tapped independently.

Strategies never receive a Zone: the Game hands out ZoneView wrappers, which
only expose queries.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .errors import CardNotFound, InsufficientLibrary
from .types import normalize_card_name


class Zone:
    """A named multiset of card names."""

    def __init__(
        self,
        name: str,
        cards: Iterable[str] = (),
        ordered: bool = False,
        tracks_tap: bool = False,
    ):
        self.name = name
        self.ordered = ordered
        self.tracks_tap = tracks_tap
        self._cards: List[str] = [normalize_card_name(c) for c in cards]
        self._tapped: List[bool] = [False] * len(self._cards)

    # -------------------------------------------------------------------------
    # Mutation primitives
    # -------------------------------------------------------------------------

    def add(self, card: str, tapped: bool = False) -> None:
        """Add a card (at the end: bottom of an ordered zone)."""
        self._cards.append(normalize_card_name(card))
        self._tapped.append(bool(tapped) and self.tracks_tap)

    def add_to_bottom(self, card: str) -> None:
        self.add(card)

    def add_all(self, cards: Iterable[str]) -> None:
        for card in cards:
            self.add(card)

    def remove(self, card: str, prefer_untapped: bool = True) -> bool:
        """Remove one occurrence of ``card``.

        On a tap-tracking zone an untapped occurrence is removed first when
        ``prefer_untapped`` (otherwise a tapped one first).

        Returns:
            The tap state of the removed occurrence.

        Raises:
            CardNotFound: If the card is not in this zone.
        """
        card = normalize_card_name(card)
        index = self._index_of(card, tapped=not prefer_untapped if self.tracks_tap else None)
        if index is None:
            index = self._index_of(card)
        if index is None:
            raise CardNotFound(card, self.name)
        self._cards.pop(index)
        return self._tapped.pop(index)

    def draw(self, n: int = 1) -> List[str]:
        """Remove and return the first ``n`` cards.

        Raises:
            InsufficientLibrary: If fewer than ``n`` cards remain. Nothing is
                removed in that case.
        """
        if n < 0:
            raise ValueError(f"Cannot draw a negative number of cards: {n}")
        if n > len(self._cards):
            raise InsufficientLibrary(n, len(self._cards))
        drawn = self._cards[:n]
        del self._cards[:n]
        del self._tapped[:n]
        return drawn

    def clear(self) -> List[str]:
        cards = self._cards
        self._cards = []
        self._tapped = []
        return cards

    def tap(self, card: str) -> int:
        """Tap the first untapped occurrence of ``card``.

        Returns:
            Index of the tapped occurrence.

        Raises:
            CardNotFound: If there is no untapped occurrence.
        """
        card = normalize_card_name(card)
        index = self._index_of(card, tapped=False)
        if index is None:
            raise CardNotFound(card, self.name, "no untapped occurrence")
        self._tapped[index] = True
        return index

    def untap(self, card: str) -> int:
        """Untap the first tapped occurrence of ``card``."""
        card = normalize_card_name(card)
        index = self._index_of(card, tapped=True)
        if index is None:
            raise CardNotFound(card, self.name, "no tapped occurrence")
        self._tapped[index] = False
        return index

    def untap_all(self) -> int:
        """Clear every tap flag. Returns how many permanents were untapped."""
        untapped = sum(self._tapped)
        self._tapped = [False] * len(self._cards)
        return untapped

    def _index_of(self, card: str, tapped: Optional[bool] = None) -> Optional[int]:
        for index, name in enumerate(self._cards):
            if name == card and (tapped is None or self._tapped[index] == tapped):
                return index
        return None

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def size(self) -> int:
        return len(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._cards))

    def cards(self) -> Tuple[str, ...]:
        return tuple(self._cards)

    def is_empty(self) -> bool:
        return not self._cards

    def first(self) -> str:
        if not self._cards:
            raise CardNotFound("<any>", self.name, "zone is empty")
        return self._cards[0]

    def count(self, *cards: str) -> int:
        """Occurrences of any of the given cards (all cards if none given)."""
        if not cards:
            return len(self._cards)
        wanted = {normalize_card_name(c) for c in cards}
        return sum(1 for name in self._cards if name in wanted)

    def contains(self, card: str) -> bool:
        return normalize_card_name(card) in self._cards

    def contains_any(self, *cards: str) -> bool:
        return self.count(*cards) > 0

    def find_all(self, *cards: str) -> List[str]:
        """Every occurrence of the given cards, in zone order."""
        wanted = {normalize_card_name(c) for c in cards}
        return [name for name in self._cards if name in wanted]

    def find_first(self, *cards: str) -> Optional[str]:
        """First card of ``cards`` (in argument order) present in the zone."""
        for card in cards:
            if self.contains(card):
                return normalize_card_name(card)
        return None

    def is_tapped(self, index: int) -> bool:
        return self._tapped[index]

    def tapped_count(self) -> int:
        return sum(self._tapped)

    def count_untapped(self, *cards: str) -> int:
        wanted = {normalize_card_name(c) for c in cards}
        return sum(
            1 for name, tapped in zip(self._cards, self._tapped)
            if name in wanted and not tapped
        )

    def find_first_untapped(self, *cards: str) -> Optional[str]:
        """First card of ``cards`` (in argument order) with an untapped occurrence."""
        for card in cards:
            if self._index_of(normalize_card_name(card), tapped=False) is not None:
                return normalize_card_name(card)
        return None

    def untapped(self, card: str) -> List[str]:
        card = normalize_card_name(card)
        return [
            name for name, tapped in zip(self._cards, self._tapped)
            if name == card and not tapped
        ]

    def __repr__(self) -> str:
        return f"Zone({self.name!r}, {self._cards!r})"


class ZoneView:
    """Read-only window on a Zone."""

    def __init__(self, zone: Zone):
        self._zone = zone

    @property
    def name(self) -> str:
        return self._zone.name

    def size(self) -> int:
        return self._zone.size()

    def __len__(self) -> int:
        return len(self._zone)

    def __iter__(self) -> Iterator[str]:
        return iter(self._zone)

    def __contains__(self, card: str) -> bool:
        return self._zone.contains(card)

    def cards(self) -> Tuple[str, ...]:
        return self._zone.cards()

    def is_empty(self) -> bool:
        return self._zone.is_empty()

    def first(self) -> str:
        return self._zone.first()

    def count(self, *cards: str) -> int:
        return self._zone.count(*cards)

    def contains(self, card: str) -> bool:
        return self._zone.contains(card)

    def contains_any(self, *cards: str) -> bool:
        return self._zone.contains_any(*cards)

    def find_all(self, *cards: str) -> List[str]:
        return self._zone.find_all(*cards)

    def find_first(self, *cards: str) -> Optional[str]:
        return self._zone.find_first(*cards)

    def count_untapped(self, *cards: str) -> int:
        return self._zone.count_untapped(*cards)

    def find_first_untapped(self, *cards: str) -> Optional[str]:
        return self._zone.find_first_untapped(*cards)

    def untapped(self, card: str) -> List[str]:
        return self._zone.untapped(card)

    def tapped_count(self) -> int:
        return self._zone.tapped_count()

    def __repr__(self) -> str:
        return f"ZoneView({self._zone.name!r}, {list(self._zone.cards())!r})"


class Zones:
    """The five zones of one game."""

    NAMES = ("library", "hand", "board", "graveyard", "exile")

    def __init__(self, library: Iterable[str] = (), hand: Iterable[str] = ()):
        self.library = Zone("library", library, ordered=True)
        self.hand = Zone("hand", hand)
        self.board = Zone("board", tracks_tap=True)
        self.graveyard = Zone("graveyard")
        self.exile = Zone("exile")

    def get(self, name: str) -> Zone:
        if name not in self.NAMES:
            raise KeyError(f"Unknown zone: {name}")
        return getattr(self, name)

    def total(self) -> int:
        return sum(len(self.get(name)) for name in self.NAMES)

    def snapshot(self) -> Dict[str, int]:
        return {name: len(self.get(name)) for name in self.NAMES}


__all__ = ["Zone", "ZoneView", "Zones"]
