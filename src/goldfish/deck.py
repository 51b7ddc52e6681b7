"""
Deck definition consumed by the simulator.

Only the main deck is shuffled into a trial's library; the sideboard is kept
for completeness. Parsing deck-list text is left to callers.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .types import normalize_card_name


@dataclass(frozen=True)
class Deck:
    """Immutable deck: main and sideboard as tuples of card names."""
    main: Tuple[str, ...]
    sideboard: Tuple[str, ...] = ()
    name: str = field(default="", compare=False)

    def __init__(self, main: Iterable[str], sideboard: Iterable[str] = (), name: str = ""):
        object.__setattr__(self, "main", tuple(normalize_card_name(c) for c in main))
        object.__setattr__(self, "sideboard", tuple(normalize_card_name(c) for c in sideboard))
        object.__setattr__(self, "name", name)

    @classmethod
    def from_counts(
        cls,
        main: Mapping[str, int],
        sideboard: Optional[Mapping[str, int]] = None,
        name: str = "",
    ) -> "Deck":
        """Build a deck from ``{card name: count}`` mappings.

        Raises:
            ValueError: If a count is negative.
        """
        return cls(_expand(main), _expand(sideboard or {}), name)

    def size(self) -> int:
        return len(self.main)

    def counts(self) -> Dict[str, int]:
        """Main deck as ``{card name: count}``."""
        return dict(Counter(self.main))

    def __str__(self) -> str:
        label = self.name or "deck"
        return f"{label} ({self.size()} cards)"


def _expand(counts: Mapping[str, int]):
    cards = []
    for card, count in counts.items():
        if count < 0:
            raise ValueError(f"Card count cannot be negative: {card} x{count}")
        cards.extend([card] * count)
    return cards


__all__ = ["Deck"]
