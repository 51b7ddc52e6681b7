"""
Mana vector: one component per color plus one generic/colorless component.

In a pool the ``C`` component is colorless mana; in a cost it is the generic
part that any mana can pay. Costs are paid colored pips first, then generic
from whatever is left.

Usage:
    from goldfish.mana import Mana

    pool = Mana.of("GG")
    pool.contains(Mana.of("1G"))   # True
    pool.pay(Mana.of("1G"))        # Mana.zero()
    pool - Mana.of("U")            # raises ManaError
"""

import re
from dataclasses import dataclass
from typing import Dict, Tuple

from .errors import ManaError

COLORS: Tuple[str, ...] = ("W", "U", "B", "R", "G")
COMPONENTS: Tuple[str, ...] = COLORS + ("C",)

_TOKEN_RE = re.compile(r"(\d+)|([WUBRGC])")


@dataclass(frozen=True)
class Mana:
    """Immutable mana amount. All components are non-negative."""
    W: int = 0
    U: int = 0
    B: int = 0
    R: int = 0
    G: int = 0
    C: int = 0

    def __post_init__(self):
        for name in COMPONENTS:
            if getattr(self, name) < 0:
                raise ManaError(f"Mana component {name} cannot be negative: {self.as_dict()}")

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def of(cls, notation: str) -> "Mana":
        """Parse a cost notation such as ``"1GG"``, ``"2"`` or ``"{1}{G}"``.

        Digits are generic, letters are pips (case-insensitive).
        """
        text = notation.upper().replace("{", "").replace("}", "").replace(" ", "")
        counts = dict.fromkeys(COMPONENTS, 0)
        pos = 0
        for match in _TOKEN_RE.finditer(text):
            if match.start() != pos:
                raise ValueError(f"Invalid mana notation: {notation!r}")
            pos = match.end()
            digits, pip = match.groups()
            if digits:
                counts["C"] += int(digits)
            else:
                counts[pip] += 1
        if pos != len(text):
            raise ValueError(f"Invalid mana notation: {notation!r}")
        return cls(**counts)

    @classmethod
    def zero(cls) -> "Mana":
        return cls()

    @classmethod
    def from_dict(cls, values: Dict[str, int]) -> "Mana":
        return cls(**{k.upper(): v for k, v in values.items()})

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def as_tuple(self) -> Tuple[int, ...]:
        return tuple(getattr(self, name) for name in COMPONENTS)

    def as_dict(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in COMPONENTS}

    def total(self) -> int:
        return sum(self.as_tuple())

    def is_empty(self) -> bool:
        return self.total() == 0

    def plus(self, other: "Mana") -> "Mana":
        return Mana(*(a + b for a, b in zip(self.as_tuple(), other.as_tuple())))

    def minus(self, other: "Mana") -> "Mana":
        """Strict component-wise subtraction.

        Raises:
            ManaError: If any component would go negative.
        """
        values = [a - b for a, b in zip(self.as_tuple(), other.as_tuple())]
        if any(v < 0 for v in values):
            raise ManaError(f"Cannot subtract {other} from {self}")
        return Mana(*values)

    __add__ = plus
    __sub__ = minus

    def pay(self, cost: "Mana") -> "Mana":
        """Pay ``cost`` out of this pool and return what is left.

        Colored pips are paid by the same color. The generic part is paid by
        colorless mana first, then one at a time by the color with the largest
        remaining amount (ties broken in WUBRG order).

        Raises:
            ManaError: If the cost is not affordable.
        """
        remaining = {color: getattr(self, color) - getattr(cost, color) for color in COLORS}
        short = [color for color, amount in remaining.items() if amount < 0]
        if short:
            raise ManaError(f"Cannot pay {cost} with {self}: missing {''.join(short)}")

        colorless = self.C
        generic = cost.C
        from_colorless = min(colorless, generic)
        colorless -= from_colorless
        generic -= from_colorless

        while generic > 0:
            color = max(COLORS, key=lambda c: remaining[c])
            if remaining[color] == 0:
                raise ManaError(f"Cannot pay {cost} with {self}: not enough generic mana")
            remaining[color] -= 1
            generic -= 1

        return Mana(C=colorless, **remaining)

    def contains(self, cost: "Mana") -> bool:
        """Whether this pool can pay ``cost``."""
        for color in COLORS:
            if getattr(self, color) < getattr(cost, color):
                return False
        return self.total() - sum(getattr(cost, c) for c in COLORS) >= cost.C

    def __str__(self) -> str:
        if self.is_empty():
            return "0"
        generic = str(self.C) if self.C else ""
        return generic + "".join(color * getattr(self, color) for color in COLORS)


__all__ = ["Mana", "COLORS", "COMPONENTS"]
