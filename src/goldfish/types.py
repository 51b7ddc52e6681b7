"""
Shared type definitions for goldfish simulation.

This module contains fundamental types used across multiple submodules
to avoid circular import issues.

Types:
    Outcome: How a trial ended
    Start: On-the-play assignment policy
    Phase: Turn phases, in the order the engine drives them
    GameResult: One outcome record (mergeable by shape)
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple


def normalize_card_name(name: str) -> str:
    """Normalize a card name into a CardName (case-insensitive identity).

    Raises:
        ValueError: If the name is empty after normalization.
    """
    name = str(name).strip()
    name = name.replace("\u2019", "'")
    name = name.replace("\u2010", "-")
    name = name.replace("\u2011", "-")
    name = name.replace("\u2013", "-")
    name = re.sub(r"\s+", " ", name).lower()
    if not name:
        raise ValueError("Card name cannot be empty")
    return name


class Outcome(str, Enum):
    """How a trial ended."""
    WON = "won"
    TIMED_OUT = "timed_out"
    DECKED = "decked"  # only when the pilot treats deck-out as a loss


class Start(str, Enum):
    """On-the-play assignment policy for a run."""
    OTP = "otp"    # always on the play
    OTD = "otd"    # always on the draw
    BOTH = "both"  # alternate by trial index, even index on the play


class Phase(str, Enum):
    """Turn phases. SETUP covers mulligans and bottoming before turn 1."""
    SETUP = "setup"
    UNTAP = "untap"
    UPKEEP = "upkeep"
    DRAW = "draw"
    FIRST_MAIN = "first main"
    COMBAT = "combat"
    SECOND_MAIN = "second main"
    ENDING = "ending"


TURN_PHASES: Tuple[Phase, ...] = (
    Phase.UNTAP,
    Phase.UPKEEP,
    Phase.DRAW,
    Phase.FIRST_MAIN,
    Phase.COMBAT,
    Phase.SECOND_MAIN,
    Phase.ENDING,
)


@dataclass(frozen=True)
class GameResult:
    """One outcome record.

    Two records are equal (and hash equal) when every field except ``count``
    matches; equal records are merged by summing ``count``.

    Attributes:
        on_the_play: Whether the player started on the play.
        mulligans: Number of mulligans taken (>= 0).
        outcome: WON, TIMED_OUT or DECKED.
        end_turn: Turn the game ended on (max_turns + 1 when timed out).
        count: Number of games this record stands for (>= 1).
    """
    on_the_play: bool
    mulligans: int
    outcome: Outcome
    end_turn: int
    count: int = field(default=1, compare=False)

    def __post_init__(self):
        if self.mulligans < 0:
            raise ValueError(f"mulligans must be >= 0, got {self.mulligans}")
        if self.count < 1:
            raise ValueError(f"count must be >= 1, got {self.count}")

    def shape(self) -> Tuple[bool, int, Outcome, int]:
        """Key used to group identical outcomes."""
        return (self.on_the_play, self.mulligans, self.outcome, self.end_turn)

    def merged(self, other: "GameResult") -> "GameResult":
        """Merge with an equal record by summing counts."""
        if self != other:
            raise ValueError(f"Cannot merge {self.shape()} with {other.shape()}")
        return GameResult(
            on_the_play=self.on_the_play,
            mulligans=self.mulligans,
            outcome=self.outcome,
            end_turn=self.end_turn,
            count=self.count + other.count,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "on_the_play": self.on_the_play,
            "mulligans": self.mulligans,
            "outcome": self.outcome.value,
            "end_turn": self.end_turn,
            "count": self.count,
        }


__all__ = [
    "normalize_card_name",
    "Outcome",
    "Start",
    "Phase",
    "TURN_PHASES",
    "GameResult",
]
