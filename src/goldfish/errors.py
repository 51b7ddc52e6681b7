"""
Error taxonomy for goldfish simulation.

Hierarchy:
    GoldfishError
        ResourceExhausted
            InsufficientLibrary   - draw from a library with too few cards
        IllegalPlay               - strategy attempted an impossible play
            CardNotFound          - card absent from the zone it was taken from
        ManaError                 - negative mana arithmetic (also a ValueError)
        ProtocolViolation         - engine/strategy contract breach
        GameInternalError         - fatal trial error, carries the transcript

Exceeding the lethal search ceiling is deliberately not an error: the search
falls back to the canonical order and logs a warning.
"""

from typing import Optional


class GoldfishError(Exception):
    """Base class for all simulation errors."""
    pass


class ResourceExhausted(GoldfishError):
    """Raised when a game resource runs out."""
    pass


class InsufficientLibrary(ResourceExhausted):
    """Raised when drawing more cards than the library holds."""

    def __init__(self, requested: int, available: int):
        super().__init__(
            f"Cannot draw {requested} card(s): only {available} left in library"
        )
        self.requested = requested
        self.available = available

    def __reduce__(self):
        return (InsufficientLibrary, (self.requested, self.available))


class IllegalPlay(GoldfishError):
    """Raised when a strategy attempts a play the game state does not allow."""
    pass


class CardNotFound(IllegalPlay):
    """Raised when removing or tapping a card that is not in the zone."""

    def __init__(self, card: str, zone: str, detail: str = ""):
        message = f"Card '{card}' not found in {zone}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.card = card
        self.zone = zone
        self.detail = detail

    def __reduce__(self):
        return (CardNotFound, (self.card, self.zone, self.detail))


class ManaError(GoldfishError, ValueError):
    """Raised when mana arithmetic would produce a negative component."""
    pass


class ProtocolViolation(GoldfishError):
    """Raised when the engine/strategy contract is broken.

    Examples: wrong hand size after mulligans, more than seven cards after the
    ending phase, card conservation mismatch at a phase boundary.
    """
    pass


class GameInternalError(GoldfishError):
    """Fatal error for one trial, with the full per-trial transcript attached.

    Attributes:
        transcript: Text transcript of every phase transition and mutation.
        trial_index: Index of the failed trial within its run (if known).
        cause: The original exception.
    """

    def __init__(
        self,
        message: str,
        transcript: str = "",
        trial_index: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.transcript = transcript
        self.trial_index = trial_index
        self.cause = cause

    def __str__(self) -> str:
        header = self.message
        if self.trial_index is not None:
            header = f"[trial {self.trial_index}] {header}"
        if self.cause is not None:
            header = f"{header}: {type(self.cause).__name__}: {self.cause}"
        if not self.transcript:
            return header
        return f"{header}\n\n{self.transcript}"

    def __reduce__(self):
        # Keeps the transcript when the error crosses a process boundary.
        return (
            GameInternalError,
            (self.message, self.transcript, self.trial_index, self.cause),
        )


__all__ = [
    "GoldfishError",
    "ResourceExhausted",
    "InsufficientLibrary",
    "IllegalPlay",
    "CardNotFound",
    "ManaError",
    "ProtocolViolation",
    "GameInternalError",
]
