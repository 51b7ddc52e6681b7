"""
Deck pilots shipped with goldfish.

Pilots:
    infect - mono-green Pauper infect (uses the lethal-order search in combat)
"""

from .infect import InfectDeckPilot, keep_infect_hand

__all__ = ["InfectDeckPilot", "keep_infect_hand"]
