"""
Goldfish: Monte-Carlo simulation of single-player deck playthroughs.

Deals opening hands, drives a pluggable deck pilot through the fixed turn
structure until a win or the turn limit, and aggregates the outcomes into
queryable statistics (kill turn distribution, variance, mulligan frequency).

Submodules:
    types     - Shared enums and the GameResult outcome record
    mana      - Mana vector and payment rules
    zones     - Zone multisets with per-occurrence tap state
    game      - Game aggregate, mutation primitives and structured log
    pilot     - DeckPilot strategy contract
    engine    - Per-trial state machine (mulligans, turns, win check)
    search    - Lethal-order search over candidate effects
    stats     - Outcome aggregation and statistics queries
    simulator - Monte-Carlo driver (sequential or multiprocessing)
    pilots    - Reference deck pilots

Usage:
    from goldfish import Deck, GoldfishSimulator, SimulationConfig
    from goldfish.pilots import InfectDeckPilot

    stats = GoldfishSimulator(InfectDeckPilot, SimulationConfig(iterations=1000)).simulate(deck)
    stats.average_win_turn(on_the_play)
"""

from .types import GameResult, Outcome, Phase, Start, normalize_card_name

from .errors import (
    GoldfishError,
    ResourceExhausted,
    InsufficientLibrary,
    IllegalPlay,
    CardNotFound,
    ManaError,
    ProtocolViolation,
    GameInternalError,
)

from .mana import Mana
from .zones import Zone, ZoneView, Zones
from .game import Game, LogEntry
from .pilot import DeckPilot
from .engine import GameEngine
from .deck import Deck

# Search
from .search import (
    Effect,
    LethalSearch,
    OrderEvaluation,
    Orderings,
    SearchResult,
    evaluate_order,
    find_best_order,
)

# Statistics
from .stats import (
    DeckStats,
    TrialFailure,
    merge_results,
    everything,
    on_the_play,
    on_the_draw,
    won,
    timed_out,
    with_mulligans,
    all_of,
    any_of,
)

from .simulator import GoldfishSimulator, SimulationConfig

__version__ = "0.1.0"

__all__ = [
    # Types
    "GameResult",
    "Outcome",
    "Phase",
    "Start",
    "normalize_card_name",
    # Errors
    "GoldfishError",
    "ResourceExhausted",
    "InsufficientLibrary",
    "IllegalPlay",
    "CardNotFound",
    "ManaError",
    "ProtocolViolation",
    "GameInternalError",
    # Game model
    "Mana",
    "Zone",
    "ZoneView",
    "Zones",
    "Game",
    "LogEntry",
    "DeckPilot",
    "GameEngine",
    "Deck",
    # Search
    "Effect",
    "LethalSearch",
    "OrderEvaluation",
    "Orderings",
    "SearchResult",
    "evaluate_order",
    "find_best_order",
    # Statistics
    "DeckStats",
    "TrialFailure",
    "merge_results",
    "everything",
    "on_the_play",
    "on_the_draw",
    "won",
    "timed_out",
    "with_mulligans",
    "all_of",
    "any_of",
    # Simulation
    "GoldfishSimulator",
    "SimulationConfig",
]
