"""
Monte-Carlo driver: run many independent goldfish trials for a deck and fold
the outcomes into DeckStats.

Every trial owns its Game, its shuffled copy of the deck and its log, so
trials can run on any number of worker processes. Results are merged with an
order-independent reduction, so the statistics do not depend on how trials
were distributed.

Usage:
    from goldfish import Deck, GoldfishSimulator, SimulationConfig
    from goldfish.pilots.infect import InfectDeckPilot

    config = SimulationConfig(iterations=10000, num_workers=4, seed=42)
    stats = GoldfishSimulator(InfectDeckPilot, config).simulate(deck)
    stats.average_win_turn()

Architecture:
    Main Process:
        - Splits trial indexes [0, iterations) into batches
        - Distributes batches to the worker pool
        - Merges outcome records from all workers

    Worker Process:
        - Receives a range of trial indexes
        - For each index: seed an RNG, pick play/draw, run one GameEngine
        - Returns one GameResult (or TrialFailure) per trial
"""

import logging
import math
import multiprocessing as mp
import os
import random
import time
from dataclasses import dataclass
from multiprocessing import Pool
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Type, Union

from dotenv import load_dotenv

from .deck import Deck
from .engine import DEFAULT_DRAW, DEFAULT_MAX_TURNS, GameEngine
from .errors import GameInternalError
from .pilot import DeckPilot
from .sentry_config import capture_message, capture_trial_failure, init_sentry, is_enabled
from .stats import DeckStats, TrialFailure
from .types import GameResult, Start

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s [%(processName)s] %(levelname)s: %(message)s'

TrialOutcome = Union[GameResult, TrialFailure]


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class SimulationConfig:
    """Configuration for a simulation run.

    Attributes:
        draw: Opening hand size (default 7).
        start: Play/draw policy: OTP, OTD or BOTH (alternate by trial index).
        iterations: Number of trials per deck.
        max_turns: Last turn played before a trial times out.
        verbose: Log every trial transcript at INFO.
        num_workers: Worker processes (1 = run in this process, None = CPU count).
        batch_size: Trials per worker batch (default: auto-calculated).
        seed: Base seed. Trial ``i`` is seeded from ``(seed, i)``, so results
            do not depend on the number of workers. None = OS entropy.
        strict: Abort the run on the first failed trial. When False, failed
            trials are logged, reported and excluded from the statistics.
        progress_interval: Seconds between progress updates.
    """
    draw: int = DEFAULT_DRAW
    start: Start = Start.BOTH
    iterations: int = 50000
    max_turns: int = DEFAULT_MAX_TURNS
    verbose: bool = False
    num_workers: Optional[int] = 1
    batch_size: Optional[int] = None
    seed: Optional[int] = None
    strict: bool = True
    progress_interval: float = 10.0

    def __post_init__(self):
        self.start = Start(self.start)
        if self.iterations < 1:
            raise ValueError(f"iterations must be >= 1, got {self.iterations}")
        if self.draw < 0:
            raise ValueError(f"draw must be >= 0, got {self.draw}")
        if self.max_turns < 1:
            raise ValueError(f"max_turns must be >= 1, got {self.max_turns}")
        if self.num_workers is None:
            self.num_workers = mp.cpu_count()
        if self.num_workers < 1:
            raise ValueError(f"num_workers must be >= 1, got {self.num_workers}")
        if self.batch_size is None:
            # Auto-calculate: aim for ~4 batches per worker
            self.batch_size = max(1, math.ceil(self.iterations / (self.num_workers * 4)))
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")

    @classmethod
    def from_env(cls, **overrides: Any) -> "SimulationConfig":
        """Build a config from GOLDFISH_* environment variables (and .env).

        Keyword arguments take precedence over the environment.
        """
        load_dotenv()
        values: Dict[str, Any] = {}
        env_map = {
            "GOLDFISH_ITERATIONS": ("iterations", int),
            "GOLDFISH_MAX_TURNS": ("max_turns", int),
            "GOLDFISH_DRAW": ("draw", int),
            "GOLDFISH_WORKERS": ("num_workers", _parse_workers),
            "GOLDFISH_SEED": ("seed", int),
            "GOLDFISH_START": ("start", lambda v: Start(v.lower())),
            "GOLDFISH_STRICT": ("strict", _parse_bool),
            "GOLDFISH_VERBOSE": ("verbose", _parse_bool),
        }
        for variable, (name, parse) in env_map.items():
            raw = os.getenv(variable)
            if raw is not None and raw.strip() != "":
                values[name] = parse(raw.strip())
        values.update(overrides)
        return cls(**values)


def _parse_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"Not a boolean: {value!r}")


def _parse_workers(value: str) -> Optional[int]:
    if value.lower() in ("auto", "all"):
        return None
    return int(value)


# =============================================================================
# SINGLE TRIAL
# =============================================================================

def on_the_play_for(start: Start, index: int) -> bool:
    """Play/draw assignment for trial ``index``: even indexes play under BOTH."""
    if start is Start.OTP:
        return True
    if start is Start.OTD:
        return False
    return index % 2 == 0


def trial_rng(seed: Optional[int], index: int) -> random.Random:
    """Independent RNG for one trial; OS entropy when ``seed`` is None."""
    if seed is None:
        return random.Random()
    return random.Random(f"{seed}:{index}")


def run_trial(
    deck_cards: Sequence[str],
    pilot_class: Type[DeckPilot],
    index: int,
    config: SimulationConfig,
    pilot_options: Optional[Dict[str, Any]] = None,
    deck_name: str = "",
) -> TrialOutcome:
    """Run trial ``index`` and return its outcome record.

    Raises:
        GameInternalError: In strict mode, when the trial fails.
    """
    on_the_play = on_the_play_for(config.start, index)
    engine = GameEngine(
        deck_cards,
        pilot_class,
        on_the_play,
        draw=config.draw,
        max_turns=config.max_turns,
        rng=trial_rng(config.seed, index),
        pilot_options=pilot_options,
        trial_index=index,
    )
    try:
        result = engine.run()
    except GameInternalError as e:
        if config.strict:
            raise
        logger.error(f"Trial {index} of {deck_name or 'deck'} failed: {e}")
        capture_trial_failure(e, deck_name=deck_name, trial_index=index, transcript=e.transcript)
        return TrialFailure(
            trial_index=index,
            on_the_play=on_the_play,
            error_type=type(e.cause).__name__ if e.cause is not None else type(e).__name__,
            message=str(e.cause) if e.cause is not None else e.message,
            transcript=e.transcript,
        )

    if config.verbose:
        logger.info(
            f"Trial {index} ({result.outcome.value} on turn {result.end_turn}):\n"
            f"{engine.game.transcript()}"
        )
    return result


# =============================================================================
# WORKER FUNCTION
# =============================================================================

# Global worker state (initialized per-process)
_worker_deck: Tuple[str, ...] = ()
_worker_deck_name: str = ""
_worker_pilot_class: Optional[Type[DeckPilot]] = None
_worker_config: Optional[SimulationConfig] = None
_worker_pilot_options: Optional[Dict[str, Any]] = None


def _worker_init(
    deck_cards: Tuple[str, ...],
    deck_name: str,
    pilot_class: Type[DeckPilot],
    config: SimulationConfig,
    pilot_options: Optional[Dict[str, Any]],
    log_level: int,
    sentry_enabled: bool,
):
    """Initialize worker process with the run's read-only state.

    Called once per worker at pool creation time.
    """
    global _worker_deck, _worker_deck_name, _worker_pilot_class
    global _worker_config, _worker_pilot_options

    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    if sentry_enabled:
        init_sentry()

    _worker_deck = deck_cards
    _worker_deck_name = deck_name
    _worker_pilot_class = pilot_class
    _worker_config = config
    _worker_pilot_options = pilot_options


def _worker_batch(start: int, stop: int) -> List[TrialOutcome]:
    """Run trials ``start`` to ``stop - 1`` in a single worker."""
    return [
        run_trial(
            _worker_deck,
            _worker_pilot_class,
            index,
            _worker_config,
            _worker_pilot_options,
            _worker_deck_name,
        )
        for index in range(start, stop)
    ]


# =============================================================================
# SIMULATOR
# =============================================================================

class GoldfishSimulator:
    """Runs a pilot against decks and aggregates the outcomes.

    Args:
        pilot_class: DeckPilot subclass. Must be importable by worker
            processes (defined at module level) when num_workers > 1.
        config: Run configuration (defaults to SimulationConfig()).
        pilot_options: Keyword arguments for the pilot constructor, e.g.
            ``{"keep": my_keep_oracle}``. Must be picklable for parallel runs.
    """

    def __init__(
        self,
        pilot_class: Type[DeckPilot],
        config: Optional[SimulationConfig] = None,
        pilot_options: Optional[Dict[str, Any]] = None,
    ):
        self.pilot_class = pilot_class
        self.config = config or SimulationConfig()
        self.pilot_options = dict(pilot_options or {})

    def simulate(self, deck: Deck) -> DeckStats:
        """Run ``config.iterations`` trials of ``deck``.

        Raises:
            GameInternalError: In strict mode, for the first failed trial.
        """
        config = self.config
        start_time = time.perf_counter()
        logger.info(
            f"Simulating {deck}: {config.iterations:,} trials, "
            f"{config.num_workers} worker(s), start={config.start.value}"
        )

        if config.num_workers == 1:
            outcomes = self._run_sequential(deck, start_time)
        else:
            outcomes = self._run_parallel(deck, start_time)

        results = [o for o in outcomes if isinstance(o, GameResult)]
        failures = [o for o in outcomes if isinstance(o, TrialFailure)]
        duration = time.perf_counter() - start_time

        stats = DeckStats(
            deck=deck,
            results=results,
            iterations=config.iterations,
            failures=failures,
            duration_seconds=duration,
        )
        logger.info(f"Completed {stats.completed():,} trials in {duration:.1f}s")
        if failures:
            logger.warning(f"{len(failures):,} trial(s) failed and were excluded")
            capture_message(
                f"{len(failures):,} of {config.iterations:,} trials failed for {deck}",
                level="warning",
            )
        return stats

    def simulate_all(self, decks: Iterable[Deck]) -> List[DeckStats]:
        return [self.simulate(deck) for deck in decks]

    def _run_sequential(self, deck: Deck, start_time: float) -> List[TrialOutcome]:
        config = self.config
        outcomes: List[TrialOutcome] = []
        last_progress = start_time
        for index in range(config.iterations):
            outcomes.append(
                run_trial(deck.main, self.pilot_class, index, config, self.pilot_options, deck.name)
            )
            last_progress = self._log_progress(len(outcomes), start_time, last_progress)
        return outcomes

    def _run_parallel(self, deck: Deck, start_time: float) -> List[TrialOutcome]:
        config = self.config
        batches = [
            (start, min(start + config.batch_size, config.iterations))
            for start in range(0, config.iterations, config.batch_size)
        ]
        logger.info(f"Split into {len(batches):,} batches of ~{config.batch_size} trials")

        outcomes: List[TrialOutcome] = []
        with Pool(
            processes=config.num_workers,
            initializer=_worker_init,
            initargs=(
                deck.main,
                deck.name,
                self.pilot_class,
                config,
                self.pilot_options,
                logging.getLogger().getEffectiveLevel(),
                is_enabled(),
            ),
        ) as pool:
            async_results = [
                pool.apply_async(_worker_batch, batch) for batch in batches
            ]

            last_progress = start_time
            for async_result in async_results:
                outcomes.extend(async_result.get())  # Blocks until batch complete
                last_progress = self._log_progress(len(outcomes), start_time, last_progress)

        return outcomes

    def _log_progress(self, completed: int, start_time: float, last_progress: float) -> float:
        now = time.perf_counter()
        if now - last_progress < self.config.progress_interval:
            return last_progress
        total = self.config.iterations
        elapsed = now - start_time
        rate = completed / elapsed if elapsed > 0 else 0
        eta = (total - completed) / rate if rate > 0 else 0
        logger.info(
            f"Progress: {completed:,}/{total:,} trials "
            f"({100*completed/total:.1f}%) - "
            f"Rate: {rate:.1f} trials/sec - "
            f"ETA: {eta:.0f}s"
        )
        return now


__all__ = [
    "SimulationConfig",
    "GoldfishSimulator",
    "on_the_play_for",
    "run_trial",
    "trial_rng",
]
