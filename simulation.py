"""
Monte Carlo estimation of win, loss and tie odds for every player action.

A :class:`SimulationRequest` describes the visible table state.  For each
applicable action, :func:`simulate` plays ``num_trials`` independent trials
and tallies the verdicts into an :class:`ActionStats`.  Trials are cut into
chunks that each own a separately seeded random generator, so the chunks can
run on a process pool and their tallies are simply summed afterwards.

A split trial settles two hands, so a split action records two verdicts per
trial and its probabilities are taken over ``2 * num_trials`` observations.
"""

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Sequence, Tuple
import logging
import math
import random
import time

from actions import ActionSpec, applicable_actions, run_trial
from config import get_settings
from game import InvalidParameter, Rank, Shoe, Verdict, is_pair, to_rank

logger = logging.getLogger(__name__)

MIN_PLAYER_CARDS = 2
MAX_PLAYER_CARDS = 8
CHUNK_TRIALS = 25_000
PARALLEL_MIN_TRIALS = 50_000
SEED_STRIDE = 1_000_000_007


@dataclass(frozen=True)
class SimulationRequest:
    """Visible table state plus the simulation parameters."""

    player_cards: Tuple[Rank, ...]
    dealer_card: Rank
    num_decks: int = 6
    bet_size: float = 10.0
    num_trials: int = 10_000
    seed: Optional[int] = None
    hits_soft_17: bool = False

    def __post_init__(self) -> None:
        cards = tuple(to_rank(c) for c in self.player_cards)
        if not MIN_PLAYER_CARDS <= len(cards) <= MAX_PLAYER_CARDS:
            raise InvalidParameter(
                f"player needs {MIN_PLAYER_CARDS} to {MAX_PLAYER_CARDS} cards, got {len(cards)}"
            )
        for name in ("num_decks", "num_trials"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidParameter(f"{name} must be an integer, got {value!r}")
        if self.num_decks < 1:
            raise InvalidParameter(f"num_decks must be at least 1, got {self.num_decks}")
        if self.num_trials < 0:
            raise InvalidParameter(f"num_trials must not be negative, got {self.num_trials}")
        if not math.isfinite(self.bet_size) or self.bet_size < 0:
            raise InvalidParameter(f"bet_size must be a finite non-negative amount, got {self.bet_size}")
        object.__setattr__(self, "player_cards", cards)
        object.__setattr__(self, "dealer_card", to_rank(self.dealer_card))

    @property
    def can_split(self) -> bool:
        return is_pair(self.player_cards)


@dataclass
class ActionStats:
    """Verdict tallies for one action, and the odds derived from them."""

    bet_size: float
    wins: int = 0
    losses: int = 0
    ties: int = 0

    def record(self, verdict: Verdict) -> None:
        if verdict is Verdict.WIN:
            self.wins += 1
        elif verdict is Verdict.LOSS:
            self.losses += 1
        else:
            self.ties += 1

    def merge(self, other: "ActionStats") -> "ActionStats":
        self.wins += other.wins
        self.losses += other.losses
        self.ties += other.ties
        return self

    @property
    def total(self) -> int:
        return self.wins + self.losses + self.ties

    def _share(self, count: int) -> float:
        return count / self.total if self.total else 0.0

    @property
    def win_probability(self) -> float:
        return self._share(self.wins)

    @property
    def loss_probability(self) -> float:
        return self._share(self.losses)

    @property
    def tie_probability(self) -> float:
        return self._share(self.ties)

    @property
    def estimated_value(self) -> float:
        # ties neither pay nor cost
        return self.bet_size * (self.win_probability - self.loss_probability)


@dataclass(frozen=True)
class SimulationResult:
    request: SimulationRequest
    stats: Mapping[str, ActionStats] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "stats", MappingProxyType(dict(self.stats)))

    def __getitem__(self, name: str) -> ActionStats:
        return self.stats[name]

    def __contains__(self, name: object) -> bool:
        return name in self.stats

    def __iter__(self) -> Iterator[str]:
        return iter(self.stats)

    @property
    def can_split(self) -> bool:
        return self.request.can_split


def run_chunk(request: SimulationRequest, action: ActionSpec, trials: int, seed: int) -> ActionStats:
    """Play ``trials`` trials of one action with a generator seeded by ``seed``."""
    shoe = Shoe(request.num_decks, rng=random.Random(seed))
    stats = ActionStats(bet_size=request.bet_size)
    for _ in range(trials):
        for verdict in run_trial(
            request.player_cards,
            request.dealer_card,
            action,
            shoe,
            hits_soft_17=request.hits_soft_17,
        ):
            stats.record(verdict)
    return stats


def _run_chunk_worker(args: Tuple) -> Tuple[str, ActionStats]:
    """Unpack a ``(request, action, trials, seed)`` chunk and return ``(action name, tallies)``."""
    request, action, trials, seed = args
    return action.name, run_chunk(request, action, trials, seed)


def _plan_chunks(
    request: SimulationRequest, actions: Sequence[ActionSpec], base_seed: int
) -> List[Tuple]:
    """Cut every action's trials into chunks, each with its own seed."""
    chunk_args: List[Tuple] = []
    for action in actions:
        remaining = request.num_trials
        while remaining > 0:
            trials = min(CHUNK_TRIALS, remaining)
            seed = base_seed + len(chunk_args) * SEED_STRIDE
            chunk_args.append((request, action, trials, seed))
            remaining -= trials
    return chunk_args


def simulate(request: SimulationRequest, workers: Optional[int] = None) -> SimulationResult:
    """
    Estimate the odds and expected value of every applicable action.

    The chunk layout depends only on the request, so a seeded request gives
    the same result whatever the worker count.  Any failure in a chunk is
    raised from here; there are no partial results.
    """
    if workers is None:
        workers = get_settings().workers
    actions = applicable_actions(request.player_cards)
    base_seed = request.seed if request.seed is not None else random.SystemRandom().randrange(2**32)
    chunk_args = _plan_chunks(request, actions, base_seed)
    stats = {action.name: ActionStats(bet_size=request.bet_size) for action in actions}

    total_trials = request.num_trials * len(actions)
    parallel = workers > 1 and total_trials > PARALLEL_MIN_TRIALS
    logger.info(
        "Simulating %d actions x %d trials (%d chunks, %s)",
        len(actions),
        request.num_trials,
        len(chunk_args),
        f"{workers} workers" if parallel else "inline",
    )
    started = time.perf_counter()

    if parallel:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            tallies = list(executor.map(_run_chunk_worker, chunk_args))
    else:
        tallies = [_run_chunk_worker(args) for args in chunk_args]

    for name, chunk in tallies:
        logger.debug("Chunk for %s: %d observations", name, chunk.total)
        stats[name].merge(chunk)

    logger.info("Simulation finished in %.2fs", time.perf_counter() - started)
    return SimulationResult(request=request, stats=stats)
