"""
Core card model for estimating Blackjack action outcomes.

This module defines the shoe, the hand evaluator and the dealer policy used
by the Monte Carlo engine.  Card ranks are tracked without their suits; each
deck contributes four copies of each rank into the shoe.

The shoe is always full: drawing a card never removes it, so every draw in
every trial samples the same rank distribution (sampling with replacement).
Cards already in the player's or dealer's hand do not change the odds of
later draws.
"""

from dataclasses import dataclass
from enum import Enum
from itertools import accumulate
from typing import List, Optional, Sequence
import random


class InvalidParameter(ValueError):
    """Raised when a simulation input cannot describe a real Blackjack state."""


# ----- Card definitions -----
class Rank(str, Enum):
    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"


RANKS: List[Rank] = list(Rank)
VALUES = {
    Rank.ACE: 11,
    Rank.TWO: 2,
    Rank.THREE: 3,
    Rank.FOUR: 4,
    Rank.FIVE: 5,
    Rank.SIX: 6,
    Rank.SEVEN: 7,
    Rank.EIGHT: 8,
    Rank.NINE: 9,
    Rank.TEN: 10,
    Rank.JACK: 10,
    Rank.QUEEN: 10,
    Rank.KING: 10,
}

DEALER_STANDS_ON = 17


def to_rank(value) -> Rank:
    """Convert ``"K"``, ``"10"`` or a :class:`Rank` into a :class:`Rank`."""
    try:
        return Rank(value)
    except ValueError:
        raise InvalidParameter(f"unknown card rank: {value!r}") from None


class Shoe:
    """
    A shoe of ``num_decks`` decks, stored as a count per rank.

    Draws are weighted by those counts but never decrement them.
    """

    def __init__(self, num_decks: int = 6, rng: Optional[random.Random] = None) -> None:
        if num_decks < 1:
            raise InvalidParameter(f"num_decks must be at least 1, got {num_decks}")
        self.num_decks = num_decks
        self._rng = rng if rng is not None else random.Random()
        self.counts = {rank: 4 * num_decks for rank in RANKS}
        self._cum_weights = list(accumulate(self.counts[rank] for rank in RANKS))

    def cards_total(self) -> int:
        return self._cum_weights[-1]

    def probability(self, rank: Rank) -> float:
        """Chance that a single draw yields ``rank``."""
        return self.counts[rank] / self.cards_total()

    def draw_rank(self) -> Rank:
        """Draw one card rank from the shoe."""
        return self._rng.choices(RANKS, cum_weights=self._cum_weights)[0]


@dataclass(frozen=True)
class HandValue:
    total: int
    is_soft: bool
    busted: bool


def hand_value(cards: Sequence[Rank]) -> HandValue:
    """
    Compute the Blackjack value of a hand, counting Aces as 11 and demoting
    them to 1 one at a time while the hand would otherwise bust.
    """
    total = 0
    aces = 0
    for r in cards:
        if r == Rank.ACE:
            aces += 1
        total += VALUES[r]
    while total > 21 and aces > 0:
        total -= 10
        aces -= 1
    return HandValue(total=total, is_soft=aces > 0, busted=total > 21)


def is_natural(cards: Sequence[Rank]) -> bool:
    return len(cards) == 2 and hand_value(cards).total == 21


def is_pair(cards: Sequence[Rank]) -> bool:
    """Two cards of equal Blackjack value (so ``10`` and ``K`` are a pair)."""
    return len(cards) == 2 and VALUES[cards[0]] == VALUES[cards[1]]


class Verdict(str, Enum):
    WIN = "win"
    LOSS = "loss"
    TIE = "tie"


def compare(player: Sequence[Rank], dealer: Sequence[Rank]) -> Verdict:
    """
    Settle a finished player hand against the finished dealer hand.

    A busted player always loses, even when the dealer busts too.  Naturals
    get no special treatment.
    """
    player_value = hand_value(player)
    dealer_value = hand_value(dealer)
    if player_value.busted:
        return Verdict.LOSS
    if dealer_value.busted:
        return Verdict.WIN
    if player_value.total > dealer_value.total:
        return Verdict.WIN
    if player_value.total < dealer_value.total:
        return Verdict.LOSS
    return Verdict.TIE


def dealer_play(up_card: Rank, shoe: Shoe, hits_soft_17: bool = False) -> List[Rank]:
    """
    Deal the hidden card and hit until reaching 17 or higher.

    With ``hits_soft_17`` the dealer also hits a soft 17.
    """
    cards = [up_card, shoe.draw_rank()]
    while True:
        value = hand_value(cards)
        if value.total < DEALER_STANDS_ON:
            cards.append(shoe.draw_rank())
        elif hits_soft_17 and value.total == DEALER_STANDS_ON and value.is_soft:
            cards.append(shoe.draw_rank())
        else:
            return cards
