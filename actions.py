"""
Player actions evaluated by the simulator, and a single trial of each.

Each action is a fixed plan decided before any card is drawn:

* ``stand`` – Keep the current hand.
* ``hit_once`` / ``hit_twice`` / ``hit_thrice`` – Draw exactly that many
  cards, even if an earlier draw has already busted the hand.
* ``split_hit_once`` / ``split_hit_twice`` / ``split_hit_thrice`` – Split a
  pair into two hands, deal each a second card, then hit each hand the same
  number of times.  Both hands are settled against one dealer hand.

The actions are exported in the ``ACTIONS`` dictionary for easy lookup, in
display order.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Sequence, Tuple

from game import Rank, Shoe, Verdict, compare, dealer_play, is_pair


class ActionKind(str, Enum):
    STAND = "stand"
    HIT = "hit"
    SPLIT_HIT = "split_hit"


_COUNT_WORDS = {1: "once", 2: "twice", 3: "thrice"}
MAX_HITS = max(_COUNT_WORDS)


@dataclass(frozen=True)
class ActionSpec:
    kind: ActionKind
    hits: int = 0

    def __post_init__(self) -> None:
        if self.kind == ActionKind.STAND and self.hits != 0:
            raise ValueError("stand takes no hits")
        if self.kind != ActionKind.STAND and self.hits not in _COUNT_WORDS:
            raise ValueError(f"hits must be between 1 and {MAX_HITS}, got {self.hits}")

    @property
    def name(self) -> str:
        if self.kind == ActionKind.STAND:
            return self.kind.value
        return f"{self.kind.value}_{_COUNT_WORDS[self.hits]}"

    @property
    def is_split(self) -> bool:
        return self.kind == ActionKind.SPLIT_HIT


STAND = ActionSpec(ActionKind.STAND)
HIT_ACTIONS = [ActionSpec(ActionKind.HIT, k) for k in sorted(_COUNT_WORDS)]
SPLIT_ACTIONS = [ActionSpec(ActionKind.SPLIT_HIT, k) for k in sorted(_COUNT_WORDS)]

ACTIONS: Dict[str, ActionSpec] = {
    action.name: action for action in [STAND, *HIT_ACTIONS, *SPLIT_ACTIONS]
}


def applicable_actions(player_cards: Sequence[Rank]) -> List[ActionSpec]:
    """Stand and every hit count always; the split variants only for a pair."""
    acts = [STAND, *HIT_ACTIONS]
    if is_pair(player_cards):
        acts.extend(SPLIT_ACTIONS)
    return acts


def _hit(cards: List[Rank], times: int, shoe: Shoe) -> List[Rank]:
    for _ in range(times):
        cards.append(shoe.draw_rank())
    return cards


def run_trial(
    player_cards: Sequence[Rank],
    dealer_card: Rank,
    action: ActionSpec,
    shoe: Shoe,
    hits_soft_17: bool = False,
) -> Tuple[Verdict, ...]:
    """
    Play one trial of ``action`` and return one verdict per player hand.

    The player draws first (for a split: the first hand's second card and
    hits, then the second hand's), then the dealer plays out.  The dealer
    plays even when every player hand has busted.
    """
    if action.is_split:
        hands = [
            _hit([player_cards[0]], action.hits + 1, shoe),
            _hit([player_cards[1]], action.hits + 1, shoe),
        ]
    else:
        hands = [_hit(list(player_cards), action.hits, shoe)]

    dealer = dealer_play(dealer_card, shoe, hits_soft_17=hits_soft_17)
    return tuple(compare(hand, dealer) for hand in hands)
