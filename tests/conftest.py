from typing import List, Sequence

import pytest

from game import Rank, to_rank


class ScriptedShoe:
    """Shoe stand-in that deals a fixed sequence of ranks."""

    def __init__(self, ranks: Sequence[str]) -> None:
        self._ranks: List[Rank] = [to_rank(r) for r in ranks]
        self.drawn: List[Rank] = []

    def draw_rank(self) -> Rank:
        rank = self._ranks.pop(0)
        self.drawn.append(rank)
        return rank

    def remaining(self) -> int:
        return len(self._ranks)


@pytest.fixture
def scripted_shoe():
    return ScriptedShoe
