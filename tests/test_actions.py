import pytest

from actions import (
    ACTIONS,
    STAND,
    ActionKind,
    ActionSpec,
    applicable_actions,
    run_trial,
)
from game import Rank, Verdict, hand_value, to_rank


def cards(*ranks):
    return [to_rank(r) for r in ranks]


def test_action_names_in_display_order():
    assert list(ACTIONS) == [
        "stand",
        "hit_once",
        "hit_twice",
        "hit_thrice",
        "split_hit_once",
        "split_hit_twice",
        "split_hit_thrice",
    ]
    assert ACTIONS["hit_twice"] == ActionSpec(ActionKind.HIT, 2)
    assert ACTIONS["split_hit_thrice"].is_split


@pytest.mark.parametrize(
    "kind, hits",
    [(ActionKind.STAND, 1), (ActionKind.HIT, 0), (ActionKind.HIT, 4), (ActionKind.SPLIT_HIT, 0)],
)
def test_hit_count_is_a_closed_set(kind, hits):
    with pytest.raises(ValueError):
        ActionSpec(kind, hits)


def test_split_actions_only_for_pairs():
    pair_names = [a.name for a in applicable_actions(cards("8", "8"))]
    assert pair_names == list(ACTIONS)
    assert len(applicable_actions(cards("J", "10"))) == 7
    assert [a.name for a in applicable_actions(cards("A", "K"))] == [
        "stand",
        "hit_once",
        "hit_twice",
        "hit_thrice",
    ]
    assert len(applicable_actions(cards("8", "8", "2"))) == 4


def test_stand_only_deals_to_dealer(scripted_shoe):
    shoe = scripted_shoe(["8"])
    assert run_trial(cards("10", "9"), Rank.TEN, STAND, shoe) == (Verdict.WIN,)
    assert shoe.remaining() == 0


def test_hit_draws_every_card_even_after_bust(scripted_shoe):
    shoe = scripted_shoe(["5", "2", "3", "6", "7"])
    verdicts = run_trial(cards("10", "Q"), Rank.TEN, ACTIONS["hit_thrice"], shoe)
    # player 10+Q+5+2+3 = 30 loses though the dealer busts too
    assert verdicts == (Verdict.LOSS,)
    assert shoe.remaining() == 0
    player_draws, dealer_draws = shoe.drawn[:3], shoe.drawn[3:]
    assert player_draws == cards("5", "2", "3")
    # dealer: 10 up, 6 hidden = 16, then 7 = 23
    assert hand_value([Rank.TEN, *dealer_draws]).total == 23


def test_hit_once(scripted_shoe):
    shoe = scripted_shoe(["5", "7"])
    # 10+6+5 = 21 against 10+7
    assert run_trial(cards("10", "6"), Rank.TEN, ACTIONS["hit_once"], shoe) == (Verdict.WIN,)


def test_split_settles_both_hands_against_one_dealer(scripted_shoe):
    # first hand: 8+3+10 = 21, second hand: 8+2+5 = 15, dealer: 9+9 = 18
    shoe = scripted_shoe(["3", "10", "2", "5", "9"])
    verdicts = run_trial(cards("8", "8"), Rank.NINE, ACTIONS["split_hit_once"], shoe)
    assert verdicts == (Verdict.WIN, Verdict.LOSS)
    assert shoe.remaining() == 0


def test_split_hits_each_hand_the_same_number_of_times(scripted_shoe):
    shoe = scripted_shoe(["2", "2", "2", "3", "3", "3", "7"])
    # 4+2+2+2 = 10 and 4+3+3+3 = 13 against 10+7
    verdicts = run_trial(cards("4", "4"), Rank.TEN, ACTIONS["split_hit_twice"], shoe)
    assert verdicts == (Verdict.LOSS, Verdict.LOSS)
    assert shoe.remaining() == 0


def test_dealer_soft_17_rule_is_passed_through(scripted_shoe):
    hand = cards("10", "7")
    shoe = scripted_shoe(["6"])
    assert run_trial(hand, Rank.ACE, STAND, shoe) == (Verdict.TIE,)
    shoe = scripted_shoe(["6", "5", "10"])
    assert run_trial(hand, Rank.ACE, STAND, shoe, hits_soft_17=True) == (Verdict.WIN,)
