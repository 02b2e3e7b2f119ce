"""Turn engine actions: draw, discard, exchange, Higher Mind, Zenji, knock-out, round end."""
import random

import pytest

from zenji.errors import (
    CardProtected,
    EmptyFuturePile,
    EmptyPastPile,
    HigherMindFull,
    IneligibleCard,
    InvalidCardIndex,
    NoZenjiCaller,
    NotYourTurn,
    PlayerNotFound,
)
from zenji.state import ACTIVE, GAME_END, ROUND_END, WAITING
from zenji.turn import (
    add_to_higher_mind,
    call_zenji,
    discard_to_past,
    draw_from_future,
    end_round,
    end_turn,
    exchange_monkey_mind_card,
    knock_out_card,
)

from builders import ALL_IDS, card, card_ids, make_state


def _two_players(**kwargs):
    return make_state(
        [
            [card("Earth 7"), card("Fire 8"), card("Zenji"), card("Zero Mind")],
            [card("Water 9"), card("Air 6"), card("Zero Mind", 1), card("Earth EP 2")],
        ],
        **kwargs,
    )


# ---- draw / discard ----


def test_draw_takes_top_of_future_pile():
    state = _two_players(future_top=[card("Fire EP 3")])
    new_state, drawn = draw_from_future(state, "p1")
    assert drawn == card("Fire EP 3")
    assert new_state.future_pile == state.future_pile[1:]
    assert state.future_pile[0] == drawn


def test_draw_rejects_wrong_player_status_or_unknown_id():
    state = _two_players()
    with pytest.raises(NotYourTurn):
        draw_from_future(state, "p2")
    with pytest.raises(NotYourTurn):
        draw_from_future(state, "nobody")
    with pytest.raises(NotYourTurn):
        draw_from_future(make_state([[card("Earth 7")]], status=WAITING), "p1")


def test_draw_recycles_past_pile_when_future_empty():
    past = [card("Air 5"), card("Air 6"), card("Air 7")]
    state = make_state([[card("Earth 7")]], past=past, future=[])
    new_state, drawn = draw_from_future(state, "p1", rng=random.Random(0))
    assert drawn in past
    assert new_state.past_pile == ()
    assert len(new_state.future_pile) == 2
    assert {c.id for c in new_state.future_pile} | {drawn.id} == {c.id for c in past}


def test_draw_with_both_piles_empty():
    state = make_state([[card("Earth 7")]], future=[])
    with pytest.raises(EmptyFuturePile):
        draw_from_future(state, "p1")


def test_discard_prepends():
    state = _two_players(past=[card("Air 12")])
    new_state = discard_to_past(state, card("Air 5"))
    assert new_state.past_pile == (card("Air 5"), card("Air 12"))
    assert state.past_pile == (card("Air 12"),)


# ---- exchange ----


def test_exchange_returns_replaced_card_and_reveals_new_one():
    state = _two_players()
    new_card = card("Water EP 1")
    new_state, replaced = exchange_monkey_mind_card(state, "p1", new_card, 1)
    p1 = new_state.players[0]
    assert replaced == card("Fire 8")
    assert p1.monkey_mind[1] == new_card
    assert replaced not in p1.monkey_mind
    assert p1.cards_visible[new_card.id] is True
    assert replaced.id not in p1.cards_visible
    assert state.players[0].monkey_mind[1] == card("Fire 8")


def test_exchange_errors():
    state = _two_players()
    with pytest.raises(PlayerNotFound):
        exchange_monkey_mind_card(state, "ghost", card("Water EP 1"), 0)
    with pytest.raises(InvalidCardIndex):
        exchange_monkey_mind_card(state, "p1", card("Water EP 1"), 4)
    with pytest.raises(InvalidCardIndex):
        exchange_monkey_mind_card(state, "p1", card("Water EP 1"), -1)


# ---- Higher Mind ----


def test_add_to_higher_mind_eligibility():
    state = _two_players()
    state = add_to_higher_mind(state, "p1", card("Fire EP 4"))
    state = add_to_higher_mind(state, "p1", card("Air Avatar"))
    assert state.players[0].higher_mind == (card("Fire EP 4"), card("Air Avatar"))
    for name in ("Earth 5", "Zenji", "No-Zen King of Fire", "Zen King of Air"):
        with pytest.raises(IneligibleCard):
            add_to_higher_mind(state, "p1", card(name))
    with pytest.raises(PlayerNotFound):
        add_to_higher_mind(state, "ghost", card("Fire EP 3"))


def test_higher_mind_full_on_fifth_card():
    state = _two_players()
    for name in ("Earth EP 1", "Fire EP 1", "Water EP 1", "Air EP 1"):
        state = add_to_higher_mind(state, "p1", card(name))
    assert len(state.players[0].higher_mind) == 4
    with pytest.raises(HigherMindFull):
        add_to_higher_mind(state, "p1", card("Earth EP 3"))
    assert len(state.players[0].higher_mind) == 4


# ---- turn order / Zenji ----


@pytest.mark.parametrize("n, start", [(2, 0), (2, 1), (3, 2), (4, 1), (4, 3)])
def test_end_turn_advances_modulo_player_count(n, start):
    state = make_state([[card("Earth 5", 0)]] + [[]] * (n - 1), current_turn=start)
    assert end_turn(state).current_turn == (start + 1) % n


def test_call_zenji_locks_round():
    state = _two_players()
    new_state = call_zenji(state, "p1")
    assert new_state.status == ROUND_END
    assert new_state.zenji_lock == "p1"
    assert new_state.players[0].has_called_zenji
    assert state.status == ACTIVE and state.zenji_lock is None


def test_call_zenji_errors():
    state = _two_players()
    with pytest.raises(PlayerNotFound):
        call_zenji(state, "ghost")
    with pytest.raises(NotYourTurn):
        call_zenji(state, "p2")


# ---- knock-out ----


def test_knock_out_match_moves_card_to_past_pile():
    state = _two_players(past=[card("Water 7")])
    new_state = knock_out_card(state, "p1", 0)
    p1 = new_state.players[0]
    assert card("Earth 7") not in p1.monkey_mind
    assert len(p1.monkey_mind) == 3
    assert new_state.past_pile[0] == card("Earth 7")
    assert new_state.future_pile == state.future_pile
    assert p1.higher_mind == ()
    assert card_ids(new_state) == ALL_IDS


def test_knock_out_mismatch_penalty_goes_to_higher_mind_when_monkey_mind_full():
    state = _two_players(past=[card("Water 12")], future_top=[card("No-Zen King of Water")])
    new_state = knock_out_card(state, "p1", 0)
    p1 = new_state.players[0]
    assert p1.monkey_mind == state.players[0].monkey_mind
    # Penalty bypasses the Higher Mind eligibility filter
    assert p1.higher_mind == (card("No-Zen King of Water"),)
    assert len(new_state.future_pile) == len(state.future_pile) - 1
    assert new_state.past_pile == state.past_pile
    assert card_ids(new_state) == ALL_IDS


def test_knock_out_penalty_recycles_past_pile():
    past = [card("Water 12"), card("Water 11")]
    state = _two_players(past=past, future=[])
    new_state = knock_out_card(state, "p1", 0, rng=random.Random(0))
    p1 = new_state.players[0]
    assert p1.monkey_mind == state.players[0].monkey_mind
    assert len(p1.higher_mind) == 1
    assert new_state.past_pile == ()
    assert len(new_state.future_pile) == 1
    assert {p1.higher_mind[0].id, new_state.future_pile[0].id} == {c.id for c in past}


def test_knock_out_mismatch_penalty_goes_to_monkey_mind_with_room():
    state = make_state(
        [[card("Earth 7"), card("Fire 8"), card("Zenji")], [card("Air 6")]],
        past=[card("Water 12")],
        future_top=[card("Fire 11")],
    )
    new_state = knock_out_card(state, "p1", 1)
    p1 = new_state.players[0]
    assert p1.monkey_mind == (card("Earth 7"), card("Fire 8"), card("Zenji"), card("Fire 11"))
    assert p1.higher_mind == ()
    assert p1.cards_visible[card("Fire 11").id] is False


def test_knock_out_guards():
    state = _two_players()
    with pytest.raises(EmptyPastPile):
        knock_out_card(state, "p1", 0)
    state = _two_players(past=[card("Zero Mind", 2)])
    with pytest.raises(CardProtected):
        knock_out_card(state, "p1", 3)
    with pytest.raises(PlayerNotFound):
        knock_out_card(state, "ghost", 0)
    with pytest.raises(InvalidCardIndex):
        knock_out_card(state, "p1", 9)


def test_knock_out_allowed_off_turn():
    state = _two_players(past=[card("Earth 9")])
    new_state = knock_out_card(state, "p2", 0)
    assert card("Water 9") not in new_state.players[1].monkey_mind
    assert new_state.current_turn == 0


def test_satori_scores_one_ep_per_value():
    state = make_state(
        [[card("Earth 7")], [card("Air 6")]],
        higher_minds=[[card("Water EP 4"), card("Air EP 4"), card("Earth EP 3"), card("Fire EP 1")], []],
        past=[card("Fire 7")],
    )
    new_state = knock_out_card(state, "p1", 0)
    p1 = new_state.players[0]
    assert p1.monkey_mind == ()
    assert p1.scorecard == (card("Water EP 4"), card("Earth EP 3"), card("Fire EP 1"))
    assert p1.higher_mind == (card("Air EP 4"),)
    assert p1.score == 8
    assert new_state.status == ACTIVE
    assert new_state.winner is None


def test_satori_win_ends_game_immediately():
    state = make_state(
        [[card("Earth 7")], [card("Air 6")]],
        higher_minds=[[card("Water EP 4"), card("Air EP 3"), card("Earth EP 1"), card("Fire EP 2")], []],
        scorecards=[[card("Earth EP 4"), card("Fire EP 3")], []],
        past=[card("Fire 7")],
        current_turn=1,
    )
    new_state = knock_out_card(state, "p1", 0)
    assert new_state.players[0].score == 17
    assert new_state.status == GAME_END
    assert new_state.winner == "p1"
    assert card_ids(new_state) == ALL_IDS


# ---- round end ----


def test_end_round_requires_zenji_caller():
    with pytest.raises(NoZenjiCaller):
        end_round(_two_players())


def test_end_round_deals_next_round():
    state = make_state(
        [
            [card("Earth EP 1"), card("Fire EP 2"), card("Zero Mind"), card("Zero Mind", 1)],
            [card("Earth 7"), card("Zero Mind", 2), card("Zero Mind", 3), card("Air 12")],
        ],
        higher_minds=[[card("Water EP 3")], [card("Air Avatar")]],
        past=[card("Fire 9"), card("Fire 10")],
    )
    new_state = end_round(call_zenji(state, "p1"), rng=random.Random(11))

    assert new_state.status == ACTIVE
    assert new_state.round_number == 2
    assert new_state.zenji_lock is None
    assert new_state.current_turn == 1
    assert new_state.past_pile == ()
    for p in new_state.players:
        assert len(p.monkey_mind) == 4
        assert p.higher_mind == ()
        assert not p.has_called_zenji
        assert not p.has_checked_cards
        assert not any(p.cards_visible.values())
    assert new_state.players[0].scorecard == (card("Water EP 3"),)
    assert new_state.players[0].score == 3
    assert card_ids(new_state) == ALL_IDS


def test_end_round_with_winner_ends_game():
    state = make_state(
        [[card("Zero Mind")], [card("Air 12")]],
        higher_minds=[[card("Air EP 3")], []],
        scorecards=[[card("Earth EP 4"), card("Fire EP 4"), card("Water EP 4")], []],
    )
    state = end_round(call_zenji(state, "p1"))
    assert state.status == GAME_END
    assert state.winner == "p1"
    assert state.players[0].score == 15


def test_end_round_turn_wraps_after_last_seat():
    state = make_state(
        [[card("Zero Mind")], [card("Air 12")], [card("Earth 11")]],
        current_turn=2,
    )
    state = end_round(call_zenji(state, "p3"), rng=random.Random(2))
    assert state.current_turn == 0
