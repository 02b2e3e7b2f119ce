"""Typed action requests dispatched through apply_action."""
import random

import pytest

from zenji.actions import (
    AITurn,
    CallZenji,
    CheckCards,
    Discard,
    Draw,
    EndTurn,
    ExchangeFromFuture,
    HideCards,
    KnockOut,
    MoveToHigherMind,
    NextRound,
    apply_action,
)
from zenji.errors import AlreadyChecked, HigherMindFull, NotYourTurn
from zenji.state import ACTIVE, ROUND_END

from builders import ALL_IDS, card, card_ids, make_state


def _state(**kwargs):
    return make_state(
        [
            [card("Earth 7"), card("Fire EP 2"), card("Zenji"), card("Zero Mind")],
            [card("Water 9"), card("Air 6"), card("Zero Mind", 1), card("Earth EP 2")],
        ],
        **kwargs,
    )


def test_draw_then_discard_conserves_cards():
    state = _state(future_top=[card("Air 11")])
    result = apply_action(state, Draw())
    assert result.card == card("Air 11")
    assert card("Air 11") not in result.state.all_cards()
    after = apply_action(result.state, Discard(result.card)).state
    assert after.past_pile[0] == card("Air 11")
    assert card_ids(after) == ALL_IDS


def test_exchange_routes_non_scoring_card_to_past_pile():
    state = _state(future_top=[card("Air EP 1")])
    after = apply_action(state, ExchangeFromFuture(0)).state
    assert after.players[0].monkey_mind[0] == card("Air EP 1")
    assert after.past_pile[0] == card("Earth 7")
    assert card_ids(after) == ALL_IDS


def test_exchange_routes_ep_card_to_higher_mind():
    state = _state(future_top=[card("Air 12")])
    after = apply_action(state, ExchangeFromFuture(1)).state
    assert after.players[0].higher_mind == (card("Fire EP 2"),)
    assert after.players[0].monkey_mind[1] == card("Air 12")
    assert card_ids(after) == ALL_IDS


def test_exchange_rejected_when_higher_mind_full():
    state = _state(
        higher_minds=[[card("Earth EP 4"), card("Fire EP 4"), card("Water EP 4"), card("Air EP 4")], []],
    )
    with pytest.raises(HigherMindFull):
        apply_action(state, ExchangeFromFuture(1))


def test_move_to_higher_mind_and_knock_out():
    state = _state(past=[card("Water 7")])
    after = apply_action(state, KnockOut(0)).state
    assert after.past_pile[0] == card("Earth 7")
    after = apply_action(after, MoveToHigherMind(card("Air Avatar"))).state
    assert after.players[0].higher_mind == (card("Air Avatar"),)


def test_explicit_player_id():
    state = _state()
    with pytest.raises(NotYourTurn):
        apply_action(state, Draw(), player_id="p2")
    after = apply_action(state, CheckCards(), player_id="p2").state
    assert after.players[1].has_checked_cards
    with pytest.raises(AlreadyChecked):
        apply_action(after, CheckCards(), player_id="p2")
    after = apply_action(after, HideCards(), player_id="p2").state
    assert not any(after.players[1].cards_visible.values())


def test_zenji_and_next_round():
    state = _state()
    same = apply_action(state, NextRound()).state
    assert same is state

    locked = apply_action(state, CallZenji()).state
    assert locked.status == ROUND_END
    nxt = apply_action(locked, NextRound(), rng=random.Random(1)).state
    assert nxt.status == ACTIVE
    assert nxt.round_number == 2


def test_end_turn_and_ai_turn():
    state = _state(ai_seats=[1], future_top=[card("Air 10")])
    state = apply_action(state, EndTurn()).state
    assert state.current_turn == 1
    state = apply_action(state, AITurn()).state
    assert state.current_turn == 0
    assert state.past_pile[0] == card("Air 10")


def test_unknown_action_type():
    with pytest.raises(TypeError):
        apply_action(_state(), "draw")
