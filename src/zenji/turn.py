"""
Turn engine: one pure function per player action.

Each function takes a MatchState (plus arguments) and returns a new one; on a
rule violation it raises a ZenjiError before anything is built, so the input
state stays authoritative. Cards returned alongside a state are "in transit"
and must be routed by the caller (discard or Higher Mind).
"""
from __future__ import annotations

import logging
import random
from dataclasses import replace

from .deal import MONKEY_MIND_SIZE, deal_hands, next_player
from .deck import Card, shuffle_cards
from .errors import (
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
from .scoring import find_winner, score_round, score_satori
from .state import (
    ACTIVE,
    GAME_END,
    HIGHER_MIND_CAPACITY,
    ROUND_END,
    MatchState,
    hidden_view,
)
from .visibility import with_visibility, without_card

logger = logging.getLogger(__name__)


def _recycle_past_pile(state: MatchState, rng: random.Random | None) -> MatchState:
    """Refill an empty Future Pile from the shuffled Past Pile."""
    if state.future_pile:
        return state
    if not state.past_pile:
        raise EmptyFuturePile()
    logger.debug("Future Pile empty: recycling %d Past Pile cards", len(state.past_pile))
    return replace(
        state,
        future_pile=tuple(shuffle_cards(state.past_pile, rng)),
        past_pile=(),
    )


def _take_top(state: MatchState, rng: random.Random | None) -> tuple[MatchState, Card]:
    state = _recycle_past_pile(state, rng)
    return replace(state, future_pile=state.future_pile[1:]), state.future_pile[0]


def draw_from_future(
    state: MatchState,
    player_id: str,
    rng: random.Random | None = None,
) -> tuple[MatchState, Card]:
    """Draw the top Future Pile card. Only the current player, only while active."""
    try:
        idx = state.player_index(player_id)
    except PlayerNotFound:
        raise NotYourTurn(player_id) from None
    if idx != state.current_turn or state.status != ACTIVE:
        raise NotYourTurn(player_id)
    return _take_top(state, rng)


def discard_to_past(state: MatchState, card: Card) -> MatchState:
    """Put an in-transit card on top of the Past Pile."""
    return replace(state, past_pile=(card,) + state.past_pile)


def exchange_monkey_mind_card(
    state: MatchState,
    player_id: str,
    new_card: Card,
    replace_index: int,
) -> tuple[MatchState, Card]:
    """Swap ``new_card`` into the Monkey Mind; returns the replaced card in transit."""
    idx = state.player_index(player_id)
    player = state.players[idx]
    if not 0 <= replace_index < len(player.monkey_mind):
        raise InvalidCardIndex(replace_index, len(player.monkey_mind))

    replaced = player.monkey_mind[replace_index]
    monkey_mind = list(player.monkey_mind)
    monkey_mind[replace_index] = new_card
    # New card is always visible to its owner when placed
    cards_visible = with_visibility(without_card(player.cards_visible, replaced), [new_card], True)
    new_state = state.with_player(
        idx, replace(player, monkey_mind=tuple(monkey_mind), cards_visible=cards_visible)
    )
    return new_state, replaced


def add_to_higher_mind(state: MatchState, player_id: str, card: Card) -> MatchState:
    """Append an EP, Avatar or Magic card to the player's Higher Mind (max 4)."""
    idx = state.player_index(player_id)
    player = state.players[idx]
    if not card.can_enter_higher_mind():
        raise IneligibleCard(card.name)
    if len(player.higher_mind) >= HIGHER_MIND_CAPACITY:
        raise HigherMindFull(player_id)
    return state.with_player(idx, replace(player, higher_mind=player.higher_mind + (card,)))


def end_turn(state: MatchState) -> MatchState:
    return replace(state, current_turn=next_player(state.current_turn, len(state.players)))


def call_zenji(state: MatchState, player_id: str) -> MatchState:
    """Current player ends the active phase of the round."""
    idx = state.player_index(player_id)
    if idx != state.current_turn:
        raise NotYourTurn(player_id)
    state = state.with_player(idx, replace(state.players[idx], has_called_zenji=True))
    logger.info("%s called Zenji in round %d", player_id, state.round_number)
    return replace(state, zenji_lock=player_id, status=ROUND_END)


def knock_out_card(
    state: MatchState,
    player_id: str,
    card_index: int,
    rng: random.Random | None = None,
) -> MatchState:
    """
    Match a Monkey Mind card against the Past Pile's top card by value.

    - Match: the card goes on top of the Past Pile; an emptied Monkey Mind
      reaches Satori and banks its Higher Mind EP cards at once.
    - Mismatch: penalty card from the Future Pile into the Monkey Mind, or
      into the Higher Mind when the Monkey Mind is full (no eligibility or
      capacity check on this path).
    """
    idx = state.player_index(player_id)
    player = state.players[idx]
    if not 0 <= card_index < len(player.monkey_mind):
        raise InvalidCardIndex(card_index, len(player.monkey_mind))
    if not state.past_pile:
        raise EmptyPastPile()
    target = player.monkey_mind[card_index]
    if target.is_zero_mind():
        raise CardProtected(target.name)

    top = state.past_pile[0]
    if target.value != top.value:
        state, penalty = _take_top(state, rng)
        logger.debug("Wrong knock-out by %s: %s vs %s, penalty %s", player_id, target, top, penalty)
        if len(player.monkey_mind) < MONKEY_MIND_SIZE:
            player = replace(
                player,
                monkey_mind=player.monkey_mind + (penalty,),
                cards_visible=with_visibility(player.cards_visible, [penalty], False),
            )
        else:
            player = replace(player, higher_mind=player.higher_mind + (penalty,))
        return state.with_player(idx, player)

    monkey_mind = player.monkey_mind[:card_index] + player.monkey_mind[card_index + 1:]
    player = replace(
        player,
        monkey_mind=monkey_mind,
        cards_visible=without_card(player.cards_visible, target),
    )
    state = replace(state, past_pile=(target,) + state.past_pile)
    logger.debug("%s knocked out %s", player_id, target)

    if monkey_mind:
        return state.with_player(idx, player)

    player = score_satori(player)
    logger.info("Satori for %s: score now %d", player_id, player.score)
    state = state.with_player(idx, player)
    if find_winner([player]) is not None:
        logger.info("%s wins by Satori with %d points", player_id, player.score)
        return replace(state, status=GAME_END, winner=player_id)
    return state


def end_round(state: MatchState, rng: random.Random | None = None) -> MatchState:
    """
    Score the round, then either end the game or deal the next round: every
    card outside the Scorecards is reshuffled and dealt afresh, Higher Minds
    cleared, and the seat after the Zenji caller plays first.
    """
    if state.zenji_lock is None:
        raise NoZenjiCaller()
    caller_idx = state.player_index(state.zenji_lock)

    players = tuple(
        replace(p, has_called_zenji=False) for p in score_round(state.players, state.zenji_lock)
    )
    winner = find_winner(players)
    if winner is not None:
        logger.info("Game over after round %d: %s wins with %d", state.round_number, winner.id, winner.score)
        return replace(state, players=players, status=GAME_END, winner=winner.id)

    pool: list[Card] = list(state.future_pile) + list(state.past_pile)
    for p in players:
        pool.extend(p.monkey_mind)
        pool.extend(p.higher_mind)
    deal = deal_hands(len(players), cards=pool, rng=rng)

    next_players = tuple(
        replace(
            p,
            monkey_mind=hand,
            higher_mind=(),
            has_checked_cards=False,
            cards_visible=hidden_view(hand),
        )
        for p, hand in zip(players, deal.hands)
    )
    logger.info("Round %d over; scores %s", state.round_number, {p.id: p.score for p in players})
    return replace(
        state,
        players=next_players,
        future_pile=deal.future_pile,
        past_pile=(),
        status=ACTIVE,
        round_number=state.round_number + 1,
        zenji_lock=None,
        current_turn=next_player(caller_idx, len(players)),
    )
