"""
Scripted AI opponent: a single-pass greedy heuristic.

Draw; keep an EP card or Avatar by swapping out the worst (highest effective
value) Monkey Mind card; otherwise discard what was drawn; end the turn.
No look-ahead, no knock-outs, no Zenji calls.
"""
from __future__ import annotations

import logging
import random
from typing import Optional

from .deck import Card
from .errors import NotAIPlayer, ZenjiError
from .scoring import effective_value, monkey_mind_score
from .state import ACTIVE, GAME_END, ROUND_END, MatchState, Player
from .turn import (
    add_to_higher_mind,
    call_zenji,
    discard_to_past,
    draw_from_future,
    end_round,
    end_turn,
    exchange_monkey_mind_card,
)

logger = logging.getLogger(__name__)

# Monkey Mind total at or below which run_ai_match has a seat call Zenji
DEFAULT_ZENJI_THRESHOLD = 5


def worth_keeping(card: Card) -> bool:
    """EP cards and Avatars are the cards the AI tries to collect."""
    return card.is_ep() or card.is_avatar()


def worst_card_index(player: Player) -> int:
    """Index of the highest effective-value Monkey Mind card (first one on ties)."""
    best_index = 0
    best_value: Optional[int] = None
    for i, card in enumerate(player.monkey_mind):
        value = effective_value(player, card)
        if best_value is None or value > best_value:
            best_index, best_value = i, value
    return best_index


def make_ai_move(state: MatchState, rng: random.Random | None = None) -> MatchState:
    """Play one full turn for the AI seat at ``current_turn``."""
    player = state.current_player()
    if not player.is_ai:
        raise NotAIPlayer(player.id)

    state, card = draw_from_future(state, player.id, rng=rng)
    if worth_keeping(card) and player.monkey_mind:
        index = worst_card_index(player)
        state, replaced = exchange_monkey_mind_card(state, player.id, card, index)
        if worth_keeping(replaced):
            state = add_to_higher_mind(state, player.id, replaced)
        else:
            state = discard_to_past(state, replaced)
        logger.debug("%s kept %s over %s", player.id, card, replaced)
    else:
        state = discard_to_past(state, card)
        logger.debug("%s discarded %s", player.id, card)
    return end_turn(state)


def take_ai_turn(state: MatchState, rng: random.Random | None = None) -> MatchState:
    """make_ai_move, falling back to a bare end_turn when the move is rejected."""
    try:
        return make_ai_move(state, rng=rng)
    except ZenjiError as exc:
        logger.warning("AI move aborted for %s: %s", state.current_player().id, exc)
        return end_turn(state)


def run_ai_match(
    state: MatchState,
    zenji_threshold: int = DEFAULT_ZENJI_THRESHOLD,
    max_turns: int = 10_000,
    rng: random.Random | None = None,
) -> MatchState:
    """
    Drive a match where every seat is AI-controlled until ``game_end`` (or
    ``max_turns``). A seat calls Zenji at the start of its turn when its
    Monkey Mind total is at or below ``zenji_threshold``.
    """
    turns = 0
    while state.status != GAME_END and turns < max_turns:
        if state.status == ROUND_END:
            state = end_round(state, rng=rng)
            continue
        if state.status != ACTIVE:
            raise ValueError(f"Cannot run a match in status {state.status}")
        if not state.current_player().is_ai:
            raise NotAIPlayer(state.current_player().id)
        state = ai_step(state, zenji_threshold=zenji_threshold, rng=rng)
        turns += 1
    return state


def ai_step(
    state: MatchState,
    zenji_threshold: int = DEFAULT_ZENJI_THRESHOLD,
    rng: random.Random | None = None,
) -> MatchState:
    """One AI decision: call Zenji on a low enough Monkey Mind, else take the greedy turn."""
    player = state.current_player()
    if monkey_mind_score(player) <= zenji_threshold:
        return call_zenji(state, player.id)
    return take_ai_turn(state, rng=rng)
