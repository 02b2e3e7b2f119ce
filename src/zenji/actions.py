"""Action requests (one frozen dataclass per action) and their application."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import NamedTuple, Optional, Union

from .ai import take_ai_turn, worth_keeping
from .deck import Card
from .state import ROUND_END, MatchState
from .turn import (
    add_to_higher_mind,
    call_zenji,
    discard_to_past,
    draw_from_future,
    end_round,
    end_turn,
    exchange_monkey_mind_card,
    knock_out_card,
)
from .visibility import check_cards, update_card_visibility


# ---------------------------------------------------------------------------
# Action types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CheckCards:
    pass


@dataclass(frozen=True)
class HideCards:
    pass


@dataclass(frozen=True)
class Draw:
    pass


@dataclass(frozen=True)
class ExchangeFromFuture:
    replace_index: int


@dataclass(frozen=True)
class MoveToHigherMind:
    card: Card


@dataclass(frozen=True)
class Discard:
    card: Card


@dataclass(frozen=True)
class KnockOut:
    card_index: int


@dataclass(frozen=True)
class CallZenji:
    pass


@dataclass(frozen=True)
class EndTurn:
    pass


@dataclass(frozen=True)
class NextRound:
    pass


@dataclass(frozen=True)
class AITurn:
    pass


Action = Union[
    CheckCards,
    HideCards,
    Draw,
    ExchangeFromFuture,
    MoveToHigherMind,
    Discard,
    KnockOut,
    CallZenji,
    EndTurn,
    NextRound,
    AITurn,
]


class ActionResult(NamedTuple):
    """New state, plus the card left in transit by a bare Draw."""
    state: MatchState
    card: Optional[Card] = None


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

def exchange_from_future(
    state: MatchState,
    player_id: str,
    replace_index: int,
    rng: random.Random | None = None,
) -> MatchState:
    """Draw, swap into the Monkey Mind, and route the replaced card (EP/Avatar up, else discard)."""
    state, drawn = draw_from_future(state, player_id, rng=rng)
    state, replaced = exchange_monkey_mind_card(state, player_id, drawn, replace_index)
    if worth_keeping(replaced):
        return add_to_higher_mind(state, player_id, replaced)
    return discard_to_past(state, replaced)


def apply_action(
    state: MatchState,
    action: Action,
    player_id: str | None = None,
    rng: random.Random | None = None,
) -> ActionResult:
    """
    Apply ``action`` for ``player_id`` (the current player by default).
    Rule violations propagate as ZenjiError with ``state`` left untouched.
    """
    if player_id is None:
        player_id = state.current_player().id

    if isinstance(action, CheckCards):
        return ActionResult(check_cards(state, player_id))
    if isinstance(action, HideCards):
        return ActionResult(update_card_visibility(state, player_id))
    if isinstance(action, Draw):
        new_state, card = draw_from_future(state, player_id, rng=rng)
        return ActionResult(new_state, card)
    if isinstance(action, ExchangeFromFuture):
        return ActionResult(exchange_from_future(state, player_id, action.replace_index, rng=rng))
    if isinstance(action, MoveToHigherMind):
        return ActionResult(add_to_higher_mind(state, player_id, action.card))
    if isinstance(action, Discard):
        return ActionResult(discard_to_past(state, action.card))
    if isinstance(action, KnockOut):
        return ActionResult(knock_out_card(state, player_id, action.card_index, rng=rng))
    if isinstance(action, CallZenji):
        return ActionResult(call_zenji(state, player_id))
    if isinstance(action, EndTurn):
        return ActionResult(end_turn(state))
    if isinstance(action, NextRound):
        if state.status != ROUND_END:
            return ActionResult(state)
        return ActionResult(end_round(state, rng=rng))
    if isinstance(action, AITurn):
        return ActionResult(take_ai_turn(state, rng=rng))
    raise TypeError(f"Unknown action: {action!r}")
