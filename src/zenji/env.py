"""
Observation / action encoding for one seat of a Zenji match.

Observations only use what the seat may see (see ``zenji.visibility``):
- own Monkey Mind slots: face-up flag and effective value when face-up,
- own Higher Mind as a 61-dim card set,
- top of the Past Pile as a 61-dim one-hot,
- per opponent: Monkey Mind size, the two edge cards, Higher Mind size, score,
- own score, round number and Future Pile size.

Actions are a fixed space of NUM_ACTIONS indices; ``legal_action_mask`` marks
which of them the engine would accept right now.
"""
from __future__ import annotations

from typing import Iterable, Optional

import numpy as np

from .deal import MAX_PLAYERS, MONKEY_MIND_SIZE
from .deck import DECK_SIZE, NO_ZEN_KING_VALUE, Card
from .scoring import WINNING_SCORE, effective_value
from .state import ACTIVE, HIGHER_MIND_CAPACITY, MatchState, Player
from .visibility import visible_to_opponent, visible_to_owner

NUM_CARDS: int = DECK_SIZE

# Action layout
ACTION_DRAW_DISCARD: int = 0
ACTION_EXCHANGE_BASE: int = 1  # 1..4: draw and exchange with Monkey Mind slot 0..3
ACTION_KNOCK_OUT_BASE: int = ACTION_EXCHANGE_BASE + MONKEY_MIND_SIZE  # 5..8: knock out slot 0..3
ACTION_CALL_ZENJI: int = ACTION_KNOCK_OUT_BASE + MONKEY_MIND_SIZE  # 9
NUM_ACTIONS: int = ACTION_CALL_ZENJI + 1

_OWN_SLOT_FEATURES: int = 2
_OPPONENT_FEATURES: int = 7  # mm size, 2 × (face-up, value), hm size, score
OBS_SIZE: int = (
    MONKEY_MIND_SIZE * _OWN_SLOT_FEATURES
    + NUM_CARDS  # own Higher Mind
    + NUM_CARDS  # Past Pile top
    + (MAX_PLAYERS - 1) * _OPPONENT_FEATURES
    + 3  # own score, round number, Future Pile size
)

_VALUE_SCALE = float(NO_ZEN_KING_VALUE)
# Round feature is round_number / ROUND_SCALE; also ZenjiEnv's default round cap
ROUND_SCALE: int = 20


def card_index(card: Card) -> int:
    """Stable index 0..60 matching create_deck() order (ids "1".."61")."""
    return int(card.id) - 1


def encode_card_set(cards: Iterable[Card]) -> np.ndarray:
    """Binary 61-dim vector: 1 where the card is present."""
    vec = np.zeros(NUM_CARDS, dtype=np.float32)
    for c in cards:
        vec[card_index(c)] = 1.0
    return vec


def _encode_opponent(player: Player) -> list[float]:
    feats = [len(player.monkey_mind) / MONKEY_MIND_SIZE]
    size = len(player.monkey_mind)
    for pos in (0, size - 1):
        if size and visible_to_opponent(player, pos):
            feats.extend([1.0, player.monkey_mind[pos].value / _VALUE_SCALE])
        else:
            feats.extend([0.0, 0.0])
    feats.append(len(player.higher_mind) / HIGHER_MIND_CAPACITY)
    feats.append(player.score / WINNING_SCORE)
    return feats


def encode_observation(state: MatchState, player_index: int) -> np.ndarray:
    """Flat float32 observation of ``state`` from seat ``player_index``."""
    me = state.players[player_index]

    own = np.zeros(MONKEY_MIND_SIZE * _OWN_SLOT_FEATURES, dtype=np.float32)
    for i, card in enumerate(me.monkey_mind[:MONKEY_MIND_SIZE]):
        if visible_to_owner(me, card):
            own[2 * i] = 1.0
            own[2 * i + 1] = effective_value(me, card) / _VALUE_SCALE

    past_top = encode_card_set(state.past_pile[:1])

    opponents: list[float] = []
    n = len(state.players)
    for offset in range(1, MAX_PLAYERS):
        if offset < n:
            opponents.extend(_encode_opponent(state.players[(player_index + offset) % n]))
        else:
            opponents.extend([0.0] * _OPPONENT_FEATURES)

    tail = [
        me.score / WINNING_SCORE,
        state.round_number / ROUND_SCALE,
        len(state.future_pile) / NUM_CARDS,
    ]
    return np.concatenate(
        [
            own,
            encode_card_set(me.higher_mind),
            past_top,
            np.asarray(opponents, dtype=np.float32),
            np.asarray(tail, dtype=np.float32),
        ]
    )


def legal_action_mask(
    state: MatchState,
    player_index: int,
    allow_knock_out: bool = True,
) -> np.ndarray:
    """Boolean mask over NUM_ACTIONS; all False when it is not this seat's turn."""
    mask = np.zeros(NUM_ACTIONS, dtype=bool)
    if state.status != ACTIVE or state.current_turn != player_index:
        return mask
    me = state.players[player_index]
    can_draw = bool(state.future_pile or state.past_pile)

    mask[ACTION_DRAW_DISCARD] = can_draw
    hm_full = len(me.higher_mind) >= HIGHER_MIND_CAPACITY
    for i, card in enumerate(me.monkey_mind[:MONKEY_MIND_SIZE]):
        # A replaced EP/Avatar is routed up to the Higher Mind, which must have room
        routed_up = card.is_ep() or card.is_avatar()
        mask[ACTION_EXCHANGE_BASE + i] = can_draw and not (routed_up and hm_full)
        if allow_knock_out and state.past_pile and not card.is_zero_mind():
            mask[ACTION_KNOCK_OUT_BASE + i] = True
    mask[ACTION_CALL_ZENJI] = True
    return mask


def describe_action(action: int) -> str:
    if action == ACTION_DRAW_DISCARD:
        return "draw-discard"
    if ACTION_EXCHANGE_BASE <= action < ACTION_KNOCK_OUT_BASE:
        return f"exchange-{action - ACTION_EXCHANGE_BASE}"
    if ACTION_KNOCK_OUT_BASE <= action < ACTION_CALL_ZENJI:
        return f"knock-out-{action - ACTION_KNOCK_OUT_BASE}"
    if action == ACTION_CALL_ZENJI:
        return "call-zenji"
    raise ValueError(f"Invalid action {action}")


def decode_slot(action: int) -> Optional[int]:
    """Monkey Mind slot targeted by an exchange / knock-out action, else None."""
    if ACTION_EXCHANGE_BASE <= action < ACTION_KNOCK_OUT_BASE:
        return action - ACTION_EXCHANGE_BASE
    if ACTION_KNOCK_OUT_BASE <= action < ACTION_CALL_ZENJI:
        return action - ACTION_KNOCK_OUT_BASE
    return None
