"""
Distribution (deal): 4 cards to each Monkey Mind in player order, the rest to
the Future Pile. Used at match start and again at the start of every round.
"""
from __future__ import annotations

import random
from typing import NamedTuple, Sequence

from .deck import Card, create_deck, shuffle_cards

MONKEY_MIND_SIZE = 4
MAX_PLAYERS = 4


class Deal(NamedTuple):
    """Result of a deal. hands[i] belongs to the i-th player in turn order."""
    hands: tuple[tuple[Card, ...], ...]
    future_pile: tuple[Card, ...]


def deal_hands(
    num_players: int,
    cards: Sequence[Card] | None = None,
    rng: random.Random | None = None,
) -> Deal:
    """
    Shuffle ``cards`` (a fresh 61-card deck by default) and deal
    MONKEY_MIND_SIZE cards to each player, draining the pack from the top.
    """
    if not 1 <= num_players <= MAX_PLAYERS:
        raise ValueError(f"Unsupported player count {num_players}; expected 1..{MAX_PLAYERS}.")
    if cards is None:
        cards = create_deck()
    pack = shuffle_cards(cards, rng)
    needed = num_players * MONKEY_MIND_SIZE
    if len(pack) < needed:
        raise ValueError(f"Not enough cards to deal: {len(pack)} < {needed}")

    hands = tuple(
        tuple(pack[i * MONKEY_MIND_SIZE:(i + 1) * MONKEY_MIND_SIZE])
        for i in range(num_players)
    )
    return Deal(hands=hands, future_pile=tuple(pack[needed:]))


def next_player(index: int, num_players: int) -> int:
    """Play passes to the next seat in list order (0 -> 1 -> ... -> 0)."""
    return (index + 1) % num_players
