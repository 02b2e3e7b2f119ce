"""
Score calculation: Monkey Mind totals (lower is better), round-end distribution
of EP cards from Higher Mind to Scorecard, Satori scoring, and the 15-point win.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Optional, Sequence

from .deck import Card, cards_value_total
from .state import Player

logger = logging.getLogger(__name__)

WINNING_SCORE = 15


def avatar_elements(player: Player) -> set[str]:
    return {c.element for c in player.higher_mind if c.is_avatar()}


def effective_value(player: Player, card: Card) -> int:
    """Face value, or 0 when an Avatar of the same element sits in the player's Higher Mind."""
    if card.element in avatar_elements(player):
        return 0
    return card.value


def monkey_mind_score(player: Player) -> int:
    """Sum of effective values over the Monkey Mind."""
    neutral = avatar_elements(player)
    return sum(0 if c.element in neutral else c.value for c in player.monkey_mind)


def one_per_value(cards: Iterable[Card]) -> list[Card]:
    """EP cards, keeping only the first card seen for each distinct value."""
    seen: set[int] = set()
    picked: list[Card] = []
    for c in cards:
        if c.is_ep() and c.value not in seen:
            seen.add(c.value)
            picked.append(c)
    return picked


def highest_ep_card(cards: Iterable[Card]) -> Optional[Card]:
    """Highest-value EP card; equal values go to the lowest numeric id."""
    eps = [c for c in cards if c.is_ep()]
    if not eps:
        return None
    return min(eps, key=lambda c: (-c.value, int(c.id)))


def bank_cards(player: Player, cards: Sequence[Card]) -> Player:
    """Move ``cards`` from Higher Mind to Scorecard and recompute ``score``."""
    banked = {c.id for c in cards}
    scorecard = player.scorecard + tuple(cards)
    return replace(
        player,
        higher_mind=tuple(c for c in player.higher_mind if c.id not in banked),
        scorecard=scorecard,
        score=cards_value_total(scorecard),
    )


def score_satori(player: Player) -> Player:
    """Empty Monkey Mind: bank one EP card per distinct value from the Higher Mind."""
    return bank_cards(player, one_per_value(player.higher_mind))


def score_round(players: Sequence[Player], caller_id: str) -> tuple[Player, ...]:
    """
    Round-end distribution after a Zenji call.

    - Caller holds the (joint) lowest Monkey Mind score: banks one EP per value.
    - Caller does not: failed Zenji, banks nothing.
    - Any other player at or below the caller's score, or at exactly 0,
      banks their single highest EP card.
    Every ``score`` is recomputed from the Scorecard.
    """
    scores = {p.id: monkey_mind_score(p) for p in players}
    if caller_id not in scores:
        raise ValueError(f"Zenji caller {caller_id} is not seated")
    min_score = min(scores.values())
    caller_score = scores[caller_id]
    logger.debug("Round scores %s (caller %s)", scores, caller_id)

    result: list[Player] = []
    for p in players:
        to_bank: list[Card] = []
        if p.id == caller_id:
            if caller_score == min_score:
                to_bank = one_per_value(p.higher_mind)
            else:
                logger.info("Failed Zenji by %s (%d > %d)", caller_id, caller_score, min_score)
        elif scores[p.id] <= caller_score or scores[p.id] == 0:
            best = highest_ep_card(p.higher_mind)
            if best is not None:
                to_bank = [best]
        result.append(bank_cards(p, to_bank))
    return tuple(result)


def find_winner(players: Sequence[Player]) -> Optional[Player]:
    """
    Player who reached WINNING_SCORE. If several did, the highest score wins;
    remaining ties go to the earliest seat.
    """
    best: Optional[Player] = None
    for p in players:
        if p.score >= WINNING_SCORE and (best is None or p.score > best.score):
            best = p
    return best
