"""
Match state: players, piles, turn pointer and round status.

States are frozen values. Every engine call builds a new MatchState with
``dataclasses.replace`` so a caller may keep (or drop) the previous one.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Sequence

from .deal import MAX_PLAYERS, deal_hands
from .deck import Card
from .errors import PlayerNotFound

WAITING = "waiting"
ACTIVE = "active"
ROUND_END = "round_end"
GAME_END = "game_end"
STATUSES = (WAITING, ACTIVE, ROUND_END, GAME_END)

HIGHER_MIND_CAPACITY = 4
MAX_AI_PLAYERS = 2


@dataclass(frozen=True)
class Player:
    """One seat at the table. ``cards_visible`` is the owner's own view of their Monkey Mind."""

    id: str
    name: str
    is_ai: bool = False
    monkey_mind: tuple[Card, ...] = ()
    higher_mind: tuple[Card, ...] = ()
    scorecard: tuple[Card, ...] = ()
    score: int = 0
    has_called_zenji: bool = False
    has_checked_cards: bool = False
    # Read-only; left out of the hash, still compared
    cards_visible: Mapping[str, bool] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "cards_visible", MappingProxyType(dict(self.cards_visible)))

    def card_locations(self) -> Iterator[Card]:
        yield from self.monkey_mind
        yield from self.higher_mind
        yield from self.scorecard


@dataclass(frozen=True)
class MatchState:
    players: tuple[Player, ...]
    current_turn: int = 0
    future_pile: tuple[Card, ...] = ()  # top = index 0
    past_pile: tuple[Card, ...] = ()  # top = index 0, most recent discard first
    status: str = WAITING
    round_number: int = 1
    zenji_lock: Optional[str] = None
    winner: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.players:
            raise ValueError("A match needs at least one player")
        if not 0 <= self.current_turn < len(self.players):
            raise ValueError(f"current_turn {self.current_turn} out of range")
        if self.status not in STATUSES:
            raise ValueError(f"Unknown status: {self.status}")

    def current_player(self) -> Player:
        return self.players[self.current_turn]

    def player_index(self, player_id: str) -> int:
        """Seat index of ``player_id``; raises PlayerNotFound."""
        for i, p in enumerate(self.players):
            if p.id == player_id:
                return i
        raise PlayerNotFound(player_id)

    def get_player(self, player_id: str) -> Player:
        return self.players[self.player_index(player_id)]

    def with_player(self, index: int, player: Player) -> "MatchState":
        """Copy of this state with the player at ``index`` swapped for ``player``."""
        players = list(self.players)
        players[index] = player
        return replace(self, players=tuple(players))

    def all_cards(self) -> list[Card]:
        """Every card held anywhere in the match (in-transit cards excluded)."""
        cards: list[Card] = []
        for p in self.players:
            cards.extend(p.card_locations())
        cards.extend(self.future_pile)
        cards.extend(self.past_pile)
        return cards


def hidden_view(cards: Sequence[Card]) -> dict[str, bool]:
    """Owner visibility map with every card face-down."""
    return {c.id: False for c in cards}


def initialize_match(
    player_names: Sequence[str],
    include_ai: bool = False,
    rng: random.Random | None = None,
) -> MatchState:
    """
    Create a match in ``waiting`` status: one human per name, then up to two
    AI players when ``include_ai`` (never more than four seats in total).
    """
    if not player_names:
        raise ValueError("At least one player name is required")
    if len(player_names) > MAX_PLAYERS:
        raise ValueError(f"At most {MAX_PLAYERS} players can join a match")

    seats: list[tuple[str, str, bool]] = [
        (f"player_{i + 1}", name, False) for i, name in enumerate(player_names)
    ]
    if include_ai and len(seats) < MAX_PLAYERS:
        ai_count = min(MAX_PLAYERS - len(seats), MAX_AI_PLAYERS)
        for i in range(ai_count):
            seats.append((f"ai_{i + 1}", f"AI Player {i + 1}", True))

    deal = deal_hands(len(seats), rng=rng)
    players = tuple(
        Player(
            id=pid,
            name=name,
            is_ai=is_ai,
            monkey_mind=hand,
            cards_visible=hidden_view(hand),
        )
        for (pid, name, is_ai), hand in zip(seats, deal.hands)
    )
    return MatchState(players=players, future_pile=deal.future_pile)


def start_match(state: MatchState) -> MatchState:
    """Flip a waiting match to active. Nothing else changes."""
    return replace(state, status=ACTIVE)
