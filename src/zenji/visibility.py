"""
Per-card, per-player knowledge: which Monkey Mind cards a player can see.

The owner's view is stored on the Player (``cards_visible``). Opponents always
see only the two edge cards of a Monkey Mind, and never a Higher Mind.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, List, Mapping, Optional

from .deck import Card
from .errors import AlreadyChecked
from .state import MatchState, Player

# Cards of this value stay face-up for their owner once the peek window closes
STAYS_VISIBLE_VALUE = 5


def with_visibility(
    cards_visible: Mapping[str, bool],
    cards: Iterable[Card],
    visible: bool,
) -> dict[str, bool]:
    updated = dict(cards_visible)
    for c in cards:
        updated[c.id] = visible
    return updated


def without_card(cards_visible: Mapping[str, bool], card: Card) -> dict[str, bool]:
    return {cid: v for cid, v in cards_visible.items() if cid != card.id}


def check_cards(state: MatchState, player_id: str) -> MatchState:
    """One-time reveal of a player's own Monkey Mind (once per round)."""
    idx = state.player_index(player_id)
    player = state.players[idx]
    if player.has_checked_cards:
        raise AlreadyChecked(player_id)
    return state.with_player(
        idx,
        replace(
            player,
            has_checked_cards=True,
            cards_visible=with_visibility(player.cards_visible, player.monkey_mind, True),
        ),
    )


def update_card_visibility(state: MatchState, player_id: str) -> MatchState:
    """Close the peek window: hide every Monkey Mind card except the 5s."""
    idx = state.player_index(player_id)
    player = state.players[idx]
    cards_visible = dict(player.cards_visible)
    for c in player.monkey_mind:
        cards_visible[c.id] = c.value == STAYS_VISIBLE_VALUE
    return state.with_player(idx, replace(player, cards_visible=cards_visible))


def visible_to_owner(player: Player, card: Card) -> bool:
    return bool(player.cards_visible.get(card.id, False))


def visible_to_opponent(player: Player, index: int) -> bool:
    """Opponents see the first and last Monkey Mind cards only."""
    return index == 0 or index == len(player.monkey_mind) - 1


@dataclass
class CardView:
    """How a single card appears to the viewing player. ``card`` is None when face-down."""
    position: int
    card: Optional[Card]

    @property
    def face_up(self) -> bool:
        return self.card is not None


@dataclass
class PlayerView:
    """How one seat appears to the viewing player."""
    id: str
    name: str
    is_viewer: bool
    is_current_turn: bool
    monkey_mind: List[CardView] = field(default_factory=list)
    higher_mind: List[CardView] = field(default_factory=list)
    score: int = 0
    has_called_zenji: bool = False


def player_view(state: MatchState, viewer_id: str) -> List[PlayerView]:
    """Render the table from ``viewer_id``'s seat. Raises PlayerNotFound."""
    state.player_index(viewer_id)
    views: List[PlayerView] = []
    for i, p in enumerate(state.players):
        own = p.id == viewer_id
        mm = [
            CardView(
                position=j,
                card=c if (visible_to_owner(p, c) if own else visible_to_opponent(p, j)) else None,
            )
            for j, c in enumerate(p.monkey_mind)
        ]
        hm = [CardView(position=j, card=c if own else None) for j, c in enumerate(p.higher_mind)]
        views.append(
            PlayerView(
                id=p.id,
                name=p.name,
                is_viewer=own,
                is_current_turn=i == state.current_turn,
                monkey_mind=mm,
                higher_mind=hm,
                score=p.score,
                has_called_zenji=p.has_called_zenji,
            )
        )
    return views
