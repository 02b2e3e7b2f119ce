"""
Match state serialization for session storage.

Exports and imports MatchState to/from JSON-compatible dicts. Every field of
the state round-trips; cards are stored whole so a snapshot is self-contained.
"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict

from .deck import Card
from .state import MatchState, Player

SCHEMA_VERSION = 1


def _card_to_dict(card: Card) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": card.id,
        "name": card.name,
        "kind": card.kind,
        "element": card.element,
        "value": card.value,
    }
    for key in ("power", "description", "image_url"):
        val = getattr(card, key)
        if val is not None:
            d[key] = val
    return d


def _card_from_dict(d: Dict[str, Any]) -> Card:
    return Card(
        id=str(d["id"]),
        name=d["name"],
        kind=d["kind"],
        element=d.get("element", "none"),
        value=int(d["value"]),
        power=d.get("power"),
        description=d.get("description"),
        image_url=d.get("image_url"),
    )


def _player_to_dict(player: Player) -> Dict[str, Any]:
    return {
        "id": player.id,
        "name": player.name,
        "is_ai": player.is_ai,
        "monkey_mind": [_card_to_dict(c) for c in player.monkey_mind],
        "higher_mind": [_card_to_dict(c) for c in player.higher_mind],
        "scorecard": [_card_to_dict(c) for c in player.scorecard],
        "score": player.score,
        "has_called_zenji": player.has_called_zenji,
        "has_checked_cards": player.has_checked_cards,
        "cards_visible": dict(player.cards_visible),
    }


def _player_from_dict(d: Dict[str, Any]) -> Player:
    return Player(
        id=d["id"],
        name=d["name"],
        is_ai=bool(d.get("is_ai", False)),
        monkey_mind=tuple(_card_from_dict(c) for c in d.get("monkey_mind", [])),
        higher_mind=tuple(_card_from_dict(c) for c in d.get("higher_mind", [])),
        scorecard=tuple(_card_from_dict(c) for c in d.get("scorecard", [])),
        score=int(d.get("score", 0)),
        has_called_zenji=bool(d.get("has_called_zenji", False)),
        has_checked_cards=bool(d.get("has_checked_cards", False)),
        cards_visible={str(k): bool(v) for k, v in d.get("cards_visible", {}).items()},
    )


def match_to_dict(state: MatchState) -> Dict[str, Any]:
    """
    Serialize a MatchState to a JSON-compatible dict.

    Returns:
        Dict with schema_version, exported_at and every MatchState field.
    """
    return {
        "schema_version": SCHEMA_VERSION,
        "exported_at": datetime.now(timezone.utc).isoformat(),
        "players": [_player_to_dict(p) for p in state.players],
        "current_turn": state.current_turn,
        "future_pile": [_card_to_dict(c) for c in state.future_pile],
        "past_pile": [_card_to_dict(c) for c in state.past_pile],
        "status": state.status,
        "round_number": state.round_number,
        "zenji_lock": state.zenji_lock,
        "winner": state.winner,
    }


def match_from_dict(d: Dict[str, Any]) -> MatchState:
    """
    Deserialize a MatchState from a dict produced by match_to_dict.

    Raises:
        ValueError: unknown schema version or malformed state.
    """
    version = d.get("schema_version")
    if version != SCHEMA_VERSION:
        raise ValueError(f"Unsupported match schema version: {version!r}")
    return MatchState(
        players=tuple(_player_from_dict(p) for p in d["players"]),
        current_turn=int(d.get("current_turn", 0)),
        future_pile=tuple(_card_from_dict(c) for c in d.get("future_pile", [])),
        past_pile=tuple(_card_from_dict(c) for c in d.get("past_pile", [])),
        status=d.get("status", "waiting"),
        round_number=int(d.get("round_number", 1)),
        zenji_lock=d.get("zenji_lock"),
        winner=d.get("winner"),
    )


def match_to_json(state: MatchState) -> str:
    """Serialize a MatchState to a JSON string."""
    return json.dumps(match_to_dict(state), indent=2)


def match_from_json(s: str) -> MatchState:
    """Deserialize a MatchState from a JSON string."""
    return match_from_dict(json.loads(s))


__all__ = [
    "match_to_dict",
    "match_from_dict",
    "match_to_json",
    "match_from_json",
    "SCHEMA_VERSION",
]
