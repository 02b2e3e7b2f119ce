"""
Rule violations raised by the engine.

Every error is a precondition failure on an otherwise well-formed call: the
engine raises before building a new state, so the caller's state stays valid.
"""
from __future__ import annotations


class ZenjiError(ValueError):
    """Base class for all rejected game actions."""


class PlayerNotFound(ZenjiError):
    def __init__(self, player_id: str) -> None:
        super().__init__(f"Player not found: {player_id}")
        self.player_id = player_id


class NotYourTurn(ZenjiError):
    def __init__(self, player_id: str) -> None:
        super().__init__(f"Not your turn: {player_id}")
        self.player_id = player_id


class InvalidCardIndex(ZenjiError):
    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"Invalid card index {index} (Monkey Mind holds {size} cards)")
        self.index = index
        self.size = size


class IneligibleCard(ZenjiError):
    def __init__(self, card_name: str) -> None:
        super().__init__(f"{card_name} cannot be placed in the Higher Mind")
        self.card_name = card_name


class HigherMindFull(ZenjiError):
    def __init__(self, player_id: str) -> None:
        super().__init__(f"Higher Mind is full for {player_id}")
        self.player_id = player_id


class AlreadyChecked(ZenjiError):
    def __init__(self, player_id: str) -> None:
        super().__init__(f"{player_id} has already checked their cards this round")
        self.player_id = player_id


class EmptyPastPile(ZenjiError):
    def __init__(self) -> None:
        super().__init__("No cards in the Past Pile to match")


class EmptyFuturePile(ZenjiError):
    def __init__(self) -> None:
        super().__init__("Future and Past Piles are both empty")


class CardProtected(ZenjiError):
    def __init__(self, card_name: str) -> None:
        super().__init__(f"{card_name} cannot be knocked out")
        self.card_name = card_name


class NoZenjiCaller(ZenjiError):
    def __init__(self) -> None:
        super().__init__("No player has called Zenji")


class NotAIPlayer(ZenjiError):
    def __init__(self, player_id: str) -> None:
        super().__init__(f"Current player is not AI-controlled: {player_id}")
        self.player_id = player_id


__all__ = [
    "ZenjiError",
    "PlayerNotFound",
    "NotYourTurn",
    "InvalidCardIndex",
    "IneligibleCard",
    "HigherMindFull",
    "AlreadyChecked",
    "EmptyPastPile",
    "EmptyFuturePile",
    "CardProtected",
    "NoZenjiCaller",
    "NotAIPlayer",
]
