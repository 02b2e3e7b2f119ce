"""
Zenji deck: 61 cards (4 elements × 13, 4 Avatars, 4 Kings, 4 Zero Minds, Zenji).
Lower Monkey Mind totals are better; EP cards (element 1..4) are the scoring currency.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, Optional

# Card kinds
ELEMENT = "element"
AVATAR = "avatar"
ZEN = "zen"
POWER = "power"
MAGIC = "magic"
CARD_KINDS = (ELEMENT, AVATAR, ZEN, POWER, MAGIC)

# Elements, in deck build order
EARTH = "earth"
FIRE = "fire"
WATER = "water"
AIR = "air"
NO_ELEMENT = "none"
ELEMENTS = (EARTH, FIRE, WATER, AIR)

EP_MIN = 1
EP_MAX = 4
AVATAR_VALUE = 5
NO_ZEN_KING_VALUE = 13
ZEN_KING_VALUE = -1
ZERO_MIND_VALUE = 0
ZENJI_VALUE = -2

ZERO_MIND_NAME = "Zero Mind"
DECK_SIZE = 61

# Power tag carried by the element cards valued 5..12
POWER_BY_VALUE = {
    5: "peek",
    6: "swap",
    7: "steal",
    8: "block",
    9: "view",
    10: "predict",
    11: "disrupt",
    12: "transmute",
}


@dataclass(frozen=True)
class Card:
    """
    A single Zenji card. Cards are never mutated; they move between the piles,
    the Monkey Minds, the Higher Minds and the Scorecards.
    """

    id: str
    name: str
    kind: str  # "element" | "avatar" | "zen" | "power" | "magic"
    element: str = NO_ELEMENT
    value: int = 0
    power: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind not in CARD_KINDS:
            raise ValueError(f"Unknown card kind: {self.kind}")
        if self.element not in ELEMENTS and self.element != NO_ELEMENT:
            raise ValueError(f"Unknown element: {self.element}")

    def is_ep(self) -> bool:
        """True for an Elemental Point card (element kind, value 1..4)."""
        return self.kind == ELEMENT and EP_MIN <= self.value <= EP_MAX

    def is_avatar(self) -> bool:
        return self.kind == AVATAR

    def is_zero_mind(self) -> bool:
        """Zero Mind cards cannot be knocked out."""
        return self.kind == ZEN and self.name == ZERO_MIND_NAME

    def can_enter_higher_mind(self) -> bool:
        """Only EP cards, Avatars and Magic cards may be placed in a Higher Mind."""
        return self.is_ep() or self.kind in (AVATAR, MAGIC)

    def __str__(self) -> str:
        return f"{self.name} [{self.value}]"


def _title(element: str) -> str:
    return element[:1].upper() + element[1:]


def create_deck() -> list[Card]:
    """Build the canonical 61-card deck, ids "1".."61" in build order."""
    deck: list[Card] = []

    def add(**fields) -> None:
        deck.append(Card(id=str(len(deck) + 1), **fields))

    for element in ELEMENTS:
        name = _title(element)
        for value in range(5, 13):
            add(
                name=f"{name} {value}",
                kind=ELEMENT,
                element=element,
                value=value,
                power=POWER_BY_VALUE[value],
                image_url=f"/images/cards/{element}-template.svg",
            )
        for value in range(EP_MIN, EP_MAX + 1):
            add(
                name=f"{name} EP {value}",
                kind=ELEMENT,
                element=element,
                value=value,
                description=f"Elemental Point card worth {value} points",
                image_url=f"/images/cards/{element}-template.svg",
            )
        add(
            name=f"{name} Avatar",
            kind=AVATAR,
            element=element,
            value=AVATAR_VALUE,
            power="avatar",
            description=(
                f"Avatar of {name}: all {element} cards in your Monkey Mind are "
                f"worth 0 points while this sits in your Higher Mind."
            ),
            image_url="/images/cards/avatar-template.svg",
        )

    for element in (FIRE, WATER):
        add(
            name=f"No-Zen King of {_title(element)}",
            kind=POWER,
            element=element,
            value=NO_ZEN_KING_VALUE,
            description="High value card that increases your Monkey Mind score",
            image_url="/images/cards/power-template.svg",
        )
    for element in (EARTH, AIR):
        add(
            name=f"Zen King of {_title(element)}",
            kind=ZEN,
            element=element,
            value=ZEN_KING_VALUE,
            description="Reduces your Monkey Mind score by 1",
            image_url="/images/cards/zen-template.svg",
        )
    for _ in range(4):
        add(
            name=ZERO_MIND_NAME,
            kind=ZEN,
            value=ZERO_MIND_VALUE,
            description="Worth 0 points in Monkey Mind. Cannot be Knocked Out.",
            image_url="/images/cards/zen-template.svg",
        )
    add(
        name="Zenji",
        kind=ZEN,
        value=ZENJI_VALUE,
        description="Reduces your Monkey Mind score by 2. This is the meditating monkey!",
        image_url="/images/cards/zen-template.svg",
    )
    assert len(deck) == DECK_SIZE
    return deck


def shuffle_cards(cards: Iterable[Card], rng: random.Random | None = None) -> list[Card]:
    """Return a uniformly shuffled copy of ``cards``; the input is left untouched."""
    if rng is None:
        rng = random.Random()
    shuffled = list(cards)
    rng.shuffle(shuffled)
    return shuffled


def cards_value_total(cards: Iterable[Card]) -> int:
    """Plain face-value total (used for Scorecards)."""
    return sum(c.value for c in cards)
