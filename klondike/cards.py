"""Card-related data structures and helpers for Klondike."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple

from .stacks import STOCK


class Suit(Enum):
    CLUBS = "clubs"
    DIAMONDS = "diamonds"
    SPADES = "spades"
    HEARTS = "hearts"

    def __str__(self) -> str:
        return self.value


class Color(Enum):
    RED = "red"
    BLACK = "black"

    def __str__(self) -> str:
        return self.value


class Rank(Enum):
    ACE = 0
    TWO = 1
    THREE = 2
    FOUR = 3
    FIVE = 4
    SIX = 5
    SEVEN = 6
    EIGHT = 7
    NINE = 8
    TEN = 9
    JACK = 10
    QUEEN = 11
    KING = 12

    def __str__(self) -> str:
        return RANK_LABELS[self]


# Labels used in card ids and asset file names.
RANK_LABELS: Dict[Rank, str] = {
    Rank.ACE: "ace",
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "10",
    Rank.JACK: "jack",
    Rank.QUEEN: "queen",
    Rank.KING: "king",
}

RANK_BY_LABEL: Dict[str, Rank] = {label: rank for rank, label in RANK_LABELS.items()}

RED_SUITS = frozenset({Suit.DIAMONDS, Suit.HEARTS})

_IDENTITY_FIELDS = frozenset({"rank", "suit", "id", "color"})


def suit_color(suit: Suit) -> Color:
    return Color.RED if suit in RED_SUITS else Color.BLACK


def card_id(rank: Rank, suit: Suit) -> str:
    return f"{RANK_LABELS[rank]}_of_{suit.value}"


def parse_card_id(value: str) -> Tuple[Rank, Suit]:
    """Split a card id such as ``queen_of_hearts`` into its rank and suit."""
    label, sep, suit_name = value.partition("_of_")
    if not sep or label not in RANK_BY_LABEL:
        raise ValueError(f"Unknown card id: {value!r}")
    try:
        suit = Suit(suit_name)
    except ValueError as exc:
        raise ValueError(f"Unknown card id: {value!r}") from exc
    return RANK_BY_LABEL[label], suit


@dataclass(eq=False)
class Card:
    """A playing card with a fixed identity and a mutable place on the table.

    ``rank``, ``suit`` and the derived ``id`` and ``color`` cannot be
    reassigned once the card exists. ``stack`` and ``face_up`` track where
    the card currently lies and are updated by the table.
    """

    rank: Rank
    suit: Suit
    stack: str = STOCK
    face_up: bool = False
    id: str = field(init=False)
    color: Color = field(init=False)

    def __post_init__(self) -> None:
        self.id = card_id(self.rank, self.suit)
        self.color = suit_color(self.suit)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _IDENTITY_FIELDS and name in self.__dict__:
            raise AttributeError(f"Card {name} is fixed at creation.")
        super().__setattr__(name, value)

    @classmethod
    def from_id(cls, value: str) -> "Card":
        rank, suit = parse_card_id(value)
        return cls(rank, suit)


def card_label(card: Card) -> str:
    return f"{card.rank.name.title()} of {card.suit.name.title()}"


def serialize_card(card: Card) -> dict[str, Any]:
    return {
        "id": card.id,
        "rank": RANK_LABELS[card.rank],
        "suit": card.suit.value,
        "color": card.color.value,
        "stack": card.stack,
        "face_up": card.face_up,
    }
