"""Deck creation, shuffling and dealing for Klondike."""

from __future__ import annotations

from random import Random
from typing import Dict, List, Optional, Sequence, TypeVar

from .cards import Card, Rank, Suit
from .stacks import ALL_STACKS, STOCK, TABLEAU

DECK_SIZE = 52

T = TypeVar("T")


def build_deck() -> List[Card]:
    """Return the ordered 52-card deck, suit-major and rank ascending."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


def shuffle(cards: Sequence[T], *, rng: Optional[Random] = None) -> List[T]:
    """Return a Fisher-Yates permutation of ``cards``; the input is left untouched."""
    if rng is None:
        rng = Random()
    shuffled = list(cards)
    for m in range(len(shuffled) - 1, 0, -1):
        i = rng.randint(0, m)
        shuffled[m], shuffled[i] = shuffled[i], shuffled[m]
    return shuffled


def deal_layout(cards: Sequence[Card]) -> Dict[str, List[Card]]:
    """Deal the triangular tableau and put the rest on the stock.

    Tableau ``k`` receives ``k`` cards in deck order and only its last card
    is face up. The remaining cards go to the stock face down, keeping their
    order so that draws follow the shuffle.
    """
    if len(cards) != DECK_SIZE:
        raise ValueError(f"Deck must contain exactly {DECK_SIZE} cards.")

    layout: Dict[str, List[Card]] = {stack_id: [] for stack_id in ALL_STACKS}
    position = 0
    for count, stack_id in enumerate(TABLEAU, start=1):
        dealt = list(cards[position : position + count])
        position += count
        for card in dealt:
            card.stack = stack_id
            card.face_up = False
        dealt[-1].face_up = True
        layout[stack_id] = dealt

    for card in cards[position:]:
        card.stack = STOCK
        card.face_up = False
        layout[STOCK].append(card)
    return layout
