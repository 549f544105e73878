"""Greedy promotion of playable cards to the foundations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Set

from .cards import Card
from .deck import DECK_SIZE
from .moves import apply_move
from .rules import is_legal
from .stacks import FOUNDATIONS, TABLEAU, WASTE
from .table import Table

SOURCE_STACKS = (WASTE,) + TABLEAU


@dataclass(frozen=True)
class AutoMove:
    card_id: str
    source: str
    destination: str


def candidate_foundation(table: Table, card: Card) -> Optional[str]:
    """The foundation already holding ``card``'s suit, else the lowest empty one."""
    for stack_id in FOUNDATIONS:
        top = table.top(stack_id)
        if top is not None and top.suit is card.suit:
            return stack_id
    for stack_id in FOUNDATIONS:
        if table.size(stack_id) == 0:
            return stack_id
    return None


def eligible_cards(table: Table, excluded: Iterable[str] = ()) -> List[Card]:
    """Face-up stack tops outside ``excluded``, least recently exposed first."""
    skip = set(excluded)
    tops = [table.top(stack_id) for stack_id in SOURCE_STACKS if stack_id not in skip]
    shown = [card for card in tops if card is not None and card.face_up]
    return sorted(shown, key=lambda card: table.exposure(card.id))


def next_auto_move(table: Table, excluded: Iterable[str] = ()) -> Optional[AutoMove]:
    """Return the next promotion, trying the most recently exposed card first."""
    skip: Set[str] = set(excluded)
    while True:
        candidates = eligible_cards(table, skip)
        if not candidates:
            return None
        card = candidates[-1]
        destination = candidate_foundation(table, card)
        if destination is not None and is_legal(card, [card], destination, table.top(destination)):
            return AutoMove(card_id=card.id, source=card.stack, destination=destination)
        skip.add(card.stack)


def plan_auto_finish(table: Table) -> List[AutoMove]:
    """Return every promotion auto-finish would make, without touching ``table``."""
    scratch = table.copy()
    plan: List[AutoMove] = []
    for _ in range(DECK_SIZE):
        move = next_auto_move(scratch)
        if move is None:
            break
        apply_move(scratch, [move.card_id], move.destination)
        plan.append(move)
    return plan
