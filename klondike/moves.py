"""Validated relocation of cards between stacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .rules import MoveCheck, MoveError, is_legal, is_victory, rejected
from .stacks import STOCK, WASTE, is_known_stack
from .table import Table


@dataclass(frozen=True)
class MoveRecord:
    card_ids: Tuple[str, ...]
    source: str
    destination: str
    revealed: Optional[str] = None
    finished: bool = False


def validate_move(table: Table, card_ids: Sequence[str], destination: str) -> MoveCheck:
    """Check a requested move of ``card_ids`` onto ``destination`` against ``table``."""
    if not is_known_stack(destination):
        return rejected(MoveError.INVALID_DESTINATION)
    if not table.is_top_segment(card_ids):
        return rejected(MoveError.RUN_NOT_MOVABLE)
    run = [table.card(card_id) for card_id in card_ids]
    if run[0].stack == destination:
        return rejected(MoveError.INVALID_DESTINATION)
    # Only the top card ever leaves the waste.
    if run[0].stack == WASTE and len(run) > 1:
        return rejected(MoveError.RUN_NOT_MOVABLE)
    return is_legal(run[0], run, destination, table.top(destination))


def apply_move(table: Table, card_ids: Sequence[str], destination: str) -> MoveRecord:
    """Relocate an already validated run and reveal the card it uncovers."""
    source = table.relocate(card_ids, destination)
    revealed = table.reveal_top(source)
    return MoveRecord(
        card_ids=tuple(card_ids),
        source=source,
        destination=destination,
        revealed=revealed.id if revealed else None,
        finished=is_victory(table.all_cards()),
    )


def draw_from_stock(table: Table, *, recycle: bool = True) -> Optional[MoveRecord]:
    """Turn the stock top onto the waste, or turn the waste over once the stock is empty."""
    top = table.top(STOCK)
    if top is not None:
        table.relocate([top.id], WASTE)
        table.set_face_up(top, True)
        return MoveRecord(card_ids=(top.id,), source=STOCK, destination=WASTE)

    waste = list(table.stacks[WASTE])
    if not waste or not recycle:
        return None
    table.relocate(waste, STOCK, reverse=True)
    for card in table.cards_in(STOCK):
        table.set_face_up(card, False)
    return MoveRecord(card_ids=tuple(reversed(waste)), source=WASTE, destination=STOCK)
