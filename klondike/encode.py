"""Snapshot encoding of a table position."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from .cards import Card
from .deck import DECK_SIZE
from .stacks import ALL_STACKS
from .table import Table


def snapshot_table(table: Table) -> Dict[str, Any]:
    """Return a JSON-ready description of every stack, bottom to top."""
    return {
        "stacks": {
            stack_id: [{"id": card.id, "face_up": card.face_up} for card in table.cards_in(stack_id)]
            for stack_id in ALL_STACKS
        }
    }


def restore_table(payload: Mapping[str, Any]) -> Table:
    """Rebuild a table from :func:`snapshot_table` output using fresh cards."""
    stacks = payload.get("stacks")
    if not isinstance(stacks, Mapping):
        raise ValueError("Snapshot must contain a 'stacks' mapping.")

    layout: Dict[str, List[Card]] = {}
    seen = set()
    for stack_id, entries in stacks.items():
        if stack_id not in ALL_STACKS:
            raise ValueError(f"Unknown stack in snapshot: {stack_id!r}")
        cards: List[Card] = []
        for entry in entries:
            card = Card.from_id(entry["id"])
            if card.id in seen:
                raise ValueError(f"Card {card.id} appears more than once in snapshot.")
            seen.add(card.id)
            card.face_up = bool(entry.get("face_up", False))
            cards.append(card)
        layout[stack_id] = cards

    if len(seen) != DECK_SIZE:
        raise ValueError(f"Snapshot must contain exactly {DECK_SIZE} cards, found {len(seen)}.")
    return Table(layout)
