"""Stack identifiers shared by every part of the engine."""

from __future__ import annotations

from typing import Tuple

STOCK = "stock"
WASTE = "waste"

TABLEAU_COUNT = 7
FOUNDATION_COUNT = 4

FOUNDATION_MARKER = "foundation"
TABLEAU_MARKER = "tableau"

TABLEAU: Tuple[str, ...] = tuple(f"{TABLEAU_MARKER}-{index}" for index in range(1, TABLEAU_COUNT + 1))
FOUNDATIONS: Tuple[str, ...] = tuple(f"{FOUNDATION_MARKER}-{index}" for index in range(1, FOUNDATION_COUNT + 1))

# Order matters: it is the order in which a layout is loaded onto the table.
ALL_STACKS: Tuple[str, ...] = (STOCK, WASTE) + TABLEAU + FOUNDATIONS


def is_foundation(stack_id: str) -> bool:
    return FOUNDATION_MARKER in stack_id


def is_tableau(stack_id: str) -> bool:
    return stack_id in TABLEAU


def is_known_stack(stack_id: str) -> bool:
    return stack_id in ALL_STACKS
