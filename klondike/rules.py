"""Move legality and victory rules for Klondike."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

from .cards import Card, Rank
from .stacks import is_foundation, is_tableau


class MoveError(Enum):
    WRONG_COLOR = "WrongColor"
    WRONG_SUIT_FOR_FOUNDATION = "WrongSuitForFoundation"
    WRONG_RANK_SEQUENCE = "WrongRankSequence"
    EMPTY_STACK_REQUIRES_KING_OR_ACE = "EmptyStackRequiresKingOrAce"
    INVALID_DESTINATION = "InvalidDestination"
    RUN_NOT_MOVABLE = "RunNotMovable"
    CONCURRENT_MOVE_REJECTED = "ConcurrentMoveRejected"
    GAME_NOT_ACTIVE = "GameNotActive"
    NOTHING_TO_DRAW = "NothingToDraw"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class MoveCheck:
    """Outcome of a legality check; truthy when the move is allowed."""

    legal: bool
    reason: Optional[MoveError] = None

    def __bool__(self) -> bool:
        return self.legal


LEGAL = MoveCheck(True)


def rejected(reason: MoveError) -> MoveCheck:
    return MoveCheck(False, reason)


def follows_in_tableau(lower: Card, upper: Card) -> bool:
    """Return True if ``upper`` may sit directly on ``lower`` in a tableau."""
    return lower.color is not upper.color and upper.rank.value == lower.rank.value - 1


def follows_in_foundation(lower: Card, upper: Card) -> bool:
    return lower.suit is upper.suit and upper.rank.value == lower.rank.value + 1


def check_placement(card: Card, top: Optional[Card], destination: str) -> MoveCheck:
    """Check ``card`` against the current top of ``destination``."""
    if is_foundation(destination):
        if top is None:
            return LEGAL if card.rank is Rank.ACE else rejected(MoveError.EMPTY_STACK_REQUIRES_KING_OR_ACE)
        if top.suit is not card.suit:
            return rejected(MoveError.WRONG_SUIT_FOR_FOUNDATION)
        if card.rank.value != top.rank.value + 1:
            return rejected(MoveError.WRONG_RANK_SEQUENCE)
        return LEGAL

    if is_tableau(destination):
        if top is None:
            return LEGAL if card.rank is Rank.KING else rejected(MoveError.EMPTY_STACK_REQUIRES_KING_OR_ACE)
        if top.color is card.color:
            return rejected(MoveError.WRONG_COLOR)
        if card.rank.value != top.rank.value - 1:
            return rejected(MoveError.WRONG_RANK_SEQUENCE)
        return LEGAL

    # stock and waste only ever receive cards through drawing.
    return rejected(MoveError.INVALID_DESTINATION)


def check_run(run: Sequence[Card]) -> MoveCheck:
    """A run moves as a unit only if it is face up and already well ordered."""
    if not run:
        return rejected(MoveError.RUN_NOT_MOVABLE)
    if not all(card.face_up for card in run):
        return rejected(MoveError.RUN_NOT_MOVABLE)
    for lower, upper in zip(run, run[1:]):
        if not follows_in_tableau(lower, upper):
            return rejected(MoveError.RUN_NOT_MOVABLE)
    return LEGAL


def is_legal(
    moving_card: Card,
    source_run: Sequence[Card],
    destination: str,
    top: Optional[Card],
) -> MoveCheck:
    """Return whether ``source_run`` (starting at ``moving_card``) may land on ``destination``."""
    if not (is_foundation(destination) or is_tableau(destination)):
        return rejected(MoveError.INVALID_DESTINATION)
    if not source_run or source_run[0] is not moving_card:
        return rejected(MoveError.RUN_NOT_MOVABLE)
    run_check = check_run(source_run)
    if not run_check:
        return run_check
    if is_foundation(destination) and len(source_run) > 1:
        return rejected(MoveError.RUN_NOT_MOVABLE)
    return check_placement(moving_card, top, destination)


def is_valid_foundation(cards: Sequence[Card]) -> bool:
    """Foundations hold a single suit in ascending order starting at the ace."""
    for index, card in enumerate(cards):
        if card.rank.value != index or card.suit is not cards[0].suit:
            return False
    return True


def is_victory(cards: Iterable[Card]) -> bool:
    """Return True once every card rests on a foundation."""
    cards = list(cards)
    return bool(cards) and all(is_foundation(card.stack) for card in cards)
