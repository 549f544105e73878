"""Stack-indexed card table for Klondike."""

from __future__ import annotations

import copy
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .cards import Card
from .deck import DECK_SIZE
from .rules import follows_in_tableau, is_valid_foundation
from .stacks import ALL_STACKS, FOUNDATIONS, STOCK, TABLEAU, WASTE


class Table:
    """Own the placement of every card.

    ``stacks`` maps each stack id to its card ids from bottom to top, while
    each card's ``stack`` field is the reverse index. Every time a card is
    turned face up or relocated it receives a fresh exposure stamp, which
    orders cards by how recently they became available.
    """

    def __init__(self, layout: Mapping[str, Sequence[Card]]) -> None:
        self.cards: Dict[str, Card] = {}
        self.stacks: Dict[str, List[str]] = {stack_id: [] for stack_id in ALL_STACKS}
        self._exposure: Dict[str, int] = {}
        self._clock = 0

        unknown = set(layout) - set(ALL_STACKS)
        if unknown:
            raise ValueError(f"Unknown stacks in layout: {sorted(unknown)}")

        for stack_id in ALL_STACKS:
            for card in layout.get(stack_id, ()):
                if card.id in self.cards:
                    raise ValueError(f"Card {card.id} appears more than once.")
                card.stack = stack_id
                self.cards[card.id] = card
                self.stacks[stack_id].append(card.id)
                if card.face_up:
                    self._stamp(card)

    # Queries -----------------------------------------------------------

    def card(self, card_id: str) -> Card:
        try:
            return self.cards[card_id]
        except KeyError as exc:
            raise KeyError(f"Unknown card: {card_id}") from exc

    def cards_in(self, stack_id: str) -> List[Card]:
        return [self.cards[card_id] for card_id in self.stacks[stack_id]]

    def size(self, stack_id: str) -> int:
        return len(self.stacks[stack_id])

    def top(self, stack_id: str) -> Optional[Card]:
        ids = self.stacks[stack_id]
        return self.cards[ids[-1]] if ids else None

    def run_from(self, card_id: str) -> List[Card]:
        """Return ``card_id`` and every card stacked above it."""
        card = self.card(card_id)
        ids = self.stacks[card.stack]
        return [self.cards[other] for other in ids[ids.index(card_id) :]]

    def is_top_segment(self, card_ids: Sequence[str]) -> bool:
        """True if ``card_ids`` are, in order, the topmost cards of a single stack."""
        if not card_ids or any(card_id not in self.cards for card_id in card_ids):
            return False
        ids = self.stacks[self.cards[card_ids[0]].stack]
        return list(ids[len(ids) - len(card_ids) :]) == list(card_ids)

    def exposure(self, card_id: str) -> int:
        return self._exposure.get(card_id, 0)

    def all_cards(self) -> Iterable[Card]:
        return self.cards.values()

    # Mutation ----------------------------------------------------------

    def relocate(self, card_ids: Sequence[str], destination: str, *, reverse: bool = False) -> str:
        """Move the top segment ``card_ids`` onto ``destination`` and return the source stack."""
        assert self.is_top_segment(card_ids), f"{list(card_ids)} is not the top of its stack"
        source = self.cards[card_ids[0]].stack
        del self.stacks[source][len(self.stacks[source]) - len(card_ids) :]
        moved = list(reversed(card_ids)) if reverse else list(card_ids)
        self.stacks[destination].extend(moved)
        for card_id in moved:
            card = self.cards[card_id]
            card.stack = destination
            self._stamp(card)
        return source

    def set_face_up(self, card: Card, face_up: bool) -> None:
        card.face_up = face_up
        if face_up:
            self._stamp(card)

    def reveal_top(self, stack_id: str) -> Optional[Card]:
        """Turn the top card of ``stack_id`` face up; return it if it was hidden."""
        top = self.top(stack_id)
        if top is None or top.face_up:
            return None
        self.set_face_up(top, True)
        return top

    def copy(self) -> "Table":
        return copy.deepcopy(self)

    def _stamp(self, card: Card) -> None:
        self._clock += 1
        self._exposure[card.id] = self._clock

    # Invariants --------------------------------------------------------

    def check_invariants(self) -> None:
        """Assert the structural invariants; a failure is a programming defect."""
        placed = [card_id for stack_id in ALL_STACKS for card_id in self.stacks[stack_id]]
        assert len(placed) == DECK_SIZE, f"expected {DECK_SIZE} cards on the table, found {len(placed)}"
        assert len(set(placed)) == len(placed), "a card appears in more than one place"
        assert set(placed) == set(self.cards), "stack index and card index disagree"

        for stack_id in ALL_STACKS:
            for card in self.cards_in(stack_id):
                assert card.stack == stack_id, f"{card.id} thinks it is on {card.stack}, not {stack_id}"

        assert not any(card.face_up for card in self.cards_in(STOCK)), "stock cards must be face down"
        assert all(card.face_up for card in self.cards_in(WASTE)), "waste cards must be face up"

        for stack_id in FOUNDATIONS:
            assert is_valid_foundation(self.cards_in(stack_id)), f"{stack_id} is out of order"

        for stack_id in TABLEAU:
            cards = self.cards_in(stack_id)
            if not cards:
                continue
            assert cards[-1].face_up, f"top of {stack_id} must be face up"
            first_up = next(index for index, card in enumerate(cards) if card.face_up)
            shown = cards[first_up:]
            assert all(card.face_up for card in shown), f"{stack_id} hides a card above a shown one"
            for lower, upper in zip(shown, shown[1:]):
                assert follows_in_tableau(lower, upper), f"{stack_id} run is out of order"
