"""Convenience service layer for UI consumers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .cards import RANK_LABELS, Card, card_label
from .collaborators import DialogPresenter
from .game import KlondikeEngine, MoveResult
from .stacks import ALL_STACKS


@dataclass
class CardView:
    id: str
    face_up: bool
    image: str
    label: Optional[str] = None
    rank: Optional[str] = None
    suit: Optional[str] = None
    color: Optional[str] = None


@dataclass
class StackView:
    id: str
    size: int
    cards: list[CardView]


@dataclass
class TableView:
    phase: str
    theme: str
    move_in_progress: bool
    finished: bool
    moves: int
    elapsed: float
    stacks: list[StackView]


@dataclass
class ActionView:
    accepted: bool
    reason: Optional[str]
    table: TableView


class TableService:
    """Facade around KlondikeEngine for UI consumers."""

    def __init__(self, engine: Optional[KlondikeEngine] = None, dialog: Optional[DialogPresenter] = None) -> None:
        self.engine = engine or KlondikeEngine()
        self.dialog = dialog
        self.engine.add_victory_listener(self._on_victory)

    # Session lifecycle -------------------------------------------------

    def start_game(self, theme: Optional[str] = None) -> TableView:
        self.engine.start_game(theme)
        return self.get_table_view()

    def restart_game(self) -> TableView:
        self.engine.restart_game()
        return self.get_table_view()

    def change_theme(self, theme: str) -> TableView:
        self.engine.change_theme(theme)
        return self.get_table_view()

    def pause(self) -> TableView:
        self.engine.pause()
        return self.get_table_view()

    def resume(self) -> TableView:
        self.engine.resume()
        return self.get_table_view()

    # Actions -----------------------------------------------------------

    def move_card(self, card_id: str, destination: str) -> ActionView:
        return self._action_view(self.engine.move_card(card_id, destination))

    def move_run(self, card_ids: Sequence[str], destination: str) -> ActionView:
        return self._action_view(self.engine.request_move(card_ids, destination))

    def draw(self) -> ActionView:
        return self._action_view(self.engine.draw_from_stock())

    # Views -------------------------------------------------------------

    def get_table_view(self) -> TableView:
        engine = self.engine
        stacks: list[StackView] = []
        if engine.table is not None:
            for stack_id in ALL_STACKS:
                cards = [self._card_view(card) for card in engine.table.cards_in(stack_id)]
                stacks.append(StackView(id=stack_id, size=len(cards), cards=cards))
        return TableView(
            phase=engine.phase.name.lower(),
            theme=engine.theme,
            move_in_progress=engine.move_in_progress,
            finished=engine.is_victory(),
            moves=len(engine.move_log),
            elapsed=round(engine.elapsed(), 3),
            stacks=stacks,
        )

    # Helpers -----------------------------------------------------------

    def _card_view(self, card: Card) -> CardView:
        if not card.face_up:
            return CardView(id=card.id, face_up=False, image=self.engine.back_image)
        return CardView(
            id=card.id,
            face_up=True,
            image=self.engine.images.get(card.id, self.engine.back_image),
            label=card_label(card),
            rank=RANK_LABELS[card.rank],
            suit=card.suit.value,
            color=card.color.value,
        )

    def _action_view(self, result: MoveResult) -> ActionView:
        return ActionView(
            accepted=result.accepted,
            reason=result.reason.value if result.reason else None,
            table=self.get_table_view(),
        )

    def _on_victory(self, elapsed: float) -> None:
        if self.dialog is not None:
            self.dialog.show_victory(elapsed)
