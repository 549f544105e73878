"""High-level game orchestration for Klondike."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum, auto
from random import Random
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Sequence

from .autofinish import next_auto_move
from .cards import Card
from .collaborators import AnimationRunner, AssetProvider, Persistence, ThemeListingAssetProvider
from .config import EngineConfig
from .deck import build_deck, deal_layout, shuffle
from .moves import MoveRecord, apply_move, draw_from_stock, validate_move
from .rules import MoveError, is_victory
from .stacks import STOCK, is_foundation
from .table import Table

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    IDLE = auto()
    DEALING = auto()
    ACTIVE = auto()
    PAUSED = auto()
    FINISHED = auto()


@dataclass(frozen=True)
class MoveResult:
    accepted: bool
    reason: Optional[MoveError] = None


VictoryListener = Callable[[float], None]


def _once(callback: Callable[[], None]) -> Callable[[], None]:
    fired = False

    def wrapper() -> None:
        nonlocal fired
        if fired:
            logger.warning("Ignoring repeated animation completion.")
            return
        fired = True
        callback()

    return wrapper


class KlondikeEngine:
    """Own one solitaire table and serialize every change made to it.

    Moves are validated synchronously. An accepted move is handed to the
    animation runner and the table is only mutated inside the runner's
    completion continuation. The ``move_in_progress`` guard stays set from
    acceptance until the last auto-finish promotion triggered by the move
    has been applied, and any request arriving meanwhile is rejected.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        *,
        assets: Optional[AssetProvider] = None,
        animations: Optional[AnimationRunner] = None,
        persistence: Optional[Persistence] = None,
        rng: Optional[Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or EngineConfig()
        if assets is None and self.config.assets.listing:
            assets = ThemeListingAssetProvider(
                self.config.assets.listing,
                base_url=self.config.assets.base_url,
                back_image=self.config.assets.back_image,
            )
        self.assets = assets or AssetProvider()
        self.animations = animations or AnimationRunner()
        self.persistence = persistence or Persistence()
        self.rng = rng or Random(self.config.seed)
        self.clock = clock

        self.phase = GamePhase.IDLE
        self.theme = self.config.assets.theme
        self.deck: Optional[List[Card]] = None
        self.table: Optional[Table] = None
        self.images: Dict[str, str] = {}
        self.back_image = self.config.assets.back_image
        self.move_in_progress = False
        self.move_log: List[MoveRecord] = []
        self.user_session: Optional[Any] = None

        self._victory_listeners: List[VictoryListener] = []
        self._victory_announced = False
        self._started_at: Optional[float] = None
        self._paused_at: Optional[float] = None
        self._paused_total = 0.0
        self._finished_elapsed: Optional[float] = None

    # Session lifecycle -------------------------------------------------

    def start_game(self, theme: Optional[str] = None) -> bool:
        if self.move_in_progress:
            logger.info("Refusing to start a game while a move is in flight.")
            return False
        if theme is not None:
            self.theme = theme
        self._set_phase(GamePhase.DEALING)
        if self.deck is None:
            self.deck = build_deck()
        self._deal()
        self._resolve_assets()
        self._begin()
        return True

    def change_theme(self, theme: str) -> bool:
        return self.start_game(theme)

    def restart_game(self) -> bool:
        if self.deck is None:
            return self.start_game()
        if self.move_in_progress:
            logger.info("Refusing to restart while a move is in flight.")
            return False
        self._set_phase(GamePhase.DEALING)
        self._deal()
        self._begin()
        return True

    def load_table(self, table: Table) -> bool:
        """Continue play from a restored position."""
        if self.move_in_progress:
            logger.info("Refusing to load a table while a move is in flight.")
            return False
        self._set_phase(GamePhase.DEALING)
        self.deck = list(table.all_cards())
        self.table = table
        if self.config.check_invariants:
            table.check_invariants()
        self._resolve_assets()
        self._begin()
        if is_victory(table.all_cards()):
            self._finish()
        return True

    def pause(self) -> bool:
        if self.phase is not GamePhase.ACTIVE:
            return False
        self._paused_at = self.clock()
        self._set_phase(GamePhase.PAUSED)
        return True

    def resume(self) -> bool:
        if self.phase is not GamePhase.PAUSED:
            return False
        if self._paused_at is not None:
            self._paused_total += self.clock() - self._paused_at
            self._paused_at = None
        self._set_phase(GamePhase.ACTIVE)
        return True

    def attach_session(self, session: Any) -> None:
        self.user_session = session

    def detach_session(self) -> None:
        self.user_session = None

    def add_victory_listener(self, listener: VictoryListener) -> None:
        self._victory_listeners.append(listener)

    # Actions -----------------------------------------------------------

    def request_move(self, card_ids: Sequence[str], destination: str) -> MoveResult:
        card_ids = tuple(card_ids)
        blocked = self._blocked()
        if blocked is not None:
            return MoveResult(False, blocked)
        assert self.table is not None

        check = validate_move(self.table, card_ids, destination)
        if not check:
            logger.debug("Rejected move of %s onto %s: %s", list(card_ids), destination, check.reason)
            return MoveResult(False, check.reason)

        self.move_in_progress = True
        run = [self.table.card(card_id) for card_id in card_ids]
        self.animations.animate_move(run, destination, _once(lambda: self._complete_move(card_ids, destination)))
        return MoveResult(True)

    def move_card(self, card_id: str, destination: str) -> MoveResult:
        """Move ``card_id`` together with every card stacked on top of it."""
        if self.table is None or card_id not in self.table.cards:
            blocked = self._blocked()
            return MoveResult(False, blocked or MoveError.RUN_NOT_MOVABLE)
        run = [card.id for card in self.table.run_from(card_id)]
        return self.request_move(run, destination)

    def draw_from_stock(self) -> MoveResult:
        blocked = self._blocked()
        if blocked is not None:
            return MoveResult(False, blocked)
        assert self.table is not None

        record = draw_from_stock(self.table, recycle=self.config.recycle_waste)
        if record is None:
            return MoveResult(False, MoveError.NOTHING_TO_DRAW)
        self.move_in_progress = True
        self._record(record)
        self._auto_finish()
        return MoveResult(True)

    # Queries -----------------------------------------------------------

    def is_victory(self) -> bool:
        return self.table is not None and is_victory(self.table.all_cards())

    def elapsed(self) -> float:
        if self._finished_elapsed is not None:
            return self._finished_elapsed
        if self._started_at is None:
            return 0.0
        now = self._paused_at if self._paused_at is not None else self.clock()
        return now - self._started_at - self._paused_total

    # Helpers -----------------------------------------------------------

    def _blocked(self) -> Optional[MoveError]:
        if self.phase is not GamePhase.ACTIVE or self.table is None:
            return MoveError.GAME_NOT_ACTIVE
        if self.move_in_progress:
            logger.info("Rejected request: a move is already in progress.")
            return MoveError.CONCURRENT_MOVE_REJECTED
        return None

    def _deal(self) -> None:
        assert self.deck is not None
        for card in self.deck:
            card.stack = STOCK
            card.face_up = False
        self.table = Table(deal_layout(shuffle(self.deck, rng=self.rng)))
        if self.config.check_invariants:
            self.table.check_invariants()

    def _resolve_assets(self) -> None:
        assert self.deck is not None
        try:
            self.back_image = self.assets.back_image(self.theme)
        except Exception:
            logger.warning("Back image lookup failed for theme %r; using default.", self.theme, exc_info=True)
            self.back_image = self.config.assets.back_image

        self.images = {}
        missing: List[str] = []
        for card in self.deck:
            try:
                self.images[card.id] = self.assets.resolve(card, self.theme)
            except Exception as exc:
                logger.debug("Image lookup failed for %s in theme %r: %s", card.id, self.theme, exc)
                self.images[card.id] = self.config.assets.back_image
                missing.append(card.id)
        if missing and type(self.assets) is not AssetProvider:
            logger.warning("No image for %d of %d cards in theme %r; using the back image.", len(missing), len(self.deck), self.theme)

    def _begin(self) -> None:
        self.move_log = []
        self._victory_announced = False
        self._started_at = self.clock()
        self._paused_at = None
        self._paused_total = 0.0
        self._finished_elapsed = None
        self._set_phase(GamePhase.ACTIVE)

    def _complete_move(self, card_ids: Sequence[str], destination: str, excluded: FrozenSet[str] = frozenset()) -> None:
        assert self.table is not None
        record = apply_move(self.table, card_ids, destination)
        self._record(record)
        # A card pulled down from a foundation must not be promoted straight back.
        if is_foundation(record.source):
            excluded = excluded | {record.destination}
        self._auto_finish(excluded)

    def _record(self, record: MoveRecord) -> None:
        assert self.table is not None
        self.move_log.append(record)
        if self.config.check_invariants:
            self.table.check_invariants()
        if record.finished:
            self._finish()

    def _auto_finish(self, excluded: FrozenSet[str] = frozenset()) -> None:
        """Request the next promotion, or release the guard when there is none.

        ``excluded`` stacks are skipped for the whole chain started by one
        player move.
        """
        assert self.table is not None
        if self.phase is not GamePhase.ACTIVE or not self.config.auto_finish:
            self.move_in_progress = False
            return
        move = next_auto_move(self.table, excluded)
        if move is None:
            self.move_in_progress = False
            return
        logger.debug("Auto-finish promotes %s to %s", move.card_id, move.destination)
        run = [self.table.card(move.card_id)]
        self.animations.animate_move(
            run,
            move.destination,
            _once(lambda: self._complete_move((move.card_id,), move.destination, excluded)),
        )

    def _finish(self) -> None:
        if self._victory_announced:
            return
        self._victory_announced = True
        self._finished_elapsed = self.elapsed()
        self._set_phase(GamePhase.FINISHED)
        elapsed = self._finished_elapsed
        logger.info("Game won in %.1f seconds after %d moves.", elapsed, len(self.move_log))

        if self.user_session is not None:
            try:
                self.persistence.record_completion(elapsed)
            except Exception:
                logger.exception("Could not record completion for %r.", self.user_session)

        for listener in list(self._victory_listeners):
            try:
                listener(elapsed)
            except Exception:
                logger.exception("Victory listener %r failed.", listener)

    def _set_phase(self, phase: GamePhase) -> None:
        if phase is not self.phase:
            logger.info("Phase %s -> %s", self.phase.name.lower(), phase.name.lower())
        self.phase = phase
