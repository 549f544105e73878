"""Interfaces for the services the engine relies on but does not own."""

from __future__ import annotations

from collections import deque
from typing import Callable, Deque, List, Mapping, Optional, Sequence, Tuple

from .cards import RANK_LABELS, Card

DEFAULT_BACK_IMAGE = "default/Card_back.svg"


class AssetProvider:
    """Base class mapping cards to image references for a theme."""

    def resolve(self, card: Card, theme: str) -> str:
        """Return the face image reference for ``card``; raise ``LookupError`` if none."""
        raise LookupError(f"No image for {card.id} in theme {theme!r}.")

    def back_image(self, theme: str) -> str:
        return DEFAULT_BACK_IMAGE


class ThemeListingAssetProvider(AssetProvider):
    """Resolve images from per-theme file listings, as an object store would return them."""

    def __init__(self, listing: Mapping[str, Sequence[str]], *, base_url: str = "", back_image: str = DEFAULT_BACK_IMAGE) -> None:
        self.listing = {theme: list(names) for theme, names in listing.items()}
        self.base_url = base_url
        self._back_image = back_image

    def resolve(self, card: Card, theme: str) -> str:
        names = self.listing.get(theme)
        if not names:
            raise LookupError(f"Theme {theme!r} has no images.")
        label = RANK_LABELS[card.rank]
        for name in names:
            if label in name and card.suit.value in name:
                return f"{self.base_url}{theme}/{name}"
        raise LookupError(f"No image for {card.id} in theme {theme!r}.")

    def back_image(self, theme: str) -> str:
        return f"{self.base_url}{self._back_image}"


class AnimationRunner:
    """Plays the visual transition of a move; the default one is instantaneous."""

    def animate_move(self, run: Sequence[Card], destination: str, on_complete: Callable[[], None]) -> None:
        on_complete()


class DeferredAnimationRunner(AnimationRunner):
    """Queue animations until the host loop reports them finished."""

    def __init__(self) -> None:
        self.pending: Deque[Tuple[Tuple[str, ...], str, Callable[[], None]]] = deque()

    def animate_move(self, run: Sequence[Card], destination: str, on_complete: Callable[[], None]) -> None:
        self.pending.append((tuple(card.id for card in run), destination, on_complete))

    def complete_next(self) -> bool:
        if not self.pending:
            return False
        _, _, on_complete = self.pending.popleft()
        on_complete()
        return True

    def complete_all(self) -> int:
        completed = 0
        while self.complete_next():
            completed += 1
        return completed


class Persistence:
    """Stores results for the signed-in user."""

    def record_completion(self, elapsed: float) -> None:
        return None


class InMemoryPersistence(Persistence):
    def __init__(self) -> None:
        self.completions: List[float] = []

    def record_completion(self, elapsed: float) -> None:
        self.completions.append(elapsed)

    @property
    def best_time(self) -> Optional[float]:
        return min(self.completions) if self.completions else None


class DialogPresenter:
    """Shows the victory prompt; wired up by the application, not the engine."""

    def show_victory(self, elapsed: float) -> None:
        return None
