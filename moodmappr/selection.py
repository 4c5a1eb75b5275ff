"""Shared selection state and the rules that derive it from user input.

Two independent inputs feed one state object:

* a brush on the histogram decides which genres are *active*;
* a click on a pie wedge pins (or un-pins) a single genre.

Views never read the inputs directly. They ask :func:`is_active` for each
genre they draw, so the pie and the dendrogram always agree on what is live.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Iterable, List, Optional, Tuple

from .model import RecordStore
from .log import get_logger

logger = get_logger(__name__)

Brush = Optional[Tuple[float, float]]


@dataclass
class SelectionState:
    """Mutable selection shared by the filter engine and the dependent views.

    Attributes:
        genres: every genre known to the loaded dataset
        active_genres: genres passing the current brush (all when cleared)
        selected_genre: genre pinned by the last click, or None
    """
    genres: FrozenSet[str]
    # None means "every genre"; __post_init__ always replaces it with a set
    active_genres: FrozenSet[str] = field(default=None)  # type: ignore[assignment]
    selected_genre: Optional[str] = None

    def __post_init__(self):
        self.genres = frozenset(self.genres)
        if self.active_genres is None:
            self.active_genres = self.genres
        else:
            self.active_genres = frozenset(self.active_genres) & self.genres
        if self.selected_genre is not None and self.selected_genre not in self.genres:
            self.selected_genre = None

    @classmethod
    def for_store(cls, store: RecordStore) -> "SelectionState":
        return cls(store.genre_set)


# ---------------- Rules ----------------

def apply_brush(store: RecordStore, brush: Brush) -> FrozenSet[str]:
    """Genres present among records whose hours fall inside the brush.

    ``None`` means the brush was cleared and every genre is active again.
    Both ends are inclusive; an interval that catches no record yields an
    empty set.
    """
    if brush is None:
        return store.genre_set
    lo, hi = sorted(brush)
    return frozenset(r.fav_genre for r in store.records if lo <= r.hours_per_day <= hi)


def toggle_genre(selected: Optional[str], clicked: str,
                 genres: Optional[Iterable[str]] = None) -> Optional[str]:
    """Pin ``clicked``, or un-pin it when it is already the pinned genre.

    If ``genres`` is given and does not contain ``clicked`` the click is
    ignored and ``selected`` comes back unchanged.
    """
    if genres is not None and clicked not in genres:
        return selected
    if clicked == selected:
        return None
    return clicked


def is_active(state: SelectionState, genre: str) -> bool:
    """Visibility predicate shared by every genre-bound element."""
    pinned_ok = state.selected_genre is None or state.selected_genre == genre
    return pinned_ok and genre in state.active_genres


# ---------------- Event wiring ----------------
class FilterEngine:
    """Applies brush and click events to a SelectionState and notifies views.

    Handlers are plain synchronous calls; each one recomputes the affected
    field from scratch and runs every subscriber before returning.
    """

    def __init__(self, store: RecordStore, state: Optional[SelectionState] = None):
        self.store = store
        self.state = state if state is not None else SelectionState.for_store(store)
        self._subscribers: List[Callable[[SelectionState], None]] = []

    def subscribe(self, callback: Callable[[SelectionState], None]) -> None:
        self._subscribers.append(callback)

    def on_brush(self, brush: Brush) -> None:
        self.state.active_genres = apply_brush(self.store, brush)
        logger.debug("Brush %s -> %d active genre(s)", brush, len(self.state.active_genres))
        self._notify()

    def on_slice_click(self, genre: str) -> None:
        if genre not in self.state.genres:
            logger.debug("Ignoring click on unknown genre %r", genre)
            return
        self.state.selected_genre = toggle_genre(self.state.selected_genre, genre)
        logger.debug("Pinned genre: %s", self.state.selected_genre)
        self._notify()

    def reset(self) -> None:
        """Clear both the brush and the pin."""
        self.state.active_genres = apply_brush(self.store, None)
        self.state.selected_genre = None
        self._notify()

    def _notify(self) -> None:
        for callback in self._subscribers:
            callback(self.state)
